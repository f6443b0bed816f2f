"""In-memory conversation store scoped per user."""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

from docs_assistant.types import ConversationTurn, ToolCall


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class StoredMessage:
    id: str
    sender: Literal["user", "assistant"]
    content: str
    timestamp: datetime
    tool_calls: tuple[ToolCall, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "sender": self.sender,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.tool_calls is not None:
            payload["metadata"] = {
                "tool_calls": [
                    {"id": call.id, "name": call.name, "arguments": call.arguments}
                    for call in self.tool_calls
                ]
            }
        return payload


@dataclass(slots=True)
class Conversation:
    id: str
    user_id: str
    started_at: datetime
    messages: list[StoredMessage] = field(default_factory=list)

    def history(self) -> list[ConversationTurn]:
        return [
            ConversationTurn(role=message.sender, content=message.content)
            for message in self.messages
        ]


class ConversationStore:
    """Keeps conversations in process memory."""

    def __init__(self) -> None:
        self._conversations: dict[str, Conversation] = {}
        self._lock = threading.Lock()

    def create(self, user_id: str) -> Conversation:
        conversation = Conversation(id=str(uuid.uuid4()), user_id=user_id, started_at=_now())
        with self._lock:
            self._conversations[conversation.id] = conversation
        return conversation

    def get(self, conversation_id: str, user_id: str) -> Conversation:
        conversation = self._conversations.get(conversation_id)
        if conversation is None or conversation.user_id != user_id:
            raise KeyError(f"Conversation not found: {conversation_id}")
        return conversation

    def list_for_user(self, user_id: str) -> list[Conversation]:
        owned = [c for c in self._conversations.values() if c.user_id == user_id]
        return sorted(owned, key=lambda c: c.started_at, reverse=True)

    def append(
        self,
        conversation: Conversation,
        *,
        sender: Literal["user", "assistant"],
        content: str,
        tool_calls: tuple[ToolCall, ...] | None = None,
    ) -> StoredMessage:
        message = StoredMessage(
            id=str(uuid.uuid4()),
            sender=sender,
            content=content,
            timestamp=_now(),
            tool_calls=tool_calls,
        )
        with self._lock:
            conversation.messages.append(message)
        return message
