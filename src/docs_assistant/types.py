"""Shared domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal


@dataclass(frozen=True, slots=True)
class DocumentSection:
    """A titled block of the documentation corpus."""

    title: str
    body: str


@dataclass(frozen=True, slots=True)
class SearchResult:
    """A ranked section; relevance is only comparable within one search."""

    section: str
    content: str
    relevance: float


@dataclass(frozen=True, slots=True)
class ToolCall:
    """A model-issued request to run a tool."""

    id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)

    def as_message_payload(self) -> dict[str, Any]:
        """Shape expected by LangChain `AIMessage.tool_calls`."""
        return {"id": self.id, "name": self.name, "args": dict(self.arguments)}


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Outcome of one tool call, correlated by id."""

    tool_call_id: str
    content: str


@dataclass(frozen=True, slots=True)
class ConversationTurn:
    role: Literal["user", "assistant"]
    content: str


@dataclass(frozen=True, slots=True)
class AssistantReply:
    """Final answer of one orchestration run.

    `tool_calls` is None when no tool round happened; it is never empty.
    """

    content: str
    tool_calls: tuple[ToolCall, ...] | None = None

    def __post_init__(self) -> None:
        if self.tool_calls is not None and not self.tool_calls:
            raise ValueError("tool_calls must be None or non-empty")


@dataclass(slots=True)
class ToolTrace:
    """Trace record for an executed tool call."""

    name: str
    input_payload: dict[str, Any]
    output_preview: str
    latency_ms: float
