"""FastAPI entrypoint for conversation, search and trace endpoints."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, Header, HTTPException
from pydantic import BaseModel, Field

from docs_assistant.agent.llm import create_chat_model
from docs_assistant.agent.orchestrator import AssistantOrchestrator
from docs_assistant.agent.registry import ToolRegistry
from docs_assistant.agent.tools import register_documentation_tool
from docs_assistant.api.conversations import ConversationStore
from docs_assistant.config import AssistantConfig, SearchConfig
from docs_assistant.docs.search import DocumentationSearch, FileCorpusSource
from docs_assistant.errors import ConfigurationError, CorpusUnavailable, ModelCallError
from docs_assistant.obs.logging import setup_logging
from docs_assistant.obs.tracing import TraceStore, TracerProvider

logger = logging.getLogger(__name__)


def _create_llm(config: AssistantConfig) -> Any:
    if not config.llm_configured:
        logger.warning("Assistant LLM not configured; message endpoints will fail")
        return None
    return create_chat_model(config)


class SendMessageRequest(BaseModel):
    content: str = Field(min_length=1)


class DocsSearchRequest(BaseModel):
    query: str = Field(min_length=1)
    limit: int = Field(default=5, ge=1, le=20)


_config = AssistantConfig.from_env()
setup_logging(_config.log_level)

app = FastAPI(title="Documentation Assistant", version="0.1.0")

_search = DocumentationSearch(FileCorpusSource(_config.docs_path), SearchConfig())
_registry = ToolRegistry()
register_documentation_tool(
    _registry,
    _search,
    limit=_config.tool_search_limit,
    snippet_chars=_config.snippet_chars,
)

_trace_store = TraceStore()
_tracer = TracerProvider(lambda: _trace_store if _config.tracing_enabled else None)
_conversations = ConversationStore()
_orchestrator = AssistantOrchestrator(
    llm=_create_llm(_config),
    tool_registry=_registry,
    config=_config,
    tracer=_tracer,
)


@app.get("/health")
def health() -> dict[str, Any]:
    return {
        "status": "ok",
        "llm_configured": _orchestrator.llm is not None,
        "trace_count": len(_trace_store.list_recent(limit=1000)),
    }


@app.post("/conversations")
def create_conversation(x_user_id: str = Header(default="anonymous")) -> dict[str, Any]:
    conversation = _conversations.create(x_user_id)
    return {"id": conversation.id, "started_at": conversation.started_at.isoformat()}


@app.get("/conversations")
def list_conversations(x_user_id: str = Header(default="anonymous")) -> dict[str, Any]:
    return {
        "items": [
            {
                "id": conversation.id,
                "started_at": conversation.started_at.isoformat(),
                "message_count": len(conversation.messages),
            }
            for conversation in _conversations.list_for_user(x_user_id)
        ]
    }


@app.get("/conversations/{conversation_id}")
def get_conversation(
    conversation_id: str, x_user_id: str = Header(default="anonymous")
) -> dict[str, Any]:
    try:
        conversation = _conversations.get(conversation_id, x_user_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Conversation not found") from exc
    return {
        "id": conversation.id,
        "started_at": conversation.started_at.isoformat(),
        "messages": [message.to_dict() for message in conversation.messages],
    }


@app.post("/conversations/{conversation_id}/messages")
async def send_message(
    conversation_id: str,
    request: SendMessageRequest,
    x_user_id: str = Header(default="anonymous"),
) -> dict[str, Any]:
    try:
        conversation = _conversations.get(conversation_id, x_user_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Conversation not found") from exc

    # The user turn stays stored even if the assistant fails below.
    user_message = _conversations.append(
        conversation, sender="user", content=request.content
    )
    try:
        reply = await _orchestrator.run(
            conversation.history(),
            user_id=x_user_id,
            conversation_id=conversation.id,
        )
    except ConfigurationError as exc:
        raise HTTPException(status_code=412, detail=str(exc)) from exc
    except ModelCallError as exc:
        raise HTTPException(
            status_code=502, detail="Failed to get response from LLM"
        ) from exc

    assistant_message = _conversations.append(
        conversation,
        sender="assistant",
        content=reply.content,
        tool_calls=reply.tool_calls,
    )
    return {
        "user_message": user_message.to_dict(),
        "assistant_message": assistant_message.to_dict(),
    }


@app.post("/docs/search")
async def docs_search(request: DocsSearchRequest) -> dict[str, Any]:
    try:
        results = await _search.search(request.query, request.limit)
    except CorpusUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return {"items": [asdict(result) for result in results]}


@app.get("/traces")
def traces(limit: int = 20) -> dict[str, Any]:
    records = [asdict(record) for record in _trace_store.list_recent(limit=limit)]
    return {"items": records}


@app.get("/traces/{trace_id}")
def trace_detail(trace_id: str) -> dict[str, Any]:
    try:
        record = _trace_store.get(trace_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return asdict(record)


@app.get("/metrics")
def metrics() -> dict[str, Any]:
    return _trace_store.summary()
