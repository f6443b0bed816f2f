"""Two-pass tool-calling orchestration: ask, maybe search the docs, ask again."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass
from typing import Any, Union

from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)

from docs_assistant.agent.registry import ToolRegistry
from docs_assistant.config import AssistantConfig
from docs_assistant.errors import AssistantError, ConfigurationError, ModelCallError
from docs_assistant.obs.tracing import Timer, TraceEvent, TracerProvider
from docs_assistant.types import AssistantReply, ConversationTurn, ToolCall, ToolTrace

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = """
You are the {product} assistant, built into the {product} web application.

Rules:
1) Always assume questions are about {product} unless the user states otherwise.
2) Use the `search_documentation` tool to ground answers in the official documentation.
3) If the documentation does not cover the question, say so instead of guessing.
4) Keep answers concise and mention which documentation sections you used.
""".strip()


def build_system_prompt(product_name: str) -> str:
    return _SYSTEM_PROMPT.format(product=product_name)


@dataclass(frozen=True, slots=True)
class AwaitingFirstCompletion:
    messages: tuple[BaseMessage, ...]


@dataclass(frozen=True, slots=True)
class ToolRound:
    messages: tuple[BaseMessage, ...]
    initial_content: str
    tool_calls: tuple[ToolCall, ...]

    def __post_init__(self) -> None:
        if not self.tool_calls:
            raise ValueError("ToolRound requires at least one tool call")


@dataclass(frozen=True, slots=True)
class AwaitingFinalCompletion:
    messages: tuple[BaseMessage, ...]
    tool_calls: tuple[ToolCall, ...]


@dataclass(frozen=True, slots=True)
class Done:
    reply: AssistantReply


@dataclass(frozen=True, slots=True)
class Failed:
    error: AssistantError


RunState = Union[AwaitingFirstCompletion, ToolRound, AwaitingFinalCompletion, Done, Failed]


class AssistantOrchestrator:
    """Drives one assistant turn over a LangChain chat model.

    The first completion advertises the documentation tool. If the model asks
    for it, every call runs once and a second completion is requested without
    any tools, so a turn contains at most one tool round.
    """

    def __init__(
        self,
        *,
        llm: Any | None,
        tool_registry: ToolRegistry,
        config: AssistantConfig | None = None,
        tracer: TracerProvider | None = None,
    ) -> None:
        self.llm = llm
        self.tool_registry = tool_registry
        self.config = config or AssistantConfig()
        self.tracer = tracer or TracerProvider.disabled()
        self.system_prompt = build_system_prompt(self.config.product_name)

    async def run(
        self,
        history: Sequence[ConversationTurn],
        *,
        user_id: str | None = None,
        conversation_id: str | None = None,
    ) -> AssistantReply:
        """Answer the last user turn in `history`.

        Raises:
            ConfigurationError: no language model is configured.
            ModelCallError: a completion failed or came back malformed.
        """
        if self.llm is None:
            raise ConfigurationError(
                "Assistant LLM is not configured. Please set ASSISTANT_LLM_API_KEY "
                "and ASSISTANT_LLM_MODEL."
            )

        observed_tools: list[ToolTrace] = []
        state: RunState = AwaitingFirstCompletion(messages=self._build_messages(history))
        with Timer() as timer:
            while not isinstance(state, (Done, Failed)):
                state = await self._step(state, observed_tools)

        metadata: dict[str, Any] = {
            "model": self.config.llm_model,
            "latency_ms": timer.elapsed_ms,
            "tool_traces": [asdict(trace) for trace in observed_tools],
        }
        if isinstance(state, Failed):
            logger.error("Assistant run failed: %s", state.error, exc_info=state.error)
            self._emit_trace(
                "assistant-error",
                {
                    **metadata,
                    "error_type": type(state.error).__name__,
                    "error": str(state.error),
                },
                user_id=user_id,
                conversation_id=conversation_id,
            )
            raise state.error

        self._emit_trace(
            "assistant-reply",
            {
                **metadata,
                "tool_calls": [call.name for call in state.reply.tool_calls or ()],
            },
            user_id=user_id,
            conversation_id=conversation_id,
        )
        return state.reply

    async def _step(self, state: RunState, observed_tools: list[ToolTrace]) -> RunState:
        try:
            if isinstance(state, AwaitingFirstCompletion):
                return await self._first_completion(state)
            if isinstance(state, ToolRound):
                return await self._tool_round(state, observed_tools)
            if isinstance(state, AwaitingFinalCompletion):
                return await self._final_completion(state)
        except AssistantError as exc:
            return Failed(error=exc)
        raise TypeError(f"No transition from state {type(state).__name__}")

    async def _first_completion(self, state: AwaitingFirstCompletion) -> RunState:
        try:
            model = self.llm.bind_tools(self.tool_registry.as_langchain_tools())
        except Exception as exc:
            raise ModelCallError("Language model does not support tool calling") from exc

        response = await _invoke_model(model, state.messages)
        content = _response_text(response)
        tool_calls = _parse_tool_calls(response)
        if not tool_calls:
            return Done(reply=AssistantReply(content=content))

        logger.info(
            "Model requested %d tool call(s): %s",
            len(tool_calls),
            ", ".join(call.name for call in tool_calls),
        )
        return ToolRound(
            messages=state.messages,
            initial_content=content,
            tool_calls=tool_calls,
        )

    async def _tool_round(
        self, state: ToolRound, observed_tools: list[ToolTrace]
    ) -> RunState:
        try:
            results = await self.tool_registry.execute_calls(
                state.tool_calls, observer=observed_tools.append
            )
        except Exception as exc:
            raise AssistantError("Tool round could not be executed") from exc

        follow_up: list[BaseMessage] = list(state.messages)
        follow_up.append(
            AIMessage(
                content=state.initial_content,
                tool_calls=[call.as_message_payload() for call in state.tool_calls],
            )
        )
        follow_up.extend(
            ToolMessage(content=result.content, tool_call_id=result.tool_call_id)
            for result in results
        )
        return AwaitingFinalCompletion(messages=tuple(follow_up), tool_calls=state.tool_calls)

    async def _final_completion(self, state: AwaitingFinalCompletion) -> RunState:
        # No tools are bound here, which caps every turn at one tool round.
        response = await _invoke_model(self.llm, state.messages)
        return Done(
            reply=AssistantReply(
                content=_response_text(response),
                tool_calls=state.tool_calls,
            )
        )

    def _build_messages(
        self, history: Sequence[ConversationTurn]
    ) -> tuple[BaseMessage, ...]:
        messages: list[BaseMessage] = [SystemMessage(content=self.system_prompt)]
        for turn in history:
            if turn.role == "user":
                messages.append(HumanMessage(content=turn.content))
            else:
                messages.append(AIMessage(content=turn.content))
        return tuple(messages)

    def _emit_trace(
        self,
        name: str,
        metadata: dict[str, Any],
        *,
        user_id: str | None,
        conversation_id: str | None,
    ) -> None:
        sink = self.tracer.get()
        if sink is None:
            return
        event = TraceEvent.create(
            environment=self.config.environment,
            name=name,
            target_id=conversation_id,
            user_id=user_id,
            metadata=metadata,
        )
        try:
            sink.record(event)
        except Exception:
            logger.exception("Failed to record trace %s", event.trace_id)


async def _invoke_model(model: Any, messages: Sequence[BaseMessage]) -> Any:
    try:
        return await model.ainvoke(list(messages))
    except Exception as exc:
        raise ModelCallError("Failed to get response from LLM") from exc


def _response_text(response: Any) -> str:
    if isinstance(response, str):
        return response
    if not hasattr(response, "content"):
        logger.error("Unexpected LLM response format: %r", response)
        raise ModelCallError("Unexpected response format from LLM")
    return flatten_content(response.content)


def flatten_content(content: Any) -> str:
    """Join the text segments of a message content.

    Non-text segments (tool invocations, images) are dropped; tool requests
    travel as structured tool calls instead.
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for segment in content:
            if isinstance(segment, str):
                parts.append(segment)
            elif isinstance(segment, Mapping) and segment.get("type") == "text":
                parts.append(str(segment.get("text", "")))
        return "\n".join(parts)
    raise ModelCallError(f"Unsupported message content type: {type(content).__name__}")


def _parse_tool_calls(response: Any) -> tuple[ToolCall, ...]:
    calls: list[ToolCall] = []
    for raw in getattr(response, "tool_calls", None) or []:
        if not isinstance(raw, Mapping):
            raise ModelCallError(f"Malformed tool call: {raw!r}")
        call_id = raw.get("id")
        name = raw.get("name")
        args = raw.get("args")
        if args is None:
            args = raw.get("arguments", {})
        if not isinstance(call_id, str) or not call_id or not isinstance(name, str):
            raise ModelCallError(f"Malformed tool call: {raw!r}")
        if not isinstance(args, Mapping):
            raise ModelCallError(f"Malformed tool call arguments: {raw!r}")
        calls.append(ToolCall(id=call_id, name=name, arguments=dict(args)))

    # Calls whose arguments failed to parse still get a result; the tool sees no arguments.
    for raw in getattr(response, "invalid_tool_calls", None) or []:
        if not isinstance(raw, Mapping):
            raise ModelCallError(f"Malformed tool call: {raw!r}")
        call_id = raw.get("id")
        if not isinstance(call_id, str) or not call_id:
            raise ModelCallError(f"Malformed tool call without id: {raw!r}")
        logger.warning(
            "Model sent unparseable arguments for %r (id=%s): %s",
            raw.get("name"),
            call_id,
            raw.get("error"),
        )
        calls.append(ToolCall(id=call_id, name=str(raw.get("name") or ""), arguments={}))
    return tuple(calls)
