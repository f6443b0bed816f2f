"""Tool registry built on Pydantic v2 models."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from time import perf_counter
from typing import Any

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, ConfigDict, Field

from docs_assistant.types import ToolCall, ToolResult, ToolTrace

logger = logging.getLogger(__name__)


class ToolSpec(BaseModel):
    """Declarative tool specification for registration and validation."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    description: str
    args_schema: type[BaseModel]
    handler: Callable[[BaseModel], Awaitable[str]]
    tags: list[str] = Field(default_factory=list)

    async def invoke(self, payload: dict[str, Any]) -> str:
        data = self.args_schema.model_validate(payload)
        return await self.handler(data)


class ToolRegistry:
    """Stores tool specs, runs model-issued tool calls, exports LangChain tools."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolSpec] = {}
        self._observer: Callable[[ToolTrace], None] | None = None

    def register(self, spec: ToolSpec) -> None:
        if spec.name in self._tools:
            raise ValueError(f"Tool already registered: {spec.name}")
        self._tools[spec.name] = spec

    def set_observer(self, observer: Callable[[ToolTrace], None] | None) -> None:
        """Set an optional callback invoked after each tool execution."""
        self._observer = observer

    async def execute(self, name: str, payload: dict[str, Any]) -> str:
        spec = self._tools.get(name)
        if spec is None:
            raise KeyError(f"Unknown tool: {name}")
        return await self._execute_spec(spec, payload)

    async def execute_calls(
        self,
        calls: Sequence[ToolCall],
        *,
        observer: Callable[[ToolTrace], None] | None = None,
    ) -> list[ToolResult]:
        """Run a batch of tool calls concurrently.

        Always returns one result per call, in input order. Failures turn into
        error text for that call only. `observer` overrides the registry-wide
        observer for this batch.
        """
        if not calls:
            return []
        batch_observer = observer or self._observer
        return list(
            await asyncio.gather(
                *(self._execute_call(call, batch_observer) for call in calls)
            )
        )

    def as_langchain_tools(self) -> list[StructuredTool]:
        tools: list[StructuredTool] = []
        for spec in self._tools.values():
            tools.append(
                StructuredTool.from_function(
                    name=spec.name,
                    description=spec.description,
                    args_schema=spec.args_schema,
                    coroutine=self._build_coroutine(spec),
                )
            )
        return tools

    def specs(self) -> list[ToolSpec]:
        return list(self._tools.values())

    async def _execute_call(
        self,
        call: ToolCall,
        observer: Callable[[ToolTrace], None] | None,
    ) -> ToolResult:
        spec = self._tools.get(call.name)
        if spec is None:
            logger.warning("Model requested unknown tool %r (id=%s)", call.name, call.id)
            return ToolResult(tool_call_id=call.id, content=f"Unknown tool: {call.name}")
        try:
            content = await self._execute_spec(spec, dict(call.arguments), observer)
        except Exception as exc:
            logger.exception("Tool %s failed (id=%s)", call.name, call.id)
            content = f"Error executing {call.name}: {exc}"
        return ToolResult(tool_call_id=call.id, content=content)

    def _build_coroutine(self, spec: ToolSpec) -> Callable[..., Awaitable[str]]:
        async def _callable(**kwargs: Any) -> str:
            return await self._execute_spec(spec, kwargs)

        return _callable

    async def _execute_spec(
        self,
        spec: ToolSpec,
        payload: dict[str, Any],
        observer: Callable[[ToolTrace], None] | None = None,
    ) -> str:
        start = perf_counter()
        output = await spec.invoke(payload)
        latency_ms = (perf_counter() - start) * 1000.0

        observer = observer or self._observer
        if observer is not None:
            observer(
                ToolTrace(
                    name=spec.name,
                    input_payload=payload,
                    output_preview=output[:320],
                    latency_ms=latency_ms,
                )
            )
        return output
