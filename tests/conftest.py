from __future__ import annotations

import asyncio
from typing import Any

import pytest

from docs_assistant.agent.registry import ToolRegistry
from docs_assistant.agent.tools import register_documentation_tool
from docs_assistant.docs.search import DocumentationSearch, InMemoryCorpusSource

SAMPLE_GUIDE = """# Product guide

Intro text that is not part of any section.

## Getting Started

Navigate to Settings to create a project.

## Tracing

Traces capture every request. Open the Traces table to inspect traces.

### Filtering traces

Filter traces by user or tag.

## Prompt Management

Create and version prompts.
"""


class ScriptedChatModel:
    """Chat model double that replays canned responses and records calls."""

    def __init__(self, responses: list[Any]) -> None:
        self._responses = list(responses)
        self.invocations: list[tuple[bool, list[Any]]] = []
        self.bound_tools: list[list[Any]] = []

    def bind_tools(self, tools: list[Any]) -> "_BoundScriptedModel":
        self.bound_tools.append(list(tools))
        return _BoundScriptedModel(self)

    async def ainvoke(self, messages: list[Any]) -> Any:
        return self._next(False, messages)

    def _next(self, bound: bool, messages: list[Any]) -> Any:
        self.invocations.append((bound, list(messages)))
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class _BoundScriptedModel:
    def __init__(self, parent: ScriptedChatModel) -> None:
        self._parent = parent

    async def ainvoke(self, messages: list[Any]) -> Any:
        return self._parent._next(True, messages)


@pytest.fixture
def scripted_llm() -> type[ScriptedChatModel]:
    return ScriptedChatModel


@pytest.fixture
def guide_search() -> DocumentationSearch:
    return DocumentationSearch(InMemoryCorpusSource(SAMPLE_GUIDE))


@pytest.fixture
def docs_registry(guide_search: DocumentationSearch) -> ToolRegistry:
    registry = ToolRegistry()
    register_documentation_tool(registry, guide_search)
    return registry


@pytest.fixture
def run():
    return asyncio.run
