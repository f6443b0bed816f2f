"""Documentation search tool exposed to the language model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

from docs_assistant.agent.registry import ToolRegistry, ToolSpec
from docs_assistant.docs.search import DocumentationSearch
from docs_assistant.types import SearchResult

SEARCH_TOOL_NAME = "search_documentation"

SEARCH_TOOL_DESCRIPTION = (
    "Search the product documentation for relevant information. Use this "
    "whenever the user asks how to do something, about features, "
    "configuration or troubleshooting."
)


class SearchDocumentationInput(BaseModel):
    query: str = Field(
        description="The search query, e.g. 'how to create a prompt' or 'tracing setup'."
    )

    @model_validator(mode="before")
    @classmethod
    def _coerce_query(cls, data: Any) -> Any:
        # Models occasionally omit the query or send a non-string one.
        if not isinstance(data, dict):
            return {"query": ""}
        if not isinstance(data.get("query"), str):
            return {**data, "query": ""}
        return data


def format_search_results(
    query: str,
    results: list[SearchResult],
    *,
    snippet_chars: int = 500,
) -> str:
    if not results:
        return f"No documentation found for query: {query}"

    lines = [f"Found {len(results)} relevant documentation section(s):", ""]
    for idx, result in enumerate(results, start=1):
        lines.append(f"{idx}. **{result.section}**")
        lines.append(_truncate(result.content.strip(), snippet_chars))
        lines.append("")
    return "\n".join(lines).rstrip()


def register_documentation_tool(
    registry: ToolRegistry,
    search: DocumentationSearch,
    *,
    limit: int = 3,
    snippet_chars: int = 500,
) -> None:
    """Register `search_documentation`, the assistant's only tool."""

    async def _search(input_data: SearchDocumentationInput) -> str:
        results = await search.search(input_data.query, limit)
        return format_search_results(
            input_data.query, results, snippet_chars=snippet_chars
        )

    registry.register(
        ToolSpec(
            name=SEARCH_TOOL_NAME,
            description=SEARCH_TOOL_DESCRIPTION,
            args_schema=SearchDocumentationInput,
            handler=_search,
            tags=["retrieval", "docs"],
        )
    )


def _truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."
