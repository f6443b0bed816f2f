"""Configuration models for the documentation assistant."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_DOCS_PATH = Path(__file__).resolve().parent / "docs" / "user_guide.md"

_TRUTHY = {"1", "true", "yes", "on"}


class SearchConfig(BaseModel):
    """Configures keyword relevance ranking."""

    default_limit: int = Field(default=5, ge=1)
    title_weight: int = Field(default=15, ge=1)
    body_phrase_bonus: float = Field(default=50.0, ge=0.0)
    title_phrase_bonus: float = Field(default=100.0, ge=0.0)
    beginner_boost: float = Field(default=1.5, ge=1.0)


class AssistantConfig(BaseModel):
    """Configures the language model, corpus and tracing."""

    product_name: str = "Langfuse"
    llm_api_key: str | None = None
    llm_model: str | None = None
    llm_base_url: str | None = None
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    docs_path: Path = DEFAULT_DOCS_PATH
    tool_search_limit: int = Field(default=3, ge=1, le=10)
    snippet_chars: int = Field(default=500, ge=50)
    environment: str = "default"
    tracing_enabled: bool = True
    log_level: str = "INFO"

    @property
    def llm_configured(self) -> bool:
        return bool(self.llm_api_key and self.llm_model)

    @classmethod
    def from_env(cls) -> "AssistantConfig":
        """Build config from `ASSISTANT_*` environment variables."""
        values: dict[str, object] = {
            "llm_api_key": os.getenv("ASSISTANT_LLM_API_KEY") or None,
            "llm_model": os.getenv("ASSISTANT_LLM_MODEL") or None,
            "llm_base_url": os.getenv("ASSISTANT_LLM_BASE_URL") or None,
            "environment": os.getenv("ASSISTANT_ENVIRONMENT", "default"),
            "log_level": os.getenv("ASSISTANT_LOG_LEVEL", "INFO").upper(),
        }
        docs_path = os.getenv("ASSISTANT_DOCS_PATH")
        if docs_path:
            values["docs_path"] = Path(docs_path)
        tracing = os.getenv("ASSISTANT_TRACING_ENABLED")
        if tracing is not None:
            values["tracing_enabled"] = tracing.strip().lower() in _TRUTHY
        return cls.model_validate(values)
