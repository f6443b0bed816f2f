"""Chat model construction from assistant configuration."""

from __future__ import annotations

from typing import Any

from docs_assistant.config import AssistantConfig
from docs_assistant.errors import ConfigurationError


def create_chat_model(config: AssistantConfig) -> Any:
    if not config.llm_api_key:
        raise ConfigurationError(
            "Assistant LLM is not configured. Please set ASSISTANT_LLM_API_KEY."
        )
    if not config.llm_model:
        raise ConfigurationError(
            "Assistant LLM model is not configured. Please set ASSISTANT_LLM_MODEL."
        )

    from langchain_openai import ChatOpenAI

    return ChatOpenAI(
        model=config.llm_model,
        api_key=config.llm_api_key,
        base_url=config.llm_base_url,
        temperature=config.temperature,
    )
