"""Documentation assistant package."""

from .config import AssistantConfig, SearchConfig

__all__ = ["AssistantConfig", "SearchConfig"]
