"""Typed failures raised by the assistant core."""

from __future__ import annotations


class AssistantError(Exception):
    """Base class for all assistant failures."""


class ConfigurationError(AssistantError):
    """The language model is not configured (missing credential or model)."""


class ModelCallError(AssistantError):
    """The completion service failed or returned an unusable response."""


class ToolExecutionError(AssistantError):
    """A single tool call failed; converted into error text, never escalated."""


class CorpusUnavailable(ToolExecutionError):
    """The documentation corpus could not be read."""
