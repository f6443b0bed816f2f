import pytest
from pydantic import BaseModel, Field, ValidationError

from docs_assistant.agent.registry import ToolRegistry, ToolSpec


class EchoInput(BaseModel):
    value: int = Field(ge=1)


async def _echo(data: EchoInput) -> str:
    return str(data.value)


def _echo_spec() -> ToolSpec:
    return ToolSpec(
        name="echo",
        description="echo positive int",
        args_schema=EchoInput,
        handler=_echo,
    )


def test_tool_registry_validation(run) -> None:
    registry = ToolRegistry()
    registry.register(_echo_spec())

    assert run(registry.execute("echo", {"value": 3})) == "3"

    with pytest.raises(ValidationError):
        run(registry.execute("echo", {"value": 0}))


def test_strict_execute_rejects_unknown_tool(run) -> None:
    with pytest.raises(KeyError):
        run(ToolRegistry().execute("missing", {}))


def test_duplicate_tool_registration_rejected() -> None:
    registry = ToolRegistry()
    spec = _echo_spec()

    registry.register(spec)
    with pytest.raises(ValueError):
        registry.register(spec)


def test_exports_langchain_tools() -> None:
    registry = ToolRegistry()
    registry.register(_echo_spec())

    tools = registry.as_langchain_tools()

    assert [tool.name for tool in tools] == ["echo"]
    assert "value" in tools[0].args
