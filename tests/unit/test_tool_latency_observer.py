from pydantic import BaseModel

from docs_assistant.agent.registry import ToolRegistry, ToolSpec
from docs_assistant.types import ToolCall


class EchoInput(BaseModel):
    text: str


async def _upper(data: EchoInput) -> str:
    return data.text.upper()


def _registry() -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(
        ToolSpec(
            name="echo",
            description="uppercase",
            args_schema=EchoInput,
            handler=_upper,
        )
    )
    return registry


def test_tool_observer_captures_latency_and_payload(run) -> None:
    registry = _registry()

    observed = []
    registry.set_observer(observed.append)
    result = run(registry.execute("echo", {"text": "hello"}))
    registry.set_observer(None)

    assert result == "HELLO"
    assert len(observed) == 1
    assert observed[0].name == "echo"
    assert observed[0].input_payload == {"text": "hello"}
    assert observed[0].latency_ms >= 0.0


def test_batch_observer_overrides_registry_observer(run) -> None:
    registry = _registry()
    global_observed = []
    batch_observed = []
    registry.set_observer(global_observed.append)

    run(
        registry.execute_calls(
            [ToolCall(id="c1", name="echo", arguments={"text": "a"})],
            observer=batch_observed.append,
        )
    )

    assert global_observed == []
    assert [trace.output_preview for trace in batch_observed] == ["A"]
