"""Trace events, an in-memory sink, and a lazily created sink handle."""

from __future__ import annotations

import threading
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol


@dataclass(slots=True)
class TraceEvent:
    trace_id: str
    environment: str
    name: str
    target_id: str | None
    user_id: str | None
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp_utc: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    @classmethod
    def create(
        cls,
        *,
        environment: str,
        name: str,
        target_id: str | None = None,
        user_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> "TraceEvent":
        return cls(
            trace_id=str(uuid.uuid4()),
            environment=environment,
            name=name,
            target_id=target_id,
            user_id=user_id,
            metadata=metadata or {},
        )


class TraceSink(Protocol):
    def record(self, event: TraceEvent) -> None: ...


class TraceStore:
    """In-memory trace storage for API-level observability."""

    def __init__(self) -> None:
        self._records: dict[str, TraceEvent] = {}
        self._lock = threading.Lock()

    def record(self, event: TraceEvent) -> None:
        with self._lock:
            self._records[event.trace_id] = event

    def get(self, trace_id: str) -> TraceEvent:
        with self._lock:
            record = self._records.get(trace_id)
        if record is None:
            raise KeyError(f"Trace not found: {trace_id}")
        return record

    def list_recent(self, limit: int = 20) -> list[TraceEvent]:
        return self._snapshot()[-limit:]

    def summary(self) -> dict[str, float | int]:
        """Aggregate request metrics for dashboard display."""
        records = self._snapshot()
        total = len(records)
        if total == 0:
            return {
                "total_requests": 0,
                "avg_latency_ms": 0.0,
                "p95_latency_ms": 0.0,
                "tool_rounds": 0,
                "total_tool_calls": 0,
            }

        latencies = sorted(float(r.metadata.get("latency_ms", 0.0)) for r in records)
        p95_index = max(0, int((len(latencies) * 0.95) - 1))
        tool_counts = [len(r.metadata.get("tool_calls", [])) for r in records]

        return {
            "total_requests": total,
            "avg_latency_ms": sum(latencies) / total,
            "p95_latency_ms": latencies[p95_index],
            "tool_rounds": sum(1 for count in tool_counts if count),
            "total_tool_calls": sum(tool_counts),
        }

    def _snapshot(self) -> list[TraceEvent]:
        with self._lock:
            return list(self._records.values())


class TracerProvider:
    """Creates the trace sink on first use and hands out the same instance.

    A factory returning None (tracing not configured) disables tracing; the
    factory is still only consulted once.
    """

    def __init__(self, factory: Callable[[], TraceSink | None]) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._initialized = False
        self._sink: TraceSink | None = None

    @classmethod
    def disabled(cls) -> "TracerProvider":
        return cls(lambda: None)

    def get(self) -> TraceSink | None:
        if self._initialized:
            return self._sink
        with self._lock:
            if not self._initialized:
                self._sink = self._factory()
                self._initialized = True
        return self._sink


class Timer:
    """Simple context timer used by the orchestrator."""

    def __init__(self) -> None:
        self._start = 0.0
        self.elapsed_ms = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000.0
