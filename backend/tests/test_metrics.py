"""Tests for metrics helpers."""
from __future__ import annotations

from typing import Any, Dict

from studyflow.observability import metrics
from studyflow.observability import tracing


class _DummyTrace:
    def __init__(self, name: str, metadata: Dict[str, Any]):
        self.name = name
        self.metadata = metadata
        self.ended = False

    def end(self) -> None:
        self.ended = True


class _DummyClient:
    def __init__(self):
        self.traces: list[_DummyTrace] = []

    def trace(self, name: str, metadata: Dict[str, Any] | None = None):
        trace = _DummyTrace(name, metadata or {})
        self.traces.append(trace)
        return trace


def test_log_metric_closes_trace(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy_client)

    metrics.log_metric("routine.submission.latency_ms", 42, metadata={"mode": "guest"})

    assert dummy_client.traces[0].name == "metric:routine.submission.latency_ms"
    assert dummy_client.traces[0].metadata == {"value": 42, "mode": "guest"}
    assert dummy_client.traces[0].ended is True


def test_log_outcome_names_success_and_failure(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy_client)

    metrics.log_outcome("inference.routine_analysis", True)
    metrics.log_outcome("inference.routine_analysis", False)

    assert [trace.name for trace in dummy_client.traces] == [
        "metric:inference.routine_analysis.success",
        "metric:inference.routine_analysis.failure",
    ]


def test_log_metric_is_noop_without_client(monkeypatch) -> None:
    monkeypatch.setattr(tracing, "get_opik_client", lambda: None)

    metrics.log_metric("anything", 1)
