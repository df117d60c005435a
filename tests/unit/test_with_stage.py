from __future__ import annotations

import pytest

from morelike.observability.obs import api as obs
from morelike.observability.trace.context import TraceContext


def _kinds(env) -> list[str]:
    kinds: list[str] = []
    for s in env.spans:
        kinds.extend([e.kind for e in s.events])
    return kinds


def test_with_stage_emits_start_and_end() -> None:
    ctx = TraceContext.new("t-stage-1", trace_type="mlt")
    with TraceContext.activate(ctx):
        with obs.with_stage("fetch", {"requests": 2}):
            obs.event("mlt.fetched", {"requests": 2, "found": 1})
        env = ctx.finish()

    assert [s.name for s in env.spans] == ["stage.fetch"]
    assert env.spans[0].attrs == {"stage": "fetch", "requests": 2}
    kinds = _kinds(env)
    assert kinds[0] == "stage.start"
    assert kinds[-1] == "stage.end"
    assert "mlt.fetched" in kinds
    assert env.aggregates["fetched"] == 2
    assert env.aggregates["found"] == 1


def test_with_stage_accepts_prefixed_name() -> None:
    ctx = TraceContext.new("t-stage-3")
    with TraceContext.activate(ctx):
        with obs.with_stage("stage.build"):
            pass
        env = ctx.finish()
    assert [s.name for s in env.spans] == ["stage.build"]


def test_with_stage_emits_error_on_exception() -> None:
    ctx = TraceContext.new("t-stage-2", trace_type="mlt")
    with TraceContext.activate(ctx):
        with pytest.raises(ValueError):
            with obs.with_stage("boom"):
                raise ValueError("bad")
        env = ctx.finish()

    span = env.spans[0]
    assert span.name == "stage.boom"
    assert span.status == "error"
    kinds = _kinds(env)
    assert "stage.error" in kinds
    assert env.status == "error"


def test_helpers_are_noops_without_trace() -> None:
    assert TraceContext.current() is None
    with obs.with_stage("fetch") as s:
        obs.event("mlt.fetched", {"requests": 1})
        obs.metric("fetch.ms", 1.5)
    assert s is None


class _RecordingSink:
    def __init__(self) -> None:
        self.events: list[dict] = []
        self.spans: list[dict] = []
        self.traces: list = []

    def on_event(self, record):
        self.events.append(record)

    def on_span_end(self, record):
        self.spans.append(record)

    def on_trace_end(self, envelope):
        self.traces.append(envelope)


def test_sink_receives_events_spans_and_trace() -> None:
    sink = _RecordingSink()
    obs.set_sink(sink)
    try:
        ctx = TraceContext.new("t-sink")
        with TraceContext.activate(ctx):
            with obs.with_stage("exclude"):
                obs.event("mlt.excluded", {"count": 1})
            env = ctx.finish()
    finally:
        obs.set_sink(None)

    assert [e["kind"] for e in sink.events] == ["stage.start", "mlt.excluded", "stage.end"]
    assert all(e["trace_id"] == "t-sink" for e in sink.events)
    assert [s["name"] for s in sink.spans] == ["stage.exclude"]
    assert sink.traces == [env]
