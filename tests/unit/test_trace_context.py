from __future__ import annotations

import pytest

from morelike.observability.trace.context import TraceContext
from morelike.observability.trace.envelope import TRACE_SCHEMA_VERSION


def test_trace_context_activate_and_current() -> None:
    assert TraceContext.current() is None

    ctx = TraceContext.new("t1")
    with TraceContext.activate(ctx):
        assert TraceContext.current() is ctx
    assert TraceContext.current() is None


def test_generated_trace_id() -> None:
    a = TraceContext.new(trace_type="mlt")
    b = TraceContext.new(trace_type="mlt")
    assert a.trace_id.startswith("trace_")
    assert a.trace_id != b.trace_id


def test_nested_spans_parent_child_relationship(mock_clock) -> None:
    ctx = TraceContext.new("t2")
    with TraceContext.activate(ctx):
        with ctx.start_span("stage.outer"):
            ctx.add_event("mlt.items_resolved")
            with ctx.start_span("stage.inner", {"k": "v"}):
                ctx.add_event("mlt.fetched", {"requests": 1})
        env = ctx.finish()

    assert env.trace_id == "t2"
    assert env.schema_version == TRACE_SCHEMA_VERSION
    assert len(env.spans) == 2
    outer, inner = env.spans[0], env.spans[1]
    assert inner.parent_span_id == outer.span_id
    assert outer.parent_span_id is None
    assert outer.end_ts is not None and inner.end_ts is not None
    assert [e.kind for e in outer.events] == ["mlt.items_resolved"]
    assert [e.kind for e in inner.events] == ["mlt.fetched"]
    assert env.aggregates["stage_ms"] == {"outer": 0.0, "inner": 0.0}
    assert env.aggregates["total_ms"] == 0.0


def test_exception_records_error_and_finish_is_still_possible() -> None:
    ctx = TraceContext.new("t3")
    with TraceContext.activate(ctx):
        with pytest.raises(ValueError):
            with ctx.start_span("stage.boom"):
                raise ValueError("bad")
        env = ctx.finish()

    assert len(env.spans) == 1
    s = env.spans[0]
    assert s.status == "error"
    assert s.end_ts is not None
    assert any(e.kind == "error" for e in s.events)
    assert env.aggregates["error_count"] == 1


def test_unclosed_span_is_reported() -> None:
    ctx = TraceContext.new("t4")
    cm = ctx.start_span("stage.leak")
    cm.__enter__()
    env = ctx.finish()

    assert [e.kind for e in env.events] == ["warn.span_leak"]
    assert env.spans[0].status == "error"
    assert env.status == "error"


def test_strict_validation() -> None:
    ctx = TraceContext.new("t5")
    with TraceContext.activate(ctx):
        with ctx.start_span("stage.build"):
            ctx.add_event("custom.kind")
        env = ctx.finish()

    env.validate(strict=False)
    with pytest.raises(ValueError):
        env.validate(strict=True)


def test_match_none_aggregate() -> None:
    ctx = TraceContext.new("t6")
    ctx.add_event("mlt.match_none", {"reason": "no_items"})
    env = ctx.finish()
    assert env.aggregates["match_none"] is True
    assert "fetched" not in env.aggregates
