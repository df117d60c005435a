from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Protocol

from ..trace.context import TraceContext
from ..trace.envelope import SpanRecord, TraceEnvelope


class ObsSink(Protocol):
    def on_event(self, record: dict[str, Any]) -> None: ...

    def on_span_end(self, record: dict[str, Any]) -> None: ...

    def on_trace_end(self, envelope: TraceEnvelope) -> None: ...


_SINK: ObsSink | None = None


def set_sink(sink: ObsSink | None) -> None:
    global _SINK
    _SINK = sink


def get_sink() -> ObsSink | None:
    return _SINK


@contextmanager
def span(name: str, attrs: dict[str, Any] | None = None) -> Iterator[SpanRecord | None]:
    ctx = TraceContext.current()
    if ctx is None:
        yield None
        return

    with ctx.start_span(name, attrs) as s:
        try:
            yield s
        finally:
            if _SINK is not None:
                _SINK.on_span_end({"trace_id": ctx.trace_id, **s.to_dict()})


def event(kind: str, attrs: dict[str, Any] | None = None) -> None:
    """Record an event on the current span (or the trace itself when no span is open)."""
    ctx = TraceContext.current()
    if ctx is None:
        return

    ev = ctx.add_event(kind, attrs)
    if _SINK is not None:
        cur = ctx.current_span()
        _SINK.on_event({"trace_id": ctx.trace_id, "span_id": cur.span_id if cur else None, **ev.to_dict()})


def metric(name: str, value: float | int, attrs: dict[str, Any] | None = None) -> None:
    event("metric", {"name": name, "value": value, **(attrs or {})})


@contextmanager
def with_stage(stage: str, attrs: dict[str, Any] | None = None) -> Iterator[SpanRecord | None]:
    """Wrap one pipeline step in a `stage.<name>` span with start/end/error events."""
    key = stage[len("stage."):] if stage.startswith("stage.") else stage
    extra = dict(attrs or {})

    with span(f"stage.{key}", {"stage": key, **extra}) as s:
        event("stage.start", {"stage": key, **extra})
        try:
            yield s
        except Exception as e:
            event("stage.error", {"stage": key, "exc_type": type(e).__name__, "message": str(e)})
            raise
        finally:
            event("stage.end", {"stage": key})
