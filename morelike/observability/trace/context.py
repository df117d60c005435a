from __future__ import annotations

import contextvars
import time
import traceback
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator

from .envelope import EventRecord, SpanRecord, TraceEnvelope, check_event_kind, compute_aggregates


_ACTIVE: contextvars.ContextVar["TraceContext | None"] = contextvars.ContextVar("mlt_trace", default=None)


def _now() -> float:
    return time.time()


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


@dataclass
class TraceContext:
    """Collects the spans and events of one build; activated per call via contextvars."""

    trace_id: str
    start_ts: float
    trace_type: str = "unknown"
    providers: dict[str, dict[str, Any]] = field(default_factory=dict)
    _spans: dict[str, SpanRecord] = field(default_factory=dict)
    _stack: list[str] = field(default_factory=list)
    _order: list[str] = field(default_factory=list)
    _events: list[EventRecord] = field(default_factory=list)

    @classmethod
    def new(cls, trace_id: str | None = None, *, trace_type: str = "unknown") -> "TraceContext":
        return cls(trace_id=trace_id or _new_id("trace"), start_ts=_now(), trace_type=trace_type)

    @classmethod
    def current(cls) -> "TraceContext | None":
        return _ACTIVE.get()

    @classmethod
    @contextmanager
    def activate(cls, ctx: "TraceContext") -> Iterator["TraceContext"]:
        token = _ACTIVE.set(ctx)
        try:
            yield ctx
        finally:
            _ACTIVE.reset(token)

    def current_span(self) -> SpanRecord | None:
        return self._spans.get(self._stack[-1]) if self._stack else None

    @contextmanager
    def start_span(self, name: str, attrs: dict[str, Any] | None = None) -> Iterator[SpanRecord]:
        s = SpanRecord(
            span_id=_new_id("span"),
            name=name,
            parent_span_id=self._stack[-1] if self._stack else None,
            start_ts=_now(),
            attrs=dict(attrs or {}),
        )
        self._spans[s.span_id] = s
        self._stack.append(s.span_id)
        self._order.append(s.span_id)
        try:
            yield s
        except Exception as e:
            s.status = "error"
            self.add_event(
                "error",
                {
                    "exc_type": type(e).__name__,
                    "message": str(e),
                    "traceback": "".join(traceback.format_exc(limit=5)),
                },
            )
            raise
        finally:
            if self._stack and self._stack[-1] == s.span_id:
                self._stack.pop()
            s.end_ts = _now()

    def add_event(self, kind: str, attrs: dict[str, Any] | None = None) -> EventRecord:
        ev = EventRecord(ts=_now(), kind=check_event_kind(kind, strict=False), attrs=dict(attrs or {}))
        cur = self.current_span()
        (cur.events if cur is not None else self._events).append(ev)
        return ev

    def finish(self) -> TraceEnvelope:
        if self._stack:
            self._events.append(EventRecord(ts=_now(), kind="warn.span_leak", attrs={"open_spans": len(self._stack)}))
            while self._stack:
                s = self._spans[self._stack.pop()]
                if s.end_ts is None:
                    s.status = "error"
                    s.end_ts = _now()

        spans = [self._spans[sid] for sid in self._order]
        envelope = TraceEnvelope(
            trace_id=self.trace_id,
            trace_type=self.trace_type,
            status="error" if any(s.status == "error" for s in spans) else "ok",
            start_ts=self.start_ts,
            end_ts=_now(),
            spans=spans,
            events=list(self._events),
            providers=dict(self.providers),
        )
        envelope.aggregates = compute_aggregates(envelope)

        from ..obs import api as obs

        sink = obs.get_sink()
        if sink is not None:
            sink.on_trace_end(envelope)
        return envelope
