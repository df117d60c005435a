from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator


JsonDict = dict[str, Any]

TRACE_SCHEMA_VERSION = "mlt.trace.v1"
STAGE_PREFIX = "stage."

# Finite set of event kinds a build may emit; anything else is kept but flagged in strict mode.
EVENT_KINDS: frozenset[str] = frozenset(
    {
        "stage.start",
        "stage.end",
        "stage.error",
        "mlt.items_resolved",
        "mlt.fields_filtered",
        "mlt.match_none",
        "mlt.fetched",
        "mlt.excluded",
        "mlt.named_query",
        "parse.deprecated",
        "metric",
        "error",
        "warn.span_leak",
    }
)


def check_event_kind(kind: str, *, strict: bool) -> str:
    k = (kind or "").strip()
    if strict and k not in EVENT_KINDS:
        raise ValueError(f"invalid event kind: {kind!r}")
    return k


def check_span_name(name: str, *, strict: bool) -> None:
    if strict and not name.startswith(STAGE_PREFIX):
        raise ValueError(f"span name must start with {STAGE_PREFIX!r}: {name!r}")


@dataclass(frozen=True)
class EventRecord:
    ts: float
    kind: str
    attrs: JsonDict = field(default_factory=dict)

    def to_dict(self) -> JsonDict:
        return {"ts": self.ts, "kind": self.kind, "attrs": self.attrs}


@dataclass
class SpanRecord:
    span_id: str
    name: str
    parent_span_id: str | None
    start_ts: float
    end_ts: float | None = None
    status: str = "ok"  # ok|error
    attrs: JsonDict = field(default_factory=dict)
    events: list[EventRecord] = field(default_factory=list)

    @property
    def duration_ms(self) -> float | None:
        if self.end_ts is None:
            return None
        return (self.end_ts - self.start_ts) * 1000.0

    def to_dict(self) -> JsonDict:
        return {
            "span_id": self.span_id,
            "name": self.name,
            "parent_span_id": self.parent_span_id,
            "start_ts": self.start_ts,
            "end_ts": self.end_ts,
            "status": self.status,
            "attrs": self.attrs,
            "events": [e.to_dict() for e in self.events],
        }


@dataclass
class TraceEnvelope:
    trace_id: str
    start_ts: float
    end_ts: float
    trace_type: str = "unknown"  # mlt|vectorize|unknown
    status: str = "ok"
    spans: list[SpanRecord] = field(default_factory=list)
    events: list[EventRecord] = field(default_factory=list)
    aggregates: JsonDict = field(default_factory=dict)
    providers: JsonDict = field(default_factory=dict)
    schema_version: str = TRACE_SCHEMA_VERSION

    def to_dict(self) -> JsonDict:
        return {
            "schema_version": self.schema_version,
            "trace_id": self.trace_id,
            "trace_type": self.trace_type,
            "status": self.status,
            "start_ts": self.start_ts,
            "end_ts": self.end_ts,
            "spans": [s.to_dict() for s in self.spans],
            "events": [e.to_dict() for e in self.events],
            "aggregates": self.aggregates,
            "providers": self.providers,
        }

    def validate(self, *, strict: bool = True) -> None:
        if not self.trace_id:
            raise ValueError("trace_id missing")
        for s in self.spans:
            check_span_name(s.name, strict=strict)
        for ev in self.iter_events():
            check_event_kind(ev.kind, strict=strict)

    def iter_events(self) -> Iterator[EventRecord]:
        for s in self.spans:
            yield from s.events
        yield from self.events

    def iter_event_kinds(self) -> Iterable[str]:
        return (ev.kind for ev in self.iter_events())

    def events_of(self, kind: str) -> list[EventRecord]:
        return [ev for ev in self.iter_events() if ev.kind == kind]


def compute_aggregates(envelope: TraceEnvelope) -> JsonDict:
    """Per-trace rollup: stage timings plus the counters the build reported."""
    stage_ms: dict[str, float] = {}
    for s in envelope.spans:
        if s.name.startswith(STAGE_PREFIX) and s.duration_ms is not None:
            key = s.name[len(STAGE_PREFIX):]
            stage_ms[key] = stage_ms.get(key, 0.0) + s.duration_ms

    agg: JsonDict = {
        "total_ms": (envelope.end_ts - envelope.start_ts) * 1000.0,
        "stage_ms": stage_ms,
        "error_count": sum(1 for k in envelope.iter_event_kinds() if k in ("error", "stage.error")),
    }
    for ev in envelope.events_of("mlt.fetched"):
        agg["fetched"] = agg.get("fetched", 0) + int(ev.attrs.get("requests", 0))
        agg["found"] = agg.get("found", 0) + int(ev.attrs.get("found", 0))
    for ev in envelope.events_of("mlt.excluded"):
        agg["excluded"] = agg.get("excluded", 0) + int(ev.attrs.get("count", 0))
    agg["match_none"] = bool(envelope.events_of("mlt.match_none"))
    return agg
