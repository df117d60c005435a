from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from ...observability.sinks.jsonl import JsonlSink
from ...observability.trace.context import TraceContext
from ...observability.trace.envelope import TraceEnvelope
from ..mlt.models import QueryContext
from ..mlt.parser import parse_query
from ..mlt.pipeline import BuildResult
from ..strategy import Runtime, build_runtime, default_settings_path, load_settings


@dataclass
class MltResult:
    query: BuildResult
    context: QueryContext
    trace: TraceEnvelope | None = None


@dataclass
class MoreLikeThisRunner:
    """User-facing entry: JSON query body in, built similarity query plus trace out.

    The runtime (providers wired from settings) is built once and reused; every
    run gets its own QueryContext and trace.
    """

    runtime: Runtime | None = None
    settings_path: str | Path | None = None
    write_traces: bool = False
    _sink: JsonlSink | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.runtime is None:
            settings = load_settings(self.settings_path or default_settings_path())
            self.runtime = build_runtime(settings)
        if self.write_traces:
            self._sink = JsonlSink(self.runtime.settings.paths.logs_dir)

    def run(self, body: Mapping[str, Any] | str) -> MltResult:
        assert self.runtime is not None
        ctx = TraceContext.new(trace_type="mlt")
        ctx.providers.update(self.runtime.providers_snapshot())
        context = self.runtime.new_context()
        with TraceContext.activate(ctx):
            try:
                query = parse_query(body).to_query(context)
            finally:
                envelope = ctx.finish()
                if self._sink is not None:
                    self._sink.write(envelope)
        return MltResult(query=query, context=context, trace=envelope)
