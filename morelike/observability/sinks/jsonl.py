from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator

from ..trace.envelope import TraceEnvelope


def _default(obj: Any) -> Any:
    if isinstance(obj, bytes):
        return obj.hex()
    if isinstance(obj, Path):
        return str(obj)
    raise TypeError(f"not JSON serializable: {type(obj).__name__}")


class JsonlSink:
    """Appends one finished trace per line.

    A `.jsonl` path is used as is; anything else is treated as a directory that
    receives `traces.jsonl`.
    """

    def __init__(self, path_or_dir: str | Path) -> None:
        p = Path(path_or_dir)
        self.path = p if p.suffix == ".jsonl" else p / "traces.jsonl"
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def write(self, envelope: TraceEnvelope) -> None:
        line = json.dumps(envelope.to_dict(), ensure_ascii=True, default=_default)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")

    def read_all(self) -> Iterator[dict[str, Any]]:
        if not self.path.exists():
            return
        with self.path.open("r", encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    yield json.loads(line)

    def on_event(self, record: dict[str, Any]) -> None:
        return

    def on_span_end(self, record: dict[str, Any]) -> None:
        return

    def on_trace_end(self, envelope: TraceEnvelope) -> None:
        self.write(envelope)
