from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Mapping, NamedTuple, Sequence

from ..core.termvectors.models import NOT_REQUESTED, TermStatistics
from ..errors import ConfigError
from ..wire.stream import StreamInput, StreamOutput
from .codec import encode_sparse_vector


class Term(NamedTuple):
    field: str
    text: str


class ValueOption(str, Enum):
    TERM_FREQ = "term_freq"
    DOC_FREQ = "doc_freq"
    TTF = "ttf"


def parse_value_option(text: Any) -> ValueOption:
    try:
        return ValueOption(text)
    except ValueError as e:
        raise ConfigError(f"the parameter value {text!r} is not valid", data={"value": text}) from e


class Vectorizer:
    """Turns per-document term statistics into a fixed-shape sparse vector.

    The vocabulary is deduplicated on construction (first occurrence wins), and a
    term's column is its position in it for the lifetime of the instance. A
    vectorizer is populated with `add` and drained once with `write_vector`.
    """

    def __init__(
        self,
        terms: Iterable[Term | tuple[str, str]],
        value_options: Mapping[str, ValueOption] | None = None,
    ) -> None:
        self.terms: list[Term] = list(dict.fromkeys(Term(*t) for t in terms))
        self.value_options: dict[str, ValueOption] = dict(value_options or {})
        self._columns = {t: i for i, t in enumerate(self.terms)}
        self._pending: list[tuple[int, int]] = []

    @property
    def size(self) -> int:
        return len(self.terms)

    def __len__(self) -> int:
        return self.size

    def set_value_option(self, field: str, option: ValueOption) -> None:
        self.value_options[field] = option

    def column(self, term: Term | tuple[str, str]) -> int:
        return self._columns.get(Term(*term), -1)

    def needs_term_statistics(self) -> bool:
        return any(o in (ValueOption.DOC_FREQ, ValueOption.TTF) for o in self.value_options.values())

    def add(self, term: Term | tuple[str, str], stats: TermStatistics | None, freq: int) -> None:
        col = self.column(term)
        if col == -1:
            return
        self._pending.append((col, self._value(term[0], stats, freq)))

    def _value(self, field: str, stats: TermStatistics | None, freq: int) -> int:
        option = self.value_options.get(field)
        if option is ValueOption.DOC_FREQ:
            return stats.doc_freq if stats is not None else NOT_REQUESTED
        if option is ValueOption.TTF:
            return stats.total_term_freq if stats is not None else NOT_REQUESTED
        return freq

    def write_vector(self) -> bytes:
        # Sort on the column only; equal columns keep no particular order.
        pairs = sorted(self._pending, key=lambda p: p[0])
        self._pending = []
        return encode_sparse_vector(self.size, pairs)

    # --- configuration payload ---

    @classmethod
    def parse(cls, payload: Sequence[Mapping[str, Any]]) -> "Vectorizer":
        if not isinstance(payload, (list, tuple)):
            raise ConfigError("vectorizer must be given as an array of term groups")
        terms: list[Term] = []
        options: dict[str, ValueOption] = {}
        for group in payload:
            _parse_group(group, terms, options)
        return cls(terms, options)

    def to_dict(self) -> list[dict[str, Any]]:
        # One group per run of same-field terms keeps the column order on reparse.
        groups: list[dict[str, Any]] = []
        seen: set[str] = set()
        for t in self.terms:
            if not groups or groups[-1]["field"] != t.field:
                group: dict[str, Any] = {"field": t.field, "span": []}
                if t.field not in seen and t.field in self.value_options:
                    group["value"] = self.value_options[t.field].value
                seen.add(t.field)
                groups.append(group)
            groups[-1]["span"].append(t.text)
        for name, option in self.value_options.items():
            if name not in seen:
                groups.append({"field": name, "span": [], "value": option.value})
        return groups

    # --- binary configuration form ---

    def write_to(self, out: StreamOutput) -> None:
        out.write_vint(self.size)
        for t in self.terms:
            out.write_string(t.field)
            out.write_bytes(t.text.encode("utf-8"))
        out.write_vint(len(self.value_options))
        for name, option in self.value_options.items():
            out.write_string(name)
            out.write_string(option.value)

    @classmethod
    def read_from(cls, inp: StreamInput) -> "Vectorizer":
        n = inp.read_vint()
        terms = [Term(inp.read_string(), inp.read_bytes().decode("utf-8")) for _ in range(n)]
        n_opts = inp.read_vint()
        options: dict[str, ValueOption] = {}
        for _ in range(n_opts):
            name = inp.read_string()
            options[name] = parse_value_option(inp.read_string())
        return cls(terms, options)

    def to_bytes(self) -> bytes:
        out = StreamOutput()
        self.write_to(out)
        return out.to_bytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> "Vectorizer":
        return cls.read_from(StreamInput(data))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vectorizer):
            return NotImplemented
        return self.terms == other.terms and self.value_options == other.value_options

    def __repr__(self) -> str:
        opts = {k: v.value for k, v in self.value_options.items()}
        return f"Vectorizer(size={self.size}, value_options={opts!r})"


def _parse_group(group: Any, terms: list[Term], options: dict[str, ValueOption]) -> None:
    if not isinstance(group, Mapping):
        raise ConfigError("each vectorizer entry must be an object")

    field_name: str | None = None
    words: list[str] = []
    option: ValueOption | None = None
    for key, value in group.items():
        if key == "field":
            if not isinstance(value, str):
                raise ConfigError("the parameter field must be a string")
            field_name = value
        elif key == "span":
            if not isinstance(value, (list, tuple)):
                raise ConfigError("the parameter span must be given as an array")
            words = [str(w) for w in value]
        elif key == "value":
            option = parse_value_option(value)
        else:
            raise ConfigError(f"the parameter {key} is not valid for a vectorizer", data={"parameter": key})

    if field_name is None:
        raise ConfigError("the parameter field is required")
    terms.extend(Term(field_name, w) for w in words)
    if option is not None:
        options[field_name] = option
