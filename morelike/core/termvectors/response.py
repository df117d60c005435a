from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any

from ...vectorize.codec import EMPTY_SPARSE_VECTOR, SparseVector
from ...wire.stream import StreamInput, StreamOutput
from .models import EMPTY_FIELDS, FieldStatistics, FieldTerms, TermEntry, TermStatistics, TermVectorFields, Token


@dataclass
class TermVectorsResponse:
    """Per-document answer of the term-vectors service.

    `found` is the per-item success flag; `fields` is only meaningful when it is set.
    `vector` holds an encoded sparse vector when the request carried a vectorizer.
    """

    index: str
    type: str
    id: str | None
    version: int = 0
    found: bool = False
    artificial: bool = False
    took_ms: int = 0
    fields: TermVectorFields = field(default_factory=lambda: EMPTY_FIELDS)
    vector: bytes | None = None

    def get_fields(self) -> TermVectorFields:
        return self.fields if self.found else EMPTY_FIELDS

    def get_vector(self) -> SparseVector:
        if self.vector is None:
            return EMPTY_SPARSE_VECTOR
        return SparseVector(self.vector)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"_index": self.index, "_type": self.type}
        if not self.artificial:
            d["_id"] = self.id
        d["_version"] = self.version
        d["found"] = self.found
        d["took"] = self.took_ms
        if self.found:
            d["term_vectors"] = {name: _field_to_dict(self.fields.by_field[name]) for name in self.fields}
        if self.vector is not None:
            d["vector"] = self.get_vector().to_dict()
        return d

    def write_to(self, out: StreamOutput) -> None:
        out.write_string(self.index)
        out.write_string(self.type)
        out.write_optional_string(self.id)
        out.write_long(self.version)
        out.write_bool(self.found)
        out.write_bool(self.artificial)
        out.write_vlong(self.took_ms)
        out.write_vint(len(self.fields))
        for name in self.fields:
            _write_field(out, self.fields.by_field[name])
        out.write_optional_bytes(self.vector)

    @classmethod
    def read_from(cls, inp: StreamInput) -> "TermVectorsResponse":
        index = inp.read_string()
        type_ = inp.read_string()
        id_ = inp.read_optional_string()
        version = inp.read_long()
        found = inp.read_bool()
        artificial = inp.read_bool()
        took = inp.read_vlong()
        by_field: dict[str, FieldTerms] = {}
        for _ in range(inp.read_vint()):
            ft = _read_field(inp)
            by_field[ft.field] = ft
        vector = inp.read_optional_bytes()
        return cls(
            index=index,
            type=type_,
            id=id_,
            version=version,
            found=found,
            artificial=artificial,
            took_ms=took,
            fields=TermVectorFields(by_field) if by_field else EMPTY_FIELDS,
            vector=vector,
        )

    def to_bytes(self) -> bytes:
        out = StreamOutput()
        self.write_to(out)
        return out.to_bytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> "TermVectorsResponse":
        return cls.read_from(StreamInput(data))


def _field_to_dict(ft: FieldTerms) -> dict[str, Any]:
    d: dict[str, Any] = {}
    st = ft.statistics
    if st is not None and st.doc_count > 0:
        d["field_statistics"] = {
            "sum_doc_freq": st.sum_doc_freq,
            "doc_count": st.doc_count,
            "sum_ttf": st.sum_total_term_freq,
        }
    d["terms"] = {t.term: _term_to_dict(ft, t) for t in ft}
    return d


def _term_to_dict(ft: FieldTerms, t: TermEntry) -> dict[str, Any]:
    d: dict[str, Any] = {}
    # Statistics are only rendered when they were requested and are meaningful.
    if t.statistics is not None and t.statistics.doc_freq > 0:
        d["doc_freq"] = t.statistics.doc_freq
        d["ttf"] = t.statistics.total_term_freq
    d["term_freq"] = t.term_freq
    if ft.has_positions or ft.has_offsets or ft.has_payloads:
        tokens = []
        for tok in t.tokens:
            td: dict[str, Any] = {}
            if ft.has_positions:
                td["position"] = tok.position
            if ft.has_offsets:
                td["start_offset"] = tok.start_offset
                td["end_offset"] = tok.end_offset
            if ft.has_payloads and tok.payload:
                td["payload"] = base64.b64encode(tok.payload).decode("ascii")
            tokens.append(td)
        d["tokens"] = tokens
    return d


def _write_optional_vint(out: StreamOutput, v: int | None) -> None:
    out.write_bool(v is not None)
    if v is not None:
        out.write_vint(v)


def _read_optional_vint(inp: StreamInput) -> int | None:
    return inp.read_vint() if inp.read_bool() else None


def _write_field(out: StreamOutput, ft: FieldTerms) -> None:
    out.write_string(ft.field)
    out.write_bool(ft.has_positions)
    out.write_bool(ft.has_offsets)
    out.write_bool(ft.has_payloads)
    out.write_bool(ft.statistics is not None)
    if ft.statistics is not None:
        out.write_long(ft.statistics.sum_doc_freq)
        out.write_long(ft.statistics.doc_count)
        out.write_long(ft.statistics.sum_total_term_freq)
    out.write_vint(len(ft))
    for t in ft:
        out.write_string(t.term)
        out.write_vint(t.term_freq)
        out.write_bool(t.statistics is not None)
        if t.statistics is not None:
            out.write_long(t.statistics.doc_freq)
            out.write_long(t.statistics.total_term_freq)
        out.write_vint(len(t.tokens))
        for tok in t.tokens:
            _write_optional_vint(out, tok.position)
            _write_optional_vint(out, tok.start_offset)
            _write_optional_vint(out, tok.end_offset)
            out.write_optional_bytes(tok.payload)


def _read_field(inp: StreamInput) -> FieldTerms:
    name = inp.read_string()
    has_positions = inp.read_bool()
    has_offsets = inp.read_bool()
    has_payloads = inp.read_bool()
    stats = None
    if inp.read_bool():
        stats = FieldStatistics(inp.read_long(), inp.read_long(), inp.read_long())
    terms: list[TermEntry] = []
    for _ in range(inp.read_vint()):
        term = inp.read_string()
        freq = inp.read_vint()
        tstats = TermStatistics(inp.read_long(), inp.read_long()) if inp.read_bool() else None
        tokens = tuple(
            Token(
                position=_read_optional_vint(inp),
                start_offset=_read_optional_vint(inp),
                end_offset=_read_optional_vint(inp),
                payload=inp.read_optional_bytes(),
            )
            for _ in range(inp.read_vint())
        )
        terms.append(TermEntry(term=term, term_freq=freq, statistics=tstats, tokens=tokens))
    return FieldTerms(
        field=name,
        terms=tuple(terms),
        statistics=stats,
        has_positions=has_positions,
        has_offsets=has_offsets,
        has_payloads=has_payloads,
    )
