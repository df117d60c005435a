from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Mapping

# -1 marks a statistic that was not requested.
NOT_REQUESTED = -1


@dataclass(frozen=True)
class TermStatistics:
    doc_freq: int
    total_term_freq: int

    def __post_init__(self) -> None:
        assert (self.doc_freq == NOT_REQUESTED) == (self.total_term_freq == NOT_REQUESTED), (
            f"term statistics must be requested together: doc_freq={self.doc_freq} ttf={self.total_term_freq}"
        )
        assert self.doc_freq >= NOT_REQUESTED and self.total_term_freq >= NOT_REQUESTED

    @property
    def requested(self) -> bool:
        return self.doc_freq != NOT_REQUESTED


@dataclass(frozen=True)
class FieldStatistics:
    sum_doc_freq: int
    doc_count: int
    sum_total_term_freq: int

    def __post_init__(self) -> None:
        if self.doc_count == NOT_REQUESTED:
            assert self.sum_doc_freq == NOT_REQUESTED, "doc_count was -1 but sum_doc_freq ain't"
            assert self.sum_total_term_freq == NOT_REQUESTED, "doc_count was -1 but sum_ttf ain't"
        elif self.doc_count > 0:
            assert self.sum_doc_freq > 0, "doc_count > 0 but sum_doc_freq ain't"
            assert self.sum_total_term_freq > 0, "doc_count > 0 but sum_ttf ain't"

    @property
    def requested(self) -> bool:
        return self.doc_count != NOT_REQUESTED


@dataclass(frozen=True)
class Token:
    position: int | None = None
    start_offset: int | None = None
    end_offset: int | None = None
    payload: bytes | None = None


@dataclass(frozen=True)
class TermEntry:
    term: str
    term_freq: int
    statistics: TermStatistics | None = None
    tokens: tuple[Token, ...] = ()


@dataclass(frozen=True)
class FieldTerms:
    """Terms of one field of one document, in term order."""

    field: str
    terms: tuple[TermEntry, ...]
    statistics: FieldStatistics | None = None
    has_positions: bool = False
    has_offsets: bool = False
    has_payloads: bool = False

    def __iter__(self) -> Iterator[TermEntry]:
        return iter(self.terms)

    def __len__(self) -> int:
        return len(self.terms)


@dataclass(frozen=True)
class TermVectorFields:
    """Field name -> FieldTerms handle returned by the term-vectors fetch service."""

    by_field: Mapping[str, FieldTerms] = field(default_factory=dict)

    def __iter__(self) -> Iterator[str]:
        return iter(self.by_field)

    def __len__(self) -> int:
        return len(self.by_field)

    def __contains__(self, name: object) -> bool:
        return name in self.by_field

    def terms(self, name: str) -> FieldTerms | None:
        return self.by_field.get(name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TermVectorFields):
            return NotImplemented
        return dict(self.by_field) == dict(other.by_field)

    def __hash__(self) -> int:
        return hash(tuple(self.by_field.items()))


EMPTY_FIELDS = TermVectorFields()
