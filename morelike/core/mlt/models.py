from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...libs.interfaces.analysis import AnalysisService, Analyzer, TokenStreamProbe, UidEncoder
from ...libs.interfaces.termvectors import TermVectorsFetcher
from ..items import DocumentItem
from ..termvectors.models import TermVectorFields


# Executor defaults; a builder tunable left unset keeps these.
DEFAULT_MIN_TERM_FREQ = 2
DEFAULT_MAX_QUERY_TERMS = 25
DEFAULT_MIN_DOC_FREQ = 5
DEFAULT_MAX_DOC_FREQ = 2**31 - 1
DEFAULT_MIN_WORD_LEN = 0
DEFAULT_MAX_WORD_LEN = 0
DEFAULT_BOOST_TERMS_FACTOR = 1.0
DEFAULT_MINIMUM_SHOULD_MATCH = "30%"
DEFAULT_BOOST = 1.0

DEFAULT_FIELD = "_all"


def create_uid(type_: str, id_: str) -> bytes:
    return f"{type_}#{id_}".encode("utf-8")


@dataclass
class QueryContext:
    """Everything a build reads from its surroundings, captured once up front.

    `named_queries` is the only state a build writes back.
    """

    index_name: str
    query_types: tuple[str, ...]
    analysis: AnalysisService
    probe: TokenStreamProbe
    fetcher: TermVectorsFetcher
    default_field: str = DEFAULT_FIELD
    uid_encoder: UidEncoder = create_uid
    named_queries: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.query_types = tuple(self.query_types)

    def add_named_query(self, name: str, query: Any) -> None:
        self.named_queries[name] = query


@dataclass(frozen=True)
class ResolvedRequest:
    requests: tuple[DocumentItem, ...] = ()
    like_texts: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.requests or self.like_texts)


@dataclass(frozen=True)
class MatchNoDocsQuery:
    """Terminal result of a build with nothing to compare against."""

    reason: str = ""
    boost: float = DEFAULT_BOOST

    def to_dict(self) -> dict[str, Any]:
        return {"match_none": {"reason": self.reason}}


@dataclass
class SimilarityQuery:
    """The built similarity query, ready to hand to the executor."""

    analyzer: Analyzer
    fields: tuple[str, ...]
    like_texts: tuple[str, ...] = ()
    ignore_texts: tuple[str, ...] = ()
    like_fields: tuple[TermVectorFields, ...] = ()
    ignore_fields: tuple[TermVectorFields, ...] = ()
    exclude_uids: tuple[bytes, ...] = ()
    min_term_freq: int = DEFAULT_MIN_TERM_FREQ
    max_query_terms: int = DEFAULT_MAX_QUERY_TERMS
    min_doc_freq: int = DEFAULT_MIN_DOC_FREQ
    max_doc_freq: int = DEFAULT_MAX_DOC_FREQ
    min_word_len: int = DEFAULT_MIN_WORD_LEN
    max_word_len: int = DEFAULT_MAX_WORD_LEN
    boost_terms: bool = False
    boost_terms_factor: float = DEFAULT_BOOST_TERMS_FACTOR
    minimum_should_match: str = DEFAULT_MINIMUM_SHOULD_MATCH
    stop_words: frozenset[str] | None = None
    boost: float = DEFAULT_BOOST
    query_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "analyzer": self.analyzer.name,
            "fields": list(self.fields),
            "like_texts": list(self.like_texts),
            "ignore_texts": list(self.ignore_texts),
            "like_docs": len(self.like_fields),
            "ignore_docs": len(self.ignore_fields),
            "exclude": [u.decode("utf-8", "replace") for u in self.exclude_uids],
            "min_term_freq": self.min_term_freq,
            "max_query_terms": self.max_query_terms,
            "min_doc_freq": self.min_doc_freq,
            "max_doc_freq": self.max_doc_freq,
            "min_word_len": self.min_word_len,
            "max_word_len": self.max_word_len,
            "boost_terms": self.boost_terms,
            "boost_terms_factor": self.boost_terms_factor,
            "minimum_should_match": self.minimum_should_match,
            "boost": self.boost,
        }
        if self.stop_words is not None:
            d["stop_words"] = sorted(self.stop_words)
        if self.query_name is not None:
            d["_name"] = self.query_name
        return {"similarity": d}
