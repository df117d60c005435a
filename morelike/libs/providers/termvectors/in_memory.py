from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import Any, Iterator, Mapping

from ....core.items import MATCH_ANY, DocumentItem, VersionType
from ....core.termvectors.models import FieldStatistics, FieldTerms, TermEntry, TermStatistics, TermVectorFields, Token
from ....core.termvectors.response import TermVectorsResponse
from ....vectorize.vectorizer import Term, Vectorizer
from ...interfaces.analysis import AnalyzedToken
from ..analysis.mapping import MappingAnalysisService


DocKey = tuple[str, str, str]


@dataclass
class _StoredDoc:
    version: int
    source: dict[str, Any]
    tokens: dict[str, list[AnalyzedToken]]


@dataclass
class _FieldCorpus:
    """Collection statistics of one field of one index."""

    doc_count: int = 0
    document_frequency: Counter[str] = field(default_factory=Counter)
    total_term_frequency: Counter[str] = field(default_factory=Counter)

    def add(self, tokens: list[AnalyzedToken]) -> None:
        tf = Counter(t.term for t in tokens)
        self.doc_count += 1
        self.document_frequency.update(tf.keys())
        self.total_term_frequency.update(tf)

    def term_statistics(self, term: str) -> TermStatistics:
        return TermStatistics(self.document_frequency.get(term, 0), self.total_term_frequency.get(term, 0))

    def field_statistics(self) -> FieldStatistics:
        return FieldStatistics(
            sum_doc_freq=sum(self.document_frequency.values()),
            doc_count=self.doc_count,
            sum_total_term_freq=sum(self.total_term_frequency.values()),
        )


def _flatten(source: Mapping[str, Any], prefix: str = "") -> Iterator[tuple[str, Any]]:
    for key, value in source.items():
        name = f"{prefix}{key}"
        if isinstance(value, Mapping):
            yield from _flatten(value, f"{name}.")
        else:
            yield name, value


def _is_selected(name: str, selected: tuple[str, ...] | None) -> bool:
    if selected is None:
        return True
    return any(fnmatchcase(name, pattern) for pattern in selected)


def _version_conflict(request: DocumentItem, current: int) -> bool:
    if request.version == MATCH_ANY or request.version_type is VersionType.FORCE:
        return False
    return current != request.version


class InMemoryTermVectorsService:
    """Term vectors over documents held in memory, for local/dev use and tests.

    Documents are analyzed once when indexed; collection statistics are kept per
    (index, field) and rebuilt lazily after writes.
    """

    def __init__(self, analysis: MappingAnalysisService | None = None) -> None:
        self.analysis = analysis or MappingAnalysisService()
        self._docs: dict[DocKey, _StoredDoc] = {}
        self._corpus: dict[tuple[str, str], _FieldCorpus] | None = None

    def __len__(self) -> int:
        return len(self._docs)

    def index(
        self,
        index: str,
        type_: str,
        id_: str,
        source: Mapping[str, Any],
        *,
        version: int | None = None,
    ) -> int:
        key = (index, type_, str(id_))
        prev = self._docs.get(key)
        if version is None:
            version = prev.version + 1 if prev is not None else 1
        self._docs[key] = _StoredDoc(version=version, source=dict(source), tokens=self._analyze(source))
        self._corpus = None
        return version

    def fetch(self, requests: list[DocumentItem]) -> list[TermVectorsResponse]:
        return [self.term_vectors(r) for r in requests]

    def term_vectors(self, request: DocumentItem, vectorizer: Vectorizer | None = None) -> TermVectorsResponse:
        start = time.perf_counter()
        index = request.index or ""
        type_ = request.type or ""

        if request.doc is not None:
            tokens = self._analyze(request.source or {})
            version = 0
        else:
            stored = self._docs.get((index, type_, str(request.id)))
            if stored is None or _version_conflict(request, stored.version):
                return TermVectorsResponse(index=index, type=type_, id=request.id, took_ms=_took(start))
            tokens = stored.tokens
            version = stored.version

        by_field: dict[str, FieldTerms] = {}
        for name, field_tokens in tokens.items():
            if field_tokens and _is_selected(name, request.selected_fields):
                by_field[name] = self._field_terms(index, name, field_tokens, request, vectorizer)

        return TermVectorsResponse(
            index=index,
            type=type_,
            id=request.id,
            version=version,
            found=True,
            artificial=request.doc is not None,
            took_ms=_took(start),
            fields=TermVectorFields(by_field),
            vector=vectorizer.write_vector() if vectorizer is not None else None,
        )

    # --- internals ---

    def _analyze(self, source: Mapping[str, Any]) -> dict[str, list[AnalyzedToken]]:
        out: dict[str, list[AnalyzedToken]] = {}
        for name, value in _flatten(source):
            values = value if isinstance(value, list) else [value]
            texts = [v for v in values if isinstance(v, str)]
            if not texts:
                continue
            analyzer = self.analysis.field_analyzer(name)
            if not self.analysis.supports_character_token_stream(analyzer, name):
                continue
            tokens: list[AnalyzedToken] = []
            for text in texts:
                # Multi-valued fields continue positions and offsets after the previous value.
                pos_base = tokens[-1].position + 1 if tokens else 0
                off_base = tokens[-1].end_offset + 1 if tokens else 0
                for t in analyzer.analyze(text):
                    tokens.append(
                        AnalyzedToken(
                            term=t.term,
                            position=pos_base + t.position,
                            start_offset=off_base + t.start_offset,
                            end_offset=off_base + t.end_offset,
                        )
                    )
            out[name] = tokens
        return out

    def _field_corpus(self, index: str, name: str) -> _FieldCorpus:
        if self._corpus is None:
            corpus: dict[tuple[str, str], _FieldCorpus] = {}
            for (doc_index, _, _), doc in self._docs.items():
                for field_name, tokens in doc.tokens.items():
                    if tokens:
                        corpus.setdefault((doc_index, field_name), _FieldCorpus()).add(tokens)
            self._corpus = corpus
        return self._corpus.get((index, name)) or _FieldCorpus()

    def _field_terms(
        self,
        index: str,
        name: str,
        tokens: list[AnalyzedToken],
        request: DocumentItem,
        vectorizer: Vectorizer | None,
    ) -> FieldTerms:
        corpus = self._field_corpus(index, name)
        need_stats = request.term_statistics or (vectorizer is not None and vectorizer.needs_term_statistics())

        by_term: dict[str, list[AnalyzedToken]] = {}
        for t in tokens:
            by_term.setdefault(t.term, []).append(t)

        entries: list[TermEntry] = []
        for term in sorted(by_term):
            occurrences = by_term[term]
            stats = corpus.term_statistics(term) if need_stats else None
            if vectorizer is not None:
                vectorizer.add(Term(name, term), stats, len(occurrences))
            entries.append(
                TermEntry(
                    term=term,
                    term_freq=len(occurrences),
                    statistics=stats if request.term_statistics else None,
                    tokens=self._tokens(occurrences, request),
                )
            )

        return FieldTerms(
            field=name,
            terms=tuple(entries),
            statistics=corpus.field_statistics() if request.field_statistics else None,
            has_positions=request.positions,
            has_offsets=request.offsets,
            has_payloads=request.payloads,
        )

    @staticmethod
    def _tokens(occurrences: list[AnalyzedToken], request: DocumentItem) -> tuple[Token, ...]:
        if not (request.positions or request.offsets or request.payloads):
            return ()
        return tuple(
            Token(
                position=t.position if request.positions else None,
                start_offset=t.start_offset if request.offsets else None,
                end_offset=t.end_offset if request.offsets else None,
            )
            for t in occurrences
        )


def _took(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
