from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from ...interfaces.analysis import Analyzer
from .simple import KeywordAnalyzer, StandardAnalyzer, WhitespaceAnalyzer


# Mapping types whose values are analyzed into character tokens.
CHARACTER_TYPES = frozenset({"text", "string", "keyword"})


def builtin_analyzers() -> dict[str, Analyzer]:
    return {a.name: a for a in (StandardAnalyzer(), WhitespaceAnalyzer(), KeywordAnalyzer())}


@dataclass
class MappingAnalysisService:
    """Analysis service + token-stream probe driven by a field -> mapping-type table.

    Unmapped fields (including the catch-all default field) are treated as text.
    """

    mappings: dict[str, str] = field(default_factory=dict)
    default_analyzer: str = "standard"
    field_analyzers: dict[str, str] = field(default_factory=dict)
    analyzers: dict[str, Analyzer] = field(default_factory=builtin_analyzers)

    def __post_init__(self) -> None:
        if self.default_analyzer not in self.analyzers:
            raise ValueError(f"unknown default analyzer: {self.default_analyzer!r}")
        for name, a in self.field_analyzers.items():
            if a not in self.analyzers:
                raise ValueError(f"unknown analyzer {a!r} for field {name!r}")

    def analyzer(self, name: str) -> Analyzer | None:
        return self.analyzers.get(name)

    def search_analyzer(self) -> Analyzer:
        return self.analyzers[self.default_analyzer]

    def field_analyzer(self, field_name: str) -> Analyzer:
        if field_name in self.field_analyzers:
            return self.analyzers[self.field_analyzers[field_name]]
        if self.mappings.get(field_name) == "keyword":
            return self.analyzers["keyword"]
        return self.search_analyzer()

    def mapping_type(self, field_name: str) -> str:
        return self.mappings.get(field_name, "text")

    def supports_character_token_stream(self, analyzer: Analyzer, field_name: str) -> bool:
        _ = analyzer
        return self.mapping_type(field_name) in CHARACTER_TYPES

    def with_mappings(self, mappings: Mapping[str, str]) -> "MappingAnalysisService":
        merged = dict(self.mappings)
        merged.update(mappings)
        return MappingAnalysisService(
            mappings=merged,
            default_analyzer=self.default_analyzer,
            field_analyzers=dict(self.field_analyzers),
            analyzers=dict(self.analyzers),
        )
