from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol


@dataclass(frozen=True)
class AnalyzedToken:
    term: str
    position: int
    start_offset: int
    end_offset: int


class Analyzer(Protocol):
    name: str

    def analyze(self, text: str) -> list[AnalyzedToken]:
        ...


class AnalysisService(Protocol):
    def analyzer(self, name: str) -> Analyzer | None:
        ...

    def search_analyzer(self) -> Analyzer:
        ...

    def field_analyzer(self, field_name: str) -> Analyzer:
        ...


class TokenStreamProbe(Protocol):
    def supports_character_token_stream(self, analyzer: Analyzer, field_name: str) -> bool:
        ...


# (type, id) -> deterministic unique-document identifier bytes.
UidEncoder = Callable[[str, str], bytes]
