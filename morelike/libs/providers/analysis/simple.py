from __future__ import annotations

import re
from dataclasses import dataclass

from ...interfaces.analysis import AnalyzedToken


_WORD_RE = re.compile(r"\w+")
_NON_SPACE_RE = re.compile(r"\S+")


def _tokens(pattern: re.Pattern[str], text: str, *, lowercase: bool) -> list[AnalyzedToken]:
    out: list[AnalyzedToken] = []
    for pos, m in enumerate(pattern.finditer(text or "")):
        term = m.group(0).lower() if lowercase else m.group(0)
        out.append(AnalyzedToken(term=term, position=pos, start_offset=m.start(), end_offset=m.end()))
    return out


@dataclass(frozen=True)
class StandardAnalyzer:
    """Word characters, lowercased (close enough to a standard analyzer for local/dev use)."""

    name: str = "standard"

    def analyze(self, text: str) -> list[AnalyzedToken]:
        return _tokens(_WORD_RE, text, lowercase=True)


@dataclass(frozen=True)
class WhitespaceAnalyzer:
    name: str = "whitespace"

    def analyze(self, text: str) -> list[AnalyzedToken]:
        return _tokens(_NON_SPACE_RE, text, lowercase=False)


@dataclass(frozen=True)
class KeywordAnalyzer:
    """The whole value is one token."""

    name: str = "keyword"

    def analyze(self, text: str) -> list[AnalyzedToken]:
        if not text:
            return []
        return [AnalyzedToken(term=text, position=0, start_offset=0, end_offset=len(text))]
