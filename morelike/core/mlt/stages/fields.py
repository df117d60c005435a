from __future__ import annotations

from typing import Sequence

from ....errors import ValidationError
from ....libs.interfaces.analysis import AnalysisService, Analyzer


def resolve_analyzer(analysis: AnalysisService, name: str | None) -> Analyzer:
    if name is None:
        return analysis.search_analyzer()
    analyzer = analysis.analyzer(name)
    if analyzer is None:
        raise ValidationError(f"analyzer [{name}] not found")
    return analyzer


def resolve_fields(fields: Sequence[str] | None, default_field: str) -> tuple[tuple[str, ...], bool]:
    """Returns (fields, use_default_field)."""
    if fields is None:
        return (default_field,), True
    return tuple(fields), False
