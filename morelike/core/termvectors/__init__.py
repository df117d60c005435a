"""Term statistics, field handles and the term-vectors response."""
from .models import (
    EMPTY_FIELDS,
    NOT_REQUESTED,
    FieldStatistics,
    FieldTerms,
    TermEntry,
    TermStatistics,
    TermVectorFields,
    Token,
)
from .response import TermVectorsResponse

__all__ = [
    "EMPTY_FIELDS",
    "NOT_REQUESTED",
    "FieldStatistics",
    "FieldTerms",
    "TermEntry",
    "TermStatistics",
    "TermVectorFields",
    "Token",
    "TermVectorsResponse",
]
