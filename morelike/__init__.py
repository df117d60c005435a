"""Document-similarity query building and term-statistics vectorizing."""
from .core.items import DocumentItem, TextItem, VersionType
from .core.mlt import MatchNoDocsQuery, MoreLikeThisQueryBuilder, QueryContext, SimilarityQuery, parse_query
from .errors import (
    AmbiguousTypeError,
    CodecError,
    ConfigError,
    MoreLikeThisError,
    UnsupportedFieldError,
    UnsupportedParameterError,
    ValidationError,
)
from .vectorize import SparseVector, Term, ValueOption, Vectorizer

__version__ = "0.1.0"

__all__ = [
    "DocumentItem",
    "TextItem",
    "VersionType",
    "MatchNoDocsQuery",
    "MoreLikeThisQueryBuilder",
    "QueryContext",
    "SimilarityQuery",
    "parse_query",
    "AmbiguousTypeError",
    "CodecError",
    "ConfigError",
    "MoreLikeThisError",
    "UnsupportedFieldError",
    "UnsupportedParameterError",
    "ValidationError",
    "SparseVector",
    "Term",
    "ValueOption",
    "Vectorizer",
]
