"""More-like-this query definition, parsing and building."""
from .builder import MoreLikeThisQueryBuilder
from .models import MatchNoDocsQuery, QueryContext, ResolvedRequest, SimilarityQuery, create_uid
from .parser import parse_more_like_this, parse_query
from .pipeline import SimilarityPipeline
from .resolver import resolve_items

__all__ = [
    "MoreLikeThisQueryBuilder",
    "MatchNoDocsQuery",
    "QueryContext",
    "ResolvedRequest",
    "SimilarityQuery",
    "SimilarityPipeline",
    "create_uid",
    "parse_more_like_this",
    "parse_query",
    "resolve_items",
]
