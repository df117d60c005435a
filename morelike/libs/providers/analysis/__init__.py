from .mapping import CHARACTER_TYPES, MappingAnalysisService, builtin_analyzers
from .simple import KeywordAnalyzer, StandardAnalyzer, WhitespaceAnalyzer

__all__ = [
    "CHARACTER_TYPES",
    "MappingAnalysisService",
    "builtin_analyzers",
    "KeywordAnalyzer",
    "StandardAnalyzer",
    "WhitespaceAnalyzer",
]
