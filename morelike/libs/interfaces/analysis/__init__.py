from .analyzer import AnalysisService, AnalyzedToken, Analyzer, TokenStreamProbe, UidEncoder

__all__ = ["AnalysisService", "AnalyzedToken", "Analyzer", "TokenStreamProbe", "UidEncoder"]
