from .fetcher import TermVectorsFetcher

__all__ = ["TermVectorsFetcher"]
