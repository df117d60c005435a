from .mlt import MltResult, MoreLikeThisRunner

__all__ = ["MltResult", "MoreLikeThisRunner"]
