from .in_memory import InMemoryTermVectorsService

__all__ = ["InMemoryTermVectorsService"]
