from __future__ import annotations

from ..registry import ProviderRegistry
from .analysis.mapping import MappingAnalysisService
from .termvectors.in_memory import InMemoryTermVectorsService


def register_builtin_providers(registry: ProviderRegistry) -> None:
    """Register default providers for local/dev runs."""

    registry.register("analysis", "analysis.mapping", MappingAnalysisService)
    registry.register("term_vectors", "term_vectors.in_memory", InMemoryTermVectorsService)
