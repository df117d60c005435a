from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ...libs.factories import make_analysis, make_term_vectors
from ...libs.providers import register_builtin_providers
from ...libs.registry import ProviderRegistry
from ..mlt.models import QueryContext
from .models import Settings


@dataclass
class Runtime:
    settings: Settings
    registry: ProviderRegistry
    analysis: Any
    term_vectors: Any

    def new_context(self) -> QueryContext:
        """A fresh context per build; named queries never leak between builds."""
        mlt = self.settings.mlt
        return QueryContext(
            index_name=mlt.index,
            query_types=mlt.types,
            analysis=self.analysis,
            probe=self.analysis,
            fetcher=self.term_vectors,
            default_field=mlt.default_field,
        )

    def providers_snapshot(self) -> dict[str, dict[str, Any]]:
        return {
            "analysis": {"class": type(self.analysis).__name__},
            "term_vectors": {"class": type(self.term_vectors).__name__},
        }


def build_runtime(settings: Settings, registry: ProviderRegistry | None = None) -> Runtime:
    if registry is None:
        registry = ProviderRegistry()
        register_builtin_providers(registry)

    cfg = settings.to_factory_cfg()
    analysis = make_analysis(cfg, registry, search_analyzer=settings.mlt.search_analyzer)
    term_vectors = make_term_vectors(cfg, registry, analysis=analysis)
    return Runtime(settings=settings, registry=registry, analysis=analysis, term_vectors=term_vectors)
