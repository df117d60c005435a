from __future__ import annotations

from typing import Any, Mapping

from ..registry import ProviderRegistry
from .common import create_provider


def make_term_vectors(cfg: Mapping[str, Any], registry: ProviderRegistry, *, analysis: Any) -> Any:
    """The term-vectors service analyzes with the same analysis service the query uses."""
    return create_provider(
        registry, kind="term_vectors", cfg=cfg, default_id="term_vectors.in_memory", analysis=analysis
    )
