from __future__ import annotations

from typing import Any, Mapping

from ..registry import ProviderRegistry
from .common import create_provider


def make_analysis(cfg: Mapping[str, Any], registry: ProviderRegistry, *, search_analyzer: str | None = None) -> Any:
    defaults = {"default_analyzer": search_analyzer} if search_analyzer else None
    return create_provider(registry, kind="analysis", cfg=cfg, default_id="analysis.mapping", defaults=defaults)
