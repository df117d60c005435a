from __future__ import annotations

from typing import Any, Mapping

from ..registry import ProviderRegistry


def extract_provider_cfg(cfg: Mapping[str, Any], kind: str) -> tuple[str, dict[str, Any]] | None:
    """`providers.<kind>` as (provider_id, params); accepts a bare id or a mapping."""
    providers = cfg.get("providers")
    if not isinstance(providers, Mapping) or kind not in providers:
        return None

    value = providers[kind]
    if isinstance(value, str):
        return value, {}
    if isinstance(value, Mapping):
        provider_id = value.get("provider_id") or value.get("id")
        if not provider_id:
            raise ValueError(f"missing provider_id for kind={kind}")
        params = value.get("params")
        if params is None:
            params = {k: v for k, v in value.items() if k not in {"provider_id", "id"}}
        if not isinstance(params, Mapping):
            raise TypeError(f"params for kind={kind} must be a mapping")
        return str(provider_id), dict(params)
    raise TypeError(f"invalid provider config for kind={kind!r}")


def create_provider(
    registry: ProviderRegistry,
    *,
    kind: str,
    cfg: Mapping[str, Any],
    default_id: str | None = None,
    defaults: Mapping[str, Any] | None = None,
    **extra: Any,
) -> Any:
    """Build `providers.<kind>`; `defaults` fill params the config leaves out, `extra` is always passed."""
    found = extract_provider_cfg(cfg, kind)
    if found is None:
        if default_id is None:
            raise ValueError(f"missing provider config for kind={kind}")
        found = (default_id, {})
    provider_id, params = found
    merged = {**(defaults or {}), **params, **extra}
    return registry.create(kind, provider_id, **merged)
