from __future__ import annotations

from typing import Any, Callable


class ProviderRegistryError(RuntimeError):
    pass


class ProviderAlreadyRegisteredError(ProviderRegistryError):
    pass


class ProviderNotFoundError(ProviderRegistryError):
    pass


class ProviderRegistry:
    """kind -> provider_id -> constructor."""

    def __init__(self) -> None:
        self._ctors: dict[str, dict[str, Callable[..., Any]]] = {}

    def register(self, kind: str, provider_id: str, ctor: Callable[..., Any]) -> None:
        if not kind or not isinstance(kind, str):
            raise ValueError("kind must be a non-empty string")
        if not provider_id or not isinstance(provider_id, str):
            raise ValueError("provider_id must be a non-empty string")
        if not callable(ctor):
            raise TypeError("ctor must be callable")

        by_kind = self._ctors.setdefault(kind, {})
        if provider_id in by_kind:
            raise ProviderAlreadyRegisteredError(f"{kind}:{provider_id} already registered")
        by_kind[provider_id] = ctor

    def has(self, kind: str, provider_id: str) -> bool:
        return provider_id in self._ctors.get(kind, {})

    def ids(self, kind: str) -> list[str]:
        return sorted(self._ctors.get(kind, {}))

    def get(self, kind: str, provider_id: str) -> Callable[..., Any]:
        try:
            return self._ctors[kind][provider_id]
        except KeyError as exc:
            raise ProviderNotFoundError(f"{kind}:{provider_id} not found") from exc

    def create(self, kind: str, provider_id: str, **kwargs: Any) -> Any:
        return self.get(kind, provider_id)(**kwargs)
