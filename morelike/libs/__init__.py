"""Collaborator interfaces, provider registry, factories and reference providers."""
from .registry import (
    ProviderAlreadyRegisteredError,
    ProviderNotFoundError,
    ProviderRegistry,
    ProviderRegistryError,
)

__all__ = [
    "ProviderRegistry",
    "ProviderRegistryError",
    "ProviderAlreadyRegisteredError",
    "ProviderNotFoundError",
]
