from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from ..mlt.models import DEFAULT_FIELD


def _as_path(v: Any, default: Path) -> Path:
    if v is None:
        return default
    if isinstance(v, Path):
        return v
    if isinstance(v, str):
        return Path(v)
    raise TypeError(f"expected path-like value, got {type(v).__name__}")


def _as_str(name: str, v: Any, default: str) -> str:
    if v is None:
        return default
    if not isinstance(v, str):
        raise TypeError(f"{name} must be str, got {type(v).__name__}")
    return v


def _as_mapping(name: str, v: Any) -> Mapping[str, Any] | None:
    if v is not None and not isinstance(v, Mapping):
        raise TypeError(f"{name} must be mapping, got {type(v).__name__}")
    return v


@dataclass
class PathsSettings:
    logs_dir: Path = Path("logs")

    @classmethod
    def from_dict(cls, d: Mapping[str, Any] | None) -> "PathsSettings":
        d = d or {}
        return cls(logs_dir=_as_path(d.get("logs_dir"), cls.logs_dir))


@dataclass
class MltSettings:
    """Query-time defaults a build captures in its QueryContext."""

    index: str = "default"
    types: tuple[str, ...] = ("_doc",)
    default_field: str = DEFAULT_FIELD
    search_analyzer: str = "standard"

    @classmethod
    def from_dict(cls, d: Mapping[str, Any] | None) -> "MltSettings":
        d = d or {}
        types = d.get("types", cls.types)
        if isinstance(types, str):
            types = [types]
        if not isinstance(types, (list, tuple)) or not all(isinstance(t, str) for t in types):
            raise TypeError("types must be a list of str")
        return cls(
            index=_as_str("index", d.get("index"), cls.index),
            types=tuple(types),
            default_field=_as_str("default_field", d.get("default_field"), cls.default_field),
            search_analyzer=_as_str("search_analyzer", d.get("search_analyzer"), cls.search_analyzer),
        )


@dataclass
class Settings:
    paths: PathsSettings = field(default_factory=PathsSettings)
    mlt: MltSettings = field(default_factory=MltSettings)
    providers: dict[str, Any] = field(default_factory=dict)

    # Raw mapping as loaded; must stay JSON-serializable.
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None) -> "Settings":
        raw = dict(raw or {})
        providers = _as_mapping("providers", raw.get("providers")) or {}
        return cls(
            paths=PathsSettings.from_dict(_as_mapping("paths", raw.get("paths"))),
            mlt=MltSettings.from_dict(_as_mapping("mlt", raw.get("mlt"))),
            providers={k: dict(v) if isinstance(v, Mapping) else v for k, v in providers.items()},
            raw=raw,
        )

    def to_factory_cfg(self) -> dict[str, Any]:
        return {"providers": self.providers}
