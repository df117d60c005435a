from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .models import Settings


def _resolve_path(root: Path, p: Path) -> Path:
    return p if p.is_absolute() else (root / p).resolve()


def load_yaml_mapping(p: Path) -> dict[str, Any]:
    with p.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise TypeError("settings root must be a mapping")
    return raw


def load_settings(path: str | Path) -> Settings:
    """Load `config/settings.yaml`; relative paths resolve against the repo root."""
    p = Path(path).expanduser().resolve()
    root = p.parent.parent  # .../config/settings.yaml -> repo root

    s = Settings.from_dict(load_yaml_mapping(p))
    s.paths.logs_dir = _resolve_path(root, s.paths.logs_dir)
    return s


def default_settings_path() -> Path:
    # .../morelike/core/strategy/loader.py -> repo root
    return Path(__file__).resolve().parents[3] / "config" / "settings.yaml"
