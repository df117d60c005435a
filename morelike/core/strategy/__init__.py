"""Settings loading and provider wiring."""
from .loader import default_settings_path, load_settings
from .models import MltSettings, PathsSettings, Settings
from .runtime import Runtime, build_runtime

__all__ = [
    "MltSettings",
    "PathsSettings",
    "Settings",
    "Runtime",
    "build_runtime",
    "default_settings_path",
    "load_settings",
]
