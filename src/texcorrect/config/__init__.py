"""
Typed configuration package for texcorrect.

This package exposes:
- ``Settings`` / ``get_settings``: environment-driven values (pydantic-settings).
- ``load_runtime_config``: loader merging settings with an optional YAML overlay.
"""

from .settings import (
    Settings,
    get_settings,
    BrowserChoice,
    LanguageChoice,
)
from .runtime import RuntimeConfig, load_runtime_config

__all__ = [
    "Settings",
    "get_settings",
    "BrowserChoice",
    "LanguageChoice",
    "RuntimeConfig",
    "load_runtime_config",
]
