# Settings layer
"""
================================================================================
FILE: envbind/config/__init__.py
================================================================================

PURPOSE:
    Package initialization for the loader's own configuration. Exports the
    settings class, its singleton accessors and the constants module.

USAGE:
    from envbind.config import get_settings

    settings = get_settings()
    encoding = settings.fallback_encoding
"""

from envbind.config import constants
from envbind.config.settings import EnvBindSettings, get_settings, reset_settings

__all__ = ["EnvBindSettings", "get_settings", "reset_settings", "constants"]
