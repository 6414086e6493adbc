"""
================================================================================
FILE: envbind/config/settings.py
================================================================================

PURPOSE:
    Settings of the loader itself, read from ENVBIND_* environment variables.
    Uses Pydantic BaseSettings for validation and type hints.

WORKFLOW:
    1. On first get_settings() call, read ENVBIND_* variables
    2. Validate (log level, encoding)
    3. Cache the instance (read-only afterwards)

INPUTS:
    - Environment variables:
        ENVBIND_LOG_LEVEL=DEBUG
        ENVBIND_LOG_VALUES=true
        ENVBIND_FALLBACK_ENCODING=utf-8
        ENVBIND_FALLBACK_FILENAME=.env

OUTPUTS:
    - EnvBindSettings object

KEY FACTS:
    - No env_file here: the loader never reads its own settings from a
      fallback file, and never calls load_dotenv (os.environ stays untouched)
    - reset_settings() exists for tests
"""

from __future__ import annotations

import codecs
import logging
from typing import Any, Dict, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from envbind.config.constants import (
    DEFAULT_FALLBACK_ENCODING,
    DEFAULT_FALLBACK_FILENAME,
    SETTINGS_ENV_PREFIX,
)

logger = logging.getLogger(__name__)


class EnvBindSettings(BaseSettings):
    """
    Loader settings read from ENVBIND_* environment variables.
    """

    model_config = SettingsConfigDict(
        env_prefix=SETTINGS_ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================================================
    # LOGGING
    # ========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level used by configure_logging()",
    )

    log_values: bool = Field(
        default=False,
        description="Include resolved non-secret values in DEBUG logs",
    )

    # ========================================================================
    # FALLBACK FILE
    # ========================================================================

    fallback_encoding: str = Field(
        default=DEFAULT_FALLBACK_ENCODING,
        description="Text encoding of the fallback file",
    )

    fallback_filename: str = Field(
        default=DEFAULT_FALLBACK_FILENAME,
        description="File name searched for when fallback discovery is enabled",
    )

    # ========================================================================
    # VALIDATORS
    # ========================================================================

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("fallback_encoding")
    @classmethod
    def _validate_encoding(cls, v: str) -> str:
        """Reject encodings Python does not know."""
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {v}") from e
        return v

    @field_validator("fallback_filename")
    @classmethod
    def _validate_filename(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Fallback filename must be non-empty")
        return v

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


# ============================================================================
# SINGLETON PATTERN - Global Settings Instance
# ============================================================================

_settings_instance: Optional[EnvBindSettings] = None


def get_settings() -> EnvBindSettings:
    """
    Get or create the global EnvBindSettings instance (singleton).

    Returns:
        EnvBindSettings: cached loader settings

    Example:
        settings = get_settings()
        encoding = settings.fallback_encoding
    """
    global _settings_instance

    if _settings_instance is None:
        _settings_instance = EnvBindSettings()
        logger.debug(f"🔧 Loader settings initialized: {_settings_instance.to_dict()}")

    return _settings_instance


def reset_settings() -> None:
    """Reset settings instance (for testing purposes)."""
    global _settings_instance
    _settings_instance = None
    logger.debug("Settings reset for testing")
