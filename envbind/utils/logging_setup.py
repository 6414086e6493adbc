# ============================================================================
# Logging setup - console handler for the loader's own log records
# ============================================================================

"""
Attach a single stream handler to the "envbind" logger.

The library itself only creates loggers; applications that want to see what
the loader resolved (and from where) call configure_logging() once at startup.
"""

import logging
from typing import Optional

from envbind.config.constants import LOG_FORMAT
from envbind.config.settings import get_settings

LOGGER_NAME = "envbind"

# ============================================================================
# CUSTOM LOGGING HANDLER
# ============================================================================

class EnvBindStreamHandler(logging.StreamHandler):
    """Marker subclass so repeated setup calls can find the installed handler."""


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Attach the envbind console handler (idempotent).

    Args:
        level: Log level name; defaults to ENVBIND_LOG_LEVEL

    Returns:
        The configured "envbind" logger
    """
    resolved_level = (level or get_settings().log_level).upper()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved_level)

    for handler in logger.handlers:
        if isinstance(handler, EnvBindStreamHandler):
            handler.setLevel(resolved_level)
            return logger

    handler = EnvBindStreamHandler()
    handler.setLevel(resolved_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
