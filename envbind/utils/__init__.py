"""
================================================================================
UTILS PACKAGE - Utility Functions and Helpers
================================================================================

Modules:
  - helpers: timing, value masking, fallback file discovery
  - logging_setup: console handler for the loader's log records

USAGE:
------
    from envbind.utils import configure_logging, measure_time

    configure_logging("DEBUG")

    with measure_time("operation"):
        pass

================================================================================
"""

from .helpers import (
    measure_time,
    mask_value,
    find_fallback_file,
)

from .logging_setup import configure_logging

__all__ = [
    "measure_time",
    "mask_value",
    "find_fallback_file",
    "configure_logging",
]
