"""
================================================================================
HELPERS - Common Utility Functions
================================================================================

PURPOSE:
--------
Provide common helper utilities:
  - Time measurement
  - Value masking for log output
  - Fallback file discovery

FUNCTIONS:
  - measure_time: Context manager for measuring execution time
  - mask_value: Hide secret values before they reach a log line
  - find_fallback_file: Locate a fallback file upward from the working dir

================================================================================
"""

import logging
import time
from contextlib import contextmanager
from typing import Optional

from dotenv import find_dotenv

from envbind.config.constants import MASKED_VALUE

logger = logging.getLogger(__name__)


@contextmanager
def measure_time(operation_name: str):
    """
    Context manager to measure execution time.

    Usage:
        with measure_time("config load"):
            # do something
            pass
        # Logs: "✅ config load completed in 1.5ms"

    Args:
        operation_name: Name of operation being measured
    """
    start_time = time.perf_counter()
    logger.debug(f"⏱️  Starting: {operation_name}")

    try:
        yield
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(f"✅ {operation_name} completed in {duration_ms:.1f}ms")


def mask_value(value: Optional[str], secret: bool) -> Optional[str]:
    """
    Return value unchanged, or a fixed mask when it is secret.

    Empty and missing values are returned as-is so logs still show whether
    a secret was set at all.

    Examples:
        >>> mask_value("hunter2", secret=True)
        '***'
        >>> mask_value("8080", secret=False)
        '8080'
    """
    if secret and value:
        return MASKED_VALUE
    return value


def find_fallback_file(filename: str) -> Optional[str]:
    """
    Search for a fallback file from the current working directory upward.

    Only locates the file; nothing is loaded into os.environ.

    Returns:
        Absolute path of the first match, or None
    """
    path = find_dotenv(filename=filename, raise_error_if_not_found=False, usecwd=True)
    if not path:
        logger.debug(f"⊘ No {filename} found above the working directory")
        return None
    logger.debug(f"✓ Discovered fallback file: {path}")
    return path
