"""
================================================================================
FILE: envbind/config/constants.py
================================================================================

PURPOSE:
    Loader-wide constants. Literal values shared by the fallback file parser,
    the coercer and the logging helpers. Prevents magic strings.

WORKFLOW:
    1. Define all constants (no computation, just values)
    2. Organize by category
    3. Use throughout the package: from envbind.config import constants
    4. Never modify constants at runtime

IMPORTS:
    - None (only builtins)

CONSTANT CATEGORIES:
    1. Fallback file syntax
       - COMMENT_CHAR: "#"
       - EXPORT_PREFIX: "export "
       - QUOTE_CHARS: double and single quote
    2. Coercion literals
       - BOOL_TRUE_LITERALS / BOOL_FALSE_LITERALS
       - SUPPORTED_INT_BITS: 8, 16, 32, 64
       - DURATION_UNITS_NS: unit suffix → nanoseconds
       - LIST_SEPARATOR: ","
    3. Defaults
       - DEFAULT_FALLBACK_FILENAME: ".env"
       - DEFAULT_FALLBACK_ENCODING: "utf-8"
       - SETTINGS_ENV_PREFIX: "ENVBIND_"
    4. Logging
       - LOG_FORMAT, MASKED_VALUE

KEY FACTS:
    - No imports from other envbind modules (prevent circular deps)
"""

# ================================================================================
# FALLBACK FILE SYNTAX
# ================================================================================

COMMENT_CHAR = "#"
ASSIGNMENT_CHAR = "="
EXPORT_PREFIX = "export "
SINGLE_QUOTE = "'"
DOUBLE_QUOTE = '"'
QUOTE_CHARS = (DOUBLE_QUOTE, SINGLE_QUOTE)

# ================================================================================
# COERCION LITERALS
# ================================================================================

# Compared case-insensitively
BOOL_TRUE_LITERALS = frozenset({"1", "t", "true"})
BOOL_FALSE_LITERALS = frozenset({"0", "f", "false"})

SUPPORTED_INT_BITS = (8, 16, 32, 64)
DEFAULT_INT_BITS = 64

# Unit suffix → nanoseconds. Longest suffixes must be matched first.
DURATION_UNITS_NS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

LIST_SEPARATOR = ","

# ================================================================================
# DEFAULTS
# ================================================================================

DEFAULT_FALLBACK_FILENAME = ".env"
DEFAULT_FALLBACK_ENCODING = "utf-8"
SETTINGS_ENV_PREFIX = "ENVBIND_"

# ================================================================================
# LOGGING
# ================================================================================

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
MASKED_VALUE = "***"
