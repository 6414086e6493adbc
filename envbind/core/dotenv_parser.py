"""
===============================================================================
Fallback File Parser (.env syntax)
===============================================================================

SUMMARY:
--------
Turns fallback file text into an ordered KEY -> value mapping of strings.
The mapping is only ever used as an in-memory lookup by the resolver; it is
never written into os.environ.

WORKING & METHODOLOGY:
----------------------
Line oriented:
- Surrounding whitespace is trimmed; blank lines and "#" lines are skipped.
- The line is split at the first "="; lines without "=" are skipped.
- Key: trimmed, leading "export " removed, trimmed again. Empty -> error.
- Value: trimmed, inline comment stripped, one layer of matching quotes
  removed. No escape sequences are interpreted.
- Later assignments of the same key overwrite earlier ones.

INLINE COMMENTS:
----------------
A "#" outside single and double quotes starts a comment when it is the first
character of the value or follows whitespace. "a#b" keeps its hash.
A single quote only toggles while outside double quotes and vice versa.
Unbalanced quotes are kept literally.

INPUTS:
-------
- path to the fallback file, or already-read text

OUTPUTS:
--------
- read-only Mapping[str, str] in file order

ERRORS:
-------
- FallbackFileError: file missing, unreadable or not decodable
- FallbackParseError: empty key (whole parse aborted)
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

from envbind.config.constants import (
    ASSIGNMENT_CHAR,
    COMMENT_CHAR,
    DOUBLE_QUOTE,
    EXPORT_PREFIX,
    QUOTE_CHARS,
    SINGLE_QUOTE,
)
from envbind.config.settings import get_settings
from envbind.core.exceptions import FallbackFileError, FallbackParseError

logger = logging.getLogger(__name__)

FallbackMapping = Mapping[str, str]


def strip_inline_comment(value: str) -> str:
    """
    Cut an unquoted inline comment off an already trimmed value.

    Examples:
        >>> strip_inline_comment("bar # note")
        'bar'
        >>> strip_inline_comment('"abc #123"')
        '"abc #123"'
        >>> strip_inline_comment("a#b")
        'a#b'
    """
    in_single = False
    in_double = False

    for i, char in enumerate(value):
        if char == SINGLE_QUOTE:
            if not in_double:
                in_single = not in_single
        elif char == DOUBLE_QUOTE:
            if not in_single:
                in_double = not in_double
        elif char == COMMENT_CHAR:
            if in_single or in_double:
                continue
            if i == 0:
                return ""
            if value[i - 1].isspace():
                return value[:i].rstrip()

    return value.strip()


def unquote(value: str) -> str:
    """Remove one layer of matching single or double quotes."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in QUOTE_CHARS:
        return value[1:-1]
    return value


def _parse_key(raw_key: str) -> str:
    key = raw_key.strip()
    if key.startswith(EXPORT_PREFIX):
        key = key[len(EXPORT_PREFIX):]
    return key.strip()


def parse_dotenv_text(text: str, source: Optional[str] = None) -> FallbackMapping:
    """
    Parse fallback file content.

    Args:
        text: Whole file content
        source: Path shown in error context (optional)

    Returns:
        Read-only mapping of key -> value, in first-seen key order

    Raises:
        FallbackParseError: a line has an empty key
    """
    values: Dict[str, str] = {}

    for line_number, raw_line in enumerate(text.split("\n"), start=1):
        line = raw_line.strip()

        if not line or line.startswith(COMMENT_CHAR):
            continue

        raw_key, sep, raw_value = line.partition(ASSIGNMENT_CHAR)
        if not sep:
            logger.debug(f"⊘ Skipping line {line_number}: no '{ASSIGNMENT_CHAR}'")
            continue

        key = _parse_key(raw_key)
        if not key:
            raise FallbackParseError(
                f"invalid fallback file line {line_number}: {line!r}",
                context={"line": line, "line_number": line_number, "path": source},
            )

        value = strip_inline_comment(raw_value.strip())
        values[key] = unquote(value)

    return MappingProxyType(values)


def parse_dotenv(
    path: Union[str, Path],
    encoding: Optional[str] = None,
) -> FallbackMapping:
    """
    Read and parse a fallback file.

    The file is read completely and closed before parsing starts.

    Args:
        path: Fallback file path
        encoding: Text encoding (default: ENVBIND_FALLBACK_ENCODING)

    Returns:
        Read-only mapping of key -> value

    Raises:
        FallbackFileError: the file cannot be opened, read or decoded
        FallbackParseError: a line has an empty key
    """
    file_path = Path(path)
    encoding = encoding or get_settings().fallback_encoding

    try:
        with open(file_path, "r", encoding=encoding) as f:
            text = f.read()
    except (OSError, UnicodeDecodeError, LookupError) as e:
        logger.debug(f"⊘ Failed to read fallback file {file_path}: {e}")
        raise FallbackFileError(
            f"cannot read fallback file {str(file_path)!r}: {e}",
            context={"path": str(file_path)},
        ) from e

    values = parse_dotenv_text(text, source=str(file_path))
    logger.debug(f"✓ Parsed fallback file {file_path}: {len(values)} keys")
    return values
