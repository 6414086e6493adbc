"""
===============================================================================
Value Resolver - environment -> fallback file -> default
===============================================================================

SUMMARY:
--------
Decides the effective raw string for one field:

1. the live environment, verbatim, including an empty string
2. the parsed fallback file
3. the descriptor's default literal

A key that is set to "" in the environment is present and wins over both the
fallback file and the default. Only when no source has the key is the value
reported as absent.
"""

import os
from enum import Enum
from typing import Mapping, NamedTuple, Optional

from envbind.core.descriptors import FieldDescriptor


class ValueSource(str, Enum):
    """Where a resolved value came from."""
    ENVIRONMENT = "environment"
    FALLBACK_FILE = "fallback_file"
    DEFAULT = "default"
    NONE = "none"


class ResolvedValue(NamedTuple):
    raw: str
    present: bool
    source: ValueSource = ValueSource.NONE


ABSENT = ResolvedValue("", False, ValueSource.NONE)


def resolve_value(
    descriptor: FieldDescriptor,
    fallback: Optional[Mapping[str, str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ResolvedValue:
    """
    Resolve one field's raw value.

    Args:
        descriptor: Field to resolve
        fallback: Parsed fallback file, if one was loaded
        environ: Environment to read (default: os.environ, read only)

    Returns:
        ResolvedValue(raw, present, source)
    """
    env = os.environ if environ is None else environ
    key = descriptor.key

    if key in env:
        return ResolvedValue(env[key], True, ValueSource.ENVIRONMENT)

    if fallback is not None and key in fallback:
        return ResolvedValue(fallback[key], True, ValueSource.FALLBACK_FILE)

    if descriptor.default is not None:
        return ResolvedValue(descriptor.default, True, ValueSource.DEFAULT)

    return ABSENT
