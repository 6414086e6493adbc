"""
===============================================================================
Type Coercer - raw configuration strings to typed values
===============================================================================

SUMMARY:
--------
coerce_value(raw, kind) converts one resolved string into the Python value of
the field's declared kind.

RULES:
------
- string:       identity, no trimming
- int{bits}:    base-10 signed integer, optional sign, digits only,
                must fit in `bits` bits
- bool:         1/t/true and 0/f/false, case-insensitive
- duration:     compound "<number><unit>" sequence, e.g. "1h30m", "1.5s",
                "-250ms"; units ns, us (µs), ms, s, m, h; bare "0" allowed
- string_list:  split on ",", strip each segment, keep empty segments
- optional[T]:  coerced with T's rule

ERRORS:
-------
- CoercionError: the value does not parse for the kind (no key attached,
  the binding engine adds it)
- UnsupportedKindError: the kind is not one of the above
"""

import re
from datetime import timedelta
from typing import Any, List

from envbind.config.constants import (
    BOOL_FALSE_LITERALS,
    BOOL_TRUE_LITERALS,
    DURATION_UNITS_NS,
    LIST_SEPARATOR,
)
from envbind.core.exceptions import CoercionError, UnsupportedKindError
from envbind.core.kinds import (
    BoolKind,
    DurationKind,
    IntKind,
    OptionalKind,
    StringKind,
    StringListKind,
    TargetKind,
)

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")

# Longest unit first so "ms" is not read as "m" followed by garbage
_UNIT_ALTERNATION = "|".join(
    re.escape(unit) for unit in sorted(DURATION_UNITS_NS, key=len, reverse=True)
)
_DURATION_TERM = re.compile(
    rf"(?P<whole>[0-9]*)(?:\.(?P<frac>[0-9]*))?(?P<unit>{_UNIT_ALTERNATION})"
)

_NS_PER_MICROSECOND = 1_000
# Durations are bounded like a signed 64-bit nanosecond count
_MAX_DURATION_NS = (1 << 63) - 1
# Digits of the widest supported integer; longer strings never reach int()
_MAX_INT_DIGITS = len(str(_MAX_DURATION_NS))
# Fraction digits beyond this are below nanosecond precision for every unit
_MAX_FRACTION_DIGITS = 18


def _significant_digits(digits: str) -> str:
    return digits.lstrip("0") or "0"


def parse_int(raw: str, kind: IntKind) -> int:
    if not _INT_PATTERN.fullmatch(raw):
        raise CoercionError(f"invalid integer {raw!r}")
    sign = "-" if raw[0] == "-" else ""
    digits = _significant_digits(raw.lstrip("+-"))
    if len(digits) > _MAX_INT_DIGITS:
        raise CoercionError(f"integer {raw!r} out of range for {kind.describe()}")
    value = int(sign + digits, 10)
    if value < kind.min_value or value > kind.max_value:
        raise CoercionError(f"integer {raw!r} out of range for {kind.describe()}")
    return value


def parse_bool(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in BOOL_TRUE_LITERALS:
        return True
    if lowered in BOOL_FALSE_LITERALS:
        return False
    raise CoercionError(f"invalid boolean {raw!r}")


def parse_duration(raw: str) -> timedelta:
    """
    Parse a compound duration expression.

    Examples:
        >>> parse_duration("5s")
        datetime.timedelta(seconds=5)
        >>> parse_duration("1h30m")
        datetime.timedelta(seconds=5400)
    """
    text = raw
    negative = False
    if text[:1] in ("+", "-"):
        negative = text[0] == "-"
        text = text[1:]

    if text == "0":
        return timedelta(0)
    if not text:
        raise CoercionError(f"invalid duration {raw!r}")

    total_ns = 0
    pos = 0
    while pos < len(text):
        match = _DURATION_TERM.match(text, pos)
        if match is None:
            raise CoercionError(f"invalid duration {raw!r}")
        whole = match.group("whole")
        frac = match.group("frac") or ""
        if not whole and not frac:
            # "." or a bare unit carries no number
            raise CoercionError(f"invalid duration {raw!r}")

        whole = _significant_digits(whole)
        if len(whole) > _MAX_INT_DIGITS:
            raise CoercionError(f"duration {raw!r} out of range")
        frac = frac[:_MAX_FRACTION_DIGITS]

        unit_ns = DURATION_UNITS_NS[match.group("unit")]
        total_ns += int(whole) * unit_ns
        if frac:
            total_ns += int(frac) * unit_ns // (10 ** len(frac))
        pos = match.end()

    if total_ns > _MAX_DURATION_NS + (1 if negative else 0):
        raise CoercionError(f"duration {raw!r} out of range")

    # timedelta resolution is one microsecond, sub-microsecond parts truncate
    microseconds = total_ns // _NS_PER_MICROSECOND
    return timedelta(microseconds=-microseconds if negative else microseconds)


def parse_string_list(raw: str) -> List[str]:
    return [segment.strip() for segment in raw.split(LIST_SEPARATOR)]


def is_supported_kind(kind: Any) -> bool:
    """True when coerce_value() can handle this kind."""
    if isinstance(kind, OptionalKind):
        return not isinstance(kind.inner, OptionalKind) and is_supported_kind(kind.inner)
    return isinstance(
        kind, (StringKind, IntKind, BoolKind, DurationKind, StringListKind)
    )


def coerce_value(raw: str, kind: TargetKind) -> Any:
    """
    Convert a raw string to the value of the given kind.

    Args:
        raw: Resolved raw value (may be empty)
        kind: Declared target kind

    Returns:
        Typed value

    Raises:
        CoercionError: value does not parse
        UnsupportedKindError: kind is not supported
    """
    if isinstance(kind, OptionalKind):
        if isinstance(kind.inner, OptionalKind):
            raise UnsupportedKindError(
                f"unsupported field kind: {kind.describe()}",
                context={"kind": kind.describe()},
            )
        return coerce_value(raw, kind.inner)
    if isinstance(kind, StringKind):
        return raw
    if isinstance(kind, IntKind):
        return parse_int(raw, kind)
    if isinstance(kind, BoolKind):
        return parse_bool(raw)
    if isinstance(kind, DurationKind):
        return parse_duration(raw)
    if isinstance(kind, StringListKind):
        return parse_string_list(raw)

    described = kind.describe() if isinstance(kind, TargetKind) else type(kind).__name__
    raise UnsupportedKindError(
        f"unsupported field kind: {described}",
        context={"kind": described},
    )
