"""
===============================================================================
Target Kinds - closed set of field types the coercer understands
===============================================================================

SUMMARY:
--------
Each configuration field declares what its raw string turns into:

    StringKind()                 -> str (unchanged)
    IntKind(bits=8|16|32|64)     -> int, range-checked to the bit width
    BoolKind()                   -> bool
    DurationKind()               -> datetime.timedelta
    StringListKind()             -> List[str]
    OptionalKind(inner=...)      -> Optional[inner], left None when absent

Kinds are frozen pydantic models, so descriptors can be compared, hashed and
printed. The coercer dispatches on the concrete class; any other TargetKind
subclass (including UnsupportedKind, produced for unknown shorthands and
annotations) is rejected as unsupported.
"""

from datetime import timedelta
from typing import Any, ClassVar, Dict

from pydantic import BaseModel, ConfigDict, field_validator

from envbind.config.constants import DEFAULT_INT_BITS, SUPPORTED_INT_BITS


class TargetKind(BaseModel):
    """Base class of all target kinds."""

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[str] = "abstract"

    def describe(self) -> str:
        return self.kind


class StringKind(TargetKind):
    kind: ClassVar[str] = "string"


class IntKind(TargetKind):
    kind: ClassVar[str] = "int"

    bits: int = DEFAULT_INT_BITS

    @field_validator("bits")
    @classmethod
    def _validate_bits(cls, v: int) -> int:
        if v not in SUPPORTED_INT_BITS:
            raise ValueError(f"bits must be one of {SUPPORTED_INT_BITS}, got {v}")
        return v

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1))

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1

    def describe(self) -> str:
        return f"int{self.bits}"


class BoolKind(TargetKind):
    kind: ClassVar[str] = "bool"


class DurationKind(TargetKind):
    kind: ClassVar[str] = "duration"


class StringListKind(TargetKind):
    kind: ClassVar[str] = "string_list"


class OptionalKind(TargetKind):
    kind: ClassVar[str] = "optional"

    inner: TargetKind

    def describe(self) -> str:
        return f"optional[{self.inner.describe()}]"


class UnsupportedKind(TargetKind):
    """Placeholder for a type no rule exists for; binding it always fails."""

    kind: ClassVar[str] = "unsupported"

    annotation: str

    def describe(self) -> str:
        return self.annotation


# Python types accepted in place of a kind instance
_SHORTHANDS: Dict[Any, TargetKind] = {
    str: StringKind(),
    int: IntKind(),
    bool: BoolKind(),
    timedelta: DurationKind(),
    list: StringListKind(),
}


def _type_name(value: Any) -> str:
    return getattr(value, "__name__", None) or repr(value)


def as_kind(value: Any) -> TargetKind:
    """
    Normalize a kind shorthand (str, int, bool, timedelta, list) to a
    TargetKind instance. Anything unknown becomes an UnsupportedKind.
    """
    if isinstance(value, TargetKind):
        return value
    try:
        kind = _SHORTHANDS.get(value)
    except TypeError:
        kind = None
    if kind is None:
        return UnsupportedKind(annotation=_type_name(value))
    return kind
