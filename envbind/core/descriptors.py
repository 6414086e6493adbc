"""
===============================================================================
Field Descriptors - what configuration exists and where it goes
===============================================================================

SUMMARY:
--------
A FieldDescriptor pairs one lookup key and its validation metadata with an
explicit write accessor for one attribute of the target object. The binding
engine only ever sees an ordered list of descriptors; it never inspects the
target's class.

BUILDERS:
---------
- env_field(): one descriptor, written with setattr unless a setter is given
- fields_from_dataclass(): descriptors from dataclass field metadata

    @dataclass
    class AppConfig:
        port: int = field(default=0, metadata={"env": "PORT", "default": "8080"})
        host: str = field(default="", metadata={"env": "HOST", "required": True})

Recognised metadata keys: env, default, required, allow_empty, secret, kind.
Fields without "env" and fields starting with "_" are ignored.
"""

import dataclasses
import logging
import typing
from datetime import timedelta
from types import UnionType
from typing import Any, Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from envbind.core.exceptions import BindingTypeError
from envbind.core.kinds import (
    BoolKind,
    DurationKind,
    IntKind,
    OptionalKind,
    StringKind,
    StringListKind,
    TargetKind,
    UnsupportedKind,
    as_kind,
)

logger = logging.getLogger(__name__)

Setter = Callable[[Any, Any], None]

_UNION_ORIGINS = (typing.Union, UnionType)


class FieldDescriptor(BaseModel):
    """
    Static binding metadata for one configuration field.

    Attributes:
        name: Attribute name on the target (also used in logs)
        key: Lookup name in the environment and the fallback file
        kind: Target kind the raw string is coerced into
        default: Literal used when neither source has the key
        required: Fail when no value resolves
        allow_empty: With required, accept an explicitly empty value
        secret: Mask the value in logs and error context
        setter: Explicit write accessor (target, value); setattr when None

    Constructing this model directly raises pydantic.ValidationError on bad
    input, which is unrelated to envbind.ValidationError. env_field() raises
    BindingTypeError instead.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    key: str
    kind: TargetKind = Field(default_factory=StringKind)
    default: Optional[str] = None
    required: bool = False
    allow_empty: bool = False
    secret: bool = False
    setter: Optional[Setter] = Field(default=None, repr=False)

    @field_validator("name", "key")
    @classmethod
    def _validate_non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must be a non-empty string")
        return v

    @field_validator("kind", mode="before")
    @classmethod
    def _normalize_kind(cls, v: Any) -> Any:
        return as_kind(v)

    def assign(self, target: Any, value: Any) -> None:
        """Write a coerced value into the target."""
        if self.setter is not None:
            self.setter(target, value)
        else:
            setattr(target, self.name, value)


def env_field(
    name: str,
    key: str,
    kind: Any = StringKind(),
    *,
    default: Optional[str] = None,
    required: bool = False,
    allow_empty: bool = False,
    secret: bool = False,
    setter: Optional[Setter] = None,
) -> FieldDescriptor:
    """
    Build a descriptor for one field.

    Args:
        name: Target attribute name
        key: Environment / fallback file key
        kind: TargetKind instance or shorthand (str, int, bool, timedelta, list)
        default: Literal default value (a string, coerced like any other value)
        required: Fail the load when nothing resolves
        allow_empty: Accept an explicitly empty value for a required field
        secret: Mask the value in logs and errors
        setter: Custom write accessor; defaults to setattr(target, name, value)

    Raises:
        BindingTypeError: empty name or key, or a malformed option

    Example:
        env_field("port", "PORT", IntKind(bits=32), default="8080")
    """
    try:
        return FieldDescriptor(
            name=name,
            key=key,
            kind=kind,
            default=default,
            required=required,
            allow_empty=allow_empty,
            secret=secret,
            setter=setter,
        )
    except PydanticValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        raise BindingTypeError(
            f"invalid field descriptor {name!r} ({key!r}): {', '.join(fields)}",
            context={"key": key, "field": name, "invalid": fields},
        ) from e


# ============================================================================
# DATACLASS DERIVE
# ============================================================================

def infer_kind(annotation: Any) -> TargetKind:
    """
    Map a type annotation to a target kind.

    str, int, bool, timedelta, List[str] and Optional[...] of those are
    supported; anything else becomes UnsupportedKind.
    """
    if annotation is str:
        return StringKind()
    if annotation is bool:
        return BoolKind()
    if annotation is int:
        return IntKind()
    if annotation is timedelta:
        return DurationKind()

    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)

    if origin is list and args == (str,):
        return StringListKind()

    if origin in _UNION_ORIGINS:
        non_none = [arg for arg in args if arg is not type(None)]
        if len(non_none) == 1 and len(args) == 2:
            return OptionalKind(inner=infer_kind(non_none[0]))

    return UnsupportedKind(annotation=str(annotation))


def fields_from_dataclass(cls: Any) -> List[FieldDescriptor]:
    """
    Derive descriptors from a dataclass, in field declaration order.

    Args:
        cls: Dataclass type (or instance)

    Returns:
        One descriptor per field carrying "env" metadata

    Raises:
        BindingTypeError: cls is not a dataclass, or metadata is malformed
    """
    if not dataclasses.is_dataclass(cls):
        raise BindingTypeError(
            f"expected a dataclass, got {type(cls).__name__}",
            context={"target_type": type(cls).__name__},
        )
    dataclass_type = cls if isinstance(cls, type) else type(cls)
    hints = typing.get_type_hints(dataclass_type)

    descriptors: List[FieldDescriptor] = []
    for dc_field in dataclasses.fields(dataclass_type):
        if dc_field.name.startswith("_"):
            continue

        metadata = dc_field.metadata
        key = metadata.get("env")
        if not key:
            continue

        default = metadata.get("default")
        if default is not None and not isinstance(default, str):
            raise BindingTypeError(
                f"default for {key} must be a string literal, got {type(default).__name__}",
                context={"key": key, "field": dc_field.name},
            )

        if "kind" in metadata:
            kind = as_kind(metadata["kind"])
        else:
            kind = infer_kind(hints.get(dc_field.name, dc_field.type))

        descriptors.append(
            env_field(
                dc_field.name,
                key,
                kind,
                default=default,
                required=bool(metadata.get("required", False)),
                allow_empty=bool(metadata.get("allow_empty", False)),
                secret=bool(metadata.get("secret", False)),
            )
        )

    logger.debug(
        f"✓ Derived {len(descriptors)} descriptors from {dataclass_type.__name__}"
    )
    return descriptors
