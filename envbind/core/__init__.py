"""
================================================================================
FILE: envbind/core/__init__.py
================================================================================

PURPOSE:
    Package initialization for the core layer. Re-exports the parser,
    resolver, coercer, descriptor builders and the binding engine.

KEY FACTS:
    - Minimal file (just re-exports)
    - Import order follows the dependency chain, leaf modules first
"""

# ================================================================================
# IMPORTS & EXPORTS
# ================================================================================

from envbind.core.exceptions import (
    ConfigLoadError,
    FallbackFileError,
    FallbackParseError,
    ValidationError,
    CoercionError,
    BindingTypeError,
    UnsupportedKindError,
)
from envbind.core.kinds import (
    TargetKind,
    StringKind,
    IntKind,
    BoolKind,
    DurationKind,
    StringListKind,
    OptionalKind,
    UnsupportedKind,
)
from envbind.core.dotenv_parser import parse_dotenv, parse_dotenv_text
from envbind.core.descriptors import FieldDescriptor, env_field, fields_from_dataclass
from envbind.core.resolver import ResolvedValue, ValueSource, resolve_value
from envbind.core.coercer import coerce_value, is_supported_kind
from envbind.core.binder import BoundField, LoadOptions, LoadReport, load
from envbind.core.registry import FieldRegistry

__all__ = [
    "ConfigLoadError",
    "FallbackFileError",
    "FallbackParseError",
    "ValidationError",
    "CoercionError",
    "BindingTypeError",
    "UnsupportedKindError",
    "TargetKind",
    "StringKind",
    "IntKind",
    "BoolKind",
    "DurationKind",
    "StringListKind",
    "OptionalKind",
    "UnsupportedKind",
    "parse_dotenv",
    "parse_dotenv_text",
    "FieldDescriptor",
    "env_field",
    "fields_from_dataclass",
    "ResolvedValue",
    "ValueSource",
    "resolve_value",
    "coerce_value",
    "is_supported_kind",
    "BoundField",
    "LoadOptions",
    "LoadReport",
    "load",
    "FieldRegistry",
]
