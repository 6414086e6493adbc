# envbind/__init__.py

"""
Bind environment variables, an optional .env fallback file and declared
defaults onto a typed configuration object.

This package contains:
- core: fallback file parser, resolver, coercer, descriptors, binding engine
- config: settings of the loader itself (ENVBIND_*) and constants
- utils: timing, masking, fallback discovery, logging setup
"""

from envbind.core import (
    ConfigLoadError,
    FallbackFileError,
    FallbackParseError,
    ValidationError,
    CoercionError,
    BindingTypeError,
    UnsupportedKindError,
    TargetKind,
    StringKind,
    IntKind,
    BoolKind,
    DurationKind,
    StringListKind,
    OptionalKind,
    parse_dotenv,
    parse_dotenv_text,
    FieldDescriptor,
    env_field,
    fields_from_dataclass,
    ValueSource,
    resolve_value,
    coerce_value,
    LoadOptions,
    LoadReport,
    load,
    FieldRegistry,
)
from envbind.utils import configure_logging

__version__ = "1.0.0"

__all__ = [
    "__version__",
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
    "parse_dotenv",
    "parse_dotenv_text",
    "FieldDescriptor",
    "env_field",
    "fields_from_dataclass",
    "ValueSource",
    "resolve_value",
    "coerce_value",
    "LoadOptions",
    "LoadReport",
    "load",
    "FieldRegistry",
    "configure_logging",
]
