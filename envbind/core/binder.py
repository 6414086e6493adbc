"""
================================================================================
FILE: envbind/core/binder.py
================================================================================

PURPOSE:
    Binding engine. Resolves, validates, coerces and writes every declared
    configuration field into a target object, stopping at the first error.

WORKFLOW:
    1. Reject targets that cannot be written (None, classes, immutable values)
    2. Reject descriptors whose kind has no coercion rule
    3. Parse the fallback file once, if one is configured or discovered
    4. For each descriptor, in order:
       a. resolve (environment -> fallback file -> default)
       b. absent + required            -> ValidationError
       c. empty + required + !allow_empty -> ValidationError
       d. absent + optional            -> skip, target untouched
       e. coerce                        -> CoercionError on bad value
       f. write via the descriptor's setter
    5. Return a LoadReport describing where every value came from

KEY FACTS:
    - Fail fast: the first error is raised, fields written before it keep
      their values (no rollback)
    - os.environ is only read, never written
    - No shared mutable state: concurrent loads into different targets are safe

USAGE:
    report = load(cfg, [
        env_field("port", "PORT", IntKind(bits=32), default="8080"),
        env_field("host", "HOST", required=True),
    ], LoadOptions(fallback_path=".env"))
"""

import logging
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from envbind.config.settings import get_settings
from envbind.core.coercer import coerce_value, is_supported_kind
from envbind.core.descriptors import FieldDescriptor
from envbind.core.dotenv_parser import FallbackMapping, parse_dotenv
from envbind.core.exceptions import (
    BindingTypeError,
    CoercionError,
    ConfigLoadError,
    UnsupportedKindError,
    ValidationError,
)
from envbind.core.resolver import ValueSource, resolve_value
from envbind.utils.helpers import find_fallback_file, mask_value, measure_time

logger = logging.getLogger(__name__)

# Values of these types cannot carry configuration attributes
_IMMUTABLE_TARGET_TYPES = (str, bytes, bytearray, int, float, complex, tuple, frozenset)

# ============================================================================
# OPTIONS & REPORT
# ============================================================================

class LoadOptions(BaseModel):
    """
    Per-call loader options.

    Attributes:
        fallback_path: Fallback file to read (None or "" = no fallback file)
        discover_fallback: Search upward from the working directory for
            ENVBIND_FALLBACK_FILENAME when fallback_path is not set
        environ: Environment snapshot to resolve against (default: os.environ)
        encoding: Fallback file encoding (default: ENVBIND_FALLBACK_ENCODING)
    """

    model_config = ConfigDict(frozen=True)

    fallback_path: Optional[Union[str, Path]] = None
    discover_fallback: bool = False
    environ: Optional[Mapping[str, str]] = None
    encoding: Optional[str] = None


class BoundField(BaseModel):
    name: str
    key: str
    source: ValueSource


class LoadReport(BaseModel):
    """Outcome of a successful load."""

    fallback_path: Optional[str] = None
    bound: List[BoundField] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)

    def source_of(self, key: str) -> ValueSource:
        for item in self.bound:
            if item.key == key:
                return item.source
        return ValueSource.NONE

# ============================================================================
# CHECKS
# ============================================================================

def _check_target(target: Any) -> None:
    if target is None:
        raise BindingTypeError(
            "target must be a writable object, got None",
            context={"target_type": "NoneType"},
        )
    if isinstance(target, type) or isinstance(target, _IMMUTABLE_TARGET_TYPES):
        name = target.__name__ if isinstance(target, type) else type(target).__name__
        raise BindingTypeError(
            f"target must be a writable object instance, got {name}",
            context={"target_type": name},
        )


def _check_descriptors(descriptors: List[FieldDescriptor]) -> None:
    for descriptor in descriptors:
        if not isinstance(descriptor, FieldDescriptor):
            raise BindingTypeError(
                f"expected FieldDescriptor, got {type(descriptor).__name__}",
                context={"descriptor_type": type(descriptor).__name__},
            )
        if not is_supported_kind(descriptor.kind):
            raise UnsupportedKindError(
                f"unsupported field kind for {descriptor.key}: {descriptor.kind.describe()}",
                context={"key": descriptor.key, "kind": descriptor.kind.describe()},
            )


def _resolve_fallback_path(options: LoadOptions) -> Optional[str]:
    if options.fallback_path:
        return str(options.fallback_path)
    if options.discover_fallback:
        return find_fallback_file(get_settings().fallback_filename)
    return None

# ============================================================================
# BINDING
# ============================================================================

def _bind_field(
    target: Any,
    descriptor: FieldDescriptor,
    fallback: Optional[FallbackMapping],
    environ: Optional[Mapping[str, str]],
    report: LoadReport,
    log_values: bool,
) -> None:
    key = descriptor.key
    raw, present, source = resolve_value(descriptor, fallback, environ)

    if not present and descriptor.required:
        raise ValidationError(
            f"missing required value: {key}",
            context={"key": key, "reason": "missing_required"},
        )
    if present and raw == "" and descriptor.required and not descriptor.allow_empty:
        raise ValidationError(
            f"required value is empty: {key}",
            context={"key": key, "reason": "empty_required"},
        )
    if not present:
        logger.debug(f"⊘ {key}: not set, leaving {descriptor.name} untouched")
        report.skipped.append(key)
        return

    try:
        value = coerce_value(raw, descriptor.kind)
    except CoercionError as e:
        # the coercer's message quotes the raw value
        detail = f"expected {descriptor.kind.describe()}" if descriptor.secret else e.message
        raise CoercionError(
            f"invalid value for {key}: {detail}",
            context={
                "key": key,
                "value": mask_value(raw, descriptor.secret),
                "kind": descriptor.kind.describe(),
                "source": source.value,
            },
        ) from e

    try:
        descriptor.assign(target, value)
    except (AttributeError, TypeError) as e:
        raise BindingTypeError(
            f"cannot write {descriptor.name} for {key}: {e}",
            context={"key": key, "field": descriptor.name},
        ) from e

    if log_values:
        logger.debug(f"✓ {key} ← {source.value}: {mask_value(raw, descriptor.secret)!r}")
    else:
        logger.debug(f"✓ {key} ← {source.value}")
    report.bound.append(BoundField(name=descriptor.name, key=key, source=source))


def load(
    target: Any,
    descriptors: Iterable[FieldDescriptor],
    options: Optional[LoadOptions] = None,
) -> LoadReport:
    """
    Bind configuration into target.

    Args:
        target: Object receiving the values (dataclass instance, plain object,
            or anything the descriptors' setters accept)
        descriptors: Ordered field descriptors
        options: Fallback file / environment options

    Returns:
        LoadReport with the source of every bound field

    Raises:
        BindingTypeError: target not writable, descriptor malformed
        UnsupportedKindError: a descriptor kind has no coercion rule
        FallbackFileError / FallbackParseError: fallback file problems
        ValidationError: required field missing or empty
        CoercionError: a value does not convert to its kind
    """
    options = options or LoadOptions()
    settings = get_settings()

    try:
        _check_target(target)
        fields = list(descriptors)
        _check_descriptors(fields)

        with measure_time(f"Config load ({len(fields)} fields)"):
            fallback_path = _resolve_fallback_path(options)
            fallback: Optional[FallbackMapping] = None
            if fallback_path:
                fallback = parse_dotenv(fallback_path, encoding=options.encoding)

            report = LoadReport(fallback_path=fallback_path)
            for descriptor in fields:
                _bind_field(
                    target,
                    descriptor,
                    fallback,
                    options.environ,
                    report,
                    settings.log_values,
                )
    except ConfigLoadError as e:
        logger.error(f"❌ Configuration load failed: {e}")
        raise

    logger.info(
        f"🔧 Bound {len(report.bound)} fields, skipped {len(report.skipped)}"
        + (f" (fallback: {fallback_path})" if fallback_path else "")
    )
    return report
