"""
===============================================================================
Field Registry - ordered registration API for descriptors
===============================================================================

Collects descriptors next to the configuration class they describe:

    FIELDS = (
        FieldRegistry()
        .add("port", "PORT", IntKind(bits=32), default="8080")
        .add("host", "HOST", required=True)
        .add("api_key", "API_KEY", secret=True)
    )

    cfg = AppConfig()
    FIELDS.load(cfg, LoadOptions(fallback_path=".env"))
"""

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional

from envbind.core.binder import LoadOptions, LoadReport, load
from envbind.core.descriptors import FieldDescriptor, env_field
from envbind.core.exceptions import BindingTypeError

logger = logging.getLogger(__name__)


class FieldRegistry:
    """Ordered, duplicate-free collection of field descriptors."""

    def __init__(self, descriptors: Optional[Iterable[FieldDescriptor]] = None):
        self._descriptors: Dict[str, FieldDescriptor] = {}
        for descriptor in descriptors or ():
            self.register(descriptor)

    def register(self, descriptor: FieldDescriptor) -> "FieldRegistry":
        """Add a prebuilt descriptor. Attribute names must be unique."""
        if descriptor.name in self._descriptors:
            raise BindingTypeError(
                f"field {descriptor.name!r} registered twice",
                context={"field": descriptor.name, "key": descriptor.key},
            )
        self._descriptors[descriptor.name] = descriptor
        logger.debug(f"✓ Registered {descriptor.name} <- {descriptor.key}")
        return self

    def add(self, name: str, key: str, kind: Any = str, **kwargs: Any) -> "FieldRegistry":
        """Build a descriptor with env_field() and register it."""
        return self.register(env_field(name, key, kind, **kwargs))

    def get(self, name: str) -> Optional[FieldDescriptor]:
        return self._descriptors.get(name)

    def keys(self) -> List[str]:
        """Lookup keys in registration order."""
        return [descriptor.key for descriptor in self._descriptors.values()]

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(list(self._descriptors.values()))

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def load(self, target: Any, options: Optional[LoadOptions] = None) -> LoadReport:
        """Bind all registered fields into target."""
        return load(target, self, options)
