"""registry.model_registry

Global registry that maps model identifiers (e.g. "gpt-4o-mini") to their
immutable :class:`ModelDescriptor`.

The registry is a pure domain helper (no HTTP, no SDK imports) so it can be
imported freely by the validator, the request builder and the adapters.
Lookups never fail: an unknown id resolves to a conservative fallback
descriptor so downstream components always have limits to validate against.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from inference_bridge.core.model_descriptor import ModelDescriptor
from inference_bridge.registry.model_catalog import MODEL_CATALOG, fallback_descriptor

if TYPE_CHECKING:
    from collections.abc import Mapping, MutableMapping

logger = logging.getLogger(__name__)


class _ThreadSafeSingleton(type):
    """Metaclass ensuring a single registry instance across threads."""

    _instance: ModelRegistry | None = None
    _lock = threading.Lock()

    def __call__(cls, *args: object, **kwargs: object) -> ModelRegistry:
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__call__(*args, **kwargs)
        return cls._instance


class ModelRegistry(metaclass=_ThreadSafeSingleton):
    """Centralised look-up of model capability descriptors.

    The catalog is loaded once, at construction. Additional descriptors may be
    registered during application start-up; after that the registry is only
    read, and may be shared by any number of concurrent requests.

    ```python
    from inference_bridge.registry.model_registry import model_registry

    descriptor = model_registry.lookup("GPT-4o")   # case-insensitive hit
    descriptor.limits.temperature.max              # 2.0
    ```
    """

    _registry: MutableMapping[str, ModelDescriptor]

    def __init__(self) -> None:  # pragma: no cover - called once via singleton
        self._registry = dict(MODEL_CATALOG)

    def register(self, descriptor: ModelDescriptor) -> None:
        """Register *descriptor* under its own ``id``.

        Raises
        ------
        TypeError
            If *descriptor* is not a :class:`ModelDescriptor`.

        """
        if not isinstance(descriptor, ModelDescriptor):
            raise TypeError('descriptor must be a ModelDescriptor')
        self._registry[descriptor.id] = descriptor

    def lookup(self, model_id: str) -> ModelDescriptor:
        """Return the descriptor for *model_id*.

        Resolution order: exact id, case-insensitive id, fallback descriptor.
        """
        if (descriptor := self._registry.get(model_id)) is not None:
            return descriptor

        wanted = model_id.lower()
        for key, descriptor in self._registry.items():
            if key.lower() == wanted:
                logger.debug('Resolved model %r case-insensitively to %r', model_id, key)
                return descriptor

        logger.warning('No configuration for model %r; using fallback descriptor', model_id)
        return fallback_descriptor(model_id)

    def is_known(self, model_id: str) -> bool:
        wanted = model_id.lower()
        return any(key.lower() == wanted for key in self._registry)

    def available_models(self) -> list[str]:
        """Return a sorted list of registered model ids (for introspection)."""
        return sorted(self._registry)

    def mapping(self) -> Mapping[str, ModelDescriptor]:
        """Return a copy of the id → descriptor mapping."""
        return dict(self._registry)


# Re-export a module-level instance for ergonomic usage
model_registry: ModelRegistry = ModelRegistry()
