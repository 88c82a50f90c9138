"""Creation of serializable objects from registered class names."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from ompcore.serializable import SerializableObject

logger = logging.getLogger(__name__)

_registry: dict[str, Callable[[], SerializableObject]] = {}
_lock = threading.Lock()


def register_class(class_name: str, factory: Callable[[], SerializableObject]) -> None:
    """Register factory under class_name; an existing registration is kept."""
    with _lock:
        _registry.setdefault(class_name, factory)


def create_serializable_object(class_name: str) -> SerializableObject | None:
    """Create a new object of the named class, or None if it is unknown."""
    with _lock:
        factory = _registry.get(class_name)
    if factory is None:
        logger.warning("Cant find specified class %s while creating asset", class_name)
        return None
    return factory()