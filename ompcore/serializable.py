"""Base class for objects that are saved to and loaded from JSON."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ompcore.json_parser import JsonParser

if TYPE_CHECKING:
    from ompcore.asset import Asset

logger = logging.getLogger(__name__)


class SerializableObject(ABC):
    """An object stored in an asset, able to refer to objects of other assets."""

    serialization_id: int = 0
    asset: Asset | None = None

    @abstractmethod
    def serialize(self, parser: JsonParser) -> None:
        """Write the object's state into parser."""

    @abstractmethod
    def deserialize(self, parser: JsonParser) -> None:
        """Restore the object's state from parser."""

    def serialize_dependency(self, obj: SerializableObject) -> int:
        """Record obj as a dependency of this object's asset and return its id."""
        if self.asset is None:
            raise RuntimeError("object is not attached to an asset")
        self.asset.add_dependency(obj.serialization_id)
        return obj.serialization_id

    def get_dependency(self, dependency_id: int) -> SerializableObject | None:
        """Return the object of the child asset with the given id, or None."""
        if self.asset is None:
            logger.error("Asset not specified in serializable object")
            return None
        child = self.asset.get_child(dependency_id)
        if child is None:
            return None
        return child.object