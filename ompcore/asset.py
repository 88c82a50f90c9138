"""Assets: serializable objects stored in JSON files, with metadata and hierarchy."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import ClassVar, TypeVar

from ompcore.json_parser import JsonParser
from ompcore.object_factory import create_serializable_object
from ompcore.serializable import SerializableObject

logger = logging.getLogger(__name__)

T = TypeVar("T")

ID_KEY = "ObjectID"
PATH_KEY = "DiscPath"
CLASS_NAME_KEY = "ClassName"
ASSET_NAME_KEY = "AssetName"
DEPENDENCIES_KEY = "Dependencies"
METADATA_KEY = "Metadata"
MAIN_DATA_KEY = "PlainData"


class AssetHandle:
    """An identifier of an asset; comparable with plain integer ids."""

    INVALID_HANDLE: ClassVar[AssetHandle]

    __slots__ = ("id",)

    def __init__(self, handle_id: int) -> None:
        self.id = int(handle_id)

    def is_valid(self) -> bool:
        return self.id != 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AssetHandle):
            return self.id == other.id
        if isinstance(other, int) and not isinstance(other, bool):
            return self.id == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.id)

    def __int__(self) -> int:
        return self.id

    def __repr__(self) -> str:
        return f"AssetHandle({self.id})"


AssetHandle.INVALID_HANDLE = AssetHandle(0)


def _as_id(handle: AssetHandle | int) -> int:
    return handle.id if isinstance(handle, AssetHandle) else int(handle)


@dataclass
class MetaData:
    asset_id: int = 0
    asset_name: str = ""
    path_on_disk: str = ""
    class_id: str = ""
    dependencies: set[int] = field(default_factory=set)

    def is_valid(self) -> bool:
        return (
            self.asset_id != 0
            and bool(self.path_on_disk)
            and bool(self.class_id)
            and bool(self.asset_name)
        )

    def __bool__(self) -> bool:
        return self.is_valid()


def _required(parser: JsonParser, key: str):
    value = parser.read_value(key)
    if value is None:
        raise KeyError(key)
    return value


class Asset:
    """A file-backed container for one serializable object."""

    def __init__(self, file_data: JsonParser | None = None) -> None:
        self._parser = file_data if file_data is not None else JsonParser()
        self._metadata = MetaData()
        self._object: SerializableObject | None = None
        self._parents: dict[int, Asset] = {}
        self._children: dict[int, Asset] = {}
        self._lock = threading.RLock()
        self._loaded = False

    @property
    def metadata(self) -> MetaData:
        """A copy of the asset's metadata."""
        with self._lock:
            meta = self._metadata
            return MetaData(
                meta.asset_id, meta.asset_name, meta.path_on_disk, meta.class_id, set(meta.dependencies)
            )

    @property
    def object(self) -> SerializableObject | None:
        return self._object

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def object_as(self, cls: type[T]) -> T | None:
        """The object if it is an instance of cls, otherwise None."""
        obj = self._object
        return obj if isinstance(obj, cls) else None

    def load_metadata(self) -> bool:
        """Read metadata from the file data; True if it is valid."""
        meta_parser = self._parser.read_object(METADATA_KEY)
        asset_id = meta_parser.read_value(ID_KEY)
        self._metadata = MetaData(
            asset_id=int(asset_id) if asset_id is not None else 0,
            path_on_disk=_required(meta_parser, PATH_KEY),
            class_id=_required(meta_parser, CLASS_NAME_KEY),
            asset_name=_required(meta_parser, ASSET_NAME_KEY),
            dependencies={int(dep) for dep in _required(meta_parser, DEPENDENCIES_KEY)},
        )
        return self._metadata.is_valid()

    def try_load_object(self) -> bool:
        """Create and deserialize the object once; False if already loaded or invalid."""
        with self._lock:
            if not self._metadata or self._loaded:
                return False
            obj = create_serializable_object(self._metadata.class_id)
            if obj is None:
                raise ValueError(f"unknown asset class {self._metadata.class_id!r}")
            self._object = obj
            self._attach_object()
            obj.deserialize(self._parser.read_object(MAIN_DATA_KEY))
            self._loaded = True
            return True

    def create_object(self) -> None:
        """Create a fresh object of the metadata's class."""
        if not self._metadata:
            logger.warning("Invalid metadata to create asset from")
            return
        self._object = create_serializable_object(self._metadata.class_id)
        if self._object is not None:
            self._attach_object()
            self._loaded = True

    def unload_asset(self) -> bool:
        with self._lock:
            if self._object is None:
                return False
            self._object = None
            self._loaded = False
            return True

    def save_metadata(self) -> bool:
        meta_parser = JsonParser()
        meta = self._metadata
        meta_parser.write_value(ID_KEY, meta.asset_id)
        meta_parser.write_value(PATH_KEY, meta.path_on_disk)
        meta_parser.write_value(CLASS_NAME_KEY, meta.class_id)
        meta_parser.write_value(ASSET_NAME_KEY, meta.asset_name)
        meta_parser.write_value(DEPENDENCIES_KEY, meta.dependencies)
        self._parser.write_object(METADATA_KEY, meta_parser)
        return meta.is_valid()

    def save_asset(self) -> bool:
        """Serialize the object and write the asset to its path on disk."""
        if not self._metadata:
            return False
        with self._lock:
            if self._object is None:
                logger.warning("Cant serialize object because it is not loaded")
                return False
            main_parser = JsonParser()
            self._object.serialize(main_parser)
            self._parser.write_object(MAIN_DATA_KEY, main_parser)
            # Metadata last: serialization may add dependencies.
            if not self.save_metadata():
                logger.warning("Metadata saving error")
            return self._parser.write_to_file(self._metadata.path_on_disk)

    def specify_file_data(self, file_data: JsonParser) -> None:
        self._parser = file_data

    def specify_metadata(self, metadata: MetaData) -> None:
        with self._lock:
            self._metadata = metadata

    def add_child(self, asset: Asset | None) -> None:
        """Add asset as a child and self as its parent."""
        if asset is None:
            logger.error("Cant add child to asset: %s, with class: %s",
                         self._metadata.asset_name, self._metadata.class_id)
            return
        asset._parents[self._metadata.asset_id] = self
        self._children[asset._metadata.asset_id] = asset

    def add_parent(self, asset: Asset | None) -> None:
        """Add asset as a parent and self as its child."""
        if asset is None:
            logger.error("Cant add parent to asset: %s, with class: %s",
                         self._metadata.asset_name, self._metadata.class_id)
            return
        asset._children[self._metadata.asset_id] = self
        self._parents[asset._metadata.asset_id] = asset

    def get_child(self, handle: AssetHandle | int) -> Asset | None:
        return self._children.get(_as_id(handle))

    def get_parent(self, handle: AssetHandle | int) -> Asset | None:
        return self._parents.get(_as_id(handle))

    def reset_hierarchy(self) -> None:
        self._children.clear()
        self._parents.clear()

    def add_dependency(self, handle: AssetHandle | int) -> None:
        dependency = _as_id(handle)
        self._metadata.dependencies.add(dependency)
        logger.info("DEPENDENCY ADDED %s", dependency)

    def _attach_object(self) -> None:
        if self._object is not None:
            self._object.serialization_id = self._metadata.asset_id
            self._object.asset = self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Asset):
            return NotImplemented
        return self._metadata.asset_id == other._metadata.asset_id

    def __hash__(self) -> int:
        return hash(self._metadata.asset_id)

    def __repr__(self) -> str:
        return f"Asset(id={self._metadata.asset_id}, name={self._metadata.asset_name!r})"