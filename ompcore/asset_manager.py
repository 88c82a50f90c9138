"""Registry of assets: creation, loading from disk, saving and deletion."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Union

from ompcore.asset import Asset, AssetHandle, MetaData
from ompcore.core_lib import generate_id64
from ompcore.json_parser import JsonParser
from ompcore.thread_pool import ThreadPool
from ompcore.threadsafe_map import ThreadSafeMap

logger = logging.getLogger(__name__)

ASSET_FOLDER = "../assets/"
ASSET_FORMAT = ".json"

AssetKey = Union[AssetHandle, int, str, os.PathLike]


def _asset_id(handle: AssetHandle | int) -> int:
    return handle.id if isinstance(handle, AssetHandle) else int(handle)


def _is_path(key: object) -> bool:
    return isinstance(key, (str, os.PathLike))


def _completed(value: Any) -> Future:
    future: Future = Future()
    future.set_result(value)
    return future


class AssetManager:
    """Keeps assets by id and by path, running heavy work on an optional thread pool."""

    def __init__(self, thread_pool: ThreadPool | None = None) -> None:
        self._registry: ThreadSafeMap[int, Asset] = ThreadSafeMap()
        self._paths: dict[str, int] = {}
        self._paths_lock = threading.Lock()
        self._thread_pool = thread_pool

    def close(self) -> None:
        """Break the parent/child links between all registered assets."""
        self._registry.foreach(lambda _key, asset: asset.reset_hierarchy())

    def __enter__(self) -> AssetManager:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    def _dispatch(self, function: Callable[..., Any], *args: Any) -> Future:
        if self._thread_pool is not None:
            return self._thread_pool.submit(function, *args)
        future: Future = Future()
        try:
            future.set_result(function(*args))
        except Exception as exc:
            future.set_exception(exc)
        return future

    def _id_for_path(self, path: str | os.PathLike) -> int | None:
        with self._paths_lock:
            return self._paths.get(str(path))

    def load_project(self, path: str | os.PathLike = ASSET_FOLDER) -> None:
        """Register every asset file found under path, without loading objects."""
        self._load_assets_from_drive(Path(path))

    def load_project_async(self, path: str | os.PathLike = ASSET_FOLDER) -> Future:
        """Like load_project; the future resolves to True when done."""

        def run() -> bool:
            self.load_project(path)
            return True

        return self._dispatch(run)

    def save_project(self) -> Future:
        """Save every registered asset; the future resolves to True when done."""

        def run() -> bool:
            self._save_assets_to_drive()
            return True

        return self._dispatch(run)

    def load_asset_async(self, key: AssetKey) -> Future:
        """Load an asset and its dependencies; the future resolves to the asset or None."""
        if _is_path(key):
            asset_id = self._id_for_path(key)
            if asset_id is None:
                return _completed(None)
        else:
            asset_id = _asset_id(key)
        asset = self._registry.value_for(asset_id)
        if asset is None:
            logger.error("Cant find asset with id %s", asset_id)
            return _completed(None)
        return self._dispatch(self._load_asset_internal, asset)

    def load_all_assets(self) -> Future:
        """Load the object of every registered asset; the future resolves to True."""

        def run() -> bool:
            self._registry.foreach(lambda _key, asset: asset.try_load_object())
            return True

        return self._dispatch(run)

    def load_asset(self, key: AssetKey) -> Asset | None:
        """Load an asset and its dependencies; an already loaded asset is returned as is."""
        if _is_path(key):
            asset_id = self._id_for_path(key)
            if asset_id is None:
                return None
        else:
            asset_id = _asset_id(key)
        asset = self._registry.value_for(asset_id)
        if asset is None:
            logger.error("Cant find asset with id %s", asset_id)
            return None
        return self._load_asset_internal(asset)

    def save_asset(self, handle: AssetHandle | int) -> Future:
        """Save one loaded asset; the future resolves to whether it was written."""
        asset_id = _asset_id(handle)
        asset = self._registry.value_for(asset_id)
        if asset is None:
            logger.warning("Cant save asset with id specified %s", asset_id)
            return _completed(False)
        if not asset.is_loaded:
            logger.warning("Cant save unloaded asset with id: %s", asset_id)
            return _completed(False)
        return self._dispatch(asset.save_asset)

    def delete_asset(self, handle: AssetHandle | int) -> bool:
        """Unload and unregister an asset; False if it is unknown. The file is kept."""
        asset_id = _asset_id(handle)
        asset = self._registry.value_for(asset_id)
        if asset is None:
            logger.warning("Cant delete asset with id specified %s", asset_id)
            return False
        meta = asset.metadata
        asset.unload_asset()
        self._registry.remove_mapping(meta.asset_id)
        with self._paths_lock:
            self._paths.pop(meta.path_on_disk, None)
        return True

    def create_asset(self, name: str, path: str | os.PathLike, class_name: str) -> AssetHandle:
        """Create a new asset with a fresh object; INVALID_HANDLE if the path is taken."""
        path_key = str(path)
        with self._paths_lock:
            if path_key in self._paths:
                logger.error(
                    "Cant create asset while asset with same path exists. Path: %s", path_key
                )
                return AssetHandle.INVALID_HANDLE
            asset_id = generate_id64()
            while asset_id == 0 or self._registry.value_for(asset_id) is not None:
                logger.error("Trying to create asset with existing id!! ID: %s", asset_id)
                asset_id = generate_id64()
            self._paths[path_key] = asset_id

        asset = Asset()
        asset.specify_metadata(
            MetaData(asset_id=asset_id, asset_name=name, path_on_disk=path_key, class_id=class_name)
        )
        asset.create_object()
        self._registry.add_or_update_mapping(asset_id, asset)
        return AssetHandle(asset_id)

    def get_asset(self, key: AssetKey) -> Asset | None:
        """The registered asset for a handle, id or path, or None."""
        if _is_path(key):
            asset_id = self._id_for_path(key)
            if asset_id is None:
                logger.error("Cant find registered path in Asset manager %s", key)
                return None
        else:
            asset_id = _asset_id(key)
        asset = self._registry.value_for(asset_id)
        if asset is None:
            logger.error("Cant find asset %s", asset_id)
        return asset

    def _save_assets_to_drive(self) -> None:
        def save(_key: int, asset: Asset) -> None:
            meta = asset.metadata
            logger.info("Starting to Save asset: id-%s, path: %s", meta.asset_id, meta.path_on_disk)
            if asset.save_asset():
                logger.info("Asset Saved: id-%s, path: %s", meta.asset_id, meta.path_on_disk)
            else:
                logger.warning(
                    "Asset cant be Saved: id-%s, path: %s", meta.asset_id, meta.path_on_disk
                )

        self._registry.foreach(save)

    def _load_assets_from_drive(self, directory: Path) -> None:
        for entry in sorted(directory.iterdir()):
            if entry.is_dir():
                self._load_assets_from_drive(entry)
            if entry.suffix == ASSET_FORMAT:
                self._load_asset_from_file(entry)

    def _load_asset_from_file(self, path: Path) -> None:
        file_data = JsonParser()
        if not file_data.populate_from_file(path):
            return
        asset = Asset(file_data)
        if not asset.load_metadata():
            logger.error("Cannot load asset metadata: %s", path)
            return
        meta = asset.metadata
        self._registry.add_or_update_mapping(meta.asset_id, asset)
        with self._paths_lock:
            self._paths.setdefault(meta.path_on_disk, meta.asset_id)
        logger.info("Asset loaded successfully: %s", path)

    def _load_asset_internal(self, asset: Asset) -> Asset:
        meta = asset.metadata
        for dependency_id in meta.dependencies:
            logger.info(
                "Start loading dependency for asset %s, dependency: %s",
                meta.asset_id,
                dependency_id,
            )
            asset.add_child(self.load_asset(dependency_id))
        asset.try_load_object()
        return asset