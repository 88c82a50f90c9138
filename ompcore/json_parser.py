"""A JSON document with keyed access, used to save and load objects."""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_SCALARS = (str, bool, int, float, type(None))


def _to_json(value: Any) -> Any:
    """Convert a value into plain JSON data, or raise TypeError."""
    if isinstance(value, JsonParser):
        return value.to_dict()
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, Mapping):
        result = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"JSON object keys must be strings, not {type(key).__name__}")
            result[key] = _to_json(item)
        return result
    if isinstance(value, (set, frozenset)):
        items = [_to_json(item) for item in value]
        try:
            return sorted(items)
        except TypeError:
            return items
    if isinstance(value, (list, tuple)):
        return [_to_json(item) for item in value]
    raise TypeError(f"value of type {type(value).__name__} cannot be stored as JSON")


class JsonParser:
    """A JSON object whose members are read and written by key."""

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        converted = {} if data is None else _to_json(data)
        if not isinstance(converted, dict):
            raise TypeError("a JsonParser holds a JSON object")
        self._data: dict[str, Any] = converted

    def populate_from_file(self, file_path: str | Path) -> bool:
        """Replace the content with the file's; False if it cannot be opened.

        Malformed JSON raises json.JSONDecodeError.
        """
        try:
            with open(file_path, encoding="utf-8") as handle:
                text = handle.read()
        except OSError:
            logger.warning("Cant read json file %s", file_path)
            return False
        loaded = json.loads(text)
        if not isinstance(loaded, dict):
            raise TypeError(f"{file_path} does not hold a JSON object")
        self._data = loaded
        return True

    def write_to_file(self, file_path: str | Path) -> bool:
        """Write the document with four-space indentation; False on failure."""
        text = json.dumps(self._data, indent=4, sort_keys=True, ensure_ascii=False)
        try:
            with open(file_path, "w", encoding="utf-8") as handle:
                handle.write(text + "\n")
        except OSError:
            logger.warning("Cant write json to file: %s", file_path)
            return False
        return True

    def read_value(self, key: str) -> Any:
        """Return a copy of the value under key, or None if absent."""
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def read_object(self, key: str) -> JsonParser:
        """Return the nested object under key as a new parser."""
        if key not in self._data:
            raise KeyError(key)
        value = self._data[key]
        if not isinstance(value, dict):
            raise TypeError(f"member {key!r} is not a JSON object")
        return JsonParser(copy.deepcopy(value))

    def write_value(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous one."""
        self._data[key] = _to_json(value)

    def write_object(self, key: str, parser: JsonParser) -> None:
        """Store the content of another parser as a nested object."""
        self._data[key] = parser.to_dict()

    def contains(self, key: str) -> bool:
        return key in self._data

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def to_string(self) -> str:
        """Compact JSON text with keys in sorted order."""
        return json.dumps(self._data, separators=(",", ":"), sort_keys=True, ensure_ascii=False)

    def to_dict(self) -> dict[str, Any]:
        """A deep copy of the document as plain Python data."""
        return copy.deepcopy(self._data)

    def __repr__(self) -> str:
        return f"JsonParser({self.to_string()})"