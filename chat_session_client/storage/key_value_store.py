"""
Key-value stores for host-side persisted state.

The session manager keeps its credentials record in one of these stores.
Writes are synchronous and flushed before the call returns.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from ..exceptions import PersistenceError


class KeyValueStore(ABC):
    """Interface of a flat, synchronous key-value store."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the value stored under ``key``, or None."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` and flush it."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key`` if present and flush the removal."""
        pass

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class MemoryKeyValueStore(KeyValueStore):
    """In-process store, used by tests and short-lived hosts."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)


class JsonFileKeyValueStore(KeyValueStore):
    """
    Key-value store backed by a single JSON file.

    The whole file is rewritten on every mutation: the new content goes to a
    temporary file in the same directory, is fsynced, then atomically
    replaces the old file.
    """

    def __init__(self, path):
        self.path = Path(path)
        self.logger = logging.getLogger(__name__)
        self._data: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        """Read the file; a missing or unreadable file yields an empty store."""
        if not self.path.exists():
            return {}

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.error(f"Error loading key-value store from {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            self.logger.error(f"Ignoring key-value store {self.path}: top level is not an object")
            return {}

        return data

    def _flush(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(self._data, f, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to write {self.path}", str(e)) from e

    def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def _commit(self, data: Dict[str, Any]) -> None:
        """Flush ``data``; the in-memory view only changes if the write succeeds."""
        previous, self._data = self._data, data
        try:
            self._flush()
        except PersistenceError:
            self._data = previous
            raise

    def set(self, key: str, value: Any) -> None:
        data = dict(self._data)
        data[key] = value
        self._commit(data)

    def delete(self, key: str) -> None:
        if key not in self._data:
            return
        data = dict(self._data)
        del data[key]
        self._commit(data)

    def reload(self) -> None:
        """Re-read the backing file, discarding the in-memory view."""
        self._data = self._load()
