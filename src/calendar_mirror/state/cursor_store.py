"""Durable storage for incremental sync cursors (provider sync tokens)."""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..utils.exceptions import CursorStoreError

logger = logging.getLogger(__name__)


def cursor_key(calendar_id: str) -> str:
    """Store key holding the sync cursor of one calendar."""
    return f"syncToken/{calendar_id}"


class CursorStore(ABC):
    """Abstract key-value store for sync cursors."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Get a stored cursor.

        Args:
            key: Store key, see cursor_key()

        Returns:
            Cursor string, or None if nothing is stored under the key
        """

    @abstractmethod
    def set(self, key: str, cursor: str) -> None:
        """Store a cursor, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a cursor. Removing a missing key is a no-op."""


class MemoryCursorStore(CursorStore):
    """Process-local store, for dry runs and tests."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, cursor: str) -> None:
        self._data[key] = cursor

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileCursorStore(CursorStore):
    """Cursors kept in a single JSON file, rewritten atomically on change."""

    def __init__(self, path: Path):
        """
        Initialize file-backed cursor store.

        Args:
            path: JSON file holding the cursors (created on first write)
        """
        self.path = path

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CursorStoreError(f"Failed to read cursor store {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise CursorStoreError(f"Cursor store {self.path} is not a JSON object")
        return data

    def _save(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except OSError as e:
            raise CursorStoreError(f"Failed to write cursor store {self.path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, cursor: str) -> None:
        data = self._load()
        data[key] = cursor
        self._save(data)
        logger.debug(f"Stored cursor {key}")

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)
            logger.debug(f"Deleted cursor {key}")
