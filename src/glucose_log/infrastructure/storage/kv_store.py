"""
Key-value storage backends.

Values are opaque strings keyed by slot name, the same contract as browser
local storage. The file backend keeps every slot in one JSON object on disk.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from glucose_log.utils.exceptions import StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Abstract string key-value store."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """
        Return the value stored under ``key``, or None if the slot is empty.

        Raises:
            StorageReadError: If the backend cannot be read.
        """

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Replace the value stored under ``key``.

        Raises:
            StorageWriteError: If the backend cannot be written.
        """


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store, used for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class JsonFileKeyValueStore(KeyValueStore):
    """
    File-backed store holding all slots in a single JSON object.

    Every write rewrites the whole file through a temporary sibling that is
    then moved into place.
    """

    def __init__(self, path: Path) -> None:
        """
        Initialize file store.

        Args:
            path: Location of the JSON file. Created on first write.
        """
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        """
        Read every slot from disk.

        Raises:
            StorageReadError: If the file exists but cannot be decoded.
        """
        if not self.path.exists():
            return {}

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageReadError(f"Failed to read {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageReadError(f"Expected a JSON object in {self.path}")

        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        try:
            items = self._read_all()
        except StorageReadError as e:
            logger.warning(f"Overwriting unreadable store {self.path}: {e}")
            items = {}

        items[key] = value
        tmp_path = self.path.with_name(self.path.name + ".tmp")

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(items, f, indent=2)
            tmp_path.replace(self.path)
        except OSError as e:
            raise StorageWriteError(f"Failed to write {self.path}: {e}") from e

        logger.debug(f"Saved slot '{key}' to {self.path}")
