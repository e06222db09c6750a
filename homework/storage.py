"""Storage layer for the homework tracker.

This module provides an abstract keyed storage interface and concrete
implementations for persisting string values. The FileStorage
implementation keeps one file per key and uses fcntl-based file locking so
concurrent invocations never read a half-written value.
"""

import fcntl
import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class Storage(ABC):
    """Abstract base class for keyed string storage."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if the key has no value
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Overwrite the value stored under a key.

        Args:
            key: Storage key
            value: String to store
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a key. Removing an absent key does nothing."""
        pass


class MemoryStorage(Storage):
    """In-memory storage, lost when the process exits."""

    def __init__(self, items: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileStorage(Storage):
    """File-based storage with one file per key.

    Writes go to a temporary file in the same directory which is then
    renamed over the target, so each set_item replaces the whole value at
    once.

    Attributes:
        directory: Directory holding the key files
    """

    def __init__(self, directory: Union[str, Path]):
        """Initialize FileStorage with a directory.

        Args:
            directory: Directory for the key files. Created on first write.
        """
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        """Return the file path backing a key.

        Raises:
            ValueError: If the key contains characters unsafe for a file name
        """
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / key

    def get_item(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None

        with open(path, "r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            try:
                return f.read()
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        self.directory.mkdir(parents=True, exist_ok=True)

        # Lock the target so readers wait for the rename
        with open(path, "a", encoding="utf-8") as target:
            fcntl.flock(target.fileno(), fcntl.LOCK_EX)
            try:
                fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.")
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                        tmp.write(value)
                    os.replace(tmp_name, path)
                except BaseException:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
            finally:
                fcntl.flock(target.fileno(), fcntl.LOCK_UN)

        logger.debug("Stored %d characters under %s", len(value), path)

    def remove_item(self, key: str) -> None:
        path = self.path_for(key)
        if path.exists():
            path.unlink()
