"""
Key-value storage backends.

A backend holds one JSON text document per key. The record store reads and
writes whole documents; backends know nothing about the records inside.
"""

import json
import logging
import os
import shutil
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class StorageBackend:
    """
    Interface for key-value persistence.

    Lifecycle: open() -> read()/write()/remove() ... -> close().
    """

    def open(self) -> None:
        """Acquire resources. Called once before first use."""

    def close(self) -> None:
        """Release resources. The backend may be reopened afterwards."""

    def read(self, key: str) -> Optional[str]:
        """Return the document stored under key, or None if absent."""
        raise NotImplementedError

    def write(self, key: str, value: str) -> None:
        """Replace the document stored under key."""
        raise NotImplementedError

    def remove(self, key: str) -> None:
        """Delete the document stored under key. Missing keys are ignored."""
        raise NotImplementedError

    def keys(self) -> List[str]:
        """Keys currently holding a document."""
        raise NotImplementedError

    def __enter__(self) -> "StorageBackend":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class MemoryBackend(StorageBackend):
    """Dict-backed backend. Used by tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return sorted(self._data)


class JsonDirectoryBackend(StorageBackend):
    """
    Stores each key as <data_root>/<key>.json.

    Writes go to a temp file that is renamed over the target, and the
    previous version is kept as <key>.json.backup. A document that fails to
    parse is restored from its backup on read.

    There is no locking: two processes sharing a directory each run their
    own read-modify-write cycle, and the last writer wins.
    """

    def __init__(self, data_root: str):
        """
        Initialize JSON directory backend.

        Args:
            data_root: Directory holding one JSON file per key
        """
        self.data_root = str(data_root)
        self._opened = False

    def open(self) -> None:
        os.makedirs(self.data_root, exist_ok=True)
        self._opened = True
        logger.info(f"Opened JsonDirectoryBackend at {self.data_root}")

    def close(self) -> None:
        self._opened = False
        logger.debug(f"Closed JsonDirectoryBackend at {self.data_root}")

    def _path(self, key: str) -> str:
        return os.path.join(self.data_root, f"{key}.json")

    def read(self, key: str) -> Optional[str]:
        self._ensure_open()
        filepath = self._path(key)

        if not os.path.exists(filepath):
            logger.debug(f"No document stored for key '{key}'")
            return None

        with open(filepath, 'r', encoding='utf-8') as f:
            text = f.read()

        try:
            json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse {filepath}: {e}")
            return self._restore_from_backup(key)

        return text

    def write(self, key: str, value: str) -> None:
        self._ensure_open()
        filepath = self._path(key)

        # Keep previous version before overwriting
        if os.path.exists(filepath):
            shutil.copy(filepath, f"{filepath}.backup")

        # Atomic write: write to temp file, then rename
        temp_path = f"{filepath}.tmp"
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                f.write(value)
            os.replace(temp_path, filepath)
            logger.debug(f"Saved key '{key}' to {filepath}")
        except OSError as e:
            logger.error(f"Failed to save key '{key}': {e}")
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

    def remove(self, key: str) -> None:
        self._ensure_open()
        filepath = self._path(key)
        if os.path.exists(filepath):
            os.remove(filepath)
            logger.info(f"Removed key '{key}'")

    def keys(self) -> List[str]:
        self._ensure_open()
        return sorted(
            filename[:-len(".json")]
            for filename in os.listdir(self.data_root)
            if filename.endswith(".json")
        )

    def _ensure_open(self) -> None:
        if not self._opened:
            raise RuntimeError("Backend is not open; call open() first")

    def _restore_from_backup(self, key: str) -> Optional[str]:
        """Replace a corrupted document with its backup, if the backup parses."""
        filepath = self._path(key)
        backup_path = f"{filepath}.backup"

        if not os.path.exists(backup_path):
            logger.warning(f"No backup for key '{key}'. Treating document as absent.")
            return None

        with open(backup_path, 'r', encoding='utf-8') as f:
            text = f.read()

        try:
            json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Backup for key '{key}' is also corrupted: {e}")
            return None

        shutil.copy(backup_path, filepath)
        logger.warning(f"Restored key '{key}' from backup {backup_path}")
        return text
