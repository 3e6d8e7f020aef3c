"""
This module provides the durable key/value substrate behind the DentalCare store.

`LocalStorage` behaves like a browser's local storage: string values under
string keys, with every write immediately mirrored to disk. The whole mapping
is serialised to JSON and encrypted as one Fernet token, so the data file is
unreadable without the key file.

A store created without a path lives purely in memory, which is what the
tests and throwaway sessions use.
"""
# dentalcare/storage.py

import json
import os
from pathlib import Path

from cryptography.fernet import InvalidToken

from dentalcare.errors import StorageError
from dentalcare.logging_config import get_logger

logger = get_logger(__name__)


class LocalStorage:
    """A write-through string key/value store, optionally encrypted on disk."""

    def __init__(self, path=None, encryptor=None):
        """Opens the store, loading any existing data file.

        Args:
            path (str or Path, optional): Data file location. In-memory only when None.
            encryptor: Object with `encrypt`/`decrypt` over bytes (a `Fernet`).
                When None the file is written as plain JSON.
        """
        self._path = Path(path) if path else None
        self._encryptor = encryptor
        self._items = self._load()

    def get_item(self, key: str):
        """Returns the value stored under `key`, or None."""
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        """Stores `value` under `key` and writes the store through to disk."""
        if not isinstance(value, str):
            raise TypeError(f"LocalStorage values must be str, got {type(value).__name__}")
        self._items[key] = value
        self._save()

    def remove_item(self, key: str) -> None:
        """Removes `key`. Removing a missing key does nothing."""
        if self._items.pop(key, None) is not None:
            self._save()

    def keys(self) -> list:
        return list(self._items)

    def __contains__(self, key):
        return key in self._items

    def __len__(self):
        return len(self._items)

    def _load(self) -> dict:
        """Reads and decrypts the data file.

        Returns:
            dict: The stored items, or an empty dict if the file is missing or corrupt.
        """
        if self._path is None:
            return {}
        try:
            raw = self._path.read_bytes()
            if not raw:
                return {}
            if self._encryptor is not None:
                raw = self._encryptor.decrypt(raw)
            items = json.loads(raw.decode("utf-8"))
        except FileNotFoundError:
            return {}
        except (InvalidToken, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("storage_unreadable", path=str(self._path), error=str(e))
            return {}

        if not isinstance(items, dict):
            logger.warning("storage_unreadable", path=str(self._path), error="top level is not an object")
            return {}
        # Non-string values cannot have been written by this class.
        return {k: v for k, v in items.items() if isinstance(v, str)}

    def _save(self) -> None:
        """Serialises, encrypts and atomically replaces the data file."""
        if self._path is None:
            return
        payload = json.dumps(self._items, indent=2).encode("utf-8")
        if self._encryptor is not None:
            payload = self._encryptor.encrypt(payload)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(payload)
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise StorageError(f"Could not write {self._path}: {e}") from e
