"""
Key-Value Store Module

This module implements the default in-memory storage backend.

The store is created once by the entry point and handed to the command
processor; it is only ever touched from the event loop's thread.
"""

from typing import Dict, Optional, Any

from ..errors import AllocationError


class KVStore:
    """
    In-memory key-value store backed by a dict.

    This class provides O(1) average-case time complexity for:
    - set: Insert or update a key-value pair
    - get: Retrieve a value by key

    There is no delete, expiry or iteration operation. Entries live until
    the store itself is discarded.
    """

    def __init__(self):
        self._store: Dict[str, str] = {}

    def set(self, key: str, value: str) -> bool:
        """
        Insert or update a key-value pair.

        Args:
            key: The key to store
            value: The value to associate with the key

        Returns:
            True on success

        Raises:
            AllocationError: If the interpreter could not allocate the entry.
        """
        try:
            self._store[key] = value
        except MemoryError as exc:
            raise AllocationError(f"could not store key {key!r}") from exc
        return True

    def get(self, key: str) -> Optional[str]:
        """
        Retrieve the value for a given key.

        Returns:
            The value if found, None otherwise
        """
        return self._store.get(key)

    def size(self) -> int:
        """Get the current number of keys in the store."""
        return len(self._store)

    def clear(self) -> None:
        """Remove all keys from the store."""
        self._store.clear()

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics about the store."""
        return {
            "backend": "dict",
            "total_keys": len(self._store),
        }
