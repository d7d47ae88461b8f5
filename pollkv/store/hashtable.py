"""
Chained Hashtable Module

An explicit hash table with separate chaining, offered as an alternative
store backend with the same set/get semantics as KVStore.

The bucket count is fixed at creation time. The table never grows, so
chains get longer as the load factor rises.
"""

from typing import Any, Dict, List, Optional

from ..errors import AllocationError, StoreError

_DJB2_SEED = 5381
_WORD_MASK = 0xFFFFFFFFFFFFFFFF


def djb2(key: str) -> int:
    """
    djb2 string hash (hash * 33 + byte), wrapped to an unsigned 64-bit word.

    Keys are hashed over their UTF-8 bytes; undecodable bytes carried as
    surrogates hash to their original byte values.
    """
    h = _DJB2_SEED
    for byte in key.encode("utf-8", errors="surrogateescape"):
        h = ((h << 5) + h + byte) & _WORD_MASK
    return h


class _Entry:
    """One node of a bucket chain."""

    __slots__ = ("key", "value", "next")

    def __init__(self, key: str, value: str, next_entry: "Optional[_Entry]" = None):
        self.key = key
        self.value = value
        self.next = next_entry


class ChainedHashTable:
    """
    Fixed-size hash table using separate chaining.

    Usage:
        table = ChainedHashTable.create(1024)
        table.set("foo", "bar")
        table.get("foo")  # -> "bar"
        table.destroy()
    """

    def __init__(self, bucket_count: int):
        if not isinstance(bucket_count, int) or bucket_count <= 0:
            raise ValueError(f"bucket_count must be a positive integer, got {bucket_count!r}")
        self.bucket_count = bucket_count
        self._buckets: Optional[List[Optional[_Entry]]] = [None] * bucket_count
        self._size = 0

    @classmethod
    def create(cls, bucket_count: int) -> "ChainedHashTable":
        """Create a new table with the given number of buckets."""
        return cls(bucket_count)

    def _index(self, key: str) -> int:
        return djb2(key) % self.bucket_count

    def set(self, key: str, value: str) -> bool:
        """
        Set a key to a value, replacing the value if the key exists.

        Raises:
            StoreError: If the table has been destroyed.
            AllocationError: If a new entry could not be allocated.
        """
        if self._buckets is None:
            raise StoreError("hashtable has been destroyed")

        index = self._index(key)
        entry = self._buckets[index]
        while entry is not None:
            if entry.key == key:
                entry.value = value
                return True
            entry = entry.next

        try:
            self._buckets[index] = _Entry(key, value, self._buckets[index])
        except MemoryError as exc:
            raise AllocationError(f"could not store key {key!r}") from exc
        self._size += 1
        return True

    def get(self, key: str) -> Optional[str]:
        """Return the value for key, or None if it is absent."""
        if self._buckets is None:
            return None

        entry = self._buckets[self._index(key)]
        while entry is not None:
            if entry.key == key:
                return entry.value
            entry = entry.next
        return None

    def destroy(self) -> None:
        """Release every bucket. The table is unusable afterwards."""
        self._buckets = None
        self._size = 0

    def size(self) -> int:
        """Get the current number of keys in the table."""
        return self._size

    def clear(self) -> None:
        """Remove all keys but keep the table usable."""
        if self._buckets is not None:
            self._buckets = [None] * self.bucket_count
        self._size = 0

    def chain_length(self, key: str) -> int:
        """Number of entries in the bucket that key hashes to."""
        if self._buckets is None:
            return 0
        length = 0
        entry = self._buckets[self._index(key)]
        while entry is not None:
            length += 1
            entry = entry.next
        return length

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics about the table."""
        return {
            "backend": "hashtable",
            "total_keys": self._size,
            "buckets": self.bucket_count,
            "load_factor": self._size / self.bucket_count,
        }
