"""Store module for pollkv."""

from .hashtable import ChainedHashTable, djb2
from .memory import KVStore

__all__ = ["ChainedHashTable", "KVStore", "djb2", "create_store"]


def create_store(backend: str = "dict", buckets: int = 1024):
    """Build the store backend named by the configuration."""
    if backend == "dict":
        return KVStore()
    if backend == "hashtable":
        return ChainedHashTable.create(buckets)
    raise ValueError(f"unknown store backend: {backend!r}")
