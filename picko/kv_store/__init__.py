"""Key-value storage backends for cached recommendations and preferences."""

from .base import KeyValueStore, StoreError
from .factory import build_store
from .memory import InMemoryKeyValueStore
from .redis import RedisKeyValueStore

__all__ = [
    "KeyValueStore",
    "StoreError",
    "build_store",
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
]
