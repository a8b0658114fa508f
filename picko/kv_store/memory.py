"""In-memory key-value store, intended for development and tests."""

import threading
from typing import Optional

from picko.kv_store.base import KeyValueStore

from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="kv_store/in_memory_store")


class InMemoryKeyValueStore(KeyValueStore):
    """Thread-safe dict-backed store; contents are lost on restart."""

    def __init__(self) -> None:
        logger.debug("Initializing InMemoryKeyValueStore")
        self._values: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def clear(self) -> None:
        """Drop every key (tests)."""
        with self._lock:
            self._values.clear()
