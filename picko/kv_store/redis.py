"""Redis-backed key-value store."""

from typing import Optional

from picko.kv_store.base import KeyValueStore, StoreError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="kv_store/redis_store")


class RedisKeyValueStore(KeyValueStore):
    """Stores UTF-8 string values under a common key prefix."""

    def __init__(self, client, prefix: str = "picko:") -> None:
        """Initialize with a Redis client and the prefix applied to every key."""
        logger.debug("Initializing RedisKeyValueStore")
        self.client = client
        self.prefix = prefix

    def _key(self, key: str) -> str:
        """Return the namespaced Redis key."""
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        try:
            raw = self.client.get(self._key(key))
        except Exception as exc:
            logger.error("Failed to read %s from Redis: %s", key, exc)
            raise StoreError(f"Redis read failed for {key}") from exc
        if raw is None:
            return None
        if isinstance(raw, bytes):
            return raw.decode("utf-8")
        return str(raw)

    def set(self, key: str, value: str) -> None:
        try:
            self.client.set(self._key(key), value.encode("utf-8"))
        except Exception as exc:
            logger.error("Failed to write %s to Redis: %s", key, exc)
            raise StoreError(f"Redis write failed for {key}") from exc

    def remove(self, key: str) -> None:
        try:
            self.client.delete(self._key(key))
        except Exception as exc:
            logger.error("Failed to delete %s from Redis: %s", key, exc)
            raise StoreError(f"Redis delete failed for {key}") from exc
