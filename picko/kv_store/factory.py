"""Factory for choosing the key-value backend at startup."""

from __future__ import annotations

import redis

from picko import config
from picko.kv_store.base import KeyValueStore
from picko.kv_store.memory import InMemoryKeyValueStore
from picko.kv_store.redis import RedisKeyValueStore
from utils.logging_utils import get_tagged_logger, mask_url

logger = get_tagged_logger(__name__, tag="kv_store/factory")


def build_store(settings: config.Settings | None = None) -> KeyValueStore:
    """Return a Redis store when configured and reachable, else an in-memory one."""
    settings = settings or config.settings
    redis_url = settings.store_redis_url
    if redis_url:
        try:
            client = redis.Redis.from_url(redis_url)
            client.ping()
            logger.info("Using RedisKeyValueStore", extra={"redis_url": mask_url(redis_url)})
            return RedisKeyValueStore(client, prefix=settings.store_prefix)
        except (redis.RedisError, ValueError) as exc:
            logger.warning(
                "Falling back to InMemoryKeyValueStore (Redis unavailable)",
                extra={"error": str(exc), "redis_url": mask_url(redis_url)},
            )
    return InMemoryKeyValueStore()
