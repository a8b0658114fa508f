"""Time-boxed cache of structured recommendations, one entry per day slot."""

from __future__ import annotations

import asyncio
import time
from typing import Optional

from pydantic import ValidationError

from picko.domain import CacheEntry, DaySlot, StructuredRecommendation
from picko.kv_store import KeyValueStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="recommendation_cache")

CACHE_KEY_PREFIX = "recommendation:"
DEFAULT_CACHE_TTL_MS = 12 * 60 * 60 * 1000


def _now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def cache_key(slot: DaySlot) -> str:
    """Storage key for a slot, e.g. ``recommendation:today``."""
    return f"{CACHE_KEY_PREFIX}{DaySlot(slot).value}"


class RecommendationCache:
    """
    Slot-keyed cache over a ``KeyValueStore``.

    Reads fail open: storage or decode errors are logged and reported as a
    miss. Writes and clears log and re-raise so callers can decide. Store calls
    run in a worker thread so the event loop is never blocked by Redis.
    """

    def __init__(self, store: KeyValueStore, ttl_ms: int = DEFAULT_CACHE_TTL_MS) -> None:
        self.store = store
        self.ttl_ms = ttl_ms

    def _is_expired(self, entry: CacheEntry, now: int) -> bool:
        return now - entry.timestamp > self.ttl_ms

    async def get(self, slot: DaySlot) -> Optional[StructuredRecommendation]:
        """Return the live entry for ``slot``, deleting it if it has expired."""
        key = cache_key(slot)
        try:
            raw = await asyncio.to_thread(self.store.get, key)
        except Exception as exc:
            logger.error("Error reading cache for %s: %s", key, exc)
            return None
        if not raw:
            return None

        try:
            entry = CacheEntry.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Discarding unreadable cache entry for %s: %s", key, exc)
            return None

        if self._is_expired(entry, _now_ms()):
            logger.info("Cache entry for %s expired; removing", key)
            try:
                await asyncio.to_thread(self.store.remove, key)
            except Exception as exc:
                logger.error("Error removing expired cache entry %s: %s", key, exc)
            return None

        logger.debug("Cache hit for %s", key)
        return entry.data

    async def set(self, slot: DaySlot, recommendation: StructuredRecommendation) -> None:
        """Store ``recommendation`` for ``slot`` stamped with the current time."""
        key = cache_key(slot)
        entry = CacheEntry(data=recommendation, timestamp=_now_ms())
        try:
            await asyncio.to_thread(self.store.set, key, entry.model_dump_json())
        except Exception as exc:
            logger.error("Error caching recommendation for %s: %s", key, exc)
            raise

    async def clear(self, slot: DaySlot) -> None:
        """Remove the entry for a single slot."""
        key = cache_key(slot)
        try:
            await asyncio.to_thread(self.store.remove, key)
        except Exception as exc:
            logger.error("Error clearing cache for %s: %s", key, exc)
            raise

    async def clear_all(self) -> None:
        """Remove both slot entries (preferences changed or profile reset).

        Every slot is attempted even if an earlier removal fails; the first
        error is re-raised once all slots have been tried.
        """
        first_error: Optional[Exception] = None
        for slot in DaySlot:
            try:
                await self.clear(slot)
            except Exception as exc:
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error
        logger.info("Cleared all cached recommendations")
