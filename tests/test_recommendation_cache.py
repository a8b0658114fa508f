import json
import unittest
from unittest.mock import patch

from picko.domain import DaySlot, StructuredRecommendation
from picko.kv_store import InMemoryKeyValueStore, RedisKeyValueStore
from picko.recommendation_cache import DEFAULT_CACHE_TTL_MS, RecommendationCache, cache_key
from tests.fakes import FakeRedis

T0 = 1_700_000_000_000
TWELVE_HOURS_MS = 12 * 60 * 60 * 1000


def _rec(summary="Layer up.", items=("sweater", "pants")):
    return StructuredRecommendation(summary=summary, clothing_items=list(items))


class FailingRemoveStore(InMemoryKeyValueStore):
    def __init__(self, failing_key):
        super().__init__()
        self.failing_key = failing_key

    def remove(self, key):
        if key == self.failing_key:
            raise OSError("remove failed")
        super().remove(key)


class TestRecommendationCache(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.store = InMemoryKeyValueStore()
        self.cache = RecommendationCache(self.store)

    async def test_miss_on_empty_store(self):
        self.assertIsNone(await self.cache.get(DaySlot.TODAY))

    async def test_set_then_get(self):
        await self.cache.set(DaySlot.TODAY, _rec())
        self.assertEqual(await self.cache.get(DaySlot.TODAY), _rec())

    async def test_entry_format(self):
        with patch("picko.recommendation_cache._now_ms", return_value=T0):
            await self.cache.set(DaySlot.TOMORROW, _rec())
        stored = json.loads(self.store.get("recommendation:tomorrow"))
        self.assertEqual(stored["timestamp"], T0)
        self.assertEqual(stored["data"], {"summary": "Layer up.", "clothing_items": ["sweater", "pants"]})

    async def test_expiry_boundary(self):
        self.assertEqual(DEFAULT_CACHE_TTL_MS, TWELVE_HOURS_MS)
        with patch("picko.recommendation_cache._now_ms") as now:
            now.return_value = T0
            await self.cache.set(DaySlot.TODAY, _rec())

            now.return_value = T0 + TWELVE_HOURS_MS - 1
            self.assertEqual(await self.cache.get(DaySlot.TODAY), _rec())

            now.return_value = T0 + TWELVE_HOURS_MS
            self.assertEqual(await self.cache.get(DaySlot.TODAY), _rec())

            now.return_value = T0 + TWELVE_HOURS_MS + 1
            self.assertIsNone(await self.cache.get(DaySlot.TODAY))
        # expired entries are removed eagerly
        self.assertIsNone(self.store.get(cache_key(DaySlot.TODAY)))

    async def test_slots_are_isolated(self):
        await self.cache.set(DaySlot.TODAY, _rec("Today."))
        self.assertIsNone(await self.cache.get(DaySlot.TOMORROW))
        await self.cache.set(DaySlot.TOMORROW, _rec("Tomorrow."))
        self.assertEqual((await self.cache.get(DaySlot.TODAY)).summary, "Today.")
        await self.cache.clear(DaySlot.TODAY)
        self.assertIsNone(await self.cache.get(DaySlot.TODAY))
        self.assertEqual((await self.cache.get(DaySlot.TOMORROW)).summary, "Tomorrow.")

    async def test_set_overwrites(self):
        await self.cache.set(DaySlot.TODAY, _rec("Old."))
        await self.cache.set(DaySlot.TODAY, _rec("New."))
        self.assertEqual((await self.cache.get(DaySlot.TODAY)).summary, "New.")

    async def test_clear_all_removes_both_slots(self):
        await self.cache.set(DaySlot.TODAY, _rec())
        await self.cache.set(DaySlot.TOMORROW, _rec())
        await self.cache.clear_all()
        self.assertIsNone(await self.cache.get(DaySlot.TODAY))
        self.assertIsNone(await self.cache.get(DaySlot.TOMORROW))

    async def test_corrupt_entry_is_a_miss(self):
        self.store.set(cache_key(DaySlot.TODAY), "not-json")
        self.assertIsNone(await self.cache.get(DaySlot.TODAY))
        self.store.set(cache_key(DaySlot.TODAY), json.dumps({"data": {"summary": "x"}}))
        self.assertIsNone(await self.cache.get(DaySlot.TODAY))

    async def test_clear_all_removes_remaining_slots_when_one_fails(self):
        store = FailingRemoveStore(cache_key(DaySlot.TODAY))
        cache = RecommendationCache(store)
        await cache.set(DaySlot.TODAY, _rec("Old today."))
        await cache.set(DaySlot.TOMORROW, _rec("Old tomorrow."))

        with self.assertRaises(OSError):
            await cache.clear_all()

        self.assertIsNone(await cache.get(DaySlot.TOMORROW))

    async def test_entry_without_items_is_a_miss(self):
        entry = {"data": {"summary": "", "clothing_items": []}, "timestamp": T0}
        self.store.set(cache_key(DaySlot.TODAY), json.dumps(entry))
        with patch("picko.recommendation_cache._now_ms", return_value=T0):
            self.assertIsNone(await self.cache.get(DaySlot.TODAY))


class TestRecommendationCacheStorageErrors(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.client = FakeRedis()
        self.cache = RecommendationCache(RedisKeyValueStore(self.client))

    async def test_read_errors_fail_open(self):
        await self.cache.set(DaySlot.TODAY, _rec())
        self.client.fail_reads = True
        self.assertIsNone(await self.cache.get(DaySlot.TODAY))

    async def test_write_errors_propagate(self):
        self.client.fail_writes = True
        with self.assertRaises(Exception):
            await self.cache.set(DaySlot.TODAY, _rec())
        with self.assertRaises(Exception):
            await self.cache.clear_all()

    async def test_failed_expiry_delete_still_a_miss(self):
        with patch("picko.recommendation_cache._now_ms", return_value=T0):
            await self.cache.set(DaySlot.TODAY, _rec())
        self.client.fail_writes = True
        with patch("picko.recommendation_cache._now_ms", return_value=T0 + TWELVE_HOURS_MS + 1):
            self.assertIsNone(await self.cache.get(DaySlot.TODAY))


if __name__ == "__main__":
    unittest.main()
