import unittest
from unittest.mock import patch

import redis

from picko.config import Settings
from picko.kv_store import InMemoryKeyValueStore, RedisKeyValueStore, StoreError, build_store
from tests.fakes import FakeRedis


class TestInMemoryKeyValueStore(unittest.TestCase):
    def test_set_get_remove(self):
        store = InMemoryKeyValueStore()
        self.assertIsNone(store.get("a"))
        store.set("a", "1")
        store.set("a", "2")
        self.assertEqual(store.get("a"), "2")
        store.remove("a")
        store.remove("a")
        self.assertIsNone(store.get("a"))

    def test_clear(self):
        store = InMemoryKeyValueStore()
        store.set("a", "1")
        store.set("b", "2")
        store.clear()
        self.assertIsNone(store.get("a"))
        self.assertIsNone(store.get("b"))


class TestRedisKeyValueStore(unittest.TestCase):
    def test_round_trip_uses_prefix_and_decodes_bytes(self):
        client = FakeRedis()
        store = RedisKeyValueStore(client, prefix="picko:")
        store.set("recommendation:today", '{"x": "é"}')
        self.assertIn("picko:recommendation:today", client.store)
        self.assertIsInstance(client.store["picko:recommendation:today"], bytes)
        self.assertEqual(store.get("recommendation:today"), '{"x": "é"}')
        store.remove("recommendation:today")
        self.assertIsNone(store.get("recommendation:today"))

    def test_errors_are_wrapped(self):
        client = FakeRedis()
        store = RedisKeyValueStore(client)
        client.fail_reads = True
        client.fail_writes = True
        with self.assertRaises(StoreError):
            store.get("k")
        with self.assertRaises(StoreError):
            store.set("k", "v")
        with self.assertRaises(StoreError):
            store.remove("k")


class TestBuildStore(unittest.TestCase):
    def test_in_memory_when_no_redis_url(self):
        store = build_store(Settings(store_redis_url=None))
        self.assertIsInstance(store, InMemoryKeyValueStore)

    def test_redis_when_reachable(self):
        fake = FakeRedis()
        fake.ping = lambda: True
        with patch("picko.kv_store.factory.redis.Redis.from_url", return_value=fake):
            store = build_store(Settings(store_redis_url="redis://:secret@cache:6379/0", store_prefix="t:"))
        self.assertIsInstance(store, RedisKeyValueStore)
        self.assertEqual(store.prefix, "t:")

    def test_falls_back_when_redis_unreachable(self):
        class Unreachable:
            def ping(self):
                raise redis.ConnectionError("nope")

        with patch("picko.kv_store.factory.redis.Redis.from_url", return_value=Unreachable()):
            store = build_store(Settings(store_redis_url="redis://cache:6379/0"))
        self.assertIsInstance(store, InMemoryKeyValueStore)

    def test_falls_back_when_redis_url_is_malformed(self):
        store = build_store(Settings(store_redis_url="localhost:6379"))
        self.assertIsInstance(store, InMemoryKeyValueStore)


if __name__ == "__main__":
    unittest.main()
