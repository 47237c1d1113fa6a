"""Tests for the shared-store metadata cache."""

import asyncio

from depmeta.resolution.cache import MetadataCache
from fakes import FakeClock

URL = "https://repo.example.com/maven2/g/a/maven-metadata.xml"


class TestMetadataCachePolicies:
    """Default TTL vs. no-ttl reads over one store."""

    def test_hit_within_ttl(self, cache, clock):
        async def _run():
            await cache.put(URL, "body")
            clock.advance(3599)
            return await cache.get(URL, cache.default_policy)

        assert asyncio.run(_run()) == "body"

    def test_expired_after_ttl(self, cache, clock):
        async def _run():
            await cache.put(URL, "body")
            clock.advance(3600)
            return await cache.get(URL, cache.default_policy)

        assert asyncio.run(_run()) is None

    def test_no_ttl_policy_always_misses(self, cache):
        async def _run():
            await cache.put(URL, "body")
            return await cache.get(URL, cache.no_ttl_policy)

        assert asyncio.run(_run()) is None

    def test_fresh_write_warms_default_policy(self, cache, clock):
        async def _run():
            await cache.put(URL, "old")
            clock.advance(7200)
            assert await cache.get(URL, cache.default_policy) is None
            # A fresh fetch writes back into the shared store.
            await cache.put(URL, "new")
            return await cache.get(URL, cache.default_policy)

        assert asyncio.run(_run()) == "new"

    def test_stats_and_clear(self, cache):
        async def _run():
            await cache.put(URL, "body")
            await cache.get(URL, cache.default_policy)
            await cache.get("https://other", cache.default_policy)

        asyncio.run(_run())
        stats = cache.stats()
        assert stats["total_entries"] == 1
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["default_ttl"] == 3600
        cache.clear()
        assert cache.stats()["total_entries"] == 0


class TestMetadataCachePersistence:
    """Entries persisted in cache_dir survive a new cache instance."""

    def test_entries_reloaded_from_disk(self, tmp_path):
        clock = FakeClock()
        first = MetadataCache(ttl=60, cache_dir=str(tmp_path), clock=clock)
        asyncio.run(first.put(URL, "persisted"))

        second = MetadataCache(ttl=60, cache_dir=str(tmp_path), clock=clock)
        assert asyncio.run(second.get(URL, second.default_policy)) == "persisted"

        clock.advance(61)
        third = MetadataCache(ttl=60, cache_dir=str(tmp_path), clock=clock)
        assert asyncio.run(third.get(URL, third.default_policy)) is None

    def test_corrupt_entry_is_a_miss(self, tmp_path):
        cache = MetadataCache(ttl=60, cache_dir=str(tmp_path), clock=FakeClock())
        asyncio.run(cache.put(URL, "body"))
        for path in tmp_path.iterdir():
            path.write_text("{not json", encoding="utf-8")
        reloaded = MetadataCache(ttl=60, cache_dir=str(tmp_path), clock=FakeClock())
        assert asyncio.run(reloaded.get(URL, reloaded.default_policy)) is None

    def test_discard_removes_persisted_entry(self, tmp_path):
        clock = FakeClock()
        cache = MetadataCache(ttl=60, cache_dir=str(tmp_path), clock=clock)

        async def _run():
            await cache.put(URL, "gone")
            await cache.discard(URL)
            await cache.discard(URL)
            return await cache.get(URL, cache.default_policy)

        assert asyncio.run(_run()) is None
        assert list(tmp_path.iterdir()) == []
        reloaded = MetadataCache(ttl=60, cache_dir=str(tmp_path), clock=clock)
        assert asyncio.run(reloaded.get(URL, reloaded.default_policy)) is None
