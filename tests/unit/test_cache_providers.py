"""Unit tests for the expiring key-value stores (memory and SQLite).

Time is driven by an injected FakeClock so TTL behaviour is tested
without sleeping.
"""

from __future__ import annotations

from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio

from georesolve.providers.cache.memory_cache import MemoryCacheProvider
from georesolve.providers.cache.sqlite_cache import SQLiteCacheProvider
from tests.conftest import FakeClock


# ======================================================================
# MemoryCacheProvider
# ======================================================================


class TestMemoryCacheProvider:
    @pytest.mark.asyncio
    async def test_get_missing_key_returns_none(self, memory_store: MemoryCacheProvider) -> None:
        assert await memory_store.get("nonexistent") is None

    @pytest.mark.asyncio
    async def test_set_and_get(self, memory_store: MemoryCacheProvider) -> None:
        await memory_store.set("key1", {"lat": 1.0}, ttl=60)
        assert await memory_store.get("key1") == {"lat": 1.0}

    @pytest.mark.asyncio
    async def test_set_overwrites_value_and_expiry(
        self, memory_store: MemoryCacheProvider, clock: FakeClock
    ) -> None:
        await memory_store.set("key1", "old", ttl=10)
        clock.advance(5)
        await memory_store.set("key1", "new", ttl=10)
        clock.advance(8)  # past the first expiry, inside the second
        assert await memory_store.get("key1") == "new"

    @pytest.mark.asyncio
    async def test_entry_expires_after_ttl(
        self, memory_store: MemoryCacheProvider, clock: FakeClock
    ) -> None:
        await memory_store.set("key1", "v", ttl=60)
        clock.advance(59)
        assert await memory_store.get("key1") == "v"
        clock.advance(1)
        assert await memory_store.get("key1") is None
        assert len(memory_store) == 0  # evicted on read

    @pytest.mark.asyncio
    async def test_delete_removes_key(self, memory_store: MemoryCacheProvider) -> None:
        await memory_store.set("key1", "value1", ttl=60)
        await memory_store.delete("key1")
        assert await memory_store.get("key1") is None

    @pytest.mark.asyncio
    async def test_delete_nonexistent_is_noop(self, memory_store: MemoryCacheProvider) -> None:
        await memory_store.delete("nonexistent")  # should not raise

    @pytest.mark.asyncio
    async def test_returned_value_is_a_copy(self, memory_store: MemoryCacheProvider) -> None:
        await memory_store.set("key1", {"artists": ["a"]}, ttl=60)
        value = await memory_store.get("key1")
        value["artists"].append("mutated")
        assert await memory_store.get("key1") == {"artists": ["a"]}

    @pytest.mark.asyncio
    async def test_sweep_expired_counts_removed(
        self, memory_store: MemoryCacheProvider, clock: FakeClock
    ) -> None:
        await memory_store.set("short", 1, ttl=10)
        await memory_store.set("long", 2, ttl=1000)
        clock.advance(11)

        assert await memory_store.sweep_expired() == 1
        assert len(memory_store) == 1
        assert await memory_store.get("long") == 2

    @pytest.mark.asyncio
    async def test_lru_bound(self, clock: FakeClock) -> None:
        store = MemoryCacheProvider(max_size=2, clock=clock)
        await store.set("a", 1, ttl=60)
        await store.set("b", 2, ttl=60)
        await store.set("c", 3, ttl=60)
        assert len(store) == 2
        assert await store.get("a") is None

    def test_provider_name(self, memory_store: MemoryCacheProvider) -> None:
        assert memory_store.get_provider_name() == "memory"


# ======================================================================
# SQLiteCacheProvider
# ======================================================================


@pytest_asyncio.fixture
async def sqlite_store(tmp_path: Path, clock: FakeClock) -> SQLiteCacheProvider:
    store = SQLiteCacheProvider(db_path=tmp_path / "cache.db", clock=clock)
    assert await store.initialize() is True
    return store


class TestSQLiteCacheProvider:
    @pytest.mark.asyncio
    async def test_initialize_creates_parent_directory(self, tmp_path: Path) -> None:
        db_path = tmp_path / "nested" / "dir" / "cache.db"
        store = SQLiteCacheProvider(db_path=db_path)
        assert await store.initialize() is True
        assert db_path.exists()

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, sqlite_store: SQLiteCacheProvider) -> None:
        assert await sqlite_store.initialize() is True

    @pytest.mark.asyncio
    async def test_set_and_get_json_value(self, sqlite_store: SQLiteCacheProvider) -> None:
        value = {"latitude": 40.715, "longitude": -73.98, "provider": "google_maps"}
        await sqlite_store.set("geocode:abc", value, ttl=86400)
        assert await sqlite_store.get("geocode:abc") == value

    @pytest.mark.asyncio
    async def test_string_value(self, sqlite_store: SQLiteCacheProvider) -> None:
        await sqlite_store.set("location_extract:abc", "NONE", ttl=3600)
        assert await sqlite_store.get("location_extract:abc") == "NONE"

    @pytest.mark.asyncio
    async def test_upsert_replaces(self, sqlite_store: SQLiteCacheProvider) -> None:
        await sqlite_store.set("k", "old", ttl=60)
        await sqlite_store.set("k", "new", ttl=60)
        assert await sqlite_store.get("k") == "new"

    @pytest.mark.asyncio
    async def test_expired_row_reads_as_miss_and_is_deleted(
        self, sqlite_store: SQLiteCacheProvider, clock: FakeClock, tmp_path: Path
    ) -> None:
        await sqlite_store.set("k", "v", ttl=60)
        clock.advance(60)
        assert await sqlite_store.get("k") is None

        async with aiosqlite.connect(str(tmp_path / "cache.db")) as db:
            cursor = await db.execute("SELECT COUNT(*) FROM cache")
            (count,) = await cursor.fetchone()
        assert count == 0

    @pytest.mark.asyncio
    async def test_delete(self, sqlite_store: SQLiteCacheProvider) -> None:
        await sqlite_store.set("k", "v", ttl=60)
        await sqlite_store.delete("k")
        assert await sqlite_store.get("k") is None

    @pytest.mark.asyncio
    async def test_sweep_expired(
        self, sqlite_store: SQLiteCacheProvider, clock: FakeClock
    ) -> None:
        await sqlite_store.set("a", 1, ttl=10)
        await sqlite_store.set("b", 2, ttl=10)
        await sqlite_store.set("c", 3, ttl=1000)
        clock.advance(10)

        assert await sqlite_store.sweep_expired() == 2
        assert await sqlite_store.get("c") == 3

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path: Path, clock: FakeClock) -> None:
        first = SQLiteCacheProvider(db_path=tmp_path / "cache.db", clock=clock)
        await first.initialize()
        await first.set("k", {"v": 1}, ttl=60)

        second = SQLiteCacheProvider(db_path=tmp_path / "cache.db", clock=clock)
        assert await second.get("k") == {"v": 1}

    @pytest.mark.asyncio
    async def test_unserializable_value_is_dropped(
        self, sqlite_store: SQLiteCacheProvider
    ) -> None:
        await sqlite_store.set("k", {"bad": object()}, ttl=60)  # should not raise
        assert await sqlite_store.get("k") is None

    @pytest.mark.asyncio
    async def test_unusable_database_never_raises(self, tmp_path: Path) -> None:
        # A directory where the database file should be cannot be opened.
        bad_path = tmp_path / "is_a_dir"
        bad_path.mkdir()
        store = SQLiteCacheProvider(db_path=bad_path)

        assert await store.initialize() is False
        await store.set("k", "v", ttl=60)
        assert await store.get("k") is None
        await store.delete("k")
        assert await store.sweep_expired() == 0

    @pytest.mark.asyncio
    async def test_corrupt_database_file_never_raises(self, tmp_path: Path) -> None:
        db_path = tmp_path / "cache.db"
        db_path.write_bytes(b"this is not a sqlite database" * 100)
        store = SQLiteCacheProvider(db_path=db_path)

        assert await store.initialize() is False
        assert await store.get("k") is None

    def test_provider_name(self, tmp_path: Path) -> None:
        assert SQLiteCacheProvider(db_path=tmp_path / "c.db").get_provider_name() == "sqlite"
