"""SQLite-backed expiring key-value store.

Persists cache entries to a local SQLite database (``data/cache.db`` by
default) using ``aiosqlite`` for async I/O, so geocoding results survive
restarts and are shared by every worker pointed at the same file.

Values are stored as JSON text next to an absolute ``expires_at`` epoch
timestamp.  Every storage error (locked/corrupt database, unwritable
directory, value that will not serialize) is logged and reported as a miss
or a skipped write; none of them propagate.
"""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Callable

import aiosqlite
import structlog

from georesolve.interfaces.cache_provider import ICacheProvider

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/cache.db")

# aiosqlite.Error is sqlite3.Error; OSError covers the filesystem;
# ValueError/TypeError cover JSON encode/decode.
_STORAGE_ERRORS = (aiosqlite.Error, OSError, ValueError, TypeError)

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS cache (
    key         TEXT PRIMARY KEY,
    value       TEXT NOT NULL,
    expires_at  REAL NOT NULL,
    created_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_CREATE_INDEX_SQL = "CREATE INDEX IF NOT EXISTS idx_cache_expires_at ON cache(expires_at);"

_SELECT_SQL = "SELECT value, expires_at FROM cache WHERE key = ?;"

_UPSERT_SQL = """\
INSERT INTO cache (key, value, expires_at)
VALUES (?, ?, ?)
ON CONFLICT(key)
DO UPDATE SET value      = excluded.value,
              expires_at = excluded.expires_at,
              created_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now');
"""

# The expiry guard stops a lazy eviction from deleting a fresh value that a
# concurrent writer upserted between our SELECT and this DELETE.
_DELETE_EXPIRED_KEY_SQL = "DELETE FROM cache WHERE key = ? AND expires_at <= ?;"

_DELETE_SQL = "DELETE FROM cache WHERE key = ?;"

_SWEEP_SQL = "DELETE FROM cache WHERE expires_at <= ?;"


class SQLiteCacheProvider(ICacheProvider):
    """Durable expiring store on a local SQLite file.

    Call :meth:`initialize` once at startup to create the table.  Each
    operation opens its own connection, so concurrent coroutines never
    share cursor state; SQLite serializes the writes.
    """

    def __init__(
        self,
        db_path: str | Path = _DEFAULT_DB_PATH,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._db_path = Path(db_path)
        self._clock = clock

    async def initialize(self) -> bool:
        """Create the cache table and index if they don't exist.

        Returns ``False`` (after logging) when the database cannot be
        prepared; the store then behaves as an always-empty cache.
        """
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_CREATE_TABLE_SQL)
                await db.execute(_CREATE_INDEX_SQL)
                await db.commit()
        except _STORAGE_ERRORS as exc:
            logger.warning("cache_db_init_failed", path=str(self._db_path), error=str(exc))
            return False
        logger.info("cache_db_initialized", path=str(self._db_path))
        return True

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        """Return the value for *key*; expired rows are deleted and read as a miss."""
        now = self._clock()
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(_SELECT_SQL, (key,))
                row = await cursor.fetchone()
                if row is None:
                    logger.debug("cache_miss", key=key)
                    return None

                raw_value, expires_at = row
                if now >= expires_at:
                    await db.execute(_DELETE_EXPIRED_KEY_SQL, (key, now))
                    await db.commit()
                    logger.debug("cache_expired", key=key)
                    return None

            value = json.loads(raw_value)
        except _STORAGE_ERRORS as exc:
            logger.warning("cache_get_failed", key=key, error=str(exc))
            return None

        logger.debug("cache_hit", key=key)
        return value

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Upsert *value* under *key*, expiring ``ttl`` seconds from now."""
        try:
            payload = json.dumps(value)
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_UPSERT_SQL, (key, payload, self._clock() + ttl))
                await db.commit()
        except _STORAGE_ERRORS as exc:
            logger.warning("cache_set_failed", key=key, error=str(exc))
            return
        logger.debug("cache_set", key=key, ttl=ttl)

    async def delete(self, key: str) -> None:
        """Remove *key* (no-op if absent)."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_DELETE_SQL, (key,))
                await db.commit()
        except _STORAGE_ERRORS as exc:
            logger.warning("cache_delete_failed", key=key, error=str(exc))
            return
        logger.debug("cache_delete", key=key)

    async def sweep_expired(self) -> int:
        """Delete every row whose ``expires_at`` has passed; return the row count."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(_SWEEP_SQL, (self._clock(),))
                await db.commit()
                removed = max(cursor.rowcount, 0)
        except _STORAGE_ERRORS as exc:
            logger.warning("cache_sweep_failed", error=str(exc))
            return 0
        logger.info("cache_swept", backend="sqlite", removed=removed)
        return removed

    def get_provider_name(self) -> str:
        return "sqlite"
