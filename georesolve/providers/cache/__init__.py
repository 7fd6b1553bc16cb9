"""Expiring key-value stores.

SQLiteCacheProvider is the durable default: entries survive restarts and
are shared by every process using the same database file.
MemoryCacheProvider keeps entries in a bounded in-process LRU, for tests and
single-process runs.  Both implement ICacheProvider, so the backend is a
one-line choice in ``georesolve/main.py``.
"""

from georesolve.providers.cache.memory_cache import MemoryCacheProvider
from georesolve.providers.cache.sqlite_cache import SQLiteCacheProvider

__all__ = ["MemoryCacheProvider", "SQLiteCacheProvider"]
