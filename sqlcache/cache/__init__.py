"""
sqlcache.cache - SQL table backed key-value caches, dood!

Core Components:
- CacheInterface: synchronous cache contract
- SqlCache: cache storing one row per key in a provisioned table
- Presets: string, serialized-object and column-defined cache flavors
- CacheManager: registry of named caches, buildable from config

Example Usage:
    >>> from sqlcache.cache import createStringCache
    >>> from sqlcache.database import DatabaseWrapper
    >>>
    >>> db = DatabaseWrapper("cache.db", attach={"SQLCACHE": "sqlcache.db"})
    >>> cache = createStringCache("json", db)
    >>> cache.put("1", '{"title": "Dune"}')
    >>> cache.get("1")
    '{"title": "Dune"}'
"""

from .interface import CacheInterface
from .manager import CacheManager, schemaFromConfig
from .presets import (
    createColumnDefinedCache,
    createSerializedObjectCache,
    createStringCache,
    serializedObjectCacheSchema,
    stringCacheSchema,
)
from .sql_cache import SqlCache
from .types import AmbiguousResultError, FailurePolicy, K, RowMapper, V

__all__ = [
    "CacheInterface",
    "SqlCache",
    "CacheManager",
    "schemaFromConfig",
    "FailurePolicy",
    "AmbiguousResultError",
    "RowMapper",
    "K",
    "V",
    "stringCacheSchema",
    "serializedObjectCacheSchema",
    "createStringCache",
    "createSerializedObjectCache",
    "createColumnDefinedCache",
]
