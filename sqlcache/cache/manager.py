"""
Cache manager: registry of named caches, dood!
"""

import logging
import threading
from typing import Any, Dict, List, Optional

from ..codec import ExternalizerRegistry, ObjectCodec
from ..database import DatabaseWrapper
from ..sql import DEFAULT_KEY_PREFIX, DEFAULT_SCHEMA_NAME, DEFAULT_VALUE_PREFIX, CacheSchema, ColumnDefinition, TypeTag
from .interface import CacheInterface
from .presets import serializedObjectCacheSchema, stringCacheSchema
from .sql_cache import SqlCache
from .types import FailurePolicy

logger = logging.getLogger(__name__)

CACHE_TYPE_STRING = "string"
CACHE_TYPE_SERIALIZED = "serialized"
CACHE_TYPE_COLUMNS = "columns"


def _parseColumns(cacheName: str, key: str, data: Any) -> List[ColumnDefinition]:
    if not isinstance(data, list) or not data:
        raise ValueError(f"Cache {cacheName}: '{key}' should be a non-empty list of column tables, dood!")
    return [ColumnDefinition.fromDict(item) for item in data]


def schemaFromConfig(name: str, config: Dict[str, Any]) -> CacheSchema:
    """
    Build CacheSchema from a ``[caches.<name>]`` config section, dood!

    Raises:
        ValueError: On unknown cache type or invalid columns
    """
    cacheType = str(config.get("type", CACHE_TYPE_STRING)).lower()
    tableName = str(config.get("table", name))
    schemaName = str(config.get("schema", DEFAULT_SCHEMA_NAME))
    keyPrefix = str(config.get("key-prefix", DEFAULT_KEY_PREFIX))
    valuePrefix = str(config.get("value-prefix", DEFAULT_VALUE_PREFIX))
    partitionByPrimaryKey = bool(config.get("partition-by-primary-key", True))

    if cacheType == CACHE_TYPE_STRING:
        return stringCacheSchema(
            tableName,
            schemaName=schemaName,
            keyPrefix=keyPrefix,
            valuePrefix=valuePrefix,
            partitionByPrimaryKey=partitionByPrimaryKey,
        )
    elif cacheType == CACHE_TYPE_SERIALIZED:
        kwargs: Dict[str, Any] = {}
        if "key-columns" in config:
            keyColumns = _parseColumns(name, "key-columns", config["key-columns"])
            if len(keyColumns) != 1:
                raise ValueError(f"Cache {name}: serialized cache takes exactly one key column, dood!")
            kwargs["keyColumn"] = keyColumns[0]
        return serializedObjectCacheSchema(
            tableName,
            schemaName=schemaName,
            keyPrefix=keyPrefix,
            valuePrefix=valuePrefix,
            partitionByPrimaryKey=partitionByPrimaryKey,
            **kwargs,
        )
    elif cacheType == CACHE_TYPE_COLUMNS:
        return CacheSchema(
            tableName=tableName,
            keyColumns=_parseColumns(name, "key-columns", config.get("key-columns", None)),
            valueColumns=_parseColumns(name, "value-columns", config.get("value-columns", None)),
            schemaName=schemaName,
            keyPrefix=keyPrefix,
            valuePrefix=valuePrefix,
            partitionByPrimaryKey=partitionByPrimaryKey,
        )

    raise ValueError(f"Cache {name}: unknown cache type '{cacheType}', dood!")


class CacheManager:
    """
    Holds named caches and lets callers look them up by name, dood!

    Example:
        >>> manager = CacheManager.fromConfig(configManager.getCachesConfig(), db)
        >>> manager.startAll()
        >>> books = manager.getCache("books")
        >>> books.put(1, Book(1, "Dune"))
    """

    def __init__(self):
        self._caches: Dict[str, CacheInterface] = {}
        self._lock = threading.RLock()

    @classmethod
    def fromConfig(
        cls,
        cachesConfig: Dict[str, Dict[str, Any]],
        db: DatabaseWrapper,
        registry: Optional[ExternalizerRegistry] = None,
    ) -> "CacheManager":
        """
        Create manager with one SqlCache per ``[caches.<name>]`` section, dood!

        Args:
            cachesConfig: Cache name -> cache config section
            db: Database wrapper shared by all caches
            registry: Externalizers for caches with BLOB value columns,
                      shared by all of them and frozen here

        Raises:
            ValueError: On invalid cache configuration
        """
        manager = cls()
        for name, config in cachesConfig.items():
            schema = schemaFromConfig(name, config)
            codec: Optional[ObjectCodec] = None
            if any(col.type == TypeTag.BLOB for col in schema.valueColumns):
                codec = ObjectCodec(registry)

            manager.addCache(
                SqlCache(
                    name,
                    db,
                    schema,
                    codec=codec,
                    readFailurePolicy=FailurePolicy(str(config.get("read-failure-policy", FailurePolicy.LOG)).lower()),
                    writeFailurePolicy=FailurePolicy(
                        str(config.get("write-failure-policy", FailurePolicy.LOG)).lower()
                    ),
                )
            )
        logger.info(f"Configured {len(manager._caches)} caches: {manager.getCacheNames()}, dood!")
        return manager

    def addCache(self, cache: CacheInterface) -> None:
        """Register cache under its name, replacing any cache with the same name"""
        with self._lock:
            name = cache.getName()
            if name in self._caches:
                logger.warning(f"Replacing cache {name}, dood!")
            self._caches[name] = cache

    def getCache(self, name: str) -> Optional[CacheInterface]:
        with self._lock:
            return self._caches.get(name, None)

    def getCacheNames(self) -> List[str]:
        with self._lock:
            return list(self._caches.keys())

    def getCaches(self) -> List[CacheInterface]:
        with self._lock:
            return list(self._caches.values())

    def startAll(self) -> None:
        """
        Provision every SqlCache, dood!

        Raises:
            ProvisioningError: On the first cache that fails to provision
        """
        for cache in self.getCaches():
            if isinstance(cache, SqlCache):
                cache.start()

    def clearAll(self) -> None:
        for cache in self.getCaches():
            cache.clear()
