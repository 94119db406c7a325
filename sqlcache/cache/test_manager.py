"""
Tests for CacheManager and config driven cache construction, dood!
"""

from unittest.mock import Mock

import pytest

from ..codec import ExternalizerRegistry
from ..database import DatabaseWrapper
from ..sql import LengthUnit, SqlDialect, TypeTag
from .manager import CacheManager, schemaFromConfig
from .sql_cache import SqlCache
from .types import FailurePolicy


def makeMockDb() -> Mock:
    db = Mock(spec=DatabaseWrapper)
    db.dialect = SqlDialect.SQLFIRE
    db.fetchRows.return_value = [("EXISTS",)]
    db.execute.return_value = 1
    return db


class TestSchemaFromConfig:
    """Test cases for schemaFromConfig, dood!"""

    def test_string_cache_defaults(self):
        """Test string cache schema with defaults, dood!"""
        schema = schemaFromConfig("json", {"type": "string"})
        assert schema.tableName == "json"
        assert schema.schemaName == "SQLCACHE"
        assert [(c.name, c.type, c.length) for c in schema.keyColumns] == [("ID", TypeTag.VARCHAR, 1024)]
        assert [(c.name, c.type) for c in schema.valueColumns] == [("DATA", TypeTag.LONGVARCHAR)]

    def test_serialized_cache_with_custom_key(self):
        """Test serialized cache takes one custom key column, dood!"""
        schema = schemaFromConfig(
            "books",
            {
                "type": "serialized",
                "table": "BOOK_CACHE",
                "schema": "APP",
                "key-prefix": "key_",
                "value-prefix": "val_",
                "partition-by-primary-key": False,
                "key-columns": [{"name": "ISBN", "type": "varchar", "length": 13}],
            },
        )
        assert schema.qualifiedTableName == "APP.BOOK_CACHE"
        assert schema.keyPrefix == "key_"
        assert schema.valuePrefix == "val_"
        assert schema.partitionByPrimaryKey is False
        assert schema.keyColumns[0].name == "ISBN"
        assert schema.valueColumns[0].type == TypeTag.BLOB

    def test_serialized_cache_rejects_composite_key(self):
        """Test serialized cache refuses several key columns, dood!"""
        with pytest.raises(ValueError):
            schemaFromConfig(
                "books",
                {
                    "type": "serialized",
                    "key-columns": [{"name": "A", "type": "integer"}, {"name": "B", "type": "integer"}],
                },
            )

    def test_columns_cache(self):
        """Test column-defined cache keeps declared columns, dood!"""
        schema = schemaFromConfig(
            "orders",
            {
                "type": "columns",
                "key-columns": [{"name": "REGION", "type": "varchar", "length": 8}, {"name": "ID", "type": "integer"}],
                "value-columns": [{"name": "PAYLOAD", "type": "blob", "length": 1, "unit": "M"}],
            },
        )
        assert [c.name for c in schema.keyColumns] == ["REGION", "ID"]
        assert schema.valueColumns[0].unit == LengthUnit.M

    def test_columns_cache_requires_columns(self):
        """Test column-defined cache needs both column lists, dood!"""
        with pytest.raises(ValueError):
            schemaFromConfig("orders", {"type": "columns", "key-columns": [{"name": "ID", "type": "integer"}]})

    def test_unknown_type(self):
        """Test unknown cache type is rejected, dood!"""
        with pytest.raises(ValueError, match="unknown cache type"):
            schemaFromConfig("x", {"type": "redis"})


class TestCacheManager:
    """Test cases for CacheManager, dood!"""

    def test_from_config(self):
        """Test caches are built from config sections, dood!"""
        db = makeMockDb()
        registry = ExternalizerRegistry()
        manager = CacheManager.fromConfig(
            {
                "json": {"type": "string", "read-failure-policy": "RAISE"},
                "books": {"type": "serialized", "write-failure-policy": "raise"},
            },
            db,
            registry,
        )

        assert sorted(manager.getCacheNames()) == ["books", "json"]
        json = manager.getCache("json")
        books = manager.getCache("books")
        assert isinstance(json, SqlCache) and isinstance(books, SqlCache)
        assert json.readFailurePolicy == FailurePolicy.RAISE
        assert json.writeFailurePolicy == FailurePolicy.LOG
        assert json.codec is None
        assert books.writeFailurePolicy == FailurePolicy.RAISE
        assert books.codec is not None and books.codec.registry is registry
        assert registry.isFrozen

    def test_invalid_policy(self):
        """Test unknown policy names are rejected, dood!"""
        with pytest.raises(ValueError):
            CacheManager.fromConfig({"json": {"type": "string", "read-failure-policy": "ignore"}}, makeMockDb())

    def test_get_unknown_cache(self):
        """Test unknown names give None, dood!"""
        assert CacheManager().getCache("missing") is None

    def test_start_and_clear_all(self):
        """Test lifecycle helpers reach every cache, dood!"""
        db = makeMockDb()
        manager = CacheManager.fromConfig({"a": {"type": "string"}, "b": {"type": "string"}}, db)

        manager.startAll()
        assert all(cache.getStats()["provisioned"] for cache in manager.getCaches())

        manager.clearAll()
        assert db.execute.call_count == 2

    def test_add_cache_replaces_same_name(self):
        """Test registering a name twice keeps the last cache, dood!"""
        manager = CacheManager()
        first = Mock(**{"getName.return_value": "x"})
        second = Mock(**{"getName.return_value": "x"})
        manager.addCache(first)
        manager.addCache(second)
        assert manager.getCache("x") is second
        assert manager.getCacheNames() == ["x"]
