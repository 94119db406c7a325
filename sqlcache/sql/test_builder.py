"""
Tests for SQLBuilder and CacheSchema, dood!
"""

from dataclasses import dataclass

import pytest

from .binders import BinderError, ObjectPropertyBinder, PriorityBinder, SingleValueBinder, bindParameters
from .builder import SQLBuilder
from .columns import ColumnDefinition
from .dialect import SqlDialect
from .schema import CacheSchema
from .types import LengthUnit, TypeTag


@dataclass
class OrderKey:
    ID: int
    REGION: str


@dataclass
class OrderValue:
    TOTAL: str
    NOTE: str


def makeSingleColumnSchema(**kwargs) -> CacheSchema:
    return CacheSchema(
        tableName="greetings",
        keyColumns=[ColumnDefinition("ID", TypeTag.INTEGER)],
        valueColumns=[ColumnDefinition("DATA", TypeTag.VARCHAR, length=100)],
        **kwargs,
    )


def makeMultiColumnSchema(**kwargs) -> CacheSchema:
    return CacheSchema(
        tableName="orders",
        keyColumns=[ColumnDefinition("REGION", TypeTag.VARCHAR, length=8), ColumnDefinition("ID", TypeTag.INTEGER)],
        valueColumns=[
            ColumnDefinition("TOTAL", TypeTag.DECIMAL, precision=10, scale=2),
            ColumnDefinition("NOTE", TypeTag.CLOB, length=1, unit=LengthUnit.K),
        ],
        **kwargs,
    )


class TestCacheSchema:
    """Test cases for CacheSchema validation, dood!"""

    def test_defaults(self):
        """Test default schema name, prefixes and partitioning, dood!"""
        schema = makeSingleColumnSchema()
        assert schema.schemaName == "SQLCACHE"
        assert schema.keyPrefix == "k_"
        assert schema.valuePrefix == "v_"
        assert schema.partitionByPrimaryKey is True
        assert schema.qualifiedTableName == "SQLCACHE.greetings"
        assert isinstance(schema.keyColumns, tuple)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"tableName": ""},
            {"keyColumns": []},
            {"valueColumns": []},
            {"schemaName": ""},
            {"keyPrefix": ""},
            {"valuePrefix": ""},
            {"keyPrefix": "c_", "valuePrefix": "c_"},
            {"keyColumns": [ColumnDefinition("ID", TypeTag.INTEGER), ColumnDefinition("ID", TypeTag.BIGINT)]},
        ],
    )
    def test_invalid_schema(self, kwargs):
        """Test invalid schemas are rejected at construction, dood!"""
        params = {
            "tableName": "t",
            "keyColumns": [ColumnDefinition("ID", TypeTag.INTEGER)],
            "valueColumns": [ColumnDefinition("DATA", TypeTag.VARCHAR)],
        }
        params.update(kwargs)
        with pytest.raises(ValueError):
            CacheSchema(**params)

    def test_equal_prefixes_rejected(self):
        """Test key and value namespaces must not share a prefix, dood!"""
        with pytest.raises(ValueError, match="must differ"):
            makeSingleColumnSchema(keyPrefix="x_", valuePrefix="x_")


class TestSQLBuilder:
    """Test cases for statement rendering, dood!"""

    def test_single_column_statements(self):
        """Test statements of a single key/value column cache, dood!"""
        builder = SQLBuilder(makeSingleColumnSchema())

        assert builder.getSelectSQL() == "SELECT v_DATA FROM SQLCACHE.greetings WHERE k_ID=:k_ID"
        assert builder.getCreateSQL() == (
            "CREATE TABLE SQLCACHE.greetings (k_ID INTEGER, v_DATA VARCHAR(100), PRIMARY KEY(k_ID)) "
            "PARTITION BY PRIMARY KEY"
        )
        assert builder.getCreateSchemaSQL() == "CREATE SCHEMA SQLCACHE"
        assert builder.getInsertSQL() == "INSERT INTO SQLCACHE.greetings (k_ID, v_DATA) VALUES (:k_ID, :v_DATA)"
        assert builder.getUpdateSQL() == "UPDATE SQLCACHE.greetings SET v_DATA=:v_DATA WHERE k_ID=:k_ID"
        assert builder.getDeleteSQL() == "DELETE FROM SQLCACHE.greetings"
        assert builder.getEvictSQL() == "DELETE FROM SQLCACHE.greetings WHERE k_ID=:k_ID"
        assert builder.getClearSQL() == "DELETE FROM SQLCACHE.greetings"

    def test_get_binding_resolves_key(self):
        """Test binding for get(1) resolves k_ID to 1, dood!"""
        builder = SQLBuilder(makeSingleColumnSchema())
        params = bindParameters(builder.keyBinder(1), builder.select.parameters)
        assert params == {"k_ID": 1}

    def test_multi_column_declaration_order(self):
        """Test columns appear in declaration order everywhere, dood!"""
        builder = SQLBuilder(makeMultiColumnSchema(partitionByPrimaryKey=False))

        assert builder.getCreateSQL() == (
            "CREATE TABLE SQLCACHE.orders (k_REGION VARCHAR(8), k_ID INTEGER, "
            "v_TOTAL DECIMAL(10, 2), v_NOTE CLOB(1K), PRIMARY KEY(k_REGION, k_ID))"
        )
        assert builder.getInsertSQL() == (
            "INSERT INTO SQLCACHE.orders (k_REGION, k_ID, v_TOTAL, v_NOTE) "
            "VALUES (:k_REGION, :k_ID, :v_TOTAL, :v_NOTE)"
        )
        assert builder.getSelectSQL() == (
            "SELECT v_TOTAL, v_NOTE FROM SQLCACHE.orders WHERE k_REGION=:k_REGION AND k_ID=:k_ID"
        )
        assert builder.getUpdateSQL() == (
            "UPDATE SQLCACHE.orders SET v_TOTAL=:v_TOTAL, v_NOTE=:v_NOTE WHERE k_REGION=:k_REGION AND k_ID=:k_ID"
        )
        assert builder.keyParameters == ("k_REGION", "k_ID")
        assert builder.valueParameters == ("v_TOTAL", "v_NOTE")
        assert builder.insert.parameters == ("k_REGION", "k_ID", "v_TOTAL", "v_NOTE")
        assert builder.update.parameters == ("v_TOTAL", "v_NOTE", "k_REGION", "k_ID")

    def test_custom_schema_and_prefixes(self):
        """Test schema name and prefixes are configurable, dood!"""
        builder = SQLBuilder(makeSingleColumnSchema(schemaName="APP", keyPrefix="key_", valuePrefix="val_"))
        assert builder.getSelectSQL() == "SELECT val_DATA FROM APP.greetings WHERE key_ID=:key_ID"
        assert builder.getCreateSchemaSQL() == "CREATE SCHEMA APP"

    def test_catalog_queries(self):
        """Test catalog queries use schema name and upper-cased table name, dood!"""
        builder = SQLBuilder(makeSingleColumnSchema())
        assert builder.getSchemaExistsSQL() == "SELECT SCHEMANAME FROM SYS.SYSSCHEMAS WHERE SCHEMANAME=:schemaName"
        assert builder.getTableExistsSQL() == (
            "SELECT TABLENAME FROM SYS.SYSTABLES WHERE TABLESCHEMANAME=:schemaName AND TABLENAME=:tableName"
        )
        assert builder.getCatalogParameters() == {"schemaName": "SQLCACHE", "tableName": "GREETINGS"}
        assert builder.tableExists.parameters == ("schemaName", "tableName")

    def test_sqlite_dialect(self):
        """Test sqlite catalog queries and DDL without partitioning, dood!"""
        builder = SQLBuilder(makeSingleColumnSchema(), SqlDialect.SQLITE)

        assert builder.getCreateSQL() == (
            "CREATE TABLE SQLCACHE.greetings (k_ID INTEGER, v_DATA VARCHAR(100), PRIMARY KEY(k_ID))"
        )
        assert builder.getSchemaExistsSQL() == (
            "SELECT name FROM pragma_database_list WHERE name=:schemaName COLLATE NOCASE"
        )
        assert builder.getTableExistsSQL() == (
            "SELECT name FROM SQLCACHE.sqlite_master WHERE type='table' AND name=:tableName COLLATE NOCASE"
        )
        assert builder.schemaExists.parameters == ("schemaName",)
        assert builder.tableExists.parameters == ("tableName",)
        assert builder.getSelectSQL() == "SELECT v_DATA FROM SQLCACHE.greetings WHERE k_ID=:k_ID"

    @pytest.mark.parametrize(
        "name, expected",
        [("sqlfire", SqlDialect.SQLFIRE), ("SQLite", SqlDialect.SQLITE), (" sqlite ", SqlDialect.SQLITE)],
    )
    def test_dialect_from_name(self, name, expected):
        """Test dialect lookup by config name, dood!"""
        assert SqlDialect.fromName(name) == expected

    def test_unknown_dialect(self):
        """Test unknown dialect names are rejected, dood!"""
        with pytest.raises(ValueError, match="Unknown SQL dialect"):
            SqlDialect.fromName("oracle")

    def test_binder_factories(self):
        """Test single columns bind raw values, multiple columns bind properties, dood!"""
        single = SQLBuilder(makeSingleColumnSchema())
        assert isinstance(single.keyBinder(1), SingleValueBinder)
        assert isinstance(single.valueBinder("hello"), SingleValueBinder)
        assert isinstance(single.keyValueBinder(1, "hello"), PriorityBinder)

        multi = SQLBuilder(makeMultiColumnSchema())
        assert isinstance(multi.keyBinder(OrderKey(1, "EU")), ObjectPropertyBinder)

    def test_key_value_binding_for_update(self):
        """Test UPDATE parameters come from key and value objects, dood!"""
        builder = SQLBuilder(makeMultiColumnSchema())
        binder = builder.keyValueBinder(OrderKey(7, "EU"), OrderValue("12.50", "fragile"))
        params = bindParameters(binder, builder.update.parameters)
        assert params == {"v_TOTAL": "12.50", "v_NOTE": "fragile", "k_REGION": "EU", "k_ID": 7}

    def test_key_object_missing_property(self):
        """Test key object without a key property fails loudly, dood!"""
        builder = SQLBuilder(makeMultiColumnSchema())
        with pytest.raises(BinderError):
            bindParameters(builder.keyBinder(OrderValue("1", "x")), builder.select.parameters)
