"""
SQL generation for cache tables, dood!

SQLBuilder renders every statement a cache needs from its CacheSchema once,
at construction time. Rendered statements are immutable and can be shared by
any number of threads. Per-call binders for the key and value objects are
created by the builder's factory methods.

Naming convention:
    A column's identifier in the table and its placeholder name are the same
    string: the namespace prefix followed by the declared column name, so key
    column ``ID`` becomes ``k_ID`` and is compared as ``k_ID=:k_ID``. Declared
    (unprefixed) names are what object properties are matched against.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .binders import ObjectPropertyBinder, ParameterBinder, PriorityBinder, SingleValueBinder
from .columns import (
    ColumnDefinition,
    joinColumns,
    nameEqualsPlaceholderOf,
    parameterNameOf,
    placeholderOf,
    renderColumnDefinition,
)
from .dialect import SqlDialect
from .schema import CacheSchema

logger = logging.getLogger(__name__)

SCHEMA_NAME_PARAM = "schemaName"
TABLE_NAME_PARAM = "tableName"


@dataclass(frozen=True)
class SqlStatement:
    """
    Rendered SQL statement with the names of its placeholders, dood!

    Attributes:
        sql: Statement text using ``:name`` placeholders
        parameters: Placeholder names in order of appearance (without colon)
    """

    sql: str
    parameters: Tuple[str, ...] = ()

    def __str__(self) -> str:
        return self.sql


class SQLBuilder:
    """
    Renders CREATE/SELECT/INSERT/UPDATE/DELETE statements for a cache table, dood!

    Columns appear in the statements in declaration order, key columns always
    before value columns.

    Example:
        >>> schema = CacheSchema(
        ...     tableName="greetings",
        ...     keyColumns=[ColumnDefinition("ID", TypeTag.INTEGER)],
        ...     valueColumns=[ColumnDefinition("DATA", TypeTag.VARCHAR, length=100)],
        ... )
        >>> builder = SQLBuilder(schema)
        >>> builder.getSelectSQL()
        'SELECT v_DATA FROM SQLCACHE.greetings WHERE k_ID=:k_ID'
    """

    def __init__(self, schema: CacheSchema, dialect: SqlDialect = SqlDialect.SQLFIRE):
        self.schema = schema
        self.dialect = SqlDialect(dialect)

        keyColumns = schema.keyColumns
        valueColumns = schema.valueColumns
        keyPrefix = schema.keyPrefix
        valuePrefix = schema.valuePrefix
        tableName = schema.qualifiedTableName

        self._keyParameters = tuple(parameterNameOf(col, keyPrefix) for col in keyColumns)
        self._valueParameters = tuple(parameterNameOf(col, valuePrefix) for col in valueColumns)

        whereClause = " WHERE " + joinColumns(keyColumns, nameEqualsPlaceholderOf, keyPrefix, " AND ")

        createSQL = (
            f"CREATE TABLE {tableName} ("
            + joinColumns(keyColumns, renderColumnDefinition, keyPrefix)
            + ", "
            + joinColumns(valueColumns, renderColumnDefinition, valuePrefix)
            + ", PRIMARY KEY("
            + joinColumns(keyColumns, parameterNameOf, keyPrefix)
            + "))"
        )
        if schema.partitionByPrimaryKey and self.dialect.supportsPartitioning:
            createSQL += " PARTITION BY PRIMARY KEY"
        self.create = SqlStatement(createSQL)

        self.createSchema = SqlStatement(f"CREATE SCHEMA {schema.schemaName}")

        self.select = SqlStatement(
            "SELECT " + joinColumns(valueColumns, parameterNameOf, valuePrefix) + f" FROM {tableName}" + whereClause,
            self._keyParameters,
        )

        self.insert = SqlStatement(
            f"INSERT INTO {tableName} ("
            + joinColumns(keyColumns, parameterNameOf, keyPrefix)
            + ", "
            + joinColumns(valueColumns, parameterNameOf, valuePrefix)
            + ") VALUES ("
            + joinColumns(keyColumns, placeholderOf, keyPrefix)
            + ", "
            + joinColumns(valueColumns, placeholderOf, valuePrefix)
            + ")",
            self._keyParameters + self._valueParameters,
        )

        self.update = SqlStatement(
            f"UPDATE {tableName} SET "
            + joinColumns(valueColumns, nameEqualsPlaceholderOf, valuePrefix)
            + whereClause,
            self._valueParameters + self._keyParameters,
        )

        self.delete = SqlStatement(f"DELETE FROM {tableName}")
        self.evict = SqlStatement(self.delete.sql + whereClause, self._keyParameters)
        self.clear = self.delete

        if self.dialect == SqlDialect.SQLITE:
            # Schemas are attached databases, each one lists its own tables
            self.schemaExists = SqlStatement(
                f"SELECT name FROM pragma_database_list WHERE name=:{SCHEMA_NAME_PARAM} COLLATE NOCASE",
                (SCHEMA_NAME_PARAM,),
            )
            self.tableExists = SqlStatement(
                f"SELECT name FROM {schema.schemaName}.sqlite_master "
                f"WHERE type='table' AND name=:{TABLE_NAME_PARAM} COLLATE NOCASE",
                (TABLE_NAME_PARAM,),
            )
        else:
            self.schemaExists = SqlStatement(
                f"SELECT SCHEMANAME FROM SYS.SYSSCHEMAS WHERE SCHEMANAME=:{SCHEMA_NAME_PARAM}",
                (SCHEMA_NAME_PARAM,),
            )
            self.tableExists = SqlStatement(
                "SELECT TABLENAME FROM SYS.SYSTABLES "
                f"WHERE TABLESCHEMANAME=:{SCHEMA_NAME_PARAM} AND TABLENAME=:{TABLE_NAME_PARAM}",
                (SCHEMA_NAME_PARAM, TABLE_NAME_PARAM),
            )

        logger.debug(f"Rendered statements for {tableName}: {self.create.sql}, dood!")

    ###
    # Statement accessors
    ###

    def getCreateSQL(self) -> str:
        return self.create.sql

    def getCreateSchemaSQL(self) -> str:
        return self.createSchema.sql

    def getSelectSQL(self) -> str:
        return self.select.sql

    def getInsertSQL(self) -> str:
        return self.insert.sql

    def getUpdateSQL(self) -> str:
        return self.update.sql

    def getDeleteSQL(self) -> str:
        """DELETE root without WHERE clause"""
        return self.delete.sql

    def getEvictSQL(self) -> str:
        """DELETE for a single key"""
        return self.evict.sql

    def getClearSQL(self) -> str:
        """DELETE for all rows in the table"""
        return self.clear.sql

    def getSchemaExistsSQL(self) -> str:
        return self.schemaExists.sql

    def getTableExistsSQL(self) -> str:
        return self.tableExists.sql

    def getCatalogParameters(self) -> Dict[str, Any]:
        """
        Parameters for the catalog existence queries, dood!

        The catalog stores unquoted identifiers upper-cased, so the table name
        is upper-cased for the lookup.
        """
        return {
            SCHEMA_NAME_PARAM: self.schema.schemaName,
            TABLE_NAME_PARAM: self.schema.tableName.upper(),
        }

    @property
    def keyParameters(self) -> Tuple[str, ...]:
        return self._keyParameters

    @property
    def valueParameters(self) -> Tuple[str, ...]:
        return self._valueParameters

    ###
    # Binder factories
    ###

    def _binderFor(self, obj: Any, columns: Tuple[ColumnDefinition, ...], prefix: str) -> ParameterBinder:
        if len(columns) == 1:
            # Single column: the object itself is the column value
            column = columns[0]
            return SingleValueBinder(parameterNameOf(column, prefix), obj, column)
        return ObjectPropertyBinder(obj, prefix, columns)

    def keyBinder(self, key: Any) -> ParameterBinder:
        """
        Create binder for key placeholders, dood!

        With a single key column the key itself is bound, otherwise the key
        object must have one attribute per key column, named like the column.
        """
        return self._binderFor(key, self.schema.keyColumns, self.schema.keyPrefix)

    def valueBinder(self, value: Any) -> ParameterBinder:
        """Create binder for value placeholders, same rules as ``keyBinder``"""
        return self._binderFor(value, self.schema.valueColumns, self.schema.valuePrefix)

    def keyValueBinder(self, key: Any, value: Any) -> ParameterBinder:
        """Binder for INSERT/UPDATE: key binder is consulted before value binder"""
        return PriorityBinder(self.keyBinder(key), self.valueBinder(value))
