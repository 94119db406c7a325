"""
sqlcache.sql - column model, parameter binding and SQL generation, dood!

Core Components:
- TypeTag / LengthUnit: logical column types and their DDL rendering
- ColumnDefinition: declarative description of one column
- CacheSchema: key columns + value columns + table location
- SQLBuilder: renders all statements for a cache table
- SqlDialect: SQLFire catalog and partitioning, or sqlite attached databases
- Binders: resolve named placeholders from key/value objects

Example Usage:
    >>> from sqlcache.sql import CacheSchema, ColumnDefinition, SQLBuilder, TypeTag
    >>>
    >>> schema = CacheSchema(
    ...     tableName="books",
    ...     keyColumns=[ColumnDefinition("ID", TypeTag.INTEGER)],
    ...     valueColumns=[ColumnDefinition("TITLE", TypeTag.VARCHAR, length=200)],
    ... )
    >>> builder = SQLBuilder(schema)
    >>> print(builder.getCreateSQL())
    CREATE TABLE SQLCACHE.books (k_ID INTEGER, v_TITLE VARCHAR(200), PRIMARY KEY(k_ID)) PARTITION BY PRIMARY KEY
"""

from .binders import (
    BinderError,
    ObjectPropertyBinder,
    ParameterBinder,
    PriorityBinder,
    SingleValueBinder,
    bindParameters,
)
from .builder import SQLBuilder, SqlStatement
from .columns import (
    ColumnDefinition,
    joinColumns,
    nameEqualsPlaceholderOf,
    nameOf,
    parameterNameOf,
    placeholderOf,
    renderColumnDefinition,
    renderTypeFragment,
)
from .dialect import SqlDialect
from .schema import DEFAULT_KEY_PREFIX, DEFAULT_SCHEMA_NAME, DEFAULT_VALUE_PREFIX, CacheSchema
from .types import LengthUnit, TypeTag

__all__ = [
    # Types
    "TypeTag",
    "LengthUnit",
    # Column model
    "ColumnDefinition",
    "renderTypeFragment",
    "renderColumnDefinition",
    "nameOf",
    "parameterNameOf",
    "placeholderOf",
    "nameEqualsPlaceholderOf",
    "joinColumns",
    # Schema
    "CacheSchema",
    "SqlDialect",
    "DEFAULT_SCHEMA_NAME",
    "DEFAULT_KEY_PREFIX",
    "DEFAULT_VALUE_PREFIX",
    # Binders
    "ParameterBinder",
    "SingleValueBinder",
    "ObjectPropertyBinder",
    "PriorityBinder",
    "BinderError",
    "bindParameters",
    # SQL
    "SQLBuilder",
    "SqlStatement",
]
