"""
Ready-made cache flavors, dood!

- String cache: string key, long text value
- Serialized object cache: integer (or custom) key, codec-encoded BLOB value
- Column-defined cache: arbitrary key and value columns
"""

import logging
from typing import Optional, Sequence

from ..codec import ExternalizerRegistry, ObjectCodec
from ..database import DatabaseWrapper
from ..sql import (
    DEFAULT_KEY_PREFIX,
    DEFAULT_SCHEMA_NAME,
    DEFAULT_VALUE_PREFIX,
    CacheSchema,
    ColumnDefinition,
    TypeTag,
)
from .sql_cache import SqlCache
from .types import FailurePolicy, RowMapper

logger = logging.getLogger(__name__)

STRING_KEY_COLUMN = ColumnDefinition("ID", TypeTag.VARCHAR, length=1024)
STRING_VALUE_COLUMN = ColumnDefinition("DATA", TypeTag.LONGVARCHAR)
OBJECT_KEY_COLUMN = ColumnDefinition("ID", TypeTag.INTEGER)
OBJECT_VALUE_COLUMN = ColumnDefinition("OBJECT", TypeTag.BLOB)


def stringCacheSchema(
    tableName: str,
    *,
    schemaName: str = DEFAULT_SCHEMA_NAME,
    keyPrefix: str = DEFAULT_KEY_PREFIX,
    valuePrefix: str = DEFAULT_VALUE_PREFIX,
    partitionByPrimaryKey: bool = True,
) -> CacheSchema:
    """Schema with ``ID VARCHAR(1024)`` key and ``DATA LONG VARCHAR`` value"""
    return CacheSchema(
        tableName=tableName,
        keyColumns=(STRING_KEY_COLUMN,),
        valueColumns=(STRING_VALUE_COLUMN,),
        schemaName=schemaName,
        keyPrefix=keyPrefix,
        valuePrefix=valuePrefix,
        partitionByPrimaryKey=partitionByPrimaryKey,
    )


def serializedObjectCacheSchema(
    tableName: str,
    *,
    keyColumn: ColumnDefinition = OBJECT_KEY_COLUMN,
    schemaName: str = DEFAULT_SCHEMA_NAME,
    keyPrefix: str = DEFAULT_KEY_PREFIX,
    valuePrefix: str = DEFAULT_VALUE_PREFIX,
    partitionByPrimaryKey: bool = True,
) -> CacheSchema:
    """Schema with a single key column (``ID INTEGER`` by default) and ``OBJECT BLOB`` value"""
    return CacheSchema(
        tableName=tableName,
        keyColumns=(keyColumn,),
        valueColumns=(OBJECT_VALUE_COLUMN,),
        schemaName=schemaName,
        keyPrefix=keyPrefix,
        valuePrefix=valuePrefix,
        partitionByPrimaryKey=partitionByPrimaryKey,
    )


def createStringCache(
    name: str,
    db: DatabaseWrapper,
    *,
    tableName: Optional[str] = None,
    schemaName: str = DEFAULT_SCHEMA_NAME,
    partitionByPrimaryKey: bool = True,
    readFailurePolicy: FailurePolicy = FailurePolicy.LOG,
    writeFailurePolicy: FailurePolicy = FailurePolicy.LOG,
) -> SqlCache[str, str]:
    """
    Create cache of strings keyed by strings, dood!

    Args:
        name: Cache name, also used as table name unless ``tableName`` is given
        db: Database wrapper
    """
    schema = stringCacheSchema(
        tableName or name,
        schemaName=schemaName,
        partitionByPrimaryKey=partitionByPrimaryKey,
    )
    return SqlCache(
        name,
        db,
        schema,
        readFailurePolicy=readFailurePolicy,
        writeFailurePolicy=writeFailurePolicy,
    )


def createSerializedObjectCache(
    name: str,
    db: DatabaseWrapper,
    *,
    registry: Optional[ExternalizerRegistry] = None,
    keyColumn: ColumnDefinition = OBJECT_KEY_COLUMN,
    tableName: Optional[str] = None,
    schemaName: str = DEFAULT_SCHEMA_NAME,
    partitionByPrimaryKey: bool = True,
    readFailurePolicy: FailurePolicy = FailurePolicy.LOG,
    writeFailurePolicy: FailurePolicy = FailurePolicy.LOG,
) -> SqlCache:
    """
    Create cache of arbitrary objects stored as BLOBs, dood!

    Values are pickled, or encoded by the externalizer registered in
    ``registry`` for their type. The registry is frozen by this call.
    """
    schema = serializedObjectCacheSchema(
        tableName or name,
        keyColumn=keyColumn,
        schemaName=schemaName,
        partitionByPrimaryKey=partitionByPrimaryKey,
    )
    return SqlCache(
        name,
        db,
        schema,
        codec=ObjectCodec(registry),
        readFailurePolicy=readFailurePolicy,
        writeFailurePolicy=writeFailurePolicy,
    )


def createColumnDefinedCache(
    name: str,
    db: DatabaseWrapper,
    keyColumns: Sequence[ColumnDefinition],
    valueColumns: Sequence[ColumnDefinition],
    *,
    tableName: Optional[str] = None,
    schemaName: str = DEFAULT_SCHEMA_NAME,
    keyPrefix: str = DEFAULT_KEY_PREFIX,
    valuePrefix: str = DEFAULT_VALUE_PREFIX,
    partitionByPrimaryKey: bool = True,
    registry: Optional[ExternalizerRegistry] = None,
    rowMapper: Optional[RowMapper] = None,
    readFailurePolicy: FailurePolicy = FailurePolicy.LOG,
    writeFailurePolicy: FailurePolicy = FailurePolicy.LOG,
) -> SqlCache:
    """
    Create cache with caller-defined key and value columns, dood!

    With several key (value) columns the key (value) object needs one
    attribute per column, named like the declared column. BLOB value columns
    go through an ObjectCodec.

    Args:
        name: Cache name, also used as table name unless ``tableName`` is given
        db: Database wrapper
        keyColumns: Ordered key columns
        valueColumns: Ordered value columns
        registry: Externalizers for BLOB value columns
        rowMapper: Builds value objects from rows with several value columns
    """
    schema = CacheSchema(
        tableName=tableName or name,
        keyColumns=keyColumns,
        valueColumns=valueColumns,
        schemaName=schemaName,
        keyPrefix=keyPrefix,
        valuePrefix=valuePrefix,
        partitionByPrimaryKey=partitionByPrimaryKey,
    )
    codec: Optional[ObjectCodec] = None
    if any(col.type == TypeTag.BLOB for col in schema.valueColumns):
        codec = ObjectCodec(registry)
    elif registry is not None:
        logger.warning(f"Cache {name} has no BLOB value columns, externalizer registry is ignored, dood!")

    return SqlCache(
        name,
        db,
        schema,
        codec=codec,
        rowMapper=rowMapper,
        readFailurePolicy=readFailurePolicy,
        writeFailurePolicy=writeFailurePolicy,
    )
