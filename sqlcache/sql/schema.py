"""
Cache table schema definition, dood!
"""

from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple

from .columns import ColumnDefinition

DEFAULT_SCHEMA_NAME = "SQLCACHE"
DEFAULT_KEY_PREFIX = "k_"
DEFAULT_VALUE_PREFIX = "v_"


def _checkUniqueNames(columns: Sequence[ColumnDefinition], listName: str) -> None:
    seen = set()
    for col in columns:
        if col.name in seen:
            raise ValueError(f"Duplicate column '{col.name}' in {listName} columns, dood!")
        seen.add(col.name)


@dataclass(frozen=True)
class CacheSchema:
    """
    Shape of a cache table: ordered key columns, ordered value columns and
    where the table lives, dood!

    Built once when a cache is configured and immutable afterwards, so it can
    be shared freely between threads.

    Attributes:
        tableName: Name of the cache table
        keyColumns: Ordered key columns, forming the primary key
        valueColumns: Ordered value (payload) columns
        schemaName: Schema (namespace) holding the table
        keyPrefix: Prefix for key column identifiers and placeholders
        valuePrefix: Prefix for value column identifiers and placeholders
        partitionByPrimaryKey: Whether to add ``PARTITION BY PRIMARY KEY`` to CREATE TABLE
    """

    tableName: str
    keyColumns: Tuple[ColumnDefinition, ...]
    valueColumns: Tuple[ColumnDefinition, ...]
    schemaName: str = DEFAULT_SCHEMA_NAME
    keyPrefix: str = DEFAULT_KEY_PREFIX
    valuePrefix: str = DEFAULT_VALUE_PREFIX
    partitionByPrimaryKey: bool = True

    def __post_init__(self) -> None:
        # Allow passing lists, but store tuples to keep the schema immutable
        object.__setattr__(self, "keyColumns", tuple(self.keyColumns))
        object.__setattr__(self, "valueColumns", tuple(self.valueColumns))

        if not self.tableName:
            raise ValueError("Table name must not be empty, dood!")
        if not self.schemaName:
            raise ValueError("Schema name must not be empty, dood!")
        if not self.keyColumns:
            raise ValueError(f"Cache table '{self.tableName}' needs at least one key column, dood!")
        if not self.valueColumns:
            raise ValueError(f"Cache table '{self.tableName}' needs at least one value column, dood!")
        if not self.keyPrefix or not self.valuePrefix:
            raise ValueError("Key and value prefixes must be non-empty strings, dood!")
        if self.keyPrefix == self.valuePrefix:
            # Key and value columns of the same name would collide in the table
            raise ValueError(f"Key and value prefixes must differ, both are '{self.keyPrefix}', dood!")

        _checkUniqueNames(self.keyColumns, "key")
        _checkUniqueNames(self.valueColumns, "value")

    @property
    def qualifiedTableName(self) -> str:
        """Schema qualified table name, e.g. ``SQLCACHE.books``"""
        return f"{self.schemaName}.{self.tableName}"

    def toDict(self) -> Dict[str, Any]:
        return {
            "schema": self.schemaName,
            "table": self.tableName,
            "keyColumns": [col.name for col in self.keyColumns],
            "valueColumns": [col.name for col in self.valueColumns],
            "keyPrefix": self.keyPrefix,
            "valuePrefix": self.valuePrefix,
            "partitionByPrimaryKey": self.partitionByPrimaryKey,
        }
