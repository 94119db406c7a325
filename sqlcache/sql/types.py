"""
SQL type catalog for sqlcache, dood!

This module enumerates the logical column types a cache table can use. Every
type knows the keyword it renders to in DDL and the Python type used to
represent its values, so the binder can adapt outgoing values and the row
mapper can decode incoming ones, dood!
"""

import datetime
import decimal
from enum import StrEnum
from typing import Any, Dict, Tuple, Type

import dateutil.parser


class LengthUnit(StrEnum):
    """
    Size suffix for large object lengths (``BLOB(2M)``), dood!
    """

    K = "K"
    M = "M"
    G = "G"


class TypeTag(StrEnum):
    """
    Logical column types supported by the cache table, dood!

    The member value is the tag name. Use ``sqlName`` for the DDL keyword
    (which differs from the tag for the bit-data types) and ``nativeType``
    for the Python representation of the column values.
    """

    BIGINT = "BIGINT"
    BLOB = "BLOB"
    CHAR = "CHAR"
    BINARY = "BINARY"
    CLOB = "CLOB"
    DATE = "DATE"
    DECIMAL = "DECIMAL"
    DOUBLE = "DOUBLE"
    FLOAT = "FLOAT"
    INTEGER = "INTEGER"
    LONGVARCHAR = "LONGVARCHAR"
    LONGVARBINARY = "LONGVARBINARY"
    NUMERIC = "NUMERIC"
    REAL = "REAL"
    SMALLINT = "SMALLINT"
    TIME = "TIME"
    TIMESTAMP = "TIMESTAMP"
    VARCHAR = "VARCHAR"
    VARBINARY = "VARBINARY"

    @property
    def sqlName(self) -> str:
        """DDL keyword for this type"""
        return _SQL_NAMES.get(self, self.value)

    @property
    def nativeType(self) -> Type[Any]:
        """Python type used to represent values of this column type"""
        return _NATIVE_TYPES[self]

    @property
    def isBinary(self) -> bool:
        return self.nativeType is bytes

    @classmethod
    def fromName(cls, name: str) -> "TypeTag":
        """
        Get type tag by its name (case-insensitive), dood!

        Args:
            name: Tag name, e.g. ``"varchar"`` or ``"BLOB"``

        Returns:
            TypeTag: Matching type tag

        Raises:
            ValueError: If there is no such type
        """
        try:
            return cls(name.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown SQL type '{name}', expected one of: {', '.join(cls)}, dood!")

    def adapt(self, value: Any) -> Any:
        """
        Convert a Python value into something the DB driver can store, dood!

        Exact numerics are passed as strings to keep precision, temporal
        values as ISO-8601 strings and binary buffers as ``bytes``.
        """
        if value is None:
            return None

        if self in _EXACT_NUMERIC_TYPES:
            if isinstance(value, (decimal.Decimal, float)):
                return str(value)
            return value

        if self in _TEMPORAL_TYPES:
            if isinstance(value, datetime.datetime):
                return value.isoformat(sep=" ")
            if isinstance(value, (datetime.date, datetime.time)):
                return value.isoformat()
            return value

        if self.isBinary and isinstance(value, (bytearray, memoryview)):
            return bytes(value)

        return value

    def decode(self, raw: Any) -> Any:
        """
        Convert a raw value fetched from the DB into ``nativeType``, dood!

        Values that already have the native type are returned as is.
        """
        if raw is None:
            return None

        nativeType = self.nativeType
        # bool is an int subclass, but never a valid column value
        if isinstance(raw, nativeType) and not isinstance(raw, bool):
            if nativeType is datetime.date and isinstance(raw, datetime.datetime):
                return raw.date()
            return raw

        match self:
            case TypeTag.DATE:
                return _parseTemporal(raw).date()
            case TypeTag.TIME:
                return _parseTemporal(raw).time()
            case TypeTag.TIMESTAMP:
                return _parseTemporal(raw)
            case TypeTag.DECIMAL | TypeTag.NUMERIC:
                return decimal.Decimal(str(raw))
            case _:
                pass

        if nativeType is bytes:
            if isinstance(raw, str):
                return raw.encode("utf-8")
            return bytes(raw)
        if nativeType is str and isinstance(raw, (bytes, bytearray)):
            return bytes(raw).decode("utf-8")

        return nativeType(raw)


def _parseTemporal(raw: Any) -> datetime.datetime:
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    if isinstance(raw, datetime.time):
        return datetime.datetime.combine(datetime.date.min, raw)
    if isinstance(raw, datetime.date) and not isinstance(raw, datetime.datetime):
        return datetime.datetime.combine(raw, datetime.time())
    return dateutil.parser.parse(str(raw))


_SQL_NAMES: Dict[TypeTag, str] = {
    TypeTag.BINARY: "CHAR",
    TypeTag.LONGVARCHAR: "LONG VARCHAR",
    TypeTag.LONGVARBINARY: "LONG VARCHAR FOR BIT DATA",
    TypeTag.VARBINARY: "VARCHAR",
}

_NATIVE_TYPES: Dict[TypeTag, Type[Any]] = {
    TypeTag.BIGINT: int,
    TypeTag.BLOB: bytes,
    TypeTag.CHAR: str,
    TypeTag.BINARY: bytes,
    TypeTag.CLOB: str,
    TypeTag.DATE: datetime.date,
    TypeTag.DECIMAL: decimal.Decimal,
    TypeTag.DOUBLE: float,
    TypeTag.FLOAT: float,
    TypeTag.INTEGER: int,
    TypeTag.LONGVARCHAR: str,
    TypeTag.LONGVARBINARY: bytes,
    TypeTag.NUMERIC: decimal.Decimal,
    TypeTag.REAL: float,
    TypeTag.SMALLINT: int,
    TypeTag.TIME: datetime.time,
    TypeTag.TIMESTAMP: datetime.datetime,
    TypeTag.VARCHAR: str,
    TypeTag.VARBINARY: bytes,
}

_EXACT_NUMERIC_TYPES: Tuple[TypeTag, ...] = (TypeTag.DECIMAL, TypeTag.NUMERIC)
_TEMPORAL_TYPES: Tuple[TypeTag, ...] = (TypeTag.DATE, TypeTag.TIME, TypeTag.TIMESTAMP)
