"""
SQL flavours cache tables are rendered for, dood!
"""

from enum import StrEnum


class SqlDialect(StrEnum):
    """
    Database family a SQLBuilder renders statements for, dood!

    SQLFIRE is the target family: real schemas, the ``SYS.SYSSCHEMAS`` and
    ``SYS.SYSTABLES`` catalog and ``PARTITION BY PRIMARY KEY``. SQLITE is used
    for local databases: a schema is an attached database file, its tables are
    listed in that database's ``sqlite_master`` and there is no partitioning.
    """

    SQLFIRE = "sqlfire"
    SQLITE = "sqlite"

    @property
    def supportsPartitioning(self) -> bool:
        return self == SqlDialect.SQLFIRE

    @classmethod
    def fromName(cls, name: str) -> "SqlDialect":
        """Case-insensitive lookup, ValueError on unknown names"""
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown SQL dialect '{name}', expected one of {[d.value for d in cls]}, dood!") from None
