"""
Core type definitions for sqlcache.cache, dood!
"""

from enum import StrEnum
from typing import Any, Callable, Dict, TypeVar

# Type variables for generic cache operations, dood!
K = TypeVar("K")  # Key type - scalar or object with one attribute per key column
V = TypeVar("V")  # Value type - scalar or object with one attribute per value column

# Builds a value object from the decoded value columns of a row (declared name -> value)
RowMapper = Callable[[Dict[str, Any]], Any]


class FailurePolicy(StrEnum):
    """
    What a cache does when an operation can not be completed, dood!

    RAISE propagates the error to the caller. LOG logs a warning and degrades
    to the no-op result (a miss for reads, nothing stored for writes).
    """

    RAISE = "raise"
    LOG = "log"


class AmbiguousResultError(Exception):
    """Raised when a key lookup matches more than one row, dood!"""

    def __init__(self, key: Any, rowCount: int):
        super().__init__(f"Lookup for key {key!r} returned {rowCount} rows, expected at most one")
        self.key = key
        self.rowCount = rowCount
