"""
Pytest configuration and common fixtures for sqlcache tests.

This module provides shared fixtures for testing caches, codecs and
database operations. All fixtures follow camelCase naming convention.
"""

from typing import Generator
from unittest.mock import Mock

import pytest

from sqlcache.codec import ExternalizerRegistry
from sqlcache.database import DatabaseWrapper
from sqlcache.sql import SqlDialect
from tests.fixtures import BookExternalizer, NonSerializableBook, SlowBookRepository, createSchemaDatabase

# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def sqliteDb(tmp_path) -> Generator[DatabaseWrapper, None, None]:
    """
    Create a real file-backed sqlite database with the SQLCACHE schema attached.

    Yields:
        DatabaseWrapper: Real database instance

    Example:
        def testCache(sqliteDb):
            cache = createStringCache("json", sqliteDb)
            cache.put("1", "hello")
    """
    db = createSchemaDatabase(tmp_path)
    yield db
    db.close()


@pytest.fixture
def mockDatabaseWrapper():
    """
    Create a mock DatabaseWrapper for testing.

    It speaks the SQLFire dialect and its catalog queries report every schema
    and table as existing, so caches provision without issuing DDL. Data
    queries return no rows.

    Returns:
        Mock: Mocked DatabaseWrapper instance

    Example:
        def testCache(mockDatabaseWrapper):
            mockDatabaseWrapper.execute.return_value = 0
            # Test code here
    """
    mock = Mock(spec=DatabaseWrapper)
    mock.dialect = SqlDialect.SQLFIRE

    def fetchRows(sql, params=None):
        return [("EXISTS",)] if "SYS." in sql else []

    mock.fetchRows.side_effect = fetchRows
    mock.execute.return_value = 1

    return mock


# ============================================================================
# Book Fixtures
# ============================================================================


@pytest.fixture
def bookRegistry() -> ExternalizerRegistry:
    """
    Registry able to encode NonSerializableBook values.

    Returns:
        ExternalizerRegistry: Registry with BookExternalizer registered
    """
    registry = ExternalizerRegistry()
    registry.register(NonSerializableBook, BookExternalizer())
    return registry


@pytest.fixture
def bookRepository() -> SlowBookRepository:
    """Slow in-memory book repository with a tiny delay."""
    return SlowBookRepository(delay=0.001)
