"""
Test fixtures package for sqlcache tests.

This package organizes test fixtures into logical modules:
- books: Book value objects, externalizer and a slow repository
- database_fixtures: sqlite databases with schemas attached as files
"""

from tests.fixtures.books import Book, BookExternalizer, NonSerializableBook, SlowBookRepository
from tests.fixtures.database_fixtures import createSchemaDatabase, schemaPath

__all__ = [
    "Book",
    "NonSerializableBook",
    "BookExternalizer",
    "SlowBookRepository",
    "createSchemaDatabase",
    "schemaPath",
]
