"""
Database wrapper for the cache tables.
This wrapper owns the DB-API connections and hides driver specifics from the
caches: every driver failure surfaces as DataAccessError.
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Type

from ..sql import SqlDialect

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[], Any]


class DataAccessError(Exception):
    """Raised when the database rejects or fails a statement, dood!"""

    pass


class DatabaseWrapper:
    """
    A wrapper around a DB-API connection (sqlite3 by default) with one
    connection per thread, created lazily.
    """

    def __init__(
        self,
        dbPath: Optional[str] = None,
        *,
        connectionFactory: Optional[ConnectionFactory] = None,
        attach: Optional[Mapping[str, str]] = None,
        timeout: float = 30.0,
        driverErrors: Tuple[Type[BaseException], ...] = (sqlite3.Error,),
        dialect: SqlDialect = SqlDialect.SQLFIRE,
    ):
        """
        Initialize database wrapper, dood!

        Args:
            dbPath: Path to the sqlite database file (``:memory:`` allowed)
            connectionFactory: Callable returning a new DB-API connection, for
                               drivers other than sqlite3 (mutually exclusive with dbPath)
            attach: sqlite only, alias -> path of databases to attach to every
                    connection, used to emulate schemas
            timeout: Connection timeout in seconds
            driverErrors: Exception types translated to DataAccessError
            dialect: SQL flavour of the connectionFactory database, sqlite
                     connections made from dbPath always use SqlDialect.SQLITE

        Raises:
            ValueError: If neither or both dbPath and connectionFactory provided
        """
        if dbPath is None and connectionFactory is None:
            raise ValueError("Either dbPath or connectionFactory must be provided, dood!")
        if dbPath is not None and connectionFactory is not None:
            raise ValueError("Cannot provide both dbPath and connectionFactory - choose one, dood!")

        self.dbPath = dbPath
        self.connectionFactory = connectionFactory
        self.attach: Dict[str, str] = dict(attach or {})
        self.timeout = timeout
        self.driverErrors = driverErrors
        self.dialect = SqlDialect.SQLITE if dbPath is not None else SqlDialect(dialect)

        self._local = threading.local()
        self._lock = threading.Lock()
        self._allConnections: List[Any] = []

        logger.info(
            f"Initialized database wrapper (path={dbPath}, "
            f"dialect={self.dialect}, attached={list(self.attach)}), dood!"
        )

    def _connect(self) -> Any:
        if self.connectionFactory is not None:
            return self.connectionFactory()

        assert self.dbPath is not None
        connection = sqlite3.connect(self.dbPath, timeout=self.timeout, check_same_thread=False)
        for alias, path in self.attach.items():
            connection.execute(f"ATTACH DATABASE ? AS {alias}", (path,))
            logger.debug(f"Attached {path} as {alias}, dood!")
        return connection

    def _getConnection(self) -> Any:
        """
        Get thread-local connection, creating it on first use, dood!

        Returns:
            Thread-local DB-API connection
        """
        if not hasattr(self._local, "connection"):
            # Need to create new connection - acquire lock for thread safety
            with self._lock:
                # Double-check after acquiring lock
                if not hasattr(self._local, "connection"):
                    logger.debug(f"Creating new connection in thread {threading.current_thread().name}, dood!")
                    try:
                        connection = self._connect()
                    except self.driverErrors as e:
                        logger.error(f"Failed to connect to database: {e}")
                        raise DataAccessError(f"Failed to connect to database: {e}") from e
                    self._local.connection = connection
                    self._allConnections.append(connection)

        return self._local.connection

    @contextmanager
    def getCursor(self) -> Iterator[Any]:
        """
        Context manager for database operations, dood!

        Commits on success. On failure rolls back, logs and re-raises driver
        errors as DataAccessError, other exceptions unchanged.

        Yields:
            DB-API cursor
        """
        conn = self._getConnection()
        cursor = conn.cursor()
        try:
            yield cursor
            conn.commit()
        except self.driverErrors as e:
            conn.rollback()
            logger.error(f"Database operation failed: {e}")
            logger.exception(e)
            raise DataAccessError(str(e)) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()

    def execute(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> int:
        """
        Execute DML/DDL statement, dood!

        Returns:
            int: Number of affected rows as reported by the driver
        """
        with self.getCursor() as cursor:
            cursor.execute(sql, dict(params or {}))
            return cursor.rowcount

    def fetchRows(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[Tuple[Any, ...]]:
        """Execute query and return all rows as tuples, dood!"""
        with self.getCursor() as cursor:
            cursor.execute(sql, dict(params or {}))
            return [tuple(row) for row in cursor.fetchall()]

    def close(self):
        """Close all connections opened by this wrapper, dood!"""
        with self._lock:
            for connection in self._allConnections:
                try:
                    connection.close()
                except self.driverErrors as e:
                    logger.error(f"Error closing connection: {e}")
            self._allConnections.clear()
            self._local = threading.local()
        logger.debug("Closed all database connections, dood!")
