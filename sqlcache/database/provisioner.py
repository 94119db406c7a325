"""
Schema provisioning for cache tables, dood!

Makes sure the schema and the table of a cache exist before the cache serves
traffic. Existence is checked with the catalog queries of the database dialect,
missing objects are created with the builder's DDL.
"""

import logging
import threading
from enum import StrEnum
from typing import List

from ..sql.builder import SQLBuilder, SqlStatement
from .wrapper import DatabaseWrapper, DataAccessError

logger = logging.getLogger(__name__)


class ProvisioningError(Exception):
    """Raised when the cache schema or table can not be verified or created, dood!"""

    pass


class ProvisioningState(StrEnum):
    """Provisioning progress of a single cache table"""

    START = "start"
    SCHEMA_CHECKED = "schema_checked"
    TABLE_CHECKED = "table_checked"
    CREATING = "creating"
    READY = "ready"


class SchemaProvisioner:
    """
    Creates the schema and table of a cache if they are missing, dood!

    Provisioning runs once: after it reaches READY, further ``provision()``
    calls return immediately without touching the database. A failure is
    raised as ProvisioningError and the next call starts over from the catalog.

    Example:
        >>> provisioner = SchemaProvisioner(db, SQLBuilder(schema))
        >>> provisioner.provision()
        ['CREATE SCHEMA SQLCACHE', 'CREATE TABLE SQLCACHE.books (...)']
        >>> provisioner.provision()
        []
    """

    def __init__(self, db: DatabaseWrapper, builder: SQLBuilder):
        self.db = db
        self.builder = builder
        self.state = ProvisioningState.START
        self._lock = threading.Lock()

    @property
    def isReady(self) -> bool:
        return self.state == ProvisioningState.READY

    def _exists(self, statement: SqlStatement) -> bool:
        catalogParams = self.builder.getCatalogParameters()
        params = {name: catalogParams[name] for name in statement.parameters}
        try:
            return len(self.db.fetchRows(statement.sql, params)) > 0
        except DataAccessError as e:
            logger.error(f"Catalog query failed for {self.builder.schema.qualifiedTableName}: {e}")
            raise ProvisioningError(f"Catalog query failed: {e}") from e

    def _create(self, statement: SqlStatement, existsStatement: SqlStatement, executed: List[str]) -> None:
        self.state = ProvisioningState.CREATING
        logger.debug(f"Executing DDL: {statement.sql}, dood!")
        try:
            self.db.execute(statement.sql)
        except DataAccessError as e:
            # Somebody else may have created the object meanwhile
            if self._exists(existsStatement):
                logger.warning(f"DDL failed but object exists now, continuing: {statement.sql} ({e})")
                return
            logger.error(f"DDL failed: {statement.sql}: {e}")
            raise ProvisioningError(f"Failed to execute '{statement.sql}': {e}") from e
        executed.append(statement.sql)

    def provision(self) -> List[str]:
        """
        Bring schema and table to existence, dood!

        Returns:
            List[str]: DDL statements executed, in order (empty if nothing was created)

        Raises:
            ProvisioningError: If a catalog query or DDL statement fails
        """
        with self._lock:
            if self.state == ProvisioningState.READY:
                return []

            builder = self.builder
            executed: List[str] = []
            self.state = ProvisioningState.START

            schemaExists = self._exists(builder.schemaExists)
            self.state = ProvisioningState.SCHEMA_CHECKED

            if not schemaExists:
                # Fresh schema can not have the table yet
                self._create(builder.createSchema, builder.schemaExists, executed)
                self._create(builder.create, builder.tableExists, executed)
            else:
                tableExists = self._exists(builder.tableExists)
                self.state = ProvisioningState.TABLE_CHECKED
                if not tableExists:
                    self._create(builder.create, builder.tableExists, executed)

            self.state = ProvisioningState.READY
            logger.info(
                f"Cache table {builder.schema.qualifiedTableName} is ready "
                f"({len(executed)} DDL statements executed), dood!"
            )
            return executed
