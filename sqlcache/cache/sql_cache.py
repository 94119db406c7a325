"""
SQL-table backed cache implementation, dood!

SqlCache stores one row per key in a table described by a CacheSchema. Key
and value objects are bound to statement placeholders by the builder's
binders, BLOB value columns go through an ObjectCodec.

Error handling:
    - Provisioning failures are always raised (ProvisioningError)
    - Ambiguous reads and read failures follow ``readFailurePolicy``
    - put/evict/clear failures follow ``writeFailurePolicy``
    - Codec and binder errors are always raised
"""

import logging
import threading
from typing import Any, Dict, FrozenSet, Optional, Sequence

from ..codec import ObjectCodec
from ..database import DatabaseWrapper, DataAccessError, SchemaProvisioner
from ..sql import CacheSchema, SQLBuilder, TypeTag, bindParameters, parameterNameOf
from .interface import CacheInterface
from .types import AmbiguousResultError, FailurePolicy, K, RowMapper, V

logger = logging.getLogger(__name__)


def _rowToDict(values: Dict[str, Any]) -> Dict[str, Any]:
    return values


class SqlCache(CacheInterface[K, V]):
    """
    Cache storing entries in a SQL table, dood!

    The table is provisioned lazily on the first operation (or eagerly by
    ``start()``), exactly once per cache instance.

    Example:
        >>> schema = CacheSchema(
        ...     tableName="greetings",
        ...     keyColumns=[ColumnDefinition("ID", TypeTag.INTEGER)],
        ...     valueColumns=[ColumnDefinition("DATA", TypeTag.VARCHAR, length=100)],
        ... )
        >>> cache = SqlCache("greetings", db, schema)
        >>> cache.put(1, "hello")
        >>> cache.get(1)
        'hello'
    """

    def __init__(
        self,
        name: str,
        db: DatabaseWrapper,
        schema: CacheSchema,
        *,
        codec: Optional[ObjectCodec] = None,
        rowMapper: Optional[RowMapper] = None,
        readFailurePolicy: FailurePolicy = FailurePolicy.LOG,
        writeFailurePolicy: FailurePolicy = FailurePolicy.LOG,
    ):
        """
        Initialize cache, dood!

        Args:
            name: Cache name
            db: Database wrapper used for all statements
            schema: Table layout
            codec: Codec for BLOB value columns (values are stored as-is if None)
            rowMapper: Builds the value object from a row when there are several
                       value columns, gets declared column name -> value.
                       Defaults to returning the dict itself.
            readFailurePolicy: Policy for ambiguous reads and read failures
            writeFailurePolicy: Policy for put/evict/clear failures
        """
        self.name = name
        self.db = db
        self.schema = schema
        self.builder = SQLBuilder(schema, db.dialect)
        self.provisioner = SchemaProvisioner(db, self.builder)
        self.codec = codec
        self.rowMapper: RowMapper = rowMapper if rowMapper is not None else _rowToDict
        self.readFailurePolicy = FailurePolicy(readFailurePolicy)
        self.writeFailurePolicy = FailurePolicy(writeFailurePolicy)

        self._provisioned = False
        self._provisionLock = threading.Lock()

        self._codecParameters: FrozenSet[str] = frozenset()
        if codec is not None:
            self._codecParameters = frozenset(
                parameterNameOf(col, schema.valuePrefix) for col in schema.valueColumns if col.type == TypeTag.BLOB
            )

        logger.debug(f"Created cache {name} on {schema.qualifiedTableName}, dood!")

    ###
    # Lifecycle
    ###

    def _ensureProvisioned(self) -> None:
        if not self._provisioned:
            with self._provisionLock:
                # Double-check after acquiring lock
                if not self._provisioned:
                    self.provisioner.provision()
                    self._provisioned = True

    def start(self) -> None:
        """
        Provision the backing table now instead of on first use, dood!

        Raises:
            ProvisioningError: If the schema or table can not be created
        """
        self._ensureProvisioned()

    ###
    # Value encoding
    ###

    def _encodeValue(self, name: str, sqlType: Optional[TypeTag], value: Any) -> Any:
        if value is not None and name in self._codecParameters:
            assert self.codec is not None
            return self.codec.serialize(value)
        return value

    def _mapRow(self, row: Sequence[Any]) -> Any:
        values: Dict[str, Any] = {}
        for col, raw in zip(self.schema.valueColumns, row):
            if raw is None:
                values[col.name] = None
            elif self.codec is not None and col.type == TypeTag.BLOB:
                values[col.name] = self.codec.deserialize(raw)
            else:
                values[col.name] = col.type.decode(raw)

        if len(self.schema.valueColumns) == 1:
            return values[self.schema.valueColumns[0].name]
        return self.rowMapper(values)

    def _onFailure(self, policy: FailurePolicy, message: str, error: Exception) -> None:
        if policy == FailurePolicy.RAISE:
            raise error
        logger.warning(f"{message}: {error}")

    ###
    # Cache operations
    ###

    def get(self, key: K) -> Optional[V]:
        self._ensureProvisioned()
        statement = self.builder.select
        params = bindParameters(self.builder.keyBinder(key), statement.parameters)

        try:
            rows = self.db.fetchRows(statement.sql, params)
        except DataAccessError as e:
            self._onFailure(self.readFailurePolicy, f"Cache {self.name}: failed to read key {key!r}", e)
            return None

        if not rows:
            return None
        if len(rows) > 1:
            self._onFailure(
                self.readFailurePolicy,
                f"Cache {self.name}: treating ambiguous result as miss",
                AmbiguousResultError(key, len(rows)),
            )
            return None

        return self._mapRow(rows[0])

    def put(self, key: K, value: V) -> None:
        self._ensureProvisioned()
        update = self.builder.update
        insert = self.builder.insert
        # UPDATE and INSERT use the same parameter set
        params = bindParameters(self.builder.keyValueBinder(key, value), update.parameters, self._encodeValue)

        try:
            if self.db.execute(update.sql, params) == 0:
                self.db.execute(insert.sql, params)
        except DataAccessError as e:
            self._onFailure(self.writeFailurePolicy, f"Cache {self.name}: failed to store key {key!r}", e)

    def evict(self, key: K) -> None:
        self._ensureProvisioned()
        statement = self.builder.evict
        params = bindParameters(self.builder.keyBinder(key), statement.parameters)

        try:
            self.db.execute(statement.sql, params)
        except DataAccessError as e:
            self._onFailure(self.writeFailurePolicy, f"Cache {self.name}: failed to evict key {key!r}", e)

    def clear(self) -> None:
        self._ensureProvisioned()
        try:
            self.db.execute(self.builder.clear.sql)
        except DataAccessError as e:
            self._onFailure(self.writeFailurePolicy, f"Cache {self.name}: failed to clear", e)

    def getName(self) -> str:
        return self.name

    def getNativeCache(self) -> DatabaseWrapper:
        return self.db

    def getStats(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "table": self.schema.qualifiedTableName,
            "schema": self.schema.schemaName,
            "keyColumns": len(self.schema.keyColumns),
            "valueColumns": len(self.schema.valueColumns),
            "readFailurePolicy": str(self.readFailurePolicy),
            "writeFailurePolicy": str(self.writeFailurePolicy),
            "provisioned": self._provisioned,
            "codec": self.codec is not None,
        }
