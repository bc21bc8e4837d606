"""
Wide-column store sink backed by Cassandra (cassandra-driver).

Each entity maps to a table of the configured keyspace. Cassandra INSERTs
are upserts, so a prepared INSERT per table gives idempotent writes.
"""

import logging
import threading
import types
import typing
from datetime import datetime
from typing import Any

from cassandra import ConsistencyLevel, DriverException, OperationTimedOut
from cassandra.cluster import Cluster, NoHostAvailable
from cassandra.query import UNSET_VALUE, dict_factory

from varejo_datagen.config.models import CassandraConfig
from varejo_datagen.shared.exceptions import SinkError
from varejo_datagen.shared.models import ENTITY_MODELS, EntityRecord

from .base_writer import RecordSink

logger = logging.getLogger(__name__)

_TABLE_MODELS = {model.table_name: model for model in ENTITY_MODELS.values()}

# Flags are serialized as 'S'/'N' before they reach the driver
_CQL_TYPES = {
    bool: "text",
    int: "int",
    float: "double",
    str: "text",
    datetime: "timestamp",
}

_DRIVER_ERRORS = (DriverException, NoHostAvailable, OperationTimedOut, TypeError, ValueError)


def _unwrap_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def table_columns(model: type[EntityRecord]) -> list[tuple[str, str]]:
    """(column name, CQL type) pairs of a model, in field order."""
    columns = []
    for field_name, field in model.model_fields.items():
        column = field.alias or field_name
        python_type = _unwrap_optional(field.annotation)
        columns.append((column, _CQL_TYPES[python_type]))
    return columns


def create_table_cql(keyspace: str, model: type[EntityRecord]) -> str:
    """CREATE TABLE statement derived from an entity model."""
    column_defs = ", ".join(f"{name} {cql_type}" for name, cql_type in table_columns(model))
    partition_key, *clustering = model.key_columns
    primary_key = ", ".join([f"({partition_key})", *clustering])
    return (
        f"CREATE TABLE IF NOT EXISTS {keyspace}.{model.table_name} "
        f"({column_defs}, PRIMARY KEY ({primary_key}))"
    )


class CassandraWideColumnSink(RecordSink):
    """
    Cassandra sink.

    The driver Session is thread-safe, so one instance is shared by every
    pipeline worker. Prepared statements are built lazily per table.
    """

    name = "cassandra"

    def __init__(self, config: CassandraConfig, session: Any | None = None):
        """
        Initialize the sink.

        Args:
            config: Connection settings
            session: Pre-built session (tests inject a mock); connects from config when omitted
        """
        self.config = config
        self.keyspace = config.keyspace
        self.consistency = ConsistencyLevel.name_to_value[config.consistency]
        self._cluster = None
        if session is None:
            self._cluster = Cluster(contact_points=config.hosts, port=config.port)
            try:
                session = self._cluster.connect()
            except _DRIVER_ERRORS as e:
                self._cluster.shutdown()
                raise SinkError("Connection failed", sink=self.name, original_error=e) from e
        self.session = session
        # Set once: the session is shared by every worker thread
        self.session.row_factory = dict_factory
        self._prepared: dict[str, Any] = {}
        self._lock = threading.Lock()
        logger.info(
            f"Cassandra sink ready (keyspace '{self.keyspace}', "
            f"consistency {config.consistency})"
        )

    def _model(self, table: str) -> type[EntityRecord]:
        try:
            return _TABLE_MODELS[table]
        except KeyError:
            raise SinkError("Unknown table", sink=self.name, table=table) from None

    def _statement(self, table: str) -> Any:
        with self._lock:
            statement = self._prepared.get(table)
            if statement is None:
                columns = [name for name, _ in table_columns(self._model(table))]
                placeholders = ", ".join("?" for _ in columns)
                statement = self.session.prepare(
                    f"INSERT INTO {self.keyspace}.{table} "
                    f"({', '.join(columns)}) VALUES ({placeholders})"
                )
                statement.consistency_level = self.consistency
                self._prepared[table] = statement
            return statement

    def upsert(self, table: str, record: dict[str, Any]) -> None:
        model = self._model(table)
        key = tuple(record.get(column) for column in model.key_columns)
        try:
            statement = self._statement(table)
            # Absent optional columns are left unset rather than written as null
            values = [
                record.get(column, UNSET_VALUE) for column, _ in table_columns(model)
            ]
            self.session.execute(statement, values)
        except _DRIVER_ERRORS as e:
            raise SinkError(
                "Insert failed", sink=self.name, table=table, key=key, original_error=e
            ) from e

    def bulk_read(self, table: str) -> list[dict[str, Any]]:
        self._model(table)
        try:
            rows = self.session.execute(f"SELECT * FROM {self.keyspace}.{table}")
            return [
                {column: value for column, value in row.items() if value is not None}
                for row in rows
            ]
        except _DRIVER_ERRORS as e:
            raise SinkError("Read failed", sink=self.name, table=table, original_error=e) from e

    def create_schema(self) -> None:
        """Create the keyspace and every entity table if they do not exist."""
        statements = [
            (
                f"CREATE KEYSPACE IF NOT EXISTS {self.keyspace} WITH replication = "
                f"{{'class': 'SimpleStrategy', "
                f"'replication_factor': {self.config.replication_factor}}}"
            )
        ]
        statements.extend(
            create_table_cql(self.keyspace, model) for model in ENTITY_MODELS.values()
        )
        for statement in statements:
            try:
                self.session.execute(statement)
            except _DRIVER_ERRORS as e:
                raise SinkError("Schema creation failed", sink=self.name, original_error=e) from e
        logger.info(f"Ensured keyspace '{self.keyspace}' and {len(ENTITY_MODELS)} tables")

    def close(self) -> None:
        if self._cluster is not None:
            self._cluster.shutdown()
