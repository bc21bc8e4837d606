"""
Document store sink backed by MongoDB (pymongo).

Each entity maps to a collection named after its table. Writes are
idempotent upserts keyed by the entity's primary key columns.
"""

import logging
from typing import Any

from bson.errors import BSONError
from pymongo import ASCENDING, MongoClient
from pymongo.errors import PyMongoError

from varejo_datagen.config.models import MongoConfig
from varejo_datagen.shared.exceptions import SinkError
from varejo_datagen.shared.models import ENTITY_MODELS

from .base_writer import RecordSink

logger = logging.getLogger(__name__)

_KEY_COLUMNS = {model.table_name: model.key_columns for model in ENTITY_MODELS.values()}


class MongoDocumentSink(RecordSink):
    """
    MongoDB sink.

    The MongoClient is thread-safe and pools connections, so one instance
    is shared by every pipeline worker.
    """

    name = "mongodb"

    def __init__(self, config: MongoConfig, client: MongoClient | None = None):
        """
        Initialize the sink.

        Args:
            config: Connection settings
            client: Pre-built client (tests inject a mock); built from config when omitted
        """
        self.config = config
        self._owns_client = client is None
        if client is None:
            try:
                client = MongoClient(
                    config.uri, serverSelectionTimeoutMS=config.server_selection_timeout_ms
                )
            except PyMongoError as e:
                raise SinkError("Invalid client settings", sink=self.name, original_error=e) from e
        self.client = client
        self.database = self.client[config.database]
        logger.info(f"MongoDB sink ready (database '{config.database}')")

    def _key_filter(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        columns = _KEY_COLUMNS.get(table)
        if not columns:
            raise SinkError("Unknown collection", sink=self.name, table=table)
        return {column: record[column] for column in columns}

    def upsert(self, table: str, record: dict[str, Any]) -> None:
        key_filter = self._key_filter(table, record)
        try:
            self.database[table].replace_one(key_filter, dict(record), upsert=True)
        except (PyMongoError, BSONError) as e:
            raise SinkError(
                "Upsert failed",
                sink=self.name,
                table=table,
                key=tuple(key_filter.values()),
                original_error=e,
            ) from e

    def bulk_read(self, table: str) -> list[dict[str, Any]]:
        try:
            return list(self.database[table].find({}, {"_id": 0}))
        except PyMongoError as e:
            raise SinkError("Read failed", sink=self.name, table=table, original_error=e) from e

    def ensure_indexes(self) -> None:
        """Create a unique index on the key columns of every collection."""
        for model in ENTITY_MODELS.values():
            keys = [(column, ASCENDING) for column in model.key_columns]
            try:
                self.database[model.table_name].create_index(keys, unique=True)
            except PyMongoError as e:
                raise SinkError(
                    "Index creation failed",
                    sink=self.name,
                    table=model.table_name,
                    original_error=e,
                ) from e
        logger.info(f"Ensured unique key indexes on {len(ENTITY_MODELS)} collections")

    def close(self) -> None:
        if self._owns_client:
            self.client.close()
