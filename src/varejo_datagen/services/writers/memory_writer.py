"""
In-memory record sink for dry runs and tests.
"""

import threading
from collections.abc import Callable
from typing import Any

from varejo_datagen.shared.exceptions import SinkError
from varejo_datagen.shared.models import ENTITY_MODELS

from .base_writer import RecordSink

# table name -> key columns
_KEY_COLUMNS = {model.table_name: model.key_columns for model in ENTITY_MODELS.values()}


class InMemorySink(RecordSink):
    """
    Thread-safe dict-backed sink.

    Records are stored per table keyed by their primary key columns, so
    writing the same key twice replaces the earlier record.

    An optional ``fail_when`` predicate lets tests force failures for
    selected writes: it receives (table, record) and a True result makes
    the write raise SinkError.
    """

    def __init__(
        self,
        name: str = "memory",
        fail_when: Callable[[str, dict[str, Any]], bool] | None = None,
    ):
        self.name = name
        self.fail_when = fail_when
        self._tables: dict[str, dict[Any, dict[str, Any]]] = {}
        self._lock = threading.Lock()
        self.closed = False

    def _key(self, table: str, record: dict[str, Any]) -> Any:
        columns = _KEY_COLUMNS.get(table)
        if not columns:
            raise SinkError("Unknown table", sink=self.name, table=table)
        try:
            values = tuple(record[column] for column in columns)
        except KeyError as e:
            raise SinkError(
                f"Record is missing key column {e}", sink=self.name, table=table
            ) from e
        return values[0] if len(values) == 1 else values

    def upsert(self, table: str, record: dict[str, Any]) -> None:
        key = self._key(table, record)
        if self.fail_when is not None and self.fail_when(table, record):
            raise SinkError("Forced write failure", sink=self.name, table=table, key=key)
        with self._lock:
            self._tables.setdefault(table, {})[key] = dict(record)

    def bulk_read(self, table: str) -> list[dict[str, Any]]:
        with self._lock:
            return [dict(record) for record in self._tables.get(table, {}).values()]

    def get(self, table: str, key: Any) -> dict[str, Any] | None:
        """Look up one record by primary key."""
        with self._lock:
            record = self._tables.get(table, {}).get(key)
            return dict(record) if record is not None else None

    def count(self, table: str) -> int:
        """Number of records stored in a table."""
        with self._lock:
            return len(self._tables.get(table, {}))

    def close(self) -> None:
        self.closed = True
