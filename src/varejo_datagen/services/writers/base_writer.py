"""
Abstract base class for record sinks.

This module defines the interface that every sink must implement, providing
a consistent API for upserting and reading back records in the document
and wide-column stores.
"""

from abc import ABC, abstractmethod
from typing import Any


class RecordSink(ABC):
    """
    Abstract base class for record sinks.

    Implementations must be safe to call from several threads at once; the
    pipeline issues writes from a thread pool.
    """

    #: Short sink name used in logs and metric labels
    name: str = "sink"

    @abstractmethod
    def upsert(self, table: str, record: dict[str, Any]) -> None:
        """
        Insert or replace one record.

        Args:
            table: Collection / table name
            record: Serialized record keyed by column name; absent optional
                    columns are missing from the dict

        Raises:
            SinkError: If the write fails
        """
        pass

    @abstractmethod
    def bulk_read(self, table: str) -> list[dict[str, Any]]:
        """
        Read every record of a table.

        Raises:
            SinkError: If the read fails
        """
        pass

    def close(self) -> None:
        """Release client resources."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
