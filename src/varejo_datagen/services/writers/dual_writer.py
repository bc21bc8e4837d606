"""
Dual-sink writer.

Propagates each generated record to the document store and the wide-column
store. The two writes are independent: a failure in one sink is logged and
counted but never prevents the other attempt, and nothing is retried or
rolled back.
"""

import asyncio
import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Any

from varejo_datagen.shared.logging_utils import get_structured_logger
from varejo_datagen.shared.metrics import metrics_collector
from varejo_datagen.shared.models import EntityRecord

from .base_writer import RecordSink
from .errors import ErrorCategory, classify_sink_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SinkWriteResult:
    """Outcome of one sink call."""

    sink: str
    ok: bool
    error: BaseException | None = None
    error_category: ErrorCategory | None = None


@dataclass(frozen=True)
class DualWriteOutcome:
    """Per-sink results of writing one record to both sinks."""

    entity: str
    key: Any
    document: SinkWriteResult
    wide_column: SinkWriteResult

    @property
    def ok(self) -> bool:
        """True when both sinks accepted the record."""
        return self.document.ok and self.wide_column.ok

    @property
    def failures(self) -> list[SinkWriteResult]:
        """Results of the sinks that rejected the record."""
        return [result for result in (self.document, self.wide_column) if not result.ok]


class DualSinkWriter:
    """Writes records to a document sink and a wide-column sink."""

    def __init__(
        self,
        document_sink: RecordSink,
        wide_column_sink: RecordSink,
        executor: Executor | None = None,
    ):
        """
        Initialize the writer.

        Args:
            document_sink: Document store sink (MongoDB or in-memory)
            wide_column_sink: Wide-column store sink (Cassandra or in-memory)
            executor: Thread pool for blocking sink calls in write_async
                      (the loop's default executor when omitted)
        """
        self.document_sink = document_sink
        self.wide_column_sink = wide_column_sink
        self.executor = executor
        self.structured_logger = get_structured_logger(__name__)

    def _attempt(
        self, sink: RecordSink, entity: str, key: Any, table: str, payload: dict[str, Any]
    ) -> SinkWriteResult:
        try:
            sink.upsert(table, payload)
        except Exception as e:
            category = classify_sink_error(e)
            self.structured_logger.error(
                "Sink write failed",
                entity=entity,
                key=key,
                sink=sink.name,
                error_category=category.value,
                error=str(e),
            )
            metrics_collector.record_sink_failure(entity, sink.name, category.value)
            return SinkWriteResult(sink=sink.name, ok=False, error=e, error_category=category)

        metrics_collector.record_sink_write(entity, sink.name)
        return SinkWriteResult(sink=sink.name, ok=True)

    def write(self, entity: str, record: EntityRecord) -> DualWriteOutcome:
        """
        Write one record to both sinks, document store first.

        Never raises for sink failures; inspect the outcome instead.
        """
        payload = record.to_record()
        key = record.record_key
        return DualWriteOutcome(
            entity=entity,
            key=key,
            document=self._attempt(
                self.document_sink, entity, key, record.table_name, payload
            ),
            wide_column=self._attempt(
                self.wide_column_sink, entity, key, record.table_name, payload
            ),
        )

    async def write_async(self, entity: str, record: EntityRecord) -> DualWriteOutcome:
        """Write one record to both sinks concurrently on the executor."""
        payload = record.to_record()
        key = record.record_key
        loop = asyncio.get_running_loop()

        document, wide_column = await asyncio.gather(
            loop.run_in_executor(
                self.executor,
                self._attempt,
                self.document_sink,
                entity,
                key,
                record.table_name,
                payload,
            ),
            loop.run_in_executor(
                self.executor,
                self._attempt,
                self.wide_column_sink,
                entity,
                key,
                record.table_name,
                payload,
            ),
        )
        return DualWriteOutcome(
            entity=entity, key=key, document=document, wide_column=wide_column
        )

    def close(self) -> None:
        """Close both sinks."""
        for sink in (self.document_sink, self.wide_column_sink):
            try:
                sink.close()
            except Exception as e:
                logger.warning(f"Failed to close {sink.name} sink: {e}")
