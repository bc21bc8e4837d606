"""
Record sinks and the dual-sink writer.

Provides the document store (MongoDB) and wide-column store (Cassandra)
sinks, an in-memory sink for dry runs, and the writer that fans each record
out to both stores.
"""

import logging
from concurrent.futures import Executor

from varejo_datagen.config.models import GeneratorConfig

from .base_writer import RecordSink
from .document_writer import MongoDocumentSink
from .dual_writer import DualSinkWriter, DualWriteOutcome, SinkWriteResult
from .errors import ErrorCategory, classify_sink_error
from .memory_writer import InMemorySink
from .wide_column_writer import CassandraWideColumnSink

logger = logging.getLogger(__name__)


def open_sinks(
    config: GeneratorConfig,
    dry_run: bool = False,
    create_schema: bool = False,
    executor: Executor | None = None,
) -> DualSinkWriter:
    """
    Build the dual-sink writer for a run.

    Args:
        config: Generator configuration with connection settings
        dry_run: Use in-memory sinks instead of the databases
        create_schema: Create Cassandra keyspace/tables and MongoDB key indexes first
        executor: Thread pool for blocking sink calls

    Returns:
        DualSinkWriter over the document and wide-column sinks
    """
    if dry_run:
        logger.info("Dry run: writing to in-memory sinks")
        return DualSinkWriter(
            InMemorySink("document"), InMemorySink("wide_column"), executor=executor
        )

    document_sink = MongoDocumentSink(config.mongodb)
    try:
        wide_column_sink = CassandraWideColumnSink(config.cassandra)
    except Exception:
        document_sink.close()
        raise

    writer = DualSinkWriter(document_sink, wide_column_sink, executor=executor)
    if create_schema:
        try:
            document_sink.ensure_indexes()
            wide_column_sink.create_schema()
        except Exception:
            writer.close()
            raise
    return writer


__all__ = [
    "CassandraWideColumnSink",
    "DualSinkWriter",
    "DualWriteOutcome",
    "ErrorCategory",
    "InMemorySink",
    "MongoDocumentSink",
    "RecordSink",
    "SinkWriteResult",
    "classify_sink_error",
    "open_sinks",
]
