"""
Unit tests for the dual-sink writer.

A failure in one sink must never prevent or undo the write to the other
sink, must never escape the writer, and must be logged and counted.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

import pytest
from prometheus_client import REGISTRY

from varejo_datagen.services.writers import (
    DualSinkWriter,
    ErrorCategory,
    InMemorySink,
    RecordSink,
)
from varejo_datagen.shared.models import Supplier


def _supplier(supplier_id: int = 7) -> Supplier:
    return Supplier(
        supplier_id=supplier_id, name="Ana Souza Ltda", invoices_on_account=True, grace_days=12
    )


class ExplodingSink(RecordSink):
    """Sink whose every call raises the given exception."""

    def __init__(self, name: str, error: Exception):
        self.name = name
        self.error = error
        self.calls = 0

    def upsert(self, table, record):
        self.calls += 1
        raise self.error

    def bulk_read(self, table):
        raise self.error


def _failures(entity: str, sink: str, category: str) -> float:
    value = REGISTRY.get_sample_value(
        "datagen_sink_write_failures_total",
        {"entity": entity, "sink": sink, "error_category": category},
    )
    return value or 0.0


class TestSyncWrite:
    """write() issues both sink calls in order."""

    def test_both_sinks_receive_record(self, writer, document_sink, wide_column_sink):
        outcome = writer.write("supplier", _supplier())

        assert outcome.ok
        assert outcome.key == 7
        assert document_sink.get("fornecedor", 7)["flg_fatura"] == "S"
        assert wide_column_sink.get("fornecedor", 7) == document_sink.get("fornecedor", 7)

    def test_upsert_is_idempotent(self, writer, document_sink):
        writer.write("supplier", _supplier())
        writer.write("supplier", _supplier())
        assert document_sink.count("fornecedor") == 1

    def test_document_failure_does_not_block_wide_column(self, wide_column_sink):
        failing = ExplodingSink("document", ConnectionError("connection refused"))
        writer = DualSinkWriter(failing, wide_column_sink)

        outcome = writer.write("supplier", _supplier())

        assert not outcome.ok
        assert outcome.document.ok is False
        assert outcome.document.error_category is ErrorCategory.NETWORK
        assert outcome.wide_column.ok is True
        assert wide_column_sink.get("fornecedor", 7) is not None

    def test_unexpected_exception_is_contained(self, document_sink):
        writer = DualSinkWriter(document_sink, ExplodingSink("wide_column", RuntimeError("boom")))

        outcome = writer.write("supplier", _supplier())

        assert outcome.wide_column.error_category is ErrorCategory.UNKNOWN
        assert [failure.sink for failure in outcome.failures] == ["wide_column"]
        assert document_sink.count("fornecedor") == 1


class TestForcedFailure:
    """One forced failure for one record in the wide-column sink."""

    @pytest.mark.asyncio
    async def test_single_forced_failure(self, document_sink, caplog):
        wide_column_sink = InMemorySink(
            "wide_column_forced",
            fail_when=lambda table, record: record.get("cod_fornecedor") == 2,
        )
        writer = DualSinkWriter(document_sink, wide_column_sink)
        before = _failures("supplier", "wide_column_forced", "unknown")

        with caplog.at_level(logging.ERROR):
            outcomes = [
                await writer.write_async("supplier", _supplier(i)) for i in (1, 2, 3)
            ]

        assert [o.ok for o in outcomes] == [True, False, True]
        assert document_sink.count("fornecedor") == 3
        assert wide_column_sink.count("fornecedor") == 2
        assert wide_column_sink.get("fornecedor", 2) is None

        assert "Sink write failed" in caplog.text
        assert '"sink": "wide_column_forced"' in caplog.text
        assert '"key": 2' in caplog.text
        assert _failures("supplier", "wide_column_forced", "unknown") == before + 1


class TestAsyncWrite:
    """write_async() runs both sink calls on the executor."""

    @pytest.mark.asyncio
    async def test_uses_configured_executor(self, document_sink, wide_column_sink):
        with ThreadPoolExecutor(max_workers=2) as executor:
            writer = DualSinkWriter(document_sink, wide_column_sink, executor=executor)
            outcome = await writer.write_async("supplier", _supplier())

        assert outcome.ok
        assert document_sink.count("fornecedor") == 1
        assert wide_column_sink.count("fornecedor") == 1

    @pytest.mark.asyncio
    async def test_both_sinks_failing(self):
        writer = DualSinkWriter(
            ExplodingSink("document", TimeoutError("timed out")),
            ExplodingSink("wide_column", TimeoutError("timed out")),
        )
        outcome = await writer.write_async("supplier", _supplier())

        assert len(outcome.failures) == 2
        assert all(f.error_category is ErrorCategory.TIMEOUT for f in outcome.failures)


class TestClose:
    """close() closes both sinks."""

    def test_close(self, writer, document_sink, wide_column_sink):
        writer.close()
        assert document_sink.closed
        assert wide_column_sink.closed
