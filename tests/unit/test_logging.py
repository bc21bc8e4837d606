"""
Unit tests for structured logging and logging configuration.
"""

import json
import logging

import pytest

from varejo_datagen.shared.logging_config import configure_logging
from varejo_datagen.shared.logging_utils import StructuredLogger, get_structured_logger


class TestStructuredLogger:
    """JSON payloads with correlation ids."""

    def test_payload_fields(self, caplog):
        logger = get_structured_logger("varejo_datagen.test")
        logger.set_correlation_id("RUN_abc")

        with caplog.at_level(logging.INFO, logger="varejo_datagen.test"):
            logger.info("Stage started", stage="city", records=10)

        entry = json.loads(caplog.records[-1].getMessage())
        assert entry["level"] == "INFO"
        assert entry["message"] == "Stage started"
        assert entry["correlation_id"] == "RUN_abc"
        assert entry["context"] == {"stage": "city", "records": 10}

    def test_without_context_or_correlation(self, caplog):
        logger = StructuredLogger("varejo_datagen.test")
        with caplog.at_level(logging.WARNING, logger="varejo_datagen.test"):
            logger.warning("Pipeline cancelled")

        entry = json.loads(caplog.records[-1].getMessage())
        assert entry["correlation_id"] == "none"
        assert "context" not in entry

    def test_non_json_values_stringified(self, caplog):
        logger = StructuredLogger("varejo_datagen.test")
        with caplog.at_level(logging.ERROR, logger="varejo_datagen.test"):
            logger.error("Sink write failed", key=(1, 2), error=ValueError("bad"))

        entry = json.loads(caplog.records[-1].getMessage())
        assert entry["context"]["key"] == [1, 2]
        assert entry["context"]["error"] == "bad"

    def test_levels(self, caplog):
        logger = StructuredLogger("varejo_datagen.test")
        with caplog.at_level(logging.DEBUG, logger="varejo_datagen.test"):
            logger.debug("d")
            logger.error("e")
        assert [r.levelno for r in caplog.records[-2:]] == [logging.DEBUG, logging.ERROR]

    def test_correlation_id_format(self):
        logger = StructuredLogger("varejo_datagen.test")
        run_id = logger.generate_correlation_id()
        assert run_id.startswith("RUN_")
        assert len(run_id) == 16


class TestConfigureLogging:
    """Root logging configuration."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_levels_and_quiet_drivers(self):
        configure_logging("DEBUG")
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("cassandra").level == logging.WARNING
        assert logging.getLogger("pymongo").level == logging.WARNING

        configure_logging("WARNING", json_format=True)
        assert logging.getLogger().level == logging.WARNING
        assert logging.getLogger().handlers[0].formatter._fmt == "%(message)s"
