"""Logging configuration for the generator CLI."""
import logging
import sys

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO", json_format: bool = False):
    """Configure root logging for the application."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        # Structured records are already JSON
        format="%(message)s" if json_format else TEXT_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    # Disable excessive third-party logging
    logging.getLogger("cassandra").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
