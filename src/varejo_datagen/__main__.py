"""
CLI entry point for the varejo data generator.

Usage:
    python -m varejo_datagen run
    python -m varejo_datagen run --config config.json --seed 42 --workers 20
    python -m varejo_datagen run --dry-run --log-level DEBUG
    python -m varejo_datagen run --create-schema --metrics-port 9100
    python -m varejo_datagen init-config config.json
"""

import argparse
import asyncio
import logging
import signal
import sys

from prometheus_client import start_http_server
from pydantic import ValidationError

from varejo_datagen.config import GeneratorConfig, create_default_config, load_config_with_fallback
from varejo_datagen.generators import DatasetPipeline, PipelineReport, StageProgressTracker
from varejo_datagen.services.writers import open_sinks
from varejo_datagen.shared.exceptions import (
    ConfigurationError,
    PipelineCancelledError,
    SinkError,
    StageFailedError,
    StagePreconditionError,
)
from varejo_datagen.shared.logging_config import configure_logging

logger = logging.getLogger("varejo_datagen")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INTERRUPTED = 130


def build_config(args: argparse.Namespace) -> GeneratorConfig:
    """
    Resolve the configuration and apply command-line overrides.

    Raises:
        ConfigurationError: If the configuration or an override is invalid
    """
    config = load_config_with_fallback(args.config)

    overrides: dict = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.workers is not None:
        overrides["pipeline"] = {**config.pipeline.model_dump(), "workers": args.workers}

    if not overrides:
        return config

    try:
        return GeneratorConfig(**{**config.model_dump(), **overrides})
    except ValidationError as e:
        raise ConfigurationError("Invalid command-line override", None, e)


def print_summary(report: PipelineReport, tracker: StageProgressTracker) -> None:
    """Print per-stage counts of a run, with progress of any unfinished stage."""
    print(f"\n=== Generation Summary (run {report.run_id}, seed {report.seed}) ===\n")
    for stage, stage_report in report.stages.items():
        done = tracker.get_state(stage) == StageProgressTracker.STATE_COMPLETE
        status = "✓" if done else "✗"
        failures = ", ".join(
            f"{sink}: {count:,}" for sink, count in sorted(stage_report.failures.items())
        )
        print(
            f"  {status} {stage:<10} {stage_report.generated:>9,} generated"
            f"  {stage_report.duration_seconds:8.2f}s"
            + (f"  (failed writes: {failures})" if failures else "")
            + ("" if done else f"  (stopped at {tracker.get_progress(stage):.0%})")
        )
    print(f"\nTotal generated: {report.total_generated:,}\n")


async def cmd_run(args: argparse.Namespace) -> int:
    """
    Handle run subcommand.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 success, 1 failure, 130 interrupted)
    """
    try:
        config = build_config(args)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_FAILED

    if args.metrics_port is not None:
        start_http_server(args.metrics_port)
        logger.info(f"Prometheus metrics exposed on port {args.metrics_port}")

    try:
        writer = open_sinks(config, dry_run=args.dry_run, create_schema=args.create_schema)
    except SinkError as e:
        logger.error(f"Could not open sinks: {e}")
        return EXIT_FAILED

    cancel_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel_event.set)
    except (NotImplementedError, RuntimeError):
        # Not supported on this platform; Ctrl+C falls back to KeyboardInterrupt
        pass

    pipeline = DatasetPipeline(config, writer)
    try:
        await pipeline.run_async(cancel_event)
        return EXIT_OK
    except PipelineCancelledError as e:
        logger.warning(str(e))
        return EXIT_INTERRUPTED
    except (StagePreconditionError, StageFailedError) as e:
        logger.error(f"Generation failed: {e}")
        return EXIT_FAILED
    finally:
        try:
            loop.remove_signal_handler(signal.SIGINT)
        except (NotImplementedError, RuntimeError):
            pass
        writer.close()
        print_summary(pipeline.report, pipeline.tracker)


def cmd_init_config(args: argparse.Namespace) -> int:
    """Write a default configuration file."""
    create_default_config(args.path)
    print(f"Default configuration written to {args.path}")
    return EXIT_OK


async def main(args: argparse.Namespace) -> int:
    """
    Main CLI entry point - routes to subcommands.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    if args.command == "run":
        return await cmd_run(args)
    elif args.command == "init-config":
        return cmd_init_config(args)
    else:
        print("ERROR: No command specified. Use --help for usage information.")
        return EXIT_FAILED


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Synthetic retail dataset generator for MongoDB and Cassandra",
        prog="python -m varejo_datagen",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # ===== RUN SUBCOMMAND =====
    run_parser = subparsers.add_parser(
        "run",
        help="Generate the dataset and write it to both stores",
    )
    run_parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a JSON configuration file",
    )
    run_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (overrides configuration)",
    )
    run_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Workers per stage (overrides configuration)",
    )
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Write to in-memory sinks instead of the databases",
    )
    run_parser.add_argument(
        "--create-schema",
        action="store_true",
        help="Create the Cassandra keyspace/tables and MongoDB key indexes first",
    )
    run_parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    run_parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines",
    )
    run_parser.add_argument(
        "--metrics-port",
        type=int,
        default=None,
        help="Expose Prometheus metrics on this port",
    )

    # ===== INIT-CONFIG SUBCOMMAND =====
    init_parser = subparsers.add_parser(
        "init-config",
        help="Write a default configuration file",
    )
    init_parser.add_argument("path", type=str, help="Destination JSON file")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(EXIT_FAILED)

    return args


def cli(argv: list[str] | None = None) -> int:
    """Console script entry point."""
    args = parse_args(argv)
    configure_logging(
        level=getattr(args, "log_level", "INFO"),
        json_format=getattr(args, "json_logs", False),
    )
    try:
        return asyncio.run(main(args))
    except KeyboardInterrupt:
        print("\n\nGeneration interrupted by user")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(cli())
