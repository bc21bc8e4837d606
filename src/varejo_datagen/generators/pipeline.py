"""
Dataset generation pipeline.

Runs the generation stages in dependency order. Within a stage the
workload is partitioned across a pool of asyncio workers; every record a
worker synthesizes is written to both sinks before the worker moves on.
A stage starts only after every worker of the previous stage has joined,
so foreign keys always point at identifiers that were already written.
"""

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime

from pydantic import ValidationError

from varejo_datagen.config.models import GeneratorConfig
from varejo_datagen.services.writers import DualSinkWriter, DualWriteOutcome
from varejo_datagen.shared.exceptions import (
    AddressPoolError,
    PipelineCancelledError,
    SinkError,
    StageFailedError,
    StagePreconditionError,
)
from varejo_datagen.shared.logging_utils import get_structured_logger
from varejo_datagen.shared.metrics import metrics_collector
from varejo_datagen.shared.models import Product
from varejo_datagen.shared.validators import ForeignKeyValidator

from .master_generators import MasterDataGenerator
from .master_generators.geography_generator import CITY_CODE_BASE
from .partitioner import partition
from .progress_tracker import StageProgressTracker
from .utils import ProgressReporter

logger = logging.getLogger(__name__)

# Stage entity -> VolumeConfig attribute, in execution order
STAGE_VOLUMES = {
    "city": "cities",
    "address": "addresses",
    "supplier": "suppliers",
    "product": "products",
    "store": "stores",
    "terminal": "terminals",
    "register": "registers",
    "customer": "customers",
    "invoice": "invoices",
}

STAGES = tuple(STAGE_VOLUMES)


@dataclass
class StageReport:
    """Counters for one stage."""

    stage: str
    planned: int = 0
    generated: int = 0
    records_written: int = 0
    failures: dict[str, int] = field(default_factory=dict)
    duration_seconds: float = 0.0
    completed: bool = False

    def record_outcome(self, outcome: DualWriteOutcome) -> None:
        self.records_written += 1
        for failure in outcome.failures:
            self.failures[failure.sink] = self.failures.get(failure.sink, 0) + 1

    @property
    def failure_count(self) -> int:
        return sum(self.failures.values())


@dataclass
class PipelineReport:
    """Summary of a pipeline run."""

    run_id: str
    seed: int
    reference_time: datetime
    stages: dict[str, StageReport] = field(default_factory=dict)
    cancelled: bool = False

    @property
    def success(self) -> bool:
        """True when every stage completed (sink failures do not count against it)."""
        return all(
            stage in self.stages and self.stages[stage].completed for stage in STAGES
        )

    @property
    def total_generated(self) -> int:
        return sum(report.generated for report in self.stages.values())

    @property
    def total_failures(self) -> int:
        return sum(report.failure_count for report in self.stages.values())

    def failures_by_sink(self) -> dict[str, int]:
        totals: dict[str, int] = {}
        for report in self.stages.values():
            for sink, count in report.failures.items():
                totals[sink] = totals.get(sink, 0) + count
        return totals


class DatasetPipeline:
    """
    Orchestrates the staged, concurrent generation of the dataset.

    Stages: city → address → supplier → product → store → terminal →
    register → customer → invoice (with lines). The invoice stage first
    reads the product catalog back from a sink.
    """

    def __init__(
        self,
        config: GeneratorConfig,
        writer: DualSinkWriter,
        reference_time: datetime | None = None,
        fk_validator: ForeignKeyValidator | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Generator configuration (volumes, workers, policies, seed)
            writer: Dual-sink writer every record is sent through
            reference_time: Instant generated dates are relative to (now when omitted)
            fk_validator: Registry of completed stages (a fresh one when omitted)
        """
        self.config = config
        self.writer = writer
        self.fk_validator = fk_validator or ForeignKeyValidator()
        self.generator = MasterDataGenerator(config, self.fk_validator, reference_time)
        self.seed = self.generator.seed
        self.reference_time = self.generator.reference_time
        self.tracker = StageProgressTracker(list(STAGES))
        self.structured_logger = get_structured_logger(__name__)
        self.run_id = self.structured_logger.generate_correlation_id()
        self.report = PipelineReport(
            run_id=self.run_id, seed=self.seed, reference_time=self.reference_time
        )

    def stage_volume(self, stage: str) -> int:
        """Number of stage indices (invoices count headers, not lines)."""
        return getattr(self.config.volume, STAGE_VOLUMES[stage])

    def stage_ids(self, stage: str) -> range:
        """Identifier range produced by a stage."""
        total = self.stage_volume(stage)
        if stage == "city":
            return range(CITY_CODE_BASE, CITY_CODE_BASE + total)
        return range(1, total + 1)

    def _check_address_pool(self, stage: str) -> None:
        volume = self.config.volume
        required = volume.stores if stage == "store" else volume.stores + volume.customers
        available = (
            len(self.fk_validator.get_ids("address"))
            if self.fk_validator.is_registered("address")
            else 0
        )
        if required > available:
            raise AddressPoolError(stage, required=required, available=available)

    async def _load_catalog(self, executor: ThreadPoolExecutor) -> list[Product]:
        """Read the product catalog back from the configured sink, ordered by id."""
        if self.config.pipeline.catalog_source == "wide_column":
            sink = self.writer.wide_column_sink
        else:
            sink = self.writer.document_sink

        loop = asyncio.get_running_loop()
        try:
            rows = await loop.run_in_executor(executor, sink.bulk_read, Product.table_name)
            catalog = [Product.model_validate(row) for row in rows]
        except (SinkError, ValidationError) as e:
            raise StagePreconditionError(
                f"product read-back from {sink.name} failed",
                stage="invoice",
                precondition="product catalog loaded",
                original_error=e,
            ) from e

        if not catalog:
            raise StagePreconditionError(
                f"product read-back from {sink.name} returned no products",
                stage="invoice",
                precondition="product catalog loaded",
            )

        catalog.sort(key=lambda product: product.product_id)
        logger.info(f"Loaded {len(catalog):,} products from {sink.name}")
        return catalog

    async def _worker(
        self,
        stage: str,
        indices: range,
        catalog: list[Product] | None,
        reporter: ProgressReporter,
        stage_report: StageReport,
        cancel_event: asyncio.Event | None,
    ) -> None:
        abort_on_failure = self.config.pipeline.failure_policy == "abort_stage"

        for index in indices:
            # Stop between records so an invoice is never left without its lines
            if cancel_event is not None and cancel_event.is_set():
                return

            records = self.generator.generate(stage, index, catalog)
            stage_report.generated += 1
            for record in records:
                metrics_collector.record_generated(record.entity_name)

            # Lines go out even when the invoice header was rejected
            for record in records:
                outcome = await self.writer.write_async(record.entity_name, record)
                stage_report.record_outcome(outcome)
                if abort_on_failure and not outcome.ok:
                    failure = outcome.failures[0]
                    raise SinkError(
                        "Write rejected",
                        sink=failure.sink,
                        table=record.table_name,
                        key=outcome.key,
                        original_error=failure.error,
                    )

            if reporter.update():
                self.tracker.update_progress(stage, reporter.fraction)

    def _stage_error(self, stage: str, group: BaseExceptionGroup) -> Exception:
        errors = list(group.exceptions)
        for error in errors:
            if isinstance(error, StagePreconditionError):
                return error
        return StageFailedError(stage, errors[0])

    async def _run_stage(
        self,
        stage: str,
        executor: ThreadPoolExecutor,
        cancel_event: asyncio.Event | None,
    ) -> StageReport:
        total = self.stage_volume(stage)
        stage_report = StageReport(stage=stage, planned=total)
        self.report.stages[stage] = stage_report

        if stage in ("store", "customer"):
            self._check_address_pool(stage)

        catalog = await self._load_catalog(executor) if stage == "invoice" else None

        workers = self.config.pipeline.workers
        reporter = ProgressReporter(
            total, f"Generating {stage}", self.config.pipeline.progress_interval
        )
        self.structured_logger.info(
            "Stage started", stage=stage, records=total, workers=workers
        )

        metrics_collector.start_stage()
        started = time.perf_counter()
        try:
            async with asyncio.TaskGroup() as task_group:
                for indices in partition(total, workers):
                    # Excess workers of a degenerate partition have nothing to do
                    if indices:
                        task_group.create_task(
                            self._worker(
                                stage, indices, catalog, reporter, stage_report, cancel_event
                            )
                        )
        except ExceptionGroup as group:
            raise self._stage_error(stage, group) from group
        finally:
            stage_report.duration_seconds = time.perf_counter() - started
            metrics_collector.finish_stage(stage)

        if cancel_event is not None and cancel_event.is_set():
            raise PipelineCancelledError(stage)

        self.fk_validator.register_ids(stage, self.stage_ids(stage))
        self.tracker.mark_stage_complete(stage)
        stage_report.completed = True
        reporter.complete()

        self.structured_logger.info(
            "Stage finished",
            stage=stage,
            generated=stage_report.generated,
            records_written=stage_report.records_written,
            failures=stage_report.failures,
            duration_seconds=round(stage_report.duration_seconds, 3),
        )
        return stage_report

    async def run_async(self, cancel_event: asyncio.Event | None = None) -> PipelineReport:
        """
        Run every stage in order.

        Args:
            cancel_event: When set, workers stop after the record in hand
                          and no further stage starts

        Returns:
            PipelineReport with per-stage counts

        Raises:
            StagePreconditionError: A stage could not start (e.g. empty product read-back)
            StageFailedError: A stage aborted under the abort_stage policy
            PipelineCancelledError: cancel_event was set
        """
        self.structured_logger.set_correlation_id(self.run_id)
        self.writer.structured_logger.set_correlation_id(self.run_id)
        self.structured_logger.info(
            "Pipeline started",
            seed=self.seed,
            reference_time=self.reference_time.isoformat(),
            workers=self.config.pipeline.workers,
            failure_policy=self.config.pipeline.failure_policy,
        )

        executor = self.writer.executor
        owns_executor = executor is None
        if owns_executor:
            executor = ThreadPoolExecutor(
                max_workers=2 * self.config.pipeline.workers,
                thread_name_prefix="varejo-sink",
            )
            self.writer.executor = executor

        try:
            for stage in STAGES:
                if cancel_event is not None and cancel_event.is_set():
                    raise PipelineCancelledError(stage)
                await self._run_stage(stage, executor, cancel_event)
        except PipelineCancelledError:
            self.report.cancelled = True
            self.structured_logger.warning("Pipeline cancelled")
            raise
        except (StagePreconditionError, StageFailedError) as e:
            self.structured_logger.error("Pipeline stopped", error=str(e))
            raise
        finally:
            if owns_executor:
                self.writer.executor = None
                executor.shutdown(wait=True)

        if self.tracker.is_complete():
            self.structured_logger.info(
                "Pipeline completed successfully",
                generated=self.report.total_generated,
                sink_failures=self.report.failures_by_sink(),
            )
        return self.report

    def run(self, cancel_event: asyncio.Event | None = None) -> PipelineReport:
        """Synchronous wrapper around run_async."""
        return asyncio.run(self.run_async(cancel_event))
