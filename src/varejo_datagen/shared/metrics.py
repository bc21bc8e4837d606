"""Prometheus metrics for the generation pipeline."""
import time

from prometheus_client import REGISTRY, Counter, Gauge, Histogram


def _get_or_create_metric(metric_class, name: str, doc: str, labelnames=None, **kwargs):
    """Get existing metric or create new one to avoid duplication errors in tests."""
    # Counters register without their _total suffix
    names = {name, name.removesuffix("_total")}
    for collector in list(REGISTRY._collector_to_names.keys()):
        if getattr(collector, "_name", None) in names:
            return collector
    try:
        if labelnames is not None:
            kwargs["labelnames"] = labelnames
        return metric_class(name, doc, registry=REGISTRY, **kwargs)
    except ValueError as e:
        if "Duplicated timeseries" in str(e):
            # Race condition - try to find it again
            for collector in list(REGISTRY._collector_to_names.keys()):
                if getattr(collector, "_name", None) in names:
                    return collector
        raise


# Generation metrics
records_generated_total = _get_or_create_metric(
    Counter,
    "datagen_records_generated_total",
    "Total number of records synthesized",
    ["entity"],
)

# Sink metrics
sink_writes_total = _get_or_create_metric(
    Counter,
    "datagen_sink_writes_total",
    "Total number of records successfully written to a sink",
    ["entity", "sink"],
)

sink_write_failures_total = _get_or_create_metric(
    Counter,
    "datagen_sink_write_failures_total",
    "Total number of records that failed to be written to a sink",
    ["entity", "sink", "error_category"],
)

# Stage metrics
stage_duration_seconds = _get_or_create_metric(
    Histogram,
    "datagen_stage_duration_seconds",
    "Wall time taken by a pipeline stage",
    ["stage"],
    buckets=[0.1, 0.5, 1.0, 5.0, 15.0, 60.0, 300.0, 900.0, 3600.0],
)

stage_active = _get_or_create_metric(
    Gauge,
    "datagen_stage_active",
    "Whether a pipeline stage is currently running (1) or not (0)",
)


class MetricsCollector:
    """Helper class for collecting pipeline metrics."""

    def __init__(self):
        self.stage_started_at: float | None = None

    def start_stage(self):
        """Mark a stage as running."""
        stage_active.set(1)
        self.stage_started_at = time.time()

    def finish_stage(self, stage: str):
        """Mark a stage as finished and record its duration."""
        if self.stage_started_at is not None:
            stage_duration_seconds.labels(stage=stage).observe(
                time.time() - self.stage_started_at
            )
        stage_active.set(0)
        self.stage_started_at = None

    def record_generated(self, entity: str, count: int = 1):
        """Record synthesized records."""
        records_generated_total.labels(entity=entity).inc(count)

    def record_sink_write(self, entity: str, sink: str):
        """Record a successful sink write."""
        sink_writes_total.labels(entity=entity, sink=sink).inc()

    def record_sink_failure(self, entity: str, sink: str, error_category: str):
        """Record a failed sink write."""
        sink_write_failures_total.labels(
            entity=entity, sink=sink, error_category=error_category
        ).inc()


# Global metrics collector instance
metrics_collector = MetricsCollector()
