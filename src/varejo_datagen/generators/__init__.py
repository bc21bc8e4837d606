"""
Data generation engines for the varejo dataset.

This module provides the entity generators, the workload partitioner and
the staged pipeline that writes every record to both sinks.
"""

from .master_generators import MasterDataGenerator
from .partitioner import partition
from .pipeline import STAGES, DatasetPipeline, PipelineReport, StageReport
from .progress_tracker import StageProgressTracker

__all__ = [
    "STAGES",
    "DatasetPipeline",
    "MasterDataGenerator",
    "PipelineReport",
    "StageProgressTracker",
    "StageReport",
    "partition",
]
