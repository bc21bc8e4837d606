"""Configuration models and loaders for the varejo data generator."""

from .models import (
    CassandraConfig,
    GeneratorConfig,
    MongoConfig,
    PipelineConfig,
    VolumeConfig,
)
from .settings import create_default_config, load_config, load_config_with_fallback

__all__ = [
    "CassandraConfig",
    "GeneratorConfig",
    "MongoConfig",
    "PipelineConfig",
    "VolumeConfig",
    "create_default_config",
    "load_config",
    "load_config_with_fallback",
]
