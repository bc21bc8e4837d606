"""
Configuration models for the varejo data generator.

These models define the structure and validation for the config.json file.
An explicit GeneratorConfig value is passed to the pipeline, so independent
pipelines (e.g. in tests) never share ambient state.
"""

import json
import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..shared.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class VolumeConfig(BaseModel):
    """Configuration for data generation volume settings."""

    cities: int = Field(2000, gt=0, description="Number of cities to generate")
    suppliers: int = Field(10000, gt=0, description="Number of suppliers to generate")
    products: int = Field(5000, gt=0, description="Number of products to generate")
    stores: int = Field(50, gt=0, description="Number of stores to generate")
    terminals: int = Field(
        500, gt=0, description="Number of point-of-sale terminals (PDV) to generate"
    )
    registers: int = Field(
        500, gt=0, description="Number of cash registers (caixa) to generate"
    )
    customers: int = Field(25000, gt=0, description="Number of customers to generate")
    invoices: int = Field(
        100000, gt=0, description="Number of invoices (nota fiscal) to generate"
    )

    @property
    def addresses(self) -> int:
        """One address per store followed by one per customer."""
        return self.stores + self.customers


class PipelineConfig(BaseModel):
    """Configuration for the worker pool and write policy."""

    workers: int = Field(
        10, gt=0, le=512, description="Number of parallel workers per stage"
    )
    progress_interval: int = Field(
        1000, gt=0, description="Emit a progress milestone every N records"
    )
    failure_policy: Literal["best_effort", "abort_stage"] = Field(
        "best_effort",
        description=(
            "best_effort logs sink failures and continues; abort_stage fails the "
            "stage on the first failed sink write"
        ),
    )
    catalog_source: Literal["document", "wide_column"] = Field(
        "document",
        description="Sink the product catalog is read back from before invoices",
    )


class MongoConfig(BaseModel):
    """Connection settings for the document store."""

    uri: str = Field("mongodb://localhost:27017", min_length=1)
    database: str = Field("varejo", min_length=1)
    server_selection_timeout_ms: int = Field(5000, gt=0)

    @field_validator("uri")
    @classmethod
    def validate_uri_scheme(cls, v: str) -> str:
        """Validate the URI uses a MongoDB scheme."""
        v = v.strip()
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError("MongoDB URI must start with mongodb:// or mongodb+srv://")
        return v


class CassandraConfig(BaseModel):
    """Connection settings for the wide-column store."""

    hosts: list[str] = Field(default_factory=lambda: ["127.0.0.1"], min_length=1)
    port: int = Field(9042, gt=0, le=65535)
    keyspace: str = Field("meu_keyspace", min_length=1)
    consistency: str = Field("QUORUM", description="Write/read consistency level")
    replication_factor: int = Field(
        1, gt=0, description="Replication factor used when creating the keyspace"
    )

    @field_validator("consistency")
    @classmethod
    def validate_consistency(cls, v: str) -> str:
        """Validate the consistency level name."""
        allowed = {
            "ANY",
            "ONE",
            "TWO",
            "THREE",
            "QUORUM",
            "ALL",
            "LOCAL_QUORUM",
            "EACH_QUORUM",
            "LOCAL_ONE",
        }
        v = v.strip().upper()
        if v not in allowed:
            raise ValueError(f"Unknown consistency level '{v}'")
        return v

    @field_validator("keyspace")
    @classmethod
    def validate_keyspace(cls, v: str) -> str:
        """Keyspace names are interpolated into CQL, so keep them plain."""
        if not v.replace("_", "").isalnum():
            raise ValueError("Keyspace must contain only letters, digits and '_'")
        return v


class GeneratorConfig(BaseModel):
    """Main configuration model for the varejo data generator."""

    seed: int | None = Field(
        None,
        ge=0,
        le=2**32 - 1,
        description="Random seed; a random one is drawn and logged when omitted",
    )
    volume: VolumeConfig = Field(default_factory=VolumeConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    mongodb: MongoConfig = Field(default_factory=MongoConfig)
    cassandra: CassandraConfig = Field(default_factory=CassandraConfig)

    @classmethod
    def from_file(cls, file_path: str | Path) -> "GeneratorConfig":
        """
        Load configuration from a JSON file.

        Args:
            file_path: Path to the configuration JSON file

        Returns:
            GeneratorConfig instance

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigurationError: If the JSON is invalid or doesn't match the schema
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        try:
            with path.open("r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError("Invalid JSON", path, e)

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError("Schema validation failed", path, e)

    def to_file(self, file_path: str | Path) -> None:
        """
        Save configuration to a JSON file.

        Args:
            file_path: Path where to save the configuration file
        """
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with path.open("w") as f:
            json.dump(self.model_dump(), f, indent=2)
