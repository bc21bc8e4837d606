"""
Configuration loading and management for the varejo data generator.

This module provides utilities for loading, validating, and managing
configuration settings.
"""

import logging
import os
from pathlib import Path

from pydantic import ValidationError

from ..shared.exceptions import ConfigurationError
from .models import GeneratorConfig

logger = logging.getLogger(__name__)

# Environment variable -> dotted config path
ENV_VARS = {
    "VAREJO_SEED": "seed",
    "VAREJO_WORKERS": "pipeline.workers",
    "VAREJO_FAILURE_POLICY": "pipeline.failure_policy",
    "VAREJO_CITIES": "volume.cities",
    "VAREJO_SUPPLIERS": "volume.suppliers",
    "VAREJO_PRODUCTS": "volume.products",
    "VAREJO_STORES": "volume.stores",
    "VAREJO_TERMINALS": "volume.terminals",
    "VAREJO_REGISTERS": "volume.registers",
    "VAREJO_CUSTOMERS": "volume.customers",
    "VAREJO_INVOICES": "volume.invoices",
    "VAREJO_MONGO_URI": "mongodb.uri",
    "VAREJO_MONGO_DATABASE": "mongodb.database",
    "VAREJO_CASSANDRA_HOSTS": "cassandra.hosts",
    "VAREJO_CASSANDRA_PORT": "cassandra.port",
    "VAREJO_CASSANDRA_KEYSPACE": "cassandra.keyspace",
}


def load_config(
    config_path: str | Path | None = None, config_name: str = "config.json"
) -> GeneratorConfig:
    """
    Load configuration from file with path resolution.

    Args:
        config_path: Explicit path to config file or directory containing config
        config_name: Name of config file (default: "config.json")

    Returns:
        GeneratorConfig: Loaded and validated configuration

    Raises:
        FileNotFoundError: If no configuration file is found
        ConfigurationError: If configuration is invalid
    """
    if config_path is None:
        search_paths = [
            Path.cwd() / config_name,
            Path.cwd() / "config" / config_name,
        ]

        for path in search_paths:
            if path.exists():
                config_path = path
                break
        else:
            raise FileNotFoundError(
                f"Configuration file '{config_name}' not found in any of: "
                f"{[str(p) for p in search_paths]}"
            )

    config_path = Path(config_path)

    if config_path.is_dir():
        config_path = config_path / config_name

    return GeneratorConfig.from_file(config_path)


def create_default_config(output_path: str | Path) -> GeneratorConfig:
    """
    Create a default configuration file with standard values.

    Args:
        output_path: Where to save the default config file

    Returns:
        GeneratorConfig: The default configuration
    """
    default_config = GeneratorConfig(seed=42)
    default_config.to_file(output_path)
    return default_config


def _set_dotted(data: dict, dotted: str, value) -> None:
    parts = dotted.split(".")
    target = data
    for part in parts[:-1]:
        target = target.setdefault(part, {})
    target[parts[-1]] = value


def get_config_from_env() -> GeneratorConfig | None:
    """
    Try to load configuration from environment variables.

    Returns:
        GeneratorConfig if environment variables are set, None otherwise

    Raises:
        ConfigurationError: If a variable holds an invalid value
    """
    config_file_env = os.getenv("VAREJO_CONFIG_FILE")
    if config_file_env:
        return load_config(config_file_env)

    env_values = {key: os.getenv(key) for key in ENV_VARS}
    if not any(env_values.values()):
        return None

    config_data: dict = {}
    for env_name, value in env_values.items():
        if not value:
            continue
        if env_name == "VAREJO_CASSANDRA_HOSTS":
            value = [host.strip() for host in value.split(",") if host.strip()]
        _set_dotted(config_data, ENV_VARS[env_name], value)

    try:
        # pydantic coerces numeric strings
        return GeneratorConfig(**config_data)
    except ValidationError as e:
        raise ConfigurationError("Invalid environment variable configuration", None, e)


def load_config_with_fallback(config_path: str | Path | None = None) -> GeneratorConfig:
    """
    Load configuration with fallback to environment variables and defaults.

    Priority order:
    1. Explicit config file path
    2. Environment variable VAREJO_CONFIG_FILE
    3. Individual VAREJO_* environment variables
    4. Default locations (config.json, config/config.json)
    5. Built-in defaults

    An explicit path that does not exist is an error rather than a fallback.

    Args:
        config_path: Optional explicit path to config file

    Returns:
        GeneratorConfig: Loaded configuration
    """
    if config_path:
        try:
            return load_config(config_path)
        except FileNotFoundError as e:
            raise ConfigurationError("File not found", Path(config_path), e)

    env_config = get_config_from_env()
    if env_config:
        return env_config

    try:
        return load_config()
    except FileNotFoundError:
        pass

    logger.info("No configuration found, using built-in defaults")
    return GeneratorConfig()
