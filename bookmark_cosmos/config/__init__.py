"""Configuration loading for Bookmark Cosmos."""

from .pydantic_config import (
    ClassifierConfig,
    ConfigurationManager,
    CosmosConfig,
    HostConfig,
    NetworkConfig,
    format_config_error,
)

__all__ = [
    "ClassifierConfig",
    "ConfigurationManager",
    "CosmosConfig",
    "HostConfig",
    "NetworkConfig",
    "format_config_error",
]
