"""Configuration module."""

from src.corpus.config.configuration import (
    AppConfig,
    AzureAISearchConfig,
    BlobStorageConfig,
    ConfigurationError,
    IngestionConfig,
    LoggingConfig,
    configure_logging,
    get_config,
    load_config,
    reset_config,
)

__all__ = [
    "AppConfig",
    "AzureAISearchConfig",
    "BlobStorageConfig",
    "ConfigurationError",
    "IngestionConfig",
    "LoggingConfig",
    "configure_logging",
    "get_config",
    "load_config",
    "reset_config",
]
