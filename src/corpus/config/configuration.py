"""Configuration module for the document corpus service.

Loads settings from environment-specific config files:
- APP_ENV=dev  → config_dev.yaml
- APP_ENV=test → config_test.yaml
- Default      → config.yaml

Keys and connection strings are loaded from the .env file.
Fails fast with clear error messages if required configuration is missing.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def _get_project_root() -> Path:
    """Get the project root directory (where config.yaml lives)."""
    # Navigate from src/corpus/config/ up to project root
    return Path(__file__).parent.parent.parent.parent


def _get_config_filename() -> str:
    """Get config filename based on APP_ENV environment variable."""
    app_env = os.environ.get("APP_ENV", "").lower()

    if app_env == "dev":
        return "config_dev.yaml"
    elif app_env == "test":
        return "config_test.yaml"
    else:
        return "config.yaml"


def _load_yaml_config() -> dict:
    """Load configuration from environment-specific config file."""
    config_filename = _get_config_filename()
    config_path = _get_project_root() / config_filename

    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}. "
            f"Set APP_ENV to 'dev' or 'test', or create {config_filename}."
        )

    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def _get_required_env(key: str) -> str:
    """Get required environment variable or raise ConfigurationError."""
    value = os.environ.get(key)
    if not value:
        raise ConfigurationError(
            f"Required environment variable '{key}' is not set. "
            f"Please add it to your .env file."
        )
    return value


@dataclass(frozen=True)
class AzureAISearchConfig:
    """Azure AI Search configuration."""
    api_key: str
    endpoint: str
    index_name: str


@dataclass(frozen=True)
class BlobStorageConfig:
    """Azure Blob Storage configuration for page uploads."""
    connection_string: str
    container_name: str


@dataclass(frozen=True)
class IngestionConfig:
    """Document conversion settings."""
    libreoffice_path: str
    conversion_timeout_seconds: int
    scratch_dir: Optional[str]


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration container."""
    azure_ai_search: AzureAISearchConfig
    blob_storage: BlobStorageConfig
    ingestion: IngestionConfig
    logging: LoggingConfig


def load_config() -> AppConfig:
    """
    Load and validate all application configuration.

    Loads from config.yaml for non-sensitive settings and .env for keys.
    Fails fast if required configuration is missing.

    Returns:
        AppConfig: Validated application configuration.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    # Load environment variables from .env file
    load_dotenv()

    yaml_config = _load_yaml_config()

    ai_search_section = yaml_config.get("ai_search") or {}

    azure_ai_search_config = AzureAISearchConfig(
        api_key=_get_required_env("AI_SEARCH_KEY"),
        endpoint=ai_search_section.get("endpoint") or _get_required_env("AI_SEARCH_ENDPOINT"),
        index_name=ai_search_section.get("index_name") or _get_required_env("AI_SEARCH_INDEX_NAME"),
    )

    blob_section = yaml_config.get("blob_storage") or {}

    blob_storage_config = BlobStorageConfig(
        connection_string=_get_required_env("AZURE_STORAGE_CONNECTION_STRING"),
        container_name=blob_section.get("container_name", "content"),
    )

    ingestion_section = yaml_config.get("ingestion") or {}

    ingestion_config = IngestionConfig(
        libreoffice_path=ingestion_section.get("libreoffice_path", "soffice"),
        conversion_timeout_seconds=int(ingestion_section.get("conversion_timeout_seconds", 120)),
        scratch_dir=ingestion_section.get("scratch_dir"),
    )

    logging_section = yaml_config.get("logging") or {}

    logging_config = LoggingConfig(
        level=logging_section.get("level", "INFO"),
    )

    return AppConfig(
        azure_ai_search=azure_ai_search_config,
        blob_storage=blob_storage_config,
        ingestion=ingestion_config,
        logging=logging_config,
    )


# Module-level singleton for convenience
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the application configuration singleton.

    Lazy-loads configuration on first access.
    Config file is selected based on APP_ENV environment variable.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the config singleton. Useful for testing."""
    global _config
    _config = None


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging, defaulting to the configured level."""
    if level is None:
        level = get_config().logging.level
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
