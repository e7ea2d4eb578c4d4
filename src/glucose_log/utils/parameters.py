"""
Configuration and parameter loading using Pydantic.

This module provides centralized configuration management for the entire application.
All parameters are loaded from YAML and validated using Pydantic models.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from glucose_log.utils.exceptions import ConfigurationError

DEFAULT_DISCLAIMER = (
    "Disclaimer: This is for tracking purposes only. Consult your healthcare provider."
)


class StorageConfig(BaseModel):
    """Key-value storage configuration."""

    path: str = "data/glucose_log.json"
    readings_key: str = "blood-sugar-readings"
    reminder_key: str = "telegram-chat-id"


class ProcessingConfig(BaseModel):
    """Reading processing configuration."""

    timezone: str = "UTC"
    default_period: str = Field(
        "1week", pattern="^(3days|1week|15days|1month|3months|custom)$"
    )


class ReportConfig(BaseModel):
    """PDF report configuration."""

    output_dir: str = "output"
    title: str = "Blood Sugar Tracker Report"
    disclaimer: str = DEFAULT_DISCLAIMER


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    console: bool = True


class AppConfig(BaseSettings):
    """Main application configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(env_prefix="GLOG_", case_sensitive=False)


class ParameterLoader:
    """
    Centralized parameter loader for the application.

    Loads and validates configuration from YAML files using Pydantic models.
    A missing file is an error unless ``allow_missing`` is set, in which case
    the built-in defaults are used.
    """

    def __init__(self, config_path: str = "config/config.yaml", allow_missing: bool = False) -> None:
        """
        Initialize parameter loader.

        Args:
            config_path: Path to the YAML configuration file.
            allow_missing: Fall back to defaults when the file does not exist.

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid.
        """
        self.config_path = Path(config_path)
        self.allow_missing = allow_missing
        self.config: AppConfig
        self._load_config()

    def _load_config(self) -> None:
        """
        Load configuration from YAML file.

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid.
        """
        if not self.config_path.exists():
            if self.allow_missing:
                self.config = AppConfig()
                return
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, encoding="utf-8") as f:
                config_dict = yaml.safe_load(f) or {}

            self.config = AppConfig(**config_dict)

        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML configuration: {e}") from e
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

    def get_storage_config(self) -> StorageConfig:
        """Get key-value storage configuration."""
        return self.config.storage

    def get_processing_config(self) -> ProcessingConfig:
        """Get reading processing configuration."""
        return self.config.processing

    def get_report_config(self) -> ReportConfig:
        """Get PDF report configuration."""
        return self.config.report

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        return self.config.logging
