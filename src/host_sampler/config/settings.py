"""Application configuration settings.

This module provides the AppConfig class and settings singleton.
"""

from pathlib import Path

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from host_sampler.config.env_loader import Environment, get_environment, load_env_files
from host_sampler.config.validators import (
    resolve_path,
    validate_log_format,
    validate_log_level,
)

log = structlog.get_logger(__name__)


class AppConfig(BaseSettings):
    """Unified sampler configuration.

    Loads configuration from environment variables (SAMPLER_ prefix), .env
    files and defaults. Validates all values using Pydantic.
    """

    model_config = SettingsConfigDict(
        # .env files are loaded manually via env_loader to honour priority order
        env_prefix="SAMPLER_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    environment: Environment = Field(
        default_factory=get_environment, description="Current environment"
    )
    debug: bool = Field(default=False, description="Show DEBUG logs on the console")

    # Telemetry
    log_dir: Path = Field(default=Path("telemetry/logs"), description="Log directory path")
    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: str = Field(
        default="console", description="Console log format (console or json)"
    )

    # Sampler Loop
    monitor_interval_seconds: float = Field(
        default=5.0, gt=0, description="Resource monitor refresh period"
    )
    window_poll_interval_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Window-title poll period (0 polls back-to-back)",
    )
    concurrent_probes: bool = Field(
        default=False,
        description="Run the probes of one cycle concurrently instead of in order",
    )

    # Probes
    probe_timeout_seconds: float | None = Field(
        default=10.0, description="Upper bound for a single probe call (None disables)"
    )
    cpu_sample_seconds: float = Field(
        default=1.0, ge=0, description="Window psutil measures CPU utilization over"
    )

    # Display
    bar_width: int = Field(default=50, ge=1, description="Cells in a percentage bar")

    # Watch Loop
    watch_path: Path | None = Field(default=None, description="Directory to watch for writes")
    watch_recursive: bool = Field(default=True, description="Watch subdirectories too")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        return validate_log_level(v)

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        return validate_log_format(v)

    @field_validator("log_dir", mode="before")
    @classmethod
    def resolve_paths(cls, v: Path | str) -> Path:
        """Resolve relative paths to absolute."""
        return resolve_path(v)

    @field_validator("probe_timeout_seconds")
    @classmethod
    def validate_probe_timeout(cls, v: float | None) -> float | None:
        """Reject non-positive timeouts."""
        if v is not None and v <= 0:
            raise ValueError(f"probe_timeout_seconds must be positive, got {v}")
        return v

    @field_validator("watch_path", mode="before")
    @classmethod
    def expand_watch_path(cls, v: Path | str | None) -> Path | None:
        """Expand ~ in the watch path; leave it unset when empty."""
        if v is None or v == "":
            return None
        return Path(v).expanduser()


_settings: AppConfig | None = None


def load_app_config() -> AppConfig:
    """Load and validate sampler configuration.

    This function:
    1. Loads .env files in priority order (via env_loader)
    2. Creates AppConfig instance (reads from environment variables)
    3. Validates all values using Pydantic

    Returns:
        Validated AppConfig instance.

    Raises:
        ValidationError: If configuration validation fails.
    """
    log.info("loading_app_config", environment=get_environment().value)

    load_env_files()

    try:
        config = AppConfig()
        log.info(
            "app_config_loaded",
            environment=config.environment.value,
            debug=config.debug,
            log_level=config.log_level,
            monitor_interval_seconds=config.monitor_interval_seconds,
            window_poll_interval_seconds=config.window_poll_interval_seconds,
        )
        return config
    except Exception as e:
        log.error("app_config_load_failed", error=str(e), error_type=type(e).__name__)
        raise


def get_settings() -> AppConfig:
    """Get the application settings singleton.

    Returns:
        AppConfig instance (singleton pattern).
    """
    global _settings
    if _settings is None:
        _settings = load_app_config()
    return _settings
