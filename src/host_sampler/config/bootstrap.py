"""Bootstrap configuration helpers (pre-settings).

Logging has to be configured before the settings singleton can be imported,
so the log level and format are read straight from the environment here.

Keep this module free of telemetry imports to avoid circular imports.
"""

from __future__ import annotations

import os

from host_sampler.config.validators import validate_log_format, validate_log_level


def get_bootstrap_log_level(default: str = "INFO") -> str:
    """Get logging level from environment without importing settings.

    Args:
        default: Default log level if not set or invalid.

    Returns:
        Uppercased, validated log level string.
    """
    value = os.getenv("SAMPLER_LOG_LEVEL", default)
    try:
        return validate_log_level(value)
    except ValueError:
        return validate_log_level(default)


def get_bootstrap_log_format(default: str = "console") -> str:
    """Get console log format from environment without importing settings.

    Returns:
        "console" or "json".
    """
    value = os.getenv("SAMPLER_LOG_FORMAT", default)
    try:
        return validate_log_format(value)
    except ValueError:
        return validate_log_format(default)
