"""Telemetry module for structured logging.

This module provides:
- Structured logging via structlog
- Semantic event constants
"""

from host_sampler.telemetry.events import (
    CLOCK_ANOMALY_DETECTED,
    COUNTER_BASELINED,
    COUNTER_BASELINES_DROPPED,
    COUNTER_RESET_DETECTED,
    FILE_CHANGED,
    FILE_WRITTEN,
    PROBE_FAILED,
    SAMPLER_CYCLE_COMPLETED,
    SAMPLER_CYCLE_FAILED,
    SAMPLER_STARTED,
    SAMPLER_STATE_TRANSITION,
    SAMPLER_STOPPED,
    SENSOR_POLL,
    SINK_EMIT_FAILED,
    SYSTEM_METRICS_SNAPSHOT,
    WATCH_RUNTIME_ERROR,
    WATCH_SETUP_FAILED,
    WATCH_STARTED,
    WATCH_STOPPED,
)
from host_sampler.telemetry.logger import configure_logging, get_logger, set_console_level

__all__ = [
    "get_logger",
    "configure_logging",
    "set_console_level",
    # Event constants
    "SAMPLER_STARTED",
    "SAMPLER_STOPPED",
    "SAMPLER_CYCLE_COMPLETED",
    "SAMPLER_CYCLE_FAILED",
    "SAMPLER_STATE_TRANSITION",
    "SINK_EMIT_FAILED",
    "SENSOR_POLL",
    "PROBE_FAILED",
    "SYSTEM_METRICS_SNAPSHOT",
    "COUNTER_BASELINED",
    "COUNTER_BASELINES_DROPPED",
    "COUNTER_RESET_DETECTED",
    "CLOCK_ANOMALY_DETECTED",
    "WATCH_STARTED",
    "WATCH_STOPPED",
    "WATCH_SETUP_FAILED",
    "WATCH_RUNTIME_ERROR",
    "FILE_WRITTEN",
    "FILE_CHANGED",
]
