"""Structured logging configuration using structlog.

This module configures structlog for structured logging with:
- JSON formatter for file output
- Pretty-printed console output
- UTC timestamps
- File rotation for log management
- Component and event tracking
"""

import logging
import logging.handlers
import pathlib
import sys
from datetime import datetime, timezone
from typing import Any

import structlog


def _get_log_level() -> str:
    """Get log level from configuration.

    Returns:
        Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    # Bootstrap from environment to avoid circular imports during startup.
    from host_sampler.config.bootstrap import get_bootstrap_log_level  # noqa: PLC0415

    return get_bootstrap_log_level()


def _get_log_format() -> str:
    """Get console log format ("console" or "json") from configuration."""
    from host_sampler.config.bootstrap import get_bootstrap_log_format  # noqa: PLC0415

    return get_bootstrap_log_format()


def _get_log_dir() -> pathlib.Path:
    """Get log directory path.

    Returns:
        Path to telemetry/logs directory.
    """
    try:
        from host_sampler.config.settings import get_settings  # noqa: PLC0415

        return pathlib.Path(str(get_settings().log_dir))
    except Exception:
        # Settings not importable yet (first logger created during config import)
        project_root = pathlib.Path(__file__).parent.parent.parent.parent
        return project_root / "telemetry" / "logs"


def _add_timestamp(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add UTC timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _add_component(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add component name to a stdlib log event.

    Args:
        logger: The logger instance.
        method_name: The log method name (info, error, etc.).
        event_dict: The event dictionary.

    Returns:
        Event dictionary with component added.
    """
    # Guard against None logger (third-party libraries during shutdown)
    if logger is None or not hasattr(logger, "name"):
        event_dict["component"] = "unknown"
        return event_dict

    event_dict["component"] = logger.name.split(".")[-1]
    return event_dict


def _add_component_from_event_dict(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add component name from the logger name placed by add_logger_name.

    Args:
        logger: The structlog logger instance.
        method_name: The log method name (info, error, etc.).
        event_dict: The event dictionary.

    Returns:
        Event dictionary with component added.
    """
    logger_name = event_dict.get("logger", "")
    # e.g. "host_sampler.sampler.loop" -> "loop"
    event_dict.setdefault("component", logger_name.split(".")[-1] or "unknown")
    return event_dict


def _configure_file_handler(log_dir: pathlib.Path) -> logging.handlers.RotatingFileHandler:
    """Configure rotating file handler for JSON logs.

    Args:
        log_dir: Directory for log files.

    Returns:
        Configured RotatingFileHandler.
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        filename=str(log_dir / "current.jsonl"),
        maxBytes=100 * 1024 * 1024,  # 100 MB
        backupCount=5,
        encoding="utf-8",
    )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                _add_timestamp,  # type: ignore[list-item]
                _add_component,  # type: ignore[list-item]
            ],
        )
    )

    return handler


def _configure_console_handler(log_format: str = "console") -> logging.StreamHandler[Any]:
    """Configure console handler for pretty-printed (or JSON) logs.

    Logs go to stderr so they never interleave with the live display on stdout.
    """
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                _add_timestamp,  # type: ignore[list-item]
                _add_component,  # type: ignore[list-item]
            ],
        )
    )

    return handler


def configure_logging() -> None:
    """Configure structlog for structured logging.

    Call once at startup; get_logger() calls it lazily otherwise.
    """
    log_level = _get_log_level()
    log_dir = _get_log_dir()

    # Root logger accepts all levels; individual handlers gate output.
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=logging.DEBUG)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    # watchdog logs every inotify event at DEBUG
    logging.getLogger("watchdog").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    configured_level = getattr(logging, log_level, logging.INFO)

    # File handler captures INFO+ (telemetry events) regardless of user config
    file_handler = _configure_file_handler(log_dir)
    file_handler.setLevel(logging.INFO)
    root_logger.addHandler(file_handler)

    console_handler = _configure_console_handler(_get_log_format())
    console_handler.setLevel(configured_level)
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            _add_component_from_event_dict,  # type: ignore[list-item]
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def set_console_level(level: str) -> None:
    """Change the console handler level after logging is configured.

    The live display shares the terminal with stderr, so the CLI lowers
    console noise while the frame is being redrawn.
    """
    numeric = getattr(logging, level.upper(), logging.INFO)
    for handler in logging.getLogger().handlers:
        if type(handler) is logging.StreamHandler:
            handler.setLevel(numeric)


def get_logger(name: str) -> Any:  # Returns structlog.stdlib.BoundLogger
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module).

    Returns:
        Configured structlog logger instance.

    Example:
        >>> from host_sampler.telemetry import get_logger
        >>> log = get_logger(__name__)
        >>> log.info("probe_failed", probe="cpu", error="...")
    """
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(name)
