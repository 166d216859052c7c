"""Pydantic field validators shared by AppConfig and the bootstrap helpers."""

from collections.abc import Callable
from pathlib import Path

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("console", "json")

# src/host_sampler/config -> project root
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent


def _one_of(field: str, choices: tuple[str, ...], normalize: Callable[[str], str]):
    def validate(value: str) -> str:
        normalized = normalize(value.strip())
        if normalized not in choices:
            raise ValueError(f"{field} must be one of {', '.join(choices)}, got {value!r}")
        return normalized

    return validate


validate_log_level = _one_of("log_level", LOG_LEVELS, str.upper)
validate_log_level.__doc__ = "Normalize a log level name to upper case, rejecting unknown levels."

validate_log_format = _one_of("log_format", LOG_FORMATS, str.lower)
validate_log_format.__doc__ = "Normalize the console log format ('console' or 'json')."


def resolve_path(value: Path | str) -> Path:
    """Resolve a path, anchoring relative paths at the project root.

    Log directories stay in the checkout no matter which directory the
    sampler is started from.
    """
    path = Path(value)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path.resolve()
