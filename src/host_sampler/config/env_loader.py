"""Environment variable file loader with priority-based loading.

Mirrors the usual .env layering: a base file, local overrides, then
environment-specific files that win over both.
"""

from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

from host_sampler.telemetry import get_logger

log = get_logger(__name__)


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"


def get_environment() -> Environment:
    """Detect current environment from the SAMPLER_ENV environment variable.

    Returns:
        Environment enum value.

    Environment variable mapping:
    - "production" or "prod" → Environment.PRODUCTION
    - "test" → Environment.TEST
    - Default → Environment.DEVELOPMENT

    Note: environment detection must happen before settings are loaded,
    so this reads os.environ directly.
    """
    import os  # noqa: PLC0415

    sampler_env = os.getenv("SAMPLER_ENV", "").lower()

    if sampler_env in ("production", "prod"):
        return Environment.PRODUCTION
    elif sampler_env == "test":
        return Environment.TEST
    else:
        return Environment.DEVELOPMENT


def load_env_files(project_root: Path | None = None) -> list[str]:
    """Load .env files in priority order.

    Priority order (highest to lowest):
    1. `.env.{environment}.local`
    2. `.env.{environment}`
    3. `.env.local`
    4. `.env`

    Args:
        project_root: Path to project root. If None, detects from current file location.

    Returns:
        Names of the files that were loaded, relative to project_root.
    """
    if project_root is None:
        # src/host_sampler/config -> project root
        project_root = Path(__file__).parent.parent.parent.parent

    env_name = get_environment().value

    # Highest priority first: with override=False the first file to set a
    # variable wins
    env_files = [
        project_root / f".env.{env_name}.local",
        project_root / f".env.{env_name}",
        project_root / ".env.local",
        project_root / ".env",
    ]

    loaded_files = []
    for env_file in env_files:
        if env_file.exists():
            # override=False: explicit environment variables win over .env files
            load_dotenv(env_file, override=False)
            loaded_files.append(str(env_file.relative_to(project_root)))

    if loaded_files:
        log.info(
            "env_files_loaded",
            environment=env_name,
            files=loaded_files,
            project_root=str(project_root),
        )
    else:
        log.debug("no_env_files_found", environment=env_name, project_root=str(project_root))

    return loaded_files
