"""Configuration management for the host sampler.

Environment variables (SAMPLER_ prefix), layered .env files and defaults
are merged into a single validated AppConfig.
"""

from host_sampler.config.env_loader import Environment, get_environment
from host_sampler.config.settings import AppConfig, get_settings, load_app_config

# Singleton instance
settings = get_settings()

__all__ = [
    "settings",
    "AppConfig",
    "get_settings",
    "load_app_config",
    "Environment",
    "get_environment",
]
