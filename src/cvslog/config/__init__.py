"""Configuration loading, schema, and defaults."""

from cvslog.config.loader import ConfigError, load_config
from cvslog.config.schema import CvsLogConfig, LocationConfig, OutputConfig, RepositoryConfig

__all__ = [
    "ConfigError",
    "CvsLogConfig",
    "LocationConfig",
    "OutputConfig",
    "RepositoryConfig",
    "load_config",
]
