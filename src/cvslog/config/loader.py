"""Load and merge configuration from .cvslog.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from cvslog.config.defaults import CONFIG_FILENAME
from cvslog.config.schema import (
    CvsLogConfig,
    LocationConfig,
    OutputConfig,
    RepositoryConfig,
)
from cvslog.output import FORMATS as _FORMATS

_LOCATION_TYPES = ("head", "branch", "tag")
_TRUTHY = ("1", "true", "yes")


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(cwd: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = cwd / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _merge_env_overrides(cfg: CvsLogConfig) -> None:
    """Apply CVSLOG_* environment variable overrides."""
    if val := os.environ.get("CVSLOG_CVSROOT"):
        cfg.repository.cvs_root = val
    if val := os.environ.get("CVSLOG_ENCODING"):
        cfg.repository.encoding = val
    if val := os.environ.get("CVSLOG_LOCATION_TYPE"):
        if val in _LOCATION_TYPES:
            cfg.location.type = val  # type: ignore[assignment]
    if val := os.environ.get("CVSLOG_LOCATION_NAME"):
        cfg.location.name = val
    if val := os.environ.get("CVSLOG_FALLBACK"):
        cfg.location.fallback_to_mainline = val.lower() in _TRUTHY
    if val := os.environ.get("CVSLOG_FORMAT"):
        if val in _FORMATS:
            cfg.output.format = val  # type: ignore[assignment]


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: CvsLogConfig) -> None:
    if cfg.output.format not in _FORMATS:
        raise ConfigError(
            f"Invalid output format {cfg.output.format!r}; expected one of {', '.join(_FORMATS)}"
        )
    if cfg.location.type not in _LOCATION_TYPES:
        raise ConfigError(f"Invalid location type {cfg.location.type!r}")
    if not isinstance(cfg.repository.excluded_regions, list):
        raise ConfigError("repository.excluded_regions must be a list of patterns")


def load_config(
    cwd: Path,
    config_override: Optional[str] = None,
) -> CvsLogConfig:
    """Load, validate, and return a CvsLogConfig."""
    config_path = find_config_file(cwd, config_override)

    if config_path is None:
        cfg = CvsLogConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = CvsLogConfig(
            version=str(raw.get("version", "1.0")),
            repository=_build_section(raw, RepositoryConfig, "repository"),
            location=_build_section(raw, LocationConfig, "location"),
            output=_build_section(raw, OutputConfig, "output"),
        )

    _merge_env_overrides(cfg)
    _validate(cfg)
    return cfg
