"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

from cvslog.rlog.models import Location, LocationType

OutputFormat = Literal["terminal", "json", "yaml", "xml"]
LocationKind = Literal["head", "branch", "tag"]


@dataclass
class RepositoryConfig:
    cvs_root: str = ""  # CVSROOT connection string, e.g. :pserver:anon@host:/cvsroot
    encoding: str = "utf-8"
    excluded_regions: List[str] = field(default_factory=list)  # regexes on file names


@dataclass
class LocationConfig:
    type: LocationKind = "head"
    name: str = ""
    fallback_to_mainline: bool = False

    def to_location(self) -> Location:
        """Build the Location descriptor, validating the name for branches and tags."""
        from cvslog.config.loader import ConfigError

        try:
            kind = LocationType(self.type)
        except ValueError as exc:
            raise ConfigError(f"Unknown location type: {self.type!r}") from exc

        if kind == LocationType.HEAD:
            return Location.head()
        if not self.name:
            raise ConfigError(f"A {kind.value} location needs a name")
        return Location(kind, self.name, self.fallback_to_mainline)


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class CvsLogConfig:
    version: str = "1.0"
    repository: RepositoryConfig = field(default_factory=RepositoryConfig)
    location: LocationConfig = field(default_factory=LocationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
