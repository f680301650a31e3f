"""Data models for rlog parsing and the resulting change set."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple


class LocationType(str, Enum):
    HEAD = "head"
    BRANCH = "branch"
    TAG = "tag"


class EditType(str, Enum):
    ADD = "add"
    EDIT = "edit"
    DELETE = "delete"


@dataclass(frozen=True)
class Location:
    """Where in the repository history changes are collected from.

    ``fallback_to_mainline`` only matters for branch and tag locations: when
    set, files that do not carry the symbolic name are read as mainline.
    """

    type: LocationType = LocationType.HEAD
    name: Optional[str] = None
    fallback_to_mainline: bool = False

    @classmethod
    def head(cls) -> "Location":
        return cls()

    @classmethod
    def branch(cls, name: str, fallback_to_mainline: bool = False) -> "Location":
        return cls(LocationType.BRANCH, name, fallback_to_mainline)

    @classmethod
    def tag(cls, name: str, fallback_to_mainline: bool = False) -> "Location":
        return cls(LocationType.TAG, name, fallback_to_mainline)

    @property
    def is_mainline(self) -> bool:
        return self.type == LocationType.HEAD

    def __str__(self) -> str:
        if self.is_mainline:
            return "HEAD"
        return f"{self.type.value} {self.name}"


@dataclass
class RawFile:
    """Per-section scratch state for the file currently being read."""

    full_name: str
    name: str
    revision: Optional[str] = None
    previous_revision: Optional[str] = None
    dead: bool = False

    def next_revision(self, revision: str) -> "RawFile":
        """Start the revision cycle for the next (older) revision of this file."""
        return RawFile(full_name=self.full_name, name=self.name, revision=revision)

    def to_revision(self) -> "FileRevision":
        assert self.revision is not None
        return FileRevision(
            name=self.name,
            full_name=self.full_name,
            revision=self.revision,
            previous_revision=self.previous_revision,
            dead=self.dead,
        )


@dataclass(frozen=True)
class FileRevision:
    """One file touched by a commit."""

    name: str  # relative to the repository root
    full_name: str  # as named by the server
    revision: str
    previous_revision: Optional[str] = None
    dead: bool = False

    @property
    def simple_name(self) -> str:
        return self.name.rsplit("/", 1)[-1]

    @property
    def edit_type(self) -> EditType:
        if self.dead:
            return EditType.DELETE
        if self.revision == "1.1":
            return EditType.ADD
        return EditType.EDIT


@dataclass(frozen=True)
class ChangedFile:
    """A distinct changed file, at its most recent revision in the report."""

    full_name: str
    revision: str
    dead: bool = False


@dataclass
class Commit:
    """A logical commit, possibly spanning several files."""

    author: str
    timestamp: datetime
    message: str = ""
    files: List[FileRevision] = field(default_factory=list)

    @property
    def merge_key(self) -> Tuple[datetime, str, str]:
        return (self.timestamp, self.author, self.message)

    def can_merge_with(self, other: "Commit") -> bool:
        """True when *other* is the same logical change recorded for another file."""
        return self.merge_key == other.merge_key

    def merge(self, other: "Commit") -> None:
        for f in other.files:
            if f not in self.files:
                self.files.append(f)

    def add_file(self, file: FileRevision) -> None:
        self.files.append(file)

    @property
    def affected_paths(self) -> List[str]:
        return [f.name for f in self.files]


def _revision_key(revision: str) -> Tuple[int, ...]:
    return tuple(int(part) for part in revision.split(".") if part.isdigit())


@dataclass(eq=False)
class ChangeSet:
    """Parse result: distinct changed files, merged commits, and symbolic names.

    File order carries no meaning, so equality compares ``files`` as a set.
    """

    files: List[ChangedFile] = field(default_factory=list)
    commits: List[Commit] = field(default_factory=list)
    branch_names: Set[str] = field(default_factory=set)
    tag_names: Set[str] = field(default_factory=set)

    @classmethod
    def from_commits(
        cls,
        commits: List[Commit],
        branch_names: Optional[Set[str]] = None,
        tag_names: Optional[Set[str]] = None,
    ) -> "ChangeSet":
        """Rebuild a change set from commits alone (e.g. a persisted change log).

        Each path keeps its highest revision, which is the one the parser
        would have seen first.
        """
        latest: Dict[str, FileRevision] = {}
        for commit in commits:
            for f in commit.files:
                seen = latest.get(f.full_name)
                if seen is None or _revision_key(f.revision) > _revision_key(seen.revision):
                    latest[f.full_name] = f
        files = [ChangedFile(f.full_name, f.revision, f.dead) for f in latest.values()]
        return cls(
            files=files,
            commits=list(commits),
            branch_names=set(branch_names or ()),
            tag_names=set(tag_names or ()),
        )

    @property
    def is_empty(self) -> bool:
        return not self.commits

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChangeSet):
            return NotImplemented
        return (
            set(self.files) == set(other.files)
            and len(self.files) == len(other.files)
            and self.commits == other.commits
            and self.branch_names == other.branch_names
            and self.tag_names == other.tag_names
        )
