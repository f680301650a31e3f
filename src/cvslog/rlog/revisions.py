"""Revision-number helpers: branch detection, prefix resolution, tag lineage.

RCS marks a branch in the symbolic-names table with a "magic" revision whose
second-to-last group is zero: ``1.2.0.4`` names the branch whose revisions are
``1.2.4.1``, ``1.2.4.2`` and so on. Anything else in that table is a tag.
"""

from __future__ import annotations

import re
from typing import Dict, Optional, Tuple

# Even number of numeric groups, second-to-last one is 0.
_BRANCH_REVISION_RE = re.compile(r"^((?:\d+\.\d+\.)+)0\.(\d+)$")

RevisionToNameMap = Dict[str, str]


def is_branch_revision(revision: str) -> bool:
    """Return True if *revision* has the magic branch shape (``1.2.0.4``)."""
    return _BRANCH_REVISION_RE.match(revision) is not None


def branch_prefix(revision: str) -> Optional[str]:
    """Normalise a magic branch revision to the prefix of its revisions.

    ``1.2.0.4`` → ``1.2.4.``; returns None for non-branch revisions.
    """
    m = _BRANCH_REVISION_RE.match(revision)
    if m is None:
        return None
    return f"{m.group(1)}{m.group(2)}."


def split_symbolic_name(row: str) -> Tuple[str, str]:
    """Split a ``\\tNAME: REVISION`` row on its last colon."""
    name, _, revision = row.strip().rpartition(":")
    return name.strip(), revision.strip()


def resolve_branch(revision: str, prefixes: RevisionToNameMap) -> Optional[str]:
    """Return the branch name *revision* sits directly on, if any.

    The revision must start with the branch prefix and sit exactly one level
    under it (``1.3.2.1`` is on ``1.3.2.``; ``1.3.2.1.4.1`` is not).
    """
    for prefix, name in prefixes.items():
        if revision.startswith(prefix) and "." not in revision[len(prefix):]:
            return name
    return None


def on_tag_lineage(revision: str, tag_revision: str) -> bool:
    """Return True if *revision* is the tagged revision or an ancestor on its line.

    Both must have the same depth and leading groups; the last group may not
    exceed the tag's.
    """
    parts = revision.split(".")
    tag_parts = tag_revision.split(".")
    if len(parts) != len(tag_parts):
        return False
    if parts[:-1] != tag_parts[:-1]:
        return False
    try:
        return int(parts[-1]) <= int(tag_parts[-1])
    except ValueError:
        return False


class SymbolicNames:
    """The symbolic-names table of one file section.

    Branches are kept by normalised prefix so a revision can be resolved to
    its branch; tags are kept by name with the revision they point at.
    """

    def __init__(self) -> None:
        self.branches: RevisionToNameMap = {}
        self.tags: Dict[str, str] = {}

    def add(self, name: str, revision: str) -> bool:
        """Register a row; return True if it was classified as a branch."""
        prefix = branch_prefix(revision)
        if prefix is not None:
            self.branches[prefix] = name
            return True
        self.tags[name] = revision
        return False

    def has_branch(self, name: str) -> bool:
        return name in self.branches.values()

    def tag_revision(self, name: str) -> Optional[str]:
        return self.tags.get(name)

    def branch_of(self, revision: str) -> Optional[str]:
        return resolve_branch(revision, self.branches)

    def __contains__(self, name: object) -> bool:
        return name in self.tags or name in self.branches.values()
