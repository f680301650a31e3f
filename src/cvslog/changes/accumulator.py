"""Change-set accumulation: commit merging and changed-file deduplication."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from cvslog.rlog.models import ChangedFile, ChangeSet, Commit, FileRevision

logger = logging.getLogger(__name__)


class ChangeSetAccumulator:
    """Collect flushed commits into one change set.

    Merge key: (timestamp, author, message). rlog reports one commit per file,
    so a change touching several files arrives several times; those copies are
    merged into the first one and their files appended.

    The report lists revisions newest first, so the first revision recorded
    for a path is its most recent one; later ones only add to their commit.
    """

    def __init__(self) -> None:
        self._commits: Dict[Tuple[datetime, str, str], Commit] = {}
        self._files: Dict[str, ChangedFile] = {}

    def add(self, commit: Commit) -> Commit:
        """Add *commit*, merging it into an existing one when possible.

        Returns the commit now holding the files.
        """
        for f in commit.files:
            self._record_file(f)

        existing = self._commits.get(commit.merge_key)
        if existing is not None:
            existing.merge(commit)
            logger.debug(
                "Merged commit by %s at %s (%d files)",
                commit.author, commit.timestamp, len(existing.files),
            )
            return existing

        stored = Commit(
            author=commit.author,
            timestamp=commit.timestamp,
            message=commit.message,
            files=list(commit.files),
        )
        self._commits[commit.merge_key] = stored
        return stored

    def add_all(self, commits: Iterable[Commit]) -> None:
        for commit in commits:
            self.add(commit)

    def _record_file(self, f: FileRevision) -> None:
        if f.full_name not in self._files:
            self._files[f.full_name] = ChangedFile(
                full_name=f.full_name, revision=f.revision, dead=f.dead
            )

    @property
    def commits(self) -> List[Commit]:
        return list(self._commits.values())

    @property
    def files(self) -> List[ChangedFile]:
        return list(self._files.values())

    def build(
        self,
        branch_names: Optional[Iterable[str]] = None,
        tag_names: Optional[Iterable[str]] = None,
    ) -> ChangeSet:
        """Assemble the final change set."""
        return ChangeSet(
            files=self.files,
            commits=self.commits,
            branch_names=set(branch_names or ()),
            tag_names=set(tag_names or ()),
        )
