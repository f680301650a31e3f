"""Location filter — decides which commits belong to the requested location."""

from __future__ import annotations

import logging
from typing import Set

from cvslog.rlog.errors import LocationNotFoundError
from cvslog.rlog.models import Location
from cvslog.rlog.revisions import SymbolicNames, on_tag_lineage

logger = logging.getLogger(__name__)


class LocationFilter:
    """Accept or reject commits by revision for one requested location.

    Mainline keeps revisions that resolve to no named branch. A branch name
    keeps revisions sitting directly on that branch; a tag name keeps the
    tagged revision and its ancestors on the same line. Files that lack the
    requested name are read as mainline when fallback is enabled and are
    skipped otherwise.
    """

    def __init__(self, location: Location) -> None:
        self.location = location

    def accepts(self, revision: str, names: SymbolicNames) -> bool:
        if self.location.is_mainline:
            return names.branch_of(revision) is None

        wanted = self.location.name
        assert wanted is not None

        if names.has_branch(wanted):
            return names.branch_of(revision) == wanted

        tag_revision = names.tag_revision(wanted)
        if tag_revision is not None:
            return on_tag_lineage(revision, tag_revision)

        if self.location.fallback_to_mainline:
            logger.debug("'%s' not on this file, reading %s as mainline", wanted, revision)
            return names.branch_of(revision) is None
        return False

    def ensure_found(self, branch_names: Set[str], tag_names: Set[str]) -> None:
        """Raise LocationNotFoundError if the requested name never appeared."""
        if self.location.is_mainline or self.location.fallback_to_mainline:
            return
        wanted = self.location.name
        if wanted not in branch_names and wanted not in tag_names:
            raise LocationNotFoundError(wanted or "")
