"""Repository-state comparison for change polling.

A repository state is the list of files (with their latest revision) known
from earlier reports. New change sets are folded into it, and excluded
regions decide whether the changes are worth acting on.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Pattern

from cvslog.config.loader import ConfigError
from cvslog.rlog.models import ChangedFile

logger = logging.getLogger(__name__)


def update_remote_state(
    baseline: Iterable[ChangedFile],
    changes: Iterable[ChangedFile],
) -> List[ChangedFile]:
    """Fold *changes* into *baseline* and return the new state.

    A changed file replaces the baseline entry of the same name, or removes
    it when the change is a deletion. Files not in the baseline are added.
    """
    state = list(baseline)
    for changed in changes:
        replaced = False
        updated: List[ChangedFile] = []
        for existing in state:
            if existing.full_name != changed.full_name:
                updated.append(existing)
                continue
            replaced = True
            if not changed.dead:
                updated.append(changed)
        if not replaced:
            updated.append(changed)
        state = updated
    return state


def compile_excluded_regions(patterns: Iterable[str]) -> List[Pattern[str]]:
    compiled: List[Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise ConfigError(f"Excluded region could not be compiled: {pattern!r} ({exc})") from exc
    return compiled


def filter_excluded(
    files: Iterable[ChangedFile],
    patterns: Iterable[Pattern[str]],
) -> List[ChangedFile]:
    """Drop files whose full name matches any excluded region in full."""
    patterns = list(patterns)
    kept: List[ChangedFile] = []
    for f in files:
        match = next((p for p in patterns if p.fullmatch(f.full_name)), None)
        if match is not None:
            logger.info("Skipping file '%s' since it matches exclude pattern %s", f.full_name, match.pattern)
            continue
        kept.append(f)
    return kept


def has_significant_changes(
    changes: Iterable[ChangedFile],
    excluded_regions: Iterable[str] = (),
) -> bool:
    """True if any change survives the excluded regions."""
    return bool(filter_excluded(changes, compile_excluded_regions(excluded_regions)))
