"""Repository-state tracking between successive rlog reports."""

from cvslog.state.comparer import (
    compile_excluded_regions,
    filter_excluded,
    has_significant_changes,
    update_remote_state,
)

__all__ = [
    "compile_excluded_regions",
    "filter_excluded",
    "has_significant_changes",
    "update_remote_state",
]
