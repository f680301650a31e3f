"""Change-set assembly — location filtering and commit accumulation."""

from cvslog.changes.accumulator import ChangeSetAccumulator
from cvslog.changes.location import LocationFilter

__all__ = ["ChangeSetAccumulator", "LocationFilter"]
