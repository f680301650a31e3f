"""rlog layer — report models, revision helpers, line sources, and errors.

The parser itself lives in ``cvslog.rlog.parser``.
"""

from cvslog.rlog.errors import (
    LocationNotFoundError,
    MalformedTimestampError,
    RlogParseError,
    StructuralViolationError,
)
from cvslog.rlog.models import (
    ChangedFile,
    ChangeSet,
    Commit,
    EditType,
    FileRevision,
    Location,
    LocationType,
    RawFile,
)
from cvslog.rlog.revisions import SymbolicNames, branch_prefix, is_branch_revision
from cvslog.rlog.source import FileSource, LineSource, SpooledSource, TextSource

__all__ = [
    "ChangeSet",
    "ChangedFile",
    "Commit",
    "EditType",
    "FileRevision",
    "FileSource",
    "LineSource",
    "Location",
    "LocationNotFoundError",
    "LocationType",
    "MalformedTimestampError",
    "RawFile",
    "RlogParseError",
    "SpooledSource",
    "StructuralViolationError",
    "SymbolicNames",
    "TextSource",
    "branch_prefix",
    "is_branch_revision",
]
