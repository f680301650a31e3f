"""cvslog — turn CVS rlog reports into structured change sets."""

__version__ = "1.0.0"

from cvslog.rlog.parser import RlogParser, parse_rlog  # noqa: E402
from cvslog.rlog.errors import (  # noqa: E402
    LocationNotFoundError,
    MalformedTimestampError,
    RlogParseError,
    StructuralViolationError,
)
from cvslog.rlog.models import ChangeSet, Commit, FileRevision, Location  # noqa: E402

__all__ = [
    "ChangeSet",
    "Commit",
    "FileRevision",
    "Location",
    "LocationNotFoundError",
    "MalformedTimestampError",
    "RlogParseError",
    "RlogParser",
    "StructuralViolationError",
    "__version__",
    "parse_rlog",
]
