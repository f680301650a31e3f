"""Parse failures raised while reading an rlog report.

Every error here is fatal: the parse is abandoned and no partial change set
is returned.
"""

from __future__ import annotations

from typing import Optional


class RlogParseError(Exception):
    """Base class for rlog parse failures."""

    def __init__(self, message: str, line_no: Optional[int] = None) -> None:
        self.line_no = line_no
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)


class MalformedTimestampError(RlogParseError):
    """A commit header carries a date matching none of the known formats."""


class StructuralViolationError(RlogParseError):
    """A line appeared in a parser state that cannot accept it."""


class LocationNotFoundError(RlogParseError):
    """The requested branch or tag was never seen and fallback is disabled."""

    def __init__(self, location_name: str) -> None:
        self.location_name = location_name
        super().__init__(
            f"No revision found for branch or tag '{location_name}'"
        )
