"""Line sources — where the raw rlog report comes from.

A source yields the report one line at a time, without line terminators.
Every call to ``lines()`` starts a fresh pass over the same content.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Iterator, Protocol, Union, runtime_checkable

logger = logging.getLogger(__name__)

DEFAULT_SPOOL_SIZE = 100 * 1024


def _strip_eol(line: str) -> str:
    """Drop the trailing LF / CRLF of a line."""
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


@runtime_checkable
class LineSource(Protocol):
    """Anything that can produce the report as a sequence of lines."""

    def lines(self) -> Iterator[str]:
        """Return a new iterator over the report lines."""
        ...


class TextSource:
    """Report already held in memory."""

    def __init__(self, text: str) -> None:
        self._text = text

    def lines(self) -> Iterator[str]:
        if not self._text:
            return
        parts = self._text.split("\n")
        if parts[-1] == "":
            parts.pop()
        for part in parts:
            yield _strip_eol(part)


class FileSource:
    """Report captured to a file on disk."""

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8") -> None:
        self.path = Path(path)
        self.encoding = encoding

    def lines(self) -> Iterator[str]:
        with open(self.path, encoding=self.encoding, errors="replace") as f:
            for line in f:
                yield _strip_eol(line)


class SpooledSource:
    """Report streamed in as bytes, kept in memory until it grows too large.

    Past *max_size* bytes the data spills to a temporary file, which is
    removed by ``dispose()`` (or on leaving the ``with`` block).
    """

    def __init__(self, encoding: str = "utf-8", max_size: int = DEFAULT_SPOOL_SIZE) -> None:
        self.encoding = encoding
        self._spool = tempfile.SpooledTemporaryFile(max_size=max_size, mode="w+b")
        self._size = 0

    def write(self, data: bytes) -> int:
        self._spool.seek(0, 2)
        self._size += len(data)
        return self._spool.write(data)

    @property
    def size(self) -> int:
        return self._size

    def lines(self) -> Iterator[str]:
        self._spool.seek(0)
        while True:
            raw = self._spool.readline()
            if not raw:
                break
            yield _strip_eol(raw.decode(self.encoding, errors="replace"))

    def dispose(self) -> None:
        if not self._spool.closed:
            logger.debug("Disposing spooled rlog output (%d bytes)", self._size)
            self._spool.close()

    def __enter__(self) -> "SpooledSource":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()
