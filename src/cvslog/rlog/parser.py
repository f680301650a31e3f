"""rlog report parser — a line-driven state machine.

Walks the output of ``cvs rlog`` / ``cvs log`` once and produces a ChangeSet
scoped to one location. Handles banner lines, lock rows, branch/tag tables,
zero-revision sections, ``branches:`` metadata lines, and commit messages
that contain lines looking exactly like the section dividers.

The dividers are never escaped inside commit messages, so a divider is only
provisional until the line(s) after it are seen:

- ``----------------------------`` is a commit boundary only when the next
  line is ``revision <rev>``.
- ``=====...`` (77) ends the file only when followed by a blank line and
  then end of input or ``RCS file:``.

Deferred divider lines are held in a two-line window.
"""

from __future__ import annotations

import logging
import re
from collections import deque
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Deque, Dict, Iterable, List, Optional, Set, Union

from cvslog.changes.accumulator import ChangeSetAccumulator
from cvslog.changes.location import LocationFilter
from cvslog.rlog.errors import MalformedTimestampError, StructuralViolationError
from cvslog.rlog.models import ChangeSet, Commit, Location, RawFile
from cvslog.rlog.revisions import SymbolicNames, split_symbolic_name
from cvslog.rlog.source import LineSource, TextSource

logger = logging.getLogger(__name__)

COMMIT_DIVIDER = "-" * 28
FILE_DIVIDER = "=" * 77
RCS_FILE_MARKER = "RCS file:"

# --- Regex patterns for rlog lines ---

_RCS_FILE_RE = re.compile(r"^RCS file:\s*(.+?)(?:,[a-z]+)?\s*$")
_REVISION_RE = re.compile(r"^revision\s+([0-9.]+)")
_COMMIT_HEADER_RE = re.compile(
    r"^date:\s*(?P<date>[^;]*);\s*author:\s*(?P<author>[^;]*);\s*state:\s*(?P<state>[^;]*);?"
)
_BRANCHES_RE = re.compile(r"^branches:\s+[0-9.;\s]+$")

# Newer servers print an offset, older ones print UTC without one.
_DATE_FORMATS = (
    "%Y/%m/%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S %z",
    "%Y/%m/%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
)


class ParserState(str, Enum):
    EXPECT_FILE_NAME = "expect_file_name"
    EXPECT_FILE_NAME_PREVIOUS_LINE = "expect_file_name_previous_line"
    EXPECT_BRANCH_OR_TAG_NAMES = "expect_branch_or_tag_names"
    EXPECT_FIRST_REVISION = "expect_first_revision"
    EXPECT_COMMIT_HEADER = "expect_commit_header"
    EXPECT_COMMIT_COMMENT = "expect_commit_comment"


def parse_timestamp(value: str, line_no: Optional[int] = None) -> datetime:
    """Parse an rlog date; dates without an offset are UTC."""
    for fmt in _DATE_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    raise MalformedTimestampError(
        f"Date could not be parsed into any recognised format: {value!r}", line_no
    )


def repository_root(cvs_root: str) -> str:
    """Return the repository path of a CVSROOT connection string.

    ``:pserver:anon@host:/usr/local/cvs`` → ``/usr/local/cvs``. Empty when the
    string carries no path.
    """
    _, sep, path = cvs_root.partition("/")
    if not sep:
        return ""
    return "/" + path.rstrip("/")


def relative_name(full_name: str, root: str) -> str:
    """Path of an RCS file relative to the repository root, outside the Attic."""
    if root and full_name.startswith(root + "/"):
        name = full_name[len(root) + 1:]
    else:
        name = full_name.lstrip("/")
    if "/Attic/" in "/" + name:
        head, _, tail = ("/" + name).rpartition("/Attic/")
        name = (head + "/" + tail).lstrip("/")
    return name


class RlogParser:
    """Parse one rlog report into a ChangeSet.

    Usage::

        parser = RlogParser(Location.branch("dev"), cvs_root=":pserver:h:/cvs")
        change_set = parser.parse(FileSource("rlog.txt").lines())

    One instance handles one report. ``feed()`` / ``finish()`` allow driving
    the machine line by line.
    """

    def __init__(self, location: Optional[Location] = None, cvs_root: str = "") -> None:
        self.location = location or Location.head()
        self.root = repository_root(cvs_root)
        self.state = ParserState.EXPECT_FILE_NAME
        self.branch_names: Set[str] = set()
        self.tag_names: Set[str] = set()

        self._filter = LocationFilter(self.location)
        self._accumulator = ChangeSetAccumulator()
        self._window: Deque[str] = deque(maxlen=2)
        self._raw: Optional[RawFile] = None
        self._names = SymbolicNames()
        self._in_symbolic_names = False
        self._commit: Optional[Commit] = None
        self._comment: List[str] = []
        self._line_no = 0
        self._sections = 0
        self._finished = False

        self._handlers: Dict[ParserState, Callable[[str], None]] = {
            ParserState.EXPECT_FILE_NAME: self._on_file_name,
            ParserState.EXPECT_FILE_NAME_PREVIOUS_LINE: self._on_file_name_previous_line,
            ParserState.EXPECT_BRANCH_OR_TAG_NAMES: self._on_branch_or_tag_names,
            ParserState.EXPECT_FIRST_REVISION: self._on_first_revision,
            ParserState.EXPECT_COMMIT_HEADER: self._on_commit_header,
            ParserState.EXPECT_COMMIT_COMMENT: self._on_commit_comment,
        }

    # ---- driving ----

    def parse(self, lines: Iterable[str]) -> ChangeSet:
        for line in lines:
            self.feed(line)
        return self.finish()

    def feed(self, line: str) -> None:
        if self._finished:
            raise RuntimeError("parser already finished")
        self._line_no += 1
        self._dispatch(line)

    def finish(self) -> ChangeSet:
        """Flush what is left at end of input and assemble the change set."""
        self._finished = True

        if self.state == ParserState.EXPECT_COMMIT_COMMENT:
            # A trailing '=' divider (and blank line) ends the file; a
            # trailing dashed line has no revision after it, so it is text.
            if self._window and self._window[0] == COMMIT_DIVIDER:
                self._release_window()
            self._window.clear()
            self._flush_commit()
        elif self.state == ParserState.EXPECT_COMMIT_HEADER:
            assert self._raw is not None
            raise StructuralViolationError(
                f"Report ended before the commit header of revision {self._raw.revision}",
                self._line_no,
            )

        if self._sections:
            self._filter.ensure_found(self.branch_names, self.tag_names)

        change_set = self._accumulator.build(self.branch_names, self.tag_names)
        logger.info(
            "Parsed %d file sections: %d commits, %d changed files (%s)",
            self._sections, len(change_set.commits), len(change_set.files), self.location,
        )
        return change_set

    def _dispatch(self, line: str) -> None:
        self._handlers[self.state](line)

    def _transition(self, state: ParserState) -> None:
        logger.debug("line %d: %s -> %s", self._line_no, self.state.value, state.value)
        self.state = state

    # ---- state handlers ----

    def _on_file_name(self, line: str) -> None:
        m = _RCS_FILE_RE.match(line)
        if m is None:
            return  # banner / server chatter
        full_name = m.group(1)
        self._raw = RawFile(full_name=full_name, name=relative_name(full_name, self.root))
        self._names = SymbolicNames()
        self._in_symbolic_names = False
        self._sections += 1
        self._transition(ParserState.EXPECT_BRANCH_OR_TAG_NAMES)

    def _on_file_name_previous_line(self, line: str) -> None:
        # The held line is the next file's 'RCS file:' line.
        self._transition(ParserState.EXPECT_FILE_NAME)
        self._on_file_name(line)

    def _on_branch_or_tag_names(self, line: str) -> None:
        if line.startswith("keyword substitution:"):
            self._in_symbolic_names = False
            self._transition(ParserState.EXPECT_FIRST_REVISION)
            return
        if line.startswith("symbolic names:"):
            self._in_symbolic_names = True
            return
        if line.startswith("\t"):
            if self._in_symbolic_names:
                self._register_symbolic_name(line)
            return
        self._in_symbolic_names = False

    def _register_symbolic_name(self, line: str) -> None:
        name, revision = split_symbolic_name(line)
        if not name or not revision:
            return
        if self._names.add(name, revision):
            self.branch_names.add(name)
        else:
            self.tag_names.add(name)

    def _on_first_revision(self, line: str) -> None:
        m = _REVISION_RE.match(line)
        if m is not None:
            assert self._raw is not None
            self._raw.revision = m.group(1)
            self._transition(ParserState.EXPECT_COMMIT_HEADER)
            return
        if line == FILE_DIVIDER:
            self._end_file()
            self._transition(ParserState.EXPECT_FILE_NAME)

    def _on_commit_header(self, line: str) -> None:
        assert self._raw is not None
        if _REVISION_RE.match(line):
            raise StructuralViolationError(
                f"Revision line without a commit header for revision {self._raw.revision}",
                self._line_no,
            )
        if not line.startswith("date:"):
            return
        m = _COMMIT_HEADER_RE.match(line)
        if m is None:
            raise StructuralViolationError(f"Unrecognised commit header: {line!r}", self._line_no)

        timestamp = parse_timestamp(m.group("date").strip(), self._line_no)
        self._raw.dead = m.group("state").strip() == "dead"
        self._commit = Commit(author=m.group("author").strip(), timestamp=timestamp)
        self._comment = []
        self._transition(ParserState.EXPECT_COMMIT_COMMENT)

    def _on_commit_comment(self, line: str) -> None:
        if self._window:
            if self._window[0] == COMMIT_DIVIDER:
                if self._close_revision(line):
                    return
            elif len(self._window) == 1:
                if line == "":
                    self._window.append(line)
                    return
                self._release_window()
            else:
                if line.startswith(RCS_FILE_MARKER):
                    self._window.clear()
                    self._flush_commit()
                    self._end_file()
                    self._transition(ParserState.EXPECT_FILE_NAME_PREVIOUS_LINE)
                    self._dispatch(line)
                    return
                self._release_window()

        if line == COMMIT_DIVIDER or line == FILE_DIVIDER:
            self._window.append(line)
            return
        if not self._comment and _BRANCHES_RE.match(line):
            return
        self._comment.append(line)

    def _close_revision(self, line: str) -> bool:
        """Resolve a deferred dashed line against *line*; True if it was a boundary."""
        m = _REVISION_RE.match(line)
        if m is None:
            self._release_window()
            return False

        self._window.clear()
        assert self._raw is not None
        older = m.group(1)
        self._raw.previous_revision = older
        self._flush_commit()
        self._raw = self._raw.next_revision(older)
        self._transition(ParserState.EXPECT_COMMIT_HEADER)
        return True

    # ---- helpers ----

    def _release_window(self) -> None:
        """Deferred divider lines turned out to be comment text."""
        self._comment.extend(self._window)
        self._window.clear()

    def _flush_commit(self) -> None:
        commit, raw = self._commit, self._raw
        self._commit = None
        if commit is None or raw is None or raw.revision is None:
            return

        if not self._filter.accepts(raw.revision, self._names):
            logger.debug("Skipping %s %s: not on %s", raw.full_name, raw.revision, self.location)
            return

        commit.message = "\n".join(self._comment)
        commit.add_file(raw.to_revision())
        self._accumulator.add(commit)

    def _end_file(self) -> None:
        self._raw = None
        self._names = SymbolicNames()
        self._in_symbolic_names = False


def parse_rlog(
    source: Union[LineSource, Iterable[str], str],
    location: Optional[Location] = None,
    cvs_root: str = "",
) -> ChangeSet:
    """Parse a complete rlog report and return its ChangeSet.

    *source* may be a LineSource, any iterable of lines, or the report text.
    """
    if isinstance(source, str):
        source = TextSource(source)
    lines = source.lines() if isinstance(source, LineSource) else source
    return RlogParser(location, cvs_root).parse(lines)
