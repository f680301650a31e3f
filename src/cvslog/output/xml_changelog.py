"""XML change log in the classic ``<changelog><entry>`` layout.

Layout::

    <changelog>
      <entry>
        <changeDate>2012-08-16 10:20:30</changeDate>
        <author>user</author>
        <file>
          <name>src/a.c</name>
          <fullName>/cvsroot/mod/src/a.c</fullName>
          <revision>1.2</revision>
          <prevrevision>1.1</prevrevision>   (only when known)
          <dead />                           (only for deletions)
        </file>
        <msg>sample entry</msg>
      </entry>
    </changelog>

Dates are written in UTC. Reading drops entries without a date or message
and merges duplicate entries, as change logs written by older tools may
repeat them.
"""

from __future__ import annotations

from datetime import timezone
from pathlib import Path
from typing import List, Optional, Union
from xml.etree import ElementTree

from cvslog.output.json_report import ChangeLogFormatError
from cvslog.rlog.errors import MalformedTimestampError
from cvslog.rlog.models import Commit, FileRevision
from cvslog.rlog.parser import parse_timestamp

CHANGE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _text(parent: ElementTree.Element, tag: str, value: str) -> None:
    ElementTree.SubElement(parent, tag).text = value


def render(commits: List[Commit]) -> str:
    root = ElementTree.Element("changelog")
    for commit in commits:
        entry = ElementTree.SubElement(root, "entry")
        _text(entry, "changeDate", commit.timestamp.astimezone(timezone.utc).strftime(CHANGE_DATE_FORMAT))
        _text(entry, "author", commit.author)
        for f in commit.files:
            file_el = ElementTree.SubElement(entry, "file")
            _text(file_el, "name", f.name)
            _text(file_el, "fullName", f.full_name)
            _text(file_el, "revision", f.revision)
            if f.previous_revision is not None:
                _text(file_el, "prevrevision", f.previous_revision)
            if f.dead:
                ElementTree.SubElement(file_el, "dead")
        _text(entry, "msg", commit.message)

    ElementTree.indent(root, space="\t")
    body = ElementTree.tostring(root, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'


def write(commits: List[Commit], path: Union[str, Path]) -> None:
    Path(path).write_text(render(commits), encoding="utf-8")


def _child_text(el: ElementTree.Element, tag: str) -> Optional[str]:
    child = el.find(tag)
    if child is None:
        return None
    return child.text or ""


def _read_file(el: ElementTree.Element) -> FileRevision:
    name = _child_text(el, "name")
    revision = _child_text(el, "revision")
    if name is None or revision is None:
        raise ChangeLogFormatError("<file> needs <name> and <revision>")
    full_name = _child_text(el, "fullName")
    return FileRevision(
        name=name,
        full_name=full_name if full_name is not None else "/" + name,
        revision=revision,
        previous_revision=_child_text(el, "prevrevision"),
        dead=el.find("dead") is not None,
    )


def parse(text: str) -> List[Commit]:
    if "<!DOCTYPE" in text:
        raise ChangeLogFormatError("DOCTYPE declarations are not allowed in change logs")
    try:
        root = ElementTree.fromstring(text)
    except ElementTree.ParseError as exc:
        raise ChangeLogFormatError(f"Invalid XML change log: {exc}") from exc

    commits: List[Commit] = []
    for entry in root.iter("entry"):
        change_date = _child_text(entry, "changeDate")
        message = _child_text(entry, "msg")
        if not change_date or message is None:
            continue  # incomplete entry
        try:
            timestamp = parse_timestamp(change_date.strip())
        except MalformedTimestampError as exc:
            raise ChangeLogFormatError(str(exc)) from exc

        commit = Commit(
            author=_child_text(entry, "author") or "",
            timestamp=timestamp,
            message=message,
            files=[_read_file(f) for f in entry.findall("file")],
        )
        for existing in commits:
            if existing.can_merge_with(commit):
                existing.merge(commit)
                break
        else:
            commits.append(commit)
    return commits


def read(path: Union[str, Path]) -> List[Commit]:
    return parse(Path(path).read_text(encoding="utf-8"))
