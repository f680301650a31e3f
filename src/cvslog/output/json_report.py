"""JSON change log — the persisted form of a ChangeSet."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, List

from cvslog.rlog.models import ChangedFile, ChangeSet, Commit, FileRevision

SCHEMA_VERSION = "1.0"


class ChangeLogFormatError(Exception):
    """Raised when a persisted change log cannot be read back."""


def file_to_dict(f: FileRevision) -> Dict[str, Any]:
    return {
        "name": f.name,
        "full_name": f.full_name,
        "revision": f.revision,
        **({"prevrevision": f.previous_revision} if f.previous_revision is not None else {}),
        "dead": f.dead,
    }


def commit_to_dict(commit: Commit) -> Dict[str, Any]:
    return {
        "change_date": commit.timestamp.isoformat(),
        "author": commit.author,
        "msg": commit.message,
        "files": [file_to_dict(f) for f in commit.files],
    }


def to_dict(change_set: ChangeSet) -> Dict[str, Any]:
    """Convert a ChangeSet to a JSON-serialisable dict."""
    return {
        "version": SCHEMA_VERSION,
        "total_commits": len(change_set.commits),
        "branch_names": sorted(change_set.branch_names),
        "tag_names": sorted(change_set.tag_names),
        "files": [
            {"full_name": f.full_name, "revision": f.revision, "dead": f.dead}
            for f in change_set.files
        ],
        "entries": [commit_to_dict(c) for c in change_set.commits],
    }


def render(change_set: ChangeSet) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(change_set), indent=2)


def file_from_dict(data: Dict[str, Any]) -> FileRevision:
    return FileRevision(
        name=data["name"],
        full_name=data["full_name"],
        revision=data["revision"],
        previous_revision=data.get("prevrevision"),
        dead=bool(data.get("dead", False)),
    )


def commit_from_dict(data: Dict[str, Any]) -> Commit:
    return Commit(
        author=data["author"],
        timestamp=datetime.fromisoformat(data["change_date"]),
        message=data["msg"],
        files=[file_from_dict(f) for f in data.get("files", [])],
    )


def from_dict(data: Dict[str, Any]) -> ChangeSet:
    """Rebuild a ChangeSet from the dict produced by ``to_dict``.

    Documents without a ``files`` list get their files derived from the
    entries.
    """
    try:
        commits: List[Commit] = [commit_from_dict(e) for e in data.get("entries", [])]
        branch_names = set(data.get("branch_names", []))
        tag_names = set(data.get("tag_names", []))
        if "files" not in data:
            return ChangeSet.from_commits(commits, branch_names, tag_names)
        files = [
            ChangedFile(f["full_name"], f["revision"], bool(f.get("dead", False)))
            for f in data["files"]
        ]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ChangeLogFormatError(f"Malformed change log: {exc}") from exc
    return ChangeSet(files=files, commits=commits, branch_names=branch_names, tag_names=tag_names)


def parse(text: str) -> ChangeSet:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ChangeLogFormatError(f"Invalid JSON change log: {exc}") from exc
    if not isinstance(data, dict):
        raise ChangeLogFormatError("Change log must be a JSON object")
    return from_dict(data)
