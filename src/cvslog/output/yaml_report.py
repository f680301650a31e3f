"""YAML change log — same document shape as the JSON change log."""

from __future__ import annotations

import yaml

from cvslog.output.json_report import ChangeLogFormatError, from_dict, to_dict
from cvslog.rlog.models import ChangeSet


def render(change_set: ChangeSet) -> str:
    return yaml.safe_dump(to_dict(change_set), sort_keys=False, allow_unicode=True)


def parse(text: str) -> ChangeSet:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ChangeLogFormatError(f"Invalid YAML change log: {exc}") from exc
    if not isinstance(data, dict):
        raise ChangeLogFormatError("Change log must be a YAML mapping")
    return from_dict(data)
