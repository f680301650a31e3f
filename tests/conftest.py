"""Shared test fixtures — sample rlog reports and configs."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import pytest

COMMIT_DIVIDER = "-" * 28
FILE_DIVIDER = "=" * 77

CVS_ROOT = ":pserver:anonymous@cvs.example.org:/cvsroot"


def rlog_revision(
    revision: str,
    date: str,
    author: str,
    message: Sequence[str],
    state: str = "Exp",
    branches: Optional[str] = None,
) -> List[str]:
    """Lines of one revision block, starting with its dashed divider."""
    lines = [
        COMMIT_DIVIDER,
        f"revision {revision}",
        f"date: {date};  author: {author};  state: {state};  lines: +1 -0",
    ]
    if branches:
        lines.append(f"branches:  {branches};")
    lines.extend(message)
    return lines


def rlog_section(
    full_name: str,
    revisions: Iterable[List[str]] = (),
    symbolic: Sequence[Tuple[str, str]] = (),
    locks: Sequence[Tuple[str, str]] = (),
) -> List[str]:
    """Lines of one ``RCS file:`` section, ending with the blank line after ``=====``."""
    revisions = list(revisions)
    lines = [
        f"RCS file: {full_name},v",
        "head: 1.2",
        "branch:",
        "locks: strict" if locks else "locks:",
    ]
    lines.extend(f"\t{user}: {rev}" for user, rev in locks)
    lines.append("access list:")
    lines.append("symbolic names:")
    lines.extend(f"\t{name}: {rev}" for name, rev in symbolic)
    lines.extend([
        "keyword substitution: kv",
        f"total revisions: {len(revisions)};\tselected revisions: {len(revisions)}",
        "description:",
    ])
    for block in revisions:
        lines.extend(block)
    lines.append(FILE_DIVIDER)
    lines.append("")
    return lines


def rlog_report(*sections: List[str], banner: bool = True) -> str:
    lines: List[str] = []
    if banner:
        lines.extend(["cvs rlog: Logging module", ""])
    for section in sections:
        lines.extend(section)
    return "\n".join(lines) + "\n"


@pytest.fixture
def make_revision() -> Callable[..., List[str]]:
    return rlog_revision


@pytest.fixture
def make_section() -> Callable[..., List[str]]:
    return rlog_section


@pytest.fixture
def make_report() -> Callable[..., str]:
    return rlog_report


@pytest.fixture
def single_commit_report() -> str:
    """One file, one commit on the mainline."""
    return rlog_report(
        rlog_section(
            "/cvsroot/module/src/main.c",
            [rlog_revision("1.1", "2012/08/16 10:20:30", "alice", ["initial add"])],
        )
    )


@pytest.fixture
def multi_file_report() -> str:
    """Two files changed together, one of them with an older revision too."""
    return rlog_report(
        rlog_section(
            "/cvsroot/module/src/main.c",
            [
                rlog_revision("1.2", "2012/08/17 12:00:00", "bob", ["fix the build", "on all platforms"]),
                rlog_revision("1.1", "2012/08/16 10:20:30", "alice", ["initial add"]),
            ],
        ),
        rlog_section(
            "/cvsroot/module/src/util.c",
            [rlog_revision("1.4", "2012/08/17 12:00:00", "bob", ["fix the build", "on all platforms"])],
        ),
    )


@pytest.fixture
def branched_report() -> str:
    """A file with a 'dev' branch and a 'v1_0' tag, changed on both lines."""
    return rlog_report(
        rlog_section(
            "/cvsroot/module/src/main.c",
            [
                rlog_revision("1.4", "2012/09/01 08:00:00", "carol", ["mainline work"]),
                rlog_revision("1.3", "2012/08/20 08:00:00", "carol", ["release prep"], branches="1.3.2"),
                rlog_revision("1.3.2.2", "2012/08/25 09:00:00", "dave", ["second branch fix"]),
                rlog_revision("1.3.2.1", "2012/08/22 09:00:00", "dave", ["first branch fix"]),
            ],
            symbolic=[("dev", "1.3.0.2"), ("v1_0", "1.3")],
        ),
        rlog_section(
            "/cvsroot/module/README",
            [rlog_revision("1.2", "2012/09/01 08:00:00", "carol", ["mainline work"])],
        ),
    )


@pytest.fixture
def single_commit_file(tmp_path: Path, single_commit_report: str) -> Path:
    path = tmp_path / "rlog.txt"
    path.write_text(single_commit_report, encoding="utf-8")
    return path


@pytest.fixture
def branched_file(tmp_path: Path, branched_report: str) -> Path:
    path = tmp_path / "branched.txt"
    path.write_text(branched_report, encoding="utf-8")
    return path


@pytest.fixture
def sample_config(tmp_path: Path) -> Path:
    """A .cvslog.toml with every section filled in."""
    config = tmp_path / ".cvslog.toml"
    config.write_text(
        'version = "1.0"\n'
        "[repository]\n"
        f'cvs_root = "{CVS_ROOT}"\n'
        'encoding = "latin-1"\n'
        'excluded_regions = ["/cvsroot/module/doc/.*"]\n'
        "[location]\n"
        'type = "branch"\n'
        'name = "dev"\n'
        "fallback_to_mainline = true\n"
        "[output]\n"
        'format = "json"\n'
        "show_summary = false\n",
        encoding="utf-8",
    )
    return config
