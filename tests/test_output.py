"""Tests for output reporters and persisted change logs."""

import json
from datetime import datetime, timezone

import pytest
from rich.console import Console

from cvslog import parse_rlog
from cvslog.output import json_report, terminal, xml_changelog, yaml_report
from cvslog.output.json_report import ChangeLogFormatError
from cvslog.rlog.models import ChangeSet, Commit, FileRevision, Location

from conftest import CVS_ROOT


def _make_change_set() -> ChangeSet:
    ts = datetime(2012, 8, 16, 10, 20, 30, tzinfo=timezone.utc)
    commit = Commit(
        author="alice",
        timestamp=ts,
        message="fix <things> & stuff\nsecond line",
        files=[
            FileRevision("mod/a.c", "/cvsroot/mod/a.c", "1.2", previous_revision="1.1"),
            FileRevision("mod/b.c", "/cvsroot/mod/b.c", "1.1"),
            FileRevision("mod/c.c", "/cvsroot/mod/Attic/c.c", "1.4", "1.3", dead=True),
        ],
    )
    return ChangeSet.from_commits([commit], {"dev"}, {"v1_0"})


class TestJsonReport:
    def test_valid_json(self):
        data = json.loads(json_report.render(_make_change_set()))
        assert data["version"] == "1.0"
        assert data["total_commits"] == 1
        assert data["branch_names"] == ["dev"]
        assert data["tag_names"] == ["v1_0"]
        entry = data["entries"][0]
        assert entry["author"] == "alice"
        assert entry["files"][0]["prevrevision"] == "1.1"
        assert "prevrevision" not in entry["files"][1]
        assert entry["files"][2]["dead"] is True

    def test_round_trip(self):
        change_set = _make_change_set()
        assert json_report.parse(json_report.render(change_set)) == change_set

    def test_parsed_report_round_trip(self, branched_report):
        change_set = parse_rlog(branched_report, Location.branch("dev"), CVS_ROOT)
        assert json_report.parse(json_report.render(change_set)) == change_set

    def test_files_derived_when_missing(self):
        data = json_report.to_dict(_make_change_set())
        del data["files"]
        assert json_report.from_dict(data) == _make_change_set()

    def test_invalid_json(self):
        with pytest.raises(ChangeLogFormatError):
            json_report.parse("{not json")

    def test_missing_fields(self):
        with pytest.raises(ChangeLogFormatError):
            json_report.parse('{"entries": [{"author": "x"}]}')

    def test_not_an_object(self):
        with pytest.raises(ChangeLogFormatError):
            json_report.parse("[]")


class TestYamlReport:
    def test_round_trip(self):
        change_set = _make_change_set()
        assert yaml_report.parse(yaml_report.render(change_set)) == change_set

    def test_revisions_stay_strings(self):
        text = yaml_report.render(_make_change_set())
        change_set = yaml_report.parse(text)
        assert change_set.commits[0].files[0].revision == "1.2"

    def test_invalid_yaml(self):
        with pytest.raises(ChangeLogFormatError):
            yaml_report.parse("entries: [unclosed")

    def test_not_a_mapping(self):
        with pytest.raises(ChangeLogFormatError):
            yaml_report.parse("- a\n- b\n")


class TestXmlChangeLog:
    def test_layout(self):
        text = xml_changelog.render(_make_change_set().commits)
        assert text.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert "<changeDate>2012-08-16 10:20:30</changeDate>" in text
        assert "<prevrevision>1.1</prevrevision>" in text
        assert "<dead />" in text
        assert "&lt;things&gt; &amp; stuff" in text

    def test_round_trip(self):
        commits = _make_change_set().commits
        assert xml_changelog.parse(xml_changelog.render(commits)) == commits

    def test_file_round_trip(self, tmp_path):
        commits = _make_change_set().commits
        path = tmp_path / "changelog.xml"
        xml_changelog.write(commits, path)
        assert xml_changelog.read(path) == commits

    def test_dates_written_in_utc(self):
        ts = datetime.fromisoformat("2012-08-16T12:20:30+02:00")
        text = xml_changelog.render([Commit("alice", ts, "m")])
        assert "<changeDate>2012-08-16 10:20:30</changeDate>" in text

    def test_duplicate_entries_merged(self):
        text = (
            "<changelog>"
            "<entry><changeDate>2012-08-16 10:20:30</changeDate><author>a</author>"
            "<file><name>x.c</name><revision>1.2</revision></file><msg>m</msg></entry>"
            "<entry><changeDate>2012-08-16 10:20:30</changeDate><author>a</author>"
            "<file><name>y.c</name><revision>1.3</revision></file><msg>m</msg></entry>"
            "</changelog>"
        )
        commits = xml_changelog.parse(text)
        assert len(commits) == 1
        assert [f.name for f in commits[0].files] == ["x.c", "y.c"]

    def test_incomplete_entries_dropped(self):
        text = (
            "<changelog>"
            "<entry><author>a</author><msg>no date</msg></entry>"
            "<entry><changeDate>2012-08-16 10:20:30</changeDate><author>a</author></entry>"
            "</changelog>"
        )
        assert xml_changelog.parse(text) == []

    def test_doctype_rejected(self):
        with pytest.raises(ChangeLogFormatError):
            xml_changelog.parse('<!DOCTYPE x [<!ENTITY e "boom">]><changelog/>')

    def test_bad_date(self):
        with pytest.raises(ChangeLogFormatError):
            xml_changelog.parse(
                "<changelog><entry><changeDate>someday</changeDate><msg>m</msg></entry></changelog>"
            )

    def test_malformed_xml(self):
        with pytest.raises(ChangeLogFormatError):
            xml_changelog.parse("<changelog><entry>")


class TestTerminal:
    def _render(self, change_set: ChangeSet, **kwargs) -> str:
        console = Console(record=True, width=160)
        terminal.render(change_set, console=console, **kwargs)
        return console.export_text()

    def test_table(self):
        out = self._render(_make_change_set())
        assert "CVS Changes" in out
        assert "alice" in out
        assert "M mod/a.c 1.2" in out
        assert "A mod/b.c 1.1" in out
        assert "D mod/c.c 1.4" in out

    def test_summary(self):
        out = self._render(_make_change_set())
        assert "Commits:" in out
        assert "Deleted:" in out

    def test_no_summary(self):
        out = self._render(_make_change_set(), show_summary=False)
        assert "Commits:" not in out

    def test_empty(self):
        out = self._render(ChangeSet())
        assert "No changes found." in out
