"""Tests for the location filter."""

import pytest

from cvslog.changes.location import LocationFilter
from cvslog.rlog.errors import LocationNotFoundError
from cvslog.rlog.models import Location
from cvslog.rlog.revisions import SymbolicNames


@pytest.fixture
def dev_names() -> SymbolicNames:
    names = SymbolicNames()
    names.add("dev", "1.3.0.2")
    names.add("v1_0", "1.2")
    return names


class TestAccepts:
    def test_mainline(self, dev_names):
        f = LocationFilter(Location.head())
        assert f.accepts("1.4", dev_names) is True
        assert f.accepts("1.3.2.1", dev_names) is False

    def test_branch(self, dev_names):
        f = LocationFilter(Location.branch("dev"))
        assert f.accepts("1.3.2.1", dev_names) is True
        assert f.accepts("1.4", dev_names) is False

    def test_tag(self, dev_names):
        f = LocationFilter(Location.tag("v1_0"))
        assert f.accepts("1.1", dev_names) is True
        assert f.accepts("1.2", dev_names) is True
        assert f.accepts("1.3", dev_names) is False

    def test_branch_requested_as_tag(self, dev_names):
        f = LocationFilter(Location.tag("dev"))
        assert f.accepts("1.3.2.1", dev_names) is True

    def test_missing_name_without_fallback(self, dev_names):
        f = LocationFilter(Location.branch("other"))
        assert f.accepts("1.4", dev_names) is False

    def test_missing_name_with_fallback(self, dev_names):
        f = LocationFilter(Location.branch("other", fallback_to_mainline=True))
        assert f.accepts("1.4", dev_names) is True
        assert f.accepts("1.3.2.1", dev_names) is False


class TestEnsureFound:
    def test_mainline_never_raises(self):
        LocationFilter(Location.head()).ensure_found(set(), set())

    def test_registered_name(self):
        LocationFilter(Location.branch("dev")).ensure_found({"dev"}, set())
        LocationFilter(Location.tag("v1_0")).ensure_found(set(), {"v1_0"})

    def test_missing_name_raises(self):
        with pytest.raises(LocationNotFoundError, match="'dev'"):
            LocationFilter(Location.branch("dev")).ensure_found(set(), {"v1_0"})

    def test_fallback_suppresses(self):
        LocationFilter(Location.branch("dev", fallback_to_mainline=True)).ensure_found(set(), set())
