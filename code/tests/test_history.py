"""
Tests for the navigation providers.

Run with:
    pytest code/tests/test_history.py -v
"""

import sys
from pathlib import Path

# Add code directory to path for imports
code_dir = Path(__file__).parent.parent
sys.path.insert(0, str(code_dir))

import panel as pn
import pytest
from panel.io.location import Location as PanelLocation

from querysync import sync_query
from querysync.data import (
    Location,
    MemoryHistory,
    PanelLocationHistory,
    ParameterizedStore,
    create_default_history,
)


class TestLocation:
    def test_from_path(self):
        location = Location.from_path("/sessions?p=2#top", state={"k": 1})

        assert location == Location(pathname="/sessions", search="?p=2", hash="#top", state={"k": 1})

    def test_from_path_without_parts(self):
        assert Location.from_path("") == Location()
        assert Location.from_path("/x?") == Location(pathname="/x")

    def test_with_search_changes_only_query(self):
        location = Location(pathname="/a", search="?x=1", hash="#h", state=3)

        updated = location.with_search("y=2")

        assert updated == Location(pathname="/a", search="?y=2", hash="#h", state=3)

    def test_path(self):
        assert Location(pathname="/a", search="?x=1", hash="#h").path == "/a?x=1#h"


class TestMemoryHistory:
    def test_default_entry(self):
        history = MemoryHistory()

        assert history.location == Location()
        assert history.length == 1

    def test_initial_index(self):
        history = MemoryHistory(["/a", "/b", "/c"], initial_index=1)

        assert history.location.pathname == "/b"

    def test_push_notifies_with_new_location(self):
        history = MemoryHistory()
        seen = []
        history.listen(seen.append)

        history.push("/a?x=1")

        assert seen == [Location(pathname="/a", search="?x=1")]
        assert history.length == 2

    def test_push_drops_forward_entries(self):
        history = MemoryHistory(["/a", "/b", "/c"])
        history.back()
        history.back()

        history.push("/d")

        assert [entry.pathname for entry in history.entries] == ["/a", "/d"]

    def test_replace_keeps_length(self):
        history = MemoryHistory(["/a"])
        seen = []
        history.listen(seen.append)

        history.replace(Location(pathname="/b"))

        assert history.length == 1
        assert history.location.pathname == "/b"
        assert len(seen) == 1

    def test_go_clamps_and_skips_noop(self):
        history = MemoryHistory(["/a", "/b"])
        seen = []
        history.listen(seen.append)

        history.forward()
        history.go(-5)

        assert history.index == 0
        assert [location.pathname for location in seen] == ["/a"]

    def test_unlisten(self):
        history = MemoryHistory()
        seen = []
        unlisten = history.listen(seen.append)

        unlisten()
        unlisten()
        history.push("/a")

        assert seen == []

    def test_listener_removed_during_notify(self):
        history = MemoryHistory()
        seen = []
        unlisten_first = None

        def first(location):
            seen.append("first")
            unlisten_first()

        unlisten_first = history.listen(first)
        history.listen(lambda location: seen.append("second"))

        history.push("/a")
        history.push("/b")

        assert seen == ["first", "second", "second"]


class TestPanelLocationHistory:
    def test_reads_panel_location(self):
        history = PanelLocationHistory(PanelLocation(pathname="/app", search="?p=2", hash="#t"))

        assert history.location == Location(pathname="/app", search="?p=2", hash="#t")

    def test_push_updates_panel_location(self):
        panel_location = PanelLocation(pathname="/app", search="")
        history = PanelLocationHistory(panel_location)

        history.push(Location(pathname="/app", search="?p=3"))

        assert panel_location.search == "?p=3"
        assert panel_location.pathname == "/app"

    def test_listen_on_search_change(self):
        panel_location = PanelLocation(pathname="/app", search="")
        history = PanelLocationHistory(panel_location)
        seen = []
        unlisten = history.listen(seen.append)

        panel_location.search = "?p=4"
        unlisten()
        panel_location.search = "?p=5"

        assert seen == [Location(pathname="/app", search="?p=4")]

    def test_requires_location(self, monkeypatch):
        monkeypatch.setattr(type(pn.state), "location", property(lambda self: None))

        with pytest.raises(RuntimeError):
            create_default_history()

    def test_default_history_uses_session_location(self, monkeypatch):
        panel_location = PanelLocation(pathname="/app", search="?p=1")
        monkeypatch.setattr(type(pn.state), "location", property(lambda self: panel_location))

        assert create_default_history().location.search == "?p=1"

    def test_sync_with_panel_location(self):
        """The engine drives a Panel location in both directions."""
        import param

        class ViewState(param.Parameterized):
            page = param.Integer(default=1)

        state = ViewState()
        panel_location = PanelLocation(pathname="/app", search="?page=3&theme=dark")
        sync_query(
            ParameterizedStore(state),
            {"page": {"selector": lambda s: s["page"], "action": lambda v: {"page": v}, "default_value": 1, "string_to_value": int}},
            initial_truth="location",
            history=PanelLocationHistory(panel_location),
        )
        assert state.page == 3

        state.page = 1
        assert panel_location.search == "?theme=dark"

        panel_location.search = "?page=8&theme=dark"
        assert state.page == 8
