"""
Tests for the explorer components and their URL parameters.

Run with:
    pytest code/tests/test_explorer.py -v
"""

import sys
from pathlib import Path

# Add code directory to path for imports
code_dir = Path(__file__).parent.parent
sys.path.insert(0, str(code_dir))

import pandas as pd
import pytest

from components import (
    SYNCED_NAMES,
    ExplorerState,
    ResultsTable,
    explorer_params,
    page_count,
    paginate,
)
from querysync import MemoryHistory, ParameterizedStore, sync_query
import run_capsule


def make_sessions(n_rows: int = 45) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "subject_id": [["A", "B", "C"][i % 3] for i in range(n_rows)],
            "session_date": pd.date_range("2024-01-01", periods=n_rows, freq="D")[::-1],
            "n_trials": list(range(n_rows)),
        }
    )


def start(path: str, state: ExplorerState = None):
    state = state or ExplorerState(df=make_sessions())
    history = MemoryHistory([path])
    unsubscribe = sync_query(
        ParameterizedStore(state, SYNCED_NAMES),
        explorer_params(),
        initial_truth="location",
        history=history,
    )
    return state, history, unsubscribe


class TestPagination:
    @pytest.mark.parametrize(
        "n_rows, page_size, expected",
        [(0, 20, 1), (1, 20, 1), (40, 20, 2), (41, 20, 3)],
    )
    def test_page_count(self, n_rows, page_size, expected):
        assert page_count(n_rows, page_size) == expected

    def test_page_count_rejects_zero_size(self):
        with pytest.raises(ValueError):
            page_count(10, 0)

    def test_paginate(self):
        df = make_sessions(45)

        assert paginate(df, 1, 20)["n_trials"].tolist() == list(range(20))
        assert paginate(df, 3, 20)["n_trials"].tolist() == list(range(40, 45))
        assert paginate(df, 4, 20).empty
        assert paginate(df, 0, 20).empty


class TestExplorerState:
    def test_filtered_by_subject_and_sorted(self):
        state = ExplorerState(df=make_sessions(9), subjects=["B"], sort_by="n_trials")

        assert state.filtered()["n_trials"].tolist() == [1, 4, 7]

    def test_page_clamped_to_range(self):
        state = ExplorerState(df=make_sessions(45))

        state.page = 9
        assert state.page == 3

        state.page = 0
        assert state.page == 1

    def test_filter_change_clamps_page(self):
        state = ExplorerState(df=make_sessions(45))
        state.page = 3

        state.subjects = ["A"]

        assert state.page == 1

    def test_invalid_page_size_reset(self):
        state = ExplorerState(df=make_sessions(45))

        state.page_size = 0

        assert state.page_size == 20


class TestExplorerSync:
    def test_location_applied_to_state(self):
        state, history, _ = start("/?page=2&size=10&subject=A&subject=C&sort=n_trials")

        assert state.page == 2
        assert state.page_size == 10
        assert state.subjects == ["A", "C"]
        assert state.sort_by == "n_trials"

    def test_out_of_range_page_normalized_in_url(self):
        state, history, _ = start("/?page=9")

        assert state.page == 3
        assert history.location.search == "?page=3"
        assert history.length == 1

    def test_unparseable_page_falls_back_to_default(self):
        state, history, _ = start("/?page=abc&tab=2")

        assert state.page == 1
        assert history.location.search == "?tab=2"

    def test_state_changes_written_to_url(self):
        state, history, _ = start("/")

        state.subjects = ["B"]
        state.sort_by = "n_trials"

        assert history.location.search == "?subject=B&sort=n_trials"

    def test_teardown(self):
        state, history, unsubscribe = start("/")

        unsubscribe()
        state.page = 2

        assert history.location.search == ""


class TestResultsTable:
    def test_render_shows_current_page(self):
        state = ExplorerState(df=make_sessions(45))
        state.page = 3
        table = ResultsTable(state)

        layout = table._render_table(state.df, state.page, state.page_size, state.subjects, state.sort_by)

        assert "Page 3 of 3" in layout[0].object
        assert len(layout[1].value) == 5

    def test_render_without_data(self):
        state = ExplorerState()
        table = ResultsTable(state)

        pane = table._render_table(state.df, 1, 20, [], "session_date")

        assert pane.object == "No data available"


class TestRunCapsule:
    def test_default_command(self):
        cmd = run_capsule.build_command()

        assert cmd[1:4] == ["-m", "panel", "serve"]
        assert cmd[4].endswith("app.py")
        assert cmd[cmd.index("--port") + 1] == "7860"
        assert "--dev" not in cmd

    def test_dev_and_show_flags(self):
        cmd = run_capsule.build_command(port=5006, dev=True, show=True)

        assert cmd[cmd.index("--port") + 1] == "5006"
        assert cmd[-2:] == ["--dev", "--show"]

    def test_run_passes_options(self, monkeypatch):
        calls = []

        class Completed:
            returncode = 0

        def fake_run(cmd):
            calls.append(cmd)
            return Completed()

        monkeypatch.setattr(run_capsule.subprocess, "run", fake_run)

        assert run_capsule.run(["--port", "8000", "--dev"]) == 0
        assert calls[0][calls[0].index("--port") + 1] == "8000"
        assert "--dev" in calls[0]
