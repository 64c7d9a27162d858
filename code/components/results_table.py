"""Paginated results table using Tabulator."""

import math
from typing import TYPE_CHECKING, List

import pandas as pd
import panel as pn

if TYPE_CHECKING:
    from .state import ExplorerState


def page_count(n_rows: int, page_size: int) -> int:
    """Number of pages needed for ``n_rows`` (at least one, even when empty)."""
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return max(1, math.ceil(n_rows / page_size))


def paginate(df: pd.DataFrame, page: int, page_size: int) -> pd.DataFrame:
    """
    Return the rows of one page.

    Args:
        df: DataFrame to paginate
        page: 1-based page number
        page_size: Rows per page

    Returns:
        Slice of df (empty if the page is out of range)
    """
    if page < 1 or page_size < 1:
        return df.iloc[0:0]
    start = (page - 1) * page_size
    return df.iloc[start : start + page_size]


class ResultsTable:
    """
    Component showing one page of the filtered sessions.

    Binds to the shared ExplorerState, so it re-renders whenever the sync
    engine (or a widget) changes the page, page size, subject filter or sort.
    """

    display_columns: List[str] = ["subject_id", "session_date", "n_trials", "foraging_eff"]

    def __init__(self, state: "ExplorerState"):
        self.state = state

    def create(self) -> pn.viewable.Viewable:
        return pn.bind(
            self._render_table,
            df=self.state.param.df,
            page=self.state.param.page,
            page_size=self.state.param.page_size,
            subjects=self.state.param.subjects,
            sort_by=self.state.param.sort_by,
        )

    def _render_table(self, df, page, page_size, subjects, sort_by) -> pn.viewable.Viewable:
        if df is None or df.empty:
            return pn.pane.Markdown("No data available")

        filtered = self.state.filtered()
        n_pages = page_count(len(filtered), page_size)
        rows = paginate(filtered, page, page_size)
        columns = [c for c in self.display_columns if c in rows.columns]

        return pn.Column(
            pn.pane.Markdown(f"**Page {page} of {n_pages}** ({len(filtered)} sessions)"),
            pn.widgets.Tabulator(
                rows[columns],
                disabled=True,
                show_index=False,
                sizing_mode="stretch_width",
                stylesheets=[":host .tabulator {font-size: 11px;}"],
            ),
            sizing_mode="stretch_width",
        )
