"""
Reactive state of the explorer app and its URL parameters.

The state lives on a param.Parameterized holder; widgets edit it directly and
the query-sync engine reads and writes it through a ParameterizedStore.
"""

import logging
from typing import Any, Callable, Dict, List

import pandas as pd
import param

from querysync import ParamConfig

from .results_table import page_count

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
DEFAULT_SORT = "session_date"

# ExplorerState parameters the URL reflects
SYNCED_NAMES: List[str] = ["page", "page_size", "subjects", "sort_by"]


class ExplorerState(param.Parameterized):
    """
    Centralized holder for the explorer's view state.

    The page is kept within the available range whenever paging or the
    subject filter changes.

    Attributes:
        df: Full sessions table
        page: Current page (1-based)
        page_size: Rows per page
        subjects: Subject IDs to show (empty list = all)
        sort_by: Column to sort by
    """

    df = param.DataFrame(default=pd.DataFrame(), doc="Full sessions table")
    page = param.Integer(default=1, doc="Current page (1-based)")
    page_size = param.Integer(default=DEFAULT_PAGE_SIZE, doc="Rows per page")
    subjects = param.List(default=[], doc="Subject IDs to show (empty = all)")
    sort_by = param.String(default=DEFAULT_SORT, doc="Column to sort by")

    def __init__(self, **params):
        super().__init__(**params)
        self.param.watch(self._clamp_page, ["page", "page_size", "subjects", "df"])

    def filtered(self) -> pd.DataFrame:
        """Return the sessions matching the subject filter, sorted."""
        df = self.df
        if df is None or df.empty:
            return pd.DataFrame()
        if self.subjects and "subject_id" in df.columns:
            df = df[df["subject_id"].astype(str).isin(self.subjects)]
        if self.sort_by in df.columns:
            df = df.sort_values(self.sort_by, kind="stable")
        return df

    def _clamp_page(self, *events) -> None:
        if self.page_size < 1:
            self.page_size = DEFAULT_PAGE_SIZE
            return
        n_pages = page_count(len(self.filtered()), self.page_size)
        clamped = min(max(self.page, 1), n_pages)
        if clamped != self.page:
            logger.info(f"Page {self.page} out of range, showing page {clamped} of {n_pages}")
            self.page = clamped


def _parse_int(default: int) -> Callable[[str], int]:
    def parse(value: str) -> int:
        try:
            return int(value)
        except ValueError:
            return default

    return parse


def _set(name: str) -> Callable[[Any], Dict[str, Any]]:
    return lambda value: {name: value}


def explorer_params() -> Dict[str, ParamConfig]:
    """URL parameters of the explorer, keyed by query-string name."""
    return {
        "page": ParamConfig(
            selector=lambda state: state["page"],
            action=_set("page"),
            default_value=1,
            string_to_value=_parse_int(1),
        ),
        "size": ParamConfig(
            selector=lambda state: state["page_size"],
            action=_set("page_size"),
            default_value=DEFAULT_PAGE_SIZE,
            string_to_value=_parse_int(DEFAULT_PAGE_SIZE),
        ),
        "subject": ParamConfig(
            selector=lambda state: state["subjects"],
            action=_set("subjects"),
            multiple=True,
        ),
        "sort": ParamConfig(
            selector=lambda state: state["sort_by"],
            action=_set("sort_by"),
            default_value=DEFAULT_SORT,
        ),
    }
