"""Reusable components of the query-sync explorer app."""

from .results_table import ResultsTable, page_count, paginate
from .state import SYNCED_NAMES, ExplorerState, explorer_params

__all__ = [
    "ExplorerState",
    "ResultsTable",
    "SYNCED_NAMES",
    "explorer_params",
    "page_count",
    "paginate",
]
