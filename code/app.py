"""
Query Sync Explorer

A Panel app demonstrating two-way sync between app state and the URL query:
paging, page size, subject filter and sort order all live in the query
string, so views can be bookmarked and navigated with back/forward.

To run:
    panel serve code/app.py --dev --show
"""

import logging

import numpy as np
import pandas as pd
import panel as pn

from components import SYNCED_NAMES, ExplorerState, ResultsTable, explorer_params
from querysync import ParameterizedStore, sync_query

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

pn.extension("tabulator")


def load_sample_sessions(n_sessions: int = 237, seed: int = 0) -> pd.DataFrame:
    """
    Generate a sessions table for the demo.

    Args:
        n_sessions: Number of rows
        seed: Random seed, so URLs keep pointing at the same rows

    Returns:
        DataFrame with subject_id, session_date, n_trials and foraging_eff columns
    """
    rng = np.random.default_rng(seed)
    subjects = [str(s) for s in (730945, 752014, 778869, 781162, 790023)]
    return pd.DataFrame(
        {
            "subject_id": rng.choice(subjects, size=n_sessions),
            "session_date": pd.Timestamp("2024-10-01")
            + pd.to_timedelta(rng.integers(0, 365, size=n_sessions), unit="D"),
            "n_trials": rng.integers(50, 700, size=n_sessions),
            "foraging_eff": rng.uniform(0.4, 1.0, size=n_sessions).round(3),
        }
    )


class QuerySyncExplorerApp:
    """Explorer whose view state is mirrored in the URL query string."""

    def __init__(self, df: pd.DataFrame):
        self.state = ExplorerState(df=df)
        self.results_table = ResultsTable(self.state)
        self._unsubscribe = None

    def create_controls(self) -> pn.Column:
        """Create the sidebar controls bound to the shared state."""
        subject_options = sorted(self.state.df["subject_id"].astype(str).unique())
        return pn.Column(
            pn.widgets.IntInput.from_param(self.state.param.page, name="Page", start=1),
            pn.widgets.Select.from_param(
                self.state.param.page_size, name="Rows per page", options=[10, 20, 50, 100]
            ),
            pn.widgets.MultiChoice.from_param(
                self.state.param.subjects, name="Subjects", options=subject_options
            ),
            pn.widgets.Select.from_param(
                self.state.param.sort_by,
                name="Sort by",
                options=["session_date", "subject_id", "n_trials", "foraging_eff"],
            ),
            sizing_mode="stretch_width",
        )

    def start_sync(self) -> None:
        """Wire the state to the URL, taking the URL as the initial truth."""
        self._unsubscribe = sync_query(
            ParameterizedStore(self.state, SYNCED_NAMES),
            explorer_params(),
            initial_truth="location",
        )
        pn.state.on_session_destroyed(lambda session_context: self._unsubscribe())

    def main_layout(self) -> pn.template.BootstrapTemplate:
        """Construct the full application layout."""
        template = pn.template.BootstrapTemplate(
            title="Query Sync Explorer",
            header_background="#0072B5",
            main=[self.results_table.create()],
            sidebar=[self.create_controls()],
        )
        if pn.state.location is not None:
            self.start_sync()
        else:
            logger.warning("No Panel location available; URL sync disabled")
        return template


# =============================================================================
# App Initialization
# =============================================================================

app = QuerySyncExplorerApp(load_sample_sessions())
app.main_layout().servable()
