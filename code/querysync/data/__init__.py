"""
State containers and navigation providers the sync engine connects.
"""

from .history import (
    Location,
    MemoryHistory,
    PanelLocationHistory,
    create_default_history,
)
from .store import INIT_ACTION_TYPE, ParameterizedStore, Store, create_store

__all__ = [
    "INIT_ACTION_TYPE",
    "Location",
    "MemoryHistory",
    "PanelLocationHistory",
    "ParameterizedStore",
    "Store",
    "create_default_history",
    "create_store",
]
