"""
Keep application state and URL query parameters in sync, in both directions.

Usage:
    from querysync import sync_query

    unsubscribe = sync_query(
        store,
        params={
            "p": {
                "selector": lambda state: state["page"],
                "action": lambda value: {"type": "SET_PAGE", "payload": value},
                "default_value": 1,
                "string_to_value": int,
            },
        },
        initial_truth="location",
    )
"""

from .config import ParamConfig, SyncConfig
from .core import ABSENT, ParameterCodec, QuerySync, make_store_enhancer, sync_query
from .data import (
    Location,
    MemoryHistory,
    PanelLocationHistory,
    ParameterizedStore,
    Store,
    create_store,
)

__version__ = "0.1.0"

__all__ = [
    "ABSENT",
    "Location",
    "MemoryHistory",
    "PanelLocationHistory",
    "ParamConfig",
    "ParameterCodec",
    "ParameterizedStore",
    "QuerySync",
    "Store",
    "SyncConfig",
    "create_store",
    "make_store_enhancer",
    "sync_query",
]
