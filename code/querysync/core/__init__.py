"""
Sync engine: parameter codec, suppression flags and the two observers.
"""

from .codec import ABSENT, ParameterCodec
from .guard import SuppressionFlag
from .query_sync import QuerySync, make_store_enhancer, sync_query

__all__ = [
    "ABSENT",
    "ParameterCodec",
    "QuerySync",
    "SuppressionFlag",
    "make_store_enhancer",
    "sync_query",
]
