"""
Configuration package for query-string synchronization.

Submodules:
    - models: Configuration dataclasses (ParamConfig, SyncConfig)
"""

from .models import INITIAL_TRUTH_OPTIONS, ParamConfig, SyncConfig

__all__ = [
    "INITIAL_TRUTH_OPTIONS",
    "ParamConfig",
    "SyncConfig",
]
