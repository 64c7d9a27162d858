"""Query-string utilities."""

from .url_state import normalize_search, parse_search, update_search

__all__ = [
    "normalize_search",
    "parse_search",
    "update_search",
]
