"""Query-string helpers for URL state sync.

Parsing is deliberately lenient: malformed pairs are dropped by
``parse_qs`` rather than rejected. Rewriting works on the raw ``&``
segments, so parameters that are not being updated keep their exact
spelling, including percent-escapes that do not decode cleanly.
"""

from typing import Dict, List, Mapping, Optional, Sequence
from urllib.parse import parse_qs, unquote_plus, urlencode


def parse_search(search: Optional[str]) -> Dict[str, List[str]]:
    """Parse a location search string into ordered key -> values.

    Args:
        search: Search string, with or without the leading ``?``

    Returns:
        Dict mapping each key to all of its values, in order of first appearance
    """
    query_string = search or ""
    if query_string.startswith("?"):
        query_string = query_string[1:]
    return parse_qs(query_string, keep_blank_values=True)


def normalize_search(search: Optional[str]) -> str:
    """Return the canonical form of a search string for comparisons."""
    if not search or search == "?":
        return ""
    return search if search.startswith("?") else f"?{search}"


def _segment_key(segment: str) -> str:
    return unquote_plus(segment.split("=", 1)[0])


def update_search(search: Optional[str], updates: Mapping[str, Optional[Sequence[str]]]) -> str:
    """Replace or remove the given keys, leaving every other segment untouched.

    A key that is already present keeps the position of its first occurrence;
    a new key is appended at the end. A key whose values would not change is
    left as it is written.

    Args:
        search: Current search string
        updates: Key -> new values, or None to remove the key

    Returns:
        ``"?..."`` search string, or ``""`` if nothing remains
    """
    query_string = normalize_search(search)[1:]
    segments = query_string.split("&") if query_string else []

    # Keys whose decoded values already match keep their current spelling
    current = parse_search(query_string)
    updates = {
        key: values
        for key, values in updates.items()
        if current.get(key, []) != list(values or [])
    }

    result = []
    written = set()
    for segment in segments:
        key = _segment_key(segment)
        if key not in updates:
            result.append(segment)
            continue
        if key in written:
            continue
        written.add(key)
        values = updates[key]
        if values:
            result.append(urlencode([(key, value) for value in values]))

    for key, values in updates.items():
        if key not in written and values:
            result.append(urlencode([(key, value) for value in values]))

    encoded = "&".join(result)
    return f"?{encoded}" if encoded else ""
