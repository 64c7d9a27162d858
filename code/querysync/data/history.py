"""
Navigation providers.

A navigation provider exposes the current ``location``, lets callers
``listen`` for location changes, and navigates with ``push``/``replace``.
``MemoryHistory`` keeps its stack in process; ``PanelLocationHistory``
drives the browser URL of a served Panel session through ``pn.state.location``.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Optional, Sequence, Union
from urllib.parse import urlsplit

import panel as pn

from querysync.utils import normalize_search

logger = logging.getLogger(__name__)

Listener = Callable[["Location"], None]


@dataclass(frozen=True)
class Location:
    """An immutable URL location (without scheme and host)."""

    pathname: str = "/"
    search: str = ""
    hash: str = ""
    state: Any = None

    @classmethod
    def from_path(cls, path: str, state: Any = None) -> "Location":
        """
        Build a Location from a ``/path?query#hash`` string.

        Args:
            path: Relative URL
            state: Optional navigation state attached to the entry

        Returns:
            Location instance
        """
        parts = urlsplit(path)
        return cls(
            pathname=parts.path or "/",
            search=normalize_search(parts.query),
            hash=f"#{parts.fragment}" if parts.fragment else "",
            state=state,
        )

    def with_search(self, search: str) -> "Location":
        """Return a copy of this location with only the query string changed."""
        return replace(self, search=normalize_search(search))

    @property
    def path(self) -> str:
        return f"{self.pathname}{self.search}{self.hash}"


def _as_location(target: Union[Location, str]) -> Location:
    if isinstance(target, Location):
        return replace(target, search=normalize_search(target.search))
    return Location.from_path(target)


class MemoryHistory:
    """
    In-process history stack.

    Listeners are called synchronously with the new location after every
    navigation, in subscription order.
    """

    def __init__(
        self,
        initial_entries: Optional[Sequence[Union[Location, str]]] = None,
        initial_index: Optional[int] = None,
    ):
        entries = [_as_location(entry) for entry in (initial_entries or ["/"])]
        self._entries: List[Location] = entries
        if initial_index is None:
            initial_index = len(entries) - 1
        self._index = max(0, min(initial_index, len(entries) - 1))
        self._listeners: List[Listener] = []

    @property
    def location(self) -> Location:
        return self._entries[self._index]

    @property
    def index(self) -> int:
        return self._index

    @property
    def length(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> List[Location]:
        return list(self._entries)

    def listen(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for location changes.

        Args:
            listener: Called with the new Location

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unlisten() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unlisten

    def _notify(self) -> None:
        location = self.location
        for listener in list(self._listeners):
            listener(location)

    def push(self, target: Union[Location, str]) -> None:
        """Add a new entry after the current one, dropping any forward entries."""
        self._entries = self._entries[: self._index + 1]
        self._entries.append(_as_location(target))
        self._index += 1
        logger.debug(f"push {self.location.path}")
        self._notify()

    def replace(self, target: Union[Location, str]) -> None:
        """Overwrite the current entry."""
        self._entries[self._index] = _as_location(target)
        logger.debug(f"replace {self.location.path}")
        self._notify()

    def go(self, delta: int) -> None:
        """Move ``delta`` entries back (negative) or forward, clamped to the stack."""
        index = max(0, min(self._index + delta, len(self._entries) - 1))
        if index == self._index:
            return
        self._index = index
        self._notify()

    def back(self) -> None:
        self.go(-1)

    def forward(self) -> None:
        self.go(1)


class PanelLocationHistory:
    """
    Navigation provider backed by a Panel ``Location``.

    Panel has no separate replaceState call, so ``push`` and ``replace``
    both update the location parameters; the browser side decides how the
    history entry is recorded. Navigation state is not carried.
    """

    _WATCHED = ["pathname", "search", "hash"]

    def __init__(self, location=None):
        location = location if location is not None else pn.state.location
        if location is None:
            raise RuntimeError("No Panel location available; run inside a served Panel session")
        self._location = location

    @property
    def location(self) -> Location:
        return Location(
            pathname=self._location.pathname or "/",
            search=normalize_search(self._location.search),
            hash=self._location.hash or "",
        )

    def listen(self, listener: Listener) -> Callable[[], None]:
        """
        Watch the Panel location for URL changes.

        Args:
            listener: Called with the new Location

        Returns:
            Function that removes the watcher
        """
        watcher = self._location.param.watch(lambda *events: listener(self.location), self._WATCHED)

        def unlisten() -> None:
            self._location.param.unwatch(watcher)

        return unlisten

    def _navigate(self, target: Union[Location, str]) -> None:
        target = _as_location(target)
        self._location.param.update(
            pathname=target.pathname,
            search=target.search,
            hash=target.hash,
        )

    def push(self, target: Union[Location, str]) -> None:
        self._navigate(target)

    def replace(self, target: Union[Location, str]) -> None:
        self._navigate(target)


def create_default_history() -> PanelLocationHistory:
    """Return a navigation provider bound to the current Panel session's URL."""
    return PanelLocationHistory(pn.state.location)
