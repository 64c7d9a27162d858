"""
Bidirectional synchronization between a state store and URL query parameters.

This module provides the sync engine:
- A location observer that dispatches actions when watched query values change
- A state observer that rewrites the query string when selected values change
- Suppression flags so neither observer reacts to updates the engine made itself

Only configured keys are ever touched; unrelated query parameters are kept.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Union

from querysync.config import ParamConfig, SyncConfig
from querysync.data.history import Location, create_default_history
from querysync.utils import normalize_search, parse_search, update_search

from .codec import ABSENT, ParameterCodec
from .guard import SuppressionFlag

logger = logging.getLogger(__name__)

_MISSING = object()


class QuerySync:
    """
    Sync engine for one store and one navigation provider.

    Every instance owns its own flags and last-seen values, so several
    engines can coexist as long as they do not share a store or history.

    Usage:
        engine = QuerySync(store, SyncConfig(params, initial_truth="location"))
        unsubscribe = engine.start()
    """

    def __init__(self, store, config: SyncConfig, history=None):
        """
        Initialize the engine. Nothing is subscribed until ``start()``.

        Args:
            store: Object with get_state(), dispatch(action), subscribe(listener)
            config: Parameters and sync options
            history: Navigation provider; defaults to the Panel session's location
        """
        self.store = store
        self.config = config
        self.history = history if history is not None else create_default_history()
        self.codec = ParameterCodec(config.params)

        self._ignore_location_update = SuppressionFlag("location")
        self._ignore_state_update = SuppressionFlag("state")

        # Last seen values of the watched parameters, for comparing what changed
        self._last_values: Optional[Dict[str, Any]] = None

        self._unsubscribe_from_location: Optional[Callable[[], None]] = None
        self._unsubscribe_from_store: Optional[Callable[[], None]] = None

    @property
    def params(self) -> Dict[str, ParamConfig]:
        return self.config.params

    @property
    def is_active(self) -> bool:
        return self._unsubscribe_from_store is not None

    def _update_location(self, location: Location, replace: bool) -> None:
        if replace or self.config.replace_state:
            self.history.replace(location)
        else:
            self.history.push(location)

    def _read_query_values(self, location: Location) -> Dict[str, Any]:
        return self.codec.decode_query(parse_search(location.search))

    def handle_location_update(self, location: Location) -> None:
        """
        Bring the state in line with a new location.

        Dispatches an action for every watched parameter whose URL value
        changed and differs from the state, then writes the resulting state
        back to the URL, since reducers may have rejected or clamped a value.

        Args:
            location: The new location
        """
        # Ignore the event if the location update was induced by ourselves
        if self._ignore_location_update.active:
            return

        state = self.store.get_state()
        query_values = self._read_query_values(location)

        actions_to_dispatch = []
        for name, value in query_values.items():
            # Process the parameter on initialisation and whenever it changed
            last_value = _MISSING if self._last_values is None else self._last_values.get(name, _MISSING)
            if last_value is _MISSING or last_value != value:
                config = self.params[name]
                if config.selector(state) != value:
                    actions_to_dispatch.append(config.action(value))

        self._last_values = query_values

        if actions_to_dispatch:
            logger.debug(f"Dispatching {len(actions_to_dispatch)} action(s) for {location.search!r}")
        with self._ignore_state_update.hold():
            for action in actions_to_dispatch:
                self.store.dispatch(action)

        # The state may not have taken the values as given
        self.handle_state_update(replace=True)

    def handle_state_update(self, replace: bool = False) -> None:
        """
        Bring the URL in line with the current state.

        Args:
            replace: Replace the current history entry even if the engine is
                configured to push
        """
        if self._ignore_state_update.active:
            return

        state = self.store.get_state()
        location = self.history.location

        updates = {}
        last_values = dict(self._last_values or {})
        for name, config in self.params.items():
            value = config.selector(state)
            encoded = self.codec.encode_param(name, value)
            if encoded is ABSENT:
                updates[name] = None
            else:
                updates[name] = encoded if isinstance(encoded, list) else [encoded]
            last_values[name] = value
        self._last_values = last_values

        # Segments of unrelated keys are kept byte-for-byte
        new_search = update_search(location.search, updates)
        if new_search == normalize_search(location.search):
            return

        logger.debug(f"Updating location search {location.search!r} -> {new_search!r}")
        with self._ignore_location_update.hold():
            self._update_location(location.with_search(new_search), replace)

    def start(self) -> Callable[[], None]:
        """
        Subscribe both observers and perform the initial sync.

        Returns:
            Function that stops the synchronization
        """
        if self.is_active:
            raise RuntimeError("QuerySync is already started")

        self._unsubscribe_from_location = self.history.listen(self.handle_location_update)
        self._unsubscribe_from_store = self.store.subscribe(self.handle_state_update)
        logger.info(
            f"Query sync started for {list(self.params)} (initial_truth={self.config.initial_truth})"
        )

        if self.config.initial_truth == "location":
            self.handle_location_update(self.history.location)
        else:
            # Just set the last seen values to later compare what changed
            self._last_values = self._read_query_values(self.history.location)

        if self.config.initial_truth == "store":
            self.handle_state_update(replace=True)

        return self.unsubscribe

    def unsubscribe(self) -> None:
        """Stop reacting to location and state changes. Safe to call twice."""
        if self._unsubscribe_from_location is not None:
            self._unsubscribe_from_location()
            self._unsubscribe_from_location = None
        if self._unsubscribe_from_store is not None:
            self._unsubscribe_from_store()
            self._unsubscribe_from_store = None
            logger.info("Query sync stopped")


def sync_query(
    store,
    params: Mapping[str, Union[ParamConfig, Mapping[str, Any]]],
    initial_truth: Optional[str] = None,
    replace_state: bool = False,
    history=None,
) -> Callable[[], None]:
    """
    Set up bidirectional synchronization between a store and the URL query.

    Args:
        store: Object with get_state(), dispatch(action), subscribe(listener)
        params: URL parameter name -> ParamConfig or dict of its fields
        initial_truth: ``"location"``, ``"store"`` or None; see SyncConfig
        replace_state: Use ``replace`` instead of ``push`` for state changes
        history: Navigation provider; defaults to the Panel session's location

    Returns:
        Function that stops the synchronization
    """
    config = SyncConfig(params=dict(params), initial_truth=initial_truth, replace_state=replace_state)
    return QuerySync(store, config, history=history).start()


def make_store_enhancer(
    params: Mapping[str, Union[ParamConfig, Mapping[str, Any]]],
    initial_truth: Optional[str] = None,
    replace_state: bool = False,
    history=None,
) -> Callable:
    """
    Build a store enhancer that sets up the sync when the store is created.

    Usage:
        enhancer = make_store_enhancer(params, initial_truth="location")
        store = create_store(reducer, initial_state, enhancer)

    Arguments are those of ``sync_query`` without ``store``.
    """

    def enhancer(store_creator: Callable) -> Callable:
        def create(reducer, initial_state=None, enhancer=None):
            store = store_creator(reducer, initial_state, enhancer)
            sync_query(
                store,
                params,
                initial_truth=initial_truth,
                replace_state=replace_state,
                history=history,
            )
            return store

        return create

    return enhancer
