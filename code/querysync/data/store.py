"""
State containers.

Any object with ``get_state()``, ``dispatch(action)`` and
``subscribe(listener) -> unsubscribe`` can be synced. Two are provided:
a reducer-based ``Store`` and ``ParameterizedStore``, which exposes a
``param.Parameterized`` state holder through the same interface.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import param

INIT_ACTION_TYPE = "@@querysync/INIT"

Reducer = Callable[[Any, Any], Any]
Listener = Callable[[], None]


class Store:
    """
    Minimal reducer store.

    ``dispatch`` computes the next state with the reducer, then calls every
    subscribed listener synchronously.
    """

    def __init__(self, reducer: Reducer, initial_state: Any = None):
        if not callable(reducer):
            raise TypeError(f"reducer must be callable, got {type(reducer).__name__}")
        self._reducer = reducer
        self._state = initial_state
        self._listeners: List[Listener] = []
        self._dispatching = False
        self.dispatch({"type": INIT_ACTION_TYPE})

    def get_state(self) -> Any:
        return self._state

    def dispatch(self, action: Any) -> Any:
        """
        Apply an action to the state and notify subscribers.

        Args:
            action: Action passed to the reducer

        Returns:
            The dispatched action
        """
        if self._dispatching:
            raise RuntimeError("Reducers may not dispatch actions")
        self._dispatching = True
        try:
            self._state = self._reducer(self._state, action)
        finally:
            self._dispatching = False

        for listener in list(self._listeners):
            listener()
        return action

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a change listener.

        Args:
            listener: Called with no arguments after every dispatch

        Returns:
            Function that removes the listener
        """
        if not callable(listener):
            raise TypeError("listener must be callable")
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


def create_store(reducer: Reducer, initial_state: Any = None, enhancer: Optional[Callable] = None):
    """
    Create a Store, optionally through a store enhancer.

    Args:
        reducer: ``(state, action) -> new state``
        initial_state: Preloaded state
        enhancer: ``enhancer(store_creator) -> store_creator``

    Returns:
        The created store
    """
    if enhancer is not None:
        return enhancer(create_store)(reducer, initial_state)
    return Store(reducer, initial_state)


class ParameterizedStore:
    """
    Store interface over a ``param.Parameterized`` state holder.

    The state is a dict snapshot of the watched parameters; an action is a
    mapping of parameter updates, applied in one batch so that subscribers
    are notified once per dispatch.
    """

    def __init__(self, obj: param.Parameterized, names: Optional[Sequence[str]] = None):
        self.obj = obj
        if names is None:
            names = [name for name in obj.param.values() if name != "name"]
        self.names = list(names)

    def get_state(self) -> Dict[str, Any]:
        return {name: getattr(self.obj, name) for name in self.names}

    def dispatch(self, action: Mapping[str, Any]) -> Mapping[str, Any]:
        unknown = set(action) - set(self.names)
        if unknown:
            raise KeyError(f"Action updates unknown parameters: {sorted(unknown)}")
        self.obj.param.update(**action)
        return action

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        watcher = self.obj.param.watch(lambda *events: listener(), self.names)

        def unsubscribe() -> None:
            self.obj.param.unwatch(watcher)

        return unsubscribe
