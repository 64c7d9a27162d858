"""
Configuration dataclasses for query-string synchronization.

This module provides typed configuration for each synced URL parameter and
for the sync engine as a whole. Codec defaults are resolved once here, so
the engine never has to check for missing conversion functions.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)

INITIAL_TRUTH_OPTIONS = ("location", "store", None)


def _identity(value: Any) -> Any:
    return value


def _to_list(value: Any) -> list:
    if value is None:
        return []
    return list(value)


@dataclass
class ParamConfig:
    """
    Configuration of a single query parameter kept in sync with the state.

    Attributes:
        selector: Gets the parameter's value from the state
        action: Action creator; given a value, returns an action that sets it in the state
        default_value: Value corresponding to absence of the parameter in the URL
        value_to_string: Casts a value (or one array element) to its URL string.
            Defaults to ``str``. Must accept ``default_value``, which is encoded
            once when the engine is created.
        string_to_value: Inverse of ``value_to_string``. Defaults to identity.
        multiple: Whether the key may repeat in the URL (list-valued parameter)
        value_to_array: For ``multiple``, turns the whole value into a list
            before per-element encoding. Defaults to ``list`` (``None`` gives ``[]``).
        array_to_value: For ``multiple``, turns the list of decoded elements
            into the value. Defaults to identity. A ``multiple`` parameter without
            a default uses ``array_to_value([])``.
    """

    selector: Callable[[Any], Any]
    action: Callable[[Any], Any]
    default_value: Any = None
    value_to_string: Optional[Callable[[Any], str]] = None
    string_to_value: Optional[Callable[[str], Any]] = None
    multiple: bool = False
    value_to_array: Optional[Callable[[Any], list]] = None
    array_to_value: Optional[Callable[[list], Any]] = None

    def __post_init__(self):
        if not callable(self.selector):
            raise TypeError(f"selector must be callable, got {type(self.selector).__name__}")
        if not callable(self.action):
            raise TypeError(f"action must be callable, got {type(self.action).__name__}")

        if self.value_to_string is None:
            self.value_to_string = str
        if self.string_to_value is None:
            self.string_to_value = _identity

        if not self.multiple:
            if self.value_to_array is not None or self.array_to_value is not None:
                logger.warning("value_to_array/array_to_value are ignored without multiple=True")
            return

        if self.value_to_array is None:
            self.value_to_array = _to_list
        if self.array_to_value is None:
            self.array_to_value = _identity
        # An empty selection and an absent key mean the same thing
        if self.default_value is None:
            self.default_value = self.array_to_value([])

    @classmethod
    def from_value(cls, spec: Union["ParamConfig", Mapping[str, Any]]) -> "ParamConfig":
        """
        Build a ParamConfig from either an instance or a plain mapping.

        Args:
            spec: ParamConfig, or dict with the same field names

        Returns:
            ParamConfig instance
        """
        if isinstance(spec, cls):
            return spec
        if isinstance(spec, Mapping):
            return cls(**spec)
        raise TypeError(f"Parameter config must be a ParamConfig or a mapping, got {type(spec).__name__}")


@dataclass
class SyncConfig:
    """
    Configuration of a sync engine instance.

    Attributes:
        params: URL parameter name -> ParamConfig (or an equivalent mapping)
        initial_truth: Whose values to sync to the other initially:
            ``"location"``, ``"store"``, or None for "whichever changes first"
            (not recommended, since the outcome depends on event order)
        replace_state: Update the location with ``replace`` instead of ``push``,
            so state changes do not fill the browser history
    """

    params: Dict[str, ParamConfig] = field(default_factory=dict)
    initial_truth: Optional[str] = None
    replace_state: bool = False

    def __post_init__(self):
        if self.initial_truth not in INITIAL_TRUTH_OPTIONS:
            raise ValueError(
                f"initial_truth must be one of {INITIAL_TRUTH_OPTIONS}, got {self.initial_truth!r}"
            )
        params = {}
        for name, spec in self.params.items():
            if not isinstance(name, str) or not name:
                raise ValueError(f"Parameter names must be non-empty strings, got {name!r}")
            params[name] = ParamConfig.from_value(spec)
        self.params = params
        self.replace_state = bool(self.replace_state)
