"""
Per-parameter conversion between URL strings and native state values.

Whether a value counts as "default" is decided on its encoded form, not by
native equality: floats or objects without a meaningful ``__eq__`` can
differ natively yet map to the same URL string.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from querysync.config import ParamConfig


class _Absent:
    """Marker for "remove this key from the query string"."""

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()

Encoded = Union[str, List[str], _Absent]


class ParameterCodec:
    """
    Encodes and decodes every configured parameter.

    The encoded form of each parameter's default value is computed once at
    construction and reused for the "equals default" check.
    """

    def __init__(self, params: Mapping[str, ParamConfig]):
        self.params = dict(params)
        self._encoded_defaults: Dict[str, Union[str, List[str]]] = {}
        for name, config in self.params.items():
            try:
                self._encoded_defaults[name] = self._encode(config, config.default_value)
            except (TypeError, ValueError) as e:
                raise ValueError(
                    f"Cannot encode default_value {config.default_value!r} of parameter '{name}': {e}"
                ) from e

    @staticmethod
    def _encode(config: ParamConfig, value: Any) -> Union[str, List[str]]:
        if config.multiple:
            return [config.value_to_string(item) for item in config.value_to_array(value)]
        return config.value_to_string(value)

    def decode_param(self, name: str, raw: Optional[Union[str, Sequence[str]]]) -> Any:
        """
        Convert the raw URL value(s) of a parameter to its native value.

        Args:
            name: Parameter name
            raw: None if the key is absent, else a string or list of strings

        Returns:
            Native value (the default value when the key is absent)
        """
        config = self.params[name]
        if raw is None:
            return config.default_value

        strings = [raw] if isinstance(raw, str) else list(raw)
        if config.multiple:
            return config.array_to_value([config.string_to_value(s) for s in strings])
        if not strings:
            return config.default_value
        # Like URLSearchParams.get(), a repeated single-valued key uses its first value
        return config.string_to_value(strings[0])

    def encode_param(self, name: str, value: Any) -> Encoded:
        """
        Convert a native value to its URL string(s).

        Args:
            name: Parameter name
            value: Native value taken from the state

        Returns:
            String (or list of strings for multiple parameters), or ABSENT if
            the value encodes the same as the default value
        """
        encoded = self._encode(self.params[name], value)
        if encoded == self._encoded_defaults[name]:
            return ABSENT
        return encoded

    def decode_query(self, query: Mapping[str, Sequence[str]]) -> Dict[str, Any]:
        """Decode every configured parameter from a parsed query string."""
        return {name: self.decode_param(name, query.get(name)) for name in self.params}
