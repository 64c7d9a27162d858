"""Suppression flag used to ignore self-induced updates."""

from contextlib import contextmanager
from typing import Iterator


class SuppressionFlag:
    """
    A boolean that is set only for the duration of a ``with hold()`` block.

    The flag is always cleared on exit, including when the body raises, so
    a failing dispatch or navigation cannot leave an observer muted.
    """

    def __init__(self, name: str):
        self.name = name
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    @contextmanager
    def hold(self) -> Iterator[None]:
        self._active = True
        try:
            yield
        finally:
            self._active = False

    def __repr__(self) -> str:
        return f"SuppressionFlag({self.name!r}, active={self._active})"
