"""Version values with a total ordering suited to JVM artifact versions.

Versions are split into numeric and alphabetic components. Numbers compare
numerically; well-known pre-release qualifiers sort before the release;
any other word sorts after it and compares lexically.
"""
from __future__ import annotations

import re
from functools import total_ordering
from typing import Iterable, List, Tuple

_COMPONENT_RE = re.compile(r"\d+|[A-Za-z]+")

_PRE_RELEASE_RANK = {
    "snapshot": 0,
    "alpha": 1,
    "a": 1,
    "beta": 2,
    "b": 2,
    "milestone": 3,
    "m": 3,
    "rc": 4,
    "cr": 4,
}
_RELEASE_WORDS = {"final", "ga", "release"}

# Component kinds, in ascending order.
_PRE_RELEASE, _RELEASE, _WORD, _NUMBER = range(4)
_RELEASE_KEY = (_RELEASE, 0, "")

ComponentKey = Tuple[int, int, str]


def _component_key(token: str) -> ComponentKey:
    if token.isdigit():
        return (_NUMBER, int(token), "")
    lowered = token.lower()
    if lowered in _PRE_RELEASE_RANK:
        return (_PRE_RELEASE, _PRE_RELEASE_RANK[lowered], "")
    if lowered in _RELEASE_WORDS:
        return _RELEASE_KEY
    return (_WORD, 0, lowered)


def _strip_release_padding(keys: List[ComponentKey]) -> Tuple[ComponentKey, ...]:
    while keys and keys[-1] == _RELEASE_KEY:
        keys.pop()
    return tuple(keys)


@total_ordering
class Version:
    """A published version string with a total ordering."""

    __slots__ = ("value", "_components")

    def __init__(self, value: str):
        self.value = value
        keys = [_component_key(token) for token in _COMPONENT_RE.findall(value)]
        self._components = _strip_release_padding(keys)

    @property
    def components(self) -> Tuple[ComponentKey, ...]:
        return self._components

    def _sort_key(self, length: int) -> Tuple[Tuple[ComponentKey, ...], str]:
        padding = (_RELEASE_KEY,) * (length - len(self._components))
        return self._components + padding, self.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        length = max(len(self._components), len(other._components))
        return self._sort_key(length) < other._sort_key(length)

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Version({self.value!r})"


def sort_versions(values: Iterable[str]) -> List[Version]:
    """Return distinct versions sorted ascending."""
    return sorted({Version(value) for value in values})
