"""Maven style comparable versions.

Implements the ordering Maven applies to artifact versions, so tags such as
``1.10`` rank above ``1.2`` and a release ranks above its ``-SNAPSHOT``.

A version string is split on ``.`` and ``-`` and on every transition between
digits and letters. Numbers compare numerically, known qualifiers compare by
their position in :data:`QUALIFIERS`, and anything after a ``-`` (or a
digit/letter transition) is nested in a sub list. Trailing "null" items
(``0``, ``""``, ``ga``, ``final``, ``release``) are dropped, so ``1.0`` equals
``1`` and ``1.0-final``.
"""

from __future__ import annotations

from functools import total_ordering
from typing import List, Optional, Union

QUALIFIERS = ["alpha", "beta", "milestone", "rc", "snapshot", "", "sp"]
ALIASES = {"ga": "", "final": "", "release": "", "cr": "rc"}
SHORT_ALIASES = {"a": "alpha", "b": "beta", "m": "milestone"}

RELEASE_VERSION_INDEX = str(QUALIFIERS.index(""))
_DIGITS = "0123456789"


def comparable_qualifier(qualifier: str) -> str:
    """Sortable key for a qualifier; unknown qualifiers sort after ``sp``."""
    if qualifier in QUALIFIERS:
        return str(QUALIFIERS.index(qualifier))
    return f"{len(QUALIFIERS)}-{qualifier}"


class _IntItem:
    __slots__ = ("value",)

    def __init__(self, value: int):
        self.value = value

    def is_null(self) -> bool:
        return self.value == 0

    def compare(self, other: Optional["_Item"]) -> int:
        if other is None:
            return 0 if self.value == 0 else 1
        if isinstance(other, _IntItem):
            return (self.value > other.value) - (self.value < other.value)
        return 1  # 1.1 > 1-sp and 1.1 > 1-1

    def __repr__(self) -> str:
        return str(self.value)


class _StringItem:
    __slots__ = ("value",)

    def __init__(self, value: str, followed_by_digit: bool):
        if followed_by_digit and len(value) == 1:
            value = SHORT_ALIASES.get(value, value)
        self.value = ALIASES.get(value, value)

    def is_null(self) -> bool:
        return comparable_qualifier(self.value) == RELEASE_VERSION_INDEX

    def compare(self, other: Optional["_Item"]) -> int:
        mine = comparable_qualifier(self.value)
        if other is None:
            return (mine > RELEASE_VERSION_INDEX) - (mine < RELEASE_VERSION_INDEX)
        if isinstance(other, _StringItem):
            theirs = comparable_qualifier(other.value)
            return (mine > theirs) - (mine < theirs)
        return -1  # 1.any < 1.1 and 1.any < 1-1

    def __repr__(self) -> str:
        return self.value


class _ListItem(list):
    """Sub version introduced by ``-`` or a digit/letter transition."""

    def is_null(self) -> bool:
        return len(self) == 0

    def normalize(self) -> None:
        for i in range(len(self) - 1, -1, -1):
            item = self[i]
            if item.is_null():
                del self[i]
            elif not isinstance(item, _ListItem):
                break

    def compare(self, other: Optional["_Item"]) -> int:
        if other is None:
            if not self:
                return 0
            return self[0].compare(None)
        if isinstance(other, _IntItem):
            return -1  # 1-1 < 1.0.x
        if isinstance(other, _StringItem):
            return 1  # 1-1 > 1-sp
        for index in range(max(len(self), len(other))):
            left = self[index] if index < len(self) else None
            right = other[index] if index < len(other) else None
            if left is None:
                result = 0 if right is None else -right.compare(None)
            else:
                result = left.compare(right)
            if result != 0:
                return result
        return 0

    def __repr__(self) -> str:
        return "(" + ",".join(repr(item) for item in self) + ")"


_Item = Union[_IntItem, _StringItem, _ListItem]


def _parse_item(is_digit: bool, text: str) -> _Item:
    if is_digit:
        return _IntItem(int(text))
    return _StringItem(text, False)


def _parse(version: str) -> _ListItem:
    version = version.lower()
    items = _ListItem()
    current = items
    stack: List[_ListItem] = [current]

    is_digit = False
    start = 0
    for index, char in enumerate(version):
        if char == ".":
            current.append(_IntItem(0) if index == start else _parse_item(is_digit, version[start:index]))
            start = index + 1
        elif char == "-":
            current.append(_IntItem(0) if index == start else _parse_item(is_digit, version[start:index]))
            start = index + 1
            sub = _ListItem()
            current.append(sub)
            current = sub
            stack.append(current)
        elif char in _DIGITS:
            if not is_digit and index > start:
                current.append(_StringItem(version[start:index], True))
                start = index
                sub = _ListItem()
                current.append(sub)
                current = sub
                stack.append(current)
            is_digit = True
        else:
            if is_digit and index > start:
                current.append(_parse_item(True, version[start:index]))
                start = index
                sub = _ListItem()
                current.append(sub)
                current = sub
                stack.append(current)
            is_digit = False

    if len(version) > start:
        current.append(_parse_item(is_digit, version[start:]))

    while stack:
        stack.pop().normalize()
    return items


@total_ordering
class ComparableVersion:
    """A version string with Maven ordering semantics.

    >>> ComparableVersion("1.10") > ComparableVersion("1.2")
    True
    >>> ComparableVersion("1.0") > ComparableVersion("1.0-SNAPSHOT")
    True
    """

    __slots__ = ("value", "_items")

    def __init__(self, value: str):
        self.value = value
        self._items = _parse(value)

    def compare(self, other: "ComparableVersion") -> int:
        return self._items.compare(other._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComparableVersion):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: "ComparableVersion") -> bool:
        if not isinstance(other, ComparableVersion):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        return hash(repr(self._items))

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"ComparableVersion({self.value!r})"
