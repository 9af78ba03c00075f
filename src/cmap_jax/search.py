"""Position search over key sequences.

Every strategy takes ``(keys, key)`` and returns the position of ``key`` in
``keys`` or ``-1`` when it is absent.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Callable

from .config import CHECK_SORTED
from .errors import UnsortedKeysError

NOT_FOUND = -1

SearchStrategy = Callable[[Sequence[Any], Any], int]


def linear_search(keys: Sequence[Any], key: Any) -> int:
    """First position holding ``key``; any ordering is accepted."""
    for position, candidate in enumerate(keys):
        if candidate == key:
            return position
    return NOT_FOUND


def check_strictly_ascending(keys: Sequence[Any], *, where: str = "keys") -> None:
    for position in range(1, len(keys)):
        if not keys[position - 1] < keys[position]:
            raise UnsortedKeysError(
                f"{where} must be strictly ascending; "
                f"position {position - 1} holds {keys[position - 1]!r}, position {position} holds {keys[position]!r}"
            )


def binary_search(keys: Sequence[Any], key: Any, *, check_sorted: bool = CHECK_SORTED) -> int:
    """Halving search over strictly ascending ``keys``.

    Unsorted input gives an arbitrary answer unless ``check_sorted`` is set
    (see ``CMAP_JAX_CHECK_SORTED``), in which case it raises
    ``UnsortedKeysError``.
    """
    if check_sorted:
        check_strictly_ascending(keys)
    left = 0
    right = len(keys) - 1
    while left <= right:
        middle = (left + right) // 2
        current = keys[middle]
        if current == key:
            return middle
        if current < key:
            left = middle + 1
        else:
            right = middle - 1
    return NOT_FOUND
