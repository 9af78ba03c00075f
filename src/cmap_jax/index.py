"""Persistent sorted index: parallel key/value columns with copy-on-insert."""

from __future__ import annotations

import logging
from bisect import bisect_left
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from functools import cached_property
from typing import Any

import jax.numpy as jnp

from .errors import DuplicateKeyError, KeyNotFoundError
from .kernels import as_key_array, is_array_search
from .search import NOT_FOUND, SearchStrategy, binary_search, check_strictly_ascending

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SortedIndex:
    """Immutable map stored as strictly ascending ``keys`` and aligned ``values``.

    ``insert`` never touches the receiver; it returns a new index one entry
    longer. Lookups go through a pluggable search strategy, see
    ``cmap_jax.search`` and ``cmap_jax.kernels``.
    """

    keys: tuple[Any, ...] = ()
    values: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        keys = tuple(self.keys)
        values = tuple(self.values)
        if len(keys) != len(values):
            raise ValueError(f"keys and values differ in length: {len(keys)} != {len(values)}")
        check_strictly_ascending(keys, where="SortedIndex keys")
        object.__setattr__(self, "keys", keys)
        object.__setattr__(self, "values", values)

    @classmethod
    def empty(cls) -> "SortedIndex":
        return cls()

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[Any, Any]]) -> "SortedIndex":
        index = cls.empty()
        for key, value in pairs:
            index = index.insert(key, value)
        logger.debug("built sorted index of %d entries", len(index))
        return index

    def insert(self, key: Any, value: Any) -> "SortedIndex":
        """New index with ``key`` placed before the first key not less than it.

        Raises ``DuplicateKeyError`` when ``key`` is already present.
        """
        position = bisect_left(self.keys, key)
        if position < len(self.keys) and self.keys[position] == key:
            raise DuplicateKeyError(f"key {key!r} is already present at position {position}")
        return SortedIndex(
            keys=self.keys[:position] + (key,) + self.keys[position:],
            values=self.values[:position] + (value,) + self.values[position:],
        )

    def find(self, key: Any, search: SearchStrategy = binary_search) -> Any:
        keys = self.key_array if is_array_search(search) else self.keys
        position = search(keys, key)
        if position == NOT_FOUND:
            raise KeyNotFoundError(key, "index")
        if not 0 <= position < len(self.values):
            raise ValueError(f"search strategy returned out-of-range position {position}")
        return self.values[position]

    @cached_property
    def key_array(self) -> jnp.ndarray:
        return as_key_array(self.keys, where="SortedIndex keys")

    def __len__(self) -> int:
        return len(self.keys)

    def __contains__(self, key: object) -> bool:
        return binary_search(self.keys, key, check_sorted=False) != NOT_FOUND

    def items(self) -> Iterator[tuple[Any, Any]]:
        return iter(zip(self.keys, self.values))
