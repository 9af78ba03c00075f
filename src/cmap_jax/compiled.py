"""Lookup chains lowered to priority-ordered JAX arrays."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import jax.numpy as jnp

from .errors import CMapTypeError, KeyNotFoundError
from .evaluators import is_lookup
from .kernels import as_key_array, as_query, kernel

if TYPE_CHECKING:
    from .chain import Lookup

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class CompiledLookup:
    """Array form of a lookup chain answered by one jitted first-match kernel.

    ``keys`` and ``values`` keep the chain's priority order, duplicates
    included, so the first matching row reproduces the chain's precedence.
    """

    keys: jnp.ndarray
    values: jnp.ndarray

    def _first_match(self, key: Any) -> tuple[bool, jnp.ndarray | None]:
        try:
            query = as_query(key)
        except CMapTypeError:
            # No row of a numeric table can equal a key that is not a JAX scalar.
            return False, None
        found, value = kernel("first_match")(self.keys, self.values, query)
        return bool(found), value

    def get(self, key: Any) -> jnp.ndarray:
        found, value = self._first_match(key)
        if not found:
            raise KeyNotFoundError(key, "compiled lookup")
        return value

    def __getitem__(self, key: Any) -> jnp.ndarray:
        return self.get(key)

    def __contains__(self, key: object) -> bool:
        found, _ = self._first_match(key)
        return found

    def __len__(self) -> int:
        return int(self.keys.shape[0])

    def batch(self, queries: object) -> tuple[jnp.ndarray, jnp.ndarray]:
        """Answer many keys at once as ``(found_mask, values)``; misses never raise.

        Values at positions where ``found_mask`` is false are unspecified.
        """
        return kernel("batch_first_match")(self.keys, self.values, as_key_array(queries, where="queries"))


def compile_lookup(lookup: "Lookup") -> CompiledLookup:
    keys: list[Any] = []
    values: list[Any] = []
    for key, value in lookup.entries():
        if is_lookup(key) or is_lookup(value):
            raise CMapTypeError("nested lookups cannot be compiled; compile the inner lookups instead")
        keys.append(key)
        values.append(value)
    compiled = CompiledLookup(
        keys=as_key_array(keys, where="lookup keys"),
        values=as_key_array(values, where="lookup values"),
    )
    logger.debug("compiled lookup of %d entries (keys %s, values %s)", len(keys), compiled.keys.dtype, compiled.values.dtype)
    return compiled
