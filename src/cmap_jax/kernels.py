"""JAX kernels for array-backed key search and first-match lookup."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Callable, Final

import jax
import jax.numpy as jnp

from .config import USE_JITTED_SEARCH
from .errors import CMapTypeError
from .search import NOT_FOUND

logger = logging.getLogger(__name__)


def as_key_array(values: object, *, where: str = "keys") -> jnp.ndarray:
    """One-dimensional numeric JAX array built from ``values``."""
    if isinstance(values, jnp.ndarray):
        arr = values
    else:
        try:
            arr = jnp.asarray(values)
        except (TypeError, ValueError, OverflowError) as exc:
            raise CMapTypeError(f"{where} cannot be stored in a JAX array: {exc}") from exc
    if arr.ndim != 1:
        raise CMapTypeError(f"{where} must be one-dimensional, got shape {tuple(arr.shape)}")
    if not (jnp.issubdtype(arr.dtype, jnp.number) or jnp.issubdtype(arr.dtype, jnp.bool_)):
        raise CMapTypeError(f"{where} has non-numeric dtype {arr.dtype}")
    return arr


def as_query(key: object, *, where: str = "key") -> jnp.ndarray:
    try:
        query = jnp.asarray(key)
    except (TypeError, ValueError, OverflowError) as exc:
        raise CMapTypeError(f"{where} {key!r} cannot be used as a JAX scalar: {exc}") from exc
    if query.ndim != 0:
        raise CMapTypeError(f"{where} must be a scalar, got shape {tuple(query.shape)}")
    return query


def _linear_search_array(keys: jnp.ndarray, key: jnp.ndarray) -> jnp.ndarray:
    match = keys == key
    return jnp.where(jnp.any(match), jnp.argmax(match), NOT_FOUND)


def _binary_search_array(keys: jnp.ndarray, key: jnp.ndarray) -> jnp.ndarray:
    size = keys.shape[0]
    position = jnp.searchsorted(keys, key, side="left")
    clipped = jnp.minimum(position, size - 1)
    hit = (position < size) & (keys[clipped] == key)
    return jnp.where(hit, position, NOT_FOUND)


def _first_match_array(keys: jnp.ndarray, values: jnp.ndarray, key: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    match = keys == key
    return jnp.any(match), values[jnp.argmax(match)]


def _batch_first_match_array(keys: jnp.ndarray, values: jnp.ndarray, queries: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    return jax.vmap(_first_match_array, in_axes=(None, None, 0))(keys, values, queries)


_KERNELS: Final[dict[str, Callable[..., Any]]] = {
    "linear": _linear_search_array,
    "binary": _binary_search_array,
    "first_match": _first_match_array,
    "batch_first_match": _batch_first_match_array,
}


_JITTED_KERNELS: dict[str, Callable[..., Any]] = {}


def kernel(name: str) -> Callable[..., Any]:
    fn = _JITTED_KERNELS.get(name)
    if fn is None:
        fn = _KERNELS[name]
        if USE_JITTED_SEARCH:
            logger.debug("jitting %s kernel", name)
            fn = jax.jit(fn)
        _JITTED_KERNELS[name] = fn
    return fn


def _array_search(fn: Callable[[Any, Any], int]) -> Callable[[Any, Any], int]:
    # SortedIndex.find hands strategies carrying this marker its cached key array.
    fn._cmap_array_search = True  # type: ignore[attr-defined]
    return fn


@_array_search
def jax_linear_search(keys: Sequence[Any] | jnp.ndarray, key: Any) -> int:
    arr = as_key_array(keys)
    if arr.shape[0] == 0:
        return NOT_FOUND
    return int(kernel("linear")(arr, as_query(key)))


@_array_search
def jax_binary_search(keys: Sequence[Any] | jnp.ndarray, key: Any) -> int:
    arr = as_key_array(keys)
    if arr.shape[0] == 0:
        return NOT_FOUND
    return int(kernel("binary")(arr, as_query(key)))


def is_array_search(search: object) -> bool:
    return bool(getattr(search, "_cmap_array_search", False))
