"""Structured error types for lookup and index failures."""

from __future__ import annotations

from dataclasses import dataclass


class CMapError(Exception):
    """Base class for structured cmap-jax errors."""


@dataclass(frozen=True)
class KeyNotFoundError(CMapError, KeyError):
    """Raised when a queried key matches no entry."""

    key: object
    source: str = "lookup"

    def __str__(self) -> str:
        return f"No such key in {self.source}: {self.key!r}"


class DuplicateKeyError(CMapError, ValueError):
    """Insert of a key that is already present in a sorted index."""


class UnsortedKeysError(CMapError, ValueError):
    """Key sequence is not strictly ascending."""


class CMapTypeError(CMapError, TypeError):
    """Keys or values cannot be represented as JAX arrays."""
