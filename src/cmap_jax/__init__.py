"""cmap-jax public API."""

from .chain import Lookup, build, join, make_lookup, wrap
from .compiled import CompiledLookup, compile_lookup
from .errors import (
    CMapError,
    CMapTypeError,
    DuplicateKeyError,
    KeyNotFoundError,
    UnsortedKeysError,
)
from .evaluators import Branch, Outcome, Terminal, compose, entry
from .index import SortedIndex
from .kernels import jax_binary_search, jax_linear_search
from .search import NOT_FOUND, binary_search, linear_search

__all__ = [
    "build",
    "wrap",
    "join",
    "make_lookup",
    "Lookup",
    "entry",
    "compose",
    "Outcome",
    "Terminal",
    "Branch",
    "SortedIndex",
    "linear_search",
    "binary_search",
    "jax_linear_search",
    "jax_binary_search",
    "NOT_FOUND",
    "CompiledLookup",
    "compile_lookup",
    "CMapError",
    "CMapTypeError",
    "DuplicateKeyError",
    "KeyNotFoundError",
    "UnsortedKeysError",
]
