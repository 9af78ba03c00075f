"""Chain builder and the lookup facade over composed evaluators."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from .errors import KeyNotFoundError
from .evaluators import Branch, Evaluator, as_evaluator, chain_depth, compose, entry, iter_terminals

if TYPE_CHECKING:
    from .compiled import CompiledLookup

logger = logging.getLogger(__name__)


def _fold(evaluators: list[Evaluator]) -> Evaluator:
    """Fold left to right into nested branches, earlier evaluators first.

    Adjacent evaluators are paired level by level, so the nesting depth stays
    logarithmic in the number of entries while every left operand still comes
    before its right operand in the original order.
    """
    if not evaluators:
        raise ValueError("cannot build a lookup chain from zero pairs")
    level = evaluators
    while len(level) > 1:
        merged = [Branch(left=level[i], right=level[i + 1]) for i in range(0, len(level) - 1, 2)]
        if len(level) % 2:
            merged.append(level[-1])
        level = merged
    return level[0]


def build(pairs: Iterable[tuple[Any, Any]]) -> Evaluator:
    """Compose ``(key, value)`` pairs into one evaluator.

    Querying the result with ``k`` yields the value of the first pair whose key
    equals ``k``. When nothing matches, the outcome is unmatched and carries
    the payload of the last pair.
    """
    terminals: list[Evaluator] = [entry(key, value) for key, value in pairs]
    chain = _fold(terminals)
    logger.debug("built chain of %d entries (depth %d)", len(terminals), chain_depth(chain))
    return chain


@dataclass(frozen=True)
class Lookup:
    """Indexable facade over a composed evaluator."""

    chain: Evaluator
    _cmap_lookup: ClassVar[bool] = True

    def get(self, key: Any) -> Any:
        matched, value = self.chain(key)
        if not matched:
            raise KeyNotFoundError(key, "lookup")
        return value

    def __getitem__(self, key: Any) -> Any:
        return self.get(key)

    def __contains__(self, key: object) -> bool:
        return self.chain(key).matched

    def __len__(self) -> int:
        return sum(1 for _ in iter_terminals(self.chain))

    def __lshift__(self, other: object) -> "Lookup":
        return Lookup(compose(self.chain, other))

    def entries(self) -> Iterator[tuple[Any, Any]]:
        """Every bound pair in priority order, including shadowed duplicates."""
        for terminal in iter_terminals(self.chain):
            yield terminal.key, terminal.value

    def items(self) -> Iterator[tuple[Any, Any]]:
        """Pairs a query can actually reach; later duplicates are skipped."""
        # Keys only need equality, so the scan is quadratic.
        seen: list[Any] = []
        for key, value in self.entries():
            if any(key == prior for prior in seen):
                continue
            seen.append(key)
            yield key, value

    def compile(self) -> "CompiledLookup":
        from .compiled import compile_lookup

        return compile_lookup(self)


def wrap(evaluator: Evaluator) -> Lookup:
    return Lookup(chain=evaluator)


def join(left: Lookup, right: Lookup) -> Lookup:
    """Combine two lookups; keys of ``left`` shadow those of ``right``."""
    return Lookup(chain=Branch(left=left.chain, right=right.chain))


def make_lookup(*items: object) -> Lookup:
    """Build a lookup from evaluators, ``(key, value)`` pairs or other lookups.

    Items earlier in the argument list take priority, so passing lookups joins
    them left to right.
    """
    return Lookup(chain=_fold([as_evaluator(item) for item in items]))
