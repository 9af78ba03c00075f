"""Evaluator model: single-key terminals composed into priority branches."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, ClassVar, NamedTuple, Union


class Outcome(NamedTuple):
    matched: bool
    value: Any


@dataclass(frozen=True)
class Terminal:
    """Binds one fixed key to one value."""

    key: Any
    value: Any
    _cmap_evaluator_kind: ClassVar[str] = "terminal"

    def __call__(self, key: Any) -> Outcome:
        # The payload is carried even on mismatch; callers look at `matched`.
        return Outcome(bool(key == self.key), self.value)

    def __lshift__(self, other: object) -> "Branch":
        return compose(self, other)


@dataclass(frozen=True, eq=False, repr=False)
class Branch:
    """Left-priority union of exactly two evaluators.

    The left outcome is returned verbatim when it matched. Otherwise the right
    outcome is returned as is, matched or not, so the last evaluator reached
    decides the final result.

    Chains grown with ``<<`` nest as deep as they are long, so evaluation walks
    the left spine with an explicit stack of pending right operands instead of
    recursing.
    """

    left: "Evaluator"
    right: "Evaluator"
    _cmap_evaluator_kind: ClassVar[str] = "branch"

    def __call__(self, key: Any) -> Outcome:
        pending: list[Evaluator] = []
        node: Evaluator = self
        while True:
            while isinstance(node, Branch):
                pending.append(node.right)
                node = node.left
            outcome = node(key)
            if outcome.matched or not pending:
                return outcome
            node = pending.pop()

    def __lshift__(self, other: object) -> "Branch":
        return compose(self, other)

    def __repr__(self) -> str:
        return f"Branch(terminals={sum(1 for _ in iter_terminals(self))})"


Evaluator = Union[Terminal, Branch]


def is_evaluator(value: object) -> bool:
    return getattr(value, "_cmap_evaluator_kind", None) is not None


def is_lookup(value: object) -> bool:
    return bool(getattr(value, "_cmap_lookup", False))


def entry(key: Any, value: Any) -> Terminal:
    """Evaluator for a single key/value pair."""
    return Terminal(key=key, value=value)


def as_evaluator(item: object) -> Evaluator:
    """Coerce an evaluator, a lookup facade, or a ``(key, value)`` pair."""
    if is_evaluator(item):
        return item  # type: ignore[return-value]
    if is_lookup(item):
        return item.chain  # type: ignore[attr-defined]
    if isinstance(item, tuple) and len(item) == 2:
        return entry(item[0], item[1])
    raise TypeError(
        f"expected an evaluator, a lookup or a (key, value) pair, got {type(item).__name__}"
    )


def compose(left: object, right: object) -> Branch:
    """Chain ``right`` behind ``left``; ``left`` wins on shared keys."""
    return Branch(left=as_evaluator(left), right=as_evaluator(right))


def iter_terminals(evaluator: Evaluator) -> Iterator[Terminal]:
    """Yield every terminal in priority order, shadowed ones included."""
    stack: list[Evaluator] = [evaluator]
    while stack:
        node = stack.pop()
        if isinstance(node, Branch):
            stack.append(node.right)
            stack.append(node.left)
            continue
        yield node


def chain_depth(evaluator: Evaluator) -> int:
    """Longest branch path from ``evaluator`` down to a terminal."""
    deepest = 0
    stack: list[tuple[Evaluator, int]] = [(evaluator, 0)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, Branch):
            stack.append((node.left, depth + 1))
            stack.append((node.right, depth + 1))
            continue
        deepest = max(deepest, depth)
    return deepest
