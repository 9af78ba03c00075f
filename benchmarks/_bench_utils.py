"""Sweep timing and summary statistics for the lookup benchmarks."""

from __future__ import annotations

import platform
import statistics
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

import jax

Query = Callable[[Any], Any]


@dataclass(frozen=True)
class SweepStats:
    samples: int
    mean_ms: float
    p50_ms: float
    p95_ms: float
    cv_pct: float

    def per_query_us(self, queries: int) -> float:
        return (self.mean_ms * 1e3) / max(queries, 1)


def runtime_info() -> dict[str, Any]:
    return {
        "python": platform.python_version(),
        "jax": jax.__version__,
        "backend": jax.default_backend(),
        "devices": [str(device) for device in jax.devices()],
    }


def sweep_ms(query: Query, keys: Sequence[Any], *, rounds: int = 1) -> float:
    """Milliseconds for one pass of ``query`` over every key, averaged over ``rounds``."""
    rounds = max(1, rounds)
    started = time.perf_counter_ns()
    for _ in range(rounds):
        for key in keys:
            query(key)
    return (time.perf_counter_ns() - started) / rounds / 1e6


def spread_pct(timings: Sequence[float]) -> float:
    if len(timings) < 2:
        return 0.0
    centre = statistics.fmean(timings)
    if centre <= 0:
        return 0.0
    return statistics.stdev(timings) / centre * 100.0


def time_sweeps(
    query: Query,
    keys: Sequence[Any],
    *,
    rounds: int,
    warmup: int,
    samples: int,
    cv_target_pct: float,
    max_samples: int,
) -> list[float]:
    """Per-sweep timings; extra samples are taken while the spread exceeds ``cv_target_pct``."""
    if warmup > 0:
        sweep_ms(query, keys, rounds=warmup)
    timings = [sweep_ms(query, keys, rounds=rounds) for _ in range(max(1, samples))]
    while len(timings) < max_samples and spread_pct(timings) > cv_target_pct:
        timings.append(sweep_ms(query, keys, rounds=rounds))
    return timings


def summarize(timings: Sequence[float]) -> SweepStats:
    if not timings:
        raise ValueError("no timings to summarize")
    if len(timings) == 1:
        only = timings[0]
        return SweepStats(samples=1, mean_ms=only, p50_ms=only, p95_ms=only, cv_pct=0.0)
    # Twenty cut points: index 9 is the median, index 18 the 95th percentile.
    cuts = statistics.quantiles(timings, n=20, method="inclusive")
    return SweepStats(
        samples=len(timings),
        mean_ms=statistics.fmean(timings),
        p50_ms=cuts[9],
        p95_ms=cuts[18],
        cv_pct=spread_pct(timings),
    )
