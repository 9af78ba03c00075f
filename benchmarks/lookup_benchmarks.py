"""Random-access lookup benchmarks across chain, compiled, index and dict tables."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Callable

import jax

from _bench_utils import runtime_info, summarize, time_sweeps
from cmap_jax import (
    SortedIndex,
    binary_search,
    build,
    jax_binary_search,
    jax_linear_search,
    linear_search,
    wrap,
)

logger = logging.getLogger(__name__)

# Keys are drawn without replacement from [0, KEY_SPACE) so every table holds unique keys.
KEY_SPACE = 1 << 20
VALUE_MAX = (1 << 31) - 1


@dataclass(frozen=True)
class Fixture:
    size: int
    keys: tuple[int, ...]
    values: tuple[int, ...]

    @property
    def pairs(self) -> list[tuple[int, int]]:
        return list(zip(self.keys, self.values, strict=True))

    @property
    def reversed_keys(self) -> tuple[int, ...]:
        return tuple(reversed(self.keys))


@dataclass(frozen=True)
class LookupCase:
    name: str
    note: str
    prepare: Callable[[Fixture], Callable[[int], Any]]


@dataclass(frozen=True)
class Row:
    name: str
    size: int
    queries: int
    repeats: int
    samples: int
    mean_ms: float
    p50_ms: float
    p95_ms: float
    cv_pct: float
    per_query_us: float


def random_fixture(size: int, *, seed: int) -> Fixture:
    if size < 1:
        raise ValueError(f"fixture size must be positive, got {size}")
    if size > KEY_SPACE:
        raise ValueError(f"fixture size {size} exceeds key space {KEY_SPACE}")
    key_rng, value_rng = jax.random.split(jax.random.PRNGKey(seed))
    keys = jax.random.choice(key_rng, KEY_SPACE, shape=(size,), replace=False)
    values = jax.random.randint(value_rng, (size,), 0, VALUE_MAX)
    return Fixture(
        size=size,
        keys=tuple(int(k) for k in keys.tolist()),
        values=tuple(int(v) for v in values.tolist()),
    )


def _prepare_chain(fixture: Fixture) -> Callable[[int], Any]:
    return wrap(build(fixture.pairs)).get


def _prepare_compiled(fixture: Fixture) -> Callable[[int], Any]:
    return wrap(build(fixture.pairs)).compile().get


def _prepare_index(search) -> Callable[[Fixture], Callable[[int], Any]]:
    def prepare(fixture: Fixture) -> Callable[[int], Any]:
        index = SortedIndex.from_pairs(fixture.pairs)

        def find(key: int) -> Any:
            return index.find(key, search)

        return find

    return prepare


def _prepare_dict(fixture: Fixture) -> Callable[[int], Any]:
    return dict(fixture.pairs).__getitem__


def cases() -> list[LookupCase]:
    return [
        LookupCase("chain", "evaluator chain via Lookup.get", _prepare_chain),
        LookupCase("compiled", "jitted first-match over priority arrays", _prepare_compiled),
        LookupCase("index_linear", "SortedIndex.find with linear_search", _prepare_index(linear_search)),
        LookupCase("index_binary", "SortedIndex.find with binary_search", _prepare_index(binary_search)),
        LookupCase("index_jax_linear", "SortedIndex.find with jax_linear_search", _prepare_index(jax_linear_search)),
        LookupCase("index_jax_binary", "SortedIndex.find with jax_binary_search", _prepare_index(jax_binary_search)),
        LookupCase("dict", "builtin dict baseline", _prepare_dict),
    ]


def run_case(
    case: LookupCase,
    fixture: Fixture,
    *,
    repeats: int,
    warmup: int,
    samples: int,
    cv_target_pct: float,
    max_samples: int,
) -> Row:
    lookup = case.prepare(fixture)
    queries = fixture.reversed_keys
    expected = dict(fixture.pairs)
    for key in queries:
        got = int(lookup(key))
        if got != expected[key]:
            raise AssertionError(f"{case.name} returned {got} for key {key}, expected {expected[key]}")

    timings = time_sweeps(
        lookup,
        queries,
        rounds=repeats,
        warmup=warmup,
        samples=samples,
        cv_target_pct=cv_target_pct,
        max_samples=max_samples,
    )
    stats = summarize(timings)
    logger.debug("finished %s at size %d: %.4f ms per sweep", case.name, fixture.size, stats.mean_ms)
    return Row(
        name=case.name,
        size=fixture.size,
        queries=len(queries),
        repeats=repeats,
        samples=stats.samples,
        mean_ms=stats.mean_ms,
        p50_ms=stats.p50_ms,
        p95_ms=stats.p95_ms,
        cv_pct=stats.cv_pct,
        per_query_us=stats.per_query_us(len(queries)),
    )


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--sizes", default="100,1000", help="comma-separated table sizes")
    parser.add_argument("--cases", default="", help="comma-separated case names (default: all)")
    parser.add_argument("--seed", type=int, default=0, help="fixture PRNG seed")
    parser.add_argument("--repeats", type=int, default=5, help="sweeps per timing sample")
    parser.add_argument("--warmup", type=int, default=2, help="warmup sweeps before timing")
    parser.add_argument("--samples", type=int, default=5, help="timing samples")
    parser.add_argument("--cv-target", type=float, default=5.0, help="stop sampling under this cv (%%)")
    parser.add_argument("--max-samples", type=int, default=20, help="upper bound on timing samples")
    parser.add_argument("--json-out", default="", help="optional path for machine-readable output")
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    sizes = [int(x.strip()) for x in args.sizes.split(",") if x.strip()]
    selected = {x.strip() for x in args.cases.split(",") if x.strip()}
    all_cases = [case for case in cases() if not selected or case.name in selected]
    unknown = selected - {case.name for case in all_cases}
    if unknown:
        parser.error(f"unknown cases: {', '.join(sorted(unknown))}")
    max_samples = max(args.max_samples, args.samples)

    print(f"sizes: {sizes}")
    print(f"cases: {', '.join(case.name for case in all_cases)}")
    print(f"backend: {jax.default_backend()}")
    print()

    rows: list[Row] = []
    for size in sizes:
        fixture = random_fixture(size, seed=args.seed)
        for case in all_cases:
            rows.append(
                run_case(
                    case,
                    fixture,
                    repeats=max(1, args.repeats),
                    warmup=args.warmup,
                    samples=args.samples,
                    cv_target_pct=args.cv_target,
                    max_samples=max_samples,
                )
            )
        logger.info("completed size %d", size)

    print()
    print("case               size   mean(ms)   p95(ms)    cv(%)  per-query(us)")
    print("-----------------  -----  ---------  ---------  ------  -------------")
    for row in rows:
        print(
            f"{row.name:17}  {row.size:5d}  {row.mean_ms:9.4f}  {row.p95_ms:9.4f}  "
            f"{row.cv_pct:6.2f}  {row.per_query_us:13.3f}"
        )

    if args.json_out:
        outpath = Path(args.json_out)
        outpath.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "timestamp_utc": datetime.now(UTC).strftime("%Y%m%dT%H%M%SZ"),
            "sizes": sizes,
            "seed": args.seed,
            "repeats": args.repeats,
            "runtime": runtime_info(),
            "rows": [asdict(row) for row in rows],
        }
        outpath.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote JSON: {outpath}")


if __name__ == "__main__":
    main()
