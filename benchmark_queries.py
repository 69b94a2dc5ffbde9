#!/usr/bin/env python3
"""
Benchmark range queries against the prime cache.

Compares:
1. Binary search (default range_query)
2. Linear scan (linear_range_query baseline)

Also verifies that both return identical primes for every query.
"""

import argparse
import time
from pathlib import Path

import numpy as np
import pandas as pd

from primecache.cache import PrimeCache
from primecache.report import format_count


def random_ranges(bound: int, n_queries: int, rng: np.random.Generator) -> np.ndarray:
    """Draw n_queries sorted (start, end) pairs inside [0, bound)."""
    pairs = rng.integers(0, bound, size=(n_queries, 2))
    pairs.sort(axis=1)
    return pairs


def time_queries(query, ranges: np.ndarray) -> float:
    """Mean seconds per query."""
    t0 = time.perf_counter()
    for start, end in ranges:
        query(int(start), int(end))
    return (time.perf_counter() - t0) / len(ranges)


def benchmark(bound: int, n_queries: int, seed: int) -> dict:
    """Run both query strategies against one cache."""
    print("-" * 60)
    print(f"Bound = {format_count(bound)}")
    print("-" * 60)

    cache = PrimeCache(bound)
    stats = cache.stats
    print(f"  Build: {stats.duration_s:.3f}s, {format_count(stats.prime_count)} primes")

    rng = np.random.default_rng(seed)
    ranges = random_ranges(bound, n_queries, rng)

    mismatches = 0
    for start, end in ranges:
        fast = cache.range_query(int(start), int(end))
        slow = cache.linear_range_query(int(start), int(end))
        if not np.array_equal(fast, slow):
            mismatches += 1
    if mismatches:
        print(f"  ✗ {mismatches:,} of {n_queries:,} queries disagree")
    else:
        print(f"  ✓ All {n_queries:,} queries agree")

    binary_s = time_queries(cache.range_query, ranges)
    linear_s = time_queries(cache.linear_range_query, ranges)
    print(f"  Binary search: {binary_s * 1e6:.1f}us/query")
    print(f"  Linear scan:   {linear_s * 1e6:.1f}us/query")

    return {
        'bound': bound,
        'prime_count': stats.prime_count,
        'build_s': stats.duration_s,
        'binary_us': binary_s * 1e6,
        'linear_us': linear_s * 1e6,
        'speedup': linear_s / binary_s if binary_s > 0 else np.inf,
        'mismatches': mismatches,
    }


def main():
    parser = argparse.ArgumentParser(description='Benchmark prime cache range queries')
    parser.add_argument('--bounds', type=float, nargs='+', default=[1e4, 1e5, 1e6],
                        help='Sieve bounds to test')
    parser.add_argument('--queries', type=int, default=200, help='Queries per bound')
    parser.add_argument('--seed', type=int, default=42)
    parser.add_argument('--output', type=str, default='data/results/query_benchmark.csv')
    args = parser.parse_args()

    rows = [benchmark(int(b), args.queries, args.seed) for b in args.bounds]
    df = pd.DataFrame(rows)

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output, index=False)

    print()
    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print(df[['bound', 'prime_count', 'build_s', 'binary_us', 'linear_us', 'speedup']].to_string(index=False))
    print(f"\nSaved to: {output.absolute()}")


if __name__ == '__main__':
    main()
