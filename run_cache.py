#!/usr/bin/env python3
"""
Build a prime cache and print a range of primes from it.

Usage:
    python run_cache.py
    python run_cache.py --config config/service.yaml --start 1000 --end 1100
    python run_cache.py --profile generator --verbose
"""

import argparse
import sys

from primecache.cache import PrimeCache
from primecache.config import config_from_dict, load_config, profile
from primecache.errors import PrimeCacheError
from primecache.metrics import PrintObserver
from primecache.report import format_count, format_primes, summarize


def main():
    parser = argparse.ArgumentParser(description='Build a prime cache and query it')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to config file (default: config/default.yaml)')
    parser.add_argument('--profile', type=str, default=None,
                        help='Named profile, overrides --config')
    parser.add_argument('--bound', type=int, default=None,
                        help='Sieve bound, overrides config')
    parser.add_argument('--start', type=int, default=None,
                        help='Range start (default: min_start)')
    parser.add_argument('--end', type=int, default=100,
                        help='Range end, inclusive (default: 100)')
    parser.add_argument('--verbose', action='store_true',
                        help='Report query timings')
    args = parser.parse_args()

    try:
        if args.profile:
            config = profile(args.profile)
        else:
            config = load_config(args.config)
        if args.bound is not None:
            config = config_from_dict({'sieve_bound': args.bound, 'min_start': config.min_start})

        print("=" * 60)
        print("Prime Cache")
        print("=" * 60)
        print(f"\nConfiguration:")
        print(f"  sieve_bound = {format_count(config.sieve_bound)}")
        print(f"  min_start = {config.min_start}")
        print()

        print("Building cache...")
        cache = PrimeCache.from_config(config, observer=PrintObserver(verbose=args.verbose))

        if args.start is None:
            primes = cache.primes_up_to(args.end)
            label = f"<= {format_count(args.end)}"
        else:
            primes = cache.range_query(args.start, args.end)
            label = f"in [{format_count(args.start)}, {format_count(args.end)}]"
    except PrimeCacheError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print()
    print(f"{format_count(len(primes))} primes {label}:")
    print(format_primes(primes))

    summary = summarize(cache)
    print()
    print(f"Density: {summary['density']:.5f}  Largest prime: {format_count(summary['largest_prime'])}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
