"""
Human-readable output for cache results.

The cache returns raw integers; everything that turns them into text
lives here.
"""

from typing import Dict, Iterable

from .cache import PrimeCache


def format_count(n: int) -> str:
    """Format an integer with thousands separators, e.g. 16,777,216."""
    return f"{int(n):,}"


def format_primes(primes: Iterable[int], sep: str = ",") -> str:
    """Join primes into a single line."""
    return sep.join(str(int(p)) for p in primes)


def summarize(cache: PrimeCache) -> Dict[str, float]:
    """
    Summarize a built cache.

    Parameters
    ----------
    cache : PrimeCache
        A READY cache.

    Returns
    -------
    dict
        Dictionary with sieve_bound, min_start, prime_count, largest_prime,
        build_s, throughput, density.
    """
    stats = cache.stats
    primes = cache.primes
    return {
        'sieve_bound': cache.sieve_bound,
        'min_start': cache.min_start,
        'prime_count': stats.prime_count,
        'largest_prime': int(primes[-1]) if len(primes) else None,
        'build_s': stats.duration_s,
        'throughput': stats.throughput,
        'density': stats.density,
    }
