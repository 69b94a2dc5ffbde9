"""
Prime generation utilities.

Responsibility: the sieve itself. No caching, no range queries.
"""

import math
from typing import Optional

import numpy as np


def prime_flags_below(N: int, max_factor: Optional[int] = None) -> np.ndarray:
    """
    Return boolean array where flags[i] is True iff i is prime.

    Uses Sieve of Eratosthenes over [0, N).

    Parameters
    ----------
    N : int
        Sieve bound (exclusive).
    max_factor : int, optional
        Largest factor to sieve with. Defaults to floor(sqrt(N)).

    Returns
    -------
    np.ndarray
        Boolean array of length N.
    """
    flags = np.ones(N, dtype=bool)
    flags[:2] = False
    if max_factor is None:
        max_factor = math.isqrt(N)
    for f in range(2, max_factor + 1):
        # Multiples of a composite f were cleared by its smallest factor
        if flags[f]:
            flags[f*f::f] = False
    return flags


def compact_flags(flags: np.ndarray) -> np.ndarray:
    """
    Collect the marked indices of a flags array in ascending order.

    Parameters
    ----------
    flags : np.ndarray
        Boolean primality flags.

    Returns
    -------
    np.ndarray
        int64 array of primes.
    """
    return np.flatnonzero(flags).astype(np.int64, copy=False)


def primes_below(N: int) -> np.ndarray:
    """
    Return array of all primes < N.

    The flags array only lives for the duration of this call.
    """
    return compact_flags(prime_flags_below(N))
