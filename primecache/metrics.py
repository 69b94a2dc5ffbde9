"""
Definitions of all reported statistics, and the hooks that receive them.

Responsibility: build and query timings. The cache hands these to an
observer; nothing here influences which primes are returned.
"""

import logging
from dataclasses import dataclass
from typing import Optional

# A build faster than this is reported as taking this long
MIN_DURATION_S = 1e-3


@dataclass(frozen=True)
class BuildStats:
    """
    Outcome of one sieve build.

    Attributes
    ----------
    sieve_bound : int
        Number of values sieved.
    prime_count : int
        Number of primes retained.
    duration_s : float
        Wall time of sieve plus compaction.
    """
    sieve_bound: int
    prime_count: int
    duration_s: float

    @property
    def throughput(self) -> float:
        """Values sieved per second."""
        return sieve_rate(self.sieve_bound, self.duration_s)

    @property
    def density(self) -> float:
        """Fraction of the sieved universe that is prime."""
        return self.prime_count / self.sieve_bound


@dataclass(frozen=True)
class QueryStats:
    """Timing of a single range query."""
    start: int
    end: int
    count: int
    duration_s: float


def sieve_rate(size: int, duration_s: float) -> float:
    """
    Compute values processed per second.

    Parameters
    ----------
    size : int
        Number of values processed.
    duration_s : float
        Elapsed seconds. Floored at MIN_DURATION_S so a sub-millisecond
        build still yields a finite rate.

    Returns
    -------
    float
    """
    return size / max(duration_s, MIN_DURATION_S)


class NullObserver:
    """Discards everything."""

    def build_finished(self, stats: BuildStats) -> None:
        pass

    def query_finished(self, stats: QueryStats) -> None:
        pass


class PrintObserver:
    """Prints progress lines to stdout."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def build_finished(self, stats: BuildStats) -> None:
        print(f"  Sieved {stats.sieve_bound:,} values in {stats.duration_s:.3f}s "
              f"({stats.throughput:,.0f} values/s)")
        print(f"  Cached {stats.prime_count:,} primes")

    def query_finished(self, stats: QueryStats) -> None:
        if self.verbose:
            print(f"  [{stats.start:,}, {stats.end:,}]: {stats.count:,} primes "
                  f"in {stats.duration_s * 1e6:.1f}us")


class LoggingObserver:
    """Reports through the standard logging module at DEBUG level."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("primecache")

    def build_finished(self, stats: BuildStats) -> None:
        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        self.logger.debug("Harvest operation duration(ms): %s",
                          f"{stats.duration_s * 1000:,.0f}")
        self.logger.debug("Prime cache initialised with %s values at %s values/s, %s primes.",
                          f"{stats.sieve_bound:,}", f"{stats.throughput:,.0f}",
                          f"{stats.prime_count:,}")

    def query_finished(self, stats: QueryStats) -> None:
        self.logger.debug("Selection [%d, %d] returned %d primes in %.3fms",
                          stats.start, stats.end, stats.count, stats.duration_s * 1000)
