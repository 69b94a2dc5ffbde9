"""
Prime cache: sieve once, answer range queries from the ordered result.

The flags array needed by the sieve is discarded after compaction so only
the primes themselves (about N / ln N values) stay resident.

State machine
-------------
UNINITIALIZED -> BUILDING -> READY
                          -> FAILED

READY and FAILED are terminal. Queries are only served once the ready
barrier has been set, so no reader can observe a half-built cache.
"""

import logging
import threading
import time
from enum import Enum
from typing import Optional

import numpy as np

from .config import (
    CacheConfig,
    DEFAULT_MIN_START,
    DEFAULT_SIEVE_BOUND,
    is_integer,
)
from .errors import InvalidRange, NotInitialized
from .metrics import BuildStats, NullObserver, QueryStats
from .primes import compact_flags, prime_flags_below

logger = logging.getLogger(__name__)


class CacheState(Enum):
    UNINITIALIZED = "uninitialized"
    BUILDING = "building"
    READY = "ready"
    FAILED = "failed"


class PrimeCache:
    """
    Ordered, immutable cache of all primes below a sieve bound.

    Parameters
    ----------
    sieve_bound : int
        Exclusive upper limit of the cached universe. Must be > 2.
    min_start : int
        Smallest accepted query start (0 or 2).
    observer : object, optional
        Receives BuildStats and QueryStats. See primecache.metrics.
    build : bool
        Build eagerly (default). With False the cache starts UNINITIALIZED
        and build() must be called, possibly from another thread.

    Raises
    ------
    InvalidConfiguration
        If sieve_bound <= 2 or min_start is not an allowed policy.
    """

    def __init__(self, sieve_bound: int = DEFAULT_SIEVE_BOUND,
                 min_start: int = DEFAULT_MIN_START,
                 observer=None, build: bool = True):
        self.config = CacheConfig(sieve_bound=sieve_bound, min_start=min_start)
        self.observer = observer if observer is not None else NullObserver()

        self._state = CacheState.UNINITIALIZED
        self._primes: Optional[np.ndarray] = None
        self._stats: Optional[BuildStats] = None
        self._build_lock = threading.Lock()
        self._ready = threading.Event()

        if build:
            self.build()

    @classmethod
    def from_config(cls, config: CacheConfig, observer=None, build: bool = True) -> "PrimeCache":
        """Create a cache from a CacheConfig (see primecache.config.load_config)."""
        return cls(config.sieve_bound, config.min_start, observer=observer, build=build)

    @property
    def sieve_bound(self) -> int:
        return self.config.sieve_bound

    @property
    def min_start(self) -> int:
        return self.config.min_start

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def stats(self) -> BuildStats:
        """Build statistics. Raises NotInitialized before the cache is ready."""
        self._require_ready()
        return self._stats

    @property
    def primes(self) -> np.ndarray:
        """The full read-only cache."""
        return self._require_ready()

    def __len__(self) -> int:
        return len(self._require_ready())

    def __repr__(self) -> str:
        return (f"PrimeCache(sieve_bound={self.sieve_bound}, "
                f"min_start={self.min_start}, state={self._state.value})")

    # ------------------------------------------------------------------
    # Build phase
    # ------------------------------------------------------------------

    def build(self) -> "PrimeCache":
        """
        Run the sieve and freeze the result.

        Runs at most once; later calls on a READY cache return immediately.

        Raises
        ------
        NotInitialized
            If an earlier build failed.
        """
        with self._build_lock:
            if self._state is CacheState.READY:
                return self
            if self._state is CacheState.FAILED:
                raise NotInitialized("Prime cache build failed earlier; it cannot be rebuilt")

            self._state = CacheState.BUILDING
            t0 = time.perf_counter()
            try:
                primes = self._sieve()
            except BaseException:
                self._state = CacheState.FAILED
                self._ready.set()
                raise
            duration = time.perf_counter() - t0

            self._primes = primes
            self._stats = BuildStats(
                sieve_bound=self.sieve_bound,
                prime_count=len(primes),
                duration_s=duration,
            )
            self._state = CacheState.READY
            self._ready.set()

        self._notify("build_finished", self._stats)
        return self

    def _sieve(self) -> np.ndarray:
        flags = prime_flags_below(self.sieve_bound, self.config.max_factor)
        primes = compact_flags(flags)
        del flags
        primes.flags.writeable = False
        return primes

    def wait_ready(self, timeout: Optional[float] = None) -> "PrimeCache":
        """
        Block until the cache is READY.

        Raises
        ------
        NotInitialized
            If the timeout expires or the build failed.
        """
        if not self._ready.wait(timeout):
            raise NotInitialized(f"Prime cache not ready after {timeout}s")
        if self._state is CacheState.FAILED:
            raise NotInitialized("Prime cache build failed")
        return self

    def _notify(self, hook: str, stats) -> None:
        # Observers never change what the cache returns
        try:
            getattr(self.observer, hook)(stats)
        except Exception:
            logger.exception("Observer %s failed", hook)

    def _require_ready(self) -> np.ndarray:
        if not self._ready.is_set() or self._state is not CacheState.READY:
            raise NotInitialized(f"Prime cache is {self._state.value}, not ready for queries")
        return self._primes

    # ------------------------------------------------------------------
    # Query phase
    # ------------------------------------------------------------------

    def validate_range(self, start: int, end: int) -> None:
        """
        Check query bounds against this cache.

        Raises
        ------
        InvalidRange
            If a bound is not an integer, start > end, start < min_start
            or end >= sieve_bound.
        """
        if not is_integer(start) or not is_integer(end):
            raise InvalidRange(f"Range bounds must be integers, got [{start!r}, {end!r}]")
        if start > end:
            raise InvalidRange(f"Range start {start} is greater than end {end}")
        if start < self.min_start:
            raise InvalidRange(f"Range start {start} is below the minimum {self.min_start}")
        if end >= self.sieve_bound:
            raise InvalidRange(
                f"Range end {end} is outside the sieve bound {self.sieve_bound}")

    def range_query(self, start: int, end: int) -> np.ndarray:
        """
        Return cached primes p with start <= p <= end.

        Parameters
        ----------
        start, end : int
            Inclusive bounds.

        Returns
        -------
        np.ndarray
            Read-only ascending view into the cache; empty if no prime
            lies in the interval.
        """
        primes = self._require_ready()
        self.validate_range(start, end)

        t0 = time.perf_counter()
        lo = np.searchsorted(primes, start, side="left")
        hi = np.searchsorted(primes, end, side="right")
        result = primes[lo:hi]
        self._notify("query_finished",
                     QueryStats(start, end, len(result), time.perf_counter() - t0))
        return result

    def linear_range_query(self, start: int, end: int) -> np.ndarray:
        """
        Same result as range_query using a left-to-right scan.

        O(pi(end)) per call; kept as a correctness baseline.
        """
        primes = self._require_ready()
        self.validate_range(start, end)

        t0 = time.perf_counter()
        start_index = None
        end_index = -1
        for index, value in enumerate(primes):
            if value > end:
                break
            if start_index is None and value >= start:
                start_index = index
            end_index = index

        if start_index is None:
            result = primes[:0]
        else:
            result = primes[start_index:end_index + 1]
        self._notify("query_finished",
                     QueryStats(start, end, len(result), time.perf_counter() - t0))
        return result

    def primes_up_to(self, value: int) -> np.ndarray:
        """Return all cached primes <= value. Equivalent to range_query(min_start, value)."""
        self._require_ready()
        if is_integer(value) and value < self.min_start:
            raise InvalidRange(f"Primes can only be harvested for values >= {self.min_start}")
        return self.range_query(self.min_start, value)
