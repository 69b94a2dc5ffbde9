"""
Tests for build/query statistics, observers and text reporting.
"""

import logging

import numpy as np
import pytest

from primecache.cache import PrimeCache
from primecache.metrics import (
    BuildStats,
    LoggingObserver,
    MIN_DURATION_S,
    NullObserver,
    PrintObserver,
    QueryStats,
    sieve_rate,
)
from primecache.report import format_count, format_primes, summarize


class RecordingObserver:
    def __init__(self):
        self.builds = []
        self.queries = []

    def build_finished(self, stats):
        self.builds.append(stats)

    def query_finished(self, stats):
        self.queries.append(stats)


class TestStats:

    def test_sieve_rate(self):
        assert sieve_rate(1000, 2.0) == 500.0

    def test_zero_duration_is_floored(self):
        assert sieve_rate(1000, 0.0) == 1000 / MIN_DURATION_S

    def test_build_stats_properties(self):
        stats = BuildStats(sieve_bound=100, prime_count=25, duration_s=0.5)
        assert stats.throughput == 200.0
        assert stats.density == 0.25


class TestObservers:

    def test_observer_receives_build_and_queries(self):
        observer = RecordingObserver()
        cache = PrimeCache(100, observer=observer)
        cache.range_query(10, 20)
        cache.linear_range_query(10, 20)

        assert len(observer.builds) == 1
        assert observer.builds[0].prime_count == 25
        assert [(q.start, q.end, q.count) for q in observer.queries] == [(10, 20, 4), (10, 20, 4)]
        assert all(isinstance(q, QueryStats) for q in observer.queries)

    def test_failed_query_not_reported(self):
        observer = RecordingObserver()
        cache = PrimeCache(100, observer=observer)
        with pytest.raises(ValueError):
            cache.range_query(20, 10)
        assert observer.queries == []

    def test_results_independent_of_observer(self):
        observed = PrimeCache(1000, observer=RecordingObserver())
        plain = PrimeCache(1000)
        assert np.array_equal(observed.primes, plain.primes)
        assert isinstance(plain.observer, NullObserver)

    def test_print_observer(self, capsys):
        cache = PrimeCache(100, observer=PrintObserver(verbose=True))
        cache.range_query(10, 20)
        out = capsys.readouterr().out
        assert "Sieved 100 values" in out
        assert "Cached 25 primes" in out
        assert "[10, 20]: 4 primes" in out

    def test_print_observer_quiet_queries(self, capsys):
        cache = PrimeCache(100, observer=PrintObserver())
        capsys.readouterr()
        cache.range_query(10, 20)
        assert capsys.readouterr().out == ""

    def test_logging_observer(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="primecache"):
            cache = PrimeCache(100, observer=LoggingObserver())
            cache.range_query(10, 20)
        messages = [r.getMessage() for r in caplog.records]
        assert any("initialised with 100 values" in m for m in messages)
        assert any("Selection [10, 20] returned 4 primes" in m for m in messages)


    def test_raising_observer_does_not_break_cache(self, caplog):
        """A failing sink is logged; construction and queries still succeed."""
        class FailingObserver:
            def build_finished(self, stats):
                raise RuntimeError("sink down")

            def query_finished(self, stats):
                raise RuntimeError("sink down")

        with caplog.at_level(logging.ERROR, logger="primecache.cache"):
            cache = PrimeCache(100, observer=FailingObserver())
            assert cache.range_query(10, 20).tolist() == [11, 13, 17, 19]
            assert cache.linear_range_query(10, 20).tolist() == [11, 13, 17, 19]

        assert cache.stats.prime_count == 25
        failures = [r for r in caplog.records if r.name == "primecache.cache"]
        assert len(failures) == 3
        assert all(r.exc_info is not None for r in failures)

    def test_logging_observer_quiet_above_debug(self, caplog):
        with caplog.at_level(logging.INFO, logger="primecache"):
            cache = PrimeCache(100, observer=LoggingObserver())
            cache.range_query(10, 20)
        assert [r for r in caplog.records if r.name == "primecache"] == []


class TestReport:

    def test_format_count(self):
        assert format_count(2 ** 24) == "16,777,216"
        assert format_count(np.int64(1229)) == "1,229"

    def test_format_primes(self):
        cache = PrimeCache(30)
        assert format_primes(cache.range_query(10, 20)) == "11,13,17,19"
        assert format_primes([], sep=" ") == ""

    def test_summarize(self):
        summary = summarize(PrimeCache(100, min_start=2))
        assert summary['sieve_bound'] == 100
        assert summary['min_start'] == 2
        assert summary['prime_count'] == 25
        assert summary['largest_prime'] == 97
        assert summary['density'] == 0.25


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
