"""
Tests for the sieve and compaction helpers.
"""

import numpy as np
import pytest

from primecache.primes import compact_flags, prime_flags_below, primes_below


SMALL_PRIMES = [2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47]
SMALL_COMPOSITES = [4, 6, 8, 9, 10, 12, 14, 15, 16, 18, 20, 21, 22, 24, 25]


def trial_division_primes(N):
    """Reference list of primes < N."""
    result = []
    for n in range(2, N):
        if all(n % d for d in range(2, int(n**0.5) + 1)):
            result.append(n)
    return result


class TestPrimeFlags:

    def test_length_is_bound(self):
        assert len(prime_flags_below(100)) == 100

    def test_zero_and_one_not_prime(self):
        flags = prime_flags_below(10)
        assert not flags[0]
        assert not flags[1]

    def test_known_primes_and_composites(self):
        flags = prime_flags_below(50)
        for p in SMALL_PRIMES:
            assert flags[p], f"{p} should be prime"
        for n in SMALL_COMPOSITES:
            assert not flags[n], f"{n} should not be prime"

    def test_bound_is_exclusive(self):
        """A prime equal to the bound is outside the sieve."""
        flags = prime_flags_below(13)
        assert len(flags) == 13
        assert flags[11]

    def test_perfect_square_bound(self):
        """The largest factor sqrt(N) must still be processed when N-1 needs it."""
        flags = prime_flags_below(50)
        assert not flags[49]
        flags = prime_flags_below(122)
        assert not flags[121]


    def test_max_factor_limits_sieving(self):
        """Stopping before sqrt(N) leaves squares of larger primes marked."""
        assert not prime_flags_below(50, max_factor=7)[49]
        assert prime_flags_below(50, max_factor=6)[49]
        assert np.array_equal(prime_flags_below(1000, max_factor=31), prime_flags_below(1000))


class TestPrimesBelow:

    @pytest.mark.parametrize("N", [3, 4, 5, 10, 100, 1000, 10_000])
    def test_matches_trial_division(self, N):
        assert primes_below(N).tolist() == trial_division_primes(N)

    def test_strictly_increasing(self):
        primes = primes_below(10_000)
        assert np.all(np.diff(primes) > 0)

    def test_prime_count_below_one_million(self):
        assert len(primes_below(10**6)) == 78498

    def test_dtype(self):
        assert primes_below(100).dtype == np.int64

    def test_compact_flags_preserves_order(self):
        flags = np.zeros(20, dtype=bool)
        flags[[17, 3, 11]] = True
        assert compact_flags(flags).tolist() == [3, 11, 17]


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
