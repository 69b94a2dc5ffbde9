"""
Error types raised by the prime cache.

Every failure is reported to the caller; nothing is clamped or retried.
"""


class PrimeCacheError(Exception):
    """Base class for all prime cache failures."""


class InvalidConfiguration(PrimeCacheError, ValueError):
    """Sieve bound or minimum-start policy is unusable. Fatal to the instance."""


class InvalidRange(PrimeCacheError, ValueError):
    """Query bounds rejected. The cache itself stays valid."""


class NotInitialized(PrimeCacheError, RuntimeError):
    """Query issued before the cache reached the Ready state."""
