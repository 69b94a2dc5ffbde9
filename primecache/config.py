"""
Cache configuration.

Two deployments of the cache existed with different defaults; they are kept
here as named profiles over a single CacheConfig.
"""

import math
import numbers
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import InvalidConfiguration

DEFAULT_SIEVE_BOUND = 2 ** 24

# Allowed minimum query starts: 0 accepts any non-negative start,
# 2 rejects starts below the smallest prime.
MIN_START_POLICIES = (0, 2)
DEFAULT_MIN_START = 0

DEFAULT_CONFIG_PATH = Path("config/default.yaml")


class ConfigError(InvalidConfiguration):
    """Configuration file could not be read or contains unknown settings."""


def is_integer(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def validate_sieve_bound(sieve_bound) -> None:
    if not is_integer(sieve_bound):
        raise InvalidConfiguration(
            f"Sieve bound must be an integer, got {sieve_bound!r}")
    if sieve_bound <= 2:
        raise InvalidConfiguration(
            f"Sieve bound must be greater than 2, got {sieve_bound}")


def validate_min_start(min_start) -> None:
    if not is_integer(min_start) or min_start not in MIN_START_POLICIES:
        raise InvalidConfiguration(
            f"min_start must be one of {MIN_START_POLICIES}, got {min_start!r}")


@dataclass(frozen=True)
class CacheConfig:
    """
    Immutable settings for one PrimeCache.

    Parameters
    ----------
    sieve_bound : int
        Exclusive upper limit of the cached universe. Must be > 2.
    min_start : int
        Smallest accepted query start, one of MIN_START_POLICIES.
    """
    sieve_bound: int = DEFAULT_SIEVE_BOUND
    min_start: int = DEFAULT_MIN_START

    def __post_init__(self):
        validate_sieve_bound(self.sieve_bound)
        validate_min_start(self.min_start)

    @property
    def max_factor(self) -> int:
        """Largest factor the sieve has to process."""
        return math.isqrt(self.sieve_bound)


PROFILES: Dict[str, CacheConfig] = {
    "service": CacheConfig(sieve_bound=2 ** 26, min_start=0),
    "generator": CacheConfig(sieve_bound=2 ** 24, min_start=2),
}

_KNOWN_KEYS = {"profile", "sieve_bound", "sieve_exponent", "min_start"}


def profile(name: str) -> CacheConfig:
    """Return the named preset."""
    try:
        return PROFILES[name]
    except KeyError:
        raise ConfigError(
            f"Unknown profile {name!r}, expected one of {sorted(PROFILES)}") from None


def config_from_dict(data: Optional[Dict[str, Any]]) -> CacheConfig:
    """
    Build a CacheConfig from a parsed mapping.

    A ``profile`` key selects the base preset; ``sieve_bound``,
    ``sieve_exponent`` (bound = 2**exponent) and ``min_start`` override it.
    """
    data = dict(data or {})
    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise ConfigError(f"Unknown config keys: {sorted(unknown)}")
    if "sieve_bound" in data and "sieve_exponent" in data:
        raise ConfigError("Give either sieve_bound or sieve_exponent, not both")

    base = profile(data["profile"]) if data.get("profile") else CacheConfig()

    overrides = {}
    if "sieve_exponent" in data:
        exponent = data["sieve_exponent"]
        if not is_integer(exponent) or exponent < 2:
            raise ConfigError(f"sieve_exponent must be an integer >= 2, got {exponent!r}")
        overrides["sieve_bound"] = 2 ** exponent
    if "sieve_bound" in data:
        overrides["sieve_bound"] = data["sieve_bound"]
    if "min_start" in data:
        overrides["min_start"] = data["min_start"]

    return replace(base, **overrides)


def load_config(path: Optional[Union[str, Path]] = None) -> CacheConfig:
    """
    Load a CacheConfig from a YAML file.

    Parameters
    ----------
    path : str or Path, optional
        Config file. Defaults to config/default.yaml.

    Returns
    -------
    CacheConfig
    """
    path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(data).__name__}")

    return config_from_dict(data)
