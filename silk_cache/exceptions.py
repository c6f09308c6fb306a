"""
Defines custom exceptions for the cache so callers can tell misuse, load faults,
and write faults apart.
"""


class SilkCacheError(Exception):
    """Base exception for all cache-specific errors."""


class CacheStateError(SilkCacheError, RuntimeError):
    """Raised when the cache is used in a state that does not allow the operation."""


class CacheArgumentError(SilkCacheError, ValueError):
    """Raised when a required argument is missing or invalid."""


class CacheLoadError(SilkCacheError, RuntimeError):
    """Raised when the cache file cannot be read into the buffer."""


class CacheDecodeError(CacheLoadError):
    """
    Raised when a record in the cache file is corrupt, truncated, or not a cacheable
    item.
    """


class CacheCommitError(SilkCacheError):
    """Raised when the buffer cannot be written to the cache file."""


class ConfigurationError(SilkCacheError):
    """Raised for issues related to configuration loading or validation."""
