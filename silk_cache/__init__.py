"""
silk-cache: persist an ordered list of comparable items to a flat file, with
in-memory mutation and background read, find and commit.
"""

__version__ = "1.0.0"

from silk_cache.core.adapter import ItemAdapter, SilkAdapter
from silk_cache.core.feed import CachedFeed
from silk_cache.core.handler import Handler, ImmediateHandler, LoopHandler
from silk_cache.core.workers import shutdown_workers
from silk_cache.exceptions import (
    CacheArgumentError,
    CacheCommitError,
    CacheDecodeError,
    CacheLoadError,
    CacheStateError,
    SilkCacheError,
)
from silk_cache.models.comparable import SilkComparable
from silk_cache.models.config import CacheConfig
from silk_cache.storage.cache import CacheManager

__all__ = [
    "CacheArgumentError",
    "CacheCommitError",
    "CacheConfig",
    "CacheDecodeError",
    "CacheLoadError",
    "CacheManager",
    "CacheStateError",
    "CachedFeed",
    "Handler",
    "ImmediateHandler",
    "ItemAdapter",
    "LoopHandler",
    "SilkAdapter",
    "SilkCacheError",
    "SilkComparable",
    "__version__",
    "shutdown_workers",
]
