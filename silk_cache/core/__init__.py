"""
Threading and collaborator plumbing for the cache.

This package holds the handlers that deliver asynchronous results, the per-cache
worker threads, and the adapter and listener interfaces the cache manager talks
to. `CachedFeed` lives in `silk_cache.core.feed` and is imported from there, as
it depends on the storage layer.
"""

from .adapter import ItemAdapter, SilkAdapter
from .handler import Handler, ImmediateHandler, LoopHandler, default_handler
from .listeners import CacheLoadListener, FindCallback, SimpleCommitCallback
from .workers import shutdown_workers

__all__ = [
    "CacheLoadListener",
    "FindCallback",
    "Handler",
    "ImmediateHandler",
    "ItemAdapter",
    "LoopHandler",
    "SilkAdapter",
    "SimpleCommitCallback",
    "default_handler",
    "shutdown_workers",
]
