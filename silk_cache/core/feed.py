"""
Lifecycle wiring between a displayed feed and its cache.

`CachedFeed` fills its adapter from the cache when it resumes, refreshes from a
caller-supplied loader when the cache is empty, and writes the adapter back to the
cache after every load and whenever the feed is hidden.
"""

import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Generic

from silk_cache.core.adapter import SilkAdapter
from silk_cache.core.handler import Handler
from silk_cache.exceptions import SilkCacheError
from silk_cache.models.comparable import T
from silk_cache.storage.cache import CacheManager

log = logging.getLogger(__name__)


class CachedFeed(Generic[T]):
    """
    A feed of items backed by a named cache. Implements the load listener
    interface so `read_async()` can report progress back to it.
    """

    def __init__(
        self,
        cache_title: str,
        cache_dir: Path | None = None,
        loader: Callable[[], Iterable[T]] | None = None,
        adapter: SilkAdapter[T] | None = None,
        handler: Handler | None = None,
    ):
        """
        Args:
            cache_title: Name of the feed's cache.
            cache_dir: Directory for the cache file; the "Silk" cache directory by
            default.
            loader: Fetches fresh items when the feed refreshes.
            adapter: Holds the displayed items; a new SilkAdapter by default.
            handler: Where cache callbacks are delivered. Defaults to the running
            event loop of the creating thread, or else to a queue that the owner
            must drain with `run_pending()`.
        """
        self.cache_title = cache_title
        self.cache_dir = cache_dir
        self.loader = loader
        self.adapter: SilkAdapter[T] = adapter if adapter is not None else SilkAdapter()
        self._handler = handler
        self._loading = False
        self._load_error = False
        self.cache: CacheManager[T] | None = None

    def on_create(self) -> None:
        """Creates the cache manager; call before any other lifecycle method."""
        self.cache = CacheManager(self.cache_title, self.cache_dir, handler=self._handler)

    def on_resume(self) -> None:
        self.perform_cache_read()

    def run_pending(self, timeout: float | None = 0.0) -> int:
        """
        Runs cache callbacks queued for this feed on the calling thread. Only
        needed with a queue handler; loop and inline handlers deliver on their own.

        Returns:
            The number of callbacks that ran.
        """
        return self.cache.handler.run_pending(timeout)

    def perform_cache_read(self) -> bool:
        """
        Starts loading the cache into the adapter unless a load is running.

        Returns:
            True if a load was started.
        """
        if self.is_loading():
            return False
        return self.cache.read_async(self.adapter, self) is not None

    def perform_refresh(self) -> None:
        """Loads fresh items from the loader and caches them."""
        if self.loader is None:
            log.debug(f"No loader set for feed '{self.cache_title}', nothing to refresh.")
            return
        self.set_loading(True)
        try:
            results = list(self.loader())
        except Exception as e:
            log.warning(f"Refreshing feed '{self.cache_title}' failed: {e}")
            self.set_load_complete(True)
            return
        self.on_post_load(results)

    def on_post_load(self, results: Iterable[T]) -> None:
        """Shows freshly loaded items and commits them to the cache."""
        self.adapter.set(results)
        self.set_load_complete(False)
        try:
            self.cache.set_adapter(self.adapter).commit()
        except SilkCacheError as e:
            log.error(f"Could not cache feed '{self.cache_title}': {e}")

    def on_visibility_change(self, visible: bool) -> None:
        """Commits the adapter in the background when the feed is hidden."""
        if visible or not self.adapter.is_changed():
            return
        self.cache.set_adapter(self.adapter).commit_async(self)

    def on_error(self, error: Exception) -> None:
        log.error(f"Background commit of feed '{self.cache_title}' failed: {error}")

    def is_loading(self) -> bool:
        return self._loading

    def set_loading(self, loading: bool) -> None:
        self._loading = loading

    @property
    def load_error(self) -> bool:
        """Whether the last load finished with an error."""
        return self._load_error

    def set_load_complete(self, error: bool) -> None:
        self._loading = False
        self._load_error = error

    def set_load_from_cache_complete(self, error: bool) -> None:
        """Called when a cache load finishes; equivalent to `set_load_complete()`."""
        self.set_load_complete(error)

    def on_cache_empty(self) -> None:
        """Called when the cache had nothing to show. Refreshes by default."""
        self.perform_refresh()
