"""
Caches any SilkComparable item locally in a file, with in-memory mutation and
background read, find and commit.
"""

import asyncio
import logging
from collections.abc import Iterable, Iterator
from concurrent.futures import Future

from silk_cache.core.adapter import ItemAdapter
from silk_cache.core.listeners import CacheLoadListener, FindCallback
from silk_cache.exceptions import CacheArgumentError
from silk_cache.models.comparable import RemoveFilter, T
from silk_cache.models.config import CacheConfig
from silk_cache.storage.cache_base import CacheStore

log = logging.getLogger(__name__)


class CacheManager(CacheStore[T]):
    """
    Item-level operations over a cache file.

    Lookups, updates and removals by value use `is_same_as()` and act on the first
    match in buffer order only. Mutations touch the in-memory buffer; nothing is
    written until `commit()` or `commit_async()`.

    Usage:
        cache = CacheManager("feed")
        cache.append_all(items).commit()
    """

    @classmethod
    def from_config(cls, config: CacheConfig, **kwargs) -> "CacheManager[T]":
        """Creates a manager from a validated configuration."""
        return cls(
            config.cache_name,
            config.cache_dir,
            atomic_commit=config.atomic_commit,
            pickle_protocol=config.pickle_protocol,
            **kwargs,
        )

    def force_reload(self) -> "CacheManager[T]":
        """Discards the buffer, including uncommitted changes, and reloads it."""
        self.buffer = None
        self._reload_if_necessary()
        return self

    def append(self, item: T | None) -> "CacheManager[T]":
        """Appends a single item to the cache."""
        if item is None or item.should_ignore():
            self._log("Item passed to append() was None or marked for ignoring.")
            return self
        self._reload_if_necessary().append(item)
        self._log("Appended 1 item to the cache.")
        return self

    def append_all(self, items: Iterable[T] | None) -> "CacheManager[T]":
        """Appends a collection of items, skipping any marked for ignoring."""
        items = list(items) if items is not None else []
        if not items:
            self._log("Collection passed to append_all() was None or empty.")
            return self
        buffer = self._reload_if_necessary()
        count = 0
        for item in items:
            if item is None or item.should_ignore():
                continue
            buffer.append(item)
            count += 1
        self._log(f"Appended {count} items to the cache.")
        return self

    def append_adapter(self, adapter: ItemAdapter[T] | None) -> "CacheManager[T]":
        """
        Appends the contents of an adapter and marks the adapter unchanged. An
        adapter that has not changed since its last reset is skipped.
        """
        if adapter is None:
            self._log("Adapter passed to append_adapter() was None.")
            return self
        if not adapter.is_changed():
            self._log("The adapter has not been changed, skipped appending.")
            return self
        adapter.reset_changed()
        return self.append_all(adapter.items)

    def update(self, item: T | None, append_if_not_found: bool = False) -> bool:
        """
        Replaces the first item in the cache that `is_same_as()` the given one.

        Args:
            append_if_not_found: Append the item to the end of the cache when no
            match is found.

        Returns:
            True if an item was replaced or appended.
        """
        if item is None or item.should_ignore():
            self._log("Item passed to update() was None or marked for ignoring.")
            return False
        buffer = self._reload_if_necessary()
        for i, existing in enumerate(buffer):
            if existing.is_same_as(item):
                buffer[i] = item
                self._log("Updated 1 item in the cache.")
                return True
        if append_if_not_found:
            buffer.append(item)
            self._log("Item not found for update(), appended it instead.")
            return True
        return False

    def set(self, items: Iterable[T] | None) -> "CacheManager[T]":
        """Replaces every item in the cache. Equivalent to clear() then append_all()."""
        self.clear()
        return self.append_all(items)

    def set_adapter(self, adapter: ItemAdapter[T]) -> "CacheManager[T]":
        """
        Replaces every item in the cache with the adapter's contents. Nothing happens
        if the adapter has not changed.
        """
        if not adapter.is_changed():
            self._log("Adapter was not changed, cancelling call to set_adapter().")
            return self
        self.clear()
        return self.append_adapter(adapter)

    def remove_at(self, index: int) -> "CacheManager[T]":
        """
        Removes the item at an index.

        Raises:
            IndexError: If the index is out of range.
        """
        del self._reload_if_necessary()[index]
        self._log(f"Removed item at index {index}.")
        return self

    def remove(self, item: T | None) -> "CacheManager[T]":
        """Removes the first item in the cache that `is_same_as()` the given one."""
        if item is None:
            self._log("Item passed to remove() was None.")
            return self
        return self.remove_where(lambda existing: existing.is_same_as(item), True)

    def remove_where(
        self, remove_filter: RemoveFilter[T] | None, remove_one: bool = False
    ) -> "CacheManager[T]":
        """
        Removes every item the filter accepts.

        Args:
            remove_filter: Called with each item; returns True for items to remove.
            remove_one: Stop after the first match.

        Raises:
            CacheArgumentError: If no filter is given.
        """
        if remove_filter is None:
            raise CacheArgumentError("You must specify a remove filter.")
        buffer = self._reload_if_necessary()
        if not buffer:
            self._log("Cache buffer is empty.")
            return self
        remove_indexes = []
        for i, item in enumerate(buffer):
            if remove_filter(item):
                remove_indexes.append(i)
                if remove_one:
                    break
        for i in reversed(remove_indexes):
            del buffer[i]
        self._log(f"Removed {len(remove_indexes)} items from the cache.")
        return self

    def find(self, query: T | None) -> T | None:
        """
        Finds the first item in the cache that `is_same_as()` the query.

        Returns:
            The cached item, or None if nothing matched.
        """
        if query is None:
            self._log("Item passed to find() was None.")
            return None
        buffer = self._reload_if_necessary()
        self._log(f"Searching {len(buffer)} items...")
        for item in buffer:
            if item.is_same_as(query):
                return item
        return None

    def clear(self) -> "CacheManager[T]":
        """Removes every item from the cache."""
        if self.buffer is None:
            self.buffer = []
        else:
            self.buffer.clear()
        self._log("Cache was cleared.")
        return self

    def size(self) -> int:
        """The number of items in the cache."""
        return len(self._reload_if_necessary())

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._reload_if_necessary()))

    def read_async(
        self, adapter: ItemAdapter[T], listener: CacheLoadListener | None = None
    ) -> Future | None:
        """
        Loads the cache into an adapter on the worker thread. The adapter and
        listener are only touched through the handler.

        Args:
            adapter: Receives the cached items.
            listener: Optional observer notified when loading finishes or the cache
            is empty.

        Returns:
            The worker future, or None if the listener is already loading.

        Raises:
            CacheArgumentError: If no adapter is given.
        """
        if adapter is None:
            raise CacheArgumentError("The adapter parameter cannot be None.")
        if listener is not None:
            if listener.is_loading():
                self._log("A cache load is already in progress.")
                return None
            listener.set_loading(True)
        return self._submit(self._read_job, adapter, listener)

    def _read_job(
        self, adapter: ItemAdapter[T], listener: CacheLoadListener | None
    ) -> None:
        try:
            snapshot = list(self.read())
        except Exception as e:
            log.warning(f"{self.cache_file.name}: Cache read error: {e}")
            log.debug("Full traceback:", exc_info=True)
            self._post(self._deliver_read_error, adapter, listener)
            return
        if not snapshot:
            self._post(self._deliver_empty, adapter, listener)
        else:
            self._post(self._deliver_items, adapter, listener, snapshot)

    @staticmethod
    def _deliver_empty(
        adapter: ItemAdapter[T], listener: CacheLoadListener | None
    ) -> None:
        adapter.clear()
        if listener is not None:
            listener.set_loading(False)
            listener.set_load_from_cache_complete(False)
            listener.on_cache_empty()
        adapter.reset_changed()

    @staticmethod
    def _deliver_items(
        adapter: ItemAdapter[T], listener: CacheLoadListener | None, items: list[T]
    ) -> None:
        adapter.set(items)
        if listener is not None:
            listener.set_loading(False)
            listener.set_load_from_cache_complete(False)
        adapter.reset_changed()

    @staticmethod
    def _deliver_read_error(
        adapter: ItemAdapter[T], listener: CacheLoadListener | None
    ) -> None:
        if listener is not None:
            listener.set_loading(False)
            listener.set_load_from_cache_complete(True)
            if adapter.count() == 0:
                listener.on_cache_empty()
        adapter.reset_changed()

    def find_async(self, query: T | None, callback: FindCallback[T]) -> Future:
        """
        Finds an item on the worker thread and reports the outcome to the callback
        through the handler. Errors are delivered to `callback.on_error()`.

        Raises:
            CacheArgumentError: If no callback is given.
        """
        if callback is None:
            raise CacheArgumentError("You must specify a find callback.")
        return self._submit(self._find_job, query, callback)

    def _find_job(self, query: T | None, callback: FindCallback[T]) -> None:
        try:
            result = self.find(query)
        except Exception as e:
            log.warning(f"{self.cache_file.name}: Cache find error: {e}")
            log.debug("Full traceback:", exc_info=True)
            self._post(callback.on_error, e)
            return
        if result is None:
            self._post(callback.on_nothing)
        else:
            self._post(callback.on_found, result)

    async def aread(self) -> list[T]:
        """Awaitable read on the cache's worker; returns a copy of the buffer."""
        buffer = await asyncio.wrap_future(self._submit(self.read))
        return list(buffer)

    async def afind(self, query: T | None) -> T | None:
        """Awaitable `find()` on the cache's worker."""
        return await asyncio.wrap_future(self._submit(self.find, query))

    async def acommit(self) -> bool:
        """Awaitable `commit()` on the cache's worker. Errors are raised."""
        return await asyncio.wrap_future(self._submit(self.commit))
