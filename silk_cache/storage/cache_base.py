"""
File and buffer ownership for a single named cache: lazy loading, commit, and the
worker/handler plumbing the cache manager builds on.
"""

import logging
import pickle
from collections.abc import Callable
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Generic

from pydantic import ValidationError

from silk_cache.core import workers
from silk_cache.core.handler import Handler, default_handler
from silk_cache.core.listeners import SimpleCommitCallback
from silk_cache.exceptions import (
    CacheArgumentError,
    CacheCommitError,
    CacheStateError,
)
from silk_cache.models.comparable import T
from silk_cache.models.config import CacheConfig
from silk_cache.storage.codec import iter_records, write_records

log = logging.getLogger(__name__)


class CacheStore(Generic[T]):
    """
    Owns the cache file and the in-memory buffer.

    The buffer is loaded from disk on first use, mutated in place, and dropped by
    `commit()`, after which the next access reloads it from the file.
    """

    def __init__(
        self,
        cache_name: str | None = None,
        cache_dir: Path | str | None = None,
        *,
        atomic_commit: bool = False,
        pickle_protocol: int = pickle.HIGHEST_PROTOCOL,
        handler: Handler | None = None,
    ):
        """
        Initializes the store and loads the buffer.

        Args:
            cache_name: Name of the cache, unique among caches in the same directory
            and valid as a file name. Defaults to "default"; case-folded.
            cache_dir: Directory that holds the cache file. Defaults to the "Silk"
            cache directory and is created if missing.
            atomic_commit: Write commits to a temporary file and rename it into place.
            pickle_protocol: Protocol used to serialize items.
            handler: Where asynchronous results are delivered. Defaults to the
            calling thread.

        Raises:
            CacheArgumentError: If the name or settings are invalid.
        """
        try:
            config = CacheConfig(
                cache_name=cache_name,
                cache_dir=cache_dir,
                atomic_commit=atomic_commit,
                pickle_protocol=pickle_protocol,
            )
        except ValidationError as e:
            raise CacheArgumentError(f"Invalid cache settings:\n{e}") from e
        self.config = config
        self.config.cache_dir.mkdir(parents=True, exist_ok=True)
        self._cache_file = config.cache_file
        self._handler = handler or default_handler()
        self.buffer: list[T] | None = None
        self._reload_if_necessary()

    @property
    def cache_name(self) -> str:
        return self.config.cache_name

    @property
    def cache_file(self) -> Path:
        return self._cache_file

    @property
    def handler(self) -> Handler:
        return self._handler

    @property
    def is_loaded(self) -> bool:
        """False between a commit and the next access to the buffer."""
        return self.buffer is not None

    def set_handler(self, handler: Handler):
        """
        Sets the handler used for callbacks from worker threads. Use this when the
        store was not created on the thread that should receive results.
        """
        self._handler = handler
        return self

    def _log(self, message: str) -> None:
        log.debug(f"{self._cache_file.name}: {message}")

    def _submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        return workers.submit(self._cache_file, fn, *args)

    def _post(self, fn: Callable[..., Any], *args: Any) -> None:
        self._handler.post(fn, *args)

    def _reload_if_necessary(self) -> list[T]:
        if self.buffer is None:
            self.buffer = self._load_items()
        return self.buffer

    def _load_items(self) -> list[T]:
        self._log("Reloading cache items to buffer.")
        results = list(iter_records(self._cache_file))
        self._log(f"Read {len(results)} items.")
        return results

    def read(self) -> list[T]:
        """
        Gets the items in the buffer, loading them from the cache file if the buffer
        was dropped by a commit. The returned list is the buffer itself.

        Raises:
            CacheLoadError: If the cache file is unreadable or corrupt.
        """
        return self._reload_if_necessary()

    def commit(self) -> bool:
        """
        Writes the buffer to the cache file on the calling thread and drops the
        buffer. An empty buffer deletes the file instead.

        Returns:
            Whether the file was written or removed.

        Raises:
            CacheStateError: If the buffer was already committed and not reloaded.
            CacheCommitError: If the file could not be written.
        """
        if self.buffer is None:
            raise CacheStateError(
                "The cache has already been committed; call force_reload() or read() "
                "before committing again."
            )
        if len(self.buffer) == 0:
            return self._delete_cache_file()

        kept = [item for item in self.buffer if not item.should_ignore()]
        if not kept:
            self._log(f"All {len(self.buffer)} items are ignored.")
            if not self._delete_cache_file():
                return False
            self.buffer = None
            return True
        try:
            count = write_records(
                self._cache_file,
                kept,
                protocol=self.config.pickle_protocol,
                atomic=self.config.atomic_commit,
            )
        except (OSError, pickle.PicklingError, TypeError, AttributeError) as e:
            raise CacheCommitError(
                f"Failed to write cache file '{self._cache_file}': {e}"
            ) from e
        self._log(f"Committed {count} items ({len(self.buffer) - count} ignored).")
        self.buffer = None
        return True

    def _delete_cache_file(self) -> bool:
        if not self._cache_file.exists():
            return True
        self._log("Deleting cache file.")
        try:
            self._cache_file.unlink()
        except OSError as e:
            log.warning(f"Could not delete {self._cache_file}: {e}")
            return False
        return True

    def commit_async(
        self,
        callback: SimpleCommitCallback | None = None,
        on_committed: Callable[[bool], None] | None = None,
    ) -> Future:
        """
        Commits on the cache's worker thread. Errors are never raised to the caller.

        Args:
            callback: Receives `on_error(exc)` through the handler if the commit
            fails.
            on_committed: Receives the result of `commit()` through the handler.

        Returns:
            A future resolving to None once the commit and its delivery are queued.
        """
        return self._submit(self._commit_job, callback, on_committed)

    def _commit_job(
        self,
        callback: SimpleCommitCallback | None,
        on_committed: Callable[[bool], None] | None,
    ) -> None:
        try:
            result = self.commit()
        except Exception as e:
            log.warning(f"{self._cache_file.name}: Cache commit error: {e}")
            log.debug("Full traceback:", exc_info=True)
            if callback is not None:
                self._post(callback.on_error, e)
            return
        if on_committed is not None:
            self._post(on_committed, result)
