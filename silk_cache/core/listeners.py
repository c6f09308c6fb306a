"""
Callback interfaces for asynchronous cache operations.
"""

from typing import Generic, Protocol, runtime_checkable

from silk_cache.models.comparable import T


class SimpleCommitCallback(Protocol):
    """Receives failures from `commit_async()`."""

    def on_error(self, error: Exception) -> None: ...


class FindCallback(Protocol, Generic[T]):
    """Receives the outcome of `find_async()`; exactly one method is called."""

    def on_found(self, item: T) -> None: ...

    def on_nothing(self) -> None: ...

    def on_error(self, error: Exception) -> None: ...


@runtime_checkable
class CacheLoadListener(Protocol):
    """
    Observes `read_async()` on behalf of whatever displays the cached items.

    `is_loading()` guards against starting a second load while one is running.
    """

    def is_loading(self) -> bool: ...

    def set_loading(self, loading: bool) -> None: ...

    def set_load_from_cache_complete(self, error: bool) -> None: ...

    def on_cache_empty(self) -> None: ...
