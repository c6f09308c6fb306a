"""
The contract every cached item must satisfy.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, TypeVar


class SilkComparable(ABC):
    """
    Base class for items held by a cache manager.

    The cache uses `is_same_as()` to locate items for update, removal and lookup,
    and `should_ignore()` to decide whether an item belongs in the cache file.
    Subclasses must be picklable.
    """

    @abstractmethod
    def is_same_as(self, other: Any) -> bool:
        """Whether this item represents the same thing as another."""

    @abstractmethod
    def should_ignore(self) -> bool:
        """Whether this item should be left out of the cache file."""


T = TypeVar("T", bound=SilkComparable)

# Decides whether an item should be removed by CacheManager.remove_where().
RemoveFilter = Callable[[T], bool]
