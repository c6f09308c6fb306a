"""
The item source a cache manager reads from and loads into.
"""

from collections.abc import Iterable, Iterator
from typing import Generic, Protocol, runtime_checkable

from silk_cache.models.comparable import T


@runtime_checkable
class ItemAdapter(Protocol[T]):
    """
    The minimal surface the cache manager needs from a list of displayed items.

    `is_changed()` reports whether the items were mutated since the last
    `reset_changed()`, letting the cache skip writes when nothing changed.
    """

    @property
    def items(self) -> list[T]: ...

    def is_changed(self) -> bool: ...

    def reset_changed(self) -> None: ...

    def set(self, items: Iterable[T]) -> None: ...

    def clear(self) -> None: ...

    def count(self) -> int: ...


class SilkAdapter(Generic[T]):
    """
    A list of items that tracks whether it changed.

    Every mutator marks the adapter as changed; `reset_changed()` marks it clean
    again. Matching for update, contains and remove uses `is_same_as()`.
    """

    def __init__(self, items: Iterable[T] | None = None):
        self._items: list[T] = list(items) if items else []
        self._changed = False

    @property
    def items(self) -> list[T]:
        return self._items

    def add(self, item: T) -> None:
        self._changed = True
        self._items.append(item)

    def insert(self, index: int, item: T) -> None:
        self._changed = True
        self._items.insert(index, item)

    def extend(self, items: Iterable[T]) -> None:
        for item in items:
            self.add(item)

    def update(self, item: T, add_if_not_found: bool = True) -> bool:
        """
        Replaces the first item that `is_same_as()` the given one. Only one item is
        ever replaced per call.

        Returns:
            True if the item was replaced or added.
        """
        for i, existing in enumerate(self._items):
            if item.is_same_as(existing):
                self._items[i] = item
                self._changed = True
                return True
        if add_if_not_found:
            self.add(item)
            return True
        return False

    def set(self, items: Iterable[T]) -> None:
        """Replaces all items."""
        self._changed = True
        self._items = list(items)

    def contains(self, item: T) -> bool:
        return any(item.is_same_as(existing) for existing in self._items)

    def remove_at(self, index: int) -> None:
        self._changed = True
        del self._items[index]

    def remove(self, item: T) -> None:
        """Removes the first item that `is_same_as()` the given one."""
        for i, existing in enumerate(self._items):
            if item.is_same_as(existing):
                self.remove_at(i)
                return

    def clear(self) -> None:
        self._changed = True
        self._items.clear()

    def count(self) -> int:
        return len(self._items)

    def is_changed(self) -> bool:
        return self._changed

    def reset_changed(self) -> None:
        """Marks the adapter unchanged until the next mutation."""
        self._changed = False

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]
