"""Shared fixtures for the cache tests."""

from dataclasses import dataclass

import pytest

from silk_cache.core.handler import ImmediateHandler
from silk_cache.core.workers import shutdown_workers
from silk_cache.models.comparable import SilkComparable
from silk_cache.storage.cache import CacheManager


@dataclass
class FeedItem(SilkComparable):
    """A picklable cache item matched by id."""

    item_id: int
    title: str = ""
    ignore: bool = False

    def is_same_as(self, other) -> bool:
        return isinstance(other, FeedItem) and other.item_id == self.item_id

    def should_ignore(self) -> bool:
        return self.ignore


@pytest.fixture(autouse=True)
def _stop_workers():
    yield
    shutdown_workers(wait=True)


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "Silk"


@pytest.fixture
def make_cache(cache_dir):
    """Builds managers in the test cache directory with inline callbacks."""

    def _make(name: str = "feed", **kwargs) -> CacheManager:
        kwargs.setdefault("handler", ImmediateHandler())
        return CacheManager(name, cache_dir, **kwargs)

    return _make


@pytest.fixture
def items():
    return [FeedItem(i, f"item {i}") for i in range(1, 6)]
