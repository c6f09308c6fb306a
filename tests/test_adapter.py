"""Tests for the list-backed adapter."""

from conftest import FeedItem

from silk_cache.core.adapter import ItemAdapter, SilkAdapter


class TestSilkAdapter:
    """Changed tracking and first-match helpers."""

    def test_starts_unchanged(self):
        adapter = SilkAdapter([FeedItem(1)])

        assert not adapter.is_changed()
        assert adapter.count() == 1

    def test_every_mutator_marks_changed(self):
        mutations = [
            lambda a: a.add(FeedItem(9)),
            lambda a: a.insert(0, FeedItem(9)),
            lambda a: a.set([FeedItem(9)]),
            lambda a: a.remove_at(0),
            lambda a: a.remove(FeedItem(1)),
            lambda a: a.clear(),
            lambda a: a.update(FeedItem(1, "new")),
        ]
        for mutate in mutations:
            adapter = SilkAdapter([FeedItem(1)])
            mutate(adapter)
            assert adapter.is_changed()

    def test_reset_changed(self):
        adapter = SilkAdapter()
        adapter.add(FeedItem(1))
        adapter.reset_changed()

        assert not adapter.is_changed()

    def test_update_replaces_first_match(self):
        adapter = SilkAdapter([FeedItem(1, "a"), FeedItem(1, "b")])

        assert adapter.update(FeedItem(1, "new"))
        assert [item.title for item in adapter] == ["new", "b"]

    def test_update_without_add(self):
        adapter = SilkAdapter()

        assert not adapter.update(FeedItem(1), add_if_not_found=False)
        assert adapter.count() == 0
        assert not adapter.is_changed()

    def test_contains_and_remove(self):
        adapter = SilkAdapter([FeedItem(1), FeedItem(2)])

        assert adapter.contains(FeedItem(2))
        adapter.remove(FeedItem(2))
        assert not adapter.contains(FeedItem(2))
        assert adapter[0] == FeedItem(1)

    def test_satisfies_adapter_protocol(self):
        assert isinstance(SilkAdapter(), ItemAdapter)
