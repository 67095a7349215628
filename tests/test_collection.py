"""Tests for CategoryCollection."""

import pytest

from clipshelf.core.clipboard import CategoryCollection
from tests.conftest import CountingStore, FakeResolver, FakeResource, make_resources

KEY = "clipshelf:clipboard:Default"


def _collection(store, resolver, name="Default"):
    return CategoryCollection(name, store, resolver)


class TestConstruction:
    def test_new_category_starts_empty_and_dirty(self, store, resolver):
        collection = _collection(store, resolver)
        assert len(collection) == 0
        assert collection.dirty is True

    def test_persisted_category_loads_clean(self, resources, resolver):
        store = CountingStore({KEY: "id-r2;id-r1"})
        collection = _collection(store, resolver)
        assert collection.items == [resources[1], resources[0]]
        assert collection.dirty is False

    def test_empty_persisted_value_means_no_items(self, resolver):
        collection = _collection(CountingStore({KEY: ""}), resolver)
        assert collection.items == []

    def test_key_uses_prefix_and_name(self, store, resolver):
        collection = CategoryCollection("Props", store, resolver, key_prefix="app:clip")
        assert collection.key == "app:clip:Props"

    def test_index_out_of_range_returns_none(self, store, resolver, resources):
        collection = _collection(store, resolver)
        collection.add(resources[:1])
        assert collection[0] is resources[0]
        assert collection[1] is None
        assert collection[-1] is None


class TestAdd:
    def test_add_appends_in_input_order(self, store, resolver, resources):
        collection = _collection(store, resolver)
        assert collection.add([resources[2], resources[0]]) == 2
        assert collection.items == [resources[2], resources[0]]

    def test_add_never_duplicates(self, store, resolver, resources):
        collection = _collection(store, resolver)
        r1, r2 = resources[0], resources[1]
        collection.add([r1, r2, r1])
        collection.add([r2, r1])
        collection.add([r1])
        assert collection.items == [r1, r2]

    def test_add_skips_invalid(self, store, resolver, resources):
        collection = _collection(store, resolver)
        dead = FakeResource("dead")
        dead.destroy()
        assert collection.add([None, dead, resources[0]]) == 1
        assert collection.items == [resources[0]]

    def test_add_of_only_duplicates_keeps_clean(self, resources, resolver):
        collection = _collection(CountingStore({KEY: "id-r1"}), resolver)
        collection.add([resources[0]])
        assert collection.dirty is False


class TestRemoval:
    def test_staged_removal_stays_visible_until_commit(self, store, resolver, resources):
        collection = _collection(store, resolver)
        collection.add(resources[:2])
        collection.stage_remove(resources[0])

        assert resources[0] in list(collection)
        assert collection.dirty is True

        assert collection.commit_removals() == 1
        assert collection.items == [resources[1]]
        assert collection.pending_removal == ()

    def test_stage_remove_is_idempotent(self, store, resolver, resources):
        collection = _collection(store, resolver)
        collection.add(resources[:1])
        collection.stage_remove(resources[0])
        collection.stage_remove(resources[0])
        assert collection.pending_removal == (resources[0],)

    def test_save_commits_staged_removals(self, store, resolver, resources):
        collection = _collection(store, resolver)
        collection.add(resources[:2])
        collection.stage_remove(resources[1])
        collection.save()
        assert collection.items == [resources[0]]
        assert store.get(KEY) == "id-r1"

    def test_remove_all_and_unpersist(self, resolver, resources):
        store = CountingStore({KEY: "id-r1;id-r2"})
        collection = _collection(store, resolver)
        collection.remove_all_and_unpersist()
        assert collection.items == []
        assert collection.dirty is True
        assert not store.has(KEY)
        assert store.deletes == [KEY]

    def test_clear_keeps_key_until_save(self, resolver):
        store = CountingStore({KEY: "id-r1"})
        collection = _collection(store, resolver)
        collection.clear()
        assert store.get(KEY) == "id-r1"
        collection.save()
        assert store.get(KEY) == ""


class TestSort:
    def test_sort_orders_by_name(self, store):
        b, a, c = make_resources("b", "a", "c")
        collection = _collection(store, FakeResolver(a, b, c))
        collection.add([b, a, c])
        collection.sort()
        assert [ref.name for ref in collection] == ["a", "b", "c"]
        assert collection.dirty is True

    def test_resort_keeps_order(self, store):
        refs = make_resources("a", "b", "c")
        collection = _collection(store, FakeResolver(*refs))
        collection.add(refs)
        collection.sort()
        collection.sort()
        assert collection.items == refs

    def test_sort_is_stable_for_equal_names(self, store):
        first = FakeResource("same", identifier="one")
        second = FakeResource("same", identifier="two")
        other = FakeResource("a")
        collection = _collection(store, FakeResolver(first, second, other))
        collection.add([first, second, other])
        collection.sort()
        assert collection.items == [other, first, second]


class TestSave:
    def test_clean_save_does_not_write(self, resolver):
        store = CountingStore({KEY: "id-r1"})
        collection = _collection(store, resolver)
        assert collection.save() is False
        assert collection.save_if_dirty() is False
        assert store.writes == []

    def test_forced_save_writes(self, resolver):
        store = CountingStore({KEY: "id-r1"})
        collection = _collection(store, resolver)
        assert collection.save(force=True) is True
        assert store.writes == [(KEY, "id-r1")]

    def test_save_clears_dirty(self, store, resolver, resources):
        collection = _collection(store, resolver)
        collection.add(resources[:1])
        collection.save()
        assert collection.dirty is False

    def test_empty_name_never_saves(self, store, resolver, resources):
        collection = _collection(store, resolver, name="")
        collection.add(resources[:1])
        assert collection.save(force=True) is False
        assert store.writes == []

    def test_save_skips_unaddressable(self, store, resolver, resources):
        transient = FakeResource("transient", identifier="")
        collection = _collection(store, resolver)
        collection.add([resources[0], transient])
        collection.save()
        assert store.get(KEY) == "id-r1"
        assert transient in collection

    def test_failed_write_keeps_dirty(self, resolver, resources):
        class RejectingStore(CountingStore):
            def set(self, key, value):
                super().set(key, value)
                return False

        collection = _collection(RejectingStore(), resolver)
        collection.add(resources[:1])
        assert collection.save() is False
        assert collection.dirty is True


class TestRoundTrip:
    def test_save_then_fresh_load_preserves_order(self, store, resolver, resources):
        collection = _collection(store, resolver)
        collection.add([resources[3], resources[1], resources[2]])
        collection.save()

        restored = _collection(store, resolver)
        assert restored.items == [resources[3], resources[1], resources[2]]

    def test_deleted_resource_dropped_on_load(self, store, resolver, resources):
        collection = _collection(store, resolver)
        collection.add(resources[:3])
        collection.save()

        resources[1].destroy()
        restored = _collection(store, resolver)
        assert restored.items == [resources[0], resources[2]]

    def test_load_is_noop_without_entry(self, store, resolver):
        collection = _collection(store, resolver)
        collection.load()
        assert collection.items == []

    @pytest.mark.parametrize("value, expected", [
        ("id-r1;;garbage;id-r1;", ["r1"]),
        (";;;", []),
        ("garbage", []),
    ])
    def test_load_tolerates_malformed_values(self, resolver, value, expected):
        collection = _collection(CountingStore({KEY: value}), resolver)
        assert [ref.name for ref in collection] == expected
