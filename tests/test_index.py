"""
Tests for OrderedIndex.
"""

import pytest

from vcoll import Collection, Record, by_attribute
from vcoll.filters import accept_all, build_filter
from vcoll.index import OrderedIndex


@pytest.fixture
def base():
    return Collection([{"id": i, "n": n} for i, n in enumerate([5, 1, 4, 2, 3])])


class TestRebuild:

    def test_filters_in_base_order(self, base):
        index = OrderedIndex()
        index.rebuild(base, build_filter(lambda r: r.get("n") > 2))
        assert [r.id for r in index] == [0, 2, 4]
        assert len(index) == index.length == 3

    def test_sorts_under_rule(self, base):
        index = OrderedIndex()
        index.rebuild(base, accept_all, by_attribute("n"))
        assert [r.get("n") for r in index] == [1, 2, 3, 4, 5]

    def test_registers_cid_and_id(self, base):
        index = OrderedIndex()
        index.rebuild(base, accept_all)
        record = base.get(3)
        assert index.lookup(3) is record
        assert index.lookup(record.cid) is record

    def test_rebuild_replaces_previous_state(self, base):
        index = OrderedIndex()
        index.rebuild(base, accept_all)
        index.rebuild(base, build_filter({"n": 1}))
        assert [r.id for r in index] == [1]
        assert index.lookup(0) is None


class TestInsertRemove:

    def test_insert_follows_base_order(self, base):
        index = OrderedIndex()
        index.rebuild(base, build_filter(lambda r: r.id in (0, 4)))
        assert index.insert(base.get(2), None, base) == 1
        assert [r.id for r in index] == [0, 2, 4]

    def test_insert_under_rule(self, base):
        index = OrderedIndex()
        index.rebuild(base, build_filter(lambda r: r.id != 4), by_attribute("n"))
        assert index.insert(base.get(4), by_attribute("n"), base) == 2

    def test_insert_is_idempotent(self, base):
        index = OrderedIndex()
        index.rebuild(base, accept_all)
        assert index.insert(base.get(1), None, base) == -1
        assert index.length == 5

    def test_remove_returns_prior_position(self, base):
        index = OrderedIndex()
        index.rebuild(base, accept_all)
        record = base.get(2)
        assert index.remove(record) == 2
        assert record not in index
        assert index.lookup(2) is None
        assert index.length == 4

    def test_remove_missing(self, base):
        index = OrderedIndex()
        assert index.remove(base.get(0)) == -1

    def test_lookup_unhashable(self):
        assert OrderedIndex().lookup(["not", "hashable"]) is None


class TestReorder:

    def test_reposition_after_key_change(self, base):
        rule = by_attribute("n")
        index = OrderedIndex()
        index.rebuild(base, accept_all, rule)
        record = base.get(1)  # n=1, first
        record.set(n=10, silent=True)
        assert index.reposition(record, rule) == 4
        assert rule.is_sorted(index.members)

    def test_reposition_in_place(self, base):
        rule = by_attribute("n")
        index = OrderedIndex()
        index.rebuild(base, accept_all, rule)
        assert index.reposition(base.get(4), rule) == 2

    def test_reorder_adopts_base_order(self, base):
        index = OrderedIndex()
        index.rebuild(base, build_filter(lambda r: r.get("n") % 2), by_attribute("n"))
        index.reorder(base)
        assert [r.id for r in index] == [0, 1, 4]

    def test_sort(self, base):
        index = OrderedIndex()
        index.rebuild(base, accept_all)
        index.sort(by_attribute("n"))
        assert [r.get("n") for r in index] == [1, 2, 3, 4, 5]


class TestRegister:

    def test_register_moves_changed_id(self):
        record = Record(id="old")
        index = OrderedIndex()
        index.register(record)
        record.set(id="new", silent=True)
        index.register(record)
        assert index.lookup("old") is None
        assert index.lookup("new") is record

    def test_unregister_cleans_stale_id(self):
        record = Record(id="old")
        index = OrderedIndex()
        index.register(record)
        record.set(id="new", silent=True)
        index.unregister(record)
        assert index.by_id == {}
