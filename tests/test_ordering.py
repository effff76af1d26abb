"""
Tests for ordering rules and the binary insertion search.
"""

import pytest

from vcoll import ComparatorOrder, InvalidOrderingError, KeyOrder, Record, by_attribute
from vcoll.ordering import OrderingRule, insertion_point


def records(*values, name="n"):
    return [Record({name: value}) for value in values]


class TestCoerce:

    def test_none(self):
        assert OrderingRule.coerce(None) is None

    def test_string_is_attribute(self):
        rule = OrderingRule.coerce("name")
        assert isinstance(rule, KeyOrder)
        assert rule.attribute == "name"
        assert repr(rule) == "by_attribute('name')"

    def test_callable_is_key_function(self):
        rule = OrderingRule.coerce(lambda r: r.get("n"))
        assert isinstance(rule, KeyOrder)
        assert rule.attribute is None

    def test_rule_passes_through(self):
        rule = ComparatorOrder(lambda a, b: 0)
        assert OrderingRule.coerce(rule) is rule

    @pytest.mark.parametrize("value", [1, ["name"], {"by": "name"}])
    def test_rejects_other_values(self, value):
        with pytest.raises(InvalidOrderingError):
            OrderingRule.coerce(value)

    def test_variants_require_callables(self):
        with pytest.raises(InvalidOrderingError):
            KeyOrder("name")
        with pytest.raises(InvalidOrderingError):
            ComparatorOrder(None)


class TestSorting:

    def test_key_order(self):
        rule = by_attribute("n")
        assert [r.get("n") for r in rule.sorted(records(3, 1, 2))] == [1, 2, 3]

    def test_comparator_order(self):
        rule = ComparatorOrder(lambda a, b: b.get("n") - a.get("n"))
        assert [r.get("n") for r in rule.sorted(records(3, 1, 2))] == [3, 2, 1]

    def test_sort_is_stable(self):
        items = [Record(n=1, tag="x"), Record(n=0), Record(n=1, tag="y")]
        result = by_attribute("n").sorted(items)
        assert [r.get("tag") for r in result] == [None, "x", "y"]

    def test_missing_and_none_sort_first(self):
        items = [Record(n="b"), Record(), Record(n="a"), Record(n=None)]
        result = by_attribute("n").sorted(items)
        assert [r.get("n", "-") for r in result] == ["-", None, "a", "b"]

    def test_insert_among_missing_values(self):
        key = by_attribute("n").sort_key()
        members = [Record(), Record(n=1), Record(n=2)]
        assert insertion_point(members, Record(), key) == 1
        assert insertion_point(members, Record(n=0), key) == 1
        assert insertion_point(members, Record(n=3), key) == 3

    def test_is_sorted(self):
        rule = by_attribute("n")
        assert rule.is_sorted(records(1, 1, 2))
        assert not rule.is_sorted(records(2, 1))
        assert rule.is_sorted([])


class TestInsertionPoint:

    def test_empty(self):
        assert insertion_point([], Record(n=1), by_attribute("n").sort_key()) == 0

    @pytest.mark.parametrize("value, expected", [(0, 0), (2, 1), (4, 2), (9, 3)])
    def test_positions(self, value, expected):
        members = records(1, 3, 5)
        assert insertion_point(members, Record(n=value), by_attribute("n").sort_key()) == expected

    def test_lands_after_equals(self):
        members = records(1, 2, 2, 2, 3)
        assert insertion_point(members, Record(n=2), by_attribute("n").sort_key()) == 4

    def test_with_comparator(self):
        rule = ComparatorOrder(lambda a, b: b.get("n") - a.get("n"))
        members = records(5, 3, 1)
        assert insertion_point(members, Record(n=4), rule.sort_key()) == 1
