"""
Tests for Record and the UNSET sentinel.
"""

import copy

import pytest

from vcoll.records import UNSET, Record, next_cid


class TestUnset:

    def test_is_singleton_and_falsy(self):
        assert copy.copy(UNSET) is UNSET
        assert copy.deepcopy(UNSET) is UNSET
        assert not UNSET
        assert repr(UNSET) == "UNSET"

    def test_differs_from_none(self):
        assert UNSET is not None
        assert UNSET != None  # noqa: E711


class TestIdentity:

    def test_cids_are_unique(self):
        assert len({Record().cid for _ in range(50)}) == 50

    def test_next_cid_prefix(self):
        assert next_cid().startswith("c")
        assert next_cid("tmp").startswith("tmp")

    def test_id_comes_from_attribute(self):
        assert Record({"id": 5}).id == 5
        assert Record().id is None

    def test_kwargs_merge_over_mapping(self):
        record = Record({"a": 1, "b": 2}, b=3)
        assert record.attributes == {"a": 1, "b": 3}


class TestAttributes:

    def test_get_and_has_distinguish_missing_from_none(self):
        record = Record({"ginger": None})
        assert record.get("ginger") is None
        assert record.has("ginger")
        assert not record.has("missing")
        assert record.get("missing", UNSET) is UNSET
        assert "ginger" in record

    def test_getitem_raises_for_missing(self):
        with pytest.raises(KeyError):
            Record()["missing"]

    def test_attributes_is_a_copy(self):
        record = Record({"a": 1})
        record.attributes["a"] = 2
        assert record.get("a") == 1

    def test_to_dict_is_deep(self):
        record = Record({"tags": ["x"]})
        snapshot = record.to_dict()
        snapshot["tags"].append("y")
        assert record.get("tags") == ["x"]

    def test_keys(self):
        assert list(Record({"a": 1, "b": 2}).keys()) == ["a", "b"]


class TestSet:

    @pytest.fixture
    def record(self):
        return Record({"id": 1, "type": "a"})

    def test_fires_attribute_then_change(self, record):
        events = []
        record.on("all", lambda event, *args: events.append((event, args)))
        record.set(type="b", size=3)

        assert [name for name, _ in events] == ["change:type", "change:size", "change"]
        assert events[0][1][:2] == (record, "b")
        assert events[-1][1] == (record, {"changes": ["type", "size"]})

    def test_unchanged_values_are_silent(self, record):
        events = []
        record.on("all", lambda event, *args: events.append(event))
        record.set(type="a")
        assert events == []

    def test_silent(self, record):
        events = []
        record.on("all", lambda event, *args: events.append(event))
        record.set(type="b", silent=True)
        assert events == []
        assert record.get("type") == "b"

    def test_set_to_none_is_a_change(self, record):
        record.set(type=None)
        assert record.has("type")
        assert record.get("type") is None

    def test_unset_removes_attribute(self, record):
        events = []
        record.on("change:type", lambda r, value, options: events.append(value))
        record.unset("type")
        assert not record.has("type")
        assert events == [UNSET]

    def test_unset_missing_is_noop(self, record):
        events = []
        record.on("all", lambda event, *args: events.append(event))
        record.unset("missing")
        assert events == []

    def test_set_is_chainable(self, record):
        assert record.set(a=1).set(b=2) is record
        assert record.get("a") == 1 and record.get("b") == 2

    def test_set_accepts_mapping(self, record):
        record.set({"type": "c"})
        assert record.get("type") == "c"

    def test_changing_id(self, record):
        record.set(id=2)
        assert record.id == 2
