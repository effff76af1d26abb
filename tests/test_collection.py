"""
Tests for the base Collection.

Tests cover:
- Construction, lookup and positional access
- add / remove / set / reset with their notifications
- Ordered collections and explicit sorting
- Forwarding of record events
"""

import pytest

from vcoll import Collection, InvalidOperationError, Record, RecordSource


class Recorder:

    def __init__(self, emitter):
        self.events = []
        emitter.on("all", lambda event, *args: self.events.append((event, args)))

    def names(self):
        return [name for name, _ in self.events]


@pytest.fixture
def people():
    return Collection([
        {"id": 1, "name": "ada"},
        {"id": 2, "name": "grace"},
        {"id": 3, "name": "alan"},
    ])


class TestConstruction:

    def test_wraps_mappings_in_records(self, people):
        assert all(isinstance(r, Record) for r in people)
        assert len(people) == people.length == 3

    def test_custom_record_class(self):
        class Person(Record):
            pass

        people = Collection([{"id": 1}], record_class=Person)
        assert isinstance(people.at(0), Person)

    def test_construction_is_silent(self):
        people = Collection()
        recorder = Recorder(people)
        people.reset([{"id": 1}], silent=True)
        assert recorder.names() == []

    def test_satisfies_record_source(self, people):
        assert isinstance(people, RecordSource)

    def test_rejects_non_records(self):
        with pytest.raises(TypeError):
            Collection([42])


class TestLookup:

    def test_get_by_id_cid_record_and_mapping(self, people):
        ada = people.at(0)
        assert people.get(1) is ada
        assert people.get(ada.cid) is ada
        assert people.get(ada) is ada
        assert people.get({"id": 1}) is ada

    def test_get_missing(self, people):
        assert people.get(99) is None
        assert people.get(None) is None
        assert people.get({"name": "ada"}) is None
        assert people.get(["unhashable"]) is None

    def test_index_of_is_identity_based(self, people):
        assert people.index_of(people.get(3)) == 2
        assert people.index_of(Record(id=3)) == -1

    def test_helpers(self, people):
        assert people.pluck("name") == ["ada", "grace", "alan"]
        assert people.find_where({"name": "alan"}).id == 3
        assert [r.id for r in people.where({"name": "ada"})] == [1]
        assert people.first().id == 1
        assert people.last().id == 3
        assert [r.id for r in people.slice(1, 2)] == [2]
        assert people[1].id == 2
        assert 2 in people
        assert people.to_list() == list(people)


class TestAdd:

    def test_appends_and_notifies(self, people):
        recorder = Recorder(people)
        record = people.add({"id": 4, "name": "barbara"})
        assert people.at(3) is record
        assert recorder.events == [("add", (record, people, {"index": 3}))]

    def test_at_position(self, people):
        record = people.add({"id": 4}, at=1)
        assert people.index_of(record) == 1

    def test_list_returns_list(self, people):
        added = people.add([{"id": 4}, {"id": 5}], at=0)
        assert [r.id for r in added] == [4, 5]
        assert [r.id for r in people][:2] == [4, 5]

    def test_duplicates_are_skipped(self, people):
        recorder = Recorder(people)
        existing = people.get(1)
        assert people.add({"id": 1, "name": "other"}) is existing
        assert existing.get("name") == "ada"
        assert recorder.names() == []

    def test_merge(self, people):
        people.add({"id": 1, "name": "lovelace"}, merge=True)
        assert people.get(1).get("name") == "lovelace"
        assert len(people) == 3

    def test_ordered_collection_ignores_at(self):
        people = Collection([{"name": "c"}, {"name": "a"}], ordering="name")
        people.add({"name": "b"}, at=0)
        assert people.pluck("name") == ["a", "b", "c"]

    def test_silent(self, people):
        recorder = Recorder(people)
        people.add({"id": 4}, silent=True)
        assert recorder.names() == []


class TestRemove:

    def test_remove_by_id_notifies_prior_index(self, people):
        recorder = Recorder(people)
        removed = people.remove(2)
        assert removed.id == 2
        assert recorder.events == [("remove", (removed, people, {"index": 1}))]
        assert people.get(2) is None

    def test_remove_unknown(self, people):
        assert people.remove(99) is None
        assert people.remove([99]) == []

    def test_removed_record_events_no_longer_forwarded(self, people):
        record = people.remove(1)
        recorder = Recorder(people)
        record.set(name="gone")
        assert recorder.names() == []

    def test_push_pop_unshift_shift(self, people):
        people.push({"id": "last"})
        people.unshift({"id": "first"})
        assert people.first().id == "first"
        assert people.pop().id == "last"
        assert people.shift().id == "first"
        assert len(people) == 3

    def test_pop_empty(self):
        assert Collection().pop() is None
        assert Collection().shift() is None


class TestSetAndReset:

    def test_set_merges_adds_and_removes(self, people):
        recorder = Recorder(people)
        people.set([{"id": 1, "name": "lovelace"}, {"id": 4}])
        assert [r.id for r in people] == [1, 4]
        names = recorder.names()
        assert "change" in names
        assert names.count("add") == 1
        assert names.count("remove") == 2

    def test_set_without_remove(self, people):
        people.set([{"id": 4}], remove=False)
        assert len(people) == 4

    def test_reset_fires_single_event(self, people):
        recorder = Recorder(people)
        previous = list(people)
        people.reset([{"id": 9}])
        assert recorder.names() == ["reset"]
        _, (collection, options) = recorder.events[0]
        assert collection is people
        assert options["previous"] == previous
        assert [r.id for r in people] == [9]

    def test_reset_detaches_old_records(self, people):
        old = people.get(1)
        people.reset()
        recorder = Recorder(people)
        old.set(name="x")
        assert recorder.names() == []
        assert len(people) == 0


class TestSorting:

    def test_sort_without_ordering_raises(self, people):
        with pytest.raises(InvalidOperationError):
            people.sort()

    def test_order_by_sorts_and_notifies(self, people):
        recorder = Recorder(people)
        people.order_by("name")
        assert people.pluck("name") == ["ada", "alan", "grace"]
        assert recorder.events == [("sort", (people, {}))]

    def test_order_by_attribute_some_records_lack(self, people):
        people.add({"id": 4})
        people.order_by("name")
        assert [r.id for r in people] == [4, 1, 3, 2]

    def test_ordering_not_maintained_on_change(self):
        people = Collection([{"name": "a"}, {"name": "b"}], ordering="name")
        people.at(0).set(name="z")
        assert people.pluck("name") == ["z", "b"]
        people.sort()
        assert people.pluck("name") == ["b", "z"]


class TestRecordEvents:

    def test_change_events_forwarded(self, people):
        recorder = Recorder(people)
        ada = people.get(1)
        ada.set(name="lovelace")
        assert recorder.events == [
            ("change:name", (ada, "lovelace", {"changes": ["name"]})),
            ("change", (ada, {"changes": ["name"]})),
        ]

    def test_id_change_reindexes(self, people):
        ada = people.get(1)
        ada.set(id=10)
        assert people.get(10) is ada
        assert people.get(1) is None

    def test_record_without_id_gains_one(self):
        people = Collection([{"name": "anon"}])
        record = people.at(0)
        record.set(id="x")
        assert people.get("x") is record

    def test_custom_record_events_forwarded(self, people):
        recorder = Recorder(people)
        people.get(2).trigger("selected", people.get(2))
        assert recorder.names() == ["selected"]

    def test_to_json(self, people):
        assert people.to_json()[0] == {"id": 1, "name": "ada"}
