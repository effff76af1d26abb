"""
vcoll - live, filtered and sorted views over mutable record collections.

Main API:
    from vcoll import Collection, VirtualCollection, ComparatorOrder

    # A base collection of records
    tasks = Collection([
        {"id": 1, "done": False, "title": "write docs"},
        {"id": 2, "done": True, "title": "ship"},
    ])

    # A view that tracks it: only open tasks, sorted by title
    todo = VirtualCollection(tasks, filter={"done": False}, ordering="title")

    # Mutations on the base flow into the view incrementally
    tasks.add({"id": 3, "done": False, "title": "add tests"})
    tasks.get(1).set(done=True)
    todo.pluck("title")     # ['add tests']

    # Views stack, and re-emit add/remove/change/reset/sort in their own order
    urgent = VirtualCollection(todo, filter=lambda t: "!" in t.get("title"))
    urgent.on("add", lambda record, view, options: print(options["index"]))

    # Tear down when done
    urgent.stop_listening()
"""

from .collection import Collection
from .errors import (
    InvalidFilterError,
    InvalidOperationError,
    InvalidOrderingError,
    VcollError,
)
from .events import Events, Listener, Subscription
from .filters import AttributeMatch, FilterSpec, Predicate, build_filter
from .ordering import ComparatorOrder, KeyOrder, OrderingRule, by_attribute
from .protocols import RecordSequence, RecordSource
from .records import UNSET, Record
from .virtual import VirtualCollection

__version__ = "0.4.0"
__all__ = [
    # Collections
    "Collection",
    "VirtualCollection",
    "Record",
    "UNSET",
    # Filters
    "FilterSpec",
    "Predicate",
    "AttributeMatch",
    "build_filter",
    # Ordering
    "OrderingRule",
    "KeyOrder",
    "ComparatorOrder",
    "by_attribute",
    # Events
    "Events",
    "Listener",
    "Subscription",
    # Protocols
    "RecordSource",
    "RecordSequence",
    # Errors
    "VcollError",
    "InvalidFilterError",
    "InvalidOrderingError",
    "InvalidOperationError",
]
