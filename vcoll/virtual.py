"""
Virtual collections: live, filtered, optionally sorted views.

A ``VirtualCollection`` listens to its base (a ``Collection`` or another
``VirtualCollection``) and keeps an :class:`~vcoll.index.OrderedIndex` of the
base records its filter accepts. Each base notification is translated into at
most one notification of its own, with positions rewritten into the view's
coordinates:

    base add      accepted, not yet a member      -> add
    base remove   member                          -> remove
    base change   accepted, member                -> change
                  accepted, not a member          -> add
                  rejected, member                -> remove
    base reset                                    -> rebuild, reset
    base sort     no own ordering                 -> reorder, sort

A view with its own ordering that moves a member because its sort key changed
emits ``sort`` before the ``change``, so views stacked on it re-sync their
order.

Mutating calls on the view (add, remove, set, reset, push, pop, unshift,
shift) are forwarded to the base unchanged; the view's own state only ever
changes when the base's notification comes back.

Handlers run synchronously inside the base mutation. A handler must not mutate
the base again while being notified.

Example:
    base = Collection([{"type": "a"}, {"type": "b"}])
    only_a = VirtualCollection(base, filter={"type": "a"})
    only_a.on("add", lambda record, view, options: print(options["index"]))
    base.add({"type": "a"})    # prints 1
"""

import logging
from typing import Any, Callable, Iterator, Optional

from .collection import Collection
from .errors import InvalidOperationError
from .events import Events, Listener, Subscription
from .filters import FilterSpec, build_filter, is_positional
from .index import OrderedIndex
from .ordering import OrderingRule
from .protocols import RecordSequence, RecordSource, record_key
from .records import Record

logger = logging.getLogger(__name__)

# Forwarded verbatim to the base collection.
MUTATORS = ("add", "remove", "set", "reset", "push", "pop", "unshift", "shift")


class VirtualCollection(RecordSequence, Listener):
    """
    A filtered, optionally re-ordered live view over a record source.

    Args:
        collection: The base; anything implementing ``RecordSource``
        filter: ``FilterSpec``, attribute mapping, predicate or ``None``
        ordering: ``OrderingRule``, attribute name, key function or ``None``
            to follow the base's order
        name: Optional label used in ``repr`` and log messages
        close_with: Emitter whose ``close`` event tears the view down
        destroy_with: Emitter whose ``destroy`` event tears the view down

    Raises:
        InvalidFilterError: If ``filter`` is not a valid specification
        InvalidOrderingError: If ``ordering`` is not a valid rule
    """

    def __init__(
        self,
        collection: RecordSource,
        filter: Any = None,
        ordering: Any = None,
        *,
        name: Optional[str] = None,
        close_with: Any = None,
        destroy_with: Any = None,
    ):
        Listener.__init__(self)
        self.name = name
        self.collection = collection
        self.filter_spec: Optional[FilterSpec] = FilterSpec.coerce(filter)
        self.accepts = build_filter(self.filter_spec)
        self.ordering: Optional[OrderingRule] = OrderingRule.coerce(ordering)
        self._events = Events()
        self._index = OrderedIndex()

        root = collection
        while isinstance(root, VirtualCollection):
            root = root.collection
        self.root = root

        if close_with is not None:
            self.bind_lifecycle(close_with, "close")
        if destroy_with is not None:
            self.bind_lifecycle(destroy_with, "destroy")

        self.listen_to(self.collection, "all", self._handle_parent_event)
        self._rebuild_index()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[Any]:
        return iter(self._index.members)

    def __len__(self) -> int:
        return self._index.length

    @property
    def length(self) -> int:
        return self._index.length

    def at(self, index: int) -> Any:
        return self._index.members[index]

    def get(self, key: Any) -> Optional[Any]:
        """
        Look up a member by record, ``cid``, ``id`` or ``{"id": ...}``.

        Answered from this view's own lookup table; no ancestor is consulted.
        """
        key = record_key(key)
        if key is None:
            return None
        return self._index.lookup(key)

    def index_of(self, record: Any) -> int:
        return self._index.position(record)

    # ------------------------------------------------------------------
    # Filter, ordering, lifecycle
    # ------------------------------------------------------------------

    def update_filter(self, filter: Any) -> "VirtualCollection":
        """
        Replace the membership filter and rebuild.

        Fires ``filter`` and then ``reset``. An invalid specification raises
        before anything changes.
        """
        spec = FilterSpec.coerce(filter)
        accepts = build_filter(spec)
        self.filter_spec = spec
        self.accepts = accepts
        self._rebuild_index()
        self.trigger("filter", self, filter)
        self.trigger("reset", self, {"filter": filter})
        return self

    def sort(self, *, silent: bool = False) -> "VirtualCollection":
        """
        Re-sort the index under this view's ordering rule.

        Raises:
            InvalidOperationError: If the view has no ordering rule
        """
        if self.ordering is None:
            raise InvalidOperationError(
                f"{self!r} has no ordering rule; it follows its base's order"
            )
        self._index.sort(self.ordering)
        if not silent:
            self.trigger("sort", self, {})
        return self

    def order_via_parent(self, options: Optional[dict] = None) -> None:
        """Adopt the base's current order for the current members."""
        options = options or {}
        self._index.reorder(self.collection)
        if not options.get("silent"):
            self.trigger("sort", self, options)

    def bind_lifecycle(self, emitter: Any, event: str) -> Subscription:
        """Stop listening to the base when ``emitter`` fires ``event``."""
        return self.listen_to(emitter, event, self.stop_listening)

    def clone(self) -> Any:
        """A standalone base collection holding the current members in view order."""
        record_class = getattr(self.root, "record_class", Record)
        return Collection(list(self._index.members), record_class=record_class)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on(self, event: str, callback: Callable[..., Any]) -> Subscription:
        return self._events.on(event, callback)

    def off(self, event: Optional[str] = None, callback: Optional[Callable[..., Any]] = None) -> None:
        self._events.off(event, callback)

    def trigger(self, event: str, *args: Any) -> None:
        self._events.trigger(event, *args)

    # ------------------------------------------------------------------
    # Notification translation
    # ------------------------------------------------------------------

    def _handle_parent_event(self, event: str, target: Any = None, *args: Any) -> None:
        if target is self.collection:
            if event == "reset":
                return self._on_reset(*args)
            if event == "sort":
                return self._on_sort(*args)
            return self.trigger(event, target, *args)

        if getattr(target, "cid", None) is None:
            return

        if event == "add":
            return self._on_add(target, *args)
        if event == "remove":
            return self._on_remove(target, *args)
        if event == "change":
            return self._on_change(target, *args)
        # attribute-level and custom record events, for members only
        if self._index.contains(target):
            self.trigger(event, target, *args)

    def _on_add(self, record: Any, collection: Any = None, options: Optional[dict] = None) -> None:
        options = options or {}
        if self._index.contains(record):
            return
        if not self.accepts(record, options.get("index")):
            return
        self._index_add(record, options)

    def _on_remove(self, record: Any, collection: Any = None, options: Optional[dict] = None) -> None:
        if not self._index.contains(record):
            return
        self._index_remove(record, options or {})

    def _on_change(self, record: Any = None, options: Optional[dict] = None) -> None:
        if record is None or options is None:
            return  # malformed custom "change" notification
        already_here = self._index.contains(record)
        index = options.get("index")
        if index is None and is_positional(self.filter_spec):
            index = self.collection.index_of(record)

        if self.accepts(record, index):
            if already_here:
                self._index.register(record)
                if self.ordering is not None:
                    before = self._index.position(record)
                    if self._index.reposition(record, self.ordering) != before:
                        # views without their own ordering follow via order_via_parent
                        self.trigger("sort", self, {"moved": record})
                self.trigger("change", record, options)
            else:
                self._index_add(record, options)
        elif already_here:
            self._index_remove(record, options)

    def _on_reset(self, options: Optional[dict] = None) -> None:
        self._rebuild_index()
        self.trigger("reset", self, options or {})

    def _on_sort(self, options: Optional[dict] = None) -> None:
        if self.ordering is not None:
            return
        self.order_via_parent(options)

    def _index_add(self, record: Any, options: dict) -> None:
        i = self._index.insert(record, self.ordering, self.collection)
        view_options = dict(options)
        view_options["index"] = i
        self.trigger("add", record, self, view_options)

    def _index_remove(self, record: Any, options: dict) -> None:
        i = self._index.remove(record)
        view_options = dict(options)
        view_options["index"] = i
        self.trigger("remove", record, self, view_options)

    def _rebuild_index(self) -> None:
        self._index.rebuild(self.collection, self.accepts, self.ordering)
        logger.debug(f"{self!r} rebuilt: {self._index.length} of {len(self.collection)} records accepted")

    def __repr__(self) -> str:
        label = f" {self.name!r}" if self.name else ""
        return f"<VirtualCollection{label}({self._index.length} of {len(self.collection)} records)>"


def _forward(method_name: str) -> Callable[..., Any]:
    def method(self, *args, **kwargs):
        return getattr(self.collection, method_name)(*args, **kwargs)

    method.__name__ = method_name
    method.__doc__ = f"Forward ``{method_name}`` to the base collection."
    return method


for _name in MUTATORS:
    setattr(VirtualCollection, _name, _forward(_name))
del _name
