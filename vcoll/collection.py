"""
Base collection.

``Collection`` is an ordered, identity-indexed set of records that announces
its mutations. It is the reference implementation of the
:class:`~vcoll.protocols.RecordSource` contract that virtual collections are
built over.

Notifications (all synchronous):

    add     (record, collection, {"index": i})
    remove  (record, collection, {"index": i})
    change  (record, {"changes": [...]})          forwarded from the record
    change:<name> (record, value, options)        forwarded from the record
    reset   (collection, {"previous": [...]})
    sort    (collection, options)
"""

import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from .errors import InvalidOperationError
from .events import Events, Subscription
from .ordering import OrderingRule, insertion_point
from .protocols import RecordSequence, record_key
from .records import Record

logger = logging.getLogger(__name__)

RecordLike = Union[Record, Mapping[str, Any]]


class Collection(RecordSequence):
    """
    An ordered collection of records.

    Example:
        people = Collection([{"id": 1, "name": "ada"}], ordering="name")
        people.add({"id": 2, "name": "alan"})
        people.get(2).set(name="grace")
        [r.get("name") for r in people]   # ['ada', 'grace']
    """

    def __init__(
        self,
        records: Optional[Iterable[RecordLike]] = None,
        *,
        ordering: Any = None,
        record_class: type = Record,
    ):
        self.record_class = record_class
        self.ordering: Optional[OrderingRule] = OrderingRule.coerce(ordering)
        self._events = Events()
        self._records: List[Record] = []
        self._by_id: Dict[Any, Record] = {}
        self._record_subscriptions: Dict[str, Subscription] = {}
        if records:
            self.add(records, silent=True)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    @property
    def length(self) -> int:
        return len(self._records)

    def at(self, index: int) -> Record:
        return self._records[index]

    def get(self, key: Any) -> Optional[Record]:
        """Look up a record by record, ``cid``, ``id`` or ``{"id": ...}``."""
        key = record_key(key)
        if key is None:
            return None
        try:
            return self._by_id.get(key)
        except TypeError:
            return None

    def index_of(self, record: Any) -> int:
        for i, candidate in enumerate(self._records):
            if candidate is record:
                return i
        return -1

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(
        self,
        records: Union[RecordLike, Iterable[RecordLike]],
        *,
        at: Optional[int] = None,
        merge: bool = False,
        silent: bool = False,
    ) -> Union[Record, List[Record], None]:
        """
        Add one record or a list of records.

        Records already present (same ``cid`` or ``id``) are skipped, or have
        their attributes merged in when ``merge`` is true. With an ordering
        rule the position is determined by the rule and ``at`` is ignored.

        Returns:
            The added record(s), mirroring the shape of the argument
        """
        single = self._is_single(records)
        items = [records] if single else list(records)

        added = []
        for item in items:
            existing = self.get(item)
            if existing is not None:
                if merge and existing is not item:
                    existing.set(self._attributes_of(item), silent=silent)
                continue
            record = self._prepare(item)
            if self.ordering is not None:
                i = insertion_point(self._records, record, self.ordering.sort_key())
            elif at is not None:
                i = max(0, min(at if at >= 0 else len(self._records) + at + 1, len(self._records)))
                at = i + 1
            else:
                i = len(self._records)
            self._records.insert(i, record)
            self._attach(record)
            added.append(record)
            if not silent:
                self.trigger("add", record, self, {"index": i})

        if single:
            return added[0] if added else self.get(records)
        return added

    def remove(
        self,
        records: Union[Any, Iterable[Any]],
        *,
        silent: bool = False,
    ) -> Union[Record, List[Record], None]:
        """
        Remove one record or a list of records (by record, ``cid`` or ``id``).

        Returns:
            The removed record(s); unknown keys are skipped
        """
        single = self._is_single(records)
        keys = [records] if single else list(records)

        removed = []
        for key in keys:
            record = self.get(key)
            if record is None:
                continue
            i = self.index_of(record)
            del self._records[i]
            self._detach(record)
            removed.append(record)
            if not silent:
                self.trigger("remove", record, self, {"index": i})

        if single:
            return removed[0] if removed else None
        return removed

    def set(
        self,
        records: Iterable[RecordLike],
        *,
        add: bool = True,
        remove: bool = True,
        merge: bool = True,
        silent: bool = False,
    ) -> List[Record]:
        """
        Update the collection to hold exactly ``records``.

        Known records are merged, new ones added and missing ones removed,
        each producing its own notification.
        """
        items = [records] if self._is_single(records) else list(records)
        keep = []
        for item in items:
            existing = self.get(item)
            if existing is not None:
                if merge and existing is not item:
                    existing.set(self._attributes_of(item), silent=silent)
                keep.append(existing)
            elif add:
                keep.append(self.add(item, silent=silent))

        if remove:
            kept = {record.cid for record in keep}
            stale = [record for record in self._records if record.cid not in kept]
            if stale:
                self.remove(stale, silent=silent)
        return keep

    def reset(self, records: Optional[Iterable[RecordLike]] = None, *, silent: bool = False) -> List[Record]:
        """Replace every record at once, firing a single ``reset``."""
        previous = list(self._records)
        for record in previous:
            self._detach(record)
        self._records = []
        self._by_id = {}
        added = self.add(records or [], silent=True)
        logger.debug(f"{self!r} reset: {len(previous)} -> {len(self._records)} records")
        if not silent:
            self.trigger("reset", self, {"previous": previous})
        return added

    def push(self, record: RecordLike, **options: Any) -> Record:
        return self.add(record, at=len(self._records), **options)

    def pop(self, **options: Any) -> Optional[Record]:
        if not self._records:
            return None
        return self.remove(self._records[-1], **options)

    def unshift(self, record: RecordLike, **options: Any) -> Record:
        return self.add(record, at=0, **options)

    def shift(self, **options: Any) -> Optional[Record]:
        if not self._records:
            return None
        return self.remove(self._records[0], **options)

    def sort(self, *, silent: bool = False) -> "Collection":
        """
        Re-sort under the collection's ordering rule.

        Raises:
            InvalidOperationError: If no ordering rule is configured
        """
        if self.ordering is None:
            raise InvalidOperationError("Cannot sort a collection without an ordering rule")
        self._records = self.ordering.sorted(self._records)
        if not silent:
            self.trigger("sort", self, {})
        return self

    def order_by(self, ordering: Any, *, silent: bool = False) -> "Collection":
        """Install a new ordering rule and re-sort."""
        self.ordering = OrderingRule.coerce(ordering)
        return self.sort(silent=silent)

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
    # Internals
    # ------------------------------------------------------------------

    def _prepare(self, item: RecordLike) -> Record:
        if isinstance(item, Record):
            return item
        if isinstance(item, Mapping):
            return self.record_class(item)
        raise TypeError(f"Cannot add {type(item).__name__} to a collection; expected a Record or a mapping")

    @staticmethod
    def _attributes_of(item: RecordLike) -> Dict[str, Any]:
        return item.attributes if isinstance(item, Record) else dict(item)

    @staticmethod
    def _is_single(value: Any) -> bool:
        return isinstance(value, (Record, Mapping)) or not isinstance(value, Iterable) or isinstance(value, (str, bytes))

    def _attach(self, record: Record) -> None:
        self._by_id[record.cid] = record
        if record.id is not None:
            self._by_id[record.id] = record
        self._record_subscriptions[record.cid] = record.on("all", self._on_record_event)

    def _detach(self, record: Record) -> None:
        self._by_id.pop(record.cid, None)
        if record.id is not None and self._by_id.get(record.id) is record:
            del self._by_id[record.id]
        subscription = self._record_subscriptions.pop(record.cid, None)
        if subscription is not None:
            subscription.dispose()

    def _on_record_event(self, event: str, record: Any = None, *args: Any) -> None:
        if event == "change:id" and record is not None:
            self._reindex(record)
        self.trigger(event, record, *args)

    def _reindex(self, record: Record) -> None:
        stale = [key for key, value in self._by_id.items() if value is record and key != record.cid]
        for key in stale:
            del self._by_id[key]
        if record.id is not None:
            self._by_id[record.id] = record

    def __repr__(self) -> str:
        return f"<Collection({len(self._records)} records)>"
