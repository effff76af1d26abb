"""
The ordered index behind a virtual collection.

``OrderedIndex`` keeps the member records of a view in order together with an
identifier lookup table (both ``cid`` and ``id`` are registered). It is patched
incrementally as the base collection changes and only rebuilt from scratch on
a structural reset or a filter change.
"""

import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from .ordering import OrderingRule, insertion_point

logger = logging.getLogger(__name__)


class OrderedIndex:
    """Ordered member list plus identifier lookup table."""

    def __init__(self):
        self.members: List[Any] = []
        self.by_id: Dict[Any, Any] = {}
        self.length = 0
        self._ids: Dict[str, Any] = {}

    def __len__(self) -> int:
        return self.length

    def __iter__(self) -> Iterator[Any]:
        return iter(self.members)

    def __contains__(self, record: Any) -> bool:
        return self.contains(record)

    def contains(self, record: Any) -> bool:
        return getattr(record, "cid", None) in self.by_id

    def lookup(self, key: Any) -> Optional[Any]:
        """Find a member by ``cid`` or ``id``."""
        try:
            return self.by_id.get(key)
        except TypeError:
            # unhashable keys can never be identifiers
            return None

    def position(self, record: Any) -> int:
        """Position of ``record`` in the index, ``-1`` if absent."""
        if not self.contains(record):
            return -1
        for i, member in enumerate(self.members):
            if member is record:
                return i
        return -1

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def clear(self) -> None:
        self.members = []
        self.by_id = {}
        self.length = 0
        self._ids = {}

    def rebuild(
        self,
        records: Iterable[Any],
        accepts: Callable[..., bool],
        rule: Optional[OrderingRule] = None,
    ) -> None:
        """
        Re-derive the index from the base in one pass.

        Args:
            records: The base records, in base order
            accepts: Membership test, called as ``accepts(record, index)``
            rule: Optional ordering rule applied with a stable sort afterwards
        """
        self.clear()
        for i, record in enumerate(records):
            if accepts(record, i):
                self.members.append(record)
                self.register(record)
        if rule is not None:
            self.members = rule.sorted(self.members)
        self.length = len(self.members)

    def insert(self, record: Any, rule: Optional[OrderingRule], base: Any) -> int:
        """
        Splice ``record`` into its ordered position.

        With an ordering rule the position comes from a binary search under
        the rule. Without one, members are kept in base order by searching on
        each member's position in ``base``.

        Returns:
            The position the record now occupies, or ``-1`` if it was already
            a member
        """
        if self.contains(record):
            return -1
        if rule is not None:
            i = insertion_point(self.members, record, rule.sort_key())
        else:
            i = insertion_point(self.members, record, base.index_of)
        self.members.insert(i, record)
        self.register(record)
        self.length += 1
        return i

    def remove(self, record: Any) -> int:
        """
        Drop ``record`` from the index.

        Returns:
            The position it occupied, or ``-1`` if it was not a member
        """
        i = self.position(record)
        if i == -1:
            return i
        del self.members[i]
        self.unregister(record)
        self.length -= 1
        return i

    def reposition(self, record: Any, rule: OrderingRule) -> int:
        """
        Move a member whose sort key changed back into sorted position.

        Returns:
            The member's position afterwards, ``-1`` if it is not a member
        """
        i = self.position(record)
        if i == -1:
            return i
        key = rule.sort_key()
        current = key(record)
        before_ok = i == 0 or not (current < key(self.members[i - 1]))
        after_ok = i == len(self.members) - 1 or not (key(self.members[i + 1]) < current)
        if before_ok and after_ok:
            return i
        del self.members[i]
        j = insertion_point(self.members, record, key)
        self.members.insert(j, record)
        return j

    def reorder(self, base_records: Iterable[Any]) -> None:
        """Adopt the base's order for the current members, without re-filtering."""
        self.members = [r for r in base_records if r.cid in self.by_id]
        self.length = len(self.members)

    def sort(self, rule: OrderingRule) -> None:
        self.members = rule.sorted(self.members)

    def register(self, record: Any) -> None:
        """
        Register ``record`` under its ``cid`` and, when it has one, its ``id``.

        Calling this again after the record's ``id`` changed moves the entry
        to the new ``id``.
        """
        self.by_id[record.cid] = record
        previous = self._ids.get(record.cid)
        if previous is not None and previous != record.id and self.by_id.get(previous) is record:
            del self.by_id[previous]
        if record.id is not None:
            self.by_id[record.id] = record
            self._ids[record.cid] = record.id
        else:
            self._ids.pop(record.cid, None)

    def unregister(self, record: Any) -> None:
        self.by_id.pop(record.cid, None)
        known = self._ids.pop(record.cid, None)
        for key in (known, record.id):
            if key is not None and self.by_id.get(key) is record:
                del self.by_id[key]
