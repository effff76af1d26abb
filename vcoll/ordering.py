"""
Ordering rules.

An ordering rule is either absent (follow the base collection's order) or one
of two explicit variants:

    KeyOrder(fn)          ascending by fn(record)
    ComparatorOrder(fn)   fn(a, b) -> negative / zero / positive

The variant is chosen by the caller; callbacks are never inspected to guess
which kind they are.
"""

from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Callable, List, Optional, Sequence

from .errors import InvalidOrderingError


class OrderingRule:
    """Base of the ordering rule variants."""

    def sort_key(self) -> Callable[[Any], Any]:
        """Key function usable with ``sorted`` and :func:`insertion_point`."""
        raise NotImplementedError

    def sorted(self, records) -> List[Any]:
        """Return ``records`` stably sorted under this rule."""
        return sorted(records, key=self.sort_key())

    def is_sorted(self, records: Sequence[Any]) -> bool:
        key = self.sort_key()
        keys = [key(r) for r in records]
        return all(not (b < a) for a, b in zip(keys, keys[1:]))

    @staticmethod
    def coerce(value: Any) -> Optional["OrderingRule"]:
        """
        Normalize a user-supplied ordering.

        ``None`` stays ``None``, a string names an attribute to sort by and a
        bare callable is treated as a key extractor. Two-argument comparators
        must be wrapped in ``ComparatorOrder`` explicitly.

        Raises:
            InvalidOrderingError: For anything else
        """
        if value is None or isinstance(value, OrderingRule):
            return value
        if isinstance(value, str):
            return by_attribute(value)
        if callable(value):
            return KeyOrder(value)
        raise InvalidOrderingError(
            f"Ordering must be an attribute name, KeyOrder or ComparatorOrder, got {type(value).__name__}"
        )


@dataclass(frozen=True)
class KeyOrder(OrderingRule):
    fn: Callable[[Any], Any]
    attribute: Optional[str] = None

    def __post_init__(self):
        if not callable(self.fn):
            raise InvalidOrderingError(f"KeyOrder requires a callable, got {self.fn!r}")

    def sort_key(self) -> Callable[[Any], Any]:
        return self.fn

    def __repr__(self) -> str:
        if self.attribute is not None:
            return f"by_attribute({self.attribute!r})"
        return f"KeyOrder({self.fn!r})"


@dataclass(frozen=True)
class ComparatorOrder(OrderingRule):
    fn: Callable[[Any, Any], int]

    def __post_init__(self):
        if not callable(self.fn):
            raise InvalidOrderingError(f"ComparatorOrder requires a callable, got {self.fn!r}")

    def sort_key(self) -> Callable[[Any], Any]:
        return cmp_to_key(self.fn)


def by_attribute(name: str) -> KeyOrder:
    """
    Ascending order on a single record attribute.

    Records lacking the attribute, or holding ``None``, sort before every
    record with a value.
    """
    def key(record):
        value = record.get(name)
        return (value is not None, value)

    return KeyOrder(key, attribute=name)


def insertion_point(members: Sequence[Any], item: Any, key: Callable[[Any], Any]) -> int:
    """
    Binary search for where ``item`` belongs in the already-sorted ``members``.

    The returned position is after any members that compare equal, so a new
    item lands behind its equals, as a stable sort would place it.
    """
    target = key(item)
    low, high = 0, len(members)
    while low < high:
        mid = (low + high) // 2
        if target < key(members[mid]):
            high = mid
        else:
            low = mid + 1
    return low
