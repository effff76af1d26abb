"""
The capability set shared by base collections and virtual collections.

Anything implementing :class:`RecordSource` can serve as the base of a
``VirtualCollection``: ``Collection`` and ``VirtualCollection`` both do,
independently, so views stack on views without either type deriving from the
other.

:class:`RecordSequence` provides the read helpers both expose, derived from
iteration and positional access alone.
"""

from abc import ABC, abstractmethod
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Protocol,
    runtime_checkable,
)

from .events import Subscription
from .filters import AttributeMatch
from .records import UNSET


@runtime_checkable
class RecordSource(Protocol):
    """What a view needs from its base."""

    def __iter__(self) -> Iterator[Any]:
        ...

    def __len__(self) -> int:
        ...

    def get(self, key: Any) -> Optional[Any]:
        """Look up a record by record, ``cid``, ``id`` or ``{"id": ...}``."""
        ...

    def at(self, index: int) -> Any:
        ...

    def index_of(self, record: Any) -> int:
        """Position of ``record`` in this source's order, ``-1`` if absent."""
        ...

    def on(self, event: str, callback: Callable[..., Any]) -> Subscription:
        ...

    def off(self, event: Optional[str] = None, callback: Optional[Callable[..., Any]] = None) -> None:
        ...

    def trigger(self, event: str, *args: Any) -> None:
        ...


class RecordSequence(ABC):
    """Read-only helpers over an ordered sequence of records."""

    @abstractmethod
    def __iter__(self) -> Iterator[Any]:
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

    @abstractmethod
    def at(self, index: int) -> Any:
        pass

    @abstractmethod
    def get(self, key: Any) -> Optional[Any]:
        pass

    def __getitem__(self, index):
        if isinstance(index, slice):
            return list(self)[index]
        return self.at(index)

    def __contains__(self, item: Any) -> bool:
        return self.get(item) is not None

    def __bool__(self) -> bool:
        return len(self) > 0

    def first(self) -> Optional[Any]:
        return self.at(0) if len(self) else None

    def last(self) -> Optional[Any]:
        return self.at(-1) if len(self) else None

    def slice(self, start: int = 0, end: Optional[int] = None) -> List[Any]:
        """Records between two positions, like ``list[start:end]``."""
        return list(self)[start:end]

    def pluck(self, name: str) -> List[Any]:
        """One attribute from every record, in order."""
        return [record.get(name) for record in self]

    def where(self, attributes: Mapping[str, Any]) -> List[Any]:
        """Records whose attributes equal every value in ``attributes``."""
        accepts = AttributeMatch(attributes).build()
        return [record for record in self if accepts(record)]

    def find_where(self, attributes: Mapping[str, Any]) -> Optional[Any]:
        """First record matching ``attributes``, or ``None``."""
        matches = self.where(attributes)
        return matches[0] if matches else None

    def to_list(self) -> List[Any]:
        return list(self)

    def to_json(self) -> List[Dict[str, Any]]:
        """Plain snapshot: a list of attribute dicts in current order."""
        return [record.to_dict() for record in self]


def record_key(key: Any) -> Any:
    """Reduce a lookup key (record, mapping or bare id) to a hashable identifier."""
    cid = getattr(key, "cid", None)
    if cid is not None:
        return cid
    if isinstance(key, Mapping):
        value = key.get("id", UNSET)
        return None if value is UNSET else value
    return key
