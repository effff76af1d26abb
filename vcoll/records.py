"""
Records: the entities held by collections.

A Record has a stable client identifier (``cid``), an optional domain
identifier (``id``, read from the ``id`` attribute) and a mutable attribute
mapping. Attribute changes are announced on the record's own emitter; a
collection holding the record forwards them to its subscribers.
"""

import itertools
from copy import deepcopy
from typing import Any, Callable, Dict, Iterator, Mapping, Optional

from .events import Events, Subscription

ID_ATTRIBUTE = "id"

_cid_counter = itertools.count(1)


class _Unset:
    """Sentinel type for "attribute absent"."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


UNSET = _Unset()


def next_cid(prefix: str = "c") -> str:
    """Allocate a process-unique client identifier."""
    return f"{prefix}{next(_cid_counter)}"


class Record:
    """
    A mutable bag of attributes with a stable identity.

    Example:
        r = Record({"id": 1, "type": "a"})
        r.on("change", lambda record, options: print(options["changes"]))
        r.set(type="b")     # prints ['type']
        r.get("missing")    # None
        r.has("missing")    # False
    """

    def __init__(self, attributes: Optional[Mapping[str, Any]] = None, **kwargs: Any):
        self.cid = next_cid()
        self._attributes: Dict[str, Any] = {}
        self._events = Events()
        self._attributes.update(attributes or {})
        self._attributes.update(kwargs)

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def id(self) -> Any:
        return self._attributes.get(ID_ATTRIBUTE)

    # ------------------------------------------------------------------
    # Attribute access
    # ------------------------------------------------------------------

    def get(self, name: str, default: Any = None) -> Any:
        """Get an attribute value, ``default`` if it is unset."""
        return self._attributes.get(name, default)

    def has(self, name: str) -> bool:
        """True if the attribute is set, even to a falsy value."""
        return name in self._attributes

    def __getitem__(self, name: str) -> Any:
        return self._attributes[name]

    def __contains__(self, name: str) -> bool:
        return name in self._attributes

    def keys(self) -> Iterator[str]:
        return iter(self._attributes)

    @property
    def attributes(self) -> Dict[str, Any]:
        """Read-only snapshot of the attributes."""
        return dict(self._attributes)

    def set(self, attributes: Optional[Mapping[str, Any]] = None, *, silent: bool = False, **kwargs: Any) -> "Record":
        """
        Set one or more attributes (chainable).

        Fires ``change:<name>`` for each attribute whose value actually
        changed, followed by one ``change`` notification. Setting an
        attribute to :data:`UNSET` removes it.
        """
        updates = dict(attributes or {})
        updates.update(kwargs)

        changed = []
        for name, value in updates.items():
            if value is UNSET:
                if name in self._attributes:
                    del self._attributes[name]
                    changed.append(name)
                continue
            if name in self._attributes and self._attributes[name] == value:
                continue
            self._attributes[name] = value
            changed.append(name)

        if changed and not silent:
            options = {"changes": changed}
            for name in changed:
                self._events.trigger(f"change:{name}", self, self._attributes.get(name, UNSET), options)
            self._events.trigger("change", self, options)
        return self

    def unset(self, name: str, *, silent: bool = False) -> "Record":
        """Remove an attribute (chainable)."""
        return self.set({name: UNSET}, silent=silent)

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
    # Projection
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Plain deep copy of the attributes."""
        return deepcopy(self._attributes)

    def __repr__(self) -> str:
        return f"Record(cid={self.cid!r}, {self._attributes!r})"
