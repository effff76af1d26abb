"""Exception types raised by vcoll."""


class VcollError(Exception):
    """Base class for all vcoll errors."""


class InvalidFilterError(VcollError, TypeError):
    """A filter specification is neither a predicate nor an attribute mapping."""


class InvalidOrderingError(VcollError, TypeError):
    """An ordering rule is neither a key extractor nor a comparator."""


class InvalidOperationError(VcollError, RuntimeError):
    """An operation was requested that the collection cannot perform.

    Raised, for example, when ``sort()`` is called on a collection that
    has no ordering rule configured.
    """
