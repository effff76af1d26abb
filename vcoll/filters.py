"""
Membership filters.

A filter specification is one of:

    Predicate(fn)                 fn(record) -> bool
    Predicate(fn, positional=True)  fn(record, index) -> bool
    AttributeMatch({name: value}) every named attribute equals value

``build_filter`` normalizes any specification into a single callable
``accepts(record, index=None) -> bool``.

Attribute matching distinguishes an unset attribute from one explicitly set to
a falsy value: a required value of ``UNSET`` only matches records lacking the
attribute, and a required ``None`` only matches records holding ``None``.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .errors import InvalidFilterError
from .records import UNSET

Accepts = Callable[..., bool]


class FilterSpec:
    """Base of the filter specification variants."""

    positional: bool = False

    def build(self) -> Accepts:
        raise NotImplementedError

    @staticmethod
    def coerce(value: Any) -> Optional["FilterSpec"]:
        """
        Normalize a user-supplied filter into a ``FilterSpec``.

        ``None`` means "accept everything". Plain callables become
        ``Predicate`` and plain mappings become ``AttributeMatch``.

        Raises:
            InvalidFilterError: If ``value`` is none of the above
        """
        if value is None or isinstance(value, FilterSpec):
            return value
        if isinstance(value, Mapping):
            return AttributeMatch(value)
        if callable(value):
            return Predicate(value)
        raise InvalidFilterError(
            f"Filter must be a predicate or an attribute mapping, got {type(value).__name__}"
        )


@dataclass(frozen=True)
class Predicate(FilterSpec):
    """Accept records for which ``fn`` returns a truthy value."""
    fn: Callable[..., Any]
    positional: bool = False

    def __post_init__(self):
        if not callable(self.fn):
            raise InvalidFilterError(f"Predicate requires a callable, got {self.fn!r}")

    def build(self) -> Accepts:
        fn = self.fn
        if self.positional:
            def accepts(record, index=None):
                return bool(fn(record, index))
        else:
            def accepts(record, index=None):
                return bool(fn(record))
        return accepts


@dataclass(frozen=True)
class AttributeMatch(FilterSpec):
    """Accept records whose attributes equal every required value."""
    attributes: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.attributes, Mapping):
            raise InvalidFilterError(
                f"AttributeMatch requires a mapping, got {type(self.attributes).__name__}"
            )
        object.__setattr__(self, "attributes", dict(self.attributes))

    def build(self) -> Accepts:
        required = tuple(self.attributes.items())

        def accepts(record, index=None):
            for name, value in required:
                actual = record.get(name, UNSET)
                if value is UNSET or actual is UNSET:
                    if actual is not value:
                        return False
                elif actual != value:
                    return False
            return True

        return accepts


def accept_all(record, index=None) -> bool:
    return True


def build_filter(spec: Union[FilterSpec, Mapping, Callable, None]) -> Accepts:
    """
    Build a membership test from a filter specification.

    Args:
        spec: A ``FilterSpec``, a plain mapping or callable, or ``None``

    Returns:
        ``accepts(record, index=None) -> bool``

    Raises:
        InvalidFilterError: If the specification is not recognized
    """
    spec = FilterSpec.coerce(spec)
    if spec is None:
        return accept_all
    return spec.build()


def is_positional(spec: Union[FilterSpec, Mapping, Callable, None]) -> bool:
    """True if the filter wants the record's base position."""
    spec = FilterSpec.coerce(spec)
    return spec is not None and spec.positional
