"""
Mutation scripts.

A script is a list of steps applied in order to a base collection:

    - {op: add, record: {...}}            or  records: [{...}, ...]
    - {op: remove, id: 3}                 or  where: {attr: value}
    - {op: change, id: 3, set: {...}, unset: [attr, ...]}
    - {op: reset, records: [...]}
    - {op: sort}
    - {op: order_by, attribute: name}

Views built over the collection see every step as ordinary notifications.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from .collection import Collection

logger = logging.getLogger(__name__)

Step = Mapping[str, Any]


def _targets(collection: Collection, step: Step) -> List[Any]:
    if "id" in step:
        record = collection.get(step["id"])
        if record is None:
            raise ValueError(f"No record with id {step['id']!r}")
        return [record]
    if "where" in step:
        return collection.where(step["where"])
    raise ValueError(f"Step needs 'id' or 'where': {dict(step)}")


def _add(collection: Collection, step: Step) -> None:
    if "record" in step:
        collection.add(step["record"], at=step.get("at"))
    elif "records" in step:
        collection.add(list(step["records"]), at=step.get("at"))
    else:
        raise ValueError(f"'add' step needs 'record' or 'records': {dict(step)}")


def _remove(collection: Collection, step: Step) -> None:
    collection.remove(_targets(collection, step))


def _change(collection: Collection, step: Step) -> None:
    updates: Dict[str, Any] = dict(step.get("set") or {})
    unset = list(step.get("unset") or [])
    if not updates and not unset:
        raise ValueError(f"'change' step needs 'set' or 'unset': {dict(step)}")
    for record in _targets(collection, step):
        if updates:
            record.set(updates)
        for name in unset:
            record.unset(name)


def _reset(collection: Collection, step: Step) -> None:
    collection.reset(list(step.get("records") or []))


def _sort(collection: Collection, step: Step) -> None:
    collection.sort()


def _order_by(collection: Collection, step: Step) -> None:
    if "attribute" not in step:
        raise ValueError(f"'order_by' step needs 'attribute': {dict(step)}")
    collection.order_by(step["attribute"])


OPERATIONS: Dict[str, Callable[[Collection, Step], None]] = {
    "add": _add,
    "remove": _remove,
    "change": _change,
    "reset": _reset,
    "sort": _sort,
    "order_by": _order_by,
}


def apply_step(collection: Collection, step: Step) -> None:
    """
    Apply one script step to ``collection``.

    Raises:
        ValueError: On an unknown operation or a malformed step
    """
    if not isinstance(step, Mapping):
        raise ValueError(f"Script step must be a mapping, got {type(step).__name__}")
    op = step.get("op")
    handler = OPERATIONS.get(op)
    if handler is None:
        raise ValueError(f"Unknown script operation {op!r} (expected one of {', '.join(OPERATIONS)})")
    logger.debug(f"Applying {op} step")
    handler(collection, step)


def replay(
    collection: Collection,
    steps: Iterable[Step],
    on_step: Optional[Callable[[int, Step], None]] = None,
) -> int:
    """
    Apply every step in order.

    Args:
        collection: The base collection to mutate
        steps: Script steps
        on_step: Called with ``(number, step)`` before each step

    Returns:
        Number of steps applied
    """
    count = 0
    for count, step in enumerate(steps, start=1):
        if on_step is not None:
            on_step(count, step)
        apply_step(collection, step)
    return count
