"""
Publish/subscribe primitives.

Every collection and record owns its own ``Events`` instance. Subscribing
returns a ``Subscription`` handle; disposing the handle removes exactly that
callback. Objects that listen to *other* emitters keep their handles in a
``Listener`` so teardown disposes them all at once.

The special event name ``"all"`` receives every notification, with the event
name prepended to the arguments.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

ALL = "all"


class Subscription:
    """Disposable handle returned by :meth:`Events.on`."""

    __slots__ = ("_emitter", "event", "callback", "_active")

    def __init__(self, emitter: "Events", event: str, callback: Callable[..., Any]):
        self._emitter = emitter
        self.event = event
        self.callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def dispose(self) -> None:
        """Remove the callback. Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        self._emitter._detach(self)

    def __repr__(self) -> str:
        state = "active" if self._active else "disposed"
        return f"Subscription(event={self.event!r}, {state})"


class Events:
    """A per-instance event emitter."""

    def __init__(self):
        self._handlers: Dict[str, List[Subscription]] = defaultdict(list)

    def on(self, event: str, callback: Callable[..., Any]) -> Subscription:
        """Subscribe ``callback`` to ``event`` and return its handle."""
        if not callable(callback):
            raise TypeError(f"Event callback must be callable, got {callback!r}")
        subscription = Subscription(self, event, callback)
        self._handlers[event].append(subscription)
        return subscription

    def once(self, event: str, callback: Callable[..., Any]) -> Subscription:
        """Subscribe ``callback`` for a single delivery of ``event``."""
        subscription: Optional[Subscription] = None

        def wrapper(*args):
            subscription.dispose()
            return callback(*args)

        subscription = self.on(event, wrapper)
        return subscription

    def off(self, event: Optional[str] = None, callback: Optional[Callable[..., Any]] = None) -> None:
        """
        Remove subscriptions.

        With no arguments every subscription is removed. ``event`` and
        ``callback`` narrow the selection independently.
        """
        events = [event] if event is not None else list(self._handlers)
        for name in events:
            for subscription in list(self._handlers.get(name, ())):
                if callback is None or subscription.callback == callback:
                    subscription.dispose()

    def trigger(self, event: str, *args: Any) -> None:
        """Deliver ``event`` synchronously to its subscribers, then to ``all``."""
        # Copy first: handlers may dispose subscriptions while we iterate.
        for subscription in list(self._handlers.get(event, ())):
            if subscription.active:
                subscription.callback(*args)
        if event != ALL:
            for subscription in list(self._handlers.get(ALL, ())):
                if subscription.active:
                    subscription.callback(event, *args)

    def has_listeners(self, event: Optional[str] = None) -> bool:
        if event is None:
            return any(self._handlers.values())
        return bool(self._handlers.get(event))

    def _detach(self, subscription: Subscription) -> None:
        handlers = self._handlers.get(subscription.event)
        if not handlers:
            return
        try:
            handlers.remove(subscription)
        except ValueError:
            return
        if not handlers:
            del self._handlers[subscription.event]


class Listener:
    """
    Bookkeeping for subscriptions an object holds on other emitters.

    ``stop_listening()`` disposes every tracked handle and is idempotent.
    """

    def __init__(self):
        self._subscriptions: List[Subscription] = []

    def listen_to(self, emitter: Any, event: str, callback: Callable[..., Any]) -> Subscription:
        """Subscribe to ``emitter`` and remember the handle."""
        subscription = emitter.on(event, callback)
        self._subscriptions.append(subscription)
        return subscription

    def stop_listening(self, *args: Any) -> None:
        """Dispose all tracked subscriptions.

        Extra positional arguments are accepted and ignored so this can be
        bound directly as an event callback.
        """
        if self._subscriptions:
            logger.debug(f"{self!r} disposing {len(self._subscriptions)} subscription(s)")
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription.dispose()

    @property
    def listening(self) -> bool:
        return any(s.active for s in self._subscriptions)
