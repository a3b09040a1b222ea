"""
Event Channels: Multi-Subscriber Broadcast

Each public manager event (new_source, removed_source, playback_changed,
song_changed) is an EventChannel.

Semantics:
    - Snapshot-then-invoke: the subscriber list is copied before delivery,
      so a callback that (un)subscribes during delivery affects only the
      next emit
    - Failure isolation: an exception raised by one subscriber is logged
      and counted; remaining subscribers still receive the event
    - Emitting with no subscribers is a no-op
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional

from mediacontroller.observability.logging import StructuredLogger
from mediacontroller.observability.metrics import Counter

log = StructuredLogger(__name__)


class EventChannel:
    """
    Observer list for one event type.

    Usage:
        channel = EventChannel("song_changed")
        unsubscribe = channel.subscribe(lambda record, metadata: ...)
        channel.emit(record, metadata)
        unsubscribe()
    """

    __slots__ = ("_name", "_subscribers", "_lock", "_emitted", "_errors")

    def __init__(
        self,
        name: str,
        emitted: Optional[Counter] = None,
        errors: Optional[Counter] = None,
    ) -> None:
        self._name = name
        self._subscribers: list[Callable[..., Any]] = []
        self._lock = threading.Lock()
        self._emitted = emitted
        self._errors = errors

    @property
    def name(self) -> str:
        return self._name

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self, callback: Callable[..., Any]) -> Callable[[], None]:
        """
        Register a subscriber.

        Returns a callable that removes this subscription; calling it more
        than once is harmless.
        """
        if not callable(callback):
            raise TypeError(f"{self._name} subscriber must be callable, got {callback!r}")
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            self.unsubscribe(callback)

        return unsubscribe

    def unsubscribe(self, callback: Callable[..., Any]) -> bool:
        """Remove one registration of callback. Returns False if absent."""
        with self._lock:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                return False
            return True

    def clear(self) -> None:
        with self._lock:
            self._subscribers.clear()

    def emit(self, *args: Any) -> int:
        """
        Deliver an event to every current subscriber.

        Returns the number of subscribers that handled it without raising.
        """
        with self._lock:
            subscribers = list(self._subscribers)

        if self._emitted is not None:
            self._emitted.inc(event=self._name)

        delivered = 0
        for callback in subscribers:
            try:
                callback(*args)
            except Exception:
                log.exception(
                    "Event subscriber raised",
                    event=self._name,
                    subscriber=getattr(callback, "__qualname__", repr(callback)),
                )
                if self._errors is not None:
                    self._errors.inc(event=self._name)
            else:
                delivered += 1
        return delivered

    def __repr__(self) -> str:
        return f"EventChannel({self._name!r}, subscribers={self.subscriber_count})"
