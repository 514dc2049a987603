"""
Lifecycle notifications for observers of the cycle.

The scheduler emits events without depending on any subscriber existing.
A listener that raises is logged and skipped; it never interrupts a
transition.
"""

from enum import Enum
from typing import Any, Callable

import structlog

logger = structlog.get_logger(__name__)

Listener = Callable[..., Any]


class LifecycleEvent(str, Enum):
    """Named lifecycle events."""
    INTERVAL_STARTED = "interval_started"
    BREAK_LENGTH_COMPUTED = "break_length_computed"
    BANK_UPDATED = "bank_updated"
    LONG_BREAK_FINISHED = "long_break_finished"
    OVERTIME_STARTED = "overtime_started"
    KILLED = "killed"


class EventBus:
    """Synchronous publish/subscribe registry keyed by LifecycleEvent."""

    def __init__(self):
        self._listeners: dict[LifecycleEvent, list[Listener]] = {
            event: [] for event in LifecycleEvent
        }

    def subscribe(self, event: LifecycleEvent, listener: Listener) -> None:
        """Call listener(**payload) whenever event is emitted."""
        if not callable(listener):
            raise ValueError("Listener must be callable")
        self._listeners[LifecycleEvent(event)].append(listener)

    def subscribe_all(self, listener: Listener) -> None:
        """Call listener(event, **payload) for every event."""
        if not callable(listener):
            raise ValueError("Listener must be callable")
        for event in LifecycleEvent:
            self._listeners[event].append(_Tagged(event, listener))

    def unsubscribe(self, event: LifecycleEvent, listener: Listener) -> None:
        listeners = self._listeners[LifecycleEvent(event)]
        for registered in list(listeners):
            if registered == listener:
                listeners.remove(registered)

    def listener_count(self, event: LifecycleEvent) -> int:
        return len(self._listeners[LifecycleEvent(event)])

    def emit(self, event: LifecycleEvent, **payload: Any) -> None:
        """Deliver payload to the listeners of event, in subscription order."""
        for listener in list(self._listeners[event]):
            try:
                listener(**payload)
            except Exception:
                logger.exception("Error in lifecycle listener", lifecycle_event=event.value)


class _Tagged:
    """Adapter passing the event name to a catch-all listener."""

    def __init__(self, event: LifecycleEvent, listener: Listener):
        self.event = event
        self.listener = listener

    def __call__(self, **payload: Any) -> Any:
        return self.listener(self.event, **payload)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, _Tagged):
            return self.listener == other.listener and self.event == other.event
        return self.listener == other

    def __hash__(self) -> int:
        return hash((self.event, self.listener))
