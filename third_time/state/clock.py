"""
Interval-timer boundary consumed by the cycle state machine.

A Clock tells the time, holds at most one pending deadline and calls a
single registered callback when that deadline passes. The state machine
never sleeps or polls; it only reacts to that callback and to commands.
"""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Callable, Optional

import structlog

from ..utils.time import seconds_between, utc_now
from .models import IntervalKind

logger = structlog.get_logger(__name__)

DeadlineCallback = Callable[[], None]


class Clock(ABC):
    """Base class for interval timers."""

    def __init__(self):
        self._callback: Optional[DeadlineCallback] = None
        self._kind: Optional[IntervalKind] = None
        self._deadline: Optional[datetime] = None

    @abstractmethod
    def now(self) -> datetime:
        """Current time as a timezone-aware datetime."""
        pass

    @abstractmethod
    def _arm(self, deadline: datetime) -> None:
        """Make the timer backend fire at deadline, replacing any earlier timer."""
        pass

    @abstractmethod
    def _disarm(self) -> None:
        """Drop any pending backend timer."""
        pass

    @property
    def is_active(self) -> bool:
        """True while an interval is being timed, even past its deadline."""
        return self._kind is not None

    @property
    def kind(self) -> Optional[IntervalKind]:
        return self._kind

    @property
    def deadline(self) -> Optional[datetime]:
        """Pending deadline, None once it has fired or when none is set."""
        return self._deadline

    def set_deadline_callback(self, callback: Optional[DeadlineCallback]) -> None:
        """Register the single callback invoked when a deadline passes."""
        self._callback = callback

    def start(self, kind: IntervalKind, deadline: Optional[datetime]) -> None:
        """Begin timing an interval of kind, with an optional deadline."""
        self._kind = kind
        self.reschedule(deadline)

    def reschedule(self, deadline: Optional[datetime]) -> None:
        """Replace the pending deadline in one step."""
        self._disarm()
        self._deadline = deadline
        if deadline is not None:
            self._arm(deadline)

    def cancel(self) -> None:
        """Stop timing altogether."""
        self._disarm()
        self._deadline = None
        self._kind = None

    def _fire(self) -> None:
        self._deadline = None
        if self._callback is None:
            logger.warning("Deadline reached with no callback registered", kind=self._kind)
            return
        self._callback()


class ManualClock(Clock):
    """
    Deterministic clock moved forward explicitly.

    Due deadlines fire in order during advance(), with now() reporting each
    deadline at the moment its callback runs.
    """

    def __init__(self, start: Optional[datetime] = None):
        super().__init__()
        self._now = start if start is not None else utc_now()

    def now(self) -> datetime:
        return self._now

    def _arm(self, deadline: datetime) -> None:
        pass

    def _disarm(self) -> None:
        pass

    def advance(self, seconds: float) -> None:
        """Move time forward by seconds, firing deadlines on the way."""
        if seconds < 0:
            raise ValueError("ManualClock cannot move backwards")
        self.advance_to(self._now + timedelta(seconds=seconds))

    def advance_to(self, target: datetime) -> None:
        """Move time forward to target, firing deadlines on the way."""
        if target < self._now:
            raise ValueError("ManualClock cannot move backwards")

        while self._deadline is not None and self._deadline <= target:
            self._now = max(self._now, self._deadline)
            self._fire()

        self._now = target


class AsyncioClock(Clock):
    """Wall-clock timer driven by an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        super().__init__()
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> datetime:
        return utc_now()

    def _arm(self, deadline: datetime) -> None:
        delay = max(0.0, seconds_between(self.now(), deadline))
        self._handle = self.loop.call_later(delay, self._fire)

    def _disarm(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        super()._fire()
