"""
Core work/break cycle state machine.

Sequences IDLE, WORK_INTERVAL, SHORT_BREAK, LONG_BREAK and OVERTIME. The
clock's deadline callback and the manual commands are the only inputs; each
one runs to completion through a single dispatch routine before the next is
considered.
"""

from collections import deque
from datetime import datetime
from typing import Any, Callable, Optional

from ..config.defaults import CycleConfig
from ..errors import InvalidArgument, StateTransitionError
from ..logging.config import get_state_logger, log_state_transition
from ..utils.time import (
    deadline_after,
    format_duration,
    is_real_number,
    minutes_to_seconds,
    seconds_between,
)
from .bank import Bank
from .clock import Clock
from .events import EventBus, LifecycleEvent
from .models import CycleState, IntervalKind, IntervalRecord
from .planner import IntervalPlanner

state_logger = get_state_logger(__name__)


def _require_minutes(argument: str, minutes: Any) -> float:
    """Validate a minutes argument and return it in seconds."""
    if not is_real_number(minutes) or minutes < 0:
        raise InvalidArgument(
            f"{argument} must be a non-negative number of minutes (got: {minutes!r})",
            argument=argument,
            value=minutes
        )
    return minutes_to_seconds(minutes)


def _require_aware(argument: str, value: Any, optional: bool = False) -> None:
    """Reject anything but a timezone-aware datetime (or None when optional)."""
    if value is None and optional:
        return
    if not isinstance(value, datetime) or value.tzinfo is None or value.utcoffset() is None:
        raise InvalidArgument(
            f"{argument} must be a timezone-aware datetime (got: {value!r})",
            argument=argument,
            value=value
        )


class CycleStateMachine:
    """
    Owns the bank and the live interval and performs every transition.

    Work -> break computes the break from the work actually done and the
    bank. Break -> work credits or debits the bank with how far the break
    missed its plan. A finished long break starts the session afresh.
    """

    def __init__(
        self,
        config: CycleConfig,
        clock: Clock,
        bank: Optional[Bank] = None,
        events: Optional[EventBus] = None
    ):
        self.config = config
        self.clock = clock
        self.bank = bank if bank is not None else Bank()
        self.planner = IntervalPlanner(self.bank)
        self.events = events if events is not None else EventBus()
        self.logger = state_logger

        self._state = CycleState.IDLE
        self._current: Optional[IntervalRecord] = None
        self._work_interval_count = 0
        self._expected_break_duration: Optional[float] = None
        self._long_break_override: Optional[float] = None

        self._dispatching = False
        self._pending: deque = deque()

        self.clock.set_deadline_callback(self.on_deadline_reached)

    # ---- Read-only properties ----

    @property
    def state(self) -> CycleState:
        return self._state

    @property
    def current(self) -> Optional[IntervalRecord]:
        return self._current

    @property
    def work_interval_count(self) -> int:
        return self._work_interval_count

    @property
    def expected_break_duration(self) -> Optional[float]:
        return self._expected_break_duration

    @property
    def long_break_length(self) -> float:
        """Length of the next long break; a manual override wins over config."""
        if self._long_break_override is not None:
            return self._long_break_override
        return self.config.long_break_length

    def remaining(self) -> Optional[float]:
        """Seconds until the live interval's deadline, negative in overtime."""
        if self._current is None or self._current.expected_end_time is None:
            return None
        return seconds_between(self.clock.now(), self._current.expected_end_time)

    def get_status(self) -> dict[str, Any]:
        """Snapshot of the cycle for observers."""
        record = self._current
        return {
            "state": self._state.value,
            "interval_kind": record.kind.value if record else None,
            "started_at": record.start_time.isoformat() if record else None,
            "expected_end_time": (
                record.expected_end_time.isoformat()
                if record and record.expected_end_time else None
            ),
            "remaining_seconds": self.remaining(),
            "bank_seconds": self.bank.seconds,
            "work_interval_count": self._work_interval_count,
            "expected_break_seconds": self._expected_break_duration,
        }

    # ---- Commands ----

    def start(self, deadline: Optional[datetime] = None) -> None:
        """Start a work interval from IDLE. Ignored while an interval is live."""
        _require_aware("deadline", deadline, optional=True)
        self._dispatch(self._start, deadline)

    def on_deadline_reached(self) -> None:
        """Clock callback for a passed deadline."""
        self._dispatch(self._deadline_reached)

    def force_end_in(self, minutes: float) -> None:
        """End the live interval in `minutes`, starting a work interval if idle."""
        seconds = _require_minutes("minutes", minutes)
        self._dispatch(self._end_in, seconds, "end_in")

    def force_end_at(self, timestamp: datetime, requested_at: Optional[datetime] = None) -> None:
        """
        End the live interval at an absolute time.

        Args:
            timestamp: New deadline
            requested_at: When the user was prompted for timestamp; a
                deadline not after this moment ends the interval at once
        """
        _require_aware("timestamp", timestamp)
        _require_aware("requested_at", requested_at, optional=True)
        self._dispatch(self._end_at, timestamp, requested_at)

    def force_end_now(self) -> None:
        """End the live interval immediately, closing it out of overtime too."""
        self.force_end_in(0)

    def force_long_break(self, minutes: float) -> None:
        """Close the live interval and start a long break of `minutes`."""
        seconds = _require_minutes("minutes", minutes)
        self._dispatch(self._long_break, seconds)

    def kill(self) -> None:
        """Abort the cycle: back to IDLE with an empty bank and counter."""
        self._dispatch(self._kill)

    # ---- Dispatch ----

    def _dispatch(self, action: Callable[..., None], *args: Any) -> None:
        if self._dispatching:
            # A listener issued a command mid-transition; run it afterwards
            self._pending.append((action, args))
            self.logger.debug("Command queued behind running transition",
                              command=action.__name__.lstrip("_"))
            return

        self._dispatching = True
        try:
            action(*args)
            while self._pending:
                queued, queued_args = self._pending.popleft()
                queued(*queued_args)
        finally:
            self._pending.clear()
            self._dispatching = False

    # ---- Transition handlers ----

    def _start(self, deadline: Optional[datetime]) -> None:
        if self._current is not None:
            self.logger.debug("Start ignored, interval already live", state=self._state.value)
            return
        self._begin_work(deadline, trigger="start")

    def _deadline_reached(self) -> None:
        record = self._current
        if record is None:
            self.logger.debug("Deadline reached while idle, ignoring")
            return
        if record.in_overtime:
            self.logger.debug("Deadline reached during overtime, ignoring")
            return

        now = self.clock.now()
        if record.expected_end_time is None:
            self.logger.debug("Deadline reached with no deadline set, ignoring")
            return
        if now < record.expected_end_time:
            # Early fire; keep the interval armed
            if self.clock.deadline != record.expected_end_time:
                self.clock.reschedule(record.expected_end_time)
            self.logger.debug(
                "Deadline not yet due, re-armed",
                expected_end_time=record.expected_end_time.isoformat(),
            )
            return

        overtime_allowed = (
            self.config.break_overtime if record.kind.is_break else self.config.work_overtime
        )
        if overtime_allowed:
            self._enter_overtime(now)
        else:
            self._close_current(trigger="deadline")

    def _end_in(self, seconds: float, trigger: str) -> None:
        now = self.clock.now()
        if seconds == 0:
            if self._current is None:
                self._begin_work(now, trigger=trigger)
            self._close_current(trigger="end_now")
            return
        self._set_deadline(deadline_after(now, seconds), trigger)

    def _end_at(self, timestamp: datetime, requested_at: Optional[datetime]) -> None:
        now = self.clock.now()
        reference = requested_at if requested_at is not None else now
        if timestamp <= reference or timestamp <= now:
            self.logger.info("End-at time already passed, ending now",
                             end_at=timestamp.isoformat())
            self._end_in(0, "end_at")
            return
        self._set_deadline(timestamp, "end_at")

    def _set_deadline(self, deadline: datetime, trigger: str) -> None:
        record = self._current
        if record is None:
            self._begin_work(deadline, trigger=trigger)
            return

        previous_state = self._state
        self._current = record.with_deadline(deadline)
        self._state = record.kind.state
        self.clock.reschedule(deadline)

        if previous_state is not self._state:
            log_state_transition(
                self.logger,
                from_state=previous_state.value,
                to_state=self._state.value,
                trigger=trigger,
                context={"expected_end_time": deadline.isoformat()}
            )
        else:
            self.logger.info("Deadline moved", kind=record.kind.value,
                             expected_end_time=deadline.isoformat(), trigger=trigger)

    def _long_break(self, seconds: float) -> None:
        self._reset_bank("long_break_started")
        self._long_break_override = seconds

        if self._current is None:
            self._begin_work(self.clock.now(), trigger="long_break")

        if self._current.kind is IntervalKind.LONG_BREAK:
            self._expected_break_duration = seconds
            self._set_deadline(deadline_after(self.clock.now(), seconds), "long_break")
            return

        self._expected_break_duration = seconds
        self._begin_break(IntervalKind.LONG_BREAK, seconds, trigger="long_break")

    def _kill(self) -> None:
        previous_state = self._state
        self.clock.cancel()
        self._reset_bank("killed")
        self._work_interval_count = 0
        self._expected_break_duration = None
        self._long_break_override = None
        self._current = None
        self._state = CycleState.IDLE

        log_state_transition(
            self.logger,
            from_state=previous_state.value,
            to_state=CycleState.IDLE.value,
            trigger="kill",
        )
        self.events.emit(LifecycleEvent.KILLED, previous_state=previous_state)

    # ---- Interval lifecycle ----

    def _close_current(self, trigger: str) -> None:
        record = self._current
        if record is None:
            return
        if record.in_overtime:
            self.logger.info("Closing interval out of overtime", kind=record.kind.value,
                             overtime_seconds=seconds_between(record.overtime_since, self.clock.now()))

        if record.kind is IntervalKind.WORK:
            self._finish_work(trigger)
        elif record.kind.is_break:
            self._finish_break(trigger)
        else:
            raise StateTransitionError(
                f"Cannot close interval of kind {record.kind!r}",
                current_state=self._state.value,
                attempted_transition="close"
            )

    def _begin_work(self, deadline: Optional[datetime], trigger: str) -> None:
        now = self.clock.now()
        if deadline is None:
            deadline = deadline_after(now, self.config.work_length)
        self._begin(IntervalKind.WORK, now, deadline, trigger)

    def _begin_break(self, kind: IntervalKind, length: float, trigger: str) -> None:
        now = self.clock.now()
        self._begin(kind, now, deadline_after(now, length), trigger, length=length)

    def _begin(
        self,
        kind: IntervalKind,
        now: datetime,
        deadline: datetime,
        trigger: str,
        length: Optional[float] = None
    ) -> None:
        previous_state = self._state
        self._current = IntervalRecord(kind=kind, start_time=now, expected_end_time=deadline)
        self._state = kind.state
        self.clock.start(kind, deadline)

        log_state_transition(
            self.logger,
            from_state=previous_state.value,
            to_state=self._state.value,
            trigger=trigger,
            context={
                "expected_end_time": deadline.isoformat(),
                "length": format_duration(length if length is not None else seconds_between(now, deadline)),
                "work_interval_count": self._work_interval_count,
            }
        )
        self.events.emit(
            LifecycleEvent.INTERVAL_STARTED,
            kind=kind,
            start_time=now,
            expected_end_time=deadline,
        )

    def _finish_work(self, trigger: str) -> None:
        record = self._current
        now = self.clock.now()
        actual_work = seconds_between(record.start_time, now)
        first_interval = self._work_interval_count == 0
        if first_interval:
            self._reset_bank("session_start")
        bank_before = self.bank.seconds

        length = self.planner.compute_break_length(
            actual_work,
            self.config.break_to_work_ratio,
            self.config.minimum_break_length,
            first_interval=first_interval,
        )

        self._long_break_override = None
        self._work_interval_count += 1
        self._expected_break_duration = length

        self.events.emit(
            LifecycleEvent.BREAK_LENGTH_COMPUTED,
            break_seconds=length,
            actual_work_seconds=actual_work,
            bank_seconds=bank_before,
            work_interval_count=self._work_interval_count,
        )
        if bank_before != 0.0:
            self._emit_bank(reason="consumed", delta=-bank_before)

        self._begin_break(IntervalKind.SHORT_BREAK, length, trigger)

    def _finish_break(self, trigger: str) -> None:
        record = self._current
        now = self.clock.now()
        actual_break = seconds_between(record.start_time, now)

        delta = self.planner.record_break_outcome(self._expected_break_duration, actual_break)
        self._expected_break_duration = None
        if delta is not None:
            self._emit_bank(reason="break_outcome", delta=delta)

        if record.kind is IntervalKind.LONG_BREAK:
            self._reset_bank("long_break_finished")
            self._work_interval_count = 0
            self._long_break_override = None
            self.events.emit(
                LifecycleEvent.LONG_BREAK_FINISHED,
                duration_seconds=actual_break,
            )

        self._begin_work(None, trigger)

    def _enter_overtime(self, now: datetime) -> None:
        record = self._current
        previous_state = self._state
        self._current = record.with_overtime(now)
        self._state = CycleState.OVERTIME

        log_state_transition(
            self.logger,
            from_state=previous_state.value,
            to_state=CycleState.OVERTIME.value,
            trigger="deadline",
            context={"kind": record.kind.value},
        )
        self.events.emit(
            LifecycleEvent.OVERTIME_STARTED,
            kind=record.kind,
            deadline=record.expected_end_time,
        )

    # ---- Bank helpers ----

    def _reset_bank(self, reason: str) -> None:
        previous = self.bank.seconds
        self.planner.reset_bank(reason)
        if previous != 0.0:
            self._emit_bank(reason=reason, delta=-previous)

    def _emit_bank(self, reason: str, delta: float) -> None:
        self.events.emit(
            LifecycleEvent.BANK_UPDATED,
            balance_seconds=self.bank.seconds,
            delta_seconds=delta,
            reason=reason,
        )
