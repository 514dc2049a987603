"""
State machine data models for the work/break cycle.

This module defines the cycle states, the kinds of interval the clock can
time, and the record describing the interval currently running.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional


class CycleState(str, Enum):
    """Cycle states exposed to observers."""
    IDLE = "idle"
    WORK_INTERVAL = "work_interval"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"
    OVERTIME = "overtime"


class IntervalKind(str, Enum):
    """Kinds of timed interval."""
    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def is_break(self) -> bool:
        return self is not IntervalKind.WORK

    @property
    def state(self) -> CycleState:
        """State the cycle is in while an interval of this kind runs on time."""
        return _KIND_STATES[self]


_KIND_STATES = {
    IntervalKind.WORK: CycleState.WORK_INTERVAL,
    IntervalKind.SHORT_BREAK: CycleState.SHORT_BREAK,
    IntervalKind.LONG_BREAK: CycleState.LONG_BREAK,
}


@dataclass(frozen=True)
class IntervalRecord:
    """The live interval. Replaced, never mutated, at each change."""

    kind: IntervalKind
    start_time: datetime
    expected_end_time: Optional[datetime] = None
    overtime_since: Optional[datetime] = None          # Deadline passed, not yet closed

    @property
    def in_overtime(self) -> bool:
        return self.overtime_since is not None

    def with_deadline(self, deadline: Optional[datetime]) -> 'IntervalRecord':
        """Same interval re-armed with a new deadline, leaving overtime."""
        return replace(self, expected_end_time=deadline, overtime_since=None)

    def with_overtime(self, timestamp: datetime) -> 'IntervalRecord':
        """Mark the deadline as passed without closing the interval."""
        return replace(self, overtime_since=timestamp)
