"""Pytest configuration and shared fixtures."""

import pytest
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

from third_time.config.defaults import CycleConfig
from third_time.state.clock import ManualClock
from third_time.state.events import EventBus, LifecycleEvent
from third_time.state.machine import CycleStateMachine


@pytest.fixture
def start_time() -> datetime:
    """Fixed session start for deterministic deadlines."""
    return datetime(2024, 3, 4, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(start_time: datetime) -> ManualClock:
    """Manual clock positioned at start_time."""
    return ManualClock(start=start_time)


@pytest.fixture
def config() -> CycleConfig:
    """Third Time defaults: 25 minute work, ratio 1/3, 1 minute minimum."""
    return CycleConfig(
        work_length_minutes=25,
        break_to_work_ratio=1 / 3,
        minimum_break_minutes=1,
        long_break_minutes=20,
    )


class EventRecorder:
    """Catch-all listener keeping (event, payload) pairs in order."""

    def __init__(self):
        self.records: List[Tuple[LifecycleEvent, Dict[str, Any]]] = []

    def __call__(self, event: LifecycleEvent, **payload: Any) -> None:
        self.records.append((event, payload))

    def of(self, event: LifecycleEvent) -> List[Dict[str, Any]]:
        return [payload for recorded, payload in self.records if recorded is event]

    def names(self) -> List[str]:
        return [event.value for event, _ in self.records]


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def events(recorder: EventRecorder) -> EventBus:
    """Event bus with the recorder subscribed to everything."""
    bus = EventBus()
    bus.subscribe_all(recorder)
    return bus


@pytest.fixture
def machine(config: CycleConfig, clock: ManualClock, events: EventBus) -> CycleStateMachine:
    """State machine on the manual clock with recorded events."""
    return CycleStateMachine(config, clock, events=events)
