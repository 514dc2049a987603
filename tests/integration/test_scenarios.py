"""
End-to-end Third Time scenarios on a manual clock.

Each test drives a whole session through the public session commands and
checks the resulting break lengths and bank.
"""

import pytest

from third_time.config.defaults import CycleConfig
from third_time.session import ThirdTimeSession
from third_time.state.events import LifecycleEvent
from third_time.state.models import CycleState


@pytest.fixture
def session(clock, events) -> ThirdTimeSession:
    config = CycleConfig(break_to_work_ratio=1 / 3, minimum_break_minutes=1, work_length_minutes=25)
    session = ThirdTimeSession(config=config, clock=clock, events=events)
    session.activate()
    return session


class TestScenarios:
    """Reference scenarios."""

    def test_on_schedule_work(self, session, clock):
        """1500s of work on schedule earns a 500s break and empties the bank."""
        session.start()
        clock.advance(1500)

        assert session.machine.state is CycleState.SHORT_BREAK
        assert session.machine.expected_break_duration == pytest.approx(500)
        assert session.machine.bank.seconds == 0.0

    def test_late_return_shortens_next_break(self, session, clock, recorder):
        """Returning 120s late turns a 500s break into a 380s one next time."""
        session.start()
        clock.advance(1500)
        clock.advance(500 + 120)
        session.end_now()

        assert session.machine.bank.seconds == pytest.approx(-120)

        clock.advance(1500)

        computed = recorder.of(LifecycleEvent.BREAK_LENGTH_COMPUTED)
        assert computed[-1]["bank_seconds"] == pytest.approx(-120)
        assert computed[-1]["break_seconds"] == pytest.approx(380)
        assert session.machine.bank.seconds == 0.0

    def test_large_debt_floored_and_discarded(self, clock, events):
        """A debt larger than the break is floored at the minimum and dropped."""
        config = CycleConfig(break_to_work_ratio=0, minimum_break_minutes=1)
        session = ThirdTimeSession(config=config, clock=clock, events=events)
        session.activate()
        session.start()
        clock.advance(1500)
        clock.advance(60)
        session.end_now()                  # break taken exactly, bank untouched
        session.machine.bank.apply(-1000)

        clock.advance(1500)

        assert session.machine.expected_break_duration == 60
        assert session.machine.bank.seconds == 0.0

    def test_end_now_from_idle(self, session):
        """Ending with nothing running yields a zero-length work interval."""
        session.end_in(0)

        assert session.machine.state is CycleState.SHORT_BREAK
        assert session.machine.expected_break_duration == pytest.approx(60)

    def test_long_break_discards_bank(self, session, clock, recorder):
        """A manual long break empties the bank and restarts the count."""
        session.start()
        clock.advance(1500)
        clock.advance(350)
        session.end_now()
        assert session.machine.bank.seconds == pytest.approx(150)

        session.start_long_break(20)
        assert session.machine.bank.seconds == 0.0
        assert session.machine.state is CycleState.LONG_BREAK

        clock.advance(20 * 60)
        session.end_now()

        assert session.machine.state is CycleState.WORK_INTERVAL
        assert session.machine.bank.seconds == 0.0
        assert session.machine.work_interval_count == 0
        assert len(recorder.of(LifecycleEvent.LONG_BREAK_FINISHED)) == 1


class TestFullMorning:
    """A longer session mixing every command."""

    def test_event_sequence(self, clock, events, recorder):
        session = ThirdTimeSession(config=CycleConfig(), clock=clock, events=events)
        session.activate()

        session.start()
        clock.advance(1500)                # work -> short break (500s)
        clock.advance(200)
        session.end_now()                  # back early, bank +300
        session.end_in(10)                 # cut the work interval short
        clock.advance(600)                 # 600s of work -> 200 + 300 = 500s break
        assert session.machine.expected_break_duration == pytest.approx(500)

        clock.advance(500)                 # break runs into overtime
        assert session.machine.state is CycleState.OVERTIME
        clock.advance(100)
        session.end_now()                  # 100s late
        assert session.machine.bank.seconds == pytest.approx(-100)

        session.kill()
        assert session.machine.bank.seconds == 0.0

        assert recorder.names() == [
            "interval_started",            # work
            "break_length_computed",
            "interval_started",            # short break
            "bank_updated",                # +300
            "interval_started",            # work
            "break_length_computed",
            "bank_updated",                # 300 consumed
            "interval_started",            # short break
            "overtime_started",
            "bank_updated",                # -100
            "interval_started",            # work
            "bank_updated",                # reset by kill
            "killed",
        ]
