#!/usr/bin/env python3
"""
Basic Usage Example - Third Time Scheduler

This script simulates a morning of Third Time scheduling on a manual clock.
It shows how to:
- Activate the mode and subscribe to lifecycle events
- Let a work interval run to its deadline and see the computed break
- Come back late from a break and watch the bank shorten the next one
- End an interval early and take a manual long break

Run: python examples/basic_usage.py
"""

from datetime import datetime, timezone

from third_time.config.defaults import CycleConfig
from third_time.logging import configure_logging
from third_time.session import ThirdTimeSession
from third_time.state.clock import ManualClock
from third_time.state.events import LifecycleEvent
from third_time.utils.time import format_duration


def print_status(session: ThirdTimeSession, label: str) -> None:
    """Print the cycle state after a step."""
    status = session.machine.get_status()
    print(f"\n📍 {label}")
    print(f"   State:          {status['state']}")
    print(f"   Remaining:      {format_duration(status['remaining_seconds'])}")
    print(f"   Bank:           {format_duration(status['bank_seconds'])}")
    print(f"   Work intervals: {status['work_interval_count']}")


def main() -> None:
    """Run the simulated session."""
    configure_logging(level="WARNING")

    clock = ManualClock(start=datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc))
    session = ThirdTimeSession(config=CycleConfig(), clock=clock)
    host_settings = {"long_break_frequency": 4, "long_break_minutes": 15}

    session.events.subscribe(
        LifecycleEvent.BREAK_LENGTH_COMPUTED,
        lambda break_seconds, actual_work_seconds, **_: print(
            f"   ☕ Break of {format_duration(break_seconds)} "
            f"after {format_duration(actual_work_seconds)} of work"
        ),
    )
    session.events.subscribe(
        LifecycleEvent.BANK_UPDATED,
        lambda balance_seconds, reason, **_: print(
            f"   🏦 Bank now {format_duration(balance_seconds)} ({reason})"
        ),
    )

    print("🚀 Third Time Basic Usage Example")
    print("=" * 50)

    session.activate(host_settings)
    print(f"Host long-break frequency while active: {host_settings['long_break_frequency']}")

    session.start()
    print_status(session, "Work interval started")

    clock.advance(25 * 60)
    print_status(session, "Work deadline reached")

    # Back 2 minutes after the break was due
    clock.advance(500 + 120)
    session.end_now()
    print_status(session, "Returned late from the break")

    clock.advance(25 * 60)
    print_status(session, "Second work interval done, break shortened by the bank")

    clock.advance(60)
    session.end_now()
    clock.advance(10 * 60)
    session.start_long_break(20)
    print_status(session, "Long break started after a short stint")

    clock.advance(20 * 60)
    session.end_now()
    print_status(session, "Back from the long break, session starts afresh")

    session.deactivate()
    print(f"\nHost long-break frequency restored: {host_settings['long_break_frequency']}")
    print("✅ Example completed")


if __name__ == "__main__":
    main()
