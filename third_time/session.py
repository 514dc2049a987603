"""
Third Time mode for a host timer.

A session is the lifetime of the mode: activating it creates a fresh bank
and state machine and takes over the host settings Third Time cannot share
(the automatic long-break trigger); deactivating it stops the cycle and
hands those settings back exactly as they were.
"""

from datetime import datetime
from typing import Any, MutableMapping, Optional, Union

import structlog

from .config.defaults import CycleConfig, get_default_config
from .errors import InvalidArgument, StateTransitionError
from .state.bank import Bank
from .state.clock import AsyncioClock, Clock
from .state.events import EventBus
from .state.machine import CycleStateMachine
from .utils.time import parse_clock_time

logger = structlog.get_logger(__name__)

# Host settings held while the mode is on. Long breaks are manual only.
HOST_OVERRIDES: dict[str, Any] = {
    "long_break_frequency": None,
}

_MISSING = object()


class ThirdTimeSession:
    """
    Entry point for hosts: lifecycle plus the user-facing commands.

    Commands raise StateTransitionError while the mode is off.
    """

    def __init__(
        self,
        config: Optional[CycleConfig] = None,
        clock: Optional[Clock] = None,
        events: Optional[EventBus] = None
    ) -> None:
        self.config = config if config is not None else get_default_config()
        self.clock = clock if clock is not None else AsyncioClock()
        self.events = events if events is not None else EventBus()
        self.logger = logger

        self.machine: Optional[CycleStateMachine] = None
        self._host_settings: Optional[MutableMapping[str, Any]] = None
        self._saved_settings: dict[str, Any] = {}

    @property
    def is_active(self) -> bool:
        return self.machine is not None

    def activate(self, host_settings: Optional[MutableMapping[str, Any]] = None) -> CycleStateMachine:
        """Turn the mode on, returning the new state machine."""
        if self.machine is not None:
            self.logger.debug("Third Time mode already active")
            return self.machine

        if host_settings is not None:
            self._saved_settings = {
                key: host_settings.get(key, _MISSING) for key in HOST_OVERRIDES
            }
            host_settings.update(HOST_OVERRIDES)
            self._host_settings = host_settings

        self.machine = CycleStateMachine(self.config, self.clock, bank=Bank(), events=self.events)
        self.logger.info(
            "Third Time mode activated",
            ratio=self.config.break_to_work_ratio,
            minimum_break_minutes=self.config.minimum_break_minutes,
            overridden_settings=sorted(self._saved_settings),
        )
        return self.machine

    def deactivate(self) -> None:
        """Turn the mode off, restoring the host settings saved at activation."""
        if self.machine is None:
            return

        self.machine.kill()
        self.clock.set_deadline_callback(None)
        self.machine = None

        if self._host_settings is not None:
            for key, value in self._saved_settings.items():
                if value is _MISSING:
                    self._host_settings.pop(key, None)
                else:
                    self._host_settings[key] = value

        self.logger.info("Third Time mode deactivated", restored_settings=sorted(self._saved_settings))
        self._host_settings = None
        self._saved_settings = {}

    # ---- Commands ----

    def start(self) -> None:
        self._require_machine().start()

    def kill(self) -> None:
        self._require_machine().kill()

    def end_in(self, minutes: Optional[float] = None) -> None:
        """End the current interval in `minutes` (configured default when omitted)."""
        if minutes is None:
            minutes = self.config.default_end_in_minutes
        self._require_machine().force_end_in(minutes)

    def end_at(self, value: Union[datetime, str], requested_at: Optional[datetime] = None) -> None:
        """
        End the current interval at a time of day.

        Args:
            value: A datetime, or an 'HH:MM' string meaning its next occurrence
            requested_at: When the user was prompted; defaults to now
        """
        machine = self._require_machine()
        if requested_at is None:
            requested_at = self.clock.now()

        if isinstance(value, str):
            parsed = parse_clock_time(value, requested_at)
            if parsed is None:
                raise InvalidArgument(
                    f"Expected a clock time as HH:MM (got: {value!r})",
                    argument="end_at",
                    value=value
                )
            value = parsed

        machine.force_end_at(value, requested_at=requested_at)

    def end_now(self) -> None:
        self._require_machine().force_end_now()

    def start_long_break(self, minutes: Optional[float] = None) -> None:
        """Start a long break now, of `minutes` or the configured length."""
        if minutes is None:
            minutes = self.config.long_break_minutes
        self._require_machine().force_long_break(minutes)

    def _require_machine(self) -> CycleStateMachine:
        if self.machine is None:
            raise StateTransitionError(
                "Third Time mode is not active",
                current_state="inactive",
                attempted_transition="command"
            )
        return self.machine
