"""
Break-length computation and bank bookkeeping.

A break is a fixed ratio of the work actually done, shifted by the bank and
floored at a minimum. Breaks that end early or late feed the difference
back into the bank for the next computation.
"""

from typing import Any, Optional

import structlog

from ..errors import ConfigurationError
from ..utils.time import format_duration, is_real_number
from .bank import Bank

logger = structlog.get_logger(__name__)


def break_length(
    actual_work: float,
    ratio: float,
    bank_seconds: float,
    minimum: float
) -> float:
    """
    Third Time break formula.

    Args:
        actual_work: Seconds actually worked, not the nominal work length
        ratio: Break seconds earned per work second
        bank_seconds: Carried surplus (positive) or debt (negative)
        minimum: Floor for the result, in seconds

    Returns:
        Break length in seconds, never below minimum
    """
    raw = ratio * actual_work
    adjusted = raw + bank_seconds
    return max(adjusted, minimum)


class IntervalPlanner:
    """Computes break lengths and is the only writer of the bank."""

    def __init__(self, bank: Bank):
        self.bank = bank
        self.logger = logger

    @staticmethod
    def validate_ratio(ratio: Any) -> None:
        """Raise ConfigurationError unless ratio is a non-negative real number."""
        if not is_real_number(ratio) or ratio < 0:
            raise ConfigurationError(
                f"Break-to-work ratio must be a non-negative number (got: {ratio!r})",
                field="break_to_work_ratio",
                value=ratio
            )

    @staticmethod
    def validate_minimum(minimum: Any) -> None:
        """Raise ConfigurationError unless minimum is a non-negative real number."""
        if not is_real_number(minimum) or minimum < 0:
            raise ConfigurationError(
                f"Minimum break length must be a non-negative number (got: {minimum!r})",
                field="minimum_break_length",
                value=minimum
            )

    def compute_break_length(
        self,
        actual_work: float,
        ratio: float,
        minimum: float,
        first_interval: bool = False
    ) -> float:
        """
        Compute the next break and absorb the bank into it.

        The bank is zero when this returns: its balance now lives in the
        returned break length. On the first interval of a session a stale
        balance is discarded before the formula runs.
        """
        self.validate_ratio(ratio)
        self.validate_minimum(minimum)

        if first_interval:
            self.bank.reset(reason="session_start")

        bank_seconds = self.bank.seconds
        length = break_length(max(actual_work, 0.0), ratio, bank_seconds, minimum)
        self.bank.reset(reason="consumed")

        self.logger.info(
            "Break length computed",
            actual_work=format_duration(actual_work),
            ratio=ratio,
            bank_seconds=bank_seconds,
            break_seconds=length,
            floored=length == minimum,
        )
        return length

    def reset_bank(self, reason: str) -> None:
        """Discard the balance (kill, long break, session start)."""
        self.bank.reset(reason=reason)

    def record_break_outcome(
        self,
        expected: Optional[float],
        actual: float
    ) -> Optional[float]:
        """
        Credit or debit the bank with how far a break missed its plan.

        Args:
            expected: Planned break length, None when no break was pending
            actual: Seconds the break really lasted

        Returns:
            The delta applied (positive when the break ended early), or None
            when there was nothing to record
        """
        if expected is None:
            return None

        delta = expected - actual
        self.bank.apply(delta, reason="break_outcome")
        self.logger.debug(
            "Break outcome recorded",
            expected=format_duration(expected),
            actual=format_duration(actual),
            delta_seconds=delta,
        )
        return delta
