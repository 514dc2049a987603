"""
The break bank: a signed ledger of break seconds owed to the user.

Positive balances come from breaks ended early and lengthen the next break;
negative balances come from breaks that ran over and shorten it.
"""

from ..logging.config import get_bank_logger, log_bank_update

bank_logger = get_bank_logger(__name__)


class Bank:
    """Running surplus/deficit of break time, in seconds."""

    def __init__(self, seconds: float = 0.0):
        self._seconds = float(seconds)

    @property
    def seconds(self) -> float:
        return self._seconds

    def apply(self, delta: float, reason: str = "delta") -> float:
        """Add delta to the balance without clamping and return the new balance."""
        previous = self._seconds
        self._seconds = previous + float(delta)
        log_bank_update(bank_logger, reason, previous, self._seconds, delta=delta)
        return self._seconds

    def reset(self, reason: str = "reset") -> None:
        """Set the balance to zero."""
        previous = self._seconds
        self._seconds = 0.0
        if previous != 0.0:
            log_bank_update(bank_logger, reason, previous, 0.0)

    def __repr__(self) -> str:
        return f"Bank(seconds={self._seconds!r})"
