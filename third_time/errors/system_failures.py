"""
System failure error classifications.

These represent a scheduler that reached a state its transitions do not
cover. They are not raised on any normal path.
"""

from typing import Optional

from .base import ThirdTimeError


class SystemFailureError(ThirdTimeError):
    """Base class for unrecoverable scheduler failures."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, **kwargs)
        self.recoverable = False


class StateTransitionError(SystemFailureError):
    """Invalid state transition that would corrupt the cycle."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_transition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_transition = attempted_transition
