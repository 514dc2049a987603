"""
Exception hierarchy for the Third Time scheduler.

Configuration and argument errors are raised before any scheduler state is
touched. System failures signal a corrupted state machine.
"""

from .base import ThirdTimeError
from .configuration import ConfigurationError
from .commands import InvalidArgument
from .system_failures import (
    SystemFailureError,
    StateTransitionError,
)

__all__ = [
    "ThirdTimeError",
    # Configuration
    "ConfigurationError",
    # Commands
    "InvalidArgument",
    # System Failures
    "SystemFailureError",
    "StateTransitionError",
]
