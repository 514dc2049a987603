"""User command error classifications."""

from typing import Any, Optional

from .base import ThirdTimeError


class InvalidArgument(ThirdTimeError):
    """A manual command received an argument it cannot act on."""

    def __init__(self, message: str, argument: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.argument = argument
        self.value = value
        self.recoverable = True
