"""
Configuration error classifications.

Raised when the ratio, minimum break or any other cycle parameter cannot be
used for a break-length computation. These are never defaulted silently.
"""

from typing import Any, Optional

from .base import ThirdTimeError


class ConfigurationError(ThirdTimeError):
    """A cycle parameter is missing, negative or not a real number."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.recoverable = False
