"""Root of the Third Time exception hierarchy."""

from typing import Any, Dict, Optional


class ThirdTimeError(Exception):
    """Base class for all scheduler errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
