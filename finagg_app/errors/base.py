"""Root of the error hierarchy."""

from typing import Any, Dict, Optional


class FinaggError(Exception):
    """Base class for every error raised by the aggregation client."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True
