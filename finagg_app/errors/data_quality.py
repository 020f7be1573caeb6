"""
Data quality error classifications for provider payloads and price series.
"""

from typing import Any, Optional

from .base import FinaggError


class MalformedPayloadError(FinaggError):
    """Payload exists but does not match the columnar fields/items shape."""

    def __init__(self, message: str, row_index: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.row_index = row_index


class NoDataError(FinaggError):
    """Every attempted category failed or returned no records."""

    def __init__(self, message: str, identifier: Optional[str] = None,
                 outcomes: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.identifier = identifier
        self.outcomes = outcomes or []


class IndicatorComputationError(FinaggError):
    """Price series contains a value the indicator math cannot consume."""

    def __init__(self, message: str, index: Optional[int] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.index = index
        self.value = value
        self.recoverable = False
