"""
Provider exchange error classifications.

Raised by the provider client when a request/response round trip with the
upstream tabular API does not yield a usable payload.
"""

from typing import Optional

from .base import FinaggError


class TransportError(FinaggError):
    """Network failure or timeout before a response was received."""

    def __init__(self, message: str, endpoint: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.endpoint = endpoint


class ProtocolError(FinaggError):
    """Non-2xx HTTP status or non-zero provider status code."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 provider_code: Optional[int] = None,
                 provider_message: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.provider_code = provider_code
        self.provider_message = provider_message
