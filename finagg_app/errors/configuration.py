"""
Configuration error classifications.

These exceptions describe problems with the static setup of the client:
missing credentials or requests for categories that are not registered.
"""

from typing import Optional

from .base import FinaggError


class ConfigurationError(FinaggError):
    """Required configuration is missing or invalid. Aborts before any fetch."""

    def __init__(self, message: str, setting: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.setting = setting
        self.recoverable = False


class UnsupportedCategoryError(FinaggError):
    """No CategorySpec is registered under the requested name."""

    def __init__(self, message: str, category: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.category = category
