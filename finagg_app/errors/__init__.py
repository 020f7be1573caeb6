"""
Error classification system for the aggregation client.

Configuration errors abort a query before any network activity. Provider and
data quality errors are confined to the category that raised them.
"""

from .base import FinaggError
from .configuration import (
    ConfigurationError,
    UnsupportedCategoryError,
)
from .data_quality import (
    IndicatorComputationError,
    MalformedPayloadError,
    NoDataError,
)
from .provider import (
    ProtocolError,
    TransportError,
)

__all__ = [
    "FinaggError",
    # Configuration
    "ConfigurationError",
    "UnsupportedCategoryError",
    # Provider exchange
    "TransportError",
    "ProtocolError",
    # Data quality
    "MalformedPayloadError",
    "NoDataError",
    "IndicatorComputationError",
]
