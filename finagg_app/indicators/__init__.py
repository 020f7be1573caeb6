"""Technical indicator calculations over numeric price series"""

from .macd import MACDSeries, calculate_ema, calculate_macd

__all__ = [
    "MACDSeries",
    "calculate_ema",
    "calculate_macd",
]
