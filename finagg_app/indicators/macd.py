"""MACD (Moving Average Convergence Divergence) calculations"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from ..errors import IndicatorComputationError


@dataclass(frozen=True)
class MACDSeries:
    """
    Three position-aligned series, each as long as the input prices.

    ``None`` marks positions where the value is not yet defined.
    """
    difference: list[Optional[float]]   # fast EMA - slow EMA (DIF)
    signal: list[Optional[float]]       # EMA of difference (DEA)
    oscillator: list[Optional[float]]   # (difference - signal) * 2


def _validate_period(name: str, period: int) -> None:
    if isinstance(period, bool) or not isinstance(period, int) or period <= 0:
        raise ValueError(f"{name} must be a positive integer, got {period!r}")


def _validate_prices(prices: Sequence[float]) -> list[float]:
    values = []
    for i, price in enumerate(prices):
        try:
            value = float(price)
        except (TypeError, ValueError) as e:
            raise IndicatorComputationError(
                f"Price at index {i} is not numeric: {price!r}", index=i, value=price
            ) from e
        if not math.isfinite(value):
            raise IndicatorComputationError(
                f"Price at index {i} is not finite: {price!r}", index=i, value=price
            )
        values.append(value)
    return values


def calculate_ema(prices: Sequence[float], period: int) -> list[float]:
    """
    Calculate Exponential Moving Average seeded with the first sample

    EMA[0] = prices[0]
    EMA[i] = prices[i] * α + EMA[i-1] * (1 - α),  α = 2 / (period + 1)

    There is no warm-up gap: the output is as long as the input.

    Args:
        prices: Price samples in chronological order
        period: EMA period

    Returns:
        EMA values, one per input sample
    """
    _validate_period("period", period)
    values = _validate_prices(prices)

    multiplier = 2.0 / (period + 1)
    ema: list[float] = []

    for i, price in enumerate(values):
        if i == 0:
            ema.append(price)
        else:
            ema.append(price * multiplier + ema[i - 1] * (1 - multiplier))

    return ema


def calculate_macd(prices: Sequence[float], fast_period: int = 12,
                   slow_period: int = 26, signal_period: int = 9) -> MACDSeries:
    """
    Calculate MACD difference, signal and oscillator lines

    The signal line is the EMA of the difference taken from index
    ``slow_period - 1`` onward. It is left-padded with
    ``slow_period + signal_period - 2`` undefined markers and cut to the
    input length, so signal[i] is defined only for
    i >= slow_period + signal_period - 2.

    Args:
        prices: Price samples in chronological order
        fast_period: Fast EMA period (default 12)
        slow_period: Slow EMA period (default 26)
        signal_period: Signal EMA period (default 9)

    Returns:
        MACDSeries with three lists of len(prices)

    Raises:
        IndicatorComputationError: If any price is non-numeric or non-finite
        ValueError: If any period is not a positive integer
    """
    _validate_period("fast_period", fast_period)
    _validate_period("slow_period", slow_period)
    _validate_period("signal_period", signal_period)
    values = _validate_prices(prices)

    ema_fast = calculate_ema(values, fast_period)
    ema_slow = calculate_ema(values, slow_period)

    difference: list[Optional[float]] = [fast - slow for fast, slow in zip(ema_fast, ema_slow)]

    settled_start = slow_period - 1
    settled_signal = calculate_ema(difference[settled_start:], signal_period)

    pad_count = settled_start + signal_period - 1
    signal: list[Optional[float]] = ([None] * pad_count + settled_signal)[:len(values)]

    oscillator: list[Optional[float]] = [
        None if sig is None else (dif - sig) * 2
        for dif, sig in zip(difference, signal)
    ]

    return MACDSeries(difference=difference, signal=signal, oscillator=oscillator)
