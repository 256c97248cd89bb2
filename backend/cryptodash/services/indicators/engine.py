"""
Indicator Engine

Maps an OHLC series to an IndicatorResult. Total: every failure, from a
short series to a malformed candle to a NaN in the maths, yields
DEFAULT_RESULT instead of an exception.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any, Optional, Sequence

import numpy as np

from cryptodash.schemas.signals import IndicatorResult, DEFAULT_RESULT
from cryptodash.services.indicators.calculations import (
    EMA_FAST,
    EMA_SLOW,
    adx,
    ema,
    rsi,
    determine_signal,
    signal_strength,
)

logger = logging.getLogger(__name__)

# Longest lookback (EMA200)
MIN_CANDLES = EMA_SLOW


def _field(candle: Any, name: str) -> float:
    """Read a price field from a Candle model or a plain mapping."""
    if isinstance(candle, Mapping):
        value = candle[name]
    else:
        value = getattr(candle, name)
    return float(value)


def _series_to_arrays(series: Sequence[Any]) -> tuple:
    """Convert a candle series to numpy arrays (highs, lows, closes)."""
    highs = np.array([_field(c, "high") for c in series], dtype=float)
    lows = np.array([_field(c, "low") for c in series], dtype=float)
    closes = np.array([_field(c, "close") for c in series], dtype=float)
    return highs, lows, closes


def _is_valid_number(value: float) -> bool:
    return isinstance(value, float) and math.isfinite(value)


def compute_indicators(series: Optional[Sequence[Any]]) -> IndicatorResult:
    """
    Compute RSI(14), EMA(50), EMA(200), ADX(14), signal and strength.

    Args:
        series: Oldest-first candles (Candle models or mappings with
            high/low/close keys). At least 200 are required.

    Returns:
        IndicatorResult, or DEFAULT_RESULT when the series is too short or
        any indicator comes out non-finite.
    """
    try:
        if not series or len(series) < MIN_CANDLES:
            return DEFAULT_RESULT

        highs, lows, closes = _series_to_arrays(series)

        current_adx = adx(highs, lows, closes)
        current_rsi = rsi(closes)
        current_ema50 = ema(closes, EMA_FAST)
        current_ema200 = ema(closes, EMA_SLOW)

        values = (current_adx, current_rsi, current_ema50, current_ema200)
        if not all(_is_valid_number(v) for v in values):
            logger.debug(f"Non-finite indicator values {values}, using defaults")
            return DEFAULT_RESULT

        price = float(closes[-1])
        signal = determine_signal(
            current_adx, current_rsi, price, current_ema50, current_ema200
        )
        strength = signal_strength(
            adx_value=current_adx,
            rsi_value=current_rsi,
            price_vs_ema=((price / current_ema50) - 1) * 100,
            ema_aligned=current_ema50 > current_ema200,
        )

        return IndicatorResult(
            adx=current_adx,
            rsi=current_rsi,
            ema50=current_ema50,
            ema200=current_ema200,
            signal=signal,
            strength=strength,
        )

    except Exception as e:
        logger.debug(f"Indicator computation failed: {e}")
        return DEFAULT_RESULT
