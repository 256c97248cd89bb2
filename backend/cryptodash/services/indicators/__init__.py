"""
Indicator Engine Service

CONTRACT:
    Input:  Series (OHLC candles, oldest first)
    Output: IndicatorResult {adx, rsi, ema50, ema200, signal, strength}

RESPONSIBILITIES:
    - RSI(14), EMA(50), EMA(200), ADX(14)
    - Signal classification (STRONG_BUY / STRONG_SELL / NEUTRAL)
    - 0-100 strength score

PURE PYTHON - Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from cryptodash.services.indicators.engine import compute_indicators
from cryptodash.services.indicators.interface import IndicatorServiceInterface
from cryptodash.services.indicators.service import IndicatorService

__all__ = [
    "compute_indicators",
    "IndicatorServiceInterface",
    "IndicatorService",
]
