"""
Technical Indicator Calculations

Pure Python/NumPy implementations of the indicators behind the signal table.
Each function returns only the final (most recent) value.
All math is deterministic.
"""

import numpy as np

from cryptodash.schemas.signals import SignalType


RSI_PERIOD = 14
ADX_PERIOD = 14
EMA_FAST = 50
EMA_SLOW = 200

ADX_TREND_THRESHOLD = 25
RSI_BUY_THRESHOLD = 50
RSI_SELL_THRESHOLD = 70


def running_sum(values: np.ndarray) -> np.float64:
    """Sum strictly left to right (np.sum adds pairwise)."""
    total = np.float64(0.0)
    for value in values:
        total += value
    return total


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def ema(data: np.ndarray, period: int) -> float:
    """Exponential Moving Average, seeded with the SMA of the first `period` values."""
    if len(data) < period:
        return 0.0

    multiplier = 2 / (period + 1)
    result = running_sum(data[:period]) / period

    for price in data[period:]:
        result = (price - result) * multiplier + result

    return float(result)


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def rsi(closes: np.ndarray, period: int = RSI_PERIOD) -> float:
    """Relative Strength Index with Wilder's smoothing."""
    if len(closes) < period + 1:
        return 50.0

    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = running_sum(gains[:period]) / period
    avg_loss = running_sum(losses[:period]) / period

    for gain, loss in zip(gains[period:], losses[period:]):
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return float(100 - (100 / (1 + rs)))


# =============================================================================
# TREND STRENGTH
# =============================================================================


def true_range(highs: np.ndarray, lows: np.ndarray, closes: np.ndarray) -> np.ndarray:
    """True Range per bar. The first bar has no previous close: high - low."""
    tr = np.empty(len(highs))
    if len(highs) == 0:
        return tr

    tr[0] = highs[0] - lows[0]
    prev_close = closes[:-1]
    tr[1:] = np.maximum.reduce([
        highs[1:] - lows[1:],
        np.abs(highs[1:] - prev_close),
        np.abs(lows[1:] - prev_close),
    ])
    return tr


def plus_dm(highs: np.ndarray) -> np.ndarray:
    """+DM per bar: upward move of the high, 0 on the first bar."""
    up = np.diff(highs)
    return np.concatenate(([0.0], np.where(up > 0, up, 0.0)))


def minus_dm(lows: np.ndarray) -> np.ndarray:
    """-DM per bar: downward move of the low, 0 on the first bar."""
    down = -np.diff(lows)
    return np.concatenate(([0.0], np.where(down > 0, down, 0.0)))


def adx(
    highs: np.ndarray,
    lows: np.ndarray,
    closes: np.ndarray,
    period: int = ADX_PERIOD,
) -> float:
    """
    Average Directional Index over a sliding `period`-bar window.

    +DM and -DM are taken independently per bar (the smaller one is not
    zeroed). Zero true-range windows produce NaN, which callers must treat
    as an anomaly.
    """
    if len(highs) < period * 2:
        return 0.0

    tr = true_range(highs, lows, closes)
    pdm = plus_dm(highs)
    mdm = minus_dm(lows)

    with np.errstate(divide="ignore", invalid="ignore"):
        sum_tr = running_sum(tr[:period])
        sum_pdm = running_sum(pdm[:period])
        sum_mdm = running_sum(mdm[:period])

        plus_di = (sum_pdm / sum_tr) * 100
        minus_di = (sum_mdm / sum_tr) * 100
        result = np.abs(plus_di - minus_di) / (plus_di + minus_di) * 100

        for i in range(period, len(tr)):
            sum_tr = sum_tr - tr[i - period] + tr[i]
            sum_pdm = sum_pdm - pdm[i - period] + pdm[i]
            sum_mdm = sum_mdm - mdm[i - period] + mdm[i]

            plus_di = (sum_pdm / sum_tr) * 100
            minus_di = (sum_mdm / sum_tr) * 100
            dx = np.abs(plus_di - minus_di) / (plus_di + minus_di) * 100
            result = (result * (period - 1) + dx) / period

    return float(result)


# =============================================================================
# SIGNAL CLASSIFICATION
# =============================================================================


def determine_signal(
    adx_value: float,
    rsi_value: float,
    price: float,
    ema_fast: float,
    ema_slow: float,
) -> SignalType:
    """
    Classify the trend.

    STRONG_SELL asks for RSI above 70 while STRONG_BUY only needs 50.
    """
    if adx_value > ADX_TREND_THRESHOLD:
        if rsi_value > RSI_BUY_THRESHOLD and price > ema_fast and ema_fast > ema_slow:
            return SignalType.STRONG_BUY
        if rsi_value > RSI_SELL_THRESHOLD and price < ema_fast and ema_fast < ema_slow:
            return SignalType.STRONG_SELL
    return SignalType.NEUTRAL


def signal_strength(
    adx_value: float,
    rsi_value: float,
    price_vs_ema: float,
    ema_aligned: bool,
) -> float:
    """
    Composite 0-100 confidence score.

    Args:
        adx_value: ADX, contributes up to 30
        rsi_value: RSI, 25 in the extreme zones, 15 in the outer bands
        price_vs_ema: Distance of price from EMA50 in percent, up to 25
        ema_aligned: EMA50 above EMA200, worth 20
    """
    strength = min(adx_value / 2, 30)

    if rsi_value >= 70 or rsi_value <= 30:
        strength += 25
    elif rsi_value >= 60 or rsi_value <= 40:
        strength += 15

    strength += min(abs(price_vs_ema) * 5, 25)

    if ema_aligned:
        strength += 20

    return float(min(max(0.0, strength), 100.0))
