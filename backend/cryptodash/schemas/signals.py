"""
CONTRACT 2: Indicator Engine

Input: Series (list of Candle, oldest first)
Output: IndicatorResult

Pure Python/NumPy - deterministic, no state between calls.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from cryptodash.schemas.market import Timeframe


# =============================================================================
# ENUMS
# =============================================================================


class SignalType(str, Enum):
    STRONG_BUY = "STRONG_BUY"
    STRONG_SELL = "STRONG_SELL"
    NEUTRAL = "NEUTRAL"


# =============================================================================
# OUTPUT: IndicatorResult
# =============================================================================


class IndicatorResult(BaseModel):
    """
    Indicator snapshot for one series.

    The all-defaults instance (see DEFAULT_RESULT) doubles as the sentinel
    for insufficient data and for numerical anomalies.
    """

    model_config = {"frozen": True}

    adx: float = Field(default=0.0, ge=0)
    rsi: float = Field(default=50.0, ge=0, le=100)
    ema50: float = 0.0
    ema200: float = 0.0
    signal: SignalType = SignalType.NEUTRAL
    strength: float = Field(default=0.0, ge=0, le=100)


DEFAULT_RESULT = IndicatorResult()


class SymbolSignal(BaseModel):
    """IndicatorResult tagged with the symbol and bar interval it came from."""

    symbol: str
    interval: Timeframe = Timeframe.M15
    result: IndicatorResult
    last_price: Optional[float] = None
    computed_at: datetime = Field(default_factory=datetime.now)

    @property
    def signal(self) -> SignalType:
        return self.result.signal

    @property
    def strength(self) -> float:
        return self.result.strength


class ScanResult(BaseModel):
    """Filtered, strength-sorted output of a multi-symbol scan."""

    scanned: int = Field(..., ge=0, description="Symbols attempted")
    matched: int = Field(..., ge=0)
    signals: list[SymbolSignal]
    scan_time: datetime = Field(default_factory=datetime.now)
