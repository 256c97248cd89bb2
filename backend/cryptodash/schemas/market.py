"""
CONTRACT 1: Market Data Source

Input: symbol + bar interval
Output: Series (oldest-first list of Candle), tickers, symbol lists

This module describes the raw exchange data after normalization.
The indicator engine only ever sees a Series.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class Timeframe(str, Enum):
    M1 = "1m"
    M5 = "5m"
    M15 = "15m"
    M30 = "30m"
    H1 = "1h"
    H4 = "4h"
    D1 = "1d"
    W1 = "1w"


# Bar length in seconds
TIMEFRAME_SECONDS = {
    Timeframe.M1: 60,
    Timeframe.M5: 300,
    Timeframe.M15: 900,
    Timeframe.M30: 1_800,
    Timeframe.H1: 3_600,
    Timeframe.H4: 14_400,
    Timeframe.D1: 86_400,
    Timeframe.W1: 604_800,
}


# =============================================================================
# CANDLES
# =============================================================================


class Candle(BaseModel):
    """Single OHLC bar. `time` is the bar open time in epoch seconds."""

    model_config = {"frozen": True}

    time: int = Field(..., description="Bar open time (epoch seconds)")
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


# A Series is a plain oldest-first list of candles for one symbol/interval.
Series = list[Candle]


# =============================================================================
# TICKERS / SYMBOLS
# =============================================================================


class PriceData(BaseModel):
    """24h ticker summary for a symbol."""

    price: float
    price_change: float = Field(..., description="24h change in percent")
    volume: float
    high_24h: Optional[float] = None
    low_24h: Optional[float] = None


class SymbolInfo(BaseModel):
    """Tradable pair as listed by the exchange."""

    symbol: str
    base_asset: str
    quote_asset: str
    status: str


class PriceTick(BaseModel):
    """Price update pushed to subscribers of a live feed."""

    symbol: str
    price: float
    price_change: float
    volume: float
    is_live: bool = Field(
        ..., description="True for stream pushes, False for REST snapshots/polls"
    )
    source: str
    timestamp: datetime
