"""
CryptoDash Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from cryptodash.schemas.market import (
    Timeframe,
    Candle,
    Series,
    PriceData,
    PriceTick,
    SymbolInfo,
)
from cryptodash.schemas.signals import (
    SignalType,
    IndicatorResult,
    DEFAULT_RESULT,
    SymbolSignal,
    ScanResult,
)
from cryptodash.schemas.calculator import (
    PlanRequest,
    TradeStep,
    InvestmentPlan,
)
from cryptodash.schemas.notifications import (
    NotificationSettings,
    DispatchRequest,
    DispatchResult,
)

__all__ = [
    # Market
    "Timeframe",
    "Candle",
    "Series",
    "PriceData",
    "PriceTick",
    "SymbolInfo",
    # Signals
    "SignalType",
    "IndicatorResult",
    "DEFAULT_RESULT",
    "SymbolSignal",
    "ScanResult",
    # Calculator
    "PlanRequest",
    "TradeStep",
    "InvestmentPlan",
    # Notifications
    "NotificationSettings",
    "DispatchRequest",
    "DispatchResult",
]
