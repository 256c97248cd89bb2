"""
Market Data Service

CONTRACT:
    Input:  symbol + bar interval
    Output: Series (list of Candle), tickers, symbol lists

RESPONSIBILITIES:
    - Fetch klines, 24h tickers and the symbol list from Binance
    - Normalize payloads to the market schemas
    - Cache tickers and serve stale values on upstream failure
    - Stay inside the exchange request budget

The indicator engine never talks to the exchange directly.
"""

from typing import Optional

from cryptodash.core.config import settings
from cryptodash.services.market_data.interface import MarketDataSource
from cryptodash.services.market_data.binance_adapter import BinanceClient
from cryptodash.services.market_data.mock_data import MockMarketDataSource

__all__ = [
    "MarketDataSource",
    "BinanceClient",
    "MockMarketDataSource",
    "create_market_data_source",
]


def create_market_data_source(use_mock: Optional[bool] = None) -> MarketDataSource:
    """Build the configured data source (Binance, or mock when offline)."""
    if use_mock is None:
        use_mock = settings.use_mock_data
    if use_mock:
        return MockMarketDataSource()
    return BinanceClient()
