"""
Mock Market Data

Generates deterministic mock market data for development and testing.
The same symbol always produces the same random walk.
"""

import random
import time
import zlib
from typing import Optional

from cryptodash.schemas.market import (
    Candle,
    PriceData,
    SymbolInfo,
    Timeframe,
    TIMEFRAME_SECONDS,
)
from cryptodash.services.market_data.interface import MarketDataSource


# Base prices for common pairs
SYMBOL_BASE_PRICES = {
    "BTCUSDT": 65000.0,
    "ETHUSDT": 3200.0,
    "BNBUSDT": 580.0,
    "SOLUSDT": 150.0,
    "XRPUSDT": 0.52,
    "ADAUSDT": 0.45,
    "DOGEUSDT": 0.15,
    "DOTUSDT": 7.2,
    "LINKUSDT": 17.5,
    "LTCUSDT": 85.0,
}


def _rng(symbol: str) -> random.Random:
    return random.Random(zlib.crc32(symbol.upper().encode()))


def get_base_price(symbol: str) -> float:
    """Get base price for a symbol."""
    return SYMBOL_BASE_PRICES.get(symbol.upper(), 1.0 + _rng(symbol).random() * 100)


def generate_mock_candles(
    symbol: str,
    interval: str = "15m",
    lookback: int = 500,
    end_time: Optional[int] = None,
) -> list[Candle]:
    """Generate a random-walk series ending at `end_time` (epoch seconds)."""
    rng = _rng(symbol)
    step = TIMEFRAME_SECONDS[Timeframe(interval)]
    if end_time is None:
        end_time = int(time.time()) // step * step

    candles = []
    price = get_base_price(symbol)
    volatility = 0.01  # 1% per bar
    timestamp = end_time - step * lookback

    for _ in range(lookback):
        change = (rng.random() - 0.5) * 2 * volatility * price

        open_price = price
        close_price = max(open_price + change, open_price * 0.5)
        high_price = max(open_price, close_price) * (1 + rng.random() * volatility * 0.5)
        low_price = min(open_price, close_price) * (1 - rng.random() * volatility * 0.5)

        candles.append(
            Candle(
                time=timestamp,
                open=open_price,
                high=high_price,
                low=low_price,
                close=close_price,
                volume=rng.uniform(100, 10_000),
            )
        )

        price = close_price
        timestamp += step

    return candles


class MockMarketDataSource(MarketDataSource):
    """Offline stand-in for the exchange, backed by generated data."""

    def __init__(self, symbols: Optional[list[str]] = None):
        self.symbols = symbols or list(SYMBOL_BASE_PRICES)

    @property
    def name(self) -> str:
        return "Mock"

    async def get_series(
        self, symbol: str, interval: str, limit: Optional[int] = None
    ) -> list[Candle]:
        return generate_mock_candles(symbol, interval, limit or 500)

    async def list_symbols(self, quote: str = "USDT") -> list[str]:
        return [s for s in self.symbols if s.endswith(quote)]

    async def search_symbols(self, query: str, limit: int = 10) -> list[SymbolInfo]:
        needle = query.lower()
        return [
            SymbolInfo(
                symbol=s,
                base_asset=s[:-4],
                quote_asset="USDT",
                status="TRADING",
            )
            for s in self.symbols
            if s.endswith("USDT") and needle in s.lower()
        ][:limit]

    async def get_price(self, symbol: str) -> PriceData:
        candles = generate_mock_candles(symbol, "1h", 24)
        first, last = candles[0], candles[-1]
        return PriceData(
            price=last.close,
            price_change=round((last.close / first.open - 1) * 100, 2),
            volume=sum(c.volume for c in candles),
            high_24h=max(c.high for c in candles),
            low_24h=min(c.low for c in candles),
        )

    async def get_prices(self, symbols: list[str]) -> dict[str, PriceData]:
        return {s.upper(): await self.get_price(s) for s in symbols}
