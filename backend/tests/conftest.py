"""
Shared fixtures: synthetic candle series and an in-memory market data source.
"""

from typing import Optional

import numpy as np
import pytest

from cryptodash.schemas.market import Candle, PriceData, SymbolInfo
from cryptodash.services.market_data.interface import MarketDataSource


def build_series(closes, spread: float = 1.0, start: int = 1_700_000_000, step: int = 900) -> list[Candle]:
    """Candles with high/low a fixed `spread` around each close."""
    return [
        Candle(
            time=start + i * step,
            open=float(c),
            high=float(c) + spread,
            low=float(c) - spread,
            close=float(c),
            volume=1000.0,
        )
        for i, c in enumerate(closes)
    ]


class FakeMarketSource(MarketDataSource):
    """Serves fixed series and prices; records every series request."""

    def __init__(self, series: dict[str, list[Candle]], prices: Optional[dict[str, float]] = None):
        self.series = series
        self.prices = prices or {}
        self.requests: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return "Fake"

    async def get_series(self, symbol, interval, limit=None):
        self.requests.append((symbol, interval))
        return self.series.get(symbol, [])

    async def list_symbols(self, quote="USDT"):
        return [s for s in self.series if s.endswith(quote)]

    async def search_symbols(self, query, limit=10):
        return [
            SymbolInfo(symbol=s, base_asset=s[:-4], quote_asset="USDT", status="TRADING")
            for s in self.series
            if query.lower() in s.lower()
        ][:limit]

    async def get_price(self, symbol):
        return PriceData(price=self.prices.get(symbol, 100.0), price_change=1.5, volume=10.0)

    async def get_prices(self, symbols):
        return {s: await self.get_price(s) for s in symbols}


@pytest.fixture
def uptrend() -> list[Candle]:
    return build_series(np.linspace(100, 150, 300))


@pytest.fixture
def downtrend() -> list[Candle]:
    return build_series(np.linspace(150, 100, 300))


@pytest.fixture
def flat_series() -> list[Candle]:
    return build_series([100.0] * 300)


@pytest.fixture
def fake_source(uptrend, downtrend, flat_series) -> FakeMarketSource:
    return FakeMarketSource(
        {
            "AAAUSDT": uptrend,
            "BBBUSDT": flat_series,
            "CCCUSDT": downtrend,
            "DDDUSDT": uptrend[:150],
        }
    )


@pytest.fixture
def make_source():
    """Factory for FakeMarketSource instances."""
    return FakeMarketSource
