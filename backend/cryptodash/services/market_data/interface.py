"""
Market Data Source Interface

Defines the contract for the upstream exchange data layer.
"""

from abc import ABC, abstractmethod
from typing import Optional

from cryptodash.schemas.market import Candle, PriceData, SymbolInfo


class MarketDataSource(ABC):
    """
    Market Data Source Contract.

    Series come back oldest first at a fixed bar interval. A source may be
    degraded or stale but never reorders bars. Fetch failures are reported
    as empty results, never raised.
    """

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @abstractmethod
    async def get_series(
        self, symbol: str, interval: str, limit: Optional[int] = None
    ) -> list[Candle]:
        """OHLC candles for `symbol`, oldest first; [] on failure."""
        pass

    @abstractmethod
    async def list_symbols(self, quote: str = "USDT") -> list[str]:
        """Tradable symbols quoted in `quote`, in exchange order."""
        pass

    @abstractmethod
    async def search_symbols(self, query: str, limit: int = 10) -> list[SymbolInfo]:
        """Tradable pairs whose symbol or base asset contains `query`."""
        pass

    @abstractmethod
    async def get_price(self, symbol: str) -> PriceData:
        """24h ticker for a single symbol (zeros when unavailable)."""
        pass

    @abstractmethod
    async def get_prices(self, symbols: list[str]) -> dict[str, PriceData]:
        """24h tickers for many symbols; missing symbols are omitted."""
        pass

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        """Release network resources."""
        pass


def empty_price() -> PriceData:
    return PriceData(price=0.0, price_change=0.0, volume=0.0)
