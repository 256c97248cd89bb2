"""
Indicator Service Implementation

Pulls series from the market data source and runs the indicator engine.
The engine is synchronous; only the fetch is awaited.
"""

import asyncio
import logging
from typing import Optional

from cryptodash.core.config import settings
from cryptodash.schemas.market import Timeframe
from cryptodash.schemas.signals import SymbolSignal
from cryptodash.services.base import ValidationError
from cryptodash.services.indicators.engine import compute_indicators
from cryptodash.services.indicators.interface import IndicatorServiceInterface
from cryptodash.services.market_data.interface import MarketDataSource

logger = logging.getLogger(__name__)


def unique_symbols(symbols: list[str]) -> list[str]:
    """Upper-case and de-duplicate, keeping first-seen order."""
    return list(dict.fromkeys(s.strip().upper() for s in symbols if s.strip()))


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Service.

    Stateless apart from the injected data source; safe to call from many
    polling loops at once.
    """

    def __init__(
        self,
        source: MarketDataSource,
        concurrency: Optional[int] = None,
    ):
        self._source = source
        self._concurrency = concurrency or settings.scan_concurrency

    async def calculate_for_symbol(
        self, symbol: str, interval: str = "15m"
    ) -> SymbolSignal:
        symbol = symbol.upper()
        try:
            timeframe = Timeframe(interval)
        except ValueError:
            raise ValidationError(self.name, f"Unsupported interval: {interval}")

        series = await self._source.get_series(symbol, interval)
        result = compute_indicators(series)

        if len(series) < 200:
            logger.debug(f"{symbol}: {len(series)} candles, using defaults")

        return SymbolSignal(
            symbol=symbol,
            interval=timeframe,
            result=result,
            last_price=series[-1].close if series else None,
        )

    async def execute(
        self, input_data: list[str], interval: str = "15m"
    ) -> dict[str, SymbolSignal]:
        """Calculate indicators for all symbols; failed symbols are left out."""
        input_data = unique_symbols(input_data)
        semaphore = asyncio.Semaphore(self._concurrency)

        async def run(symbol: str) -> SymbolSignal:
            async with semaphore:
                return await self.calculate_for_symbol(symbol, interval)

        results = await asyncio.gather(
            *(run(s) for s in input_data), return_exceptions=True
        )

        output: dict[str, SymbolSignal] = {}
        for symbol, result in zip(input_data, results):
            if isinstance(result, BaseException):
                # Log error but continue with other symbols
                logger.error(f"Error calculating indicators for {symbol}: {result}")
                continue
            output[result.symbol] = result
        return output
