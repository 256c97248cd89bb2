"""
Signal Scanner Service

Runs the indicator engine over many pairs and ranks the results.
"""

import logging
from typing import Optional, List

from cryptodash.core.config import settings
from cryptodash.schemas.signals import SignalType, SymbolSignal, ScanResult
from cryptodash.services.indicators.service import IndicatorService, unique_symbols
from cryptodash.services.market_data.interface import MarketDataSource

logger = logging.getLogger(__name__)

# Smart-trading table: strong buys only, confident ones, top 25
SMART_TRADING_MIN_STRENGTH = 70
SMART_TRADING_LIMIT = 25

# Market-status panel
STRONG_BUY_PANEL_LIMIT = 4


def rank_signals(
    signals: List[SymbolSignal],
    signal_filter: Optional[SignalType] = None,
    min_strength: float = 0,
    limit: Optional[int] = None,
) -> List[SymbolSignal]:
    """Filter by signal/strength and sort by strength descending."""
    matched = [
        s for s in signals
        if (signal_filter is None or s.signal == signal_filter)
        and s.strength >= min_strength
    ]
    # Stable sort keeps input order among equal strengths
    matched.sort(key=lambda s: s.strength, reverse=True)
    return matched[:limit] if limit is not None else matched


class SignalScanner:
    """
    Scans pairs for trading signals.

    Usage:
        scanner = SignalScanner(source)
        result = await scanner.smart_trading()
    """

    def __init__(
        self,
        source: MarketDataSource,
        indicator_service: Optional[IndicatorService] = None,
    ):
        self._source = source
        self._indicators = indicator_service or IndicatorService(source)

    async def scan_symbols(
        self,
        symbols: List[str],
        interval: str = "15m",
        signal_filter: Optional[SignalType] = None,
        min_strength: float = 0,
        limit: Optional[int] = None,
    ) -> ScanResult:
        """Scan symbols concurrently; one symbol failing never sinks the batch."""
        symbols = unique_symbols(symbols)
        results = await self._indicators.execute(symbols, interval=interval)
        ranked = rank_signals(list(results.values()), signal_filter, min_strength, limit)

        logger.info(
            f"Scanned {len(symbols)} symbols ({len(results)} ok), {len(ranked)} matched"
        )
        return ScanResult(scanned=len(symbols), matched=len(ranked), signals=ranked)

    async def smart_trading(self, interval: str = "15m") -> ScanResult:
        """All quote-asset pairs, STRONG_BUY with strength >= 70, top 25."""
        symbols = await self._source.list_symbols(settings.quote_asset)
        return await self.scan_symbols(
            symbols,
            interval=interval,
            signal_filter=SignalType.STRONG_BUY,
            min_strength=SMART_TRADING_MIN_STRENGTH,
            limit=SMART_TRADING_LIMIT,
        )

    async def top_strong_buys(
        self,
        limit: int = STRONG_BUY_PANEL_LIMIT,
        interval: str = "15m",
    ) -> ScanResult:
        """Strongest STRONG_BUY pairs among the quote-asset search results."""
        pairs = await self._source.search_symbols(settings.quote_asset)
        return await self.scan_symbols(
            [p.symbol for p in pairs],
            interval=interval,
            signal_filter=SignalType.STRONG_BUY,
            limit=limit,
        )
