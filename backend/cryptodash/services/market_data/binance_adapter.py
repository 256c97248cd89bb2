"""
Binance Public API Adapter

Fetches klines, 24h tickers and the symbol list from the Binance REST API.
No API key is needed: every endpoint used here is public.

Binance API documentation: https://binance-docs.github.io/apidocs/spot/en/
"""

import asyncio
import json
import logging
from typing import Optional, Any

import aiohttp

from cryptodash.core.config import settings
from cryptodash.schemas.market import Candle, PriceData, SymbolInfo
from cryptodash.services.base import ExternalAPIError, RateLimitError
from cryptodash.services.cache.redis_client import PriceCache
from cryptodash.services.market_data.interface import MarketDataSource, empty_price
from cryptodash.services.market_data.rate_limit import RateLimiter

logger = logging.getLogger(__name__)


# =============================================================================
# PAYLOAD PARSING
# =============================================================================


def parse_kline(row: list[Any]) -> Candle:
    """
    Parse one /klines row.

    Row layout: [open_time_ms, open, high, low, close, volume, close_time, ...]
    Prices arrive as strings.
    """
    return Candle(
        time=int(row[0]) // 1000,
        open=float(row[1]),
        high=float(row[2]),
        low=float(row[3]),
        close=float(row[4]),
        volume=float(row[5]),
    )


def parse_ticker(ticker: dict[str, Any]) -> PriceData:
    """Parse one /ticker/24hr entry."""
    return PriceData(
        price=float(ticker["lastPrice"]),
        price_change=float(ticker["priceChangePercent"]),
        volume=float(ticker["volume"]),
        high_24h=float(ticker["highPrice"]),
        low_24h=float(ticker["lowPrice"]),
    )


def filter_symbols(
    exchange_info: dict[str, Any],
    quote: str = "USDT",
    query: Optional[str] = None,
) -> list[SymbolInfo]:
    """Trading pairs in `quote`, optionally narrowed by a case-insensitive query."""
    needle = query.lower() if query else None
    result = []
    for s in exchange_info.get("symbols", []):
        if s.get("quoteAsset") != quote or s.get("status") != "TRADING":
            continue
        if needle and needle not in s["baseAsset"].lower() and needle not in s["symbol"].lower():
            continue
        result.append(
            SymbolInfo(
                symbol=s["symbol"],
                base_asset=s["baseAsset"],
                quote_asset=s["quoteAsset"],
                status=s["status"],
            )
        )
    return result


# =============================================================================
# CLIENT
# =============================================================================


class BinanceClient(MarketDataSource):
    """
    Binance REST client.

    Shares one aiohttp session and one request budget across all calls.
    Tickers go through a PriceCache with a one-second freshness window.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        cache: Optional[PriceCache] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        self.base_url = (base_url or settings.binance_base_url).rstrip("/")
        self.cache = cache or PriceCache()
        self.rate_limiter = rate_limiter or RateLimiter(settings.requests_per_minute)
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def name(self) -> str:
        return "Binance"

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=settings.http_timeout),
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                },
            )
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _get(self, path: str, params: Optional[dict] = None) -> Any:
        """
        GET a public endpoint.

        Raises:
            RateLimitError: Binance answered 429 or 418 (IP ban)
            ExternalAPIError: Any other HTTP error status
        """
        await self.rate_limiter.acquire()
        session = await self._ensure_session()
        async with session.get(f"{self.base_url}{path}", params=params) as resp:
            if resp.status in (418, 429):
                raise RateLimitError(
                    self.name,
                    f"Request budget exceeded (HTTP {resp.status})",
                    {"path": path, "retry_after": resp.headers.get("Retry-After")},
                )
            if resp.status >= 400:
                raise ExternalAPIError(
                    self.name,
                    f"HTTP {resp.status} for {path}",
                    {"status": resp.status, "body": await resp.text()},
                )
            return await resp.json()

    # ============ Klines ============

    async def get_series(
        self, symbol: str, interval: str, limit: Optional[int] = None
    ) -> list[Candle]:
        try:
            rows = await self._get(
                "/klines",
                params={
                    "symbol": symbol.upper(),
                    "interval": interval,
                    "limit": limit or settings.kline_limit,
                },
            )
            return [parse_kline(row) for row in rows]
        except Exception as e:
            logger.error(f"Error fetching klines for {symbol}: {e}")
            return []

    # ============ Symbols ============

    async def _exchange_info(self) -> dict[str, Any]:
        return await self._get("/exchangeInfo")

    async def list_symbols(self, quote: str = "USDT") -> list[str]:
        try:
            info = await self._exchange_info()
            return [s.symbol for s in filter_symbols(info, quote)]
        except Exception as e:
            logger.error(f"Error fetching symbols: {e}")
            return []

    async def search_symbols(self, query: str, limit: int = 10) -> list[SymbolInfo]:
        try:
            info = await self._exchange_info()
            return filter_symbols(info, settings.quote_asset, query)[:limit]
        except Exception as e:
            logger.error(f"Error searching symbols: {e}")
            return []

    # ============ Tickers ============

    async def get_price(self, symbol: str) -> PriceData:
        symbol = symbol.upper()
        cached = await self.cache.get_fresh(symbol)
        if cached:
            return cached

        try:
            ticker = await self._get("/ticker/24hr", params={"symbol": symbol})
            price = parse_ticker(ticker)
            await self.cache.set_price(symbol, price)
            return price
        except Exception as e:
            logger.warning(f"Ticker fetch failed for {symbol}: {e}")
            # Serve the last known value, however old
            stale = await self.cache.get_stale(symbol)
            return stale or empty_price()

    async def _fetch_price_batch(self, symbols: list[str]) -> dict[str, PriceData]:
        try:
            tickers = await self._get(
                "/ticker/24hr",
                params={"symbols": json.dumps(symbols, separators=(",", ":"))},
            )
            return {t["symbol"]: parse_ticker(t) for t in tickers}
        except Exception as e:
            logger.error(f"Error fetching price batch: {e}")
            return {}

    async def get_prices(self, symbols: list[str]) -> dict[str, PriceData]:
        result: dict[str, PriceData] = {}
        uncached: list[str] = []

        for symbol in (s.upper() for s in symbols):
            cached = await self.cache.get_fresh(symbol)
            if cached:
                result[symbol] = cached
            else:
                uncached.append(symbol)

        batch_size = settings.price_batch_size
        for i in range(0, len(uncached), batch_size):
            batch = await self._fetch_price_batch(uncached[i:i + batch_size])
            for symbol, price in batch.items():
                await self.cache.set_price(symbol, price)
                result[symbol] = price

            if i + batch_size < len(uncached):
                await asyncio.sleep(settings.batch_delay_seconds)

        return result

    async def health_check(self) -> bool:
        try:
            await self._get("/ping")
            return True
        except Exception as e:
            logger.warning(f"Binance health check failed: {e}")
            return False
