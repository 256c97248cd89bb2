"""
Price Stream Pool for real-time ticker data.

One feed per symbol, shared by all of its subscribers:
- Initial REST snapshot, then the exchange ticker WebSocket
- Exponential-backoff reconnects
- REST polling once the retry ceiling is reached
- Feed torn down when its last subscriber leaves

The pool is owned by the application lifespan and handed to whoever needs
live prices; there is no module-level instance.
"""

import asyncio
import inspect
import json
import logging
from datetime import datetime, timezone
from typing import Optional, Callable, Dict, Set, Any, AsyncIterator

import aiohttp

from cryptodash.core.config import settings
from cryptodash.schemas.market import PriceTick, PriceData
from cryptodash.services.market_data.interface import MarketDataSource
from cryptodash.services.stream.state import FeedState, FeedStateMachine

logger = logging.getLogger(__name__)

TickCallback = Callable[[PriceTick], Any]
ErrorCallback = Callable[[str, Exception], Any]


def tick_from_stream(symbol: str, data: Dict[str, Any]) -> PriceTick:
    """Parse a <symbol>@ticker stream message (c=last price, P=change %, v=volume)."""
    return PriceTick(
        symbol=symbol,
        price=float(data["c"]),
        price_change=float(data["P"]),
        volume=float(data["v"]),
        is_live=True,
        source="websocket",
        timestamp=datetime.now(timezone.utc),
    )


def tick_from_rest(symbol: str, price: PriceData) -> PriceTick:
    return PriceTick(
        symbol=symbol,
        price=price.price,
        price_change=price.price_change,
        volume=price.volume,
        is_live=False,
        source="rest",
        timestamp=datetime.now(timezone.utc),
    )


async def _call(callback: Callable, *args) -> None:
    try:
        result = callback(*args)
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        logger.debug(f"Stream callback error: {e}")


class SymbolFeed:
    """Live price feed for one symbol."""

    def __init__(self, symbol: str, pool: "PriceStreamPool"):
        self.symbol = symbol
        self.listeners: Set[TickCallback] = set()
        self.machine = FeedStateMachine(pool.max_retries, pool.retry_interval)
        self.last_tick: Optional[PriceTick] = None
        self._pool = pool
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> FeedState:
        return self.machine.state

    def start(self) -> None:
        self._task = asyncio.create_task(self._run(), name=f"feed:{self.symbol}")

    async def stop(self) -> None:
        self.machine.close()
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    def cancel(self) -> None:
        """Non-blocking stop, for synchronous unsubscribe paths."""
        self.machine.close()
        if self._task:
            self._task.cancel()
            self._task = None

    async def _emit(self, tick: PriceTick) -> None:
        self.last_tick = tick
        for listener in list(self.listeners):
            await _call(listener, tick)

    async def _run(self) -> None:
        while True:
            try:
                price = await self._pool.source.get_price(self.symbol)
                if price.price > 0:
                    await self._emit(tick_from_rest(self.symbol, price))
                else:
                    logger.debug(f"{self.symbol}: no REST snapshot, waiting for stream")

                async for message in self._pool._stream(self.symbol, self.machine.on_connected):
                    await self._emit(tick_from_stream(self.symbol, message))
                logger.info(f"{self.symbol} stream closed by remote")
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning(f"{self.symbol} stream error: {e}")

            delay = self.machine.on_failure()
            if delay is None:
                break
            logger.info(f"{self.symbol}: reconnecting in {delay}s (attempt {self.machine.retries})")
            await asyncio.sleep(delay)

        if self.machine.state != FeedState.DEGRADED_POLLING:
            return

        logger.warning(f"{self.symbol}: WebSocket unavailable, polling every {self._pool.fallback_interval}s")
        await self._pool._emit_error(self.symbol, ConnectionError("WebSocket connection failed"))
        await self._poll()

    async def _poll(self) -> None:
        while self.machine.state == FeedState.DEGRADED_POLLING:
            try:
                price = await self._pool.source.get_price(self.symbol)
                if price.price <= 0:
                    raise ValueError("empty ticker")
                await self._emit(tick_from_rest(self.symbol, price))
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.debug(f"{self.symbol} poll failed: {e}")
                await self._pool._emit_error(self.symbol, RuntimeError("Failed to fetch price"))
            await asyncio.sleep(self._pool.fallback_interval)


class PriceStreamPool:
    """
    Reference-counted pool of per-symbol price feeds.

    Usage:
        pool = PriceStreamPool(source)
        unsubscribe = pool.subscribe("BTCUSDT", on_tick)
        ...
        unsubscribe()
        await pool.close_all()
    """

    def __init__(
        self,
        source: MarketDataSource,
        ws_url: Optional[str] = None,
        max_retries: Optional[int] = None,
        retry_interval: Optional[float] = None,
        fallback_interval: Optional[float] = None,
    ):
        self.source = source
        self.ws_url = (ws_url or settings.binance_ws_url).rstrip("/")
        self.max_retries = settings.ws_max_retries if max_retries is None else max_retries
        self.retry_interval = settings.ws_retry_interval if retry_interval is None else retry_interval
        self.fallback_interval = (
            settings.ws_fallback_interval if fallback_interval is None else fallback_interval
        )
        self._feeds: Dict[str, SymbolFeed] = {}
        self._error_listeners: Dict[str, Set[ErrorCallback]] = {}
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def symbols(self) -> list[str]:
        return list(self._feeds)

    def get_feed(self, symbol: str) -> Optional[SymbolFeed]:
        return self._feeds.get(symbol.upper())

    # ============ Subscriptions ============

    def subscribe(self, symbol: str, callback: TickCallback) -> Callable[[], None]:
        """
        Register `callback` for ticks on `symbol`, starting the feed if needed.

        Returns a function that removes the subscription; the feed stops once
        no subscribers remain. Must be called from within the event loop.
        """
        symbol = symbol.upper()
        feed = self._feeds.get(symbol)
        if feed is None:
            feed = SymbolFeed(symbol, self)
            self._feeds[symbol] = feed
            feed.start()
            logger.info(f"Started feed for {symbol}")
        feed.listeners.add(callback)

        def unsubscribe() -> None:
            current = self._feeds.get(symbol)
            if current is not feed:
                return
            feed.listeners.discard(callback)
            if not feed.listeners:
                self._cleanup(symbol)

        return unsubscribe

    def on_error(self, symbol: str, callback: ErrorCallback) -> None:
        self._error_listeners.setdefault(symbol.upper(), set()).add(callback)

    def off_error(self, symbol: str, callback: ErrorCallback) -> None:
        listeners = self._error_listeners.get(symbol.upper())
        if listeners:
            listeners.discard(callback)
            if not listeners:
                del self._error_listeners[symbol.upper()]

    async def _emit_error(self, symbol: str, error: Exception) -> None:
        for listener in list(self._error_listeners.get(symbol, ())):
            await _call(listener, symbol, error)

    def _cleanup(self, symbol: str) -> None:
        feed = self._feeds.pop(symbol, None)
        if feed:
            feed.cancel()
            logger.info(f"Stopped feed for {symbol}")

    # ============ WebSocket ============

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def _stream(
        self, symbol: str, on_open: Callable[[], None]
    ) -> AsyncIterator[Dict[str, Any]]:
        """Yield decoded ticker messages; returns when the socket closes."""
        session = await self._ensure_session()
        url = f"{self.ws_url}/{symbol.lower()}@ticker"

        async with session.ws_connect(url, heartbeat=30) as ws:
            on_open()
            logger.info(f"{symbol} WebSocket connected")
            async for msg in ws:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    yield json.loads(msg.data)
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    raise ConnectionError(f"WebSocket error: {ws.exception()}")
                elif msg.type in (aiohttp.WSMsgType.CLOSE, aiohttp.WSMsgType.CLOSED):
                    break

    # ============ Lifecycle ============

    def status(self) -> Dict[str, Dict[str, Any]]:
        return {
            symbol: {
                "state": feed.state.value,
                "retries": feed.machine.retries,
                "subscribers": len(feed.listeners),
                "last_price": feed.last_tick.price if feed.last_tick else None,
            }
            for symbol, feed in self._feeds.items()
        }

    async def close_all(self) -> None:
        """Stop every feed and drop all listeners."""
        feeds = list(self._feeds.values())
        self._feeds.clear()
        for feed in feeds:
            await feed.stop()
        self._error_listeners.clear()

        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        logger.info("Price stream pool closed")
