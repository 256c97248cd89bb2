"""
Server-Sent Events (SSE) endpoint for real-time price streaming.

Each client subscribes to the shared per-symbol feed in the stream pool;
the feed itself falls back to REST polling when the exchange socket is
unavailable, so clients only ever see ticks, errors and heartbeats.
"""

import asyncio
import json
import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from cryptodash.api.deps import get_stream_pool
from cryptodash.schemas.market import PriceTick
from cryptodash.services.stream.manager import PriceStreamPool

logger = logging.getLogger(__name__)

router = APIRouter()

QUEUE_SIZE = 100

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable buffering for nginx
}


def _put_latest(queue: asyncio.Queue, item) -> None:
    """Enqueue without blocking, dropping the oldest item when full."""
    if queue.full():
        try:
            queue.get_nowait()
        except asyncio.QueueEmpty:
            pass
    queue.put_nowait(item)


def format_tick_event(tick: PriceTick) -> str:
    return f"data: {tick.model_dump_json()}\n\n"


def format_error_event(symbol: str, error: Exception) -> str:
    data = {"symbol": symbol, "error": str(error)}
    return f"event: error\ndata: {json.dumps(data)}\n\n"


@router.get("/price/{symbol}")
async def stream_price(
    symbol: str,
    request: Request,
    heartbeat: float = Query(default=15.0, ge=1.0, le=60.0, description="Heartbeat interval in seconds"),
    pool: PriceStreamPool = Depends(get_stream_pool),
):
    """
    Stream live price ticks for a pair via SSE.

    Usage (JavaScript):
    ```js
    const eventSource = new EventSource('/api/v1/stream/price/BTCUSDT');
    eventSource.onmessage = (event) => {
      const tick = JSON.parse(event.data);
      console.log('Price:', tick.price, tick.is_live);
    };
    ```
    """
    symbol = symbol.upper().strip()

    async def event_generator():
        queue: asyncio.Queue = asyncio.Queue(maxsize=QUEUE_SIZE)

        def on_tick(tick: PriceTick) -> None:
            _put_latest(queue, format_tick_event(tick))

        def on_error(sym: str, error: Exception) -> None:
            _put_latest(queue, format_error_event(sym, error))

        unsubscribe = pool.subscribe(symbol, on_tick)
        pool.on_error(symbol, on_error)

        try:
            while True:
                if await request.is_disconnected():
                    break
                try:
                    event = await asyncio.wait_for(queue.get(), timeout=heartbeat)
                    yield event
                except asyncio.TimeoutError:
                    # Keep the connection alive
                    yield ": heartbeat\n\n"
        except asyncio.CancelledError:
            pass
        finally:
            pool.off_error(symbol, on_error)
            unsubscribe()
            logger.debug(f"SSE client for {symbol} disconnected")

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.get("/status")
async def stream_status(pool: PriceStreamPool = Depends(get_stream_pool)):
    """Feed state, retry count and subscriber count per active symbol."""
    return {
        "active_feeds": len(pool.symbols),
        "feeds": pool.status(),
    }
