"""
Market Data API Endpoints

Symbols, tickers and candles straight from the market data source.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from cryptodash.api.deps import get_market_source
from cryptodash.core.config import settings
from cryptodash.schemas.market import Candle, PriceData, SymbolInfo, Timeframe
from cryptodash.services.indicators.service import unique_symbols
from cryptodash.services.market_data.interface import MarketDataSource

logger = logging.getLogger(__name__)

DEFAULT_TIMEFRAME = Timeframe(settings.default_interval)

router = APIRouter()


def parse_symbols(symbols: str) -> list[str]:
    """Split a comma-separated symbol list, upper-cased, blanks and repeats dropped."""
    return unique_symbols(symbols.split(","))


@router.get("/symbols", response_model=list[str])
async def list_symbols(
    quote: str = Query(default=settings.quote_asset, min_length=2, max_length=10),
    source: MarketDataSource = Depends(get_market_source),
):
    """All tradable pairs quoted in `quote`, in exchange order."""
    return await source.list_symbols(quote.upper())


@router.get("/search", response_model=list[SymbolInfo])
async def search_symbols(
    q: str = Query(default="", max_length=20, description="Search query"),
    limit: int = Query(default=10, ge=1, le=50),
    source: MarketDataSource = Depends(get_market_source),
):
    """
    Search pairs by symbol or base asset.

    Queries shorter than two characters return nothing.
    """
    if len(q.strip()) < 2:
        return []
    return await source.search_symbols(q.strip(), limit)


@router.get("/price/{symbol}", response_model=PriceData)
async def get_price(
    symbol: str,
    source: MarketDataSource = Depends(get_market_source),
):
    """24h ticker for one pair (cached for about a second)."""
    return await source.get_price(symbol.upper().strip())


@router.get("/prices", response_model=dict[str, PriceData])
async def get_prices(
    symbols: str = Query(..., description="Comma-separated list of symbols"),
    source: MarketDataSource = Depends(get_market_source),
):
    """24h tickers for many pairs, fetched in batches."""
    symbol_list = parse_symbols(symbols)
    if not symbol_list:
        raise HTTPException(status_code=400, detail="No symbols given")
    return await source.get_prices(symbol_list)


@router.get("/klines/{symbol}", response_model=list[Candle])
async def get_klines(
    symbol: str,
    interval: Timeframe = DEFAULT_TIMEFRAME,
    limit: int = Query(default=settings.kline_limit, ge=1, le=1000),
    source: MarketDataSource = Depends(get_market_source),
):
    """OHLC candles, oldest first."""
    candles = await source.get_series(symbol.upper().strip(), interval.value, limit)
    if not candles:
        raise HTTPException(status_code=404, detail=f"No candles for {symbol}")
    return candles
