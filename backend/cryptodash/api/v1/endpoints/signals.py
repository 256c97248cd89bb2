"""
Signal API Endpoints

Indicator snapshots per pair and ranked scans. The frontend polls these
(every 15s for watchlist rows, every 60s for scans).
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from cryptodash.api.deps import get_indicator_service, get_scanner
from cryptodash.api.v1.endpoints.market import DEFAULT_TIMEFRAME, parse_symbols
from cryptodash.schemas.market import Timeframe
from cryptodash.schemas.signals import SignalType, SymbolSignal, ScanResult
from cryptodash.services.base import ValidationError
from cryptodash.services.indicators.service import IndicatorService
from cryptodash.services.scanner.scanner import SignalScanner

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=ScanResult)
async def get_watchlist_signals(
    symbols: str = Query(..., description="Comma-separated list of symbols"),
    interval: Timeframe = DEFAULT_TIMEFRAME,
    signal: SignalType | None = None,
    min_strength: float = Query(default=0, ge=0, le=100),
    scanner: SignalScanner = Depends(get_scanner),
):
    """
    Signals for a watchlist, strongest first.

    Symbols whose data cannot be fetched come back NEUTRAL with zero strength.
    """
    symbol_list = parse_symbols(symbols)
    if not symbol_list:
        raise HTTPException(status_code=400, detail="No symbols given")
    if len(symbol_list) > 100:
        raise HTTPException(status_code=400, detail="At most 100 symbols per request")

    return await scanner.scan_symbols(
        symbol_list,
        interval=interval.value,
        signal_filter=signal,
        min_strength=min_strength,
    )


@router.get("/scan/smart-trading", response_model=ScanResult)
async def smart_trading(
    interval: Timeframe = DEFAULT_TIMEFRAME,
    scanner: SignalScanner = Depends(get_scanner),
):
    """Top 25 STRONG_BUY pairs with strength of at least 70."""
    return await scanner.smart_trading(interval.value)


@router.get("/scan/strong-buys", response_model=ScanResult)
async def strong_buys(
    limit: int = Query(default=4, ge=1, le=25),
    interval: Timeframe = DEFAULT_TIMEFRAME,
    scanner: SignalScanner = Depends(get_scanner),
):
    """Strongest STRONG_BUY pairs for the market status panel."""
    return await scanner.top_strong_buys(limit=limit, interval=interval.value)


@router.get("/{symbol}", response_model=SymbolSignal)
async def get_signal(
    symbol: str,
    interval: Timeframe = DEFAULT_TIMEFRAME,
    service: IndicatorService = Depends(get_indicator_service),
):
    """
    Indicator snapshot for one pair.

    Returns:
        - ADX(14), RSI(14), EMA50, EMA200
        - Signal (STRONG_BUY / STRONG_SELL / NEUTRAL)
        - Strength (0-100)
    """
    try:
        return await service.calculate_for_symbol(symbol.upper().strip(), interval.value)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
