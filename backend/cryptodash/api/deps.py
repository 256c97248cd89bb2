"""
Request dependencies.

Long-lived collaborators are built once in the application lifespan and
kept on `app.state`; endpoints receive them through these providers.
"""

from fastapi import Request

from cryptodash.services.indicators.service import IndicatorService
from cryptodash.services.market_data.interface import MarketDataSource
from cryptodash.services.notifications.telegram import TelegramClient
from cryptodash.services.scanner.scanner import SignalScanner
from cryptodash.services.stream.manager import PriceStreamPool


def get_market_source(request: Request) -> MarketDataSource:
    return request.app.state.market_source


def get_indicator_service(request: Request) -> IndicatorService:
    return IndicatorService(request.app.state.market_source)


def get_scanner(request: Request) -> SignalScanner:
    return SignalScanner(request.app.state.market_source)


def get_stream_pool(request: Request) -> PriceStreamPool:
    return request.app.state.stream_pool


def get_telegram_client() -> TelegramClient:
    return TelegramClient()
