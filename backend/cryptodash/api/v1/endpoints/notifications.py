"""
Telegram Notification API Endpoints

The frontend keeps the user's notification settings and posts them along
with each request; nothing is stored server-side.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from cryptodash.api.deps import get_scanner, get_telegram_client
from cryptodash.schemas.notifications import (
    ChatValidationRequest,
    DispatchRequest,
    DispatchResult,
)
from cryptodash.services.notifications import SignalNotifier, TelegramClient
from cryptodash.services.scanner.scanner import SignalScanner

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/test")
async def test_bot(client: TelegramClient = Depends(get_telegram_client)):
    """Check that the configured bot token is accepted by Telegram."""
    if not client.is_configured:
        raise HTTPException(status_code=503, detail="Telegram bot token not configured")
    return {"connected": await client.test_connection()}


@router.post("/validate")
async def validate_chat(
    request: ChatValidationRequest,
    client: TelegramClient = Depends(get_telegram_client),
):
    """Send the connection notice to a chat; success means the id is usable."""
    if not client.is_configured:
        raise HTTPException(status_code=503, detail="Telegram bot token not configured")

    valid = await client.validate_chat_id(request.chat_id.strip())
    if not valid:
        raise HTTPException(status_code=400, detail="Failed to validate Telegram chat ID")
    return {"valid": True, "chat_id": request.chat_id.strip()}


@router.post("/dispatch", response_model=DispatchResult)
async def dispatch_alerts(
    request: DispatchRequest,
    client: TelegramClient = Depends(get_telegram_client),
    scanner: SignalScanner = Depends(get_scanner),
):
    """Scan the given symbols and alert on signals matching the settings."""
    if not request.settings.is_connected:
        raise HTTPException(status_code=400, detail="Telegram chat not connected")

    symbols = [s.strip().upper() for s in request.symbols if s.strip()]
    scan = await scanner.scan_symbols(symbols)
    notifier = SignalNotifier(client)
    return await notifier.notify_signals(request.settings, scan.signals, scanned=scan.scanned)
