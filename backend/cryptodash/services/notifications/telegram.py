"""
Telegram Bot API client.

Sends HTML-formatted messages to a chat. The bot token comes from
settings; without one every send is a no-op returning False.
"""

import logging
from typing import Optional, Any

import aiohttp

from cryptodash.core.config import settings

logger = logging.getLogger(__name__)

CONNECTED_MESSAGE = (
    "✅ Successfully connected to Trading Bot!\n\n"
    "You will now receive Strong Buy signals notifications."
)


class TelegramClient:
    """Minimal Bot API wrapper (sendMessage, getMe)."""

    def __init__(self, token: Optional[str] = None, api_url: Optional[str] = None):
        self._token = token if token is not None else settings.telegram_bot_token
        self._api_url = (api_url or settings.telegram_api_url).rstrip("/")

    @property
    def is_configured(self) -> bool:
        return bool(self._token)

    def _method_url(self, method: str) -> str:
        return f"{self._api_url}/bot{self._token}/{method}"

    async def _call(self, method: str, payload: Optional[dict] = None) -> dict[str, Any]:
        timeout = aiohttp.ClientTimeout(total=settings.http_timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            if payload is None:
                async with session.get(self._method_url(method)) as resp:
                    return await resp.json()
            async with session.post(self._method_url(method), json=payload) as resp:
                return await resp.json()

    async def send_message(self, chat_id: str, text: str) -> bool:
        if not self.is_configured:
            logger.warning("Telegram bot token not configured")
            return False
        if not chat_id:
            return False

        try:
            result = await self._call(
                "sendMessage",
                {"chat_id": chat_id, "text": text, "parse_mode": "HTML"},
            )
            if result.get("ok"):
                return True
            logger.error(f"Failed to send message: {result.get('description')}")
            return False
        except Exception as e:
            logger.error(f"Telegram API error: {e}")
            return False

    async def validate_chat_id(self, chat_id: str) -> bool:
        """Confirm a chat id by sending it the connection notice."""
        return await self.send_message(chat_id, CONNECTED_MESSAGE)

    async def test_connection(self) -> bool:
        if not self.is_configured:
            return False
        try:
            result = await self._call("getMe")
            return bool(result.get("ok"))
        except Exception as e:
            logger.error(f"Error testing Telegram connection: {e}")
            return False
