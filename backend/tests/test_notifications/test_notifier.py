"""
Tests for alert selection, formatting and dispatch.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from cryptodash.schemas.notifications import NotificationSettings
from cryptodash.schemas.signals import IndicatorResult, SignalType, SymbolSignal
from cryptodash.services.notifications import (
    SignalNotifier,
    TelegramClient,
    format_signal_message,
    should_notify,
)


def make_signal(symbol: str, signal: SignalType, strength: float) -> SymbolSignal:
    return SymbolSignal(
        symbol=symbol,
        result=IndicatorResult(adx=32.5, rsi=64.2, ema50=101, ema200=99, signal=signal, strength=strength),
        last_price=102.5,
    )


@pytest.fixture
def prefs() -> NotificationSettings:
    return NotificationSettings(telegram_chat_id="12345")


@pytest.fixture
def client() -> MagicMock:
    mock = MagicMock(spec=TelegramClient)
    mock.send_message = AsyncMock(return_value=True)
    return mock


class TestShouldNotify:
    def test_defaults(self):
        prefs = NotificationSettings()
        assert prefs.telegram_chat_id == ""
        assert prefs.notify_strong_buy is True
        assert prefs.notify_strong_sell is False
        assert prefs.minimum_strength == 80

    def test_strong_buy_above_minimum(self, prefs):
        assert should_notify(prefs, make_signal("BTCUSDT", SignalType.STRONG_BUY, 85))

    def test_below_minimum(self, prefs):
        assert not should_notify(prefs, make_signal("BTCUSDT", SignalType.STRONG_BUY, 79))

    def test_strong_sell_disabled_by_default(self, prefs):
        assert not should_notify(prefs, make_signal("BTCUSDT", SignalType.STRONG_SELL, 95))

    def test_strong_sell_enabled(self):
        prefs = NotificationSettings(telegram_chat_id="1", notify_strong_sell=True)
        assert should_notify(prefs, make_signal("BTCUSDT", SignalType.STRONG_SELL, 95))

    def test_neutral_never(self, prefs):
        assert not should_notify(prefs, make_signal("BTCUSDT", SignalType.NEUTRAL, 100))

    def test_not_connected(self):
        assert not should_notify(NotificationSettings(), make_signal("BTCUSDT", SignalType.STRONG_BUY, 99))


class TestFormatting:
    def test_message_contents(self):
        text = format_signal_message(make_signal("ETHUSDT", SignalType.STRONG_BUY, 87.4))

        assert "<b>🟢 STRONG BUY</b> ETHUSDT" in text
        assert "Strength: <b>87%</b>" in text
        assert "ADX: 32.50 | RSI: 64.20" in text
        assert "Price: 102.5" in text


class TestSignalNotifier:
    @pytest.mark.asyncio
    async def test_sends_qualifying_signals(self, prefs, client):
        signals = [
            make_signal("AAAUSDT", SignalType.STRONG_BUY, 90),
            make_signal("BBBUSDT", SignalType.STRONG_BUY, 50),
            make_signal("CCCUSDT", SignalType.STRONG_SELL, 99),
        ]

        result = await SignalNotifier(client).notify_signals(prefs, signals, scanned=3)

        assert result.scanned == 3
        assert result.notified == ["AAAUSDT"]
        assert result.failed == []
        client.send_message.assert_awaited_once()
        assert client.send_message.await_args.args[0] == "12345"

    @pytest.mark.asyncio
    async def test_failed_send(self, prefs, client):
        client.send_message = AsyncMock(return_value=False)

        result = await SignalNotifier(client).notify_signals(
            prefs, [make_signal("AAAUSDT", SignalType.STRONG_BUY, 90)]
        )

        assert result.notified == []
        assert result.failed == ["AAAUSDT"]


class TestTelegramClient:
    @pytest.mark.asyncio
    async def test_unconfigured_is_noop(self):
        client = TelegramClient(token="")
        client._call = AsyncMock()

        assert client.is_configured is False
        assert await client.send_message("12345", "hi") is False
        assert await client.test_connection() is False
        client._call.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_send_message_payload(self):
        client = TelegramClient(token="abc")
        client._call = AsyncMock(return_value={"ok": True})

        assert await client.send_message("12345", "<b>hi</b>") is True
        client._call.assert_awaited_once_with(
            "sendMessage", {"chat_id": "12345", "text": "<b>hi</b>", "parse_mode": "HTML"}
        )

    @pytest.mark.asyncio
    async def test_api_rejection(self):
        client = TelegramClient(token="abc")
        client._call = AsyncMock(return_value={"ok": False, "description": "chat not found"})
        assert await client.validate_chat_id("999") is False

    @pytest.mark.asyncio
    async def test_network_error(self):
        client = TelegramClient(token="abc")
        client._call = AsyncMock(side_effect=OSError("unreachable"))
        assert await client.send_message("12345", "hi") is False

    @pytest.mark.asyncio
    async def test_empty_chat_id(self):
        client = TelegramClient(token="abc")
        client._call = AsyncMock()
        assert await client.send_message("", "hi") is False
        client._call.assert_not_awaited()

    def test_method_url(self):
        client = TelegramClient(token="abc", api_url="https://api.telegram.org/")
        assert client._method_url("getMe") == "https://api.telegram.org/botabc/getMe"
