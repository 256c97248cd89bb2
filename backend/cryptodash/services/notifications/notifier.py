"""
Signal alerts.

Decides which signals are worth a message under the user's notification
settings and sends them through Telegram.
"""

import logging
from typing import Iterable

from cryptodash.schemas.notifications import NotificationSettings, DispatchResult
from cryptodash.schemas.signals import SignalType, SymbolSignal
from cryptodash.services.notifications.telegram import TelegramClient

logger = logging.getLogger(__name__)

SIGNAL_LABELS = {
    SignalType.STRONG_BUY: "🟢 STRONG BUY",
    SignalType.STRONG_SELL: "🔴 STRONG SELL",
}


def should_notify(prefs: NotificationSettings, signal: SymbolSignal) -> bool:
    if not prefs.is_connected:
        return False
    if signal.signal == SignalType.STRONG_BUY and not prefs.notify_strong_buy:
        return False
    if signal.signal == SignalType.STRONG_SELL and not prefs.notify_strong_sell:
        return False
    if signal.signal == SignalType.NEUTRAL:
        return False
    return signal.strength >= prefs.minimum_strength


def format_signal_message(signal: SymbolSignal) -> str:
    r = signal.result
    lines = [
        f"<b>{SIGNAL_LABELS.get(r.signal, r.signal.value)}</b> {signal.symbol}",
        f"Strength: <b>{r.strength:.0f}%</b>",
        f"ADX: {r.adx:.2f} | RSI: {r.rsi:.2f}",
        f"EMA50: {r.ema50:.8g} | EMA200: {r.ema200:.8g}",
    ]
    if signal.last_price is not None:
        lines.insert(1, f"Price: {signal.last_price:.8g}")
    return "\n".join(lines)


class SignalNotifier:
    """Sends one message per qualifying signal."""

    def __init__(self, client: TelegramClient):
        self._client = client

    async def notify_signals(
        self,
        prefs: NotificationSettings,
        signals: Iterable[SymbolSignal],
        scanned: int = 0,
    ) -> DispatchResult:
        notified: list[str] = []
        failed: list[str] = []

        for signal in signals:
            if not should_notify(prefs, signal):
                continue
            sent = await self._client.send_message(
                prefs.telegram_chat_id, format_signal_message(signal)
            )
            (notified if sent else failed).append(signal.symbol)

        if notified:
            logger.info(f"Sent {len(notified)} signal alerts: {notified}")
        return DispatchResult(scanned=scanned, notified=notified, failed=failed)
