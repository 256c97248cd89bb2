"""
CONTRACT 4: Signal Notifications

Input: NotificationSettings + SymbolSignal list
Output: DispatchResult
"""

from pydantic import BaseModel, Field


class NotificationSettings(BaseModel):
    """Per-user alert preferences (stored by the frontend)."""

    telegram_chat_id: str = ""
    notify_strong_buy: bool = True
    notify_strong_sell: bool = False
    minimum_strength: float = Field(default=80, ge=0, le=100)

    @property
    def is_connected(self) -> bool:
        return bool(self.telegram_chat_id)


class ChatValidationRequest(BaseModel):
    chat_id: str = Field(..., min_length=1)


class DispatchRequest(BaseModel):
    """Scan `symbols` and alert on the qualifying signals."""

    settings: NotificationSettings
    symbols: list[str] = Field(..., min_length=1, max_length=100)


class DispatchResult(BaseModel):
    scanned: int
    notified: list[str]
    failed: list[str] = Field(default_factory=list)
