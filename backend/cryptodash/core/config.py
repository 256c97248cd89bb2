"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "CryptoDash Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS (Frontend URL)
    frontend_url: str = "http://localhost:5173"
    allowed_origins: list[str] = ["http://localhost:5173"]

    # Redis (price cache)
    redis_url: str = "redis://localhost:6379"

    # Binance public API
    binance_base_url: str = "https://api.binance.com/api/v3"
    binance_ws_url: str = "wss://stream.binance.com:9443/ws"
    http_timeout: float = 5.0
    requests_per_minute: int = 1200
    price_cache_seconds: float = 1.0
    price_batch_size: int = 20
    batch_delay_seconds: float = 0.1
    kline_limit: int = 500
    default_interval: str = "15m"
    quote_asset: str = "USDT"

    # Live price feeds
    ws_max_retries: int = 5
    ws_retry_interval: float = 2.0  # seconds, doubled per retry
    ws_fallback_interval: float = 5.0  # REST polling once degraded

    # Signal polling (consumed by the frontend)
    signal_poll_seconds: int = 15
    scan_poll_seconds: int = 60
    scan_concurrency: int = 10

    # Telegram
    telegram_bot_token: Optional[str] = None
    telegram_api_url: str = "https://api.telegram.org"

    # Feature Flags
    enable_live_data: bool = True
    use_mock_data: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
