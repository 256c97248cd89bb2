"""
API tests through FastAPI's TestClient, backed by the mock market data source.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from cryptodash import main
from cryptodash.api.deps import get_telegram_client
from cryptodash.api.v1.endpoints.stream import _put_latest, format_error_event, format_tick_event
from cryptodash.services.market_data import MockMarketDataSource
from cryptodash.services.notifications import TelegramClient
from cryptodash.services.stream import tick_from_stream


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(main, "create_market_data_source", lambda: MockMarketDataSource())
    monkeypatch.setattr(main, "init_redis", AsyncMock(return_value=None))
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()


@pytest.fixture
def telegram(client):
    fake = MagicMock(spec=TelegramClient)
    fake.is_configured = True
    fake.validate_chat_id = AsyncMock(return_value=True)
    fake.test_connection = AsyncMock(return_value=True)
    fake.send_message = AsyncMock(return_value=True)
    main.app.dependency_overrides[get_telegram_client] = lambda: fake
    return fake


class TestApp:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["data_source"] == "Mock"

    def test_root_exposes_polling_intervals(self, client):
        body = client.get("/").json()
        assert body["polling"] == {"signals_seconds": 15, "scan_seconds": 60}


class TestMarketEndpoints:
    def test_symbols(self, client):
        symbols = client.get("/api/v1/market/symbols").json()
        assert "BTCUSDT" in symbols

    def test_search(self, client):
        results = client.get("/api/v1/market/search", params={"q": "bt"}).json()
        assert [r["symbol"] for r in results] == ["BTCUSDT"]

    def test_search_short_query(self, client):
        assert client.get("/api/v1/market/search", params={"q": "b"}).json() == []

    def test_price(self, client):
        response = client.get("/api/v1/market/price/btcusdt")

        assert response.status_code == 200
        assert response.json()["price"] > 0

    def test_prices(self, client):
        body = client.get("/api/v1/market/prices", params={"symbols": "BTCUSDT, ethusdt"}).json()
        assert set(body) == {"BTCUSDT", "ETHUSDT"}

    def test_prices_requires_symbols(self, client):
        assert client.get("/api/v1/market/prices", params={"symbols": " , "}).status_code == 400

    def test_klines(self, client):
        candles = client.get("/api/v1/market/klines/BTCUSDT", params={"interval": "1h", "limit": 50}).json()

        assert len(candles) == 50
        assert candles[1]["time"] - candles[0]["time"] == 3600

    def test_klines_invalid_interval(self, client):
        assert client.get("/api/v1/market/klines/BTCUSDT", params={"interval": "7m"}).status_code == 422


class TestSignalEndpoints:
    def test_signal(self, client):
        response = client.get("/api/v1/signals/BTCUSDT")

        assert response.status_code == 200
        body = response.json()
        assert body["symbol"] == "BTCUSDT"
        assert body["interval"] == "15m"
        assert body["result"]["signal"] in {"STRONG_BUY", "STRONG_SELL", "NEUTRAL"}
        assert 0 <= body["result"]["strength"] <= 100
        assert 0 <= body["result"]["rsi"] <= 100

    def test_watchlist(self, client):
        body = client.get("/api/v1/signals", params={"symbols": "BTCUSDT,ETHUSDT,SOLUSDT"}).json()

        assert body["scanned"] == 3
        strengths = [s["result"]["strength"] for s in body["signals"]]
        assert strengths == sorted(strengths, reverse=True)

    def test_watchlist_repeated_symbol_counted_once(self, client):
        body = client.get("/api/v1/signals", params={"symbols": "btcusdt,BTCUSDT"}).json()

        assert body["scanned"] == 1
        assert [s["symbol"] for s in body["signals"]] == ["BTCUSDT"]

    def test_watchlist_requires_symbols(self, client):
        assert client.get("/api/v1/signals", params={"symbols": ","}).status_code == 400

    def test_smart_trading(self, client):
        body = client.get("/api/v1/signals/scan/smart-trading").json()

        assert body["scanned"] == len(client.get("/api/v1/market/symbols").json())
        assert len(body["signals"]) <= 25
        assert all(s["result"]["signal"] == "STRONG_BUY" for s in body["signals"])
        assert all(s["result"]["strength"] >= 70 for s in body["signals"])

    def test_strong_buys(self, client):
        body = client.get("/api/v1/signals/scan/strong-buys").json()
        assert len(body["signals"]) <= 4


class TestCalculatorEndpoint:
    def test_plan(self, client):
        response = client.post(
            "/api/v1/calculator/plan",
            json={"investment": 1000, "profit_margin": 10, "trades": 2, "completed": [1]},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["final_amount"] == pytest.approx(1210)
        assert body["completed_count"] == 1

    def test_negative_trades_rejected(self, client):
        response = client.post("/api/v1/calculator/plan", json={"trades": -1})
        assert response.status_code == 422


class TestNotificationEndpoints:
    def test_unconfigured_bot(self, client):
        main.app.dependency_overrides[get_telegram_client] = lambda: TelegramClient(token="")
        assert client.post("/api/v1/notifications/test").status_code == 503

    def test_validate_chat(self, client, telegram):
        response = client.post("/api/v1/notifications/validate", json={"chat_id": " 12345 "})

        assert response.status_code == 200
        assert response.json() == {"valid": True, "chat_id": "12345"}
        telegram.validate_chat_id.assert_awaited_once_with("12345")

    def test_validate_chat_failure(self, client, telegram):
        telegram.validate_chat_id = AsyncMock(return_value=False)
        response = client.post("/api/v1/notifications/validate", json={"chat_id": "1"})
        assert response.status_code == 400

    def test_dispatch(self, client, telegram):
        response = client.post(
            "/api/v1/notifications/dispatch",
            json={
                "settings": {"telegram_chat_id": "12345", "minimum_strength": 0},
                "symbols": ["BTCUSDT", "ETHUSDT"],
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["scanned"] == 2
        assert set(body["notified"]) <= {"BTCUSDT", "ETHUSDT"}
        assert telegram.send_message.await_count == len(body["notified"])

    def test_dispatch_requires_chat(self, client, telegram):
        response = client.post(
            "/api/v1/notifications/dispatch",
            json={"settings": {}, "symbols": ["BTCUSDT"]},
        )
        assert response.status_code == 400


class TestStreamEndpoints:
    def test_status_empty(self, client):
        body = client.get("/api/v1/stream/status").json()
        assert body == {"active_feeds": 0, "feeds": {}}

    def test_tick_event_format(self):
        tick = tick_from_stream("BTCUSDT", {"c": "1.5", "P": "0.1", "v": "10"})
        event = format_tick_event(tick)

        assert event.startswith("data: {")
        assert event.endswith("\n\n")
        assert '"price":1.5' in event

    def test_error_event_format(self):
        event = format_error_event("BTCUSDT", ConnectionError("WebSocket connection failed"))
        assert event.startswith("event: error\n")
        assert "WebSocket connection failed" in event

    def test_queue_drops_oldest(self):
        queue = asyncio.Queue(maxsize=2)
        for item in ("a", "b", "c"):
            _put_latest(queue, item)

        assert [queue.get_nowait(), queue.get_nowait()] == ["b", "c"]
