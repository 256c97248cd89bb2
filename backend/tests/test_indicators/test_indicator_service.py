"""
Tests for IndicatorService over an in-memory source.
"""

import pytest

from cryptodash.schemas.market import Timeframe
from cryptodash.schemas.signals import DEFAULT_RESULT, SignalType
from cryptodash.services.base import ValidationError
from cryptodash.services.indicators import IndicatorService


class TestCalculateForSymbol:
    @pytest.mark.asyncio
    async def test_symbol_signal(self, fake_source):
        service = IndicatorService(fake_source)

        signal = await service.calculate_for_symbol("aaausdt", "1h")

        assert signal.symbol == "AAAUSDT"
        assert signal.interval == Timeframe.H1
        assert signal.signal == SignalType.STRONG_BUY
        assert signal.last_price == pytest.approx(150.0)
        assert fake_source.requests == [("AAAUSDT", "1h")]

    @pytest.mark.asyncio
    async def test_short_history_gives_defaults(self, fake_source):
        signal = await IndicatorService(fake_source).calculate_for_symbol("DDDUSDT")
        assert signal.result == DEFAULT_RESULT

    @pytest.mark.asyncio
    async def test_unknown_symbol_gives_defaults(self, fake_source):
        signal = await IndicatorService(fake_source).calculate_for_symbol("ZZZUSDT")
        assert signal.result == DEFAULT_RESULT
        assert signal.last_price is None

    @pytest.mark.asyncio
    async def test_invalid_interval_raises(self, fake_source):
        with pytest.raises(ValidationError):
            await IndicatorService(fake_source).calculate_for_symbol("AAAUSDT", "7m")
        assert fake_source.requests == []


class TestExecute:
    @pytest.mark.asyncio
    async def test_all_symbols(self, fake_source):
        service = IndicatorService(fake_source, concurrency=2)

        results = await service.execute(["AAAUSDT", "BBBUSDT", "CCCUSDT"])

        assert set(results) == {"AAAUSDT", "BBBUSDT", "CCCUSDT"}
        assert results["AAAUSDT"].signal == SignalType.STRONG_BUY
        assert results["BBBUSDT"].result == DEFAULT_RESULT

    @pytest.mark.asyncio
    async def test_failing_symbol_is_skipped(self, fake_source):
        real_get_series = fake_source.get_series

        async def flaky(symbol, interval, limit=None):
            if symbol == "CCCUSDT":
                raise RuntimeError("boom")
            return await real_get_series(symbol, interval, limit)

        fake_source.get_series = flaky
        results = await IndicatorService(fake_source).execute(["AAAUSDT", "CCCUSDT"])

        assert list(results) == ["AAAUSDT"]

    @pytest.mark.asyncio
    async def test_repeated_symbols_fetched_once(self, fake_source):
        results = await IndicatorService(fake_source).execute(["BBBUSDT", "AAAUSDT", "bbbusdt"])

        assert list(results) == ["BBBUSDT", "AAAUSDT"]
        assert [symbol for symbol, _ in fake_source.requests] == ["BBBUSDT", "AAAUSDT"]
