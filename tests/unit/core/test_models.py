"""Test the typed input records."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from trade_behavior.core.enums import TradeSide
from trade_behavior.core.models import EquityPoint, Trade


class TestTrade:
    def test_usd_value(self):
        trade = Trade(mint="M", side=TradeSide.BUY, amount=4, price_usd=0.5, time=0)
        assert trade.usd_value == 2.0
        assert trade.is_buy

    def test_usd_value_unknown(self):
        assert Trade(mint="M", side="sell", amount=4, time=0).usd_value is None

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            Trade(mint="M", side="buy", amount=-1, time=0)

    def test_frozen(self):
        trade = Trade(mint="M", side="buy", time=0)
        with pytest.raises(ValidationError):
            trade.amount = 5


class TestEquityPoint:
    def test_epoch_ms(self):
        point = EquityPoint(timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc))
        assert point.epoch_ms == 1_704_067_200_000

    def test_epoch_ms_undated(self):
        assert EquityPoint(value=1.0).epoch_ms is None

    def test_naive_timestamp_is_utc(self):
        point = EquityPoint(timestamp=datetime(2024, 1, 31, 22))
        assert point.timestamp == datetime(2024, 1, 31, 22, tzinfo=timezone.utc)
        assert point.timestamp.tzinfo == timezone.utc

    def test_aware_timestamp_converted_to_utc(self):
        est = timezone(timedelta(hours=-5))
        point = EquityPoint(timestamp=datetime(2024, 1, 31, 22, tzinfo=est))
        assert point.timestamp == datetime(2024, 2, 1, 3, tzinfo=timezone.utc)
        assert point.timestamp.tzinfo == timezone.utc

    def test_chart_pnl_falls_back_to_bare_pnl(self):
        assert EquityPoint(pnl=42.0).chart_pnl_pct == 42.0
        assert EquityPoint(pnl_pct=1.0, pnl=42.0).chart_pnl_pct == 1.0
