"""Shared builders for analytics tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from trade_behavior.core.enums import TradeSide
from trade_behavior.core.models import EquityPoint, Trade

MINUTE = 60_000


def make_trade(
    side: str = "buy",
    amount: float | None = 1.0,
    price: float | None = 1.0,
    time: int = 0,
    mint: str = "MintA",
    program: str | None = None,
    symbol: str | None = None,
) -> Trade:
    return Trade(
        mint=mint,
        side=TradeSide(side),
        amount=amount,
        price_usd=price,
        time=time,
        program=program,
        symbol=symbol,
    )


def buy(amount=1.0, price=1.0, minute=0, **kw) -> Trade:
    return make_trade("buy", amount, price, int(minute * MINUTE), **kw)


def sell(amount=1.0, price=1.0, minute=0, **kw) -> Trade:
    return make_trade("sell", amount, price, int(minute * MINUTE), **kw)


def daily_points(
    values: list[float],
    start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc),
) -> list[EquityPoint]:
    """One value sample per consecutive UTC day."""
    return [
        EquityPoint(timestamp=start + timedelta(days=i), value=v)
        for i, v in enumerate(values)
    ]


def pnl_points(pnls: list[float], step_ms: int = 1) -> list[EquityPoint]:
    """Cumulative P&L % samples at epoch-ms ``step_ms * (i + 1)``."""
    return [
        EquityPoint(
            timestamp=datetime.fromtimestamp(step_ms * (i + 1) / 1000, tz=timezone.utc),
            pnl_pct=p,
        )
        for i, p in enumerate(pnls)
    ]
