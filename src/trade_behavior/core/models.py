"""Typed input records.

These are the canonical shapes every analytics component consumes.
Raw provider payloads are converted once, in ``trade_behavior.ingest``;
nothing downstream looks up alternate field names.

Numeric fields use ``None`` for "missing or unparseable" so a bad value
is never mistaken for a legitimate zero.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from .enums import TradeSide


class Trade(BaseModel):
    """One buy or sell of a token."""

    mint: str
    side: TradeSide
    amount: float | None = Field(default=None, ge=0)  # Token quantity
    price_usd: float | None = Field(default=None, ge=0)
    time: int  # Epoch ms
    program: str | None = None  # Venue / DEX program
    symbol: str | None = None

    model_config = {"frozen": True}

    @property
    def is_buy(self) -> bool:
        return self.side == TradeSide.BUY

    @property
    def usd_value(self) -> float | None:
        """Notional in USD, or None when either factor is unknown."""
        if self.amount is None or self.price_usd is None:
            return None
        return self.amount * self.price_usd


class EquityPoint(BaseModel):
    """One sample of a wallet equity / P&L curve."""

    timestamp: datetime | None = None  # UTC
    label: str | None = None  # Caller's original date text
    value: float | None = None  # Portfolio value (preferred)
    pnl_pct: float | None = None  # Cumulative P&L % vs the curve start
    pnl: float | None = None  # Bare "pnl" figure; unit unknown, chart steps only

    model_config = {"frozen": True}

    @field_validator("timestamp")
    @classmethod
    def timestamp_as_utc(cls, v: datetime | None) -> datetime | None:
        if v is None:
            return None
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @property
    def chart_pnl_pct(self) -> float | None:
        """P&L % for step-wise chart views, falling back to bare ``pnl``."""
        return self.pnl_pct if self.pnl_pct is not None else self.pnl

    @property
    def epoch_ms(self) -> int | None:
        if self.timestamp is None:
            return None
        return int(round(self.timestamp.timestamp() * 1000))
