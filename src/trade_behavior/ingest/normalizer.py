"""Raw payload -> typed record normalization.

This is the single ingestion boundary.  Provider payloads arrive with
alternate key names (``priceUsd`` vs ``price.usd``, ``date`` vs ``ts``,
``pnlPercentage`` vs ``pnl_pct`` ...) and with numbers encoded as
strings.  Everything is resolved here into :class:`Trade` and
:class:`EquityPoint` so analytics code reads one field name per concept.

Malformed records are dropped (debug-logged), never raised on.
Unparseable numerics become ``None`` rather than ``0``.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any, Iterable

from ..core.enums import TradeSide
from ..core.models import EquityPoint, Trade
from .mints import extract_mint, get_path, group_raw_trades_by_mint

logger = logging.getLogger(__name__)

_SIDE_KEYS = ("type", "side")
_AMOUNT_KEYS = ("amount", "tokenAmount", "qty")
_PRICE_KEYS = ("priceUsd", "price_usd", "price.usd")
_TIME_KEYS = ("time", "timestamp", "ts")
_PROGRAM_KEYS = ("program", "dex", "venue")
_SYMBOL_KEYS = ("meta.to.symbol", "symbol", "token.symbol")

_POINT_DATE_KEYS = ("date", "timestamp", "ts", "t", "time")
_POINT_VALUE_KEYS = ("value", "v", "equity")
_POINT_PNL_KEYS = ("pnlPercentage", "pnl_pct", "pnlPct", "pnl_percent")
# Bare "pnl" may be an absolute USD figure; only the chart step view reads it
_POINT_BARE_PNL_KEYS = ("pnl",)


def _first(raw: dict[str, Any], keys: Iterable[str]) -> Any:
    """First non-None value among dotted *keys*."""
    for key in keys:
        value = get_path(raw, key)
        if value is not None:
            return value
    return None


# ---------------------------------------------------------------------- #
# Scalars                                                                  #
# ---------------------------------------------------------------------- #

def coerce_number(value: Any) -> float | None:
    """Parse a finite number; None for anything else.

    Booleans, empty strings, NaN and infinities are rejected so they
    cannot masquerade as a real zero or poison an aggregate.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse epoch milliseconds or ISO-8601 text into an aware UTC datetime.

    Naive ISO strings are taken as UTC.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    number = coerce_number(value)
    if number is not None:
        try:
            return datetime.fromtimestamp(number / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_epoch_ms(value: Any) -> int | None:
    ts = parse_timestamp(value)
    if ts is None:
        return None
    return int(round(ts.timestamp() * 1000))


def _parse_side(value: Any) -> TradeSide | None:
    if not isinstance(value, str):
        return None
    try:
        return TradeSide(value.strip().lower())
    except ValueError:
        return None


def _non_negative(value: Any) -> float | None:
    number = coerce_number(value)
    if number is None or number < 0:
        return None
    return number


def _text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


# ---------------------------------------------------------------------- #
# Trades                                                                   #
# ---------------------------------------------------------------------- #

def normalize_trade(raw: Any, mint: str | None = None) -> Trade | None:
    """Convert one raw trade record into a :class:`Trade`.

    Parameters
    ----------
    raw : dict
        Provider trade record.
    mint : str | None
        Mint the record is filed under.  When omitted the mint is
        extracted from the record itself.

    Returns
    -------
    Trade or None
        None when the record has no recognizable side, time or mint.
    """
    if not isinstance(raw, dict):
        logger.debug("Dropping non-dict trade record: %r", raw)
        return None

    side = _parse_side(_first(raw, _SIDE_KEYS))
    time_ms = parse_epoch_ms(_first(raw, _TIME_KEYS))
    resolved_mint = mint or extract_mint(raw)

    if side is None or time_ms is None or not resolved_mint:
        logger.debug(
            "Dropping trade record (side=%s time=%s mint=%s)",
            side, time_ms, resolved_mint,
        )
        return None

    return Trade(
        mint=resolved_mint,
        side=side,
        amount=_non_negative(_first(raw, _AMOUNT_KEYS)),
        price_usd=_non_negative(_first(raw, _PRICE_KEYS)),
        time=time_ms,
        program=_text(_first(raw, _PROGRAM_KEYS)),
        symbol=_text(_first(raw, _SYMBOL_KEYS)),
    )


def normalize_trades(raw_trades: Any, mint: str | None = None) -> list[Trade]:
    """Normalize a list of raw trades, dropping unusable records."""
    if not isinstance(raw_trades, (list, tuple)):
        return []
    trades = []
    for raw in raw_trades:
        if isinstance(raw, Trade):
            trades.append(raw)
            continue
        trade = normalize_trade(raw, mint=mint)
        if trade is not None:
            trades.append(trade)
    return trades


def normalize_mint_map(raw_map: Any) -> dict[str, list[Trade]]:
    """Normalize ``{mint: [raw trade, ...]}`` into typed trades per mint.

    Insertion order of mints is preserved.  A mint whose records are all
    unusable maps to an empty list.
    """
    if not isinstance(raw_map, dict):
        return {}
    return {
        str(mint): normalize_trades(raw_list, mint=str(mint))
        for mint, raw_list in raw_map.items()
    }


def group_trades_by_mint(raw_trades: Any) -> dict[str, list[Trade]]:
    """Build a typed mint map from a flat list of raw wallet trades."""
    if not isinstance(raw_trades, (list, tuple)):
        return {}
    return normalize_mint_map(group_raw_trades_by_mint(list(raw_trades)))


# ---------------------------------------------------------------------- #
# Equity points                                                            #
# ---------------------------------------------------------------------- #

def normalize_equity_point(raw: Any) -> EquityPoint | None:
    """Convert one raw chart sample into an :class:`EquityPoint`.

    Returns None when the sample carries no value, P&L % or bare ``pnl``.
    """
    if isinstance(raw, EquityPoint):
        return raw
    if not isinstance(raw, dict):
        return None

    value = coerce_number(_first(raw, _POINT_VALUE_KEYS))
    pnl_pct = coerce_number(_first(raw, _POINT_PNL_KEYS))
    pnl = coerce_number(_first(raw, _POINT_BARE_PNL_KEYS))
    if value is None and pnl_pct is None and pnl is None:
        return None

    date_raw = _first(raw, _POINT_DATE_KEYS)
    label = date_raw if isinstance(date_raw, str) else None
    timestamp = parse_timestamp(date_raw)
    if label is None and timestamp is not None:
        label = timestamp.isoformat()

    return EquityPoint(
        timestamp=timestamp, label=label, value=value, pnl_pct=pnl_pct, pnl=pnl
    )


def normalize_equity_points(raw_points: Any) -> list[EquityPoint]:
    """Normalize a raw chart series; order is preserved, bad samples dropped."""
    if not isinstance(raw_points, (list, tuple)):
        return []
    points = []
    for raw in raw_points:
        point = normalize_equity_point(raw)
        if point is not None:
            points.append(point)
    return points
