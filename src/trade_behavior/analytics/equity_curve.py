"""Wallet equity-curve analysis.

Normalizes a wallet's equity / P&L samples into a value series, then
summarizes it as calendar-month P&L and curve risk statistics
(peak-to-trough drawdown, recovery, trailing volatility, streaks).

Usage::

    sidecar = summarize_for_sidecar(points)
    print(sidecar.wallet_curve.max_drawdown_pct)
    payload = sidecar.to_dict()  # {"wallet_performance": [...], "wallet_curve": {...}}
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Sequence

import numpy as np

from ..core.config import CurveConfig
from ..core.models import EquityPoint
from .stats import round_half_up


@dataclass(frozen=True)
class DatedValue:
    date: datetime
    value: float


@dataclass(frozen=True)
class MonthlyPnL:
    month: str  # YYYY-MM (UTC)
    pnl_pct: float
    start_value: float
    end_value: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "pnl_pct": self.pnl_pct,
            "start_value": self.start_value,
            "end_value": self.end_value,
        }


@dataclass
class CurveStats:
    pnl_max_pct: float | None = None
    pnl_min_pct: float | None = None
    max_drawdown_pct: float | None = None
    volatility_30d_pct: float | None = None
    recovery_days_from_last_dd: int | None = None
    max_up_days: int = 0
    max_down_days: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "pnl_max_pct": self.pnl_max_pct,
            "pnl_min_pct": self.pnl_min_pct,
            "max_drawdown_pct": self.max_drawdown_pct,
            "volatility_30d_pct": self.volatility_30d_pct,
            "recovery_days_from_last_dd": self.recovery_days_from_last_dd,
            "streaks": {
                "max_up_days": self.max_up_days,
                "max_down_days": self.max_down_days,
            },
        }


@dataclass
class WalletSidecar:
    wallet_performance: list[MonthlyPnL] = field(default_factory=list)
    wallet_curve: CurveStats = field(default_factory=CurveStats)

    def to_dict(self) -> dict[str, Any]:
        return {
            "wallet_performance": [m.to_dict() for m in self.wallet_performance],
            "wallet_curve": self.wallet_curve.to_dict(),
        }


# ---------------------------------------------------------------------- #
# Normalization                                                            #
# ---------------------------------------------------------------------- #

def normalize_value_series(
    points: Sequence[EquityPoint],
    baseline: float = 100.0,
) -> list[DatedValue]:
    """Turn equity points into a dated value series, ascending by date.

    Real ``value`` samples win: if any dated point carries one, points
    without a value are dropped.  Otherwise values are synthesized from
    cumulative P&L % against *baseline*.
    """
    rows = sorted(
        (
            p for p in points or ()
            if p.timestamp is not None and (p.value is not None or p.pnl_pct is not None)
        ),
        key=lambda p: p.timestamp,
    )
    if not rows:
        return []

    if any(p.value is not None for p in rows):
        return [DatedValue(p.timestamp, p.value) for p in rows if p.value is not None]

    return [DatedValue(p.timestamp, baseline * (1 + p.pnl_pct / 100)) for p in rows]


def _utc(d: datetime) -> datetime:
    return d.astimezone(timezone.utc)


# ---------------------------------------------------------------------- #
# Monthly P&L                                                              #
# ---------------------------------------------------------------------- #

def summarize_monthly_pnl(
    points: Sequence[EquityPoint],
    config: CurveConfig | None = None,
) -> list[MonthlyPnL]:
    """P&L % per UTC calendar month from first to last value in the month."""
    cfg = config or CurveConfig()
    series = normalize_value_series(points, cfg.baseline_value)

    buckets: dict[str, list[float]] = {}
    for p in series:
        key = _utc(p.date).strftime("%Y-%m")
        if key not in buckets:
            buckets[key] = [p.value, p.value]
        else:
            buckets[key][1] = p.value

    months = []
    for key in sorted(buckets):
        start, end = buckets[key]
        pnl_pct = (end - start) / start * 100 if start != 0 else 0.0
        months.append(MonthlyPnL(
            month=key,
            pnl_pct=round_half_up(pnl_pct, cfg.round_decimals),
            start_value=round_half_up(start, cfg.round_decimals),
            end_value=round_half_up(end, cfg.round_decimals),
        ))
    return months


# ---------------------------------------------------------------------- #
# Curve statistics                                                         #
# ---------------------------------------------------------------------- #

def daily_values(series: Sequence[DatedValue]) -> list[float]:
    """One value per UTC day, the last sample of the day winning."""
    per_day: dict[str, float] = {}
    for p in series:
        per_day[_utc(p.date).date().isoformat()] = p.value
    return [per_day[day] for day in sorted(per_day)]


def _drawdown(values: np.ndarray) -> tuple[float, int | None]:
    """Most negative (v - running_peak) / running_peak and its trough index."""
    running_max = np.maximum.accumulate(values)
    with np.errstate(divide="ignore", invalid="ignore"):
        drawdowns = np.where(running_max != 0, (values - running_max) / running_max, 0.0)
    trough = int(np.argmin(drawdowns))
    max_dd = float(drawdowns[trough])
    if max_dd >= 0:
        return 0.0, None
    return max_dd, trough


def _recovery_days(values: np.ndarray, trough: int | None) -> int | None:
    """Days from the trough until the preceding peak is reached again."""
    if trough is None:
        return None
    peak = float(np.max(values[: trough + 1]))
    for j in range(trough + 1, len(values)):
        if values[j] >= peak:
            return j - trough
    return None


def _daily_returns(values: np.ndarray) -> np.ndarray:
    """Simple returns, skipping days whose previous value is zero."""
    prev = values[:-1]
    curr = values[1:]
    mask = (prev != 0) & np.isfinite(curr)
    return (curr[mask] - prev[mask]) / prev[mask]


def _streaks(values: np.ndarray) -> tuple[int, int]:
    """Longest runs of up days and down days; a flat day resets both."""
    up = down = max_up = max_down = 0
    for i in range(1, len(values)):
        prev = values[i - 1]
        r = (values[i] - prev) / prev if prev != 0 else 0.0
        if r > 0:
            up += 1
            down = 0
            max_up = max(max_up, up)
        elif r < 0:
            down += 1
            up = 0
            max_down = max(max_down, down)
        else:
            up = down = 0
    return max_up, max_down


def compute_curve_stats(
    points: Sequence[EquityPoint],
    config: CurveConfig | None = None,
) -> CurveStats:
    """Compute wallet-level curve statistics.

    - pnl_max_pct / pnl_min_pct: best / worst day vs the first day's value
    - max_drawdown_pct: classic peak-to-trough, as a negative percent
    - recovery_days_from_last_dd: trough to first day back at the prior peak
    - volatility_30d_pct: sample stdev of the last ~30 daily returns, annualized
    - streaks: consecutive up / down days
    """
    cfg = config or CurveConfig()
    series = normalize_value_series(points, cfg.baseline_value)
    if not series:
        return CurveStats()

    values = np.array(daily_values(series), dtype=float)
    dec = cfg.round_decimals
    first = float(values[0])

    pnl_max = pnl_min = None
    if first != 0:
        pnl_max = round_half_up((float(np.max(values)) - first) / first * 100, dec)
        pnl_min = round_half_up((float(np.min(values)) - first) / first * 100, dec)

    max_dd, trough = _drawdown(values)

    window = _daily_returns(values)[-cfg.volatility_window_days:]
    stdev = float(np.std(window, ddof=1)) if len(window) > 1 else 0.0
    volatility = round_half_up(stdev * math.sqrt(cfg.annualization_days) * 100, dec)

    max_up, max_down = _streaks(values)

    return CurveStats(
        pnl_max_pct=pnl_max,
        pnl_min_pct=pnl_min,
        max_drawdown_pct=round_half_up(max_dd * 100, dec),
        volatility_30d_pct=volatility if math.isfinite(volatility) else None,
        recovery_days_from_last_dd=_recovery_days(values, trough),
        max_up_days=max_up,
        max_down_days=max_down,
    )


def summarize_for_sidecar(
    points: Sequence[EquityPoint],
    config: CurveConfig | None = None,
) -> WalletSidecar:
    """Monthly P&L rows and curve stats from one chart, no I/O."""
    return WalletSidecar(
        wallet_performance=summarize_monthly_pnl(points, config),
        wallet_curve=compute_curve_stats(points, config),
    )
