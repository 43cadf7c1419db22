"""Portfolio outcome distribution across every traded mint.

Each mint is collapsed to one representative value, its FIFO median
gain %, and the distribution statistics (win rate, exit percentiles,
tail shares) are taken over that one-value-per-mint array.  This keeps a
single heavily-traded mint from dominating the picture; the technique
builder's per-leg win rate answers the other question and the two are
reported side by side.

Also produces a whole-history round-trip view for mints that are
effectively flat, and flags equity-curve spike days.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from ..core.config import OutcomesConfig, RealizedConfig
from ..core.models import EquityPoint, Trade
from .realized import compute_realized_stats, split_sides
from .stats import median, percentile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpikeDay:
    date: str | None
    pnl_pct: float

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "pnlPct": self.pnl_pct}


@dataclass(frozen=True)
class RoundTrip:
    """A flat mint's whole history viewed as one open-to-close cycle."""

    mint: str
    gain_pct: float
    hold_mins: float


@dataclass
class OutcomesSummary:
    """Per-mint-median outcome distribution."""

    win_rate: float | None = None
    median_exit_pct: float | None = None
    p25_exit_pct: float | None = None
    p75_exit_pct: float | None = None
    p95_exit_pct: float | None = None
    iqr_exit_pct: float | None = None
    max_win_pct: float | None = None
    max_loss_pct: float | None = None
    pct_trades_lt_minus10: float | None = None
    median_hold_mins: float | None = None
    median_round_trip_pct: float | None = None
    median_round_trip_hold_mins: float | None = None
    spike_days: list[SpikeDay] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "winRate": self.win_rate,
            "medianExitPct": self.median_exit_pct,
            "p25ExitPct": self.p25_exit_pct,
            "p75ExitPct": self.p75_exit_pct,
            "p95ExitPct": self.p95_exit_pct,
            "iqrExitPct": self.iqr_exit_pct,
            "maxWinPct": self.max_win_pct,
            "maxLossPct": self.max_loss_pct,
            "pctTradesLtMinus10": self.pct_trades_lt_minus10,
            "medianHoldMins": self.median_hold_mins,
            "medianRoundTripPct": self.median_round_trip_pct,
            "medianRoundTripHoldMins": self.median_round_trip_hold_mins,
            "spikeDays": [d.to_dict() for d in self.spike_days],
        }


def compute_round_trip(
    mint: str,
    buys: Sequence[Trade],
    sells: Sequence[Trade],
    max_residual: float = 0.02,
) -> RoundTrip | None:
    """Round-trip gain for a mint whose bought and sold size match.

    Returns None unless the position is effectively flat
    (``|bought - sold| / bought <= max_residual``) and fully priced.
    Any trade with an unknown amount or price disqualifies the mint.
    """
    if not buys or not sells:
        return None
    if any(t.usd_value is None for t in (*buys, *sells)):
        return None

    bought_qty = sum(t.amount for t in buys)
    sold_qty = sum(t.amount for t in sells)
    bought_usd = sum(t.usd_value for t in buys)
    sold_usd = sum(t.usd_value for t in sells)
    if bought_qty <= 0 or bought_usd <= 0:
        return None

    residual = abs(bought_qty - sold_qty) / bought_qty
    if residual > max_residual:
        return None

    return RoundTrip(
        mint=mint,
        gain_pct=(sold_usd - bought_usd) / bought_usd * 100,
        hold_mins=(sells[-1].time - buys[0].time) / 60_000,
    )


def find_spike_days(
    equity_curve: Sequence[EquityPoint] | None,
    threshold_pct: float = 200.0,
) -> list[SpikeDay]:
    """Curve samples whose P&L % magnitude reaches *threshold_pct*."""
    spikes = []
    for point in equity_curve or ():
        if point.pnl_pct is not None and abs(point.pnl_pct) >= threshold_pct:
            spikes.append(SpikeDay(date=point.label, pnl_pct=point.pnl_pct))
    return spikes


def compute_outcomes(
    mint_map: Mapping[str, Sequence[Trade]],
    equity_curve: Sequence[EquityPoint] | None = None,
    *,
    config: OutcomesConfig | None = None,
    realized_config: RealizedConfig | None = None,
) -> OutcomesSummary:
    """Compute the portfolio outcome distribution from ``{mint: [Trade]}``.

    Parameters
    ----------
    mint_map : Mapping[str, Sequence[Trade]]
        Normalized trades for every mint; no top-N cap is applied.
    equity_curve : Sequence[EquityPoint] | None
        Optional curve used only for spike-day detection.
    """
    cfg = config or OutcomesConfig()
    realized_cfg = realized_config or RealizedConfig()

    med_gains: list[float] = []
    hold_meds: list[float] = []
    round_trips: list[RoundTrip] = []

    for mint, trades in (mint_map or {}).items():
        buys, sells = split_sides(trades or [])
        if not buys and not sells:
            continue
        stats = compute_realized_stats(
            buys, sells, mint=mint, oversell_policy=realized_cfg.oversell_policy
        )
        if stats.median_gain_pct is not None:
            med_gains.append(stats.median_gain_pct)
        if stats.median_hold_mins is not None:
            hold_meds.append(stats.median_hold_mins)

        rt = compute_round_trip(mint, buys, sells, cfg.round_trip_max_residual)
        if rt is not None:
            round_trips.append(rt)

    summary = OutcomesSummary(
        median_hold_mins=median(hold_meds),
        median_round_trip_pct=median([rt.gain_pct for rt in round_trips]),
        median_round_trip_hold_mins=median([rt.hold_mins for rt in round_trips]),
        spike_days=find_spike_days(equity_curve, cfg.spike_threshold_pct),
    )

    if med_gains:
        n = len(med_gains)
        summary.win_rate = sum(1 for g in med_gains if g > 0) / n
        summary.median_exit_pct = median(med_gains)
        summary.p25_exit_pct = percentile(med_gains, 25)
        summary.p75_exit_pct = percentile(med_gains, 75)
        summary.p95_exit_pct = percentile(med_gains, 95)
        summary.iqr_exit_pct = summary.p75_exit_pct - summary.p25_exit_pct
        summary.max_win_pct = max(med_gains)
        summary.max_loss_pct = min(med_gains)
        summary.pct_trades_lt_minus10 = (
            sum(1 for g in med_gains if g < cfg.loss_threshold_pct) / n
        )

    logger.debug(
        "Outcomes: %d mints with closed legs, %d round trips, %d spike days",
        len(med_gains), len(round_trips), len(summary.spike_days),
    )
    return summary
