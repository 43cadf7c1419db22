"""Technique features: how a trader enters and exits, per mint.

Builds one feature row per mint (entry spacing, entry style, FIFO
realized stats, venue mix), keeps the ``top_n`` most recently active
mints, and aggregates them into a portfolio-level view.

The portfolio win rate and average gain here are computed over every
closed leg of the selected mints, not over per-mint medians, so a mint
with many closes weighs more than a mint with one.  Compare
:mod:`trade_behavior.analytics.outcomes`, which deliberately does the
opposite.

Usage::

    features = build_technique_features(mint_map, top_n=8)
    print(features.overall.win_rate)
    payload = features.to_dict()
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from ..core.config import EntryStyleConfig, RealizedConfig, TechniqueConfig
from ..core.enums import EntrySignal
from ..core.models import Trade
from .entry_style import detect_entry_style
from .realized import RealizedStats, compute_realized_stats, split_sides
from .stats import mean, median, stddev, time_diffs

logger = logging.getLogger(__name__)

UNKNOWN_VENUE = "unknown"


@dataclass
class MintFeatureRow:
    """Technique features for one mint."""

    mint: str
    symbol: str | None
    start_ts: int | None
    end_ts: int | None
    n_buys: int
    n_sells: int
    entry_spacing_mins_avg: float | None
    entry_spacing_mins_std: float | None
    entry_style_signal: EntrySignal
    entry_style_confidence: float
    realized: RealizedStats
    venue_mix: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "mint": self.mint,
            "symbol": self.symbol,
            "startTs": self.start_ts,
            "endTs": self.end_ts,
            "nBuys": self.n_buys,
            "nSells": self.n_sells,
            "entrySpacingMinsAvg": self.entry_spacing_mins_avg,
            "entrySpacingMinsStd": self.entry_spacing_mins_std,
            "entryStyleSignal": self.entry_style_signal.value,
            "entryStyleConfidence": self.entry_style_confidence,
            "realized": self.realized.to_dict(),
            "venueMix": dict(self.venue_mix),
        }


@dataclass
class TechniqueOverall:
    """Portfolio-level technique aggregate (per-leg weighting)."""

    n_coins: int = 0
    mean_buys_per_coin: float = 0.0
    median_hold_mins: float | None = None
    win_rate: float | None = None
    avg_realized_gain_pct: float | None = None
    venue_share: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nCoins": self.n_coins,
            "meanBuysPerCoin": self.mean_buys_per_coin,
            "medianHoldMins": self.median_hold_mins,
            "winRate": self.win_rate,
            "avgRealizedGainPct": self.avg_realized_gain_pct,
            "venueShare": dict(self.venue_share),
        }


@dataclass
class TechniqueFeatures:
    coins: list[MintFeatureRow] = field(default_factory=list)
    overall: TechniqueOverall = field(default_factory=TechniqueOverall)

    def to_dict(self) -> dict[str, Any]:
        return {
            "coins": [row.to_dict() for row in self.coins],
            "overall": self.overall.to_dict(),
        }


# ---------------------------------------------------------------------- #
# Per-mint rows                                                            #
# ---------------------------------------------------------------------- #

def venue_mix(buys: Sequence[Trade]) -> dict[str, float]:
    """Share of buys routed through each program."""
    counts = Counter(b.program or UNKNOWN_VENUE for b in buys)
    total = sum(counts.values())
    if total == 0:
        return {}
    return {venue: n / total for venue, n in counts.items()}


def build_mint_row(
    mint: str,
    trades: Sequence[Trade],
    *,
    entry_config: EntryStyleConfig | None = None,
    realized_config: RealizedConfig | None = None,
) -> MintFeatureRow | None:
    """Feature row for one mint; None when it has no buys and no sells."""
    buys, sells = split_sides(trades)
    if not buys and not sells:
        return None

    realized_cfg = realized_config or RealizedConfig()
    spacing = time_diffs([b.time for b in buys])
    style = detect_entry_style(buys, entry_config)
    realized = compute_realized_stats(
        buys, sells, mint=mint, oversell_policy=realized_cfg.oversell_policy
    )

    last_trade_ts = max(t.time for t in trades)
    last_sell_ts = sells[-1].time if sells else last_trade_ts
    start_ts = buys[0].time if buys else min(t.time for t in trades)
    symbol = next((t.symbol for t in (*buys[:1], *sells[:1]) if t.symbol), None)

    return MintFeatureRow(
        mint=mint,
        symbol=symbol,
        start_ts=start_ts,
        end_ts=max(last_sell_ts, last_trade_ts),
        n_buys=len(buys),
        n_sells=len(sells),
        entry_spacing_mins_avg=mean(spacing),
        entry_spacing_mins_std=stddev(spacing),
        entry_style_signal=style.signal,
        entry_style_confidence=style.confidence,
        realized=realized,
        venue_mix=venue_mix(buys),
    )


# ---------------------------------------------------------------------- #
# Portfolio view                                                           #
# ---------------------------------------------------------------------- #

def _venue_share(rows: Sequence[MintFeatureRow]) -> dict[str, float]:
    acc: dict[str, float] = {}
    for row in rows:
        for venue, share in row.venue_mix.items():
            acc[venue] = acc.get(venue, 0.0) + share
    total = sum(acc.values())
    if total <= 0:
        return {}
    return {venue: share / total for venue, share in acc.items()}


def build_technique_features(
    mint_map: Mapping[str, Sequence[Trade]],
    top_n: int | None = None,
    *,
    config: TechniqueConfig | None = None,
    entry_config: EntryStyleConfig | None = None,
    realized_config: RealizedConfig | None = None,
) -> TechniqueFeatures:
    """Build technique features from ``{mint: [Trade, ...]}``.

    Parameters
    ----------
    mint_map : Mapping[str, Sequence[Trade]]
        Normalized trades per mint.
    top_n : int | None
        How many of the most recently active mints to keep.  ``<= 0``
        selects nothing.  Defaults to ``config.feature_mint_count``.

    Returns
    -------
    TechniqueFeatures
        Selected rows (newest ``end_ts`` first) plus the overall block.
    """
    cfg = config or TechniqueConfig()
    limit = cfg.feature_mint_count if top_n is None else top_n

    rows: list[MintFeatureRow] = []
    for mint, trades in (mint_map or {}).items():
        row = build_mint_row(
            mint,
            trades or [],
            entry_config=entry_config,
            realized_config=realized_config,
        )
        if row is not None:
            rows.append(row)

    rows.sort(key=lambda r: r.end_ts or 0, reverse=True)
    picked = rows[: max(0, limit)]

    all_legs = [g for row in picked for g in row.realized.per_leg]
    hold_meds = [
        row.realized.median_hold_mins
        for row in picked
        if row.realized.median_hold_mins is not None
    ]

    overall = TechniqueOverall(
        n_coins=len(picked),
        mean_buys_per_coin=mean([row.n_buys for row in picked]) or 0.0,
        median_hold_mins=median(hold_meds),
        win_rate=(sum(1 for g in all_legs if g > 0) / len(all_legs)) if all_legs else None,
        avg_realized_gain_pct=mean(all_legs),
        venue_share=_venue_share(picked),
    )
    logger.debug(
        "Technique features: %d/%d mints selected, %d closed legs",
        len(picked), len(rows), len(all_legs),
    )
    return TechniqueFeatures(coins=picked, overall=overall)
