"""FIFO realized outcomes per mint.

Sells are paired against buy lots oldest-first.  Each sell that consumes
priced lot quantity becomes one realized *leg* with a gain %; whenever a
sell drains the lot queue the position is flat and its hold time (first
buy of the cycle to the draining sell) is recorded.

Usage::

    buys, sells = split_sides(trades)
    stats = compute_realized_stats(buys, sells, mint="So1...")
    print(stats.median_gain_pct, stats.median_hold_mins)
"""

from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Iterable

from ..core.enums import OversellPolicy
from ..core.errors import OversellError
from ..core.models import Trade
from .stats import median, percentile

logger = logging.getLogger(__name__)

# Residue below this fraction of the original lot or sell size is float noise
_QTY_EPSILON = 1e-12


@dataclass
class Lot:
    """Open quantity left from one buy."""

    qty: float
    price_usd: float | None
    time: int
    orig_qty: float = 0.0

    def __post_init__(self):
        if not self.orig_qty:
            self.orig_qty = self.qty

    @property
    def is_spent(self) -> bool:
        return self.qty <= _QTY_EPSILON * self.orig_qty


@dataclass
class RealizedStats:
    """FIFO outcome summary for one mint."""

    n_closed: int = 0
    median_gain_pct: float | None = None
    p75_gain_pct: float | None = None
    median_hold_mins: float | None = None
    per_leg: list[float] = field(default_factory=list)
    unmatched_sell_qty: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "nClosed": self.n_closed,
            "medianGainPct": self.median_gain_pct,
            "p75GainPct": self.p75_gain_pct,
            "medianHoldMins": self.median_hold_mins,
            "perLeg": list(self.per_leg),
            "unmatchedSellQty": self.unmatched_sell_qty,
        }


def split_sides(trades: Iterable[Trade]) -> tuple[list[Trade], list[Trade]]:
    """Split trades into (buys, sells), each sorted ascending by time."""
    buys: list[Trade] = []
    sells: list[Trade] = []
    for trade in trades or ():
        (buys if trade.is_buy else sells).append(trade)
    buys.sort(key=lambda t: t.time)
    sells.sort(key=lambda t: t.time)
    return buys, sells


def compute_realized_stats(
    buys: list[Trade],
    sells: list[Trade],
    *,
    mint: str = "",
    oversell_policy: OversellPolicy = OversellPolicy.WARN,
) -> RealizedStats:
    """Compute realized outcomes using FIFO pairing.

    Parameters
    ----------
    buys, sells : list[Trade]
        One mint's trades, each list sorted ascending by time.
    mint : str
        Used only for over-sell diagnostics.
    oversell_policy : OversellPolicy
        Handling of sell quantity beyond the open lots.  The excess is
        always reported in ``unmatched_sell_qty``.

    Raises
    ------
    OversellError
        Only under ``OversellPolicy.REJECT``.

    Notes
    -----
    Trades with an unknown or zero amount move no quantity.  A leg that touches
    a lot with unknown price, or a sell with unknown price, still moves
    quantity but records no gain %.
    """
    if not buys or not sells:
        # Sells with no buys at all are reported but not policed
        orphan_qty = 0.0 if buys else sum(s.amount or 0.0 for s in sells or ())
        return RealizedStats(unmatched_sell_qty=orphan_qty)

    queue: deque[Lot] = deque()
    first_buy_ts: int | None = None
    for b in buys:
        if not b.amount:
            continue
        queue.append(Lot(qty=b.amount, price_usd=b.price_usd, time=b.time))
        if first_buy_ts is None:
            first_buy_ts = b.time

    gains: list[float] = []
    holds: list[float] = []
    unmatched = 0.0

    for s in sells:
        sell_qty = s.amount or 0.0
        realized_usd = 0.0
        spent_usd = 0.0
        priced = s.price_usd is not None

        while sell_qty > 0 and queue:
            lot = queue[0]
            take = min(lot.qty, sell_qty)
            if lot.price_usd is None:
                priced = False
            else:
                spent_usd += take * lot.price_usd
            realized_usd += take * (s.price_usd or 0.0)
            lot.qty -= take
            sell_qty -= take
            if lot.is_spent:
                queue.popleft()

        if sell_qty > _QTY_EPSILON * (s.amount or 0.0):
            unmatched += sell_qty
            _handle_oversell(mint, s, sell_qty, oversell_policy)

        if priced and spent_usd > 0:
            gains.append((realized_usd - spent_usd) / spent_usd * 100)

        if not queue and first_buy_ts is not None:
            hold = (s.time - first_buy_ts) / 60_000
            if math.isfinite(hold):
                holds.append(hold)
            first_buy_ts = None

    return RealizedStats(
        n_closed=len(gains),
        median_gain_pct=median(gains),
        p75_gain_pct=percentile(gains, 75),
        median_hold_mins=median(holds),
        per_leg=gains,
        unmatched_sell_qty=unmatched,
    )


def _handle_oversell(
    mint: str, sell: Trade, excess: float, policy: OversellPolicy
) -> None:
    if policy == OversellPolicy.REJECT:
        raise OversellError(mint, excess)
    if policy == OversellPolicy.WARN:
        logger.warning(
            "Sell at %d exceeds open lots for %s: %g unmatched, dropped",
            sell.time, mint or "<unknown>", excess,
        )
