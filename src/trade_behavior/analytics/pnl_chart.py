"""Step-wise statistics over a cumulative P&L % chart.

Where :mod:`equity_curve` works on daily values, this module looks at the
raw chart steps: the biggest single-step run-up and drop, the recent
trend, and a short list of regime events (major runs and nukes).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from ..core.config import ChartConfig
from ..core.enums import RegimeLabel, TrendLabel
from ..core.models import EquityPoint


@dataclass(frozen=True)
class ChartPoint:
    t: int  # Epoch ms
    pnl: float  # Cumulative P&L %


@dataclass(frozen=True)
class WalletChartStats:
    timeframe_start: int
    timeframe_end: int
    start_pnl_pct: float
    end_pnl_pct: float
    max_run_delta_pct: float | None
    max_drawdown_delta_pct: float | None
    recent_trend: TrendLabel

    def to_dict(self) -> dict[str, Any]:
        return {
            "timeframeStart": self.timeframe_start,
            "timeframeEnd": self.timeframe_end,
            "startPnlPct": self.start_pnl_pct,
            "endPnlPct": self.end_pnl_pct,
            "maxRunDeltaPct": self.max_run_delta_pct,
            "maxDrawdownDeltaPct": self.max_drawdown_delta_pct,
            "recentTrend": self.recent_trend.value,
        }


@dataclass(frozen=True)
class RegimeEvent:
    timestamp: int
    delta_pnl_pct: float
    from_pnl_pct: float
    to_pnl_pct: float
    label: RegimeLabel

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "deltaPnlPct": self.delta_pnl_pct,
            "fromPnlPct": self.from_pnl_pct,
            "toPnlPct": self.to_pnl_pct,
            "label": self.label.value,
        }


def normalize_chart_points(points: Sequence[EquityPoint]) -> list[ChartPoint]:
    """Dated P&L % samples as ``(t, pnl)`` sorted by time.

    A bare ``pnl`` figure stands in when no explicit P&L % was given.
    """
    out = [
        ChartPoint(t=p.epoch_ms, pnl=p.chart_pnl_pct)
        for p in points or ()
        if p.epoch_ms is not None and p.chart_pnl_pct is not None
    ]
    out.sort(key=lambda c: c.t)
    return out


def _deltas(points: Sequence[ChartPoint]) -> list[float]:
    return [points[i].pnl - points[i - 1].pnl for i in range(1, len(points))]


def build_wallet_stats_from_chart(
    points: Sequence[EquityPoint],
    config: ChartConfig | None = None,
) -> WalletChartStats | None:
    """Timeframe, start/end P&L, largest single steps and recent trend.

    The trend averages the last ``trend_window`` step deltas: above
    ``trend_threshold_pct`` is up, below its negative is down.
    """
    cfg = config or ChartConfig()
    chart = normalize_chart_points(points)
    if not chart:
        return None

    deltas = _deltas(chart)
    recent = deltas[-cfg.trend_window:] if cfg.trend_window > 0 else []
    trend = TrendLabel.FLAT
    if recent:
        avg_delta = sum(recent) / len(recent)
        if avg_delta > cfg.trend_threshold_pct:
            trend = TrendLabel.UP
        elif avg_delta < -cfg.trend_threshold_pct:
            trend = TrendLabel.DOWN

    return WalletChartStats(
        timeframe_start=chart[0].t,
        timeframe_end=chart[-1].t,
        start_pnl_pct=chart[0].pnl,
        end_pnl_pct=chart[-1].pnl,
        max_run_delta_pct=max(deltas) if deltas else None,
        max_drawdown_delta_pct=min(deltas) if deltas else None,
        recent_trend=trend,
    )


def _classify_step(delta: float, cfg: ChartConfig) -> RegimeLabel | None:
    if delta >= cfg.major_run_pct:
        return RegimeLabel.MAJOR_RUN
    if delta <= cfg.catastrophic_nuke_pct:
        return RegimeLabel.CATASTROPHIC_NUKE
    if delta <= cfg.major_nuke_pct:
        return RegimeLabel.MAJOR_NUKE
    return None


def build_regime_events(
    points: Sequence[EquityPoint],
    config: ChartConfig | None = None,
) -> list[RegimeEvent]:
    """Largest-magnitude run / nuke steps, at most ``max_regime_events``."""
    cfg = config or ChartConfig()
    chart = normalize_chart_points(points)

    events = []
    for prev, cur in zip(chart, chart[1:]):
        delta = cur.pnl - prev.pnl
        label = _classify_step(delta, cfg)
        if label is not None:
            events.append(RegimeEvent(
                timestamp=cur.t,
                delta_pnl_pct=delta,
                from_pnl_pct=prev.pnl,
                to_pnl_pct=cur.pnl,
                label=label,
            ))

    events.sort(key=lambda e: abs(e.delta_pnl_pct), reverse=True)
    return events[: max(0, cfg.max_regime_events)]
