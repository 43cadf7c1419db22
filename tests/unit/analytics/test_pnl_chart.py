"""Tests for step-wise P&L chart stats and regime events."""

import pytest

from trade_behavior.analytics.pnl_chart import (
    build_regime_events,
    build_wallet_stats_from_chart,
    normalize_chart_points,
)
from trade_behavior.core.config import ChartConfig
from trade_behavior.core.enums import RegimeLabel, TrendLabel
from trade_behavior.core.models import EquityPoint

from .conftest import pnl_points


class TestNormalizeChartPoints:
    def test_sorted_and_filtered(self):
        points = list(reversed(pnl_points([1.0, 2.0])))
        points.append(EquityPoint(pnl_pct=5.0))  # undated
        points.append(pnl_points([0.0])[0].model_copy(update={"pnl_pct": None}))
        chart = normalize_chart_points(points)
        assert [(c.t, c.pnl) for c in chart] == [(1, 1.0), (2, 2.0)]

    def test_bare_pnl_used_as_fallback(self):
        points = [
            EquityPoint(timestamp=p.timestamp, pnl=v)
            for p, v in zip(pnl_points([0, 0]), [5.0, 55.0])
        ]
        assert [(c.t, c.pnl) for c in normalize_chart_points(points)] == [(1, 5.0), (2, 55.0)]


class TestWalletStats:
    def test_summary(self):
        stats = build_wallet_stats_from_chart(pnl_points([-10, 0, 30, 10]))
        assert stats.timeframe_start == 1
        assert stats.timeframe_end == 4
        assert stats.start_pnl_pct == -10
        assert stats.end_pnl_pct == 10
        assert stats.max_run_delta_pct == 30
        assert stats.max_drawdown_delta_pct == -20
        assert stats.recent_trend == TrendLabel.UP

    def test_downtrend(self):
        stats = build_wallet_stats_from_chart(pnl_points([50, 30, 10]))
        assert stats.recent_trend == TrendLabel.DOWN

    def test_flat_within_threshold(self):
        stats = build_wallet_stats_from_chart(pnl_points([0, 2, 4, 3]))
        assert stats.recent_trend == TrendLabel.FLAT

    def test_trend_uses_recent_window_only(self):
        # Large early gains fall outside a two-step window
        stats = build_wallet_stats_from_chart(
            pnl_points([0, 100, 200, 199, 198]), ChartConfig(trend_window=2)
        )
        assert stats.recent_trend == TrendLabel.FLAT

    def test_single_point(self):
        stats = build_wallet_stats_from_chart(pnl_points([12.5]))
        assert stats.start_pnl_pct == stats.end_pnl_pct == 12.5
        assert stats.max_run_delta_pct is None
        assert stats.max_drawdown_delta_pct is None
        assert stats.recent_trend == TrendLabel.FLAT

    def test_empty(self):
        assert build_wallet_stats_from_chart([]) is None

    def test_to_dict(self):
        payload = build_wallet_stats_from_chart(pnl_points([0, 10])).to_dict()
        assert payload["recentTrend"] == "up"
        assert payload["maxRunDeltaPct"] == 10


class TestRegimeEvents:
    def test_labels_and_order(self):
        events = build_regime_events(pnl_points([0, 45, -5, -85]))
        assert [e.label for e in events] == [
            RegimeLabel.CATASTROPHIC_NUKE,
            RegimeLabel.MAJOR_NUKE,
            RegimeLabel.MAJOR_RUN,
        ]
        assert [e.delta_pnl_pct for e in events] == [-80, -50, 45]

    def test_event_fields(self):
        (event,) = build_regime_events(pnl_points([10, 60]))
        assert event.timestamp == 2
        assert event.from_pnl_pct == 10
        assert event.to_pnl_pct == 60
        assert event.to_dict()["label"] == "major_run"

    def test_small_steps_ignored(self):
        assert build_regime_events(pnl_points([0, 20, -10, 5])) == []

    def test_capped(self):
        pnls = [0, 50, 0, 50, 0, 50, 0, 50]
        events = build_regime_events(pnl_points(pnls), ChartConfig(max_regime_events=3))
        assert len(events) == 3

    @pytest.mark.parametrize("delta,label", [
        (40, RegimeLabel.MAJOR_RUN),
        (-40, RegimeLabel.MAJOR_NUKE),
        (-70, RegimeLabel.CATASTROPHIC_NUKE),
    ])
    def test_thresholds_inclusive(self, delta, label):
        (event,) = build_regime_events(pnl_points([0, delta]))
        assert event.label == label

    def test_empty(self):
        assert build_regime_events([]) == []

    def test_idempotent(self):
        points = pnl_points([0, 45, -5, -85])
        first = [e.to_dict() for e in build_regime_events(points)]
        assert [e.to_dict() for e in build_regime_events(points)] == first
