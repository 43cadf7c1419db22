"""Trade behavior analytics: pure functions over normalized records.

Key components
--------------
stats          mean / median / nearest-rank percentile / population stddev
realized       FIFO lot matching per mint (RealizedStats)
entry_style    single / twap / scale_in / dca entry labels
technique      per-mint feature rows + top-N per-leg aggregate
outcomes       every-mint, per-mint-median outcome distribution
equity_curve   monthly P&L and curve risk stats
pnl_chart      step-wise chart stats and regime events
"""

from .entry_style import EntryStyle, detect_entry_style
from .equity_curve import (
    CurveStats,
    DatedValue,
    MonthlyPnL,
    WalletSidecar,
    compute_curve_stats,
    normalize_value_series,
    summarize_for_sidecar,
    summarize_monthly_pnl,
)
from .outcomes import OutcomesSummary, RoundTrip, SpikeDay, compute_outcomes
from .pnl_chart import (
    ChartPoint,
    RegimeEvent,
    WalletChartStats,
    build_regime_events,
    build_wallet_stats_from_chart,
    normalize_chart_points,
)
from .realized import Lot, RealizedStats, compute_realized_stats, split_sides
from .stats import mean, median, percentile, round_half_up, stddev, time_diffs
from .technique import (
    MintFeatureRow,
    TechniqueFeatures,
    TechniqueOverall,
    build_technique_features,
)

__all__ = [
    "ChartPoint",
    "CurveStats",
    "DatedValue",
    "EntryStyle",
    "Lot",
    "MintFeatureRow",
    "MonthlyPnL",
    "OutcomesSummary",
    "RealizedStats",
    "RegimeEvent",
    "RoundTrip",
    "SpikeDay",
    "TechniqueFeatures",
    "TechniqueOverall",
    "WalletChartStats",
    "WalletSidecar",
    "build_regime_events",
    "build_technique_features",
    "build_wallet_stats_from_chart",
    "compute_curve_stats",
    "compute_outcomes",
    "compute_realized_stats",
    "detect_entry_style",
    "mean",
    "median",
    "normalize_chart_points",
    "normalize_value_series",
    "percentile",
    "round_half_up",
    "split_sides",
    "stddev",
    "summarize_for_sidecar",
    "summarize_monthly_pnl",
    "time_diffs",
]
