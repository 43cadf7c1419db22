"""One-call wallet report.

Normalizes the raw inputs once at the ingestion boundary, then runs
every analytics component over the typed records and merges the results
into the payload the report builder consumes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .analytics.equity_curve import WalletSidecar, summarize_for_sidecar
from .analytics.outcomes import OutcomesSummary, compute_outcomes
from .analytics.pnl_chart import (
    RegimeEvent,
    WalletChartStats,
    build_regime_events,
    build_wallet_stats_from_chart,
)
from .analytics.technique import TechniqueFeatures, build_technique_features
from .core.config import AnalyticsSettings
from .core.enums import OversellPolicy
from .ingest.normalizer import normalize_equity_points, normalize_mint_map
from .observability.logger import analysis_context, get_logger

log = get_logger(__name__)


@dataclass
class WalletReport:
    technique_features: TechniqueFeatures
    outcomes: OutcomesSummary
    sidecar: WalletSidecar
    chart_stats: WalletChartStats | None = None
    regime_events: list[RegimeEvent] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "techniqueFeatures": self.technique_features.to_dict(),
            "outcomes": self.outcomes.to_dict(),
            **self.sidecar.to_dict(),
            "walletStats": self.chart_stats.to_dict() if self.chart_stats else None,
            "regimeEvents": [e.to_dict() for e in self.regime_events],
        }


def analyze_wallet(
    raw_mint_map: dict[str, list[Any]],
    raw_chart: list[Any] | None = None,
    settings: AnalyticsSettings | None = None,
    *,
    top_n: int | None = None,
) -> WalletReport:
    """Build the full analytics report for one wallet.

    Parameters
    ----------
    raw_mint_map : dict
        ``{mint: [raw trade, ...]}`` as harvested from the data provider.
        Already-normalized :class:`Trade` objects are accepted too.
    raw_chart : list | None
        Raw equity / P&L samples, if the provider returned any.
    settings : AnalyticsSettings | None
        Thresholds and policies.  Defaults apply when omitted.
    top_n : int | None
        Override for ``settings.technique.feature_mint_count``.
    """
    cfg = settings or AnalyticsSettings()
    mint_map = normalize_mint_map(raw_mint_map)
    points = normalize_equity_points(raw_chart)

    # Both views match every mint; the technique pass already applied the
    # over-sell policy, so the outcomes pass only needs the figures
    outcomes_realized = cfg.realized.model_copy(
        update={"oversell_policy": OversellPolicy.DROP}
    )

    with analysis_context():
        technique = build_technique_features(
            mint_map,
            top_n,
            config=cfg.technique,
            entry_config=cfg.entry_style,
            realized_config=cfg.realized,
        )
        outcomes = compute_outcomes(
            mint_map,
            points,
            config=cfg.outcomes,
            realized_config=outcomes_realized,
        )
        report = WalletReport(
            technique_features=technique,
            outcomes=outcomes,
            sidecar=summarize_for_sidecar(points, cfg.curve),
            chart_stats=build_wallet_stats_from_chart(points, cfg.chart),
            regime_events=build_regime_events(points, cfg.chart),
        )

        log.info(
            "wallet_analysis_complete",
            mints=len(mint_map),
            trades=sum(len(trades) for trades in mint_map.values()),
            chart_points=len(points),
            technique_coins=technique.overall.n_coins,
            leg_win_rate=technique.overall.win_rate,
            mint_win_rate=outcomes.win_rate,
            max_drawdown_pct=report.sidecar.wallet_curve.max_drawdown_pct,
        )
    return report
