"""Configuration management.

Loads from an optional TOML file + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings

from .enums import OversellPolicy
from .errors import ConfigError


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class EntryStyleConfig(BaseModel):
    twap_min_buys: int = 3
    twap_max_cv: float = 0.10  # stddev / mean of buy gaps
    cluster_gap_mins: float = 15.0


class RealizedConfig(BaseModel):
    oversell_policy: OversellPolicy = OversellPolicy.WARN


class TechniqueConfig(BaseModel):
    feature_mint_count: int = 8  # Most recent mints kept in the technique view


class OutcomesConfig(BaseModel):
    round_trip_max_residual: float = 0.02  # Flat when <=2% of bought qty remains
    loss_threshold_pct: float = -10.0
    spike_threshold_pct: float = 200.0


class CurveConfig(BaseModel):
    volatility_window_days: int = 30
    annualization_days: int = 365
    baseline_value: float = 100.0  # Synthetic equity when only pnl% is known
    round_decimals: int = 2


class ChartConfig(BaseModel):
    trend_window: int = 5
    trend_threshold_pct: float = 5.0
    major_run_pct: float = 40.0
    major_nuke_pct: float = -40.0
    catastrophic_nuke_pct: float = -70.0
    max_regime_events: int = 5


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class AnalyticsSettings(BaseSettings):
    """Top-level analytics settings.

    Loaded from a TOML config file, overridden by environment variables
    (``TRADE_BEHAVIOR_TECHNIQUE__FEATURE_MINT_COUNT=12``).
    """

    entry_style: EntryStyleConfig = Field(default_factory=EntryStyleConfig)
    realized: RealizedConfig = Field(default_factory=RealizedConfig)
    technique: TechniqueConfig = Field(default_factory=TechniqueConfig)
    outcomes: OutcomesConfig = Field(default_factory=OutcomesConfig)
    curve: CurveConfig = Field(default_factory=CurveConfig)
    chart: ChartConfig = Field(default_factory=ChartConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "TRADE_BEHAVIOR_", "env_nested_delimiter": "__"}


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> AnalyticsSettings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.

    Raises:
        ConfigError: The file is not valid TOML or a value fails validation.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            try:
                with open(path, "rb") as f:
                    data = tomli.load(f)
            except tomli.TOMLDecodeError as exc:
                raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    if overrides:
        data.update(overrides)

    try:
        return AnalyticsSettings(**data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
