"""Shared fixtures for the trade-behavior test suite."""

from __future__ import annotations

import pytest

from trade_behavior.core.config import AnalyticsSettings
from trade_behavior.core.enums import OversellPolicy

# 2024-01-01T00:00:00Z in epoch ms
T0 = 1_704_067_200_000
MINUTE = 60_000
DAY = 86_400_000


@pytest.fixture
def base_ms() -> int:
    return T0


@pytest.fixture
def settings() -> AnalyticsSettings:
    """Default settings with silent over-sell handling."""
    return AnalyticsSettings(realized={"oversell_policy": OversellPolicy.DROP})
