"""Tests for technique feature rows and the per-leg overall block."""

import pytest

from trade_behavior.analytics.technique import (
    UNKNOWN_VENUE,
    build_mint_row,
    build_technique_features,
    venue_mix,
)
from trade_behavior.core.config import TechniqueConfig
from trade_behavior.core.enums import EntrySignal

from .conftest import buy, sell


@pytest.fixture
def mint_map():
    return {
        # One leg at +100%, closed at minute 10
        "MintA": [
            buy(1, 1.0, minute=0, mint="MintA", program="raydium", symbol="AAA"),
            sell(1, 2.0, minute=10, mint="MintA"),
        ],
        # Two legs at -50%, closed at minute 30
        "MintB": [
            buy(2, 2.0, minute=0, mint="MintB", program="jupiter"),
            sell(1, 1.0, minute=20, mint="MintB", symbol="BBB"),
            sell(1, 1.0, minute=30, mint="MintB"),
        ],
    }


class TestMintRow:
    def test_counts_and_realized(self, mint_map):
        row = build_mint_row("MintB", mint_map["MintB"])
        assert row.n_buys == 1
        assert row.n_sells == 2
        assert row.realized.per_leg == pytest.approx([-50.0, -50.0])
        assert row.entry_style_signal == EntrySignal.SINGLE

    def test_timestamps(self, mint_map):
        row = build_mint_row("MintB", mint_map["MintB"])
        assert row.start_ts == 0
        assert row.end_ts == 30 * 60_000

    def test_end_ts_uses_last_trade_when_buy_is_latest(self):
        trades = [sell(1, 2.0, minute=5), buy(1, 1.0, minute=0), buy(1, 1.0, minute=50)]
        row = build_mint_row("MintA", trades)
        assert row.end_ts == 50 * 60_000

    def test_symbol_from_first_buy_then_first_sell(self, mint_map):
        assert build_mint_row("MintA", mint_map["MintA"]).symbol == "AAA"
        assert build_mint_row("MintB", mint_map["MintB"]).symbol == "BBB"

    def test_sells_only_mint(self):
        row = build_mint_row("MintC", [sell(1, 1.0, minute=7)])
        assert row.n_buys == 0
        assert row.start_ts == 7 * 60_000
        assert row.venue_mix == {}
        assert row.realized.unmatched_sell_qty == 1.0

    def test_empty_trades(self):
        assert build_mint_row("MintA", []) is None

    def test_entry_spacing(self):
        trades = [buy(minute=0), buy(minute=10), buy(minute=30)]
        row = build_mint_row("MintA", trades)
        assert row.entry_spacing_mins_avg == pytest.approx(15.0)
        assert row.entry_spacing_mins_std == pytest.approx(5.0)

    def test_single_buy_has_no_spacing(self):
        row = build_mint_row("MintA", [buy()])
        assert row.entry_spacing_mins_avg is None
        assert row.entry_spacing_mins_std is None


class TestVenueMix:
    def test_shares(self):
        buys = [buy(program="raydium"), buy(program="raydium"), buy(program="orca"), buy()]
        mix = venue_mix(buys)
        assert mix == {"raydium": 0.5, "orca": 0.25, UNKNOWN_VENUE: 0.25}

    def test_empty(self):
        assert venue_mix([]) == {}


class TestTechniqueFeatures:
    def test_empty_map(self):
        features = build_technique_features({})
        assert features.coins == []
        assert features.overall.n_coins == 0
        assert features.overall.mean_buys_per_coin == 0.0
        assert features.overall.win_rate is None
        assert features.overall.avg_realized_gain_pct is None
        assert features.overall.venue_share == {}

    @pytest.mark.parametrize("top_n", [0, -3])
    def test_non_positive_top_n_selects_nothing(self, mint_map, top_n):
        features = build_technique_features(mint_map, top_n)
        assert features.coins == []
        assert features.overall.n_coins == 0

    def test_most_recent_first(self, mint_map):
        features = build_technique_features(mint_map)
        assert [row.mint for row in features.coins] == ["MintB", "MintA"]

    def test_top_n_keeps_most_recent(self, mint_map):
        features = build_technique_features(mint_map, top_n=1)
        assert [row.mint for row in features.coins] == ["MintB"]

    def test_default_top_n_from_config(self, mint_map):
        features = build_technique_features(
            mint_map, config=TechniqueConfig(feature_mint_count=1)
        )
        assert features.overall.n_coins == 1

    def test_win_rate_is_per_leg(self, mint_map):
        overall = build_technique_features(mint_map).overall
        # Legs: +100, -50, -50
        assert overall.win_rate == pytest.approx(1 / 3)
        assert overall.avg_realized_gain_pct == pytest.approx(0.0)

    def test_median_hold_over_mint_medians(self, mint_map):
        overall = build_technique_features(mint_map).overall
        # MintA flat after 10 minutes, MintB after 30
        assert overall.median_hold_mins == pytest.approx(20.0)

    def test_venue_share_renormalized(self, mint_map):
        overall = build_technique_features(mint_map).overall
        assert overall.venue_share == {"raydium": 0.5, "jupiter": 0.5}
        assert sum(overall.venue_share.values()) == pytest.approx(1.0)

    def test_to_dict_shape(self, mint_map):
        payload = build_technique_features(mint_map).to_dict()
        assert set(payload) == {"coins", "overall"}
        coin = payload["coins"][0]
        assert coin["mint"] == "MintB"
        assert coin["entryStyleSignal"] == "single"
        assert coin["realized"]["nClosed"] == 2
        assert payload["overall"]["nCoins"] == 2

    def test_idempotent(self, mint_map):
        first = build_technique_features(mint_map).to_dict()
        assert build_technique_features(mint_map).to_dict() == first
