"""Enumerations used across the analytics engine."""

from enum import Enum


class TradeSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


class EntrySignal(str, Enum):
    """Heuristic label for how a position was accumulated."""

    SINGLE = "single"      # One buy
    TWAP = "twap"          # Evenly paced adds
    SCALE_IN = "scale_in"  # Tightly clustered adds
    DCA = "dca"            # Irregular, spaced-out adds


class OversellPolicy(str, Enum):
    """What to do when a sell exceeds the open lot quantity."""

    DROP = "drop"      # Discard the excess silently
    WARN = "warn"      # Log a warning, then discard
    REJECT = "reject"  # Raise OversellError


class TrendLabel(str, Enum):
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


class RegimeLabel(str, Enum):
    MAJOR_RUN = "major_run"
    MAJOR_NUKE = "major_nuke"
    CATASTROPHIC_NUKE = "catastrophic_nuke"
