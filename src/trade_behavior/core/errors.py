"""Custom exception hierarchy for the analytics engine."""


class AnalyticsError(Exception):
    """Base exception for all analytics errors."""


# --- Configuration ---
class ConfigError(AnalyticsError):
    """Invalid or unreadable configuration."""


# --- Data ---
class DataError(AnalyticsError):
    """Input data cannot be analysed under the active policy."""


class OversellError(DataError):
    """A sell exceeded the open lot quantity under the reject policy."""

    def __init__(self, mint: str, excess_qty: float):
        self.mint = mint
        self.excess_qty = excess_qty
        super().__init__(
            f"Sell exceeds open lots for {mint or '<unknown>'}: "
            f"{excess_qty:g} unmatched"
        )
