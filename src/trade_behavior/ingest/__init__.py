"""Ingestion boundary: raw provider payloads to typed records."""

from .mints import (
    SOL_MINTS,
    STABLE_MINTS,
    extract_mint,
    is_base58_mint,
    is_sol_mint,
    is_sol_to_stable_swap,
    is_stable_mint,
    pick_non_sol_mint,
    recent_distinct_mints,
)
from .normalizer import (
    coerce_number,
    group_trades_by_mint,
    normalize_equity_point,
    normalize_equity_points,
    normalize_mint_map,
    normalize_trade,
    normalize_trades,
    parse_timestamp,
)

__all__ = [
    "SOL_MINTS",
    "STABLE_MINTS",
    "coerce_number",
    "extract_mint",
    "group_trades_by_mint",
    "is_base58_mint",
    "is_sol_mint",
    "is_sol_to_stable_swap",
    "is_stable_mint",
    "normalize_equity_point",
    "normalize_equity_points",
    "normalize_mint_map",
    "normalize_trade",
    "normalize_trades",
    "parse_timestamp",
    "pick_non_sol_mint",
    "recent_distinct_mints",
]
