"""Token mint helpers for raw Solana trade payloads.

Providers put the traded token's mint in many places (``from.address`` /
``to.address``, ``mint``, ``token.mint``, ``base.mint`` ...), and one side
of most swaps is SOL.  These helpers pick the non-SOL token out of a raw
record and derive the distinct mints a wallet touched.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from typing import Any

logger = logging.getLogger(__name__)

WSOL_MINT = "So11111111111111111111111111111111111111112"

# Known SOL mints to exclude when deriving token mints (WSOL and common aliases)
SOL_MINTS = frozenset({WSOL_MINT, "sol", "SOL", "wSOL", "WSOL"})

# Stablecoins; SOL -> stable swaps are profit-taking, not a token position
STABLE_MINTS = frozenset({
    "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",  # USDC
    "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB",  # USDT
    "USD1ttGY1N17NEEHLmELoaybftRBUSErhqYiQzvEmuB",   # USD1
})

_BASE58_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]+$")

# Anything shorter is a symbol or a placeholder, not an address
_MIN_ADDRESS_LEN = 21


def get_path(obj: Any, path: str) -> Any:
    """Dot-path getter over nested dicts; None when any hop is missing."""
    for key in path.split("."):
        if not isinstance(obj, dict) or key not in obj:
            return None
        obj = obj[key]
    return obj


def is_base58_mint(value: Any) -> bool:
    """True if *value* looks like a base58 Solana mint address."""
    if not isinstance(value, str):
        return False
    s = value.strip()
    if len(s) < 32 or len(s) > 44:
        return False
    return bool(_BASE58_RE.match(s))


def is_sol_mint(addr: str | None) -> bool:
    return isinstance(addr, str) and addr in SOL_MINTS


def is_stable_mint(addr: str | None) -> bool:
    return isinstance(addr, str) and addr in STABLE_MINTS


def pick_non_sol_mint(a: str | None, b: str | None) -> str | None:
    """Prefer whichever candidate is not SOL."""
    if a and not is_sol_mint(a):
        return a
    if b and not is_sol_mint(b):
        return b
    return a or b or None


def is_sol_to_stable_swap(raw: dict[str, Any]) -> bool:
    """SOL -> stablecoin swaps are treated as profit-taking and skipped."""
    return is_sol_mint(get_path(raw, "from.address")) and is_stable_mint(
        get_path(raw, "to.address")
    )


def _address(value: Any) -> str | None:
    if isinstance(value, str) and len(value) >= _MIN_ADDRESS_LEN:
        return value
    return None


def extract_mint(raw: dict[str, Any]) -> str | None:
    """Extract the traded token mint from a raw trade record.

    Checks, in order: ``from``/``to`` addresses (non-SOL side wins), the
    common flat fields, nested ``token``/``base``/``quote``/``pool`` shapes,
    and finally a non-SOL pick between base and quote mints.
    """
    if not isinstance(raw, dict):
        return None

    from_addr = get_path(raw, "from.address")
    to_addr = get_path(raw, "to.address")
    if from_addr or to_addr:
        chosen = _address(pick_non_sol_mint(from_addr, to_addr))
        if chosen:
            return chosen

    for key in (
        "mint",
        "mintAddress",
        "tokenMint",
        "token_mint_address",
        "tokenAddress",
        "baseTokenAddress",
        "address",
    ):
        chosen = _address(raw.get(key))
        if chosen:
            return chosen

    for path in ("token.mint", "token.address", "base.mint", "quote.mint", "pool.mint"):
        chosen = _address(get_path(raw, path))
        if chosen:
            return chosen

    base_mint = get_path(raw, "base.mint") or raw.get("baseMint")
    quote_mint = (
        get_path(raw, "quote.mint") or raw.get("quoteTokenAddress") or raw.get("quoteMint")
    )
    return _address(pick_non_sol_mint(base_mint, quote_mint))


def recent_distinct_mints(raw_trades: list[dict[str, Any]], limit: int) -> list[str]:
    """First *limit* distinct token mints in the order trades are supplied.

    Providers return wallet trades newest first, so this is "the last N
    mints traded".  SOL -> stable swaps, non-base58 values and stablecoins
    are skipped.
    """
    mints: list[str] = []
    seen: set[str] = set()
    if limit <= 0:
        return mints

    for raw in raw_trades or []:
        if not isinstance(raw, dict) or is_sol_to_stable_swap(raw):
            continue
        mint = extract_mint(raw)
        if not mint:
            continue
        if not is_base58_mint(mint):
            logger.debug("Skipping non-base58 mint %r", mint)
            continue
        if mint in seen:
            continue
        seen.add(mint)
        if is_stable_mint(mint):
            continue
        mints.append(mint)
        if len(mints) >= limit:
            break
    return mints


def group_raw_trades_by_mint(
    raw_trades: list[dict[str, Any]],
) -> dict[str, list[dict[str, Any]]]:
    """Bucket raw trade records by extracted mint, preserving order."""
    grouped: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for raw in raw_trades or []:
        if not isinstance(raw, dict) or is_sol_to_stable_swap(raw):
            continue
        mint = extract_mint(raw)
        if mint and not is_stable_mint(mint):
            grouped[mint].append(raw)
    return dict(grouped)
