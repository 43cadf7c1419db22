"""Basic statistics shared by every analytics component.

All helpers return ``None`` on empty input; callers treat that as
"no signal" rather than an error.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np


def mean(xs: Sequence[float]) -> float | None:
    if not xs:
        return None
    return float(np.mean(xs))


def median(xs: Sequence[float]) -> float | None:
    """Middle value; the two middle values averaged for even lengths."""
    if not xs:
        return None
    return float(np.median(xs))


def stddev(xs: Sequence[float]) -> float | None:
    """Population standard deviation (divides by n)."""
    if not xs:
        return None
    return float(np.std(xs, ddof=0))


def round_half_up(x: float, decimals: int = 0) -> float:
    """Round half toward +inf at a fixed number of decimals.

    Python's ``round`` is round-half-even; reported figures and rank
    indices here round halves up.
    """
    if not math.isfinite(x):
        return x
    factor = 10 ** decimals
    return math.floor(x * factor + 0.5) / factor


def percentile(xs: Sequence[float], p: float) -> float | None:
    """Nearest-rank percentile (no interpolation).

    The rank index is ``round_half_up(p / 100 * (n - 1))`` clamped to the
    array bounds, so the result is always an element of *xs* and is
    monotone in *p*.
    """
    if not xs:
        return None
    ordered = sorted(xs)
    idx = int(round_half_up((p / 100.0) * (len(ordered) - 1)))
    idx = min(len(ordered) - 1, max(0, idx))
    return ordered[idx]


def time_diffs(ts: Sequence[int | float]) -> list[float]:
    """Consecutive gaps in minutes between epoch-ms timestamps."""
    return [(ts[i] - ts[i - 1]) / 60_000 for i in range(1, len(ts))]
