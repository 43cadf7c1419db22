"""Entry style detection from buy spacing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from ..core.config import EntryStyleConfig
from ..core.enums import EntrySignal
from ..core.models import Trade
from .stats import mean, stddev, time_diffs


@dataclass(frozen=True)
class EntryStyle:
    signal: EntrySignal
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {"signal": self.signal.value, "confidence": self.confidence}


def detect_entry_style(
    buys: Sequence[Trade],
    config: EntryStyleConfig | None = None,
) -> EntryStyle:
    """Classify how a position was accumulated.

    * one buy (or none): ``single``
    * at least ``twap_min_buys`` evenly spaced buys (gap coefficient of
      variation within ``twap_max_cv``): ``twap``
    * any two buys within ``cluster_gap_mins``: ``scale_in``
    * otherwise: ``dca``
    """
    cfg = config or EntryStyleConfig()
    if not buys or len(buys) <= 1:
        return EntryStyle(EntrySignal.SINGLE, 0.9)

    times = sorted(b.time for b in buys)
    diffs = time_diffs(times)
    avg = mean(diffs) or 0.0
    sd = stddev(diffs) or 0.0

    if len(buys) >= cfg.twap_min_buys and avg > 0 and sd / avg <= cfg.twap_max_cv:
        return EntryStyle(EntrySignal.TWAP, 0.75)
    if any(d <= cfg.cluster_gap_mins for d in diffs):
        return EntryStyle(EntrySignal.SCALE_IN, 0.70)
    return EntryStyle(EntrySignal.DCA, 0.50)
