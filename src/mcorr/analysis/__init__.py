"""Correlation analysis modules."""

from mcorr.analysis.p2 import (
    CorrResult,
    CorrResults,
    calc_p2_coding,
    pair_id,
)
from mcorr.analysis.collect import CollectedResult, Collector, collect

__all__ = [
    "CorrResult",
    "CorrResults",
    "calc_p2_coding",
    "pair_id",
    "CollectedResult",
    "Collector",
    "collect",
]
