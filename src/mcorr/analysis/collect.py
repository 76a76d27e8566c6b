"""Aggregation of per-block correlation profiles into per-pair estimates.

Each genome pair contributes one correlation profile per alignment block.
Profiles are pooled across blocks, and uncertainty is estimated by
bootstrapping over blocks. Since blocks arrive as a stream, the bootstrap is
done online: every block enters each replicate with a Poisson(1) weight,
which approximates resampling blocks with replacement.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np

from mcorr.analysis.p2 import P2_TYPE, CorrResults
from mcorr.core.codons import CODON_LENGTH

KS_TYPE = "Ks"
ALL_LABEL = "all"


@dataclass
class CollectedResult:
    """Pooled correlation at one lag for one bootstrap replicate."""

    lag: int
    mean: float
    variance: float
    n: int
    type: str
    bootstrap: str

    def to_dict(self) -> dict:
        """Convert results to a dictionary."""
        return {
            "lag": self.lag,
            "mean": self.mean,
            "variance": self.variance,
            "n": self.n,
            "type": self.type,
            "bootstrap": self.bootstrap,
        }


def bootstrap_label(replicate: int) -> str:
    """Label of a replicate row: ``all`` for the full data, else ``boot_<i>``."""
    return ALL_LABEL if replicate == 0 else f"boot_{replicate - 1}"


class Collector:
    """Accumulates the correlation profiles of one genome pair.

    Row 0 of every accumulator holds the full data; rows 1..num_boot hold the
    bootstrap replicates. Columns are lag indices.
    """

    def __init__(self, num_boot: int = 0, rng: np.random.Generator | None = None) -> None:
        if num_boot < 0:
            raise ValueError(f"num_boot must be non-negative, got {num_boot}")
        self.num_boot = num_boot
        self.rng = rng if rng is not None else np.random.default_rng()
        shape = (num_boot + 1, 0)
        self._weight = np.zeros(shape)
        self._mean_sum = np.zeros(shape)
        self._mean_sq_sum = np.zeros(shape)
        self._diff_sum = np.zeros(shape)
        self._site_sum = np.zeros(shape)

    @property
    def num_lags(self) -> int:
        return self._weight.shape[1]

    def _grow(self, num_lags: int) -> None:
        extra = num_lags - self.num_lags
        if extra <= 0:
            return
        pad = ((0, 0), (0, extra))
        self._weight = np.pad(self._weight, pad)
        self._mean_sum = np.pad(self._mean_sum, pad)
        self._mean_sq_sum = np.pad(self._mean_sq_sum, pad)
        self._diff_sum = np.pad(self._diff_sum, pad)
        self._site_sum = np.pad(self._site_sum, pad)

    def _weights(self) -> np.ndarray:
        weights = np.empty(self.num_boot + 1)
        weights[0] = 1.0
        weights[1:] = self.rng.poisson(1.0, size=self.num_boot)
        return weights

    def add(self, corr: CorrResults) -> None:
        """Add the profile of one alignment block.

        Lags without observations (``n == 0`` or NaN mean) do not contribute.
        """
        self._grow(len(corr.results))
        means = np.zeros(self.num_lags)
        sites = np.zeros(self.num_lags)
        for i, record in enumerate(corr.results):
            if record.n > 0 and not np.isnan(record.mean):
                means[i] = record.mean
                sites[i] = record.n
        valid = sites > 0

        w = self._weights()[:, None] * valid[None, :]
        self._weight += w
        self._mean_sum += w * means
        self._mean_sq_sum += w * means * means
        self._diff_sum += w * means * sites
        self._site_sum += w * sites

    def results(self) -> list[CollectedResult]:
        """Pooled estimates for every replicate and observed lag.

        The mean is pooled over sites (total co-varying sites over total
        examined sites); the variance is that of the per-block means; ``n`` is
        the number of contributing blocks. Lag 0 is also reported as ``Ks``,
        the sample diversity.
        """
        rows: list[CollectedResult] = []
        for b in range(self.num_boot + 1):
            label = bootstrap_label(b)
            for i in np.flatnonzero(self._weight[b] > 0):
                w = self._weight[b, i]
                mean = self._diff_sum[b, i] / self._site_sum[b, i]
                block_mean = self._mean_sum[b, i] / w
                variance = max(self._mean_sq_sum[b, i] / w - block_mean**2, 0.0)
                lag = int(i) * CODON_LENGTH
                types = [KS_TYPE, P2_TYPE] if i == 0 else [P2_TYPE]
                for t in types:
                    rows.append(
                        CollectedResult(
                            lag=lag,
                            mean=float(mean),
                            variance=float(variance),
                            n=int(round(w)),
                            type=t,
                            bootstrap=label,
                        )
                    )
        return rows


def collect(
    results: Iterable[CorrResults],
    num_boot: int = 0,
    rng: np.random.Generator | None = None,
) -> dict[str, Collector]:
    """Drain a stream of correlation profiles, grouping them by pair id.

    Args:
        results: Stream of CorrResults (for example from the pipeline)
        num_boot: Number of bootstrap replicates per pair
        rng: Random generator for the bootstrap weights

    Returns:
        Dictionary mapping pair id to its Collector
    """
    if rng is None:
        rng = np.random.default_rng()
    collectors: dict[str, Collector] = {}
    for corr in results:
        collector = collectors.get(corr.id)
        if collector is None:
            collector = Collector(num_boot=num_boot, rng=rng)
            collectors[corr.id] = collector
        collector.add(corr)
    return collectors
