"""Worker functions for parallel processing of alignment blocks.

This module contains picklable task settings and pure per-block functions
for use with ProcessPoolExecutor.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mcorr.analysis.p2 import CorrResults, calc_p2_coding
from mcorr.core.codons import DEFAULT_CODE, GeneticCode
from mcorr.core.sequences import Alignment, Sequence


@dataclass
class P2Task:
    """Settings shared by every block of a run.

    Built once before processing starts and read-only afterwards, so it can
    be installed in each worker process without synchronization.
    """

    codon_offset: int = 0
    """Reading-frame offset of the first codon (0, 1 or 2)."""

    max_codon_lag: int = 100
    """Number of lags to compute, in codons."""

    genetic_code: GeneticCode = field(default_factory=lambda: DEFAULT_CODE)
    """Translation table for the amino-acid gate."""

    synonymous: bool = False
    """Apply the synonymous-only filter."""

    codon_position: int | None = None
    """Codon position to examine (0, 1 or 2), or None for all three."""

    mate_sequences: dict[str, Sequence] | None = None
    """Sequences from a second alignment, keyed by gene id."""

    def mate_for(self, alignment: Alignment) -> Sequence | None:
        """Look up the mate sequence of a block by its gene id."""
        if self.mate_sequences is None:
            return None
        return self.mate_sequences.get(alignment.id)


@dataclass
class WorkerResult:
    """Result from a worker function.

    Designed to be picklable for return from worker processes.
    """

    gene_id: str
    """Identifier of the processed alignment block."""

    results: list[CorrResults] = field(default_factory=list)
    """One correlation profile per compared pair."""

    error: str | None = None
    """Error message if processing failed."""


def process_alignment(alignment: Alignment, task: P2Task) -> WorkerResult:
    """Compute correlation profiles for one alignment block.

    Args:
        alignment: The block to process
        task: Run settings

    Returns:
        WorkerResult with the block's profiles or an error message
    """
    try:
        results = calc_p2_coding(
            alignment,
            codon_offset=task.codon_offset,
            max_codon_lag=task.max_codon_lag,
            genetic_code=task.genetic_code,
            synonymous=task.synonymous,
            codon_position=task.codon_position,
            mate_sequence=task.mate_for(alignment),
        )
    except Exception as e:
        return WorkerResult(
            gene_id=alignment.id,
            error=f"Error processing {alignment.id}: {e}",
        )
    return WorkerResult(gene_id=alignment.id, results=results)


# Per-process task installed by the pool initializer.
_worker_task: P2Task | None = None


def init_worker(task: P2Task) -> None:
    """Pool initializer: install the run settings in this worker process."""
    global _worker_task
    _worker_task = task


def process_alignment_in_worker(alignment: Alignment) -> WorkerResult:
    """Process a block using the settings installed by :func:`init_worker`."""
    if _worker_task is None:
        raise RuntimeError("Worker process was not initialized with a P2Task")
    return process_alignment(alignment, _worker_task)
