"""mcorr: mutational correlation between genome pairs in coding alignments."""

__version__ = "0.1.0"

from mcorr.core.sequences import Alignment, Sequence
from mcorr.core.codons import GeneticCode, extract_codons
from mcorr.analysis.p2 import CorrResult, CorrResults, calc_p2_coding, pair_id
from mcorr.pipeline import PipelineError, run_pipeline

__all__ = [
    "Sequence",
    "Alignment",
    "GeneticCode",
    "extract_codons",
    "CorrResult",
    "CorrResults",
    "calc_p2_coding",
    "pair_id",
    "PipelineError",
    "run_pipeline",
]
