"""Core data structures and utilities."""

from mcorr.core.sequences import Alignment, Sequence
from mcorr.core.codons import GeneticCode, extract_codons

__all__ = ["Sequence", "Alignment", "GeneticCode", "extract_codons"]
