"""Static data for genetic codes and codon tables."""

from mcorr.data.genetic_codes import CODON_TABLE, GENETIC_CODES, STANDARD_CODE

__all__ = ["STANDARD_CODE", "CODON_TABLE", "GENETIC_CODES"]
