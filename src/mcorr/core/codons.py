"""Codon extraction and translation."""

from __future__ import annotations

from dataclasses import dataclass, field

from mcorr.core.sequences import Sequence
from mcorr.data.genetic_codes import DEFAULT_TABLE_ID, GENETIC_CODES

CODON_LENGTH = 3


def extract_codons(sequence: Sequence | str, offset: int = 0) -> list[str]:
    """Split a nucleotide sequence into consecutive codons.

    Codons start at ``offset`` and advance by three; a trailing partial
    codon is dropped, so every returned codon has length 3.

    Args:
        sequence: A Sequence or a raw nucleotide string
        offset: Index of the first nucleotide of the first codon

    Returns:
        List of 3-character codon strings (empty if the sequence is too short)
    """
    seq = sequence.seq if isinstance(sequence, Sequence) else sequence
    return [
        seq[i : i + CODON_LENGTH]
        for i in range(offset, len(seq) - CODON_LENGTH + 1, CODON_LENGTH)
    ]


@dataclass
class GeneticCode:
    """Codon to amino-acid lookup for one NCBI translation table."""

    table_id: str = DEFAULT_TABLE_ID
    table: dict[str, str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.table_id = str(self.table_id)
        if self.table_id not in GENETIC_CODES:
            available = ", ".join(sorted(GENETIC_CODES, key=int))
            raise ValueError(
                f"Unknown genetic code '{self.table_id}'. Available: {available}"
            )
        self.table = GENETIC_CODES[self.table_id]

    def translate(self, codon: str) -> str | None:
        """Return the amino acid for a codon, or None if it is not in the table.

        Stop codons translate to ``"*"``. Codons containing gaps or ambiguity
        codes are not in the table.
        """
        return self.table.get(codon)

    def is_synonymous(self, codon1: str, codon2: str) -> bool:
        """True when both codons translate and encode the same amino acid."""
        aa1 = self.translate(codon1)
        aa2 = self.translate(codon2)
        return aa1 is not None and aa2 is not None and aa1 == aa2


DEFAULT_CODE = GeneticCode()
