"""Sequence and alignment block data structures."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


def get_names(identifier: str) -> tuple[str, str]:
    """Split a sequence header into its gene name and genome name.

    Headers look like ``"<gene> <genome> ..."``; only the first two
    whitespace-delimited tokens are significant.

    Raises:
        ValueError: If the header has fewer than two tokens.
    """
    terms = identifier.split()
    if len(terms) < 2:
        raise ValueError(
            f"Sequence identifier '{identifier}' has no genome name "
            "(expected '<gene> <genome> ...')"
        )
    return terms[0], terms[1]


@dataclass(frozen=True)
class Sequence:
    """A named nucleotide sequence."""

    id: str
    seq: str

    def __len__(self) -> int:
        return len(self.seq)

    @property
    def gene_id(self) -> str:
        """First token of the identifier (the gene or region name)."""
        terms = self.id.split()
        return terms[0] if terms else ""

    @property
    def genome_name(self) -> str:
        """Second token of the identifier (the genome the sequence comes from)."""
        return get_names(self.id)[1]


@dataclass(frozen=True)
class Alignment:
    """Equal-length sequences of one coding region across several genomes."""

    id: str
    sequences: tuple[Sequence, ...]

    @classmethod
    def from_sequences(cls, sequences: Iterable[Sequence]) -> Alignment:
        """Build a block, naming it after the first sequence's gene id."""
        seqs = tuple(sequences)
        if not seqs:
            raise ValueError("Cannot build an alignment from zero sequences")
        return cls(id=seqs[0].gene_id, sequences=seqs)

    def __len__(self) -> int:
        return len(self.sequences)

    @property
    def alignment_length(self) -> int:
        return len(self.sequences[0]) if self.sequences else 0

    @property
    def genomes(self) -> list[str]:
        return [s.genome_name for s in self.sequences]
