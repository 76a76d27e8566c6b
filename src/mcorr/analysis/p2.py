"""Mutational correlation (P2) between pairs of aligned coding sequences.

For two aligned genomes and a lag of ``l`` codons, P2 is the probability that
a nucleotide site and the site ``3*l`` base pairs downstream both differ
between the genomes, counting only reference codons that encode the same
amino acid in both genomes. Its decay with distance reflects how far linkage
between substitutions extends along the genome.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from mcorr.core.codons import CODON_LENGTH, GeneticCode, extract_codons
from mcorr.core.sequences import Alignment, Sequence, get_names

PAIR_SEPARATOR = "_vs_"
P2_TYPE = "P2"


@dataclass
class CorrResult:
    """Correlation at a single lag."""

    lag: int
    """Distance in base pairs (0, 3, 6, ...)."""

    mean: float
    """Fraction of examined sites that co-vary; NaN when nothing was examined."""

    n: int
    """Number of examined sites."""

    type: str = P2_TYPE

    def to_dict(self) -> dict:
        """Convert the record to a dictionary."""
        return {"lag": self.lag, "mean": self.mean, "n": self.n, "type": self.type}


@dataclass
class CorrResults:
    """Correlation profile of one genome pair within one alignment block."""

    id: str
    """Pair identifier, see :func:`pair_id`."""

    results: list[CorrResult] = field(default_factory=list)
    """Records in ascending lag order."""


def pair_id(id1: str, id2: str) -> str:
    """Build a symmetric pair identifier from two sequence headers.

    The genome names (second header token) are sorted so that the same two
    genomes always give the same identifier.
    """
    _, genome1 = get_names(id1)
    _, genome2 = get_names(id2)
    if genome1 > genome2:
        genome1, genome2 = genome2, genome1
    return genome1 + PAIR_SEPARATOR + genome2


def _codon_positions(codon_position: int | None) -> list[int]:
    if codon_position is None or codon_position < 0 or codon_position >= CODON_LENGTH:
        return list(range(CODON_LENGTH))
    return [codon_position]


@dataclass
class _CodonSequence:
    codons: list[str]
    bases: np.ndarray  # shape (len(codons), 3), uint8

    @classmethod
    def from_sequence(cls, sequence: Sequence, offset: int) -> _CodonSequence:
        codons = extract_codons(sequence, offset)
        # Characters outside latin-1 become "?" and never match a table codon.
        raw = "".join(codons).encode("latin-1", errors="replace")
        bases = np.frombuffer(raw, dtype=np.uint8).reshape(len(codons), CODON_LENGTH)
        return cls(codons=codons, bases=bases)

    def __len__(self) -> int:
        return len(self.codons)


def _same_amino_acid(
    seq1: _CodonSequence, seq2: _CodonSequence, n: int, genetic_code: GeneticCode
) -> np.ndarray:
    return np.array(
        [
            genetic_code.is_synonymous(c1, c2)
            for c1, c2 in zip(seq1.codons[:n], seq2.codons[:n])
        ],
        dtype=bool,
    )


def _pair_profile(
    seq1: _CodonSequence,
    seq2: _CodonSequence,
    max_codon_lag: int,
    genetic_code: GeneticCode,
    synonymous: bool,
    positions: list[int],
) -> list[CorrResult]:
    n = min(len(seq1), len(seq2))

    # Reference codons k must encode the same amino acid in both sequences.
    comparable = _same_amino_acid(seq1, seq2, n, genetic_code)
    if synonymous:
        # Re-tests the reference codons, not the lagged ones.
        comparable &= _same_amino_acid(seq1, seq2, n, genetic_code)

    # diff[k, p]: the two sequences differ at position p of codon k
    diff = (seq1.bases[:n] != seq2.bases[:n])[:, positions]

    records = []
    for l in range(max_codon_lag):
        d = 0
        t = 0
        if l < n:
            mask = comparable[: n - l]
            t = int(np.count_nonzero(mask)) * len(positions)
            both = diff[: n - l] & diff[l:n]
            d = int(np.count_nonzero(both[mask]))
        mean = d / t if t > 0 else float("nan")
        records.append(CorrResult(lag=l * CODON_LENGTH, mean=mean, n=t, type=P2_TYPE))
    return records


def calc_p2_coding(
    alignment: Alignment,
    codon_offset: int,
    max_codon_lag: int,
    genetic_code: GeneticCode,
    synonymous: bool = False,
    codon_position: int | None = None,
    mate_sequence: Sequence | None = None,
) -> list[CorrResults]:
    """Compute P2 correlation profiles for the sequence pairs of one block.

    Without a mate sequence every unordered pair of the block's sequences is
    compared. With a mate sequence only the mate is compared against each
    sequence of the block.

    Args:
        alignment: Block of equal-length aligned coding sequences
        codon_offset: Reading-frame offset of the first codon (0, 1 or 2)
        max_codon_lag: Number of lags to compute, in codons
        genetic_code: Translation table used for the amino-acid gate
        synonymous: Apply the synonymous-only filter
        codon_position: Codon position to examine (0, 1 or 2); any other
            value, or None, examines all three positions
        mate_sequence: Sequence from a second alignment to compare against

    Returns:
        One CorrResults per compared pair, each with ``max_codon_lag`` records
    """
    sequences: list[Sequence] = []
    if mate_sequence is not None:
        sequences.append(mate_sequence)
    sequences.extend(alignment.sequences)

    codon_sequences = [
        _CodonSequence.from_sequence(s, codon_offset) for s in sequences
    ]
    positions = _codon_positions(codon_position)

    results: list[CorrResults] = []
    for i, seq1 in enumerate(codon_sequences):
        for j in range(i + 1, len(codon_sequences)):
            corr = CorrResults(id=pair_id(sequences[i].id, sequences[j].id))
            corr.results = _pair_profile(
                seq1,
                codon_sequences[j],
                max_codon_lag,
                genetic_code,
                synonymous,
                positions,
            )
            results.append(corr)
        if mate_sequence is not None:
            break

    return results
