"""FASTA reading."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from mcorr.core.sequences import Sequence


def parse_fasta_lines(lines: Iterable[str]) -> Iterator[Sequence]:
    """Parse FASTA records from an iterable of lines.

    The full header (text after ``>``) is kept as the sequence identifier.
    """
    header: str | None = None
    chunks: list[str] = []
    for line in lines:
        line = line.strip()
        if not line:
            continue
        if line.startswith(">"):
            if header is not None:
                yield Sequence(id=header, seq="".join(chunks))
            header = line[1:].strip()
            chunks = []
        elif header is not None:
            chunks.append(line)
    if header is not None:
        yield Sequence(id=header, seq="".join(chunks))


def read_fasta(path: Path | str) -> list[Sequence]:
    """Read all sequences from a FASTA file."""
    with open(path) as f:
        return list(parse_fasta_lines(f))


def load_mate_sequences(path: Path | str) -> dict[str, Sequence]:
    """Index the sequences of a second alignment by gene id.

    When several sequences share a gene id the last one wins.
    """
    return {s.gene_id: s for s in read_fasta(path)}
