"""Extended multi-FASTA (XMFA) alignment reading.

An XMFA file is a series of FASTA-formatted alignment blocks, each terminated
by a line starting with ``=``. Lines starting with ``#`` are comments.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from mcorr.core.sequences import Alignment
from mcorr.io.fasta import parse_fasta_lines

BLOCK_TERMINATOR = "="
COMMENT = "#"


def read_xmfa(path: Path | str) -> Iterator[Alignment]:
    """Yield alignment blocks from an XMFA file one at a time.

    Blocks without sequences are skipped. A final block that is missing its
    terminator line is still returned.

    Raises:
        OSError: If the file cannot be opened (raised on first iteration)
    """
    with open(path) as f:
        block: list[str] = []
        for line in f:
            if line.startswith(COMMENT):
                continue
            if line.startswith(BLOCK_TERMINATOR):
                sequences = list(parse_fasta_lines(block))
                if sequences:
                    yield Alignment.from_sequences(sequences)
                block = []
            else:
                block.append(line)
        sequences = list(parse_fasta_lines(block))
        if sequences:
            yield Alignment.from_sequences(sequences)


def count_alignments(path: Path | str) -> int:
    """Count the terminated alignment blocks in an XMFA file."""
    count = 0
    with open(path) as f:
        for line in f:
            if line.startswith(BLOCK_TERMINATOR):
                count += 1
    return count
