"""Input/output utilities."""

from mcorr.io.fasta import load_mate_sequences, read_fasta
from mcorr.io.xmfa import count_alignments, read_xmfa
from mcorr.io.output import write_csv

__all__ = [
    "read_fasta",
    "load_mate_sequences",
    "read_xmfa",
    "count_alignments",
    "write_csv",
]
