"""CSV output of collected correlation results."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import IO

from mcorr.analysis.collect import Collector

HEADER_LINES = [
    "# id: the pair of genomes compared",
    "# l: the distance between two genomic positions",
    "# m: the mean value of correlation profile",
    "# v: the variance of correlation profile",
    "# n: the total number of alignments used for calculation",
    "# t: the type of result: Ks is for d_sample, and P2 is for correlation profile",
    "# b: the bootstrap number (all means used all alignments).",
]
COLUMNS = ["id", "l", "m", "v", "n", "t", "b"]


def _format_float(value: float) -> str:
    return f"{value:g}"


def format_csv(collectors: dict[str, Collector], out: IO[str]) -> None:
    """Write collected results as CSV to an open text stream.

    Pairs are written in sorted order; within a pair, rows follow replicate
    order (``all`` first), with lag 0 ``Ks`` before the ``P2`` profile.
    """
    for line in HEADER_LINES:
        out.write(line + "\n")
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(COLUMNS)
    for pair in sorted(collectors):
        for row in collectors[pair].results():
            writer.writerow(
                [
                    pair,
                    row.lag,
                    _format_float(row.mean),
                    _format_float(row.variance),
                    row.n,
                    row.type,
                    row.bootstrap,
                ]
            )


def write_csv(collectors: dict[str, Collector], output_path: Path | str) -> None:
    """Write collected results to a CSV file."""
    with open(output_path, "w", newline="") as f:
        format_csv(collectors, f)
