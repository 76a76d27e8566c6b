"""NCBI genetic code tables.

Tables are stored in the compact NCBI layout: a 64-character amino-acid string
whose positions follow the codon order TTT, TTC, TTA, TTG, TCT, ... GGG
(first base varies slowest, bases ordered T, C, A, G).

Reference: https://www.ncbi.nlm.nih.gov/Taxonomy/Utils/wprintgc.cgi
"""

from __future__ import annotations

from itertools import product

BASES = "TCAG"

# Standard code
STANDARD_AAS = (
    "FFLLSSSSYY**CC*W"
    "LLLLPPPPHHQQRRRR"
    "IIIMTTTTNNKKSSRR"
    "VVVVAAAADDEEGGGG"
)

# Vertebrate mitochondrial code
VERTEBRATE_MITO_AAS = (
    "FFLLSSSSYY**CCWW"
    "LLLLPPPPHHQQRRRR"
    "IIMMTTTTNNKKSS**"
    "VVVVAAAADDEEGGGG"
)

# Mold, protozoan, coelenterate mitochondrial and Mycoplasma/Spiroplasma code
MYCOPLASMA_AAS = (
    "FFLLSSSSYY**CCWW"
    "LLLLPPPPHHQQRRRR"
    "IIIMTTTTNNKKSSRR"
    "VVVVAAAADDEEGGGG"
)

# Bacterial, archaeal and plant plastid code; differs from the standard code
# only in its alternative start codons, so the translations are identical.
BACTERIAL_AAS = STANDARD_AAS


def _build_table(amino_acids: str) -> dict[str, str]:
    codons = ["".join(c) for c in product(BASES, repeat=3)]
    return dict(zip(codons, amino_acids))


STANDARD_CODE = _build_table(STANDARD_AAS)
CODON_TABLE = _build_table(BACTERIAL_AAS)

GENETIC_CODES: dict[str, dict[str, str]] = {
    "1": STANDARD_CODE,
    "2": _build_table(VERTEBRATE_MITO_AAS),
    "4": _build_table(MYCOPLASMA_AAS),
    "11": CODON_TABLE,
}

DEFAULT_TABLE_ID = "11"
