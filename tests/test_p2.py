"""Tests for the P2 pair correlation calculator."""

import math
from itertools import combinations

import pytest

from mcorr.analysis.p2 import CorrResult, CorrResults, calc_p2_coding, pair_id
from mcorr.core.codons import GeneticCode
from mcorr.core.sequences import Alignment, Sequence

CODE = GeneticCode("11")


def make_alignment(*seqs: str, gene: str = "gene1") -> Alignment:
    """Build a block with genomes named genome0, genome1, ..."""
    return Alignment.from_sequences(
        Sequence(f"{gene} genome{i}", s) for i, s in enumerate(seqs)
    )


def profile(results: CorrResults) -> list[tuple[int, float, int]]:
    return [(r.lag, r.mean, r.n) for r in results.results]


class TestPairId:
    """Tests for pair identifiers."""

    def test_sorted_genome_names(self) -> None:
        """Test that genome names are ordered lexicographically."""
        assert pair_id("g1 genomeB", "g1 genomeA") == "genomeA_vs_genomeB"

    def test_symmetric(self) -> None:
        """Test that swapping the inputs gives the same identifier."""
        a = "gene3 ecoli_K12 1-900"
        b = "gene3 ecoli_O157 1-900"
        assert pair_id(a, b) == pair_id(b, a)

    def test_ignores_gene_name(self) -> None:
        """Test that only the genome names contribute."""
        assert pair_id("geneX A", "geneY B") == pair_id("geneZ A", "geneW B")

    def test_missing_genome_name(self) -> None:
        """Test that a header without genome name raises ValueError."""
        with pytest.raises(ValueError):
            pair_id("gene1", "gene1 genomeA")


class TestCalcP2Coding:
    """Tests for calc_p2_coding."""

    def test_identical_codons_lag_zero(self) -> None:
        """Test the ATGATGATG vs ATGATCATG scenario at lag 0."""
        aln = make_alignment("ATGATGATG", "ATGATCATG")
        results = calc_p2_coding(aln, 0, 1, CODE, synonymous=False, codon_position=None)

        assert len(results) == 1
        assert results[0].id == "genome0_vs_genome1"
        [record] = results[0].results
        # ATG/ATG are comparable; ATG (M) vs ATC (I) is not.
        assert record.lag == 0
        assert record.type == "P2"
        assert record.n == 6
        assert record.mean == 0.0

    def test_all_comparable_lag_zero(self) -> None:
        """Test that three comparable codons give 9 examined sites at lag 0."""
        aln = make_alignment("ATGATGATG", "ATGATGATG")
        [result] = calc_p2_coding(aln, 0, 1, CODE)
        assert profile(result) == [(0, 0.0, 9)]

    def test_hand_calculated_profile(self) -> None:
        """Test a profile computed by hand.

        Codons: ATG AAA CCC vs ATG AAG CCG; all pairs synonymous.
        Third positions differ at codons 1 and 2.
        lag 0: t=9, d=2; lag 1: t=6, d=1; lag 2: t=3, d=0; lag 3: no data.
        """
        aln = make_alignment("ATGAAACCC", "ATGAAGCCG")
        [result] = calc_p2_coding(aln, 0, 4, CODE)

        lags = [r.lag for r in result.results]
        assert lags == [0, 3, 6, 9]
        assert [r.n for r in result.results] == [9, 6, 3, 0]
        assert result.results[0].mean == pytest.approx(2 / 9)
        assert result.results[1].mean == pytest.approx(1 / 6)
        assert result.results[2].mean == 0.0
        assert math.isnan(result.results[3].mean)

    def test_single_codon_position(self) -> None:
        """Test restricting the comparison to the third codon position."""
        aln = make_alignment("ATGAAACCC", "ATGAAGCCG")
        [result] = calc_p2_coding(aln, 0, 2, CODE, codon_position=2)
        assert profile(result)[0] == (0, pytest.approx(2 / 3), 3)
        assert profile(result)[1] == (3, pytest.approx(1 / 2), 2)

    def test_out_of_range_position_uses_all(self) -> None:
        """Test that positions outside 0-2 examine all three positions."""
        aln = make_alignment("ATGAAACCC", "ATGAAGCCG")
        [all_positions] = calc_p2_coding(aln, 0, 3, CODE, codon_position=None)
        [out_of_range] = calc_p2_coding(aln, 0, 3, CODE, codon_position=3)
        [negative] = calc_p2_coding(aln, 0, 3, CODE, codon_position=-1)
        assert profile(out_of_range) == profile(all_positions)
        assert profile(negative) == profile(all_positions)

    def test_nonsynonymous_reference_skipped(self) -> None:
        """Test that reference codons encoding different amino acids are skipped."""
        # AAA (K) vs GAA (E) at codon 1
        aln = make_alignment("ATGAAACCC", "ATGGAACCG")
        [result] = calc_p2_coding(aln, 0, 1, CODE)
        assert result.results[0].n == 6
        assert result.results[0].mean == pytest.approx(1 / 6)

    def test_missing_translation_skipped(self) -> None:
        """Test that codons absent from the table are skipped silently."""
        aln = make_alignment("ATG---CCC", "ATGAAGCCG")
        [result] = calc_p2_coding(aln, 0, 2, CODE)
        assert profile(result)[0] == (0, pytest.approx(1 / 6), 6)
        assert profile(result)[1] == (3, 0.0, 3)

    def test_non_latin1_character_skipped(self) -> None:
        """Test that a codon with a character outside latin-1 is skipped, not fatal."""
        aln = make_alignment("ATGAAΔCCC", "ATGAAGCCG")
        [result] = calc_p2_coding(aln, 0, 2, CODE)
        assert profile(result)[0] == (0, pytest.approx(1 / 6), 6)
        assert profile(result)[1] == (3, 0.0, 3)

    def test_synonymous_flag_retests_reference_codons(self) -> None:
        """Test that the synonymous filter applies the reference-codon gate again.

        The lagged codons are not checked, so the profile matches the
        unfiltered one.
        """
        aln = make_alignment("ATGAAACCCTTT", "ATGAAGCCGTTA")
        [plain] = calc_p2_coding(aln, 0, 4, CODE, synonymous=False)
        [filtered] = calc_p2_coding(aln, 0, 4, CODE, synonymous=True)
        assert [(r.lag, r.n) for r in filtered.results] == [(r.lag, r.n) for r in plain.results]
        assert [r.mean for r in filtered.results] == pytest.approx(
            [r.mean for r in plain.results], nan_ok=True
        )

    def test_frame_offset(self) -> None:
        """Test that the codon offset shifts the reading frame."""
        aln = make_alignment("CATGAAACCC", "CATGAAGCCG")
        [shifted] = calc_p2_coding(aln, 1, 3, CODE)
        [unshifted] = calc_p2_coding(make_alignment("ATGAAACCC", "ATGAAGCCG"), 0, 3, CODE)
        assert profile(shifted) == profile(unshifted)

    def test_all_pairs(self) -> None:
        """Test that a block of n sequences gives C(n, 2) profiles."""
        seqs = ["ATGAAACCC", "ATGAAGCCG", "ATGAAACCG", "ATGAAGCCC"]
        aln = make_alignment(*seqs)
        results = calc_p2_coding(aln, 0, 3, CODE)

        assert len(results) == 6
        expected = {f"genome{i}_vs_genome{j}" for i, j in combinations(range(4), 2)}
        assert {r.id for r in results} == expected
        for r in results:
            assert len(r.results) == 3

    def test_lag_order_and_mean_bounds(self) -> None:
        """Test that lags ascend by 3 and means with data lie in [0, 1]."""
        aln = make_alignment(
            "ATGAAACCCGGGTTTAAA", "ATGAAGCCGGGATTCAAG", "ATGAAACCGGGGTTCAAA"
        )
        for result in calc_p2_coding(aln, 0, 8, CODE):
            for i, record in enumerate(result.results):
                assert record.lag == i * 3
                if record.n > 0:
                    assert 0.0 <= record.mean <= 1.0
                else:
                    assert math.isnan(record.mean)

    def test_single_sequence(self) -> None:
        """Test that a block with one sequence gives no profiles."""
        aln = make_alignment("ATGAAACCC")
        assert calc_p2_coding(aln, 0, 3, CODE) == []

    def test_mate_sequence(self) -> None:
        """Test that a mate is compared against every block sequence only."""
        aln = make_alignment("ATGAAACCC", "ATGAAGCCG", "ATGAAACCG")
        mate = Sequence("gene1 reference", "ATGAAGCCC")
        results = calc_p2_coding(aln, 0, 2, CODE, mate_sequence=mate)

        assert len(results) == 3
        assert {r.id for r in results} == {
            "genome0_vs_reference",
            "genome1_vs_reference",
            "genome2_vs_reference",
        }

    def test_mate_profile_matches_direct_pair(self) -> None:
        """Test that a mate comparison equals comparing the two sequences directly."""
        mate = Sequence("gene1 reference", "ATGAAGCCC")
        aln = make_alignment("ATGAAACCG", "ATGAAGCCG")
        with_mate = calc_p2_coding(aln, 0, 3, CODE, mate_sequence=mate)

        direct_aln = Alignment.from_sequences([aln.sequences[0], mate])
        [direct] = calc_p2_coding(direct_aln, 0, 3, CODE)
        assert profile(with_mate[0]) == profile(direct)

    def test_records_are_corr_results(self) -> None:
        """Test record types and dictionary conversion."""
        [result] = calc_p2_coding(make_alignment("ATGAAA", "ATGAAG"), 0, 1, CODE)
        record = result.results[0]
        assert isinstance(record, CorrResult)
        assert record.to_dict() == {"lag": 0, "mean": pytest.approx(1 / 6), "n": 6, "type": "P2"}
