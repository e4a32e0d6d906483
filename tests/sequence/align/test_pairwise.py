# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import itertools
import numpy as np
import pytest
import seqphylo.sequence as seq
import seqphylo.sequence.align as align
from seqphylo import InvalidInputError


# [mode, input1, input2, expect_seq1, expect_seq2, expect_score]
align_cases = [
    ("global", "ACGTACGT", "ACGTCGT",     "ACGTACGT",    "ACGT-CGT",    13),
    ("global", "GATTACA",  "GATTACA",     "GATTACA",     "GATTACA",     14),
    ("global", "A",        "T",           "A",           "T",           -1),
    # Ties are resolved by preferring the diagonal,
    # then a gap in the second sequence, then a gap in the first one
    ("global", "T",        "TTT",         "--T",         "TTT",          0),
    ("global", "TTT",      "T",           "TTT",         "--T",          0),
    ("local",  "TTTACGCGTTT", "GGACGCGGG", "ACGCG",      "ACGCG",       10),
    ("local",  "AAAA",     "TTTT",        "",            "",             0),
]  # fmt: skip


@pytest.mark.parametrize(
    "mode, input1, input2, expect_seq1, expect_seq2, expect_score", align_cases
)
def test_align_optimal_simple(
    mode, input1, input2, expect_seq1, expect_seq2, expect_score
):
    """
    Test `align_optimal()` function using constructed test cases.
    """
    scheme = align.ScoringScheme.nucleotide(match=2, mismatch=-1, gap_penalty=-1)
    ali = align.align_optimal(input1, input2, scheme, mode)
    assert ali.aligned_seq1 == expect_seq1
    assert ali.aligned_seq2 == expect_seq2
    assert ali.score == expect_score


def test_empty_local_alignment():
    """
    Without any positive scoring pair, a local alignment is empty.
    """
    scheme = align.ScoringScheme.nucleotide()
    ali = align.align_optimal("AAAA", "TTTT", scheme, "local")
    assert ali.alignment_length == 0
    assert ali.score == 0
    assert ali.identity_pct == 0.0
    assert ali.similarity_pct == 0.0
    assert ali.gap_pct == 0.0
    assert ali.get_ranges() == ((0, 0), (0, 0))


def test_local_ranges():
    scheme = align.ScoringScheme.nucleotide()
    ali = align.align_optimal("TTTACGCGTTT", "GGACGCGGG", scheme, "local")
    assert ali.mode == align.AlignmentMode.LOCAL
    assert ali.get_ranges() == ((3, 8), (2, 7))
    assert ali.identity_pct == 100.0


def test_protein_similarity():
    """
    Check whether pairs with a positive substitution score are counted
    as similar, but not as identical, in protein alignments.
    """
    scheme = align.ScoringScheme.protein()
    ali = align.align_optimal("KL", "RI", scheme)
    assert ali.aligned_seq1 == "KL"
    assert ali.aligned_seq2 == "RI"
    # K-R: 2, L-I: 2
    assert ali.score == 4
    assert ali.identity_pct == 0.0
    assert ali.similarity_pct == 100.0
    assert ali.get_midline() == "++"


def test_unknown_protein_symbols():
    """
    Symbols not covered by the substitution matrix are penalized,
    so that gaps are preferred over aligning them.
    """
    scheme = align.ScoringScheme.protein()
    ali = align.align_optimal("AB", "AB", scheme)
    assert ali.aligned_seq1 == "A-B"
    assert ali.aligned_seq2 == "AB-"
    assert ali.score == 2


def test_record_ids():
    scheme = align.ScoringScheme.nucleotide()
    ali = align.align_optimal(
        seq.SequenceRecord("seq1", "ACGT"), seq.SequenceRecord("seq2", "AGT"), scheme
    )
    assert ali.ids == ("seq1", "seq2")
    ali = align.align_optimal("ACGT", "AGT", scheme)
    assert ali.ids == ("Query", "Subject")


@pytest.mark.parametrize(
    "seq1, seq2, scheme, mode",
    [
        ("", "ACGT", align.ScoringScheme.nucleotide(), "global"),
        ("ACGT", "", align.ScoringScheme.nucleotide(), "local"),
        ("AC GT", "ACGT", align.ScoringScheme.nucleotide(), "global"),
        ("ÄCGT", "ACGT", align.ScoringScheme.nucleotide(), "global"),
        (42, "ACGT", align.ScoringScheme.nucleotide(), "global"),
        ("ACGT", "ACGT", "BLOSUM62", "global"),
        ("ACGT", "ACGT", align.ScoringScheme.nucleotide(), "semiglobal"),
    ],
)
def test_invalid_input(seq1, seq2, scheme, mode):
    with pytest.raises(InvalidInputError):
        align.align_optimal(seq1, seq2, scheme, mode)


def _reference_score(seq1, seq2, scheme, local):
    """
    Straightforward cell by cell implementation of the dynamic
    programming algorithm.
    """
    gap = scheme.gap_penalty
    table = np.zeros((len(seq1) + 1, len(seq2) + 1), dtype=int)
    if not local:
        table[:, 0] = np.arange(len(seq1) + 1) * gap
        table[0, :] = np.arange(len(seq2) + 1) * gap
    for i in range(1, len(seq1) + 1):
        for j in range(1, len(seq2) + 1):
            table[i, j] = max(
                table[i - 1, j - 1] + scheme.substitution(seq1[i - 1], seq2[j - 1]),
                table[i - 1, j] + gap,
                table[i, j - 1] + gap,
            )
            if local:
                table[i, j] = max(table[i, j], 0)
    return table.max() if local else table[-1, -1]


def _score_alignment(ali, scheme):
    score = 0
    for i, j in ali.trace:
        if i == -1 or j == -1:
            score += scheme.gap_penalty
        else:
            score += scheme.substitution(ali.sequences[0][i], ali.sequences[1][j])
    return score


@pytest.mark.parametrize(
    "seed, mode, scheme",
    itertools.product(
        range(10),
        ["global", "local"],
        [
            align.ScoringScheme.nucleotide(),
            align.ScoringScheme.nucleotide(match=1, mismatch=-3, gap_penalty=-2),
            align.ScoringScheme.protein(),
            align.ScoringScheme.protein(gap_penalty=-8),
        ],
    ),
)
def test_align_optimal_random(seed, mode, scheme):
    """
    Compare the score of `align_optimal()` with a reference
    implementation for random sequences and check whether the trace is
    consistent with the score.
    """
    rng = np.random.default_rng(seed)
    if scheme.kind == align.SequenceKind.PROTEIN:
        letters = np.array(list("ARNDCQEGHILKMFPSTWYVX"))
    else:
        letters = np.array(list("ACGT"))
    seq1 = "".join(rng.choice(letters, size=rng.integers(1, 30)))
    seq2 = "".join(rng.choice(letters, size=rng.integers(1, 30)))
    local = mode == "local"

    ali = align.align_optimal(seq1, seq2, scheme, mode)

    assert ali.score == _reference_score(seq1, seq2, scheme, local)
    assert _score_alignment(ali, scheme) == ali.score
    # The trace indices are strictly increasing without the gaps
    for column in ali.trace.T:
        indices = column[column != -1]
        assert (np.diff(indices) == 1).all()
    if not local:
        # Global alignments cover the complete sequences
        assert ali.aligned_seq1.replace("-", "") == seq1
        assert ali.aligned_seq2.replace("-", "") == seq2
    # No column consists only of gaps
    assert not (ali.trace == -1).all(axis=1).any()


def _random_sequence(rng, scheme, length):
    if scheme.kind == align.SequenceKind.PROTEIN:
        letters = np.array(list("ARNDCQEGHILKMFPSTWYV"))
    else:
        letters = np.array(list("ACGT"))
    return "".join(rng.choice(letters, size=length))


schemes = [
    align.ScoringScheme.nucleotide(),
    align.ScoringScheme.protein(),
]


@pytest.mark.parametrize("seed, scheme", itertools.product(range(10), schemes))
def test_self_alignment(seed, scheme):
    """
    A sequence aligned with itself needs no gaps and is completely
    identical.
    """
    rng = np.random.default_rng(seed)
    sequence = _random_sequence(rng, scheme, rng.integers(1, 50))

    ali = align.align_optimal(sequence, sequence, scheme, "global")

    assert ali.alignment_length == len(sequence)
    assert ali.identity_pct == 100.0
    assert ali.similarity_pct == 100.0
    assert ali.gap_pct == 0.0
    assert ali.aligned_seq1 == sequence
    assert ali.aligned_seq2 == sequence


@pytest.mark.parametrize(
    "seed, mode, scheme",
    itertools.product(range(10), ["global", "local"], schemes),
)
def test_score_symmetry(seed, mode, scheme):
    """
    Swapping the sequences does not change the score for a symmetric
    substitution matrix.
    """
    rng = np.random.default_rng(seed)
    seq1 = _random_sequence(rng, scheme, rng.integers(1, 30))
    seq2 = _random_sequence(rng, scheme, rng.integers(1, 30))

    ali = align.align_optimal(seq1, seq2, scheme, mode)
    swapped = align.align_optimal(seq2, seq1, scheme, mode)

    assert ali.score == swapped.score
    if mode == "local":
        assert ali.score >= 0


def test_single_mismatch_identity():
    scheme = align.ScoringScheme.nucleotide(match=2, mismatch=-1, gap_penalty=-1)
    ali = align.align_optimal("ACGTACGT", "ACGTACGA", scheme, "global")
    assert ali.alignment_length == 8
    assert ali.identity_count == 7
    assert ali.gap_count == 0
    assert ali.identity_pct == 87.5
    assert ali.score == 13


def test_fill_align_table():
    """
    Check the score table of a small global alignment against manually
    computed values.
    """
    alph = seq.LetterAlphabet("AC")
    scores = np.array([[1, -1], [-1, 1]])
    score_table, trace_table = align.fill_align_table(
        alph.encode_multiple("AC"), alph.encode_multiple("C"), scores, -2, False
    )
    assert score_table.tolist() == [
        [ 0, -2],
        [-2, -1],
        [-4, -1],
    ]  # fmt: skip
    # The last cell can only be reached via the diagonal
    assert trace_table[2, 1] == 1
