# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import numpy as np
import pytest
import seqphylo.sequence as seq
import seqphylo.sequence.align as align
from seqphylo import InvalidInputError


def test_default_scores():
    scheme = align.ScoringScheme.nucleotide()
    assert scheme.kind == align.SequenceKind.NUCLEOTIDE
    assert scheme.match == align.DEFAULT_MATCH_SCORE == 2
    assert scheme.mismatch == align.DEFAULT_MISMATCH_SCORE == -1
    assert scheme.gap_penalty == align.DEFAULT_GAP_PENALTY == -1
    assert not scheme.counts_similarity()
    assert align.ScoringScheme.protein().counts_similarity()


@pytest.mark.parametrize(
    "symbol1, symbol2, exp_score",
    [
        ("A", "A", 4),
        ("W", "W", 11),
        ("A", "W", -3),
        # Symbols not covered by BLOSUM62
        ("A", "X", align.UNKNOWN_SUBSTITUTION_SCORE),
        ("B", "B", align.UNKNOWN_SUBSTITUTION_SCORE),
    ],
)
def test_protein_substitution(symbol1, symbol2, exp_score):
    scheme = align.ScoringScheme.protein()
    assert scheme.substitution(symbol1, symbol2) == exp_score


def test_nucleotide_substitution():
    scheme = align.ScoringScheme.nucleotide(match=5, mismatch=-4)
    assert scheme.substitution("G", "G") == 5
    assert scheme.substitution("G", "C") == -4
    # Any letters are accepted
    assert scheme.substitution("N", "N") == 5


def test_protein_substitution_matrix():
    """
    Check whether the symbol code indexed matrix for an arbitrary
    alphabet uses BLOSUM62 scores and the default score for unknown
    symbols.
    """
    scheme = align.ScoringScheme.protein()
    matrix = scheme.substitution_matrix(seq.LetterAlphabet("AWX"))
    assert np.array_equal(
        matrix.score_matrix(),
        [
            [ 4, -3, -4],
            [-3, 11, -4],
            [-4, -4, -4],
        ]
    )  # fmt: skip


def test_nucleotide_substitution_matrix():
    scheme = align.ScoringScheme.nucleotide(match=1, mismatch=-3)
    matrix = scheme.substitution_matrix(seq.LetterAlphabet("ACG"))
    assert np.array_equal(
        matrix.score_matrix(),
        [
            [ 1, -3, -3],
            [-3,  1, -3],
            [-3, -3,  1],
        ]
    )  # fmt: skip


def test_custom_protein_matrix():
    alph = seq.LetterAlphabet("AB")
    custom = align.SubstitutionMatrix(alph, alph, np.array([[7, 1], [1, 9]]))
    scheme = align.ScoringScheme.protein(matrix=custom)
    assert scheme.substitution("B", "B") == 9
    assert scheme.substitution("A", "W") == align.UNKNOWN_SUBSTITUTION_SCORE


@pytest.mark.parametrize(
    "value, enum_class, exp_member",
    [
        ("protein", align.SequenceKind, align.SequenceKind.PROTEIN),
        ("Nucleotide", align.SequenceKind, align.SequenceKind.NUCLEOTIDE),
        ("LOCAL", align.AlignmentMode, align.AlignmentMode.LOCAL),
        ("global", align.AlignmentMode, align.AlignmentMode.GLOBAL),
    ],
)
def test_enum_from_str(value, enum_class, exp_member):
    assert enum_class(value) == exp_member


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(kind="rna"),
        dict(kind="protein", gap_penalty=1),
        dict(kind="protein", gap_penalty=-1.5),
        dict(kind="nucleotide", match=True),
        dict(kind="protein", matrix="BLOSUM62"),
    ],
)
def test_invalid_scheme(kwargs):
    with pytest.raises(InvalidInputError):
        align.ScoringScheme(**kwargs)


def test_immutability():
    scheme = align.ScoringScheme.nucleotide()
    with pytest.raises(AttributeError):
        scheme.match = 3
