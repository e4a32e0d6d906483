# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import numpy as np
import pytest
import seqphylo.sequence as seq
import seqphylo.sequence.align as align
from seqphylo import InvalidInputError


def test_identity_matches():
    """
    Check all matches of a small example with the default parameters.
    """
    plot = align.dotplot("GATTACA", "TTAC")
    assert plot.get_matches() == [
        (2, 3, 1.0),
        (3, 1, 1.0),
        (3, 2, 1.0),
        (4, 1, 1.0),
        (4, 2, 1.0),
        (5, 3, 1.0),
        (6, 4, 1.0),
        (7, 3, 1.0),
    ]
    assert len(plot) == 8
    assert plot.ids == ("Sequence 1", "Sequence 2")
    assert plot.lengths == (7, 4)
    # The runs are too short to be a similarity region
    assert plot.regions == []


def test_window_matches():
    plot = align.dotplot("GATTACA", "TTAC", window_size=2, threshold=2)
    assert plot.positions.tolist() == [[3, 1], [4, 2], [5, 3]]
    assert plot.scores.tolist() == [1.0, 1.0, 1.0]
    # Regions are only determined for single symbol windows
    assert plot.regions == []


def test_partial_window_scores():
    plot = align.dotplot("AC", "AG", window_size=2, threshold=1)
    assert plot.get_matches() == [(1, 1, 0.5)]


def test_zero_threshold():
    plot = align.dotplot("ACG", "TT", window_size=1, threshold=0)
    assert len(plot) == 6
    assert (plot.scores == 0).all()


def test_window_exceeding_sequence():
    plot = align.dotplot("AC", "ACGT", window_size=3, threshold=1)
    assert len(plot) == 0
    assert plot.positions.shape == (0, 2)


def test_case_insensitivity():
    plot = align.dotplot("acgt", "ACGT")
    assert np.array_equal(np.diff(plot.positions, axis=1), np.zeros((4, 1)))


@pytest.mark.parametrize(
    "seq1, seq2, exp_regions",
    [
        (
            "CCGATTACACC",
            "GATTACA",
            [align.SimilarityRegion(3, 9, 1, 7, 7)],
        ),
        # A mismatch splits a diagonal run into two regions
        (
            "AAAAAGAAAAA",
            "AAAAACAAAAA",
            [
                align.SimilarityRegion(1, 5, 1, 5, 5),
                align.SimilarityRegion(7, 11, 7, 11, 5),
            ],
        ),
        ("ACGTAC", "TTTTTT", []),
    ],
)
def test_regions(seq1, seq2, exp_regions):
    plot = align.dotplot(seq1, seq2)
    assert plot.regions == exp_regions
    for region in plot.regions:
        assert region.score >= align.MIN_REGION_LENGTH
        assert region.end1 - region.start1 + 1 == region.score
        assert region.end2 - region.start2 + 1 == region.score


def test_record_ids():
    plot = align.dotplot(
        seq.SequenceRecord("seq1", "ACGT"), seq.SequenceRecord("seq2", "ACGT")
    )
    assert plot.ids == ("seq1", "seq2")


@pytest.mark.parametrize(
    "window_size, threshold",
    [(0, 0), (-1, 1), (2.0, 1), (True, 1), (2, 3), (2, -1)],
)
def test_invalid_parameters(window_size, threshold):
    with pytest.raises(InvalidInputError):
        align.dotplot("ACGT", "ACGT", window_size, threshold)


@pytest.mark.parametrize("seq1, seq2", [("ACGTÄ", "ACGT"), ("ACGT", "µACGT")])
def test_non_ascii_symbols(seq1, seq2):
    """
    Non-ASCII symbols would give positions, that do not correspond to
    the positions in the input sequences.
    """
    with pytest.raises(InvalidInputError):
        align.dotplot(seq1, seq2)
