# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqphylo.sequence.align"
__author__ = "Patrick Kunzmann"
__all__ = ["DotPlot", "SimilarityRegion", "dotplot", "MIN_REGION_LENGTH"]

from dataclasses import dataclass
import numpy as np
from ...error import InvalidInputError
from ..record import split_record


# Minimum number of consecutive diagonal matches of a similarity region
MIN_REGION_LENGTH = 5


@dataclass(frozen=True)
class SimilarityRegion:
    """
    A run of consecutive identical symbols on a diagonal of a
    :class:`DotPlot`.

    All positions are 1-based and inclusive.

    Attributes
    ----------
    start1, end1 : int
        The region in the first sequence.
    start2, end2 : int
        The region in the second sequence.
    score : int
        The number of matches in the region.
    """

    start1: int
    end1: int
    start2: int
    end2: int
    score: int


class DotPlot(object):
    """
    The result of a dot plot comparison of two sequences.

    Attributes
    ----------
    ids : tuple of str
        The identifiers of the compared sequences.
    lengths : tuple of int
        The lengths of the compared sequences.
    window_size, threshold : int
        The parameters of the comparison.
    positions : ndarray, shape=(k,2), dtype=int
        The 1-based start positions *(x, y)* of each matching window
        pair in the first and second sequence, in row-major order.
    scores : ndarray, shape=(k,), dtype=float
        The fraction of identical symbols in each matching window
        pair.
    regions : list of SimilarityRegion
        The similarity regions.
        Only determined for ``window_size == threshold == 1``,
        otherwise empty.
    """

    def __init__(
        self, ids, lengths, window_size, threshold, positions, scores, regions
    ):
        self.ids = tuple(ids)
        self.lengths = tuple(lengths)
        self.window_size = window_size
        self.threshold = threshold
        self.positions = positions
        self.scores = scores
        self.regions = list(regions)

    def __len__(self):
        return len(self.positions)

    def get_matches(self):
        """
        Get the matching window pairs as tuples.

        Returns
        -------
        matches : list of tuple(int, int, float)
            The *x*, *y* and score of each match.
        """
        return [
            (int(x), int(y), float(score))
            for (x, y), score in zip(self.positions, self.scores)
        ]


def dotplot(seq1, seq2, window_size=1, threshold=1):
    """
    Compare all windows of two sequences with each other.

    A pair of windows starting at position *i* in the first and *j*
    in the second sequence is a match, if the number of positionally
    identical symbols reaches `threshold`.
    The comparison is case-insensitive.

    For the default parameters, each maximal run of at least
    :data:`MIN_REGION_LENGTH` consecutive matches on a diagonal is
    reported as :class:`SimilarityRegion`.

    Parameters
    ----------
    seq1, seq2 : str or SequenceRecord
        The sequences to be compared.
    window_size : int, optional
        The length of the compared windows.
    threshold : int, optional
        The minimum number of identical symbols of a matching window
        pair.
        Must be between 0 and `window_size`.

    Returns
    -------
    dotplot : DotPlot
        The matching window pairs and similarity regions.

    Raises
    ------
    InvalidInputError
        If the parameters are invalid or a sequence contains non-ASCII
        symbols.

    Examples
    --------

    >>> plot = dotplot("GATTACA", "TTAC")
    >>> print(plot.get_matches()[:3])
    [(2, 3, 1.0), (3, 1, 1.0), (3, 2, 1.0)]
    >>> plot = dotplot("CCGATTACACC", "GATTACA")
    >>> print(plot.regions)
    [SimilarityRegion(start1=3, end1=9, start2=1, end2=7, score=7)]
    """
    if isinstance(window_size, bool) or not isinstance(window_size, (int, np.integer)):
        raise InvalidInputError("Window size must be an integer")
    if window_size < 1:
        raise InvalidInputError(f"Window size must be positive, got {window_size}")
    if threshold < 0 or threshold > window_size:
        raise InvalidInputError(
            f"Threshold must be between 0 and the window size, got {threshold}"
        )
    id1, text1 = split_record(seq1, "Sequence 1")
    id2, text2 = split_record(seq2, "Sequence 2")
    text1 = text1.upper()
    text2 = text2.upper()
    try:
        code1 = np.frombuffer(text1.encode("ASCII"), dtype=np.ubyte)
        code2 = np.frombuffer(text2.encode("ASCII"), dtype=np.ubyte)
    except UnicodeEncodeError as e:
        raise InvalidInputError(
            f"Sequences '{id1}' and '{id2}' contain non-ASCII symbols"
        ) from e

    # Element-wise identity of all symbol pairs
    identity = code1[:, np.newaxis] == code2[np.newaxis, :]
    n_windows1 = len(code1) - window_size + 1
    n_windows2 = len(code2) - window_size + 1
    if n_windows1 <= 0 or n_windows2 <= 0:
        positions = np.zeros((0, 2), dtype=np.int64)
        scores = np.zeros(0, dtype=float)
    else:
        # Sum the identities along the diagonal of each window pair
        counts = np.zeros((n_windows1, n_windows2), dtype=np.int64)
        for k in range(window_size):
            counts += identity[k : k + n_windows1, k : k + n_windows2]
        i, j = np.nonzero(counts >= threshold)
        # 1-based coordinates
        positions = np.stack([i + 1, j + 1], axis=-1).astype(np.int64)
        scores = counts[i, j] / window_size

    if window_size == 1 and threshold == 1:
        regions = _find_regions(identity)
    else:
        regions = []

    return DotPlot(
        (id1, id2),
        (len(text1), len(text2)),
        window_size,
        threshold,
        positions,
        scores,
        regions,
    )


def _find_regions(identity):
    regions = []
    n_rows, n_cols = identity.shape
    for offset in range(-n_rows + 1, n_cols):
        diagonal = np.diagonal(identity, offset).astype(np.int8)
        if len(diagonal) < MIN_REGION_LENGTH:
            continue
        # Run boundaries are where the padded diagonal changes
        edges = np.diff(np.concatenate(([0], diagonal, [0])))
        starts = np.where(edges == 1)[0]
        stops = np.where(edges == -1)[0]
        # Position of the diagonal start in both sequences
        row0 = max(-offset, 0)
        col0 = max(offset, 0)
        for start, stop in zip(starts, stops):
            length = int(stop - start)
            if length >= MIN_REGION_LENGTH:
                regions.append(
                    SimilarityRegion(
                        start1=row0 + int(start) + 1,
                        end1=row0 + int(stop),
                        start2=col0 + int(start) + 1,
                        end2=col0 + int(stop),
                        score=length,
                    )
                )
    regions.sort(key=lambda region: (region.start1, region.start2))
    return regions

