# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqphylo.sequence.align"
__author__ = "Patrick Kunzmann"
__all__ = ["Alignment", "GAP_SYMBOL"]

import textwrap
import numpy as np
from .scoring import AlignmentMode


GAP_SYMBOL = "-"


class Alignment(object):
    """
    An :class:`Alignment` object stores which symbols of two sequences
    are aligned to each other and the corresponding alignment score.

    Instead of saving the gapped strings, this class saves the
    original two sequences, that were aligned, and a so called *trace*,
    which indicate the aligned symbols of these sequences.
    The trace is a *(m x 2)* :class:`ndarray` with alignment length
    *m*.
    Each element of the trace is the index in the corresponding
    sequence.
    A gap is represented by the value -1.
    For local alignments the trace covers only the aligned
    subsequences.

    Furthermore, an alignment stores for each column, whether the
    aligned symbols are similar, i.e. identical or, for protein
    alignments, have a positive substitution score.
    From this information the alignment statistics are derived.

    All attributes of this class are publicly accessible.

    Parameters
    ----------
    sequences : sequence of str, length=2
        The aligned sequences.
    trace : ndarray, dtype=int, shape=(m,2)
        The alignment trace.
    score : int
        Alignment score.
    ids : sequence of str, length=2, optional
        The identifiers of the aligned sequences.
    mode : AlignmentMode, optional
        Whether the alignment is global or local.
    similar : ndarray, dtype=bool, shape=(m,), optional
        For each column, whether the aligned symbols are similar.
        By default only identical symbols are similar.

    Attributes
    ----------
    sequences : tuple of str
        The aligned sequences.
    trace : ndarray, dtype=int, shape=(m,2)
        The alignment trace.
    score : int
        Alignment score.
    ids : tuple of str
        The identifiers of the aligned sequences.
    mode : AlignmentMode
        Whether the alignment is global or local.
    similar : ndarray, dtype=bool, shape=(m,)
        Column-wise similarity.

    Examples
    --------

    >>> scheme = ScoringScheme.nucleotide()
    >>> ali = align_optimal("ACGTACGT", "ACGTCGT", scheme)
    >>> print(ali)
    ACGTACGT
    |||| |||
    ACGT-CGT
    >>> print(ali.trace)
    [[ 0  0]
     [ 1  1]
     [ 2  2]
     [ 3  3]
     [ 4 -1]
     [ 5  4]
     [ 6  5]
     [ 7  6]]
    >>> print(ali.identity_pct, ali.gap_pct)
    87.5 12.5
    """

    def __init__(
        self,
        sequences,
        trace,
        score,
        ids=("Query", "Subject"),
        mode=AlignmentMode.GLOBAL,
        similar=None,
    ):
        if len(sequences) != 2:
            raise ValueError("An alignment requires exactly two sequences")
        self.sequences = tuple(str(seq) for seq in sequences)
        self.trace = np.asarray(trace, dtype=np.int64).reshape(-1, 2)
        self.score = score
        self.ids = tuple(ids)
        self.mode = AlignmentMode(mode)
        if similar is None:
            similar = self._identical()
        self.similar = np.asarray(similar, dtype=bool)
        if self.similar.shape != (len(self.trace),):
            raise ValueError(
                f"Similarity mask has shape {self.similar.shape}, "
                f"but ({len(self.trace)},) is required"
            )

    def __repr__(self):
        """Represent Alignment a string for debugging."""
        return (
            f"Alignment({list(self.sequences)!r}, "
            f"np.{np.array_repr(self.trace)}, score={self.score!r}, "
            f"ids={self.ids!r}, mode=AlignmentMode.{self.mode.name}, "
            f"similar=np.{np.array_repr(self.similar)})"
        )

    def _gapped_str(self, seq_index):
        sequence = self.sequences[seq_index]
        return "".join(
            sequence[i] if i != -1 else GAP_SYMBOL for i in self.trace[:, seq_index]
        )

    def _gaps(self):
        return (self.trace == -1).any(axis=1)

    def _identical(self):
        identical = np.zeros(len(self.trace), dtype=bool)
        for k, (i, j) in enumerate(self.trace):
            if i != -1 and j != -1:
                identical[k] = self.sequences[0][i] == self.sequences[1][j]
        return identical

    def get_gapped_sequences(self):
        """
        Get the string representation of the gapped sequences.

        Returns
        -------
        sequences : list of str
            The list of gapped sequence strings. The order is the same
            as in `Alignment.sequences`.
        """
        return [self._gapped_str(i) for i in range(2)]

    @property
    def aligned_seq1(self):
        return self._gapped_str(0)

    @property
    def aligned_seq2(self):
        return self._gapped_str(1)

    @property
    def alignment_length(self):
        return len(self.trace)

    @property
    def identity_count(self):
        return int(np.count_nonzero(self._identical()))

    @property
    def similarity_count(self):
        # Identities always count as similarities
        return int(np.count_nonzero(self.similar | self._identical()))

    @property
    def gap_count(self):
        return int(np.count_nonzero(self._gaps()))

    @property
    def identity_pct(self):
        return self._percentage(self.identity_count)

    @property
    def similarity_pct(self):
        return self._percentage(self.similarity_count)

    @property
    def gap_pct(self):
        return self._percentage(self.gap_count)

    def _percentage(self, count):
        if len(self.trace) == 0:
            return 0.0
        return count / len(self.trace) * 100

    def get_midline(self):
        """
        Get the line between the gapped sequences, that marks identical
        (``'|'``) and similar (``'+'``) symbols.

        Returns
        -------
        midline : str
            The midline, with the same length as the alignment.
        """
        identical = self._identical()
        similar = self.similar & ~self._gaps()
        return "".join(
            "|" if ident else ("+" if sim else " ")
            for ident, sim in zip(identical, similar)
        )

    def get_ranges(self):
        """
        Get the range of the aligned region in each sequence.

        Returns
        -------
        ranges : tuple of tuple(int, int)
            For each sequence the start and exclusive stop index.
            ``(0, 0)`` for an empty alignment.
        """
        ranges = []
        for column in self.trace.T:
            indices = column[column != -1]
            if len(indices) == 0:
                ranges.append((0, 0))
            else:
                ranges.append((int(indices[0]), int(indices[-1]) + 1))
        return tuple(ranges)

    def __str__(self):
        # First dimension: line type, second dimension: line number
        wrapper = textwrap.TextWrapper(break_on_hyphens=False)
        lines = [
            wrapper.wrap(self._gapped_str(0)),
            # Wrap the midline on the same positions
            # as the sequences, whitespace must be preserved
            _split(self.get_midline(), wrapper.width),
            wrapper.wrap(self._gapped_str(1)),
        ]
        blocks = []
        for row_i in range(len(lines[0])):
            blocks.append("\n".join(line[row_i] for line in lines))
        return "\n\n".join(blocks)

    def __len__(self):
        return len(self.trace)

    def __iter__(self):
        raise TypeError("'Alignment' object is not iterable")

    def __eq__(self, item):
        if not isinstance(item, Alignment):
            return False
        if self.sequences != item.sequences:
            return False
        if not np.array_equal(self.trace, item.trace):
            return False
        if self.score != item.score:
            return False
        if self.ids != item.ids or self.mode != item.mode:
            return False
        if not np.array_equal(self.similar, item.similar):
            return False
        return True


def _split(string, width):
    return [string[i : i + width] for i in range(0, len(string), width)]
