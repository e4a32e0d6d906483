# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqphylo.sequence.align"
__author__ = "Patrick Kunzmann"
__all__ = ["align_optimal", "fill_align_table"]

import numpy as np
from ...error import InvalidInputError
from ..alphabet import AlphabetError, LetterAlphabet
from ..record import split_record
from .alignment import Alignment
from .scoring import AlignmentMode, ScoringScheme

# Bits of the trace table
# A "1" in the corresponding bit means the field came from this
# direction
#     bit 1 -> 1  -> diagonal -> alignment of symbols
#     bit 2 -> 2  -> left     -> gap in first sequence
#     bit 3 -> 4  -> top      -> gap in second sequence
_DIAG = 1
_LEFT = 2
_TOP = 4


def align_optimal(seq1, seq2, scheme, mode=AlignmentMode.GLOBAL):
    """
    Perform an optimal alignment of two sequences based on the
    dynamic programming algorithm.

    This algorithm yields an optimal alignment, i.e. the sequences
    are aligned in the way that results in the highest similarity
    score.
    Both, time and space, scale with the product of the sequence
    lengths.

    This function can either perform a global alignment, based on the
    Needleman-Wunsch algorithm [1]_ or a local alignment, based on the
    Smith-Waterman algorithm [2]_, using a linear gap penalty.

    If multiple alignments have the optimal score, a single alignment
    is chosen deterministically:
    The traceback prefers an alignment of symbols over a gap in the
    second sequence over a gap in the first sequence.
    Local alignments start at the first maximum score in row-major
    order.

    Parameters
    ----------
    seq1, seq2 : str or SequenceRecord
        The sequences to be aligned.
    scheme : ScoringScheme
        The substitution scores and gap penalty.
    mode : AlignmentMode or str, optional
        Whether a global or local alignment is performed.

    Returns
    -------
    alignment : Alignment
        The optimal alignment.
        The identifiers of the alignment are taken from the records,
        or are *'Query'* and *'Subject'* for plain strings.

    Raises
    ------
    InvalidInputError
        If a sequence is empty or contains symbols, that are not
        printable ASCII letters.

    References
    ----------

    .. [1] SB Needleman, CD Wunsch,
       "A general method applicable to the search for similarities
       in the amino acid sequence of two proteins."
       J Mol Biol, 48, 443-453 (1970).
    .. [2] TF Smith, MS Waterman,
       "Identification of common molecular subsequences."
       J Mol Biol, 147, 195-197 (1981).

    Examples
    --------

    >>> scheme = ScoringScheme.nucleotide(match=2, mismatch=-1, gap_penalty=-1)
    >>> ali = align_optimal("ACGTACGT", "ACGTTCGT", scheme)
    >>> print(ali)
    ACGTACGT
    |||| |||
    ACGTTCGT
    >>> print(ali.score, ali.identity_pct)
    13 87.5
    >>> ali = align_optimal("TTTACGCGTTT", "GGACGCGGG", scheme, mode="local")
    >>> print(ali)
    ACGCG
    |||||
    ACGCG
    """
    if not isinstance(scheme, ScoringScheme):
        raise InvalidInputError(
            f"Expected 'ScoringScheme', got '{type(scheme).__name__}'"
        )
    try:
        mode = AlignmentMode(mode)
    except ValueError:
        raise InvalidInputError(f"'{mode}' is not a valid alignment mode")
    id1, text1 = split_record(seq1, "Query")
    id2, text2 = split_record(seq2, "Subject")
    for seq_id, text in ((id1, text1), (id2, text2)):
        if len(text) == 0:
            raise InvalidInputError(f"Sequence '{seq_id}' is empty")
    try:
        alphabet = LetterAlphabet.from_sequences(text1, text2)
        code1 = alphabet.encode_multiple(text1)
        code2 = alphabet.encode_multiple(text2)
    except (AlphabetError, ValueError) as e:
        raise InvalidInputError(
            f"Sequences '{id1}' and '{id2}' cannot be aligned: {e}"
        ) from e
    matrix = scheme.substitution_matrix(alphabet)
    local = mode == AlignmentMode.LOCAL

    score_table, trace_table = fill_align_table(
        code1, code2, matrix.score_matrix(), scheme.gap_penalty, local
    )

    # Traceback
    ###########
    if local:
        # The start point is the first maximum score in the table
        i_start, j_start = np.unravel_index(
            np.argmax(score_table), score_table.shape
        )
    else:
        # The start point is the last element in the table
        i_start = trace_table.shape[0] - 1
        j_start = trace_table.shape[1] - 1
    score = int(score_table[i_start, j_start])
    trace = _follow_trace(trace_table, int(i_start), int(j_start))

    # Similarity of the aligned symbols
    similar = np.zeros(len(trace), dtype=bool)
    aligned = (trace != -1).all(axis=1)
    pair_scores = matrix.score_matrix()[
        code1[trace[aligned, 0]], code2[trace[aligned, 1]]
    ]
    identical = code1[trace[aligned, 0]] == code2[trace[aligned, 1]]
    if scheme.counts_similarity():
        similar[aligned] = identical | (pair_scores > 0)
    else:
        similar[aligned] = identical

    return Alignment(
        [text1, text2], trace, score, ids=(id1, id2), mode=mode, similar=similar
    )


def fill_align_table(code1, code2, score_matrix, gap_penalty, local):
    """
    Fill the dynamic programming tables of an optimal alignment with
    linear gap penalty.

    The table rows correspond to the first sequence, the columns to
    the second sequence.
    Each row is computed at once:
    The diagonal and top transitions only depend on the previous row,
    and the left transitions are resolved with a cumulative maximum.

    Parameters
    ----------
    code1, code2 : ndarray, dtype=int
        The sequence codes.
    score_matrix : ndarray, shape=(k,k), dtype=int
        The symbol code indexed substitution scores.
    gap_penalty : int
        The (non-positive) penalty for each gap position.
    local : bool
        If true, scores are floored at 0.

    Returns
    -------
    score_table : ndarray, shape=(m+1,n+1), dtype=int64
        The scores of the optimal (partial) alignments.
    trace_table : ndarray, shape=(m+1,n+1), dtype=uint8
        The bit field of optimal predecessors for each cell.
    """
    m = len(code1)
    n = len(code2)
    score_table = np.zeros((m + 1, n + 1), dtype=np.int64)
    trace_table = np.zeros((m + 1, n + 1), dtype=np.uint8)
    # Initialize first row and column for global alignments
    if not local:
        score_table[:, 0] = np.arange(m + 1) * gap_penalty
        score_table[0, :] = np.arange(n + 1) * gap_penalty
        trace_table[1:, 0] = _TOP
        trace_table[0, 1:] = _LEFT

    substitution = np.asarray(score_matrix, dtype=np.int64)
    # Offsets for resolving left transitions
    # S[j] = max(base[j], S[j-1] + gap) = j*gap + cummax(base[k] - k*gap)
    offsets = np.arange(n + 1, dtype=np.int64) * gap_penalty
    for i in range(1, m + 1):
        prev = score_table[i - 1]
        from_diag = prev[:-1] + substitution[code1[i - 1], code2]
        from_top = prev[1:] + gap_penalty
        base = np.empty(n + 1, dtype=np.int64)
        base[0] = score_table[i, 0]
        base[1:] = np.maximum(from_diag, from_top)
        if local:
            base[1:] = np.maximum(base[1:], 0)
        row = np.maximum.accumulate(base - offsets) + offsets
        from_left = row[:-1] + gap_penalty
        score_table[i, 1:] = row[1:]

        values = row[1:]
        trace = np.zeros(n, dtype=np.uint8)
        trace[values == from_diag] |= _DIAG
        trace[values == from_left] |= _LEFT
        trace[values == from_top] |= _TOP
        if local:
            # The trace ends in cells with score 0
            trace[values == 0] = 0
        trace_table[i, 1:] = trace
    return score_table, trace_table


def _follow_trace(trace_table, i, j):
    trace = []
    while trace_table[i, j] != 0:
        trace_value = trace_table[i, j]
        # -1 is necessary due to the shift of the sequences
        # to the bottom/right in the table
        if trace_value & _DIAG:
            trace.append((i - 1, j - 1))
            i, j = i - 1, j - 1
        elif trace_value & _TOP:
            trace.append((i - 1, -1))
            i -= 1
        else:
            trace.append((-1, j - 1))
            j -= 1
    trace.reverse()
    return np.array(trace, dtype=np.int64).reshape(-1, 2)

