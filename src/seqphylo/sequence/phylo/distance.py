# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqphylo.sequence.phylo"
__author__ = "Patrick Kunzmann"
__all__ = [
    "DistanceCorrection",
    "DistanceMatrix",
    "p_distance",
    "jukes_cantor",
    "sequence_distance",
    "distance_matrix",
    "SATURATION_DISTANCE",
    "DEGENERATE_DISTANCE",
    "AMBIGUOUS_SYMBOLS",
]

import warnings
from enum import Enum
import numpy as np
from ...copyable import Copyable
from ...error import DegenerateDistanceWarning, InvalidInputError
from ..record import SequenceRecord, split_record


# Upper limit of corrected distances
SATURATION_DISTANCE = 3.0
# Distance of two sequences without any comparable site
DEGENERATE_DISTANCE = 1.0
# Sites containing these symbols in any sequence are not compared
AMBIGUOUS_SYMBOLS = "N"


class DistanceCorrection(Enum):
    """
    The correction applied to the observed fraction of differing
    sites.

    - **NONE** - The *p-distance* is used directly.
    - **JUKES_CANTOR** - The *p-distance* is converted into an estimate
      of substitutions per site, assuming equal substitution rates
      (see :func:`jukes_cantor()`).
    """

    NONE = "none"
    JUKES_CANTOR = "jukes-cantor"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            value = value.lower().replace("_", "-")
            if value == "jc":
                return cls.JUKES_CANTOR
            for member in cls:
                if value == member.value:
                    return member
        return None


def _count_sites(seq1, seq2, ambiguous_symbols):
    """
    Count the differing and the valid sites of two sequences, assuming
    positional correspondence.
    """
    # UTF-32 gives exactly one code point per element
    codes1 = np.frombuffer(seq1.upper().encode("utf-32-le"), dtype=np.uint32)
    codes2 = np.frombuffer(seq2.upper().encode("utf-32-le"), dtype=np.uint32)
    length = min(len(codes1), len(codes2))
    codes1 = codes1[:length]
    codes2 = codes2[:length]
    ambiguous = np.frombuffer(
        ambiguous_symbols.upper().encode("utf-32-le"), dtype=np.uint32
    )
    valid = ~(np.isin(codes1, ambiguous) | np.isin(codes2, ambiguous))
    differences = np.count_nonzero(codes1[valid] != codes2[valid])
    return int(differences), int(np.count_nonzero(valid))


def p_distance(seq1, seq2, ambiguous_symbols=AMBIGUOUS_SYMBOLS):
    """
    Calculate the fraction of differing sites of two sequences.

    The sequences are not aligned:
    The sites are compared position by position, up to the length of
    the shorter sequence.
    Sites, where any of both sequences contains an ambiguous symbol,
    are ignored.
    Any other symbol, including the gap symbol, is compared as it is;
    gapped sites can be ignored by adding '-' to `ambiguous_symbols`.

    Parameters
    ----------
    seq1, seq2 : str or SequenceRecord
        The compared sequences.
    ambiguous_symbols : str, optional
        The symbols marking sites, that are excluded from comparison.

    Returns
    -------
    distance : float
        The *p-distance*.
        If the sequences have no valid site in common,
        :data:`DEGENERATE_DISTANCE` is returned and a
        :class:`DegenerateDistanceWarning` is issued.

    Examples
    --------

    >>> print(p_distance("ACGTACGT", "ACGTACGA"))
    0.125
    >>> print(p_distance("ACGTN", "ACGAA"))
    0.25
    """
    id1, text1 = split_record(seq1, "Sequence 1")
    id2, text2 = split_record(seq2, "Sequence 2")
    differences, valid_sites = _count_sites(text1, text2, ambiguous_symbols)
    if valid_sites == 0:
        _warn_degenerate(id1, id2)
        return DEGENERATE_DISTANCE
    return differences / valid_sites


def jukes_cantor(p_dist):
    """
    Apply the *Jukes-Cantor* correction to a *p-distance*.

    .. math::

        d = -\\frac{3}{4} \\ln \\left( 1 - \\frac{4}{3} p \\right)

    Parameters
    ----------
    p_dist : float
        The fraction of differing sites.

    Returns
    -------
    distance : float
        The corrected distance, clamped to
        ``[0, SATURATION_DISTANCE]``.
        For ``p_dist >= 0.75`` the correction is undefined and
        :data:`SATURATION_DISTANCE` is returned.

    Examples
    --------

    >>> print(round(jukes_cantor(0.125), 4))
    0.1367
    >>> print(jukes_cantor(0.8))
    3.0
    """
    if p_dist >= 0.75:
        return SATURATION_DISTANCE
    distance = -0.75 * np.log(1 - 4 / 3 * p_dist)
    return float(np.clip(distance, 0, SATURATION_DISTANCE))


_CORRECTIONS = {
    DistanceCorrection.NONE: lambda p_dist: p_dist,
    DistanceCorrection.JUKES_CANTOR: jukes_cantor,
}


def sequence_distance(
    seq1,
    seq2,
    correction=DistanceCorrection.JUKES_CANTOR,
    ambiguous_symbols=AMBIGUOUS_SYMBOLS,
):
    """
    Calculate the evolutionary distance of two sequences.

    The distance is based on the *p-distance* (see :func:`p_distance()`)
    with an optional correction.

    Parameters
    ----------
    seq1, seq2 : str or SequenceRecord
        The compared sequences.
    correction : DistanceCorrection or str, optional
        The correction applied to the *p-distance*.
    ambiguous_symbols : str, optional
        The symbols marking sites, that are excluded from comparison.

    Returns
    -------
    distance : float
        The distance.
        If the sequences have no valid site in common,
        :data:`DEGENERATE_DISTANCE` is returned without correction and
        a :class:`DegenerateDistanceWarning` is issued.
    """
    correction = _as_correction(correction)
    id1, text1 = split_record(seq1, "Sequence 1")
    id2, text2 = split_record(seq2, "Sequence 2")
    differences, valid_sites = _count_sites(text1, text2, ambiguous_symbols)
    if valid_sites == 0:
        _warn_degenerate(id1, id2)
        return DEGENERATE_DISTANCE
    return _CORRECTIONS[correction](differences / valid_sites)


def distance_matrix(
    sequences,
    correction=DistanceCorrection.JUKES_CANTOR,
    ambiguous_symbols=AMBIGUOUS_SYMBOLS,
):
    """
    Calculate the pairwise distances of all sequences.

    Parameters
    ----------
    sequences : iterable object of SequenceRecord
        The sequences.
        The record identifiers are used as labels of the matrix.
    correction : DistanceCorrection or str, optional
        The correction applied to the *p-distance*.
    ambiguous_symbols : str, optional
        The symbols marking sites, that are excluded from comparison.

    Returns
    -------
    matrix : DistanceMatrix
        The symmetric distance matrix.

    See Also
    --------
    sequence_distance

    Examples
    --------

    >>> records = [
    ...     SequenceRecord("A", "ACGTACGT"),
    ...     SequenceRecord("B", "ACGTACGA"),
    ...     SequenceRecord("C", "TTTTTTTT"),
    ... ]
    >>> matrix = distance_matrix(records)
    >>> print(matrix)
         A       B       C
    A    0.0000  0.1367  3.0000
    B    0.1367  0.0000  3.0000
    C    3.0000  3.0000  0.0000
    """
    correction = _as_correction(correction)
    sequences = list(sequences)
    for seq in sequences:
        if not isinstance(seq, SequenceRecord):
            raise InvalidInputError(
                f"Expected 'SequenceRecord', got '{type(seq).__name__}'"
            )
    n = len(sequences)
    distances = np.zeros((n, n), dtype=np.float64)
    for i in range(n):
        for j in range(i + 1, n):
            distances[i, j] = sequence_distance(
                sequences[i], sequences[j], correction, ambiguous_symbols
            )
            distances[j, i] = distances[i, j]
    return DistanceMatrix([seq.id for seq in sequences], distances, correction)


class DistanceMatrix(Copyable):
    """
    A symmetric matrix of pairwise distances between labeled taxa,
    the input of the tree building functions.

    The distances must be finite and non-negative, the diagonal must be
    zero.
    The matrix is symmetrized from its upper triangle, after it was
    checked to be symmetric within floating point tolerance.

    Objects of this class are immutable.

    Parameters
    ----------
    ids : iterable object of str
        The unique labels of the taxa.
    distances : ndarray, shape=(n,n), dtype=float
        The distances.
    correction : DistanceCorrection or str, optional
        The correction, that was used to calculate the distances.
        None, if the distances were obtained otherwise.

    Attributes
    ----------
    ids : tuple of str
        The labels of the taxa.
    correction : DistanceCorrection or None
        The correction used for the distances.

    Examples
    --------

    >>> matrix = DistanceMatrix(["A", "B", "C"], [[0, 2, 4], [2, 0, 4], [4, 4, 0]])
    >>> print(matrix.get_distance("A", "C"))
    4.0
    >>> print(matrix.index("B"))
    1
    """

    def __init__(self, ids, distances, correction=None):
        self._ids = tuple(ids)
        for id in self._ids:
            if not isinstance(id, str) or len(id) == 0:
                raise InvalidInputError("Taxon labels must be non-empty strings")
        if len(set(self._ids)) != len(self._ids):
            raise InvalidInputError(
                f"Taxon labels are not unique: {', '.join(self._ids)}"
            )
        distances = np.array(distances, dtype=np.float64)
        n = len(self._ids)
        if distances.shape != (n, n):
            raise InvalidInputError(
                f"Distance matrix has shape {distances.shape}, "
                f"but {n} taxa require shape ({n}, {n})"
            )
        if not np.isfinite(distances).all():
            raise InvalidInputError("Distances must be finite")
        if (distances < 0).any():
            raise InvalidInputError("Distances must not be negative")
        if (np.diagonal(distances) != 0).any():
            raise InvalidInputError("The diagonal of the distance matrix must be zero")
        if not np.allclose(distances, distances.T):
            raise InvalidInputError("Distance matrix is not symmetric")
        # Remove asymmetry from floating point errors
        lower = np.tril_indices(n, -1)
        distances[lower] = distances.T[lower]
        distances.setflags(write=False)
        self._matrix = distances
        self._correction = None if correction is None else _as_correction(correction)
        self._index = {id: i for i, id in enumerate(self._ids)}

    @staticmethod
    def from_array(distances, ids=None):
        """
        Create a :class:`DistanceMatrix` from precomputed distances.

        Parameters
        ----------
        distances : ndarray, shape=(n,n), dtype=float
            The distances.
        ids : iterable object of str, optional
            The labels of the taxa.
            By default the taxa are labeled with their index, i.e.
            ``'0'``, ``'1'``, ...

        Returns
        -------
        matrix : DistanceMatrix
            The distance matrix.
        """
        distances = np.asarray(distances)
        if distances.ndim != 2:
            raise InvalidInputError(
                f"Expected a 2-dimensional array, got {distances.ndim} dimensions"
            )
        if ids is None:
            ids = [str(i) for i in range(distances.shape[0])]
        return DistanceMatrix(ids, distances)

    def __copy_create__(self):
        return DistanceMatrix(self._ids, self._matrix, self._correction)

    @property
    def ids(self):
        return self._ids

    @property
    def correction(self):
        return self._correction

    @property
    def matrix(self):
        """
        ndarray, shape=(n,n), dtype=float : The read-only distances.
        """
        return self._matrix

    def index(self, id):
        """
        Get the row/column index of a taxon.

        Parameters
        ----------
        id : str
            The label of the taxon.

        Returns
        -------
        index : int
            The index of the taxon.
        """
        try:
            return self._index[id]
        except KeyError:
            raise KeyError(f"Taxon '{id}' is not part of the distance matrix")

    def get_distance(self, id1, id2):
        """
        Get the distance between two taxa.

        Parameters
        ----------
        id1, id2 : str
            The labels of the taxa.

        Returns
        -------
        distance : float
            The distance between the taxa.
        """
        return float(self._matrix[self.index(id1), self.index(id2)])

    def __len__(self):
        return len(self._ids)

    def __repr__(self):
        """Represent DistanceMatrix as a string for debugging."""
        if self._correction is None:
            correction = "None"
        else:
            correction = f"DistanceCorrection.{self._correction.name}"
        return (
            f"DistanceMatrix({list(self._ids)!r}, "
            f"np.{np.array_repr(self._matrix)}, correction={correction})"
        )

    def __str__(self):
        # Create matrix in NCBI-like format
        width = max(max((len(id) for id in self._ids), default=0), 4) + 1
        lines = [" " * width + " ".join(f"{id:<7}" for id in self._ids).rstrip()]
        for id, row in zip(self._ids, self._matrix):
            lines.append(
                f"{id:<{width}}" + " ".join(f"{value:<7.4f}" for value in row).rstrip()
            )
        return "\n".join(lines)

    def __eq__(self, item):
        if not isinstance(item, DistanceMatrix):
            return False
        if self._ids != item._ids:
            return False
        if self._correction != item._correction:
            return False
        return np.array_equal(self._matrix, item._matrix)


def as_distance_matrix(distances):
    """
    Convert an array-like object into a :class:`DistanceMatrix`, if it is
    not one already.
    """
    if isinstance(distances, DistanceMatrix):
        return distances
    return DistanceMatrix.from_array(distances)


def _as_correction(correction):
    try:
        return DistanceCorrection(correction)
    except ValueError:
        raise InvalidInputError(f"'{correction}' is not a valid distance correction")


def _warn_degenerate(id1, id2):
    warnings.warn(
        f"Sequences '{id1}' and '{id2}' have no comparable site, "
        f"the distance is set to {DEGENERATE_DISTANCE}",
        DegenerateDistanceWarning,
    )
