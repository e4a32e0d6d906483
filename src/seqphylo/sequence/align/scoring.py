# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqphylo.sequence.align"
__author__ = "Patrick Kunzmann"
__all__ = [
    "SequenceKind",
    "AlignmentMode",
    "ScoringScheme",
    "DEFAULT_GAP_PENALTY",
    "DEFAULT_MATCH_SCORE",
    "DEFAULT_MISMATCH_SCORE",
    "UNKNOWN_SUBSTITUTION_SCORE",
]

from dataclasses import dataclass
from enum import Enum
import numpy as np
from ...error import InvalidInputError
from .matrix import SubstitutionMatrix


DEFAULT_GAP_PENALTY = -1
DEFAULT_MATCH_SCORE = 2
DEFAULT_MISMATCH_SCORE = -1
# Score of a protein symbol pair, that is not covered by the matrix
UNKNOWN_SUBSTITUTION_SCORE = -4


class SequenceKind(Enum):
    """
    The type of sequences a :class:`ScoringScheme` is made for.

    - **PROTEIN** - Substitution scores are taken from a protein
      substitution matrix (*BLOSUM62* by default).
      Pairs with a positive score count as similar.
    - **NUCLEOTIDE** - A fixed score for matches and mismatches.
    """

    PROTEIN = "protein"
    NUCLEOTIDE = "nucleotide"

    @classmethod
    def _missing_(cls, value):
        return _member_from_str(cls, value)


class AlignmentMode(Enum):
    """
    The kind of optimal alignment.

    - **GLOBAL** - Needleman-Wunsch alignment of the complete sequences.
    - **LOCAL** - Smith-Waterman alignment of the best scoring
      subsequences.
    """

    GLOBAL = "global"
    LOCAL = "local"

    @classmethod
    def _missing_(cls, value):
        return _member_from_str(cls, value)


def _member_from_str(enum_class, value):
    # Accept case-insensitive values and names, e.g. "Local" or "LOCAL"
    if isinstance(value, str):
        for member in enum_class:
            if value.lower() in (member.value, member.name.lower()):
                return member
    return None


@dataclass(frozen=True)
class ScoringScheme:
    """
    The substitution scores and the linear gap penalty used for
    pairwise alignments.

    Instances are usually created via :meth:`protein()` or
    :meth:`nucleotide()`.
    The scheme itself is independent of any alphabet:
    :meth:`substitution_matrix()` creates the symbol code indexed
    :class:`SubstitutionMatrix` for the alphabet of the sequences
    at hand.

    Parameters
    ----------
    kind : SequenceKind or str
        The type of sequences this scheme scores.
    gap_penalty : int, optional
        The penalty for each gap position, must not be positive.
    match, mismatch : int, optional
        The scores for identical and different symbols.
        Only used for nucleotide schemes.
    matrix : SubstitutionMatrix, optional
        The protein substitution matrix.
        Symbol pairs, that are not covered by the matrix, obtain
        :data:`UNKNOWN_SUBSTITUTION_SCORE`.
        By default *BLOSUM62* is used.
        Only used for protein schemes.

    Examples
    --------

    >>> scheme = ScoringScheme.nucleotide()
    >>> print(scheme.substitution("A", "A"), scheme.substitution("A", "C"))
    2 -1
    >>> scheme = ScoringScheme.protein()
    >>> print(scheme.substitution("W", "W"), scheme.substitution("W", "J"))
    11 -4
    """

    kind: SequenceKind
    gap_penalty: int = DEFAULT_GAP_PENALTY
    match: int = DEFAULT_MATCH_SCORE
    mismatch: int = DEFAULT_MISMATCH_SCORE
    matrix: SubstitutionMatrix = None

    def __post_init__(self):
        try:
            kind = SequenceKind(self.kind)
        except ValueError:
            raise InvalidInputError(f"'{self.kind}' is not a valid sequence kind")
        # Normalize string input into the enum
        object.__setattr__(self, "kind", kind)
        for name in ("gap_penalty", "match", "mismatch"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidInputError(
                    f"'{name}' must be an integer, got {type(value).__name__}"
                )
        if self.gap_penalty > 0:
            raise InvalidInputError(
                f"Gap penalty must not be positive, got {self.gap_penalty}"
            )
        if self.matrix is not None and not isinstance(
            self.matrix, SubstitutionMatrix
        ):
            raise InvalidInputError("'matrix' must be a SubstitutionMatrix")

    @staticmethod
    def protein(gap_penalty=DEFAULT_GAP_PENALTY, matrix=None):
        """
        Create a scheme for protein sequences.

        Parameters
        ----------
        gap_penalty : int, optional
            The penalty for each gap position.
        matrix : SubstitutionMatrix, optional
            The substitution matrix. By default *BLOSUM62*.

        Returns
        -------
        scheme : ScoringScheme
            The protein scoring scheme.
        """
        return ScoringScheme(SequenceKind.PROTEIN, gap_penalty, matrix=matrix)

    @staticmethod
    def nucleotide(
        match=DEFAULT_MATCH_SCORE,
        mismatch=DEFAULT_MISMATCH_SCORE,
        gap_penalty=DEFAULT_GAP_PENALTY,
    ):
        """
        Create a scheme for nucleotide sequences.

        Parameters
        ----------
        match, mismatch : int, optional
            The scores for identical and different bases.
        gap_penalty : int, optional
            The penalty for each gap position.

        Returns
        -------
        scheme : ScoringScheme
            The nucleotide scoring scheme.
        """
        return ScoringScheme(SequenceKind.NUCLEOTIDE, gap_penalty, match, mismatch)

    def substitution_matrix(self, alphabet):
        """
        Create the substitution matrix of this scheme for the given
        alphabet.

        Parameters
        ----------
        alphabet : LetterAlphabet
            The alphabet of the sequences to be aligned.
            It is used for both dimensions of the matrix.

        Returns
        -------
        matrix : SubstitutionMatrix
            The symbol code indexed substitution matrix.
        """
        scores = _SCORE_FUNCTIONS[self.kind](self, alphabet)
        return SubstitutionMatrix(alphabet, alphabet, scores)

    def substitution(self, symbol1, symbol2):
        """
        Get the substitution score of two symbols.

        Parameters
        ----------
        symbol1, symbol2 : str
            The aligned symbols.

        Returns
        -------
        score : int
            The substitution score.
        """
        if self.kind == SequenceKind.NUCLEOTIDE:
            return self.match if symbol1 == symbol2 else self.mismatch
        matrix = self._protein_matrix()
        if symbol1 in matrix.get_alphabet1() and symbol2 in matrix.get_alphabet2():
            return matrix.get_score(symbol1, symbol2)
        return UNKNOWN_SUBSTITUTION_SCORE

    def counts_similarity(self):
        """
        Check whether non-identical symbol pairs with a positive
        substitution score count as similar.

        Returns
        -------
        counts_similarity : bool
            True for protein schemes.
        """
        return self.kind == SequenceKind.PROTEIN

    def _protein_matrix(self):
        if self.matrix is None:
            return SubstitutionMatrix.std_protein_matrix()
        return self.matrix


def _protein_scores(scheme, alphabet):
    matrix = scheme._protein_matrix()
    alph1 = matrix.get_alphabet1()
    alph2 = matrix.get_alphabet2()
    symbols = alphabet.get_symbols()
    # Position of each symbol in the matrix alphabets, -1 if absent
    pos1 = np.array([alph1.encode(s) if s in alph1 else -1 for s in symbols])
    pos2 = np.array([alph2.encode(s) if s in alph2 else -1 for s in symbols])
    scores = np.full(
        (len(symbols), len(symbols)), UNKNOWN_SUBSTITUTION_SCORE, dtype=np.int32
    )
    known1 = np.where(pos1 != -1)[0]
    known2 = np.where(pos2 != -1)[0]
    scores[np.ix_(known1, known2)] = matrix.score_matrix()[
        np.ix_(pos1[known1], pos2[known2])
    ]
    return scores


def _nucleotide_scores(scheme, alphabet):
    size = len(alphabet)
    scores = np.full((size, size), scheme.mismatch, dtype=np.int32)
    np.fill_diagonal(scores, scheme.match)
    return scores


_SCORE_FUNCTIONS = {
    SequenceKind.PROTEIN: _protein_scores,
    SequenceKind.NUCLEOTIDE: _nucleotide_scores,
}
