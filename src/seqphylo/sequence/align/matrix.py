# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqphylo.sequence.align"
__author__ = "Patrick Kunzmann"
__all__ = ["SubstitutionMatrix"]

import numpy as np
from ..alphabet import LetterAlphabet


class SubstitutionMatrix(object):
    """
    A :class:`SubstitutionMatrix` maps each possible pairing of a symbol
    of a first alphabet with a symbol of a second alphabet to a score
    (integer).

    The class uses a 2-D (m x n) :class:`ndarray`
    (dtype=:attr:`numpy.int32`),
    where each element stores the score for a symbol pairing, indexed
    by the symbol codes of the respective symbols in an *m*-length
    alphabet 1 and an *n*-length alphabet 2.

    There are 2 ways to creates instances:

    At first a 2-D :class:`ndarray` containing the scores can be
    directly provided.

    Secondly a dictionary can be provided, where the keys are pairing
    tuples and values are the corresponding scores.
    The pairing tuples consist of a symbol of alphabet 1 as first
    element and a symbol of alphabet 2 as second element. Parings have
    to be provided for each possible combination.

    The *BLOSUM62* matrix for the 20 standard amino acids is available
    via :meth:`std_protein_matrix()`.

    Objects of this class are immutable.

    Parameters
    ----------
    alphabet1 : LetterAlphabet, length=m
        The first alphabet of the substitution matrix.
    alphabet2 : LetterAlphabet, length=n
        The second alphabet of the substitution matrix.
    score_matrix : ndarray, shape=(m,n) or dict
        Either a symbol code indexed :class:`ndarray` containing the
        scores or a dictionary mapping the symbol pairing to scores.

    Raises
    ------
    KeyError
        If the matrix dictionary misses a symbol given in the alphabet.

    Examples
    --------

    Creating a matrix via a matrix dictionary:

    >>> alph1 = LetterAlphabet("AC")
    >>> alph2 = LetterAlphabet("XYZ")
    >>> matrix_dict = {("A","X"):5,  ("A","Y"):10, ("A","Z"):15,
    ...                ("C","X"):42, ("C","Y"):42, ("C","Z"):42}
    >>> matrix = SubstitutionMatrix(alph1, alph2, matrix_dict)
    >>> print(matrix.score_matrix())
    [[ 5 10 15]
     [42 42 42]]
    >>> print(matrix.get_score("A", "Y"))
    10
    """

    def __init__(self, alphabet1, alphabet2, score_matrix):
        self._alph1 = alphabet1
        self._alph2 = alphabet2
        if isinstance(score_matrix, dict):
            self._fill_with_matrix_dict(score_matrix)
        elif isinstance(score_matrix, np.ndarray):
            alph_shape = (len(alphabet1), len(alphabet2))
            if score_matrix.shape != alph_shape:
                raise ValueError(
                    f"Matrix has shape {score_matrix.shape}, "
                    f"but {alph_shape} is required"
                )
            self._matrix = score_matrix.astype(np.int32)
        else:
            raise TypeError("Matrix must be either a dictionary or an 2-D ndarray")
        # This class is immutable and has a getter function for the
        # score matrix -> make the score matrix read-only
        self._matrix.setflags(write=False)

    def __repr__(self):
        """Represent SubstitutionMatrix as a string for debugging."""
        return (
            f"SubstitutionMatrix({self._alph1!r}, {self._alph2!r}, "
            f"np.{np.array_repr(self._matrix)})"
        )

    def __eq__(self, item):
        if not isinstance(item, SubstitutionMatrix):
            return False
        if self._alph1 != item.get_alphabet1():
            return False
        if self._alph2 != item.get_alphabet2():
            return False
        if not np.array_equal(self.score_matrix(), item.score_matrix()):
            return False
        return True

    def __ne__(self, item):
        return not self == item

    def _fill_with_matrix_dict(self, matrix_dict):
        self._matrix = np.zeros((len(self._alph1), len(self._alph2)), dtype=np.int32)
        for i, sym1 in enumerate(self._alph1):
            for j, sym2 in enumerate(self._alph2):
                self._matrix[i, j] = int(matrix_dict[sym1, sym2])

    def get_alphabet1(self):
        """
        Get the first alphabet.

        Returns
        -------
        alphabet : LetterAlphabet
            The first alphabet.
        """
        return self._alph1

    def get_alphabet2(self):
        """
        Get the second alphabet.

        Returns
        -------
        alphabet : LetterAlphabet
            The second alphabet.
        """
        return self._alph2

    def score_matrix(self):
        """
        Get the 2-D :class:`ndarray` containing the score values.

        Returns
        -------
        matrix : ndarray, shape=(m,n), dtype=np.int32
            The symbol code indexed score matrix.
            The array is read-only.
        """
        return self._matrix

    def get_score(self, symbol1, symbol2):
        """
        Get the substitution score of two symbols.

        Parameters
        ----------
        symbol1, symbol2 : str
            Symbols to be aligned.

        Returns
        -------
        score : int
            The substitution / alignment score.
        """
        code1 = self._alph1.encode(symbol1)
        code2 = self._alph2.encode(symbol2)
        return int(self._matrix[code1, code2])

    def __str__(self):
        # Create matrix in NCBI format
        string = " "
        for symbol in self._alph2:
            string += f" {symbol:>3}"
        string += "\n"
        for i, symbol in enumerate(self._alph1):
            string += f"{symbol:>1}"
            for j in range(len(self._alph2)):
                string += f" {int(self._matrix[i, j]):>3d}"
            string += "\n"
        # Remove terminal line break
        return string[:-1]

    @staticmethod
    def dict_from_str(string):
        """
        Create a matrix dictionary from a string in NCBI matrix format.

        Symbols of the first alphabet are taken from the left column,
        symbols of the second alphabet are taken from the top row.

        The keys of the dictionary consist of tuples containing the
        aligned symbols and the values are the corresponding scores.

        Returns
        -------
        matrix_dict : dict
            A dictionary representing the substitution matrix.
        """
        lines = [line.strip() for line in string.split("\n")]
        lines = [line for line in lines if len(line) != 0 and line[0] != "#"]
        symbols1 = [line.split()[0] for line in lines[1:]]
        symbols2 = lines[0].split()
        scores = np.array([line.split()[1:] for line in lines[1:]]).astype(int)

        matrix_dict = {}
        for i in range(len(symbols1)):
            for j in range(len(symbols2)):
                matrix_dict[(symbols1[i], symbols2[j])] = scores[i, j]
        return matrix_dict

    @staticmethod
    def std_protein_matrix():
        """
        Get the default :class:`SubstitutionMatrix` for protein sequence
        alignments, which is BLOSUM62 for the 20 standard amino acids.

        Returns
        -------
        matrix : SubstitutionMatrix
            Default matrix.
        """
        return _matrix_blosum62


# BLOSUM62 from NCBI, restricted to the 20 standard amino acids
_BLOSUM62 = """
#  Matrix made by matblas from blosum62.iij
   A  R  N  D  C  Q  E  G  H  I  L  K  M  F  P  S  T  W  Y  V
A  4 -1 -2 -2  0 -1 -1  0 -2 -1 -1 -1 -1 -2 -1  1  0 -3 -2  0
R -1  5  0 -2 -3  1  0 -2  0 -3 -2  2 -1 -3 -2 -1 -1 -3 -2 -3
N -2  0  6  1 -3  0  0  0  1 -3 -3  0 -2 -3 -2  1  0 -4 -2 -3
D -2 -2  1  6 -3  0  2 -1 -1 -3 -4 -1 -3 -3 -1  0 -1 -4 -3 -3
C  0 -3 -3 -3  9 -3 -4 -3 -3 -1 -1 -3 -1 -2 -3 -1 -1 -2 -2 -1
Q -1  1  0  0 -3  5  2 -2  0 -3 -2  1  0 -3 -1  0 -1 -2 -1 -2
E -1  0  0  2 -4  2  5 -2  0 -3 -3  1 -2 -3 -1  0 -1 -3 -2 -2
G  0 -2  0 -1 -3 -2 -2  6 -2 -4 -4 -2 -3 -3 -2  0 -2 -2 -3 -3
H -2  0  1 -1 -3  0  0 -2  8 -3 -3 -1 -2 -1 -2 -1 -2 -2  2 -3
I -1 -3 -3 -3 -1 -3 -3 -4 -3  4  2 -3  1  0 -3 -2 -1 -3 -1  3
L -1 -2 -3 -4 -1 -2 -3 -4 -3  2  4 -2  2  0 -3 -2 -1 -2 -1  1
K -1  2  0 -1 -3  1  1 -2 -1 -3 -2  5 -1 -3 -1  0 -1 -3 -2 -2
M -1 -1 -2 -3 -1  0 -2 -3 -2  1  2 -1  5  0 -2 -1 -1 -1 -1  1
F -2 -3 -3 -3 -2 -3 -3 -3 -1  0  0 -3  0  6 -4 -2 -2  1  3 -1
P -1 -2 -2 -1 -3 -1 -1 -2 -2 -3 -3 -1 -2 -4  7 -1 -1 -4 -3 -2
S  1 -1  1  0 -1  0  0  0 -1 -2 -2  0 -1 -2 -1  4  1 -3 -2 -2
T  0 -1  0 -1 -1 -1 -1 -2 -2 -1 -1 -1 -1 -2 -1  1  5 -2 -2  0
W -3 -3 -4 -4 -2 -2 -3 -2 -2 -3 -2 -3 -1  1 -4 -3 -2 11  2 -3
Y -2 -2 -2 -3 -2 -1 -2 -3  2 -1 -1 -2 -1  3 -3 -2 -2  2  7 -1
V  0 -3 -3 -3 -1 -2 -2 -3 -3  3  1 -2  1 -1 -2 -2  0 -3 -1  4
"""

_amino_acids = LetterAlphabet("ARNDCQEGHILKMFPSTWYV")
_matrix_blosum62 = SubstitutionMatrix(
    _amino_acids, _amino_acids, SubstitutionMatrix.dict_from_str(_BLOSUM62)
)
