# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqphylo.sequence"
__author__ = "Patrick Kunzmann"
__all__ = ["LetterAlphabet", "AlphabetError"]

import string
import numpy as np


class LetterAlphabet(object):
    """
    A :class:`LetterAlphabet` defines a set of single letter symbols
    and handles the encoding of letters into symbol codes.

    The symbol code of a letter is the index of that letter in the
    symbol list.
    The alphabet size is limited to the 94 printable, non-whitespace
    ASCII characters.
    Internally the symbols are saved as :class:`ndarray` of bytes, and
    encoding uses a lookup table indexed by the character value, so that
    an entire sequence can be encoded at once.

    Objects of this class are immutable.

    Parameters
    ----------
    symbols : iterable object or str
        The letters, that are allowed in this alphabet.

    Examples
    --------

    >>> alph = LetterAlphabet("ACGT")
    >>> print(alph.encode("G"))
    2
    >>> print(alph.encode_multiple("GATTACA"))
    [2 0 3 3 0 1 0]
    >>> alph = LetterAlphabet.from_sequences("TTAG", "CAT")
    >>> print(alph.get_symbols())
    ('A', 'C', 'G', 'T')
    """

    PRINTABLES = (string.digits + string.ascii_letters + string.punctuation).encode(
        "ASCII"
    )

    def __init__(self, symbols):
        if len(symbols) == 0:
            raise ValueError("Symbol list is empty")
        byte_symbols = []
        for symbol in symbols:
            if not isinstance(symbol, (str, bytes)) or len(symbol) != 1:
                raise ValueError(f"Symbol '{symbol}' is not a single letter")
            if isinstance(symbol, str):
                symbol = symbol.encode("ASCII")
            if symbol not in LetterAlphabet.PRINTABLES:
                raise ValueError(
                    f"Symbol {repr(symbol)} is not printable or whitespace"
                )
            byte_symbols.append(symbol)
        if len(set(byte_symbols)) != len(byte_symbols):
            raise ValueError("Symbol list contains duplicates")
        # Direct 'astype' conversion is not allowed by numpy
        # -> frombuffer()
        self._symbols = np.frombuffer(
            np.array(byte_symbols, dtype="|S1"), dtype=np.ubyte
        )
        # Maps each byte value to its symbol code, -1 for absent symbols
        self._lookup = np.full(256, -1, dtype=np.int64)
        self._lookup[self._symbols] = np.arange(len(self._symbols))

    @staticmethod
    def from_sequences(*sequences):
        """
        Create the smallest alphabet containing all letters of the given
        sequences.

        The letters are sorted by their character value.

        Parameters
        ----------
        *sequences : str
            The sequences.

        Returns
        -------
        alphabet : LetterAlphabet
            The alphabet.
        """
        letters = sorted(set("".join(sequences)))
        return LetterAlphabet(letters)

    def __repr__(self):
        """Represent LetterAlphabet as a string for debugging."""
        return f"LetterAlphabet({self.get_symbols()})"

    def get_symbols(self):
        """
        Get the symbols in the alphabet.

        Returns
        -------
        symbols : tuple of str
            The symbols.
        """
        return tuple(
            symbol.decode("ASCII")
            for symbol in np.frombuffer(self._symbols, dtype="|S1")
        )

    def encode(self, symbol):
        """
        Use the alphabet to encode a letter.

        Parameters
        ----------
        symbol : str
            The letter to encode into a symbol code.

        Returns
        -------
        code : int
            The symbol code of `symbol`.

        Raises
        ------
        AlphabetError
            If `symbol` is not in the alphabet.
        """
        if not isinstance(symbol, (str, bytes)) or len(symbol) != 1:
            raise AlphabetError(f"Symbol '{symbol}' is not a single letter")
        value = ord(symbol)
        code = self._lookup[value] if value < 256 else -1
        if code == -1:
            raise AlphabetError(f"Symbol {repr(symbol)} is not in the alphabet")
        return int(code)

    def encode_multiple(self, symbols):
        """
        Encode an entire sequence.

        Parameters
        ----------
        symbols : str or bytes
            The letters to encode.

        Returns
        -------
        code : ndarray, dtype=int64
            The sequence code.

        Raises
        ------
        AlphabetError
            If any letter is not in the alphabet.
        """
        if isinstance(symbols, str):
            try:
                symbols = symbols.encode("ASCII")
            except UnicodeEncodeError:
                raise AlphabetError("Sequence contains non-ASCII symbols")
        values = np.frombuffer(symbols, dtype=np.ubyte)
        code = self._lookup[values]
        invalid = np.where(code == -1)[0]
        if len(invalid) > 0:
            symbol = chr(values[invalid[0]])
            raise AlphabetError(f"Symbol {repr(symbol)} is not in the alphabet")
        return code

    def __len__(self):
        return len(self._symbols)

    def __iter__(self):
        return iter(self.get_symbols())

    def __contains__(self, symbol):
        if not isinstance(symbol, (str, bytes)) or len(symbol) != 1:
            return False
        value = ord(symbol)
        return value < 256 and self._lookup[value] != -1

    def __hash__(self):
        return hash(self.get_symbols())

    def __eq__(self, item):
        if item is self:
            return True
        if not isinstance(item, LetterAlphabet):
            return False
        return self.get_symbols() == item.get_symbols()


class AlphabetError(Exception):
    """
    This exception is raised, when a code or a symbol is not in a
    :class:`LetterAlphabet`.
    """

    pass
