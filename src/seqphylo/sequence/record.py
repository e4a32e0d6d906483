# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqphylo.sequence"
__author__ = "Patrick Kunzmann"
__all__ = ["SequenceRecord", "split_record"]

import re
from dataclasses import dataclass
from ..error import InvalidInputError


_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class SequenceRecord:
    """
    An identified sequence, as handed to the alignment and tree building
    functions.

    The record is immutable.
    The sequence is expected to be cleaned by the caller, i.e. it is
    in uppercase and does not contain whitespace.
    :meth:`clean()` creates a record from raw text.

    Parameters
    ----------
    id : str
        The identifier of the sequence, used e.g. as leaf name in trees.
    sequence : str
        The residue or base letters.
    description : str, optional
        A free text description.

    Examples
    --------

    >>> record = SequenceRecord.clean("seq1", "acgt acgt\\nacg")
    >>> print(record.sequence)
    ACGTACGTACG
    >>> print(len(record))
    11
    """

    id: str
    sequence: str
    description: str = None

    def __post_init__(self):
        if not isinstance(self.id, str) or len(self.id) == 0:
            raise ValueError("Sequence identifier must be a non-empty string")
        if not isinstance(self.sequence, str):
            raise TypeError(
                f"Expected 'str' as sequence, got '{type(self.sequence).__name__}'"
            )

    @staticmethod
    def clean(id, sequence, description=None):
        """
        Create a record from raw sequence text by removing all
        whitespace and converting the letters to uppercase.

        Parameters
        ----------
        id : str
            The identifier of the sequence.
        sequence : str
            The raw sequence text.
        description : str, optional
            A free text description.

        Returns
        -------
        record : SequenceRecord
            The record containing the normalized sequence.
        """
        return SequenceRecord(
            id, _WHITESPACE.sub("", sequence).upper(), description
        )

    def __len__(self):
        return len(self.sequence)

    def __str__(self):
        return self.sequence


def split_record(sequence, default_id):
    """
    Get the identifier and the sequence text of a record or plain
    sequence string.

    Parameters
    ----------
    sequence : SequenceRecord or str
        The sequence.
    default_id : str
        The identifier used for plain strings.

    Returns
    -------
    id, text : str
        The identifier and the sequence text.
    """
    if isinstance(sequence, SequenceRecord):
        return sequence.id, sequence.sequence
    if isinstance(sequence, str):
        return default_id, sequence
    raise InvalidInputError(
        f"Expected 'str' or 'SequenceRecord', got '{type(sequence).__name__}'"
    )
