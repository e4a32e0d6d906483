# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
A subpackage for handling sequences.

A :class:`SequenceRecord` is the unit of data this package works on:
an identifier, the sequence text and an optional description.
Records are supplied already cleaned, i.e. in uppercase and without
whitespace; :meth:`SequenceRecord.clean()` performs this normalization
for raw text.

For the numeric work, e.g. dynamic programming in
:mod:`seqphylo.sequence.align`, the letters of a sequence are translated
into *symbol codes* by a :class:`LetterAlphabet`.
The symbol code of a letter is its index in the alphabet, so that
symbol codes can directly be used as indices of a substitution matrix.

The subpackages :mod:`seqphylo.sequence.align` and
:mod:`seqphylo.sequence.phylo` build on these records for pairwise
alignments and distance based phylogenetic trees, respectively.
"""

__name__ = "seqphylo.sequence"
__author__ = "Patrick Kunzmann"

from .alphabet import *
from .record import *
