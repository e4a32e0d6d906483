# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This subpackage provides functionality for pairwise sequence
alignments.

The two central classes involved are :class:`ScoringScheme` and
:class:`Alignment`:

Every alignment requires a :class:`ScoringScheme` that provides the
similarity scores for each symbol combination and the gap penalty.
Protein schemes take their scores from a :class:`SubstitutionMatrix`
(*BLOSUM62* by default), nucleotide schemes use fixed match and
mismatch scores.
Since the scheme is independent of an alphabet, sequences with
arbitrary letters can be aligned:
A symbol pair not covered by the protein substitution matrix simply
obtains a low default score.

An alignment cannot be directly represented as a pair of strings,
since a gap indicates the absence of any symbol.
Instead, :func:`align_optimal()` returns an :class:`Alignment`
instance.
These objects contain the original sequences and a trace, that
describes which positions (indices) in the sequences are aligned,
as well as the alignment score.
The gapped strings, the identity, similarity and gap percentages are
derived from it.

:func:`dotplot()` provides an alignment free comparison of two
sequences, that finds all similar windows and long diagonal runs of
identical symbols.
"""

__name__ = "seqphylo.sequence.align"
__author__ = "Patrick Kunzmann"

from .alignment import *
from .dotplot import *
from .matrix import *
from .pairwise import *
from .scoring import *
