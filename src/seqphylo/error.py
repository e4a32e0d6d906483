# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This module contains the errors and warnings shared by the
:mod:`seqphylo.sequence` subpackages.
"""

__name__ = "seqphylo"
__author__ = "Patrick Kunzmann"
__all__ = [
    "InvalidInputError",
    "InsufficientTaxaError",
    "IncomparableTreesError",
    "InvalidNewickError",
    "DegenerateDistanceWarning",
]


class InvalidInputError(ValueError):
    """
    Indicates that the input of an alignment is not suitable,
    e.g. an empty sequence.
    """

    pass


class InsufficientTaxaError(ValueError):
    """
    Indicates that too few taxa were given to build a tree.
    """

    pass


class IncomparableTreesError(ValueError):
    """
    Indicates that two trees cannot be compared, since at least one of
    them has too few leaves to define bipartitions.
    """

    pass


class InvalidNewickError(ValueError):
    """
    Indicates that a *Newick* string is malformed.
    """

    pass


class DegenerateDistanceWarning(UserWarning):
    """
    Indicates that two sequences have no comparable site, so that the
    maximum distance is used instead.
    """

    pass
