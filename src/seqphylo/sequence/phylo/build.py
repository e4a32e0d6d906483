# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqphylo.sequence.phylo"
__author__ = "Patrick Kunzmann"
__all__ = ["build_tree"]

from ...error import InvalidInputError
from .nj import neighbor_joining
from .tree import TreeMethod
from .upgma import upgma

_BUILDERS = {
    TreeMethod.NEIGHBOR_JOINING: neighbor_joining,
    TreeMethod.UPGMA: upgma,
}


def build_tree(distances, method=TreeMethod.NEIGHBOR_JOINING):
    """
    Build a tree from a distance matrix with the given method.

    Parameters
    ----------
    distances : DistanceMatrix or ndarray, shape=(n,n)
        Pairwise distance matrix.
    method : TreeMethod or str, optional
        The tree building algorithm, either *neighbor joining*
        (``'nj'``, ``'neighbor-joining'``) or ``'upgma'``.

    Returns
    -------
    tree : Tree
        The tree.

    Raises
    ------
    InsufficientTaxaError
        If less than three taxa are given.

    See Also
    --------
    neighbor_joining
    upgma

    Examples
    --------

    >>> records = [
    ...     SequenceRecord("A", "ACGTACGT"),
    ...     SequenceRecord("B", "ACGTACGA"),
    ...     SequenceRecord("C", "TTTTTTTT"),
    ... ]
    >>> tree = build_tree(distance_matrix(records), "upgma")
    >>> print(tree.to_newick(include_distance=False))
    (C,(A,B));
    """
    try:
        method = TreeMethod(method)
    except ValueError:
        raise InvalidInputError(f"'{method}' is not a valid tree building method")
    return _BUILDERS[method](distances)
