# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqphylo.sequence.phylo"
__author__ = "Patrick Kunzmann"
__all__ = ["upgma"]

import numpy as np
from ...error import InsufficientTaxaError
from .distance import as_distance_matrix
from .tree import NodeTable, TreeMethod


def upgma(distances):
    """
    Perform hierarchical clustering using the
    *unweighted pair group method with arithmetic mean* (UPGMA).

    This algorithm produces leaf nodes with the same distance to the
    root node, i.e. an ultrametric tree.
    In the context of evolution this means a constant evolution rate
    (molecular clock).

    Parameters
    ----------
    distances : DistanceMatrix or ndarray, shape=(n,n)
        Pairwise distance matrix.
        For an array, the taxa are labeled with their index.

    Returns
    -------
    tree : Tree
        A rooted binary tree with *2n-1* nodes.
        The leaves are identified as ``leaf_<i>``, where *i* refers to
        the row of the distance matrix, and are named after the taxa.
        Internal nodes are identified as ``node_<i>`` in the order of
        their creation, hence the last node is the root.

    Raises
    ------
    InsufficientTaxaError
        If less than three taxa are given.

    Notes
    -----
    The pair of clusters with the minimum distance is merged in each
    step, ties are resolved by taking the first pair in row-major
    order of the remaining clusters, whereby the merged cluster is
    appended to the end.
    The distance of the merged cluster to any other cluster is the
    mean of the distances of its members, weighted by cluster size.

    Examples
    --------

    >>> distances = np.array([
    ...     [ 0,  2, 16, 16, 16],
    ...     [ 2,  0, 16, 16, 16],
    ...     [16, 16,  0,  4,  8],
    ...     [16, 16,  4,  0,  8],
    ...     [16, 16,  8,  8,  0],
    ... ])
    >>> tree = upgma(distances)
    >>> print(tree)
    ((0:1.0,1:1.0):7.0,(4:4.0,(2:2.0,3:2.0):2.0):4.0):0.0;
    """
    matrix = as_distance_matrix(distances)
    n = len(matrix)
    if n < 3:
        raise InsufficientTaxaError(
            f"UPGMA requires at least 3 taxa, got {n} ({', '.join(matrix.ids)})"
        )

    table = NodeTable()
    # The working matrix shrinks with each merge,
    # the merged cluster takes the last row
    dist = np.array(matrix.matrix, dtype=np.float64)
    # Clusters as (node ID, height, number of leaves)
    clusters = [(table.add_leaf(id), 0.0, 1) for id in matrix.ids]

    while len(clusters) > 1:
        r = len(clusters)
        upper_i, upper_j = np.triu_indices(r, k=1)
        best = np.argmin(dist[upper_i, upper_j])
        i = int(upper_i[best])
        j = int(upper_j[best])

        height = dist[i, j] / 2
        id_i, height_i, size_i = clusters[i]
        id_j, height_j, size_j = clusters[j]
        new_id = table.join(
            [id_i, id_j],
            [_clamp(height - height_i), _clamp(height - height_j)],
        )

        new_dist = (dist[i] * size_i + dist[j] * size_j) / (size_i + size_j)
        keep = [k for k in range(r) if k not in (i, j)]
        merged = np.zeros((r - 1, r - 1), dtype=np.float64)
        merged[:-1, :-1] = dist[np.ix_(keep, keep)]
        merged[-1, :-1] = new_dist[keep]
        merged[:-1, -1] = new_dist[keep]
        dist = merged
        clusters = [clusters[k] for k in keep]
        clusters.append((new_id, height, size_i + size_j))

    return table.to_tree(TreeMethod.UPGMA)


def _clamp(length):
    # Rounding errors may produce tiny negative lengths
    return float(length) if length > 0 else 0.0
