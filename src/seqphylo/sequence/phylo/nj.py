# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqphylo.sequence.phylo"
__author__ = "Patrick Kunzmann"
__all__ = ["neighbor_joining"]

import numpy as np
from ...error import InsufficientTaxaError
from .distance import as_distance_matrix
from .tree import NodeTable, TreeMethod


def neighbor_joining(distances):
    """
    Perform hierarchical clustering using the
    *neighbor joining* algorithm. [1]_ [2]_

    In contrast to UPGMA this algorithm does not assume a constant
    evolution rate.
    The resulting tree is considered to be unrooted:
    The last three remaining nodes are joined at a trifurcating root,
    so that a tree of *n* taxa has *2n-2* nodes.

    Parameters
    ----------
    distances : DistanceMatrix or ndarray, shape=(n,n)
        Pairwise distance matrix.
        For an array, the taxa are labeled with their index.

    Returns
    -------
    tree : Tree
        A rooted tree.
        The leaves are identified as ``leaf_<i>``, where *i* refers to
        the row of the distance matrix, and are named after the taxa.
        Internal nodes are identified as ``node_<i>`` in the order of
        their creation, the root as ``root_<i>``.

    Raises
    ------
    InsufficientTaxaError
        If less than three taxa are given.

    Notes
    -----
    In each step the pair of active nodes *i*, *j* minimizing

    .. math::

        Q_{ij} = (r-2) D_{ij} - \\sum_k D_{ik} - \\sum_k D_{jk}

    is joined, where *r* is the number of active nodes and the sums run
    over all active nodes *k*, including *i* and *j*.
    The branch lengths of the joined nodes are calculated from the sums
    over the remaining active nodes, i.e. with :math:`D_{ij}` removed.
    Ties are resolved by taking the first pair in row-major order of
    the active nodes, whereby newly joined nodes are appended to the
    end.
    Negative branch lengths are set to 0 in the resulting tree, but the
    unmodified values are used to update the distance matrix.

    References
    ----------

    .. [1] N Saitou, M Nei,
       "The neighbor-joining method: a new method for reconstructing
       phylogenetic trees."
       Mol Biol Evol, 4, 406-425 (1987).
    .. [2] JA Studier, KJ Keppler,
       "A note on the neighbor-joining algorithm of Saitou and Nei."
       Mol Biol Evol, 5, 729-731 (1988).

    Examples
    --------

    >>> distances = np.array([
    ...     [0, 1, 7, 7, 9],
    ...     [1, 0, 7, 6, 8],
    ...     [7, 7, 0, 2, 4],
    ...     [7, 6, 2, 0, 3],
    ...     [9, 8, 4, 3, 0],
    ... ])
    >>> tree = neighbor_joining(distances)
    >>> print(tree.to_newick(include_distance=False))
    (3,4,(2,(0,1)));
    """
    matrix = as_distance_matrix(distances)
    n = len(matrix)
    if n < 3:
        raise InsufficientTaxaError(
            f"Neighbor joining requires at least 3 taxa, "
            f"got {n} ({', '.join(matrix.ids)})"
        )

    table = NodeTable()
    # Working matrix with space for all internal nodes
    dist = np.zeros((2 * n, 2 * n), dtype=np.float64)
    dist[:n, :n] = matrix.matrix
    # Active nodes as (node ID, row in the working matrix)
    active = [(table.add_leaf(id), i) for i, id in enumerate(matrix.ids)]
    next_row = n

    while len(active) > 3:
        r = len(active)
        rows = np.array([row for _, row in active])
        sub = dist[np.ix_(rows, rows)]
        sums = np.sum(sub, axis=1)
        q = (r - 2) * sub - sums[:, np.newaxis] - sums[np.newaxis, :]
        # Only pairs i < j are considered,
        # argmin() takes the first minimum in row-major order
        upper_i, upper_j = np.triu_indices(r, k=1)
        best = np.argmin(q[upper_i, upper_j])
        i = int(upper_i[best])
        j = int(upper_j[best])

        dist_ij = sub[i, j]
        # Sums over all other active nodes
        rest_i = sums[i] - dist_ij
        rest_j = sums[j] - dist_ij
        length_i = 0.5 * (dist_ij + (rest_i - rest_j) / (r - 2))
        length_j = dist_ij - length_i
        new_id = table.join(
            [active[i][0], active[j][0]],
            [_clamp(length_i), _clamp(length_j)],
        )

        new_dist = 0.5 * (sub[i] + sub[j] - dist_ij)
        dist[next_row, rows] = new_dist
        dist[rows, next_row] = new_dist
        active = [node for k, node in enumerate(active) if k not in (i, j)]
        active.append((new_id, next_row))
        next_row += 1

    # Join the final three nodes at the root
    (id_a, row_a), (id_b, row_b), (id_c, row_c) = active
    dist_ab = dist[row_a, row_b]
    dist_ac = dist[row_a, row_c]
    dist_bc = dist[row_b, row_c]
    length_a = 0.5 * (dist_ab + dist_ac - dist_bc)
    length_b = dist_ab - length_a
    length_c = dist_ac - length_a
    table.join(
        [id_a, id_b, id_c],
        [_clamp(length_a), _clamp(length_b), _clamp(length_c)],
        prefix="root",
    )
    return table.to_tree(TreeMethod.NEIGHBOR_JOINING)


def _clamp(length):
    # Avoid negative zero
    return float(length) if length > 0 else 0.0
