# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqphylo.sequence.phylo"
__author__ = "Patrick Kunzmann"
__all__ = [
    "TreeSummary",
    "TreeDifference",
    "BranchLengthComparison",
    "TreeComparison",
    "get_bipartitions",
    "robinson_foulds",
    "compare_trees",
]

from dataclasses import dataclass
import numpy as np
from ...error import IncomparableTreesError

# Minimum absolute difference of total tree lengths,
# that is reported as difference
_LENGTH_DIFFERENCE_THRESHOLD = 0.1


@dataclass(frozen=True)
class TreeSummary:
    """
    Basic information about a compared tree.

    Attributes
    ----------
    method : TreeMethod or None
        The algorithm the tree was built with.
    leaf_count : int
        The number of leaves.
    total_length : float
        The sum of all branch lengths.
    """

    method: object
    leaf_count: int
    total_length: float


@dataclass(frozen=True)
class TreeDifference:
    """
    A noteworthy difference between two compared trees.

    Attributes
    ----------
    kind : str
        Either ``'topology'`` or ``'branch_length'``.
    description : str
        Human readable description of the difference.
    affected_taxa : tuple of str
        The leaves involved in the difference.
    significance : str
        ``'high'``, ``'medium'`` or ``'low'``.
    """

    kind: str
    description: str
    affected_taxa: tuple
    significance: str


@dataclass(frozen=True)
class BranchLengthComparison:
    """
    Comparison of the branch lengths of two topologically identical
    trees, taken pairwise in node creation order.

    Attributes
    ----------
    correlation : float
        The *Pearson* correlation coefficient.
        0, if any of both trees has uniform branch lengths.
    rmse : float
        The root mean square deviation.
    mean_difference : float
        The mean of the branch length differences
        (first tree minus second tree).
    """

    correlation: float
    rmse: float
    mean_difference: float


@dataclass(frozen=True)
class TreeComparison:
    """
    The result of :func:`compare_trees()`.

    Attributes
    ----------
    tree1, tree2 : TreeSummary
        Basic information about the compared trees.
    robinson_foulds_distance : int
        The number of bipartitions present in only one of the trees.
    normalized_rf : float
        The *Robinson-Foulds* distance divided by its maximum for the
        number of leaves, in the range *[0, 1]*.
    shared_bipartitions : int
        The number of bipartitions present in both trees.
    total_bipartitions : int
        The number of distinct bipartitions in both trees.
    topological_similarity : float
        The fraction of bipartitions, that are shared, in the range
        *[0, 1]*.
    branch_length_comparison : BranchLengthComparison or None
        The comparison of branch lengths, only available for trees
        with the same topology and number of nodes.
    differences : tuple of TreeDifference
        The noteworthy differences between the trees.
    """

    tree1: TreeSummary
    tree2: TreeSummary
    robinson_foulds_distance: int
    normalized_rf: float
    shared_bipartitions: int
    total_bipartitions: int
    topological_similarity: float
    branch_length_comparison: BranchLengthComparison = None
    differences: tuple = ()

    @property
    def branch_length_correlation(self):
        if self.branch_length_comparison is None:
            return None
        return self.branch_length_comparison.correlation


def get_bipartitions(tree):
    """
    Get the bipartitions of the leaves of a tree.

    Each internal node splits the leaves into its descendants and all
    other leaves.
    A split is a bipartition, if both sides are non-empty.
    As the split is unordered, the two children of a bifurcating root
    give the same bipartition.

    Parameters
    ----------
    tree : Tree
        The tree.

    Returns
    -------
    bipartitions : set of frozenset of frozenset of str
        The bipartitions, each given as unordered pair of leaf label
        sets.

    Examples
    --------

    >>> tree = Tree.from_newick("((A,B),(C,D));")
    >>> for bipartition in get_bipartitions(tree):
    ...     print(sorted(sorted(side) for side in bipartition))
    [['A', 'B'], ['C', 'D']]
    """
    all_leaves = frozenset(tree.leaf_names)
    descendants = {}
    bipartitions = set()
    for node in tree.postorder():
        if node.is_leaf:
            descendants[node.id] = frozenset([node.label])
            continue
        side = frozenset().union(*(descendants[id] for id in node.children))
        descendants[node.id] = side
        other_side = all_leaves - side
        if side and other_side:
            bipartitions.add(frozenset([side, other_side]))
    return bipartitions


def robinson_foulds(tree1, tree2):
    """
    Calculate the *Robinson-Foulds* distance of two trees.

    Parameters
    ----------
    tree1, tree2 : Tree
        The compared trees.

    Returns
    -------
    distance : int
        The number of bipartitions present in only one of the trees.

    See Also
    --------
    get_bipartitions
    """
    return len(get_bipartitions(tree1) ^ get_bipartitions(tree2))


def compare_trees(tree1, tree2):
    """
    Compare the topology and branch lengths of two trees.

    The topologies are compared based on the bipartitions of the leaf
    labels (see :func:`get_bipartitions()`).
    Only if the topologies are identical, the branch lengths are
    compared as well.

    Parameters
    ----------
    tree1, tree2 : Tree
        The compared trees.

    Returns
    -------
    comparison : TreeComparison
        The comparison result.

    Raises
    ------
    IncomparableTreesError
        If any of both trees has less than three leaves.

    Examples
    --------

    >>> tree1 = Tree.from_newick("(((A:1,B:1):1,C:2):1,(D:1,E:1):2);")
    >>> tree2 = Tree.from_newick("(((A:1,C:1):1,B:2):1,(D:1,E:1):2);")
    >>> comparison = compare_trees(tree1, tree2)
    >>> print(comparison.robinson_foulds_distance, comparison.shared_bipartitions)
    2 1
    >>> print(comparison.differences[0].affected_taxa)
    ('A', 'B', 'C')
    """
    if len(tree1) < 3 or len(tree2) < 3:
        raise IncomparableTreesError(
            f"Trees with at least 3 leaves are required, "
            f"got {len(tree1)} and {len(tree2)} leaves"
        )
    bipartitions1 = get_bipartitions(tree1)
    bipartitions2 = get_bipartitions(tree2)
    shared = len(bipartitions1 & bipartitions2)
    unshared = bipartitions1 ^ bipartitions2
    rf_distance = len(unshared)

    max_rf = 2 * (max(len(tree1), len(tree2)) - 3)
    if max_rf > 0:
        normalized_rf = min(rf_distance / max_rf, 1.0)
    else:
        normalized_rf = 0.0
    count_sum = len(bipartitions1) + len(bipartitions2)
    if count_sum > 0:
        similarity = 2 * shared / count_sum
    else:
        similarity = 1.0

    if rf_distance == 0:
        branch_comparison = _compare_branch_lengths(tree1, tree2)
    else:
        branch_comparison = None

    return TreeComparison(
        tree1=_summarize(tree1),
        tree2=_summarize(tree2),
        robinson_foulds_distance=rf_distance,
        normalized_rf=normalized_rf,
        shared_bipartitions=shared,
        total_bipartitions=len(bipartitions1 | bipartitions2),
        topological_similarity=similarity,
        branch_length_comparison=branch_comparison,
        differences=tuple(_find_differences(tree1, tree2, unshared)),
    )


def _summarize(tree):
    return TreeSummary(tree.method, len(tree), tree.total_length)


def _compare_branch_lengths(tree1, tree2):
    lengths1 = tree1.branch_lengths
    lengths2 = tree2.branch_lengths
    if len(lengths1) != len(lengths2):
        return None
    deviation1 = lengths1 - np.mean(lengths1)
    deviation2 = lengths2 - np.mean(lengths2)
    denominator = np.sqrt(np.sum(deviation1**2) * np.sum(deviation2**2))
    if denominator > 0:
        correlation = float(np.sum(deviation1 * deviation2) / denominator)
    else:
        correlation = 0.0
    difference = lengths1 - lengths2
    return BranchLengthComparison(
        correlation=correlation,
        rmse=float(np.sqrt(np.mean(difference**2))),
        mean_difference=float(np.mean(difference)),
    )


def _find_differences(tree1, tree2, unshared):
    differences = []
    rf_distance = len(unshared)
    if rf_distance > 0:
        if rf_distance > 4:
            significance = "high"
        elif rf_distance > 2:
            significance = "medium"
        else:
            significance = "low"
        # The smaller side of each bipartition describes the moved taxa
        affected = set()
        for bipartition in unshared:
            affected |= min(bipartition, key=lambda side: (len(side), sorted(side)))
        differences.append(
            TreeDifference(
                kind="topology",
                description=(
                    f"Trees differ in topology "
                    f"(Robinson-Foulds distance: {rf_distance})"
                ),
                affected_taxa=tuple(sorted(affected)),
                significance=significance,
            )
        )

    length_difference = abs(tree1.total_length - tree2.total_length)
    if length_difference > _LENGTH_DIFFERENCE_THRESHOLD:
        differences.append(
            TreeDifference(
                kind="branch_length",
                description=(
                    f"Difference in total tree length "
                    f"({tree1.total_length:.3f} vs {tree2.total_length:.3f})"
                ),
                affected_taxa=(),
                significance="high" if length_difference > 1 else "medium",
            )
        )
    return differences
