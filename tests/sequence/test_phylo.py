# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import itertools
import numpy as np
import pytest
import seqphylo.sequence as seq
import seqphylo.sequence.phylo as phylo
from seqphylo import InsufficientTaxaError, InvalidInputError


@pytest.fixture
def additive_distances():
    # Distances of a known tree, i.e. the distances are additive
    return np.array([
        [ 0,  5,  4,  7,  6,  8],
        [ 5,  0,  7, 10,  9, 11],
        [ 4,  7,  0,  7,  6,  8],
        [ 7, 10,  7,  0,  5,  9],
        [ 6,  9,  6,  5,  0,  8],
        [ 8, 11,  8,  9,  8,  0],
    ])  # fmt: skip


@pytest.fixture
def ultrametric_distances():
    return np.array([
        [ 0,  2, 16, 16, 16],
        [ 2,  0, 16, 16, 16],
        [16, 16,  0,  4,  8],
        [16, 16,  4,  0,  8],
        [16, 16,  8,  8,  0],
    ])  # fmt: skip


def test_neighbor_joining(additive_distances):
    """
    Compare the results of `neighbor_joining()` with a known tree.
    """
    tree = phylo.neighbor_joining(additive_distances)
    assert tree.to_newick() == (
        "(5:5.0,(2:2.0,(0:1.0,1:4.0):1.0):1.0,(3:3.0,4:2.0):1.0):0.0;"
    )
    assert tree.method == phylo.TreeMethod.NEIGHBOR_JOINING
    assert tree.root.id == "root_9"
    assert tree.get_node("node_6").children == ("leaf_0", "leaf_1")


def test_neighbor_joining_additivity(additive_distances):
    """
    For additive distances, the tree distances between the leaves are
    equal to the input distances.
    """
    tree = phylo.neighbor_joining(additive_distances)
    n = len(additive_distances)
    for i, j in itertools.combinations(range(n), 2):
        assert tree.get_distance(str(i), str(j)) == pytest.approx(
            additive_distances[i, j]
        )


def test_neighbor_joining_three_taxa():
    """
    Three taxa are directly joined at the root.
    """
    distances = phylo.DistanceMatrix(
        ["A", "B", "C"], np.array([[0, 2, 3], [2, 0, 3], [3, 3, 0]])
    )
    tree = phylo.neighbor_joining(distances)
    assert len(tree.nodes) == 4
    assert tree.to_newick() == "(A:1.0,B:1.0,C:2.0):0.0;"


@pytest.fixture
def three_records():
    return [
        seq.SequenceRecord("A", "ACGTACGT"),
        seq.SequenceRecord("B", "ACGTACGA"),
        seq.SequenceRecord("C", "TTTTTTTT"),
    ]


def test_three_taxa_scenario(three_records):
    """
    A and B differ in a single site, while C is saturated with respect
    to both.
    UPGMA groups A and B as siblings.
    Neighbor joining always gives a star for three taxa, so the
    grouping is only visible in the branch lengths.
    """
    distances = phylo.distance_matrix(three_records)
    dist_ab = -0.75 * np.log(1 - 4 / 3 * 1 / 8)
    assert distances.get_distance("A", "B") == pytest.approx(dist_ab)
    assert distances.get_distance("A", "C") == phylo.SATURATION_DISTANCE
    assert distances.get_distance("B", "C") == phylo.SATURATION_DISTANCE

    nj_tree = phylo.build_tree(distances, "nj")
    assert len(nj_tree.nodes) == 4
    assert len(nj_tree.root.children) == 3
    length_a = nj_tree.get_node("leaf_0").branch_length
    length_b = nj_tree.get_node("leaf_1").branch_length
    length_c = nj_tree.get_node("leaf_2").branch_length
    assert length_a == pytest.approx(dist_ab / 2)
    assert length_b == pytest.approx(dist_ab / 2)
    assert length_c == pytest.approx(phylo.SATURATION_DISTANCE - dist_ab / 2)
    assert length_c > 10 * max(length_a, length_b)
    assert nj_tree.get_distance("A", "B") < nj_tree.get_distance("A", "C")
    assert nj_tree.get_distance("A", "B") < nj_tree.get_distance("B", "C")

    upgma_tree = phylo.build_tree(distances, "upgma")
    ancestor = upgma_tree.lowest_common_ancestor("leaf_0", "leaf_1")
    assert ancestor.id != upgma_tree.root.id
    assert sorted(upgma_tree.get_leaf_names(ancestor.id)) == ["A", "B"]
    assert upgma_tree.get_distance("A", "B", topological=True) == 2
    assert upgma_tree.get_distance("A", "C", topological=True) == 3


def test_negative_branch_length():
    """
    Negative branch length estimates are set to 0.
    """
    distances = np.array([[0, 1, 5], [1, 0, 1], [5, 1, 0]])
    tree = phylo.neighbor_joining(distances)
    assert tree.get_node("leaf_1").branch_length == 0.0
    assert tree.get_node("leaf_0").branch_length == 2.5
    assert tree.get_node("leaf_2").branch_length == 2.5


@pytest.mark.parametrize("seed", range(10))
def test_neighbor_joining_random(seed):
    """
    Check the structure of trees built from random distances.
    """
    rng = np.random.default_rng(seed)
    n = int(rng.integers(3, 15))
    distances = rng.uniform(0.1, 2.0, size=(n, n))
    distances = (distances + distances.T) / 2
    np.fill_diagonal(distances, 0)
    tree = phylo.neighbor_joining(distances)
    assert len(tree.nodes) == 2 * n - 2
    assert sorted(tree.leaf_names) == sorted(str(i) for i in range(n))
    assert (tree.branch_lengths >= 0).all()
    # Only the root is trifurcating
    assert len(tree.root.children) == 3
    assert tree.polytomies == 1


def test_upgma(ultrametric_distances):
    tree = phylo.upgma(ultrametric_distances)
    assert tree.to_newick() == (
        "((0:1.0,1:1.0):7.0,(4:4.0,(2:2.0,3:2.0):2.0):4.0):0.0;"
    )
    assert tree.method == phylo.TreeMethod.UPGMA
    assert len(tree.nodes) == 9
    assert tree.root.id == "node_8"


def test_upgma_ultrametric_reconstruction(ultrametric_distances):
    """
    For ultrametric distances, the tree distances between the leaves
    are equal to the input distances.
    """
    tree = phylo.upgma(ultrametric_distances)
    n = len(ultrametric_distances)
    for i, j in itertools.combinations(range(n), 2):
        assert tree.get_distance(str(i), str(j)) == pytest.approx(
            ultrametric_distances[i, j]
        )


@pytest.mark.parametrize("seed", range(10))
def test_upgma_random(seed):
    """
    UPGMA trees are binary and all leaves have the same distance to
    the root.
    """
    rng = np.random.default_rng(seed)
    n = int(rng.integers(3, 15))
    distances = rng.uniform(0.1, 2.0, size=(n, n))
    distances = (distances + distances.T) / 2
    np.fill_diagonal(distances, 0)
    tree = phylo.upgma(distances)
    assert len(tree.nodes) == 2 * n - 1
    assert tree.polytomies == 0
    assert (tree.branch_lengths >= 0).all()
    root_distances = [tree.distance_to_root(leaf.id) for leaf in tree.leaves]
    assert root_distances == pytest.approx([root_distances[0]] * n)
    assert tree.depth == pytest.approx(root_distances[0])


@pytest.mark.parametrize("function", [phylo.neighbor_joining, phylo.upgma])
@pytest.mark.parametrize("n", [0, 1, 2])
def test_insufficient_taxa(function, n):
    with pytest.raises(InsufficientTaxaError):
        function(np.zeros((n, n)))


@pytest.mark.parametrize(
    "method, exp_method",
    [
        ("nj", phylo.TreeMethod.NEIGHBOR_JOINING),
        ("neighbor-joining", phylo.TreeMethod.NEIGHBOR_JOINING),
        ("upgma", phylo.TreeMethod.UPGMA),
        (phylo.TreeMethod.UPGMA, phylo.TreeMethod.UPGMA),
    ],
)
def test_build_tree(ultrametric_distances, method, exp_method):
    tree = phylo.build_tree(ultrametric_distances, method)
    assert tree.method == exp_method
    assert sorted(tree.leaf_names) == ["0", "1", "2", "3", "4"]


def test_build_tree_from_sequences():
    """
    Build trees from sequence records, where the leaves are named after
    the records.
    """
    records = [
        seq.SequenceRecord("human", "ACGTACGTACGTACGTACGT"),
        seq.SequenceRecord("chimp", "ACGTACGTACGTACGTACGA"),
        seq.SequenceRecord("mouse", "ACGAACGTTCGTACCTACGA"),
        seq.SequenceRecord("fly", "TCGAACCTTCGAACCTAGGA"),
    ]
    distances = phylo.distance_matrix(records)
    for method in phylo.TreeMethod:
        tree = phylo.build_tree(distances, method)
        assert sorted(tree.leaf_names) == ["chimp", "fly", "human", "mouse"]
        # The closest relatives are siblings
        assert tree.get_distance("human", "chimp", topological=True) == 2


def test_invalid_method(ultrametric_distances):
    with pytest.raises(InvalidInputError):
        phylo.build_tree(ultrametric_distances, "parsimony")
