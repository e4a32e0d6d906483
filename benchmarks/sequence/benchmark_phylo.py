import pytest
import seqphylo.sequence.phylo as phylo


@pytest.fixture(scope="module")
def distances(records):
    return phylo.distance_matrix(records)


@pytest.mark.benchmark
def benchmark_distance_matrix(records):
    phylo.distance_matrix(records)


@pytest.mark.benchmark
@pytest.mark.parametrize("method", list(phylo.TreeMethod))
def benchmark_build_tree(distances, method):
    phylo.build_tree(distances, method)


@pytest.mark.benchmark
def benchmark_compare_trees(distances):
    tree1 = phylo.neighbor_joining(distances)
    tree2 = phylo.upgma(distances)
    phylo.compare_trees(tree1, tree2)
