# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This subpackage provides functions and data structures for creating
and comparing (phylogenetic) trees.

The first step is the calculation of pairwise evolutionary distances:
:func:`distance_matrix()` compares the given sequences site by site and
applies the *Jukes-Cantor* correction by default.
The resulting :class:`DistanceMatrix` labels each row with the
identifier of the corresponding sequence.
A :class:`DistanceMatrix` can also be created from precomputed
distances via :meth:`DistanceMatrix.from_array()`.

A :class:`Tree` can be built from a distance matrix using the
popular *UPGMA* (:func:`upgma()`) and *Neighbor-Joining*
(:func:`neighbor_joining()`) algorithms, or using :func:`build_tree()`
with the :class:`TreeMethod` as parameter.

The :class:`Tree` is the central class in this subpackage.
It owns a table of :class:`TreeNode` objects, which refer to their
parent and children only by identifier.
A :class:`TreeNode` is either an intermediate node, if it has child
nodes, or otherwise a leaf node, named after the taxon it represents.

A :class:`Tree` can be created from or exported to a *Newick* notation,
using the :func:`Tree.from_newick()` or :func:`Tree.to_newick()` method,
respectively.

Two trees are compared by means of the bipartitions of their leaves
with :func:`compare_trees()`, yielding e.g. the *Robinson-Foulds*
distance.
"""

__name__ = "seqphylo.sequence.phylo"
__author__ = "Patrick Kunzmann"

from .build import *
from .compare import *
from .distance import *
from .nj import *
from .tree import *
from .upgma import *
