# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqphylo.sequence.phylo"
__author__ = "Patrick Kunzmann"
__all__ = ["Tree", "TreeNode", "TreeMethod", "TreeError", "to_newick"]

import dataclasses
import re
from dataclasses import dataclass
from enum import Enum
import numpy as np
from ...copyable import Copyable
from ...error import InvalidNewickError


class TreeError(Exception):
    """
    An exception that occurs in context of tree topology manipulation,
    e.g. a node without a parent, that is not the root.
    """

    pass


class TreeMethod(Enum):
    """
    The algorithm a :class:`Tree` was built with.

    - **NEIGHBOR_JOINING** - See :func:`neighbor_joining()`.
      ``'nj'`` is accepted as alias.
    - **UPGMA** - See :func:`upgma()`.
    """

    NEIGHBOR_JOINING = "neighbor-joining"
    UPGMA = "upgma"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            value = value.lower().replace("_", "-")
            if value == "nj":
                return cls.NEIGHBOR_JOINING
            for member in cls:
                if value == member.value:
                    return member
        return None


@dataclass(frozen=True)
class TreeNode:
    """
    A single node of a :class:`Tree`.

    Nodes do not reference each other directly, but only via the
    identifiers of their parent and children.
    The :class:`Tree` owns the nodes and resolves these references.
    A node without children is a leaf.

    Objects of this class are immutable.

    Parameters
    ----------
    id : str
        The identifier of the node, unique within its tree.
    name : str, optional
        The name of the node, e.g. the taxon a leaf represents.
    parent_id : str, optional
        The identifier of the parent node.
        None for the root node.
    children : tuple of str, optional
        The identifiers of the child nodes.
    branch_length : float, optional
        The non-negative length of the branch to the parent node.
    bootstrap_support : float, optional
        The support value of the branch, if available.
    """

    id: str
    name: str = None
    parent_id: str = None
    children: tuple = ()
    branch_length: float = 0.0
    bootstrap_support: float = None

    def __post_init__(self):
        if not isinstance(self.id, str) or len(self.id) == 0:
            raise TreeError("Node identifier must be a non-empty string")
        if self.name is not None and not isinstance(self.name, str):
            raise TreeError(f"Name of node '{self.id}' must be a string")
        object.__setattr__(self, "children", tuple(self.children))
        length = float(self.branch_length)
        if not np.isfinite(length) or length < 0:
            raise TreeError(
                f"Branch length of node '{self.id}' must be finite "
                f"and non-negative, got {length}"
            )
        object.__setattr__(self, "branch_length", length)
        if self.bootstrap_support is not None:
            support = float(self.bootstrap_support)
            if not np.isfinite(support):
                raise TreeError(f"Support of node '{self.id}' must be finite")
            object.__setattr__(self, "bootstrap_support", support)

    @property
    def is_leaf(self):
        return len(self.children) == 0

    @property
    def label(self):
        """
        str : The name of the node, or its identifier if it is unnamed.
        """
        return self.id if self.name is None else self.name


class Tree(Copyable):
    """
    A :class:`Tree` represents a rooted tree
    (e.g. an alignment guide tree or a phylogenetic tree).

    The tree owns all of its :class:`TreeNode` objects, which are kept
    in creation order.
    Exactly one node, the root, has no parent.
    Every other node is reachable from the root.
    The labels of the leaves must be unique, as leaves are addressed by
    label e.g. in :meth:`get_distance()`.

    Objects of this class are immutable.

    Parameters
    ----------
    nodes : iterable object of TreeNode
        All nodes of the tree.
    method : TreeMethod or str, optional
        The algorithm the tree was built with, if any.

    Attributes
    ----------
    root : TreeNode
        The root node of the tree.
    nodes : list of TreeNode
        All nodes of the tree in creation order.
    leaves : list of TreeNode
        The leaf nodes of the tree in creation order.
    method : TreeMethod or None
        The algorithm the tree was built with.

    Examples
    --------

    >>> tree = Tree.from_newick("((A:1.0,B:2.0):1.5,C:3.0);")
    >>> print(tree.leaf_names)
    ['A', 'B', 'C']
    >>> print(tree.get_distance("A", "C"))
    5.5
    >>> print(tree.depth)
    3.5
    >>> print(tree)
    ((A:1.0,B:2.0):1.5,C:3.0):0.0;
    """

    def __init__(self, nodes, method=None):
        self._nodes = {}
        for node in nodes:
            if not isinstance(node, TreeNode):
                raise TypeError(f"Expected 'TreeNode', got '{type(node).__name__}'")
            if node.id in self._nodes:
                raise TreeError(f"Duplicate node identifier '{node.id}'")
            self._nodes[node.id] = node
        if len(self._nodes) == 0:
            raise TreeError("A tree requires at least one node")
        self._method = None if method is None else TreeMethod(method)

        roots = [node.id for node in self._nodes.values() if node.parent_id is None]
        if len(roots) != 1:
            raise TreeError(
                f"A tree requires exactly one root, but found {len(roots)}"
            )
        self._root_id = roots[0]
        for node in self._nodes.values():
            self._check_references(node)
        self._postorder = _postorder(self._nodes, self._root_id)
        # As each node has exactly one parent, unreachable nodes
        # can only be part of a cycle
        if len(self._postorder) != len(self._nodes):
            unreachable = [id for id in self._nodes if id not in set(self._postorder)]
            raise TreeError(
                f"Nodes {', '.join(unreachable)} are not connected to the root"
            )

        self._leaf_ids = [node.id for node in self._nodes.values() if node.is_leaf]
        self._leaf_by_label = {}
        for leaf_id in self._leaf_ids:
            label = self._nodes[leaf_id].label
            if label in self._leaf_by_label:
                raise TreeError(f"Duplicate leaf label '{label}'")
            self._leaf_by_label[label] = leaf_id

    def _check_references(self, node):
        if node.parent_id is not None:
            parent = self._nodes.get(node.parent_id)
            if parent is None:
                raise TreeError(
                    f"Parent '{node.parent_id}' of node '{node.id}' does not exist"
                )
            if node.id not in parent.children:
                raise TreeError(
                    f"Node '{node.id}' is not a child of its parent '{parent.id}'"
                )
        if len(set(node.children)) != len(node.children):
            raise TreeError(f"Node '{node.id}' contains a child multiple times")
        for child_id in node.children:
            child = self._nodes.get(child_id)
            if child is None:
                raise TreeError(
                    f"Child '{child_id}' of node '{node.id}' does not exist"
                )
            if child.parent_id != node.id:
                raise TreeError(
                    f"Node '{child_id}' is child of '{node.id}', "
                    f"but has parent '{child.parent_id}'"
                )

    def __copy_create__(self):
        return Tree(self.nodes, self._method)

    @property
    def root(self):
        return self._nodes[self._root_id]

    @property
    def method(self):
        return self._method

    @property
    def nodes(self):
        return list(self._nodes.values())

    @property
    def leaves(self):
        return [self._nodes[id] for id in self._leaf_ids]

    @property
    def leaf_names(self):
        """
        list of str : The labels of the leaves in creation order.
        """
        return [self._nodes[id].label for id in self._leaf_ids]

    def get_node(self, node_id):
        """
        Get a node by its identifier.

        Parameters
        ----------
        node_id : str
            The identifier of the node.

        Returns
        -------
        node : TreeNode
            The node.
        """
        try:
            return self._nodes[node_id]
        except KeyError:
            raise KeyError(f"Node '{node_id}' is not part of the tree")

    def get_parent(self, node_id):
        """
        Get the parent of a node.

        Parameters
        ----------
        node_id : str
            The identifier of the node.

        Returns
        -------
        parent : TreeNode or None
            The parent node, None for the root.
        """
        parent_id = self.get_node(node_id).parent_id
        return None if parent_id is None else self._nodes[parent_id]

    def get_children(self, node_id):
        return [self._nodes[id] for id in self.get_node(node_id).children]

    def postorder(self):
        """
        Get all nodes in postorder, i.e. each node is preceded by its
        descendants.
        Siblings are visited in the order of the parent's children.

        Returns
        -------
        nodes : list of TreeNode
            The nodes in postorder.
        """
        return [self._nodes[id] for id in self._postorder]

    def get_leaf_names(self, node_id=None):
        """
        Get the labels of all leaves, that descend from a node.

        Parameters
        ----------
        node_id : str, optional
            The identifier of the node.
            By default the root.

        Returns
        -------
        names : list of str
            The leaf labels in traversal order.
            A leaf node returns its own label.
        """
        if node_id is None:
            node_id = self._root_id
        self.get_node(node_id)
        return [
            self._nodes[id].label
            for id in _postorder(self._nodes, node_id)
            if self._nodes[id].is_leaf
        ]

    def _ancestors(self, node_id):
        # The node itself and all of its ancestors up to the root
        path = [node_id]
        while self._nodes[path[-1]].parent_id is not None:
            path.append(self._nodes[path[-1]].parent_id)
        return path

    def distance_to_root(self, node_id):
        """
        Get the sum of branch lengths on the path from a node to the
        root.

        Parameters
        ----------
        node_id : str
            The identifier of the node.

        Returns
        -------
        distance : float
            The distance to the root.
        """
        self.get_node(node_id)
        # The branch length of the root itself is not part of the path
        return float(
            sum(self._nodes[id].branch_length for id in self._ancestors(node_id)[:-1])
        )

    def lowest_common_ancestor(self, node_id1, node_id2):
        """
        Get the lowest common ancestor of two nodes.

        Parameters
        ----------
        node_id1, node_id2 : str
            The identifiers of the nodes.

        Returns
        -------
        ancestor : TreeNode
            The deepest node, that has both nodes as descendants.
            If one node is an ancestor of the other one, this node is
            returned.
        """
        self.get_node(node_id1)
        self.get_node(node_id2)
        ancestors1 = set(self._ancestors(node_id1))
        for id in self._ancestors(node_id2):
            if id in ancestors1:
                return self._nodes[id]
        # Unreachable, as both nodes share the root
        raise TreeError("Nodes have no common ancestor")

    def get_distance(self, name1, name2, topological=False):
        """
        Get the distance between two leaves.

        Parameters
        ----------
        name1, name2 : str
            The labels of the leaves.
        topological : bool, optional
            If true, the number of branches on the path between the
            leaves is returned.
            Otherwise, the sum of branch lengths on this path.

        Returns
        -------
        distance : float or int
            The distance between the leaves.
        """
        id1 = self._leaf_id(name1)
        id2 = self._leaf_id(name2)
        lca_id = self.lowest_common_ancestor(id1, id2).id
        path1 = self._ancestors(id1)
        path2 = self._ancestors(id2)
        # Path from each leaf to the common ancestor (exclusive)
        path1 = path1[: path1.index(lca_id)]
        path2 = path2[: path2.index(lca_id)]
        if topological:
            return len(path1) + len(path2)
        return float(sum(self._nodes[id].branch_length for id in path1 + path2))

    def _leaf_id(self, name):
        try:
            return self._leaf_by_label[name]
        except KeyError:
            raise KeyError(f"The tree has no leaf '{name}'")

    @property
    def branch_lengths(self):
        """
        ndarray, dtype=float : The branch lengths of all nodes in
        creation order.
        """
        return np.array([node.branch_length for node in self._nodes.values()])

    @property
    def total_length(self):
        return float(np.sum(self.branch_lengths))

    @property
    def average_branch_length(self):
        return self.total_length / len(self._nodes)

    @property
    def depth(self):
        """
        float : The maximum distance of a leaf to the root.
        """
        return max(self.distance_to_root(id) for id in self._leaf_ids)

    @property
    def polytomies(self):
        """
        int : The number of nodes with more than two children.
        """
        return sum(1 for node in self._nodes.values() if len(node.children) > 2)

    def with_support(self, support):
        """
        Create a copy of this tree with support values for internal
        nodes.

        The support values are computed externally, e.g. from bootstrap
        replicates.

        Parameters
        ----------
        support : dict (str -> float)
            Maps the identifiers of internal nodes to their support
            value.

        Returns
        -------
        tree : Tree
            The annotated tree.
        """
        for node_id in support:
            if self.get_node(node_id).is_leaf:
                raise TreeError(f"Cannot annotate leaf '{node_id}' with support")
        nodes = [
            dataclasses.replace(node, bootstrap_support=support[node.id])
            if node.id in support
            else node
            for node in self._nodes.values()
        ]
        return Tree(nodes, self._method)

    @staticmethod
    def from_newick(newick, method=None):
        """
        Create a tree from a *Newick* notation.

        Leaves must be labeled.
        Support values can be given either as numeric label of an
        internal node (``(A,B)95:0.1``) or as additional value in front
        of the branch length (``(A,B):95:0.1``), as written by
        :meth:`to_newick()`.
        Missing branch lengths are interpreted as 0.

        The leaves are identified as ``leaf_<i>`` in order of
        appearance, the internal nodes as ``node_<i>`` in postorder,
        continuing the numbering, and the root as ``root_<i>``.

        Parameters
        ----------
        newick : str
            The *Newick* notation to create the tree from.
        method : TreeMethod or str, optional
            The algorithm the tree was built with, if known.

        Returns
        -------
        tree : Tree
            A tree created from the *Newick* notation.

        Raises
        ------
        InvalidNewickError
            If the *Newick* notation is malformed.

        Notes
        -----
        Comments in square brackets are ignored.
        Quoted labels may contain any character; a quote inside a
        quoted label is escaped by doubling it.
        """
        tokens = _tokenize(newick)
        parsed_root = _NewickParser(tokens).parse()
        try:
            return _assemble(parsed_root, method)
        except TreeError as e:
            raise InvalidNewickError(str(e)) from e

    def to_newick(self, include_distance=True, round_distance=None):
        """
        Obtain the *Newick* notation of the tree.

        The children of each node are written in their stored order,
        so the same tree always yields the same notation.
        Unnamed leaves are written with their identifier as label.

        Parameters
        ----------
        include_distance : bool, optional
            If true, the branch lengths and support values are included.
        round_distance : int, optional
            If set, the branch lengths and support values are rounded to
            the given number of decimal places.
            By default the full floating point precision is used.

        Returns
        -------
        newick : str
            The *Newick* notation of the tree.
        """
        strings = {}
        for node in self.postorder():
            if node.is_leaf:
                text = _format_label(node.label)
            else:
                text = "(" + ",".join(strings.pop(id) for id in node.children) + ")"
                text += _format_label(node.name)
            if include_distance:
                if node.bootstrap_support is not None:
                    text += ":" + _format_number(node.bootstrap_support, round_distance)
                text += ":" + _format_number(node.branch_length, round_distance)
            strings[node.id] = text
        return strings[self._root_id] + ";"

    def __str__(self):
        return self.to_newick()

    def __len__(self):
        return len(self._leaf_ids)

    def __repr__(self):
        """Represent Tree as a string for debugging."""
        method = "None" if self._method is None else f"TreeMethod.{self._method.name}"
        return f"Tree({self.nodes!r}, method={method})"

    def __eq__(self, item):
        if not isinstance(item, Tree):
            return False
        return self._method == item._method and self.nodes == item.nodes


def to_newick(tree, include_distance=True, round_distance=None):
    """
    Obtain the *Newick* notation of a tree.

    Parameters
    ----------
    tree : Tree
        The tree.
    include_distance : bool, optional
        If true, the branch lengths and support values are included.
    round_distance : int, optional
        If set, the branch lengths and support values are rounded to the
        given number of decimal places.

    Returns
    -------
    newick : str
        The *Newick* notation of the tree.

    See Also
    --------
    Tree.to_newick
    """
    return tree.to_newick(include_distance, round_distance)


class NodeTable:
    """
    Collects the nodes of a tree under construction.

    Leaves must be added before any internal node is created:
    Leaves are identified as ``leaf_<i>``, internal nodes as
    ``<prefix>_<i>``, where *i* is the running node count.
    The branch length of a node is set, when it is joined into its
    parent node.
    """

    def __init__(self):
        self._fields = {}

    def add_leaf(self, name):
        node_id = f"leaf_{len(self._fields)}"
        self._fields[node_id] = _node_fields(node_id, name, ())
        return node_id

    def join(self, children, lengths, prefix="node", name=None, support=None):
        node_id = f"{prefix}_{len(self._fields)}"
        for child_id, length in zip(children, lengths, strict=True):
            fields = self._fields[child_id]
            fields["parent_id"] = node_id
            fields["branch_length"] = float(length)
        self._fields[node_id] = _node_fields(node_id, name, tuple(children))
        self._fields[node_id]["bootstrap_support"] = support
        return node_id

    def set_branch_length(self, node_id, length):
        self._fields[node_id]["branch_length"] = float(length)

    def to_tree(self, method=None):
        return Tree(
            [TreeNode(**fields) for fields in self._fields.values()], method
        )


def _node_fields(node_id, name, children):
    return {
        "id": node_id,
        "name": name,
        "parent_id": None,
        "children": children,
        "branch_length": 0.0,
        "bootstrap_support": None,
    }


def _postorder(nodes, root_id):
    order = []
    stack = [(root_id, False)]
    while stack:
        node_id, expanded = stack.pop()
        if expanded:
            order.append(node_id)
        else:
            stack.append((node_id, True))
            for child_id in reversed(nodes[node_id].children):
                stack.append((child_id, False))
    return order


### Newick formatting ###

# Labels containing none of these characters need no quotes
_UNQUOTED_LABEL = re.compile(r"[^\s()\[\]':;,]+")


def _format_label(label):
    if label is None:
        return ""
    if _UNQUOTED_LABEL.fullmatch(label):
        return label
    return "'" + label.replace("'", "''") + "'"


def _format_number(value, round_distance):
    if round_distance is None:
        return repr(float(value))
    return f"{value:.{round_distance}f}"


### Newick parsing ###

_TOKEN = re.compile(
    r"""
    (?P<skip>\s+|\[[^\]]*\])          # whitespace and comments
  | (?P<quoted>'(?:[^']|'')*')        # quoted label
  | (?P<symbol>[(),:;])
  | (?P<label>[^\s()\[\]':;,]+)
    """,
    re.VERBOSE,
)


def _tokenize(newick):
    if not isinstance(newick, str):
        raise InvalidNewickError(
            f"Expected 'str' as Newick notation, got '{type(newick).__name__}'"
        )
    tokens = []
    pos = 0
    while pos < len(newick):
        match = _TOKEN.match(newick, pos)
        if match is None:
            raise InvalidNewickError(
                f"Unexpected character '{newick[pos]}' at position {pos}"
            )
        pos = match.end()
        kind = match.lastgroup
        if kind == "skip":
            continue
        elif kind == "quoted":
            tokens.append(("label", match.group()[1:-1].replace("''", "'")))
        elif kind == "symbol":
            tokens.append((match.group(), match.group()))
        else:
            tokens.append(("label", match.group()))
    tokens.append(("end", None))
    return tokens


class _ParsedNode:
    def __init__(self):
        self.children = []
        self.name = None
        self.length = None
        self.support = None


class _NewickParser:
    """
    Iterative parser for the *Newick* grammar, so that the depth of the
    tree is not limited by the recursion limit.
    """

    def __init__(self, tokens):
        self._tokens = tokens
        self._pos = 0

    def _peek(self):
        return self._tokens[self._pos][0]

    def _next(self):
        token = self._tokens[self._pos]
        if token[0] != "end":
            self._pos += 1
        return token

    def parse(self):
        # Internal nodes, whose closing bracket is not reached yet
        open_nodes = []
        while True:
            while self._peek() == "(":
                self._next()
                open_nodes.append(_ParsedNode())
            node = _ParsedNode()
            self._read_annotation(node)
            if node.name is None:
                raise InvalidNewickError(
                    f"Leaf without label before token {self._describe()}"
                )
            while True:
                kind = self._peek()
                if kind == ",":
                    self._next()
                    if not open_nodes:
                        raise InvalidNewickError("Sibling nodes outside of brackets")
                    open_nodes[-1].children.append(node)
                    # Continue with the next subtree
                    break
                elif kind == ")":
                    self._next()
                    if not open_nodes:
                        raise InvalidNewickError("Unbalanced closing bracket")
                    parent = open_nodes.pop()
                    parent.children.append(node)
                    self._read_annotation(parent)
                    node = parent
                elif kind == ";":
                    self._next()
                    if open_nodes:
                        raise InvalidNewickError("Bracket is not closed")
                    if self._peek() != "end":
                        raise InvalidNewickError(
                            "Unexpected content after the terminating ';'"
                        )
                    return node
                elif kind == "end":
                    raise InvalidNewickError("Newick notation must end with ';'")
                else:
                    raise InvalidNewickError(f"Unexpected token {self._describe()}")

    def _read_annotation(self, node):
        if self._peek() == "label":
            node.name = self._next()[1]
        values = []
        while self._peek() == ":" and len(values) < 2:
            self._next()
            kind, value = self._next()
            if kind != "label":
                raise InvalidNewickError("Expected a number after ':'")
            values.append(_parse_number(value))
        if len(values) == 2:
            node.support, node.length = values
        elif len(values) == 1:
            node.length = values[0]
        if node.length is not None and node.length < 0:
            raise InvalidNewickError(f"Negative branch length {node.length}")

    def _describe(self):
        kind, value = self._tokens[self._pos]
        return "end of input" if kind == "end" else f"'{value}'"


def _parse_number(value):
    try:
        number = float(value)
    except ValueError:
        raise InvalidNewickError(f"'{value}' is not a valid number")
    if not np.isfinite(number):
        raise InvalidNewickError(f"'{value}' is not a finite number")
    return number


def _is_number(value):
    try:
        return np.isfinite(float(value))
    except ValueError:
        return False


def _assemble(parsed_root, method):
    # Postorder of the parsed nodes
    order = []
    stack = [(parsed_root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            order.append(node)
        else:
            stack.append((node, True))
            for child in reversed(node.children):
                stack.append((child, False))

    table = NodeTable()
    node_ids = {}
    for node in order:
        if not node.children:
            node_ids[id(node)] = table.add_leaf(node.name)
    for node in order:
        if not node.children:
            continue
        name = node.name
        support = node.support
        # A numeric label of an internal node is a support value
        if support is None and name is not None and _is_number(name):
            support = float(name)
            name = None
        node_ids[id(node)] = table.join(
            [node_ids[id(child)] for child in node.children],
            [0.0 if child.length is None else child.length for child in node.children],
            prefix="root" if node is parsed_root else "node",
            name=name,
            support=support,
        )
    if parsed_root.length is not None:
        table.set_branch_length(node_ids[id(parsed_root)], parsed_root.length)
    return table.to_tree(method)
