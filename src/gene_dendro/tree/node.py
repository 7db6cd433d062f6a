"""DendrogramNode: immutable Leaf/Branch tree of merged items."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator

from ..core.errors import DuplicateItemError, InvalidArgument


class NodeKind(enum.Enum):
    LEAF = "leaf"
    BRANCH = "branch"


@dataclass(frozen=True, eq=False)
class DendrogramNode:
    """A single node of the dendrogram, either a leaf or a branch.

    Both kinds share one type so traversal code never has to dispatch on
    class. Build nodes with :func:`make_leaf` and :func:`make_branch` only;
    those are the sole places the tree invariants are checked.

    Branch invariants:

    * ``genes`` is the disjoint union of the children's genes
    * ``weight`` is the sum of the children's weights
    * ``level`` is one more than the deeper child's level
    * ``first.average_weight <= second.average_weight``
    """

    kind: NodeKind
    genes: frozenset
    weight: float
    level: int
    # Average-link distance at which the branch was formed (0 for leaves)
    height: float = 0.0
    first: DendrogramNode | None = None
    second: DendrogramNode | None = None
    name: str | None = None

    @property
    def is_leaf(self) -> bool:
        return self.kind is NodeKind.LEAF

    @property
    def gene_count(self) -> int:
        return len(self.genes)

    @property
    def average_weight(self) -> float:
        """Weight per item; drives the canonical child order."""
        return self.weight / self.gene_count

    @property
    def children(self) -> tuple[DendrogramNode, ...]:
        if self.is_leaf:
            return ()
        return (self.first, self.second)

    def iter_nodes(self) -> Iterator[DendrogramNode]:
        """Pre-order traversal, first child fully before second."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            if not node.is_leaf:
                stack.append(node.second)
                stack.append(node.first)

    def iter_leaves(self) -> Iterator[DendrogramNode]:
        """Leaves in canonical (depth-first, first-child-first) order."""
        for node in self.iter_nodes():
            if node.is_leaf:
                yield node

    def leaf_names(self) -> list[str]:
        return [leaf.name for leaf in self.iter_leaves()]

    def __repr__(self) -> str:
        if self.is_leaf:
            return f"Leaf({self.name!r}, weight={self.weight:.4g})"
        return (
            f"Branch(genes={self.gene_count}, level={self.level}, "
            f"height={self.height:.4g}, weight={self.weight:.4g})"
        )


def make_leaf(name: str, weight: float = 0.0) -> DendrogramNode:
    """Create a leaf for a single item."""
    if name is None:
        raise InvalidArgument("Leaf name must not be None.")
    return DendrogramNode(
        kind=NodeKind.LEAF,
        genes=frozenset((name,)),
        weight=float(weight),
        level=0,
        name=name,
    )


def make_branch(
    first: DendrogramNode,
    second: DendrogramNode,
    height: float = 0.0,
) -> DendrogramNode:
    """Join two subtrees into a new branch.

    Raises DuplicateItemError when the subtrees share an item, which means
    either a corrupted tree or an upstream duplicate. The child with the
    lower average weight is stored first; ties keep the argument order.
    """
    if not isinstance(first, DendrogramNode) or not isinstance(second, DendrogramNode):
        raise InvalidArgument("Branch children must both be DendrogramNodes.")

    genes = first.genes | second.genes
    if len(genes) != first.gene_count + second.gene_count:
        raise DuplicateItemError(first.genes & second.genes)

    if first.average_weight > second.average_weight:
        first, second = second, first

    return DendrogramNode(
        kind=NodeKind.BRANCH,
        genes=genes,
        weight=first.weight + second.weight,
        level=1 + max(first.level, second.level),
        height=float(height),
        first=first,
        second=second,
    )


def cut_at_height(root: DendrogramNode, threshold: float) -> list[frozenset]:
    """Flat clusters: gene sets of the maximal subtrees merged at or below ``threshold``.

    Returned in canonical leaf order.
    """
    clusters: list[frozenset] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_leaf or node.height <= threshold:
            clusters.append(node.genes)
        else:
            stack.append(node.second)
            stack.append(node.first)
    return clusters
