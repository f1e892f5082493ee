"""Structural distance between two nodes of one tree.

The distance approximates the edit cost of the two paths leading down from
the nodes' common ancestor. Each level below the common ancestor costs
something, less when both paths pass through the same kind of node, more
when one path is deeper than the other. Nodes interposed between the paths
at each level (stride nodes) add to the cost.
"""

from dataclasses import dataclass
from typing import Any

from .errors import DisjointTreeError
from .navigation.base import DocumentPosition, TreeNavigator


@dataclass(frozen=True)
class DistanceCosts:
    """Per-level costs used by the distance metric."""

    # Each level one node is deeper than the other below the common ancestor
    different_depth_cost: float = 2
    # A level below the common ancestor where the tags differ
    different_tag_cost: float = 2
    # A level below the common ancestor where the tags match
    same_tag_cost: float = 1
    # Each stride node between the two paths
    stride_cost: float = 1


DEFAULT_COSTS = DistanceCosts()


class TreeDistance:
    """Distance metric bound to a navigator and a cost table."""

    def __init__(self, navigator: TreeNavigator, costs: DistanceCosts | None = None):
        self.navigator = navigator
        self.costs = costs or DEFAULT_COSTS

    def __call__(self, node_a: Any, node_b: Any) -> float:
        return self.distance(node_a, node_b)

    def num_strides(self, left: Any | None, right: Any | None) -> int:
        """Count the stride nodes between two nodes at the same level.

        Walks forward from ``left`` until ``right`` is reached. If it never
        is, the two are not siblings of each other, and every sibling
        preceding ``right`` is counted as well. Either side may be None.
        Whitespace-only nodes are never counted.
        """
        nav = self.navigator
        num = 0

        sibling = left
        while sibling is not None and sibling is not right:
            sibling = nav.next_sibling(sibling)
            if sibling is not None and sibling is not right and not nav.is_skippable(sibling):
                num += 1

        if sibling is not right:
            sibling = right
            while sibling is not None:
                sibling = nav.previous_sibling(sibling)
                if sibling is not None and not nav.is_skippable(sibling):
                    num += 1
        return num

    def distance(self, node_a: Any, node_b: Any) -> float:
        """Return the structural distance between two nodes.

        Raises:
            DisjointTreeError: If the nodes do not share an ancestor.
        """
        if node_a is node_b:
            return 0

        nav = self.navigator
        costs = self.costs

        # Paths from each node up to, but excluding, the common ancestor
        a_chain = []
        common = node_a
        while not nav.contains(common, node_b):
            a_chain.append(common)
            common = nav.parent(common)
            if common is None:
                raise DisjointTreeError(node_a, node_b)

        b_chain = []
        current = node_b
        while current is not common:
            b_chain.append(current)
            current = nav.parent(current)
            if current is None:
                raise DisjointTreeError(node_a, node_b)

        position = nav.order_compare(node_a, node_b)
        if position in (DocumentPosition.BEFORE, DocumentPosition.CONTAINS):
            left, right = a_chain, b_chain
        else:
            left, right = b_chain, a_chain
        might_stride = position in (DocumentPosition.BEFORE, DocumentPosition.AFTER)

        # Descend both paths in lock step from the common ancestor
        cost = 0
        while left or right:
            left_node = left.pop() if left else None
            right_node = right.pop() if right else None
            if left_node is None or right_node is None:
                cost += costs.different_depth_cost
            elif nav.tag_of(left_node) == nav.tag_of(right_node):
                cost += costs.same_tag_cost
            else:
                cost += costs.different_tag_cost
            if might_stride:
                cost += self.num_strides(left_node, right_node) * costs.stride_cost
        return cost


def num_strides(left: Any | None, right: Any | None, navigator: TreeNavigator) -> int:
    """Count non-skippable nodes interposed between ``left`` and ``right``."""
    return TreeDistance(navigator).num_strides(left, right)


def distance(
    node_a: Any,
    node_b: Any,
    navigator: TreeNavigator,
    costs: DistanceCosts | None = None,
) -> float:
    """Return the structural distance between two nodes of one tree."""
    return TreeDistance(navigator, costs).distance(node_a, node_b)
