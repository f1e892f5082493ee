"""Tree navigation contract.

The clustering core never touches nodes directly. Everything it needs to
know about the tree (parents, siblings, tags, containment, document order,
ignorable nodes) comes through a ``TreeNavigator``.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from ..errors import DisjointTreeError


class DocumentPosition(Enum):
    """Position of a first node relative to a second one.

    An ancestor comes before its descendants in document order, so CONTAINS
    implies "before" and CONTAINED_BY implies "after".
    """

    BEFORE = "before"  # Precedes, not an ancestor
    AFTER = "after"  # Follows, not a descendant
    CONTAINS = "contains"  # Proper ancestor
    CONTAINED_BY = "contained_by"  # Proper descendant
    EQUAL = "equal"


class TreeNavigator(ABC):
    """Read-only view of one tree's structure.

    Subclasses supply parent/sibling links, tag identity and the skip
    predicate. ``contains`` and ``order_compare`` are derived from the
    parent and sibling links; adapters with cheaper native primitives may
    override them.
    """

    @abstractmethod
    def parent(self, node: Any) -> Any | None:
        """Return the node's parent, or None at the root."""

    @abstractmethod
    def next_sibling(self, node: Any) -> Any | None:
        """Return the following sibling, or None."""

    @abstractmethod
    def previous_sibling(self, node: Any) -> Any | None:
        """Return the preceding sibling, or None."""

    @abstractmethod
    def tag_of(self, node: Any) -> Any:
        """Return a value identifying the node's kind, compared with ==."""

    @abstractmethod
    def is_skippable(self, node: Any) -> bool:
        """Return True for ignorable nodes such as whitespace-only text."""

    def contains(self, ancestor: Any, node: Any) -> bool:
        """Return True if ``ancestor`` is ``node`` or one of its ancestors."""
        current = node
        while current is not None:
            if current is ancestor:
                return True
            current = self.parent(current)
        return False

    def ancestors(self, node: Any) -> list[Any]:
        """Return the path from the root down to ``node``, inclusive."""
        path = []
        current = node
        while current is not None:
            path.append(current)
            current = self.parent(current)
        path.reverse()
        return path

    def order_compare(self, a: Any, b: Any) -> DocumentPosition:
        """Compare ``a`` to ``b`` in document order.

        Raises:
            DisjointTreeError: If the nodes have no common root.
        """
        if a is b:
            return DocumentPosition.EQUAL

        path_a = self.ancestors(a)
        path_b = self.ancestors(b)
        if path_a[0] is not path_b[0]:
            raise DisjointTreeError(a, b)

        depth = 0
        shortest = min(len(path_a), len(path_b))
        while depth < shortest and path_a[depth] is path_b[depth]:
            depth += 1

        if depth == len(path_a):
            return DocumentPosition.CONTAINS
        if depth == len(path_b):
            return DocumentPosition.CONTAINED_BY

        # path_a[depth] and path_b[depth] are distinct children of one parent
        target = path_b[depth]
        sibling = self.next_sibling(path_a[depth])
        while sibling is not None:
            if sibling is target:
                return DocumentPosition.BEFORE
            sibling = self.next_sibling(sibling)
        return DocumentPosition.AFTER
