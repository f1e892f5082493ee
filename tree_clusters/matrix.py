"""Sparse lower-triangular matrix of inter-cluster distances.

Each live cluster keys a row holding its distance to every cluster inserted
before it::

    A:  {}
    B:  {A: 1}
    C:  {A: 4, B: 4}
    D:  {A: 4, B: 4, C: 2}

Merging B and A drops both rows and both columns and appends one row for
the merged cluster, combining cached distances with the single-linkage rule::

    C:  {}
    D:  {C: 2}
    BA: {C: 4, D: 4}

Deleting from dicts never shifts the rest of the table, and no distance is
ever recomputed after construction.
"""

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from .clusters_logging import get_logger
from .errors import InsufficientClustersError, UnknownClusterError

logger = get_logger()


@dataclass(eq=False)
class Leaf:
    """A cluster holding one original node."""

    node: Any

    def members(self) -> list[Any]:
        return [self.node]


@dataclass(eq=False)
class Merged:
    """A cluster formed by merging two others, keeping the merge history."""

    left: "Cluster"
    right: "Cluster"

    def members(self) -> list[Any]:
        """Flatten to original nodes, depth-first, left before right."""
        nodes = []
        stack: list[Cluster] = [self]
        while stack:
            cluster = stack.pop()
            if isinstance(cluster, Leaf):
                nodes.append(cluster.node)
            else:
                stack.append(cluster.right)
                stack.append(cluster.left)
        return nodes


Cluster = Leaf | Merged


@dataclass(frozen=True)
class ClosestPair:
    """The two closest live clusters and their distance."""

    a: Cluster
    b: Cluster
    distance: float


class DistanceMatrix:
    """Pairwise distances between live clusters, supporting agglomeration.

    Clusters are keyed by identity. The cluster inserted later always holds
    the entry for a pair, so the table has exactly n*(n-1)/2 entries.
    """

    def __init__(self, nodes: Sequence[Any], metric: Callable[[Any, Any], float]):
        """Wrap each node in a singleton cluster and compute all distances.

        Args:
            nodes: Nodes to cluster, in order.
            metric: Distance between two nodes.
        """
        self._matrix: dict[Cluster, dict[Cluster, float]] = {}
        for node in nodes:
            outer = Leaf(node)
            row = {}
            for inner in self._matrix:
                row[inner] = metric(outer.node, inner.node)
            self._matrix[outer] = row
        self._num_clusters = len(self._matrix)
        logger.debug(
            f"Built distance matrix for {self._num_clusters} nodes",
            extra={"num_nodes": self._num_clusters},
        )

    def entries(self) -> Iterator[tuple[Cluster, Cluster, float]]:
        """Yield (row cluster, column cluster, distance) in table order."""
        for outer, row in self._matrix.items():
            for inner, stored in row.items():
                yield outer, inner, stored

    def closest(self) -> ClosestPair:
        """Return the closest pair of clusters.

        The first minimal entry in table order wins ties.

        Raises:
            InsufficientClustersError: If fewer than 2 clusters are live.
        """
        if self._num_clusters < 2:
            raise InsufficientClustersError(self._num_clusters)

        best = None
        for outer, inner, stored in self.entries():
            if best is None or stored < best[2]:
                best = (outer, inner, stored)
        return ClosestPair(a=best[0], b=best[1], distance=best[2])

    def _cached_distance(self, cluster_a: Cluster, cluster_b: Cluster) -> float:
        """Look up a stored distance, trying the other half of the triangle."""
        row = self._matrix[cluster_a]
        if cluster_b in row:
            return row[cluster_b]
        return self._matrix[cluster_b][cluster_a]

    def distance_between(self, cluster_a: Cluster, cluster_b: Cluster) -> float:
        """Return the stored distance between two distinct live clusters."""
        self._check_pair(cluster_a, cluster_b)
        return self._cached_distance(cluster_a, cluster_b)

    def _check_pair(self, cluster_a: Cluster, cluster_b: Cluster) -> None:
        if cluster_a is cluster_b:
            raise UnknownClusterError("a cluster cannot be paired with itself")
        for cluster in (cluster_a, cluster_b):
            if cluster not in self._matrix:
                raise UnknownClusterError(
                    "cluster is not live in this matrix (already merged or foreign)"
                )

    def merge(self, cluster_a: Cluster, cluster_b: Cluster) -> Merged:
        """Replace two clusters with their union.

        The new cluster's distance to every other cluster is the smaller of
        its parts' distances.

        Returns:
            The new cluster, ``Merged(cluster_a, cluster_b)``.

        Raises:
            UnknownClusterError: If either cluster is not live, or both are
                the same cluster.
        """
        self._check_pair(cluster_a, cluster_b)

        # Nothing pointed to the new cluster before, so no entry is repeated
        new_row = {}
        for outer in self._matrix:
            if outer is not cluster_a and outer is not cluster_b:
                new_row[outer] = min(
                    self._cached_distance(cluster_a, outer),
                    self._cached_distance(cluster_b, outer),
                )

        del self._matrix[cluster_a]
        del self._matrix[cluster_b]
        for row in self._matrix.values():
            row.pop(cluster_a, None)
            row.pop(cluster_b, None)

        merged = Merged(cluster_a, cluster_b)
        self._matrix[merged] = new_row
        self._num_clusters -= 1
        return merged

    def num_clusters(self) -> int:
        return self._num_clusters

    def live_clusters(self) -> list[Cluster]:
        """Return the live clusters in table order."""
        return list(self._matrix)

    def entry_count(self) -> int:
        """Return the number of stored pairwise distances."""
        return sum(len(row) for row in self._matrix.values())

    def clusters(self) -> list[list[Any]]:
        """Return each live cluster flattened to its original nodes."""
        return [cluster.members() for cluster in self._matrix]
