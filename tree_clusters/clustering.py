"""Agglomerative clustering of tree nodes by structural distance.

Repeatedly merges the two closest clusters until one cluster remains or the
closest pair is at least ``too_far`` apart. Linkage is single (nearest
neighbor): related regions of a document tend to be adjacent runs rather
than compact blobs, and single linkage chains along adjacency.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from .clusters_logging import get_logger
from .config import ClusteringConfig
from .distance import DistanceCosts, TreeDistance
from .errors import DuplicateNodeError, ValidationError
from .matrix import DistanceMatrix
from .navigation.base import TreeNavigator
from .timing import PerformanceTimer, timed

logger = get_logger()


@dataclass
class ClusteringResult:
    """Result of a clustering run."""

    clusters: list[list[Any]] = field(default_factory=list)
    total_items: int = 0
    merges: int = 0
    # Distance of the closest pair left unmerged, None if one cluster remains
    final_distance: float | None = None

    @property
    def cluster_count(self) -> int:
        """Number of clusters found."""
        return len(self.clusters)

    def largest(self) -> list[Any]:
        """Return the cluster with the most nodes, the earliest on ties."""
        return max(self.clusters, key=len, default=[])


def _check_unique(nodes: Sequence[Any]) -> None:
    seen: set[int] = set()
    for index, node in enumerate(nodes):
        if id(node) in seen:
            raise DuplicateNodeError(node, index)
        seen.add(id(node))


class StructuralClustering:
    """Single-linkage clustering of the nodes of one tree.

    Groups nodes by the structural distance between them, so that
    scattered nodes from one region of a document end up together.
    """

    def __init__(
        self,
        navigator: TreeNavigator,
        config: ClusteringConfig | None = None,
        costs: DistanceCosts | None = None,
    ):
        """Initialize the clustering engine.

        Args:
            navigator: Navigator for the tree the nodes belong to.
            config: Optional configuration; supplies costs and a default
                threshold.
            costs: Explicit cost table, overriding the config's.
        """
        self.navigator = navigator
        self.config = config or ClusteringConfig()
        self.metric = TreeDistance(navigator, costs or self.config.costs())

    def distance(self, node_a: Any, node_b: Any) -> float:
        """Return the structural distance between two nodes."""
        return self.metric.distance(node_a, node_b)

    @timed("build_distance_matrix")
    def build_matrix(self, nodes: Sequence[Any]) -> DistanceMatrix:
        """Build the distance matrix for a run over ``nodes``."""
        _check_unique(nodes)
        return DistanceMatrix(nodes, self.metric)

    def cluster_with_stats(
        self, nodes: Sequence[Any], too_far: float | None = None
    ) -> ClusteringResult:
        """Partition nodes into clusters and report run statistics.

        Args:
            nodes: Nodes of one tree, without duplicates.
            too_far: Merging stops once the closest pair is at least this
                far apart. Defaults to the configured threshold.

        Returns:
            ClusteringResult with the flattened clusters.

        Raises:
            ValidationError: If no threshold is given or configured.
            DuplicateNodeError: If a node appears twice.
            DisjointTreeError: If the nodes are not all in one tree.
        """
        if too_far is None:
            too_far = self.config.too_far
        if too_far is None:
            raise ValidationError(
                "No clustering threshold given",
                suggestion="Pass too_far or set it in the configuration",
            )

        matrix = self.build_matrix(nodes)
        merges = 0
        final_distance = None

        with PerformanceTimer("agglomerate"):
            while matrix.num_clusters() > 1:
                closest = matrix.closest()
                if closest.distance >= too_far:
                    final_distance = closest.distance
                    break
                matrix.merge(closest.a, closest.b)
                merges += 1
                logger.debug(
                    f"Merged clusters at distance {closest.distance}, "
                    f"{matrix.num_clusters()} remain"
                )

        result = ClusteringResult(
            clusters=matrix.clusters(),
            total_items=len(nodes),
            merges=merges,
            final_distance=final_distance,
        )
        logger.info(
            f"Clustered {result.total_items} nodes into {result.cluster_count} clusters",
            extra={"num_nodes": result.total_items, "num_clusters": result.cluster_count},
        )
        return result

    def cluster(self, nodes: Sequence[Any], too_far: float | None = None) -> list[list[Any]]:
        """Partition nodes into clusters of original nodes."""
        return self.cluster_with_stats(nodes, too_far).clusters


def clusters(
    nodes: Sequence[Any],
    too_far: float,
    navigator: TreeNavigator,
    costs: DistanceCosts | None = None,
) -> list[list[Any]]:
    """Partition the nodes of one tree by structural distance.

    Args:
        nodes: Nodes to cluster, without duplicates.
        too_far: The closest-pair distance at which merging stops.
        navigator: Navigator for the nodes' tree.
        costs: Optional distance cost table.

    Returns:
        One list of nodes per cluster.
    """
    return StructuralClustering(navigator, costs=costs).cluster(nodes, too_far)
