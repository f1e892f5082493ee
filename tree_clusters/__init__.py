"""Structural clustering of document tree nodes.

Groups scattered nodes of one parsed document into clusters by how close
they sit in the tree, so that, for example, the paragraphs of an article
interleaved with links and images come out as one region.

Main components:
- distance: the structural distance metric between two nodes
- matrix: sparse inter-cluster distance matrix with single-linkage merging
- clustering: the agglomerative driver
- navigation: the tree navigator contract and a BeautifulSoup adapter
"""

__version__ = "0.1.0"

from .clustering import ClusteringResult, StructuralClustering, clusters
from .config import ClusteringConfig, load_config
from .distance import DEFAULT_COSTS, DistanceCosts, TreeDistance, distance, num_strides
from .errors import (
    ClusteringError,
    ConfigurationError,
    DisjointTreeError,
    DuplicateNodeError,
    ErrorCategory,
    InsufficientClustersError,
    UnknownClusterError,
)
from .matrix import ClosestPair, Cluster, DistanceMatrix, Leaf, Merged
from .navigation import DocumentPosition, SoupNavigator, TreeNavigator, parse_document

__all__ = [
    "__version__",
    # Clustering
    "clusters",
    "StructuralClustering",
    "ClusteringResult",
    # Distance
    "distance",
    "num_strides",
    "TreeDistance",
    "DistanceCosts",
    "DEFAULT_COSTS",
    # Matrix
    "DistanceMatrix",
    "ClosestPair",
    "Cluster",
    "Leaf",
    "Merged",
    # Navigation
    "TreeNavigator",
    "DocumentPosition",
    "SoupNavigator",
    "parse_document",
    # Configuration
    "ClusteringConfig",
    "load_config",
    # Errors
    "ClusteringError",
    "ErrorCategory",
    "ConfigurationError",
    "DisjointTreeError",
    "DuplicateNodeError",
    "InsufficientClustersError",
    "UnknownClusterError",
]
