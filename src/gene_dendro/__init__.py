"""gene-dendro: average-linkage clustering of named vectors into a dendrogram."""

from ._version import __version__
from .api import cluster_items, cluster_dataframe
from .config import ClusterConfig
from .core.distance_matrix import DistanceMatrix
from .core.errors import (
    GeneDendroError,
    DataError,
    DimensionMismatchError,
    DuplicateNameError,
    DuplicateItemError,
    InvalidPermutationError,
    IntegrityError,
    InvalidArgument,
    ClusteringCancelledError,
)
from .core.id_mapper import IDMapper
from .core.items import Item
from .export.linkage import to_linkage_matrix
from .transform.cluster import ClusteringEngine, EngineState, MergeRecord
from .transform.pipeline import ClusterResult
from .tree import DendrogramNode, NodeKind, make_leaf, make_branch, cut_at_height, format_tree

__all__ = [
    "__version__",
    "cluster_items",
    "cluster_dataframe",
    "ClusterConfig",
    "ClusterResult",
    "ClusteringEngine",
    "EngineState",
    "MergeRecord",
    "DistanceMatrix",
    "IDMapper",
    "Item",
    "DendrogramNode",
    "NodeKind",
    "make_leaf",
    "make_branch",
    "cut_at_height",
    "format_tree",
    "to_linkage_matrix",
    "GeneDendroError",
    "DataError",
    "DimensionMismatchError",
    "DuplicateNameError",
    "DuplicateItemError",
    "InvalidPermutationError",
    "IntegrityError",
    "InvalidArgument",
    "ClusteringCancelledError",
]
