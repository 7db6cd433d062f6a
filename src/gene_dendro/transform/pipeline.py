"""TransformPipeline: items -> distance matrix -> dendrogram -> sorted matrix."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Sequence

from ..config import ClusterConfig
from ..core.distance_matrix import DistanceMatrix
from ..core.errors import DataError
from ..core.id_mapper import IDMapper
from ..core.items import Item
from ..tree.node import DendrogramNode
from .cluster import ClusteringEngine, MergeRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClusterResult:
    """Everything a renderer needs from one clustering run."""

    root: DendrogramNode
    leaf_order: tuple[int, ...]       # original indices in clustered order
    sorted_matrix: DistanceMatrix     # rows/cols follow leaf_order
    id_mapper: IDMapper               # names in input and clustered order
    merges: tuple[MergeRecord, ...]
    matrix: DistanceMatrix            # input order, after normalization

    @property
    def leaf_names(self) -> list[str]:
        return list(self.id_mapper.visual_order)

    @property
    def n_items(self) -> int:
        return self.matrix.size


class TransformPipeline:
    """Runs the full clustering chain for one item set.

    1. Gate on the item count (a single item is optional)
    2. Build the RMS distance matrix, which validates the items, and normalize it
    3. Merge to a single dendrogram
    4. Reorder the matrix to the dendrogram's leaf order
    """

    @staticmethod
    def run(
        items: Sequence[Item],
        config: ClusterConfig | None = None,
        should_cancel: Callable[[], bool] | None = None,
    ) -> ClusterResult:
        config = config or ClusterConfig()
        items = list(items)
        if len(items) < 2 and not config.allow_single_item:
            raise DataError(
                f"Not enough items to cluster: got {len(items)}, need at least 2."
            )

        t0 = time.perf_counter()
        matrix = DistanceMatrix.build(items, normalize=config.normalize)
        engine = ClusteringEngine(matrix)
        root = engine.run_to_completion(should_cancel=should_cancel)
        leaf_order = engine.sorted_leaf_order()

        result = ClusterResult(
            root=root,
            leaf_order=tuple(leaf_order),
            sorted_matrix=engine.sorted_matrix(),
            id_mapper=IDMapper.from_ids(matrix.names).apply_permutation(leaf_order),
            merges=engine.merges,
            matrix=matrix,
        )
        logger.info(
            "Clustered %d items x %d observations in %d merges (%.3fs)",
            len(items), len(items[0]), len(result.merges), time.perf_counter() - t0,
        )
        return result
