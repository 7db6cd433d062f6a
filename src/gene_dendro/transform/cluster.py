"""ClusteringEngine: average-linkage agglomerative clustering.

Merges the two closest active clusters until one remains. Candidate
pairs live in a :class:`MergeQueue`; every merge removes the O(n) pairs
touching the two merged slots, updates the survivor's distances with the
average-link rule and re-queues the survivor's O(n) new pairs. With
logarithmic queue operations the whole run is O(n^2 log n).
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable

from ..core.distance_matrix import DistanceMatrix
from ..core.errors import (
    ClusteringCancelledError,
    DuplicateNameError,
    IntegrityError,
    InvalidArgument,
)
from ..tree.node import DendrogramNode, make_branch
from .merge_queue import MergeQueue
from .registry import ClusterRegistry

logger = logging.getLogger(__name__)


class EngineState(enum.Enum):
    INITIALIZING = "initializing"
    MERGING = "merging"
    TERMINATED = "terminated"
    ABORTED = "aborted"


@dataclass(frozen=True)
class MergeRecord:
    """One step of the merge history."""

    step: int
    survivor: int   # higher slot, keeps the merged cluster
    absorbed: int   # lower slot, tombstoned by the merge
    distance: float
    size: int       # items in the merged cluster


class ClusteringEngine:
    """Owns the cluster registry and merge queue for one clustering run.

    Usage::

        matrix = DistanceMatrix.build(items)
        engine = ClusteringEngine(matrix)
        root = engine.run_to_completion()
        sorted_matrix = engine.sorted_matrix()

    An engine is single-use and not thread-safe.
    """

    def __init__(self, matrix: DistanceMatrix) -> None:
        if matrix is None or not isinstance(matrix, DistanceMatrix):
            raise InvalidArgument(
                f"ClusteringEngine requires a DistanceMatrix, got {type(matrix).__name__}."
            )
        if matrix.size == 0:
            raise InvalidArgument("ClusteringEngine requires a non-empty DistanceMatrix.")

        self._state = EngineState.INITIALIZING
        self._matrix = matrix

        self._name_to_index: dict[str, int] = {}
        for index, name in enumerate(matrix.names):
            if name in self._name_to_index:
                raise DuplicateNameError(f"Item name '{name}' appears more than once.")
            self._name_to_index[name] = index

        self._registry = ClusterRegistry(matrix)
        self._queue = MergeQueue()
        for higher in range(len(self._registry)):
            for lower in range(higher):
                self._queue.add(higher, lower, self._registry.average(higher, lower))

        self._merges: list[MergeRecord] = []
        self._root: DendrogramNode | None = None
        self._leaf_order: list[int] | None = None
        self._sorted_matrix: DistanceMatrix | None = None
        self._state = EngineState.MERGING
        logger.debug(
            "Initialized %d clusters with %d candidate pairs",
            len(self._registry), len(self._queue),
        )

    # --- State ---

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def n_items(self) -> int:
        return self._matrix.size

    @property
    def active_count(self) -> int:
        return self._registry.active_count

    @property
    def matrix(self) -> DistanceMatrix:
        """The (unsorted) matrix clustering was seeded from."""
        return self._matrix

    @property
    def merges(self) -> tuple[MergeRecord, ...]:
        return tuple(self._merges)

    @property
    def name_to_index(self) -> dict[str, int]:
        return dict(self._name_to_index)

    # --- Merging ---

    def step(self) -> MergeRecord | None:
        """Merge the closest pair of clusters.

        Returns the MergeRecord, or None once a single cluster remains
        (repeated calls are no-ops).
        """
        self._check_not_aborted()
        if not self._queue:
            self._terminate()
            return None

        candidate = self._queue.pop()
        survivor, absorbed = candidate.higher, candidate.lower
        registry = self._registry
        others = [
            slot for slot in registry.active_slots()
            if slot != survivor and slot != absorbed
        ]

        # Queued keys are the pre-merge averages; drop them before they change
        for other in others:
            self._queue.discard(survivor, other)
            self._queue.discard(absorbed, other)

        registry.replace_node(
            survivor,
            make_branch(
                registry.node(survivor),
                registry.node(absorbed),
                height=candidate.distance,
            ),
        )

        # Average-link update: d(A+B, C) = (T(A,C) + T(B,C)) / (|A+B| * |C|)
        for other in others:
            registry.accumulate(survivor, other, registry.total(absorbed, other))

        registry.deactivate(absorbed)

        for other in others:
            self._queue.add(survivor, other, registry.average(survivor, other))

        record = MergeRecord(
            step=len(self._merges),
            survivor=survivor,
            absorbed=absorbed,
            distance=candidate.distance,
            size=registry.size(survivor),
        )
        self._merges.append(record)
        logger.debug(
            "Merge %d: slot %d absorbs slot %d at distance %.6g (size %d)",
            record.step, survivor, absorbed, record.distance, record.size,
        )
        if not self._queue:
            self._terminate()
        return record

    def run_to_completion(
        self,
        should_cancel: Callable[[], bool] | None = None,
    ) -> DendrogramNode:
        """Merge until one cluster remains and return the dendrogram root.

        Once finished, further calls return the same root without merging.

        Parameters
        ----------
        should_cancel : callable, optional
            Polled between merge steps. When it returns True the run is
            aborted, ClusteringCancelledError is raised, and the engine can
            no longer produce a result.
        """
        self._check_not_aborted()
        while self._state is not EngineState.TERMINATED:
            if should_cancel is not None and should_cancel():
                self._state = EngineState.ABORTED
                self._root = None
                logger.info(
                    "Clustering cancelled after %d of %d merges",
                    len(self._merges), self.n_items - 1,
                )
                raise ClusteringCancelledError(
                    f"Clustering cancelled after {len(self._merges)} merges; "
                    "partial dendrogram discarded."
                )
            self.step()
        return self._root

    def _terminate(self) -> None:
        if self._state is EngineState.TERMINATED:
            return
        self._root = self._registry.node(self._registry.sole_survivor())
        self._state = EngineState.TERMINATED

    def _check_not_aborted(self) -> None:
        if self._state is EngineState.ABORTED:
            raise ClusteringCancelledError(
                "This clustering run was cancelled; create a new engine."
            )

    # --- Results ---

    @property
    def root(self) -> DendrogramNode:
        """The finished dendrogram. Raises IntegrityError before termination."""
        self._check_not_aborted()
        if self._state is not EngineState.TERMINATED:
            raise IntegrityError(
                f"Dendrogram is incomplete: {self.active_count} clusters remain."
            )
        return self._root

    def sorted_leaf_order(self) -> list[int]:
        """Original item indices in the dendrogram's canonical leaf order.

        Runs the clustering first if needed. This is the permutation to
        pass to :meth:`DistanceMatrix.reorder`.
        """
        if self._leaf_order is None:
            root = self.run_to_completion()
            order: list[int] = []
            for leaf in root.iter_leaves():
                index = self._name_to_index.get(leaf.name)
                if index is None:
                    raise IntegrityError(f"Dendrogram leaf '{leaf.name}' is not an input item.")
                order.append(index)
            if len(order) != self.n_items:
                raise IntegrityError(
                    f"Dendrogram has {len(order)} leaves but {self.n_items} items were clustered."
                )
            self._leaf_order = order
        return list(self._leaf_order)

    def sorted_matrix(self) -> DistanceMatrix:
        """The distance matrix reordered to match the leaf order (cached)."""
        if self._sorted_matrix is None:
            self._sorted_matrix = self._matrix.reorder(self.sorted_leaf_order())
        return self._sorted_matrix
