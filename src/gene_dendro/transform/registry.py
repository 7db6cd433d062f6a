"""ClusterRegistry: active cluster slots and their accumulated distances."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np

from ..core.distance_matrix import DistanceMatrix
from ..core.errors import IntegrityError, InvalidArgument
from ..tree.node import DendrogramNode, make_leaf
from .merge_queue import canonical_pair


@dataclass
class ClusterRecord:
    """One active cluster slot.

    ``total`` and ``average`` are indexed by *lower* slot numbers only, so
    slot k holds k entries. Totals are accumulated exactly and averages
    derived from them, never averaged incrementally.
    """

    node: DendrogramNode
    total: np.ndarray
    average: np.ndarray

    @property
    def size(self) -> int:
        return self.node.gene_count


class ClusterRegistry:
    """Array of cluster slots seeded with one leaf per matrix item.

    Absorbed slots are tombstoned (set to ``None``) rather than removed,
    so every other slot keeps its index for the lifetime of the run.
    """

    def __init__(self, matrix: DistanceMatrix) -> None:
        if matrix is None or not isinstance(matrix, DistanceMatrix):
            raise InvalidArgument("ClusterRegistry requires a DistanceMatrix.")
        if matrix.size == 0:
            raise InvalidArgument("ClusterRegistry requires a non-empty DistanceMatrix.")

        weights = matrix.row_totals()
        self._records: list[ClusterRecord | None] = []
        for i, name in enumerate(matrix.names):
            seed = np.array(matrix.row(i), dtype=np.float64)
            self._records.append(ClusterRecord(
                node=make_leaf(name, float(weights[i])),
                total=seed,
                average=seed.copy(),
            ))
        self._active = len(self._records)

    def __len__(self) -> int:
        """Number of slots, active or not."""
        return len(self._records)

    @property
    def active_count(self) -> int:
        return self._active

    def is_active(self, slot: int) -> bool:
        return self._records[slot] is not None

    def active_slots(self) -> Iterator[int]:
        for slot, record in enumerate(self._records):
            if record is not None:
                yield slot

    def record(self, slot: int) -> ClusterRecord:
        record = self._records[slot]
        if record is None:
            raise IntegrityError(f"Cluster slot {slot} has already been merged away.")
        return record

    def node(self, slot: int) -> DendrogramNode:
        return self.record(slot).node

    def size(self, slot: int) -> int:
        return self.record(slot).size

    def total(self, i: int, j: int) -> float:
        """Sum of all item-to-item distances between clusters i and j."""
        higher, lower = canonical_pair(i, j)
        return float(self.record(higher).total[lower])

    def average(self, i: int, j: int) -> float:
        """Average-link distance between clusters i and j."""
        higher, lower = canonical_pair(i, j)
        return float(self.record(higher).average[lower])

    def replace_node(self, slot: int, node: DendrogramNode) -> None:
        self.record(slot).node = node

    def accumulate(self, i: int, j: int, extra_total: float) -> float:
        """Add ``extra_total`` to the i-j total and refresh the cached average.

        The average divides by the *current* sizes of both clusters, so call
        this after the surviving slot's node has been replaced by the merged
        branch. Returns the new average.
        """
        higher, lower = canonical_pair(i, j)
        record = self.record(higher)
        record.total[lower] += extra_total
        record.average[lower] = record.total[lower] / (self.size(i) * self.size(j))
        return float(record.average[lower])

    def deactivate(self, slot: int) -> ClusterRecord:
        """Tombstone ``slot`` and zero every higher slot's entry for it."""
        record = self.record(slot)
        self._records[slot] = None
        self._active -= 1
        for higher in range(slot + 1, len(self._records)):
            other = self._records[higher]
            if other is not None:
                other.total[slot] = 0.0
                other.average[slot] = 0.0
        return record

    def sole_survivor(self) -> int:
        """Slot index of the one remaining cluster."""
        if self._active != 1:
            raise IntegrityError(
                f"Expected exactly one remaining cluster, found {self._active}."
            )
        return next(self.active_slots())
