"""Export the merge history as a SciPy linkage matrix."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..core.errors import IntegrityError
from ..transform.cluster import MergeRecord


def linkage_from_merges(merges: Sequence[MergeRecord], n_items: int) -> np.ndarray:
    """Convert merge records into an ``(n-1, 4)`` SciPy linkage matrix.

    Row k is ``[id_a, id_b, distance, size]`` where ids ``< n_items`` are
    original items and id ``n_items + k`` is the cluster formed at step k.
    Suitable for ``scipy.cluster.hierarchy.dendrogram``.
    """
    if len(merges) != max(n_items - 1, 0):
        raise IntegrityError(
            f"A complete run over {n_items} items has {max(n_items - 1, 0)} merges, "
            f"got {len(merges)}."
        )
    # Slot numbers equal original indices until a slot absorbs another
    cluster_id = list(range(n_items))
    Z = np.empty((len(merges), 4), dtype=np.float64)
    for k, merge in enumerate(merges):
        a = cluster_id[merge.survivor]
        b = cluster_id[merge.absorbed]
        Z[k] = (min(a, b), max(a, b), merge.distance, merge.size)
        cluster_id[merge.survivor] = n_items + k
    return Z


def to_linkage_matrix(result) -> np.ndarray:
    """Linkage matrix for a :class:`ClusterResult`."""
    return linkage_from_merges(result.merges, result.n_items)
