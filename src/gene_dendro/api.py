"""User-facing entry points."""

from __future__ import annotations

from typing import Callable

import pandas as pd

from .config import ClusterConfig
from .core.items import coerce_items, items_from_dataframe
from .transform.pipeline import ClusterResult, TransformPipeline


def cluster_items(
    data,
    *,
    should_cancel: Callable[[], bool] | None = None,
    **options,
) -> ClusterResult:
    """Cluster named observation vectors with average linkage.

    Usage::

        import gene_dendro as gd

        result = gd.cluster_items([("A", [1, 0]), ("B", [1, 0]), ("C", [5, 5])])
        print(result.leaf_names)
        print(gd.format_tree(result.root))

    Parameters
    ----------
    data : DataFrame, sequence of Item, or sequence of (name, vector) pairs
        Already-normalized observations, one item per row.
    should_cancel : callable, optional
        Polled between merges; returning True aborts with
        ClusteringCancelledError.
    **options
        Fields of :class:`ClusterConfig` (``normalize``, ``allow_single_item``).
    """
    config = ClusterConfig.from_kwargs(**options)
    return TransformPipeline.run(coerce_items(data), config, should_cancel=should_cancel)


def cluster_dataframe(
    df: pd.DataFrame,
    *,
    should_cancel: Callable[[], bool] | None = None,
    **options,
) -> ClusterResult:
    """Cluster the rows of ``df`` (index = item names, columns = observations)."""
    config = ClusterConfig.from_kwargs(**options)
    return TransformPipeline.run(items_from_dataframe(df), config, should_cancel=should_cancel)
