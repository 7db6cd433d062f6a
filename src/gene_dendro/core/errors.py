"""Exception taxonomy for the clustering core.

Every error aborts the current clustering run. Nothing here is retried and
no partial dendrogram is ever returned alongside one of these.
"""

from __future__ import annotations


class GeneDendroError(Exception):
    """Base class for all gene_dendro errors."""


class DataError(GeneDendroError, ValueError):
    """Empty or otherwise malformed item set."""


class DimensionMismatchError(DataError):
    """Item vectors of differing length."""


class DuplicateNameError(DataError):
    """Two items share a name."""


class DuplicateItemError(GeneDendroError, ValueError):
    """A branch would contain the same item in both subtrees."""

    def __init__(self, duplicates) -> None:
        self.duplicates = frozenset(duplicates)
        shown = sorted(self.duplicates)
        super().__init__(
            f"Dendrogram children share items: {shown[:5]}"
            + (f" (and {len(shown) - 5} more)" if len(shown) > 5 else "")
        )


class InvalidPermutationError(GeneDendroError, ValueError):
    """Reorder permutation is not a bijection over [0, n)."""


class IntegrityError(GeneDendroError, RuntimeError):
    """Internal invariant violated (tree or registry corruption)."""


class InvalidArgument(GeneDendroError, TypeError):
    """Programmer-level misuse: missing or zero-sized dependencies."""


class ClusteringCancelledError(GeneDendroError, RuntimeError):
    """Clustering was aborted between merge steps; no result exists."""
