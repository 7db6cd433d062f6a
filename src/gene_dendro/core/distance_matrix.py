"""DistanceMatrix: pairwise RMS dissimilarities stored as a packed lower triangle."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import pandas as pd

from .errors import DataError, InvalidArgument
from .items import Item, validate_items
from .validation import validate_permutation

logger = logging.getLogger(__name__)


class DistanceMatrix:
    """Symmetric n x n dissimilarity matrix over item indices.

    Only entries below the diagonal are stored, packed row by row: row ``i``
    holds ``d(i, 0) .. d(i, i-1)`` starting at offset ``i*(i-1)/2``. The
    diagonal is zero by definition and the upper triangle mirrors the lower.

    Item names travel with the rows, so ``reorder`` keeps them aligned.
    """

    __slots__ = ("_tri", "_names", "_max_value", "_normalized")

    def __init__(self, names: Sequence[str], lower: np.ndarray) -> None:
        n = len(names)
        if n == 0:
            raise InvalidArgument("DistanceMatrix needs at least one item.")
        lower = np.ascontiguousarray(lower, dtype=np.float64).ravel()
        if len(lower) != n * (n - 1) // 2:
            raise InvalidArgument(
                f"Packed lower triangle for {n} items must have "
                f"{n * (n - 1) // 2} entries, got {len(lower)}."
            )
        self._names: tuple[str, ...] = tuple(names)
        self._tri: np.ndarray = lower
        self._max_value: float = float(lower.max()) if len(lower) else 0.0
        self._normalized = False

    # --- Construction ---

    @classmethod
    def build(cls, items: Sequence[Item], normalize: bool = True) -> DistanceMatrix:
        """Compute root-mean-square distances between every pair of items.

        ``d(i, j) = sqrt(mean((x_i - x_j) ** 2))``. Raises DataError for an
        empty item set or empty vectors and DimensionMismatchError when
        vector lengths differ.
        """
        items = validate_items(items)
        n = len(items)
        data = np.vstack([item.vector for item in items])
        n_dims = data.shape[1]

        if n < 2:
            lower = np.empty(0, dtype=np.float64)
        else:
            # Lazy import scipy (slow cold start)
            from scipy.spatial.distance import pdist, squareform

            square = squareform(pdist(data, metric="sqeuclidean"))
            rows, cols = np.tril_indices(n, k=-1)
            lower = np.sqrt(square[rows, cols] / n_dims)

        matrix = cls([item.name for item in items], lower)
        if normalize:
            matrix.normalize()
        return matrix

    @classmethod
    def from_dense(cls, names: Sequence[str], dense: np.ndarray) -> DistanceMatrix:
        """Create from a full square matrix. Only the lower triangle is read."""
        dense = np.asarray(dense, dtype=np.float64)
        n = len(names)
        if dense.shape != (n, n):
            raise DataError(
                f"Dense matrix shape {dense.shape} does not match {n} names."
            )
        rows, cols = np.tril_indices(n, k=-1)
        return cls(names, dense[rows, cols])

    # --- Normalization ---

    def normalize(self) -> float:
        """Divide every entry by the global maximum, in place.

        Returns the maximum used. When all distances are zero (all items
        identical) nothing is divided and every entry stays 0.
        """
        max_value = float(self._tri.max()) if len(self._tri) else 0.0
        if max_value > 0.0:
            self._tri = self._tri / max_value
            logger.debug("Normalized %d distances by max %.6g", len(self._tri), max_value)
        elif len(self._tri):
            logger.warning(
                "All %d pairwise distances are zero; merge order falls back "
                "to index tie-breaks.", len(self._tri),
            )
        self._max_value = float(self._tri.max()) if len(self._tri) else 0.0
        self._normalized = True
        return max_value

    # --- Access ---

    @property
    def size(self) -> int:
        return len(self._names)

    @property
    def names(self) -> tuple[str, ...]:
        """Item names in row order."""
        return self._names

    @property
    def max_value(self) -> float:
        """Largest stored distance (1.0 after normalization unless all zero)."""
        return self._max_value

    @property
    def is_normalized(self) -> bool:
        return self._normalized

    def name_of(self, index: int) -> str:
        self._check_index(index)
        return self._names[index]

    def get(self, i: int, j: int) -> float:
        """Distance between items i and j, in either argument order."""
        self._check_index(i)
        self._check_index(j)
        if i == j:
            return 0.0
        if i < j:
            i, j = j, i
        return float(self._tri[i * (i - 1) // 2 + j])

    def row(self, i: int) -> np.ndarray:
        """Stored ragged row i: distances to items 0 .. i-1 (read-only view)."""
        self._check_index(i)
        start = i * (i - 1) // 2
        v = self._tri[start:start + i].view()
        v.flags.writeable = False
        return v

    def row_totals(self) -> np.ndarray:
        """Sum of each item's distances to all other items."""
        return self.to_dense().sum(axis=1)

    def to_dense(self) -> np.ndarray:
        """Full symmetric (n, n) float64 array with a zero diagonal."""
        n = self.size
        dense = np.zeros((n, n), dtype=np.float64)
        if n > 1:
            rows, cols = np.tril_indices(n, k=-1)
            dense[rows, cols] = self._tri
            dense[cols, rows] = self._tri
        return dense

    def to_dataframe(self) -> pd.DataFrame:
        """Dense matrix labelled by item names on both axes."""
        names = list(self._names)
        return pd.DataFrame(self.to_dense(), index=names, columns=names)

    # --- Reordering ---

    def reorder(self, permutation: Sequence[int]) -> DistanceMatrix:
        """Return a new matrix whose row i is the old row ``permutation[i]``.

        Columns and names move the same way. The permutation must be a
        bijection over [0, n); anything else raises InvalidPermutationError.
        """
        perm = np.asarray(validate_permutation(permutation, self.size), dtype=np.intp)
        n = self.size
        if n > 1:
            square = self.to_dense()[np.ix_(perm, perm)]
            rows, cols = np.tril_indices(n, k=-1)
            lower = square[rows, cols]
        else:
            lower = np.empty(0, dtype=np.float64)
        result = DistanceMatrix([self._names[p] for p in perm], lower)
        result._normalized = self._normalized
        return result

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.size:
            raise IndexError(f"Item index {index} out of range [0, {self.size}).")

    def __repr__(self) -> str:
        return f"DistanceMatrix(size={self.size}, normalized={self._normalized})"
