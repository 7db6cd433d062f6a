"""Input validation with clear error messages for bioinformaticians."""

from __future__ import annotations

import operator
from collections import Counter
from typing import Any, Sequence

import numpy as np
import pandas as pd

from .errors import (
    DataError,
    DimensionMismatchError,
    DuplicateNameError,
    InvalidPermutationError,
)


def _preview(values: list) -> str:
    """Render at most five offending values, with a count of the rest."""
    return f"{values[:5]}" + (
        f" (and {len(values) - 5} more)" if len(values) > 5 else ""
    )


def validate_item_frame(data: Any) -> pd.DataFrame:
    """Validate that data is a numeric DataFrame with one item per row.

    Returns the validated DataFrame (unchanged).
    """
    if not isinstance(data, pd.DataFrame):
        raise TypeError(
            f"Expected a pandas DataFrame, got {type(data).__name__}. "
            "Wrap your data with pd.DataFrame(data, index=gene_names)."
        )
    if data.shape[0] == 0:
        raise DataError("DataFrame has no rows: not enough items to cluster.")
    if data.shape[1] == 0:
        raise DataError("DataFrame has no columns: item vectors are empty.")
    if data.index.has_duplicates:
        dupes = data.index[data.index.duplicated()].unique().tolist()
        raise DuplicateNameError(f"Item names must be unique. Found duplicates: {_preview(dupes)}")
    numeric_df = data.select_dtypes(include=[np.number])
    if numeric_df.shape[1] != data.shape[1]:
        non_numeric = [c for c in data.columns if c not in numeric_df.columns]
        raise TypeError(
            f"All columns must be numeric. Non-numeric columns: {_preview(non_numeric)}"
        )
    return data


def validate_names(names: Sequence[str]) -> None:
    """Reject an empty name list or one with repeated names."""
    if len(names) == 0:
        raise DataError("Not enough items to cluster: the item set is empty.")
    counts = Counter(names)
    dupes = [name for name, count in counts.items() if count > 1]
    if dupes:
        raise DuplicateNameError(f"Item names must be unique. Found duplicates: {_preview(dupes)}")


def validate_vectors(names: Sequence[str], vectors: Sequence[np.ndarray]) -> int:
    """Check that all vectors are non-empty, finite and of equal length.

    Returns the shared vector length.
    """
    if len(vectors) == 0:
        raise DataError("Not enough items to cluster: the item set is empty.")
    empty = [name for name, vec in zip(names, vectors) if len(vec) == 0]
    if empty:
        raise DataError(f"Observation vectors must not be empty. Empty items: {_preview(empty)}")
    width = len(vectors[0])
    mismatched = [
        f"{name} ({len(vec)})"
        for name, vec in zip(names, vectors)
        if len(vec) != width
    ]
    if mismatched:
        raise DimensionMismatchError(
            f"All observation vectors must have length {width}. "
            f"Mismatched items: {_preview(mismatched)}"
        )
    non_finite = [name for name, vec in zip(names, vectors) if not np.all(np.isfinite(vec))]
    if non_finite:
        raise DataError(
            f"Observation vectors must be finite (no NaN or inf). "
            f"Offending items: {_preview(non_finite)}"
        )
    return width


def validate_permutation(permutation: Sequence[int], n: int) -> list[int]:
    """Check that ``permutation`` is a bijection over [0, n) of true integers.

    Floats, strings and bools are rejected rather than coerced. Returns the
    permutation as a list of Python ints.
    """
    perm: list[int] = []
    for p in permutation:
        if isinstance(p, (bool, np.bool_)):
            raise InvalidPermutationError(f"Permutation must contain integers, got {p!r}.")
        try:
            perm.append(operator.index(p))
        except TypeError as exc:
            raise InvalidPermutationError(
                f"Permutation must contain integers, got {p!r}."
            ) from exc
    if len(perm) != n:
        raise InvalidPermutationError(
            f"Permutation has {len(perm)} entries, expected {n}."
        )
    out_of_range = [p for p in perm if p < 0 or p >= n]
    if out_of_range:
        raise InvalidPermutationError(
            f"Permutation values must lie in [0, {n}). Found: {out_of_range[:5]}"
        )
    if len(set(perm)) != n:
        raise InvalidPermutationError("Permutation contains duplicate indices.")
    return perm
