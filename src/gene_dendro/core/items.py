"""Item: a named observation vector, plus adapters from DataSource output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from .errors import DataError
from .validation import validate_item_frame, validate_names, validate_vectors


@dataclass(frozen=True, eq=False)
class Item:
    """A single gene (or any named entity) and its observations.

    The vector is stored as a read-only float64 array so nothing
    downstream can alter an item once it has been handed over.
    """

    name: str
    vector: np.ndarray

    def __post_init__(self) -> None:
        try:
            arr = np.array(self.vector, dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise DataError(f"Item '{self.name}' has non-numeric observations.") from exc
        if arr.ndim != 1:
            raise DataError(
                f"Item '{self.name}' must have a 1-D observation vector, "
                f"got shape {arr.shape}."
            )
        arr.flags.writeable = False
        object.__setattr__(self, "vector", arr)

    def __len__(self) -> int:
        return len(self.vector)


def items_from_pairs(pairs: Iterable[tuple[str, Sequence[float]]]) -> list[Item]:
    """Build validated Items from (name, vector) pairs.

    Raises DataError, DuplicateNameError or DimensionMismatchError when the
    pairs break the DataSource contract.
    """
    items = []
    for position, pair in enumerate(pairs):
        if isinstance(pair, Item):
            items.append(pair)
            continue
        try:
            name, vector = pair
        except (TypeError, ValueError) as exc:
            raise DataError(
                f"Entry {position} must be a (name, vector) pair, got {pair!r}."
            ) from exc
        items.append(Item(str(name), vector))
    return validate_items(items)


def items_from_dataframe(df: pd.DataFrame) -> list[Item]:
    """Build validated Items from a DataFrame (rows=items, index=names)."""
    df = validate_item_frame(df)
    values = np.ascontiguousarray(df.values, dtype=np.float64)
    items = [Item(str(name), values[i]) for i, name in enumerate(df.index)]
    return validate_items(items)


def validate_items(items: Sequence[Item]) -> list[Item]:
    """Re-check unique names, non-empty equal-length finite vectors."""
    items = list(items)
    names = [item.name for item in items]
    validate_names(names)
    validate_vectors(names, [item.vector for item in items])
    return items


def coerce_items(data) -> list[Item]:
    """Accept a DataFrame, a sequence of Items, or (name, vector) pairs."""
    if isinstance(data, pd.DataFrame):
        return items_from_dataframe(data)
    if data is None:
        raise DataError("Not enough items to cluster: no data given.")
    return items_from_pairs(data)
