"""IDMapper: maps item names between input order and clustered order.

Immutable: each transform returns a new IDMapper.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .errors import DataError, DuplicateNameError
from .validation import validate_permutation


@dataclass(frozen=True)
class IDMapper:
    """Maps between item names, their input index and their visual position.

    ``original_order`` is the order items were handed to the clustering
    core. ``visual_order`` is the order a renderer should draw them in
    (the dendrogram's leaf order once clustering has run).
    """

    original_order: tuple[str, ...]
    visual_order: tuple[str, ...]
    _original_index: dict = field(init=False, repr=False, compare=False)
    _visual_index: dict = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_original_index", {name: i for i, name in enumerate(self.original_order)}
        )
        object.__setattr__(
            self, "_visual_index", {name: i for i, name in enumerate(self.visual_order)}
        )

    @classmethod
    def from_ids(cls, ids: Sequence[str]) -> IDMapper:
        """Create an IDMapper from names in input order (identity visual order)."""
        names = tuple(str(i) for i in ids)
        if len(names) == 0:
            raise DataError("Cannot create IDMapper from empty ID list.")
        if len(set(names)) != len(names):
            raise DuplicateNameError("IDs must be unique.")
        return cls(original_order=names, visual_order=names)

    @property
    def size(self) -> int:
        return len(self.original_order)

    def original_index_of(self, name: str) -> int:
        """Index of ``name`` in the input order. KeyError if unknown."""
        return self._original_index[name]

    def visual_index_of(self, name: str) -> int | None:
        """Return the visual index of a name, or None if not found."""
        return self._visual_index.get(name)

    def resolve_range(self, start: int, end: int) -> list[str]:
        """Given visual index range [start, end), return item names."""
        start = max(0, start)
        end = min(self.size, end)
        if start >= end:
            return []
        return list(self.visual_order[start:end])

    def visual_permutation(self) -> list[int]:
        """Original indices in visual order: the permutation to feed ``reorder``."""
        return [self._original_index[name] for name in self.visual_order]

    def apply_permutation(self, permutation: Sequence[int]) -> IDMapper:
        """Return a new IDMapper whose visual position i shows original item ``permutation[i]``."""
        perm = validate_permutation(permutation, self.size)
        return IDMapper(
            original_order=self.original_order,
            visual_order=tuple(self.original_order[p] for p in perm),
        )

    def to_dict(self) -> dict:
        """Serialize for JSON transfer to a renderer."""
        return {
            "original_order": list(self.original_order),
            "visual_order": list(self.visual_order),
            "permutation": self.visual_permutation(),
            "size": self.size,
        }
