"""MergeQueue: ordered set of candidate cluster pairs, deletable by pair."""

from __future__ import annotations

from typing import Iterator, NamedTuple

from sortedcontainers import SortedSet

from ..core.errors import IntegrityError


class MergeCandidate(NamedTuple):
    """A pair of active cluster slots, ordered by (distance, higher, lower).

    Tuple ordering gives the merge order directly: closest pair first, and
    exact distance ties broken by slot indices so runs are deterministic.
    """

    distance: float
    higher: int
    lower: int


def canonical_pair(i: int, j: int) -> tuple[int, int]:
    """Return ``(higher, lower)``; slot data is only stored that way round."""
    if i == j:
        raise IntegrityError(f"A cluster cannot be paired with itself (slot {i}).")
    return (i, j) if i > j else (j, i)


class MergeQueue:
    """Sorted, uniquely keyed set of merge candidates.

    Each unordered slot pair appears at most once. Lookup by pair goes
    through a dict; ordering lives in a ``SortedSet``, so peek, insert and
    delete-by-pair are all logarithmic in the number of candidates.
    """

    __slots__ = ("_ordered", "_by_pair")

    def __init__(self) -> None:
        self._ordered: SortedSet = SortedSet()
        self._by_pair: dict[tuple[int, int], MergeCandidate] = {}

    def __len__(self) -> int:
        return len(self._by_pair)

    def __bool__(self) -> bool:
        return bool(self._by_pair)

    def __contains__(self, pair: tuple[int, int]) -> bool:
        return canonical_pair(*pair) in self._by_pair

    def __iter__(self) -> Iterator[MergeCandidate]:
        """Candidates in merge order."""
        return iter(self._ordered)

    def add(self, i: int, j: int, distance: float) -> MergeCandidate:
        """Insert the pair (i, j) keyed on ``distance``.

        Raises IntegrityError if the pair is already queued; a stale entry
        must be removed before its distance changes.
        """
        higher, lower = canonical_pair(i, j)
        if (higher, lower) in self._by_pair:
            raise IntegrityError(f"Cluster pair ({higher}, {lower}) is already queued.")
        candidate = MergeCandidate(float(distance), higher, lower)
        self._by_pair[(higher, lower)] = candidate
        self._ordered.add(candidate)
        return candidate

    def discard(self, i: int, j: int) -> MergeCandidate | None:
        """Remove the pair (i, j) if present and return its candidate."""
        candidate = self._by_pair.pop(canonical_pair(i, j), None)
        if candidate is not None:
            self._ordered.remove(candidate)
        return candidate

    def peek(self) -> MergeCandidate | None:
        """The next candidate to merge, without removing it."""
        if not self._ordered:
            return None
        return self._ordered[0]

    def pop(self) -> MergeCandidate:
        """Remove and return the closest pair. IndexError when empty."""
        if not self._ordered:
            raise IndexError("pop from an empty MergeQueue")
        candidate = self._ordered.pop(0)
        del self._by_pair[(candidate.higher, candidate.lower)]
        return candidate

    def distance_of(self, i: int, j: int) -> float | None:
        candidate = self._by_pair.get(canonical_pair(i, j))
        return None if candidate is None else candidate.distance
