"""Tests for MergeQueue ordering and delete-by-pair."""

import pytest

from gene_dendro.core.errors import IntegrityError
from gene_dendro.transform.merge_queue import MergeCandidate, MergeQueue, canonical_pair


class TestCanonicalPair:
    def test_higher_first(self):
        assert canonical_pair(2, 5) == (5, 2)
        assert canonical_pair(5, 2) == (5, 2)

    def test_self_pair_rejected(self):
        with pytest.raises(IntegrityError):
            canonical_pair(3, 3)


class TestOrdering:
    def test_pops_smallest_distance(self):
        q = MergeQueue()
        q.add(1, 0, 0.5)
        q.add(2, 0, 0.1)
        q.add(2, 1, 0.9)
        assert q.pop() == MergeCandidate(0.1, 2, 0)
        assert q.pop().distance == 0.5
        assert q.pop().distance == 0.9
        assert not q

    def test_ties_broken_by_higher_then_lower(self):
        q = MergeQueue()
        q.add(3, 1, 0.5)
        q.add(1, 0, 0.5)
        q.add(3, 0, 0.5)
        q.add(2, 1, 0.5)
        order = [(c.higher, c.lower) for c in q]
        assert order == [(1, 0), (2, 1), (3, 0), (3, 1)]

    def test_peek_does_not_remove(self):
        q = MergeQueue()
        q.add(1, 0, 0.3)
        assert q.peek() == MergeCandidate(0.3, 1, 0)
        assert len(q) == 1

    def test_peek_empty(self):
        assert MergeQueue().peek() is None

    def test_pop_empty(self):
        with pytest.raises(IndexError):
            MergeQueue().pop()


class TestMembership:
    def test_argument_order_irrelevant(self):
        q = MergeQueue()
        q.add(0, 4, 0.2)
        assert (4, 0) in q
        assert (0, 4) in q
        assert q.distance_of(0, 4) == 0.2

    def test_duplicate_pair_rejected(self):
        q = MergeQueue()
        q.add(2, 1, 0.2)
        with pytest.raises(IntegrityError, match="already queued"):
            q.add(1, 2, 0.7)

    def test_discard_by_pair(self):
        q = MergeQueue()
        q.add(2, 1, 0.2)
        q.add(2, 0, 0.4)
        removed = q.discard(1, 2)
        assert removed == MergeCandidate(0.2, 2, 1)
        assert (2, 1) not in q
        assert q.peek().distance == 0.4
        assert len(q) == 1

    def test_discard_missing_is_noop(self):
        q = MergeQueue()
        q.add(1, 0, 0.1)
        assert q.discard(3, 2) is None
        assert len(q) == 1

    def test_requeue_with_new_distance(self):
        q = MergeQueue()
        q.add(1, 0, 0.1)
        q.add(2, 0, 0.2)
        q.discard(1, 0)
        q.add(1, 0, 0.9)
        assert [c.distance for c in q] == [0.2, 0.9]
