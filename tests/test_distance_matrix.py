"""Tests for DistanceMatrix."""

import math

import numpy as np
import pytest

from gene_dendro.core.distance_matrix import DistanceMatrix
from gene_dendro.core.errors import (
    DataError,
    DimensionMismatchError,
    InvalidArgument,
    InvalidPermutationError,
)
from gene_dendro.core.items import Item


class TestBuild:
    def test_rms_distance(self):
        items = [Item("x", [0.0, 0.0]), Item("y", [3.0, 4.0])]
        m = DistanceMatrix.build(items, normalize=False)
        assert m.get(0, 1) == pytest.approx(math.sqrt(25.0 / 2))

    def test_abc_raw_distances(self, abc_items):
        m = DistanceMatrix.build(abc_items, normalize=False)
        assert m.get(0, 1) == 0.0
        assert m.get(0, 2) == pytest.approx(math.sqrt(20.5))
        assert m.get(1, 2) == pytest.approx(math.sqrt(20.5))

    def test_abc_normalized(self, abc_items):
        m = DistanceMatrix.build(abc_items)
        assert m.is_normalized
        assert m.get(0, 1) == 0.0
        assert m.get(0, 2) == pytest.approx(1.0)
        assert m.get(2, 1) == pytest.approx(1.0)

    def test_names_in_input_order(self, abc_items):
        m = DistanceMatrix.build(abc_items)
        assert m.names == ("A", "B", "C")
        assert m.size == 3

    def test_single_item(self):
        m = DistanceMatrix.build([Item("solo", [1.0, 2.0])])
        assert m.size == 1
        assert m.get(0, 0) == 0.0

    def test_empty_rejected(self):
        with pytest.raises(DataError):
            DistanceMatrix.build([])

    def test_dimension_mismatch(self):
        items = [Item("a", [1.0, 2.0]), Item("b", [1.0, 2.0, 3.0])]
        with pytest.raises(DimensionMismatchError):
            DistanceMatrix.build(items)

    def test_empty_vector(self):
        items = [Item("a", []), Item("b", [])]
        with pytest.raises(DataError):
            DistanceMatrix.build(items)

    def test_matches_numpy_reference(self, random_items):
        m = DistanceMatrix.build(random_items, normalize=False)
        data = np.vstack([i.vector for i in random_items])
        for i in range(len(random_items)):
            for j in range(i):
                expected = np.sqrt(np.mean((data[i] - data[j]) ** 2))
                assert m.get(i, j) == pytest.approx(expected)


class TestSymmetry:
    def test_get_is_symmetric(self, random_items):
        m = DistanceMatrix.build(random_items)
        for i in range(m.size):
            assert m.get(i, i) == 0.0
            for j in range(m.size):
                assert m.get(i, j) == m.get(j, i)

    def test_out_of_range(self, abc_items):
        m = DistanceMatrix.build(abc_items)
        with pytest.raises(IndexError):
            m.get(0, 3)
        with pytest.raises(IndexError):
            m.get(-1, 0)

    def test_dense_is_symmetric(self, random_items):
        dense = DistanceMatrix.build(random_items).to_dense()
        np.testing.assert_array_equal(dense, dense.T)
        assert np.all(np.diag(dense) == 0.0)


class TestNormalize:
    def test_values_in_unit_range(self, random_items):
        m = DistanceMatrix.build(random_items)
        dense = m.to_dense()
        assert dense.min() >= 0.0
        assert dense.max() == pytest.approx(1.0)
        assert m.max_value == pytest.approx(1.0)

    def test_returns_max_used(self, abc_items):
        m = DistanceMatrix.build(abc_items, normalize=False)
        assert m.normalize() == pytest.approx(math.sqrt(20.5))

    def test_all_identical_stay_zero(self):
        items = [Item(n, [2.0, 2.0]) for n in "pqr"]
        m = DistanceMatrix.build(items)
        assert m.normalize() == 0.0
        assert np.all(m.to_dense() == 0.0)

    def test_ratios_preserved(self, random_items):
        raw = DistanceMatrix.build(random_items, normalize=False)
        norm = DistanceMatrix.build(random_items)
        scale = raw.max_value
        assert norm.get(5, 3) == pytest.approx(raw.get(5, 3) / scale)


class TestRowTotals:
    def test_row_totals(self, abc_items):
        m = DistanceMatrix.build(abc_items)
        np.testing.assert_allclose(m.row_totals(), [1.0, 1.0, 2.0])

    def test_row_totals_match_pairwise_sums(self, random_items):
        m = DistanceMatrix.build(random_items)
        totals = m.row_totals()
        for i in (0, 7, 19):
            expected = sum(m.get(i, j) for j in range(m.size))
            assert totals[i] == pytest.approx(expected)

    def test_ragged_row(self, abc_items):
        m = DistanceMatrix.build(abc_items)
        assert len(m.row(0)) == 0
        np.testing.assert_allclose(m.row(2), [1.0, 1.0])
        with pytest.raises(ValueError):
            m.row(2)[0] = 0.5


class TestReorder:
    def test_rows_follow_permutation(self, random_items):
        m = DistanceMatrix.build(random_items)
        perm = list(range(m.size))[::-1]
        r = m.reorder(perm)
        for i in range(m.size):
            for j in range(m.size):
                assert r.get(i, j) == m.get(perm[i], perm[j])
        assert r.names == tuple(m.names[p] for p in perm)

    def test_returns_new_matrix(self, abc_items):
        m = DistanceMatrix.build(abc_items)
        r = m.reorder([2, 0, 1])
        assert r is not m
        assert m.names == ("A", "B", "C")
        assert r.is_normalized

    def test_round_trip_exact(self, random_items):
        m = DistanceMatrix.build(random_items)
        perm = np.random.default_rng(7).permutation(m.size)
        inverse = np.argsort(perm)
        back = m.reorder(perm).reorder(inverse)
        np.testing.assert_array_equal(back.to_dense(), m.to_dense())
        assert back.names == m.names

    def test_wrong_length(self, abc_items):
        m = DistanceMatrix.build(abc_items)
        with pytest.raises(InvalidPermutationError, match="entries"):
            m.reorder([0, 1])

    def test_out_of_range(self, abc_items):
        m = DistanceMatrix.build(abc_items)
        with pytest.raises(InvalidPermutationError, match="lie in"):
            m.reorder([0, 1, 3])

    def test_duplicates(self, abc_items):
        m = DistanceMatrix.build(abc_items)
        with pytest.raises(InvalidPermutationError, match="duplicate"):
            m.reorder([0, 1, 1])

    def test_non_integer(self, abc_items):
        m = DistanceMatrix.build(abc_items)
        with pytest.raises(InvalidPermutationError):
            m.reorder(["a", "b", "c"])
        with pytest.raises(InvalidPermutationError, match="integers"):
            m.reorder([0.9, 1.2, 2.7])
        with pytest.raises(InvalidPermutationError, match="integers"):
            m.reorder(["2", "1", "0"])
        with pytest.raises(InvalidPermutationError, match="integers"):
            m.reorder([0.0, 1.0, 2.0])
        with pytest.raises(InvalidPermutationError, match="integers"):
            m.reorder([True, False, 2])

    def test_numpy_integers_accepted(self, abc_items):
        m = DistanceMatrix.build(abc_items)
        r = m.reorder(np.array([2, 0, 1]))
        assert r.names == ("C", "A", "B")


class TestConstruction:
    def test_from_dense(self):
        dense = np.array([[0.0, 0.2, 0.4], [0.2, 0.0, 0.6], [0.4, 0.6, 0.0]])
        m = DistanceMatrix.from_dense(["x", "y", "z"], dense)
        assert m.get(2, 1) == pytest.approx(0.6)
        np.testing.assert_array_equal(m.to_dense(), dense)

    def test_from_dense_shape_mismatch(self):
        with pytest.raises(DataError, match="shape"):
            DistanceMatrix.from_dense(["x", "y"], np.zeros((3, 3)))

    def test_no_names(self):
        with pytest.raises(InvalidArgument):
            DistanceMatrix([], np.empty(0))

    def test_wrong_packed_length(self):
        with pytest.raises(InvalidArgument, match="entries"):
            DistanceMatrix(["a", "b", "c"], np.zeros(2))

    def test_to_dataframe_labels(self, abc_items):
        df = DistanceMatrix.build(abc_items).to_dataframe()
        assert list(df.index) == ["A", "B", "C"]
        assert list(df.columns) == ["A", "B", "C"]
        assert df.loc["A", "C"] == pytest.approx(1.0)
