"""Shared test fixtures for gene-dendro."""

import numpy as np
import pandas as pd
import pytest

from gene_dendro.core.items import Item


@pytest.fixture
def abc_items():
    """A and B identical, C far away."""
    return [
        Item("A", [1.0, 0.0]),
        Item("B", [1.0, 0.0]),
        Item("C", [5.0, 5.0]),
    ]


@pytest.fixture
def two_pair_items():
    """Two tight pairs far apart: (a, b) and (c, d)."""
    return [
        Item("a", [0.0, 0.0]),
        Item("b", [0.1, 0.1]),
        Item("c", [10.0, 10.0]),
        Item("d", [10.1, 10.2]),
    ]


@pytest.fixture
def random_items():
    """20 items x 6 observations, no exact distance ties."""
    rng = np.random.default_rng(42)
    data = rng.standard_normal((20, 6))
    return [Item(f"gene_{i:02d}", data[i]) for i in range(20)]


@pytest.fixture
def expression_df():
    """5x4 expression DataFrame (rows=genes, columns=samples)."""
    data = np.array([
        [1.0, 2.0, 3.0, 4.0],
        [1.1, 2.1, 3.1, 4.1],
        [4.0, 3.0, 2.0, 1.0],
        [4.2, 3.1, 2.0, 0.9],
        [0.0, 5.0, 0.0, 5.0],
    ])
    return pd.DataFrame(
        data,
        index=["gene_A", "gene_B", "gene_C", "gene_D", "gene_E"],
        columns=["sample_1", "sample_2", "sample_3", "sample_4"],
    )
