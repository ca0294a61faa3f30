"""
Shared test data.
"""

import numpy as np
import pytest

from pyfstats import CoverageTable


# Example from the documentation: 4 features x 4 samples, groups A A B B
TOY_COVERAGE = np.array([
    [1, 2, 3, 4],
    [4, 3, 2, 1],
    [5, 5, 5, 5],
    [0, 0, 0, 0],
])


def group_design(groups):
    """Intercept + indicator design for a two-level grouping."""
    groups = np.asarray(groups)
    return np.column_stack([np.ones(len(groups)), (groups == groups[-1]).astype(float)])


def intercept_design(m):
    return np.ones((m, 1))


def simulate_coverage(n, m, seed=42, lam=10, run_scale=6):
    """
    Integer coverage with runs of identical depth along the features,
    like base-level read coverage.
    """
    rng = np.random.default_rng(seed)
    columns = []
    for _ in range(m):
        depth = []
        while len(depth) < n:
            depth.extend([rng.poisson(lam)] * int(rng.integers(1, run_scale)))
        columns.append(depth[:n])
    coverage = np.column_stack(columns).astype(np.int64)
    # No constant rows
    coverage[:, 0] = coverage[:, 1] + 1
    return coverage


@pytest.fixture
def toy_coverage():
    return TOY_COVERAGE.copy()


@pytest.fixture
def toy_table():
    return CoverageTable.from_matrix(TOY_COVERAGE)


@pytest.fixture
def toy_designs():
    mod = group_design(['A', 'A', 'B', 'B'])
    mod0 = intercept_design(4)
    return mod, mod0
