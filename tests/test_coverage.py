"""
Test coverage tables and the conversions between representations.
"""

import numpy as np
import pandas as pd
import pytest
from scipy import sparse

from pyfstats import CoverageTable, Rle, to_sparse, to_dense, to_coverage_table
from pyfstats.coverage import sparse_threshold, subset_rows, n_rows, n_samples

from conftest import simulate_coverage


class TestCoverageTable:
    """Construction and accessors."""

    def test_from_matrix(self, toy_coverage):
        table = CoverageTable.from_matrix(toy_coverage)
        assert table.shape == (4, 4)
        assert table.sample_names == ['sample1', 'sample2', 'sample3', 'sample4']
        assert all(isinstance(col, Rle) for col in table)
        np.testing.assert_array_equal(table.to_numpy(), toy_coverage)

    def test_from_sparse_matrix(self, toy_coverage):
        table = CoverageTable.from_matrix(sparse.csr_matrix(toy_coverage), sample_names=list('abcd'))
        assert table.sample_names == ['a', 'b', 'c', 'd']
        np.testing.assert_array_equal(table['c'].to_numpy(), toy_coverage[:, 2])

    def test_dataframe_round_trip(self, toy_coverage):
        df = pd.DataFrame(toy_coverage, columns=['s1', 's2', 's3', 's4'])
        table = CoverageTable.from_dataframe(df)
        pd.testing.assert_frame_equal(table.to_dataframe(), df)

    def test_dense_columns_are_encoded(self):
        table = CoverageTable({'a': [1, 1, 1, 2], 'b': Rle([0, 0, 3, 3])})
        assert table['a'].nrun == 2
        assert table.nrow == 4
        assert table.ncol == 2

    def test_unequal_columns(self):
        with pytest.raises(ValueError, match="same length"):
            CoverageTable({'a': [1, 2, 3], 'b': [1, 2]})

    def test_empty(self):
        with pytest.raises(ValueError, match="at least one"):
            CoverageTable({})

    def test_wrong_sample_names(self, toy_coverage):
        with pytest.raises(ValueError, match="sample names"):
            CoverageTable.from_matrix(toy_coverage, sample_names=['a'])


class TestSparseTransform:
    """Thresholded conversion to CSC."""

    def test_threshold(self):
        assert sparse_threshold(32) == 5.0
        assert sparse_threshold(1) == 0.0
        assert sparse_threshold(0) == 0.0

    @pytest.mark.parametrize("scale_factor", [0, 1, 4, 32])
    def test_surviving_entries(self, scale_factor):
        """Exactly the entries above log2(scale_factor) are stored, shifted down."""
        coverage = simulate_coverage(60, 5, seed=1, lam=6)
        tau = sparse_threshold(scale_factor)

        result = to_sparse(CoverageTable.from_matrix(coverage), scale_factor=scale_factor)

        assert result.format == 'csc'
        assert result.dtype == np.float64
        assert result.shape == coverage.shape

        rows, cols = result.nonzero()
        expected = set(zip(*np.nonzero(coverage > tau)))
        assert set(zip(rows, cols)) == expected
        np.testing.assert_array_equal(
            np.asarray(result[rows, cols]).ravel(), coverage[rows, cols] - tau
        )

    def test_zero_scale_factor_keeps_positive(self, toy_coverage):
        result = to_sparse(CoverageTable.from_matrix(toy_coverage), scale_factor=0)
        np.testing.assert_array_equal(result.toarray(), toy_coverage)
        assert result.nnz == np.count_nonzero(toy_coverage)

    def test_same_result_for_every_input_type(self, toy_coverage):
        from_table = to_sparse(CoverageTable.from_matrix(toy_coverage), scale_factor=4)
        from_array = to_sparse(toy_coverage, scale_factor=4)
        from_frame = to_sparse(pd.DataFrame(toy_coverage), scale_factor=4)
        np.testing.assert_array_equal(from_table.toarray(), from_array.toarray())
        np.testing.assert_array_equal(from_table.toarray(), from_frame.toarray())

    def test_sparse_input_is_not_thresholded(self, toy_coverage):
        already = sparse.csr_matrix(toy_coverage.astype(float))
        result = to_sparse(already, scale_factor=32)
        assert result.format == 'csc'
        np.testing.assert_array_equal(result.toarray(), toy_coverage)

    def test_log_transformed_coverage_is_lossless(self):
        """Coverage log2(x + s) never drops below log2(s)."""
        counts = simulate_coverage(40, 4, seed=3)
        logged = np.log2(counts + 32)
        result = to_sparse(logged, scale_factor=32)
        np.testing.assert_allclose(result.toarray() + 5.0, logged)


class TestDenseTransform:

    def test_table_to_dense(self, toy_table, toy_coverage):
        dense = to_dense(toy_table)
        assert dense.dtype == np.float64
        np.testing.assert_array_equal(dense, toy_coverage)

    def test_sparse_to_dense(self, toy_coverage):
        np.testing.assert_array_equal(to_dense(sparse.csc_matrix(toy_coverage)), toy_coverage)

    def test_dataframe_to_dense(self, toy_coverage):
        np.testing.assert_array_equal(to_dense(pd.DataFrame(toy_coverage)), toy_coverage)

    def test_rejects_vectors(self):
        with pytest.raises(ValueError, match="2-dimensional"):
            to_dense(np.arange(5))

    def test_to_coverage_table(self, toy_table, toy_coverage):
        assert to_coverage_table(toy_table) is toy_table
        np.testing.assert_array_equal(to_coverage_table(toy_coverage).to_numpy(), toy_coverage)
        np.testing.assert_array_equal(
            to_coverage_table(sparse.csc_matrix(toy_coverage)).to_numpy(), toy_coverage
        )


class TestSubsetting:

    @pytest.mark.parametrize("kind", ["table", "array", "sparse", "frame"])
    def test_subset_rows(self, toy_coverage, kind):
        data = {
            "table": CoverageTable.from_matrix(toy_coverage),
            "array": toy_coverage,
            "sparse": sparse.csc_matrix(toy_coverage),
            "frame": pd.DataFrame(toy_coverage),
        }[kind]
        mask = np.array([True, False, True, True])

        subset = subset_rows(data, mask)

        assert n_rows(subset) == 3
        assert n_samples(subset) == 4
        np.testing.assert_array_equal(to_dense(subset), toy_coverage[mask])

    def test_subset_with_logical_rle(self, toy_coverage):
        mask = Rle([False, True, True, True])
        subset = subset_rows(toy_coverage, mask)
        np.testing.assert_array_equal(subset, toy_coverage[1:])
