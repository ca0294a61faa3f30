"""
Test run-length encoded sequences.
"""

import numpy as np
import pandas as pd
import pytest

from pyfstats import Rle


class TestConstruction:
    """Encoding and run normalisation."""

    def test_encode_dense(self):
        x = Rle([0, 0, 0, 5, 5, 1])
        np.testing.assert_array_equal(x.values, [0, 5, 1])
        np.testing.assert_array_equal(x.lengths, [3, 2, 1])
        assert len(x) == 6
        assert x.nrun == 3

    def test_runs_are_merged(self):
        x = Rle([1, 1, 2, 0], [2, 3, 0, 4])
        np.testing.assert_array_equal(x.values, [1, 0])
        np.testing.assert_array_equal(x.lengths, [5, 4])

    def test_nan_runs_are_merged(self):
        x = Rle([1.0, np.nan, np.nan, np.nan, 2.0])
        assert x.nrun == 3
        np.testing.assert_array_equal(x.lengths, [1, 3, 1])

    def test_empty(self):
        x = Rle(np.array([], dtype=float))
        assert len(x) == 0
        assert x.nrun == 0
        assert x.to_numpy().shape == (0,)

    def test_full(self):
        x = Rle.full(True, 10)
        assert x.dtype == np.bool_
        assert len(x) == 10
        assert x.all()

    def test_invalid_lengths(self):
        with pytest.raises(ValueError, match="same size"):
            Rle([1, 2], [3])
        with pytest.raises(ValueError, match="non-negative"):
            Rle([1, 2], [3, -1])
        with pytest.raises(ValueError, match="1-dimensional"):
            Rle(np.ones((2, 2)))

    def test_decompress(self):
        dense = np.array([3, 3, 3, 0, 0, 7, 7, 7, 7, 1])
        x = Rle(dense)
        np.testing.assert_array_equal(x.to_numpy(), dense)
        np.testing.assert_array_equal(np.asarray(x), dense)
        np.testing.assert_array_equal(x.starts, [0, 3, 5, 9])
        np.testing.assert_array_equal(x.ends, [3, 5, 9, 10])

    def test_to_series(self):
        s = Rle([1, 1, 2]).to_series(name='cov')
        assert isinstance(s, pd.Series)
        assert s.name == 'cov'
        assert s.tolist() == [1, 1, 2]


class TestArithmetic:
    """Elementwise operations stay on runs."""

    def setup_method(self):
        self.a_dense = np.array([1, 1, 1, 2, 2, 3, 3, 3, 3, 0], dtype=float)
        self.b_dense = np.array([5, 5, 4, 4, 4, 4, 4, 1, 1, 1], dtype=float)
        self.a = Rle(self.a_dense)
        self.b = Rle(self.b_dense)

    def test_rle_rle_ops(self):
        np.testing.assert_array_equal((self.a + self.b).to_numpy(), self.a_dense + self.b_dense)
        np.testing.assert_array_equal((self.a - self.b).to_numpy(), self.a_dense - self.b_dense)
        np.testing.assert_array_equal((self.a * self.b).to_numpy(), self.a_dense * self.b_dense)
        np.testing.assert_allclose((self.a / self.b).to_numpy(), self.a_dense / self.b_dense)

    def test_scalar_ops(self):
        np.testing.assert_array_equal((self.a * 2.5).to_numpy(), self.a_dense * 2.5)
        np.testing.assert_array_equal((2.5 * self.a).to_numpy(), self.a_dense * 2.5)
        np.testing.assert_array_equal((1 + self.a).to_numpy(), self.a_dense + 1)
        np.testing.assert_array_equal((10 - self.a).to_numpy(), 10 - self.a_dense)
        np.testing.assert_array_equal((self.a ** 2).to_numpy(), self.a_dense ** 2)
        np.testing.assert_array_equal((-self.a).to_numpy(), -self.a_dense)

    def test_numpy_scalar_defers(self):
        w = np.float64(0.75)
        result = w * self.a
        assert isinstance(result, Rle)
        np.testing.assert_array_equal(result.to_numpy(), 0.75 * self.a_dense)

    def test_dense_vector_operand(self):
        result = self.a + self.b_dense
        assert isinstance(result, Rle)
        np.testing.assert_array_equal(result.to_numpy(), self.a_dense + self.b_dense)

    def test_result_is_normalised(self):
        # 1 + 5 and 2 + 4 collapse into one run of 6
        total = Rle([1, 2], [2, 3]) + Rle([5, 4], [2, 3])
        np.testing.assert_array_equal(total.values, [6])
        np.testing.assert_array_equal(total.lengths, [5])

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="lengths differ"):
            self.a + Rle([1, 2, 3])

    def test_comparisons(self):
        np.testing.assert_array_equal((self.a > 1).to_numpy(), self.a_dense > 1)
        np.testing.assert_array_equal((self.a >= 1).to_numpy(), self.a_dense >= 1)
        np.testing.assert_array_equal((self.a < self.b).to_numpy(), self.a_dense < self.b_dense)
        np.testing.assert_array_equal((self.a <= 2).to_numpy(), self.a_dense <= 2)

    def test_equality_is_elementwise(self):
        eq = self.a == 1
        assert isinstance(eq, Rle)
        np.testing.assert_array_equal(eq.to_numpy(), self.a_dense == 1)
        np.testing.assert_array_equal((self.a != self.b).to_numpy(), self.a_dense != self.b_dense)
        np.testing.assert_array_equal((self.a == self.b_dense).to_numpy(), self.a_dense == self.b_dense)

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(self.a)

    def test_astype(self):
        x = Rle([0, 0, 3, 3, 1]).astype(np.float32)
        assert x.dtype == np.float32
        np.testing.assert_array_equal(x.lengths, [2, 2, 1])
        assert Rle([0, 0, 2]).astype(bool).equals(Rle([False, False, True]))

    def test_division_by_zero_gives_nan(self):
        with np.errstate(divide='ignore', invalid='ignore'):
            result = Rle([0.0, 0.0, 1.0]) / Rle([0.0, 0.0, 0.0])
        values = result.to_numpy()
        assert np.isnan(values[0]) and np.isnan(values[1])
        assert np.isinf(values[2])


class TestSelection:
    """Indexing and subsetting."""

    def setup_method(self):
        self.dense = np.array([4, 4, 4, 0, 0, 9, 9, 1])
        self.x = Rle(self.dense)

    def test_integer_index(self):
        assert self.x[0] == 4
        assert self.x[3] == 0
        assert self.x[5] == 9
        assert self.x[-1] == 1
        with pytest.raises(IndexError):
            self.x[8]

    def test_slice(self):
        np.testing.assert_array_equal(self.x[2:6].to_numpy(), self.dense[2:6])
        np.testing.assert_array_equal(self.x[::3].to_numpy(), self.dense[::3])

    def test_boolean_mask(self):
        mask = self.dense > 3
        np.testing.assert_array_equal(self.x[mask].to_numpy(), self.dense[mask])

    def test_logical_rle_mask(self):
        mask = Rle([True, True, False, False, True, True, True, False])
        subset = self.x[mask]
        np.testing.assert_array_equal(subset.to_numpy(), self.dense[mask.to_numpy()])

    def test_integer_array(self):
        idx = np.array([7, 0, -2])
        np.testing.assert_array_equal(self.x[idx].to_numpy(), self.dense[idx])

    def test_bad_mask_length(self):
        with pytest.raises(IndexError):
            self.x[np.array([True, False])]

    def test_which(self):
        positions = (self.x > 3).which()
        np.testing.assert_array_equal(positions, np.flatnonzero(self.dense > 3))

    def test_which_requires_logical(self):
        with pytest.raises(TypeError):
            self.x.which()


class TestReductions:

    def test_sum(self):
        dense = np.array([2, 2, 2, 5, 0, 0, 1])
        assert Rle(dense).sum() == dense.sum()

    def test_equals(self):
        a = Rle([1.0, np.nan, np.nan])
        b = Rle([1.0, np.nan], [1, 2])
        assert a.equals(b)
        assert not a.equals(Rle([1.0, 2.0, 2.0]))
        assert not a.equals([1.0, np.nan, np.nan])

    def test_allclose(self):
        a = Rle([1.0, 1.0, 2.0])
        assert a.allclose(Rle([1.0, 1.0 + 1e-12, 2.0]))
        assert not a.allclose(Rle([1.0, 1.5, 2.0]))

    def test_repr(self):
        text = repr(Rle(np.arange(20)))
        assert 'length=20' in text
        assert 'nrun=20' in text
        assert '...' in text
