"""
Run-length encoded numeric sequences.

Base-level coverage is mostly long stretches of identical depth, so a
sequence is stored as (value, run length) pairs and all arithmetic is
done on the runs. Two sequences are combined by re-aligning them on the
union of their run boundaries; nothing is decompressed.
"""

import operator
from typing import Optional

import numpy as np
import pandas as pd


def _differs(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Elementwise inequality treating NaN as equal to NaN."""
    d = a != b
    if a.dtype.kind in 'fc' and b.dtype.kind in 'fc':
        d &= ~(np.isnan(a) & np.isnan(b))
    return d


def _encode(x: np.ndarray):
    """Dense vector -> (values, lengths)."""
    n = x.shape[0]
    if n == 0:
        return x[:0].copy(), np.zeros(0, dtype=np.int64)
    breaks = np.flatnonzero(_differs(x[1:], x[:-1])) + 1
    starts = np.concatenate(([0], breaks))
    lengths = np.diff(np.concatenate((starts, [n]))).astype(np.int64)
    return x[starts], lengths


def _merge_runs(values: np.ndarray, lengths: np.ndarray):
    """Drop empty runs and merge neighbours holding the same value."""
    keep = lengths > 0
    if not keep.all():
        values, lengths = values[keep], lengths[keep]
    if values.shape[0] < 2:
        return values, lengths
    starts = np.flatnonzero(
        np.concatenate(([True], _differs(values[1:], values[:-1])))
    )
    if starts.shape[0] == values.shape[0]:
        return values, lengths
    return values[starts], np.add.reduceat(lengths, starts)


def _expand_positions(starts: np.ndarray, lengths: np.ndarray) -> np.ndarray:
    """0-based positions covered by the given runs, in order."""
    total = int(lengths.sum())
    if total == 0:
        return np.zeros(0, dtype=np.int64)
    offsets = starts - (np.cumsum(lengths) - lengths)
    return np.repeat(offsets, lengths) + np.arange(total, dtype=np.int64)


class Rle:
    """
    Run-length encoded 1-D sequence.

    Parameters
    ----------
    values : array_like
        Either the full (dense) sequence, or the run values when
        `lengths` is given.
    lengths : array_like, optional
        Run lengths, same size as `values`.

    Examples
    --------
    >>> x = Rle([0, 0, 0, 5, 5, 1])
    >>> x.values, x.lengths
    (array([0, 5, 1]), array([3, 2, 1]))
    >>> (x * 2 + 1).to_numpy()
    array([ 1,  1,  1, 11, 11,  3])
    """

    __slots__ = ('_values', '_lengths')

    # Keep numpy scalars/arrays from taking over binary operators
    __array_ufunc__ = None

    def __init__(self, values, lengths=None):
        values = np.array(values)
        if values.ndim == 0 and lengths is not None:
            values = values.reshape(1)
        if values.ndim != 1:
            raise ValueError("Rle values must be 1-dimensional")

        if lengths is None:
            values, lengths = _encode(values)
        else:
            lengths = np.asarray(lengths, dtype=np.int64).reshape(-1)
            if lengths.shape != values.shape:
                raise ValueError(
                    f"values and lengths must have the same size "
                    f"({values.shape[0]} != {lengths.shape[0]})"
                )
            if np.any(lengths < 0):
                raise ValueError("Run lengths must be non-negative")
            values, lengths = _merge_runs(values, lengths)

        self._values = values
        self._lengths = lengths

    @classmethod
    def from_runs(cls, values, lengths) -> "Rle":
        """Build from explicit run values and run lengths."""
        return cls(values, lengths)

    @classmethod
    def full(cls, value, length: int) -> "Rle":
        """Sequence of `length` copies of `value`."""
        return cls([value], [length])

    # ------------------------------------------------------------------
    # Structure

    @property
    def values(self) -> np.ndarray:
        """Run values."""
        return self._values

    @property
    def lengths(self) -> np.ndarray:
        """Run lengths."""
        return self._lengths

    @property
    def nrun(self) -> int:
        return int(self._values.shape[0])

    @property
    def ends(self) -> np.ndarray:
        """Exclusive end position of every run."""
        return np.cumsum(self._lengths)

    @property
    def starts(self) -> np.ndarray:
        """0-based start position of every run."""
        return self.ends - self._lengths

    @property
    def dtype(self):
        return self._values.dtype

    def __len__(self) -> int:
        return int(self._lengths.sum())

    def to_numpy(self, dtype=None) -> np.ndarray:
        """Decompress into a dense array."""
        out = np.repeat(self._values, self._lengths)
        if dtype is not None:
            out = out.astype(dtype, copy=False)
        return out

    def __array__(self, dtype=None, copy=None):
        return self.to_numpy(dtype=dtype)

    def to_series(self, name: Optional[str] = None) -> pd.Series:
        """Decompress into a pandas Series."""
        return pd.Series(self.to_numpy(), name=name)

    def astype(self, dtype) -> "Rle":
        return Rle(self._values.astype(dtype), self._lengths)

    # ------------------------------------------------------------------
    # Elementwise operations

    def _align(self, other: "Rle"):
        """Re-express both sequences on the union of their run boundaries."""
        if len(self) != len(other):
            raise ValueError(
                f"Rle lengths differ ({len(self)} != {len(other)})"
            )
        left_ends = self.ends
        right_ends = other.ends
        ends = np.union1d(left_ends, right_ends)
        lengths = np.diff(ends, prepend=0)
        left = self._values[np.searchsorted(left_ends, ends)]
        right = other._values[np.searchsorted(right_ends, ends)]
        return left, right, lengths

    def _coerce(self, other):
        if isinstance(other, Rle):
            return other
        if np.ndim(other) == 0:
            return other
        if isinstance(other, (np.ndarray, pd.Series, list, tuple)):
            other = np.asarray(other)
            if other.ndim == 1:
                return Rle(other)
        return NotImplemented

    def _binary(self, other, op, reflected=False):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        if isinstance(other, Rle):
            left, right, lengths = self._align(other)
        else:
            left, right, lengths = self._values, other, self._lengths
        if reflected:
            left, right = right, left
        return Rle(op(left, right), lengths)

    def __add__(self, other):
        return self._binary(other, operator.add)

    def __radd__(self, other):
        return self._binary(other, operator.add, reflected=True)

    def __sub__(self, other):
        return self._binary(other, operator.sub)

    def __rsub__(self, other):
        return self._binary(other, operator.sub, reflected=True)

    def __mul__(self, other):
        return self._binary(other, operator.mul)

    def __rmul__(self, other):
        return self._binary(other, operator.mul, reflected=True)

    def __truediv__(self, other):
        return self._binary(other, operator.truediv)

    def __rtruediv__(self, other):
        return self._binary(other, operator.truediv, reflected=True)

    def __pow__(self, other):
        return self._binary(other, operator.pow)

    def __neg__(self):
        return Rle(-self._values, self._lengths)

    def __abs__(self):
        return Rle(np.abs(self._values), self._lengths)

    def __gt__(self, other):
        return self._binary(other, operator.gt)

    def __ge__(self, other):
        return self._binary(other, operator.ge)

    def __lt__(self, other):
        return self._binary(other, operator.lt)

    def __le__(self, other):
        return self._binary(other, operator.le)

    def __eq__(self, other):
        return self._binary(other, operator.eq)

    def __ne__(self, other):
        return self._binary(other, operator.ne)

    # Elementwise == makes Rle unhashable
    __hash__ = None

    # ------------------------------------------------------------------
    # Selection

    def which(self) -> np.ndarray:
        """0-based positions where a logical sequence is True."""
        if self.dtype != np.bool_:
            raise TypeError("which() requires a logical Rle")
        keep = self._values
        return _expand_positions(self.starts[keep], self._lengths[keep])

    def _take(self, positions: np.ndarray) -> "Rle":
        run_idx = np.searchsorted(self.ends, positions, side='right')
        return Rle(self._values[run_idx])

    def __getitem__(self, key):
        n = len(self)

        if isinstance(key, (int, np.integer)):
            pos = int(key)
            if pos < 0:
                pos += n
            if not 0 <= pos < n:
                raise IndexError(f"index {key} out of range for Rle of length {n}")
            return self._values[np.searchsorted(self.ends, pos, side='right')]

        if isinstance(key, slice):
            return self._take(np.arange(*key.indices(n)))

        if isinstance(key, Rle):
            if key.dtype != np.bool_:
                raise TypeError("Rle index must be logical")
            values, mask, lengths = self._align(key)
            return Rle(values[mask], lengths[mask])

        key = np.asarray(key)
        if key.dtype == np.bool_:
            if key.shape != (n,):
                raise IndexError(
                    f"boolean index of length {key.shape[0]} does not match "
                    f"Rle of length {n}"
                )
            return self._take(np.flatnonzero(key))
        if key.dtype.kind in 'iu':
            positions = np.where(key < 0, key + n, key)
            if positions.size and (positions.min() < 0 or positions.max() >= n):
                raise IndexError(f"index out of range for Rle of length {n}")
            return self._take(positions)
        raise TypeError(f"Unsupported Rle index type: {type(key).__name__}")

    # ------------------------------------------------------------------
    # Reductions and comparisons

    def sum(self):
        return (self._values * self._lengths).sum()

    def all(self) -> bool:
        return bool(np.all(self._values))

    def any(self) -> bool:
        return bool(np.any(self._values))

    def equals(self, other) -> bool:
        """Exact run-by-run equality (NaN equal to NaN)."""
        if not isinstance(other, Rle) or len(self) != len(other):
            return False
        return (
            np.array_equal(self._lengths, other._lengths)
            and not _differs(self._values, other._values).any()
        )

    def allclose(self, other, rtol: float = 1e-05, atol: float = 1e-08,
                 equal_nan: bool = True) -> bool:
        other = self._coerce(other)
        if not isinstance(other, Rle):
            raise TypeError("allclose() needs an Rle or a 1-D array")
        left, right, _ = self._align(other)
        return bool(np.allclose(left, right, rtol=rtol, atol=atol,
                                equal_nan=equal_nan))

    def __repr__(self):
        shown = 6
        values = np.array2string(self._values[:shown], separator=', ')
        lengths = np.array2string(self._lengths[:shown], separator=', ')
        more = ' ...' if self.nrun > shown else ''
        return (
            f"Rle(length={len(self)}, nrun={self.nrun}, dtype={self.dtype},\n"
            f"    values={values}{more},\n"
            f"    lengths={lengths}{more})"
        )


__all__ = ["Rle"]
