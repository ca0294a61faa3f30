"""
Coverage matrices and conversions between their representations.

A coverage matrix has one row per feature (base) and one column per
sample. It can be held as

- a `CoverageTable`: one run-length encoded column per sample,
- a scipy CSC sparse matrix (float64),
- a dense numpy array (or a pandas DataFrame of per-sample columns).

The transforms below convert between them without reordering rows or
columns.
"""

from typing import Iterator, List, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd
from scipy import sparse

from .rle import Rle


class CoverageTable:
    """
    Column-oriented coverage table of per-sample `Rle` columns.

    Parameters
    ----------
    columns : mapping of str -> Rle or array_like
        Sample name to coverage column. Dense columns are run-length
        encoded on construction. All columns must have the same length.
    """

    def __init__(self, columns: Mapping[str, Union[Rle, Sequence]]):
        if len(columns) == 0:
            raise ValueError("CoverageTable needs at least one sample column")

        self._columns = {}
        for name, col in columns.items():
            if not isinstance(col, Rle):
                col = Rle(np.asarray(col))
            self._columns[str(name)] = col

        lengths = {len(col) for col in self._columns.values()}
        if len(lengths) != 1:
            raise ValueError(
                f"All coverage columns must have the same length, got {sorted(lengths)}"
            )

    @classmethod
    def from_matrix(cls, matrix, sample_names: Optional[Sequence[str]] = None) -> "CoverageTable":
        """Encode a dense array or scipy sparse matrix column by column."""
        if sparse.issparse(matrix):
            matrix = sparse.csc_matrix(matrix)
            n_cols = matrix.shape[1]

            def column(j):
                return matrix[:, [j]].toarray().ravel()
        else:
            matrix = np.asarray(matrix)
            if matrix.ndim != 2:
                raise ValueError("Coverage matrix must be 2-dimensional")
            n_cols = matrix.shape[1]

            def column(j):
                return matrix[:, j]

        if sample_names is None:
            sample_names = [f"sample{j + 1}" for j in range(n_cols)]
        elif len(sample_names) != n_cols:
            raise ValueError(
                f"Got {len(sample_names)} sample names for {n_cols} columns"
            )
        return cls({name: Rle(column(j)) for j, name in enumerate(sample_names)})

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> "CoverageTable":
        return cls({name: Rle(df[name].to_numpy()) for name in df.columns})

    @property
    def sample_names(self) -> List[str]:
        return list(self._columns)

    @property
    def columns(self) -> List[Rle]:
        return list(self._columns.values())

    @property
    def nrow(self) -> int:
        return len(next(iter(self._columns.values())))

    @property
    def ncol(self) -> int:
        return len(self._columns)

    @property
    def shape(self):
        return (self.nrow, self.ncol)

    def __iter__(self) -> Iterator[Rle]:
        return iter(self._columns.values())

    def __getitem__(self, name: str) -> Rle:
        return self._columns[name]

    def subset_rows(self, mask) -> "CoverageTable":
        """Keep the rows selected by a boolean mask (ndarray or logical Rle)."""
        return CoverageTable({name: col[mask] for name, col in self._columns.items()})

    def to_numpy(self, dtype=np.float64) -> np.ndarray:
        return np.column_stack([col.to_numpy(dtype) for col in self.columns])

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame({name: col.to_numpy() for name, col in self._columns.items()})

    def __repr__(self):
        return (
            f"CoverageTable(nrow={self.nrow}, ncol={self.ncol}, "
            f"samples={self.sample_names})"
        )


def n_rows(data) -> int:
    """Number of features in any supported representation."""
    if isinstance(data, CoverageTable):
        return data.nrow
    return data.shape[0]


def n_samples(data) -> int:
    """Number of samples in any supported representation."""
    if isinstance(data, CoverageTable):
        return data.ncol
    if getattr(data, 'ndim', 2) != 2:
        raise ValueError("Coverage matrix must be 2-dimensional")
    return data.shape[1]


def subset_rows(data, mask):
    """
    Select rows of a coverage matrix.

    `mask` is a boolean ndarray or a logical `Rle` with one entry per row.
    """
    if isinstance(data, CoverageTable):
        return data.subset_rows(mask)
    if isinstance(mask, Rle):
        mask = mask.to_numpy()
    mask = np.asarray(mask, dtype=bool)
    if sparse.issparse(data):
        return sparse.csc_matrix(sparse.csr_matrix(data)[np.flatnonzero(mask)])
    if isinstance(data, pd.DataFrame):
        return data.iloc[mask]
    return np.asarray(data)[mask]


def sparse_threshold(scale_factor: float) -> float:
    """log2 of the scaling factor, or 0 when it is not positive."""
    return float(np.log2(scale_factor)) if scale_factor > 0 else 0.0


def to_sparse(data, scale_factor: float = 32) -> sparse.csc_matrix:
    """
    Coerce coverage to a CSC sparse matrix.

    Entries above ``tau = sparse_threshold(scale_factor)`` are stored as
    ``value - tau``; everything else becomes an implicit zero. Input that
    is already sparse is converted to CSC without thresholding.

    Parameters
    ----------
    data : CoverageTable, ndarray, DataFrame or sparse matrix
    scale_factor : float
        Scaling factor used when the coverage was log2 transformed.

    Returns
    -------
    scipy.sparse.csc_matrix, shape (n, m), float64
    """
    if sparse.issparse(data):
        return sparse.csc_matrix(data, dtype=np.float64)

    tau = sparse_threshold(scale_factor)

    if isinstance(data, CoverageTable):
        shape = data.shape
        rows, cols, vals = [], [], []
        for j, col in enumerate(data.columns):
            keep = col > tau
            i = keep.which()
            rows.append(i)
            cols.append(np.full(i.shape[0], j, dtype=np.int64))
            vals.append(col[keep].to_numpy(np.float64) - tau)
        rows = np.concatenate(rows)
        cols = np.concatenate(cols)
        vals = np.concatenate(vals)
    else:
        matrix = to_dense(data)
        shape = matrix.shape
        rows, cols = np.nonzero(matrix > tau)
        vals = matrix[rows, cols] - tau

    return sparse.csc_matrix((vals, (rows, cols)), shape=shape, dtype=np.float64)


def to_dense(data) -> np.ndarray:
    """Materialise coverage as a float64 (n, m) array, values unchanged."""
    if isinstance(data, CoverageTable):
        return data.to_numpy(np.float64)
    if sparse.issparse(data):
        return data.toarray().astype(np.float64, copy=False)
    if isinstance(data, pd.DataFrame):
        return data.to_numpy(dtype=np.float64)
    matrix = np.asarray(data, dtype=np.float64)
    if matrix.ndim != 2:
        raise ValueError("Coverage matrix must be 2-dimensional")
    return matrix


def to_coverage_table(data) -> CoverageTable:
    """Coerce coverage to a `CoverageTable` (run-length encoded columns)."""
    if isinstance(data, CoverageTable):
        return data
    if isinstance(data, pd.DataFrame):
        return CoverageTable.from_dataframe(data)
    return CoverageTable.from_matrix(data)


__all__ = [
    "CoverageTable",
    "n_rows",
    "n_samples",
    "subset_rows",
    "sparse_threshold",
    "to_sparse",
    "to_dense",
    "to_coverage_table",
]
