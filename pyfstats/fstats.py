"""
Per-feature F-statistics for a nested pair of linear models.

This is the user-facing API. Each call is self-contained: projection
matrices are rebuilt from the design matrices every time and nothing is
cached, so chunks can be processed independently in parallel workers.
"""

import warnings
from pathlib import Path
from typing import Optional, Union

import numpy as np

from ._core.fstat import f_statistic
from ._core.projection import projection_matrix, residual_df
from ._core.selector import parse_method, select_strategy
from ._engines import get_engine
from ._utils import check_design, check_mask, check_scalar
from .chunks import ChunkLoader, DirectoryChunkLoader
from .coverage import n_rows, n_samples, subset_rows
from .exceptions import ConfigurationError, DegradationWarning
from .rle import Rle


def _resolve_data(index, data, chunk_loader, low_mem_dir):
    """Load the chunk named by `index`, or subset `data` by the mask in `index`."""
    if low_mem_dir is not None:
        if chunk_loader is not None:
            raise ConfigurationError("Pass either chunk_loader or low_mem_dir, not both")
        chunk_loader = DirectoryChunkLoader(low_mem_dir)

    if chunk_loader is not None:
        if index is None:
            raise ConfigurationError(
                "index must name the chunk to load when reading chunks"
            )
        return chunk_loader(index)

    if data is None:
        raise ConfigurationError("data is required when no chunk loader is given")

    if index is None:
        return data

    n = n_rows(data)
    if isinstance(index, Rle):
        if index.dtype != np.bool_ or len(index) != n:
            raise ConfigurationError(
                f"Row index must be a logical Rle of length {n}"
            )
    else:
        index = check_mask(index, n)

    if index.all():
        return data
    return subset_rows(data, index)


class FStatistics:
    """
    F-statistics comparing an alternative model `mod` to a nested null
    model `mod0` on every row of a coverage matrix.

    The computation runs on construction. The result is available as
    `fstats` together with what was computed along the way.

    Parameters
    ----------
    data : CoverageTable, ndarray, DataFrame or sparse matrix, optional
        Coverage, n features x m samples. Ignored when reading chunks.
    mod : array, shape (m, p)
        Design matrix of the alternative model.
    mod0 : array, shape (m, p0)
        Design matrix of the null model, p0 < p.
    index : array of bool, logical Rle or chunk key, optional
        Rows of `data` to use (default: all). When `chunk_loader` or
        `low_mem_dir` is given, the key of the chunk to load.
    adjust_f : float
        Added to the denominator of the F-statistic. Useful when the
        RSS of the alternative model is very small.
    chunk_loader : callable, optional
        ``chunk_loader(index)`` returns the coverage of a chunk.
    low_mem_dir : str or Path, optional
        Directory of chunk files; shorthand for
        ``chunk_loader=DirectoryChunkLoader(low_mem_dir)``.
    method : str
        'auto-sparse' (default), 'compressed' or 'dense'.
    scale_factor : float
        Scaling factor of the upstream log2 transform, used by the
        sparse representation only.
    device : str, optional
        Torch device for the dense computation. Requires method='dense'.

    Examples
    --------
    >>> import numpy as np
    >>> from pyfstats import FStatistics
    >>> coverage = np.random.poisson(5, size=(1000, 4))
    >>> mod = np.column_stack([np.ones(4), [0, 0, 1, 1]])
    >>> mod0 = np.ones((4, 1))
    >>> result = FStatistics(coverage, mod, mod0, scale_factor=1)
    >>> result.summary()
    >>> result.fstats.to_numpy()
    """

    def __init__(
        self,
        data=None,
        mod=None,
        mod0=None,
        index=None,
        adjust_f: float = 0.0,
        chunk_loader: Optional[ChunkLoader] = None,
        low_mem_dir: Optional[Union[str, Path]] = None,
        method: str = 'auto-sparse',
        scale_factor: float = 32,
        device: Optional[str] = None,
        _stacklevel: int = 3,
    ):
        # Configuration checks come before any data is touched
        self.method = parse_method(method)
        self.scale_factor = check_scalar(scale_factor, 'scale_factor')
        self.adjust_f = check_scalar(adjust_f, 'adjust_f')
        if mod is None or mod0 is None:
            raise ConfigurationError("Both mod and mod0 design matrices are required")
        self.mod, self.mod0 = check_design(mod, mod0)
        if device is not None and device != 'cpu' and self.method != 'dense':
            raise ConfigurationError(
                f"device={device!r} requires method='dense', got {self.method!r}"
            )
        self.device = device

        data = _resolve_data(index, data, chunk_loader, low_mem_dir)

        self.n_features = n_rows(data)
        self.n_samples = n_samples(data)
        if self.n_samples != self.mod.shape[0]:
            raise ConfigurationError(
                f"Coverage has {self.n_samples} samples but the design "
                f"matrices have {self.mod.shape[0]} rows"
            )
        self.df1 = self.mod.shape[1]
        self.df0 = self.mod0.shape[1]
        self.df_residual = residual_df(self.mod)

        self._compute(data, _stacklevel)

    def _compute(self, data, stacklevel):
        P1 = projection_matrix(self.mod)
        P0 = projection_matrix(self.mod0)

        self.selection = select_strategy(self.method, P1, P0, self.n_samples)
        if self.selection.message is not None:
            warnings.warn(self.selection.message, DegradationWarning, stacklevel=stacklevel)

        self.engine = get_engine(self.selection.strategy, device=self.device)
        prepared = self.engine.prepare(data, scale_factor=self.scale_factor)

        self.rss1 = self.engine.compute_rss(prepared, P1)
        self.rss0 = self.engine.compute_rss(prepared, P0)

        self.fstats = f_statistic(
            self.rss1, self.rss0,
            df1=self.df1, df0=self.df0,
            n_samples=self.n_samples,
            adjust_f=self.adjust_f,
        )

    @property
    def strategy(self) -> str:
        """Representation actually used ('sparse', 'compressed' or 'dense')."""
        return self.selection.strategy.value

    def summary(self):
        """Print a short report of the computation."""
        values = self.fstats.values
        finite = np.isfinite(values)
        counts = self.fstats.lengths

        print()
        print("=" * 60)
        print("F-STATISTICS")
        print("=" * 60)
        print(f"Features:          {self.n_features}")
        print(f"Samples:           {self.n_samples}")
        print(f"Degrees of freedom: {self.df1 - self.df0} and {self.df_residual}")
        print(f"Method:            {self.method} (used: {self.strategy})")
        print(f"Engine:            {self.engine.name}")
        print(f"adjust_f:          {self.adjust_f}")
        print()
        if finite.any():
            print(f"  Min:    {values[finite].min():>12.4f}")
            print(f"  Max:    {values[finite].max():>12.4f}")
        print(f"  Runs:   {self.fstats.nrun:>12d}")
        print(f"  NaN:    {int(counts[np.isnan(values)].sum()):>12d}")
        if self.selection.degraded:
            print()
            print(f"Note: {self.selection.message}")
        print("=" * 60)
        print()

    def __repr__(self):
        return (
            f"FStatistics(n={self.n_features}, m={self.n_samples}, "
            f"df=({self.df1 - self.df0}, {self.df_residual}), "
            f"strategy={self.strategy!r})"
        )


def fstats_apply(
    index=None,
    data=None,
    mod=None,
    mod0=None,
    adjust_f: float = 0.0,
    chunk_loader: Optional[ChunkLoader] = None,
    low_mem_dir: Optional[Union[str, Path]] = None,
    method: str = 'auto-sparse',
    scale_factor: float = 32,
    device: Optional[str] = None,
) -> Rle:
    """
    Calculate F-statistics per feature, optionally on one chunk.

    Compares the alternative model `mod` with the null model `mod0` on
    every selected row of the coverage.

    Parameters
    ----------
    index : array of bool, logical Rle or chunk key, optional
        Rows of `data` to use, or the chunk key when reading chunks.
    data : CoverageTable, ndarray, DataFrame or sparse matrix, optional
        Coverage, n features x m samples.
    mod, mod0 : array
        Alternative (m x p) and null (m x p0) design matrices.
    adjust_f : float
        Added to the denominator of the F-statistic.
    chunk_loader : callable, optional
        Returns the coverage of chunk `index`.
    low_mem_dir : str or Path, optional
        Directory of ``chunk<index>.pkl``/``.npz`` files.
    method : str
        'auto-sparse' (default), 'compressed' or 'dense'.

        - 'auto-sparse' uses a sparse matrix when the projection
          matrices have zero row sums and falls back to 'dense' with a
          `DegradationWarning` otherwise (e.g. no intercept column).
        - 'compressed' works on the run-length encoded columns and never
          builds a matrix, but needs m(m + 1) operations for m samples.
        - 'dense' uses a plain matrix.

        Results agree between methods up to small numerical differences.
    scale_factor : float
        Scaling factor of the upstream log2 transform (sparse only).
    device : str, optional
        Torch device for method='dense'.

    Returns
    -------
    Rle
        F-statistic per feature.

    Raises
    ------
    ConfigurationError
        Invalid method, negative scale_factor or adjust_f, malformed or
        non-nested design matrices, sample count mismatch.
    NumericalError
        Singular design matrix.

    Examples
    --------
    >>> data = CoverageTable({
    ...     'sample1': Rle([1, 1, 2, 5]), 'sample2': Rle([1, 1, 3, 5]),
    ...     'sample3': Rle([4, 4, 2, 5]), 'sample4': Rle([5, 5, 2, 5]),
    ... })
    >>> mod = np.column_stack([np.ones(4), [0, 0, 1, 1]])
    >>> mod0 = np.ones((4, 1))
    >>> fstats = fstats_apply(data=data, mod=mod, mod0=mod0, scale_factor=1)
    """
    return FStatistics(
        data=data,
        mod=mod,
        mod0=mod0,
        index=index,
        adjust_f=adjust_f,
        chunk_loader=chunk_loader,
        low_mem_dir=low_mem_dir,
        method=method,
        scale_factor=scale_factor,
        device=device,
        _stacklevel=4,
    ).fstats


compute_fstatistics = fstats_apply


def compute_rss(data, P: np.ndarray, method: str = 'dense',
                scale_factor: float = 32, device: Optional[str] = None):
    """
    Residual sum of squares of every row of `data` for projection `P`.

    Parameters
    ----------
    data : CoverageTable, ndarray, DataFrame or sparse matrix
    P : ndarray, shape (m, m)
        Projection matrix, see `projection_matrix`.
    method : str
        As in `fstats_apply`.

    Returns
    -------
    ndarray or Rle
        Rle for method='compressed', ndarray otherwise.
    """
    P = np.asarray(P, dtype=np.float64)
    scale_factor = check_scalar(scale_factor, 'scale_factor')
    if n_samples(data) != P.shape[0]:
        raise ConfigurationError(
            f"Coverage has {n_samples(data)} samples but P is "
            f"{P.shape[0]} x {P.shape[1]}"
        )
    selection = select_strategy(method, P, P, P.shape[0])
    if selection.message is not None:
        warnings.warn(selection.message, DegradationWarning, stacklevel=2)
    engine = get_engine(selection.strategy, device=device)
    return engine.compute_rss(engine.prepare(data, scale_factor=scale_factor), P)
