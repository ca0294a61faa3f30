"""
F-statistic for a nested pair of linear models.
"""

import numpy as np

from ..rle import Rle


def f_statistic(rss1, rss0, df1: int, df0: int, n_samples: int,
                adjust_f: float = 0.0) -> Rle:
    """
    F = ((RSS0 - RSS1) / (df1 - df0)) / (adjust_f + RSS1 / (m - df1))

    Parameters
    ----------
    rss1, rss0 : ndarray or Rle
        Residual sums of squares under the alternative and null models.
    df1, df0 : int
        Number of columns of the alternative and null design matrices.
    n_samples : int
        Number of samples m.
    adjust_f : float
        Added to the denominator; guards against tiny RSS1.

    Returns
    -------
    Rle
        F-statistic per feature. Features with RSS0 = RSS1 = 0 give NaN
        when adjust_f is 0.
    """
    compressed = isinstance(rss1, Rle)
    if not compressed:
        rss1 = np.asarray(rss1, dtype=np.float64).ravel()
        rss0 = np.asarray(rss0, dtype=np.float64).ravel()

    with np.errstate(divide='ignore', invalid='ignore'):
        fstats = ((rss0 - rss1) / (df1 - df0)) / (adjust_f + rss1 / (n_samples - df1))

    if compressed:
        return fstats
    return Rle(fstats)
