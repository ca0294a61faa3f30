"""
Residual-space projection matrices.

For a design matrix X (m x p) the projection onto the space orthogonal
to its columns is P = I - X (X'X)^-1 X'. P is symmetric and idempotent;
multiplying a row of coverage by P leaves the residuals of that row
under the model.
"""

import numpy as np
from scipy import linalg

from .._utils import check_array
from ..exceptions import NumericalError


def projection_matrix(X: np.ndarray) -> np.ndarray:
    """
    Compute P = I - X (X'X)^-1 X'.

    Parameters
    ----------
    X : ndarray, shape (m, p)
        Design matrix, full column rank.

    Returns
    -------
    ndarray, shape (m, m)

    Raises
    ------
    NumericalError
        If X'X is (computationally) singular.
    """
    X = check_array(X, name='design matrix')
    m, p = X.shape

    rank = np.linalg.matrix_rank(X)
    if rank < p:
        raise NumericalError(
            f"Design matrix ({m} x {p}) is singular: rank {rank} < {p} columns. "
            f"Check for collinear covariates."
        )

    XtX = X.T @ X
    try:
        XtX_inv = linalg.inv(XtX)
    except linalg.LinAlgError as e:
        raise NumericalError(f"Design matrix ({m} x {p}) is singular") from e

    return np.eye(m) - X @ XtX_inv @ X.T


def residual_df(X: np.ndarray) -> int:
    """Residual degrees of freedom m - p."""
    m, p = np.shape(X)
    return m - p
