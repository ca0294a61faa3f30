"""
Utility functions.
"""

import numpy as np

from .exceptions import ConfigurationError


def check_array(X, name='X', dtype=np.float64):
    """Validate array input."""
    X = np.asarray(X, dtype=dtype)
    if X.ndim != 2:
        raise ConfigurationError(f"{name} must be 2-dimensional")
    if not np.all(np.isfinite(X)):
        raise ConfigurationError(f"{name} contains NaN or Inf")
    return X


def check_design(mod, mod0):
    """
    Validate a nested pair of design matrices.

    Returns both as float64 arrays.
    """
    mod = check_array(mod, name='mod')
    mod0 = check_array(mod0, name='mod0')
    if mod.shape[0] != mod0.shape[0]:
        raise ConfigurationError(
            f"mod and mod0 must have the same number of rows "
            f"({mod.shape[0]} != {mod0.shape[0]})"
        )
    df1, df0 = mod.shape[1], mod0.shape[1]
    if df1 <= df0:
        raise ConfigurationError(
            f"mod must have more columns than mod0 (got {df1} and {df0}); "
            f"the null model has to be nested in the alternative"
        )
    if mod.shape[0] <= df1:
        raise ConfigurationError(
            f"Need more samples than alternative model columns "
            f"({mod.shape[0]} samples, {df1} columns)"
        )
    return mod, mod0


def check_scalar(value, name, minimum=0.0):
    """Validate a finite scalar not below `minimum`."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if not np.isfinite(value) or value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return value


def check_mask(mask, n):
    """Validate a boolean row mask of length n."""
    mask = np.asarray(mask)
    if mask.dtype != np.bool_:
        raise ConfigurationError(f"Row index must be boolean, got dtype {mask.dtype}")
    if mask.ndim != 1 or mask.shape[0] != n:
        raise ConfigurationError(
            f"Row index must be a 1-dimensional mask of length {n}"
        )
    return mask
