"""
Choice of data representation for the RSS computation.

The decision is a pure function of the requested method and the two
projection matrices; warnings are raised by the caller.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from ..exceptions import ConfigurationError


COMPRESSED_SAMPLE_LIMIT = 40
ROW_SUM_DECIMALS = 4

METHODS = ("auto-sparse", "compressed", "dense")

# Names used by derfinder's fstats.apply()
METHOD_ALIASES = {
    "Matrix": "auto-sparse",
    "Rle": "compressed",
    "regular": "dense",
}

ROW_SUM_MESSAGE = (
    "Switching to the dense method because the row sums of the projection "
    "matrices are not 0. This can happen when a design matrix does not "
    "have an intercept term."
)

COMPRESSED_COST_MESSAGE = (
    "The compressed method needs m(m + 1) run-length operations for m "
    "samples ({m} here) and gets considerably slower as m increases. "
    "Consider splitting the data in chunks and using method='auto-sparse'."
)


class Strategy(Enum):
    """Representation the residual sums of squares are computed on."""
    SPARSE = "sparse"
    COMPRESSED = "compressed"
    DENSE = "dense"


@dataclass(frozen=True)
class StrategySelection:
    """
    Outcome of `select_strategy`.

    Attributes
    ----------
    requested : str
        Canonical requested method.
    strategy : Strategy
        Representation actually used.
    message : str or None
        Diagnostic to report, if any.
    """
    requested: str
    strategy: Strategy
    message: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.message is not None


def parse_method(method: str) -> str:
    """Validate a requested method and return its canonical name."""
    if isinstance(method, Strategy):
        method = method.value
    if isinstance(method, str):
        method = METHOD_ALIASES.get(method, method)
    if not isinstance(method, str) or method not in METHODS:
        raise ConfigurationError(
            f"Unknown method: {method!r}\n"
            f"Valid options: 'auto-sparse', 'compressed', 'dense' "
            f"(or 'Matrix', 'Rle', 'regular')"
        )
    return method


def max_abs_row_sum(P: np.ndarray) -> float:
    return float(np.max(np.abs(P.sum(axis=1))))


def row_sums_vanish(P: np.ndarray, decimals: int = ROW_SUM_DECIMALS) -> bool:
    """True when every row of P sums to 0 after rounding."""
    return round(max_abs_row_sum(P), decimals) == 0


def select_strategy(method: str, P1: np.ndarray, P0: np.ndarray,
                    n_samples: int) -> StrategySelection:
    """
    Decide which representation to compute on.

    'auto-sparse' uses the sparse representation only when both
    projection matrices have zero row sums, since the sparse transform
    shifts every stored value by log2(scale_factor); otherwise it falls
    back to dense. 'compressed' and 'dense' are used as requested.

    Parameters
    ----------
    method : str
        Requested method.
    P1, P0 : ndarray, shape (m, m)
        Projection matrices of the alternative and null models.
    n_samples : int
        Number of samples m.

    Returns
    -------
    StrategySelection
    """
    method = parse_method(method)

    if method == "auto-sparse":
        if row_sums_vanish(P1) and row_sums_vanish(P0):
            return StrategySelection(method, Strategy.SPARSE)
        return StrategySelection(method, Strategy.DENSE, ROW_SUM_MESSAGE)

    if method == "compressed":
        message = None
        if n_samples > COMPRESSED_SAMPLE_LIMIT:
            message = COMPRESSED_COST_MESSAGE.format(m=n_samples)
        return StrategySelection(method, Strategy.COMPRESSED, message)

    return StrategySelection(method, Strategy.DENSE)
