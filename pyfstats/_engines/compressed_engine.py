"""
Compressed engine working directly on run-length encoded columns.

Never materialises the coverage matrix. The residual of sample k is the
weighted sum of all m sample columns with weights P[:, k], so the cost
is m(m + 1) run-length operations: independent of the number of
features, quadratic in the number of samples.
"""

import operator
from functools import reduce
from typing import List

import numpy as np

from .._core.selector import Strategy
from ..coverage import CoverageTable, to_coverage_table
from ..rle import Rle
from .base import RSSEngineBase


class CompressedRSSEngine(RSSEngineBase):
    """Matrix product done by hand on `Rle` columns."""

    def __init__(self):
        self.name = "compressed"
        self.strategy = Strategy.COMPRESSED

    def prepare(self, data, scale_factor: float = 32) -> CoverageTable:
        return to_coverage_table(data)

    def residuals(self, data: CoverageTable, P: np.ndarray) -> List[Rle]:
        """One residual sequence per sample."""
        columns = data.columns
        if len(columns) != P.shape[0]:
            raise ValueError(
                f"Coverage has {len(columns)} samples but the projection "
                f"matrix is {P.shape[0]} x {P.shape[1]}"
            )
        return [
            reduce(operator.add, (col * P[j, k] for j, col in enumerate(columns)))
            for k in range(P.shape[1])
        ]

    def compute_rss(self, data: CoverageTable, P: np.ndarray) -> Rle:
        return reduce(operator.add, (resid ** 2 for resid in self.residuals(data, P)))

    def get_engine_info(self) -> dict:
        return {
            'engine': 'compressed',
            'representation': 'pyfstats.CoverageTable',
            'library': f'NumPy {np.__version__}',
        }
