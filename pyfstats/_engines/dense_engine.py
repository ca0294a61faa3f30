"""
Dense engine using NumPy.

This is the reference implementation the other engines are checked
against.
"""

import numpy as np

from .._core.selector import Strategy
from ..coverage import to_dense
from .base import RSSEngineBase


class DenseRSSEngine(RSSEngineBase):
    """Plain (n, m) float64 matrix arithmetic."""

    def __init__(self):
        self.name = "dense"
        self.strategy = Strategy.DENSE

    def prepare(self, data, scale_factor: float = 32) -> np.ndarray:
        return to_dense(data)

    def compute_rss(self, data: np.ndarray, P: np.ndarray) -> np.ndarray:
        resid = data @ P
        return (resid * resid) @ np.ones(P.shape[0])

    def get_engine_info(self) -> dict:
        return {
            'engine': 'dense',
            'representation': 'numpy.ndarray',
            'library': f'NumPy {np.__version__}',
        }
