"""
Abstract base class for RSS engines.

Defines the interface all engines must implement.
"""

from abc import ABC, abstractmethod

import numpy as np

from .._core.selector import Strategy


class RSSEngineBase(ABC):
    """
    Abstract base class for residual sum of squares engines.

    An engine owns one data representation: `prepare` converts coverage
    into it, `compute_rss` evaluates the residual sum of squares of every
    feature (row) against a projection matrix.
    """

    name: str
    strategy: Strategy

    @abstractmethod
    def prepare(self, data, scale_factor: float = 32):
        """
        Convert coverage into the representation this engine works on.

        Parameters
        ----------
        data : CoverageTable, ndarray, DataFrame or sparse matrix
            Coverage, n features x m samples.
        scale_factor : float
            Scaling factor of the upstream log2 transform. Only the
            sparse representation uses it.
        """
        pass

    @abstractmethod
    def compute_rss(self, data, P: np.ndarray):
        """
        Residual sum of squares per feature.

        Parameters
        ----------
        data
            Output of `prepare`.
        P : ndarray, shape (m, m)
            Projection matrix.

        Returns
        -------
        ndarray or Rle, length n
        """
        pass

    @abstractmethod
    def get_engine_info(self) -> dict:
        """Get engine information."""
        pass

    def __repr__(self):
        return f"{type(self).__name__}(name={self.name!r})"
