"""
Dense engine using PyTorch.

Moves the (n, m) product to a torch device. Converts once at entry
(numpy -> torch) and once at exit (torch -> numpy).
"""

import warnings
from typing import Any, Optional

import numpy as np

from .dense_engine import DenseRSSEngine


class TorchDenseRSSEngine(DenseRSSEngine):
    """
    Dense engine on a torch device.

    Uses float64 everywhere except on Apple MPS, which has no float64
    support; there it computes in float32 and warns.
    """

    def __init__(self, device: Optional[str] = None):
        super().__init__()
        self.name = "torch_dense"

        try:
            import torch
            self.torch = torch
        except ImportError:
            raise ImportError(
                "PyTorch required for device-backed dense engine. "
                "Install: pip install torch"
            )

        self.device = self._select_device(device)

        if self.device.type == 'mps':
            self.dtype = torch.float32
            self.precision = "fp32"
            warnings.warn(
                "Apple MPS does not support float64; residual sums of "
                "squares are computed in float32.",
                UserWarning
            )
        else:
            self.dtype = torch.float64
            self.precision = "fp64"

    def _select_device(self, requested: Optional[str]) -> Any:
        torch = self.torch

        if requested:
            return torch.device(requested)

        if torch.cuda.is_available():
            return torch.device('cuda')
        if hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
            return torch.device('mps')

        warnings.warn("No GPU available, using CPU")
        return torch.device('cpu')

    def compute_rss(self, data: np.ndarray, P: np.ndarray) -> np.ndarray:
        torch = self.torch

        data_dev = torch.from_numpy(np.ascontiguousarray(data)).to(
            device=self.device, dtype=self.dtype)
        P_dev = torch.from_numpy(np.ascontiguousarray(P)).to(
            device=self.device, dtype=self.dtype)

        resid = data_dev @ P_dev
        rss = (resid * resid).sum(dim=1)

        return rss.cpu().numpy().astype(np.float64)

    def get_engine_info(self) -> dict:
        return {
            'engine': 'dense',
            'representation': 'torch.Tensor',
            'precision': self.precision,
            'device': str(self.device),
            'library': f'PyTorch {self.torch.__version__}',
        }
