"""
Engine selection and management.

Provides a unified interface over the dense (NumPy), sparse (SciPy),
compressed (run-length) and device-backed dense (PyTorch) engines.
"""

import importlib.util
from typing import Optional, Union

from .._core.selector import Strategy
from ..exceptions import ConfigurationError
from .base import RSSEngineBase
from .compressed_engine import CompressedRSSEngine
from .dense_engine import DenseRSSEngine
from .sparse_engine import SparseRSSEngine

# PyTorch is optional; the module itself imports torch lazily
TORCH_AVAILABLE = importlib.util.find_spec("torch") is not None


_ENGINES = {
    Strategy.DENSE: DenseRSSEngine,
    Strategy.SPARSE: SparseRSSEngine,
    Strategy.COMPRESSED: CompressedRSSEngine,
}


def get_engine(strategy: Union[str, Strategy] = 'dense',
               device: Optional[str] = None) -> RSSEngineBase:
    """
    Get RSS engine.

    Parameters
    ----------
    strategy : str or Strategy
        Representation to compute on:
        - 'dense': NumPy float64 matrix
        - 'sparse': SciPy CSC matrix
        - 'compressed': run-length encoded columns
    device : str or None
        Torch device for the dense engine ('cuda', 'cuda:1', 'mps', ...).
        None or 'cpu' uses NumPy. Only valid with the dense strategy.

    Returns
    -------
    RSSEngineBase
        Engine instance

    Examples
    --------
    >>> engine = get_engine('sparse')
    >>> engine = get_engine('dense', device='cuda')
    """
    if not isinstance(strategy, Strategy):
        try:
            strategy = Strategy(strategy)
        except ValueError:
            raise ConfigurationError(
                f"Unknown engine: {strategy!r}\n"
                f"Valid options: 'dense', 'sparse', 'compressed'"
            )

    if device is None or device == 'cpu':
        return _ENGINES[strategy]()

    if strategy is not Strategy.DENSE:
        raise ConfigurationError(
            f"device={device!r} is only supported by the dense engine, "
            f"not {strategy.value!r}"
        )

    from .torch_dense_engine import TorchDenseRSSEngine
    return TorchDenseRSSEngine(device=device)


def list_available_engines() -> list:
    """List names of available engines."""
    engines = [strategy.value for strategy in _ENGINES]
    if TORCH_AVAILABLE:
        engines.append('torch_dense')
    return engines


def print_engine_info():
    """Print engine information (diagnostic)."""
    print("PyFstats Engine Status")
    print("=" * 50)
    print("\nAvailable Engines:")
    print("  Dense (NumPy):         ✓ - (n x m) matrix product")
    print("  Sparse (SciPy):        ✓ - CSC matrix, needs zero projection row sums")
    print("  Compressed (Rle):      ✓ - m(m + 1) run-length operations")
    print(f"  Dense (PyTorch):       {'✓' if TORCH_AVAILABLE else '✗'} - (n x m) product on a torch device")

    print("\nEngine Details:")
    for strategy in _ENGINES:
        info = get_engine(strategy).get_engine_info()
        print(f"  {strategy.value:<12} {info['representation']:<28} {info['library']}")


__all__ = [
    'get_engine',
    'list_available_engines',
    'print_engine_info',
    'RSSEngineBase',
    'DenseRSSEngine',
    'SparseRSSEngine',
    'CompressedRSSEngine',
    'TORCH_AVAILABLE',
]


if __name__ == "__main__":
    print_engine_info()
