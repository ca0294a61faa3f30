"""
PyFstats: per-feature F-statistics for nested linear models on coverage data.

Copyright (C) 2024 SGCX
Licensed under GPL-3.0
"""

__version__ = "1.0.0"

# Import main user-facing API
from .fstats import FStatistics, fstats_apply, compute_fstatistics, compute_rss
from .rle import Rle
from .coverage import CoverageTable, to_sparse, to_dense, to_coverage_table
from .chunks import DirectoryChunkLoader, save_chunk
from .exceptions import ConfigurationError, NumericalError, DegradationWarning

# Building blocks (for advanced users)
from ._core import projection_matrix, select_strategy, f_statistic, Strategy
from ._engines import get_engine, list_available_engines

__all__ = [
    'FStatistics',
    'fstats_apply',
    'compute_fstatistics',
    'compute_rss',
    'Rle',
    'CoverageTable',
    'to_sparse',
    'to_dense',
    'to_coverage_table',
    'DirectoryChunkLoader',
    'save_chunk',
    'ConfigurationError',
    'NumericalError',
    'DegradationWarning',
    'projection_matrix',
    'select_strategy',
    'f_statistic',
    'Strategy',
    'get_engine',
    'list_available_engines',
]
