"""
Core algorithms (representation-agnostic).
"""

from .projection import projection_matrix, residual_df
from .selector import (
    Strategy,
    StrategySelection,
    parse_method,
    select_strategy,
    COMPRESSED_SAMPLE_LIMIT,
)
from .fstat import f_statistic

__all__ = [
    "projection_matrix",
    "residual_df",
    "Strategy",
    "StrategySelection",
    "parse_method",
    "select_strategy",
    "COMPRESSED_SAMPLE_LIMIT",
    "f_statistic",
]
