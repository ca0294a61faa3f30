"""
Exception and warning classes.
"""

import numpy as np


class ConfigurationError(ValueError):
    """Invalid argument detected before any computation started."""


class NumericalError(np.linalg.LinAlgError):
    """Linear algebra failure, e.g. a singular design matrix."""


class DegradationWarning(UserWarning):
    """
    Computation proceeded with a different strategy or cost profile
    than requested. The result is still complete and correct.
    """


__all__ = ["ConfigurationError", "NumericalError", "DegradationWarning"]
