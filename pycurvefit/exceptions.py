"""
Exceptions and warnings raised by pycurvefit.

Input problems are ValueErrors, failures during an iterative fit are
RuntimeErrors, and an exhausted iteration budget is only a warning.
"""

from typing import Optional


class PreconditionError(ValueError):
    """Malformed input detected before any computation starts."""

    def __init__(self, message: str, constraint: str = "input"):
        super().__init__(message)
        self.constraint = constraint


class FitError(RuntimeError):
    """Base class for failures during an iterative fit."""

    def __init__(self, message: str, iteration: Optional[int] = None):
        if iteration is not None:
            message = f"{message} (iteration {iteration})"
        super().__init__(message)
        self.iteration = iteration


class NumericalDivergenceError(FitError):
    """Fitted probabilities saturated to 0 or 1 (e.g. perfect separation)."""
    pass


class SingularDesignError(FitError):
    """Weighted normal equations are not invertible."""
    pass


class ConvergenceWarning(UserWarning):
    """Iteration budget exhausted before the stopping tolerance was met."""
    pass


__all__ = [
    "PreconditionError",
    "FitError",
    "NumericalDivergenceError",
    "SingularDesignError",
    "ConvergenceWarning",
]
