"""
Core algorithms (backend-agnostic).
"""

from .families import Family, Gaussian, Binomial
from .irls import FitResult, fit_logistic_irls, irls_step, binomial_loglik
from .lm_solver import fit_linear_model

__all__ = [
    "Family",
    "Gaussian",
    "Binomial",
    "FitResult",
    "fit_logistic_irls",
    "irls_step",
    "binomial_loglik",
    "fit_linear_model",
]
