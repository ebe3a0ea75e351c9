"""
pycurvefit: curve fitting with R-style numerics.

Linear and polynomial regression by pivoted QR, logistic regression by
hand-written IRLS, and reproducible simulated data.

Licensed under GPL-3.0
"""

__version__ = "0.1.0"

from .lm import lm, LinearModel
from .glm import glm, GLM
from ._core import FitResult, fit_logistic_irls, irls_step, binomial_loglik
from ._core.families import Family, Gaussian, Binomial
from ._config import (
    IRLSControl,
    glm_control,
    get_default_control,
    set_default_control,
    reset_default_control,
)
from .exceptions import (
    PreconditionError,
    FitError,
    NumericalDivergenceError,
    SingularDesignError,
    ConvergenceWarning,
)
from .simulate import simulate_linear, simulate_logistic, design_matrix
from .selection import compare_polynomial_degrees, select_polynomial_degree
from ._backends import get_backend, list_available_backends

__all__ = [
    'lm',
    'LinearModel',
    'glm',
    'GLM',
    'FitResult',
    'fit_logistic_irls',
    'irls_step',
    'binomial_loglik',
    'Family',
    'Gaussian',
    'Binomial',
    'IRLSControl',
    'glm_control',
    'get_default_control',
    'set_default_control',
    'reset_default_control',
    'PreconditionError',
    'FitError',
    'NumericalDivergenceError',
    'SingularDesignError',
    'ConvergenceWarning',
    'simulate_linear',
    'simulate_logistic',
    'design_matrix',
    'compare_polynomial_degrees',
    'select_polynomial_degree',
    'get_backend',
    'list_available_backends',
]
