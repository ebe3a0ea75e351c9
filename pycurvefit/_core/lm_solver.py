"""
Linear model solver.

Thin wrapper that validates input and delegates to a backend.
"""

import numpy as np
from typing import Optional

from .._backends import get_backend
from .._utils import check_design, check_vector


def fit_linear_model(
    X,
    y,
    weights: Optional[np.ndarray] = None,
    offset: Optional[np.ndarray] = None,
    tol: Optional[float] = None,
    singular_ok: bool = True,
    backend=None,
):
    """
    Fit a linear model on a full design matrix.

    Parameters
    ----------
    X : array-like, shape (n, p)
        Design matrix (include a column of ones for an intercept)
    y : array-like, shape (n,)
        Response vector
    weights : array-like, optional
        Observation weights
    offset : array-like, optional
        Offset term
    tol : float, optional
        Rank determination tolerance
    singular_ok : bool
        Allow rank-deficient fits (aliased coefficients become NaN)
    backend : str or BackendBase, optional
        Computational backend

    Returns
    -------
    LinearModelResult
    """
    X, y = check_design(X, y)
    if weights is not None:
        weights = check_vector(weights, 'weights')
        if len(weights) != len(y) or np.any(weights < 0):
            raise ValueError("weights must be non-negative with one entry per observation")
    if offset is not None:
        offset = check_vector(offset, 'offset')

    return get_backend(backend or 'auto').fit_linear_model(
        X, y,
        weights=weights,
        offset=offset,
        tol=tol,
        singular_ok=singular_ok,
    )
