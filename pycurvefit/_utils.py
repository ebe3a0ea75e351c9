"""
Input validation helpers.
"""

import numpy as np

from .exceptions import PreconditionError


def check_array(X, name='X', dtype=np.float64):
    """Validate a non-empty 2-D finite array."""
    X = np.asarray(X, dtype=dtype)
    if X.ndim != 2:
        raise PreconditionError(f"{name} must be 2-dimensional", "shape")
    if X.shape[0] == 0 or X.shape[1] == 0:
        raise PreconditionError(f"{name} must be non-empty, got shape {X.shape}", "shape")
    if not np.all(np.isfinite(X)):
        raise PreconditionError(f"{name} contains NaN or Inf", "finite")
    return X


def check_vector(y, name='y', dtype=np.float64):
    """Validate a 1-D finite array."""
    y = np.asarray(y, dtype=dtype)
    if y.ndim != 1:
        raise PreconditionError(f"{name} must be 1-dimensional", "shape")
    if not np.all(np.isfinite(y)):
        raise PreconditionError(f"{name} contains NaN or Inf", "finite")
    return y


def check_design(X, y, x_name='X', y_name='y'):
    """Validate a design matrix and response together (n rows, n >= p)."""
    X = check_array(X, x_name)
    y = check_vector(y, y_name)
    n, p = X.shape
    if len(y) != n:
        raise PreconditionError(
            f"{x_name} has {n} rows but {y_name} has {len(y)} entries",
            "dimensions",
        )
    if n < p:
        raise PreconditionError(
            f"Need at least as many observations as parameters: n={n} < p={p}",
            "n_ge_p",
        )
    return X, y


def check_binary(y, name='y'):
    """Validate that every entry of y is 0 or 1."""
    bad = (y != 0) & (y != 1)
    if np.any(bad):
        first = int(np.flatnonzero(bad)[0])
        raise PreconditionError(
            f"{name} must contain only 0 and 1; found {y[first]!r} at position {first}",
            "binary_response",
        )
    return y
