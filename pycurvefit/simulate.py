"""
Simulated one-dimensional datasets.

Every function draws from an explicit generator; passing the same seed
reproduces the same data regardless of any global random state.
"""

import numpy as np
import pandas as pd
from scipy.special import expit


def _as_generator(rng) -> np.random.Generator:
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def simulate_linear(
    n: int = 300,
    intercept: float = 2.0,
    slope: float = 10.0,
    sd: float = 1.5,
    rng=None,
) -> pd.DataFrame:
    """
    Straight line plus Gaussian noise on sorted uniform x.

    x ~ U(0, 1) sorted ascending, y_true = intercept + slope·x,
    y_obs = y_true + N(0, sd²).

    Parameters
    ----------
    n : int
        Number of observations
    intercept, slope : float
        True line
    sd : float
        Noise standard deviation
    rng : Generator or int, optional
        Random generator or seed

    Returns
    -------
    DataFrame
        Columns 'x', 'y_obs', 'y_true'
    """
    if n < 1:
        raise ValueError(f"n must be positive, got {n}")
    if sd < 0:
        raise ValueError(f"sd must be non-negative, got {sd}")
    gen = _as_generator(rng)
    x = np.sort(gen.uniform(0.0, 1.0, n))
    eps = gen.normal(0.0, sd, n)
    y_true = intercept + slope * x
    return pd.DataFrame({'x': x, 'y_obs': y_true + eps, 'y_true': y_true})


def simulate_logistic(
    n: int = 300,
    coefficients=(-8.0, 16.0),
    rng=None,
) -> pd.DataFrame:
    """
    Bernoulli responses from a logistic curve on sorted uniform x.

    Returns a DataFrame with columns 'x', 'y' (0/1) and 'p_true'.
    """
    if n < 1:
        raise ValueError(f"n must be positive, got {n}")
    b0, b1 = coefficients
    gen = _as_generator(rng)
    x = np.sort(gen.uniform(0.0, 1.0, n))
    p = expit(b0 + b1 * x)
    y = gen.binomial(1, p).astype(np.float64)
    return pd.DataFrame({'x': x, 'y': y, 'p_true': p})


def design_matrix(x, degree: int = 1, intercept: bool = True) -> np.ndarray:
    """Raw polynomial basis [1, x, x², ..., x^degree]."""
    x = np.asarray(x, dtype=np.float64)
    if x.ndim != 1:
        raise ValueError("x must be 1-dimensional")
    if degree < 0 or (degree == 0 and not intercept):
        raise ValueError(f"Invalid degree {degree} for intercept={intercept}")
    start = 0 if intercept else 1
    return np.vander(x, degree + 1, increasing=True)[:, start:]
