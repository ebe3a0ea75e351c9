"""
Logistic regression by Iteratively Reweighted Least Squares.

Fisher scoring for the Bernoulli likelihood under the canonical logit
link. Each iteration linearizes the link around the current estimate
and solves a weighted least-squares problem:

    η = Xβ,  μ = 1/(1 + exp(-η)),  w = μ(1-μ),  z = η + (y - μ)/w
    β_new = argmin ‖√w (z - Xβ)‖²

The weighted problem is solved by pivoted QR of √w·X, so X'WX is never
formed or inverted.
"""

import logging
import warnings
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .families import Binomial
from .._backends import get_backend
from .._config import get_default_control
from .._utils import check_binary, check_design, check_vector
from ..exceptions import (
    ConvergenceWarning,
    NumericalDivergenceError,
    PreconditionError,
    SingularDesignError,
)

logger = logging.getLogger(__name__)

_BINOMIAL = Binomial()


@dataclass(frozen=True)
class FitResult:
    """Outcome of an IRLS fit."""
    coefficients: np.ndarray  # Final β̂, length p
    iterations_used: int      # Number of weighted least-squares solves
    converged: bool           # Step norm fell below the tolerance
    stop_reason: str          # 'tolerance' or 'max_iterations'
    loglik_path: np.ndarray   # Log-likelihood at β⁰, β¹, ..., β̂


def binomial_loglik(X, y, beta) -> float:
    """Bernoulli log-likelihood Σ y log μ + (1-y) log(1-μ) at β."""
    mu = _BINOMIAL.linkinv(np.asarray(X) @ np.asarray(beta))
    return _BINOMIAL.loglik(np.asarray(y, dtype=np.float64), mu)


def _check_inputs(X, y, beta):
    X, y = check_design(X, y)
    check_binary(y)
    p = X.shape[1]
    if beta is None:
        beta = np.zeros(p)
    else:
        beta = check_vector(beta, 'beta_init').copy()
        if len(beta) != p:
            raise PreconditionError(
                f"beta_init has length {len(beta)} but X has {p} columns",
                "beta_init_length",
            )
    return X, y, beta


def _update(X, y, beta, backend, iteration):
    """One Fisher-scoring step; raises instead of producing non-finite values."""
    eta = X @ beta
    mu = _BINOMIAL.linkinv(eta)
    w = _BINOMIAL.variance(mu)

    saturated = _BINOMIAL.saturated(mu)
    if np.any(saturated):
        raise NumericalDivergenceError(
            f"Fitted probabilities numerically 0 or 1 for "
            f"{int(np.sum(saturated))} of {len(y)} observations; "
            f"the classes may be separable",
            iteration,
        )

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        z = eta + (y - mu) / w
    if not np.all(np.isfinite(z)):
        raise NumericalDivergenceError("Non-finite working response", iteration)

    try:
        fit = backend.fit_linear_model(X, z, weights=w, singular_ok=False)
    except SingularDesignError as exc:
        raise SingularDesignError(
            f"Weighted normal equations are singular: {exc}", iteration
        ) from exc

    if not np.all(np.isfinite(fit.coef)):
        raise NumericalDivergenceError("Non-finite coefficient update", iteration)
    return fit.coef


def irls_step(X, y, beta, *, backend=None) -> np.ndarray:
    """
    Apply a single IRLS update to `beta`.

    Parameters
    ----------
    X : array-like, shape (n, p)
        Design matrix
    y : array-like, shape (n,)
        Binary response
    beta : array-like, shape (p,)
        Current coefficients

    Returns
    -------
    ndarray, shape (p,)
        Updated coefficients
    """
    X, y, beta = _check_inputs(X, y, beta)
    return _update(X, y, beta, get_backend(backend or 'auto'), 1)


def _step_norm(delta, norm):
    if norm == 'euclidean':
        return float(np.linalg.norm(delta))
    return float(np.max(np.abs(delta)))


def fit_logistic_irls(
    X,
    y,
    beta_init=None,
    tolerance: Optional[float] = None,
    max_iterations: Optional[int] = None,
    *,
    norm: Optional[str] = None,
    backend=None,
) -> FitResult:
    """
    Fit a binomial logistic regression by IRLS.

    Parameters
    ----------
    X : array-like, shape (n, p)
        Design matrix. Include a column of ones for an intercept.
    y : array-like, shape (n,)
        Response of 0s and 1s
    beta_init : array-like, shape (p,), optional
        Starting coefficients (default: zeros)
    tolerance : float, optional
        Stop once the coefficient change is below this
        (default: the active IRLSControl's epsilon)
    max_iterations : int, optional
        Iteration cap (default: the active IRLSControl's maxit)
    norm : {'max', 'euclidean'}, optional
        Norm for the coefficient change (default: IRLSControl.norm)
    backend : str or BackendBase, optional
        Linear algebra backend

    Returns
    -------
    FitResult

    Raises
    ------
    PreconditionError
        Malformed input; raised before any iteration.
    NumericalDivergenceError
        Fitted probabilities saturated (e.g. separable data).
    SingularDesignError
        Weighted design lost rank (e.g. collinear predictors).

    Examples
    --------
    >>> X = np.column_stack([np.ones(len(x)), x])
    >>> result = fit_logistic_irls(X, y, beta_init=[-5.0, 10.0])
    >>> result.converged, result.coefficients
    """
    control = get_default_control()
    tol = control.epsilon if tolerance is None else tolerance
    maxit = control.maxit if max_iterations is None else max_iterations
    norm = control.norm if norm is None else norm

    if not (np.isfinite(tol) and tol > 0):
        raise PreconditionError(f"tolerance must be positive, got {tol}", "tolerance")
    if int(maxit) != maxit or maxit < 1:
        raise PreconditionError(
            f"max_iterations must be a positive integer, got {maxit}",
            "max_iterations",
        )
    if norm not in ('max', 'euclidean'):
        raise PreconditionError(f"Unknown norm: '{norm}'", "norm")

    X, y, beta = _check_inputs(X, y, beta_init)
    backend = get_backend(backend or 'auto')
    level = logging.INFO if control.trace else logging.DEBUG

    path = [binomial_loglik(X, y, beta)]
    converged = False
    iteration = 0
    for iteration in range(1, int(maxit) + 1):
        beta_new = _update(X, y, beta, backend, iteration)
        change = _step_norm(beta_new - beta, norm)
        beta = beta_new
        path.append(binomial_loglik(X, y, beta))
        logger.log(level, "IRLS iteration %d: loglik=%.10g change=%.3e",
                   iteration, path[-1], change)
        if change < tol:
            converged = True
            break

    if not converged:
        warnings.warn(
            f"IRLS did not converge in {iteration} iterations "
            f"(last change {change:.3e} >= tolerance {tol:.3e})",
            ConvergenceWarning,
            stacklevel=2,
        )

    return FitResult(
        coefficients=beta,
        iterations_used=iteration,
        converged=converged,
        stop_reason='tolerance' if converged else 'max_iterations',
        loglik_path=np.asarray(path),
    )
