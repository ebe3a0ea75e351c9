"""
CPU backend using NumPy + SciPy.

Least squares by Householder QR with column pivoting (LAPACK geqp3).
"""

import numpy as np
import scipy
from scipy.linalg import qr, solve_triangular
from typing import Optional

from .base import CPUBackend, LinearModelResult
from ..exceptions import SingularDesignError

# R's lm.fit / glm.fit rank tolerance
DEFAULT_TOL = 1e-7


class CPUBackendFP64(CPUBackend):
    """
    CPU backend using NumPy + SciPy.

    Always uses FP64 precision.
    """

    def __init__(self):
        self.name = "cpu_fp64"
        self.precision = "fp64"

    def fit_linear_model(
        self,
        X: np.ndarray,
        y: np.ndarray,
        weights: Optional[np.ndarray] = None,
        offset: Optional[np.ndarray] = None,
        tol: Optional[float] = None,
        singular_ok: bool = True
    ) -> LinearModelResult:
        """
        Fit a (weighted) linear model via pivoted QR.

        Solves min ‖√w (y - offset - Xβ)‖² without forming X'WX.
        """
        X = np.asarray(X, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        n, p = X.shape
        if tol is None:
            tol = DEFAULT_TOL

        y_work = y - offset if offset is not None else y.copy()

        if weights is not None:
            weights = np.asarray(weights, dtype=np.float64)
            good = weights > 0
            if not np.any(good):
                raise ValueError("All weights are zero")
            w_sqrt = np.sqrt(weights[good])
            X_work = X[good, :] * w_sqrt[:, np.newaxis]
            y_work = y_work[good] * w_sqrt
            n_good = int(np.sum(good))
        else:
            X_work = X
            n_good = n

        Q, R, P = qr(X_work, mode='economic', pivoting=True)

        R_diag = np.abs(np.diag(R))
        if R_diag.size == 0 or R_diag[0] == 0:
            rank = 0
        else:
            rank = int(np.sum(R_diag > tol * R_diag[0]))

        if not singular_ok and rank < p:
            raise SingularDesignError(
                f"Singular fit: rank {rank} < {p} columns"
            )

        coef = np.full(p, np.nan, dtype=np.float64)
        if rank > 0:
            qty = Q[:, :rank].T @ y_work
            coef[P[:rank]] = solve_triangular(
                R[:rank, :rank], qty, lower=False
            )

        # Aliased coefficients contribute nothing to the fit
        active = ~np.isnan(coef)
        fitted = X[:, active] @ coef[active]
        if offset is not None:
            fitted = fitted + offset
        residuals = y - fitted

        return LinearModelResult(
            coef=coef,
            residuals=residuals,
            fitted_values=fitted,
            rank=rank,
            df_residual=n_good - rank,
            qr_R=R,
            qr_pivot=P.astype(np.int64),
            qr_tol=tol,
        )

    def get_device_info(self) -> dict:
        """Get backend information."""
        return {
            'backend': 'cpu',
            'precision': 'fp64',
            'library': f'NumPy {np.__version__}, SciPy {scipy.__version__}',
        }
