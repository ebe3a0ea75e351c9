"""
Abstract base classes for backends.

Defines the interface all backends must implement.
"""

from abc import ABC, abstractmethod
import numpy as np
from typing import Optional
from dataclasses import dataclass


@dataclass
class LinearModelResult:
    """Least-squares fit of a full design matrix."""
    coef: np.ndarray          # NaN for aliased columns
    residuals: np.ndarray     # y - fitted, unweighted
    fitted_values: np.ndarray
    rank: int
    df_residual: int
    qr_R: np.ndarray          # R from the pivoted QR of the (weighted) design
    qr_pivot: np.ndarray      # 0-indexed column order of R
    qr_tol: float


class BackendBase(ABC):
    """Abstract base class for all backends."""

    name: str = "base"
    precision: str = "fp64"

    @abstractmethod
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
        Weighted least squares on a full design matrix.

        Parameters
        ----------
        X : ndarray, shape (n, p)
            Design matrix, including any intercept column
        y : ndarray, shape (n,)
            Response vector
        weights : ndarray, optional
            Positive observation weights
        offset : ndarray, optional
            Offset term
        tol : float, optional
            Relative tolerance on |R_kk| / |R_00| for rank determination
        singular_ok : bool
            If False, raise SingularDesignError on a rank-deficient fit

        Returns
        -------
        LinearModelResult
        """
        pass

    @abstractmethod
    def get_device_info(self) -> dict:
        """Get backend information."""
        pass

    def __repr__(self):
        return f"{type(self).__name__}(name='{self.name}')"


class CPUBackend(BackendBase):
    """CPU backend base class (always FP64)."""
    pass
