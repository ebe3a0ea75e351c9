"""
GLM family definitions.

Defines link functions, variance functions, deviance and log-likelihood.
"""

import numpy as np
from abc import ABC, abstractmethod
from scipy.special import expit, xlogy


class Family(ABC):
    """Base class for GLM families."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Family name."""
        pass

    @property
    @abstractmethod
    def link(self) -> str:
        """Link name."""
        pass

    @abstractmethod
    def linkfun(self, mu: np.ndarray) -> np.ndarray:
        """Link function: η = g(μ)"""
        pass

    @abstractmethod
    def linkinv(self, eta: np.ndarray) -> np.ndarray:
        """Inverse link: μ = g⁻¹(η)"""
        pass

    @abstractmethod
    def mu_eta(self, eta: np.ndarray) -> np.ndarray:
        """Derivative: dμ/dη"""
        pass

    @abstractmethod
    def variance(self, mu: np.ndarray) -> np.ndarray:
        """Variance function: V(μ)"""
        pass

    @abstractmethod
    def dev_resids(self, y: np.ndarray, mu: np.ndarray) -> np.ndarray:
        """Unit deviance contributions."""
        pass

    @abstractmethod
    def loglik(self, y: np.ndarray, mu: np.ndarray) -> float:
        """Log-likelihood of y at mean μ."""
        pass

    def __repr__(self):
        return f"{type(self).__name__}(link='{self.link}')"


class Gaussian(Family):
    """Gaussian family with identity link (unit variance)."""

    @property
    def name(self) -> str:
        return "gaussian"

    @property
    def link(self) -> str:
        return "identity"

    def linkfun(self, mu: np.ndarray) -> np.ndarray:
        return mu

    def linkinv(self, eta: np.ndarray) -> np.ndarray:
        return eta

    def mu_eta(self, eta: np.ndarray) -> np.ndarray:
        return np.ones_like(eta)

    def variance(self, mu: np.ndarray) -> np.ndarray:
        return np.ones_like(mu)

    def dev_resids(self, y: np.ndarray, mu: np.ndarray) -> np.ndarray:
        return (y - mu) ** 2

    def loglik(self, y: np.ndarray, mu: np.ndarray) -> float:
        # Profile log-likelihood with σ² at its MLE
        n = len(y)
        rss = np.sum((y - mu) ** 2)
        return float(-0.5 * n * (np.log(2 * np.pi * rss / n) + 1))


class Binomial(Family):
    """
    Bernoulli family with logit link.

    The inverse link is the plain logistic function, so μ can reach
    exactly 0 or 1 for large |η|. No clamping is applied: callers detect
    saturation with `saturated()`.
    """

    EPS = np.finfo(np.float64).eps

    @property
    def name(self) -> str:
        return "binomial"

    @property
    def link(self) -> str:
        return "logit"

    def linkfun(self, mu: np.ndarray) -> np.ndarray:
        """Logit link: η = log(μ/(1-μ))"""
        return np.log(mu / (1 - mu))

    def linkinv(self, eta: np.ndarray) -> np.ndarray:
        """Inverse logit: μ = 1/(1 + exp(-η))"""
        return expit(eta)

    def mu_eta(self, eta: np.ndarray) -> np.ndarray:
        """Derivative: dμ/dη = μ(1-μ)"""
        mu = expit(eta)
        return mu * (1 - mu)

    def variance(self, mu: np.ndarray) -> np.ndarray:
        """Variance: V(μ) = μ(1-μ)"""
        return mu * (1 - mu)

    def saturated(self, mu: np.ndarray) -> np.ndarray:
        """Mask of fitted probabilities numerically at 0 or 1."""
        return self.variance(mu) < self.EPS

    def dev_resids(self, y: np.ndarray, mu: np.ndarray) -> np.ndarray:
        """Unit deviance: 2[y log(y/μ) + (1-y) log((1-y)/(1-μ))]"""
        return 2 * (xlogy(y, y) - xlogy(y, mu)
                    + xlogy(1 - y, 1 - y) - xlogy(1 - y, 1 - mu))

    def loglik(self, y: np.ndarray, mu: np.ndarray) -> float:
        """Σ y log μ + (1-y) log(1-μ)"""
        return float(np.sum(xlogy(y, mu) + xlogy(1 - y, 1 - mu)))


__all__ = ["Family", "Gaussian", "Binomial"]
