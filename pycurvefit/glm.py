"""
Logistic regression with an R-style interface.

The fit itself is `fit_logistic_irls`; this module adds names,
Wald inference, deviance and information criteria.
"""

import numpy as np
import pandas as pd
from typing import Optional, Union, List
from scipy import stats

from ._backends import get_backend
from ._core.families import Family, Binomial
from ._core.irls import fit_logistic_irls
from .lm import _parse_predictors, _parse_response, format_pvalue, significance_stars


def _resolve_family(family) -> Family:
    if family is None or family == 'binomial':
        return Binomial()
    if isinstance(family, Binomial) and family.link == 'logit':
        return family
    raise NotImplementedError(
        f"Only the binomial family with logit link is supported, got {family!r}"
    )


class GLM:
    """
    Fitted binomial GLM with logit link (like R's glm(family=binomial)).

    An intercept is always added in front of the predictors.

    Examples
    --------
    >>> from pycurvefit import glm, simulate_logistic
    >>> data = simulate_logistic(rng=1)
    >>> model = glm(y='y', X='x', data=data, start=[-5.0, 10.0])
    >>> model.coef
    >>> model.predict([0.25, 0.5, 0.75])
    """

    def __init__(
        self,
        y: Union[str, np.ndarray],
        X: Union[str, List[str], np.ndarray, pd.DataFrame],
        data: Optional[pd.DataFrame] = None,
        family=None,
        start=None,
        tolerance: Optional[float] = None,
        max_iterations: Optional[int] = None,
        backend: str = 'auto',
    ):
        """
        Parameters
        ----------
        y : str or array
            Binary response: column name in `data` or 0/1 values
        X : str, list of str, array or DataFrame
            Predictors
        data : DataFrame, optional
            Dataset holding named columns
        family : Family or 'binomial', optional
            Only Binomial() is supported
        start : array, optional
            Starting coefficients (intercept first)
        tolerance, max_iterations : optional
            IRLS stopping rule; defaults from the active IRLSControl
        backend : str
            Computational backend
        """
        self.family = _resolve_family(family)
        self.y_values, self.y_name = _parse_response(y, data)
        self.X_values, self.X_names = _parse_predictors(X, data)
        self.var_names = ['Intercept'] + self.X_names
        self.n_obs = len(self.y_values)
        self.design = np.column_stack([np.ones(len(self.X_values)), self.X_values])
        self.backend = get_backend(backend)

        self._fit = fit_logistic_irls(
            self.design,
            self.y_values,
            beta_init=start,
            tolerance=tolerance,
            max_iterations=max_iterations,
            backend=self.backend,
        )
        self._compute_statistics()

    def _compute_statistics(self):
        fam = self.family
        y = self.y_values
        X = self.design

        self.coefficients = self._fit.coefficients
        self.converged = self._fit.converged
        self.iterations = self._fit.iterations_used
        self.n_coef = X.shape[1]
        self.df_residual = self.n_obs - self.n_coef
        self.df_null = self.n_obs - 1

        self.linear_predictors = X @ self.coefficients
        self.fitted_values = fam.linkinv(self.linear_predictors)
        self.residuals = y - self.fitted_values  # response scale
        w = fam.variance(self.fitted_values)

        # Fisher information X'WX from the QR of √W·X at β̂
        wls = self.backend.fit_linear_model(X, self.linear_predictors, weights=w)
        R_inv = np.linalg.inv(wls.qr_R[:wls.rank, :wls.rank])
        active = wls.qr_pivot[:wls.rank]
        self.vcov = np.full((self.n_coef, self.n_coef), np.nan)
        self.vcov[np.ix_(active, active)] = R_inv @ R_inv.T

        self.std_errors = np.sqrt(np.diag(self.vcov))
        self.z_values = self.coefficients / self.std_errors
        self.pvalues = 2 * stats.norm.sf(np.abs(self.z_values))

        self.deviance = float(np.sum(fam.dev_resids(y, self.fitted_values)))
        self.null_deviance = float(np.sum(fam.dev_resids(y, np.full_like(y, y.mean()))))
        self.loglik = fam.loglik(y, self.fitted_values)
        self.aic = -2 * self.loglik + 2 * self.n_coef
        self.bic = -2 * self.loglik + np.log(self.n_obs) * self.n_coef

    @property
    def coef(self) -> pd.Series:
        """Named coefficients."""
        return pd.Series(self.coefficients, index=self.var_names)

    @property
    def fit_result(self):
        """The underlying FitResult from the IRLS solver."""
        return self._fit

    def conf_int(self, alpha: float = 0.05) -> pd.DataFrame:
        """Wald confidence intervals for the coefficients."""
        z_crit = stats.norm.ppf(1 - alpha / 2)
        return pd.DataFrame({
            'lower': self.coefficients - z_crit * self.std_errors,
            'upper': self.coefficients + z_crit * self.std_errors,
        }, index=self.var_names)

    def predict(self, newdata=None, type: str = 'response') -> np.ndarray:
        """
        Predict for new predictor values.

        Parameters
        ----------
        newdata : DataFrame or array, optional
            Defaults to the data used for fitting
        type : {'response', 'link'}
            Probabilities or the linear predictor
        """
        if type not in ('response', 'link'):
            raise ValueError(f"type must be 'response' or 'link', got '{type}'")
        if newdata is None:
            eta = self.linear_predictors
        else:
            if isinstance(newdata, pd.DataFrame):
                X_new = np.asarray(newdata[self.X_names].values, dtype=np.float64)
            else:
                X_new = np.asarray(newdata, dtype=np.float64)
                if X_new.ndim == 1:
                    X_new = X_new[:, np.newaxis]
            if X_new.shape[1] != len(self.X_names):
                raise ValueError(
                    f"newdata has {X_new.shape[1]} columns, model has {len(self.X_names)} predictors"
                )
            eta = np.column_stack([np.ones(len(X_new)), X_new]) @ self.coefficients
        return eta if type == 'link' else self.family.linkinv(eta)

    def summary(self) -> str:
        """Print and return an R-style summary of the fit."""
        width = 78
        lines = [
            "",
            f"Binomial GLM (logit): {self.y_name} ~ {' + '.join(self.X_names)}",
            f"Observations: {self.n_obs}",
            "",
            "Coefficients:",
            f"{'':<20}{'Estimate':>12}{'Std. Error':>12}{'z value':>10}{'Pr(>|z|)':>12}",
            "-" * width,
        ]
        for i, name in enumerate(self.var_names):
            p = self.pvalues[i]
            lines.append(
                f"{name:<20}{self.coefficients[i]:>12.4f}{self.std_errors[i]:>12.4f}"
                f"{self.z_values[i]:>10.3f}{format_pvalue(p):>12} {significance_stars(p)}"
            )
        lines += [
            "-" * width,
            "Signif. codes:  0 '***' 0.001 '**' 0.01 '*' 0.05 '.' 0.1 ' ' 1",
            "",
            f"    Null deviance: {self.null_deviance:.2f}  on {self.df_null} degrees of freedom",
            f"Residual deviance: {self.deviance:.2f}  on {self.df_residual} degrees of freedom",
            f"AIC: {self.aic:.3f}    BIC: {self.bic:.3f}",
            "",
            f"IRLS iterations: {self.iterations}"
            + ("" if self.converged else "  (did not converge)"),
            "",
        ]
        text = "\n".join(lines)
        print(text)
        return text

    def __repr__(self):
        return (f"GLM(family=binomial, n={self.n_obs}, "
                f"deviance={self.deviance:.3f}, converged={self.converged})")


def glm(y, X, data=None, family=None, **kwargs) -> GLM:
    """
    Fit a logistic regression by IRLS.

    Parameters
    ----------
    y : str or array
        Binary response
    X : str, list of str, array or DataFrame
        Predictor variables
    data : DataFrame, optional
        Dataset
    family : Family or 'binomial', optional
        Only the binomial family with logit link is supported
    **kwargs
        Passed to GLM (start, tolerance, max_iterations, backend)
    """
    return GLM(y=y, X=X, data=data, family=family, **kwargs)
