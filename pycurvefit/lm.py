"""
Linear regression with an R-style interface.

Fits by pivoted QR through a backend and layers the usual inference
(standard errors, t tests, R², F test, AIC/BIC) on top.
"""

import numpy as np
import pandas as pd
from typing import Optional, Union, List
from scipy import stats

from ._core.lm_solver import fit_linear_model


def _parse_response(y, data):
    if isinstance(y, str):
        if data is None:
            raise ValueError("Must provide data when y is a string")
        return np.asarray(data[y].values, dtype=np.float64), y
    return np.asarray(y, dtype=np.float64), 'y'


def _parse_predictors(X, data):
    if isinstance(X, str):
        X = [X]
    if isinstance(X, list) and all(isinstance(x, str) for x in X):
        if data is None:
            raise ValueError("Must provide data when X is list of strings")
        return np.asarray(data[X].values, dtype=np.float64), list(X)
    if isinstance(X, pd.DataFrame):
        return np.asarray(X.values, dtype=np.float64), [str(c) for c in X.columns]
    if isinstance(X, pd.Series):
        return np.asarray(X.values, dtype=np.float64)[:, np.newaxis], [str(X.name or 'x')]
    values = np.asarray(X, dtype=np.float64)
    if values.ndim == 1:
        return values[:, np.newaxis], ['x']
    return values, [f'x{i + 1}' for i in range(values.shape[1])]


def significance_stars(p: float) -> str:
    """R's significance codes for a p-value."""
    if np.isnan(p):
        return ''
    for cutoff, stars in ((0.001, '***'), (0.01, '**'), (0.05, '*'), (0.1, '.')):
        if p < cutoff:
            return stars
    return ''


def format_pvalue(p: float) -> str:
    if np.isnan(p):
        return 'NA'
    return f"{p:.4f}" if p >= 0.0001 else "<.0001"


class LinearModel:
    """
    Fitted linear regression model (like R's lm()).

    An intercept is always added in front of the predictors.

    Examples
    --------
    >>> from pycurvefit import lm, simulate_linear
    >>> data = simulate_linear(rng=2512)
    >>> model = lm(y='y_obs', X=['x'], data=data)
    >>> model.coef
    Intercept     ...
    x             ...
    >>> model.predict(np.linspace(0, 1, 5))
    """

    def __init__(
        self,
        y: Union[str, np.ndarray],
        X: Union[str, List[str], np.ndarray, pd.DataFrame],
        data: Optional[pd.DataFrame] = None,
        weights: Optional[Union[str, np.ndarray]] = None,
        backend: str = 'auto',
        tol: Optional[float] = None,
        singular_ok: bool = True,
    ):
        """
        Parameters
        ----------
        y : str or array
            Response: column name in `data` or numeric values
        X : str, list of str, array or DataFrame
            Predictors: column name(s) in `data` or an (n,) / (n, k) matrix
        data : DataFrame, optional
            Dataset holding named columns
        weights : str or array, optional
            Observation weights
        backend : str
            Computational backend
        tol : float, optional
            QR rank tolerance (default 1e-7, as in R)
        singular_ok : bool
            If False, a rank-deficient design raises SingularDesignError
        """
        self.y_values, self.y_name = _parse_response(y, data)
        self.X_values, self.X_names = _parse_predictors(X, data)

        if isinstance(weights, str):
            if data is None:
                raise ValueError("Must provide data when weights is a string")
            self.weights_values = np.asarray(data[weights].values, dtype=np.float64)
        elif weights is not None:
            self.weights_values = np.asarray(weights, dtype=np.float64)
        else:
            self.weights_values = None

        self.n_obs = len(self.y_values)
        self.var_names = ['Intercept'] + self.X_names
        self.n_coef = len(self.var_names)
        self.design = np.column_stack([np.ones(len(self.X_values)), self.X_values])

        self._result = fit_linear_model(
            self.design,
            self.y_values,
            weights=self.weights_values,
            tol=tol,
            singular_ok=singular_ok,
            backend=backend,
        )
        self._compute_statistics()

    def _compute_statistics(self):
        result = self._result

        self.coefficients = result.coef
        self.residuals = result.residuals
        self.fitted_values = result.fitted_values
        self.rank = result.rank
        self.df_residual = result.df_residual

        w = self.weights_values if self.weights_values is not None else np.ones(self.n_obs)
        self._w = w
        self.rss = float(np.sum(w * self.residuals ** 2))
        self.sigma = np.sqrt(self.rss / self.df_residual) if self.df_residual > 0 else np.nan

        # Var(β) = σ² (X'WX)⁻¹ = σ² R⁻¹R⁻ᵀ, scattered back through the pivot
        self.vcov = np.full((self.n_coef, self.n_coef), np.nan)
        if self.rank > 0:
            R_inv = np.linalg.inv(result.qr_R[:self.rank, :self.rank])
            active = result.qr_pivot[:self.rank]
            self.vcov[np.ix_(active, active)] = (R_inv @ R_inv.T) * self.sigma ** 2

        self.std_errors = np.sqrt(np.diag(self.vcov))
        with np.errstate(divide='ignore', invalid='ignore'):
            self.t_values = self.coefficients / self.std_errors
        self.pvalues = 2 * stats.t.sf(np.abs(self.t_values), self.df_residual)

        # Weighted TSS around the weighted mean (intercept model)
        good = w > 0
        y_bar = np.average(self.y_values[good], weights=w[good])
        tss = float(np.sum(w * (self.y_values - y_bar) ** 2))
        self.r_squared = 1 - self.rss / tss if tss > 0 else 0.0

        df_model = self.rank - 1
        n_good = int(np.sum(good))
        if self.df_residual > 0:
            self.adj_r_squared = 1 - (1 - self.r_squared) * (n_good - 1) / self.df_residual
        else:
            self.adj_r_squared = np.nan

        if df_model > 0 and self.df_residual > 0 and self.rss > 0:
            self.f_statistic = ((tss - self.rss) / df_model) / (self.rss / self.df_residual)
            self.f_pvalue = stats.f.sf(self.f_statistic, df_model, self.df_residual)
        else:
            self.f_statistic = np.nan
            self.f_pvalue = np.nan

        # R's logLik.lm: σ² at its MLE, zero weights dropped
        wg = w[good]
        self.loglik = 0.5 * (np.sum(np.log(wg))
                             - n_good * (np.log(2 * np.pi) + 1 - np.log(n_good) + np.log(self.rss)))
        self.n_params = self.rank + 1  # coefficients plus σ²
        self.aic = -2 * self.loglik + 2 * self.n_params
        self.bic = -2 * self.loglik + np.log(n_good) * self.n_params

    @property
    def coef(self) -> pd.Series:
        """Named coefficients."""
        return pd.Series(self.coefficients, index=self.var_names)

    def conf_int(self, alpha: float = 0.05) -> pd.DataFrame:
        """
        t-based confidence intervals for the coefficients.

        Parameters
        ----------
        alpha : float
            Significance level (0.05 gives 95% intervals)
        """
        t_crit = stats.t.ppf(1 - alpha / 2, self.df_residual)
        return pd.DataFrame({
            'lower': self.coefficients - t_crit * self.std_errors,
            'upper': self.coefficients + t_crit * self.std_errors,
        }, index=self.var_names)

    def _new_design(self, newdata) -> np.ndarray:
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
        return np.column_stack([np.ones(len(X_new)), X_new])

    def predict(self, newdata: Union[pd.DataFrame, np.ndarray]) -> np.ndarray:
        """
        Predict the response for new predictor values.

        Aliased (NaN) coefficients are skipped, as R does.
        """
        X_new = self._new_design(newdata)
        valid = ~np.isnan(self.coefficients)
        return X_new[:, valid] @ self.coefficients[valid]

    def summary(self) -> str:
        """Print and return an R-style summary of the fit."""
        width = 78
        q = np.percentile(self.residuals, [0, 25, 50, 75, 100])
        lines = [
            "",
            f"Linear model: {self.y_name} ~ {' + '.join(self.X_names)}",
            f"Observations: {self.n_obs}    Residual df: {self.df_residual}",
            "",
            "Residuals:",
            "  " + "".join(f"{lab:>12}" for lab in ("Min", "1Q", "Median", "3Q", "Max")),
            "  " + "".join(f"{v:>12.4f}" for v in q),
            "",
            "Coefficients:",
            f"{'':<20}{'Estimate':>12}{'Std. Error':>12}{'t value':>10}{'Pr(>|t|)':>12}",
            "-" * width,
        ]
        for i, name in enumerate(self.var_names):
            if np.isnan(self.coefficients[i]):
                lines.append(f"{name:<20}{'NA':>12}   (aliased)")
                continue
            p = self.pvalues[i]
            lines.append(
                f"{name:<20}{self.coefficients[i]:>12.4f}{self.std_errors[i]:>12.4f}"
                f"{self.t_values[i]:>10.3f}{format_pvalue(p):>12} {significance_stars(p)}"
            )
        lines += [
            "-" * width,
            "Signif. codes:  0 '***' 0.001 '**' 0.01 '*' 0.05 '.' 0.1 ' ' 1",
            "",
            f"Residual standard error: {self.sigma:.4f} on {self.df_residual} degrees of freedom",
            f"Multiple R-squared: {self.r_squared:.4f},  Adjusted R-squared: {self.adj_r_squared:.4f}",
        ]
        if not np.isnan(self.f_statistic):
            lines.append(
                f"F-statistic: {self.f_statistic:.2f} on {self.rank - 1} and "
                f"{self.df_residual} DF,  p-value: {self.f_pvalue:.4g}"
            )
        lines.append(f"AIC: {self.aic:.3f}    BIC: {self.bic:.3f}")
        lines.append("")
        text = "\n".join(lines)
        print(text)
        return text

    def __repr__(self):
        return f"LinearModel(n={self.n_obs}, p={self.rank - 1}, R²={self.r_squared:.3f})"


def lm(y, X, data=None, **kwargs) -> LinearModel:
    """
    Fit a linear regression model.

    Parameters
    ----------
    y : str or array
        Response variable
    X : str, list of str, array or DataFrame
        Predictor variables
    data : DataFrame, optional
        Dataset
    **kwargs
        Passed to LinearModel

    Examples
    --------
    >>> model = lm(y='y_obs', X='x', data=simulate_linear(rng=2512))
    >>> model.summary()
    """
    return LinearModel(y=y, X=X, data=data, **kwargs)
