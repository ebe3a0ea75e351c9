"""
Test the logistic GLM interface.
"""

import pytest
import numpy as np
import pandas as pd
from scipy.special import expit

from pycurvefit import (
    glm,
    GLM,
    Binomial,
    Gaussian,
    fit_logistic_irls,
    simulate_logistic,
    NumericalDivergenceError,
)


@pytest.fixture(scope="module")
def data():
    return simulate_logistic(n=300, coefficients=(-8.0, 16.0), rng=2512)


@pytest.fixture(scope="module")
def model(data):
    return glm('y', 'x', data=data, start=[-5.0, 10.0])


def test_coefficients_match_solver(data, model):
    X = np.column_stack([np.ones(len(data)), data['x'].values])
    direct = fit_logistic_irls(X, data['y'].values, beta_init=[-5.0, 10.0])
    np.testing.assert_allclose(model.coefficients, direct.coefficients)
    assert list(model.coef.index) == ['Intercept', 'x']
    assert model.converged
    assert model.iterations == direct.iterations_used
    assert model.fit_result.converged


def test_standard_errors_from_fisher_information(model):
    X = model.design
    mu = expit(X @ model.coefficients)
    info = X.T @ (X * (mu * (1 - mu))[:, np.newaxis])
    np.testing.assert_allclose(model.vcov, np.linalg.inv(info), rtol=1e-8)
    np.testing.assert_allclose(model.std_errors, np.sqrt(np.diag(model.vcov)))


def test_deviance_and_information_criteria(model):
    y = model.y_values
    # Bernoulli saturated log-likelihood is zero
    assert model.deviance == pytest.approx(-2 * model.loglik, rel=1e-10)
    assert model.aic == pytest.approx(model.deviance + 2 * 2, rel=1e-10)
    assert model.bic == pytest.approx(model.deviance + np.log(len(y)) * 2, rel=1e-10)

    p = y.mean()
    null = -2 * np.sum(y * np.log(p) + (1 - y) * np.log(1 - p))
    assert model.null_deviance == pytest.approx(null, rel=1e-10)
    assert model.deviance < model.null_deviance
    assert model.df_residual == 298
    assert model.df_null == 299


def test_matches_statsmodels(model):
    sm = pytest.importorskip("statsmodels.api")
    ref = sm.GLM(model.y_values, model.design, family=sm.families.Binomial()).fit()
    np.testing.assert_allclose(model.std_errors, ref.bse, rtol=1e-5)
    assert model.deviance == pytest.approx(ref.deviance, rel=1e-8)
    assert model.aic == pytest.approx(ref.aic, rel=1e-8)


def test_predict(model):
    x_new = np.array([0.25, 0.5, 0.75])
    eta = model.coefficients[0] + model.coefficients[1] * x_new
    np.testing.assert_allclose(model.predict(x_new, type='link'), eta)
    np.testing.assert_allclose(model.predict(pd.DataFrame({'x': x_new})), expit(eta))
    np.testing.assert_allclose(model.predict(), model.fitted_values)
    with pytest.raises(ValueError):
        model.predict(x_new, type='odds')


def test_conf_int(model):
    ci = model.conf_int()
    assert np.all(ci['lower'].values < model.coefficients)
    assert np.all(model.coefficients < ci['upper'].values)


def test_family_resolution(data):
    assert isinstance(GLM('y', 'x', data=data, family='binomial').family, Binomial)
    assert isinstance(glm('y', 'x', data=data, family=Binomial()).family, Binomial)
    with pytest.raises(NotImplementedError):
        glm('y', 'x', data=data, family=Gaussian())


def test_separation_propagates():
    x = np.linspace(0, 1, 200)
    y = (x > 0.5).astype(float)
    with pytest.raises(NumericalDivergenceError):
        glm(y, x)


def test_summary(model, capsys):
    text = model.summary()
    assert 'Residual deviance' in text
    assert 'IRLS iterations' in capsys.readouterr().out
