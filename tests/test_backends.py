"""
Test backend selection and the CPU backend.
"""

import pytest
import numpy as np

from pycurvefit._backends import (
    get_backend,
    list_available_backends,
    resolve_backend_name,
    ENV_VAR,
)
from pycurvefit._backends.cpu_fp64_backend import CPUBackendFP64
from pycurvefit.exceptions import SingularDesignError


class TestBackendSelection:
    """Name resolution and the environment override."""

    def test_list_backends(self):
        backends = list_available_backends()
        assert isinstance(backends, list)
        assert 'cpu' in backends

    def test_auto_defaults_to_cpu(self, monkeypatch):
        monkeypatch.delenv(ENV_VAR, raising=False)
        assert resolve_backend_name('auto') == 'cpu'
        assert resolve_backend_name(None) == 'cpu'

    def test_environment_variable(self, monkeypatch):
        monkeypatch.setenv(ENV_VAR, ' CPU ')
        assert resolve_backend_name('auto') == 'cpu'

    def test_unknown_environment_value(self, monkeypatch):
        monkeypatch.setenv(ENV_VAR, 'quantum')
        with pytest.raises(ValueError, match="Unknown backend"):
            get_backend('auto')

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Valid options"):
            get_backend('gpu')

    def test_instance_passthrough(self):
        backend = CPUBackendFP64()
        assert get_backend(backend) is backend


class TestCPUBackend:
    """CPU backend (always available)."""

    def test_cpu_backend_creation(self):
        backend = get_backend('cpu')
        assert backend.name == 'cpu_fp64'
        assert backend.precision == 'fp64'

    def test_cpu_device_info(self):
        info = get_backend('cpu').get_device_info()
        assert info['backend'] == 'cpu'
        assert info['precision'] == 'fp64'
        assert 'SciPy' in info['library']

    def test_cpu_simple_regression(self):
        backend = get_backend('cpu')
        rng = np.random.default_rng(42)
        n = 100
        X = np.column_stack([np.ones(n), rng.normal(size=(n, 3))])
        beta_true = np.array([0.5, 1.0, 2.0, -1.5])
        y = X @ beta_true + 0.1 * rng.normal(size=n)

        result = backend.fit_linear_model(X, y)

        assert result.coef.shape == (4,)
        assert result.residuals.shape == (n,)
        assert result.rank == 4
        assert result.df_residual == n - 4
        np.testing.assert_allclose(result.coef, beta_true, atol=0.1)
        np.testing.assert_allclose(result.fitted_values + result.residuals, y)

    def test_cpu_weighted_regression(self):
        backend = get_backend('cpu')
        rng = np.random.default_rng(42)
        n = 50
        X = np.column_stack([np.ones(n), rng.normal(size=(n, 2))])
        y = rng.normal(size=n)
        weights = rng.uniform(0.5, 1.5, n)

        result = backend.fit_linear_model(X, y, weights=weights)

        W = np.diag(weights)
        expected = np.linalg.solve(X.T @ W @ X, X.T @ W @ y)
        np.testing.assert_allclose(result.coef, expected, rtol=1e-10)

    def test_zero_weights_drop_rows(self):
        backend = get_backend('cpu')
        rng = np.random.default_rng(1)
        X = np.column_stack([np.ones(40), rng.normal(size=40)])
        y = rng.normal(size=40)
        weights = np.ones(40)
        weights[:10] = 0.0

        result = backend.fit_linear_model(X, y, weights=weights)
        subset = backend.fit_linear_model(X[10:], y[10:])
        np.testing.assert_allclose(result.coef, subset.coef, rtol=1e-10)
        assert result.df_residual == 28

    def test_all_zero_weights(self):
        X = np.column_stack([np.ones(5), np.arange(5.0)])
        with pytest.raises(ValueError, match="All weights are zero"):
            get_backend('cpu').fit_linear_model(X, np.ones(5), weights=np.zeros(5))

    def test_cpu_with_offset(self):
        backend = get_backend('cpu')
        rng = np.random.default_rng(42)
        n = 50
        X = np.column_stack([np.ones(n), rng.normal(size=n)])
        offset = rng.normal(size=n)
        y = 1.0 + 2.0 * X[:, 1] + offset

        result = backend.fit_linear_model(X, y, offset=offset)

        np.testing.assert_allclose(result.coef, [1.0, 2.0], atol=1e-10)
        np.testing.assert_allclose(result.fitted_values, y, atol=1e-10)

    def test_singular_not_ok(self):
        X = np.column_stack([np.ones(10), np.arange(10.0), 3 * np.arange(10.0)])
        with pytest.raises(SingularDesignError, match="rank 2 < 3"):
            get_backend('cpu').fit_linear_model(X, np.arange(10.0), singular_ok=False)
