"""
Test simulated data, polynomial designs and degree selection.
"""

import pytest
import numpy as np

from pycurvefit import (
    simulate_linear,
    simulate_logistic,
    design_matrix,
    compare_polynomial_degrees,
    select_polynomial_degree,
    lm,
)


class TestSimulation:

    def test_linear_shape_and_order(self):
        data = simulate_linear(rng=2512)
        assert list(data.columns) == ['x', 'y_obs', 'y_true']
        assert len(data) == 300
        assert np.all(np.diff(data['x']) >= 0)
        assert data['x'].between(0, 1).all()
        np.testing.assert_allclose(data['y_true'], 2 + 10 * data['x'])

    def test_same_seed_same_data(self):
        a = simulate_linear(rng=7)
        b = simulate_linear(rng=np.random.default_rng(7))
        np.testing.assert_array_equal(a.values, b.values)
        assert not np.array_equal(a.values, simulate_linear(rng=8).values)

    def test_global_state_untouched(self):
        np.random.seed(0)
        expected = np.random.random()
        np.random.seed(0)
        simulate_linear(rng=1)
        simulate_logistic(rng=1)
        assert np.random.random() == expected

    def test_zero_noise(self):
        data = simulate_linear(n=20, sd=0.0, rng=1)
        np.testing.assert_allclose(data['y_obs'], data['y_true'])

    def test_logistic(self):
        data = simulate_logistic(n=500, coefficients=(-8.0, 16.0), rng=3)
        assert set(np.unique(data['y'])) <= {0.0, 1.0}
        assert np.all(np.diff(data['p_true']) >= 0)
        # Responses track the true probabilities on average
        assert abs(data['y'].mean() - data['p_true'].mean()) < 0.1

    @pytest.mark.parametrize("kwargs", [{'n': 0}, {'sd': -1.0}])
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(ValueError):
            simulate_linear(**kwargs)


class TestDesignMatrix:

    def test_polynomial_columns(self):
        x = np.array([0.0, 0.5, 2.0])
        X = design_matrix(x, degree=3)
        np.testing.assert_allclose(X, np.column_stack([np.ones(3), x, x ** 2, x ** 3]))

    def test_without_intercept(self):
        x = np.array([1.0, 2.0])
        np.testing.assert_allclose(design_matrix(x, 2, intercept=False), [[1, 1], [2, 4]])

    def test_invalid(self):
        with pytest.raises(ValueError):
            design_matrix(np.ones((2, 2)))
        with pytest.raises(ValueError):
            design_matrix(np.ones(3), degree=0, intercept=False)


class TestSelection:

    @pytest.fixture
    def quadratic(self):
        rng = np.random.default_rng(11)
        x = np.sort(rng.uniform(0, 1, 300))
        y = 1 + 2 * x - 8 * x ** 2 + rng.normal(0, 0.1, 300)
        return x, y

    def test_table(self, quadratic):
        x, y = quadratic
        table = compare_polynomial_degrees(x, y, degrees=range(1, 6))
        assert list(table.index) == [1, 2, 3, 4, 5]
        assert {'aic', 'bic', 'r_squared', 'adj_r_squared'} <= set(table.columns)
        # Nested least-squares fits never lose R²
        assert np.all(np.diff(table['r_squared'].values) >= -1e-10)
        assert table.loc[1, 'aic'] == pytest.approx(lm(y, x).aic)

    @pytest.mark.parametrize("criterion", ['aic', 'bic'])
    def test_curvature_detected(self, quadratic, criterion):
        x, y = quadratic
        assert select_polynomial_degree(x, y, degrees=range(1, 6), criterion=criterion) >= 2

    def test_bad_arguments(self, quadratic):
        x, y = quadratic
        with pytest.raises(ValueError):
            select_polynomial_degree(x, y, criterion='r2')
        with pytest.raises(ValueError):
            compare_polynomial_degrees(x, y, degrees=[])
