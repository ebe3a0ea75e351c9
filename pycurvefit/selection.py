"""
Polynomial degree selection by information criteria.
"""

import numpy as np
import pandas as pd

from .lm import lm
from .simulate import design_matrix

_CRITERIA = ('aic', 'bic')


def compare_polynomial_degrees(x, y, degrees=range(1, 11), backend='auto') -> pd.DataFrame:
    """
    Fit raw polynomial regressions of each degree.

    Returns a DataFrame indexed by degree with AIC, BIC, R² and adjusted R².
    """
    degrees = list(degrees)
    if not degrees or min(degrees) < 1:
        raise ValueError("degrees must be a non-empty collection of positive integers")
    rows = []
    for d in degrees:
        X = design_matrix(x, d, intercept=False)
        names = [f'x^{k}' for k in range(1, d + 1)]
        model = lm(y, pd.DataFrame(X, columns=names), backend=backend)
        rows.append({
            'degree': d,
            'aic': model.aic,
            'bic': model.bic,
            'r_squared': model.r_squared,
            'adj_r_squared': model.adj_r_squared,
            'rank': model.rank,
        })
    return pd.DataFrame(rows).set_index('degree')


def select_polynomial_degree(x, y, degrees=range(1, 11), criterion: str = 'bic') -> int:
    """Degree minimizing AIC or BIC."""
    if criterion not in _CRITERIA:
        raise ValueError(f"criterion must be one of {_CRITERIA}, got '{criterion}'")
    table = compare_polynomial_degrees(x, y, degrees)
    return int(table[criterion].idxmin())
