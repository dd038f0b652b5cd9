"""
Goodness-of-fit statistics calculator.
"""

import warnings

import numpy as np
from scipy import stats as sp_stats


def calculate_statistics(y_data, y_fit, n_params):
    """
    Calculate goodness-of-fit statistics.

    Parameters
    ----------
    y_data : array_like
        Observed Y data
    y_fit : array_like
        Fitted Y data at the same abscissae
    n_params : int
        Number of fitted parameters

    Returns
    -------
    stats : dict
        Dictionary containing various fit statistics:
        - 'r_squared': R² (coefficient of determination)
        - 'adj_r_squared': Adjusted R²
        - 'pearson_r': Pearson correlation of data and fit
        - 'chi_squared': Sum of squared residuals
        - 'reduced_chi_squared': Reduced chi-squared
        - 'rmse': Root mean square error
        - 'aic': Akaike Information Criterion
        - 'bic': Bayesian Information Criterion
    """
    y_data = np.asarray(y_data, dtype=float)
    y_fit = np.asarray(y_fit, dtype=float)

    n = len(y_data)
    residuals = y_data - y_fit
    ss_res = float(np.sum(residuals**2))
    ss_tot = float(np.sum((y_data - np.mean(y_data))**2))

    # R-squared
    r_squared = 1 - (ss_res / ss_tot) if ss_tot != 0 else 0.0

    # Adjusted R-squared
    if n > n_params + 1:
        adj_r_squared = 1 - (1 - r_squared) * (n - 1) / (n - n_params - 1)
    else:
        adj_r_squared = r_squared

    dof = n - n_params
    reduced_chi_squared = ss_res / dof if dof > 0 else np.inf

    rmse = np.sqrt(ss_res / n)

    # AIC = n*ln(SS_res/n) + 2*k
    # BIC = n*ln(SS_res/n) + k*ln(n)
    if ss_res > 0:
        aic = n * np.log(ss_res / n) + 2 * n_params
        bic = n * np.log(ss_res / n) + n_params * np.log(n)
    else:
        aic = -np.inf
        bic = -np.inf

    return {
        'r_squared': r_squared,
        'adj_r_squared': adj_r_squared,
        'pearson_r': pearson_r(y_data, y_fit),
        'chi_squared': ss_res,
        'reduced_chi_squared': reduced_chi_squared,
        'rmse': rmse,
        'aic': aic,
        'bic': bic,
        'n_data': n,
        'n_params': n_params,
        'dof': dof,
    }


def pearson_r(y_data, y_fit):
    """
    Pearson correlation coefficient between data and fitted values.

    Returns nan when either input is constant or shorter than two points.
    """
    y_data = np.asarray(y_data, dtype=float)
    y_fit = np.asarray(y_fit, dtype=float)
    if len(y_data) < 2 or np.ptp(y_data) == 0 or np.ptp(y_fit) == 0:
        return np.nan
    with warnings.catch_warnings():
        warnings.simplefilter('ignore')
        r = sp_stats.pearsonr(y_data, y_fit)[0]
    return float(r)


def format_statistics(stats):
    """
    Format statistics for display.

    Parameters
    ----------
    stats : dict
        Statistics dictionary

    Returns
    -------
    str
        Formatted statistics string
    """
    lines = []
    lines.append("=== Fit Statistics ===")
    lines.append(f"R² = {stats.get('r_squared', 0):.6f}")
    lines.append(f"Adj. R² = {stats.get('adj_r_squared', 0):.6f}")
    lines.append(f"Pearson R = {stats.get('pearson_r', np.nan):.6f}")
    lines.append(f"RMSE = {stats.get('rmse', 0):.6e}")
    lines.append(f"χ² = {stats.get('chi_squared', 0):.6e}")
    lines.append(f"Reduced χ² = {stats.get('reduced_chi_squared', 0):.6e}")
    lines.append(f"AIC = {stats.get('aic', 0):.2f}")
    lines.append(f"BIC = {stats.get('bic', 0):.2f}")
    lines.append(f"N data = {stats.get('n_data', 0)}")
    lines.append(f"N parameters = {stats.get('n_params', 0)}")
    lines.append(f"Degrees of freedom = {stats.get('dof', 0)}")

    return '\n'.join(lines)
