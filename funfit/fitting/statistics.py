"""
Goodness-of-fit statistics calculator.
"""

import numpy as np


def chi_square(y_data, y_fit, sy):
    """Weighted sum of squared residuals, Σ((y_fit - y) / sy)²."""
    residuals = (np.asarray(y_fit) - np.asarray(y_data)) / np.asarray(sy)
    return float(np.sum(residuals**2))


def calculate_statistics(y_data, y_fit, sy, n_params):
    """
    Calculate goodness-of-fit statistics.

    Parameters
    ----------
    y_data : array_like
        Experimental Y data
    y_fit : array_like
        Fitted Y data
    sy : array_like
        Uncertainties of the Y data
    n_params : int
        Number of free fitting parameters

    Returns
    -------
    stats : dict
        Dictionary containing various fit statistics:
        - 'chi_squared': Weighted chi-squared
        - 'reduced_chi_squared': Chi-squared per degree of freedom
        - 'r_squared': R² (coefficient of determination, unweighted)
        - 'adj_r_squared': Adjusted R²
        - 'rmse': Root mean square error
        - 'aic': Akaike Information Criterion
        - 'bic': Bayesian Information Criterion

    Notes
    -----
    Undefined quantities are NaN: reduced chi-squared and R² when there
    are no degrees of freedom left, and R² when the data are constant.
    """
    y_data = np.asarray(y_data, dtype=float)
    y_fit = np.asarray(y_fit, dtype=float)

    n = len(y_data)
    dof = n - n_params  # degrees of freedom

    chi_squared = chi_square(y_data, y_fit, sy)

    # Reduced chi-squared
    reduced_chi_squared = chi_squared / dof if dof > 0 else np.nan

    # R-squared from unweighted residuals
    ss_res = np.sum((y_data - y_fit)**2)
    ss_tot = np.sum((y_data - np.mean(y_data))**2)
    if dof > 0 and ss_tot > 0:
        r_squared = 1 - ss_res / ss_tot
    else:
        r_squared = np.nan

    # Adjusted R-squared
    if n > n_params + 1:
        adj_r_squared = 1 - (1 - r_squared) * (n - 1) / (n - n_params - 1)
    else:
        adj_r_squared = np.nan

    # RMSE
    rmse = np.sqrt(ss_res / n)

    # AIC = n*ln(chi2/n) + 2*k, BIC = n*ln(chi2/n) + k*ln(n)
    if chi_squared > 0:
        aic = n * np.log(chi_squared / n) + 2 * n_params
        bic = n * np.log(chi_squared / n) + n_params * np.log(n)
    elif chi_squared == 0:
        aic = bic = -np.inf
    else:
        # chi2 is NaN
        aic = bic = np.nan

    stats = {
        'chi_squared': chi_squared,
        'reduced_chi_squared': float(reduced_chi_squared),
        'r_squared': float(r_squared),
        'adj_r_squared': float(adj_r_squared),
        'rmse': float(rmse),
        'aic': float(aic),
        'bic': float(bic),
        'n_data': n,
        'n_params': n_params,
        'dof': dof,
    }

    return stats


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
    lines.append(f"χ² = {stats.get('chi_squared', 0):.6e}")
    lines.append(f"Reduced χ² = {stats.get('reduced_chi_squared', 0):.6f}")
    lines.append(f"R² = {stats.get('r_squared', 0):.6f}")
    lines.append(f"Adj. R² = {stats.get('adj_r_squared', 0):.6f}")
    lines.append(f"RMSE = {stats.get('rmse', 0):.6e}")
    lines.append(f"AIC = {stats.get('aic', 0):.2f}")
    lines.append(f"BIC = {stats.get('bic', 0):.2f}")
    lines.append(f"N data = {stats.get('n_data', 0)}")
    lines.append(f"N parameters = {stats.get('n_params', 0)}")
    lines.append(f"Degrees of freedom = {stats.get('dof', 0)}")

    return '\n'.join(lines)
