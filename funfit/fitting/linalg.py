"""
Linear algebra for the damped normal equations.
"""

import numpy as np
from scipy.linalg import LinAlgError, cho_factor, cho_solve

from ..exceptions import NumericDegeneracy


def _cholesky(matrix):
    try:
        return cho_factor(matrix, lower=False, check_finite=True)
    except (LinAlgError, ValueError) as e:
        raise NumericDegeneracy(f"Cholesky factorisation failed: {e}")


def solve_damped(jtj, gradient, damping):
    """
    Solve the Levenberg-Marquardt normal equations.

    (JᵀJ + λ diag(JᵀJ)) Δp = -Jᵀr

    Parameters
    ----------
    jtj : ndarray
        Approximate Hessian JᵀJ, shape (k, k)
    gradient : ndarray
        Jᵀr, shape (k,)
    damping : float
        Damping factor λ

    Returns
    -------
    ndarray
        Parameter step Δp

    Raises
    ------
    NumericDegeneracy
        If the damped matrix is not positive definite or the step is not
        finite
    """
    damped = jtj + damping * np.diag(np.diag(jtj))
    step = cho_solve(_cholesky(damped), -gradient)
    if not np.all(np.isfinite(step)):
        raise NumericDegeneracy("Parameter step is not finite")
    return step


def invert_normal_matrix(jtj):
    """
    Invert JᵀJ to obtain the (unscaled) parameter covariance.

    Raises
    ------
    NumericDegeneracy
        If JᵀJ is singular
    """
    covariance = cho_solve(_cholesky(jtj), np.eye(jtj.shape[0]))
    if not np.all(np.isfinite(covariance)):
        raise NumericDegeneracy("Covariance matrix is not finite")
    return covariance
