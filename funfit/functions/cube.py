"""
Small-angle scattering form factor of a homogeneous cube.

The intensity of randomly oriented cubes is the orientational average of
the squared product of three sinc amplitudes. The average over the first
octant is evaluated with a tensor Gauss-Legendre rule in the polar angle
alpha and the azimuth beta.
"""

import numpy as np
from numpy.polynomial.legendre import leggauss

from .base import FormFactorFunction


N_QUADRATURE = 50

_nodes, _weights = leggauss(N_QUADRATURE)
# Map [-1, 1] onto [0, pi/2]
ANGLES = np.pi / 4 * (_nodes + 1)
WEIGHTS = np.pi / 4 * _weights


def _sinc(t):
    # numpy's sinc is the normalised sin(pi t) / (pi t)
    return np.sinc(t / np.pi)


def cube_shape_term(q, edge_length):
    """
    Orientation averaged normalised intensity of a cube.

    P(q) = 2/π ∫∫ [S(qa/2 sinα cosβ) S(qa/2 sinα sinβ) S(qa/2 cosα)]² sinα dα dβ

    with S(t) = sin(t)/t and both angles running over [0, π/2]. P(0) = 1.

    Parameters
    ----------
    q : array_like
        Scattering vector magnitudes
    edge_length : float
        Cube edge length a

    Returns
    -------
    ndarray
        P(q), same shape as q
    """
    q = np.asarray(q, dtype=float)
    half = 0.5 * edge_length * q[..., np.newaxis, np.newaxis]
    alpha = ANGLES[:, np.newaxis]
    beta = ANGLES[np.newaxis, :]
    sin_alpha = np.sin(alpha)

    amplitude = (_sinc(half * sin_alpha * np.cos(beta))
                 * _sinc(half * sin_alpha * np.sin(beta))
                 * _sinc(half * np.cos(alpha)))
    integrand = amplitude**2 * sin_alpha
    return 2 / np.pi * np.einsum('...ij,i,j->...', integrand, WEIGHTS, WEIGHTS)


def cube_volume(edge_length):
    return edge_length**3


CUBE = FormFactorFunction(
    'sas_cube', cube_shape_term, cube_volume, size_name='edge_length',
    description='I(q) = scale * (drho * a**3)**2 * <[S(qa/2 sin a cos b) S(qa/2 sin a sin b) S(qa/2 cos a)]**2> + background',
)
