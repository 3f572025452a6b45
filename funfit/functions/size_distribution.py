"""
Size distribution functions.
"""

import numpy as np

from .base import DistributionFunction


s2pi = np.sqrt(2 * np.pi)


def gaussian(p, x):
    """
    Area-normalised Gaussian distribution.

    Parameters
    ----------
    p : ndarray
        [area, center, sigma]
    x : ndarray
        Independent variable, e.g. particle size

    Returns
    -------
    ndarray
        Distribution values at x positions

    Notes
    -----
    Mathematical form: f(x) = A / (sqrt(2π) |σ|) * exp(-((x - μ)² / (2σ²)))

    The integral over x equals A. sigma = 0 gives NaN/Inf.
    """
    area, center, sigma = p
    return area / (s2pi * np.abs(sigma)) * np.exp(-((x - center)**2) / (2 * sigma**2))


SIZE_DISTRIBUTIONS = [
    DistributionFunction('gaussian', gaussian, ('area', 'center', 'sigma'),
                         description='f(x) = area / (sqrt(2 pi) sigma) * exp(-(x - center)**2 / (2 sigma**2))'),
]
