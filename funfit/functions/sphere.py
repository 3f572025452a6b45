"""
Small-angle scattering form factor of a homogeneous sphere.
"""

import numpy as np

from .base import FormFactorFunction


def sphere_amplitude(u):
    """
    Normalised scattering amplitude of a sphere.

    F(u) = 3 * (sin(u) - u * cos(u)) / u**3, with u = q * R

    A series expansion is used for |u| < 1e-2, where the closed form
    loses precision. F(0) = 1.
    """
    u = np.asarray(u, dtype=float)
    small = np.abs(u) < 1e-2
    us = np.where(small, 1.0, u)
    closed = 3 * (np.sin(us) - us * np.cos(us)) / us**3
    series = 1 - u**2 / 10 + u**4 / 280
    return np.where(small, series, closed)


def sphere_shape_term(q, radius):
    """Normalised intensity |F(qR)|² of a sphere."""
    return sphere_amplitude(q * radius)**2


def sphere_volume(radius):
    return 4 / 3 * np.pi * radius**3


SPHERE = FormFactorFunction(
    'sas_sphere', sphere_shape_term, sphere_volume, size_name='radius',
    description='I(q) = scale * (drho * 4/3 pi R**3)**2 * [3 (sin qR - qR cos qR) / (qR)**3]**2 + background',
)
