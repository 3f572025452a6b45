"""
Elementary model functions.

All functions take the parameter vector ``p`` first and the domain ``x``
second and return an array of the same shape as ``x``.
"""

import numpy as np

from .base import ElementaryFunction


def zero(p, x):
    """Constant zero for any parameter vector."""
    return np.zeros_like(x, dtype=float)


def linear(p, x):
    """
    Straight line.

    f(x) = p[0] * x + p[1]
    """
    return p[0] * x + p[1]


def linear_jacobian(p, x):
    return np.column_stack([x, np.ones_like(x)])


def parabola(p, x):
    """
    Second order polynomial.

    f(x) = p[0] * x**2 + p[1] * x + p[2]
    """
    return p[0] * x**2 + p[1] * x + p[2]


def parabola_jacobian(p, x):
    return np.column_stack([x**2, x, np.ones_like(x)])


def sqrt(p, x):
    """
    Scaled square root, NaN where p[1] * x < 0.

    f(x) = p[0] * sqrt(p[1] * x)
    """
    return p[0] * np.sqrt(p[1] * x)


def cos(p, x):
    """f(x) = p[0] * cos(p[1] * x + p[2])"""
    return p[0] * np.cos(p[1] * x + p[2])


def sin(p, x):
    """f(x) = p[0] * sin(p[1] * x + p[2])"""
    return p[0] * np.sin(p[1] * x + p[2])


def tan(p, x):
    """f(x) = p[0] * tan(p[1] * x + p[2])"""
    return p[0] * np.tan(p[1] * x + p[2])


def exp(p, x):
    """
    Exponential growth or decay.

    f(x) = p[0] * exp(p[1] * x)
    """
    return p[0] * np.exp(p[1] * x)


def exp_jacobian(p, x):
    e = np.exp(p[1] * x)
    return np.column_stack([e, p[0] * x * e])


_PERIODIC = ('amplitude', 'frequency', 'phase')

STANDARD_FUNCTIONS = [
    ElementaryFunction('zero', zero, param_names=None,
                       description='f(x) = 0'),
    ElementaryFunction('linear', linear, ('slope', 'intercept'), jacobian=linear_jacobian,
                       description='f(x) = slope * x + intercept'),
    ElementaryFunction('parabola', parabola, ('a', 'b', 'c'), jacobian=parabola_jacobian,
                       description='f(x) = a * x**2 + b * x + c'),
    ElementaryFunction('sqrt', sqrt, ('amplitude', 'scale'),
                       description='f(x) = amplitude * sqrt(scale * x)'),
    ElementaryFunction('cos', cos, _PERIODIC,
                       description='f(x) = amplitude * cos(frequency * x + phase)'),
    ElementaryFunction('sin', sin, _PERIODIC,
                       description='f(x) = amplitude * sin(frequency * x + phase)'),
    ElementaryFunction('tan', tan, _PERIODIC,
                       description='f(x) = amplitude * tan(frequency * x + phase)'),
    ElementaryFunction('exp', exp, ('amplitude', 'rate'), jacobian=exp_jacobian,
                       description='f(x) = amplitude * exp(rate * x)'),
]
