"""
Model functions for fitting.

This module provides the registry of named model functions: elementary
algebraic and trigonometric functions, a Gaussian size distribution and
small-angle scattering form factors of spheres and cubes.

Unknown names resolve to the ``zero`` model instead of failing, so every
name yields a usable model. A typo in a model name therefore gives a flat
zero curve rather than an error.
"""

from .base import ModelFunction, ElementaryFunction, DistributionFunction, FormFactorFunction
from .standard import STANDARD_FUNCTIONS
from .size_distribution import SIZE_DISTRIBUTIONS
from .sphere import SPHERE
from .cube import CUBE
from .custom import load_custom_function


# Function registry - maps model names to model functions
FUNCTION_REGISTRY = {
    func.name: func
    for func in STANDARD_FUNCTIONS + SIZE_DISTRIBUTIONS + [SPHERE, CUBE]
}

FALLBACK_FUNCTION = FUNCTION_REGISTRY['zero']


def get_function(name):
    """
    Get model function by name.

    Parameters
    ----------
    name : str
        Model name (e.g., 'linear', 'gaussian', 'sas_sphere')

    Returns
    -------
    ModelFunction
        Registered model function, or the zero function if the name is
        not registered
    """
    return FUNCTION_REGISTRY.get(name, FALLBACK_FUNCTION)


def is_registered(name):
    """Check whether a model name resolves to its own function."""
    return name in FUNCTION_REGISTRY


def list_functions():
    """
    List all available model names.

    Returns
    -------
    list
        List of available model names
    """
    return list(FUNCTION_REGISTRY.keys())


def register_function(model_function, name=None):
    """
    Register a custom model function.

    Registration is meant for start-up; fits only read the registry.

    Parameters
    ----------
    model_function : ModelFunction
        Model function to add
    name : str, optional
        Registry key, defaults to ``model_function.name``
    """
    if not isinstance(model_function, ModelFunction):
        raise TypeError(f"Expected a ModelFunction, got {type(model_function).__name__}")
    FUNCTION_REGISTRY[name or model_function.name] = model_function


__all__ = [
    'ModelFunction',
    'ElementaryFunction',
    'DistributionFunction',
    'FormFactorFunction',
    'load_custom_function',
    'get_function',
    'is_registered',
    'list_functions',
    'register_function',
    'FUNCTION_REGISTRY',
    'FALLBACK_FUNCTION',
]
