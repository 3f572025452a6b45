"""
funfit: nonlinear least-squares fitting of named model functions.

Provides a Levenberg-Marquardt minimizer with per-parameter vary masks,
a registry of model functions (elementary functions, a Gaussian size
distribution and small-angle scattering form factors) and fit statistics.
"""

__version__ = "0.3.0"

from . import functions
from . import fitting
from . import data_import
from .api import fit, resolve_and_evaluate
from .exceptions import InvalidArgument, NumericDegeneracy
from .fitting import FitResult, FitStatus, Minimizer, ParametricModel
from .functions import get_function, list_functions

__all__ = [
    'functions',
    'fitting',
    'data_import',
    'fit',
    'resolve_and_evaluate',
    'InvalidArgument',
    'NumericDegeneracy',
    'FitResult',
    'FitStatus',
    'Minimizer',
    'ParametricModel',
    'get_function',
    'list_functions',
]
