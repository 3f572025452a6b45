"""Fitting engine: parametric models, Levenberg-Marquardt minimizer and statistics."""

from .parametric_model import ParametricModel
from .minimizer import Minimizer
from .result import FitResult, FitStatus
from .statistics import calculate_statistics, chi_square, format_statistics

__all__ = [
    'ParametricModel',
    'Minimizer',
    'FitResult',
    'FitStatus',
    'calculate_statistics',
    'chi_square',
    'format_statistics',
]
