"""
Entry points for hosts: evaluate a named model or fit it to data.

Examples
--------
>>> import numpy as np
>>> from funfit import fit, resolve_and_evaluate
>>> x = np.arange(5.0)
>>> resolve_and_evaluate('linear', [2.0, 3.0], x)
array([ 3.,  5.,  7.,  9., 11.])
>>> result = fit('linear', [0.0, 0.0], x, 2 * x + 3, np.ones(5), [1, 1])
>>> result.parameters.round(6)
array([2., 3.])
"""

import numpy as np

from .exceptions import InvalidArgument
from .fitting import Minimizer, ParametricModel
from .functions import get_function


def as_vary_mask(vary_mask):
    """
    Convert a host vary mask (booleans or small integers) to booleans.

    Non-zero entries mean "vary".
    """
    mask = np.asarray(vary_mask)
    if mask.ndim != 1:
        raise InvalidArgument(f"Vary mask must be one-dimensional, got shape {mask.shape}")
    if mask.dtype == bool:
        return mask.copy()
    if mask.size and not np.issubdtype(mask.dtype, np.number):
        raise InvalidArgument(f"Vary mask must hold booleans or integers, got dtype {mask.dtype}")
    return mask != 0


def resolve_and_evaluate(name, parameters, domain):
    """
    Evaluate a named model without fitting.

    Parameters
    ----------
    name : str
        Model name; unknown names evaluate the zero model
    parameters : array_like
        Parameter vector
    domain : array_like
        Independent variable values

    Returns
    -------
    ndarray
        Model values, one per domain point
    """
    return ParametricModel(get_function(name), parameters, domain).evaluate()


def fit(name, initial_parameters, domain, observed_values, observed_uncertainties,
        vary_mask, damping=None, config=None, iter_cb=None, **options):
    """
    Fit a named model to data with the Levenberg-Marquardt algorithm.

    Parameters
    ----------
    name : str
        Model name; unknown names fit the zero model
    initial_parameters : array_like
        Initial parameter vector
    domain : array_like
        Independent variable values
    observed_values : array_like
        Observed values, one per domain point
    observed_uncertainties : array_like
        Uncertainties, one per domain point, all > 0
    vary_mask : array_like
        One entry per parameter; True or non-zero marks a free parameter
    damping : float, optional
        Initial damping factor, default 0.01
    config : dict, optional
        Minimizer options, e.g. from funfit.config.load_config
    iter_cb : callable, optional
        ``iter_cb(iteration, parameters, chi2)``; returning True cancels
    **options
        Individual minimizer option overrides

    Returns
    -------
    FitResult
        Always returned for well-formed input, also for failed fits

    Raises
    ------
    InvalidArgument
        If any input is malformed
    """
    model = ParametricModel(get_function(name), initial_parameters, domain)
    minimizer = Minimizer(model, observed_values, observed_uncertainties, as_vary_mask(vary_mask),
                          damping=damping, iter_cb=iter_cb, options=config, **options)
    return minimizer.minimize()
