"""
Minimizer configuration.

Options can be given as keyword arguments, as a dict, or loaded from a
JSON file such as::

    {
      "damping": 0.01,
      "max_iterations": 500,
      "scale_covar": false
    }
"""

import json

import numpy as np

from .exceptions import InvalidArgument


DEFAULT_OPTIONS = {
    # Initial damping factor (lambda) of the Levenberg-Marquardt update
    'damping': 0.01,
    # Lambda is divided by damping_down after an accepted step and
    # multiplied by damping_up after a rejected one
    'damping_up': 10.0,
    'damping_down': 10.0,
    # Giving up on a step once lambda exceeds this value
    'damping_max': 1e16,
    'max_iterations': 200,
    # Convergence: chi2 decrease below chi2_atol or chi2_rtol * chi2
    'chi2_rtol': 1e-10,
    'chi2_atol': 1e-14,
    # Stop when ||dp|| <= step_tol * (||p|| + step_tol)
    'step_tol': 1e-12,
    'max_solve_retries': 10,
    # Relative step of the forward-difference Jacobian
    'fd_step': 1.49e-8,
    # Scale parameter errors by sqrt(reduced chi2)
    'scale_covar': True,
    'use_analytic_jacobian': True,
}

_POSITIVE_FLOATS = ('damping', 'damping_max', 'chi2_rtol', 'chi2_atol', 'step_tol', 'fd_step')
_GROWTH_FACTORS = ('damping_up', 'damping_down')
_POSITIVE_INTS = ('max_iterations', 'max_solve_retries')
_FLAGS = ('scale_covar', 'use_analytic_jacobian')


def load_config(filepath):
    """
    Load minimizer options from a JSON file.

    Parameters
    ----------
    filepath : str
        Path to a JSON object mapping option names to values

    Returns
    -------
    dict
        Validated options merged over DEFAULT_OPTIONS

    Raises
    ------
    InvalidArgument
        If the file is not a JSON object or contains invalid options
    """
    with open(filepath, 'r') as f:
        try:
            config = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidArgument(f"Invalid JSON in config file {filepath}: {e}")

    if not isinstance(config, dict):
        raise InvalidArgument(f"Config file {filepath} must contain a JSON object")

    return resolve_options(config)


def _as_number(key, value, cast):
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"Option '{key}' must be a number, got {value!r}")


def resolve_options(config=None, **overrides):
    """
    Merge options over the defaults and validate them.

    Keyword overrides win over ``config``, which wins over DEFAULT_OPTIONS.
    Overrides that are None are ignored so that unset CLI flags fall
    through to the config file.

    Returns
    -------
    dict
        Complete option dictionary
    """
    options = dict(DEFAULT_OPTIONS)
    if config:
        options.update(config)
    options.update({k: v for k, v in overrides.items() if v is not None})

    unknown = sorted(set(options) - set(DEFAULT_OPTIONS))
    if unknown:
        raise InvalidArgument(f"Unknown option(s): {unknown}. Available: {sorted(DEFAULT_OPTIONS)}")

    for key in _POSITIVE_FLOATS:
        value = _as_number(key, options[key], float)
        if not value > 0:
            raise InvalidArgument(f"Option '{key}' must be positive, got {options[key]}")
        options[key] = value

    for key in _GROWTH_FACTORS:
        value = _as_number(key, options[key], float)
        if not value > 1:
            raise InvalidArgument(f"Option '{key}' must be greater than 1, got {options[key]}")
        options[key] = value

    for key in _POSITIVE_INTS:
        value = options[key]
        number = _as_number(key, value, float)
        if isinstance(value, bool) or not number.is_integer() or number < 1:
            raise InvalidArgument(f"Option '{key}' must be a positive integer, got {value}")
        options[key] = int(number)

    for key in _FLAGS:
        value = options[key]
        if not isinstance(value, (bool, np.bool_)):
            raise InvalidArgument(f"Option '{key}' must be true or false, got {value!r}")
        options[key] = bool(value)

    return options
