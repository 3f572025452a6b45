"""
Custom model loader for user-defined expressions.
"""

import json
import numpy as np

from ..exceptions import InvalidArgument
from .base import ElementaryFunction


def load_custom_function(filepath, register=False):
    """
    Load a custom model definition from .txt or .json file.

    Parameters
    ----------
    filepath : str
        Path to custom model definition file
    register : bool, optional
        Add the model to the function registry under its name

    Returns
    -------
    ElementaryFunction
        Model function that can be evaluated and fitted

    Notes
    -----
    Expected JSON format:
    {
      "name": "decay",
      "function": "amplitude * np.exp(-x / tau) + offset",
      "parameters": ["amplitude", "tau", "offset"],
      "description": "Exponential decay with offset"
    }

    The expression is evaluated with numpy (np), the domain (x), the full
    parameter vector (p) and each named parameter available. A .txt file
    holds a bare expression that can only use ``p`` and takes any number
    of parameters.
    """
    with open(filepath, 'r') as f:
        if filepath.endswith('.json'):
            model_def = json.load(f)
        else:
            model_def = {
                'name': 'custom',
                'function': f.read().strip(),
                'parameters': None,
            }

    if 'function' not in model_def:
        raise InvalidArgument(f"Custom model in {filepath} has no 'function' expression")

    func_str = model_def['function']
    param_names = model_def.get('parameters')
    try:
        code = compile(func_str, filepath, 'eval')
    except SyntaxError as e:
        raise InvalidArgument(f"Invalid custom model expression '{func_str}': {e}")

    def custom_function(p, x):
        # Build local namespace with numpy, the domain and the parameters
        local_vars = {'np': np, 'x': x, 'p': p}
        if param_names:
            local_vars.update(zip(param_names, p))

        try:
            return eval(code, {"__builtins__": {}}, local_vars)
        except (NameError, TypeError, IndexError, AttributeError) as e:
            raise InvalidArgument(f"Error evaluating custom model '{func_str}': {e}")

    model_function = ElementaryFunction(
        model_def.get('name', 'custom'),
        custom_function,
        param_names=param_names,
        description=model_def.get('description', func_str),
    )

    if register:
        from . import register_function
        register_function(model_function)

    return model_function
