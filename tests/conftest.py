import numpy as np
import pytest

from funfit import functions


# Parameters inside the valid domain of every registered model
VALID_PARAMS = {
    'zero': [1.0, 2.0],
    'linear': [2.0, 3.0],
    'parabola': [0.5, -1.0, 2.0],
    'sqrt': [2.0, 1.5],
    'cos': [1.5, 0.8, 0.3],
    'sin': [1.5, 0.8, 0.3],
    'tan': [0.5, 0.1, 0.2],
    'exp': [2.0, -0.3],
    'gaussian': [10.0, 2.5, 0.7],
    'sas_sphere': [1.0, 50.0, 6.4e-6, 1.0e-6, 1e-3],
    'sas_cube': [1.0, 40.0, 6.4e-6, 1.0e-6, 1e-3],
}


@pytest.fixture
def domain():
    return np.linspace(0.01, 5.0, 50)


@pytest.fixture
def q():
    return np.linspace(0.005, 0.2, 80)


@pytest.fixture
def isolated_registry(monkeypatch):
    """Registry copy so registrations made by a test do not leak."""
    registry = dict(functions.FUNCTION_REGISTRY)
    monkeypatch.setattr(functions, 'FUNCTION_REGISTRY', registry)
    return registry
