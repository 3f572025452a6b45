import numpy as np
import pytest

from funfit.exceptions import InvalidArgument
from funfit.fitting import ParametricModel
from funfit.functions import get_function


def test_parameter_count_must_match_model():
    with pytest.raises(InvalidArgument, match="expects 2 parameters"):
        ParametricModel(get_function('linear'), [1.0, 2.0, 3.0], [0.0, 1.0])


@pytest.mark.parametrize('domain', [[], [[0.0, 1.0], [2.0, 3.0]], [0.0, np.nan], [np.inf]])
def test_invalid_domain_rejected(domain):
    with pytest.raises(InvalidArgument):
        ParametricModel(get_function('linear'), [1.0, 2.0], domain)


def test_zero_model_accepts_any_parameter_count():
    model = ParametricModel(get_function('zero'), [1.0, 2.0, 3.0, 4.0], [0.0, 1.0, 2.0])
    assert np.array_equal(model.evaluate(), np.zeros(3))


def test_set_parameters_length_mismatch():
    model = ParametricModel(get_function('linear'), [1.0, 2.0], [0.0, 1.0])
    with pytest.raises(InvalidArgument):
        model.set_parameters([1.0])
    with pytest.raises(InvalidArgument):
        model.set_parameters([[1.0, 2.0]])
    assert np.array_equal(model.parameters, [1.0, 2.0])


def test_evaluate_recomputes_after_parameter_change():
    model = ParametricModel(get_function('linear'), [1.0, 0.0], [0.0, 1.0, 2.0])
    assert np.allclose(model.evaluate(), [0.0, 1.0, 2.0])
    model.set_parameters([2.0, 1.0])
    assert np.allclose(model.evaluate(), [1.0, 3.0, 5.0])
    assert np.array_equal(model.parameters, [2.0, 1.0])


def test_evaluation_is_cached_and_idempotent():
    model = ParametricModel(get_function('gaussian'), [1.0, 0.0, 1.0], np.linspace(-3, 3, 31))
    first = model.evaluate()
    second = model.evaluate()
    assert np.array_equal(first, second)
    assert model.num_evaluations == 1

    # Same values do not invalidate the cache
    model.set_parameters([1.0, 0.0, 1.0])
    model.evaluate()
    assert model.num_evaluations == 1

    model.set_parameters([1.0, 0.5, 1.0])
    model.evaluate()
    assert model.num_evaluations == 2


def test_returned_arrays_are_copies():
    model = ParametricModel(get_function('linear'), [1.0, 0.0], [0.0, 1.0])
    values = model.evaluate()
    values[:] = 99.0
    assert np.allclose(model.evaluate(), [0.0, 1.0])

    params = model.parameters
    params[0] = 5.0
    assert model.parameters[0] == 1.0


def test_domain_is_read_only():
    source = np.array([0.0, 1.0])
    model = ParametricModel(get_function('linear'), [1.0, 0.0], source)
    with pytest.raises(ValueError):
        model.domain[0] = 3.0
    source[0] = 3.0
    assert model.domain[0] == 0.0


def test_analytic_jacobian_counts_as_evaluation():
    model = ParametricModel(get_function('linear'), [2.0, 3.0], [0.0, 1.0, 2.0])
    jac = model.jacobian()
    assert np.array_equal(jac, [[0.0, 1.0], [1.0, 1.0], [2.0, 1.0]])
    assert model.num_evaluations == 1


def test_non_finite_values_are_returned_silently():
    model = ParametricModel(get_function('sqrt'), [1.0, -1.0], [1.0, 4.0])
    with np.errstate(all='raise'):
        values = model.evaluate()
    assert np.all(np.isnan(values))
