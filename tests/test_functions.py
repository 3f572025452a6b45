import json

import numpy as np
import pytest

from conftest import VALID_PARAMS
from funfit import functions, resolve_and_evaluate
from funfit.exceptions import InvalidArgument
from funfit.functions import (ElementaryFunction, FormFactorFunction, get_function,
                              list_functions, load_custom_function, register_function)
from funfit.functions.cube import cube_shape_term
from funfit.functions.sphere import sphere_amplitude


REQUIRED_MODELS = ['linear', 'parabola', 'sqrt', 'cos', 'sin', 'tan', 'exp',
                   'gaussian', 'sas_sphere', 'sas_cube']


def test_required_models_registered():
    available = list_functions()
    for name in REQUIRED_MODELS:
        assert name in available


@pytest.mark.parametrize('name', sorted(VALID_PARAMS))
def test_evaluation_is_deterministic(name, domain):
    first = resolve_and_evaluate(name, VALID_PARAMS[name], domain)
    second = resolve_and_evaluate(name, VALID_PARAMS[name], domain)
    assert first.shape == domain.shape
    assert np.all(np.isfinite(first))
    assert np.array_equal(first, second)


@pytest.mark.parametrize('params', [[], [1.0], [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0]])
def test_unknown_name_resolves_to_zero(params, domain):
    values = resolve_and_evaluate('bogus', params, domain)
    assert values.shape == (len(domain),)
    assert np.all(values == 0)
    assert get_function('bogus') is get_function('zero')


def test_family_variants():
    assert get_function('linear').family == 'elementary'
    assert get_function('gaussian').family == 'distribution'
    assert get_function('sas_sphere').family == 'form_factor'
    assert get_function('sas_cube').family == 'form_factor'
    assert get_function('sas_cube').param_names[1] == 'edge_length'


def test_elementary_formulas():
    x = np.array([0.0, 1.0, 2.0])
    assert np.allclose(resolve_and_evaluate('linear', [2, 3], x), [3, 5, 7])
    assert np.allclose(resolve_and_evaluate('parabola', [1, 0, -1], x), [-1, 0, 3])
    assert np.allclose(resolve_and_evaluate('sqrt', [2, 4], x), [0, 4, 4 * np.sqrt(2)])
    assert np.allclose(resolve_and_evaluate('sin', [2, np.pi / 2, 0], x), [0, 2, 0], atol=1e-12)
    assert np.allclose(resolve_and_evaluate('cos', [1, np.pi, 0], x), [1, -1, 1])
    assert np.allclose(resolve_and_evaluate('tan', [1, 0, np.pi / 4], x), [1, 1, 1])
    assert np.allclose(resolve_and_evaluate('exp', [3, np.log(2)], x), [3, 6, 12])


def test_out_of_domain_parameters_give_nan_without_raising(domain):
    assert np.all(np.isnan(resolve_and_evaluate('sqrt', [1.0, -1.0], domain)))
    assert not np.all(np.isfinite(resolve_and_evaluate('gaussian', [1.0, 0.0, 0.0], domain)))


@pytest.mark.parametrize('name', ['linear', 'parabola', 'exp'])
def test_analytic_jacobian_matches_finite_differences(name, domain):
    func = get_function(name)
    p = np.array(VALID_PARAMS[name])
    jac = func.jacobian(p, domain)
    assert jac.shape == (len(domain), len(p))
    for j in range(len(p)):
        h = 1e-6 * max(abs(p[j]), 1.0)
        shifted = p.copy()
        shifted[j] += h
        numeric = (func(shifted, domain) - func(p, domain)) / h
        assert np.allclose(jac[:, j], numeric, rtol=1e-4, atol=1e-6)


def test_functions_without_jacobian_raise():
    func = get_function('gaussian')
    assert not func.has_jacobian
    with pytest.raises(NotImplementedError):
        func.jacobian([1.0, 0.0, 1.0], [0.0])


def test_gaussian_area_normalised():
    x = np.linspace(-20, 30, 20001)
    values = resolve_and_evaluate('gaussian', [7.5, 5.0, 2.0], x)
    area = np.sum(values) * (x[1] - x[0])
    assert np.isclose(area, 7.5, rtol=1e-6)
    assert x[np.argmax(values)] == pytest.approx(5.0, abs=1e-2)


def test_sphere_amplitude_limits():
    assert sphere_amplitude(0.0) == 1.0
    # Series and closed form agree around the switch-over point
    assert np.isclose(sphere_amplitude(1e-2 - 1e-9), sphere_amplitude(1e-2 + 1e-9), rtol=1e-10)
    # First zero of the sphere amplitude at tan(u) = u
    assert abs(sphere_amplitude(4.493409457909064)) < 1e-12


def test_sphere_forward_scattering():
    scale, radius, sld_p, sld_m, bg = VALID_PARAMS['sas_sphere']
    volume = 4 / 3 * np.pi * radius**3
    intensity = resolve_and_evaluate('sas_sphere', VALID_PARAMS['sas_sphere'], [1e-8])
    assert np.isclose(intensity[0], scale * ((sld_p - sld_m) * volume)**2 + bg, rtol=1e-10)


def test_sphere_minimum_reaches_background():
    params = [1.0, 50.0, 6.4e-6, 0.0, 0.01]
    q_min = 4.493409457909064 / 50.0
    intensity = resolve_and_evaluate('sas_sphere', params, [q_min])
    assert np.isclose(intensity[0], 0.01, atol=1e-12)


def test_cube_shape_term_normalised():
    assert np.isclose(cube_shape_term(np.array([0.0]), 40.0)[0], 1.0, rtol=1e-12)


def test_cube_guinier_region():
    # P(q) ~ 1 - q²a²/12 for small qa (Rg² = a²/4)
    a = 10.0
    q = np.array([0.01, 0.02])
    assert np.allclose(cube_shape_term(q, a), 1 - q**2 * a**2 / 12, atol=1e-5)


def test_cube_intensity_decays(q):
    intensity = resolve_and_evaluate('sas_cube', [1.0, 40.0, 6.4e-6, 0.0, 0.0], q)
    assert intensity[0] > 20 * intensity[-1]
    assert np.all(intensity >= 0)


def test_form_factor_contrast_and_background():
    sphere = get_function('sas_sphere')
    q = np.array([0.01, 0.05])
    base = sphere([1.0, 30.0, 2e-6, 1e-6, 0.0], q)
    doubled_contrast = sphere([1.0, 30.0, 3e-6, 1e-6, 0.0], q)
    with_background = sphere([1.0, 30.0, 2e-6, 1e-6, 0.5], q)
    assert np.allclose(doubled_contrast, 4 * base)
    assert np.allclose(with_background, base + 0.5)


def test_register_function(isolated_registry, domain):
    double = ElementaryFunction('double', lambda p, x: 2 * p[0] * x, ('k',))
    register_function(double)
    assert 'double' in list_functions()
    assert np.allclose(resolve_and_evaluate('double', [1.5], domain), 3 * domain)
    with pytest.raises(TypeError):
        register_function(lambda p, x: x)


def test_custom_form_factor(isolated_registry):
    shell = FormFactorFunction('thin', lambda q, size: np.ones_like(q), lambda size: size,
                               size_name='volume')
    register_function(shell)
    values = resolve_and_evaluate('thin', [2.0, 3.0, 1.0, 0.0, 0.1], [0.1, 0.2])
    assert np.allclose(values, 2.0 * 9.0 + 0.1)


def test_load_custom_json(tmp_path, isolated_registry, domain):
    path = tmp_path / 'decay.json'
    path.write_text(json.dumps({
        'name': 'decay',
        'function': 'amplitude * np.exp(-x / tau) + offset',
        'parameters': ['amplitude', 'tau', 'offset'],
        'description': 'Exponential decay with offset',
    }))
    func = load_custom_function(str(path), register=True)
    assert func.n_params == 3
    assert get_function('decay') is func
    expected = 4.0 * np.exp(-domain / 2.0) + 1.0
    assert np.allclose(resolve_and_evaluate('decay', [4.0, 2.0, 1.0], domain), expected)
    with pytest.raises(InvalidArgument):
        resolve_and_evaluate('decay', [4.0, 2.0], domain)


def test_load_custom_txt_uses_vector(tmp_path, domain):
    path = tmp_path / 'line.txt'
    path.write_text('p[0] * x + p[1]\n')
    func = load_custom_function(str(path))
    assert func.n_params is None
    assert 'custom' not in functions.FUNCTION_REGISTRY
    assert np.allclose(func([2.0, 1.0], domain), 2 * domain + 1)


def test_load_custom_invalid_expression(tmp_path, domain):
    path = tmp_path / 'bad.txt'
    path.write_text('undefined_name * x')
    func = load_custom_function(str(path))
    with pytest.raises(InvalidArgument):
        func([1.0], domain)

    path.write_text('x +* 2')
    with pytest.raises(InvalidArgument):
        load_custom_function(str(path))
