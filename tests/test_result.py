import dataclasses

import numpy as np
import pytest

from funfit import fit
from funfit.fitting import FitResult, FitStatus


@pytest.fixture
def result():
    x = np.linspace(0, 10, 11)
    y = 0.5 * x + 2 + 0.1 * np.cos(7 * x)
    return fit('linear', [1.0, 2.0], x, y, np.full(11, 0.1), [True, False])


def test_status_states():
    assert not FitStatus.INITIALIZED.is_terminal
    assert not FitStatus.ITERATING.is_terminal
    for status in (FitStatus.CONVERGED, FitStatus.MAX_ITERATIONS_REACHED, FitStatus.STALLED,
                   FitStatus.LINEAR_SOLVE_FAILED, FitStatus.CANCELLED):
        assert status.is_terminal


def test_result_is_immutable(result):
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.chi2 = 0.0
    with pytest.raises(ValueError):
        result.parameters[0] = 10.0
    with pytest.raises(ValueError):
        result.fitted_model[0] = 10.0
    assert result.vary.dtype == bool


def test_result_shapes(result):
    assert result.parameters.shape == (2,)
    assert result.parameter_std_errors.shape == (2,)
    assert result.fitted_model.shape == (11,)
    assert result.covariance.shape == (2, 2)
    assert result.nvarys == 1
    assert result.dof == 10
    assert result.model_name == 'linear'


def test_to_dict(result):
    data = result.to_dict()
    assert data['parameters'] == result.parameters.tolist()
    assert data['status'] == 'converged'
    assert data['num_func_evaluation'] == result.num_func_evaluation
    assert isinstance(data['fitted_model'], list)
    assert len(data['fitted_model']) == 11


def test_fit_report(result):
    report = result.fit_report(['slope', 'intercept'])
    assert "Model: linear" in report
    assert "Status: converged" in report
    assert "intercept =  2.000000e+00 (fixed)" in report
    assert "slope" in report and "+/-" in report
    assert "=== Fit Statistics ===" in report

    default = result.fit_report()
    assert "p0" in default and "p1" in default


def test_result_copies_inputs():
    parameters = np.array([1.0, 2.0])
    record = FitResult(
        parameters=parameters, parameter_std_errors=np.zeros(2), fitted_model=np.zeros(3),
        num_func_evaluation=1, chi2=0.0, redchi2=0.0, r_squared=np.nan,
        convergence_message='', status=FitStatus.CONVERGED, iterations=0,
        vary=[1, 0], covariance=np.zeros((2, 2)), dof=1,
    )
    parameters[0] = 5.0
    assert record.parameters[0] == 1.0
    assert record.vary.tolist() == [True, False]
    assert record.success
