"""
Immutable record of a finished fit.
"""

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import numpy as np

from .statistics import format_statistics


class FitStatus(enum.Enum):
    """States of a fit. Every state after ITERATING is terminal."""

    INITIALIZED = 'initialized'
    ITERATING = 'iterating'
    CONVERGED = 'converged'
    MAX_ITERATIONS_REACHED = 'max_iterations_reached'
    STALLED = 'stalled'
    LINEAR_SOLVE_FAILED = 'linear_solve_failed'
    CANCELLED = 'cancelled'

    @property
    def is_terminal(self):
        return self not in (FitStatus.INITIALIZED, FitStatus.ITERATING)


def _frozen(values, dtype=float):
    array = np.array(values, dtype=dtype)
    array.flags.writeable = False
    return array


@dataclass(frozen=True, eq=False)
class FitResult:
    """
    Best-fit parameters, their errors and fit statistics.

    Parameter standard errors of held parameters are 0.0. Reduced chi2
    and R² are NaN when they are undefined (no degrees of freedom left, or
    constant data for R²).
    """

    parameters: np.ndarray
    parameter_std_errors: np.ndarray
    fitted_model: np.ndarray
    num_func_evaluation: int
    chi2: float
    redchi2: float
    r_squared: float
    convergence_message: str
    status: FitStatus
    iterations: int
    vary: np.ndarray
    covariance: np.ndarray
    dof: int
    model_name: Optional[str] = None
    statistics: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Store read-only copies so the result cannot change after assembly
        for name in ('parameters', 'parameter_std_errors', 'fitted_model', 'covariance'):
            object.__setattr__(self, name, _frozen(getattr(self, name)))
        object.__setattr__(self, 'vary', _frozen(self.vary, dtype=bool))
        object.__setattr__(self, 'statistics', dict(self.statistics))

    @property
    def success(self):
        return self.status is FitStatus.CONVERGED

    @property
    def nvarys(self):
        return int(np.count_nonzero(self.vary))

    def to_dict(self):
        """
        Plain Python representation for hosts that cannot take numpy arrays.
        """
        return {
            'parameters': self.parameters.tolist(),
            'parameter_std_errors': self.parameter_std_errors.tolist(),
            'fitted_model': self.fitted_model.tolist(),
            'num_func_evaluation': self.num_func_evaluation,
            'chi2': self.chi2,
            'redchi2': self.redchi2,
            'r_squared': self.r_squared,
            'convergence_message': self.convergence_message,
            'status': self.status.value,
            'iterations': self.iterations,
        }

    def fit_report(self, param_names=None):
        """
        Text report of parameters and statistics.

        Parameters
        ----------
        param_names : sequence of str, optional
            Names for the parameter rows, defaults to p0, p1, ...

        Returns
        -------
        str
            Formatted report
        """
        if param_names is None:
            param_names = [f"p{i}" for i in range(len(self.parameters))]

        lines = []
        lines.append("=== Fit Result ===")
        if self.model_name:
            lines.append(f"Model: {self.model_name}")
        lines.append(f"Status: {self.status.value}")
        lines.append(f"Message: {self.convergence_message}")
        lines.append(f"Iterations: {self.iterations}")
        lines.append(f"Function evaluations: {self.num_func_evaluation}")
        lines.append("")
        lines.append("=== Parameters ===")
        width = max(len(name) for name in param_names) if len(param_names) else 0
        for name, value, error, vary in zip(param_names, self.parameters,
                                            self.parameter_std_errors, self.vary):
            if vary:
                lines.append(f"{name:<{width}} = {value: .6e} +/- {error:.6e}")
            else:
                lines.append(f"{name:<{width}} = {value: .6e} (fixed)")
        lines.append("")
        lines.append(format_statistics(self.statistics))
        return '\n'.join(lines)
