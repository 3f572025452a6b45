"""
Levenberg-Marquardt nonlinear least-squares minimizer.
"""

import numpy as np

from ..config import resolve_options
from ..exceptions import InvalidArgument, NumericDegeneracy
from ..utils.logger import log_debug, log_info, log_warning
from .linalg import invert_normal_matrix, solve_damped
from .result import FitResult, FitStatus
from .statistics import calculate_statistics, chi_square


# Lambda never drops below this, so a degenerate step can still be
# recovered within a few damping increases
MIN_DAMPING = 1e-15


class Minimizer:
    """
    Weighted least-squares fit of a ParametricModel by damped Gauss-Newton.

    Minimizes χ² = Σ((model(x) - y) / sy)² over the parameters flagged in
    the vary mask. Held parameters keep their initial values.

    Attributes
    ----------
    model : ParametricModel
        Model being fitted; holds the best parameters after minimize()
    y : ndarray
        Observed values
    sy : ndarray
        Uncertainties of the observed values
    vary : ndarray of bool
        Vary mask, True for free parameters
    damping : float
        Current damping factor λ
    status : FitStatus
        Current state of the fit
    iterations : int
        Number of accepted steps
    chi2 : float or None
        Chi-square at the current best parameters
    convergence_message : str
        Description of how the fit terminated
    minimizer_parameters : ndarray
        Best parameters found so far
    minimizer_ymodel : ndarray
        Model values at the best parameters
    parameter_errors : ndarray
        Standard errors, 0.0 for held parameters
    covariance : ndarray
        Parameter covariance, zero rows and columns for held parameters
    """

    def __init__(self, model, y, sy, vary, damping=None, iter_cb=None, options=None, **kwargs):
        """
        Initialize Minimizer.

        Parameters
        ----------
        model : ParametricModel
            Model holding the initial parameters and the domain
        y : array_like
            Observed values, one per domain point
        sy : array_like
            Uncertainties, one per domain point, all > 0
        vary : array_like of bool
            Vary mask, one flag per parameter
        damping : float, optional
            Initial damping factor, default DEFAULT_OPTIONS['damping']
        iter_cb : callable, optional
            ``iter_cb(iteration, parameters, chi2)`` called at the top of
            every iteration. Returning True cancels the fit.
        options : dict, optional
            Minimizer options, see funfit.config.DEFAULT_OPTIONS
        **kwargs
            Individual option overrides

        Raises
        ------
        InvalidArgument
            If the data, uncertainties, vary mask or options are malformed
        """
        self.options = resolve_options(options, damping=damping, **kwargs)

        n_points = model.n_points
        y = np.array(y, dtype=float)
        sy = np.array(sy, dtype=float)
        vary = np.asarray(vary)

        if y.shape != (n_points,):
            raise InvalidArgument(f"Expected {n_points} observed values, got shape {y.shape}")
        if sy.shape != (n_points,):
            raise InvalidArgument(f"Expected {n_points} uncertainties, got shape {sy.shape}")
        if not np.all(np.isfinite(y)):
            raise InvalidArgument("Observed values contain non-finite entries")
        if not np.all(np.isfinite(sy)) or np.any(sy <= 0):
            raise InvalidArgument("Uncertainties must be finite and strictly positive")
        if vary.dtype != bool:
            raise InvalidArgument(f"Vary mask must be boolean, got dtype {vary.dtype}")
        if vary.shape != (model.n_params,):
            raise InvalidArgument(
                f"Vary mask has {vary.size} entries for {model.n_params} parameters"
            )

        self.model = model
        self.y = y
        self.sy = sy
        self.vary = vary.copy()
        self.free = np.flatnonzero(self.vary)
        self.iter_cb = iter_cb

        self.damping = self.options['damping']
        self.status = FitStatus.INITIALIZED
        self.iterations = 0
        self.chi2 = None
        self.convergence_message = ''
        self.minimizer_parameters = model.parameters
        self.minimizer_ymodel = None
        self.parameter_errors = np.zeros(model.n_params)
        self.covariance = np.zeros((model.n_params, model.n_params))
        self.statistics = {}
        self._nfev_start = model.num_evaluations

    @property
    def num_func_evaluation(self):
        """Number of model evaluations made by this fit."""
        return self.model.num_evaluations - self._nfev_start

    @property
    def n_free(self):
        return self.free.size

    def _chi2(self, ymodel):
        with np.errstate(all='ignore'):
            value = chi_square(self.y, ymodel, self.sy)
        return value if np.isfinite(value) else np.inf

    def _jacobian(self, params, ymodel):
        """
        Jacobian of the weighted residuals with respect to the free parameters.

        Uses the analytic model Jacobian when available, otherwise forward
        differences with one model evaluation per free parameter.
        """
        model = self.model
        if self.options['use_analytic_jacobian'] and model.function.has_jacobian:
            model.set_parameters(params)
            jac = model.jacobian()[:, self.free]
        else:
            fd_step = self.options['fd_step']
            jac = np.empty((model.n_points, self.n_free))
            for column, index in enumerate(self.free):
                shifted = params.copy()
                shifted[index] += fd_step * abs(params[index]) or fd_step
                # Exactly representable step
                h = shifted[index] - params[index]
                model.set_parameters(shifted)
                with np.errstate(all='ignore'):
                    jac[:, column] = (model.evaluate() - ymodel) / h
            model.set_parameters(params)
        return jac / self.sy[:, np.newaxis]

    def _terminate(self, status, message):
        self.status = status
        self.convergence_message = message
        self.model.set_parameters(self.minimizer_parameters)
        if status in (FitStatus.CONVERGED, FitStatus.CANCELLED):
            log_info(f"Fit of '{self.model.function.name}' {status.value}: {message}")
        else:
            log_warning(f"Fit of '{self.model.function.name}' {status.value}: {message}")

    def minimize(self):
        """
        Run the fit to one of its terminal states.

        Returns
        -------
        FitResult
            Best parameters, their errors and fit statistics

        Raises
        ------
        RuntimeError
            If the minimizer has already been used
        """
        if self.status is not FitStatus.INITIALIZED:
            raise RuntimeError("A Minimizer runs a single fit; create a new one")

        self.status = FitStatus.ITERATING
        self.minimizer_ymodel = self.model.evaluate()
        self.chi2 = self._chi2(self.minimizer_ymodel)
        log_debug(f"Fitting '{self.model.function.name}' with {self.n_free} free "
                  f"parameter(s), initial chi2 = {self.chi2:.6e}")

        if self.n_free == 0:
            self._terminate(FitStatus.CONVERGED,
                            "No free parameters: model evaluated at the initial parameters")
        else:
            self._iterate()

        self.statistics = calculate_statistics(self.y, self.minimizer_ymodel, self.sy, self.n_free)
        self._estimate_errors()
        return self.result()

    def _iterate(self):
        opts = self.options
        params = self.minimizer_parameters
        ymodel = self.minimizer_ymodel
        chi2 = self.chi2

        while True:
            if self.iterations >= opts['max_iterations']:
                self._terminate(FitStatus.MAX_ITERATIONS_REACHED,
                                f"Maximum number of iterations ({opts['max_iterations']}) reached")
                return

            if self.iter_cb is not None and self.iter_cb(self.iterations, params.copy(), chi2):
                self._terminate(FitStatus.CANCELLED,
                                f"Fit cancelled after {self.iterations} iteration(s)")
                return

            residuals = (ymodel - self.y) / self.sy
            jac = self._jacobian(params, ymodel)
            if not (np.all(np.isfinite(jac)) and np.all(np.isfinite(residuals))):
                self._terminate(FitStatus.LINEAR_SOLVE_FAILED,
                                "Model or its derivatives are not finite at the current parameters")
                return

            jtj = jac.T @ jac
            gradient = jac.T @ residuals

            solve_failures = 0
            first_attempt = True
            while True:
                try:
                    step = solve_damped(jtj, gradient, self.damping)
                except NumericDegeneracy as e:
                    solve_failures += 1
                    log_debug(f"Linear solve failed (damping {self.damping:.1e}): {e}")
                    if solve_failures > opts['max_solve_retries']:
                        self._terminate(FitStatus.LINEAR_SOLVE_FAILED,
                                        f"Normal equations could not be solved after "
                                        f"{solve_failures} attempts: {e}")
                        return
                    self.damping *= opts['damping_up']
                    continue

                if first_attempt:
                    first_attempt = False
                    # Decrease promised by the linearised model at the current point
                    predicted = -(2 * gradient @ step + step @ jtj @ step)
                    if predicted <= opts['chi2_atol'] + opts['chi2_rtol'] * chi2:
                        self._terminate(FitStatus.CONVERGED,
                                        "Fit converged: predicted chi-square decrease below tolerance")
                        return

                trial = params.copy()
                trial[self.free] += step
                self.model.set_parameters(trial)
                trial_ymodel = self.model.evaluate()
                trial_chi2 = self._chi2(trial_ymodel)

                if trial_chi2 < chi2:
                    break

                self.damping *= opts['damping_up']
                if self.damping > opts['damping_max']:
                    self._terminate(FitStatus.STALLED,
                                    f"Fit stalled: damping factor exceeded {opts['damping_max']:.1e} "
                                    f"without decreasing chi-square")
                    return

            self.damping = max(self.damping / opts['damping_down'], MIN_DAMPING)
            self.iterations += 1
            decrease = chi2 - trial_chi2
            previous_chi2 = chi2

            params, ymodel, chi2 = trial, trial_ymodel, trial_chi2
            self.minimizer_parameters = params
            self.minimizer_ymodel = ymodel
            self.chi2 = chi2
            log_debug(f"Iteration {self.iterations}: chi2 = {chi2:.6e}, damping = {self.damping:.1e}")

            if (decrease <= opts['chi2_atol'] or decrease <= opts['chi2_rtol'] * previous_chi2
                    or chi2 <= opts['chi2_atol']):
                self._terminate(FitStatus.CONVERGED,
                                "Fit converged: change in chi-square below tolerance")
                return

            step_tol = opts['step_tol']
            if np.linalg.norm(step) <= step_tol * (np.linalg.norm(params[self.free]) + step_tol):
                self._terminate(FitStatus.STALLED,
                                "Fit stalled: parameter step below tolerance")
                return

    def _estimate_errors(self):
        """
        Parameter covariance and standard errors at the best parameters.

        The covariance of the free parameters is inv(JᵀJ). With
        scale_covar it is multiplied by the reduced chi-square, which
        treats sy as relative weights; without it sy are absolute 1σ
        uncertainties.
        """
        n_params = self.model.n_params
        self.parameter_errors = np.zeros(n_params)
        self.covariance = np.zeros((n_params, n_params))
        if self.n_free == 0:
            return

        jac = self._jacobian(self.minimizer_parameters, self.minimizer_ymodel)
        covariance = np.full((self.n_free, self.n_free), np.nan)
        if np.all(np.isfinite(jac)):
            try:
                covariance = invert_normal_matrix(jac.T @ jac)
            except NumericDegeneracy as e:
                log_warning(f"Parameter errors undefined: {e}")

        if self.options['scale_covar']:
            covariance = covariance * self.statistics['reduced_chi_squared']

        with np.errstate(invalid='ignore'):
            errors = np.sqrt(np.diag(covariance))
        self.parameter_errors[self.free] = errors
        self.covariance[np.ix_(self.free, self.free)] = covariance

    def result(self):
        """
        Snapshot of the finished fit.

        Returns
        -------
        FitResult
        """
        if not self.status.is_terminal:
            raise RuntimeError("No fit result available. Run minimize() first.")

        return FitResult(
            parameters=self.minimizer_parameters,
            parameter_std_errors=self.parameter_errors,
            fitted_model=self.minimizer_ymodel,
            num_func_evaluation=self.num_func_evaluation,
            chi2=float(self.chi2),
            redchi2=self.statistics['reduced_chi_squared'],
            r_squared=self.statistics['r_squared'],
            convergence_message=self.convergence_message,
            status=self.status,
            iterations=self.iterations,
            vary=self.vary,
            covariance=self.covariance,
            dof=self.statistics['dof'],
            model_name=self.model.function.name,
            statistics=self.statistics,
        )
