"""
Model function bound to a parameter vector and a fixed domain.
"""

import numpy as np

from ..exceptions import InvalidArgument


class ParametricModel:
    """
    A model function evaluated at its current parameters over a fixed domain.

    Attributes
    ----------
    function : ModelFunction
        Model function being evaluated
    domain : ndarray
        Read-only independent variable values
    num_evaluations : int
        Number of calls made into the model function
    """

    def __init__(self, function, parameters, domain):
        """
        Initialize ParametricModel.

        Parameters
        ----------
        function : ModelFunction
            Model function
        parameters : array_like
            Initial parameter vector
        domain : array_like
            Independent variable values

        Raises
        ------
        InvalidArgument
            If the domain is empty, not 1-D or not finite, or the parameter
            count does not match the model function
        """
        domain = np.array(domain, dtype=float)
        if domain.ndim != 1:
            raise InvalidArgument(f"Domain must be one-dimensional, got shape {domain.shape}")
        if domain.size == 0:
            raise InvalidArgument("Domain must not be empty")
        if not np.all(np.isfinite(domain)):
            raise InvalidArgument("Domain contains non-finite values")
        domain.flags.writeable = False

        parameters = self._as_vector(parameters)
        n_expected = function.n_params
        if n_expected is not None and parameters.size != n_expected:
            raise InvalidArgument(
                f"Model '{function.name}' expects {n_expected} parameters "
                f"{list(function.param_names)}, got {parameters.size}"
            )

        self.function = function
        self.domain = domain
        self._parameters = parameters
        self._values = None
        self.num_evaluations = 0

    @staticmethod
    def _as_vector(parameters):
        parameters = np.array(parameters, dtype=float)
        if parameters.ndim != 1:
            raise InvalidArgument(f"Parameters must be one-dimensional, got shape {parameters.shape}")
        return parameters

    @property
    def parameters(self):
        """Copy of the current parameter vector."""
        return self._parameters.copy()

    @property
    def n_params(self):
        return self._parameters.size

    @property
    def n_points(self):
        return self.domain.size

    def set_parameters(self, parameters):
        """
        Replace the parameter vector.

        Parameters
        ----------
        parameters : array_like
            New parameter vector, same length as the current one

        Raises
        ------
        InvalidArgument
            If the length differs from the current vector
        """
        parameters = self._as_vector(parameters)
        if parameters.size != self._parameters.size:
            raise InvalidArgument(
                f"Expected {self._parameters.size} parameters, got {parameters.size}"
            )
        if not np.array_equal(parameters, self._parameters):
            self._values = None
        self._parameters = parameters

    def evaluate(self):
        """
        Evaluate the model at the current parameters.

        The result is cached until the parameters change. Out-of-domain
        parameters may produce NaN or Inf values; no floating point
        warnings are emitted for them.

        Returns
        -------
        ndarray
            Model values, one per domain point
        """
        if self._values is None:
            with np.errstate(all='ignore'):
                self._values = self.function.evaluate(self._parameters, self.domain)
            self.num_evaluations += 1
        return self._values.copy()

    def jacobian(self):
        """
        Analytic Jacobian of the model values at the current parameters.

        Returns
        -------
        ndarray
            Array of shape (n_points, n_params)
        """
        with np.errstate(all='ignore'):
            jac = self.function.jacobian(self._parameters, self.domain)
        self.num_evaluations += 1
        return jac

    def __repr__(self):
        return (f"ParametricModel({self.function.name!r}, "
                f"parameters={self._parameters.tolist()}, n_points={self.n_points})")
