"""
Model function capability and its family variants.

A model function is a pure, stateless mapping ``(p, x) -> values`` that
is evaluated elementwise over the domain ``x``. The parameter vector ``p``
is positional: index i always means the same quantity for a given model.
"""

import numpy as np


class ModelFunction:
    """
    Named model function with a fixed parameter layout.

    Attributes
    ----------
    name : str
        Registry key
    param_names : tuple of str or None
        Parameter names in vector order. None means the function accepts
        a parameter vector of any length.
    description : str
        Human readable formula
    family : str
        Model family ('elementary', 'distribution', 'form_factor')
    """

    family = 'generic'

    def __init__(self, name, func, param_names=None, jacobian=None, description=''):
        """
        Parameters
        ----------
        name : str
            Registry key
        func : callable
            ``func(p, x) -> ndarray`` with p and x as float arrays
        param_names : sequence of str, optional
            Parameter names in vector order
        jacobian : callable, optional
            ``jacobian(p, x) -> ndarray`` of shape (len(x), len(p)) with
            the analytic partial derivatives of the model values
        description : str, optional
            Human readable formula
        """
        self.name = name
        self._func = func
        self._jacobian = jacobian
        self.param_names = tuple(param_names) if param_names is not None else None
        self.description = description

    @property
    def n_params(self):
        """Expected parameter count, or None if any length is accepted."""
        if self.param_names is None:
            return None
        return len(self.param_names)

    @property
    def has_jacobian(self):
        return self._jacobian is not None

    def evaluate(self, p, x):
        """
        Evaluate the model.

        Parameters
        ----------
        p : array_like
            Parameter vector
        x : array_like
            Domain

        Returns
        -------
        ndarray
            Model values, same shape as x
        """
        p = np.asarray(p, dtype=float)
        x = np.asarray(x, dtype=float)
        values = np.asarray(self._func(p, x), dtype=float)
        return np.broadcast_to(values, x.shape).copy()

    __call__ = evaluate

    def jacobian(self, p, x):
        """
        Analytic derivatives of the model values with respect to p.

        Returns
        -------
        ndarray
            Array of shape (len(x), len(p))

        Raises
        ------
        NotImplementedError
            If the function has no analytic Jacobian
        """
        if self._jacobian is None:
            raise NotImplementedError(f"Model '{self.name}' has no analytic Jacobian")
        p = np.asarray(p, dtype=float)
        x = np.asarray(x, dtype=float)
        return np.asarray(self._jacobian(p, x), dtype=float).reshape(x.size, p.size)

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r}, params={self.param_names})"


class ElementaryFunction(ModelFunction):
    """Algebraic or trigonometric function of a parameter-weighted domain."""

    family = 'elementary'


class DistributionFunction(ModelFunction):
    """Statistical size/weight distribution over the domain."""

    family = 'distribution'


class FormFactorFunction(ModelFunction):
    """
    Small-angle scattering intensity of a homogeneous particle.

    The intensity is built from a normalised shape term ``P(q, size)``
    (with ``P(0, size) = 1``) and the particle volume::

        I(q) = scale * ((sld_particle - sld_matrix) * V(size))**2 * P(q, size) + background

    with the parameter vector ``[scale, size, sld_particle, sld_matrix, background]``.
    """

    family = 'form_factor'

    def __init__(self, name, shape_term, volume, size_name='radius', description=''):
        """
        Parameters
        ----------
        name : str
            Registry key
        shape_term : callable
            ``shape_term(q, size) -> ndarray``, normalised to 1 at q = 0
        volume : callable
            ``volume(size) -> float``
        size_name : str
            Name of the size parameter
        description : str
            Human readable formula
        """
        self.shape_term = shape_term
        self.volume = volume
        param_names = ('scale', size_name, 'sld_particle', 'sld_matrix', 'background')
        super().__init__(name, self._intensity, param_names=param_names, description=description)

    def _intensity(self, p, q):
        scale, size, sld_particle, sld_matrix, background = p
        contrast = (sld_particle - sld_matrix) * self.volume(size)
        return scale * contrast**2 * self.shape_term(q, size) + background
