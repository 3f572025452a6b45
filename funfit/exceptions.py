"""
Exceptions raised by funfit.
"""


class InvalidArgument(ValueError):
    """
    Malformed input to a model or a fit.

    Raised before any computation starts: mismatched sequence lengths,
    non-positive uncertainties, empty domains, unknown options.
    """


class NumericDegeneracy(ArithmeticError):
    """
    Singular or non-finite normal equations during a linear solve.

    The minimizer recovers from this by increasing the damping factor;
    it never propagates out of a fit.
    """
