"""
Exceptions raised by the numeric primitives.

The higher level analyses (phase maps, extrema, peaks) catch these at their
seams and degrade to empty results instead.
"""


class InvalidInputError(ValueError):
    """Input violates a documented precondition (length, range, sigma...)."""


class DegenerateFitError(ZeroDivisionError):
    """The least-squares normal equations are singular (no spread in x)."""
