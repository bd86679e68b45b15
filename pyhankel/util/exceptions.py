"""
Exception types raised by :mod:`pyhankel`.

All of them derive from :class:`HankelError` and also from the builtin
exception a caller would naturally catch for that kind of problem, so
``except ValueError`` keeps working for shape and axis errors.
"""


class HankelError(Exception):
    """Base class for all pyhankel errors."""


class ShapeMismatchError(HankelError, ValueError):
    """
    Array extent does not fit the operator.

    Raised when the size of the transform axis differs from the operator
    dimension, or when an output buffer does not have the input's shape.
    """


class InvalidAxisError(HankelError, ValueError):
    """Requested axis is outside the valid range for the array's rank."""


class NonDifferentiableError(HankelError, TypeError):
    """A gradient was requested for an argument that has none (e.g. a transform)."""
