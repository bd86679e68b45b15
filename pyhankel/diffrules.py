r"""
Reverse-mode differentiation rules
==================================

Vector-Jacobian products (pullbacks) for the linear operations of
:mod:`pyhankel`, so that transforms and radial integrals can sit inside a
gradient-based optimization loop.

Each ``rrule_*`` function evaluates the primal operation and returns
``(result, pullback)``. Calling ``pullback(dY)`` with a cotangent shaped
like ``result`` returns one cotangent per primal argument, in argument
order. Transforms are not differentiable; their slot holds
:data:`DOES_NOT_EXIST`, which is distinct from a zero gradient and refuses
to take part in arithmetic.

Cotangents follow the conjugate (Wirtinger) convention used by PyTorch:
for a real loss :math:`L` and complex input :math:`A`,

.. math::

    \bar{A} = \sum \bar{Y}\, \overline{\partial Y / \partial A},

which for real arrays is the ordinary gradient.

Since every primal here is linear in each argument, the pullbacks are
closed-form:

.. math::

    Y = s\,T A \;&\Rightarrow\; \bar{A} = s\,T^{\mathsf T} \bar{Y}, \\
    y = \textstyle\sum_i v_i A_i \;&\Rightarrow\;
        \bar{A}_i = \bar{y}\,\overline{v_i}, \quad
        \bar{v}_i = \textstyle\sum \bar{y}\,\overline{A_i}.

Contents
--------

- :data:`DOES_NOT_EXIST` — Cotangent of a non-differentiable argument
- :func:`rrule_ht` / :func:`rrule_iht` — Forward / inverse transform
- :func:`rrule_dimdot` — Weighted reduction
- :func:`rrule_integrate_r` / :func:`rrule_integrate_k` — Radial integrals
- :func:`rrule` — Look up and apply the rule registered for a primal

Examples
--------
>>> from pyhankel.transforms import QDSHT
>>> q = QDSHT(64, rmax=10.0, p=1)
>>> A = np.random.randn(64)
>>> Y, pullback = rrule_ht(q, A)
>>> dQ, dA = pullback(np.ones_like(Y))
>>> dQ is DOES_NOT_EXIST
True
"""

from typing import Callable, Dict, Tuple
import numpy as np

from .linalg import dimdot, dot, normalize_axis
from .transforms import QDSHT, integrate_k, integrate_r
from .util.exceptions import NonDifferentiableError, ShapeMismatchError


class DoesNotExist:
    """
    Cotangent of an argument that has no derivative.

    A single shared instance, :data:`DOES_NOT_EXIST`, is used. Converting
    it to an array or combining it arithmetically raises
    :class:`NonDifferentiableError`, so it can never be mistaken for zero.
    """

    _instance = None
    # make NumPy defer binary operators to the methods below
    __array_ufunc__ = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DOES_NOT_EXIST"

    def _refuse(self, *args, **kwargs):
        raise NonDifferentiableError("Gradient with respect to this argument does not exist")

    __array__ = _refuse
    __add__ = __radd__ = _refuse
    __sub__ = __rsub__ = _refuse
    __mul__ = __rmul__ = _refuse
    __truediv__ = __rtruediv__ = _refuse
    __neg__ = _refuse


DOES_NOT_EXIST = DoesNotExist()

_RULES: Dict[Callable, Callable] = {}


def _register(primal: Callable) -> Callable:
    def decorator(rule: Callable) -> Callable:
        _RULES[primal] = rule
        return rule

    return decorator


def _check_cotangent(dY: np.ndarray, shape: Tuple[int, ...]) -> np.ndarray:
    dY = np.asarray(dY)
    if dY.shape != shape:
        raise ShapeMismatchError(f"Cotangent shape {dY.shape} does not match output shape {shape}")
    return dY


def _mul_back(dY: np.ndarray, Q: QDSHT, scale: float) -> np.ndarray:
    dA = dot(Q.T.T, dY, dim=Q.dim)
    dA *= scale
    return dA


@_register(QDSHT.ht)
def rrule_ht(Q: QDSHT, A: np.ndarray):
    """
    Forward transform with its pullback.

    Returns
    -------
    Y : np.ndarray
        ``Q.ht(A)``.
    pullback : callable
        ``pullback(dY) -> (DOES_NOT_EXIST, dA)`` with
        ``dA = Q.forward_scale * T.T @ dY`` along ``Q.dim``.
    """
    Y = Q.ht(A)

    def ht_pullback(dY):
        dY = _check_cotangent(dY, Y.shape)
        return DOES_NOT_EXIST, _mul_back(dY, Q, Q.forward_scale)

    return Y, ht_pullback


@_register(QDSHT.iht)
def rrule_iht(Q: QDSHT, A: np.ndarray):
    """Inverse transform with its pullback; as :func:`rrule_ht` with ``Q.inverse_scale``."""
    Y = Q.iht(A)

    def iht_pullback(dY):
        dY = _check_cotangent(dY, Y.shape)
        return DOES_NOT_EXIST, _mul_back(dY, Q, Q.inverse_scale)

    return Y, iht_pullback


def _broadcast_weights(dy: np.ndarray, w: np.ndarray, ndim: int, axis: int) -> np.ndarray:
    """Spread the reduced cotangent ``dy`` back along ``axis``, weighted by ``conj(w)``."""
    shape = [1] * ndim
    shape[axis] = w.size
    return dy * np.conj(w).reshape(shape)


@_register(dimdot)
def rrule_dimdot(v: np.ndarray, A: np.ndarray, dim: int = 0):
    """
    Weighted reduction with its pullback.

    Returns
    -------
    y : np.ndarray or scalar
        ``dimdot(v, A, dim)``.
    pullback : callable
        ``pullback(dy) -> (dv, dA)`` where ``dA`` is ``dy`` broadcast back
        along ``dim`` and multiplied by ``conj(v)``, and ``dv`` sums
        ``dy * conj(A)`` over every axis except ``dim``.
    """
    v = np.asarray(v)
    A = np.asarray(A)
    y = dimdot(v, A, dim=dim)
    axis = normalize_axis(dim, A.ndim)

    def dimdot_pullback(dy):
        dy = _check_cotangent(dy, np.shape(y))
        dA = _broadcast_weights(dy, v, A.ndim, axis)
        weighted = np.moveaxis(dy * np.conj(A), axis, 0)
        dv = weighted.reshape(v.size, -1).sum(axis=1)
        return dv, dA

    return y, dimdot_pullback


def _integrate_rule(primal: Callable, scale_name: str, A: np.ndarray, Q: QDSHT, dim):
    A = np.asarray(A)
    dim = Q.dim if dim is None else dim
    y = primal(A, Q, dim=dim)
    axis = normalize_axis(dim, A.ndim)
    scale = getattr(Q, scale_name)

    def integrate_pullback(dy):
        dy = _check_cotangent(dy, np.shape(y))
        return _broadcast_weights(dy, scale, A.ndim, axis), DOES_NOT_EXIST

    return y, integrate_pullback


@_register(integrate_r)
def rrule_integrate_r(A: np.ndarray, Q: QDSHT, dim=None):
    """
    Real-space radial integral with its pullback.

    ``pullback(dy) -> (dA, DOES_NOT_EXIST)`` with ``dA = dy * conj(Q.scale_r)``
    aligned with the integration axis.
    """
    return _integrate_rule(integrate_r, "scale_r", A, Q, dim)


@_register(integrate_k)
def rrule_integrate_k(A: np.ndarray, Q: QDSHT, dim=None):
    """Frequency-space radial integral with its pullback. See :func:`rrule_integrate_r`."""
    return _integrate_rule(integrate_k, "scale_k", A, Q, dim)


def rrule(f: Callable, *args, **kwargs):
    """
    Evaluate ``f(*args, **kwargs)`` and return ``(result, pullback)``.

    ``f`` is one of :meth:`QDSHT.ht`, :meth:`QDSHT.iht` (unbound, or bound
    to a transform), :func:`~pyhankel.linalg.dimdot`,
    :func:`~pyhankel.transforms.integrate_r` or
    :func:`~pyhankel.transforms.integrate_k`. This is the hook an external
    reverse-mode engine registers as its custom-gradient rule.

    Raises
    ------
    NonDifferentiableError
        If no rule is registered for ``f``.

    Examples
    --------
    >>> q = QDSHT(32, rmax=5.0)
    >>> Y, pullback = rrule(q.ht, np.exp(-q.r**2))
    """
    bound_to = getattr(f, "__self__", None)
    if isinstance(bound_to, QDSHT):
        args = (bound_to,) + args
    primal = getattr(f, "__func__", f)
    try:
        rule = _RULES[primal]
    except KeyError:
        name = getattr(f, "__qualname__", repr(f))
        raise NonDifferentiableError(f"No reverse-mode rule registered for {name}") from None
    return rule(*args, **kwargs)
