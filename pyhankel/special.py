r"""
Hyperspherical Bessel functions and their zeros
===============================================

The quasi-discrete spherical Hankel transform is built from the
(hyper)spherical Bessel function of order :math:`p` and spherical
dimension :math:`n`,

.. math::

    j_p^{n}(x) = c_n\, x^{-(n-1)/2}\, J_{p + (n-1)/2}(x),
    \qquad
    c_n = \begin{cases} \sqrt{\pi/2}, & n \text{ even}, \\ 1, & n \text{ odd}, \end{cases}

which generalizes the cylindrical (:math:`n = 1`) and spherical
(:math:`n = 2`) Bessel functions to the :math:`n`-sphere embedded in
:math:`\mathbb{R}^{n+1}`.

Ordinary Bessel functions and the Gamma function are evaluated with
:mod:`scipy.special`. Zeros of integer order come straight from
:func:`scipy.special.jn_zeros`; zeros of non-integer order are bracketed
on a uniform scan and refined with :func:`scipy.optimize.brentq`.

Contents
--------

- :func:`sphbesselj_scale` — Normalization constant :math:`c_n`
- :func:`sphbesselj` — Hyperspherical Bessel function :math:`j_p^n(x)`
- :func:`besselj_zero` — Positive zeros of :math:`J_\nu` for real :math:`\nu \ge 0`
- :func:`sphbesselj_zero` — Positive zeros of :math:`j_p^n`

References
----------
- J. S. Avery, J. E. Avery. *Hyperspherical Harmonics and Their Physical
  Applications.* World Scientific, 2017.
"""

from typing import Union
import numpy as np
import scipy.special as sp  # type: ignore
from scipy.optimize import brentq  # type: ignore

# Below this magnitude the removable singularity at x = 0 is replaced by its limit
ZERO_TOL = np.sqrt(np.finfo(np.float64).eps)

# Consecutive zeros of J_nu (nu >= 0) are more than 2.9 apart
_ZERO_SCAN_STEP = 0.25


def _check_dimension(n: int) -> None:
    if not isinstance(n, (int, np.integer)) or isinstance(n, bool):
        raise TypeError(f"spherical dimension n must be an integer, it is {n!r}")
    if n < 1:
        raise ValueError(f"spherical dimension n must be ≥ 1, it is {n}")


def sphbesselj_scale(n: int) -> float:
    r"""
    Return the normalization constant :math:`c_n` of :math:`j_p^n`.

    Parameters
    ----------
    n : int
        Spherical dimension (≥ 1).

    Returns
    -------
    float
        :math:`\sqrt{\pi/2}` for even ``n`` and ``1.0`` for odd ``n``.

    Examples
    --------
    >>> sphbesselj_scale(1)
    1.0
    >>> sphbesselj_scale(2) == np.sqrt(np.pi / 2)
    True
    """
    _check_dimension(n)
    return 1.0 if n % 2 == 1 else float(np.sqrt(np.pi / 2))


def sphbesselj(p: float, n: int, x: Union[float, complex, np.ndarray]) -> Union[float, complex, np.ndarray]:
    r"""
    Evaluate the (hyper)spherical Bessel function :math:`j_p^n(x)`.

    Parameters
    ----------
    p : float
        Order of the function.
    n : int
        Spherical dimension (≥ 1). ``n = 1`` gives the ordinary Bessel
        function :math:`J_p`, ``n = 2`` the spherical Bessel function.
    x : float, complex or np.ndarray
        Argument(s). Real or complex; arrays are evaluated elementwise.

    Returns
    -------
    float, complex or np.ndarray
        :math:`j_p^n(x)`, with the same shape as ``x``.

    Notes
    -----
    For non-integer :math:`(n-1)/2` the closed form has a removable
    singularity at the origin. Where :math:`|x| \le \sqrt{\epsilon}` the
    analytic limit is returned instead:

    .. math::

        j_p^n(0) = \begin{cases}
            \dfrac{c_n}{\Gamma(\alpha + 1)\, 2^{\alpha}}, & p = 0, \\
            0, & p \neq 0,
        \end{cases}
        \qquad \alpha = \frac{n-1}{2}.

    Examples
    --------
    >>> sphbesselj(0, 3, 0.0)
    0.5
    >>> sphbesselj(1, 1, 0.2) == sp.jv(1, 0.2)
    True
    """
    _check_dimension(n)
    alpha = (n - 1) / 2
    cn = sphbesselj_scale(n)
    x = np.asarray(x)

    jppa = sp.jv(p + alpha, x)
    small = np.abs(x) <= ZERO_TOL
    with np.errstate(divide="ignore", invalid="ignore"):
        jp = cn * jppa / x**alpha

    if p == 0:
        limit = cn / sp.gamma(alpha + 1) / 2**alpha
    else:
        limit = 0.0
    jp = np.where(small, limit, jp).astype(jppa.dtype, copy=False)
    return jp[()]


def _besselj_zeros(nu: float, count: int) -> np.ndarray:
    """First ``count`` positive zeros of J_nu, for real nu ≥ 0."""
    if float(nu).is_integer():
        return sp.jn_zeros(int(nu), count)

    # J_nu > 0 on (0, j_{nu,1}) and j_{nu,1} > nu, so the scan can start at nu
    start = float(nu)
    stop = start + (count + nu / 2 + 1) * np.pi
    while True:
        x = np.arange(start, stop + _ZERO_SCAN_STEP, _ZERO_SCAN_STEP)
        vals = sp.jv(nu, x)
        brackets = np.nonzero(np.signbit(vals[:-1]) != np.signbit(vals[1:]))[0]
        if brackets.size >= count:
            break
        stop += (count - brackets.size + 1) * np.pi

    zeros = np.empty(count)
    for i, b in enumerate(brackets[:count]):
        zeros[i] = brentq(lambda t: sp.jv(nu, t), x[b], x[b + 1],
                          xtol=1e-15, rtol=4 * np.finfo(float).eps)
    return zeros


def besselj_zero(nu: float, m: Union[int, np.ndarray]) -> Union[float, np.ndarray]:
    r"""
    Return the ``m``-th positive zero of the Bessel function :math:`J_\nu`.

    Parameters
    ----------
    nu : float
        Real, non-negative order.
    m : int or array_like of int
        1-based index (or indices) of the requested zero(s).

    Returns
    -------
    float or np.ndarray
        The zero :math:`j_{\nu,m}`, or an array of zeros when ``m`` is
        array-like.

    Raises
    ------
    ValueError
        If ``nu`` is negative or any ``m`` is smaller than 1.
    TypeError
        If ``m`` is not integer-valued.

    Examples
    --------
    >>> round(besselj_zero(0, 1), 4)
    2.4048
    >>> np.allclose(besselj_zero(0.5, [1, 2]), [np.pi, 2 * np.pi])
    True
    """
    if nu < 0:
        raise ValueError(f"Bessel order must be non-negative, it is {nu}")
    m_arr = np.atleast_1d(np.asarray(m))
    if not np.issubdtype(m_arr.dtype, np.integer):
        raise TypeError(f"zero index m must be an integer, it is {m!r}")
    if m_arr.size == 0:
        return np.empty(m_arr.shape)
    if np.any(m_arr < 1):
        raise ValueError("zero index m must be ≥ 1.")

    zeros = _besselj_zeros(nu, int(m_arr.max()))[m_arr - 1]
    if np.ndim(m) == 0:
        return float(zeros[0])
    return zeros


def sphbesselj_zero(p: float, n: int, m: Union[int, np.ndarray]) -> Union[float, np.ndarray]:
    r"""
    Return the ``m``-th positive zero of :math:`j_p^n`.

    The zeros of :math:`j_p^n` coincide with those of the ordinary Bessel
    function :math:`J_{p + (n-1)/2}`.

    See Also
    --------
    sphbesselj, besselj_zero
    """
    _check_dimension(n)
    return besselj_zero(p + (n - 1) / 2, m)
