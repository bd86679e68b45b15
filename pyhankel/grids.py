r"""
Grid and operator construction for quasi-discrete Hankel transforms
===================================================================


This module builds the non-uniform **real-space** and **spectral** grids
on which the quasi-discrete (spherical) Hankel transform operates, the
per-node integration weights that make radial integrals consistent with
Parseval's theorem, and the dense transform matrix itself.

Overview
--------

For order :math:`p`, spherical dimension :math:`n`, aperture :math:`R`
and :math:`N` samples, let :math:`z_1 < \dots < z_N` be the first zeros of
the hyperspherical Bessel function :math:`j_p^n` and :math:`S = z_{N+1}`.
Then

.. math::

    r_i = \frac{z_i}{S} R, \qquad
    K = \frac{S}{R}, \qquad
    k_i = \frac{z_i}{S} K.

The grids never contain the origin; :func:`mirror_grid` produces the
symmetric grid :math:`[-r_N, \dots, -r_1, 0, r_1, \dots, r_N]` for plotting
or for full-aperture diagnostics.

Contents
--------

- :class:`HankelGrid` — Named tuple holding nodes, weights and constants
- :func:`construct_r_k_qdsht` — Grids and integration weights
- :func:`construct_qdsht_matrix` — Dense :math:`N \times N` transform matrix
- :func:`mirror_grid` — Symmetric grid (and data) reflection utility
"""

from typing import NamedTuple, Optional, Tuple
import numpy as np

from .linalg import normalize_axis
from .special import sphbesselj, sphbesselj_scale, sphbesselj_zero


class HankelGrid(NamedTuple):
    """Sample nodes, integration weights and constants of a QDSHT grid."""

    r: np.ndarray
    k: np.ndarray
    kmax: float
    zeros: np.ndarray
    S: float
    j1sq: np.ndarray
    cn: float
    scale_r: np.ndarray
    scale_k: np.ndarray


def construct_r_k_qdsht(nr: int, rmax: float, p: float = 0, n: int = 2) -> HankelGrid:
    r"""
    Construct the grids and integration weights of a QDSHT.

    Parameters
    ----------
    nr : int
        Number of radial samples :math:`N` (≥ 1).
    rmax : float
        Aperture radius :math:`R` (> 0). Any real number is accepted and
        converted to ``float64``, the precision of :mod:`scipy.special`;
        wider types such as ``np.longdouble`` are rounded to it.
    p : float, optional
        Transform order (≥ 0). Default is ``0``.
    n : int, optional
        Spherical dimension. ``n = 1`` is the cylindrical QDHT. Default ``2``.

    Returns
    -------
    HankelGrid
        ``r`` and ``k`` nodes, ``kmax`` (:math:`K`), the Bessel ``zeros``
        :math:`z_1..z_N`, ``S`` (:math:`z_{N+1}`), ``j1sq``, ``cn`` and the
        integration weights ``scale_r`` and ``scale_k``.

    Raises
    ------
    TypeError
        If ``nr`` is not an integer.
    ValueError
        If ``nr < 1``, ``rmax <= 0`` or ``p < 0``.

    Notes
    -----
    With :math:`j_{1,i} = |j_{p+1}^n(z_i)|` the integration weights are

    .. math::

        s^R_i = \frac{2 c_n^2}{K^{n+1} j_{1,i}^2}, \qquad
        s^K_i = \frac{2 c_n^2}{R^{n+1} j_{1,i}^2},

    so that :math:`\sum_i s^R_i |f(r_i)|^2 = \sum_i s^K_i |F(k_i)|^2`
    holds exactly for the discrete transform.

    Examples
    --------
    >>> grid = construct_r_k_qdsht(16, 2.0, p=0, n=1)
    >>> grid.r.shape, grid.k.shape
    ((16,), (16,))
    >>> bool(grid.r[-1] < 2.0)
    True
    """
    if not isinstance(nr, (int, np.integer)) or isinstance(nr, bool):
        raise TypeError("nr must be an integer.")
    if nr < 1:
        raise ValueError("nr must be ≥ 1.")
    if rmax <= 0:
        raise ValueError("rmax must be positive.")
    if p < 0:
        raise ValueError("order p must be non-negative.")

    # scipy Bessel routines only accept up to double precision
    rmax = np.float64(rmax)

    zeros = np.asarray(sphbesselj_zero(p, n, np.arange(1, nr + 2)), dtype=np.float64)
    zeros, S = zeros[:-1], zeros[-1]
    r = zeros * rmax / S
    kmax = S / rmax
    k = zeros * kmax / S

    j1 = np.abs(sphbesselj(p + 1, n, zeros))
    j1sq = j1 * j1
    cn = sphbesselj_scale(n)

    scale_r = 2 * cn**2 / kmax ** (n + 1) / j1sq
    scale_k = 2 * cn**2 / rmax ** (n + 1) / j1sq
    return HankelGrid(r, k, kmax, zeros, S, j1sq, cn, scale_r, scale_k)


def construct_qdsht_matrix(grid: HankelGrid, p: float = 0, n: int = 2) -> np.ndarray:
    r"""
    Construct the dense QDSHT matrix from a grid.

    .. math::

        T_{ij} = \frac{2 c_n}{S^{(n+1)/2}}
            \frac{j_p^n(z_i z_j / S)}{j_{1,j}^2}

    Building the matrix costs :math:`N^2` Bessel evaluations and dominates
    construction time of a transform.

    Parameters
    ----------
    grid : HankelGrid
        Grid returned by :func:`construct_r_k_qdsht` for the same ``p`` and ``n``.
    p : float, optional
        Transform order. Default is ``0``.
    n : int, optional
        Spherical dimension. Default is ``2``.

    Returns
    -------
    np.ndarray, shape (N, N)
        Transform matrix :math:`T`.
    """
    bessel_arg = np.outer(grid.zeros, grid.zeros) / grid.S
    return 2 * grid.cn / grid.S ** ((n + 1) / 2) * sphbesselj(p, n, bessel_arg) / grid.j1sq


def mirror_grid(
    r: np.ndarray, u: Optional[np.ndarray] = None, u0: Optional[np.ndarray] = None, axis: int = 0
) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    r"""
    Mirror a radial grid (and optional samples) to produce a symmetric domain.

    Parameters
    ----------
    r : np.ndarray
        Radial grid on :math:`(0, R)`, not containing the origin.
    u : np.ndarray, optional
        Samples at ``r`` along axis ``axis``. If provided, mirrored values
        are returned.
    u0 : np.ndarray or scalar, optional
        Value(s) on axis (at :math:`r = 0`). Required when ``u`` is given;
        either a scalar or an array of ``u``'s shape with length 1 along
        ``axis``.
    axis : int, optional
        Axis of ``u`` holding the radial samples. Default is ``0``.

    Returns
    -------
    rnew : np.ndarray
        Mirrored grid :math:`[-r_N, \dots, -r_1, 0, r_1, \dots, r_N]`.
    unew : np.ndarray, optional
        Mirrored samples of length :math:`2N + 1` along ``axis``.

    Raises
    ------
    ValueError
        If ``u`` is given without ``u0``.
    InvalidAxisError
        If ``axis`` is not a valid axis of ``u``.

    Examples
    --------
    >>> r = np.array([1.0, 2.0, 3.0])
    >>> rnew, unew = mirror_grid(r, np.array([4.0, 5.0, 6.0]), u0=3.0)
    >>> rnew
    array([-3., -2., -1.,  0.,  1.,  2.,  3.])
    >>> unew
    array([6., 5., 4., 3., 4., 5., 6.])
    """
    r = np.asarray(r)
    rnew = np.concatenate([-np.flip(r), np.zeros(1, dtype=r.dtype), r])
    if u is None:
        return rnew, None
    if u0 is None:
        raise ValueError("u0 (the on-axis value) is required to mirror u.")

    u = np.asarray(u)
    axis = normalize_axis(axis, u.ndim)
    onaxis_shape = list(u.shape)
    onaxis_shape[axis] = 1
    center = np.broadcast_to(np.asarray(u0), tuple(onaxis_shape))
    unew = np.concatenate([np.flip(u, axis=axis), center, u], axis=axis)
    return rnew, unew
