r"""
Quasi-discrete Hankel transforms for radially symmetric functions
=================================================================


This module implements the **quasi-discrete Hankel transform (QDHT)** for
functions with cylindrical symmetry and its generalization, the
**quasi-discrete spherical Hankel transform (QDSHT)**, for radial
symmetry in :math:`\mathbb{R}^{n+1}`. They provide a spectral
decomposition for radial domains analogous to the Fourier transform for
Cartesian coordinates, and are particularly useful in axially or
spherically symmetric wave-propagation and diffusion problems.

Overview
--------

The order-:math:`p` transform pair in :math:`n+1` dimensions reads

.. math::

    F(k) &= \int_0^{\infty} f(r)\, j_p^n(k r)\, r^n \, dr, \\
    f(r) &= \int_0^{\infty} F(k)\, j_p^n(k r)\, k^n \, dk,

up to normalization, where :math:`j_p^n` is the hyperspherical Bessel
function (see :mod:`pyhankel.special`). For :math:`n = 1` this is the
ordinary Hankel transform with kernel :math:`J_p(kr)`.

The quasi-discrete formulation samples :math:`f` and :math:`F` on grids
derived from the zeros of :math:`j_p^n` over a finite aperture
:math:`r \in [0, R]`. The forward and inverse operators are then exact
inverses of one another (to rounding), and radial integrals computed
with :func:`integrate_r` and :func:`integrate_k` satisfy Parseval's
theorem exactly.

Transforms act along one axis (``dim``) of an array; all other axes are
batch axes, so a stack of radial profiles is transformed in one call.

Contents
--------

- :class:`QDSHT` — Order-:math:`p`, dimension-:math:`n` transform
- :class:`QDHT` — Cylindrical (:math:`n = 1`) transform
- :func:`integrate_r` / :func:`integrate_k` — Radial integrals
- :func:`oversample` — Same transform at higher resolution
- :func:`onaxis` — Real-space value at :math:`r = 0` from the spectrum
- :func:`symmetric` / :func:`r_symmetric` — Samples mirrored about the axis
"""

from typing import Literal, Union
import numpy as np

from .grids import construct_qdsht_matrix, construct_r_k_qdsht, mirror_grid
from .linalg import dimdot, dot_into
from .special import sphbesselj, sphbesselj_scale
from .util.exceptions import InvalidAxisError
from .util.loghelper import get_level_name, get_transform_logger, set_log_level

LogLevel = Union[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], int]


def _readonly(a: np.ndarray) -> np.ndarray:
    a.setflags(write=False)
    return a


class QDSHT:
    r"""
    Quasi-discrete spherical Hankel transform of order :math:`p` in :math:`n+1` dimensions.

    The transform matrix is

    .. math::

        T_{ij} = \frac{2 c_n}{S^{(n+1)/2}}
            \frac{j_p^n(z_i z_j / S)}{|j_{p+1}^n(z_j)|^2},

    where :math:`z_i` are the zeros of :math:`j_p^n` and :math:`S = z_{N+1}`.
    The forward transform is :math:`F = (R/K)^{(n+1)/2}\, T f` and the
    inverse :math:`f = (K/R)^{(n+1)/2}\, T F`.

    A transform is immutable once built: every array it exposes is
    read-only, and :func:`oversample` returns a new instance.

    Parameters
    ----------
    nr : int
        Number of radial sample points (≥ 1).
    rmax : float, optional
        Aperture radius (largest real-space coordinate). Converted to
        ``float64``. Default is ``1.0``.
    p : float, optional
        Transform order (≥ 0). Default is ``0``.
    n : int, optional
        Spherical dimension (≥ 1). Default is ``2`` (spherical symmetry in 3-D).
    dim : int, optional
        Array axis along which the transform acts. Default is ``0``.
    loglevel : str or int, optional
        Logging level of the ``pyhankel.<ClassName>`` logger. Default ``'WARNING'``.

    Attributes
    ----------
    logger : logging.Logger
        Logger instance configured for the transform.

    Examples
    --------
    >>> q = QDSHT(128, rmax=10.0)
    >>> f = np.exp(-q.r**2 / 2)
    >>> np.allclose(q.iht(q.ht(f)), f)
    True
    >>> np.isclose(integrate_r(np.abs(f)**2, q), np.sqrt(np.pi) / 4)
    True

    References
    ----------
    - Guizar-Sicairos, M. & Gutiérrez-Vega, J. C.
      *Computation of quasi-discrete Hankel transforms of integer order for propagating optical wave fields.*
      J. Opt. Soc. Am. A **21**, 53–58 (2004).
    """

    def __init__(
        self,
        nr: int,
        rmax: float = 1.0,
        p: float = 0,
        n: int = 2,
        dim: int = 0,
        loglevel: LogLevel = "WARNING",
    ) -> None:
        """Build grids, integration weights and the transform matrix."""
        self.logger = get_transform_logger(self.__class__, loglevel)
        if not isinstance(dim, (int, np.integer)) or isinstance(dim, bool):
            raise InvalidAxisError(f"dim must be an integer, it is {dim!r}")

        grid = construct_r_k_qdsht(nr, rmax, p, n)
        self._p = p
        self._n = n
        self._nr = nr
        self._dim = int(dim)
        self._rmax = np.float64(rmax)
        self._kmax = grid.kmax
        self._jN = grid.S
        self._cn = grid.cn
        self._bessel_zeros = _readonly(grid.zeros)
        self._r = _readonly(grid.r)
        self._k = _readonly(grid.k)
        self._j1sq = _readonly(grid.j1sq)
        self._scale_r = _readonly(grid.scale_r)
        self._scale_k = _readonly(grid.scale_k)
        self._T = _readonly(construct_qdsht_matrix(grid, p, n))

        self.logger.info(
            "Initialized %s with nr=%d, rmax=%g, p=%g, n=%d, dim=%d",
            self.__class__.__name__, nr, rmax, p, n, self._dim,
        )
        self.logger.debug("kmax=%g, jN=%g, matrix shape %s", self._kmax, self._jN, self._T.shape)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(nr={self._nr}, rmax={self._rmax}, p={self._p}, n={self._n}, dim={self._dim})"

    def _resampled(self, nr: int) -> "QDSHT":
        """Same transform (order, dimension, aperture, axis) with ``nr`` samples."""
        return QDSHT(nr, self._rmax, p=self._p, n=self._n, dim=self._dim, loglevel=self.logger.level)

    # -------------------------------
    # Properties
    # -------------------------------

    @property
    def p(self) -> float:
        """Order of the transform."""
        return self._p

    @property
    def n(self) -> int:
        """Spherical dimension (``1`` for the cylindrical case)."""
        return self._n

    @property
    def nr(self) -> int:
        """Number of radial grid points."""
        return self._nr

    @property
    def dim(self) -> int:
        """Array axis along which the transform acts."""
        return self._dim

    @property
    def rmax(self) -> float:
        """Aperture radius :math:`R`."""
        return self._rmax

    @property
    def r(self) -> np.ndarray:
        r"""Real-space grid :math:`r_1 < \dots < r_N < R` (read-only)."""
        return self._r

    @property
    def k(self) -> np.ndarray:
        r"""Spatial-frequency grid :math:`k_1 < \dots < k_N < K` (read-only)."""
        return self._k

    @property
    def kmax(self) -> float:
        """Highest spatial frequency :math:`K = S / R`."""
        return self._kmax

    @property
    def T(self) -> np.ndarray:
        """Transform matrix (read-only)."""
        return self._T

    @property
    def j1sq(self) -> np.ndarray:
        r"""Squared weights :math:`|j_{p+1}^n(z_i)|^2` (read-only)."""
        return self._j1sq

    @property
    def scale_r(self) -> np.ndarray:
        """Real-space integration weights (read-only)."""
        return self._scale_r

    @property
    def scale_k(self) -> np.ndarray:
        """Frequency-space integration weights (read-only)."""
        return self._scale_k

    @property
    def cn(self) -> float:
        r"""Normalization constant :math:`c_n` of :math:`j_p^n`."""
        return self._cn

    @property
    def forward_scale(self) -> float:
        r"""Scalar applied after :math:`T` in :meth:`ht`, :math:`(R/K)^{(n+1)/2}`."""
        return (self._rmax / self._kmax) ** ((self._n + 1) / 2)

    @property
    def inverse_scale(self) -> float:
        r"""Scalar applied after :math:`T` in :meth:`iht`, :math:`(K/R)^{(n+1)/2}`."""
        return (self._kmax / self._rmax) ** ((self._n + 1) / 2)

    # -------------------------------
    # User-facing API
    # -------------------------------

    def hankel_matrix(self) -> np.ndarray:
        """Return a writable copy of the transform matrix."""
        return self._T.copy()

    def bessel_zeros(self) -> np.ndarray:
        r"""
        Return the zeros of :math:`j_p^n` the grid is built from.

        Returns
        -------
        np.ndarray
            Copy of the first :math:`N` zeros.
        """
        return self._bessel_zeros.copy()

    def set_loglevel(self, loglevel: LogLevel) -> None:
        """Adjust the transform's logging verbosity at runtime."""
        set_log_level(self.logger, loglevel)
        self.logger.info("Log level changed to %s", get_level_name(self.logger.level))

    # -------------------------------
    # Core transform routines
    # -------------------------------

    def _new_output(self, A: np.ndarray) -> np.ndarray:
        return np.empty(A.shape, dtype=np.result_type(self._T.dtype, A.dtype))

    def ht_into(self, out: np.ndarray, A: np.ndarray) -> np.ndarray:
        """
        Forward transform of ``A`` along :attr:`dim`, written into ``out``.

        ``out`` must have the shape of ``A`` and a dtype able to hold the
        result. ``out`` is returned.

        Raises
        ------
        ShapeMismatchError
            If ``A.shape[dim] != nr`` or ``out.shape != A.shape``.
        InvalidAxisError
            If :attr:`dim` is not a valid axis of ``A``.
        """
        dot_into(out, self._T, np.asarray(A), dim=self._dim)
        out *= self.forward_scale
        return out

    def iht_into(self, out: np.ndarray, A: np.ndarray) -> np.ndarray:
        """Inverse transform of ``A`` along :attr:`dim`, written into ``out``. See :meth:`ht_into`."""
        dot_into(out, self._T, np.asarray(A), dim=self._dim)
        out *= self.inverse_scale
        return out

    def ht(self, A: np.ndarray) -> np.ndarray:
        r"""
        Compute the **forward** transform.

        Transforms samples :math:`f(r_j)` to spectral samples :math:`F(k_i)`:

        .. math::

            F(k_i) = \left(\frac{R}{K}\right)^{(n+1)/2}
                \sum_{j=1}^{N} T_{ij} f(r_j).

        Parameters
        ----------
        A : np.ndarray
            Real or complex samples at ``r`` along axis :attr:`dim`.

        Returns
        -------
        np.ndarray
            Spectral samples at ``k``, same shape as ``A``.

        Examples
        --------
        >>> q = QDSHT(64, rmax=5.0)
        >>> F = q.ht(np.exp(-q.r**2))
        """
        A = np.asarray(A)
        return self.ht_into(self._new_output(A), A)

    def iht(self, A: np.ndarray) -> np.ndarray:
        r"""
        Compute the **inverse** transform.

        .. math::

            f(r_i) = \left(\frac{K}{R}\right)^{(n+1)/2}
                \sum_{j=1}^{N} T_{ij} F(k_j).

        Parameters
        ----------
        A : np.ndarray
            Spectral samples at ``k`` along axis :attr:`dim`.

        Returns
        -------
        np.ndarray
            Real-space samples at ``r``, same shape as ``A``.
        """
        A = np.asarray(A)
        return self.iht_into(self._new_output(A), A)

    def integrate_r(self, A: np.ndarray, dim: Union[int, None] = None):
        """Shorthand for :func:`integrate_r` with this transform."""
        return integrate_r(A, self, dim=dim)

    def integrate_k(self, A: np.ndarray, dim: Union[int, None] = None):
        """Shorthand for :func:`integrate_k` with this transform."""
        return integrate_k(A, self, dim=dim)


class QDHT(QDSHT):
    r"""
    Quasi-discrete Hankel transform of order :math:`p` (cylindrical symmetry).

    This is the :math:`n = 1` case of :class:`QDSHT`: the kernel is the
    ordinary Bessel function :math:`J_p` and the grids come from its zeros,

    .. math::

        r_i = \frac{j_i}{j_{N+1}}\,R, \qquad
        k_i = \frac{j_i}{R}.

    The forward transform is :math:`F = (R/K)\, T f` with
    :math:`R/K = R^2 / j_{N+1}` (:attr:`scale_rk`).

    Parameters
    ----------
    nr : int
        Number of radial sample points (≥ 1).
    rmax : float, optional
        Aperture radius. Default is ``1.0``.
    p : float, optional
        Transform order (≥ 0). Default is ``0``.
    dim : int, optional
        Array axis along which the transform acts. Default is ``0``.
    loglevel : str or int, optional
        Logging level. Default is ``'WARNING'``.

    Examples
    --------
    >>> q = QDHT(50, rmax=2.0)
    >>> a = 4
    >>> F = q.ht(np.exp(-(a**2) * q.r**2))
    >>> np.allclose(F, np.exp(-q.k**2 / (4 * a**2)) / (2 * a**2))
    True
    """

    def __init__(
        self,
        nr: int,
        rmax: float = 1.0,
        p: float = 0,
        dim: int = 0,
        loglevel: LogLevel = "WARNING",
    ) -> None:
        super().__init__(nr, rmax, p=p, n=1, dim=dim, loglevel=loglevel)

    def __repr__(self) -> str:
        return f"QDHT(nr={self._nr}, rmax={self._rmax}, p={self._p}, dim={self._dim})"

    def _resampled(self, nr: int) -> "QDHT":
        return QDHT(nr, self._rmax, p=self._p, dim=self._dim, loglevel=self.logger.level)

    @property
    def scale_rk(self) -> float:
        r"""Forward scale factor :math:`R / K = R^2 / j_{N+1}`."""
        return self._rmax / self._kmax


# -------------------------------
# Integrals and resampling
# -------------------------------


def integrate_r(A: np.ndarray, Q: QDSHT, dim: Union[int, None] = None):
    r"""
    Radial integral of ``A`` over the aperture of ``Q`` in real space.

    If ``A`` holds samples of :math:`f(r)` at ``Q.r``, this approximates

    .. math::

        \int_0^\infty f(r)\, r^n\, dr.

    Parameters
    ----------
    A : np.ndarray
        Samples at ``Q.r`` along axis ``dim``.
    Q : QDSHT
        Transform providing the integration weights.
    dim : int, optional
        Axis to integrate over. Defaults to ``Q.dim``.

    Returns
    -------
    np.ndarray or scalar
        ``A`` reduced along ``dim`` (kept with length 1), or a scalar when
        ``A`` is 1-D.

    Notes
    -----
    ``integrate_r`` and :func:`integrate_k` satisfy Parseval's theorem:
    ``integrate_r(abs(A)**2, Q)`` equals ``integrate_k(abs(Q.ht(A))**2, Q)``,
    but ``integrate_r(A, Q)`` and ``integrate_k(Q.ht(A), Q)`` are **not**
    equal. Integrating a function itself (rather than its squared
    magnitude) is only accurate for the order-0 transform.

    Examples
    --------
    >>> q = QDSHT(128, rmax=10.0)
    >>> A = np.exp(-q.r**2 / 2)
    >>> np.isclose(integrate_r(np.abs(A)**2, q), np.sqrt(np.pi) / 4)
    True
    """
    dim = Q.dim if dim is None else dim
    return dimdot(Q.scale_r, A, dim=dim)


def integrate_k(A: np.ndarray, Q: QDSHT, dim: Union[int, None] = None):
    r"""
    Radial integral of ``A`` over the aperture of ``Q`` in frequency space.

    If ``A`` holds samples of :math:`F(k)` at ``Q.k``, this approximates
    :math:`\int_0^\infty F(k)\, k^n\, dk`. See :func:`integrate_r`.
    """
    dim = Q.dim if dim is None else dim
    return dimdot(Q.scale_k, A, dim=dim)


def oversample(Q: QDSHT, factor: int = 4) -> QDSHT:
    """
    Return a transform like ``Q`` with ``factor`` times as many samples.

    Order, spherical dimension, aperture and axis are kept; only the grid
    and matrix are rebuilt. No data is resampled. ``factor == 1`` returns
    ``Q`` itself.

    Raises
    ------
    TypeError
        If ``factor`` is not an integer.
    ValueError
        If ``factor < 1``.
    """
    if not isinstance(factor, (int, np.integer)) or isinstance(factor, bool):
        raise TypeError(f"factor must be an integer, it is {factor!r}")
    if factor < 1:
        raise ValueError(f"factor must be ≥ 1, it is {factor}")
    if factor == 1:
        return Q
    Q.logger.debug("Oversampling nr=%d by factor %d", Q.nr, factor)
    return Q._resampled(int(factor) * Q.nr)


def onaxis(Ak: np.ndarray, Q: QDSHT, dim: Union[int, None] = None):
    r"""
    Real-space value on axis (:math:`r = 0`) of a function given by its transform.

    The real-space nodes never include the origin. Evaluating the inverse
    transform sum at :math:`r = 0` gives

    .. math::

        f(0) = \frac{j_p^n(0)}{c_n} \sum_i s^K_i F(k_i),

    which vanishes for :math:`p \neq 0`.

    Parameters
    ----------
    Ak : np.ndarray
        Spectral samples (e.g. ``Q.ht(A)``).
    Q : QDSHT
        Transform the samples belong to.
    dim : int, optional
        Transform axis of ``Ak``. Defaults to ``Q.dim``.

    Returns
    -------
    np.ndarray or scalar
        On-axis value(s), reduced along ``dim`` like :func:`integrate_k`.
    """
    return sphbesselj(Q.p, Q.n, 0.0) / sphbesselj_scale(Q.n) * integrate_k(Ak, Q, dim=dim)


def symmetric(A: np.ndarray, Q: QDSHT) -> np.ndarray:
    """
    Mirror real-space samples ``A`` about the axis, including the on-axis value.

    Along ``Q.dim`` the result has length ``2 * Q.nr + 1``: ``A`` reversed,
    the value at :math:`r = 0` (see :func:`onaxis`), then ``A``. It matches
    the grid from :func:`r_symmetric`.
    """
    A = np.asarray(A)
    _, unew = mirror_grid(Q.r, A, u0=onaxis(Q.ht(A), Q), axis=Q.dim)
    return unew


def r_symmetric(Q: QDSHT) -> np.ndarray:
    """Symmetric real-space grid ``[-r[::-1], 0, r]`` of length ``2 * Q.nr + 1``."""
    rnew, _ = mirror_grid(Q.r)
    return rnew
