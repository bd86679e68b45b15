"""Comprehensive tests for the QDHT and QDSHT transforms."""
import numpy as np
import pytest
import scipy.special as sp
from pyhankel.transforms import (
    QDHT,
    QDSHT,
    integrate_k,
    integrate_r,
    onaxis,
    oversample,
    r_symmetric,
    symmetric,
)
from pyhankel.util.exceptions import InvalidAxisError, ShapeMismatchError
from testing_util import random_shape


# ============================================================================
# Basic Accuracy Tests
# ============================================================================

def test_hankel_gaussian():
    """Test QDHT accuracy for Gaussian function."""
    ht = QDHT(nr=50, rmax=2.0)
    a = 4

    # f(r) = exp(-a^2 * r^2)
    # Hankel transform: G(k) = exp(-k^2 / (4*a^2)) / (2*a^2)
    f1 = np.exp(-(a**2) * ht.r**2)
    fsp1_ex = np.exp(-ht.k**2 / (4 * a**2)) / (2 * a**2)
    fsp1 = ht.ht(f1)

    error1 = np.linalg.norm(fsp1 - fsp1_ex) / np.linalg.norm(fsp1_ex)
    assert error1 < 1e-10


def test_hankel_modulated_gaussian():
    """Test QDHT for modulated Gaussian."""
    ht = QDHT(nr=50, rmax=4.0)

    sigma = 2
    w = 0.5

    # f(r) = exp(-sigma * r^2) * sin(w * r^2)
    f2 = np.exp(-sigma * ht.r**2) * np.sin(w * ht.r**2)

    omega = 1.0 / (4 * (sigma**2 + w**2))
    fsp2_ex = (
        -2
        * omega
        * np.exp(-sigma * omega * ht.k**2)
        * (-w * np.cos(w * omega * ht.k**2) + sigma * np.sin(w * omega * ht.k**2))
    )
    fsp2 = ht.ht(f2)

    error2 = np.linalg.norm(fsp2 - fsp2_ex) / np.linalg.norm(fsp2_ex)
    assert error2 < 1e-10


def test_hankel_exponential():
    """Test QDHT for exponential decay."""
    ht = QDHT(nr=25, rmax=3.0)

    a = 4
    # f(r) = exp(-a * r)
    # Hankel transform: G(k) = a / (a^2 + k^2)^(3/2)
    f3 = np.exp(-a * ht.r)
    fsp3_ex = a * np.power(a**2 + ht.k**2, -3.0 / 2)
    fsp3 = ht.ht(f3)

    error3 = np.linalg.norm(fsp3 - fsp3_ex) / np.linalg.norm(fsp3_ex)
    assert error3 < 1e-2


def test_first_order_gaussian():
    """Order-1 transform of r exp(-r^2) is k exp(-k^2 / 4) / 4."""
    ht = QDHT(nr=128, rmax=8.0, p=1)
    f = ht.r * np.exp(-ht.r**2)
    expected = ht.k * np.exp(-ht.k**2 / 4) / 4
    error = np.linalg.norm(ht.ht(f) - expected) / np.linalg.norm(expected)
    assert error < 1e-9


def test_spherical_gaussian_self_reciprocal():
    """In 3-D (n = 2) exp(-r^2 / 2) transforms to exp(-k^2 / 2)."""
    q = QDSHT(nr=128, rmax=10.0)
    f = np.exp(-q.r**2 / 2)
    expected = np.exp(-q.k**2 / 2)
    error = np.linalg.norm(q.ht(f) - expected) / np.linalg.norm(expected)
    assert error < 1e-9


def test_qdsht_cylindrical_matches_qdht():
    """QDSHT with n = 1 is the QDHT."""
    q1 = QDSHT(nr=32, rmax=3.0, p=1, n=1)
    q2 = QDHT(nr=32, rmax=3.0, p=1)
    assert np.allclose(q1.T, q2.T)
    assert np.allclose(q1.r, q2.r)
    f = np.exp(-q1.r**2)
    assert np.allclose(q1.ht(f), q2.ht(f))
    assert np.isclose(q2.scale_rk, q2.forward_scale)


# ============================================================================
# Round trip
# ============================================================================

@pytest.mark.parametrize("p,n", [(0, 1), (1, 1), (0, 2), (1, 2), (2, 3), (0.5, 4)])
def test_inverse_transform_identity(p, n):
    """Test that iht(ht(f)) ≈ f for smooth functions."""
    q = QDSHT(nr=64, rmax=8.0, p=p, n=n)
    f = q.r**p * np.exp(-q.r**2)
    f_recovered = q.iht(q.ht(f))
    error = np.linalg.norm(f_recovered - f) / np.linalg.norm(f)
    assert error < 1e-9


@pytest.mark.parametrize("ndim", [1, 2, 3])
def test_round_trip_batched(ndim):
    """Round trip holds for stacks of profiles along either axis."""
    rng = np.random.default_rng(2024)
    nr = 64
    for dim in range(min(ndim, 2)):
        q = QDSHT(nr=nr, rmax=10.0, p=1, n=2, dim=dim)
        shape = random_shape(ndim, dim, nr, other=5)
        profile_shape = [1] * ndim
        profile_shape[dim] = nr
        r = q.r.reshape(profile_shape)
        width = rng.uniform(0.5, 2.0, size=shape)
        width = np.take(width, [0], axis=dim)
        A = r * np.exp(-((r / width) ** 2)) * rng.standard_normal(width.shape)
        A2 = q.iht(q.ht(A))
        assert A2.shape == A.shape == shape
        assert np.linalg.norm(A2 - A) / np.linalg.norm(A) < 1e-9


def test_forward_inverse_spectral_space():
    """Test that ht(iht(G)) ≈ G starting from spectral space."""
    ht = QDHT(nr=30, rmax=3.0)
    G_original = np.exp(-0.5 * ht.k**2)
    G_reconstructed = ht.ht(ht.iht(G_original))
    error = np.linalg.norm(G_reconstructed - G_original) / np.linalg.norm(G_original)
    assert error < 1e-10


def test_round_trip_complex():
    q = QDSHT(nr=48, rmax=8.0, p=0, n=3)
    A = np.exp(-q.r**2 / 2) * np.exp(1j * q.r)
    Ak = q.ht(A)
    assert np.iscomplexobj(Ak)
    assert np.allclose(q.iht(Ak), A, rtol=1e-9, atol=1e-9)


def test_sequential_transforms():
    """Test multiple sequential transforms maintain consistency."""
    ht = QDHT(nr=30, rmax=3.0)
    f0 = np.exp(-ht.r**2)
    f = f0.copy()
    for _ in range(5):
        f = ht.iht(ht.ht(f))
    error = np.linalg.norm(f - f0) / np.linalg.norm(f0)
    assert error < 1e-8


def test_transform_zero_function():
    ht = QDHT(nr=20, rmax=3.0)
    G = ht.ht(np.zeros(20))
    assert np.allclose(G, 0.0)
    assert np.allclose(ht.iht(G), 0.0)


def test_batched_transform_matches_columns():
    """Transforming a stack of profiles equals transforming each one."""
    rng = np.random.default_rng(0)
    q = QDSHT(nr=32, rmax=4.0, dim=1)
    A = rng.standard_normal((6, 32))
    Ak = q.ht(A)
    q0 = QDSHT(nr=32, rmax=4.0)
    for i in range(6):
        assert np.allclose(Ak[i], q0.ht(A[i]))


# ============================================================================
# Buffer variants
# ============================================================================

def test_ht_into_and_iht_into():
    q = QDSHT(nr=16, rmax=2.0, p=1, dim=1)
    A = np.random.default_rng(1).standard_normal((3, 16, 2))
    out = np.empty_like(A)
    assert q.ht_into(out, A) is out
    assert np.allclose(out, q.ht(A))
    back = np.empty_like(A)
    q.iht_into(back, out)
    assert np.allclose(back, q.iht(out))


def test_ht_into_shape_mismatch():
    q = QDSHT(nr=16, rmax=2.0)
    with pytest.raises(ShapeMismatchError):
        q.ht_into(np.empty(15), np.ones(16))
    with pytest.raises(ShapeMismatchError):
        q.ht(np.ones(15))


def test_transform_invalid_axis():
    q = QDSHT(nr=16, rmax=2.0, dim=1)
    with pytest.raises(InvalidAxisError):
        q.ht(np.ones(16))
    with pytest.raises(InvalidAxisError):
        QDSHT(nr=16, rmax=2.0, dim=0.5)


# ============================================================================
# Integrals
# ============================================================================

@pytest.mark.parametrize("n", [1, 2, 3, 4])
def test_integrate_r_gaussian(n):
    """integrate_r of exp(-r^2) approximates Gamma((n+1)/2) / 2."""
    q = QDSHT(nr=128, rmax=10.0, n=n)
    A = np.exp(-q.r**2 / 2)
    expected = sp.gamma((n + 1) / 2) / 2
    assert np.isclose(integrate_r(np.abs(A) ** 2, q), expected, rtol=1e-9)


def test_integrate_r_calibration_sqrt_pi():
    q = QDSHT(128, rmax=10.0)
    A = np.exp(-q.r**2 / 2)
    assert np.isclose(integrate_r(np.abs(A) ** 2, q), np.sqrt(np.pi) / 4)
    assert np.isclose(integrate_k(np.abs(q.ht(A)) ** 2, q), np.sqrt(np.pi) / 4)


@pytest.mark.parametrize("p,n", [(0, 1), (1, 1), (3, 1), (0, 2), (1, 2), (2, 3), (1.5, 4)])
def test_parseval(p, n):
    """Parseval: squared-magnitude integrals agree in real and frequency space."""
    q = QDSHT(nr=64, rmax=10.0, p=p, n=n)
    envelope = q.r**p * np.exp(-q.r**2 / 2)
    for A in (envelope * np.cos(q.r), envelope * np.exp(1j * q.r**2 / 4)):
        Er = integrate_r(np.abs(A) ** 2, q)
        Ek = integrate_k(np.abs(q.ht(A)) ** 2, q)
        assert np.isclose(Er, Ek, rtol=1e-9)


def test_integrate_multidimensional():
    rng = np.random.default_rng(3)
    q = QDSHT(nr=32, rmax=5.0, dim=1)
    A = rng.standard_normal((4, 32, 3))
    Er = integrate_r(A, q)
    assert Er.shape == (4, 1, 3)
    for i in range(4):
        for j in range(3):
            assert np.isclose(Er[i, 0, j], integrate_r(A[i, :, j], q, dim=0))
    # explicit axis overrides q.dim
    B = np.moveaxis(A, 1, 2)
    assert np.allclose(integrate_r(B, q, dim=2)[..., 0], Er[:, 0, :])


def test_integrate_methods():
    q = QDSHT(nr=16, rmax=2.0)
    A = np.exp(-q.r**2)
    assert q.integrate_r(A) == integrate_r(A, q)
    assert q.integrate_k(A) == integrate_k(A, q)


# ============================================================================
# Oversampling
# ============================================================================

def test_oversample_factor_one_is_identity():
    q = QDSHT(nr=16, rmax=2.0, p=1, n=3)
    assert oversample(q, factor=1) is q


@pytest.mark.parametrize("cls,kwargs", [(QDSHT, {"p": 1, "n": 3, "dim": 1}), (QDHT, {"p": 2, "dim": 1})])
def test_oversample(cls, kwargs):
    q = cls(16, rmax=2.5, **kwargs)
    qo = oversample(q, factor=3)
    assert type(qo) is cls
    assert qo.nr == 48
    assert qo.rmax == q.rmax
    assert qo.p == q.p
    assert qo.n == q.n
    assert qo.dim == q.dim
    assert qo.T.shape == (48, 48)
    assert qo.r[-1] < q.rmax


def test_oversample_default_factor():
    q = QDHT(8, rmax=1.0)
    assert oversample(q).nr == 32


def test_oversample_invalid_factor():
    q = QDHT(8, rmax=1.0)
    with pytest.raises(ValueError):
        oversample(q, factor=0)
    with pytest.raises(TypeError):
        oversample(q, factor=2.0)


# ============================================================================
# On-axis value and symmetric arrays
# ============================================================================

@pytest.mark.parametrize("cls,kwargs", [(QDHT, {}), (QDSHT, {"n": 2}), (QDSHT, {"n": 3})])
def test_onaxis_gaussian(cls, kwargs):
    q = cls(128, rmax=10.0, **kwargs)
    A = np.exp(-q.r**2 / 2)
    assert np.isclose(onaxis(q.ht(A), q), 1.0)


def test_onaxis_nonzero_order():
    q = QDHT(32, rmax=5.0, p=1)
    A = q.r * np.exp(-q.r**2)
    assert onaxis(q.ht(A), q) == 0


def test_symmetric():
    q = QDSHT(64, rmax=8.0)
    A = np.exp(-q.r**2 / 2)
    As = symmetric(A, q)
    rs = r_symmetric(q)
    assert As.shape == (129,)
    assert rs.shape == (129,)
    assert rs[64] == 0
    assert np.allclose(As, np.exp(-rs**2 / 2))


def test_symmetric_multidimensional():
    q = QDSHT(32, rmax=8.0, dim=1)
    A = np.exp(-q.r**2 / 2)[None, :] * np.array([[1.0], [2.0]])
    As = symmetric(A, q)
    assert As.shape == (2, 65)
    assert np.allclose(As[1], 2 * As[0])
    assert np.isclose(As[1, 32], 2.0)


# ============================================================================
# Matrix and Grid Accessor Tests
# ============================================================================

def test_hankel_matrix_accessor():
    ht = QDHT(nr=12, rmax=2.0)
    Y = ht.hankel_matrix()
    assert Y.shape == (12, 12)
    Y[0, 0] = 999.0
    assert ht.hankel_matrix()[0, 0] != 999.0
    assert np.all(np.isfinite(Y))


def test_bessel_zeros_accessor():
    ht = QDHT(nr=10, rmax=2.0)
    zeros = ht.bessel_zeros()
    assert zeros.shape == (10,)
    zeros[0] = -999.0
    zeros_internal = ht.bessel_zeros()
    assert zeros_internal[0] != -999.0
    assert np.all(np.diff(zeros_internal) > 0)
    # First zero of J_0 is approximately 2.4048
    assert np.abs(zeros_internal[0] - 2.4048) < 0.001


def test_hankel_matrix_consistency():
    """Test that the matrix is used consistently in transforms."""
    ht = QDHT(nr=16, rmax=3.0)
    Y = ht.hankel_matrix()
    f = np.exp(-ht.r**2)
    S = ht.rmax * ht.kmax
    G_manual = ht.rmax**2 / S * Y.dot(f)
    assert np.allclose(G_manual, ht.ht(f), rtol=1e-12)


def test_transform_is_immutable():
    q = QDSHT(nr=8, rmax=1.0)
    for arr in (q.r, q.k, q.T, q.j1sq, q.scale_r, q.scale_k):
        with pytest.raises(ValueError):
            arr[0] = 1.0
    with pytest.raises(AttributeError):
        q.nr = 16
    with pytest.raises(AttributeError):
        q.rmax = 2.0


# ============================================================================
# Edge Cases and Validation
# ============================================================================

def test_hankel_transform_minimum_size():
    ht = QDHT(nr=1, rmax=1.0)
    assert ht.r.shape == (1,)
    assert ht.T.shape == (1, 1)
    assert ht.ht(np.ones(1)).shape == (1,)


def test_hankel_transform_invalid_construction():
    with pytest.raises(ValueError):
        QDHT(nr=0, rmax=1.0)
    with pytest.raises(ValueError):
        QDHT(nr=-5, rmax=1.0)
    with pytest.raises(ValueError):
        QDHT(nr=10, rmax=0.0)
    with pytest.raises(ValueError):
        QDHT(nr=10, rmax=-1.0)
    with pytest.raises(ValueError):
        QDSHT(nr=10, rmax=1.0, n=0)
    with pytest.raises(TypeError):
        QDSHT(nr=10.5, rmax=1.0)


def test_integer_radius():
    q = QDSHT(16, rmax=3)
    assert isinstance(q.rmax, np.floating)
    assert np.allclose(q.r, QDSHT(16, rmax=3.0).r)


@pytest.mark.parametrize("radius", [np.longdouble(2.0), np.float32(2.0)])
def test_radius_of_other_float_types(radius):
    """Radii of any floating type are normalized to float64."""
    q = QDSHT(8, rmax=radius)
    reference = QDSHT(8, rmax=2.0)
    assert q.rmax.dtype == np.float64
    assert q.r.dtype == np.float64
    assert q.T.dtype == np.float64
    assert np.array_equal(q.r, reference.r)
    assert np.array_equal(q.T, reference.T)
    f = np.exp(-q.r**2)
    assert np.allclose(q.iht(q.ht(f)), f)


def test_grid_relationship():
    """Test the relationship between r and k grids."""
    ht = QDHT(nr=20, rmax=5.0)
    assert len(ht.r) == len(ht.k)
    assert np.all(np.diff(ht.r) > 0)
    assert np.all(np.diff(ht.k) > 0)
    # k should scale inversely with rmax
    ht2 = QDHT(nr=20, rmax=10.0)
    assert np.allclose(ht.k, 2 * ht2.k, rtol=1e-10)
    assert np.isclose(ht.kmax * ht.rmax, ht2.kmax * ht2.rmax)


def test_repr():
    assert repr(QDSHT(4, rmax=1.0, p=1, n=3)) == "QDSHT(nr=4, rmax=1.0, p=1, n=3, dim=0)"
    assert repr(QDHT(4, rmax=2.0)) == "QDHT(nr=4, rmax=2.0, p=0, dim=0)"


def test_transform_logging(caplog):
    with caplog.at_level("INFO", logger="pyhankel.QDHT"):
        QDHT(8, rmax=1.0, loglevel="INFO")
    assert "Initialized QDHT" in caplog.text
