r"""
Batched linear algebra along one axis of an N-dimensional array
===============================================================

Every transform and every radial integral in :mod:`pyhankel` is a dense
matrix (or a weight vector) applied along a single axis of an array whose
other axes are independent batch axes. Conceptually this is

.. code-block:: python

    for idx in all index combinations of the other axes:
        out[idx, :, ...] = M @ V[idx, :, ...]

but looping a matrix-vector product per slice is slow. The routines here
move the working axis to the front, pick the largest remaining axis as
the second one, and apply ``M`` with matrix-matrix products instead.

Contents
--------

- :func:`normalize_axis` — Validate an axis index against an array rank
- :func:`dot` / :func:`dot_into` — Apply a square matrix along one axis
- :func:`dimdot` / :func:`dimdot_into` — Weighted reduction along one axis
- :func:`squeeze` — Drop a length-1 axis, passing scalars through
"""

from typing import Tuple, Union
import numpy as np

from .util.exceptions import InvalidAxisError, ShapeMismatchError


def normalize_axis(dim: int, ndim: int) -> int:
    """
    Map ``dim`` (negative values count from the end) into ``[0, ndim)``.

    Raises
    ------
    InvalidAxisError
        If ``dim`` is not an integer or falls outside the array's axes.
    """
    if not isinstance(dim, (int, np.integer)) or isinstance(dim, bool):
        raise InvalidAxisError(f"axis must be an integer, it is {dim!r}")
    if not -ndim <= dim < ndim:
        raise InvalidAxisError(f"Cannot operate along axis {dim} of {ndim}-D array")
    return int(dim) % ndim


def _check_dot_args(out: np.ndarray, M: np.ndarray, V: np.ndarray, dim: int) -> int:
    if V.ndim == 0:
        raise InvalidAxisError("Cannot multiply along an axis of a 0-D array")
    dim = normalize_axis(dim, V.ndim)
    if M.ndim != 2 or M.shape[0] != M.shape[1]:
        raise ShapeMismatchError(f"M must be a square matrix, its shape is {M.shape}")
    if V.shape[dim] != M.shape[0]:
        raise ShapeMismatchError(
            f"Size of V along axis {dim} ({V.shape[dim]}) must be same as size of M ({M.shape[0]})"
        )
    if out.shape != V.shape:
        raise ShapeMismatchError(f"Input and output arrays must have same shape, got {V.shape} and {out.shape}")
    return dim


def _result_dtype(M: np.ndarray, V: np.ndarray) -> np.dtype:
    return np.result_type(M.dtype, V.dtype)


def _dot_slices(out: np.ndarray, M: np.ndarray, V: np.ndarray) -> None:
    """Apply ``M`` to every 2-D slice ``V[:, :, *hi]`` with the working axis first."""
    if V.ndim == 2:
        np.matmul(M, V, out=out)
        return
    if V.flags.c_contiguous and out.flags.c_contiguous:
        # both reshape to (m, rest) views, so one product covers every slice
        m = V.shape[0]
        np.matmul(M, V.reshape(m, -1), out=out.reshape(m, -1))
        return
    for hi in np.ndindex(*V.shape[2:]):
        idx = (slice(None), slice(None)) + hi
        np.matmul(M, V[idx], out=out[idx])


def _front_permutation(shape: Tuple[int, ...], dim: int) -> Tuple[int, ...]:
    """Permutation moving ``dim`` to the front and the largest other axis second."""
    others = [d for d in range(len(shape)) if d != dim]
    # stable sort keeps the original order among axes of equal extent
    others.sort(key=lambda d: shape[d], reverse=True)
    return (dim, *others)


def dot_into(out: np.ndarray, M: np.ndarray, V: np.ndarray, dim: int = 0) -> np.ndarray:
    r"""
    Multiply the square matrix ``M`` along axis ``dim`` of ``V``, writing into ``out``.

    Equivalent to iterating over all axes of ``V`` other than ``dim`` and
    setting each 1-D slice of ``out`` to ``M @ slice``, but implemented with
    matrix-matrix products. When ``dim == 0`` and ``out`` is C-contiguous
    no temporary arrays are allocated.

    Parameters
    ----------
    out : np.ndarray
        Output buffer with exactly the shape of ``V``. Its dtype must be able
        to hold the result (e.g. complex when ``V`` is complex).
    M : np.ndarray, shape (m, m)
        Dense operator.
    V : np.ndarray
        Array of rank ≥ 1 with ``V.shape[dim] == m``.
    dim : int, optional
        Working axis. Default is ``0``.

    Returns
    -------
    np.ndarray
        ``out``, for chaining.

    Raises
    ------
    ShapeMismatchError
        If ``V.shape[dim] != m`` or ``out.shape != V.shape``.
    InvalidAxisError
        If ``dim`` is not a valid axis of ``V``.
    """
    dim = _check_dot_args(out, M, V, dim)

    if V.ndim == 1:
        np.matmul(M, V, out=out)
    elif V.ndim == 2:
        if dim == 0:
            np.matmul(M, V, out=out)
        else:
            # (M @ V.T).T == V @ M.T, written straight into out
            np.matmul(V, M.T, out=out)
    elif dim == 0:
        _dot_slices(out, M, V)
    else:
        perm = _front_permutation(V.shape, dim)
        iperm = tuple(np.argsort(perm))
        Vtmp = np.transpose(V, perm)
        tmp = np.empty(Vtmp.shape, dtype=_result_dtype(M, V))
        _dot_slices(tmp, M, Vtmp)
        out[...] = np.transpose(tmp, iperm)
    return out


def dot(M: np.ndarray, V: np.ndarray, dim: int = 0) -> np.ndarray:
    """
    Multiply the square matrix ``M`` along axis ``dim`` of ``V``.

    Non-mutating form of :func:`dot_into`; the result has the shape of
    ``V`` and the promoted dtype of ``M`` and ``V``.

    Examples
    --------
    >>> M = np.diag([1.0, 2.0, 3.0])
    >>> V = np.ones((2, 3))
    >>> dot(M, V, dim=1)
    array([[1., 2., 3.],
           [1., 2., 3.]])
    """
    M = np.asarray(M)
    V = np.asarray(V)
    out = np.empty(V.shape, dtype=_result_dtype(M, V))
    return dot_into(out, M, V, dim=dim)


def _check_dimdot_args(v: np.ndarray, A: np.ndarray, dim: int) -> int:
    if A.ndim == 0:
        raise InvalidAxisError("Cannot reduce along an axis of a 0-D array")
    dim = normalize_axis(dim, A.ndim)
    if v.ndim != 1 or v.shape[0] != A.shape[dim]:
        raise ShapeMismatchError(
            f"v must be a vector of length {A.shape[dim]} (size of A along axis {dim}), its shape is {v.shape}"
        )
    return dim


def dimdot_into(out: np.ndarray, v: np.ndarray, A: np.ndarray, dim: int = 0) -> np.ndarray:
    r"""
    Weighted sum of ``A`` along ``dim`` with weights ``v``, written into ``out``.

    ``out`` must have the shape of ``A`` with axis ``dim`` set to 1.

    Raises
    ------
    ShapeMismatchError
        If ``len(v) != A.shape[dim]`` or ``out`` has the wrong shape.
    InvalidAxisError
        If ``dim`` is not a valid axis of ``A``.
    """
    dim = _check_dimdot_args(v, A, dim)
    reduced = list(A.shape)
    reduced[dim] = 1
    if out.shape != tuple(reduced):
        raise ShapeMismatchError(f"Output array must have shape {tuple(reduced)}, got {out.shape}")

    # one vector-matrix product over all other axes collapsed into a single block
    A_front = np.moveaxis(A, dim, 0)
    flat = v @ A_front.reshape(A.shape[dim], -1)
    out[...] = np.expand_dims(flat.reshape(A_front.shape[1:]), dim)
    return out


def dimdot(v: np.ndarray, A: np.ndarray, dim: int = 0) -> Union[np.ndarray, np.generic]:
    r"""
    Dot the vector ``v`` against axis ``dim`` of ``A``.

    For every index combination of the other axes this computes
    :math:`\sum_i v_i A_{\ldots, i, \ldots}`. The reduced axis is kept with
    length 1 so the result broadcasts against ``A``; a 1-D ``A`` gives a
    scalar.

    Parameters
    ----------
    v : np.ndarray
        Weight vector of length ``A.shape[dim]``.
    A : np.ndarray
        Array of rank ≥ 1.
    dim : int, optional
        Axis to reduce. Default is ``0``.

    Returns
    -------
    np.ndarray or scalar
        Reduced array of shape ``A.shape`` with ``shape[dim] == 1``, or a
        scalar when ``A`` is 1-D.

    Examples
    --------
    >>> A = np.arange(6.0).reshape(2, 3)
    >>> dimdot(np.ones(3), A, dim=1)
    array([[ 3.],
           [12.]])
    >>> dimdot(np.ones(3), np.arange(3.0))
    3.0
    """
    v = np.asarray(v)
    A = np.asarray(A)
    if A.ndim == 1:
        _check_dimdot_args(v, A, dim)
        return v @ A
    reduced = list(A.shape)
    reduced[normalize_axis(dim, A.ndim)] = 1
    out = np.empty(tuple(reduced), dtype=np.result_type(v.dtype, A.dtype))
    return dimdot_into(out, v, A, dim=dim)


def squeeze(A: Union[np.ndarray, np.generic, float, complex], dim: int) -> Union[np.ndarray, np.generic, float, complex]:
    """Drop the length-1 axis ``dim`` of ``A``; scalars are returned unchanged."""
    if np.ndim(A) == 0:
        return A
    return np.squeeze(A, axis=dim)
