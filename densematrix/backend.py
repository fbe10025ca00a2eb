# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Numeric kernels behind Matrix and Vector.

Everything heavy is handed to NumPy / SciPy (LAPACK and BLAS underneath);
the functions here only marshal float64 arrays in and out.
"""

import logging
import warnings
from typing import Optional, Tuple

import numpy as np
import scipy.linalg
from scipy.linalg import blas

from .errors import DimensionMismatchError, SingularMatrixError
from .utils import permutation_sign, pivots_to_permutation

logger = logging.getLogger(__name__)

LUFactor = Tuple[np.ndarray, np.ndarray]


def lu_decompose(A: np.ndarray) -> LUFactor:
    """
    LU decomposition with partial pivoting, P A = L U.

    Parameters
    ----------
    A : (n, n) ndarray
        Square matrix; it is copied, never overwritten.

    Returns
    -------
    lu  : (n, n) ndarray
        L below the diagonal (unit diagonal implied) and U on and above.
    piv : (n,) ndarray
        LAPACK pivot indices: row i was interchanged with row piv[i].

    Raises
    ------
    DimensionMismatchError : A is not square.
    SingularMatrixError    : a pivot of U is exactly zero.
    """
    A = np.asarray(A, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise DimensionMismatchError(
            f"LU decomposition needs a square matrix, got {A.shape}"
        )

    with warnings.catch_warnings():
        # SciPy only warns on a zero pivot; the check below turns it into an error
        warnings.simplefilter("ignore", scipy.linalg.LinAlgWarning)
        lu, piv = scipy.linalg.lu_factor(A, check_finite=False)

    zero = np.flatnonzero(np.diag(lu) == 0.0)
    if zero.size:
        raise SingularMatrixError(
            f"U[{zero[0]}, {zero[0]}] is exactly zero; matrix is singular"
        )
    return lu, piv


def lu_invert(factor: LUFactor) -> np.ndarray:
    """Solve A X = I from a precomputed decomposition."""
    lu, _piv = factor
    n = lu.shape[0]
    inverse = scipy.linalg.lu_solve(factor, np.eye(n), check_finite=False)
    return np.ascontiguousarray(inverse)


def lu_determinant(factor: LUFactor) -> float:
    """det(A) = sign(P) * prod(diag(U))"""
    lu, piv = factor
    sign = permutation_sign(pivots_to_permutation(piv))
    return sign * float(np.prod(np.diag(lu)))


def gemm(
    A: np.ndarray,
    B: np.ndarray,
    alpha: float = 1.0,
    beta: float = 0.0,
    C: Optional[np.ndarray] = None,
    trans_a: bool = False,
    trans_b: bool = False,
) -> np.ndarray:
    """
    Generalized multiply  alpha * op(A) @ op(B) + beta * C.

    op(X) is X or X.T depending on the transpose flags. The result is a
    fresh row-major (C-contiguous) array; C is never modified.
    """
    A = np.asarray(A, dtype=float)
    B = np.asarray(B, dtype=float)
    m, k = A.shape[::-1] if trans_a else A.shape
    k2, n = B.shape[::-1] if trans_b else B.shape
    if k != k2:
        raise DimensionMismatchError(
            f"inner dimensions differ: op(A) is {m}x{k}, op(B) is {k2}x{n}"
        )
    if C is not None:
        C = np.asarray(C, dtype=float)
        if C.shape != (m, n):
            raise DimensionMismatchError(f"C must be {m}x{n}, got {C.shape}")

    logger.debug(f"gemm: ({m}x{k}) . ({k}x{n}), trans_a={trans_a}, trans_b={trans_b}")
    kwargs = {"beta": beta, "trans_a": int(trans_a), "trans_b": int(trans_b)}
    if C is not None:
        kwargs["c"] = C
    out = blas.dgemm(alpha, A, B, **kwargs)
    return np.ascontiguousarray(out)


def mean(x: np.ndarray) -> float:
    return float(np.mean(x))


def stdev(x: np.ndarray) -> float:
    """Sample standard deviation (n - 1 in the denominator); NaN for n < 2."""
    x = np.asarray(x, dtype=float)
    if x.size < 2:
        return float("nan")
    return float(np.std(x, ddof=1))
