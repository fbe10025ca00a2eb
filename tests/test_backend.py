# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import math

import numpy as np
import pytest

from densematrix.backend import (
    gemm,
    lu_decompose,
    lu_determinant,
    lu_invert,
    mean,
    stdev,
)
from densematrix.errors import DimensionMismatchError, SingularMatrixError


def test_lu_reconstructs_pa():
    rng = np.random.default_rng(1)
    A = rng.normal(size=(6, 6))
    A_before = A.copy()
    lu, piv = lu_decompose(A)
    np.testing.assert_array_equal(A, A_before)  # input untouched

    L = np.tril(lu, -1) + np.eye(6)
    U = np.triu(lu)
    PA = A.copy()
    for i, p in enumerate(piv):
        PA[[i, p]] = PA[[p, i]]
    np.testing.assert_allclose(L @ U, PA, rtol=1e-10, atol=1e-12)


def test_lu_invert_matches_numpy():
    rng = np.random.default_rng(3)
    A = rng.normal(size=(8, 8))
    inv = lu_invert(lu_decompose(A))
    assert inv.flags["C_CONTIGUOUS"]
    np.testing.assert_allclose(inv, np.linalg.inv(A), rtol=1e-8, atol=1e-10)


def test_lu_rejects_non_square():
    with pytest.raises(DimensionMismatchError):
        lu_decompose(np.ones((2, 3)))


def test_lu_singular():
    A = np.array([[1.0, 2.0], [2.0, 4.0]])
    with pytest.raises(SingularMatrixError):
        lu_decompose(A)
    with pytest.raises(np.linalg.LinAlgError):
        lu_decompose(np.zeros((3, 3)))


def test_determinant_matches_numpy():
    rng = np.random.default_rng(11)
    for _ in range(10):
        A = rng.normal(size=(5, 5))
        assert math.isclose(
            lu_determinant(lu_decompose(A)),
            np.linalg.det(A),
            rel_tol=1e-9,
            abs_tol=1e-12,
        )


def test_gemm_transpose_flags():
    rng = np.random.default_rng(5)
    A = rng.normal(size=(3, 4))
    B = rng.normal(size=(2, 4))
    C = rng.normal(size=(3, 2))

    np.testing.assert_allclose(gemm(A, B, trans_b=True), A @ B.T)
    np.testing.assert_allclose(gemm(B, B, trans_a=True), B.T @ B)
    np.testing.assert_allclose(
        gemm(A, B, alpha=2.0, beta=0.5, C=C, trans_b=True), 2.0 * A @ B.T + 0.5 * C
    )
    C_before = C.copy()
    gemm(A, B, beta=1.0, C=C, trans_b=True)
    np.testing.assert_array_equal(C, C_before)


def test_gemm_output_is_row_major():
    A = np.arange(6.0).reshape(2, 3)
    out = gemm(A, A, trans_b=True)
    assert out.flags["C_CONTIGUOUS"]
    np.testing.assert_array_equal(out, [[5.0, 14.0], [14.0, 50.0]])


def test_gemm_dimension_checks():
    with pytest.raises(DimensionMismatchError):
        gemm(np.ones((2, 3)), np.ones((2, 4)), trans_b=True)
    with pytest.raises(DimensionMismatchError):
        gemm(np.ones((2, 3)), np.ones((3, 2)), C=np.ones((3, 3)))


def test_mean_and_sample_stdev():
    x = np.array([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0])
    assert mean(x) == 5.0
    assert stdev(x) == pytest.approx(math.sqrt(32.0 / 7.0))
    assert math.isnan(stdev(np.array([3.0])))
