# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Dense row-major matrix of float64 values.

A Matrix owns a C-contiguous (height, width) array. Rows and columns
come out as independent Vector copies, and every operation that returns
a Matrix returns a new one. Instances are not thread-safe without
external locking.
"""

import logging
import sys
from typing import Optional, Sequence, TextIO, Tuple, Union

import numpy as np

from . import backend
from .errors import DimensionMismatchError, IndexOutOfRangeError, ZeroVarianceError
from .textfile import PathLike, format_rows, read_matrix_file, write_matrix_file
from .utils import EXPORT_FORMAT, PRINT_FORMAT, spread_tol
from .vector import Vector

logger = logging.getLogger(__name__)

ZERO_VARIANCE_POLICIES = ("propagate", "raise", "skip")


class Matrix:
    def __init__(self, height: int, width: int):
        """Allocate a height x width matrix; the contents are left uninitialised."""
        height, width = int(height), int(width)
        if height <= 0 or width <= 0:
            raise DimensionMismatchError(
                f"matrix dimensions must be positive, got {height}x{width}"
            )
        self._m = np.empty((height, width), dtype=float)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def _wrap(cls, array: np.ndarray) -> "Matrix":
        """Adopt a freshly computed 2-D array without copying it."""
        mat = cls.__new__(cls)
        mat._m = np.ascontiguousarray(array, dtype=float)
        return mat

    @classmethod
    def from_buffer(
        cls, data: Union[Sequence[float], np.ndarray], height: int, width: int
    ) -> "Matrix":
        """
        Copy height * width values from a flat row-major buffer, so that
        data[row * width + col] lands in matrix[row][col].
        """
        data = np.asarray(data, dtype=float).ravel()
        mat = cls(height, width)
        n = mat.height * mat.width
        if data.size < n:
            raise DimensionMismatchError(
                f"buffer holds {data.size} values, {height}x{width} needs {n}"
            )
        mat._m[:] = data[:n].reshape(mat.height, mat.width)
        return mat

    @classmethod
    def from_array(cls, array) -> "Matrix":
        array = np.array(array, dtype=float)
        if array.ndim != 2:
            raise DimensionMismatchError(f"expected a 2-D array, got {array.ndim}-D")
        if array.size == 0:
            raise DimensionMismatchError(
                f"matrix dimensions must be positive, got {array.shape}"
            )
        return cls._wrap(array)

    @classmethod
    def from_vector(cls, vec: Vector) -> "Matrix":
        """n x n zero matrix with the values of `vec` on the main diagonal."""
        n = vec.size
        mat = cls(n, n)
        mat._m.fill(0.0)
        np.fill_diagonal(mat._m, vec.to_array())
        return mat

    @classmethod
    def from_file(cls, path: PathLike) -> "Matrix":
        """
        Load a whitespace-delimited text matrix; see densematrix.textfile
        for how rows and columns are detected.
        """
        return cls._wrap(read_matrix_file(path))

    @classmethod
    def identity(cls, n: int) -> "Matrix":
        mat = cls(n, n)
        mat._m[:] = np.eye(mat.height)
        return mat

    def clone(self) -> "Matrix":
        return Matrix._wrap(self._m.copy())

    # ------------------------------------------------------------------
    # Shape & element access
    # ------------------------------------------------------------------
    @property
    def height(self) -> int:
        return self._m.shape[0]

    @property
    def width(self) -> int:
        return self._m.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self._m.shape

    def _check_row(self, row: int) -> None:
        if not 0 <= row < self.height:
            raise IndexOutOfRangeError(
                f"row {row} out of range for matrix of height {self.height}"
            )

    def _check_col(self, col: int) -> None:
        if not 0 <= col < self.width:
            raise IndexOutOfRangeError(
                f"column {col} out of range for matrix of width {self.width}"
            )

    def get(self, row: int, col: int) -> float:
        self._check_row(row)
        self._check_col(col)
        return float(self._m[row, col])

    def set(self, row: int, col: int, val: float) -> None:
        self._check_row(row)
        self._check_col(col)
        self._m[row, col] = val

    def get_unchecked(self, row: int, col: int) -> float:
        """
        No bounds validation beyond NumPy's own indexing (negative
        indices count from the end). Meant for tight internal loops.
        """
        return float(self._m[row, col])

    def set_unchecked(self, row: int, col: int, val: float) -> None:
        self._m[row, col] = val

    def to_array(self) -> np.ndarray:
        return self._m.copy()

    # ------------------------------------------------------------------
    # Rows, columns and blocks
    # ------------------------------------------------------------------
    def row(self, row: int) -> Vector:
        self._check_row(row)
        return Vector.from_buffer(self._m[row, :])

    def column(self, col: int) -> Vector:
        self._check_col(col)
        return Vector.from_buffer(self._m[:, col])

    def set_row(self, row: int, vec: Vector) -> None:
        self._check_row(row)
        if vec.size != self.width:
            raise DimensionMismatchError(
                f"row needs {self.width} values, vector has {vec.size}"
            )
        self._m[row, :] = vec.to_array()

    def set_column(self, col: int, vec: Vector) -> None:
        self._check_col(col)
        if vec.size != self.height:
            raise DimensionMismatchError(
                f"column needs {self.height} values, vector has {vec.size}"
            )
        self._m[:, col] = vec.to_array()

    def submatrix(self, row: int, col: int, height: int, width: int) -> "Matrix":
        """Copy of the height x width block whose top-left corner is (row, col)."""
        if height <= 0 or width <= 0:
            raise DimensionMismatchError(
                f"block dimensions must be positive, got {height}x{width}"
            )
        self._check_row(row)
        self._check_col(col)
        self._check_row(row + height - 1)
        self._check_col(col + width - 1)
        return Matrix._wrap(self._m[row : row + height, col : col + width].copy())

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------
    def add(self, other: "Matrix") -> None:
        """Element-wise, in place."""
        if not isinstance(other, Matrix):
            raise TypeError(f"expected a Matrix, got {type(other).__name__}")
        if other.shape != self.shape:
            raise DimensionMismatchError(
                f"cannot add {other.height}x{other.width} to {self.height}x{self.width}"
            )
        self._m += other._m

    def transpose(self) -> "Matrix":
        return Matrix._wrap(self._m.T.copy())

    def invert(self) -> "Matrix":
        """
        Inverse via LU decomposition with partial pivoting.

        The receiver is left untouched. An exactly zero pivot raises
        SingularMatrixError; nearly singular input is not detected and
        yields huge or non-finite entries.
        """
        if self.height != self.width:
            raise DimensionMismatchError(
                f"cannot invert a non-square {self.height}x{self.width} matrix"
            )
        factor = backend.lu_decompose(self._m)
        logger.debug(f"inverting {self.height}x{self.width} matrix")
        return Matrix._wrap(backend.lu_invert(factor))

    def determinant(self) -> float:
        """det from the same LU decomposition invert() uses."""
        if self.height != self.width:
            raise DimensionMismatchError(
                f"determinant is undefined for a non-square "
                f"{self.height}x{self.width} matrix"
            )
        try:
            factor = backend.lu_decompose(self._m)
        except np.linalg.LinAlgError:
            return 0.0
        return backend.lu_determinant(factor)

    def multiply(
        self, other: Union["Matrix", Vector], transpose_other: bool = True
    ) -> Union["Matrix", Vector]:
        """
        Product with the right operand transposed.

        Matrix: self (m x k) times other.T where other is n x k, giving
        m x n; entry (i, j) is row i of self dotted with row j of other.
        Pass transpose_other=False for the ordinary product self @ other.

        Vector: always treated as a column, self (m x k) times a length-k
        vector gives a length-m Vector.
        """
        if isinstance(other, Vector):
            if other.size != self.width:
                raise DimensionMismatchError(
                    f"cannot multiply {self.height}x{self.width} matrix "
                    f"by vector of length {other.size}"
                )
            out = backend.gemm(self._m, other.to_array()[None, :], trans_b=True)
            return Vector.from_buffer(out)

        if not isinstance(other, Matrix):
            raise TypeError(
                f"can only multiply by a Matrix or Vector, got {type(other).__name__}"
            )
        inner = other.width if transpose_other else other.height
        if inner != self.width:
            raise DimensionMismatchError(
                f"cannot multiply {self.height}x{self.width} by "
                f"{other.height}x{other.width}{'^T' if transpose_other else ''}"
            )
        return Matrix._wrap(backend.gemm(self._m, other._m, trans_b=transpose_other))

    # ------------------------------------------------------------------
    # Standardisation
    # ------------------------------------------------------------------
    def sphere(self, on_zero_variance: str = "propagate") -> None:
        """
        Standardise every column in place: subtract the column mean, then
        divide by the column's sample standard deviation.

        A column whose deviation is zero (no larger than rounding of its
        values could produce, see utils.spread_tol, or undefined
        because there is a single row) is handled according to
        `on_zero_variance`:

        - "propagate": divide anyway; an exactly constant column becomes nan.
        - "raise": raise ZeroVarianceError before anything is modified.
        - "skip": only subtract the mean.
        """
        if on_zero_variance not in ZERO_VARIANCE_POLICIES:
            raise ValueError(
                f"on_zero_variance must be one of {ZERO_VARIANCE_POLICIES}, "
                f"got {on_zero_variance!r}"
            )

        stats = []
        for col in range(self.width):
            values = self._m[:, col]
            mean, stdev = backend.mean(values), backend.stdev(values)
            # nan compares False, so an undefined deviation counts as degenerate
            degenerate = not stdev > spread_tol(values)
            if degenerate and on_zero_variance == "raise":
                raise ZeroVarianceError(col, stdev)
            stats.append((mean, stdev, degenerate))

        for col, (mean, stdev, degenerate) in enumerate(stats):
            vec = self.column(col)
            values = vec.to_array() - mean
            if degenerate:
                logger.warning(
                    f"sphere(): column {col} has zero variance ({on_zero_variance})"
                )
            if not (degenerate and on_zero_variance == "skip"):
                with np.errstate(divide="ignore", invalid="ignore"):
                    values = values / stdev
            self.set_column(col, Vector.from_buffer(values))

    # ------------------------------------------------------------------
    # Rendering & export
    # ------------------------------------------------------------------
    def format(self, fmt: str = PRINT_FORMAT) -> str:
        return format_rows(self._m, fmt)

    def print(self, file: Optional[TextIO] = None) -> None:
        (file or sys.stdout).write(self.format())

    def save(self, path: PathLike, fmt: str = EXPORT_FORMAT) -> None:
        """Write the matrix so that Matrix.from_file reads it back."""
        write_matrix_file(path, self._m, fmt)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._m.tolist()})"

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return bool(np.array_equal(self._m, other._m))

    __hash__ = None

    def allclose(
        self, other: "Matrix", rtol: float = 1e-9, atol: float = 1e-12
    ) -> bool:
        if other.shape != self.shape:
            return False
        return bool(np.allclose(self._m, other._m, rtol=rtol, atol=atol))
