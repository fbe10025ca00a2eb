# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Exceptions raised by densematrix.

Every error also derives from the matching built-in so that callers
catching ``ValueError`` or ``OSError`` keep working.
"""

import numpy as np


class MatrixError(Exception):
    """Base class for all densematrix errors."""


class MatrixFileError(MatrixError, OSError):
    """A matrix file could not be opened for reading."""


class MatrixFormatError(MatrixError, ValueError):
    """A matrix file holds no data from which dimensions can be inferred."""


class DimensionMismatchError(MatrixError, ValueError):
    """Operand shapes are incompatible for the requested operation."""


class IndexOutOfRangeError(MatrixError, IndexError):
    """A row or column index lies outside the matrix bounds."""


class SingularMatrixError(MatrixError, np.linalg.LinAlgError):
    """LU decomposition hit an exactly zero pivot."""


class ZeroVarianceError(MatrixError, ArithmeticError):
    """A column has no spread and cannot be standardised."""

    def __init__(self, column: int, stdev: float):
        super().__init__(f"column {column} has zero variance (stdev={stdev!r})")
        self.column = column
        self.stdev = stdev
