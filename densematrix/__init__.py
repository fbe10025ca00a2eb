# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
densematrix
===========

Dense Matrix / Vector value types for small statistical preprocessing
jobs: load a whitespace-delimited table, standardise its columns, invert
and multiply.

Public API
~~~~~~~~~~
- Types
    - `Matrix`, `Vector`
- Matrix construction
    - `Matrix(height, width)`, `Matrix.from_buffer`, `Matrix.from_vector`,
      `Matrix.from_file`, `Matrix.from_array`, `Matrix.identity`
- Matrix operations
    - `invert`, `multiply` (right operand transposed), `add`, `sphere`,
      `row`, `column`, `set_row`, `set_column`, `submatrix`
- Errors
    - `MatrixError` and its subclasses

Everything else lives in sub-modules and is **not** considered part of the
stable interface.

Example
-------
>>> import densematrix as dm
>>> A = dm.Matrix.from_buffer([4.0, 7.0, 2.0, 6.0], 2, 2)
>>> A.multiply(A.invert(), transpose_other=False).allclose(dm.Matrix.identity(2))
True
"""

from importlib.metadata import version as _pkg_version

from .errors import (
    DimensionMismatchError,
    IndexOutOfRangeError,
    MatrixError,
    MatrixFileError,
    MatrixFormatError,
    SingularMatrixError,
    ZeroVarianceError,
)
from .matrix import Matrix
from .vector import Vector

__all__ = [
    "Matrix",
    "Vector",
    "MatrixError",
    "MatrixFileError",
    "MatrixFormatError",
    "DimensionMismatchError",
    "IndexOutOfRangeError",
    "SingularMatrixError",
    "ZeroVarianceError",
]

# ---------------------------------------------------------------------
# Version string (helps “pip show densematrix”, Sphinx, etc.)
# ---------------------------------------------------------------------
try:  # installed via pip / build backend
    __version__ = _pkg_version(__name__)
except Exception:  # running from a checkout
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------
# Users see log output only if they deliberately configure logging.
# ---------------------------------------------------------------------
import logging as _logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
