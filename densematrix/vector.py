# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Dense 1-D vector of float64 values.
"""

import sys
from typing import Optional, Sequence, TextIO, Union

import numpy as np

from .errors import DimensionMismatchError, IndexOutOfRangeError
from .textfile import format_rows
from .utils import PRINT_FORMAT


class Vector:
    """
    Fixed-length vector owning its buffer.

    Every constructor copies its input, so a Vector never aliases an
    array or a Matrix row it was built from. Not thread-safe without
    external locking.
    """

    def __init__(self, size: int, zeroed: bool = True):
        size = int(size)
        if size <= 0:
            raise DimensionMismatchError(f"vector length must be positive, got {size}")
        self._v = np.zeros(size) if zeroed else np.empty(size)

    @classmethod
    def from_buffer(
        cls, data: Union[Sequence[float], np.ndarray], length: Optional[int] = None
    ) -> "Vector":
        """Copy the first `length` values (all of them by default) of `data`."""
        data = np.asarray(data, dtype=float).ravel()
        if length is None:
            length = data.size
        if data.size < length:
            raise DimensionMismatchError(
                f"buffer holds {data.size} values, {length} requested"
            )
        vec = cls(length, zeroed=False)
        vec._v[:] = data[:length]
        return vec

    @property
    def size(self) -> int:
        return self._v.shape[0]

    def __len__(self) -> int:
        return self.size

    def _check(self, i: int) -> int:
        if not 0 <= i < self.size:
            raise IndexOutOfRangeError(
                f"index {i} out of range for vector of length {self.size}"
            )
        return i

    def get(self, i: int) -> float:
        return float(self._v[self._check(i)])

    def set(self, i: int, val: float) -> None:
        self._v[self._check(i)] = val

    __getitem__ = get
    __setitem__ = set

    def clone(self) -> "Vector":
        return Vector.from_buffer(self._v)

    def to_array(self) -> np.ndarray:
        return self._v.copy()

    def dot(self, other: "Vector") -> float:
        """Inner product with a vector of the same length."""
        if not isinstance(other, Vector):
            raise TypeError(f"expected a Vector, got {type(other).__name__}")
        if other.size != self.size:
            raise DimensionMismatchError(
                f"cannot take dot product of lengths {self.size} and {other.size}"
            )
        return float(np.dot(self._v, other._v))

    def format(self, fmt: str = PRINT_FORMAT) -> str:
        return format_rows(self._v[None, :], fmt)

    def print(self, file: Optional[TextIO] = None) -> None:
        (file or sys.stdout).write(self.format())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return self.size == other.size and bool(np.array_equal(self._v, other._v))

    __hash__ = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._v.tolist()})"
