# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Whitespace-delimited text matrices.

The format has no header: one matrix row per line, values separated by
any run of whitespace. Dimensions are detected by scanning the file:

    rows    = number of lines that are not empty
    columns = number of tokens on the first line

after which rows * columns values are read in row-major order. Later
lines are not checked against the first line's token count, so every
row is expected to hold the same number of values.

Files are read as ASCII; any other byte becomes a replacement character,
so the token holding it is not a number. Tokens follow Python's `float`
syntax (including "nan" and "inf"), except that digit-grouping
underscores such as "1_000" are not accepted.
"""

import logging
import os
from typing import IO, Iterator, Union

import numpy as np

from .errors import MatrixFileError, MatrixFormatError
from .utils import EXPORT_FORMAT, PRINT_FORMAT

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def count_rows(handle: IO[str]) -> int:
    """
    Count the lines that start with something other than a newline.

    A line holding only blanks still counts. The handle is rewound.
    """
    count = 0
    for line in handle:
        if line[0] != "\n":
            count += 1
    handle.seek(0)
    return count


def count_columns(handle: IO[str]) -> int:
    """Count whitespace-separated tokens on the first line. The handle is rewound."""
    first = handle.readline()
    handle.seek(0)
    return len(first.split())


def _tokens(handle: IO[str]) -> Iterator[str]:
    for line in handle:
        yield from line.split()


def _number(token: str) -> float:
    """float() without the digit-grouping underscores Python allows."""
    if "_" in token:
        raise ValueError(f"could not convert string to float: {token!r}")
    return float(token)


def read_values(handle: IO[str], count: int) -> np.ndarray:
    """
    Read up to `count` numbers in file order.

    Reading stops at the first token that is not a number or when the
    file runs out; every cell not reached is left at 0.0.
    """
    values = np.zeros(count, dtype=float)
    filled = 0
    tokens = _tokens(handle)
    for token in tokens:
        if filled == count:
            logger.debug(f"ignoring values after the first {count}")
            break
        try:
            values[filled] = _number(token)
        except ValueError:
            logger.warning(f"stopped at non-numeric token {token!r} (value #{filled})")
            break
        filled += 1

    if filled < count:
        logger.warning(f"read {filled} of {count} values, remaining cells are zero")
    return values


def read_matrix_file(path: PathLike) -> np.ndarray:
    """
    Parse a text matrix file into a (rows, cols) float64 array.

    Raises
    ------
    MatrixFileError   : the file cannot be opened.
    MatrixFormatError : no rows, or an empty first line.
    """
    try:
        handle = open(path, "r", encoding="ascii", errors="replace")
    except OSError as exc:
        logger.error(f"Error: {exc.strerror} ({path})")
        raise MatrixFileError(
            exc.errno, f"File read error: {exc.strerror}", os.fspath(path)
        ) from exc

    with handle:
        rows = count_rows(handle)
        cols = count_columns(handle)
        logger.debug(f"{path}: detected {rows} rows x {cols} columns")
        if rows == 0 or cols == 0:
            raise MatrixFormatError(
                f"{path}: cannot infer dimensions (rows={rows}, columns={cols})"
            )
        values = read_values(handle, rows * cols)

    return values.reshape(rows, cols)


def write_matrix_file(path: PathLike, array: np.ndarray, fmt: str = EXPORT_FORMAT):
    """Write a 2-D array in the format read_matrix_file understands."""
    np.savetxt(path, np.asarray(array, dtype=float), fmt=fmt, delimiter=" ")


def format_rows(array: np.ndarray, fmt: str = PRINT_FORMAT) -> str:
    """
    Render a 2-D array as text: every value through `fmt` (which carries
    its own trailing separator), one row per line.
    """
    array = np.atleast_2d(np.asarray(array, dtype=float))
    return "".join("".join(fmt % x for x in row) + "\n" for row in array)
