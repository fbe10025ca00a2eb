# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import io
import logging

import numpy as np
import pytest

from densematrix.errors import MatrixFileError, MatrixFormatError
from densematrix.textfile import (
    count_columns,
    count_rows,
    format_rows,
    read_matrix_file,
    read_values,
    write_matrix_file,
)

logger = logging.getLogger(__name__)


@pytest.mark.parametrize(
    "text,rows",
    [
        ("1 2 3\n4 5 6\n", 2),
        ("1 2 3\n4 5 6", 2),  # no trailing newline
        ("1 2\n\n3 4\n\n\n", 2),  # blank lines are skipped
        ("\n1 2\n", 1),
        ("1 2\n   \n", 2),  # a line of blanks still counts
        ("", 0),
    ],
)
def test_count_rows(text, rows):
    handle = io.StringIO(text)
    assert count_rows(handle) == rows
    assert handle.tell() == 0


@pytest.mark.parametrize(
    "text,cols",
    [
        ("1 2 3\n4 5 6\n", 3),
        ("  1\t2   3  \n4\n", 3),
        ("7", 1),  # first line without a newline
        ("\n1 2\n", 0),
        ("", 0),
    ],
)
def test_count_columns(text, cols):
    handle = io.StringIO(text)
    assert count_columns(handle) == cols
    assert handle.read() == text  # rewound


def test_read_values_zero_fills_after_bad_token():
    values = read_values(io.StringIO("1 2 oops 4\n"), 4)
    np.testing.assert_array_equal(values, [1.0, 2.0, 0.0, 0.0])


def test_read_values_short_and_long_input():
    np.testing.assert_array_equal(read_values(io.StringIO("5"), 3), [5.0, 0.0, 0.0])
    np.testing.assert_array_equal(read_values(io.StringIO("1 2 3 4"), 2), [1.0, 2.0])


def test_read_matrix_file(tmp_path):
    path = tmp_path / "m.dat"
    path.write_text("1 2 3\n4 5 6\n")
    A = read_matrix_file(path)
    logger.debug(f"\n{A}")
    assert A.shape == (2, 3)
    np.testing.assert_array_equal(A, [[1, 2, 3], [4, 5, 6]])


def test_read_matrix_file_ragged_rows_flow_row_major(tmp_path):
    path = tmp_path / "ragged.dat"
    path.write_text("1 2\n3 4 5\n6\n")
    A = read_matrix_file(path)
    # 3 rows, 2 columns from the first line, values read in order
    np.testing.assert_array_equal(A, [[1, 2], [3, 4], [5, 6]])


def test_read_matrix_file_scientific_notation(tmp_path):
    path = tmp_path / "sci.dat"
    path.write_text("1e-3 -2.5E2\n+3 .5\n")
    np.testing.assert_array_equal(read_matrix_file(path), [[1e-3, -250.0], [3.0, 0.5]])


def test_missing_file(tmp_path):
    path = tmp_path / "nope.dat"
    with pytest.raises(MatrixFileError) as excinfo:
        read_matrix_file(path)
    assert isinstance(excinfo.value, OSError)
    assert excinfo.value.filename == str(path)
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


@pytest.mark.parametrize("text", ["", "\n\n", "\n1 2\n"])
def test_no_dimensions(tmp_path, text):
    path = tmp_path / "empty.dat"
    path.write_text(text)
    with pytest.raises(MatrixFormatError):
        read_matrix_file(path)


def test_write_then_read(tmp_path):
    rng = np.random.default_rng(7)
    A = rng.normal(size=(4, 3))
    path = tmp_path / "out.dat"
    write_matrix_file(path, A)
    np.testing.assert_array_equal(read_matrix_file(path), A)


def test_format_rows():
    A = np.array([[1.0, 2.5], [-3.0, 10.125]])
    assert format_rows(A) == "1.00 2.50 \n-3.00 10.12 \n"


def test_non_ascii_byte_zero_fills(tmp_path):
    path = tmp_path / "latin.dat"
    path.write_bytes(b"1 2\n3 \xb5\n")
    np.testing.assert_array_equal(read_matrix_file(path), [[1, 2], [3, 0]])


def test_underscore_grouping_is_not_a_number():
    values = read_values(io.StringIO("1 1_000 3\n"), 3)
    np.testing.assert_array_equal(values, [1.0, 0.0, 0.0])


def test_nan_and_inf_tokens():
    values = read_values(io.StringIO("nan -inf 2\n"), 3)
    assert np.isnan(values[0])
    assert values[1] == -np.inf
    assert values[2] == 2.0
