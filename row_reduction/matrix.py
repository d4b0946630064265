# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Matrix value type and the elementary row operations the engines are
built from.

Every function here is pure: it returns new arrays / new Matrix values
and never writes into its arguments.
"""

import math
from collections.abc import Sequence
from typing import List

import numpy as np

from .exceptions import RangeError, ShapeError
from .utils import EPS, is_nonzero, is_one


class Matrix:
    """
    Immutable rows-by-cols grid of float64.

    Build one with `create`; the backing array is a private read-only
    copy, so two Matrix values never share storage.
    """

    __slots__ = ("_data",)

    def __init__(self, data):
        arr = np.array(data, dtype=float, copy=True)
        if arr.ndim != 2:
            raise ShapeError(f"Matrix data must be 2-D, got {arr.ndim}-D")
        arr.setflags(write=False)
        self._data = arr

    @property
    def data(self) -> np.ndarray:
        """Read-only (rows, cols) array."""
        return self._data

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self):
        return self._data.shape

    def tolist(self) -> List[List[float]]:
        return self._data.tolist()

    def __array__(self, dtype=None, copy=None):
        return np.array(self._data, dtype=dtype, copy=True)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._data.tolist()})"


def _is_sequence(obj) -> bool:
    if isinstance(obj, (str, bytes)):
        return False
    return isinstance(obj, (Sequence, np.ndarray))


def _is_nested(x) -> bool:
    if isinstance(x, np.ndarray):
        return x.ndim > 0
    return _is_sequence(x)


def _check_row(m: Matrix, index: int) -> None:
    if not 0 <= index < m.rows:
        raise RangeError(f"Row index {index} out of range for {m.rows} rows.")


def create(data) -> Matrix:
    """
    Deep-copy `data` (a sequence of equal-length row sequences) into a Matrix.

    Raises
    ------
    ShapeError : data or one of its rows is not a sequence, rows differ
                 in length, or an entry is itself a sequence.
    TypeError  : an entry is not a real number.
    """
    if isinstance(data, Matrix):
        return clone(data)
    if not _is_sequence(data):
        raise ShapeError("Matrix must be a sequence of rows.")

    rows = list(data)
    if not rows:
        return Matrix(np.zeros((0, 0)))

    for i, row in enumerate(rows):
        if not _is_sequence(row):
            raise ShapeError(f"Row {i} is not a sequence.")
        if len(row) != len(rows[0]):
            raise ShapeError(
                f"Rows must be equal in length: row 0 has {len(rows[0])}, "
                f"row {i} has {len(row)}."
            )
        if any(_is_nested(x) for x in row):
            raise ShapeError(f"Row {i} has nested entries; matrix data must be 2-D.")

    try:
        arr = np.array([list(row) for row in rows], dtype=float)
    except (TypeError, ValueError) as e:
        raise TypeError(f"Matrix entries must be real numbers: {e}") from e
    return Matrix(arr)


def clone(m: Matrix) -> Matrix:
    return Matrix(m.data)


def identity(n: int) -> Matrix:
    return Matrix(np.eye(n))


def get_column(m: Matrix, index: int) -> np.ndarray:
    if not 0 <= index < m.cols:
        raise RangeError(f"Column index {index} out of range.")
    return m.data[:, index].copy()


def check_zeros(m: Matrix, index: int) -> bool:
    """True iff every entry of row `index` is numerically zero."""
    _check_row(m, index)
    return bool(np.all(np.abs(m.data[index]) < EPS))


def sum_rows(m: Matrix, index1: int, index2: int, multiple: float) -> np.ndarray:
    """
    Return the new row  row[index2] + multiple * row[index1].

    The matrix itself is left untouched; callers put the row back with
    `with_row`.
    """
    if not math.isfinite(multiple):
        raise ArithmeticError(f"Not a valid multiple: {multiple!r}")
    _check_row(m, index1)
    _check_row(m, index2)
    return multiple * m.data[index1] + m.data[index2]


def switch_rows(m: Matrix, index1: int, index2: int) -> Matrix:
    _check_row(m, index1)
    _check_row(m, index2)
    data = m.data.copy()
    data[[index1, index2]] = data[[index2, index1]]
    return Matrix(data)


def scalar_vector_product(vec, multiple: float) -> np.ndarray:
    if not _is_sequence(vec):
        raise TypeError("Not a valid vector.")
    return np.asarray(vec, dtype=float) * multiple


def with_row(m: Matrix, index: int, row) -> Matrix:
    """Return a copy of `m` whose row `index` is replaced by `row`."""
    _check_row(m, index)
    row = np.asarray(row, dtype=float)
    if row.shape != (m.cols,):
        raise ShapeError(f"Row must have {m.cols} entries, got shape {row.shape}.")
    data = m.data.copy()
    data[index] = row
    return Matrix(data)


def as_vector(vector, length: int) -> np.ndarray:
    """Copy a constants vector into a float64 array of the given length."""
    if not _is_sequence(vector):
        raise TypeError("Vector must be a sequence.")
    if len(vector) != length:
        raise ShapeError(
            f"Solution vector length must equal number of rows "
            f"({len(vector)} != {length})."
        )
    try:
        return np.array(vector, dtype=float).reshape(length)
    except (TypeError, ValueError) as e:
        raise TypeError(f"Vector entries must be real numbers: {e}") from e


def augment_vector(m: Matrix, vector) -> Matrix:
    """Build [A | b] as a new (rows, cols + 1) Matrix."""
    col = as_vector(vector, m.rows).reshape(m.rows, 1)
    return Matrix(np.hstack([m.data, col]))


def is_pivot_element(data, row: int, col: int, pivot_cols) -> bool:
    """
    True if (row, col) holds a leading one of an RREF matrix.

    Assumes `data` is already reduced.
    """
    if col not in pivot_cols:
        return False
    if not is_one(data[row][col]):
        return False
    return not any(is_nonzero(data[row][j]) for j in range(col))
