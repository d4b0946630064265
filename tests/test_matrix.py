# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import math

import numpy as np
import pytest

from row_reduction.exceptions import RangeError, ShapeError
from row_reduction.matrix import (
    Matrix,
    augment_vector,
    check_zeros,
    clone,
    create,
    get_column,
    is_pivot_element,
    scalar_vector_product,
    sum_rows,
    switch_rows,
    with_row,
)


def test_create_copies_input():
    data = [[1, 2], [3, 4]]
    m = create(data)
    data[0][0] = 99
    assert m.rows == 2 and m.cols == 2
    assert m.data[0, 0] == 1.0
    assert m.data.dtype == np.float64


def test_create_rejects_bad_shapes():
    with pytest.raises(ShapeError):
        create([[1, 2], [3]])
    with pytest.raises(ShapeError):
        create([[1, 2], 3])
    with pytest.raises(ShapeError):
        create(5)
    with pytest.raises(ShapeError):
        create([[[1, 2]], [[3, 4]]])
    with pytest.raises(ShapeError):
        create([[[1, 2]], [[3]]])
    with pytest.raises(ShapeError):
        create([np.array([1.0, 2.0]), np.array([[3.0, 4.0]])])
    with pytest.raises(TypeError):
        create([["a", "b"]])


def test_create_empty():
    m = create([])
    assert (m.rows, m.cols) == (0, 0)
    m = create([[], []])
    assert (m.rows, m.cols) == (2, 0)


def test_matrix_is_read_only():
    m = create([[1.0, 2.0]])
    with pytest.raises(ValueError):
        m.data[0, 0] = 5.0


def test_clone_is_independent():
    m = create([[1.0, 2.0], [3.0, 4.0]])
    c = clone(m)
    assert c is not m
    assert not np.shares_memory(c.data, m.data)
    np.testing.assert_array_equal(c.data, m.data)
    assert isinstance(create(m), Matrix)


def test_get_column():
    m = create([[1, 2], [3, 4]])
    np.testing.assert_array_equal(get_column(m, 1), [2.0, 4.0])
    with pytest.raises(RangeError):
        get_column(m, 2)
    with pytest.raises(RangeError):
        get_column(m, -1)


def test_check_zeros():
    m = create([[0.0, 1e-11, -1e-12], [0.0, 1e-9, 0.0]])
    assert check_zeros(m, 0)
    assert not check_zeros(m, 1)
    with pytest.raises(RangeError):
        check_zeros(m, 2)


def test_sum_rows():
    m = create([[1.0, 2.0], [3.0, 4.0]])
    row = sum_rows(m, 0, 1, -3.0)
    np.testing.assert_array_equal(row, [0.0, -2.0])
    # pure: the matrix is untouched
    np.testing.assert_array_equal(m.data, [[1.0, 2.0], [3.0, 4.0]])

    with pytest.raises(ArithmeticError):
        sum_rows(m, 0, 1, math.inf)
    with pytest.raises(ArithmeticError):
        sum_rows(m, 0, 1, float("nan"))
    with pytest.raises(RangeError):
        sum_rows(m, 0, 2, 1.0)


def test_switch_rows():
    m = create([[1.0, 2.0], [3.0, 4.0]])
    s = switch_rows(m, 0, 1)
    np.testing.assert_array_equal(s.data, [[3.0, 4.0], [1.0, 2.0]])
    np.testing.assert_array_equal(m.data, [[1.0, 2.0], [3.0, 4.0]])
    assert not np.shares_memory(s.data, m.data)
    with pytest.raises(RangeError):
        switch_rows(m, 0, 5)


def test_scalar_vector_product():
    np.testing.assert_array_equal(scalar_vector_product([1, -2, 4], 0.5), [0.5, -1.0, 2.0])
    with pytest.raises(TypeError):
        scalar_vector_product(3.0, 2.0)


def test_with_row():
    m = create([[1.0, 2.0], [3.0, 4.0]])
    w = with_row(m, 1, [0.0, 0.0])
    np.testing.assert_array_equal(w.data, [[1.0, 2.0], [0.0, 0.0]])
    np.testing.assert_array_equal(m.data[1], [3.0, 4.0])
    with pytest.raises(ShapeError):
        with_row(m, 0, [1.0])


def test_augment_vector():
    m = create([[1.0, 2.0], [3.0, 4.0]])
    a = augment_vector(m, [5, 6])
    np.testing.assert_array_equal(a.data, [[1.0, 2.0, 5.0], [3.0, 4.0, 6.0]])
    with pytest.raises(ShapeError):
        augment_vector(m, [1.0])
    with pytest.raises(TypeError):
        augment_vector(m, 1.0)


def test_is_pivot_element():
    R = [[1.0, 2.0, 0.0], [0.0, 0.0, 1.0]]
    assert is_pivot_element(R, 0, 0, [0, 2])
    assert is_pivot_element(R, 1, 2, [0, 2])
    assert not is_pivot_element(R, 0, 1, [0, 2])
    assert not is_pivot_element(R, 1, 0, [0, 2])
