# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np
import pytest

import row_reduction as rr
from row_reduction.exceptions import RowReductionError, ShapeError

A = [[2.0, 1.0], [1.0, 3.0]]
b = [3.0, 5.0]


def test_ref_selector():
    trace = rr.solve_steps(A, b, "ref")
    assert trace.final.action == "final"
    assert "gauss_jordan_start" not in trace.actions
    U = trace.final.matrix
    assert abs(U[1, 0]) < rr.EPS


def test_rref_selector():
    trace = rr.solve_steps(A, b, rr.SolveType.RREF)
    assert "gauss_jordan_start" in trace.actions
    np.testing.assert_allclose(trace.final.matrix, np.eye(2), atol=1e-12)
    np.testing.assert_allclose(trace.final.augmented_vector, [0.8, 1.4], atol=1e-12)


def test_full_is_default():
    trace = rr.solve_steps(A, b)
    assert trace.final.action == "unique_solution_values"
    np.testing.assert_allclose(trace.final.solution, [0.8, 1.4], atol=1e-12)
    assert trace.solution_start is not None


def test_inverse_ignores_constants():
    trace = rr.solve_steps(A, b, "inverse")
    assert trace.final.action == "complete"
    np.testing.assert_allclose(trace.final.inverse_matrix, np.linalg.inv(A), atol=1e-12)


def test_unknown_selector():
    with pytest.raises(TypeError):
        rr.solve_steps(A, b, "qr")


def test_malformed_input_raises():
    with pytest.raises(ShapeError):
        rr.solve_steps([[1.0, 2.0], [3.0]], None, "rref")
    with pytest.raises(RowReductionError):
        rr.solve_steps(A, [1.0], "ref")
    with pytest.raises(TypeError):
        rr.solve_steps(A, 3.0, "full")
