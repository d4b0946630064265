# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np

from row_reduction.elimination import (
    elimination,
    find_pivot,
    nullspace_basis,
    rank,
    ref,
    rref,
)
from row_reduction.matrix import create
from row_reduction.steps import Phase, Pivot
from row_reduction.utils import EPS

TEST_ITERATIONS = 50
logger = logging.getLogger(__name__)


def low_rank_integer_matrix(rng, m, n, r):
    B = rng.integers(-4, 5, size=(m, r))
    C = rng.integers(-4, 5, size=(r, n))
    return (B @ C).astype(float)


def test_rref_idempotent():
    m, n = 6, 8
    A = np.random.randn(m, n)
    R1, piv1, _c, _p = rref(A)
    logger.debug(f"RREF\n{R1.data}\n")
    R2, piv2, _c, _p = rref(R1)  # RREF of an RREF is itself
    assert piv1 == piv2
    assert np.array_equal(R1.data, R2.data)


def test_rref_pivot_structure():
    A = np.random.randn(5, 7)
    R, pivots, _c, _p = rref(A)
    # each pivot column should be e_i
    for r, c in enumerate(pivots):
        ei = np.zeros(R.rows)
        ei[r] = 1
        assert np.allclose(R.data[:, c], ei, atol=1e-10)


def test_rank_agreement():
    for _ in range(100):
        A = np.random.randn(8, 6)
        assert rank(A) == np.linalg.matrix_rank(A)


def test_rank_agreement_deficient():
    rng = np.random.default_rng(7)
    for _ in range(TEST_ITERATIONS):
        r = int(rng.integers(1, 5))
        A = low_rank_integer_matrix(rng, 6, 7, r)
        logger.debug(f"\nRunning Test\n{A}\n")
        assert rank(A) == np.linalg.matrix_rank(A)


def test_nullspace_basis():
    A = np.random.randn(6, 10)  # rank <= 6
    N = nullspace_basis(A)
    assert np.allclose(A @ N, 0, atol=1e-10)
    # Assert that we are satisfying the rank nullity theorem
    assert N.shape[1] == A.shape[1] - np.linalg.matrix_rank(A)


def test_nullspace_basis_full_rank():
    N = nullspace_basis(np.eye(3))
    assert N.shape == (3, 0)


def test_trace_ends_at_rref():
    rng = np.random.default_rng(3)
    for _ in range(TEST_ITERATIONS):
        A = low_rank_integer_matrix(rng, 4, 5, 3)
        b = rng.integers(-9, 10, size=4).astype(float)
        trace = elimination(A, b, jordan=True)
        R, pivot_cols, c, pivots = rref(A, b)

        assert trace.final.action == "final"
        assert np.array_equal(trace.final.matrix, R.data)
        assert np.array_equal(trace.final.augmented_vector, c)
        assert list(trace.final.pivot_cols) == pivot_cols
        assert list(trace.final.pivots) == pivots
        assert trace.final.rank == len(pivot_cols)
        assert trace.final.free_variables == A.shape[1] - len(pivot_cols)


def test_first_step_is_initial_state():
    A = [[0.0, 2.0], [3.0, 4.0]]
    trace = elimination(A, [1.0, 2.0])
    first = trace[0]
    assert first.phase == Phase.RREF
    assert first.action == "start"
    np.testing.assert_array_equal(first.matrix, A)
    np.testing.assert_array_equal(first.augmented_vector, [1.0, 2.0])
    assert first.pivot_cols == ()


def test_constants_follow_row_operations():
    A = np.array([[2.0, 1.0, -1.0], [-3.0, -1.0, 2.0], [-2.0, 1.0, 2.0]])
    b = np.array([8.0, -11.0, -3.0])
    R, pivot_cols, c, _p = rref(A, b)
    np.testing.assert_allclose(R.data, np.eye(3), atol=1e-12)
    np.testing.assert_allclose(c, np.linalg.solve(A, b), rtol=1e-10)
    assert pivot_cols == [0, 1, 2]


def test_input_not_mutated():
    A = np.array([[0.0, 1.0], [2.0, 3.0]])
    b = np.array([5.0, 6.0])
    A0, b0 = A.copy(), b.copy()
    elimination(A, b)
    rref(A, b)
    np.testing.assert_array_equal(A, A0)
    np.testing.assert_array_equal(b, b0)


def test_ref_has_zeros_below_pivots_only():
    A = np.array([[1.0, 2.0, 3.0], [2.0, 5.0, 7.0], [1.0, 3.0, 5.0]])
    U, pivot_cols, _c, pivots = ref(A)
    assert pivot_cols == [0, 1, 2]
    assert np.allclose(np.tril(U.data, -1), 0, atol=EPS)
    assert np.allclose(np.diag(U.data), 1)
    # REF keeps entries above the pivots
    assert abs(U.data[0, 1]) > EPS

    trace = elimination(A, jordan=False)
    assert "gauss_jordan_start" not in trace.actions
    assert trace.final.action == "final"
    np.testing.assert_array_equal(trace.final.matrix, U.data)


def test_pivot_prefers_one_over_earlier_negative_one():
    m = create([[0.0], [2.0], [-1.0], [1.0]])
    row, kind, scanned = find_pivot(m, 0, 0)
    assert (row, kind) == (3, "one")
    assert scanned == [0.0, 2.0, -1.0, 1.0]

    trace = elimination([[-1.0], [1.0]])
    i = trace.find("perfect_pivot_found")
    assert i is not None
    assert trace[i].pivot_position == Pivot(1, 0)
    assert "negative_pivot_found" not in trace.actions


def test_pivot_prefers_negative_one_over_nonzero():
    m = create([[0.0], [2.0], [-1.0], [3.0]])
    assert find_pivot(m, 0, 0)[:2] == (2, "negative_one")

    trace = elimination([[2.0, 1.0], [-1.0, 4.0]])
    i = trace.find("negative_pivot_found")
    assert trace[i].pivot_position == Pivot(1, 0)
    # -1 pivot is brought up and scaled by -1
    j = trace.find("scale", i)
    np.testing.assert_allclose(trace[j].matrix[0], [1.0, -4.0])


def test_pivot_first_nonzero():
    m = create([[0.0], [2.0], [3.0]])
    assert find_pivot(m, 0, 0)[:2] == (1, "nonzero")
    assert find_pivot(create([[0.0], [1e-12]]), 0, 0) == (None, None, [0.0, 1e-12])


def test_swap_updates_pivot_row():
    trace = elimination([[0.0, 1.0], [1.0, 0.0]])
    found = trace.find("perfect_pivot_found")
    assert trace[found].pivots == (Pivot(1, 0),)

    swap = trace.find("swap")
    assert trace[swap].pivots == (Pivot(0, 0),)
    np.testing.assert_array_equal(trace[swap].matrix, [[1.0, 0.0], [0.0, 1.0]])
    # before the swap the snapshot still shows the old order
    np.testing.assert_array_equal(trace[swap - 1].matrix, [[0.0, 1.0], [1.0, 0.0]])


def test_free_column_and_no_more_rows():
    trace = elimination([[1.0, 2.0, 3.0], [2.0, 4.0, 7.0]])
    actions = trace.actions
    assert "no_pivot_detailed" in actions
    assert trace.final.pivot_cols == (0, 2)
    assert trace.final.free_variables == 1

    wide = elimination([[1.0, 2.0, 3.0]])
    k = wide.find("no_more_rows")
    assert wide[k].current_column == 1


def test_pivot_already_one_is_reported():
    trace = elimination([[1.0, 0.0], [0.0, 1.0]])
    assert trace.actions.count("pivot_already_one") == 2
    assert "scale" not in trace.actions
    assert trace.actions.count("no_elimination_needed") == 2
    assert trace.actions.count("no_elimination_above_needed") == 2


def test_back_elimination_order():
    trace = elimination([[1.0, 1.0], [0.0, 1.0]])
    starts = [s.current_pivot for s in trace if s.action == "back_substitute_start"]
    assert starts == [Pivot(1, 1), Pivot(0, 0)]
    k = trace.find("eliminate_above_explanation")
    assert trace[k].target_position == Pivot(0, 1)


def test_empty_matrix():
    trace = elimination([])
    assert trace.actions == ("start", "gauss_start", "gauss_jordan_start", "final")
    assert trace.final.rank == 0
