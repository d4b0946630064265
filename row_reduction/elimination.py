# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from typing import Iterator, List, NamedTuple, Optional, Tuple

import numpy as np

from .describe import Description
from .matrix import (
    Matrix,
    as_vector,
    clone,
    create,
    scalar_vector_product,
    sum_rows,
    switch_rows,
    with_row,
)
from .steps import Phase, Pivot, RrefStep, Trace
from .utils import is_negative_one, is_nonzero, is_one

logger = logging.getLogger(__name__)

_FOUND = {
    "one": "perfect_pivot_found",
    "negative_one": "negative_pivot_found",
    "nonzero": "pivot_found",
}


class RrefResult(NamedTuple):
    matrix: Matrix
    pivot_cols: List[int]
    constants: Optional[np.ndarray]
    pivots: List[Pivot]


def _prepare(matrix, constants) -> Tuple[Matrix, Optional[np.ndarray]]:
    m = create(matrix)
    b = None if constants is None else as_vector(constants, m.rows)
    return m, b


def find_pivot(
    m: Matrix, col: int, start: int
) -> Tuple[Optional[int], Optional[str], List[float]]:
    """
    Scan column `col` from row `start` downward for a pivot.

    An entry equal to 1 ends the scan at once; otherwise the first -1 is
    preferred over the first other nonzero entry.

    Returns
    -------
    row     : int | None     chosen row, None if the column is zero there
    kind    : str | None     "one", "negative_one" or "nonzero"
    scanned : list[float]    values inspected, in scan order
    """
    one = negative_one = nonzero = None
    scanned: List[float] = []
    for i in range(start, m.rows):
        value = float(m.data[i, col])
        scanned.append(value)
        if is_one(value):
            one = i
            break
        elif is_negative_one(value) and negative_one is None:
            negative_one = i
        elif is_nonzero(value) and nonzero is None:
            nonzero = i

    if one is not None:
        return one, "one", scanned
    if negative_one is not None:
        return negative_one, "negative_one", scanned
    if nonzero is not None:
        return nonzero, "nonzero", scanned
    return None, None, scanned


def _reduce(
    matrix: Matrix, constants: Optional[np.ndarray], jordan: bool
) -> Iterator[RrefStep]:
    """
    Two-phase row reduction, yielding one RrefStep per decision point.

    Phase 1 (forward) leaves zeros below every pivot and scales each pivot
    to 1 (REF). Phase 2 (only if `jordan`) clears the entries above the
    pivots, last pivot first (RREF).
    """
    current = clone(matrix)
    aug = None if constants is None else np.array(constants, dtype=float)
    pivot_cols: List[int] = []
    pivots: List[Pivot] = []
    next_row = 0

    def step(action: str, **fields) -> RrefStep:
        params = fields.pop("params", {})
        return RrefStep(
            phase=Phase.RREF,
            action=action,
            message=Description(action, {"jordan": jordan, **params}),
            matrix=current.data,
            pivot_cols=pivot_cols,
            pivots=pivots,
            augmented_vector=aug,
            **fields,
        )

    yield step("start")
    yield step("gauss_start")

    # Phase 1
    for j in range(current.cols):
        if next_row >= current.rows:
            yield step(
                "no_more_rows",
                params={"col": j},
                current_column=j,
                search_start=next_row,
            )
            break

        yield step(
            "search_pivot",
            params={"col": j, "start": next_row},
            current_column=j,
            search_start=next_row,
        )

        pivot_row, kind, scanned = find_pivot(current, j, next_row)
        if pivot_row is None:
            logger.debug(f"column {j}: no pivot at or below row {next_row}")
            yield step(
                "no_pivot_detailed",
                params={"col": j, "start": next_row, "values": scanned},
                current_column=j,
                search_start=next_row,
                search_values=scanned,
            )
            continue

        value = float(current.data[pivot_row, j])
        logger.debug(f"column {j}: {kind} pivot {value} in row {pivot_row}")
        pivot_cols.append(j)
        pivots.append(Pivot(pivot_row, j))
        yield step(
            _FOUND[kind],
            params={
                "row": pivot_row,
                "col": j,
                "value": value,
                "start": next_row,
                "values": scanned,
            },
            pivot_position=Pivot(pivot_row, j),
            search_values=scanned,
        )

        # Bring the pivot up to the current pivot row
        if pivot_row != next_row:
            yield step(
                "swap_needed",
                params={"row": pivot_row, "col": j, "target_row": next_row},
            )
            current = switch_rows(current, pivot_row, next_row)
            if aug is not None:
                aug[[pivot_row, next_row]] = aug[[next_row, pivot_row]]
            pivots[-1] = Pivot(next_row, j)
            yield step(
                "swap",
                params={"row": pivot_row, "col": j, "target_row": next_row},
            )
        else:
            yield step("pivot_correct_position", params={"row": next_row, "col": j})

        # Scale the pivot to 1
        pivot_value = float(current.data[next_row, j])
        if not is_one(pivot_value):
            scale = 1 / pivot_value
            yield step(
                "scale_explanation",
                params={"row": next_row, "col": j, "value": pivot_value, "scale": scale},
            )
            current = with_row(
                current, next_row, scalar_vector_product(current.data[next_row], scale)
            )
            if aug is not None:
                aug[next_row] *= scale
            yield step("scale", params={"row": next_row, "col": j, "scale": scale})
        else:
            yield step("pivot_already_one", params={"row": next_row, "col": j})

        # Eliminate below the pivot only
        eliminated = 0
        for i in range(next_row + 1, current.rows):
            target = float(current.data[i, j])
            if not is_nonzero(target):
                continue
            factor = -target
            params = {
                "row": i,
                "col": j,
                "pivot_row": next_row,
                "value": target,
                "factor": factor,
            }
            yield step(
                "eliminate_explanation",
                params=params,
                target_position=Pivot(i, j),
            )
            current = with_row(current, i, sum_rows(current, next_row, i, factor))
            if aug is not None:
                aug[i] += factor * aug[next_row]
            eliminated += 1
            yield step("eliminate", params=params)

        if not eliminated:
            yield step("no_elimination_needed", params={"row": next_row, "col": j})

        yield step("pivot_forward_complete", params={"row": next_row, "col": j})
        next_row += 1

    rank = len(pivot_cols)
    free = current.cols - rank
    summary = {"pivot_cols": list(pivot_cols), "rank": rank, "free": free}

    if not jordan:
        logger.debug(f"REF done: rank {rank}, {free} free column(s)")
        yield step("final", params=summary, rank=rank, free_variables=free)
        return

    # Phase 2
    yield step("gauss_jordan_start")

    for pivot in reversed(pivots):
        yield step(
            "back_substitute_start",
            params={"row": pivot.row, "col": pivot.col},
            current_pivot=pivot,
        )

        eliminated = 0
        for i in range(pivot.row):
            target = float(current.data[i, pivot.col])
            if not is_nonzero(target):
                continue
            factor = -target
            params = {
                "row": i,
                "col": pivot.col,
                "pivot_row": pivot.row,
                "value": target,
                "factor": factor,
            }
            yield step(
                "eliminate_above_explanation",
                params=params,
                target_position=Pivot(i, pivot.col),
            )
            current = with_row(current, i, sum_rows(current, pivot.row, i, factor))
            if aug is not None:
                aug[i] += factor * aug[pivot.row]
            eliminated += 1
            yield step("eliminate_above", params=params)

        if not eliminated:
            yield step(
                "no_elimination_above_needed",
                params={"row": pivot.row, "col": pivot.col},
            )

        yield step(
            "pivot_phase2_complete", params={"row": pivot.row, "col": pivot.col}
        )

    logger.debug(f"RREF done: rank {rank}, {free} free column(s)")
    yield step("final", params=summary, rank=rank, free_variables=free)


def elimination(matrix, constants=None, jordan: bool = True) -> Trace:
    """
    Row-reduce `matrix` step by step.

    Parameters
    ----------
    matrix    : Matrix | sequence of rows
    constants : sequence | None     (rows,)
        Optional right-hand side; receives the same row operations.
    jordan    : bool
        True for RREF (Gauss-Jordan), False to stop at REF.

    Returns
    -------
    Trace of RrefStep, fully materialized. The caller's matrix and
    constants are never modified.
    """
    m, b = _prepare(matrix, constants)
    return Trace(_reduce(m, b, jordan))


def _last(matrix, constants, jordan: bool) -> RrefResult:
    m, b = _prepare(matrix, constants)
    final = None
    for final in _reduce(m, b, jordan):
        pass
    aug = None if final.augmented_vector is None else final.augmented_vector.copy()
    return RrefResult(
        matrix=Matrix(final.matrix),
        pivot_cols=list(final.pivot_cols),
        constants=aug,
        pivots=list(final.pivots),
    )


def rref(matrix, constants=None) -> RrefResult:
    """
    Return the reduced row-echelon form of `matrix` without a trace.

    Runs the same engine as `elimination(..., jordan=True)`, so the result
    matches that trace's final step exactly.

    Returns
    -------
    RrefResult(matrix, pivot_cols, constants, pivots)
    """
    return _last(matrix, constants, jordan=True)


def ref(matrix, constants=None) -> RrefResult:
    """Row-echelon form (forward phase only), without a trace."""
    return _last(matrix, constants, jordan=False)


def rank(matrix) -> int:
    """Matrix rank is the number of pivot columns"""
    return len(rref(matrix).pivot_cols)


def back_substitute_basis(
    R: np.ndarray, pivot_cols: List[int], free_col: int
) -> np.ndarray:
    """
    Null-space generator for one free column of an RREF matrix R.

    The free variable `free_col` is set to 1, every other free variable to
    0, and the pivot variables are solved bottom pivot first:
        x[p] = -sum(R[row, j] * x[j] for j > p)
    """
    n = R.shape[1]
    v = np.zeros(n)
    v[free_col] = 1.0
    for row in reversed(range(len(pivot_cols))):
        col = pivot_cols[row]
        v[col] = -(R[row, col + 1 :] @ v[col + 1 :])
    return v


def nullspace_basis(matrix) -> np.ndarray:
    """
    Constructs a matrix N whose columns form a basis of the nullspace of A

    Returns
    -------
    N : (n, n-r) ndarray
        If A is full column rank the returned array has shape (n, 0).
    """
    R, pivot_cols, _c, _pivots = rref(matrix)
    n = R.cols
    free = [j for j in range(n) if j not in pivot_cols]
    N = np.zeros((n, len(free)))
    for k, j in enumerate(free):
        N[:, k] = back_substitute_basis(R.data, pivot_cols, j)
    return N
