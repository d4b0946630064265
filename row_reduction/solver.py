# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from enum import Enum
from typing import Iterator, List, Union

import numpy as np

from .describe import Description
from .elimination import back_substitute_basis, elimination, rref
from .matrix import Matrix, as_vector, create
from .steps import AnalysisStep, Equation, Phase, SolutionStep, Trace, ZeroRowCheck
from .utils import is_nonzero

logger = logging.getLogger(__name__)

__all__ = [
    "SolutionType",
    "Equation",
    "ZeroRowCheck",
    "solve_system_steps",
]


class SolutionType(str, Enum):
    UNIQUE = "unique"
    INFINITE = "infinite"
    NONE = "no_solution"


def _equation(R: np.ndarray, c: np.ndarray, row: int, pivot_col: int, free_cols) -> Equation:
    terms = tuple(
        (-float(R[row, j]), j) for j in free_cols if is_nonzero(R[row, j])
    )
    return Equation(row_index=row, pivot_col=pivot_col, constant=float(c[row]), terms=terms)


def _solve(A: Matrix, b: np.ndarray) -> Iterator[Union[AnalysisStep, SolutionStep]]:
    # Replay of the Gauss-Jordan trace on [A | b]
    yield from elimination(A, b, jordan=True)

    R, pivot_cols, c, _pivots = rref(A, b)
    n = A.cols
    rank_a = len(pivot_cols)

    def analysis(action: str, params=None, **fields) -> AnalysisStep:
        return AnalysisStep(
            phase=Phase.ANALYSIS,
            action=action,
            message=Description(action, params or {}),
            matrix=R.data,
            pivot_cols=pivot_cols,
            augmented_vector=c,
            **fields,
        )

    def solution(action: str, params=None, **fields) -> SolutionStep:
        return SolutionStep(
            phase=Phase.SOLUTION,
            action=action,
            message=Description(action, params or {}),
            matrix=R.data,
            pivot_cols=pivot_cols,
            augmented_vector=c,
            **fields,
        )

    yield analysis("ready_to_solve")
    yield analysis("rank_explanation")

    # Rows at or below rank(A) are zero in the coefficient part; a nonzero
    # constant there reads 0 = c and adds a pivot to [A | b].
    rank_ab = rank_a
    contradiction_row = None
    zero_rows: List[ZeroRowCheck] = []
    for i in range(rank_a, A.rows):
        value = float(c[i])
        consistent = not is_nonzero(value)
        zero_rows.append(ZeroRowCheck(row=i, value=value, consistent=consistent))
        if not consistent and contradiction_row is None:
            contradiction_row = i
            rank_ab = rank_a + 1

    yield analysis(
        "rank_ab_calculation",
        params={
            "rank_a": rank_a,
            "rank_ab": rank_ab,
            "cols": n,
            "zero_rows": zero_rows,
            "contradiction_row": contradiction_row,
        },
        rank_a=rank_a,
        rank_ab=rank_ab,
        contradiction_row=contradiction_row,
        zero_rows=zero_rows,
    )
    yield analysis(
        "theorem_explanation",
        params={"rank_a": rank_a, "rank_ab": rank_ab, "n": n},
        rank_a=rank_a,
        rank_ab=rank_ab,
        num_vars=n,
    )

    if rank_a == rank_ab == n:
        logger.debug(f"unique solution, rank {rank_a}")
        yield analysis(
            "solution_type_determined",
            params={"kind": SolutionType.UNIQUE.value, "rank": rank_a, "n": n},
            rank_a=rank_a,
            rank_ab=rank_ab,
            num_vars=n,
            solution_type=SolutionType.UNIQUE,
        )

        x = np.zeros(n)
        for i, col in enumerate(pivot_cols):
            x[col] = c[i]
        yield solution(
            "unique_solution_values",
            params={"values": [(col, float(c[i]), i) for i, col in enumerate(pivot_cols)]},
            solution=x,
        )

    elif rank_a == rank_ab and rank_a < n:
        free_cols = [j for j in range(n) if j not in pivot_cols]
        logger.debug(f"infinite solutions, rank {rank_a}, free columns {free_cols}")
        yield analysis(
            "solution_type_determined",
            params={
                "kind": SolutionType.INFINITE.value,
                "rank": rank_a,
                "n": n,
                "free_cols": free_cols,
            },
            rank_a=rank_a,
            rank_ab=rank_ab,
            num_vars=n,
            free_cols=free_cols,
            solution_type=SolutionType.INFINITE,
        )
        yield solution("extracting_equations", free_cols=free_cols)

        equations = []
        for i, col in enumerate(pivot_cols):
            eq = _equation(R.data, c, i, col, free_cols)
            equations.append(eq)
            yield solution(
                "equation_extracted",
                params={"row": i, "pivot_col": col, "equation": eq},
                equation=eq,
                row_index=i,
            )

        # x = xp + t1 v1 + t2 v2 + ...
        xp = np.zeros(n)
        for i, col in enumerate(pivot_cols):
            xp[col] = c[i]
        basis = np.array(
            [back_substitute_basis(R.data, pivot_cols, j) for j in free_cols]
        ).reshape(len(free_cols), n)

        yield solution(
            "infinite_solutions_general",
            params={"rank": rank_a, "n": n, "free_cols": free_cols},
            free_cols=free_cols,
            equations=equations,
            particular_solution=xp,
            basis_vectors=basis,
            rank=rank_a,
            variables=n,
        )

    else:
        logger.debug(
            f"no solution: rank(A)={rank_a} < rank([A|b])={rank_ab}, "
            f"row {contradiction_row}"
        )
        yield analysis(
            "no_solution",
            params={"rank_a": rank_a, "rank_ab": rank_ab},
            rank_a=rank_a,
            rank_ab=rank_ab,
            contradiction_row=contradiction_row,
            solution_type=SolutionType.NONE,
        )


def solve_system_steps(matrix, constants=None) -> Trace:
    """
    Solve A x = b with a full, replayable trace.

    The trace is the Gauss-Jordan reduction of [A | b] followed by the
    rank analysis and one of three verdicts:

    - unique     : `unique_solution_values` step with `solution`
    - infinite   : `infinite_solutions_general` step with
                   `particular_solution` and `basis_vectors` (one row per
                   free column)
    - no solution: `no_solution` step, no solution vector

    `constants=None` solves the homogeneous system A x = 0.
    """
    A = create(matrix)
    b = np.zeros(A.rows) if constants is None else as_vector(constants, A.rows)
    return Trace(_solve(A, b))
