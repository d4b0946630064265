# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from typing import Iterator, List, Optional

import numpy as np

from .describe import Description
from .matrix import (
    Matrix,
    create,
    identity,
    scalar_vector_product,
    sum_rows,
    switch_rows,
    with_row,
)
from .steps import InverseStep, Phase, Pivot, Trace
from .utils import is_nonzero

logger = logging.getLogger(__name__)


def _invert(A: Matrix) -> Iterator[InverseStep]:
    def step(action: str, params=None, **fields) -> InverseStep:
        return InverseStep(
            phase=Phase.INVERSE,
            action=action,
            message=Description(f"inverse_{action}", dict(params or {})),
            **fields,
        )

    if A.rows != A.cols:
        logger.debug(f"cannot invert a {A.rows}x{A.cols} matrix")
        yield step(
            "error",
            params={"rows": A.rows, "cols": A.cols},
            matrix=A.data,
            is_valid=False,
        )
        return

    n = A.rows
    yield step("start", params={"n": n}, matrix=A.data, is_valid=True)
    yield step("create_augmented", params={"n": n}, matrix=A.data, augmented=True)

    current = Matrix(np.hstack([A.data, identity(n).data]))
    yield step(
        "augmented_created",
        matrix=current.data,
        augmented=True,
        original_matrix=A.data,
    )

    pivot_cols: List[int] = []
    next_row = 0
    singular = False

    yield step("elimination_start", matrix=current.data, pivot_cols=[], augmented=True)

    # Only the columns of A are pivot candidates; the identity block just
    # records the row operations.
    for j in range(n):
        yield step(
            "search_pivot",
            params={"col": j, "start": next_row},
            matrix=current.data,
            pivot_cols=pivot_cols,
            current_column=j,
            search_start=next_row,
            augmented=True,
        )

        pivot_row = next(
            (i for i in range(next_row, n) if is_nonzero(current.data[i, j])), None
        )
        if pivot_row is None:
            logger.debug(f"singular: no pivot in column {j}")
            yield step(
                "singular_detected",
                params={"col": j},
                matrix=current.data,
                pivot_cols=pivot_cols,
                current_column=j,
                augmented=True,
            )
            singular = True
            break

        pivot_cols.append(j)
        yield step(
            "pivot_found",
            params={"row": pivot_row, "col": j, "value": float(current.data[pivot_row, j])},
            matrix=current.data,
            pivot_cols=pivot_cols,
            pivot_position=Pivot(pivot_row, j),
            augmented=True,
        )

        if pivot_row != next_row:
            swap = {"row": pivot_row, "target_row": next_row, "col": j}
            yield step(
                "swap_explanation",
                params=swap,
                matrix=current.data,
                pivot_cols=pivot_cols,
                augmented=True,
            )
            current = switch_rows(current, pivot_row, next_row)
            yield step(
                "swapped",
                params=swap,
                matrix=current.data,
                pivot_cols=pivot_cols,
                augmented=True,
            )

        value = float(current.data[next_row, j])
        scale = 1 / value
        yield step(
            "scale_explanation",
            params={"row": next_row, "col": j, "value": value, "scale": scale},
            matrix=current.data,
            pivot_cols=pivot_cols,
            augmented=True,
        )
        current = with_row(
            current, next_row, scalar_vector_product(current.data[next_row], scale)
        )
        yield step(
            "scaled",
            params={"row": next_row, "col": j},
            matrix=current.data,
            pivot_cols=pivot_cols,
            augmented=True,
        )

        # Gauss-Jordan: clear the column above and below the pivot
        yield step(
            "eliminate_explanation",
            params={"col": j},
            matrix=current.data,
            pivot_cols=pivot_cols,
            augmented=True,
        )
        for i in range(n):
            if i == next_row or not is_nonzero(current.data[i, j]):
                continue
            factor = -float(current.data[i, j])
            params = {"row": i, "col": j, "pivot_row": next_row, "factor": factor}
            yield step(
                "eliminate_row",
                params=params,
                matrix=current.data,
                pivot_cols=pivot_cols,
                target_row=i,
                augmented=True,
            )
            current = with_row(current, i, sum_rows(current, next_row, i, factor))
            yield step(
                "row_eliminated",
                params=params,
                matrix=current.data,
                pivot_cols=pivot_cols,
                augmented=True,
            )

        yield step(
            "column_complete",
            params={"row": next_row, "col": j},
            matrix=current.data,
            pivot_cols=pivot_cols,
            augmented=True,
        )
        next_row += 1

    if singular or len(pivot_cols) < n:
        yield step(
            "no_inverse",
            params={"rank": len(pivot_cols), "n": n},
            matrix=A.data,
            pivot_cols=pivot_cols,
            rank=len(pivot_cols),
            has_inverse=False,
        )
        return

    inv = current.data[:, n:]
    yield step(
        "extract_inverse",
        params={"n": n},
        matrix=current.data,
        inverse_matrix=inv,
        augmented=True,
    )
    logger.debug(f"inverse found for {n}x{n} matrix")
    yield step(
        "complete",
        params={"n": n, "pivot_cols": list(pivot_cols)},
        matrix=current.data,
        original_matrix=A.data,
        inverse_matrix=inv,
        pivot_cols=pivot_cols,
        has_inverse=True,
        rank=n,
    )


def inverse_steps(matrix) -> Trace:
    """
    Invert a square matrix by Gauss-Jordan elimination on [A | I].

    Never raises for a well-formed matrix: a non-square input ends in an
    `error` step, a singular one in `no_inverse` (has_inverse=False), and
    an invertible one in `complete` carrying `inverse_matrix`.

    Unlike `elimination`, the pivot is simply the first nonzero entry at or
    below the current pivot row.
    """
    return Trace(_invert(create(matrix)))


def inverse(matrix) -> Optional[np.ndarray]:
    """A^{-1} as an (n, n) array, or None if A is not square or is singular."""
    final = inverse_steps(matrix).final
    if not final.has_inverse:
        return None
    return final.inverse_matrix.copy()
