# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from enum import Enum

from .elimination import elimination
from .inverse import inverse_steps
from .solver import solve_system_steps
from .steps import Trace

logger = logging.getLogger(__name__)


class SolveType(str, Enum):
    REF = "ref"
    RREF = "rref"
    FULL = "full"
    INVERSE = "inverse"


def solve_steps(matrix, constants=None, solve_type=SolveType.FULL) -> Trace:
    """
    Run one of the four operations and return its materialized trace.

    Parameters
    ----------
    matrix     : Matrix | sequence of rows
    constants  : sequence | None
        Right-hand side. Carried through REF/RREF, required for a
        meaningful full solve (None means b = 0), ignored by INVERSE.
    solve_type : SolveType | str
        "ref", "rref", "full" or "inverse".
    """
    try:
        solve_type = SolveType(solve_type)
    except ValueError:
        raise TypeError(f"Unknown solve type: {solve_type!r}") from None

    logger.debug(f"solve_steps: {solve_type.value}")
    if solve_type is SolveType.REF:
        return elimination(matrix, constants, jordan=False)
    if solve_type is SolveType.RREF:
        return elimination(matrix, constants, jordan=True)
    if solve_type is SolveType.INVERSE:
        return inverse_steps(matrix)
    return solve_system_steps(matrix, constants)
