# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
row_reduction
=============

Step-by-step Gaussian / Gauss-Jordan elimination, linear-system solving
and matrix inversion. Every operation returns a fully materialized
`Trace`: an ordered, replayable list of step records describing each
pivot search, swap, scale and elimination, with a snapshot of the
working matrix at every point.

Public API
~~~~~~~~~~
- Operation selector
    - `solve_steps`, `SolveType`
- Traced engines
    - `elimination` (REF / RREF), `solve_system_steps`, `inverse_steps`
- Silent results
    - `rref`, `ref`, `rank`, `nullspace_basis`, `inverse`
- Matrix primitives
    - `create`, `clone`, `get_column`, `check_zeros`, `sum_rows`,
      `switch_rows`, `scalar_vector_product`, `augment_vector`

Example
-------
>>> import row_reduction as rr
>>> trace = rr.solve_steps([[2, 0], [0, 3]], [4, 9])
>>> trace.final.action
'unique_solution_values'
>>> trace.final.solution.tolist()
[2.0, 3.0]
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

from .describe import Description, format_equation, format_number, render
from .elimination import (
    RrefResult,
    elimination,
    nullspace_basis,
    rank,
    ref,
    rref,
)
from .exceptions import RangeError, RowReductionError, ShapeError
from .inverse import inverse, inverse_steps
from .matrix import (
    Matrix,
    augment_vector,
    check_zeros,
    clone,
    create,
    get_column,
    identity,
    is_pivot_element,
    scalar_vector_product,
    sum_rows,
    switch_rows,
    with_row,
)
from .operations import SolveType, solve_steps
from .solver import SolutionType, ZeroRowCheck, solve_system_steps
from .steps import (
    AnalysisStep,
    Equation,
    InverseStep,
    Phase,
    Pivot,
    RrefStep,
    SolutionStep,
    Step,
    Trace,
)
from .utils import EPS

__all__ = [
    "solve_steps",
    "SolveType",
    "elimination",
    "solve_system_steps",
    "inverse_steps",
    "rref",
    "ref",
    "rank",
    "nullspace_basis",
    "inverse",
    "RrefResult",
    "SolutionType",
    "Matrix",
    "create",
    "clone",
    "get_column",
    "check_zeros",
    "sum_rows",
    "switch_rows",
    "scalar_vector_product",
    "augment_vector",
    "with_row",
    "identity",
    "is_pivot_element",
    "Phase",
    "Pivot",
    "Step",
    "RrefStep",
    "AnalysisStep",
    "SolutionStep",
    "InverseStep",
    "Equation",
    "ZeroRowCheck",
    "Trace",
    "Description",
    "render",
    "format_number",
    "format_equation",
    "RowReductionError",
    "ShapeError",
    "RangeError",
    "EPS",
]

# ---------------------------------------------------------------------
# Version string (helps “pip show row-reduction”, Sphinx, etc.)
# ---------------------------------------------------------------------
try:  # installed via pip / build backend
    __version__ = _pkg_version("row-reduction")
except PackageNotFoundError:  # running from a checkout
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------
# Lightweight default logging config so users see debug output
# only if they deliberately enable it.
# ---------------------------------------------------------------------
import logging as _logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
