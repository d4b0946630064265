# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Plain-text rendering of step descriptions.

The engines only emit `Description(tag, params)`; nothing here feeds back
into the algorithms. Indices in `params` are 0-based, rendered 1-based.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping

from .utils import is_nonzero, is_zero


@dataclass(frozen=True)
class Description:
    tag: str
    params: Mapping[str, Any] = field(default_factory=dict)


def format_number(x: float) -> str:
    """Round to two decimals; whole numbers print without a fraction."""
    if x is None:
        return "0"
    x = float(x)
    if not math.isfinite(x):
        return str(x)
    r = round(x, 2)
    if is_zero(r):
        return "0"
    if r == int(r):
        return str(int(r))
    return str(r)


def format_equation(eq) -> str:
    """x2 = 1 - x3 + 2x4 style text for an Equation."""
    parts = []
    if is_nonzero(eq.constant):
        parts.append(format_number(eq.constant))
    for coeff, col in eq.terms:
        magnitude = format_number(abs(coeff))
        core = f"x{col + 1}" if magnitude == "1" else f"{magnitude}x{col + 1}"
        if not parts:
            parts.append(core if coeff > 0 else f"-{core}")
        else:
            parts.append(("+ " if coeff > 0 else "- ") + core)
    rhs = " ".join(parts) if parts else "0"
    return f"x{eq.pivot_col + 1} = {rhs}"


def _pos(p) -> str:
    return f"({p['row'] + 1}, {p['col'] + 1})"


def _scan(p) -> str:
    return ", ".join(
        f"row {p['start'] + k + 1}: {format_number(v)}" for k, v in enumerate(p["values"])
    )


def _plural(k: int, word: str) -> str:
    return f"{k} {word}" + ("" if k == 1 else "s")


def _columns(cols) -> str:
    return ", ".join(str(c + 1) for c in cols) or "none"


def _start(p) -> str:
    if p["jordan"]:
        return (
            "Starting Gauss-Jordan Elimination to reach Reduced Row Echelon Form "
            "(RREF): forward elimination to REF, then back elimination to RREF."
        )
    return (
        "Starting Gaussian Elimination to reach Row Echelon Form (REF): "
        "forward elimination only."
    )


def _final(p) -> str:
    form = "RREF" if p["jordan"] else "REF"
    return (
        f"Matrix reduced to {form}. Pivot columns: {_columns(p['pivot_cols'])}; "
        f"rank = {p['rank']}; {_plural(p['free'], 'free variable')}."
    )


def _rank_ab(p) -> str:
    lines = [f"rank(A) = {p['rank_a']}."]
    for check in p["zero_rows"]:
        status = "consistent" if check.consistent else "CONTRADICTION"
        lines.append(f"Row {check.row + 1}: 0 = {format_number(check.value)} -> {status}")
    if not p["zero_rows"]:
        lines.append("The coefficient matrix has no zero rows.")
    if p["contradiction_row"] is not None:
        lines.append(
            f"Contradiction in row {p['contradiction_row'] + 1}, so "
            f"rank([A|b]) = rank(A) + 1 = {p['rank_ab']}."
        )
    else:
        lines.append(f"No inconsistent zero rows, so rank([A|b]) = {p['rank_ab']}.")
    return "\n".join(lines)


def _solution_type(p) -> str:
    if p["kind"] == "unique":
        return (
            f"Unique solution: rank(A) = rank([A|b]) = {p['rank']} = n, "
            "no free variables."
        )
    free = ", ".join(f"x{c + 1}" for c in p["free_cols"])
    return (
        f"Infinitely many solutions: rank(A) = rank([A|b]) = {p['rank']} < "
        f"{p['n']}; free variables: {free}."
    )


TEMPLATES: Dict[str, Callable[[Mapping[str, Any]], str]] = {
    # elimination
    "start": _start,
    "gauss_start": lambda p: (
        "Forward elimination: find pivots left to right, swap them into place, "
        "scale them to 1 and clear the entries below each pivot."
    ),
    "no_more_rows": lambda p: (
        f"No rows left for column {p['col'] + 1}; every pivot row is used."
    ),
    "search_pivot": lambda p: (
        f"Searching for a pivot in column {p['col'] + 1}, "
        f"starting from row {p['start'] + 1} downward."
    ),
    "perfect_pivot_found": lambda p: (
        f"Ideal pivot (1) at {_pos(p)}; no division needed. Scanned {_scan(p)}."
    ),
    "negative_pivot_found": lambda p: (
        f"Pivot -1 at {_pos(p)}; a sign flip makes it 1. Scanned {_scan(p)}."
    ),
    "pivot_found": lambda p: (
        f"Pivot {format_number(p['value'])} at {_pos(p)}. Scanned {_scan(p)}."
    ),
    "no_pivot_detailed": lambda p: (
        f"No pivot in column {p['col'] + 1} from row {p['start'] + 1} down, "
        f"so x{p['col'] + 1} is a free variable."
    ),
    "swap_needed": lambda p: (
        f"Pivot row {p['row'] + 1} is not the current pivot row "
        f"{p['target_row'] + 1}; swapping them."
    ),
    "swap": lambda p: (
        f"Rows {p['row'] + 1} and {p['target_row'] + 1} swapped; pivot now at "
        f"({p['target_row'] + 1}, {p['col'] + 1})."
    ),
    "pivot_correct_position": lambda p: (
        f"Pivot at {_pos(p)} is already in the pivot row. No swap needed."
    ),
    "scale_explanation": lambda p: (
        f"Scale row {p['row'] + 1} by 1 / {format_number(p['value'])} = "
        f"{format_number(p['scale'])} to make the pivot 1."
    ),
    "scale": lambda p: (
        f"Row {p['row'] + 1} multiplied by {format_number(p['scale'])}; "
        f"pivot at {_pos(p)} is now 1."
    ),
    "pivot_already_one": lambda p: f"Pivot at {_pos(p)} is already 1. No scaling needed.",
    "eliminate_explanation": lambda p: (
        f"Eliminate {format_number(p['value'])} at {_pos(p)}: Row {p['row'] + 1} -> "
        f"Row {p['row'] + 1} + ({format_number(p['factor'])}) x Row {p['pivot_row'] + 1}."
    ),
    "eliminate": lambda p: f"Entry at {_pos(p)} is now zero.",
    "no_elimination_needed": lambda p: (
        f"All entries below the pivot at {_pos(p)} are already zero."
    ),
    "pivot_forward_complete": lambda p: (
        f"Column {p['col'] + 1} done: pivot 1 at {_pos(p)}, zeros below."
    ),
    "gauss_jordan_start": lambda p: (
        "Back elimination: from the last pivot upward, clear the entries above "
        "each pivot."
    ),
    "back_substitute_start": lambda p: f"Clearing the entries above the pivot at {_pos(p)}.",
    "eliminate_above_explanation": lambda p: (
        f"Eliminate {format_number(p['value'])} at {_pos(p)}: Row {p['row'] + 1} -> "
        f"Row {p['row'] + 1} + ({format_number(p['factor'])}) x Row {p['pivot_row'] + 1}."
    ),
    "eliminate_above": lambda p: f"Entry at {_pos(p)} is now zero.",
    "no_elimination_above_needed": lambda p: (
        f"All entries above the pivot at {_pos(p)} are already zero."
        if p["row"] > 0
        else "First row; nothing above the pivot."
    ),
    "pivot_phase2_complete": lambda p: (
        f"Column {p['col'] + 1} is fully reduced: the pivot at {_pos(p)} is its "
        "only nonzero entry."
    ),
    "final": _final,
    # analysis / solution
    "ready_to_solve": lambda p: "System ready for solution: [A|b] is in RREF.",
    "rank_explanation": lambda p: (
        "Rank = number of pivot columns = number of linearly independent rows."
    ),
    "rank_ab_calculation": _rank_ab,
    "theorem_explanation": lambda p: (
        f"rank(A) = {p['rank_a']}, rank([A|b]) = {p['rank_ab']}, n = {p['n']}. "
        "Equal ranks equal to n: unique; equal ranks below n: infinite; "
        "rank(A) < rank([A|b]): none."
    ),
    "solution_type_determined": _solution_type,
    "unique_solution_values": lambda p: "; ".join(
        f"x{col + 1} = {format_number(v)} (row {row + 1})" for col, v, row in p["values"]
    ),
    "extracting_equations": lambda p: (
        "Each pivot row gives a basic variable in terms of the free variables."
    ),
    "equation_extracted": lambda p: f"Row {p['row'] + 1}: {format_equation(p['equation'])}",
    "infinite_solutions_general": lambda p: (
        "General solution x = xp + "
        + " + ".join(f"x{c + 1} v{k + 1}" for k, c in enumerate(p["free_cols"]))
    ),
    "no_solution": lambda p: (
        f"No solution: rank(A) = {p['rank_a']} < rank([A|b]) = {p['rank_ab']}, "
        "the system is inconsistent."
    ),
    # inverse
    "inverse_error": lambda p: (
        f"Matrix must be square to have an inverse; it is {p['rows']} x {p['cols']}."
    ),
    "inverse_start": lambda p: (
        f"Inverting a {p['n']} x {p['n']} matrix by Gauss-Jordan elimination on [A | I]."
    ),
    "inverse_create_augmented": lambda p: (
        f"Appending the {p['n']} x {p['n']} identity to form a "
        f"{p['n']} x {2 * p['n']} matrix."
    ),
    "inverse_augmented_created": lambda p: "[A | I] is ready for elimination.",
    "inverse_elimination_start": lambda p: "Transforming [A | I] into [I | A^-1].",
    "inverse_search_pivot": lambda p: (
        f"Searching for a pivot in column {p['col'] + 1} from row {p['start'] + 1} down."
    ),
    "inverse_singular_detected": lambda p: (
        f"No nonzero pivot in column {p['col'] + 1}: the matrix is singular."
    ),
    "inverse_pivot_found": lambda p: (
        f"Pivot {format_number(p['value'])} at {_pos(p)}."
    ),
    "inverse_swap_explanation": lambda p: (
        f"Swapping rows {p['row'] + 1} and {p['target_row'] + 1}."
    ),
    "inverse_swapped": lambda p: (
        f"Rows swapped; pivot now at ({p['target_row'] + 1}, {p['col'] + 1})."
    ),
    "inverse_scale_explanation": lambda p: (
        f"Scale row {p['row'] + 1} by 1 / {format_number(p['value'])} = "
        f"{format_number(p['scale'])}."
    ),
    "inverse_scaled": lambda p: f"Pivot at {_pos(p)} is now 1.",
    "inverse_eliminate_explanation": lambda p: (
        f"Clearing column {p['col'] + 1} above and below the pivot."
    ),
    "inverse_eliminate_row": lambda p: (
        f"Row {p['row'] + 1} -> Row {p['row'] + 1} + ({format_number(p['factor'])}) "
        f"x Row {p['pivot_row'] + 1}."
    ),
    "inverse_row_eliminated": lambda p: f"Entry at {_pos(p)} is now zero.",
    "inverse_column_complete": lambda p: (
        f"Column {p['col'] + 1} has 1 at {_pos(p)} and 0 elsewhere."
    ),
    "inverse_no_inverse": lambda p: (
        f"Only {p['rank']} of {p['n']} pivots: the matrix is singular, no inverse exists."
    ),
    "inverse_extract_inverse": lambda p: (
        f"The right half (columns {p['n'] + 1} to {2 * p['n']}) is A^-1."
    ),
    "inverse_complete": lambda p: (
        f"Inverse found; rank {p['n']}, pivot columns {_columns(p['pivot_cols'])}."
    ),
}


def render(description: Description) -> str:
    """Plain-text form of a step description (the tag itself if unknown)."""
    template = TEMPLATES.get(description.tag)
    if template is None:
        return description.tag
    return template(description.params)
