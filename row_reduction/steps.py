# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Step records emitted by the engines, and the Trace that holds them.

A step is a frozen snapshot: array fields are copied into read-only
arrays and list fields into tuples when the step is built.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, NamedTuple, Optional, Tuple

import numpy as np

from .describe import Description, format_equation, render
from .utils import freeze


class Phase(str, Enum):
    RREF = "rref"
    ANALYSIS = "analysis"
    SOLUTION = "solution"
    INVERSE = "inverse"


class Pivot(NamedTuple):
    """(row, col) position; used for pivots and for points of focus."""

    row: int
    col: int


@dataclass(frozen=True)
class ZeroRowCheck:
    """Consistency check of a zero coefficient row:  0 = value."""

    row: int
    value: float
    consistent: bool


@dataclass(frozen=True)
class Equation:
    """
    x[pivot_col] = constant + sum(coeff * x[free_col] for coeff, free_col in terms)
    read off one row of an RREF system.
    """

    row_index: int
    pivot_col: int
    constant: float
    terms: Tuple[Tuple[float, int], ...] = ()

    def __str__(self) -> str:
        return format_equation(self)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _plain(value):
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Pivot):
        return {"row": value.row, "col": value.col}
    if dataclasses.is_dataclass(value):
        return {_camel(k): _plain(v) for k, v in dataclasses.asdict(value).items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, np.generic):
        return value.item()
    return value


@dataclass(frozen=True, eq=False)
class Step:
    """
    Common part of every step.

    Attributes
    ----------
    phase   : Phase
    action  : str           tag of the decision point (also `type`)
    message : Description   structured description, see `describe.render`
    matrix  : ndarray | None  snapshot of the working matrix
    """

    phase: Phase
    action: str
    message: Description
    matrix: Optional[np.ndarray] = None

    # names of fields holding matrix / vector data
    _arrays = ("matrix",)

    def __post_init__(self):
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if f.name in self._arrays:
                object.__setattr__(self, f.name, freeze(value))
            elif isinstance(value, list):
                object.__setattr__(self, f.name, tuple(value))

    @property
    def type(self) -> str:
        return self.action

    @property
    def description(self) -> str:
        return render(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Plain-python view of the step with the camelCase keys used by
        presentation layers. Fields that are None are left out.
        """
        tag = "type" if self.phase in (Phase.ANALYSIS, Phase.SOLUTION) else "action"
        out: Dict[str, Any] = {
            "phase": self.phase.value,
            tag: self.action,
            "description": self.description,
            "template": self.message.tag,
        }
        for f in dataclasses.fields(self):
            if f.name in ("phase", "action", "message"):
                continue
            value = getattr(self, f.name)
            if value is not None:
                out[_camel(f.name)] = _plain(value)
        return out


@dataclass(frozen=True, eq=False)
class RrefStep(Step):
    pivot_cols: Tuple[int, ...] = ()
    pivots: Tuple[Pivot, ...] = ()
    augmented_vector: Optional[np.ndarray] = None
    current_column: Optional[int] = None
    search_start: Optional[int] = None
    search_values: Optional[Tuple[float, ...]] = None
    pivot_position: Optional[Pivot] = None
    target_position: Optional[Pivot] = None
    current_pivot: Optional[Pivot] = None
    rank: Optional[int] = None
    free_variables: Optional[int] = None

    _arrays = ("matrix", "augmented_vector")


@dataclass(frozen=True, eq=False)
class AnalysisStep(Step):
    pivot_cols: Tuple[int, ...] = ()
    augmented_vector: Optional[np.ndarray] = None
    rank_a: Optional[int] = None
    rank_ab: Optional[int] = None
    contradiction_row: Optional[int] = None
    zero_rows: Optional[Tuple[ZeroRowCheck, ...]] = None
    num_vars: Optional[int] = None
    free_cols: Optional[Tuple[int, ...]] = None
    solution_type: Optional[Enum] = None

    _arrays = ("matrix", "augmented_vector")


@dataclass(frozen=True, eq=False)
class SolutionStep(Step):
    pivot_cols: Tuple[int, ...] = ()
    augmented_vector: Optional[np.ndarray] = None
    solution: Optional[np.ndarray] = None
    free_cols: Optional[Tuple[int, ...]] = None
    equation: Optional[Equation] = None
    equations: Optional[Tuple[Equation, ...]] = None
    row_index: Optional[int] = None
    particular_solution: Optional[np.ndarray] = None
    basis_vectors: Optional[np.ndarray] = None
    rank: Optional[int] = None
    variables: Optional[int] = None

    _arrays = (
        "matrix",
        "augmented_vector",
        "solution",
        "particular_solution",
        "basis_vectors",
    )


@dataclass(frozen=True, eq=False)
class InverseStep(Step):
    pivot_cols: Optional[Tuple[int, ...]] = None
    augmented: bool = False
    original_matrix: Optional[np.ndarray] = None
    inverse_matrix: Optional[np.ndarray] = None
    current_column: Optional[int] = None
    search_start: Optional[int] = None
    pivot_position: Optional[Pivot] = None
    target_row: Optional[int] = None
    rank: Optional[int] = None
    has_inverse: Optional[bool] = None
    is_valid: Optional[bool] = None

    _arrays = ("matrix", "original_matrix", "inverse_matrix")


class Trace(Sequence):
    """
    Finite, zero-indexed, immutable sequence of steps.

    Index 0 is the state before any row operation, the last index the
    terminal verdict. Any position can be read again without recomputing.
    """

    def __init__(self, steps: Iterable[Step]):
        self._steps: Tuple[Step, ...] = tuple(steps)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Trace(self._steps[index])
        return self._steps[index]

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({len(self)} steps)"

    @property
    def final(self) -> Step:
        return self._steps[-1]

    @property
    def actions(self) -> Tuple[str, ...]:
        return tuple(s.action for s in self._steps)

    def find(self, action: str, start: int = 0) -> Optional[int]:
        """Index of the first step tagged `action` at or after `start`."""
        for i in range(start, len(self._steps)):
            if self._steps[i].action == action:
                return i
        return None

    @property
    def solution_start(self) -> Optional[int]:
        """Where the analysis of a full solve begins (None for other traces)."""
        return self.find("ready_to_solve")

    def to_list(self):
        return [s.to_dict() for s in self._steps]
