"""Contract between the modeling layer and a numeric MILP solver.

The model serializes itself into :class:`ProblemData` (column vectors and a
sparse row matrix). A backend solves it and returns a :class:`BackendResult`.
Termination outcomes are values, not exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Optional, Protocol, Tuple

import numpy as np
from scipy import sparse

from numpart.config import SolverConfig
from numpart.types.base import ModelStatus, Sense

if TYPE_CHECKING:
    from numpart.model.variables import VariableId


class TerminationStatus(IntEnum):
    """Final verdict of one backend call."""

    OPTIMAL = 1
    TIME_LIMIT_REACHED = 2
    INFEASIBLE = 3
    ERROR = 4

    def to_model_status(self) -> ModelStatus:
        return ModelStatus[self.name]


@dataclass(frozen=True)
class ProblemData:
    """Matrix form of a model: ``row_lower <= A @ x <= row_upper``, ``lb <= x <= ub``.

    Attributes:
        variable_ids: Column order; ``variable_ids[j]`` identifies column ``j``.
        c: Objective coefficients per column.
        objective_offset: Constant added to the objective value.
        sense: Optimization direction.
        A: Constraint matrix, one row per constraint instance.
        row_lower: Row lower bounds (``-inf`` for ``<=`` rows).
        row_upper: Row upper bounds (``+inf`` for ``>=`` rows).
        lb: Column lower bounds (``-inf`` when unbounded).
        ub: Column upper bounds (``+inf`` when unbounded).
        integrality: 1 for integral columns, 0 for continuous ones.
    """

    variable_ids: Tuple[VariableId, ...]
    c: np.ndarray
    objective_offset: float
    sense: Sense
    A: sparse.csr_matrix
    row_lower: np.ndarray
    row_upper: np.ndarray
    lb: np.ndarray
    ub: np.ndarray
    integrality: np.ndarray

    @property
    def num_variables(self) -> int:
        return len(self.variable_ids)

    @property
    def num_constraints(self) -> int:
        return int(self.A.shape[0])

    @property
    def num_integral(self) -> int:
        return int(np.count_nonzero(self.integrality))


@dataclass(frozen=True)
class BackendResult:
    """Outcome of a backend call.

    Attributes:
        status: Termination status.
        values: Column values aligned with ``ProblemData.variable_ids``, or None
            when no feasible incumbent exists.
        objective_value: Objective value of the incumbent including the
            offset, in the model's own sense; None without an incumbent.
        message: Backend-provided description of the outcome.
    """

    status: TerminationStatus
    values: Optional[np.ndarray] = None
    objective_value: Optional[float] = None
    message: str = ""

    @property
    def has_solution(self) -> bool:
        return self.values is not None


class SolverBackend(Protocol):
    """Anything that can solve a :class:`ProblemData` within a time budget."""

    def solve(self, problem: ProblemData, config: SolverConfig) -> BackendResult:
        ...
