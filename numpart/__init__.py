"""numpart: multi-way number partitioning as a mixed-integer linear program.

numpart provides a small algebraic modeling layer (indexed variables, linear
expressions, per-index constraint sets) that assembles a MILP in matrix form
and solves it with HiGHS, plus the partitioning formulation built on top.

Primary API:
    partition() - Split integer weights into K groups with minimal spread
    build_partition_model() - Build the partitioning MILP without solving it
    Model - Declare variables and constraints, optimize, query values
    IndexRange - Named finite integer range for indexing
    term(), add(), scale(), constant(), sum_over() - Expression builders

Example:
    from numpart import partition

    result = partition([1, 2, 3, 4, 5, 6], 2, config={"time_limit_ms": 10_000})
    result.status        # ModelStatus.OPTIMAL
    result.score         # 1.0
    result.group_sums()  # [10.0, 11.0] or [11.0, 10.0]
"""

from __future__ import annotations

from numpart import logging
from numpart._version import __version__
from numpart.config import DEFAULT_SOLVER_CONFIG, SolverConfig
from numpart.errors import (
    DeclarationError,
    NumpartError,
    StateError,
    VariableReferenceError,
)
from numpart.io import PartitionProblem, load_problem_file, load_problem_yaml
from numpart.model import (
    Constraint,
    IndexRange,
    LinearExpression,
    Model,
    Variable,
    VariableSet,
    add,
    compare,
    constant,
    scale,
    sum_over,
    term,
)
from numpart.partition import PartitionModel, build_partition_model, partition
from numpart.results import (
    GroupSummary,
    PartitionResult,
    group_summary,
    score,
    variable_value,
)
from numpart.solver import HighsBackend, SolverBackend
from numpart.types import ModelStatus, Operator, Sense, VarType

__all__ = [
    # Version
    "__version__",
    # Modeling
    "Model",
    "IndexRange",
    "Variable",
    "VariableSet",
    "LinearExpression",
    "Constraint",
    "constant",
    "term",
    "add",
    "scale",
    "sum_over",
    "compare",
    # Types
    "VarType",
    "Operator",
    "Sense",
    "ModelStatus",
    # Partitioning
    "partition",
    "build_partition_model",
    "PartitionModel",
    "PartitionProblem",
    "load_problem_yaml",
    "load_problem_file",
    # Results
    "GroupSummary",
    "PartitionResult",
    "group_summary",
    "score",
    "variable_value",
    # Solving
    "SolverBackend",
    "HighsBackend",
    "SolverConfig",
    "DEFAULT_SOLVER_CONFIG",
    # Errors
    "NumpartError",
    "DeclarationError",
    "VariableReferenceError",
    "StateError",
    # Utilities
    "logging",
]
