"""Solver backends and the problem/result contract they share."""

from numpart.solver.backend import (
    BackendResult,
    ProblemData,
    SolverBackend,
    TerminationStatus,
)
from numpart.solver.highs import HighsBackend

__all__ = [
    "BackendResult",
    "HighsBackend",
    "ProblemData",
    "SolverBackend",
    "TerminationStatus",
]
