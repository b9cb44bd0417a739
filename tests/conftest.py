"""Global pytest configuration and shared fixtures.

``ScriptedBackend`` stands in for a solver in tests that exercise the model
lifecycle without depending on HiGHS behavior. End-to-end tests use the real
``HighsBackend``.
"""

from __future__ import annotations

from typing import Callable, List, Optional

import numpy as np
import pytest

from numpart.config import SolverConfig
from numpart.solver.backend import BackendResult, ProblemData, TerminationStatus
from numpart.solver.highs import HighsBackend


class ScriptedBackend:
    """Backend that returns a prepared result and records every call.

    Args:
        status: Termination status to report.
        values: Callable building column values from the problem; None reports
            no incumbent.
        error: Exception to raise instead of returning.
    """

    def __init__(
        self,
        status: TerminationStatus = TerminationStatus.OPTIMAL,
        values: Optional[Callable[[ProblemData], np.ndarray]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.status = status
        self.values = values
        self.error = error
        self.calls: List[tuple[ProblemData, SolverConfig]] = []

    def solve(self, problem: ProblemData, config: SolverConfig) -> BackendResult:
        self.calls.append((problem, config))
        if self.error is not None:
            raise self.error
        if self.values is None:
            return BackendResult(status=self.status, message="scripted")
        x = np.asarray(self.values(problem), dtype=float)
        objective = float(problem.c @ x) + problem.objective_offset
        return BackendResult(
            status=self.status, values=x, objective_value=objective, message="scripted"
        )


@pytest.fixture
def scripted_backend() -> Callable[..., ScriptedBackend]:
    """Factory for ScriptedBackend instances."""
    return ScriptedBackend


@pytest.fixture
def highs() -> HighsBackend:
    return HighsBackend()
