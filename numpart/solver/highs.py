"""HiGHS backend through ``scipy.optimize.milp``."""

from __future__ import annotations

import time

import numpy as np
from scipy.optimize import Bounds, LinearConstraint, milp

from numpart.config import SolverConfig
from numpart.logging import get_logger
from numpart.solver.backend import BackendResult, ProblemData, TerminationStatus
from numpart.types.base import Sense

logger = get_logger(__name__)

# scipy.optimize.milp status codes
_SCIPY_STATUS = {
    0: TerminationStatus.OPTIMAL,
    1: TerminationStatus.TIME_LIMIT_REACHED,  # iteration or time limit
    2: TerminationStatus.INFEASIBLE,
    3: TerminationStatus.ERROR,  # unbounded
    4: TerminationStatus.ERROR,
}


class HighsBackend:
    """Solve problems with the HiGHS MILP solver bundled in SciPy.

    Maximization is passed to HiGHS as minimization of ``-c``; the reported
    objective is converted back to the model's sense.
    """

    def _options(self, config: SolverConfig) -> dict:
        # Zero relative gap: OPTIMAL means proven optimal, not within 1e-4
        options = {
            "disp": config.verbose,
            "presolve": config.presolve,
            "mip_rel_gap": 0.0,
        }
        if config.time_limit_s is not None:
            options["time_limit"] = config.time_limit_s
        return options

    def solve(self, problem: ProblemData, config: SolverConfig) -> BackendResult:
        sign = -1.0 if problem.sense is Sense.MAXIMIZE else 1.0
        constraints = []
        if problem.num_constraints:
            constraints.append(
                LinearConstraint(problem.A, problem.row_lower, problem.row_upper)
            )

        logger.debug(
            "Calling HiGHS: %d columns (%d integral), %d rows, options=%s",
            problem.num_variables,
            problem.num_integral,
            problem.num_constraints,
            self._options(config),
        )
        started = time.perf_counter()
        res = milp(
            c=sign * problem.c,
            integrality=problem.integrality,
            bounds=Bounds(problem.lb, problem.ub),
            constraints=constraints,
            options=self._options(config),
        )
        elapsed = time.perf_counter() - started

        status = _SCIPY_STATUS.get(int(res.status), TerminationStatus.ERROR)
        message = str(getattr(res, "message", ""))
        logger.debug(
            "HiGHS finished in %.3fs with scipy status %s: %s",
            elapsed,
            res.status,
            message,
        )

        x = getattr(res, "x", None)
        if x is None or status in (TerminationStatus.INFEASIBLE, TerminationStatus.ERROR):
            return BackendResult(status=status, message=message)

        values = np.asarray(x, dtype=float)
        objective = float(problem.c @ values) + problem.objective_offset
        return BackendResult(
            status=status,
            values=values,
            objective_value=objective,
            message=message,
        )
