"""Model assembly, solving and value queries.

A :class:`Model` owns every variable, constraint and the objective declared
through it. It accepts declarations while UNBUILT, serializes itself into
:class:`~numpart.solver.backend.ProblemData` on ``optimize``, hands that to a
solver backend, and becomes read-only once the backend returns.

Example:
    model = Model("toy")
    items = IndexRange.of("item", 3)
    pick = model.declare("pick", [items], VarType.BINARY)
    model.add_constraint(sum_over(items, lambda i: pick[i]), "<=", 2)
    model.set_objective(sum_over(items, lambda i: term(pick[i], i)), "max")
    status = model.optimize(SolverConfig(time_limit_ms=1000))
"""

from __future__ import annotations

import math
import numbers
import time
from dataclasses import dataclass
from typing import (
    Any,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

import numpy as np
from scipy import sparse

from numpart.config import DEFAULT_SOLVER_CONFIG, SolverConfig
from numpart.errors import DeclarationError, StateError, VariableReferenceError
from numpart.logging import get_logger
from numpart.model.constraints import (
    Constraint,
    ConstraintSet,
    ExpressionFn,
    RhsFn,
)
from numpart.model.expression import ExpressionLike, LinearExpression, as_expression
from numpart.model.index import IndexKey, IndexRange, expand_indices
from numpart.model.variables import Variable, VariableId, VariableSet
from numpart.solver.backend import (
    BackendResult,
    ProblemData,
    SolverBackend,
    TerminationStatus,
)
from numpart.solver.highs import HighsBackend
from numpart.types.base import ModelStatus, Number, Operator, Sense, VarType

logger = get_logger(__name__)


@dataclass(frozen=True)
class Objective:
    """Objective expression and optimization direction."""

    expression: LinearExpression
    sense: Sense


class Model:
    """Builder and owner of one MILP.

    Args:
        name: Label used in log messages.
    """

    def __init__(self, name: str = "model") -> None:
        self.name = name
        self._status = ModelStatus.UNBUILT
        self._variable_sets: Dict[str, VariableSet] = {}
        self._variables: Dict[VariableId, Variable] = {}
        self._constraints = ConstraintSet()
        self._objective: Optional[Objective] = None
        self._values: Optional[Dict[VariableId, float]] = None
        self._objective_value: Optional[float] = None
        self._solve_time_s: Optional[float] = None
        self._message = ""

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def status(self) -> ModelStatus:
        return self._status

    @property
    def is_terminal(self) -> bool:
        return self._status.is_terminal

    @property
    def has_solution(self) -> bool:
        """True once a terminal status carries a stored value assignment."""
        return self.is_terminal and self._values is not None

    def _require_unbuilt(self, operation: str) -> None:
        if self._status is not ModelStatus.UNBUILT:
            raise StateError(
                f"Cannot {operation}: model '{self.name}' is {self._status.name}"
            )

    def _require_solution(self) -> Dict[VariableId, float]:
        if not self.is_terminal:
            raise StateError(
                f"Model '{self.name}' has no result yet (status {self._status.name})"
            )
        if self._values is None:
            raise StateError(
                f"Model '{self.name}' finished with status {self._status.name} "
                "and no feasible assignment"
            )
        return self._values

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def declare(
        self,
        name: str,
        index_ranges: Sequence[IndexRange] = (),
        var_type: Union[VarType, str] = VarType.CONTINUOUS,
        lower_bound: Optional[Number] = None,
        upper_bound: Optional[Number] = None,
    ) -> VariableSet:
        """Declare one variable per combination of ``index_ranges``.

        Args:
            name: Variable name; unique within the model.
            index_ranges: Ordered index ranges. Empty declares a scalar.
            var_type: BINARY, INTEGER or CONTINUOUS (or their names).
            lower_bound: Lower bound, None for unbounded.
            upper_bound: Upper bound, None for unbounded.

        Returns:
            Handle for indexed lookup of the declared variables.

        Raises:
            DeclarationError: If the name is taken, a range is empty or repeated,
                or the bounds are invalid.
            StateError: If the model is no longer UNBUILT.
        """
        self._require_unbuilt("declare variables")
        if not isinstance(name, str) or not name:
            raise DeclarationError("Variable name must be a non-empty string")
        if name in self._variable_sets:
            raise DeclarationError(
                f"Variable '{name}' is already declared in model '{self.name}'"
            )

        vtype = VarType.from_string(var_type) if isinstance(var_type, str) else VarType(var_type)
        lb, ub = self._resolve_bounds(name, vtype, lower_bound, upper_bound)
        ranges = tuple(index_ranges)

        # expand_indices validates ranges before anything is registered
        keys = list(expand_indices(ranges))
        column = len(self._variables)
        variables: Dict[IndexKey, Variable] = {}
        for offset, key in enumerate(keys):
            variables[key] = Variable(
                name=name,
                index=key,
                var_type=vtype,
                lower_bound=lb,
                upper_bound=ub,
                column=column + offset,
            )

        handle = VariableSet(name, ranges, vtype, variables)
        self._variable_sets[name] = handle
        for var in variables.values():
            self._variables[var.id] = var

        logger.debug(
            "Declared %d %s variable(s) '%s' over %s",
            len(variables),
            vtype.name.lower(),
            name,
            [str(r) for r in ranges] or "scalar",
        )
        return handle

    @staticmethod
    def _resolve_bounds(
        name: str,
        vtype: VarType,
        lower_bound: Optional[Number],
        upper_bound: Optional[Number],
    ) -> Tuple[Optional[float], Optional[float]]:
        for label, value in (("lower_bound", lower_bound), ("upper_bound", upper_bound)):
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise DeclarationError(f"{label} of '{name}' must be numeric or None")
            if math.isnan(float(value)):
                raise DeclarationError(f"{label} of '{name}' must not be NaN")

        if vtype is VarType.BINARY:
            if lower_bound not in (None, 0) or upper_bound not in (None, 1):
                raise DeclarationError(
                    f"Binary variable '{name}' has fixed bounds [0, 1]; "
                    f"got [{lower_bound}, {upper_bound}]"
                )
            return 0.0, 1.0

        lb = None if lower_bound is None or lower_bound == -math.inf else float(lower_bound)
        ub = None if upper_bound is None or upper_bound == math.inf else float(upper_bound)
        if lb is not None and ub is not None and lb > ub:
            raise DeclarationError(
                f"Variable '{name}' has lower bound {lb} above upper bound {ub}"
            )
        return lb, ub

    def _check_references(self, expression: LinearExpression) -> None:
        """Ensure every variable of ``expression`` was declared in this model."""
        for var in expression.variables():
            if self._variables.get(var.id) is not var:
                raise VariableReferenceError(
                    f"Variable {var} is not declared in model '{self.name}'"
                )

    def add_constraint(
        self,
        expression: Union[ExpressionLike, ExpressionFn],
        operator: Union[Operator, str],
        rhs: Union[Number, RhsFn],
        driving_index_range: Optional[IndexRange] = None,
        *,
        name: Optional[str] = None,
    ) -> Tuple[Constraint, ...]:
        """Append one constraint, or one per value of ``driving_index_range``.

        With a driving range, ``expression`` and optionally ``rhs`` are
        callables of the driving index value.

        Returns:
            The appended constraint instances.

        Raises:
            VariableReferenceError: If an expression uses an undeclared variable.
            DeclarationError: If the driving range is empty.
            StateError: If the model is no longer UNBUILT.
        """
        self._require_unbuilt("add constraints")
        return self._constraints.add(
            expression,
            operator,
            rhs,
            driving_index_range,
            name=name,
            validate=self._check_references,
        )

    def set_objective(
        self, expression: ExpressionLike, sense: Union[Sense, str] = Sense.MINIMIZE
    ) -> Objective:
        """Set the objective, replacing any previous one."""
        self._require_unbuilt("set the objective")
        expr = as_expression(expression)
        self._check_references(expr)
        direction = Sense.from_string(sense) if isinstance(sense, str) else Sense(sense)
        if self._objective is not None:
            logger.debug("Replacing objective of model '%s'", self.name)
        self._objective = Objective(expression=expr, sense=direction)
        return self._objective

    @property
    def objective(self) -> Optional[Objective]:
        return self._objective

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def num_variables(self) -> int:
        return len(self._variables)

    @property
    def num_constraints(self) -> int:
        return len(self._constraints)

    def variables(self) -> Iterator[Variable]:
        """All variables in column order."""
        return iter(self._variables.values())

    def constraints(self) -> Iterator[Constraint]:
        """All constraint instances in insertion order."""
        return iter(self._constraints)

    def variable_set(self, name: str) -> VariableSet:
        try:
            return self._variable_sets[name]
        except KeyError:
            raise VariableReferenceError(
                f"No variable '{name}' in model '{self.name}'"
            ) from None

    # ------------------------------------------------------------------
    # Assembly and solving
    # ------------------------------------------------------------------

    def build(self) -> ProblemData:
        """Serialize variables, constraints and objective into matrix form.

        Raises:
            StateError: If no objective has been set.
        """
        if self._objective is None:
            raise StateError(f"Model '{self.name}' has no objective")

        n = len(self._variables)
        ids = tuple(self._variables.keys())
        lb = np.full(n, -np.inf)
        ub = np.full(n, np.inf)
        integrality = np.zeros(n, dtype=np.int8)
        for var in self._variables.values():
            if var.lower_bound is not None:
                lb[var.column] = var.lower_bound
            if var.upper_bound is not None:
                ub[var.column] = var.upper_bound
            if var.is_integral:
                integrality[var.column] = 1

        c = np.zeros(n)
        for var in self._objective.expression.variables():
            c[var.column] = self._objective.expression.coefficient(var)

        rows: List[int] = []
        cols: List[int] = []
        data: List[float] = []
        m = len(self._constraints)
        row_lower = np.empty(m)
        row_upper = np.empty(m)
        for r, constraint in enumerate(self._constraints):
            for var in constraint.expression.variables():
                rows.append(r)
                cols.append(var.column)
                data.append(constraint.expression.coefficient(var))
            row_lower[r], row_upper[r] = constraint.row_bounds()

        A = sparse.csr_matrix((data, (rows, cols)), shape=(m, n), dtype=float)
        return ProblemData(
            variable_ids=ids,
            c=c,
            objective_offset=self._objective.expression.constant,
            sense=self._objective.sense,
            A=A,
            row_lower=row_lower,
            row_upper=row_upper,
            lb=lb,
            ub=ub,
            integrality=integrality,
        )

    def optimize(
        self,
        config: Union[SolverConfig, Mapping[str, Any], None] = None,
        backend: Optional[SolverBackend] = None,
    ) -> ModelStatus:
        """Solve the model once and record the outcome.

        Args:
            config: Solver options; a mapping is parsed with ``SolverConfig.from_dict``.
            backend: Solver backend; defaults to :class:`HighsBackend`.

        Returns:
            Terminal status. Infeasibility, time limits and backend failures are
            reported here, not raised.

        Raises:
            StateError: If the model was already optimized or has no objective.
        """
        self._require_unbuilt("optimize")
        if self._objective is None:
            raise StateError(f"Model '{self.name}' has no objective")
        if config is None:
            cfg = DEFAULT_SOLVER_CONFIG
        elif isinstance(config, SolverConfig):
            cfg = config
        else:
            cfg = SolverConfig.from_dict(config)

        problem = self.build()
        solver = backend if backend is not None else HighsBackend()
        logger.info(
            "Optimizing model '%s': %d variables, %d constraints, time limit %s",
            self.name,
            problem.num_variables,
            problem.num_constraints,
            f"{cfg.time_limit_ms} ms" if cfg.time_limit_ms is not None else "none",
        )

        self._status = ModelStatus.SOLVING
        started = time.perf_counter()
        try:
            result = solver.solve(problem, cfg)
        except Exception as exc:
            logger.exception("Solver backend failed on model '%s'", self.name)
            result = BackendResult(status=TerminationStatus.ERROR, message=str(exc))
        self._solve_time_s = time.perf_counter() - started
        self._record(problem, result)

        if self._status is ModelStatus.OPTIMAL:
            logger.info(
                "Model '%s' solved to optimality in %.3fs, objective %.6g",
                self.name,
                self._solve_time_s,
                self._objective_value,
            )
        else:
            logger.warning(
                "Model '%s' finished with status %s after %.3fs%s",
                self.name,
                self._status.name,
                self._solve_time_s,
                f": {self._message}" if self._message else "",
            )
        return self._status

    def _record(self, problem: ProblemData, result: BackendResult) -> None:
        status = result.status.to_model_status()
        self._message = result.message
        if status in (ModelStatus.OPTIMAL, ModelStatus.TIME_LIMIT_REACHED) and (
            result.values is not None
        ):
            values = np.asarray(result.values, dtype=float)
            if values.shape != (problem.num_variables,):
                logger.error(
                    "Backend returned %s values for %d variables",
                    values.shape,
                    problem.num_variables,
                )
                self._status = ModelStatus.ERROR
                return
            self._values = {
                vid: float(v) for vid, v in zip(problem.variable_ids, values, strict=True)
            }
            if result.objective_value is not None:
                self._objective_value = float(result.objective_value)
            else:
                self._objective_value = self._objective.expression.evaluate(self._values)
        elif status is ModelStatus.OPTIMAL:
            logger.error("Backend reported OPTIMAL without a value assignment")
            status = ModelStatus.ERROR
        self._status = status

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def objective_value(self) -> float:
        """Objective value of the stored assignment.

        Raises:
            StateError: If no assignment is stored.
        """
        self._require_solution()
        return self._objective_value

    @property
    def solve_time_s(self) -> Optional[float]:
        """Wall-clock seconds spent in the backend, None before optimize."""
        return self._solve_time_s

    @property
    def message(self) -> str:
        return self._message

    def value(self, variable: Variable) -> float:
        """Realized value of ``variable``.

        Raises:
            StateError: If no assignment is stored.
            VariableReferenceError: If the variable is not from this model.
        """
        values = self._require_solution()
        if not isinstance(variable, Variable):
            raise TypeError(f"value() expects a Variable, got {type(variable).__name__}")
        if self._variables.get(variable.id) is not variable:
            raise VariableReferenceError(
                f"Variable {variable} is not declared in model '{self.name}'"
            )
        return values[variable.id]

    def values(self, handle: VariableSet) -> Dict[IndexKey, float]:
        """Realized values of every variable in ``handle``, keyed by index tuple."""
        self._require_solution()
        if self._variable_sets.get(handle.name) is not handle:
            raise VariableReferenceError(
                f"Variable set '{handle.name}' is not declared in model '{self.name}'"
            )
        return {var.index: self.value(var) for var in handle}

    def __repr__(self) -> str:
        return (
            f"Model({self.name!r}, variables={self.num_variables}, "
            f"constraints={self.num_constraints}, status={self._status.name})"
        )
