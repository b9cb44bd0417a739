"""Linear constraints and their per-index instantiation.

``ConstraintSet.add`` appends either one constraint or, when a driving index
range is given, one constraint per value of that range (e.g. "for each element
i, sum over k of x[i, k] == 1").
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Callable, Iterator, List, Mapping, Optional, Tuple, Union

from numpart.errors import DeclarationError
from numpart.logging import get_logger
from numpart.model.expression import ExpressionLike, LinearExpression, as_expression
from numpart.model.index import IndexRange
from numpart.model.variables import VariableId
from numpart.types.base import FEASIBILITY_TOLERANCE, Number, Operator

logger = get_logger(__name__)

#: Builds the expression of the constraint for one driving index value.
ExpressionFn = Callable[[int], ExpressionLike]

#: Builds the right-hand side for one driving index value.
RhsFn = Callable[[int], Number]


@dataclass(frozen=True)
class Constraint:
    """``expression <operator> rhs``.

    Attributes:
        expression: Left-hand side; its constant is moved to the rhs when the
            constraint is serialized.
        operator: Comparison operator.
        rhs: Right-hand side value.
        name: Optional label of the constraint family.
        driving_index: Driving index value that produced this instance, if any.
    """

    expression: LinearExpression
    operator: Operator
    rhs: float
    name: Optional[str] = None
    driving_index: Optional[int] = None

    @property
    def label(self) -> str:
        base = self.name or "c"
        if self.driving_index is None:
            return base
        return f"{base}[{self.driving_index}]"

    def row_bounds(self) -> Tuple[float, float]:
        """Bounds ``(lower, upper)`` on the variable part of the expression."""
        rhs = self.rhs - self.expression.constant
        if self.operator is Operator.LE:
            return (-math.inf, rhs)
        if self.operator is Operator.GE:
            return (rhs, math.inf)
        return (rhs, rhs)

    def violation(self, values: Mapping[VariableId, float]) -> float:
        """Amount by which the constraint is violated under ``values`` (0 if met)."""
        lhs = self.expression.evaluate(values)
        if self.operator is Operator.LE:
            return max(0.0, lhs - self.rhs)
        if self.operator is Operator.GE:
            return max(0.0, self.rhs - lhs)
        return abs(lhs - self.rhs)

    def is_satisfied(
        self, values: Mapping[VariableId, float], tolerance: float = 1e-6
    ) -> bool:
        return self.violation(values) <= tolerance

    def __str__(self) -> str:
        return f"{self.label}: {self.expression} {self.operator.symbol} {self.rhs:g}"


def compare(
    expression: ExpressionLike,
    operator: Union[Operator, str],
    rhs: Number,
    *,
    name: Optional[str] = None,
    driving_index: Optional[int] = None,
) -> Constraint:
    """Build a detached constraint ``expression <operator> rhs``.

    Raises:
        ValueError: If the operator string is unknown or rhs is not finite.
        TypeError: If rhs is not numeric.
    """
    op = Operator.from_string(operator) if isinstance(operator, str) else Operator(operator)
    if isinstance(rhs, bool) or not isinstance(rhs, numbers.Real):
        raise TypeError(f"Constraint rhs must be numeric, got {rhs!r}")
    if not math.isfinite(float(rhs)):
        raise ValueError(f"Constraint rhs must be finite, got {rhs!r}")
    return Constraint(
        expression=as_expression(expression),
        operator=op,
        rhs=float(rhs),
        name=name,
        driving_index=driving_index,
    )


class ConstraintSet:
    """Ordered collection of constraint instances.

    Order of insertion is preserved but carries no meaning for the solution.
    """

    def __init__(self) -> None:
        self._constraints: List[Constraint] = []

    def add(
        self,
        expression: Union[ExpressionLike, ExpressionFn],
        operator: Union[Operator, str],
        rhs: Union[Number, RhsFn],
        driving_index_range: Optional[IndexRange] = None,
        *,
        name: Optional[str] = None,
        validate: Optional[Callable[[LinearExpression], None]] = None,
    ) -> Tuple[Constraint, ...]:
        """Instantiate and append one or more constraints.

        Args:
            expression: Expression, or a callable ``i -> expression`` when a
                driving range is given.
            operator: Operator or one of ``"<="``, ``"=="``, ``">="``.
            rhs: Number, or a callable ``i -> number`` when a driving range is given.
            driving_index_range: Range producing one constraint per value.
            name: Optional label for the constraint family.
            validate: Called with every expression before it is appended.

        Returns:
            The constraints appended, in instantiation order.

        Raises:
            DeclarationError: If the driving range is empty.
            TypeError: If callables are given without a driving range.
        """
        if driving_index_range is None:
            if callable(expression) or callable(rhs):
                raise TypeError(
                    "Callable expression or rhs requires a driving_index_range"
                )
            built = (compare(expression, operator, rhs, name=name),)
        else:
            if driving_index_range.is_empty():
                raise DeclarationError(
                    f"Driving index range {driving_index_range} is empty"
                )
            built = tuple(
                compare(
                    expression(i) if callable(expression) else expression,
                    operator,
                    rhs(i) if callable(rhs) else rhs,
                    name=name,
                    driving_index=i,
                )
                for i in driving_index_range
            )

        for constraint in built:
            if validate is not None:
                validate(constraint.expression)
            if constraint.expression.is_constant():
                self._check_constant(constraint)

        # All instances validated before any is appended
        self._constraints.extend(built)
        logger.debug(
            "Added %d constraint(s)%s", len(built), f" '{name}'" if name else ""
        )
        return built

    @staticmethod
    def _check_constant(constraint: Constraint) -> None:
        lower, upper = constraint.row_bounds()
        if lower > FEASIBILITY_TOLERANCE or upper < -FEASIBILITY_TOLERANCE:
            logger.warning("Constraint without variables can never hold: %s", constraint)

    def __iter__(self) -> Iterator[Constraint]:
        return iter(self._constraints)

    def __len__(self) -> int:
        return len(self._constraints)

    def __getitem__(self, position: int) -> Constraint:
        return self._constraints[position]
