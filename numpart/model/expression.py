"""Immutable linear expressions and the builder functions that create them.

Expressions are never built through operator overloading. Use :func:`constant`,
:func:`term`, :func:`add`, :func:`scale` and :func:`sum_over`; each returns a new
:class:`LinearExpression`.

Coefficients of the same variable are merged with ``math.fsum`` over all
contributions, so the result does not depend on the order in which terms were
accumulated.

Example:
    # sum_i w[i] * x[i, k] - largest
    load = sum_over(elements, lambda i: term(x[i, k], weights[i - 1]))
    expr = add(load, term(largest, -1))
"""

from __future__ import annotations

import math
import numbers
from types import MappingProxyType
from typing import (
    Callable,
    Dict,
    List,
    Mapping,
    Sequence,
    Tuple,
    Union,
)

from numpart.errors import VariableReferenceError
from numpart.model.index import IndexRange, expand_indices
from numpart.model.variables import Variable, VariableId
from numpart.types.base import Number

__all__ = [
    "LinearExpression",
    "ExpressionLike",
    "constant",
    "term",
    "add",
    "scale",
    "sum_over",
    "as_expression",
]


class LinearExpression:
    """Mapping from variable identity to coefficient, plus a constant.

    Instances are immutable and hashable. Zero coefficients are not stored.
    Terms are kept sorted by variable identity, so expressions built in
    different orders compare equal.
    """

    __slots__ = ("_terms", "_variables", "_constant")

    def __init__(
        self,
        terms: Mapping[VariableId, float],
        variables: Mapping[VariableId, Variable],
        constant: float = 0.0,
    ) -> None:
        ordered = sorted(vid for vid, coef in terms.items() if coef != 0.0)
        self._terms: Mapping[VariableId, float] = MappingProxyType(
            {vid: float(terms[vid]) for vid in ordered}
        )
        self._variables: Mapping[VariableId, Variable] = MappingProxyType(
            {vid: variables[vid] for vid in ordered}
        )
        self._constant = float(constant)

    @property
    def terms(self) -> Mapping[VariableId, float]:
        """Read-only mapping of variable identity to coefficient."""
        return self._terms

    @property
    def constant(self) -> float:
        return self._constant

    def variables(self) -> Tuple[Variable, ...]:
        """Variables with a non-zero coefficient, in identity order."""
        return tuple(self._variables.values())

    def coefficient(self, var: Union[Variable, VariableId]) -> float:
        """Coefficient of ``var``; 0.0 if it does not appear."""
        vid = var.id if isinstance(var, Variable) else var
        return self._terms.get(vid, 0.0)

    def is_constant(self) -> bool:
        return not self._terms

    def evaluate(self, values: Mapping[VariableId, float]) -> float:
        """Value of the expression under a variable assignment.

        Raises:
            KeyError: If a variable of the expression has no value.
        """
        parts = [coef * float(values[vid]) for vid, coef in self._terms.items()]
        parts.append(self._constant)
        return math.fsum(parts)

    def __len__(self) -> int:
        return len(self._terms)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinearExpression):
            return NotImplemented
        return (
            self._constant == other._constant
            and dict(self._terms) == dict(other._terms)
            and dict(self._variables) == dict(other._variables)
        )

    def __hash__(self) -> int:
        return hash((tuple(self._terms.items()), self._constant))

    def __repr__(self) -> str:
        return f"LinearExpression({self})"

    def __str__(self) -> str:
        parts: List[str] = []
        for vid, coef in self._terms.items():
            label = str(self._variables[vid])
            if coef == 1.0:
                parts.append(label)
            elif coef == -1.0:
                parts.append(f"-{label}")
            else:
                parts.append(f"{coef:g}*{label}")
        if self._constant != 0.0 or not parts:
            parts.append(f"{self._constant:g}")
        return " + ".join(parts).replace("+ -", "- ")


#: Anything that can be promoted to a LinearExpression.
ExpressionLike = Union[LinearExpression, Variable, int, float]


class _Accumulator:
    """Collects coefficient contributions before freezing an expression."""

    def __init__(self) -> None:
        self.contributions: Dict[VariableId, List[float]] = {}
        self.variables: Dict[VariableId, Variable] = {}
        self.constants: List[float] = []

    def add(self, expr: LinearExpression, factor: float = 1.0) -> None:
        for var in expr.variables():
            vid = var.id
            known = self.variables.get(vid)
            if known is not None and known != var:
                raise VariableReferenceError(
                    f"Variables {known} and {var} share identity {vid!r} but "
                    "belong to different declarations"
                )
            self.variables[vid] = var
            self.contributions.setdefault(vid, []).append(
                factor * expr.coefficient(vid)
            )
        self.constants.append(factor * expr.constant)

    def freeze(self) -> LinearExpression:
        terms = {vid: math.fsum(vals) for vid, vals in self.contributions.items()}
        return LinearExpression(terms, self.variables, math.fsum(self.constants))


def _check_number(value: object, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError(f"{what} must be numeric, got {value!r}")
    if not math.isfinite(float(value)):
        raise ValueError(f"{what} must be finite, got {value!r}")
    return float(value)


def as_expression(value: ExpressionLike) -> LinearExpression:
    """Promote a Variable or number to a LinearExpression."""
    if isinstance(value, LinearExpression):
        return value
    if isinstance(value, Variable):
        return term(value)
    return constant(value)


def constant(c: Number) -> LinearExpression:
    """Expression with no variables and constant ``c``."""
    return LinearExpression({}, {}, _check_number(c, "constant"))


def term(variable: Variable, coefficient: Number = 1.0) -> LinearExpression:
    """Expression ``coefficient * variable``."""
    if not isinstance(variable, Variable):
        raise TypeError(f"term() expects a Variable, got {type(variable).__name__}")
    coef = _check_number(coefficient, "coefficient")
    return LinearExpression({variable.id: coef}, {variable.id: variable})


def add(*exprs: ExpressionLike) -> LinearExpression:
    """Sum of the given expressions, merging identical variables."""
    acc = _Accumulator()
    for expr in exprs:
        acc.add(as_expression(expr))
    return acc.freeze()


def scale(expr: ExpressionLike, factor: Number) -> LinearExpression:
    """Expression multiplied by ``factor``."""
    acc = _Accumulator()
    acc.add(as_expression(expr), _check_number(factor, "factor"))
    return acc.freeze()


def sum_over(
    index_range: Union[IndexRange, Sequence[IndexRange]],
    build_term_fn: Callable[..., ExpressionLike],
) -> LinearExpression:
    """Accumulate ``build_term_fn`` over every value of one or more ranges.

    With a single range the function receives the index value; with several
    ranges it receives one positional argument per range, enumerated as a
    cartesian product.

    Raises:
        DeclarationError: If any range is empty.
    """
    ranges = (index_range,) if isinstance(index_range, IndexRange) else tuple(index_range)
    acc = _Accumulator()
    for key in expand_indices(ranges):
        acc.add(as_expression(build_term_fn(*key)))
    return acc.freeze()
