"""Algebraic modeling layer: index ranges, variables, expressions, constraints."""

from numpart.model.constraints import Constraint, ConstraintSet, compare
from numpart.model.expression import (
    LinearExpression,
    add,
    as_expression,
    constant,
    scale,
    sum_over,
    term,
)
from numpart.model.index import IndexRange, expand_indices
from numpart.model.model import Model, Objective
from numpart.model.variables import Variable, VariableId, VariableSet

__all__ = [
    "Constraint",
    "ConstraintSet",
    "IndexRange",
    "LinearExpression",
    "Model",
    "Objective",
    "Variable",
    "VariableId",
    "VariableSet",
    "add",
    "as_expression",
    "compare",
    "constant",
    "expand_indices",
    "scale",
    "sum_over",
    "term",
]
