"""Decode a solved assignment into groups and a score.

The element x group indicator variables are nominally binary, but solvers
return floats. An indicator counts as set when its value is within
``tolerance`` of 1 (default :data:`~numpart.types.base.BINARY_TOLERANCE`).
"""

from __future__ import annotations

import math
from typing import Dict, List, Mapping, Sequence, Union

from numpart.model.model import Model
from numpart.model.variables import Variable, VariableSet
from numpart.results.summary import GroupSummary
from numpart.types.base import BINARY_TOLERANCE, Number

__all__ = [
    "assignment",
    "group_summary",
    "score",
    "variable_value",
]

Weights = Union[Sequence[Number], Mapping[int, Number]]


def variable_value(model: Model, variable: Variable) -> float:
    """Realized value of one variable.

    Raises:
        StateError: If the model has no stored assignment.
        VariableReferenceError: If the variable is not from ``model``.
    """
    return model.value(variable)


def _is_set(value: float, tolerance: float) -> bool:
    return abs(value - 1.0) <= tolerance


def _check_handle(handle: VariableSet) -> None:
    if len(handle.ranges) != 2:
        raise ValueError(
            f"Expected an element x group variable set, '{handle.name}' has "
            f"{len(handle.ranges)} index range(s)"
        )


def _weight_lookup(handle: VariableSet, weights: Weights) -> Dict[int, float]:
    elements = handle.ranges[0]
    if isinstance(weights, Mapping):
        missing = [i for i in elements if i not in weights]
        if missing:
            raise ValueError(f"No weight given for element(s) {missing}")
        return {i: float(weights[i]) for i in elements}
    if len(weights) != len(elements):
        raise ValueError(
            f"Got {len(weights)} weights for {len(elements)} elements of {elements}"
        )
    return {i: float(weights[elements.position(i)]) for i in elements}


def group_summary(
    model: Model,
    handle: VariableSet,
    weights: Weights,
    tolerance: float = BINARY_TOLERANCE,
) -> List[GroupSummary]:
    """Per-group sums and counts, ordered by group index.

    Args:
        model: Model with a stored assignment.
        handle: Indicator variables indexed by (element, group).
        weights: Element weights, either aligned with the element range
            (``weights[0]`` is the first element) or keyed by element index.
        tolerance: Distance from 1 within which an indicator counts as set.

    Returns:
        One summary per group. Groups that received nothing have sum 0.

    Raises:
        StateError: If the model has no stored assignment.
        ValueError: If ``handle`` is not two-dimensional or weights do not
            match the element range.
    """
    _check_handle(handle)
    lookup = _weight_lookup(handle, weights)
    values = model.values(handle)
    elements, groups = handle.ranges

    summaries: List[GroupSummary] = []
    for k in groups:
        members = tuple(i for i in elements if _is_set(values[(i, k)], tolerance))
        summaries.append(
            GroupSummary(
                group=k,
                total=math.fsum(lookup[i] for i in members),
                count=len(members),
                members=members,
            )
        )
    return summaries


def score(summary: Sequence[GroupSummary]) -> float:
    """Largest minus smallest group sum; empty groups take part with sum 0.

    Raises:
        ValueError: If ``summary`` is empty.
    """
    if not summary:
        raise ValueError("Cannot score an empty group summary")
    totals = [g.total for g in summary]
    return max(totals) - min(totals)


def assignment(
    model: Model,
    handle: VariableSet,
    tolerance: float = BINARY_TOLERANCE,
) -> Dict[int, int]:
    """Group of every element.

    Raises:
        StateError: If the model has no stored assignment.
        ValueError: If an element is in no group or in several groups.
    """
    _check_handle(handle)
    values = model.values(handle)
    elements, groups = handle.ranges

    result: Dict[int, int] = {}
    for i in elements:
        chosen = [k for k in groups if _is_set(values[(i, k)], tolerance)]
        if len(chosen) != 1:
            raise ValueError(
                f"Element {i} is assigned to {len(chosen)} groups {chosen}; expected 1"
            )
        result[i] = chosen[0]
    return result
