"""Multi-way number partitioning as a MILP.

Split integer weights w[1..n] into K groups minimizing the spread between the
largest and the smallest group sum:

    minimize    largest - smallest
    subject to  sum_k x[i, k] == 1                    for each element i
                sum_i w[i] * x[i, k] - largest <= 0   for each group k
                sum_i w[i] * x[i, k] - smallest >= 0  for each group k
                sum_i x[i, k] >= min_group_size       for each group k (optional)
                x binary

Ordering the groups by size to break symmetry was tried and made solving
slower, so no symmetry-breaking constraints are added.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

from numpart.config import SolverConfig
from numpart.logging import get_logger
from numpart.model.expression import add, sum_over, term
from numpart.model.index import IndexRange
from numpart.model.model import Model
from numpart.model.variables import Variable, VariableSet
from numpart.results.extract import assignment, group_summary, score
from numpart.results.summary import PartitionResult
from numpart.solver.backend import SolverBackend
from numpart.types.base import Operator, Sense, VarType

logger = get_logger(__name__)


@dataclass(frozen=True)
class PartitionModel:
    """Built partitioning model and handles to its variables.

    Attributes:
        model: The underlying MILP.
        x: Indicators ``x[i, k]`` = 1 iff element i is in group k.
        largest: Upper envelope of the group sums.
        smallest: Lower envelope of the group sums.
        weights: Element weights, ``weights[i - 1]`` belongs to element i.
    """

    model: Model
    x: VariableSet
    largest: Variable
    smallest: Variable
    weights: Tuple[int, ...]

    @property
    def elements(self) -> IndexRange:
        return self.x.ranges[0]

    @property
    def groups(self) -> IndexRange:
        return self.x.ranges[1]


def _validate(
    weights: Sequence[int], num_groups: int, min_group_size: Optional[int]
) -> Tuple[int, ...]:
    if isinstance(weights, (str, bytes)) or not isinstance(weights, Sequence):
        raise TypeError("weights must be a sequence of integers")
    if len(weights) == 0:
        raise ValueError("weights must not be empty")
    for w in weights:
        if isinstance(w, bool) or not isinstance(w, numbers.Integral):
            raise ValueError(f"weights must be integers, got {w!r}")
    if isinstance(num_groups, bool) or not isinstance(num_groups, numbers.Integral):
        raise TypeError(f"num_groups must be an int, got {num_groups!r}")
    if num_groups < 1:
        raise ValueError(f"num_groups must be at least 1, got {num_groups}")
    if min_group_size is not None:
        if isinstance(min_group_size, bool) or not isinstance(
            min_group_size, numbers.Integral
        ):
            raise TypeError(f"min_group_size must be an int, got {min_group_size!r}")
        if min_group_size < 0:
            raise ValueError(
                f"min_group_size must be non-negative, got {min_group_size}"
            )
    return tuple(int(w) for w in weights)


def build_partition_model(
    weights: Sequence[int],
    num_groups: int,
    *,
    min_group_size: Optional[int] = None,
    name: str = "partition",
) -> PartitionModel:
    """Formulate the partitioning of ``weights`` into ``num_groups`` groups.

    Args:
        weights: Integer weights; may repeat and may be negative.
        num_groups: Number of groups K, at least 1.
        min_group_size: Optional lower bound on the element count of every group.
        name: Model name used in log messages.

    Returns:
        PartitionModel ready to optimize.

    Raises:
        ValueError: If weights are empty or non-integer, or num_groups < 1.
    """
    w = _validate(weights, num_groups, min_group_size)
    elements = IndexRange.of("element", len(w))
    groups = IndexRange.of("group", int(num_groups))

    # Any group sum lies between the sum of negatives and the sum of positives
    low = sum(v for v in w if v < 0)
    high = sum(v for v in w if v > 0)

    model = Model(name)
    x = model.declare("x", [elements, groups], VarType.BINARY)
    largest = model.declare("largest", (), VarType.CONTINUOUS, low, high).scalar()
    smallest = model.declare("smallest", (), VarType.CONTINUOUS, low, high).scalar()

    def load(k: int):
        return sum_over(elements, lambda i: term(x[i, k], w[i - 1]))

    model.add_constraint(
        lambda i: sum_over(groups, lambda k: x[i, k]),
        Operator.EQ,
        1,
        elements,
        name="assign_once",
    )
    model.add_constraint(
        lambda k: add(load(k), term(largest, -1)),
        Operator.LE,
        0,
        groups,
        name="below_largest",
    )
    model.add_constraint(
        lambda k: add(load(k), term(smallest, -1)),
        Operator.GE,
        0,
        groups,
        name="above_smallest",
    )
    if min_group_size:
        model.add_constraint(
            lambda k: sum_over(elements, lambda i: x[i, k]),
            Operator.GE,
            min_group_size,
            groups,
            name="min_group_size",
        )

    model.set_objective(add(term(largest), term(smallest, -1)), Sense.MINIMIZE)
    logger.debug(
        "Built partition model for %d elements into %d groups: %d variables, %d constraints",
        len(elements),
        len(groups),
        model.num_variables,
        model.num_constraints,
    )
    return PartitionModel(model=model, x=x, largest=largest, smallest=smallest, weights=w)


def extract_result(built: PartitionModel) -> PartitionResult:
    """Decode a solved PartitionModel.

    Without a feasible assignment the result carries only the status.
    """
    model = built.model
    if not model.has_solution:
        return PartitionResult(status=model.status, solve_time_s=model.solve_time_s)

    summary = group_summary(model, built.x, built.weights)
    return PartitionResult(
        status=model.status,
        groups=tuple(summary),
        score=score(summary),
        objective_value=model.objective_value,
        assignment=assignment(model, built.x),
        solve_time_s=model.solve_time_s,
    )


def partition(
    weights: Sequence[int],
    num_groups: int,
    *,
    min_group_size: Optional[int] = None,
    config: Union[SolverConfig, Mapping[str, Any], None] = None,
    backend: Optional[SolverBackend] = None,
) -> PartitionResult:
    """Partition ``weights`` into ``num_groups`` groups with minimal spread.

    Example:
        >>> result = partition([1, 2, 3, 4, 5, 6], 2)
        >>> result.score
        1.0
    """
    built = build_partition_model(weights, num_groups, min_group_size=min_group_size)
    built.model.optimize(config, backend)
    return extract_result(built)
