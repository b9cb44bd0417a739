"""Result containers for solved partition models.

Objects expose ``to_dict()`` that returns JSON-safe primitives.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from numpart.logging import get_logger
from numpart.types.base import ModelStatus

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class GroupSummary:
    """Decoded content of one group.

    Args:
        group: Group index.
        total: Sum of the weights assigned to the group (0 when empty).
        count: Number of elements assigned to the group.
        members: Element indices assigned to the group, ascending; its length
            must equal ``count``.
    """

    group: int
    total: float
    count: int
    members: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if not math.isfinite(float(self.total)):
            logger.error("GroupSummary.total must be finite: %r", self.total)
            raise ValueError("GroupSummary.total must be finite")
        if self.count < 0:
            logger.error("GroupSummary.count must be non-negative: %r", self.count)
            raise ValueError("GroupSummary.count must be non-negative")
        if len(self.members) != self.count:
            logger.error(
                "GroupSummary.count %d disagrees with %d members",
                self.count,
                len(self.members),
            )
            raise ValueError("GroupSummary.count must equal the number of members")

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group": self.group,
            "sum": self.total,
            "count": self.count,
            "members": list(self.members),
        }


@dataclass(frozen=True)
class PartitionResult:
    """Outcome of one partitioning run.

    Args:
        status: Terminal status of the model.
        groups: One summary per group, ordered by group index. Empty when no
            feasible assignment was found.
        score: Largest minus smallest group sum; None without an assignment.
        objective_value: Objective value reported by the solver, if any.
        assignment: Mapping element index -> group index.
        solve_time_s: Seconds spent in the solver backend.
    """

    status: ModelStatus
    groups: Tuple[GroupSummary, ...] = ()
    score: Optional[float] = None
    objective_value: Optional[float] = None
    assignment: Dict[int, int] = field(default_factory=dict)
    solve_time_s: Optional[float] = None

    @property
    def is_feasible(self) -> bool:
        """True when a usable assignment exists (optimal or time-limited)."""
        return self.score is not None

    @property
    def is_optimal(self) -> bool:
        return self.status is ModelStatus.OPTIMAL

    def group_sums(self) -> List[float]:
        return [g.total for g in self.groups]

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representation."""
        return {
            "status": self.status.name,
            "score": self.score,
            "objective_value": self.objective_value,
            "groups": [g.to_dict() for g in self.groups],
            # JSON object keys must be strings
            "assignment": {str(k): v for k, v in sorted(self.assignment.items())},
            "solve_time_s": self.solve_time_s,
        }
