"""Decoding of solver assignments into partition results."""

from numpart.results.extract import assignment, group_summary, score, variable_value
from numpart.results.summary import GroupSummary, PartitionResult

__all__ = [
    "GroupSummary",
    "PartitionResult",
    "assignment",
    "group_summary",
    "score",
    "variable_value",
]
