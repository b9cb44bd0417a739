"""Shared enums and constants."""

from numpart.types.base import (
    BINARY_TOLERANCE,
    FEASIBILITY_TOLERANCE,
    ModelStatus,
    Number,
    Operator,
    Sense,
    VarType,
)

__all__ = [
    "BINARY_TOLERANCE",
    "FEASIBILITY_TOLERANCE",
    "ModelStatus",
    "Number",
    "Operator",
    "Sense",
    "VarType",
]
