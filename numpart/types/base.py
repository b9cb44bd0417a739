"""Enums and numeric tolerances shared by the modeling layer."""

from __future__ import annotations

from enum import IntEnum
from typing import Dict, Union

#: Numeric value accepted wherever a coefficient, bound or rhs is expected.
Number = Union[int, float]

#: Distance from 1.0 within which a nominally binary solver value counts as set.
BINARY_TOLERANCE = 1e-6

#: Slack used when checking trivially-satisfied constant constraints.
FEASIBILITY_TOLERANCE = 1e-9


class VarType(IntEnum):
    """Domain of a decision variable."""

    BINARY = 1
    INTEGER = 2
    CONTINUOUS = 3

    @property
    def is_integral(self) -> bool:
        return self is not VarType.CONTINUOUS

    @classmethod
    def from_string(cls, value: str) -> "VarType":
        """Parse a case-insensitive name such as ``"binary"``.

        Raises:
            ValueError: If the string doesn't match any member.
        """
        try:
            return cls[value.upper()]
        except KeyError:
            valid = ", ".join(e.name for e in cls)
            raise ValueError(
                f"Invalid variable type '{value}'. Valid values are: {valid}"
            ) from None


class Operator(IntEnum):
    """Comparison operator of a linear constraint."""

    LE = 1  # expression <= rhs
    EQ = 2  # expression == rhs
    GE = 3  # expression >= rhs

    @property
    def symbol(self) -> str:
        return _OPERATOR_SYMBOLS[self]

    @classmethod
    def from_string(cls, value: str) -> "Operator":
        """Parse ``"<="``, ``"=="``, ``"="``, ``">="`` or a member name.

        Raises:
            ValueError: If the string is not a recognized operator.
        """
        token = value.strip()
        if token in _OPERATOR_ALIASES:
            return _OPERATOR_ALIASES[token]
        try:
            return cls[token.upper()]
        except KeyError:
            raise ValueError(
                f"Invalid operator '{value}'. Valid values are: <=, ==, >="
            ) from None


_OPERATOR_SYMBOLS: Dict[Operator, str] = {
    Operator.LE: "<=",
    Operator.EQ: "==",
    Operator.GE: ">=",
}

_OPERATOR_ALIASES: Dict[str, Operator] = {
    "<=": Operator.LE,
    "==": Operator.EQ,
    "=": Operator.EQ,
    ">=": Operator.GE,
}


class Sense(IntEnum):
    """Optimization direction of the objective."""

    MINIMIZE = 1
    MAXIMIZE = 2

    @classmethod
    def from_string(cls, value: str) -> "Sense":
        """Parse ``"min"``, ``"minimize"``, ``"max"`` or ``"maximize"``.

        Raises:
            ValueError: If the string is not a recognized sense.
        """
        token = value.strip().lower()
        if token in ("min", "minimize", "minimise"):
            return cls.MINIMIZE
        if token in ("max", "maximize", "maximise"):
            return cls.MAXIMIZE
        raise ValueError(
            f"Invalid objective sense '{value}'. Valid values are: minimize, maximize"
        )


class ModelStatus(IntEnum):
    """Lifecycle state of a model.

    UNBUILT accepts declarations; SOLVING is held only for the duration of the
    backend call; the remaining members are terminal.
    """

    UNBUILT = 1
    SOLVING = 2
    OPTIMAL = 3
    TIME_LIMIT_REACHED = 4
    INFEASIBLE = 5
    ERROR = 6

    @property
    def is_terminal(self) -> bool:
        return self not in (ModelStatus.UNBUILT, ModelStatus.SOLVING)
