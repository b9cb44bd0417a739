"""Exceptions raised for programmer errors in model construction and use.

Solver outcomes such as infeasibility or a reached time limit are not
exceptions; they are reported through :class:`numpart.types.ModelStatus`.
"""


class NumpartError(Exception):
    """Base class for all numpart exceptions."""


class DeclarationError(NumpartError, ValueError):
    """Raised when a variable set cannot be declared.

    Covers repeated variable names, empty or duplicated index ranges, inverted
    bounds and expansions that exceed the size limit.
    """


class VariableReferenceError(NumpartError, KeyError):
    """Raised when an index or expression refers to an undeclared variable."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable
        return str(self.args[0]) if self.args else ""


class StateError(NumpartError, RuntimeError):
    """Raised when an operation is illegal in the model's current status."""
