"""Decision variables declared over index ranges.

A :class:`VariableSet` is the handle returned by ``Model.declare``. It maps each
concrete index tuple to an immutable :class:`Variable` whose identity is
``(name, index)``. Realized values live in the owning model, not here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple, Union

from numpart.errors import VariableReferenceError
from numpart.model.index import IndexKey, IndexRange
from numpart.types.base import VarType

#: Identity of a variable: declaration name plus concrete index tuple.
VariableId = Tuple[str, IndexKey]

#: Accepted forms of an index lookup key.
IndexLike = Union[int, Tuple[int, ...]]


@dataclass(frozen=True, slots=True)
class Variable:
    """One decision variable.

    Attributes:
        name: Name of the declaring VariableSet.
        index: Concrete index tuple; empty for scalars.
        var_type: Domain of the variable.
        lower_bound: Lower bound, None for unbounded below.
        upper_bound: Upper bound, None for unbounded above.
        column: Position of the variable in its model's column order.
    """

    name: str
    index: IndexKey
    var_type: VarType
    lower_bound: Optional[float]
    upper_bound: Optional[float]
    column: int

    @property
    def id(self) -> VariableId:
        return (self.name, self.index)

    @property
    def is_integral(self) -> bool:
        return self.var_type.is_integral

    def __str__(self) -> str:
        if not self.index:
            return self.name
        return f"{self.name}[{','.join(str(i) for i in self.index)}]"


class VariableSet:
    """Handle to the variables of one declaration.

    Supports ``vs[i, k]`` (or ``vs[i]`` for one range) lookup, iteration in
    declaration order, ``len`` and membership tests on index tuples.
    """

    def __init__(
        self,
        name: str,
        ranges: Tuple[IndexRange, ...],
        var_type: VarType,
        variables: Dict[IndexKey, Variable],
    ) -> None:
        self._name = name
        self._ranges = ranges
        self._var_type = var_type
        self._variables = variables

    @property
    def name(self) -> str:
        return self._name

    @property
    def ranges(self) -> Tuple[IndexRange, ...]:
        return self._ranges

    @property
    def var_type(self) -> VarType:
        return self._var_type

    @property
    def is_scalar(self) -> bool:
        return not self._ranges

    def _normalize(self, key: IndexLike) -> IndexKey:
        if not isinstance(key, tuple):
            key = (key,)
        if len(key) != len(self._ranges):
            raise VariableReferenceError(
                f"Variable '{self._name}' takes {len(self._ranges)} index value(s), "
                f"got {len(key)}: {key!r}"
            )
        for value, r in zip(key, self._ranges, strict=True):
            if value not in r:
                raise VariableReferenceError(
                    f"Index {value!r} is outside {r} of variable '{self._name}'"
                )
        return key

    def __getitem__(self, key: IndexLike) -> Variable:
        return self._variables[self._normalize(key)]

    def get(self, key: IndexLike) -> Optional[Variable]:
        """Return the variable at ``key`` or None when it is not declared."""
        try:
            return self[key]
        except VariableReferenceError:
            return None

    def scalar(self) -> Variable:
        """Return the only variable of a scalar declaration."""
        if not self.is_scalar:
            raise VariableReferenceError(
                f"Variable '{self._name}' is indexed by {len(self._ranges)} range(s)"
            )
        return self._variables[()]

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (int, tuple)):
            return False
        try:
            self._normalize(key)
        except VariableReferenceError:
            return False
        return True

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._variables.values())

    def __len__(self) -> int:
        return len(self._variables)

    def keys(self) -> Iterator[IndexKey]:
        return iter(self._variables.keys())

    def __repr__(self) -> str:
        dims = ", ".join(str(r) for r in self._ranges)
        return f"VariableSet({self._name!r}, [{dims}], {self._var_type.name})"
