"""Named integer index ranges and their cartesian expansion.

Variables and driving constraint sets are parameterized by one or more
:class:`IndexRange` objects. Expansion produces plain integer tuples that serve
as composite keys in ordered mappings.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from itertools import product
from typing import Iterator, Sequence, Tuple

from numpart.errors import DeclarationError

__all__ = [
    "IndexKey",
    "IndexRange",
    "MAX_INDEX_EXPANSIONS",
    "expand_indices",
    "expansion_size",
]

#: Concrete composite key, one integer per index range.
IndexKey = Tuple[int, ...]

# Expansion limits
MAX_INDEX_EXPANSIONS = 1_000_000


@dataclass(frozen=True)
class IndexRange:
    """Finite inclusive integer range with a name, e.g. ``element`` over 1..n.

    Attributes:
        name: Index name, unique among the ranges of one declaration.
        start: First value.
        stop: Last value (inclusive). ``stop < start`` denotes an empty range.
    """

    name: str
    start: int
    stop: int

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise TypeError("IndexRange.name must be a non-empty string")
        for label, value in (("start", self.start), ("stop", self.stop)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"IndexRange.{label} must be an int, got {value!r}")

    @classmethod
    def of(cls, name: str, size: int) -> "IndexRange":
        """Range ``1..size``."""
        return cls(name, 1, size)

    def __len__(self) -> int:
        return max(0, self.stop - self.start + 1)

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.stop + 1))

    def __contains__(self, value: object) -> bool:
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            return False
        return self.start <= value <= self.stop

    def is_empty(self) -> bool:
        return len(self) == 0

    def position(self, value: int) -> int:
        """Zero-based offset of ``value`` within the range."""
        return value - self.start

    def __str__(self) -> str:
        return f"{self.name}[{self.start}..{self.stop}]"


def expansion_size(ranges: Sequence[IndexRange]) -> int:
    """Number of tuples produced by :func:`expand_indices`."""
    size = 1
    for r in ranges:
        size *= len(r)
    return size


def expand_indices(ranges: Sequence[IndexRange]) -> Iterator[IndexKey]:
    """Enumerate the cartesian product of ``ranges`` in row-major order.

    The last range varies fastest. With no ranges a single empty tuple is
    produced, which addresses a scalar.

    Args:
        ranges: Ordered index ranges.

    Yields:
        Integer tuples, one value per range.

    Raises:
        DeclarationError: If a range is empty, two ranges share a name, or the
            product exceeds ``MAX_INDEX_EXPANSIONS``.

    Example:
        >>> list(expand_indices([IndexRange("i", 1, 2), IndexRange("k", 1, 2)]))
        [(1, 1), (1, 2), (2, 1), (2, 2)]
    """
    names = [r.name for r in ranges]
    if len(set(names)) != len(names):
        raise DeclarationError(f"Index range names must be distinct; got {names}")
    for r in ranges:
        if r.is_empty():
            raise DeclarationError(f"Index range {r} is empty")

    size = expansion_size(ranges)
    if size > MAX_INDEX_EXPANSIONS:
        raise DeclarationError(
            f"Index expansion would create {size} items "
            f"(limit: {MAX_INDEX_EXPANSIONS})."
        )

    return product(*ranges)
