"""Configuration classes for numpart components."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class SolverConfig:
    """Options handed to the solver backend for one ``optimize`` call.

    Attributes:
        verbose: Let the backend print its diagnostic trace.
        presolve: Enable backend presolve.
        time_limit_ms: Wall-clock budget in milliseconds; None means no limit.
    """

    verbose: bool = False
    presolve: bool = True
    time_limit_ms: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.verbose, bool):
            raise TypeError("SolverConfig.verbose must be a bool")
        if not isinstance(self.presolve, bool):
            raise TypeError("SolverConfig.presolve must be a bool")
        if self.time_limit_ms is not None:
            # bool is an int subclass
            if isinstance(self.time_limit_ms, bool) or not isinstance(
                self.time_limit_ms, int
            ):
                raise TypeError("SolverConfig.time_limit_ms must be an int or None")
            if self.time_limit_ms <= 0:
                raise ValueError(
                    f"SolverConfig.time_limit_ms must be positive, got {self.time_limit_ms}"
                )

    @property
    def time_limit_s(self) -> Optional[float]:
        """Time limit in seconds, or None when unlimited."""
        if self.time_limit_ms is None:
            return None
        return self.time_limit_ms / 1000.0

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "SolverConfig":
        """Build a config from a mapping of option names.

        Args:
            data: Mapping with any of ``verbose``, ``presolve``, ``time_limit_ms``.
                None yields the defaults.

        Raises:
            ValueError: If the mapping contains unrecognized keys.
        """
        if data is None:
            return cls()
        allowed = {f.name for f in fields(cls)}
        unknown = sorted(str(k) for k in data.keys() if k not in allowed)
        if unknown:
            raise ValueError(
                f"Unrecognized solver option(s) {unknown}. "
                f"Valid options are: {sorted(allowed)}"
            )
        return cls(**dict(data))

    def to_dict(self) -> dict[str, Any]:
        return {
            "verbose": self.verbose,
            "presolve": self.presolve,
            "time_limit_ms": self.time_limit_ms,
        }


# Global default configuration instance
DEFAULT_SOLVER_CONFIG = SolverConfig()
