"""Partition problem definitions in YAML.

Example document:

    weights: [1, 2, 3, 4, 5, 6]
    groups: 2
    min_group_size: 1
    solver:
      time_limit_ms: 5000
      presolve: true
      verbose: false
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import jsonschema
import yaml

from numpart.config import SolverConfig
from numpart.partition import partition
from numpart.results.summary import PartitionResult
from numpart.solver.backend import SolverBackend
from numpart.utils.yaml_utils import normalize_yaml_dict_keys

_TOP_LEVEL_KEYS = {"weights", "groups", "min_group_size", "solver"}


def _problem_schema() -> Dict[str, Any]:
    with (
        resources.files("numpart.schemas")
        .joinpath("problem.json")
        .open("r", encoding="utf-8")
    ) as f:
        return json.load(f)


@dataclass(frozen=True)
class PartitionProblem:
    """Inputs of one partitioning run.

    Attributes:
        weights: Integer weights to split.
        num_groups: Number of groups.
        min_group_size: Optional minimum element count per group.
        solver: Solver options.
    """

    weights: Tuple[int, ...]
    num_groups: int
    min_group_size: Optional[int] = None
    solver: SolverConfig = field(default_factory=SolverConfig)

    def solve(self, backend: Optional[SolverBackend] = None) -> PartitionResult:
        return partition(
            self.weights,
            self.num_groups,
            min_group_size=self.min_group_size,
            config=self.solver,
            backend=backend,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "weights": list(self.weights),
            "groups": self.num_groups,
            "solver": self.solver.to_dict(),
        }
        if self.min_group_size is not None:
            data["min_group_size"] = self.min_group_size
        return data


def load_problem_yaml(yaml_str: str) -> PartitionProblem:
    """Parse and validate a partition problem document.

    Early shape checks give targeted messages; the packaged
    ``numpart/schemas/problem.json`` schema then enforces value ranges such as
    a non-empty ``weights`` list and ``groups >= 1``.

    Raises:
        ValueError: If the document is not a mapping, has unknown keys, or is
            missing ``weights`` or ``groups``.
        jsonschema.ValidationError: If the document violates the problem schema.
    """
    data = yaml.safe_load(yaml_str)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("The provided YAML must map to a dictionary at top-level.")
    data = normalize_yaml_dict_keys(data)

    unknown = sorted(set(data) - _TOP_LEVEL_KEYS)
    if unknown:
        raise ValueError(f"Unrecognized top-level key(s) {unknown}")
    for required in ("weights", "groups"):
        if required not in data:
            raise ValueError(f"Missing required key '{required}'")

    weights = data["weights"]
    if not isinstance(weights, list):
        raise ValueError("'weights' must be a list of integers")
    for w in weights:
        if isinstance(w, bool) or not isinstance(w, int):
            raise ValueError(f"'weights' must contain integers only, got {w!r}")

    groups = data["groups"]
    if isinstance(groups, bool) or not isinstance(groups, int):
        raise ValueError(f"'groups' must be an integer, got {groups!r}")

    min_group_size = data.get("min_group_size")
    if min_group_size is not None and (
        isinstance(min_group_size, bool) or not isinstance(min_group_size, int)
    ):
        raise ValueError(f"'min_group_size' must be an integer, got {min_group_size!r}")

    solver_section = data.get("solver")
    if solver_section is not None:
        if not isinstance(solver_section, dict):
            raise ValueError("'solver' must be a mapping")
        solver_section = normalize_yaml_dict_keys(solver_section)
        data["solver"] = solver_section

    jsonschema.validate(data, _problem_schema())

    return PartitionProblem(
        weights=tuple(weights),
        num_groups=groups,
        min_group_size=min_group_size,
        solver=SolverConfig.from_dict(solver_section or None),
    )


def load_problem_file(path: Union[str, Path]) -> PartitionProblem:
    """Read a problem document from ``path``."""
    return load_problem_yaml(Path(path).read_text(encoding="utf-8"))
