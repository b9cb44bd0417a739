"""Tests for loading partition problems from YAML."""

from pathlib import Path
from textwrap import dedent

import jsonschema
import pytest

from numpart.config import SolverConfig
from numpart.io import PartitionProblem, load_problem_file, load_problem_yaml
from numpart.types.base import ModelStatus


class TestLoadProblemYaml:
    """Tests for load_problem_yaml."""

    def test_full_document(self) -> None:
        problem = load_problem_yaml(
            dedent(
                """
                weights: [1, 2, 3, 4, 5, 6]
                groups: 2
                min_group_size: 1
                solver:
                  time_limit_ms: 5000
                  presolve: false
                  verbose: false
                """
            )
        )
        assert problem.weights == (1, 2, 3, 4, 5, 6)
        assert problem.num_groups == 2
        assert problem.min_group_size == 1
        assert problem.solver == SolverConfig(
            verbose=False, presolve=False, time_limit_ms=5000
        )

    def test_minimal_document_uses_defaults(self) -> None:
        problem = load_problem_yaml("weights: [3, 3]\ngroups: 2\n")
        assert problem.min_group_size is None
        assert problem.solver == SolverConfig()

    def test_top_level_must_be_mapping(self) -> None:
        with pytest.raises(ValueError, match="dictionary"):
            load_problem_yaml("- 1\n- 2\n")

    def test_empty_document(self) -> None:
        with pytest.raises(ValueError, match="Missing required key 'weights'"):
            load_problem_yaml("")

    def test_unknown_top_level_key(self) -> None:
        with pytest.raises(ValueError, match=r"Unrecognized top-level key\(s\) \['seed'\]"):
            load_problem_yaml("weights: [1]\ngroups: 1\nseed: 7\n")

    def test_missing_groups(self) -> None:
        with pytest.raises(ValueError, match="'groups'"):
            load_problem_yaml("weights: [1, 2]\n")

    @pytest.mark.parametrize(
        "weights",
        ["[1, 2.5]", "[1, true]", "[1, '2']", "7"],
    )
    def test_weights_must_be_integers(self, weights: str) -> None:
        with pytest.raises(ValueError, match="weights"):
            load_problem_yaml(f"weights: {weights}\ngroups: 2\n")

    def test_groups_must_be_integer(self) -> None:
        with pytest.raises(ValueError, match="'groups' must be an integer"):
            load_problem_yaml("weights: [1]\ngroups: two\n")

    def test_min_group_size_must_be_integer(self) -> None:
        with pytest.raises(ValueError, match="min_group_size"):
            load_problem_yaml("weights: [1]\ngroups: 1\nmin_group_size: 0.5\n")

    def test_solver_must_be_mapping(self) -> None:
        with pytest.raises(ValueError, match="'solver' must be a mapping"):
            load_problem_yaml("weights: [1]\ngroups: 1\nsolver: fast\n")

    def test_unknown_solver_option(self) -> None:
        with pytest.raises(jsonschema.ValidationError, match="threads"):
            load_problem_yaml("weights: [1]\ngroups: 1\nsolver:\n  threads: 4\n")

    def test_invalid_time_limit(self) -> None:
        with pytest.raises(jsonschema.ValidationError, match="time_limit_ms"):
            load_problem_yaml("weights: [1]\ngroups: 1\nsolver:\n  time_limit_ms: 0\n")

    def test_null_time_limit_means_unlimited(self) -> None:
        problem = load_problem_yaml(
            "weights: [1]\ngroups: 1\nsolver:\n  time_limit_ms: null\n"
        )
        assert problem.solver.time_limit_ms is None


class TestProblemSchema:
    """Value ranges enforced by the packaged problem schema at load time."""

    def test_empty_weights_rejected(self) -> None:
        with pytest.raises(jsonschema.ValidationError) as exc_info:
            load_problem_yaml("weights: []\ngroups: 2\n")
        assert list(exc_info.value.absolute_path) == ["weights"]

    @pytest.mark.parametrize("groups", [0, -3])
    def test_non_positive_groups_rejected(self, groups: int) -> None:
        with pytest.raises(jsonschema.ValidationError) as exc_info:
            load_problem_yaml(f"weights: [1, 2]\ngroups: {groups}\n")
        assert list(exc_info.value.absolute_path) == ["groups"]

    def test_negative_min_group_size_rejected(self) -> None:
        with pytest.raises(jsonschema.ValidationError) as exc_info:
            load_problem_yaml("weights: [1, 2]\ngroups: 2\nmin_group_size: -1\n")
        assert list(exc_info.value.absolute_path) == ["min_group_size"]

    def test_non_boolean_solver_flag_rejected(self) -> None:
        with pytest.raises(jsonschema.ValidationError):
            load_problem_yaml("weights: [1]\ngroups: 1\nsolver:\n  presolve: 1\n")

    def test_empty_solver_section_uses_defaults(self) -> None:
        problem = load_problem_yaml("weights: [1]\ngroups: 1\nsolver: {}\n")
        assert problem.solver == SolverConfig()


class TestLoadProblemFile:
    """Tests for load_problem_file."""

    def test_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "problem.yaml"
        path.write_text("weights: [4, 5, 6, 7, 8]\ngroups: 2\n", encoding="utf-8")
        problem = load_problem_file(path)
        assert problem.weights == (4, 5, 6, 7, 8)
        assert load_problem_file(str(path)) == problem

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_problem_file(tmp_path / "absent.yaml")


class TestPartitionProblem:
    """Tests for PartitionProblem."""

    def test_solve(self, highs) -> None:
        problem = PartitionProblem(weights=(4, 5, 6, 7, 8), num_groups=2)
        result = problem.solve(highs)
        assert result.status is ModelStatus.OPTIMAL
        # 30 = 15 + 15 with {7, 8} and {4, 5, 6}
        assert result.score == pytest.approx(0.0)

    def test_solver_options_reach_backend(self, scripted_backend) -> None:
        problem = PartitionProblem(
            weights=(1, 2), num_groups=2, solver=SolverConfig(time_limit_ms=100)
        )
        backend = scripted_backend()
        problem.solve(backend)
        assert backend.calls[0][1].time_limit_ms == 100

    def test_to_dict_round_trip(self) -> None:
        problem = PartitionProblem(
            weights=(1, 2, 3),
            num_groups=2,
            min_group_size=1,
            solver=SolverConfig(time_limit_ms=500),
        )
        data = problem.to_dict()
        assert data == {
            "weights": [1, 2, 3],
            "groups": 2,
            "min_group_size": 1,
            "solver": {"verbose": False, "presolve": True, "time_limit_ms": 500},
        }

    def test_to_dict_omits_unset_min_group_size(self) -> None:
        data = PartitionProblem(weights=(1,), num_groups=1).to_dict()
        assert "min_group_size" not in data
