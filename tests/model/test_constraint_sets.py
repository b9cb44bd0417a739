"""Tests for constraint construction and per-index instantiation."""

import dataclasses
import logging
import math

import pytest

from numpart.errors import DeclarationError, StateError, VariableReferenceError
from numpart.model import IndexRange, Model, add, compare, constant, sum_over, term
from numpart.types.base import Operator, VarType

ELEMENTS = IndexRange.of("element", 3)
GROUPS = IndexRange.of("group", 2)


@pytest.fixture
def model() -> Model:
    return Model("constraints")


@pytest.fixture
def x(model: Model):
    return model.declare("x", [ELEMENTS, GROUPS], VarType.BINARY)


class TestCompare:
    """Tests for detached constraint construction."""

    def test_operator_strings(self, x) -> None:
        assert compare(x[1, 1], "<=", 1).operator is Operator.LE
        assert compare(x[1, 1], "==", 1).operator is Operator.EQ
        assert compare(x[1, 1], "=", 1).operator is Operator.EQ
        assert compare(x[1, 1], ">=", 1).operator is Operator.GE

    def test_unknown_operator(self, x) -> None:
        with pytest.raises(ValueError, match="Invalid operator"):
            compare(x[1, 1], "<", 1)

    def test_rhs_must_be_finite_number(self, x) -> None:
        with pytest.raises(ValueError):
            compare(x[1, 1], "<=", math.inf)
        with pytest.raises(TypeError):
            compare(x[1, 1], "<=", "1")  # type: ignore[arg-type]

    def test_row_bounds_fold_constant(self, x) -> None:
        c = compare(add(term(x[1, 1]), constant(2)), "<=", 5)
        assert c.row_bounds() == (-math.inf, 3.0)
        c = compare(add(term(x[1, 1]), constant(2)), ">=", 5)
        assert c.row_bounds() == (3.0, math.inf)
        c = compare(term(x[1, 1]), "==", 1)
        assert c.row_bounds() == (1.0, 1.0)

    def test_constraint_is_immutable(self, x) -> None:
        c = compare(x[1, 1], "<=", 1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            c.rhs = 2.0  # type: ignore[misc]

    def test_violation(self, x) -> None:
        c = compare(add(term(x[1, 1]), term(x[1, 2])), "==", 1)
        assert c.is_satisfied({("x", (1, 1)): 1.0, ("x", (1, 2)): 0.0})
        assert c.violation({("x", (1, 1)): 1.0, ("x", (1, 2)): 1.0}) == 1.0


class TestAddConstraint:
    """Tests for Model.add_constraint."""

    def test_single_constraint(self, model: Model, x) -> None:
        added = model.add_constraint(term(x[1, 1]), "<=", 1, name="cap")
        assert len(added) == 1
        assert added[0].driving_index is None
        assert added[0].label == "cap"
        assert model.num_constraints == 1

    def test_one_constraint_per_driving_value(self, model: Model, x) -> None:
        added = model.add_constraint(
            lambda i: sum_over(GROUPS, lambda k: x[i, k]),
            Operator.EQ,
            1,
            ELEMENTS,
            name="assign",
        )
        assert [c.driving_index for c in added] == [1, 2, 3]
        assert [c.label for c in added] == ["assign[1]", "assign[2]", "assign[3]"]
        for i, c in zip(ELEMENTS, added):
            assert c.expression.terms == {("x", (i, 1)): 1.0, ("x", (i, 2)): 1.0}
            assert c.rhs == 1.0

    def test_callable_rhs(self, model: Model, x) -> None:
        added = model.add_constraint(
            lambda k: sum_over(ELEMENTS, lambda i: x[i, k]), ">=", lambda k: k, GROUPS
        )
        assert [c.rhs for c in added] == [1.0, 2.0]

    def test_callables_need_driving_range(self, model: Model, x) -> None:
        with pytest.raises(TypeError):
            model.add_constraint(lambda i: x[i, 1], "<=", 1)

    def test_empty_driving_range(self, model: Model, x) -> None:
        with pytest.raises(DeclarationError):
            model.add_constraint(lambda i: x[1, 1], "<=", 1, IndexRange.of("none", 0))

    def test_undeclared_variable_rejected(self, model: Model) -> None:
        other = Model("other")
        y = other.declare("y", [ELEMENTS])
        with pytest.raises(VariableReferenceError, match="not declared"):
            model.add_constraint(term(y[1]), "<=", 1)

    def test_same_identity_from_other_model_rejected(self, model: Model, x) -> None:
        twin = Model("twin").declare("x", [ELEMENTS, GROUPS], VarType.BINARY)
        with pytest.raises(VariableReferenceError):
            model.add_constraint(term(twin[1, 1]), "<=", 1)

    def test_failed_family_appends_nothing(self, model: Model, x) -> None:
        foreign = Model("other").declare("y", [ELEMENTS])

        def build(i: int):
            return term(foreign[i]) if i == 3 else term(x[i, 1])

        with pytest.raises(VariableReferenceError):
            model.add_constraint(build, "<=", 1, ELEMENTS)
        assert model.num_constraints == 0

    def test_trivially_false_constant_constraint_warns(
        self, model: Model, x, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="numpart"):
            model.add_constraint(constant(2), "<=", 1)
        assert "can never hold" in caplog.text
        assert model.num_constraints == 1

    def test_add_after_optimize_raises(self, model: Model, x, scripted_backend) -> None:
        model.set_objective(constant(0))
        model.optimize(backend=scripted_backend(values=lambda p: [0.0] * p.num_variables))
        with pytest.raises(StateError):
            model.add_constraint(term(x[1, 1]), "<=", 1)
