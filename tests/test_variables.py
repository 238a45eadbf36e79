import pytest

from deskcalc.builtins import BUILTIN_CONSTANTS, register_builtin_constant
from deskcalc.variables import DuplicateDeclaration, UndefinedVariable, Variable, VariableTable


def test_builtins_are_predeclared() -> None:
    variables = VariableTable()
    assert variables.lookup("pi") == 3.1415926535
    assert variables.lookup("e") == 2.7182818284
    assert [v.name for v in variables] == ["pi", "e"]


def test_without_builtins() -> None:
    variables = VariableTable(with_builtins=False)
    assert len(variables) == 0
    assert not variables.is_declared("pi")


def test_initial_values_follow_builtins() -> None:
    variables = VariableTable({"x": 1.0, "y": 2.0})
    assert list(variables) == [
        Variable("pi", 3.1415926535),
        Variable("e", 2.7182818284),
        Variable("x", 1.0),
        Variable("y", 2.0),
    ]


def test_initial_values_cannot_shadow_builtins() -> None:
    with pytest.raises(DuplicateDeclaration):
        VariableTable({"pi": 3.0})


def test_declare_returns_value() -> None:
    variables = VariableTable()
    assert variables.declare("x", 5.0) == 5.0
    assert variables.lookup("x") == 5.0
    assert variables.is_declared("x")
    assert "x" in variables


def test_declare_twice_fails() -> None:
    variables = VariableTable()
    variables.declare("x", 5.0)
    with pytest.raises(DuplicateDeclaration) as exc_info:
        variables.declare("x", 6.0)
    assert exc_info.value.name == "x"
    assert variables.lookup("x") == 5.0


def test_lookup_is_exact_match() -> None:
    variables = VariableTable()
    variables.declare("abc", 1.0)
    with pytest.raises(UndefinedVariable):
        variables.lookup("ab")
    with pytest.raises(UndefinedVariable):
        variables.lookup("ABC")


def test_update_existing() -> None:
    variables = VariableTable()
    variables.declare("x", 1.0)
    variables.update("x", 2.0)
    assert variables.lookup("x") == 2.0
    assert len(variables) == 3


def test_update_does_not_create() -> None:
    variables = VariableTable()
    with pytest.raises(UndefinedVariable, match="Undefined variable 'x'"):
        variables.update("x", 2.0)
    assert not variables.is_declared("x")


def test_is_declared_has_no_side_effects() -> None:
    variables = VariableTable()
    before = list(variables)
    assert not variables.is_declared("nothing")
    assert list(variables) == before


def test_register_builtin_constant_rejects_duplicates() -> None:
    with pytest.raises(ValueError):
        register_builtin_constant("pi", 3.0)
    assert BUILTIN_CONSTANTS["pi"] == 3.1415926535
