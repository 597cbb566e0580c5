"""Parser tests: tree shape, precedence, associativity and syntax errors."""

import pytest

from formula_calculator import error as E
from formula_calculator.MathEngine import MAX_NESTING, BinOp, FunctionCall, Number, Variable, parse, tokenize


def tree(formula):
    return parse(tokenize(formula))


def test_single_number():
    assert tree("42") == Number(42)


def test_multiplication_binds_tighter_than_addition():
    assert tree("2+3*4") == BinOp(Number(2), "+", BinOp(Number(3), "*", Number(4)))


def test_subtraction_is_left_associative():
    assert tree("8-3-2") == BinOp(BinOp(Number(8), "-", Number(3)), "-", Number(2))


def test_division_is_left_associative():
    assert tree("8/4/2") == BinOp(BinOp(Number(8), "/", Number(4)), "/", Number(2))


def test_power_is_right_associative():
    assert tree("2^3^2") == BinOp(Number(2), "^", BinOp(Number(3), "^", Number(2)))


def test_power_binds_tighter_than_multiplication():
    assert tree("2*x^2") == BinOp(Number(2), "*", BinOp(Variable("x"), "^", Number(2)))


def test_parentheses_override_precedence():
    assert tree("(a+b)^2") == BinOp(BinOp(Variable("a"), "+", Variable("b")), "^", Number(2))


def test_function_call():
    assert tree("ln(x+1)") == FunctionCall("ln", BinOp(Variable("x"), "+", Number(1)))
    assert tree("log(100)") == FunctionCall("log", Number(100))


def test_nested_exponent_example():
    expected = BinOp(
        Variable("x"), "^",
        BinOp(BinOp(Variable("a"), "+", Variable("b")), "^", Variable("z")),
    )
    assert tree("x^(a+b)^z") == expected


def test_parse_is_deterministic():
    assert tree("ln(x)*2^y-3") == tree("ln(x)*2^y-3")


def test_nodes_are_immutable():
    node = tree("1+2")
    with pytest.raises(AttributeError):
        node.operator = "-"
    with pytest.raises(AttributeError):
        node.left.value = 5


def test_missing_closing_parenthesis_after_function():
    with pytest.raises(E.ParseError) as excinfo:
        tree("ln(x")
    assert excinfo.value.code == "3009"
    assert "after ln argument" in excinfo.value.message


def test_missing_opening_parenthesis_after_function():
    with pytest.raises(E.ParseError) as excinfo:
        tree("log x")
    assert excinfo.value.code == "3010"
    assert "Missing opening parenthesis after log" in excinfo.value.message


def test_missing_closing_parenthesis_for_group():
    with pytest.raises(E.ParseError) as excinfo:
        tree("(2+3")
    assert excinfo.value.code == "3009"
    assert "at end of formula" in excinfo.value.message


@pytest.mark.parametrize("formula", ["2+3)", "2 3", "x y", "(1)(2)"])
def test_trailing_tokens_are_rejected(formula):
    with pytest.raises(E.ParseError) as excinfo:
        tree(formula)
    assert excinfo.value.code == "3012"


def test_trailing_token_message_names_token_and_position():
    with pytest.raises(E.ParseError, match=r"Unexpected token '\)' at position 3"):
        tree("2+3)")


@pytest.mark.parametrize("formula", ["xy", "2x", "-x", "*2", "1.2.3", "#"])
def test_unrecognised_factor(formula):
    with pytest.raises(E.ParseError) as excinfo:
        tree(formula)
    assert excinfo.value.code == "3011"


@pytest.mark.parametrize("formula", ["", "2+", "ln(", "3^"])
def test_unexpected_end_of_formula(formula):
    with pytest.raises(E.ParseError) as excinfo:
        tree(formula)
    assert excinfo.value.code == "3013"


def test_deep_nesting_within_limit():
    assert tree("(" * MAX_NESTING + "1" + ")" * MAX_NESTING) == Number(1)


@pytest.mark.parametrize("formula", [
    "(" * 400 + "1" + ")" * 400,
    "ln(" * 150 + "2" + ")" * 150,
    "^".join(["2"] * 150),
])
def test_excessive_nesting_is_a_parse_error(formula):
    with pytest.raises(E.ParseError) as excinfo:
        tree(formula)
    assert excinfo.value.code == "3014"
    assert "nested too deeply" in excinfo.value.message


def test_long_flat_sum_parses_left_nested():
    baum = tree("+".join(["1"] * 1500))
    depth = 0
    while isinstance(baum, BinOp):
        assert baum.right == Number(1)
        baum = baum.left
        depth += 1
    assert depth == 1499
