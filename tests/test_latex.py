"""LaTeX renderer tests."""

import pytest

from formula_calculator import LatexEngine, MathEngine
from formula_calculator.LatexEngine import convert_to_latex, render
from formula_calculator.MathEngine import parse, tokenize


def latex(formula):
    return render(parse(tokenize(formula)))


@pytest.mark.parametrize("formula, expected", [
    ("2.5", "2.5"),
    ("3", "3"),
    ("x", "x"),
    ("a+b", "a + b"),
    ("a-b", "a - b"),
    ("2*x", "2 \\cdot x"),
    ("x/y", "\\frac{x}{y}"),
    ("ln(x)", "\\ln(x)"),
    ("log(100)", "\\log_{10}(100)"),
    ("x^2", "x^{2}"),
])
def test_node_rendering(formula, expected):
    assert latex(formula) == expected


def test_grouped_base_is_parenthesised():
    assert latex("(a+b)^2") == "\\left(a + b\\right)^{2}"


def test_ungrouped_power_is_not_parenthesised():
    assert latex("a+b^2") == "a + b^{2}"


def test_power_of_power_on_the_left():
    assert latex("(x^2)^3") == "\\left(x^{2}\\right)^{3}"


def test_function_base_is_not_parenthesised():
    assert latex("ln(x)^2") == "\\ln(x)^{2}"


def test_right_associative_power():
    assert latex("2^3^2") == "2^{3^{2}}"


def test_fraction_inside_function():
    assert latex("log((a+1)/b)") == "\\log_{10}(\\frac{a + 1}{b})"


@pytest.mark.parametrize("formula", [
    "x^(a+b)^z",
    "ln(x)/log(y^2)",
    "((a+b)/(c-d))^(e*f)",
    "1/2/3/4",
])
def test_braces_are_balanced(formula):
    text = latex(formula)
    depth = 0
    for char in text:
        depth += {"{": 1, "}": -1}.get(char, 0)
        assert depth >= 0
    assert depth == 0
    assert text.count("\\left(") == text.count("\\right)")


def test_render_rejects_unknown_nodes():
    with pytest.raises(TypeError):
        render(object())


def test_convert_to_latex():
    assert convert_to_latex("1/x") == "\\frac{1}{x}"


def test_convert_blank_formula():
    assert convert_to_latex("") == ""
    assert convert_to_latex("  ") == ""


def test_convert_unparseable_formula_returns_it_unchanged():
    assert convert_to_latex("ln(x") == "ln(x"
    assert convert_to_latex("2+3)") == "2+3)"


def test_long_flat_sum_renders():
    text = latex("+".join(["1"] * 1500))
    assert text.startswith("1 + 1 + 1")
    assert text.count(" + ") == 1499


def test_long_mixed_chain_renders():
    text = latex("/".join(["x"] * 600) + "-1")
    assert text.startswith("\\frac{" * 599 + "x}{x}")
    assert text.endswith("}{x} - 1")


def test_convert_too_deeply_nested_formula_returns_it_unchanged():
    formula = "(" * 400 + "1" + ")" * 400
    assert convert_to_latex(formula) == formula


def test_convert_survives_recursion_limit(monkeypatch):
    baum = MathEngine.Number(2)
    for _ in range(5000):
        baum = MathEngine.FunctionCall("ln", baum)
    monkeypatch.setattr(LatexEngine.MathEngine, "parse", lambda tokens: baum)
    assert convert_to_latex("ln(2)") == "ln(2)"


@pytest.mark.parametrize("formula, expected", [
    ("0.0000001", "1e-7"),
    ("1e21", "1e+21"),
    ("2.5e30", "2.5e+30"),
    ("0.5", "0.5"),
])
def test_exponent_form_numbers(formula, expected):
    assert latex(formula) == expected
