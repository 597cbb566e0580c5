"""Variable derivation and result formatting."""

import pytest

from formula_calculator.MathEngine import extract_variables, format_result, update_variables


def test_variables_in_order_of_first_appearance():
    assert extract_variables("x^(a+b)^z") == ["x", "a", "b", "z"]


def test_repeated_names_listed_once():
    assert extract_variables("x*x+y-x") == ["x", "y"]


def test_function_names_are_not_variables():
    assert extract_variables("ln(x)+log(y)+x") == ["x", "y"]


def test_invalid_runs_contribute_no_variables():
    assert extract_variables("xy+2") == []
    assert extract_variables("") == []


def test_update_keeps_persisting_values_and_defaults_new_ones():
    assert update_variables("x+y", {"x": 3.0, "z": 9.0}) == {"x": 3.0, "y": 0.0}


def test_update_without_previous_values():
    assert update_variables("a*b") == {"a": 0.0, "b": 0.0}


@pytest.mark.parametrize("value, expected", [
    (None, "-"),
    (0.0, "0.000000"),
    (3.14159265, "3.141593"),
    (-42.0, "-42.000000"),
    (999999.0, "999999.000000"),
    (12345678.0, "1.234568e+07"),
    (0.0000001, "1.000000e-07"),
])
def test_format_result(value, expected):
    assert format_result(value) == expected


def test_format_result_decimal_places():
    assert format_result(2 / 3, decimal_places=2) == "0.67"


def test_format_result_without_scientific_notation():
    assert format_result(12345678.0, scientific=False) == "12345678.000000"
