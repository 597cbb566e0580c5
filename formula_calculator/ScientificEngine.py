# ScientificEngine
"""Function table for the formula engine.

Only the logarithms are supported: `ln` (natural) and `log` (base 10).
Both are defined for strictly positive arguments only.
"""
import math

from . import error as E


FUNCTIONS = {
    "ln": math.log,
    "log": math.log10,
}


def isFunction(name):
    """Return True if `name` is a reserved function name."""
    return name in FUNCTIONS


def format_value(value):
    """Shortest text for a float; integral values are written without '.0'.

    Exponents carry no zero padding: 1e-7, 2.5e+30.
    """
    if math.isfinite(value) and value == int(value) and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" in text:
        mantissa, exponent = text.split("e")
        return f"{mantissa}e{int(exponent):+d}"
    return text


def isLog(name, value):
    """Apply logarithm `name` to `value`.

    Raises EvalError for a non-positive argument instead of letting
    math.log raise a bare ValueError.
    """
    if value <= 0:
        raise E.EvalError(f"Cannot compute logarithm of {format_value(value)}", code="3020")
    return FUNCTIONS[name](value)


def unknown_function(name, value):
    if not isFunction(name):
        raise E.EvalError(f"Unknown function: {name}", code="9999")
    return isLog(name, value)
