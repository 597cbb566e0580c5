# LatexEngine.py
"""AST → LaTeX renderer.

Purely structural: variable values are never looked at, and every tree the
parser can produce renders without error.
"""

import logging

from . import MathEngine
from . import ScientificEngine
from . import error as E

logger = logging.getLogger(__name__)


FUNCTION_LATEX = {
    "ln": "\\ln",
    "log": "\\log_{10}",
}


def render(baum):
    """Return the LaTeX markup for an AST."""
    if isinstance(baum, MathEngine.Number):
        return ScientificEngine.format_value(baum.value)

    if isinstance(baum, MathEngine.Variable):
        return baum.name

    if isinstance(baum, MathEngine.FunctionCall):
        return f"{FUNCTION_LATEX[baum.name]}({render(baum.argument)})"

    if isinstance(baum, MathEngine.BinOp):
        # walk the left side of 1+2+3+... iteratively, like BinOp.evaluate
        chain = []
        aktueller_baum = baum
        while isinstance(aktueller_baum, MathEngine.BinOp):
            chain.append(aktueller_baum)
            aktueller_baum = aktueller_baum.left

        text = render(aktueller_baum)
        for binop in reversed(chain):
            text = combine(binop, text, render(binop.right))
        return text

    raise TypeError(f"Cannot render AST node: {baum!r}")


def combine(binop, left, right):
    if binop.operator == '+':
        return f"{left} + {right}"
    if binop.operator == '-':
        return f"{left} - {right}"
    if binop.operator == '*':
        return f"{left} \\cdot {right}"
    if binop.operator == '/':
        return f"\\frac{{{left}}}{{{right}}}"
    if binop.operator == '^':
        # (a+b)^c must not read as a+b^c
        if isinstance(binop.left, MathEngine.BinOp):
            left = f"\\left({left}\\right)"
        return f"{left}^{{{right}}}"

    raise TypeError(f"Cannot render operator: {binop.operator!r}")


def convert_to_latex(formula):
    """Render raw formula text for the preview.

    Blank input gives ''. A formula that does not parse yet is returned
    unchanged so the preview keeps showing what was typed.
    """
    if not formula or not formula.strip():
        return ""
    try:
        return render(MathEngine.parse(MathEngine.tokenize(formula)))
    except (E.ParseError, RecursionError) as e:
        logger.debug("LaTeX conversion error for %r: %s", formula, e)
        return formula
