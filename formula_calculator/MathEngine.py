# MathEngine.py
"""
Core formula engine for the Formula Calculator.

Pipeline
--------
1) Tokenizer: converts a raw formula string into a flat list of tokens.
2) Parser (AST): builds an Abstract Syntax Tree (recursive-descent, precedence aware).
3) Evaluator: walks the AST with the current variable values; every value is bounds-checked.
4) Formatter: renders a numeric result for the result display.

The LaTeX renderer walks the same AST and lives in LatexEngine.py.
"""

import logging
import math
import re
from collections import deque
from enum import Enum, auto

from . import ScientificEngine
from . import error as E

logger = logging.getLogger(__name__)

# Supported operators (kept as simple lists for quick membership checks)
Operations = ["+", "-", "*", "/", "^"]
Brackets = ["(", ")"]

MAX_SAFE_RESULT = 1e308
MAX_EXPONENT = 1000
MAX_POWER_BASE = 1e154
MAX_NESTING = 100  # parentheses, function calls and chained powers

NUMBER_PATTERN = re.compile(r"(\d+\.?\d*|\.\d+)([eE]\d+)?")
VARIABLE_PATTERN = re.compile(r"[A-Za-z]")


# -----------------------------
# Tokens
# -----------------------------

class TokenType(Enum):
    NUMBER = auto()
    IDENTIFIER = auto()
    FUNCTION = auto()
    OPERATOR = auto()
    LPAREN = auto()
    RPAREN = auto()
    TEXT = auto()  # unrecognised run, rejected by the parser


class Token:
    def __init__(self, type_, value, position=0):
        self.type = type_
        self.value = value
        self.position = position

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return self.type == other.type and self.value == other.value

    def __repr__(self):
        return f"Token({self.type.name}, {self.value!r})"


# -----------------------------
# Utilities / small helpers
# -----------------------------

def isNumber(text):
    """Return True if `text` is a complete numeral such as '12', '0.5', '.5' or '2e3'."""
    return NUMBER_PATTERN.fullmatch(text) is not None


def isVariable(text):
    """Return True for a single ASCII letter."""
    return VARIABLE_PATTERN.fullmatch(text) is not None


def isOp(char):
    """Return index of a known binary operator or -1 if unknown."""
    try:
        return Operations.index(char)
    except ValueError:
        return -1


def run_token(text, position):
    """Classify a flushed run of characters."""
    if isNumber(text):
        return Token(TokenType.NUMBER, text, position)
    if isVariable(text):
        return Token(TokenType.IDENTIFIER, text, position)
    return Token(TokenType.TEXT, text, position)


def symbol_token(char, position):
    if char == "(":
        return Token(TokenType.LPAREN, char, position)
    if char == ")":
        return Token(TokenType.RPAREN, char, position)
    return Token(TokenType.OPERATOR, char, position)


def where(token):
    """Location suffix for error messages."""
    if token is None:
        return " at end of formula"
    return f" at position {token.position}"


# -----------------------------
# AST node types
# -----------------------------

class Node:
    """Base class of the four AST variants. Nodes are immutable."""
    __slots__ = ()

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} nodes are immutable")

    def fields(self):
        return tuple(getattr(self, slot) for slot in self.__slots__)

    def __eq__(self, other):
        return type(self) is type(other) and self.fields() == other.fields()

    def __hash__(self):
        return hash((type(self).__name__,) + self.fields())

    def evaluate(self, variables):
        raise NotImplementedError(f"Invalid AST node: {type(self).__name__}")


class Number(Node):
    """AST node for a numeric literal."""
    __slots__ = ("value",)

    def __init__(self, value):
        object.__setattr__(self, "value", float(value))

    def evaluate(self, variables):
        return check_value(self.value)

    def __repr__(self):
        return f"Number({ScientificEngine.format_value(self.value)})"


class Variable(Node):
    """AST node for a single-letter variable; absent names read as 0."""
    __slots__ = ("name",)

    def __init__(self, name):
        object.__setattr__(self, "name", name)

    def evaluate(self, variables):
        return check_value(float(variables.get(self.name) or 0))

    def __repr__(self):
        return f"Variable('{self.name}')"


class FunctionCall(Node):
    """AST node for ln(...) / log(...)."""
    __slots__ = ("name", "argument")

    def __init__(self, name, argument):
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "argument", argument)

    def evaluate(self, variables):
        argument_value = self.argument.evaluate(variables)
        return check_value(ScientificEngine.unknown_function(self.name, argument_value))

    def __repr__(self):
        return f"FunctionCall({self.name!r}, {self.argument})"


class BinOp(Node):
    """AST node for a binary operation: left <operator> right."""
    __slots__ = ("left", "operator", "right")

    def __init__(self, left, operator, right):
        object.__setattr__(self, "left", left)
        object.__setattr__(self, "operator", operator)
        object.__setattr__(self, "right", right)

    def evaluate(self, variables):
        """Evaluate a left-nested chain such as 1+2+3+... bottom-up without recursing down its left side."""
        chain = []
        baum = self
        while isinstance(baum, BinOp):
            chain.append(baum)
            baum = baum.left

        ergebnis = baum.evaluate(variables)
        for binop in reversed(chain):
            ergebnis = binop.apply(ergebnis, binop.right.evaluate(variables))
        return ergebnis

    def apply(self, left_value, right_value):
        """Apply the operator with its guards."""
        if self.operator == '+':
            result = left_value + right_value
        elif self.operator == '-':
            result = left_value - right_value
        elif self.operator == '*':
            result = left_value * right_value
        elif self.operator == '/':
            if right_value == 0:
                raise E.EvalError("Division by zero", code="3003")
            result = left_value / right_value
        elif self.operator == '^':
            result = power(left_value, right_value)
        else:
            raise E.EvalError(f"Unknown operator: {self.operator}", code="9999")

        return check_value(result)

    def __repr__(self):
        return f"BinOp({self.operator!r}, left={self.left}, right={self.right})"


# -----------------------------
# Numeric guards
# -----------------------------

def check_value(value):
    """Bounds check applied to every literal and computed value."""
    if not math.isfinite(value):
        raise E.EvalError("Result is too large", code="3026")
    if abs(value) > MAX_SAFE_RESULT:
        raise E.EvalError("Result exceeds safe calculation limit", code="3027")
    return value


def power(base, exponent):
    """base ^ exponent, rejecting magnitudes before math.pow can overflow."""
    if exponent > MAX_EXPONENT:
        raise E.EvalError("Exponent too large", code="3028")
    if abs(base) > MAX_POWER_BASE and exponent > 2:
        raise E.EvalError("Base value too large for exponentiation", code="3029")
    try:
        return math.pow(base, exponent)
    except (OverflowError, ValueError):
        # overflow, 0 ^ negative, or a negative base with a fractional exponent
        raise E.EvalError("Result is too large", code="3026")


# -----------------------------
# Tokenizer
# -----------------------------

def tokenize(formula):
    """Convert a raw formula into a token list. Never raises.

    Characters that are not whitespace, operators, parentheses or the start of
    'ln'/'log' are collected into a pending run; the run becomes one token
    when it is terminated. Runs that are neither a numeral nor a single
    letter come out as TEXT tokens and are rejected by the parser.
    """
    tokens = []
    pending = ""
    pending_start = 0
    b = 0

    while b < len(formula):
        current_char = formula[b]

        # --- Whitespace and operators/parentheses end the pending run ---
        if current_char.isspace() or isOp(current_char) != -1 or current_char in Brackets:
            if pending:
                tokens.append(run_token(pending, pending_start))
                pending = ""
            if not current_char.isspace():
                tokens.append(symbol_token(current_char, b))
            b += 1
            continue

        # --- Function names: 'ln' / 'log' take priority over a variable 'l' ---
        if current_char == 'l':
            name = None
            if formula[b:b + 2] == "ln":
                name = "ln"
            elif formula[b:b + 3] == "log":
                name = "log"

            if name is not None:
                if pending:
                    tokens.append(run_token(pending, pending_start))
                    pending = ""
                tokens.append(Token(TokenType.FUNCTION, name, b))
                b += len(name)
                continue

        # --- Everything else accumulates ---
        if not pending:
            pending_start = b
        pending += current_char
        b += 1

    if pending:
        tokens.append(run_token(pending, pending_start))

    return tokens


# -----------------------------
# Parser (recursive descent)
# -----------------------------

def parse(tokens):
    """Parse a token list into an AST.

    Implements precedence via nested functions: factor → power → term → expression.
    Every token must be consumed; leftovers raise ParseError.
    """
    remaining = deque(tokens)
    depth = 0

    def peek():
        return remaining[0] if remaining else None

    def descend(token):
        nonlocal depth
        depth += 1
        if depth > MAX_NESTING:
            raise E.ParseError(
                f"Formula is nested too deeply (more than {MAX_NESTING} levels){where(token)}", code="3014")

    def ascend():
        nonlocal depth
        depth -= 1

    def expect_closing(context):
        token = peek()
        if token is None or token.type != TokenType.RPAREN:
            raise E.ParseError(f"Missing closing parenthesis ')' {context}{where(token)}", code="3009")
        remaining.popleft()

    def parse_factor():
        """Parenthesised sub-expressions, function calls, numbers and variables."""
        token = peek()
        if token is None:
            raise E.ParseError(
                "Unexpected end of formula: expected a number, variable, function or '('", code="3013")

        if token.type == TokenType.LPAREN:
            remaining.popleft()
            descend(token)
            baum_in_der_klammer = parse_expression()
            expect_closing("for '('")
            ascend()
            return baum_in_der_klammer

        if token.type == TokenType.FUNCTION:
            return parse_function()

        if token.type == TokenType.NUMBER:
            remaining.popleft()
            return Number(float(token.value))

        if token.type == TokenType.IDENTIFIER:
            remaining.popleft()
            return Variable(token.value)

        raise E.ParseError(
            f"Unexpected token '{token.value}'{where(token)}: "
            f"expected a number, variable, function or '('", code="3011")

    def parse_function():
        """ln(...) / log(...): the name must be followed by '('."""
        name = remaining.popleft().value
        token = peek()
        if token is None or token.type != TokenType.LPAREN:
            raise E.ParseError(f"Missing opening parenthesis after {name}{where(token)}", code="3010")
        remaining.popleft()
        descend(token)
        argument_baum = parse_expression()
        expect_closing(f"after {name} argument")
        ascend()
        return FunctionCall(name, argument_baum)

    def parse_power():
        """Exponentiation '^', right-associative through recursion on the right side."""
        aktueller_baum = parse_factor()
        token = peek()
        if token is not None and token.type == TokenType.OPERATOR and token.value == '^':
            remaining.popleft()
            descend(token)
            aktueller_baum = BinOp(aktueller_baum, '^', parse_power())
            ascend()
        return aktueller_baum

    def parse_term():
        """Multiplication and division."""
        aktueller_baum = parse_power()
        while peek() is not None and peek().type == TokenType.OPERATOR and peek().value in ("*", "/"):
            operator = remaining.popleft().value
            rechtes_teil = parse_power()
            aktueller_baum = BinOp(aktueller_baum, operator, rechtes_teil)
        return aktueller_baum

    def parse_expression():
        """Addition and subtraction."""
        aktueller_baum = parse_term()
        while peek() is not None and peek().type == TokenType.OPERATOR and peek().value in ("+", "-"):
            operator = remaining.popleft().value
            rechte_seite = parse_term()
            aktueller_baum = BinOp(aktueller_baum, operator, rechte_seite)
        return aktueller_baum

    finaler_baum = parse_expression()

    if remaining:
        token = remaining[0]
        raise E.ParseError(
            f"Unexpected token '{token.value}'{where(token)} after end of formula", code="3012")

    return finaler_baum


# -----------------------------
# Evaluator
# -----------------------------

def evaluate(baum, variables=None):
    """Evaluate an AST against a {letter: value} mapping. Pure; never mutates `variables`."""
    if not isinstance(baum, Node):
        raise E.EvalError(f"Invalid AST node: {baum!r}", code="9999")
    try:
        return baum.evaluate(variables if variables is not None else {})
    except RecursionError:
        raise E.EvalError("Formula is nested too deeply", code="3015")


# -----------------------------
# Variables
# -----------------------------

def extract_variables(formula):
    """Distinct single-letter identifiers in order of first appearance."""
    names = []
    for token in tokenize(formula):
        if token.type == TokenType.IDENTIFIER and token.value not in names:
            names.append(token.value)
    return names


def update_variables(formula, previous=None):
    """Build the variable map for `formula`, keeping values of names that persist."""
    previous = previous or {}
    return {name: previous.get(name, 0.0) for name in extract_variables(formula)}


# -----------------------------
# Result formatting
# -----------------------------

def format_result(ergebnis, decimal_places=6, scientific=True):
    """Render a result for display: '-' when absent, else fixed or exponential."""
    if ergebnis is None:
        return "-"
    if scientific and ergebnis != 0 and (abs(ergebnis) < 1e-6 or abs(ergebnis) > 999999):
        return f"{ergebnis:.{decimal_places}e}"
    return f"{ergebnis:.{decimal_places}f}"


# -----------------------------
# Public entry point
# -----------------------------

def calculate(problem, variables=None):
    """Main API: tokenize → parse → evaluate. Blank formulas give None."""
    if problem is None or not problem.strip():
        return None

    try:
        tokens = tokenize(problem)
        logger.debug("Tokens: %s", tokens)

        finaler_baum = parse(tokens)
        logger.debug("Final AST: %s", finaler_baum)

        ergebnis = evaluate(finaler_baum, variables)
        logger.debug("Result: %r", ergebnis)
        return ergebnis

    # Re-raise our domain errors after attaching the source formula
    except E.MathError as e:
        e.equation = problem
        raise
    # Convert unexpected Python exceptions to our unified error type
    except Exception as e:
        raise E.MathError(message=f"Unexpected crash: {e}", code="9999", equation=problem) from e
