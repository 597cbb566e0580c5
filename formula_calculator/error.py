# error.py
"""Error types shared by the formula engine, the config store and the UI."""


class MathError(Exception):
    def __init__(self, message, code="9999", equation=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.equation = equation

    def __str__(self):
        return self.message


class ParseError(MathError):
    pass


class EvalError(MathError):
    pass


class ConfigError(MathError):
    pass


Error_Dictionary = {

    "3": "Formula Engine Error",
    "4": "UI Error",
    "5": "Configuration Error",
    "9": "Runtime Error"

}

# Error Messages are structured in:
# 1. Digit: Main Error
# 2. Digit: Sub-area
# 3. and 4. Digit: Error Number


ERROR_MESSAGES = {
    "3003": "Division by Zero",
    "3009": "Missing ')'",
    "3010": "Missing '('",
    "3011": "Unexpected Token",
    "3012": "Unexpected Token after Formula",
    "3013": "Unexpected End of Formula",
    "3014": "Formula nested too deeply",
    "3015": "Formula too deep to evaluate",
    "3020": "Logarithm of non-positive Value",
    "3026": "Number too big",
    "3027": "Number exceeds safe Limit",
    "3028": "Exponent too big",
    "3029": "Base too big for Exponentiation",

    "4002": "Nothing to copy",

    "5001": "Saved Formulas could not be written",

    "9999": "Unexpected Error"
}


def describe(error):
    """Return the one-line text the UI shows for a MathError."""
    return f"Error {error.code}: {error.message}"


def category(code):
    """Return the main error area for a 4-digit code (its first digit)."""
    return Error_Dictionary.get(str(code)[:1], "Unknown Error")
