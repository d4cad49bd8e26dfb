"""
Errors Module

Error kinds and the exception hierarchy used inside the calculator core.

Inside the core, failures are raised as CalculatorError subclasses.
At the core boundary (evaluate() and the session operations) they are
caught and turned into result values, so callers never see them raised.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Every way a calculator operation can fail."""

    EMPTY_EXPRESSION = "empty_expression"
    SYNTAX_ERROR = "syntax_error"
    INVALID_CALCULATION = "invalid_calculation"
    INVALID_FACTORIAL_INPUT = "invalid_factorial_input"
    TOO_LARGE = "too_large"
    DIVISION_BY_ZERO = "division_by_zero"


# =============================================================================
# Custom Exceptions
# =============================================================================

class CalculatorError(Exception):
    """Base exception for calculator errors."""

    kind: ErrorKind = ErrorKind.INVALID_CALCULATION

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind.value.replace("_", " "))
        self.message = str(self)


class EmptyExpressionError(CalculatorError):
    """Raised when there is nothing to evaluate."""
    kind = ErrorKind.EMPTY_EXPRESSION


class ExpressionSyntaxError(CalculatorError):
    """Raised for stray tokens, unknown names and unbalanced parentheses."""

    kind = ErrorKind.SYNTAX_ERROR

    def __init__(self, message: str = "", position: int = -1):
        super().__init__(message)
        self.position = position


class InvalidCalculationError(CalculatorError):
    """Raised when a calculation produces NaN or infinity."""
    kind = ErrorKind.INVALID_CALCULATION


class InvalidFactorialInputError(CalculatorError):
    """Raised when the factorial operand is negative or not an integer."""
    kind = ErrorKind.INVALID_FACTORIAL_INPUT


class TooLargeError(CalculatorError):
    """Raised when the factorial operand exceeds the supported limit."""
    kind = ErrorKind.TOO_LARGE


class DivisionByZeroError(CalculatorError):
    """Raised when taking the reciprocal of zero."""
    kind = ErrorKind.DIVISION_BY_ZERO


class SessionNotFoundError(LookupError):
    """Raised by the service layer for an unknown session id."""
    pass
