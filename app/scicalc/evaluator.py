"""
Evaluator Module

The expression evaluation pipeline:

    raw text -> notation rewrite -> tokenize/parse -> compute -> validate

evaluate() is the core boundary: it never raises for bad input. Every
failure comes back as an EvalResult with an ErrorKind.
"""

import math
from dataclasses import dataclass
from typing import Optional

from .errors import (
    CalculatorError,
    EmptyExpressionError,
    ExpressionSyntaxError,
    ErrorKind,
    InvalidCalculationError,
)
from .logging_config import get_logger
from .notation import prepare
from .parser import evaluate_tree, parse

logger = get_logger("evaluator")


@dataclass(frozen=True)
class EvalResult:
    """
    Result of evaluating an expression.

    Exactly one of value/error is set. A successful value is always
    finite and never NaN.
    """
    value: Optional[float] = None
    error: Optional[ErrorKind] = None
    message: str = ""

    @property
    def success(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        if self.success:
            return str(self.value)
        return f"Error: {self.message}"

    @classmethod
    def ok(cls, value: float) -> "EvalResult":
        """Create a successful result."""
        return cls(value=value)

    @classmethod
    def fail(cls, error: CalculatorError) -> "EvalResult":
        """Create a failed result from a core exception."""
        return cls(error=error.kind, message=error.message)


def compute(text: str) -> float:
    """
    Evaluate expression text, raising on failure.

    This is the raising counterpart of evaluate(), used inside the core.

    Raises:
        EmptyExpressionError: Blank input
        ExpressionSyntaxError: Malformed input
        InvalidCalculationError: Result is NaN or infinite
    """
    if not text or not text.strip():
        raise EmptyExpressionError("Empty expression")

    try:
        tree = parse(prepare(text))
        value = evaluate_tree(tree)
    except RecursionError:
        # Long operator chains build trees deeper than the interpreter stack
        raise ExpressionSyntaxError("Expression is too long to evaluate")

    if math.isnan(value) or math.isinf(value):
        raise InvalidCalculationError("Invalid calculation")
    return value


def evaluate(text: str) -> EvalResult:
    """
    Evaluate a calculator expression.

    Args:
        text: Raw display text, e.g. "2×sin(30)+√(16)"

    Returns:
        EvalResult with the value, or the error kind and message
    """
    try:
        return EvalResult.ok(compute(text))
    except CalculatorError as e:
        logger.debug(
            f"Evaluation of {text!r} failed: {e.kind.value}: {e.message}",
            extra={"expression": text, "error_kind": e.kind},
        )
        return EvalResult.fail(e)
