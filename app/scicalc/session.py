"""
Session Module

A calculator session: one memory register plus the calculation history.

Every operation takes the caller's current display text and returns an
OperationResult. Failures are returned, never raised, so a caller only
has to check ``result.success``.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import Config
from .errors import (
    CalculatorError,
    DivisionByZeroError,
    ErrorKind,
    InvalidCalculationError,
    InvalidFactorialInputError,
    TooLargeError,
)
from .evaluator import compute
from .formatter import format_result, number_to_string, parse_number
from .history import History, HistoryEntry
from .logging_config import get_logger

logger = get_logger("session")


@dataclass(frozen=True)
class OperationResult:
    """
    Result of a session operation.

    On success:
    - display: the new display text (the formatted result)
    - expression: the history label, e.g. "5!"
    - result: the formatted result

    On failure only error and message are set.
    """
    success: bool
    display: str = ""
    expression: str = ""
    result: str = ""
    error: Optional[ErrorKind] = None
    message: str = ""

    def __str__(self) -> str:
        if self.success:
            return f"{self.expression} = {self.result}"
        return f"Error: {self.message}"

    @classmethod
    def ok(cls, expression: str, result: str) -> "OperationResult":
        """Create a successful result."""
        return cls(success=True, display=result, expression=expression, result=result)

    @classmethod
    def fail(cls, error: CalculatorError) -> "OperationResult":
        """Create a failed result."""
        return cls(success=False, error=error.kind, message=error.message)


class CalculatorSession:
    """
    Holds the memory register and history for one calculator user.

    Not thread-safe: a session is meant to be driven by a single caller.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.memory: float = 0.0
        self._history = History(max_entries=self.config.history_limit)

    # === Calculations ===

    def compute(self, text: str) -> OperationResult:
        """Evaluate the display text as an expression."""
        return self._run(lambda: (text, self._format(compute(text))))

    def factorial(self, text: str) -> OperationResult:
        """n! of the number on the display."""
        def run() -> Tuple[str, str]:
            value = parse_number(text)
            if value is None or not math.isfinite(value) or value < 0 or not value.is_integer():
                raise InvalidFactorialInputError("Invalid input for factorial")
            if value > self.config.factorial_limit:
                raise TooLargeError("Number too large")

            result = 1.0
            for i in range(2, int(value) + 1):
                result *= i
            return text + "!", self._format(result)

        return self._run(run)

    def reciprocal(self, text: str) -> OperationResult:
        """1/x of the number on the display."""
        def run() -> Tuple[str, str]:
            value = parse_number(text)
            if value is None:
                raise InvalidCalculationError("Invalid calculation")
            if value == 0:
                raise DivisionByZeroError("Division by zero")
            result = 1 / value
            if not math.isfinite(result):
                raise InvalidCalculationError("Invalid calculation")
            return "1/(" + text + ")", self._format(result)

        return self._run(run)

    def square(self, text: str) -> OperationResult:
        """x² of the number on the display. Non-numeric text counts as zero."""
        def run() -> Tuple[str, str]:
            value = parse_number(text)
            if value is None:
                value = 0.0
            result = value * value
            if not math.isfinite(result):
                raise InvalidCalculationError("Invalid calculation")
            return "(" + text + ")²", self._format(result)

        return self._run(run)

    # === Memory ===

    def memory_add(self, text: str) -> bool:
        """
        Add the number on the display to memory.

        Text that does not start with a finite number is ignored, and so
        is an addition that would overflow the register.

        Returns:
            True if memory changed
        """
        value = parse_number(text)
        if value is None or not math.isfinite(value):
            return False
        total = self.memory + value
        if not math.isfinite(total):
            return False
        self.memory = total
        return True

    def memory_clear(self) -> None:
        """Reset memory to zero."""
        self.memory = 0.0

    def memory_recall(self) -> str:
        """Memory as text, for the caller to append to its display."""
        return number_to_string(self.memory)

    # === History ===

    @property
    def history(self) -> Tuple[HistoryEntry, ...]:
        """Completed calculations, most recent first."""
        return self._history.entries

    def clear_history(self) -> None:
        self._history.clear()

    # === Internals ===

    def _format(self, value: float) -> str:
        return format_result(value, self.config.significant_digits)

    def _run(self, operation) -> OperationResult:
        """Run an operation, record it on success, convert core errors to results."""
        try:
            expression, result = operation()
        except CalculatorError as e:
            logger.debug(f"Operation failed: {e.kind.value}: {e.message}")
            return OperationResult.fail(e)

        self._history.add(expression, result)
        return OperationResult.ok(expression, result)

    def __str__(self) -> str:
        return f"CalculatorSession(memory={self.memory_recall()}, {self._history})"
