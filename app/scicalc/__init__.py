"""
SciCalc - A Scientific Calculator Core

This package contains:
- evaluator: Expression evaluation (notation, tokenizer, parser)
- formatter: Result formatting
- session: Memory register and calculation history
- services/server: HTTP API over calculator sessions
- cli: Interactive console front end
- config: Configuration loading
"""

from .config import Config, load_config
from .errors import ErrorKind
from .evaluator import EvalResult, evaluate
from .formatter import format_result
from .session import CalculatorSession, OperationResult

__version__ = "0.1.0"
__all__ = [
    "CalculatorSession",
    "Config",
    "ErrorKind",
    "EvalResult",
    "OperationResult",
    "evaluate",
    "format_result",
    "load_config",
]
