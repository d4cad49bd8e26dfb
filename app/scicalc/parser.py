"""
Parser Module

Recursive-descent parser for calculator expressions, plus the tree
evaluator.

Grammar (lowest to highest precedence):

    expression := term (("+" | "-") term)*
    term       := unary (("*" | "/") unary)*
    unary      := ("-" | "+") unary | power
    power      := primary ("**" unary)?          right-associative
    primary    := NUMBER
                | NAME "(" expression ")"        function call
                | NAME                           constant
                | "(" expression ")"

Evaluation follows IEEE-754 double semantics: division by zero and
domain errors produce infinities or NaN instead of raising, and the
caller decides what a non-finite result means.
"""

import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Union

from .errors import ExpressionSyntaxError
from .tokenizer import END, LPAREN, NAME, NUMBER, OPERATOR, RPAREN, Token, tokenize


# === Expression tree ===

@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class Constant:
    name: str


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: "Node"


@dataclass(frozen=True)
class BinaryOp:
    left: "Node"
    op: str
    right: "Node"


@dataclass(frozen=True)
class Call:
    name: str
    argument: "Node"


Node = Union[Number, Constant, UnaryOp, BinaryOp, Call]


# === Numeric primitives ===

def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and int(x) % 2 == 1


def divide(a: float, b: float) -> float:
    """IEEE division: x/0 is a signed infinity, 0/0 is NaN."""
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def power(base: float, exponent: float) -> float:
    """
    IEEE-754 pow: overflow gives a signed infinity, 0 to a negative power
    is infinite, and a negative base with a fractional exponent or
    1 to an infinite power is NaN.
    """
    if math.isinf(exponent) and abs(base) == 1:
        return math.nan
    try:
        return math.pow(base, exponent)
    except ValueError:
        # Zero to a negative power, or a negative base with a fractional exponent
        if base == 0:
            negative = math.copysign(1.0, base) < 0 and _is_odd_integer(exponent)
            return -math.inf if negative else math.inf
        return math.nan
    except OverflowError:
        return -math.inf if base < 0 and _is_odd_integer(exponent) else math.inf


def _logarithm(fn: Callable[[float], float]) -> Callable[[float], float]:
    def log(x: float) -> float:
        if x == 0:
            return -math.inf
        if x < 0 or math.isnan(x):
            return math.nan
        return fn(x)
    return log


def _domain_safe(fn: Callable[[float], float]) -> Callable[[float], float]:
    def wrapped(x: float) -> float:
        try:
            return fn(x)
        except ValueError:
            return math.nan
        except OverflowError:
            return math.inf
    return wrapped


FUNCTIONS: Dict[str, Callable[[float], float]] = {
    "sin": _domain_safe(math.sin),
    "cos": _domain_safe(math.cos),
    "tan": _domain_safe(math.tan),
    "sqrt": _domain_safe(math.sqrt),
    "abs": abs,
    "log10": _logarithm(math.log10),
    "ln": _logarithm(math.log),
}

CONSTANTS: Dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
}

MAX_NESTING = 100

BINARY_OPERATORS: Dict[str, Callable[[float, float], float]] = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": divide,
    "**": power,
}


# === Parser ===

class Parser:
    """
    Recursive descent parser over a token list.

    Usage:
        tree = Parser(tokenize("2+3*4")).parse()
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        if token.type != END:
            self.pos += 1
        return token

    def expect(self, token_type: str, description: str) -> Token:
        token = self.peek()
        if token.type != token_type:
            raise self._error(f"Expected {description}", token)
        return self.advance()

    def _error(self, message: str, token: Token) -> ExpressionSyntaxError:
        found = "end of expression" if token.type == END else repr(token.value)
        return ExpressionSyntaxError(
            f"{message}, found {found} at position {token.position}",
            position=token.position,
        )

    def _at_operator(self, *ops: str) -> bool:
        token = self.peek()
        return token.type == OPERATOR and token.value in ops

    def parse(self) -> Node:
        """Parse the whole token list; trailing tokens are an error."""
        node = self.expression()
        token = self.peek()
        if token.type != END:
            raise self._error("Unexpected token", token)
        return node

    def expression(self) -> Node:
        node = self.term()
        while self._at_operator("+", "-"):
            op = self.advance().value
            node = BinaryOp(node, op, self.term())
        return node

    def term(self) -> Node:
        node = self.unary()
        while self._at_operator("*", "/"):
            op = self.advance().value
            node = BinaryOp(node, op, self.unary())
        return node

    def unary(self) -> Node:
        # Every nested construct (sign, exponent, parenthesis, call) passes through here
        self.depth += 1
        try:
            if self.depth > MAX_NESTING:
                token = self.peek()
                raise ExpressionSyntaxError(
                    f"Expression nested too deeply at position {token.position}",
                    position=token.position,
                )
            if self._at_operator("-", "+"):
                op = self.advance().value
                return UnaryOp(op, self.unary())
            return self.power()
        finally:
            self.depth -= 1

    def power(self) -> Node:
        node = self.primary()
        if self._at_operator("**"):
            self.advance()
            node = BinaryOp(node, "**", self.unary())
        return node

    def primary(self) -> Node:
        token = self.peek()

        if token.type == NUMBER:
            self.advance()
            return Number(float(token.value))

        if token.type == NAME:
            self.advance()
            if token.value in FUNCTIONS:
                self.expect(LPAREN, f"'(' after {token.value}")
                argument = self.expression()
                self.expect(RPAREN, "')'")
                return Call(token.value, argument)
            if token.value in CONSTANTS:
                return Constant(token.value)
            raise ExpressionSyntaxError(
                f"Unknown name {token.value!r} at position {token.position}",
                position=token.position,
            )

        if token.type == LPAREN:
            self.advance()
            node = self.expression()
            self.expect(RPAREN, "')'")
            return node

        raise self._error("Expected a number, function or '('", token)


def parse(text: str) -> Node:
    """Tokenize and parse normalized expression text."""
    return Parser(tokenize(text)).parse()


def evaluate_tree(node: Node) -> float:
    """Compute the value of an expression tree. Never raises for numeric reasons."""
    if isinstance(node, Number):
        return node.value
    if isinstance(node, Constant):
        return CONSTANTS[node.name]
    if isinstance(node, UnaryOp):
        value = evaluate_tree(node.operand)
        return -value if node.op == "-" else value
    if isinstance(node, BinaryOp):
        left = evaluate_tree(node.left)
        right = evaluate_tree(node.right)
        return BINARY_OPERATORS[node.op](left, right)
    if isinstance(node, Call):
        return FUNCTIONS[node.name](evaluate_tree(node.argument))
    raise TypeError(f"Unknown node type: {type(node).__name__}")
