"""
Tokenizer Module

Splits normalized expression text into tokens. Anything that is not a
number, a name, an operator or a parenthesis is a syntax error; nothing
is silently skipped except whitespace.
"""

import re
from dataclasses import dataclass
from typing import List

from .errors import ExpressionSyntaxError

NUMBER = "number"
NAME = "name"
OPERATOR = "operator"
LPAREN = "lparen"
RPAREN = "rparen"
END = "end"

TOKEN_RE = re.compile(
    r"\s*(?:"
    r"(?P<number>(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
    r"|(?P<name>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<op>\*\*|[-+*/])"
    r"|(?P<paren>[()])"
    r")"
)


@dataclass(frozen=True)
class Token:
    """A single lexical token and where it starts in the text."""
    type: str
    value: str
    position: int

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r})"


def tokenize(text: str) -> List[Token]:
    """
    Tokenize an expression.

    Args:
        text: Normalized expression text

    Returns:
        List of tokens, always terminated by an END token

    Raises:
        ExpressionSyntaxError: On any character that starts no token
    """
    tokens: List[Token] = []
    pos = 0
    length = len(text)

    while pos < length:
        match = TOKEN_RE.match(text, pos)
        if match is None or match.end() == pos or match.lastgroup is None:
            # Only trailing whitespace left
            if text[pos:].strip() == "":
                break
            bad = pos + (len(text[pos:]) - len(text[pos:].lstrip()))
            raise ExpressionSyntaxError(
                f"Unexpected character {text[bad]!r} at position {bad}",
                position=bad,
            )

        kind = match.lastgroup
        value = match.group(kind)
        start = match.start(kind)

        if kind == "number":
            tokens.append(Token(NUMBER, value, start))
        elif kind == "name":
            tokens.append(Token(NAME, value, start))
        elif kind == "op":
            tokens.append(Token(OPERATOR, value, start))
        else:
            tokens.append(Token(LPAREN if value == "(" else RPAREN, value, start))

        pos = match.end()

    tokens.append(Token(END, "", length))
    return tokens
