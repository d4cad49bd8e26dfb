"""
Notation Module

Rewrites calculator display text into the plain grammar the tokenizer
understands. Both steps are pure string transformations:

1. normalize(): display glyphs and button names -> operators/function names
2. degrees_to_radians(): wraps trig arguments in a degree conversion
"""

import re
from typing import Tuple

# Applied in order. "log(" is base 10 on the keypad, "ln(" is natural log.
SUBSTITUTIONS: Tuple[Tuple[str, str], ...] = (
    ("×", "*"),
    ("÷", "/"),
    ("√(", "sqrt("),
    ("^", "**"),
    ("²", "**2"),
    ("π", "pi"),
    ("log(", "log10("),
)

TRIG_FUNCTIONS: Tuple[str, ...] = ("sin", "cos", "tan")

# The argument ends at the first ")" after the name; nesting is not balanced.
_TRIG_PATTERNS = {
    name: re.compile(re.escape(name) + r"\(([^)]+)\)")
    for name in TRIG_FUNCTIONS
}


def normalize(text: str) -> str:
    """Replace display glyphs with their grammar equivalents."""
    for glyph, replacement in SUBSTITUTIONS:
        text = text.replace(glyph, replacement)
    return text


def degrees_to_radians(text: str) -> str:
    """
    Interpret trig arguments as degrees.

    Every ``sin(ARG)``, ``cos(ARG)`` and ``tan(ARG)`` becomes
    ``sin((ARG)*pi/180)``, where ARG runs up to the first closing
    parenthesis. Each function is rewritten in its own pass, sin first.

    Example:
        >>> degrees_to_radians("sin(30)+1")
        'sin((30)*pi/180)+1'
    """
    for name, pattern in _TRIG_PATTERNS.items():
        text = pattern.sub(lambda m, name=name: f"{name}(({m.group(1)})*pi/180)", text)
    return text


def prepare(text: str) -> str:
    """Run the full rewrite: normalize, then degree conversion."""
    return degrees_to_radians(normalize(text))
