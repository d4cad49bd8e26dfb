"""
Tests for expression evaluation: notation rewriting, tokenizer, parser
and the evaluate() pipeline.

Run with: pytest app/tests/test_evaluator.py -v
"""

import math

import pytest

import sys
from pathlib import Path

# Add app/ to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from scicalc.errors import ErrorKind, ExpressionSyntaxError
from scicalc.evaluator import EvalResult, compute, evaluate
from scicalc.notation import degrees_to_radians, normalize, prepare
from scicalc.parser import (
    MAX_NESTING,
    BinaryOp,
    Call,
    Constant,
    Number,
    UnaryOp,
    divide,
    parse,
    power,
)
from scicalc.tokenizer import END, NAME, NUMBER, OPERATOR, tokenize


class TestNotation:
    """Tests for display-text rewriting."""

    def test_glyphs_become_operators(self):
        assert normalize("2×3÷4") == "2*3/4"
        assert normalize("2^3") == "2**3"
        assert normalize("5²") == "5**2"

    def test_square_root_glyph(self):
        assert normalize("√(9)") == "sqrt(9)"

    def test_log_is_base_ten(self):
        assert normalize("log(100)+ln(1)") == "log10(100)+ln(1)"

    def test_pi_glyph(self):
        assert normalize("2π") == "2pi"

    def test_trig_argument_converted(self):
        assert degrees_to_radians("sin(30)") == "sin((30)*pi/180)"
        assert degrees_to_radians("cos(60)+tan(45)") == "cos((60)*pi/180)+tan((45)*pi/180)"

    def test_trig_argument_ends_at_first_close_paren(self):
        """Nested parentheses are not balanced when capturing the argument."""
        assert degrees_to_radians("sin((10)+20)") == "sin(((10)*pi/180)+20)"

    def test_empty_trig_call_left_alone(self):
        assert degrees_to_radians("sin()") == "sin()"

    def test_prepare_runs_both_steps(self):
        assert prepare("sin(30)^2") == "sin((30)*pi/180)**2"


class TestTokenizer:
    """Tests for the tokenizer."""

    def test_simple_expression(self):
        tokens = tokenize("sqrt(2.5)*3")
        assert [t.value for t in tokens] == ["sqrt", "(", "2.5", ")", "*", "3", ""]
        assert tokens[0].type == NAME
        assert tokens[-1].type == END

    def test_power_operator_is_one_token(self):
        tokens = tokenize("2**3")
        assert [t.type for t in tokens] == [NUMBER, OPERATOR, NUMBER, END]
        assert tokens[1].value == "**"

    def test_scientific_notation(self):
        tokens = tokenize("1.5e-3 + .5 + 2.")
        numbers = [t.value for t in tokens if t.type == NUMBER]
        assert numbers == ["1.5e-3", ".5", "2."]

    def test_whitespace_ignored(self):
        assert len(tokenize("  1 +  2  ")) == 4

    def test_unknown_character(self):
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            tokenize("2 @ 3")
        assert exc_info.value.position == 2
        assert "'@'" in str(exc_info.value)

    def test_non_ascii_digits_rejected(self):
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            tokenize("\u0663+1")
        assert exc_info.value.position == 0


class TestParser:
    """Tests for the recursive descent parser."""

    def test_multiplication_binds_tighter(self):
        assert parse("2+3*4") == BinaryOp(
            Number(2.0), "+", BinaryOp(Number(3.0), "*", Number(4.0))
        )

    def test_unary_minus_below_power(self):
        assert parse("-2**2") == UnaryOp("-", BinaryOp(Number(2.0), "**", Number(2.0)))

    def test_power_is_right_associative(self):
        assert parse("2**3**2") == BinaryOp(
            Number(2.0), "**", BinaryOp(Number(3.0), "**", Number(2.0))
        )

    def test_function_and_constant(self):
        assert parse("sqrt(pi)") == Call("sqrt", Constant("pi"))

    @pytest.mark.parametrize("text", [
        "2+",
        "(2+3",
        "2+3)",
        "2 3",
        "sqrt 4",
        "foo(2)",
        "pi(2)",
        "()",
        "*2",
    ])
    def test_syntax_errors(self, text):
        with pytest.raises(ExpressionSyntaxError):
            parse(text)

    def test_nesting_limit(self):
        depth = MAX_NESTING - 1
        assert parse("(" * depth + "1" + ")" * depth) == Number(1.0)
        with pytest.raises(ExpressionSyntaxError, match="nested too deeply"):
            parse("(" * MAX_NESTING + "1" + ")" * MAX_NESTING)


class TestNumericPrimitives:
    """IEEE-754 behavior of division and exponentiation."""

    def test_divide_by_zero(self):
        assert divide(1.0, 0.0) == math.inf
        assert divide(-1.0, 0.0) == -math.inf
        assert divide(1.0, -0.0) == -math.inf
        assert math.isnan(divide(0.0, 0.0))

    def test_power_special_cases(self):
        assert power(0.0, -1.0) == math.inf
        assert math.isnan(power(-8.0, 1 / 3))
        assert math.isnan(power(1.0, math.inf))
        assert power(10.0, 400.0) == math.inf
        assert power(-10.0, 401.0) == -math.inf


class TestEvaluate:
    """Tests for the evaluate() pipeline."""

    @pytest.mark.parametrize("text", ["", "   ", "\t\n"])
    def test_empty_expression(self, text):
        result = evaluate(text)
        assert not result.success
        assert result.error == ErrorKind.EMPTY_EXPRESSION

    def test_precedence(self):
        assert evaluate("2+3*4").value == 14
        assert evaluate("(2+3)*4").value == 20
        assert evaluate("10-4-3").value == 3
        assert evaluate("100/10/2").value == 5

    def test_exponentiation(self):
        assert evaluate("2^10").value == 1024
        assert evaluate("2^0.5").value == pytest.approx(1.4142135624)
        assert evaluate("2^-1").value == 0.5
        assert evaluate("2^3^2").value == 512
        assert evaluate("-2^2").value == -4

    def test_square_glyph(self):
        assert evaluate("3²").value == 9
        assert evaluate("(1+2)²").value == 9
        assert evaluate("2×3²").value == 18

    def test_trig_in_degrees(self):
        assert evaluate("sin(30)").value == pytest.approx(0.5)
        assert evaluate("cos(60)").value == pytest.approx(0.5)
        assert evaluate("tan(45)").value == pytest.approx(1.0)
        assert evaluate("sin(90)").value == pytest.approx(1.0)

    def test_functions(self):
        assert evaluate("√(16)").value == 4
        assert evaluate("sqrt(2)^2").value == pytest.approx(2.0)
        assert evaluate("abs(-5)").value == 5
        assert evaluate("log(1000)").value == pytest.approx(3.0)
        assert evaluate("ln(e)").value == pytest.approx(1.0)

    def test_constants(self):
        assert evaluate("π").value == pytest.approx(math.pi)
        assert evaluate("2*pi").value == pytest.approx(2 * math.pi)
        assert evaluate("e").value == pytest.approx(math.e)

    def test_unary_signs(self):
        assert evaluate("-3+5").value == 2
        assert evaluate("2*-3").value == -6
        assert evaluate("+4").value == 4

    @pytest.mark.parametrize("text", ["1/0", "0/0", "√(-1)", "log(0)", "ln(-1)", "1e400", "(-8)^(1/3)"])
    def test_invalid_calculation(self, text):
        result = evaluate(text)
        assert result.error == ErrorKind.INVALID_CALCULATION
        assert result.value is None

    def test_intermediate_infinity_can_recover(self):
        """Only the final value has to be finite."""
        assert evaluate("1/(1/0)").value == 0

    @pytest.mark.parametrize("text", ["2+", "(2+3", "2+3)", "2 $ 3", "sin()", "1.2.3", "2e", "hello"])
    def test_syntax_error(self, text):
        result = evaluate(text)
        assert result.error == ErrorKind.SYNTAX_ERROR
        assert result.message

    @pytest.mark.parametrize("text", [
        "(" * 2000 + "1" + ")" * 2000,
        "-" * 2000 + "1",
        "sqrt(" * 2000 + "4" + ")" * 2000,
        "1" + "+1" * 5000,
    ])
    def test_deep_or_long_input_is_syntax_error(self, text):
        result = evaluate(text)
        assert result.error == ErrorKind.SYNTAX_ERROR
        assert result.value is None

    def test_non_ascii_digits(self):
        assert evaluate("\u0663+1").error == ErrorKind.SYNTAX_ERROR

    def test_result_helpers(self):
        ok = evaluate("1+1")
        assert ok.success
        assert str(ok) == "2.0"

        failed = evaluate("")
        assert str(failed).startswith("Error:")
        assert isinstance(failed, EvalResult)

    def test_compute_raises(self):
        with pytest.raises(ExpressionSyntaxError):
            compute("2+")
