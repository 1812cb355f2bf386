"""Tests for the tree evaluator."""

import math

import pytest

from calc_mcp.services.errors import EvalError
from calc_mcp.services.evaluator import divide, evaluate, power, remainder
from calc_mcp.services.nodes import (
    BinaryExpression,
    CallExpression,
    ConstantReference,
    NumericLiteral,
    UnaryExpression,
)


def num(value):
    return NumericLiteral(value=float(value))


def binary(operator, left, right):
    return BinaryExpression(operator, num(left), num(right))


class TestLeaves:
    """Tests for literal and constant nodes."""

    def test_numeric_literal(self):
        assert evaluate(num(2.5)) == 2.5

    def test_constant_uses_registry(self):
        assert evaluate(ConstantReference("PI", 3.0)) == math.pi

    def test_constant_falls_back_to_captured_value(self):
        assert evaluate(ConstantReference("TAU", 6.28)) == 6.28


class TestBinary:
    """Tests for binary operators."""

    @pytest.mark.parametrize(
        "operator, left, right, expected",
        [
            ("+", 2, 3, 5),
            ("-", 2, 3, -1),
            ("*", 4, 2.5, 10),
            ("/", 7, 2, 3.5),
            ("%", 10, 4, 2),
            ("^", 2, 10, 1024),
            ("**", 4, 0.5, 2),
        ],
    )
    def test_operators(self, operator, left, right, expected):
        assert evaluate(binary(operator, left, right)) == expected

    def test_nested(self):
        tree = BinaryExpression("*", binary("+", 1, 2), binary("-", 5, 1))
        assert evaluate(tree) == 12

    def test_unknown_operator(self):
        with pytest.raises(EvalError, match="Unknown operator: &"):
            evaluate(binary("&", 1, 2))


class TestIeeeArithmetic:
    """Tests for float semantics instead of exceptions."""

    def test_division_by_zero(self):
        assert divide(1, 0) == math.inf
        assert divide(-1, 0) == -math.inf
        assert divide(1, -0.0) == -math.inf

    def test_zero_over_zero(self):
        assert math.isnan(divide(0, 0))

    def test_remainder_sign_follows_dividend(self):
        assert remainder(-7, 3) == -1
        assert remainder(5.5, 2) == 1.5

    def test_remainder_by_zero(self):
        assert math.isnan(remainder(5, 0))

    def test_remainder_of_infinity(self):
        assert math.isnan(remainder(math.inf, 2))

    def test_negative_exponent(self):
        assert power(2, -1) == 0.5

    def test_negative_base_fractional_exponent(self):
        assert math.isnan(power(-8, 1 / 3))

    def test_zero_to_negative_power(self):
        assert power(0, -1) == math.inf
        assert power(-0.0, -1) == -math.inf
        assert power(0, -2) == math.inf

    def test_overflow(self):
        assert power(10, 400) == math.inf
        assert power(-10, 401) == -math.inf
        assert power(-10, 400) == math.inf


class TestUnary:
    """Tests for unary expressions."""

    def test_negation(self):
        assert evaluate(UnaryExpression("-", num(4))) == -4

    def test_long_negation_chain(self):
        node = num(4)
        for _ in range(5001):
            node = UnaryExpression("-", node)
        assert evaluate(node) == -4

    def test_unknown_unary_operator(self):
        with pytest.raises(EvalError, match="Unknown unary operator: \\+"):
            evaluate(UnaryExpression("+", num(4)))


class TestCalls:
    """Tests for function calls."""

    def test_single_argument(self):
        assert evaluate(CallExpression("sqrt", (num(16),))) == 4

    def test_optional_argument_defaults(self):
        assert evaluate(CallExpression("log", (num(100),))) == pytest.approx(2)

    def test_optional_argument_supplied(self):
        assert evaluate(CallExpression("log", (num(8), num(2)))) == pytest.approx(3)

    def test_arguments_are_expressions(self):
        tree = CallExpression("abs", (binary("-", 3, 10),))
        assert evaluate(tree) == 7

    def test_unknown_function(self):
        with pytest.raises(EvalError, match="Unknown function: foo"):
            evaluate(CallExpression("foo", (num(1),)))

    def test_missing_required_argument(self):
        with pytest.raises(EvalError, match="expects at least 1 argument"):
            evaluate(CallExpression("sin", ()))

    def test_too_many_arguments_left_to_native_call(self):
        with pytest.raises(TypeError):
            evaluate(CallExpression("sin", (num(1), num(2))))


class TestUnknownNode:
    """Tests for values that are not expression nodes."""

    def test_unknown_node(self):
        with pytest.raises(EvalError, match="Unknown expression node `str`"):
            evaluate("1 + 1")
