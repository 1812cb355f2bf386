"""Tests for the function and constant registries."""

import math

import pytest

from calc_mcp.services.registry import (
    CONSTANTS,
    FUNCTIONS,
    SUPPORTED_CONSTANTS,
    SUPPORTED_FUNCTIONS,
    describe_functions,
    is_constant,
    is_function,
)

_SINGLE_ARGUMENT = ["sin", "cos", "tan", "atan", "asin", "acos", "abs", "sqrt", "ln", "log2", "log10", "exp"]


class TestContents:
    """Tests for registered names."""

    def test_required_functions(self):
        assert set(SUPPORTED_FUNCTIONS) == set(_SINGLE_ARGUMENT) | {"log"}

    def test_required_constants(self):
        assert set(SUPPORTED_CONSTANTS) == {"PI", "E"}
        assert CONSTANTS["PI"] == math.pi
        assert CONSTANTS["E"] == math.e

    def test_names_are_disjoint(self):
        assert not set(FUNCTIONS) & set(CONSTANTS)

    def test_lookup_helpers(self):
        assert is_function("sin")
        assert not is_function("PI")
        assert is_constant("E")
        assert not is_constant("e")

    @pytest.mark.parametrize("name", _SINGLE_ARGUMENT)
    def test_single_argument_arity(self, name):
        spec = FUNCTIONS[name]
        assert len(spec.params) == 1
        assert spec.required_count == 1

    def test_log_has_optional_base(self):
        spec = FUNCTIONS["log"]
        assert [p.name for p in spec.params] == ["x", "base"]
        assert spec.params[1].optional
        assert spec.params[1].default == 10.0
        assert spec.required_count == 1


class TestImmutability:
    """Tests for read-only registries."""

    def test_functions_cannot_be_mutated(self):
        with pytest.raises(TypeError):
            FUNCTIONS["evil"] = FUNCTIONS["sin"]

    def test_constants_cannot_be_mutated(self):
        with pytest.raises(TypeError):
            CONSTANTS["PI"] = 3.0


class TestNativeFunctions:
    """Tests for function implementations and IEEE results."""

    def test_values(self):
        assert FUNCTIONS["sqrt"](144) == 12
        assert FUNCTIONS["abs"](-42) == 42
        assert FUNCTIONS["log2"](8) == 3
        assert FUNCTIONS["log10"](1000) == 3
        assert FUNCTIONS["ln"](1) == 0
        assert FUNCTIONS["exp"](0) == 1

    def test_log_with_and_without_base(self):
        assert FUNCTIONS["log"](100) == pytest.approx(2)
        assert FUNCTIONS["log"](8, 2) == pytest.approx(3)

    def test_domain_errors_are_nan(self):
        assert math.isnan(FUNCTIONS["sqrt"](-1))
        assert math.isnan(FUNCTIONS["asin"](2))
        assert math.isnan(FUNCTIONS["ln"](-1))
        assert math.isnan(FUNCTIONS["log"](-10))

    def test_log_of_zero_is_negative_infinity(self):
        assert FUNCTIONS["ln"](0) == -math.inf
        assert FUNCTIONS["log10"](0) == -math.inf
        assert FUNCTIONS["log"](0) == -math.inf

    def test_overflow_is_infinity(self):
        assert FUNCTIONS["exp"](1000) == math.inf

    def test_log_base_one(self):
        assert FUNCTIONS["log"](10, 1) == math.inf
        assert math.isnan(FUNCTIONS["log"](1, 1))


class TestDescribe:
    """Tests for the function listing."""

    def test_describe_functions(self):
        described = {entry["name"]: entry for entry in describe_functions()}
        assert set(described) == set(SUPPORTED_FUNCTIONS)
        assert described["log"]["params"][1] == {"name": "base", "optional": True, "default": 10.0}
