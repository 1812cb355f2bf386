"""Function and constant registries.

Both tables are read-only views built once at import time. Math domain
errors are mapped onto IEEE results (NaN, +/-inf) instead of raising, so
``sqrt(-1)`` evaluates to NaN the same way ``0 / 0`` does.
"""

from __future__ import annotations

import functools
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

NativeFunction = Callable[..., float]


@dataclass(frozen=True)
class FunctionParameter:
    name: str
    optional: bool = False
    default: Optional[float] = None


@dataclass(frozen=True)
class FunctionSpec:
    """A registry entry: ordered parameters plus the native computation."""

    name: str
    params: tuple[FunctionParameter, ...]
    impl: NativeFunction

    @property
    def required_count(self) -> int:
        return sum(1 for p in self.params if not p.optional)

    def __call__(self, *args: float) -> float:
        return self.impl(*args)

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "params": [
                {"name": p.name, "optional": p.optional, "default": p.default}
                for p in self.params
            ],
        }


def _ieee(func: NativeFunction) -> NativeFunction:
    """Map math domain and range errors onto NaN and infinity."""

    @functools.wraps(func)
    def wrapper(*args: float) -> float:
        try:
            return float(func(*args))
        except OverflowError:
            return math.inf
        except ValueError:
            return math.nan

    return wrapper


def _ln(x: float) -> float:
    if x == 0:
        return -math.inf
    return math.log(x)


def _log2(x: float) -> float:
    if x == 0:
        return -math.inf
    return math.log2(x)


def _log10(x: float) -> float:
    if x == 0:
        return -math.inf
    return math.log10(x)


def _log(x: float, base: float = 10.0) -> float:
    numerator = _ieee(_ln)(x)
    denominator = _ieee(_ln)(base)
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def _unary(name: str, func: NativeFunction) -> FunctionSpec:
    return FunctionSpec(name=name, params=(FunctionParameter("x"),), impl=_ieee(func))


def _build_functions() -> dict[str, FunctionSpec]:
    specs = [
        _unary("sin", math.sin),
        _unary("cos", math.cos),
        _unary("tan", math.tan),
        _unary("atan", math.atan),
        _unary("asin", math.asin),
        _unary("acos", math.acos),
        _unary("abs", math.fabs),
        _unary("sqrt", math.sqrt),
        _unary("ln", _ln),
        _unary("log2", _log2),
        _unary("log10", _log10),
        _unary("exp", math.exp),
        FunctionSpec(
            name="log",
            params=(
                FunctionParameter("x"),
                FunctionParameter("base", optional=True, default=10.0),
            ),
            impl=_ieee(_log),
        ),
    ]
    return {spec.name: spec for spec in specs}


def _check_params(specs: Mapping[str, FunctionSpec]) -> None:
    for spec in specs.values():
        optional = [i for i, p in enumerate(spec.params) if p.optional]
        if len(optional) > 1 or (optional and optional[0] != len(spec.params) - 1):
            raise RuntimeError(f"function `{spec.name}` may only have one trailing optional parameter")


FUNCTIONS: Mapping[str, FunctionSpec] = MappingProxyType(_build_functions())

CONSTANTS: Mapping[str, float] = MappingProxyType({
    "PI": math.pi,
    "E": math.e,
})

_overlap = set(FUNCTIONS) & set(CONSTANTS)
if _overlap:
    raise RuntimeError(f"names registered as both function and constant: {sorted(_overlap)}")
_check_params(FUNCTIONS)

SUPPORTED_FUNCTIONS: tuple[str, ...] = tuple(FUNCTIONS)
SUPPORTED_CONSTANTS: tuple[str, ...] = tuple(CONSTANTS)


def is_function(name: str) -> bool:
    return name in FUNCTIONS


def is_constant(name: str) -> bool:
    return name in CONSTANTS


def describe_functions() -> list[dict[str, Any]]:
    """List registered functions with their parameters."""
    return [spec.describe() for spec in FUNCTIONS.values()]
