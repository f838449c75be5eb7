"""
Types — стандартные специализации NoisyFloat

| Тип  | Ширина | Допустимые значения     | Enforcement |
|------|--------|-------------------------|-------------|
| N32  | f32    | всё, кроме NaN          | debug-only  |
| N64  | f64    | всё, кроме NaN          | debug-only  |
| R32  | f32    | конечные (не NaN, ±inf) | debug-only  |
| R64  | f64    | конечные (не NaN, ±inf) | debug-only  |
| SN32 | f32    | всё, кроме NaN          | always      |
| SN64 | f64    | всё, кроме NaN          | always      |
| SR32 | f32    | конечные                | always      |
| SR64 | f64    | конечные                | always      |

Конструкторы n32/n64/r32/r64: краткая форма N32(value) и т.д.
"""

from typing import Any

import numpy as np

from .checkers import FiniteChecker, NumChecker, StrictFiniteChecker, StrictNumChecker
from .core import NoisyFloat


class N32(NoisyFloat, float_type=np.float32, checker=NumChecker):
    """float32, не допускающий NaN."""

    __slots__ = ()


class N64(NoisyFloat, float_type=np.float64, checker=NumChecker):
    """float64, не допускающий NaN."""

    __slots__ = ()


class R32(NoisyFloat, float_type=np.float32, checker=FiniteChecker):
    """float32, допускающий только конечные значения."""

    __slots__ = ()


class R64(NoisyFloat, float_type=np.float64, checker=FiniteChecker):
    """float64, допускающий только конечные значения."""

    __slots__ = ()


class SN32(NoisyFloat, float_type=np.float32, checker=StrictNumChecker):
    __slots__ = ()


class SN64(NoisyFloat, float_type=np.float64, checker=StrictNumChecker):
    __slots__ = ()


class SR32(NoisyFloat, float_type=np.float32, checker=StrictFiniteChecker):
    __slots__ = ()


class SR64(NoisyFloat, float_type=np.float64, checker=StrictFiniteChecker):
    __slots__ = ()


def n32(value: Any) -> N32:
    """Краткая форма N32(value)."""
    return N32(value)


def n64(value: Any) -> N64:
    """Краткая форма N64(value)."""
    return N64(value)


def r32(value: Any) -> R32:
    """Краткая форма R32(value)."""
    return R32(value)


def r64(value: Any) -> R64:
    """Краткая форма R64(value)."""
    return R64(value)
