"""
Widths — нативные ширины IEEE-754 float (f32 / f64)

Описание двух поддерживаемых ширин на базе numpy скаляров:
- Приведение произвольного real значения к ширине (с детекцией переполнения)
- Битовое представление значения
- Кратчайшее round-trip текстовое представление

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Поддерживаются только numpy.float32 и numpy.float64
2. Конечное значение, переполняющее ширину → FloatConversionError
3. Приведение не проверяет валидность (NaN проходит как есть)
"""

import math
from dataclasses import dataclass
from typing import Any, Final, Union

import numpy as np

from .errors import FloatConversionError

# Типы, которые принимаются как "сырые" вещественные значения
REAL_TYPES: Final[tuple[type, ...]] = (int, float, np.integer, np.floating)

RealLike = Union[int, float, np.integer, np.floating]


# =============================================================================
# FLOAT WIDTH
# =============================================================================


@dataclass(frozen=True)
class FloatWidth:
    """
    Описание одной ширины float.

    Attributes:
        name: Короткое имя ("f32" / "f64")
        float_type: Скалярный numpy тип значения
        bits_type: Беззнаковый numpy тип того же размера (для битового view)
    """

    name: str
    float_type: type
    bits_type: type

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(self.float_type)

    @property
    def itemsize(self) -> int:
        return self.dtype.itemsize

    @property
    def finfo(self) -> np.finfo:
        return np.finfo(self.float_type)

    def cast(self, value: Any) -> np.floating:
        """
        Приведение значения к ширине.

        Args:
            value: int, float или numpy real скаляр

        Returns:
            Скаляр self.float_type

        Raises:
            TypeError: Если value не является вещественным числом
            FloatConversionError: Если значение не представимо в ширине
        """
        if type(value) is self.float_type:
            return value

        if not isinstance(value, REAL_TYPES):
            raise TypeError(
                f"{self.name} value must be a real number, got {type(value).__name__}"
            )

        try:
            with np.errstate(all="ignore"):
                result = self.float_type(value)
        except OverflowError as e:
            raise FloatConversionError(
                f"{value!r} cannot be represented as {self.name}"
            ) from e

        # Конечное значение не должно превращаться в бесконечность
        if np.isinf(result) and not _is_infinite(value):
            raise FloatConversionError(f"{value!r} overflows {self.name}")

        return result

    def to_bits(self, value: np.floating) -> int:
        """Битовое представление значения как беззнаковое целое."""
        return int(np.array(value, dtype=self.float_type).view(self.bits_type))

    def from_bits(self, bits: int) -> np.floating:
        """Значение по битовому представлению."""
        return np.array(bits, dtype=self.bits_type).view(self.float_type)[()]

    def to_builtin(self, value: np.floating) -> float:
        """
        Конверсия в builtin float.

        Для f32 используется кратчайшее десятичное представление, которое
        однозначно восстанавливает то же f32 значение (3.14, а не
        3.140000104904175).
        """
        if self.float_type is np.float64:
            return float(value)
        return float(np.format_float_positional(value, unique=True, trim="-"))


def _is_infinite(value: Any) -> bool:
    if isinstance(value, (int, np.integer)):
        return False
    return math.isinf(value)


# =============================================================================
# STANDARD WIDTHS
# =============================================================================

F32: Final[FloatWidth] = FloatWidth("f32", np.float32, np.uint32)
F64: Final[FloatWidth] = FloatWidth("f64", np.float64, np.uint64)

_WIDTHS: Final[dict[type, FloatWidth]] = {
    np.float32: F32,
    np.float64: F64,
}


def width_of(float_type: Any) -> FloatWidth:
    """
    Поиск ширины по numpy типу (или dtype).

    Raises:
        TypeError: Если ширина не поддерживается
    """
    try:
        key = np.dtype(float_type).type
    except TypeError as e:
        raise TypeError(f"float_type must be a numpy float type, got {float_type!r}") from e

    width = _WIDTHS.get(key)
    if width is None:
        raise TypeError(
            f"float_type must be numpy.float32 or numpy.float64, got {np.dtype(key).name}"
        )
    return width
