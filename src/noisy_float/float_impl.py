"""
Float methods — математические функции и константы NoisyFloat

Все функции делегируют numpy ufunc в ширине обёртки, затем результат
проходит проверку checker'ом (sqrt(-1) → NaN → InvalidFloatError;
ln(0) → -inf → отвергается FiniteChecker, допускается NumChecker).

Миксин не используется самостоятельно: он опирается на _value, width,
_unary/_binary/_checked/_coerce из NoisyFloat.
"""

from enum import Enum
from typing import Any, TypeVar

import numpy as np

from .errors import InvalidFloatError

NF = TypeVar("NF", bound="FloatMethodsMixin")


class FpCategory(str, Enum):
    """Категория float значения."""

    NAN = "NAN"
    INFINITE = "INFINITE"
    ZERO = "ZERO"
    SUBNORMAL = "SUBNORMAL"
    NORMAL = "NORMAL"


class FloatMethodsMixin:
    __slots__ = ()

    # =========================================================================
    # CONSTANTS
    # =========================================================================

    @classmethod
    def nan(cls) -> Any:
        """NaN недопустим ни для одного checker'а: всегда исключение."""
        raise InvalidFloatError(cls.float_type(np.nan), cls.checker)

    @classmethod
    def infinity(cls: type[NF]) -> NF:
        return cls(np.inf)

    @classmethod
    def neg_infinity(cls: type[NF]) -> NF:
        return cls(-np.inf)

    @classmethod
    def zero(cls: type[NF]) -> NF:
        return cls(0.0)

    @classmethod
    def neg_zero(cls: type[NF]) -> NF:
        return cls(-0.0)

    @classmethod
    def one(cls: type[NF]) -> NF:
        return cls(1.0)

    @classmethod
    def epsilon(cls: type[NF]) -> NF:
        """Машинный epsilon ширины."""
        return cls(cls.width.finfo.eps)

    @classmethod
    def min_value(cls: type[NF]) -> NF:
        """Наименьшее конечное значение."""
        return cls(cls.width.finfo.min)

    @classmethod
    def max_value(cls: type[NF]) -> NF:
        """Наибольшее конечное значение."""
        return cls(cls.width.finfo.max)

    @classmethod
    def min_positive_value(cls: type[NF]) -> NF:
        """Наименьшее положительное нормализованное значение."""
        return cls(cls.width.finfo.smallest_normal)

    @classmethod
    def max_exp(cls) -> int:
        """Максимальная двоичная экспонента + 1 (1024 для f64)."""
        return int(cls.width.finfo.maxexp)

    @classmethod
    def min_exp(cls) -> int:
        """Минимальная нормализованная двоичная экспонента + 1 (-1021 для f64)."""
        return int(cls.width.finfo.minexp) + 1

    @classmethod
    def fromhex(cls: type[NF], text: str) -> NF:
        return cls(float.fromhex(text))

    # =========================================================================
    # CLASSIFICATION
    # =========================================================================

    def is_nan(self) -> bool:
        return bool(np.isnan(self._value))

    def is_infinite(self) -> bool:
        return bool(np.isinf(self._value))

    def is_finite(self) -> bool:
        return bool(np.isfinite(self._value))

    def is_zero(self) -> bool:
        return bool(self._value == 0)

    def is_normal(self) -> bool:
        return self.classify() is FpCategory.NORMAL

    def is_subnormal(self) -> bool:
        return self.classify() is FpCategory.SUBNORMAL

    def is_sign_positive(self) -> bool:
        return not bool(np.signbit(self._value))

    def is_sign_negative(self) -> bool:
        return bool(np.signbit(self._value))

    def is_integer(self) -> bool:
        return bool(np.isfinite(self._value) and self._value == np.trunc(self._value))

    def classify(self) -> FpCategory:
        value = self._value
        if np.isnan(value):
            return FpCategory.NAN
        if np.isinf(value):
            return FpCategory.INFINITE
        if value == 0:
            return FpCategory.ZERO
        if abs(value) < self.width.finfo.smallest_normal:
            return FpCategory.SUBNORMAL
        return FpCategory.NORMAL

    def integer_decode(self) -> tuple[int, int, int]:
        """
        Разложение на (mantissa, exponent, sign): value = sign * mantissa * 2**exponent.
        """
        finfo = self.width.finfo
        mantissa_bits = finfo.nmant
        exponent_mask = (1 << finfo.nexp) - 1
        bias = finfo.maxexp - 1
        total_bits = finfo.bits

        bits = self.to_bits()
        sign = 1 if bits >> (total_bits - 1) == 0 else -1
        exponent = (bits >> mantissa_bits) & exponent_mask
        fraction = bits & ((1 << mantissa_bits) - 1)
        if exponent == 0:
            mantissa = fraction << 1
        else:
            mantissa = fraction | (1 << mantissa_bits)
        return mantissa, exponent - bias - mantissa_bits, sign

    def as_integer_ratio(self) -> tuple[int, int]:
        return float(self._value).as_integer_ratio()

    def hex(self) -> str:
        return float(self._value).hex()

    # =========================================================================
    # ROUNDING & SIGN
    # =========================================================================

    def floor(self: NF) -> NF:
        return self._unary(np.floor)

    def ceil(self: NF) -> NF:
        return self._unary(np.ceil)

    def round(self: NF) -> NF:
        """Округление к ближайшему целому (половина от нуля)."""
        value = self._value
        with np.errstate(all="ignore"):
            truncated = np.trunc(value)
            if abs(value - truncated) >= 0.5:
                truncated = truncated + np.copysign(self.float_type(1.0), value)
        return self._checked(truncated)

    def trunc(self: NF) -> NF:
        return self._unary(np.trunc)

    def fract(self: NF) -> NF:
        return self._unary(lambda v: v - np.trunc(v))

    def abs(self: NF) -> NF:
        return self._unary(np.abs)

    def signum(self: NF) -> NF:
        """1.0 для положительных (включая +0.0), -1.0 для отрицательных (включая -0.0)."""
        return self._unary(lambda v: np.copysign(self.float_type(1.0), v))

    def copysign(self: NF, sign: Any) -> NF:
        return self._binary(sign, np.copysign)

    def fmod(self: NF, other: Any) -> NF:
        """Остаток с усечением (знак делимого), в отличие от %."""
        return self._binary(other, np.fmod)

    def abs_sub(self: NF, other: Any) -> NF:
        """max(self - other, 0)."""
        return self._binary(other, lambda a, b: np.fmax(a - b, 0))

    def recip(self: NF) -> NF:
        return self._unary(lambda v: self.float_type(1.0) / v)

    # =========================================================================
    # POWERS & LOGARITHMS
    # =========================================================================

    def sqrt(self: NF) -> NF:
        return self._unary(np.sqrt)

    def cbrt(self: NF) -> NF:
        return self._unary(np.cbrt)

    def powi(self: NF, n: int) -> NF:
        if not isinstance(n, (int, np.integer)):
            raise TypeError(f"powi exponent must be an integer, got {type(n).__name__}")
        return self._unary(lambda v: np.power(v, self.float_type(n)))

    def powf(self: NF, n: Any) -> NF:
        return self._binary(n, np.power)

    def exp(self: NF) -> NF:
        return self._unary(np.exp)

    def exp2(self: NF) -> NF:
        return self._unary(np.exp2)

    def exp_m1(self: NF) -> NF:
        return self._unary(np.expm1)

    def ln(self: NF) -> NF:
        return self._unary(np.log)

    def ln_1p(self: NF) -> NF:
        return self._unary(np.log1p)

    def log(self: NF, base: Any) -> NF:
        return self._binary(base, lambda v, b: np.log(v) / np.log(b))

    def log2(self: NF) -> NF:
        return self._unary(np.log2)

    def log10(self: NF) -> NF:
        return self._unary(np.log10)

    def hypot(self: NF, other: Any) -> NF:
        return self._binary(other, np.hypot)

    def mul_add(self: NF, a: Any, b: Any) -> NF:
        """self * a + b (не fused: numpy не предоставляет fma)."""
        return (self * a) + b

    # =========================================================================
    # APPROXIMATE EQUALITY
    # =========================================================================

    def _tolerance(self, value: Any) -> np.floating:
        if value is None:
            return self.width.finfo.eps
        if isinstance(value, FloatMethodsMixin):
            value = value._value
        return self.width.cast(value)

    def abs_diff_eq(self, other: Any, epsilon: Any = None) -> bool:
        """
        Равенство с абсолютным допуском: |self - other| <= epsilon.

        Args:
            other: Значение того же типа или сырое число
            epsilon: Допуск (default: машинный epsilon ширины)
        """
        other = self._coerce(other)
        eps = self._tolerance(epsilon)
        a, b = self._value, other._value
        with np.errstate(all="ignore"):
            diff = a - b if a > b else b - a
        return bool(diff <= eps)

    def relative_eq(self, other: Any, epsilon: Any = None, max_relative: Any = None) -> bool:
        """
        Равенство с относительным допуском.

        Значения равны, если |self - other| <= epsilon либо
        |self - other| <= max(|self|, |other|) * max_relative.
        Бесконечности равны только самим себе.
        """
        other = self._coerce(other)
        eps = self._tolerance(epsilon)
        max_rel = self._tolerance(max_relative)
        a, b = self._value, other._value

        if a == b:
            return True
        if np.isinf(a) or np.isinf(b):
            return False

        with np.errstate(all="ignore"):
            diff = np.abs(a - b)
            if diff <= eps:
                return True
            largest = max(np.abs(a), np.abs(b))
            return bool(diff <= largest * max_rel)

    def ulps_eq(self, other: Any, epsilon: Any = None, max_ulps: int = 4) -> bool:
        """
        Равенство с точностью до max_ulps соседних представимых значений.

        Сначала проверяется abs_diff_eq(epsilon); значения разного знака
        не равны.
        """
        if not isinstance(max_ulps, (int, np.integer)) or max_ulps < 0:
            raise ValueError(f"max_ulps must be a non-negative integer, got {max_ulps!r}")

        other = self._coerce(other)
        if self.abs_diff_eq(other, epsilon):
            return True
        if self.is_sign_negative() != other.is_sign_negative():
            return False
        return abs(self.to_bits() - other.to_bits()) <= max_ulps

    # =========================================================================
    # TRIGONOMETRY
    # =========================================================================

    def sin(self: NF) -> NF:
        return self._unary(np.sin)

    def cos(self: NF) -> NF:
        return self._unary(np.cos)

    def tan(self: NF) -> NF:
        return self._unary(np.tan)

    def asin(self: NF) -> NF:
        return self._unary(np.arcsin)

    def acos(self: NF) -> NF:
        return self._unary(np.arccos)

    def atan(self: NF) -> NF:
        return self._unary(np.arctan)

    def atan2(self: NF, other: Any) -> NF:
        return self._binary(other, np.arctan2)

    def sin_cos(self: NF) -> tuple[NF, NF]:
        return self.sin(), self.cos()

    def sinh(self: NF) -> NF:
        return self._unary(np.sinh)

    def cosh(self: NF) -> NF:
        return self._unary(np.cosh)

    def tanh(self: NF) -> NF:
        return self._unary(np.tanh)

    def asinh(self: NF) -> NF:
        return self._unary(np.arcsinh)

    def acosh(self: NF) -> NF:
        return self._unary(np.arccosh)

    def atanh(self: NF) -> NF:
        return self._unary(np.arctanh)

    def to_degrees(self: NF) -> NF:
        return self._unary(np.degrees)

    def to_radians(self: NF) -> NF:
        return self._unary(np.radians)
