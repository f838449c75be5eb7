"""
Тесты для модуля Widths

Проверяет:
1. Приведение значений к f32/f64
2. Детекцию переполнения при сужении (FloatConversionError)
3. Битовое представление
4. Кратчайшее round-trip представление f32
"""

import math
import struct

import numpy as np
import pytest

from noisy_float.errors import FloatConversionError
from noisy_float.widths import F32, F64, width_of


class TestWidthOf:
    """Тесты для width_of"""

    def test_supported_widths(self) -> None:
        """float32 и float64 поддерживаются"""
        assert width_of(np.float32) is F32
        assert width_of(np.float64) is F64
        assert width_of(float) is F64

    def test_unsupported_width_raises(self) -> None:
        """Прочие ширины отвергаются"""
        with pytest.raises(TypeError, match="float32 or numpy.float64"):
            width_of(np.float16)

    def test_layout(self) -> None:
        """Размер элемента совпадает с нативной шириной"""
        assert F32.itemsize == 4
        assert F64.itemsize == 8
        assert F32.dtype == np.dtype(np.float32)


class TestCast:
    """Тесты для FloatWidth.cast"""

    def test_cast_preserves_value(self) -> None:
        """Приведение int/float к f64"""
        assert F64.cast(1) == 1.0
        assert type(F64.cast(1.5)) is np.float64
        assert type(F32.cast(1.5)) is np.float32

    def test_cast_keeps_nan_and_infinity(self) -> None:
        """Приведение не проверяет валидность"""
        assert math.isnan(F32.cast(math.nan))
        assert F32.cast(math.inf) == math.inf
        assert F32.cast(-math.inf) == -math.inf

    def test_narrowing_overflow_raises(self) -> None:
        """Конечное значение вне диапазона f32 → FloatConversionError"""
        with pytest.raises(FloatConversionError, match="overflows f32"):
            F32.cast(1e300)

    def test_huge_int_raises(self) -> None:
        """Слишком большое целое → FloatConversionError"""
        with pytest.raises(FloatConversionError):
            F64.cast(10**400)

    def test_non_number_raises_type_error(self) -> None:
        """Нечисловой ввод → TypeError"""
        with pytest.raises(TypeError, match="real number"):
            F64.cast("1.0")

    def test_conversion_error_is_not_value_error(self) -> None:
        """Ошибка конверсии отделена от ошибки валидности"""
        assert not issubclass(FloatConversionError, ValueError)


class TestBits:
    """Тесты битового представления"""

    def test_f64_bits(self) -> None:
        """Биты f64 совпадают со struct"""
        expected = struct.unpack("<Q", struct.pack("<d", 10.3))[0]
        assert F64.to_bits(np.float64(10.3)) == expected

    def test_f32_bits(self) -> None:
        """Биты f32 совпадают со struct"""
        expected = struct.unpack("<I", struct.pack("<f", 10.3))[0]
        assert F32.to_bits(np.float32(10.3)) == expected

    def test_negative_zero_bits(self) -> None:
        """-0.0 имеет установленный знаковый бит"""
        assert F64.to_bits(np.float64(-0.0)) == 1 << 63
        assert F32.to_bits(np.float32(-0.0)) == 1 << 31

    def test_from_bits_roundtrip(self) -> None:
        """from_bits восстанавливает значение"""
        value = np.float32(3.14)
        assert F32.from_bits(F32.to_bits(value)) == value


class TestToBuiltin:
    """Тесты для to_builtin"""

    def test_f32_shortest_representation(self) -> None:
        """f32 3.14 → builtin 3.14 (а не 3.140000104904175)"""
        assert F32.to_builtin(np.float32(3.14)) == 3.14

    def test_f32_roundtrip_is_exact(self) -> None:
        """Кратчайшее представление восстанавливает те же биты f32"""
        for raw in (0.1, 1e-45, 3.4028235e38, -2.5):
            value = np.float32(raw)
            assert np.float32(F32.to_builtin(value)) == value

    def test_f64_passthrough(self) -> None:
        """f64 конвертируется без изменений"""
        assert F64.to_builtin(np.float64(0.1)) == 0.1
