"""
Тесты для модуля Sampling

Проверяет:
1. Выборки лежат в [low, high) / [low, high] и валидны
2. Воспроизводимость по seed
3. Отказ на некорректных границах
"""

import numpy as np
import pytest

from noisy_float import N64, R32, R64, FiniteChecker, n64, r32, r64
from noisy_float.sampling import UniformNoisyFloat, resolve_rng, sample_uniform


class TestUniformRange:
    """Тесты границ выборки"""

    def test_sample_in_half_open_range(self) -> None:
        """Выборка R32 лежит в [17, 22)"""
        uniform = UniformNoisyFloat.new(r32(17.0), r32(22.0))
        value = uniform.sample(rng=42)

        assert isinstance(value, R32)
        assert type(value.raw()) is np.float32
        assert 17.0 <= value < 22.0

    def test_many_samples_in_range(self) -> None:
        """Все выборки лежат в диапазоне и валидны для checker'а"""
        uniform = UniformNoisyFloat.new(r64(-1.0), r64(1.0))
        values = uniform.sample_n(1000, rng=np.random.default_rng(0))

        assert len(values) == 1000
        for value in values:
            assert isinstance(value, R64)
            assert -1.0 <= value < 1.0
            assert FiniteChecker.check(value.raw())

    @pytest.mark.parametrize("kind", [R32, R64])
    def test_adjacent_bounds(self, kind) -> None:
        """Диапазон в один ulp: выборка всегда равна low"""
        low = kind.float_type(1.0)
        high = np.nextafter(low, kind.float_type(2.0))
        uniform = UniformNoisyFloat.new(kind(low), kind(high))

        for value in uniform.sample_n(200, rng=1):
            assert value.raw() == low
        assert uniform.sample(rng=2).raw() == low

    @pytest.mark.parametrize("kind", [R32, R64])
    def test_adjacent_bounds_inclusive(self, kind) -> None:
        """Замкнутый диапазон в один ulp: только low или high"""
        low = kind.float_type(1.0)
        high = np.nextafter(low, kind.float_type(2.0))
        uniform = UniformNoisyFloat.new_inclusive(kind(low), kind(high))

        for value in uniform.sample_n(200, rng=3):
            assert value.raw() in (low, high)

    def test_upper_bound_excluded_for_f32(self) -> None:
        """Округление вверх не даёт high в полуоткрытом f32 диапазоне"""
        uniform = UniformNoisyFloat.new(r32(17.0), r32(22.0))
        values = uniform.sample_n(10_000, rng=np.random.default_rng(4))
        assert max(values) < r32(22.0)
        assert min(values) >= r32(17.0)

    def test_inclusive_single_point(self) -> None:
        """[1, 1] даёт ровно 1"""
        uniform = UniformNoisyFloat.new_inclusive(r64(1.0), r64(1.0))
        assert uniform.sample(rng=3) == 1.0

    def test_inclusive_range(self) -> None:
        """Замкнутый диапазон"""
        uniform = UniformNoisyFloat.new_inclusive(r64(0.0), r64(1.0))
        for value in uniform.sample_n(500, rng=7):
            assert 0.0 <= value <= 1.0

    def test_properties(self) -> None:
        """Свойства распределения"""
        uniform = UniformNoisyFloat.new(r64(0.0), 2.5)
        assert uniform.kind is R64
        assert uniform.low == 0.0
        assert uniform.high == 2.5
        assert uniform.inclusive is False
        assert repr(uniform) == "Uniform<R64>[0.0, 2.5)"


class TestUniformErrors:
    """Тесты некорректных параметров"""

    def test_empty_half_open_range(self) -> None:
        """[1, 1) пуст → ValueError"""
        with pytest.raises(ValueError, match="low < high"):
            UniformNoisyFloat.new(r64(1.0), r64(1.0))

    def test_reversed_bounds(self) -> None:
        """low > high → ValueError"""
        with pytest.raises(ValueError, match="low <= high"):
            UniformNoisyFloat.new_inclusive(r64(2.0), r64(1.0))

    def test_infinite_range(self) -> None:
        """Бесконечный диапазон → ValueError"""
        with pytest.raises(ValueError, match="not finite"):
            UniformNoisyFloat.new(N64.neg_infinity(), n64(0.0))

    def test_overflowing_range(self) -> None:
        """high - low переполняется → ValueError"""
        with pytest.raises(ValueError, match="not finite"):
            UniformNoisyFloat.new(R64.min_value(), R64.max_value())

    def test_raw_bounds_rejected(self) -> None:
        """Хотя бы одна граница определяет тип выборки"""
        with pytest.raises(TypeError, match="NoisyFloat"):
            UniformNoisyFloat.new(0.0, 1.0)

    def test_mixed_kinds_rejected(self) -> None:
        """Границы разных специализаций → TypeError"""
        with pytest.raises(TypeError, match="cannot combine"):
            UniformNoisyFloat.new(r64(0.0), n64(1.0))

    def test_negative_count(self) -> None:
        """sample_n(-1) → ValueError"""
        uniform = UniformNoisyFloat.new(r64(0.0), r64(1.0))
        with pytest.raises(ValueError, match="non-negative"):
            uniform.sample_n(-1)


class TestReproducibility:
    """Тесты генератора"""

    def test_same_seed_same_values(self) -> None:
        """Одинаковый seed → одинаковые выборки"""
        uniform = UniformNoisyFloat.new(r64(0.0), r64(10.0))
        assert uniform.sample_n(10, rng=123) == uniform.sample_n(10, rng=123)

    def test_resolve_rng(self) -> None:
        """resolve_rng принимает None, seed и Generator"""
        generator = np.random.default_rng(5)
        assert resolve_rng(generator) is generator
        assert isinstance(resolve_rng(5), np.random.Generator)
        assert resolve_rng(None) is resolve_rng(None)

    def test_sample_uniform(self) -> None:
        """Функция-обёртка для одной выборки"""
        value = sample_uniform(r64(2.0), r64(3.0), rng=11)
        assert isinstance(value, R64)
        assert 2.0 <= value < 3.0
