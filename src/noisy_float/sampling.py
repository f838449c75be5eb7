"""
Sampling — равномерное распределение над NoisyFloat

Адаптер над numpy.random.Generator: выборка строится в ширине обёртки по
развёрнутым границам и оборачивается напрямую, без повторной проверки
(равномерная выборка между валидными конечными границами не может дать NaN).

Алгоритм масштабирования (low + scale * u, u ∈ [0, 1)); результат, округлённый
вверх до high, ограничивается наибольшим допустимым значением диапазона
(nextafter(high, low) для [low, high), high для [low, high]). Построение
распределения выполняется за O(1) даже для диапазона шириной в один ulp.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Полуоткрытый диапазон: low < high; замкнутый: low <= high
2. Диапазон high - low конечен (иначе ValueError)
3. Каждая выборка лежит в диапазоне и валидна для checker'а
"""

import logging
import threading
from typing import Any, Generic, TypeVar, Union

import numpy as np

from .core import NoisyFloat

logger = logging.getLogger(__name__)

NF = TypeVar("NF", bound=NoisyFloat)

RngLike = Union[None, int, np.random.Generator, np.random.SeedSequence]

_THREAD_STATE = threading.local()


def _thread_rng() -> np.random.Generator:
    """Генератор текущего потока (numpy Generator не потокобезопасен)."""
    rng = getattr(_THREAD_STATE, "rng", None)
    if rng is None:
        rng = np.random.default_rng()
        _THREAD_STATE.rng = rng
    return rng


def resolve_rng(rng: RngLike = None) -> np.random.Generator:
    """
    Приведение аргумента к numpy.random.Generator.

    Args:
        rng: None (генератор потока), seed или готовый Generator
    """
    if rng is None:
        return _thread_rng()
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


class UniformNoisyFloat(Generic[NF]):
    """
    Равномерное распределение на [low, high) или [low, high].

    Examples:
        >>> uniform = UniformNoisyFloat.new(r32(17.0), r32(22.0))
        >>> 17.0 <= uniform.sample(rng=42) < 22.0
        True
    """

    def __init__(self, low: Any, high: Any, inclusive: bool = False) -> None:
        if isinstance(low, NoisyFloat):
            low, high = low, low._coerce(high)
        elif isinstance(high, NoisyFloat):
            low, high = high._coerce(low), high
        else:
            raise TypeError(
                "at least one bound must be a NoisyFloat to determine the sampled type, "
                f"got {type(low).__name__} and {type(high).__name__}"
            )

        kind = type(low)
        float_type = kind.float_type
        lo, hi = low.raw(), high.raw()

        if inclusive:
            if not lo <= hi:
                raise ValueError(f"Uniform.new_inclusive requires low <= high, got {lo} > {hi}")
        elif not lo < hi:
            raise ValueError(f"Uniform.new requires low < high, got {lo} >= {hi}")

        # Наибольшее значение generator.random() в данной ширине
        max_rand = float_type(1.0) - kind.width.finfo.epsneg

        with np.errstate(all="ignore"):
            scale = hi - lo
            if inclusive:
                scale = scale / max_rand
        if not np.isfinite(scale):
            raise ValueError(f"Uniform range overflow: [{lo}, {hi}] is not finite")

        # Наибольшее допустимое значение выборки
        top = hi if inclusive else np.nextafter(hi, lo)

        self._kind = kind
        self._low = lo
        self._high = hi
        self._scale = float_type(scale)
        self._top = float_type(top)
        self._inclusive = inclusive

        logger.debug(
            "uniform sampler %s: low=%s high=%s inclusive=%s", kind.__name__, lo, hi, inclusive
        )

    @classmethod
    def new(cls, low: Any, high: Any) -> "UniformNoisyFloat[Any]":
        """Полуоткрытый диапазон [low, high)."""
        return cls(low, high, inclusive=False)

    @classmethod
    def new_inclusive(cls, low: Any, high: Any) -> "UniformNoisyFloat[Any]":
        """Замкнутый диапазон [low, high]."""
        return cls(low, high, inclusive=True)

    @property
    def kind(self) -> type[NoisyFloat]:
        return self._kind

    @property
    def low(self) -> NoisyFloat:
        return self._kind._unchecked(self._low)

    @property
    def high(self) -> NoisyFloat:
        return self._kind._unchecked(self._high)

    @property
    def inclusive(self) -> bool:
        return self._inclusive

    def sample(self, rng: RngLike = None) -> NF:
        """Одна выборка."""
        generator = resolve_rng(rng)
        float_type = self._kind.float_type
        unit = float_type(generator.random(dtype=float_type))
        with np.errstate(all="ignore"):
            value = np.minimum(self._low + self._scale * unit, self._top)
        return self._kind._unchecked(float_type(value))

    def sample_n(self, n: int, rng: RngLike = None) -> list[NF]:
        """
        n выборок одним вызовом генератора.

        Raises:
            ValueError: Если n < 0
        """
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")

        generator = resolve_rng(rng)
        units = generator.random(n, dtype=self._kind.float_type)
        with np.errstate(all="ignore"):
            values = np.minimum(self._low + self._scale * units, self._top)
        unchecked = self._kind._unchecked
        return [unchecked(value) for value in values]

    def __repr__(self) -> str:
        closing = "]" if self._inclusive else ")"
        return f"Uniform<{self._kind.__name__}>[{self._low}, {self._high}{closing}"


def sample_uniform(low: Any, high: Any, rng: RngLike = None) -> NoisyFloat:
    """Одна выборка из [low, high)."""
    return UniformNoisyFloat.new(low, high).sample(rng)
