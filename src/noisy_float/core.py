"""
NoisyFloat — float с ограниченным множеством допустимых значений

Тонкая обёртка над numpy скаляром фиксированной ширины, параметризованная
checker'ом. Ведёт себя как нативный float в арифметике и сравнениях, но
каждое значение, которое может стать невалидным (конструирование, результат
арифметики, результат математической функции), проходит через
checker.assert_valid() до того, как будет возвращено.

Специализация (ширина + checker) задаётся при определении подкласса:

    class R64(NoisyFloat, float_type=np.float64, checker=FiniteChecker):
        pass

либо через NoisyFloat.specialize(np.float64, FiniteChecker).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Наблюдаемое значение всегда валидно для checker'а (кроме debug-only
   checker'ов в python -O, где проверка намеренно отключена)
2. try_* конструкторы возвращают None вместо невалидной обёртки
3. NaN исключён → порядок над значениями тотальный
4. Равные значения имеют равный hash (включая +0.0 и -0.0)
5. Арифметика выполняется по IEEE-754 в ширине обёртки: деление на ноль
   даёт ±inf/NaN (а не ZeroDivisionError), затем результат проверяется
"""

import logging
import numbers
import operator
import threading
import types
from typing import Any, Callable, ClassVar, Optional, TypeVar

import numpy as np

from .checkers import FloatChecker
from .errors import TryFromFloatError
from .float_impl import FloatMethodsMixin
from .widths import F32, F64, REAL_TYPES, FloatWidth, width_of

logger = logging.getLogger(__name__)

NF = TypeVar("NF", bound="NoisyFloat")

# (float_type, checker) → первый определённый класс специализации
_SPECIALIZATIONS: dict[tuple[type, type], type] = {}
_SPECIALIZATIONS_LOCK = threading.Lock()


class NoisyFloat(FloatMethodsMixin):
    """
    Float с ограниченным множеством допустимых значений.

    Обычно используется через готовые типы из noisy_float.types
    (N32, N64, R32, R64). Если метод вернул бы невалидное значение,
    вместо этого возникает InvalidFloatError (в режиме, определённом
    checker'ом). Исключение: методы try_*, возвращающие None.
    """

    __slots__ = ("_value",)

    # numpy не должен перехватывать бинарные операции со скалярами:
    # np.float64(1.0) + n64(2.0) обрабатывается через __radd__
    __array_ufunc__ = None

    width: ClassVar[Optional[FloatWidth]] = None
    float_type: ClassVar[Optional[type]] = None
    checker: ClassVar[Optional[type[FloatChecker]]] = None

    _value: np.floating

    def __init_subclass__(
        cls,
        float_type: Any = None,
        checker: Optional[type[FloatChecker]] = None,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)

        if float_type is None and checker is None:
            # Наследует специализацию родителя
            return

        if float_type is None or checker is None:
            raise TypeError(f"{cls.__name__}: both float_type and checker are required")

        if not (isinstance(checker, type) and issubclass(checker, FloatChecker)):
            raise TypeError(f"checker must be a FloatChecker subclass, got {checker!r}")

        width = width_of(float_type)
        cls.width = width
        cls.float_type = width.float_type
        cls.checker = checker

        with _SPECIALIZATIONS_LOCK:
            _SPECIALIZATIONS.setdefault((width.float_type, checker), cls)

        logger.debug("specialized %s: width=%s checker=%s", cls.__name__, width.name, checker.__name__)

    @classmethod
    def specialize(
        cls,
        float_type: Any,
        checker: type[FloatChecker],
        name: Optional[str] = None,
    ) -> type["NoisyFloat"]:
        """
        Класс специализации для пары (ширина, checker).

        Возвращает уже существующий класс, если пара была специализирована
        ранее (например, R64 для (float64, FiniteChecker)).

        Args:
            float_type: numpy.float32 или numpy.float64
            checker: Подкласс FloatChecker
            name: Имя нового класса (default: "NoisyFloat[f64, FiniteChecker]")
        """
        width = width_of(float_type)
        with _SPECIALIZATIONS_LOCK:
            existing = _SPECIALIZATIONS.get((width.float_type, checker))
        if existing is not None:
            return existing

        if name is None:
            name = f"NoisyFloat[{width.name}, {getattr(checker, '__name__', checker)}]"

        types.new_class(
            name,
            (NoisyFloat,),
            {"float_type": width.float_type, "checker": checker},
            lambda ns: ns.update({"__slots__": (), "__module__": cls.__module__}),
        )
        # Параллельная специализация: побеждает первый зарегистрированный класс
        with _SPECIALIZATIONS_LOCK:
            return _SPECIALIZATIONS[(width.float_type, checker)]

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    def __init__(self, value: Any = 0.0) -> None:
        width = self.width
        if width is None:
            raise TypeError(
                "NoisyFloat must be specialized with float_type and checker before use"
            )
        if isinstance(value, NoisyFloat):
            value = value._value
        raw = width.cast(value)
        self.checker.assert_valid(raw)
        self._value = raw

    @classmethod
    def new(cls: type[NF], value: Any) -> NF:
        """Конструирование с проверкой checker'ом."""
        return cls(value)

    @classmethod
    def try_new(cls: type[NF], value: Any) -> Optional[NF]:
        """
        Конструирование без исключения для невалидного значения.

        Returns:
            Обёртка, если значение валидно; None иначе

        Raises:
            FloatConversionError: Если значение не представимо в ширине
        """
        if isinstance(value, NoisyFloat):
            value = value._value
        raw = cls.width.cast(value)
        if not cls.checker.check(raw):
            return None
        return cls._unchecked(raw)

    @classmethod
    def try_from(cls: type[NF], value: Any) -> NF:
        """
        Fallible конверсия: невалидное значение → TryFromFloatError.

        Не зависит от режима enforcement checker'а.
        """
        result = cls.try_new(value)
        if result is None:
            raise TryFromFloatError(value, cls)
        return result

    @classmethod
    def from_f32(cls: type[NF], value: Any) -> NF:
        """
        Конструирование из float32 значения.

        Может завершиться не только InvalidFloatError, но и
        FloatConversionError, если значение не представимо в ширине.
        """
        return cls(F32.cast(value))

    @classmethod
    def from_f64(cls: type[NF], value: Any) -> NF:
        """
        Конструирование из float64 значения.

        f64 → f32: конечное значение вне диапазона f32 →
        FloatConversionError (а не бесконечность).
        """
        return cls(F64.cast(value))

    @classmethod
    def from_str(cls: type[NF], text: str) -> NF:
        """Разбор строки нативным парсером float с последующей проверкой."""
        return cls(float(text))

    @classmethod
    def borrowed(cls, buffer: np.ndarray, index: Any = ()) -> Any:
        """Read-only handle на слот numpy буфера (см. noisy_float.borrow)."""
        from .borrow import borrowed

        return borrowed(cls, buffer, index)

    @classmethod
    def try_borrowed(cls, buffer: np.ndarray, index: Any = ()) -> Any:
        from .borrow import try_borrowed

        return try_borrowed(cls, buffer, index)

    @classmethod
    def borrowed_mut(cls, buffer: np.ndarray, index: Any = ()) -> Any:
        """Изменяемый handle на слот numpy буфера (см. noisy_float.borrow)."""
        from .borrow import borrowed_mut

        return borrowed_mut(cls, buffer, index)

    @classmethod
    def try_borrowed_mut(cls, buffer: np.ndarray, index: Any = ()) -> Any:
        from .borrow import try_borrowed_mut

        return try_borrowed_mut(cls, buffer, index)

    @classmethod
    def _unchecked(cls: type[NF], raw: np.floating) -> NF:
        obj = object.__new__(cls)
        obj._value = raw
        return obj

    @classmethod
    def _checked(cls: type[NF], raw: Any) -> NF:
        raw = cls.float_type(raw)
        cls.checker.assert_valid(raw)
        return cls._unchecked(raw)

    # =========================================================================
    # EXTRACTION
    # =========================================================================

    def raw(self) -> np.floating:
        """Исходное значение (bit-identical)."""
        return self._value

    def to_bits(self) -> int:
        """Битовое представление значения."""
        return self.width.to_bits(self._value)

    def __float__(self) -> float:
        return float(self._value)

    def __int__(self) -> int:
        return int(self._value)

    def __trunc__(self) -> int:
        return int(self._value)

    def __floor__(self) -> int:
        return int(np.floor(self._value))

    def __ceil__(self) -> int:
        return int(np.ceil(self._value))

    def __round__(self, ndigits: Optional[int] = None) -> Any:
        if ndigits is None:
            return round(float(self._value))
        return self._checked(round(self._value, ndigits))

    def __bool__(self) -> bool:
        return bool(self._value != 0)

    @property
    def real(self: NF) -> NF:
        return self

    @property
    def imag(self: NF) -> NF:
        return self._unchecked(self.float_type(0.0))

    def conjugate(self: NF) -> NF:
        return self

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (float(self._value),))

    # =========================================================================
    # OPERANDS
    # =========================================================================

    def _same_kind(self, other: Any) -> bool:
        return (
            isinstance(other, NoisyFloat)
            and other.width is self.width
            and other.checker is self.checker
        )

    def _operand(self, other: Any) -> Any:
        """Сырое значение второго операнда арифметики (с обёртыванием)."""
        if self._same_kind(other):
            return other._value
        if isinstance(other, NoisyFloat) or not isinstance(other, REAL_TYPES):
            return NotImplemented
        # Сырой операнд эквивалентен предварительно обёрнутому
        return type(self)(other)._value

    def _compare(self, other: Any, op: Callable[[Any, Any], Any]) -> Any:
        if self._same_kind(other):
            return bool(op(self._value, other._value))
        if isinstance(other, NoisyFloat) or not isinstance(other, REAL_TYPES):
            return NotImplemented
        # Сырой операнд сравнивается точно, как нативный float (согласовано с hash)
        if isinstance(other, np.generic):
            other = other.item()
        return op(float(self._value), other)

    def _coerce(self: NF, other: Any) -> NF:
        if self._same_kind(other):
            return other
        if isinstance(other, NoisyFloat):
            raise TypeError(
                f"cannot combine {type(self).__name__} with {type(other).__name__}"
            )
        return type(self)(other)

    def _binary(self, other: Any, op: Callable[[Any, Any], Any], reflected: bool = False) -> Any:
        rhs = self._operand(other)
        if rhs is NotImplemented:
            return NotImplemented
        lhs = self._value
        if reflected:
            lhs, rhs = rhs, lhs
        with np.errstate(all="ignore"):
            result = op(lhs, rhs)
        return self._checked(result)

    def _unary(self: NF, op: Callable[[Any], Any]) -> NF:
        with np.errstate(all="ignore"):
            result = op(self._value)
        return self._checked(result)

    # =========================================================================
    # COMPARISON & ORDERING
    # =========================================================================

    def __eq__(self, other: Any) -> Any:
        return self._compare(other, operator.eq)

    def __ne__(self, other: Any) -> Any:
        return self._compare(other, operator.ne)

    def __lt__(self, other: Any) -> Any:
        return self._compare(other, operator.lt)

    def __le__(self, other: Any) -> Any:
        return self._compare(other, operator.le)

    def __gt__(self, other: Any) -> Any:
        return self._compare(other, operator.gt)

    def __ge__(self, other: Any) -> Any:
        return self._compare(other, operator.ge)

    def __hash__(self) -> int:
        value = self._value
        if value == 0:
            # -0.0 == +0.0, поэтому hash обязан совпадать
            value = self.float_type(0.0)
        return hash(float(value))

    def cmp(self, other: Any) -> int:
        """
        Тотальное сравнение.

        Returns:
            -1 если self < other, 0 если равны, +1 если self > other
        """
        other = self._coerce(other)
        if self._value < other._value:
            return -1
        if self._value > other._value:
            return 1
        return 0

    def min(self: NF, other: Any) -> NF:
        """
        Минимум двух значений по тотальному порядку.

        Явный метод вместо двух конкурирующих реализаций (numeric и
        ordering). При равенстве возвращает self.
        """
        other = self._coerce(other)
        return other if other._value < self._value else self

    def max(self: NF, other: Any) -> NF:
        """
        Максимум двух значений по тотальному порядку.

        При равенстве возвращает other.
        """
        other = self._coerce(other)
        return self if other._value < self._value else other

    def clamp(self: NF, low: Any, high: Any) -> NF:
        """
        Ограничение значения диапазоном [low, high].

        Raises:
            ValueError: Если low > high
        """
        low = self._coerce(low)
        high = self._coerce(high)
        if low._value > high._value:
            raise ValueError(f"clamp requires low <= high, got low={low}, high={high}")
        if self._value < low._value:
            return low
        if self._value > high._value:
            return high
        return self

    # =========================================================================
    # ARITHMETIC
    # =========================================================================

    def __add__(self, other: Any) -> Any:
        return self._binary(other, operator.add)

    def __radd__(self, other: Any) -> Any:
        return self._binary(other, operator.add, reflected=True)

    def __sub__(self, other: Any) -> Any:
        return self._binary(other, operator.sub)

    def __rsub__(self, other: Any) -> Any:
        return self._binary(other, operator.sub, reflected=True)

    def __mul__(self, other: Any) -> Any:
        return self._binary(other, operator.mul)

    def __rmul__(self, other: Any) -> Any:
        return self._binary(other, operator.mul, reflected=True)

    def __truediv__(self, other: Any) -> Any:
        return self._binary(other, np.divide)

    def __rtruediv__(self, other: Any) -> Any:
        return self._binary(other, np.divide, reflected=True)

    def __floordiv__(self, other: Any) -> Any:
        return self._binary(other, np.floor_divide)

    def __rfloordiv__(self, other: Any) -> Any:
        return self._binary(other, np.floor_divide, reflected=True)

    def __mod__(self, other: Any) -> Any:
        # Семантика нативного float: знак результата совпадает со знаком делителя
        return self._binary(other, np.remainder)

    def __rmod__(self, other: Any) -> Any:
        return self._binary(other, np.remainder, reflected=True)

    def __divmod__(self, other: Any) -> Any:
        quotient = self.__floordiv__(other)
        if quotient is NotImplemented:
            return NotImplemented
        return quotient, self.__mod__(other)

    def __rdivmod__(self, other: Any) -> Any:
        quotient = self.__rfloordiv__(other)
        if quotient is NotImplemented:
            return NotImplemented
        return quotient, self.__rmod__(other)

    def __pow__(self, other: Any, modulo: None = None) -> Any:
        if modulo is not None:
            return NotImplemented
        return self._binary(other, np.power)

    def __rpow__(self, other: Any) -> Any:
        return self._binary(other, np.power, reflected=True)

    def __neg__(self: NF) -> NF:
        return self._unary(operator.neg)

    def __pos__(self: NF) -> NF:
        return self

    def __abs__(self: NF) -> NF:
        return self._unary(np.abs)

    # =========================================================================
    # FORMATTING
    # =========================================================================

    def __repr__(self) -> str:
        return str(self._value)

    def __str__(self) -> str:
        return str(self._value)

    def __format__(self, format_spec: str) -> str:
        if not format_spec:
            return str(self._value)
        return format(self._value, format_spec)

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> Any:
        # pydantic импортируется только при использовании типа в модели
        from .serde import noisy_float_core_schema

        return noisy_float_core_schema(cls)


numbers.Real.register(NoisyFloat)
