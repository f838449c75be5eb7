"""
Errors — иерархия исключений noisy_float

Две независимые категории ошибок:
- Нарушение валидности: значение не проходит проверку checker'а
  (NaN, либо запрещённая бесконечность)
- Невозможная конверсия: значение не представимо в целевой ширине float

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. InvalidFloatError никогда не используется для ошибок конверсии
2. FloatConversionError никогда не используется для ошибок валидности
"""

from typing import Any


class NoisyFloatError(Exception):
    """Базовое исключение пакета noisy_float."""

    pass


class InvalidFloatError(NoisyFloatError, ValueError):
    """
    Нарушение контракта валидности: значение отвергнуто checker'ом.

    Возникает при enforced-конструировании и после каждой арифметической
    операции, если результат невалиден. Для debug-only checker'ов в
    оптимизированном запуске (python -O) не возникает.

    Attributes:
        value: Невалидное значение
        checker: Класс checker'а, отвергнувший значение
    """

    def __init__(self, value: Any, checker: type) -> None:
        self.value = value
        self.checker = checker
        super().__init__(
            f"Invalid float value {value!r} rejected by {checker.__name__}: "
            f"{checker.describe()}"
        )


class TryFromFloatError(NoisyFloatError, ValueError):
    """
    Восстановимая ошибка try_from: значение невалидно для целевого типа.

    В отличие от InvalidFloatError, возникает всегда (независимо от режима
    enforcement) и предназначена для обработки недоверенного ввода.
    """

    def __init__(self, value: Any, target: type) -> None:
        self.value = value
        self.target = target
        super().__init__(f"{value!r} is not a valid {target.__name__} value")


class FloatConversionError(NoisyFloatError, ArithmeticError):
    """
    Невозможная конверсия между ширинами float.

    Например: конечное float64 значение, которое переполняет float32,
    или целое число, слишком большое для любого float.
    """

    pass
