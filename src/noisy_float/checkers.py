"""
Checkers — политики валидности float значений

Checker описывает множество допустимых значений и способ их проверки:
- check(value): чистый предикат без побочных эффектов
- assert_valid(value): InvalidFloatError, если значение невалидно
  и checker в данный момент enforcing

Режимы enforcement:
- ALWAYS: проверка выполняется всегда
- DEBUG: проверка выполняется только при включённых debug assertions
  (выключаются в python -O); иначе невалидное значение проходит без проверки

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. NaN невалиден для любого checker'а (проверяется при определении класса)
2. Режим enforcement фиксируется один раз при определении класса checker'а
"""

import inspect
import logging
import math
from enum import Enum
from typing import Any, ClassVar

from . import config
from .errors import InvalidFloatError

logger = logging.getLogger(__name__)


class EnforcementMode(str, Enum):
    """Когда checker выполняет проверку."""

    ALWAYS = "ALWAYS"
    DEBUG = "DEBUG"


# =============================================================================
# BASE CHECKER
# =============================================================================


class FloatChecker:
    """
    Базовый класс checker'а.

    Checker не имеет состояния и не инстанцируется: используются только
    classmethod'ы. Подкласс обязан реализовать check(); NaN должен
    отвергаться.
    """

    mode: ClassVar[EnforcementMode] = EnforcementMode.DEBUG
    description: ClassVar[str] = "value must not be NaN"

    # Разрешается в __init_subclass__ из снапшота config.SETTINGS
    enforcing: ClassVar[bool] = False

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        # Промежуточный класс без собственного check() не проверяется
        if inspect.getattr_static(cls, "check") is FloatChecker.__dict__["check"]:
            return

        if cls.check(math.nan):
            raise TypeError(f"{cls.__name__}.check() must reject NaN")

        cls.enforcing = (
            cls.mode is EnforcementMode.ALWAYS
            or config.get_settings().debug_assertions
        )
        logger.debug(
            "checker %s: mode=%s enforcing=%s", cls.__name__, cls.mode.value, cls.enforcing
        )

    def __new__(cls, *args: Any, **kwargs: Any) -> "FloatChecker":
        raise TypeError(f"{cls.__name__} is a stateless checker and cannot be instantiated")

    @classmethod
    def check(cls, value: Any) -> bool:
        """
        True тогда и только тогда, когда значение валидно.

        Обязателен для конкретного checker'а: подкласс без check() не
        проходит проверку NaN и не получает режим enforcement.
        """
        raise NotImplementedError

    @classmethod
    def assert_valid(cls, value: Any) -> None:
        """
        Проверка значения с учётом режима enforcement.

        Raises:
            InvalidFloatError: Если checker enforcing и значение невалидно
        """
        if cls.enforcing and not cls.check(value):
            raise InvalidFloatError(value, cls)

    @classmethod
    def describe(cls) -> str:
        return cls.description


# =============================================================================
# STANDARD CHECKERS
# =============================================================================


class NumChecker(FloatChecker):
    """Допустимы все значения, кроме NaN (бесконечности разрешены)."""

    description = "value must not be NaN"

    @classmethod
    def check(cls, value: Any) -> bool:
        return not math.isnan(value)


class FiniteChecker(FloatChecker):
    """Допустимы только конечные значения: не NaN и не ±inf."""

    description = "value must be finite (not NaN or infinite)"

    @classmethod
    def check(cls, value: Any) -> bool:
        return math.isfinite(value)


class StrictNumChecker(NumChecker):
    """NumChecker, проверяющий в любом режиме запуска."""

    mode = EnforcementMode.ALWAYS


class StrictFiniteChecker(FiniteChecker):
    """FiniteChecker, проверяющий в любом режиме запуска."""

    mode = EnforcementMode.ALWAYS
