"""
Config — настройки enforcement, разрешаемые один раз при импорте

Debug assertions включены по умолчанию и выключаются в оптимизированном
запуске (python -O), аналогично assert. Переменная окружения
NOISY_FLOAT_DEBUG_ASSERTIONS позволяет переопределить значение явно.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Настройки читаются один раз; checker'ы фиксируют режим при определении класса
2. Некорректное значение переменной окружения → ValueError (не молчаливый default)
"""

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Final, Iterator, Mapping, Optional

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

ENV_DEBUG_ASSERTIONS: Final[str] = "NOISY_FLOAT_DEBUG_ASSERTIONS"

_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


# =============================================================================
# SETTINGS
# =============================================================================


@dataclass(frozen=True)
class Settings:
    """Снапшот настроек noisy_float.

    debug_assertions: выполнять ли проверки debug-only checker'ов.
    """

    debug_assertions: bool = __debug__

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Построение настроек из окружения.

        Args:
            environ: Источник переменных (default: os.environ)

        Returns:
            Settings с учётом NOISY_FLOAT_DEBUG_ASSERTIONS

        Raises:
            ValueError: Если значение переменной не распознано
        """
        if environ is None:
            environ = os.environ

        raw = environ.get(ENV_DEBUG_ASSERTIONS)
        if raw is None:
            return cls()

        normalized = raw.strip().lower()
        if normalized in _TRUE_VALUES:
            return cls(debug_assertions=True)
        if normalized in _FALSE_VALUES:
            return cls(debug_assertions=False)

        raise ValueError(
            f"{ENV_DEBUG_ASSERTIONS} must be one of "
            f"{sorted(_TRUE_VALUES | _FALSE_VALUES)}, got {raw!r}"
        )


SETTINGS: Settings = Settings.from_env()
logger.debug("noisy_float settings resolved: %s", SETTINGS)


def get_settings() -> Settings:
    """Текущий снапшот настроек."""
    return SETTINGS


@contextmanager
def override_settings(**changes: bool) -> Iterator[Settings]:
    """
    Временная подмена настроек.

    Влияет только на checker'ы, определённые внутри блока: уже созданные
    классы сохраняют режим, зафиксированный при их определении.

    Examples:
        >>> with override_settings(debug_assertions=False):
        ...     class FastChecker(NumChecker):
        ...         pass
    """
    global SETTINGS

    previous = SETTINGS
    SETTINGS = replace(previous, **changes)
    try:
        yield SETTINGS
    finally:
        SETTINGS = previous
