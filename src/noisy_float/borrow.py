"""
Borrow — проверенные handle'ы на слоты numpy буферов

Python float неизменяем и не имеет адреса, поэтому "ссылка на float"
моделируется слотом numpy массива той же ширины. Handle читает и пишет
значение на месте, без копирования буфера; каждая запись проходит
проверку checker'ом.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. dtype буфера совпадает с dtype обёртки (одинаковый layout), иначе TypeError
2. Значение слота проверяется при создании handle'а и при каждом чтении
3. Запись невалидного значения отвергается до изменения буфера
"""

import operator
from typing import Any, Callable, Optional

import numpy as np

from .core import NoisyFloat


class NoisyFloatRef:
    """
    Handle на один элемент numpy буфера, интерпретируемый как NoisyFloat.

    Изменяемый handle (borrowed_mut) поддерживает set() и in-place
    операторы (+=, -=, *=, /=, %=), которые записывают результат обратно
    в буфер.
    """

    __slots__ = ("_kind", "_buffer", "_index", "_writable")

    # Изменяемый объект: hash не определён
    __hash__ = None  # type: ignore[assignment]

    def __init__(
        self,
        kind: type[NoisyFloat],
        buffer: np.ndarray,
        index: Any,
        writable: bool,
    ) -> None:
        self._kind = kind
        self._buffer = buffer
        self._index = index
        self._writable = writable

    @property
    def kind(self) -> type[NoisyFloat]:
        return self._kind

    @property
    def writable(self) -> bool:
        return self._writable

    def get(self) -> NoisyFloat:
        """Текущее значение слота (с проверкой)."""
        return self._kind._checked(self._buffer[self._index])

    def raw(self) -> np.floating:
        return self.get().raw()

    def set(self, value: Any) -> None:
        """
        Запись значения в слот.

        Raises:
            ValueError: Если handle только для чтения
            InvalidFloatError: Если значение невалидно
        """
        if not self._writable:
            raise ValueError("cannot assign through a read-only borrowed handle")
        if isinstance(value, NoisyFloatRef):
            value = value.get()
        checked = value if isinstance(value, self._kind) else self._kind(value)
        self._buffer[self._index] = checked.raw()

    def _update(self, other: Any, op: Callable[[Any, Any], Any]) -> "NoisyFloatRef":
        if isinstance(other, NoisyFloatRef):
            other = other.get()
        self.set(op(self.get(), other))
        return self

    def __iadd__(self, other: Any) -> "NoisyFloatRef":
        return self._update(other, operator.add)

    def __isub__(self, other: Any) -> "NoisyFloatRef":
        return self._update(other, operator.sub)

    def __imul__(self, other: Any) -> "NoisyFloatRef":
        return self._update(other, operator.mul)

    def __itruediv__(self, other: Any) -> "NoisyFloatRef":
        return self._update(other, operator.truediv)

    def __imod__(self, other: Any) -> "NoisyFloatRef":
        return self._update(other, operator.mod)

    def __float__(self) -> float:
        return float(self.get())

    def __eq__(self, other: Any) -> Any:
        if isinstance(other, NoisyFloatRef):
            other = other.get()
        return self.get().__eq__(other)

    def __ne__(self, other: Any) -> Any:
        result = self.__eq__(other)
        if result is NotImplemented:
            return NotImplemented
        return not result

    def __repr__(self) -> str:
        mode = "mut" if self._writable else "ref"
        return f"{self._kind.__name__}.{mode}({self.get()})"


# =============================================================================
# CONSTRUCTORS
# =============================================================================


def _slot_value(kind: type[NoisyFloat], buffer: Any, index: Any, writable: bool) -> np.floating:
    if not isinstance(buffer, np.ndarray):
        raise TypeError(f"buffer must be a numpy.ndarray, got {type(buffer).__name__}")
    if buffer.dtype != kind.width.dtype:
        raise TypeError(
            f"buffer dtype {buffer.dtype} does not match {kind.__name__} layout "
            f"{kind.width.dtype}"
        )
    if writable and not buffer.flags.writeable:
        raise ValueError("buffer is read-only")

    value = buffer[index]
    if np.ndim(value) != 0:
        raise ValueError(f"index {index!r} must select a single element")
    return value


def borrowed(kind: type[NoisyFloat], buffer: np.ndarray, index: Any = ()) -> NoisyFloatRef:
    """
    Read-only handle на слот буфера.

    Raises:
        InvalidFloatError: Если текущее значение слота невалидно
    """
    value = _slot_value(kind, buffer, index, writable=False)
    kind.checker.assert_valid(value)
    return NoisyFloatRef(kind, buffer, index, writable=False)


def try_borrowed(
    kind: type[NoisyFloat], buffer: np.ndarray, index: Any = ()
) -> Optional[NoisyFloatRef]:
    """Как borrowed(), но None для невалидного значения."""
    value = _slot_value(kind, buffer, index, writable=False)
    if not kind.checker.check(value):
        return None
    return NoisyFloatRef(kind, buffer, index, writable=False)


def borrowed_mut(kind: type[NoisyFloat], buffer: np.ndarray, index: Any = ()) -> NoisyFloatRef:
    """
    Изменяемый handle на слот буфера.

    Raises:
        ValueError: Если буфер только для чтения
        InvalidFloatError: Если текущее значение слота невалидно
    """
    value = _slot_value(kind, buffer, index, writable=True)
    kind.checker.assert_valid(value)
    return NoisyFloatRef(kind, buffer, index, writable=True)


def try_borrowed_mut(
    kind: type[NoisyFloat], buffer: np.ndarray, index: Any = ()
) -> Optional[NoisyFloatRef]:
    """Как borrowed_mut(), но None для невалидного значения."""
    value = _slot_value(kind, buffer, index, writable=True)
    if not kind.checker.check(value):
        return None
    return NoisyFloatRef(kind, buffer, index, writable=True)
