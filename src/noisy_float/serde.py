"""
Serde — сериализация NoisyFloat через pydantic и контракты JSON Schema

Опциональная возможность (extra "serde"): модуль импортируется только при
использовании NoisyFloat типа в pydantic модели или при явном импорте.

- Закодированная форма: голое число, без метаданных обёртки
- Декодирование проходит через enforced конструктор: NaN (и ±inf для R
  типов) отвергается pydantic ValidationError
- f32 кодируется кратчайшим round-trip представлением (3.14)
- ±inf (валидны для N типов) кодируются константами Infinity / -Infinity
  (JSON_CONFIG); модели с N полями используют
  model_config = JSON_CONFIG, иначе pydantic кодирует inf как null
- ContractValidator: jsonschema Draft 2020-12 валидация payload'ов по
  JSON Schema, сгенерированной pydantic

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. decode(encode(x)) == x для любого валидного x
2. Невалидное значение не проходит декодирование в enforcing режиме
"""

from functools import lru_cache
from typing import Any, Dict, Iterator, Union

import jsonschema
from jsonschema import Draft202012Validator, ValidationError
from pydantic import ConfigDict, TypeAdapter
from pydantic_core import core_schema

from .core import NoisyFloat

# Константы Infinity / -Infinity вместо null: декодер принимает их обратно
JSON_CONFIG = ConfigDict(ser_json_inf_nan="constants")

# =============================================================================
# PYDANTIC CORE SCHEMA
# =============================================================================


def _serialize(value: NoisyFloat) -> float:
    return value.width.to_builtin(value.raw())


def noisy_float_core_schema(kind: type[NoisyFloat]) -> core_schema.CoreSchema:
    """
    Core schema для NoisyFloat типа.

    Валидация: число → kind(value) (с проверкой checker'ом).
    Экземпляр kind в python режиме принимается как есть.
    """
    from_number = core_schema.no_info_after_validator_function(
        kind,
        core_schema.float_schema(allow_inf_nan=True),
    )
    return core_schema.json_or_python_schema(
        json_schema=from_number,
        python_schema=core_schema.union_schema(
            [core_schema.is_instance_schema(kind), from_number]
        ),
        serialization=core_schema.plain_serializer_function_ser_schema(
            _serialize,
            return_schema=core_schema.float_schema(allow_inf_nan=True),
        ),
    )


@lru_cache(maxsize=None)
def _adapter(kind: Any) -> TypeAdapter:
    if isinstance(kind, type) and issubclass(kind, NoisyFloat):
        return TypeAdapter(kind, config=JSON_CONFIG)
    # Модель несёт собственный model_config
    return TypeAdapter(kind)


# =============================================================================
# JSON HELPERS
# =============================================================================


def dump_json(value: NoisyFloat) -> str:
    """
    Кодирование значения в JSON.

    Examples:
        >>> dump_json(r32(3.14))
        '3.14'
    """
    return _adapter(type(value)).dump_json(value).decode("utf-8")


def load_json(kind: type[NoisyFloat], data: Union[str, bytes]) -> NoisyFloat:
    """
    Декодирование значения из JSON.

    Raises:
        pydantic.ValidationError: Если значение не число или невалидно
    """
    return _adapter(kind).validate_json(data)


def json_schema(kind: Any) -> Dict[str, Any]:
    """JSON Schema типа (NoisyFloat или модели, содержащей NoisyFloat поля)."""
    return _adapter(kind).json_schema()


# =============================================================================
# CONTRACT VALIDATOR
# =============================================================================


class ContractValidator:
    """
    Валидатор payload'ов по JSON Schema контракту.

    Схема строится из pydantic типа; сама схема проходит meta-валидацию
    Draft 2020-12. Проверка формы (validate) отделена от декодирования
    с проверкой значений checker'ом (decode).
    """

    def __init__(self, kind: Any):
        """
        Args:
            kind: pydantic модель или NoisyFloat тип
        """
        self.kind = kind
        self.schema = json_schema(kind)

        try:
            Draft202012Validator.check_schema(self.schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema for {kind!r}: {e}")

        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Any) -> None:
        """
        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Any) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Any) -> Iterator[ValidationError]:
        return self.validator.iter_errors(data)

    def decode(self, data: Any) -> Any:
        """
        Проверка формы и декодирование в экземпляр kind.

        Raises:
            ValidationError: Если данные не соответствуют схеме
            pydantic.ValidationError: Если значение отвергнуто checker'ом
        """
        self.validate(data)
        return _adapter(self.kind).validate_python(data)


def validate_contract(kind: Any, data: Any) -> None:
    """
    Проверка payload'а по контракту типа.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    ContractValidator(kind).validate(data)
