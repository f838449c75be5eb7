"""
noisy_float — float типы, отвергающие недопустимые значения

Название противопоставлено "quiet NaN": вместо тихого распространения
NaN (или бесконечности) по вычислениям каждое новое значение проверяется,
и невалидное значение вызывает InvalidFloatError в момент появления.

Стандартные типы (noisy_float.types) следуют принципу debug assertions:
проверки выполняются при обычном запуске и отключаются в python -O.
Strict типы (SN32/SN64/SR32/SR64) проверяют всегда.

Опциональные возможности:
- noisy_float.serde — pydantic/jsonschema (extra "serde")
- noisy_float.sampling — равномерные выборки через numpy.random
"""

import logging

# Checkers
from noisy_float.checkers import (
    EnforcementMode,
    FiniteChecker,
    FloatChecker,
    NumChecker,
    StrictFiniteChecker,
    StrictNumChecker,
)

# Config
from noisy_float.config import Settings, get_settings, override_settings

# Core
from noisy_float.core import NoisyFloat
from noisy_float.float_impl import FpCategory

# Errors
from noisy_float.errors import (
    FloatConversionError,
    InvalidFloatError,
    NoisyFloatError,
    TryFromFloatError,
)

# Types
from noisy_float.types import (
    N32,
    N64,
    R32,
    R64,
    SN32,
    SN64,
    SR32,
    SR64,
    n32,
    n64,
    r32,
    r64,
)

# Widths
from noisy_float.widths import F32, F64, FloatWidth

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.3.0"

__all__ = [
    # Checkers
    "EnforcementMode",
    "FiniteChecker",
    "FloatChecker",
    "NumChecker",
    "StrictFiniteChecker",
    "StrictNumChecker",
    # Config
    "Settings",
    "get_settings",
    "override_settings",
    # Core
    "FpCategory",
    "NoisyFloat",
    # Errors
    "FloatConversionError",
    "InvalidFloatError",
    "NoisyFloatError",
    "TryFromFloatError",
    # Types
    "N32",
    "N64",
    "R32",
    "R64",
    "SN32",
    "SN64",
    "SR32",
    "SR64",
    "n32",
    "n64",
    "r32",
    "r64",
    # Widths
    "F32",
    "F64",
    "FloatWidth",
]
