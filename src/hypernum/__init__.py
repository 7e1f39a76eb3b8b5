"""
hypernum — точная арифметика неограниченных целых и структуры данных над ней

Пакет:
- core.math: нормализация, контроль переполнения, округление, арифметика,
  битовые операции, степени, комбинаторика
- core.domain: HypernumConfig, RoundingMode
- structures: BigArray, NumberTree, AckermannStructure
- config: загрузка конфигурации из файлов и окружения
"""

from hypernum.core.domain.config import (
    DEFAULT_CONFIG,
    HypernumConfig,
    create_default_config,
)
from hypernum.core.domain.rounding import RoundingMode
from hypernum.core.errors import (
    ComputationLimitError,
    ConfigurationError,
    DivisionByZeroError,
    HypernumError,
    NumericOverflowError,
    ValidationError,
)
from hypernum.core.math.precision import ScaledDecimal
from hypernum.facade import Hypernum, create_hypernum
from hypernum.logging_config import configure_logging, get_logger
from hypernum.structures import (
    AckermannStructure,
    AggregateKind,
    BigArray,
    NumberTree,
)

__version__ = "0.1.0"

__all__ = [
    # Facade
    "Hypernum",
    "create_hypernum",
    # Config
    "HypernumConfig",
    "DEFAULT_CONFIG",
    "create_default_config",
    "RoundingMode",
    # Values
    "ScaledDecimal",
    # Structures
    "BigArray",
    "AggregateKind",
    "NumberTree",
    "AckermannStructure",
    # Errors
    "HypernumError",
    "ValidationError",
    "DivisionByZeroError",
    "ConfigurationError",
    "NumericOverflowError",
    "ComputationLimitError",
    # Logging
    "get_logger",
    "configure_logging",
]
