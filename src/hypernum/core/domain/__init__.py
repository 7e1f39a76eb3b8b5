"""
Domain models and value objects.

Конфигурация вычислений и режимы округления.
"""

from hypernum.core.domain.config import (
    DEFAULT_CONFIG,
    DEFAULT_DECIMAL_PRECISION,
    DEFAULT_MAX_BITS,
    DEFAULT_MAX_COMPUTATION_STEPS,
    HypernumConfig,
    create_default_config,
    resolve_config,
)
from hypernum.core.domain.rounding import RoundingMode, coerce_rounding_mode

__all__ = [
    # Config
    "HypernumConfig",
    "DEFAULT_CONFIG",
    "DEFAULT_DECIMAL_PRECISION",
    "DEFAULT_MAX_BITS",
    "DEFAULT_MAX_COMPUTATION_STEPS",
    "create_default_config",
    "resolve_config",
    # Rounding
    "RoundingMode",
    "coerce_rounding_mode",
]
