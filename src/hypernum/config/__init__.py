"""
Configuration Module

Загрузка HypernumConfig из файлов (.hypernumrc, .hypernumrc.json,
hypernum.config.json) и переменных окружения HYPERNUM_*.
"""

from .loader import (
    CONFIG_FILENAMES,
    ENV_PREFIX,
    ConfigLoader,
    ConfigSource,
    coerce_scalar,
    normalize_keys,
    parse_ini,
    to_snake_case,
)

__all__ = [
    # Classes
    "ConfigLoader",
    "ConfigSource",
    # Functions
    "to_snake_case",
    "normalize_keys",
    "coerce_scalar",
    "parse_ini",
    # Constants
    "CONFIG_FILENAMES",
    "ENV_PREFIX",
]
