"""
Contract Validation Module

Валидация JSON контрактов hypernum (источники конфигурации).
"""

from .validators import (
    SCHEMA_DIR,
    ConfigValidator,
    ContractValidator,
    SchemaLoader,
    validate_config,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "ConfigValidator",
    # Functions
    "validate_config",
    # Constants
    "SCHEMA_DIR",
]
