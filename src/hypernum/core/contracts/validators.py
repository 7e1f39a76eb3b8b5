"""
JSON Schema Contract Validators

Валидация внешних источников конфигурации (JSON-файлы, rc-файлы,
переменные окружения) до построения HypernumConfig.

Схемы лежат в schema/ рядом с модулем:
- hypernum_config.json
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import jsonschema
from jsonschema import Draft202012Validator

from hypernum.core.errors import ConfigurationError

SCHEMA_DIR = Path(__file__).parent / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Кэш схем принадлежит экземпляру загрузчика.
    """

    def __init__(self, schema_dir: Optional[Path] = None):
        self._schema_dir = Path(schema_dir) if schema_dir is not None else SCHEMA_DIR
        if not self._schema_dir.exists():
            raise ConfigurationError(f"Schema directory not found: {self._schema_dir}")

        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'hypernum_config')

        Returns:
            Загруженная схема как dict

        Raises:
            ConfigurationError: Файла нет, он не JSON или не является схемой
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise ConfigurationError(f"Schema not found: {schema_path}")

        try:
            with open(schema_path, "r", encoding="utf-8") as f:
                schema = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Schema {schema_name}.json is not valid JSON: {e}") from e

        # Валидируем саму схему (meta-validation)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ConfigurationError(f"Invalid JSON Schema in {schema_name}.json: {e.message}") from e

        self._schemas[schema_name] = schema
        return schema


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str, loader: Optional[SchemaLoader] = None):
        self.schema_name = schema_name
        self.schema = (loader or SchemaLoader()).load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ConfigurationError: Данные не соответствуют схеме (первая ошибка
                по пути, исходная ошибка jsonschema в __cause__)
        """
        try:
            self.validator.validate(data)
        except jsonschema.ValidationError as e:
            path = ".".join(str(p) for p in e.absolute_path) or "<root>"
            raise ConfigurationError(
                f"{self.schema_name}: {e.message}", context={"path": path}
            ) from e

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[jsonschema.ValidationError]:
        return self.validator.iter_errors(data)


class ConfigValidator(ContractValidator):
    """Валидатор для hypernum_config контракта."""

    def __init__(self, loader: Optional[SchemaLoader] = None):
        super().__init__("hypernum_config", loader)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_config(data: Dict[str, Any]) -> None:
    """
    Валидация словаря конфигурации (snake_case ключи).

    Raises:
        ConfigurationError: Если данные не соответствуют схеме
    """
    ConfigValidator().validate(data)
