"""
ConfigLoader — поиск, разбор и слияние источников конфигурации

Источники (по убыванию приоритета):
1. inline — словарь, переданный в load_config()
2. env — переменные окружения HYPERNUM_*
3. rc — .hypernumrc (JSON или INI-стиль key = value)
4. json — .hypernumrc.json / hypernum.config.json
5. значения по умолчанию HypernumConfig

Каталоги поиска: base_dir, base_dir/config, ~/.hypernum, дополнительные пути.
При совпадении типа источника побеждает файл из более позднего каталога.

Каждый источник приводится к snake_case и проверяется JSON Schema
(hypernum_config.json), затем итог валидируется HypernumConfig.
"""

import json
import os
import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from hypernum.core.contracts.validators import ConfigValidator
from hypernum.core.domain.config import HypernumConfig
from hypernum.core.errors import ConfigurationError
from hypernum.logging_config import get_logger

logger = get_logger(__name__)

ENV_PREFIX = "HYPERNUM_"
CONFIG_FILENAMES = (".hypernumrc", ".hypernumrc.json", "hypernum.config.json")

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")
_INT_LITERAL = re.compile(r"^[+-]?\d+$")
_SECTION = re.compile(r"^\[([^\]]+)\]$")


class ConfigSource(str, Enum):
    """Тип источника конфигурации."""

    INLINE = "INLINE"
    ENV = "ENV"
    RC_FILE = "RC_FILE"
    JSON_FILE = "JSON_FILE"


# =============================================================================
# PARSING HELPERS
# =============================================================================


def to_snake_case(key: str) -> str:
    """
    Ключ источника → имя поля HypernumConfig.

    Examples:
        >>> to_snake_case("maxComputationSteps")
        'max_computation_steps'
        >>> to_snake_case("MAX-BITS")
        'max_bits'
    """
    key = _CAMEL_BOUNDARY.sub(r"_\1", key.strip())
    return key.replace("-", "_").lower()


def normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """snake_case ключи; имя режима округления в верхнем регистре."""
    result = {to_snake_case(k): v for k, v in data.items()}
    mode = result.get("rounding_mode")
    if isinstance(mode, str):
        result["rounding_mode"] = mode.strip().upper()
    return result


def coerce_scalar(raw: str) -> Any:
    """
    Текстовое значение из env/INI → bool, int или строка.

    Examples:
        >>> coerce_scalar("true"), coerce_scalar("64"), coerce_scalar("'HALF_UP'")
        (True, 64, 'HALF_UP')
    """
    value = raw.strip()
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if _INT_LITERAL.match(value):
        return int(value)
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_ini(content: str) -> Dict[str, Any]:
    """
    INI-стиль: строки key = value, комментарии # и ;.

    Заголовки секций допускаются, ключи всех секций сливаются в один
    словарь (поздние значения побеждают).
    """
    result: Dict[str, Any] = {}
    for lineno, line in enumerate(content.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith(("#", ";")):
            continue
        if _SECTION.match(stripped):
            continue
        if "=" not in stripped:
            raise ConfigurationError(
                "Malformed rc line (expected key = value)", context={"line": lineno}
            )
        key, _, raw = stripped.partition("=")
        result[key.strip()] = coerce_scalar(raw)
    return result


# =============================================================================
# LOADER
# =============================================================================


class ConfigLoader:
    """
    Загрузчик конфигурации из файлов и окружения.

    Результат load_config() без inline-переопределений кэшируется
    в экземпляре до clear_cache().

    Examples:
        >>> loader = ConfigLoader(base_dir=tmp_path, environ={"HYPERNUM_MAX_BITS": "64"})  # doctest: +SKIP
        >>> loader.load_config().max_bits  # doctest: +SKIP
        64
    """

    def __init__(
        self,
        *,
        base_dir: Optional[Path] = None,
        home_dir: Optional[Path] = None,
        additional_paths: Iterable[Path] = (),
        environ: Optional[Mapping[str, str]] = None,
        validator: Optional[ConfigValidator] = None,
    ):
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
        self.home_dir = Path(home_dir) if home_dir is not None else Path.home()
        self.additional_paths = [Path(p) for p in additional_paths]
        self.environ = environ if environ is not None else os.environ
        self.validator = validator or ConfigValidator()
        self._cached: Optional[HypernumConfig] = None

    # -------------------------------------------------------------------------
    # Discovery
    # -------------------------------------------------------------------------

    def search_paths(self) -> list[Path]:
        return [
            self.base_dir,
            self.base_dir / "config",
            self.home_dir / ".hypernum",
            *self.additional_paths,
        ]

    @staticmethod
    def source_for(filename: str) -> ConfigSource:
        if filename.endswith(".json"):
            return ConfigSource.JSON_FILE
        if filename.startswith(".hypernumrc"):
            return ConfigSource.RC_FILE
        raise ConfigurationError(f"Unsupported config file name: {filename}")

    def find_config_files(self) -> Dict[ConfigSource, Path]:
        found: Dict[ConfigSource, Path] = {}
        for directory in self.search_paths():
            for filename in CONFIG_FILENAMES:
                path = directory / filename
                if path.is_file():
                    found[self.source_for(filename)] = path
        if found:
            logger.debug("config files: %s", {s.value: str(p) for s, p in found.items()})
        return found

    # -------------------------------------------------------------------------
    # Sources
    # -------------------------------------------------------------------------

    def _validated(self, data: Mapping[str, Any], origin: str) -> Dict[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                "Config source must be an object", context={"source": origin}
            )
        normalized = normalize_keys(data)
        try:
            self.validator.validate(normalized)
        except ConfigurationError as e:
            raise ConfigurationError(
                f"Invalid config in {origin}: {e.message}", context=e.context
            ) from e
        return normalized

    def load_file(self, path: Path) -> Dict[str, Any]:
        """
        Разбор одного файла конфигурации.

        Raises:
            ConfigurationError: Файл не читается, не разбирается или не
                проходит схему
        """
        path = Path(path)
        source = self.source_for(path.name)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

        if source is ConfigSource.JSON_FILE:
            try:
                data = json.loads(content)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
        else:
            try:
                data = json.loads(content)
            except json.JSONDecodeError:
                # rc-файл не обязан быть JSON
                data = parse_ini(content)

        return self._validated(data, str(path))

    def load_env(self) -> Dict[str, Any]:
        """
        Переменные HYPERNUM_* (HYPERNUM_MAX_BITS=64 → max_bits=64).

        Переменные с префиксом, не соответствующие полю HypernumConfig
        (например HYPERNUM_HOME), пропускаются.
        """
        data: Dict[str, Any] = {}
        ignored = []
        for name, value in self.environ.items():
            if not name.startswith(ENV_PREFIX):
                continue
            key = name[len(ENV_PREFIX) :]
            if to_snake_case(key) in HypernumConfig.model_fields:
                data[key] = coerce_scalar(value)
            else:
                ignored.append(name)
        if ignored:
            logger.debug("ignored environment variables: %s", sorted(ignored))
        if not data:
            return {}
        return self._validated(data, "environment")

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def load_config(self, inline: Optional[Mapping[str, Any]] = None) -> HypernumConfig:
        """
        Итоговая конфигурация: inline > env > rc > json > defaults.

        Raises:
            ConfigurationError: Любой источник невалиден
        """
        if inline is None and self._cached is not None:
            return self._cached

        files = self.find_config_files()
        layers: list[Dict[str, Any]] = []
        for source in (ConfigSource.JSON_FILE, ConfigSource.RC_FILE):
            path = files.get(source)
            if path is not None:
                layers.append(self.load_file(path))
        layers.append(self.load_env())
        if inline is not None:
            layers.append(self._validated(inline, "inline"))

        merged: Dict[str, Any] = {}
        for layer in layers:
            merged.update(layer)

        config = HypernumConfig.from_mapping(merged)
        logger.debug("resolved config: %s", config.to_mapping())
        if inline is None:
            self._cached = config
        return config

    def save_config(self, config: HypernumConfig, path: Path) -> Path:
        """
        Запись конфигурации как JSON (camelCase ключи).

        Raises:
            ConfigurationError: Неподдерживаемое имя файла или ошибка записи
        """
        path = Path(path)
        if not (path.suffix == ".json" or path.name.startswith(".hypernumrc")):
            raise ConfigurationError(f"Unsupported config file extension: {path.suffix or path.name}")
        try:
            path.write_text(json.dumps(config.to_mapping(by_alias=True), indent=2), encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot write config file {path}: {e}") from e
        return path

    def clear_cache(self) -> None:
        self._cached = None
