"""
Тесты конфигурации

Проверяет:
1. HypernumConfig: значения по умолчанию, camelCase алиасы, override, неизменяемость
2. JSON Schema валидацию источников (SchemaLoader, ConfigValidator)
3. ConfigLoader: JSON, rc (JSON и INI), env, приоритеты, кэш, save_config
4. Вспомогательные парсеры: to_snake_case, coerce_scalar, parse_ini
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from hypernum.config.loader import (
    ConfigLoader,
    ConfigSource,
    coerce_scalar,
    normalize_keys,
    parse_ini,
    to_snake_case,
)
from hypernum.core.contracts import (
    SCHEMA_DIR,
    ConfigValidator,
    SchemaLoader,
    validate_config,
)
from hypernum.core.domain.config import (
    DEFAULT_CONFIG,
    DEFAULT_DECIMAL_PRECISION,
    DEFAULT_MAX_BITS,
    DEFAULT_MAX_COMPUTATION_STEPS,
    HypernumConfig,
    create_default_config,
)
from hypernum.core.domain.rounding import RoundingMode
from hypernum.core.errors import ConfigurationError, ValidationError


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Пустой домашний каталог, чтобы не читать настоящий ~/.hypernum"""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path


def _loader(project: Path, home: Path, **kwargs) -> ConfigLoader:
    kwargs.setdefault("environ", {})
    return ConfigLoader(base_dir=project, home_dir=home, **kwargs)


# =============================================================================
# ТЕСТЫ МОДЕЛИ
# =============================================================================


class TestHypernumConfig:
    def test_defaults(self) -> None:
        config = HypernumConfig()
        assert config.decimal_precision == DEFAULT_DECIMAL_PRECISION
        assert config.rounding_mode is RoundingMode.HALF_EVEN
        assert config.overflow_checking is True
        assert config.max_computation_steps == DEFAULT_MAX_COMPUTATION_STEPS
        assert config.max_bits == DEFAULT_MAX_BITS

    def test_camel_case_aliases(self) -> None:
        config = HypernumConfig.from_mapping(
            {"maxBits": 64, "roundingMode": "half_up", "overflowChecking": False}
        )
        assert config.max_bits == 64
        assert config.rounding_mode is RoundingMode.HALF_UP
        assert config.overflow_checking is False

    def test_snake_case_names(self) -> None:
        assert HypernumConfig(max_bits=32, decimal_precision=2).max_bits == 32

    def test_frozen(self) -> None:
        config = HypernumConfig()
        with pytest.raises(PydanticValidationError):
            config.max_bits = 1  # type: ignore[misc]

    @pytest.mark.parametrize(
        "data",
        [
            {"max_bits": 0},
            {"max_computation_steps": -5},
            {"decimal_precision": -1},
            {"rounding_mode": "BANKERS"},
            {"unknown_field": 1},
        ],
    )
    def test_from_mapping_rejects_invalid(self, data) -> None:
        with pytest.raises(ConfigurationError):
            HypernumConfig.from_mapping(data)

    def test_configuration_error_is_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            HypernumConfig.from_mapping({"max_bits": 0})

    def test_override_returns_new_copy(self) -> None:
        base = HypernumConfig(max_bits=64)
        relaxed = base.override(overflow_checking=False)
        assert relaxed.overflow_checking is False
        assert relaxed.max_bits == 64
        assert base.overflow_checking is True

    def test_override_ignores_none(self) -> None:
        base = HypernumConfig()
        assert base.override(max_bits=None) is base

    def test_override_validates(self) -> None:
        with pytest.raises(ConfigurationError):
            HypernumConfig().override(max_bits=0)

    def test_to_mapping_by_alias(self) -> None:
        data = HypernumConfig(max_bits=8).to_mapping(by_alias=True)
        assert data["maxBits"] == 8
        assert data["roundingMode"] == "HALF_EVEN"

    def test_default_profiles(self) -> None:
        assert create_default_config() is DEFAULT_CONFIG
        full = create_default_config("full")
        assert full.decimal_precision == 50
        assert full.max_bits > DEFAULT_MAX_BITS
        with pytest.raises(ConfigurationError):
            create_default_config("extreme")  # type: ignore[arg-type]


# =============================================================================
# ТЕСТЫ JSON SCHEMA
# =============================================================================


class TestSchemaValidation:
    def test_schema_file_is_valid(self) -> None:
        schema = SchemaLoader().load_schema("hypernum_config")
        assert schema["title"] == "HypernumConfig"
        assert (SCHEMA_DIR / "hypernum_config.json").is_file()

    def test_loader_caches_schema(self) -> None:
        loader = SchemaLoader()
        assert loader.load_schema("hypernum_config") is loader.load_schema("hypernum_config")

    def test_valid_data(self) -> None:
        validate_config({"max_bits": 64, "rounding_mode": "FLOOR"})
        assert ConfigValidator().is_valid({})

    @pytest.mark.parametrize(
        "data,path",
        [
            ({"max_bits": "64"}, "max_bits"),
            ({"max_bits": 0}, "max_bits"),
            ({"overflow_checking": 1}, "overflow_checking"),
            ({"rounding_mode": "half_even"}, "rounding_mode"),
            ({"decimal_precision": True}, "decimal_precision"),
        ],
    )
    def test_invalid_field(self, data, path) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(data)
        assert exc_info.value.context["path"] == path

    def test_unknown_property(self) -> None:
        validator = ConfigValidator()
        assert not validator.is_valid({"maxBits": 64})
        assert len(list(validator.iter_errors({"a": 1, "b": 2}))) == 1

    def test_missing_schema_dir(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError):
            SchemaLoader(tmp_path / "missing")

    def test_missing_schema(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError):
            SchemaLoader(tmp_path).load_schema("hypernum_config")

    def test_broken_schema_json(self, tmp_path) -> None:
        (tmp_path / "broken.json").write_text("{", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            SchemaLoader(tmp_path).load_schema("broken")

    def test_invalid_schema(self, tmp_path) -> None:
        (tmp_path / "bad.json").write_text(json.dumps({"type": 5}), encoding="utf-8")
        with pytest.raises(ConfigurationError):
            SchemaLoader(tmp_path).load_schema("bad")


# =============================================================================
# ТЕСТЫ ПАРСЕРОВ
# =============================================================================


class TestParsingHelpers:
    @pytest.mark.parametrize(
        "key,expected",
        [
            ("maxComputationSteps", "max_computation_steps"),
            ("MAX_BITS", "max_bits"),
            ("max-bits", "max_bits"),
            ("decimal_precision", "decimal_precision"),
        ],
    )
    def test_to_snake_case(self, key, expected) -> None:
        assert to_snake_case(key) == expected

    def test_normalize_keys_uppercases_mode(self) -> None:
        assert normalize_keys({"roundingMode": " half_up "}) == {"rounding_mode": "HALF_UP"}

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("true", True),
            ("FALSE", False),
            ("64", 64),
            ("-3", -3),
            ("'HALF_UP'", "HALF_UP"),
            ("FLOOR", "FLOOR"),
        ],
    )
    def test_coerce_scalar(self, raw, expected) -> None:
        assert coerce_scalar(raw) == expected

    def test_parse_ini(self) -> None:
        content = "\n".join(
            [
                "# hypernum settings",
                "[limits]",
                "max_bits = 128",
                "; legacy",
                "overflowChecking = false",
                "",
                'roundingMode = "floor"',
            ]
        )
        assert parse_ini(content) == {
            "max_bits": 128,
            "overflowChecking": False,
            "roundingMode": "floor",
        }

    def test_parse_ini_malformed_line(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            parse_ini("max_bits = 1\nbroken line")
        assert exc_info.value.context["line"] == 2


# =============================================================================
# ТЕСТЫ CONFIG LOADER
# =============================================================================


class TestConfigLoader:
    def test_defaults_without_sources(self, project, home) -> None:
        assert _loader(project, home).load_config() == DEFAULT_CONFIG

    def test_json_file(self, project, home) -> None:
        (project / "hypernum.config.json").write_text(
            json.dumps({"maxBits": 128, "roundingMode": "half_up"}), encoding="utf-8"
        )
        config = _loader(project, home).load_config()
        assert config.max_bits == 128
        assert config.rounding_mode is RoundingMode.HALF_UP

    def test_rc_file_ini(self, project, home) -> None:
        (project / ".hypernumrc").write_text(
            "decimal_precision = 4\noverflow_checking = false\n", encoding="utf-8"
        )
        config = _loader(project, home).load_config()
        assert config.decimal_precision == 4
        assert config.overflow_checking is False

    def test_rc_file_json(self, project, home) -> None:
        (project / ".hypernumrc").write_text(json.dumps({"maxBits": 99}), encoding="utf-8")
        assert _loader(project, home).load_config().max_bits == 99

    def test_env(self, project, home) -> None:
        loader = _loader(
            project,
            home,
            environ={"HYPERNUM_MAX_BITS": "512", "HYPERNUM_ROUNDING_MODE": "ceil", "PATH": "/bin"},
        )
        config = loader.load_config()
        assert config.max_bits == 512
        assert config.rounding_mode is RoundingMode.CEIL

    def test_env_ignores_unrelated_prefixed_variables(self, project, home) -> None:
        loader = _loader(
            project,
            home,
            environ={"HYPERNUM_HOME": "/opt/hn", "HYPERNUM_MAX_BITS": "64"},
        )
        assert loader.load_env() == {"max_bits": 64}
        assert loader.load_config().max_bits == 64

    def test_env_only_unrelated_variables(self, project, home) -> None:
        loader = _loader(project, home, environ={"HYPERNUM_HOME": "/opt/hn"})
        assert loader.load_env() == {}
        assert loader.load_config().max_bits == DEFAULT_MAX_BITS

    def test_precedence(self, project, home) -> None:
        (project / "hypernum.config.json").write_text(
            json.dumps({"maxBits": 128, "decimalPrecision": 5, "maxComputationSteps": 7}),
            encoding="utf-8",
        )
        (project / ".hypernumrc").write_text("max_bits = 256\ndecimal_precision = 6\n", encoding="utf-8")
        loader = _loader(project, home, environ={"HYPERNUM_MAX_BITS": "512"})

        config = loader.load_config()
        assert config.max_bits == 512
        assert config.decimal_precision == 6
        assert config.max_computation_steps == 7

        inline = loader.load_config({"maxBits": 1024})
        assert inline.max_bits == 1024
        assert inline.decimal_precision == 6

    def test_later_directory_wins(self, project, home) -> None:
        (project / "hypernum.config.json").write_text(json.dumps({"maxBits": 10}), encoding="utf-8")
        (project / "config").mkdir()
        (project / "config" / "hypernum.config.json").write_text(
            json.dumps({"maxBits": 20}), encoding="utf-8"
        )
        loader = _loader(project, home)
        assert loader.find_config_files()[ConfigSource.JSON_FILE].parent.name == "config"
        assert loader.load_config().max_bits == 20

    def test_home_directory(self, project, home) -> None:
        (home / ".hypernum").mkdir()
        (home / ".hypernum" / ".hypernumrc.json").write_text(
            json.dumps({"decimalPrecision": 3}), encoding="utf-8"
        )
        assert _loader(project, home).load_config().decimal_precision == 3

    def test_additional_paths(self, project, home, tmp_path) -> None:
        extra = tmp_path / "extra"
        extra.mkdir()
        (extra / "hypernum.config.json").write_text(json.dumps({"maxBits": 77}), encoding="utf-8")
        loader = _loader(project, home, additional_paths=[extra])
        assert loader.load_config().max_bits == 77

    def test_cache(self, project, home) -> None:
        path = project / "hypernum.config.json"
        path.write_text(json.dumps({"maxBits": 10}), encoding="utf-8")
        loader = _loader(project, home)
        first = loader.load_config()

        path.write_text(json.dumps({"maxBits": 30}), encoding="utf-8")
        assert loader.load_config() is first

        loader.clear_cache()
        assert loader.load_config().max_bits == 30

    def test_inline_result_not_cached(self, project, home) -> None:
        loader = _loader(project, home)
        loader.load_config({"max_bits": 5})
        assert loader.load_config().max_bits == DEFAULT_MAX_BITS

    @pytest.mark.parametrize(
        "filename,content",
        [
            ("hypernum.config.json", "{not json"),
            ("hypernum.config.json", json.dumps({"maxBits": 0})),
            ("hypernum.config.json", json.dumps({"colour": "blue"})),
            ("hypernum.config.json", json.dumps([1, 2])),
            (".hypernumrc", "max_bits"),
            (".hypernumrc", "max_bits = many"),
        ],
    )
    def test_invalid_sources(self, project, home, filename, content) -> None:
        (project / filename).write_text(content, encoding="utf-8")
        with pytest.raises(ConfigurationError):
            _loader(project, home).load_config()

    def test_invalid_env(self, project, home) -> None:
        loader = _loader(project, home, environ={"HYPERNUM_MAX_BITS": "lots"})
        with pytest.raises(ConfigurationError) as exc_info:
            loader.load_config()
        assert "environment" in exc_info.value.message

    def test_invalid_inline(self, project, home) -> None:
        with pytest.raises(ConfigurationError):
            _loader(project, home).load_config({"maxBits": -1})

    def test_save_and_reload(self, project, home) -> None:
        loader = _loader(project, home)
        original = HypernumConfig(max_bits=4096, rounding_mode="UP", decimal_precision=9)
        path = loader.save_config(original, project / "hypernum.config.json")

        saved = json.loads(path.read_text(encoding="utf-8"))
        assert saved["maxBits"] == 4096
        assert loader.load_config() == original

    def test_save_unsupported_name(self, project, home) -> None:
        with pytest.raises(ConfigurationError):
            _loader(project, home).save_config(DEFAULT_CONFIG, project / "hypernum.yaml")

    def test_source_for(self) -> None:
        assert ConfigLoader.source_for(".hypernumrc") is ConfigSource.RC_FILE
        assert ConfigLoader.source_for(".hypernumrc.json") is ConfigSource.JSON_FILE
        with pytest.raises(ConfigurationError):
            ConfigLoader.source_for("settings.toml")
