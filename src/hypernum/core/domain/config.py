"""
HypernumConfig — модель конфигурации вычислений

Immutable Pydantic модель. Создаётся один раз на вызов или на долгоживущий
контекст и дальше только читается. Переопределение на один вызов делается
через override(), который возвращает новую провалидированную копию.

Поля:
- decimal_precision: количество дробных цифр для десятичных результатов
- rounding_mode: режим округления (RoundingMode)
- overflow_checking: включение Overflow Guard (False → точный результат любой длины)
- max_computation_steps: бюджет итераций/кадров стека
- max_bits: лимит битовой длины значений (и ширина битовых операций)

Внешние источники (JSON, env) могут использовать camelCase:
decimalPrecision, roundingMode, overflowChecking, maxComputationSteps, maxBits.
"""

from typing import Any, Final, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from hypernum.core.errors import ConfigurationError

from .rounding import RoundingMode, coerce_rounding_mode

# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_DECIMAL_PRECISION: Final[int] = 20
DEFAULT_MAX_COMPUTATION_STEPS: Final[int] = 100_000
DEFAULT_MAX_BITS: Final[int] = 1_048_576  # 2^20 бит ≈ 315 653 десятичных цифр


# =============================================================================
# CONFIG MODEL
# =============================================================================


class HypernumConfig(BaseModel):
    """
    Конфигурация вычислений hypernum.

    Examples:
        >>> config = HypernumConfig(max_bits=64)
        >>> relaxed = config.override(overflow_checking=False)
        >>> config.overflow_checking, relaxed.overflow_checking
        (True, False)
    """

    decimal_precision: int = Field(
        DEFAULT_DECIMAL_PRECISION, ge=0, description="Количество дробных цифр"
    )
    rounding_mode: RoundingMode = Field(
        RoundingMode.HALF_EVEN, description="Режим округления"
    )
    overflow_checking: bool = Field(True, description="Включить проверки переполнения")
    max_computation_steps: int = Field(
        DEFAULT_MAX_COMPUTATION_STEPS, gt=0, description="Бюджет шагов итераций"
    )
    max_bits: int = Field(DEFAULT_MAX_BITS, gt=0, description="Лимит битовой длины")

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("rounding_mode", mode="before")
    @classmethod
    def validate_rounding_mode(cls, v: Any) -> RoundingMode:
        """Имя режима без учёта регистра ("half_even" → HALF_EVEN)"""
        return coerce_rounding_mode(v)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "HypernumConfig":
        """
        Построение из dict (snake_case или camelCase ключи).

        Raises:
            ConfigurationError: Если данные не проходят валидацию
        """
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigurationError(
                "Invalid hypernum configuration",
                context={"errors": e.error_count(), "detail": e.errors()[0]["msg"]},
            ) from e

    def override(self, **changes: Any) -> "HypernumConfig":
        """
        Новая конфигурация с изменёнными полями (исходная не меняется).

        Значения None игнорируются, что удобно для опциональных kwargs.

        Raises:
            ConfigurationError: Неизвестное поле или невалидное значение
        """
        updates = {k: v for k, v in changes.items() if v is not None}
        if not updates:
            return self
        return self.from_mapping({**self.model_dump(), **updates})

    def to_mapping(self, by_alias: bool = False) -> dict[str, Any]:
        """Сериализация в JSON-совместимый dict."""
        return self.model_dump(mode="json", by_alias=by_alias)


DEFAULT_CONFIG: Final[HypernumConfig] = HypernumConfig()


def create_default_config(kind: Literal["basic", "full"] = "basic") -> HypernumConfig:
    """
    Профили по умолчанию.

    - basic: стандартные лимиты
    - full: увеличенные точность и бюджеты для тяжёлых вычислений
    """
    if kind == "basic":
        return DEFAULT_CONFIG
    if kind == "full":
        return HypernumConfig(
            decimal_precision=50,
            max_computation_steps=DEFAULT_MAX_COMPUTATION_STEPS * 10,
            max_bits=DEFAULT_MAX_BITS * 8,
        )
    raise ConfigurationError(f"Unknown default config kind: {kind!r}")


def resolve_config(config: HypernumConfig | None = None) -> HypernumConfig:
    """Конфигурация вызова: переданная или DEFAULT_CONFIG."""
    return DEFAULT_CONFIG if config is None else config
