"""
Hypernum — фасад над численным ядром и структурами

Держит конфигурацию и FactorialCache экземпляра. Любая операция
принимает именованные переопределения конфигурации на один вызов:

    hn = create_hypernum({"maxBits": 64})
    hn.power(2, 1000, overflow_checking=False)
"""

from typing import Any, Mapping, Optional, Union

from hypernum.config.loader import ConfigLoader
from hypernum.core.domain.config import HypernumConfig, resolve_config
from hypernum.core.domain.rounding import RoundingMode
from hypernum.core.math import arithmetic, bitwise, combinatorics
from hypernum.core.math.arithmetic import compare as default_comparator
from hypernum.core.math.combinatorics import DEFAULT_FACTORIAL_LIMIT, FactorialCache
from hypernum.core.math.normalizer import NumericInput
from hypernum.core.math.power import PowerTower, nth_root, sqrt, sqrt_decimal, super_root, tetration
from hypernum.core.math.power import power as raise_power
from hypernum.core.math.precision import ScaledDecimal, ScaledDecimalInput, round_scaled
from hypernum.structures.ackermann import AckermannStructure
from hypernum.structures.big_array import AggregateKind, BigArray, Comparator
from hypernum.structures.number_tree import NumberTree

ConfigInput = Union[HypernumConfig, Mapping[str, Any], None]


class Hypernum:
    """
    Экземпляр вычислителя с собственной конфигурацией и кэшами.

    Examples:
        >>> hn = Hypernum(HypernumConfig(max_bits=64))
        >>> hn.add(2**40, 1)
        1099511627777
        >>> len(str(hn.power(2, 1000, overflow_checking=False)))
        302
    """

    def __init__(self, config: ConfigInput = None):
        if config is None or isinstance(config, HypernumConfig):
            self.config = resolve_config(config)
        else:
            self.config = HypernumConfig.from_mapping(dict(config))
        self.factorial_cache = FactorialCache()

    @classmethod
    def from_sources(
        cls, loader: Optional[ConfigLoader] = None, **inline: Any
    ) -> "Hypernum":
        """Конфигурация из файлов и окружения (см. ConfigLoader)."""
        loader = loader or ConfigLoader()
        return cls(loader.load_config(inline or None))

    def _cfg(self, overrides: Mapping[str, Any]) -> HypernumConfig:
        return self.config.override(**overrides)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def add(self, a: NumericInput, b: NumericInput, **overrides: Any) -> int:
        return arithmetic.add(a, b, self._cfg(overrides))

    def subtract(self, a: NumericInput, b: NumericInput, **overrides: Any) -> int:
        return arithmetic.subtract(a, b, self._cfg(overrides))

    def multiply(self, a: NumericInput, b: NumericInput, **overrides: Any) -> int:
        return arithmetic.multiply(a, b, self._cfg(overrides))

    def divide(self, a: NumericInput, b: NumericInput, **overrides: Any) -> int:
        return arithmetic.divide(a, b, self._cfg(overrides))

    def divide_decimal(self, a: NumericInput, b: NumericInput, **overrides: Any) -> ScaledDecimal:
        return arithmetic.divide_decimal(a, b, self._cfg(overrides))

    def mod(self, a: NumericInput, b: NumericInput, **overrides: Any) -> int:
        return arithmetic.mod(a, b, self._cfg(overrides))

    def remainder(self, a: NumericInput, b: NumericInput, **overrides: Any) -> int:
        return arithmetic.remainder(a, b, self._cfg(overrides))

    def lcm(self, a: NumericInput, b: NumericInput, **overrides: Any) -> int:
        return arithmetic.lcm(a, b, self._cfg(overrides))

    def gcd(self, a: NumericInput, b: NumericInput) -> int:
        return arithmetic.gcd(a, b)

    def abs(self, a: NumericInput) -> int:
        return arithmetic.absolute(a)

    def negate(self, a: NumericInput) -> int:
        return arithmetic.negate(a)

    def compare(self, a: NumericInput, b: NumericInput) -> int:
        return arithmetic.compare(a, b)

    def round(
        self,
        value: ScaledDecimalInput,
        precision: Optional[int] = None,
        mode: Union[RoundingMode, str, None] = None,
    ) -> ScaledDecimal:
        """Округление до precision дробных цифр (по умолчанию из конфигурации)."""
        return round_scaled(
            value,
            self.config.decimal_precision if precision is None else precision,
            self.config.rounding_mode if mode is None else mode,
        )

    # -------------------------------------------------------------------------
    # Bitwise
    # -------------------------------------------------------------------------

    def bit_and(self, a: NumericInput, b: NumericInput, *, strict: bool = True, **overrides: Any) -> int:
        return bitwise.bit_and(a, b, self._cfg(overrides), strict=strict)

    def bit_or(self, a: NumericInput, b: NumericInput, *, strict: bool = True, **overrides: Any) -> int:
        return bitwise.bit_or(a, b, self._cfg(overrides), strict=strict)

    def bit_xor(self, a: NumericInput, b: NumericInput, *, strict: bool = True, **overrides: Any) -> int:
        return bitwise.bit_xor(a, b, self._cfg(overrides), strict=strict)

    def bit_not(self, a: NumericInput, *, strict: bool = True, **overrides: Any) -> int:
        return bitwise.bit_not(a, self._cfg(overrides), strict=strict)

    def left_shift(self, a: NumericInput, shift: NumericInput, *, strict: bool = True, **overrides: Any) -> int:
        return bitwise.left_shift(a, shift, self._cfg(overrides), strict=strict)

    def right_shift(self, a: NumericInput, shift: NumericInput, *, strict: bool = True, **overrides: Any) -> int:
        return bitwise.right_shift(a, shift, self._cfg(overrides), strict=strict)

    # -------------------------------------------------------------------------
    # Power
    # -------------------------------------------------------------------------

    def power(self, base: NumericInput, exponent: NumericInput, **overrides: Any) -> int:
        return raise_power(base, exponent, self._cfg(overrides))

    def sqrt(self, value: NumericInput, **overrides: Any) -> int:
        return sqrt(value, self._cfg(overrides))

    def sqrt_decimal(self, value: ScaledDecimalInput, **overrides: Any) -> ScaledDecimal:
        return sqrt_decimal(value, self._cfg(overrides))

    def nth_root(self, value: NumericInput, n: NumericInput, **overrides: Any) -> int:
        return nth_root(value, n, self._cfg(overrides))

    def tetration(self, base: NumericInput, height: NumericInput, **overrides: Any) -> int:
        return tetration(base, height, self._cfg(overrides))

    def super_root(self, value: NumericInput, height: NumericInput, **overrides: Any) -> int:
        return super_root(value, height, self._cfg(overrides))

    # -------------------------------------------------------------------------
    # Combinatorics
    # -------------------------------------------------------------------------

    def factorial(
        self, n: NumericInput, *, max_value: int = DEFAULT_FACTORIAL_LIMIT, **overrides: Any
    ) -> int:
        return combinatorics.factorial(
            n, self._cfg(overrides), max_value=max_value, cache=self.factorial_cache
        )

    def binomial(self, n: NumericInput, k: NumericInput, **overrides: Any) -> int:
        return combinatorics.binomial(n, k, self._cfg(overrides))

    def subfactorial(self, n: NumericInput, **overrides: Any) -> int:
        return combinatorics.subfactorial(n, self._cfg(overrides))

    def rising_factorial(self, x: NumericInput, n: NumericInput, **overrides: Any) -> int:
        return combinatorics.rising_factorial(x, n, self._cfg(overrides))

    def falling_factorial(self, x: NumericInput, n: NumericInput, **overrides: Any) -> int:
        return combinatorics.falling_factorial(x, n, self._cfg(overrides))

    def multi_factorial(self, n: NumericInput, k: NumericInput, **overrides: Any) -> int:
        return combinatorics.multi_factorial(n, k, self._cfg(overrides))

    def primorial(self, n: NumericInput, **overrides: Any) -> int:
        return combinatorics.primorial(n, self._cfg(overrides))

    def is_prime(self, n: NumericInput) -> bool:
        return combinatorics.is_prime(n)

    # -------------------------------------------------------------------------
    # Structures
    # -------------------------------------------------------------------------

    def create_array(
        self,
        *,
        initial_capacity: int = 16,
        growth_factor: float = 2.0,
        aggregate: AggregateKind = AggregateKind.MAX,
        comparator: Comparator = default_comparator,
    ) -> BigArray:
        return BigArray(
            self.config,
            initial_capacity=initial_capacity,
            growth_factor=growth_factor,
            aggregate=aggregate,
            comparator=comparator,
        )

    def create_tree(self, comparator: Comparator = default_comparator) -> NumberTree:
        return NumberTree(comparator)

    def create_ackermann(self, **overrides: Any) -> AckermannStructure:
        return AckermannStructure(self._cfg(overrides))

    def create_power_tower(self, *levels: NumericInput) -> PowerTower:
        return PowerTower(levels, self.config)


def create_hypernum(config: ConfigInput = None) -> Hypernum:
    """
    Фабрика фасада.

    Args:
        config: HypernumConfig, словарь (snake_case или camelCase) или None

    Raises:
        ConfigurationError: Невалидный словарь конфигурации
    """
    return Hypernum(config)
