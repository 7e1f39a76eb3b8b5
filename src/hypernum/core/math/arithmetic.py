"""
Arithmetic Kernel — операции над неограниченными целыми

Каждая операция: Normalizer → Overflow Guard (pre-check) → вычисление →
Overflow Guard (post-check).

Деление и остаток:
- divide: частное, округлённое по config.rounding_mode
- divide_decimal: ScaledDecimal с config.decimal_precision дробных цифр
- mod: математический модуль (знак делителя), как Python %
- remainder: усечённый остаток (знак делимого)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Делитель, нормализованный в ноль → DivisionByZeroError (ValidationError)
2. Без молчаливых значений по умолчанию: либо результат, либо исключение
"""

import math

from hypernum.core.domain.config import HypernumConfig, resolve_config
from hypernum.core.errors import DivisionByZeroError, ValidationError
from hypernum.core.math.normalizer import NumericInput, normalize
from hypernum.core.math.overflow_guard import OverflowGuard, bit_size
from hypernum.core.math.precision import ScaledDecimal, divide_rounded, scaled_division

# =============================================================================
# BASIC OPERATIONS
# =============================================================================


def add(a: NumericInput, b: NumericInput, config: HypernumConfig | None = None) -> int:
    """
    Сумма a + b.

    Examples:
        >>> add("12345678901234567890", "98765432109876543210")
        111111111011111111100
    """
    x, y = normalize(a), normalize(b)
    guard = OverflowGuard(config)
    guard.check_add(x, y)
    return guard.check_result(x + y, "add")


def subtract(a: NumericInput, b: NumericInput, config: HypernumConfig | None = None) -> int:
    """Разность a - b."""
    x, y = normalize(a), normalize(b)
    guard = OverflowGuard(config)
    guard.check_subtract(x, y)
    return guard.check_result(x - y, "subtract")


def multiply(a: NumericInput, b: NumericInput, config: HypernumConfig | None = None) -> int:
    """Произведение a * b (pre-check по L(a) + L(b) - 1)."""
    x, y = normalize(a), normalize(b)
    guard = OverflowGuard(config)
    guard.check_multiply(x, y)
    return guard.check_result(x * y, "multiply")


def _nonzero_divisor(value: NumericInput, dividend: int) -> int:
    divisor = normalize(value)
    if divisor == 0:
        raise DivisionByZeroError("Division by zero", context={"dividend": dividend})
    return divisor


def divide(a: NumericInput, b: NumericInput, config: HypernumConfig | None = None) -> int:
    """
    Целочисленное деление с округлением по config.rounding_mode.

    Raises:
        DivisionByZeroError: Если b == 0

    Examples:
        >>> divide(7, 2)  # HALF_EVEN по умолчанию
        4
        >>> divide(7, 2, HypernumConfig(rounding_mode="DOWN"))
        3
    """
    config = resolve_config(config)
    x = normalize(a)
    y = _nonzero_divisor(b, x)
    guard = OverflowGuard(config)
    guard.check_bits(max(bit_size(x), bit_size(y)), "divide")
    return divide_rounded(x, y, config.rounding_mode)


def divide_decimal(
    a: NumericInput, b: NumericInput, config: HypernumConfig | None = None
) -> ScaledDecimal:
    """
    Деление с десятичным результатом (config.decimal_precision цифр).

    Examples:
        >>> str(divide_decimal(1, 3, HypernumConfig(decimal_precision=4)))
        '0.3333'
    """
    config = resolve_config(config)
    x = normalize(a)
    y = _nonzero_divisor(b, x)
    OverflowGuard(config).check_bits(max(bit_size(x), bit_size(y)), "divide")
    return scaled_division(x, y, config.decimal_precision, config.rounding_mode)


def mod(a: NumericInput, b: NumericInput, config: HypernumConfig | None = None) -> int:
    """
    Математический модуль: результат имеет знак делителя.

    Examples:
        >>> mod(-7, 3)
        2
    """
    x = normalize(a)
    y = _nonzero_divisor(b, x)
    OverflowGuard(config).check_bits(max(bit_size(x), bit_size(y)), "mod")
    return x % y


def remainder(a: NumericInput, b: NumericInput, config: HypernumConfig | None = None) -> int:
    """
    Усечённый остаток: результат имеет знак делимого.

    Examples:
        >>> remainder(-7, 3)
        -1
    """
    x = normalize(a)
    y = _nonzero_divisor(b, x)
    OverflowGuard(config).check_bits(max(bit_size(x), bit_size(y)), "remainder")
    r = abs(x) % abs(y)
    return -r if x < 0 else r


def negate(a: NumericInput) -> int:
    return -normalize(a)


def absolute(a: NumericInput) -> int:
    return abs(normalize(a))


def sign(a: NumericInput) -> int:
    """-1, 0 или 1."""
    x = normalize(a)
    return (x > 0) - (x < 0)


def gcd(a: NumericInput, b: NumericInput) -> int:
    """Наибольший общий делитель (всегда >= 0; gcd(0, 0) == 0)."""
    return math.gcd(normalize(a), normalize(b))


def lcm(a: NumericInput, b: NumericInput, config: HypernumConfig | None = None) -> int:
    """Наименьшее общее кратное (>= 0; lcm(0, x) == 0)."""
    x, y = normalize(a), normalize(b)
    if x == 0 or y == 0:
        return 0
    reduced = abs(x) // math.gcd(x, y)
    guard = OverflowGuard(config)
    guard.check_multiply(reduced, y, "lcm")
    return guard.check_result(reduced * abs(y), "lcm")


# =============================================================================
# COMPARISONS
# =============================================================================


def compare(a: NumericInput, b: NumericInput) -> int:
    """
    Трёхзначное сравнение.

    Returns:
        -1 если a < b, 0 если a == b, +1 если a > b
    """
    x, y = normalize(a), normalize(b)
    return (x > y) - (x < y)


def equals(a: NumericInput, b: NumericInput) -> bool:
    return compare(a, b) == 0


def less_than(a: NumericInput, b: NumericInput) -> bool:
    return compare(a, b) < 0


def less_equal(a: NumericInput, b: NumericInput) -> bool:
    return compare(a, b) <= 0


def greater_than(a: NumericInput, b: NumericInput) -> bool:
    return compare(a, b) > 0


def greater_equal(a: NumericInput, b: NumericInput) -> bool:
    return compare(a, b) >= 0


def minimum(*values: NumericInput) -> int:
    """
    Минимум из одного и более значений.

    Raises:
        ValidationError: Если значений нет
    """
    if not values:
        raise ValidationError("minimum() requires at least one value")
    return min(normalize(v) for v in values)


def maximum(*values: NumericInput) -> int:
    """
    Максимум из одного и более значений.

    Raises:
        ValidationError: Если значений нет
    """
    if not values:
        raise ValidationError("maximum() requires at least one value")
    return max(normalize(v) for v in values)


def clamp(value: NumericInput, lower: NumericInput, upper: NumericInput) -> int:
    """
    Ограничение значения диапазоном [lower, upper].

    Raises:
        ValidationError: Если lower > upper
    """
    x, lo, hi = normalize(value), normalize(lower), normalize(upper)
    if lo > hi:
        raise ValidationError(f"lower must be <= upper, got {lo} > {hi}")
    return max(lo, min(hi, x))
