"""
Power — степень, корни, тетрация и супер-корень

Операции:
- power: square-and-multiply; Overflow Guard перед каждым возведением в квадрат
- sqrt / nth_root: целые корни (floor) методом Ньютона с бюджетом итераций
- sqrt_decimal: корень с config.decimal_precision дробными цифрами
- tetration: base↑↑height, вычисление справа налево, шаг на уровень
- super_root: обратная тетрация бисекцией по кандидатам-основаниям
- PowerTower: упорядоченная башня степеней с вычислением справа налево

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Отрицательный показатель → ValidationError (целочисленный домен)
2. Переполнение обнаруживается на первом шаге, который превысит лимит
3. Итерации ограничены max_computation_steps → ComputationLimitError
"""

from typing import Iterable

from hypernum.core.domain.config import HypernumConfig, resolve_config
from hypernum.core.errors import ComputationLimitError, ValidationError
from hypernum.core.math.normalizer import NumericInput, normalize, normalize_non_negative
from hypernum.core.math.overflow_guard import OverflowGuard
from hypernum.core.math.precision import (
    ScaledDecimal,
    ScaledDecimalInput,
    round_scaled,
)
from hypernum.logging_config import get_logger

logger = get_logger(__name__)


# =============================================================================
# POWER
# =============================================================================


def power(base: NumericInput, exponent: NumericInput, config: HypernumConfig | None = None) -> int:
    """
    base ** exponent методом square-and-multiply.

    Args:
        base: Основание
        exponent: Показатель (>= 0)
        config: Конфигурация (max_bits, overflow_checking)

    Returns:
        Точная степень

    Raises:
        ValidationError: exponent < 0
        NumericOverflowError: Результат или промежуточный квадрат длиннее max_bits

    Examples:
        >>> power(2, 10)
        1024
        >>> power(2, 1000, HypernumConfig(max_bits=64))  # doctest: +SKIP
        Traceback (most recent call last):
            ...
        NumericOverflowError: power exceeds bit limit: 1001 > 64
    """
    b = normalize(base)
    e = normalize(exponent)
    if e < 0:
        raise ValidationError(
            f"Negative exponent has no integer result: {e}", context={"base": b}
        )

    guard = OverflowGuard(config)
    guard.check_power(b, e)
    if e > 0:
        guard.check_result(b, "power")

    result = 1
    square = b
    while e:
        if e & 1:
            guard.check_multiply(result, square, "power")
            result *= square
        e >>= 1
        if e:
            guard.check_square(square, "power")
            square *= square

    return guard.check_result(result, "power")


# =============================================================================
# ROOTS
# =============================================================================


def _newton_root(value: int, degree: int, max_steps: int, operation: str) -> int:
    """
    floor(value ** (1/degree)) для value >= 0.

    Итерация Ньютона сверху: x_{k+1} = ((d-1)·x + v // x^(d-1)) // d,
    монотонно убывает до floor-корня; останов при x_{k+1} >= x_k.
    """
    if value < 2:
        return value
    if degree >= value.bit_length():
        return 1  # value < 2**degree

    x = 1 << -(-value.bit_length() // degree)  # 2^ceil(bits/degree) >= корень
    steps = 0
    while True:
        steps += 1
        if steps > max_steps:
            logger.debug("%s: no convergence after %d steps", operation, max_steps)
            raise ComputationLimitError(operation, max_steps)
        y = ((degree - 1) * x + value // x ** (degree - 1)) // degree
        if y >= x:
            return x
        x = y


def sqrt(value: NumericInput, config: HypernumConfig | None = None) -> int:
    """
    Целый квадратный корень floor(sqrt(value)).

    Raises:
        ValidationError: value < 0
        ComputationLimitError: Нет сходимости за max_computation_steps
    """
    config = resolve_config(config)
    v = normalize(value)
    if v < 0:
        raise ValidationError(f"Square root of negative value: {v}")
    return _newton_root(v, 2, config.max_computation_steps, "sqrt")


def nth_root(value: NumericInput, n: NumericInput, config: HypernumConfig | None = None) -> int:
    """
    Целый корень степени n (усечение к нулю для отрицательных при нечётном n).

    Raises:
        ValidationError: n < 1; отрицательное value при чётном n
        ComputationLimitError: Нет сходимости за max_computation_steps

    Examples:
        >>> nth_root(1000, 3)
        10
        >>> nth_root(-27, 3)
        -3
    """
    config = resolve_config(config)
    v = normalize(value)
    degree = normalize(n)
    if degree < 1:
        raise ValidationError(f"Root degree must be >= 1, got {degree}")
    if degree == 1:
        return v
    if v < 0:
        if degree % 2 == 0:
            raise ValidationError(f"Even root of negative value: {v}", context={"n": degree})
        return -_newton_root(-v, degree, config.max_computation_steps, "nth_root")
    return _newton_root(v, degree, config.max_computation_steps, "nth_root")


def sqrt_decimal(value: ScaledDecimalInput, config: HypernumConfig | None = None) -> ScaledDecimal:
    """
    Квадратный корень с config.decimal_precision дробными цифрами.

    Корень считается с запасной цифрой и «липким» битом неточности, поэтому
    ничья для HALF_* режимов возникает только при точном значении.

    Examples:
        >>> str(sqrt_decimal(2, HypernumConfig(decimal_precision=10)))
        '1.4142135624'
    """
    config = resolve_config(config)
    v = ScaledDecimal.parse(value)
    if v.unscaled < 0:
        raise ValidationError(f"Square root of negative value: {v}")

    precision = config.decimal_precision
    work_scale = max(precision + 1, -(-v.scale // 2))
    radicand = v.unscaled * 10 ** (2 * work_scale - v.scale)
    root = _newton_root(radicand, 2, config.max_computation_steps, "sqrt_decimal")
    sticky = 0 if root * root == radicand else 1

    candidate = ScaledDecimal(root * 10 + sticky, work_scale + 1)
    return round_scaled(candidate, precision, config.rounding_mode)


# =============================================================================
# TETRATION
# =============================================================================


def tetration(base: NumericInput, height: NumericInput, config: HypernumConfig | None = None) -> int:
    """
    base↑↑height: башня из height экземпляров base, справа налево.

    height = 0 → 1, height = 1 → base.

    Raises:
        ValidationError: height < 0; отрицательный промежуточный показатель
        NumericOverflowError: Уровень башни длиннее max_bits
        ComputationLimitError: height - 1 > max_computation_steps

    Examples:
        >>> tetration(2, 4)
        65536
        >>> tetration(3, 2)
        27
    """
    config = resolve_config(config)
    b = normalize(base)
    h = normalize_non_negative(height, "height")

    if h == 0:
        return 1
    if b == 1:
        return 1
    if b == 0:
        # 0↑↑h чередуется: 0^0 = 1, 0^1 = 0
        return 1 if h % 2 == 0 else 0

    guard = OverflowGuard(config)
    result = guard.check_result(b, "tetration")
    for step in range(1, h):
        if step > config.max_computation_steps:
            raise ComputationLimitError("tetration", config.max_computation_steps)
        result = power(b, result, config)
    return result


def _compare_tower(base: int, height: int, target: int) -> int:
    """
    Сравнение base↑↑height с target без материализации огромных башен.

    Для base >= 2: base**e имеет не меньше (L(base)-1)·e + 1 бит; если это
    уже длиннее target, башня заведомо больше.
    """
    if base == 1:
        return (1 > target) - (1 < target)

    limit_bits = target.bit_length()
    value = base
    for _ in range(height - 1):
        if (base.bit_length() - 1) * value + 1 > limit_bits:
            return 1
        value = base**value
    return (value > target) - (value < target)


def super_root(value: NumericInput, height: NumericInput, config: HypernumConfig | None = None) -> int:
    """
    Обратная тетрация: целое b >= 1 такое, что b↑↑height == value.

    Бисекция по монотонной функции b ↦ b↑↑height; итоговый кандидат
    проверяется через tetration().

    Raises:
        ValidationError: height < 1, value < 1 или точного целого корня нет
        ComputationLimitError: Бисекция превысила max_computation_steps

    Examples:
        >>> super_root(65536, 4)
        2
        >>> super_root(27, 2)
        3
    """
    config = resolve_config(config)
    v = normalize(value)
    h = normalize_non_negative(height, "height")
    if h == 0:
        raise ValidationError("Super-root of height 0 is undefined (every base gives 1)")
    if v < 1:
        raise ValidationError(f"Super-root requires value >= 1, got {v}")
    if h == 1:
        return v
    if v == 1:
        return 1

    # b↑↑h >= b^b >= 2^b для b >= 2, поэтому b <= log2(v)
    lo, hi = 1, max(2, v.bit_length())
    steps = 0
    while lo <= hi:
        steps += 1
        if steps > config.max_computation_steps:
            raise ComputationLimitError("super_root", config.max_computation_steps)
        mid = (lo + hi) // 2
        cmp = _compare_tower(mid, h, v)
        if cmp == 0:
            if tetration(mid, h, config) != v:
                raise ValidationError(
                    "Super-root candidate failed validation", context={"candidate": mid}
                )
            return mid
        if cmp < 0:
            lo = mid + 1
        else:
            hi = mid - 1

    raise ValidationError(
        f"No integer super-root of height {h} for value",
        context={"value_bits": v.bit_length(), "height": h},
    )


# =============================================================================
# POWER TOWER
# =============================================================================


class PowerTower:
    """
    Башня степеней a1^(a2^(...^an)), вычисляемая справа налево.

    Уровни хранятся в порядке снизу вверх: levels[0] — основание башни.
    Результат кэшируется до следующего изменения.

    Examples:
        >>> tower = PowerTower.from_tetration(2, 3)
        >>> tower.evaluate()
        16
    """

    def __init__(self, levels: Iterable[NumericInput] = (), config: HypernumConfig | None = None):
        self.config = resolve_config(config)
        self._levels: list[int] = []
        self._cached: int | None = None
        for level in levels:
            self.push(level)

    @classmethod
    def from_tetration(
        cls, base: NumericInput, height: NumericInput, config: HypernumConfig | None = None
    ) -> "PowerTower":
        h = normalize_non_negative(height, "height")
        return cls([base] * h, config)

    def push(self, value: NumericInput) -> None:
        """
        Добавление уровня на вершину башни.

        Raises:
            ComputationLimitError: Глубина превысила max_computation_steps
        """
        v = normalize(value)
        if len(self._levels) + 1 > self.config.max_computation_steps:
            raise ComputationLimitError("power_tower", self.config.max_computation_steps)
        self._levels.append(v)
        self._cached = None

    def clear(self) -> None:
        self._levels.clear()
        self._cached = None

    @property
    def depth(self) -> int:
        return len(self._levels)

    @property
    def levels(self) -> tuple[int, ...]:
        return tuple(self._levels)

    def __len__(self) -> int:
        return len(self._levels)

    def evaluate(self) -> int:
        """
        Значение башни (пустая башня → 1).

        Raises:
            ValidationError / NumericOverflowError: из power()
        """
        if self._cached is not None:
            return self._cached
        result = 1
        if self._levels:
            result = self._levels[-1]
            for level in reversed(self._levels[:-1]):
                result = power(level, result, self.config)
        self._cached = result
        return result
