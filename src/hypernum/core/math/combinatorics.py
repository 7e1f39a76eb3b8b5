"""
Combinatorics — факториалы, биномиальные коэффициенты и родственные функции

Все произведения накапливаются итеративно; Overflow Guard проверяет
каждый шаг умножения.

FactorialCache принадлежит вызывающему коду (фасаду или тесту), на уровне
модуля кэша нет. Кэш обновляется только после успешного вычисления.
"""

from bisect import bisect_right, insort
from typing import Final

from hypernum.core.domain.config import HypernumConfig, resolve_config
from hypernum.core.errors import NumericOverflowError, ValidationError
from hypernum.core.math.normalizer import NumericInput, normalize, normalize_non_negative
from hypernum.core.math.overflow_guard import OverflowGuard
from hypernum.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_FACTORIAL_LIMIT: Final[int] = 1000

# Детерминированный набор оснований Миллера–Рабина для n < 3.3 * 10^24
_MR_BASES: Final[tuple[int, ...]] = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41)
_SMALL_PRIMES: Final[tuple[int, ...]] = _MR_BASES + (43, 47, 53, 59, 61, 67, 71, 73, 79, 83, 89, 97)


# =============================================================================
# FACTORIAL CACHE
# =============================================================================


class FactorialCache:
    """
    Кэш факториалов: n → n!.

    Вычисление n! продолжается с наибольшего закэшированного k <= n.

    Examples:
        >>> cache = FactorialCache()
        >>> factorial(10, cache=cache)
        3628800
        >>> cache.nearest(12)
        (10, 3628800)
    """

    def __init__(self) -> None:
        self._values: dict[int, int] = {0: 1}
        self._keys: list[int] = [0]

    def get(self, n: int) -> int | None:
        return self._values.get(n)

    def nearest(self, n: int) -> tuple[int, int]:
        """Наибольший закэшированный k <= n и k!."""
        k = self._keys[bisect_right(self._keys, n) - 1]
        return k, self._values[k]

    def store(self, n: int, value: int) -> None:
        if n not in self._values:
            insort(self._keys, n)
        self._values[n] = value

    def clear(self) -> None:
        self._values = {0: 1}
        self._keys = [0]

    def __contains__(self, n: object) -> bool:
        return n in self._values

    def __len__(self) -> int:
        return len(self._values)


# =============================================================================
# FACTORIALS
# =============================================================================


def _running_product(
    start_value: int, factors: range, guard: OverflowGuard, operation: str
) -> int:
    result = start_value
    for factor in factors:
        guard.check_multiply(result, factor, operation)
        result *= factor
    return guard.check_result(result, operation)


def factorial(
    n: NumericInput,
    config: HypernumConfig | None = None,
    *,
    max_value: int = DEFAULT_FACTORIAL_LIMIT,
    cache: FactorialCache | None = None,
) -> int:
    """
    n! итеративно.

    Args:
        n: Неотрицательное целое
        config: Конфигурация
        max_value: Наибольший допустимый n при включённой проверке переполнения
        cache: Кэш вызывающего кода (опционально)

    Raises:
        ValidationError: n < 0
        NumericOverflowError: n > max_value или результат длиннее max_bits

    Examples:
        >>> factorial(5)
        120
        >>> factorial(0)
        1
    """
    config = resolve_config(config)
    k = normalize_non_negative(n, "n")
    guard = OverflowGuard(config)

    if guard.enabled and k > max_value:
        # n! при n > max_value отклоняется до вычисления
        logger.debug("factorial(%d) rejected: max_value=%d", k, max_value)
        raise NumericOverflowError(
            "factorial",
            config.max_bits,
            k,  # n! >= 2^(n-1), т.е. не короче n бит
            context={"n": k, "max_value": max_value},
            message=f"factorial argument {k} exceeds max_value {max_value}",
        )

    if cache is not None:
        cached = cache.get(k)
        if cached is not None:
            return guard.check_result(cached, "factorial")
        start, start_value = cache.nearest(k)
    else:
        start, start_value = 0, 1

    result = _running_product(start_value, range(start + 1, k + 1), guard, "factorial")
    if cache is not None:
        cache.store(k, result)
    return result


def binomial(n: NumericInput, k: NumericInput, config: HypernumConfig | None = None) -> int:
    """
    Биномиальный коэффициент C(n, k).

    Симметрия C(n, k) = C(n, n-k); на каждом шаге сначала умножение,
    затем точное деление: result = result * (n - i) // (i + 1).

    Raises:
        ValidationError: n < 0 или k < 0

    Examples:
        >>> binomial(10, 3)
        120
        >>> binomial(3, 5)
        0
    """
    total = normalize_non_negative(n, "n")
    chosen = normalize_non_negative(k, "k")
    if chosen > total:
        return 0

    chosen = min(chosen, total - chosen)
    guard = OverflowGuard(config)
    result = 1
    for i in range(chosen):
        guard.check_multiply(result, total - i, "binomial")
        result = result * (total - i) // (i + 1)
    return guard.check_result(result, "binomial")


def subfactorial(n: NumericInput, config: HypernumConfig | None = None) -> int:
    """
    !n — число беспорядков: !0 = 1, !1 = 0, !n = (n-1)(!(n-1) + !(n-2)).

    Examples:
        >>> subfactorial(4)
        9
    """
    k = normalize_non_negative(n, "n")
    guard = OverflowGuard(config)
    previous, current = 1, 0  # !0, !1
    if k == 0:
        return previous
    for i in range(2, k + 1):
        total = current + previous
        guard.check_multiply(total, i - 1, "subfactorial")
        previous, current = current, (i - 1) * total
    return guard.check_result(current, "subfactorial")


def rising_factorial(x: NumericInput, n: NumericInput, config: HypernumConfig | None = None) -> int:
    """
    Возрастающий факториал x^(n) = x (x+1) ... (x+n-1).

    Examples:
        >>> rising_factorial(3, 3)
        60
    """
    base = normalize(x)
    count = normalize_non_negative(n, "n")
    return _running_product(1, range(base, base + count), OverflowGuard(config), "rising_factorial")


def falling_factorial(x: NumericInput, n: NumericInput, config: HypernumConfig | None = None) -> int:
    """
    Убывающий факториал x_(n) = x (x-1) ... (x-n+1).

    Examples:
        >>> falling_factorial(5, 2)
        20
    """
    base = normalize(x)
    count = normalize_non_negative(n, "n")
    return _running_product(
        1, range(base, base - count, -1), OverflowGuard(config), "falling_factorial"
    )


def multi_factorial(n: NumericInput, k: NumericInput, config: HypernumConfig | None = None) -> int:
    """
    Мультифакториал n!(k) = n (n-k) (n-2k) ... (> 0). k = 2 даёт двойной факториал.

    Raises:
        ValidationError: n < 0 или k < 1

    Examples:
        >>> multi_factorial(9, 2)
        945
    """
    value = normalize_non_negative(n, "n")
    step = normalize(k)
    if step < 1:
        raise ValidationError(f"multi_factorial step must be >= 1, got {step}")
    return _running_product(1, range(value, 0, -step), OverflowGuard(config), "multi_factorial")


# =============================================================================
# PRIMES
# =============================================================================


def is_prime(n: NumericInput) -> bool:
    """
    Проверка простоты: пробное деление на малые простые + Миллер–Рабин.

    Для n < 3.3 * 10^24 ответ детерминирован; для больших n набор
    оснований даёт вероятность ошибки не выше 4^-13.
    """
    value = normalize(n)
    if value < 2:
        return False
    for p in _SMALL_PRIMES:
        if value % p == 0:
            return value == p

    d, s = value - 1, 0
    while d % 2 == 0:
        d //= 2
        s += 1

    for a in _MR_BASES:
        x = pow(a, d, value)
        if x in (1, value - 1):
            continue
        for _ in range(s - 1):
            x = x * x % value
            if x == value - 1:
                break
        else:
            return False
    return True


def primorial(n: NumericInput, config: HypernumConfig | None = None) -> int:
    """
    Примориал n#: произведение простых p <= n.

    Длина ограничена только проверкой переполнения на каждом множителе
    (log2(n#) растёт примерно как 1.44·n).

    Raises:
        NumericOverflowError: Произведение превысило max_bits

    Examples:
        >>> primorial(10)
        210
    """
    limit = normalize_non_negative(n, "n")
    config = resolve_config(config)
    guard = OverflowGuard(config)
    if limit < 2:
        return 1
    result = 2
    for candidate in range(3, limit + 1, 2):
        if is_prime(candidate):
            guard.check_multiply(result, candidate, "primorial")
            result *= candidate
    return guard.check_result(result, "primorial")
