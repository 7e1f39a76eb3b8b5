"""
Overflow Guard — проверки битовой длины операндов и результатов

Значение переполняет лимит, если abs(value).bit_length() > max_bits.

Проверки двух видов:
- Pre-check: по точной нижней оценке длины результата. Если даже нижняя
  оценка больше лимита, операция заведомо переполнится → отказ ДО вычисления.
- Post-check: длину результата можно узнать только после вычисления
  (check_result).

Нижние оценки битовой длины (L(x) = abs(x).bit_length(), x != 0):
    a + b (одного знака):   L >= max(L(a), L(b))
    a * b:                  L >= L(a) + L(b) - 1
    base ** exp:            L >= (L(base) - 1) * exp + 1

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. overflow_checking=False → все проверки no-op, результат точный любой длины
2. Ошибка всегда NumericOverflowError с operation/limit/observed в context
"""

from hypernum.core.domain.config import HypernumConfig, resolve_config
from hypernum.core.errors import NumericOverflowError
from hypernum.logging_config import get_logger

logger = get_logger(__name__)


def bit_size(value: int) -> int:
    """Битовая длина модуля значения."""
    return abs(value).bit_length()


class OverflowGuard:
    """
    Проверки переполнения по конфигурации вызова.

    Examples:
        >>> guard = OverflowGuard(HypernumConfig(max_bits=64))
        >>> guard.check_multiply(2**40, 2**40)  # doctest: +SKIP
        Traceback (most recent call last):
            ...
        NumericOverflowError: multiply exceeds bit limit: 81 > 64
    """

    def __init__(self, config: HypernumConfig | None = None):
        self.config = resolve_config(config)

    @property
    def enabled(self) -> bool:
        return self.config.overflow_checking

    @property
    def max_bits(self) -> int:
        return self.config.max_bits

    def check_bits(self, bit_count: int, operation: str) -> None:
        """
        Проверка известного (или гарантированного) количества бит.

        Raises:
            NumericOverflowError: Если bit_count > max_bits
        """
        if not self.enabled:
            return
        if bit_count > self.config.max_bits:
            logger.debug(
                "overflow in %s: %d bits > limit %d", operation, bit_count, self.config.max_bits
            )
            raise NumericOverflowError(operation, self.config.max_bits, bit_count)

    def check_result(self, value: int, operation: str) -> int:
        """Post-check результата; возвращает value без изменений."""
        self.check_bits(bit_size(value), operation)
        return value

    def check_add(self, a: int, b: int) -> None:
        """
        Pre-check сложения.

        Нижняя оценка max(L(a), L(b)) верна только при одинаковых знаках;
        при разных знаках возможна отмена, остаётся post-check.
        """
        if not self.enabled or (a < 0) != (b < 0):
            return
        self.check_bits(max(bit_size(a), bit_size(b)), "add")

    def check_subtract(self, a: int, b: int) -> None:
        """Pre-check вычитания (a - b == a + (-b)): только при разных знаках."""
        if not self.enabled or (a < 0) == (b < 0):
            return
        self.check_bits(max(bit_size(a), bit_size(b)), "subtract")

    def check_multiply(self, a: int, b: int, operation: str = "multiply") -> None:
        """Pre-check умножения по нижней оценке L(a) + L(b) - 1."""
        if not self.enabled or a == 0 or b == 0:
            return
        self.check_bits(bit_size(a) + bit_size(b) - 1, operation)

    def check_square(self, a: int, operation: str = "square") -> None:
        """Pre-check возведения в квадрат (шаг square-and-multiply)."""
        self.check_multiply(a, a, operation)

    def check_power(self, base: int, exponent: int) -> None:
        """
        Pre-check степени по нижней оценке (L(base) - 1) * exp + 1.

        Для |base| <= 1 результат не растёт; exponent < 0 проверяется
        вызывающим кодом.
        """
        if not self.enabled or exponent <= 0 or abs(base) <= 1:
            return
        self.check_bits((bit_size(base) - 1) * exponent + 1, "power")
