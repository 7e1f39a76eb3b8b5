"""
Digits — преобразование int ↔ десятичный текст без лимита длины

CPython ограничивает int(str) / str(int) для base 10 (sys.int_info,
по умолчанию 4300 цифр). Здесь длинные строки обрабатываются блоками,
поэтому конвертация остаётся точной при любой длине и не требует
изменения глобального sys.set_int_max_str_digits.

Экспоненциальная запись ("1e2000000") разворачивается в значение
только после проверки check_decimal_extent: девять символов входа не
должны порождать многомегабитное число.
"""

import math
from typing import Final, Sequence

from hypernum.core.domain.config import DEFAULT_MAX_BITS
from hypernum.core.errors import ValidationError

# Размер блока заведомо меньше лимита интерпретатора
CHUNK_DIGITS: Final[int] = 4000

_CHUNK_BASE: Final[int] = 10**CHUNK_DIGITS

# Десятичных цифр в DEFAULT_MAX_BITS битах (+1 на округление)
MAX_DECIMAL_DIGITS: Final[int] = math.ceil(DEFAULT_MAX_BITS * math.log10(2)) + 1


def parse_decimal_digits(digits: str) -> int:
    """
    Беззнаковая строка ASCII-цифр → int.

    Валидация формата — ответственность вызывающего кода.
    """
    if len(digits) <= CHUNK_DIGITS:
        return int(digits)

    head = len(digits) % CHUNK_DIGITS or CHUNK_DIGITS
    result = int(digits[:head])
    for start in range(head, len(digits), CHUNK_DIGITS):
        result = result * _CHUNK_BASE + int(digits[start : start + CHUNK_DIGITS])
    return result


def format_decimal(value: int) -> str:
    """int → каноническая десятичная запись ("-" только для отрицательных)."""
    magnitude = abs(value)
    if magnitude < _CHUNK_BASE:
        text = str(magnitude)
    else:
        chunks = []
        while magnitude >= _CHUNK_BASE:
            magnitude, low = divmod(magnitude, _CHUNK_BASE)
            chunks.append(str(low).rjust(CHUNK_DIGITS, "0"))
        chunks.append(str(magnitude))
        text = "".join(reversed(chunks))
    return "-" + text if value < 0 else text


def decimal_digit_count(value: int) -> int:
    """Количество десятичных цифр |value| (для 0 → 1)."""
    return len(format_decimal(abs(value)))


def check_decimal_extent(
    digits: Sequence[int], exponent: int, max_digits: int = MAX_DECIMAL_DIGITS
) -> None:
    """
    Проверка записи digits × 10**exponent до её развёртывания в int.

    len(digits) + exponent — цифры целой части (для ненулевого значения),
    -exponent — цифры дробной части.

    Args:
        digits: Цифры мантиссы (как в Decimal.as_tuple())
        exponent: Десятичная экспонента
        max_digits: Предел цифр для каждой из частей

    Raises:
        ValidationError: Целая или дробная часть длиннее max_digits

    Examples:
        >>> check_decimal_extent((1,), 2_000_000)  # doctest: +SKIP
        Traceback (most recent call last):
            ...
        ValidationError: Decimal exponent too large: 2000001 integer digits > 315654
    """
    integer_digits = len(digits) + exponent if any(digits) else 0
    if integer_digits > max_digits:
        raise ValidationError(
            f"Decimal exponent too large: {integer_digits} integer digits > {max_digits}",
            context={"exponent": exponent, "max_digits": max_digits},
        )
    if -exponent > max_digits:
        raise ValidationError(
            f"Decimal exponent too small: {-exponent} fractional digits > {max_digits}",
            context={"exponent": exponent, "max_digits": max_digits},
        )
