"""
Numeric Normalizer — приведение входа к неограниченному int

Вход — tagged variant: текст | float | int | Decimal | ScaledDecimal.
Для каждого тега своя функция нормализации, неявных приведений нет.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Вход никогда не усекается молча: либо точный int, либо ValidationError
2. None, bool, NaN/Inf отвергаются явно
3. Текст: только [знак] + ASCII-цифры; 0x/0o/0b — только по запросу
4. normalize(stringify(normalize(s))) == normalize(s)
"""

import math
import re
from decimal import Decimal
from typing import Callable, Final, Union

from hypernum.core.errors import ValidationError
from hypernum.core.math.digits import (
    check_decimal_extent,
    format_decimal,
    parse_decimal_digits,
)
from hypernum.core.math.precision import ScaledDecimal

# =============================================================================
# CONSTANTS
# =============================================================================

_INTEGER_TEXT_RE: Final = re.compile(r"^[+-]?[0-9]+$")

# Префиксные нотации: префикс → (основание, допустимые цифры)
_PREFIXED_NOTATIONS: Final[dict[str, tuple[int, "re.Pattern[str]"]]] = {
    "0x": (16, re.compile(r"^[0-9a-fA-F]+$")),
    "0o": (8, re.compile(r"^[0-7]+$")),
    "0b": (2, re.compile(r"^[01]+$")),
}

NumericInput = Union[int, str, float, Decimal, ScaledDecimal]


# =============================================================================
# PER-TAG NORMALIZERS
# =============================================================================


def _normalize_int(value: int, allow_prefixed: bool) -> int:
    return int(value)


def _normalize_float(value: float, allow_prefixed: bool) -> int:
    if math.isnan(value) or math.isinf(value):
        raise ValidationError(f"Non-finite float cannot be normalized: {value!r}")
    if not value.is_integer():
        raise ValidationError(f"Float is not integer-valued: {value!r}")
    return int(value)


def _normalize_decimal(value: Decimal, allow_prefixed: bool) -> int:
    if not value.is_finite():
        raise ValidationError(f"Non-finite decimal cannot be normalized: {value}")
    _, digits, exponent = value.as_tuple()
    check_decimal_extent(digits, exponent)
    if not any(digits):
        return 0
    if value != value.to_integral_value():
        raise ValidationError(f"Decimal is not integer-valued: {value}")
    return int(value)


def _normalize_scaled(value: ScaledDecimal, allow_prefixed: bool) -> int:
    if not value.is_integral:
        raise ValidationError(f"Scaled decimal is not integer-valued: {value}")
    return value.unscaled // 10**value.scale


def _normalize_text(value: str, allow_prefixed: bool) -> int:
    text = value.strip()
    if not text:
        raise ValidationError("Empty text cannot be normalized")

    if _INTEGER_TEXT_RE.match(text):
        magnitude = parse_decimal_digits(text.lstrip("+-"))
        return -magnitude if text[0] == "-" else magnitude

    if allow_prefixed:
        sign = 1
        body = text
        if body[0] in "+-":
            sign = -1 if body[0] == "-" else 1
            body = body[1:]
        prefix = body[:2].lower()
        if prefix in _PREFIXED_NOTATIONS:
            base, digits_re = _PREFIXED_NOTATIONS[prefix]
            digits = body[2:]
            if digits_re.match(digits):
                return sign * int(digits, base)

    raise ValidationError(
        f"Text is not an integer: {value!r}",
        context={"allow_prefixed": allow_prefixed},
    )


# Порядок важен: bool проверяется отдельно до int
_NORMALIZERS: Final[tuple[tuple[type, Callable[..., int]], ...]] = (
    (int, _normalize_int),
    (str, _normalize_text),
    (float, _normalize_float),
    (Decimal, _normalize_decimal),
    (ScaledDecimal, _normalize_scaled),
)


# =============================================================================
# PUBLIC API
# =============================================================================


def normalize(value: NumericInput, *, allow_prefixed: bool = False) -> int:
    """
    Приведение входа к каноническому неограниченному int.

    Args:
        value: Текст, int, float, Decimal или ScaledDecimal
        allow_prefixed: Разрешить нотации 0x/0o/0b в тексте

    Returns:
        Точное целое значение

    Raises:
        ValidationError: None/bool, NaN/Inf, дробное значение, мусор в тексте

    Examples:
        >>> normalize("12345678901234567890")
        12345678901234567890
        >>> normalize(" -42 ")
        -42
        >>> normalize("0xff", allow_prefixed=True)
        255
        >>> normalize("1.5")  # doctest: +SKIP
        Traceback (most recent call last):
            ...
        ValidationError: Text is not an integer: '1.5'
    """
    if value is None:
        raise ValidationError("None cannot be normalized to an integer")
    if isinstance(value, bool):
        raise ValidationError(f"Boolean is not a numeric input: {value!r}")

    for tag, normalizer in _NORMALIZERS:
        if isinstance(value, tag):
            return normalizer(value, allow_prefixed)

    raise ValidationError(f"Unsupported numeric input type: {type(value).__name__}")


def normalize_many(*values: NumericInput) -> tuple[int, ...]:
    """Нормализация нескольких операндов (первая ошибка прерывает)."""
    return tuple(normalize(v) for v in values)


def normalize_non_negative(value: NumericInput, name: str) -> int:
    """
    Нормализация с проверкой value >= 0.

    Raises:
        ValidationError: Если значение отрицательное
    """
    result = normalize(value)
    if result < 0:
        raise ValidationError(f"{name} must be non-negative, got {result}")
    return result


def stringify(value: NumericInput) -> str:
    """Каноническая десятичная запись (без ведущих нулей и знака '+')."""
    return format_decimal(normalize(value))
