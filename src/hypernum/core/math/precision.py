"""
Precision — fixed-point десятичная арифметика над целыми

Модуль реализует десятичные числа с фиксированной точкой поверх
неограниченных целых (unscaled + scale) и семь режимов округления.

Представление:
    ScaledDecimal(unscaled, scale) == unscaled / 10**scale, scale >= 0

Режимы округления:
    FLOOR      — к -inf
    CEIL       — к +inf
    DOWN       — к нулю
    UP         — от нуля
    HALF_EVEN  — к ближайшему, ничья → к чётной сохранённой цифре (banker's)
    HALF_UP    — к ближайшему, ничья → от нуля
    HALF_DOWN  — к ближайшему, ничья → к нулю

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все операции точные: float никогда не участвует в вычислениях
2. Два операнда приводятся к большему scale до комбинирования
3. Ничья — только когда отброшенный хвост ровно "5000…"
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Final, Union

from hypernum.core.domain.rounding import RoundingMode, coerce_rounding_mode
from hypernum.core.errors import DivisionByZeroError, ValidationError
from hypernum.core.math.digits import (
    check_decimal_extent,
    format_decimal,
    parse_decimal_digits,
)

# =============================================================================
# CONSTANTS
# =============================================================================

# Текстовая десятичная запись: знак, цифры, точка, экспонента
_DECIMAL_TEXT_RE: Final = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


# =============================================================================
# SCALED DECIMAL
# =============================================================================


@dataclass(frozen=True)
class ScaledDecimal:
    """
    Десятичное число с фиксированной точкой: unscaled / 10**scale.

    Examples:
        >>> str(ScaledDecimal(1005, 3))
        '1.005'
        >>> ScaledDecimal.parse("-0.50")
        ScaledDecimal(unscaled=-50, scale=2)
    """

    unscaled: int
    scale: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.unscaled, bool) or not isinstance(self.unscaled, int):
            raise ValidationError(f"unscaled must be int, got {type(self.unscaled).__name__}")
        if isinstance(self.scale, bool) or not isinstance(self.scale, int):
            raise ValidationError(f"scale must be int, got {type(self.scale).__name__}")
        if self.scale < 0:
            raise ValidationError(f"scale must be non-negative, got {self.scale}")

    @classmethod
    def parse(cls, value: "ScaledDecimalInput") -> "ScaledDecimal":
        """
        Точное преобразование входа в ScaledDecimal.

        Поддерживает ScaledDecimal, int, Decimal, str ("1.005", "2e-3")
        и float (через кратчайший repr, т.е. 1.005 → "1.005").

        Raises:
            ValidationError: None/bool, NaN/Inf, нераспознанный текст
        """
        if isinstance(value, ScaledDecimal):
            return value
        if value is None or isinstance(value, bool):
            raise ValidationError(f"Cannot convert {value!r} to a scaled decimal")
        if isinstance(value, int):
            return cls(value, 0)
        if isinstance(value, float):
            if value != value or value in (float("inf"), float("-inf")):
                raise ValidationError(f"Non-finite float is not a decimal: {value!r}")
            return cls._from_decimal(Decimal(repr(value)))
        if isinstance(value, Decimal):
            return cls._from_decimal(value)
        if isinstance(value, str):
            text = value.strip()
            if not _DECIMAL_TEXT_RE.match(text):
                raise ValidationError(f"Malformed decimal text: {value!r}")
            try:
                return cls._from_decimal(Decimal(text))
            except InvalidOperation as e:
                raise ValidationError(f"Malformed decimal text: {value!r}") from e
        raise ValidationError(f"Unsupported decimal input type: {type(value).__name__}")

    @classmethod
    def _from_decimal(cls, value: Decimal) -> "ScaledDecimal":
        if not value.is_finite():
            raise ValidationError(f"Non-finite decimal: {value}")
        sign, digits, exponent = value.as_tuple()
        check_decimal_extent(digits, exponent)
        if not any(digits):
            return cls(0, max(0, -exponent))
        unscaled = parse_decimal_digits("".join(str(d) for d in digits))
        if sign:
            unscaled = -unscaled
        if exponent >= 0:
            return cls(unscaled * 10**exponent, 0)
        return cls(unscaled, -exponent)

    def rescale(self, scale: int) -> "ScaledDecimal":
        """
        Точное увеличение scale (без потери цифр).

        Raises:
            ValidationError: Если scale меньше текущего (нужно округление)
        """
        if scale < self.scale:
            raise ValidationError(
                f"Cannot rescale from {self.scale} down to {scale} without rounding"
            )
        return ScaledDecimal(self.unscaled * 10 ** (scale - self.scale), scale)

    @property
    def is_integral(self) -> bool:
        return self.unscaled % 10**self.scale == 0

    def to_decimal(self) -> Decimal:
        return Decimal(self.unscaled).scaleb(-self.scale)

    def __str__(self) -> str:
        if self.scale == 0:
            return format_decimal(self.unscaled)
        sign = "-" if self.unscaled < 0 else ""
        digits = format_decimal(abs(self.unscaled)).rjust(self.scale + 1, "0")
        return f"{sign}{digits[:-self.scale]}.{digits[-self.scale:]}"


ScaledDecimalInput = Union[ScaledDecimal, int, float, Decimal, str]


# =============================================================================
# ROUNDED INTEGER DIVISION
# =============================================================================


def divide_rounded(
    numerator: int, denominator: int, mode: Union[RoundingMode, str] = RoundingMode.HALF_EVEN
) -> int:
    """
    Целочисленное деление с округлением частного по режиму.

    Алгоритм:
        |num| = q * |den| + r; сравниваем 2r с |den| для half-режимов,
        для направленных режимов учитываем только знак результата.

    Args:
        numerator: Делимое
        denominator: Делитель
        mode: Режим округления

    Returns:
        Округлённое частное

    Raises:
        DivisionByZeroError: Если denominator == 0

    Examples:
        >>> divide_rounded(5, 2, RoundingMode.HALF_EVEN)
        2
        >>> divide_rounded(-7, 2, RoundingMode.FLOOR)
        -4
    """
    mode = coerce_rounding_mode(mode)
    if denominator == 0:
        raise DivisionByZeroError("Division by zero", context={"numerator": numerator})

    negative = (numerator < 0) != (denominator < 0)
    abs_den = abs(denominator)
    q, r = divmod(abs(numerator), abs_den)

    if r != 0:
        half_cmp = (2 * r > abs_den) - (2 * r < abs_den)
        if mode is RoundingMode.UP:
            q += 1
        elif mode is RoundingMode.FLOOR:
            q += 1 if negative else 0
        elif mode is RoundingMode.CEIL:
            q += 0 if negative else 1
        elif mode is RoundingMode.HALF_UP:
            q += 1 if half_cmp >= 0 else 0
        elif mode is RoundingMode.HALF_DOWN:
            q += 1 if half_cmp > 0 else 0
        elif mode is RoundingMode.HALF_EVEN:
            if half_cmp > 0 or (half_cmp == 0 and q % 2 == 1):
                q += 1
        # DOWN: усечение, q без изменений

    return -q if negative else q


# =============================================================================
# ROUND / SCALED DIVISION / NORMALIZE PRECISION
# =============================================================================


def _validate_precision(precision: int) -> int:
    if isinstance(precision, bool) or not isinstance(precision, int):
        raise ValidationError(f"precision must be int, got {type(precision).__name__}")
    if precision < 0:
        raise ValidationError(f"precision must be non-negative, got {precision}")
    return precision


def round_scaled(
    value: ScaledDecimalInput,
    precision: int,
    mode: Union[RoundingMode, str] = RoundingMode.HALF_EVEN,
) -> ScaledDecimal:
    """
    Округление десятичного числа до precision дробных цифр.

    Args:
        value: Исходное значение (ScaledDecimal или точно конвертируемый вход)
        precision: Количество дробных цифр результата (>= 0)
        mode: Режим округления

    Returns:
        ScaledDecimal со scale == precision

    Examples:
        >>> str(round_scaled("1.005", 2, RoundingMode.HALF_EVEN))
        '1.00'
        >>> str(round_scaled("1.005", 2, RoundingMode.HALF_UP))
        '1.01'
    """
    value = ScaledDecimal.parse(value)
    precision = _validate_precision(precision)
    mode = coerce_rounding_mode(mode)

    if precision >= value.scale:
        return value.rescale(precision)

    divisor = 10 ** (value.scale - precision)
    return ScaledDecimal(divide_rounded(value.unscaled, divisor, mode), precision)


def scaled_division(
    numerator: ScaledDecimalInput,
    denominator: ScaledDecimalInput,
    precision: int,
    mode: Union[RoundingMode, str] = RoundingMode.HALF_EVEN,
) -> ScaledDecimal:
    """
    Деление с результатом в precision дробных цифр.

    (ua / 10^sa) / (ub / 10^sb) * 10^p = ua * 10^(sb + p) / (ub * 10^sa)

    Raises:
        DivisionByZeroError: Если знаменатель равен нулю
    """
    num = ScaledDecimal.parse(numerator)
    den = ScaledDecimal.parse(denominator)
    precision = _validate_precision(precision)
    mode = coerce_rounding_mode(mode)

    if den.unscaled == 0:
        raise DivisionByZeroError(
            "Division by zero", context={"numerator": str(num), "precision": precision}
        )

    scaled_num = num.unscaled * 10 ** (den.scale + precision)
    scaled_den = den.unscaled * 10**num.scale
    return ScaledDecimal(divide_rounded(scaled_num, scaled_den, mode), precision)


def normalize_precision(
    a: ScaledDecimalInput, b: ScaledDecimalInput
) -> tuple[ScaledDecimal, ScaledDecimal]:
    """
    Приведение двух чисел к общему (большему) scale.

    Returns:
        (a', b') с одинаковым scale; значения не меняются
    """
    a = ScaledDecimal.parse(a)
    b = ScaledDecimal.parse(b)
    scale = max(a.scale, b.scale)
    return a.rescale(scale), b.rescale(scale)


def scaled_add(a: ScaledDecimalInput, b: ScaledDecimalInput) -> ScaledDecimal:
    a, b = normalize_precision(a, b)
    return ScaledDecimal(a.unscaled + b.unscaled, a.scale)


def scaled_subtract(a: ScaledDecimalInput, b: ScaledDecimalInput) -> ScaledDecimal:
    a, b = normalize_precision(a, b)
    return ScaledDecimal(a.unscaled - b.unscaled, a.scale)


def scaled_multiply(
    a: ScaledDecimalInput,
    b: ScaledDecimalInput,
    precision: int | None = None,
    mode: Union[RoundingMode, str] = RoundingMode.HALF_EVEN,
) -> ScaledDecimal:
    """
    Произведение; scale результата = sa + sb, либо precision с округлением.
    """
    a = ScaledDecimal.parse(a)
    b = ScaledDecimal.parse(b)
    product = ScaledDecimal(a.unscaled * b.unscaled, a.scale + b.scale)
    if precision is None:
        return product
    return round_scaled(product, precision, mode)
