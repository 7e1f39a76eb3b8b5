"""
Bitwise — битовые операции над неограниченными целыми

Семантика: бесконечное two's-complement представление (как у Python int),
ограниченное шириной config.max_bits.

Политика выхода за ширину (выбирается вызывающим кодом):
- strict=True  → NumericOverflowError (операнд или результат длиннее max_bits)
- strict=False → усечение модуля до младших max_bits бит, знак сохраняется

При overflow_checking=False ширина не применяется, результат точный.
"""

from hypernum.core.domain.config import HypernumConfig, resolve_config
from hypernum.core.errors import NumericOverflowError, ValidationError
from hypernum.core.math.normalizer import NumericInput, normalize, normalize_non_negative
from hypernum.core.math.overflow_guard import bit_size

# =============================================================================
# WIDTH POLICY
# =============================================================================


def truncate_to_bits(value: int, bits: int) -> int:
    """Младшие bits бит модуля, знак сохраняется."""
    magnitude = abs(value) & ((1 << bits) - 1)
    return -magnitude if value < 0 else magnitude


def _fit(value: int, config: HypernumConfig, strict: bool, operation: str) -> int:
    if not config.overflow_checking:
        return value
    observed = bit_size(value)
    if observed <= config.max_bits:
        return value
    if strict:
        raise NumericOverflowError(operation, config.max_bits, observed)
    return truncate_to_bits(value, config.max_bits)


def _operands(
    values: tuple[NumericInput, ...], config: HypernumConfig, strict: bool, operation: str
) -> list[int]:
    return [_fit(normalize(v), config, strict, operation) for v in values]


def _bit_index(index: NumericInput) -> int:
    return normalize_non_negative(index, "bit index")


# =============================================================================
# LOGICAL OPERATIONS
# =============================================================================


def bit_and(
    a: NumericInput, b: NumericInput, config: HypernumConfig | None = None, *, strict: bool = True
) -> int:
    config = resolve_config(config)
    x, y = _operands((a, b), config, strict, "and")
    return _fit(x & y, config, strict, "and")


def bit_or(
    a: NumericInput, b: NumericInput, config: HypernumConfig | None = None, *, strict: bool = True
) -> int:
    config = resolve_config(config)
    x, y = _operands((a, b), config, strict, "or")
    return _fit(x | y, config, strict, "or")


def bit_xor(
    a: NumericInput, b: NumericInput, config: HypernumConfig | None = None, *, strict: bool = True
) -> int:
    config = resolve_config(config)
    x, y = _operands((a, b), config, strict, "xor")
    return _fit(x ^ y, config, strict, "xor")


def bit_not(a: NumericInput, config: HypernumConfig | None = None, *, strict: bool = True) -> int:
    """~a == -a - 1 (two's complement)."""
    config = resolve_config(config)
    (x,) = _operands((a,), config, strict, "not")
    return _fit(~x, config, strict, "not")


# =============================================================================
# SHIFTS
# =============================================================================


def left_shift(
    a: NumericInput,
    shift: NumericInput,
    config: HypernumConfig | None = None,
    *,
    strict: bool = True,
) -> int:
    """
    a << shift.

    Длина результата известна заранее (L(a) + shift), поэтому в strict-режиме
    отказ происходит до сдвига. В нестрогом режиме сдвиг на >= max_bits
    даёт 0 без материализации большого числа.

    Raises:
        ValidationError: Если shift < 0
        NumericOverflowError: strict и L(a) + shift > max_bits
    """
    config = resolve_config(config)
    (x,) = _operands((a,), config, strict, "left_shift")
    n = normalize_non_negative(shift, "shift")

    if config.overflow_checking and x != 0:
        predicted = bit_size(x) + n
        if predicted > config.max_bits:
            if strict:
                raise NumericOverflowError("left_shift", config.max_bits, predicted)
            if n >= config.max_bits:
                return 0
            return truncate_to_bits(x << n, config.max_bits)

    return x << n


def right_shift(
    a: NumericInput,
    shift: NumericInput,
    config: HypernumConfig | None = None,
    *,
    strict: bool = True,
) -> int:
    """Арифметический сдвиг вправо (floor(a / 2**shift))."""
    config = resolve_config(config)
    (x,) = _operands((a,), config, strict, "right_shift")
    n = normalize_non_negative(shift, "shift")
    return x >> n


def logical_right_shift(
    a: NumericInput, shift: NumericInput, config: HypernumConfig | None = None
) -> int:
    """
    Логический сдвиг: a трактуется как беззнаковое слово ширины max_bits.

    Raises:
        ValidationError: Если overflow_checking=False (ширина слова не определена)
    """
    config = resolve_config(config)
    if not config.overflow_checking:
        raise ValidationError("logical_right_shift requires a bounded word width")
    x = normalize(a)
    n = normalize_non_negative(shift, "shift")
    word = x & ((1 << config.max_bits) - 1)
    return word >> n


# =============================================================================
# SINGLE-BIT OPERATIONS
# =============================================================================


def get_bit(a: NumericInput, index: NumericInput) -> int:
    """Бит с номером index (0 — младший) в two's complement."""
    return (normalize(a) >> _bit_index(index)) & 1


def _update_bit(
    a: NumericInput,
    index: NumericInput,
    config: HypernumConfig | None,
    strict: bool,
    operation: str,
) -> int:
    config = resolve_config(config)
    (x,) = _operands((a,), config, strict, operation)
    i = _bit_index(index)

    # Бит за пределами слова: ошибка или no-op, без материализации 1 << i
    if config.overflow_checking and i >= config.max_bits:
        if strict:
            raise NumericOverflowError(operation, config.max_bits, i + 1)
        return x

    mask = 1 << i
    if operation == "set_bit":
        result = x | mask
    elif operation == "clear_bit":
        result = x & ~mask
    else:
        result = x ^ mask
    return _fit(result, config, strict, operation)


def set_bit(
    a: NumericInput, index: NumericInput, config: HypernumConfig | None = None, *, strict: bool = True
) -> int:
    return _update_bit(a, index, config, strict, "set_bit")


def clear_bit(
    a: NumericInput, index: NumericInput, config: HypernumConfig | None = None, *, strict: bool = True
) -> int:
    return _update_bit(a, index, config, strict, "clear_bit")


def toggle_bit(
    a: NumericInput, index: NumericInput, config: HypernumConfig | None = None, *, strict: bool = True
) -> int:
    return _update_bit(a, index, config, strict, "toggle_bit")


def pop_count(a: NumericInput) -> int:
    """Количество единичных бит в модуле значения."""
    return bin(abs(normalize(a))).count("1")


def bit_length(a: NumericInput) -> int:
    """Битовая длина модуля (0 для нуля)."""
    return bit_size(normalize(a))
