"""
Core math modules для hypernum

Численное ядро: нормализация входа, контроль переполнения, округление,
арифметика, битовые операции, степени и комбинаторика.
"""

# Digits (большие десятичные строки)
from hypernum.core.math.digits import (
    CHUNK_DIGITS,
    decimal_digit_count,
    format_decimal,
    parse_decimal_digits,
)

# Precision / Rounding
from hypernum.core.math.precision import (
    ScaledDecimal,
    ScaledDecimalInput,
    divide_rounded,
    normalize_precision,
    round_scaled,
    scaled_add,
    scaled_division,
    scaled_multiply,
    scaled_subtract,
)

# Numeric Normalizer
from hypernum.core.math.normalizer import (
    NumericInput,
    normalize,
    normalize_many,
    normalize_non_negative,
    stringify,
)

# Overflow Guard
from hypernum.core.math.overflow_guard import OverflowGuard, bit_size

# Arithmetic Kernel
from hypernum.core.math.arithmetic import (
    absolute,
    add,
    clamp,
    compare,
    divide,
    divide_decimal,
    equals,
    gcd,
    greater_equal,
    greater_than,
    lcm,
    less_equal,
    less_than,
    maximum,
    minimum,
    mod,
    multiply,
    negate,
    remainder,
    sign,
    subtract,
)

# Bitwise
from hypernum.core.math.bitwise import (
    bit_and,
    bit_length,
    bit_not,
    bit_or,
    bit_xor,
    clear_bit,
    get_bit,
    left_shift,
    logical_right_shift,
    pop_count,
    right_shift,
    set_bit,
    toggle_bit,
    truncate_to_bits,
)

# Power
from hypernum.core.math.power import (
    PowerTower,
    nth_root,
    power,
    sqrt,
    sqrt_decimal,
    super_root,
    tetration,
)

# Combinatorics
from hypernum.core.math.combinatorics import (
    DEFAULT_FACTORIAL_LIMIT,
    FactorialCache,
    binomial,
    factorial,
    falling_factorial,
    is_prime,
    multi_factorial,
    primorial,
    rising_factorial,
    subfactorial,
)

__all__ = [
    # Digits
    "CHUNK_DIGITS",
    "parse_decimal_digits",
    "format_decimal",
    "decimal_digit_count",
    # Precision
    "ScaledDecimal",
    "ScaledDecimalInput",
    "divide_rounded",
    "round_scaled",
    "scaled_division",
    "normalize_precision",
    "scaled_add",
    "scaled_subtract",
    "scaled_multiply",
    # Normalizer
    "NumericInput",
    "normalize",
    "normalize_many",
    "normalize_non_negative",
    "stringify",
    # Overflow Guard
    "OverflowGuard",
    "bit_size",
    # Arithmetic
    "add",
    "subtract",
    "multiply",
    "divide",
    "divide_decimal",
    "mod",
    "remainder",
    "negate",
    "absolute",
    "sign",
    "gcd",
    "lcm",
    "compare",
    "equals",
    "less_than",
    "less_equal",
    "greater_than",
    "greater_equal",
    "minimum",
    "maximum",
    "clamp",
    # Bitwise
    "bit_and",
    "bit_or",
    "bit_xor",
    "bit_not",
    "left_shift",
    "right_shift",
    "logical_right_shift",
    "get_bit",
    "set_bit",
    "clear_bit",
    "toggle_bit",
    "pop_count",
    "bit_length",
    "truncate_to_bits",
    # Power
    "power",
    "sqrt",
    "sqrt_decimal",
    "nth_root",
    "tetration",
    "super_root",
    "PowerTower",
    # Combinatorics
    "DEFAULT_FACTORIAL_LIMIT",
    "FactorialCache",
    "factorial",
    "binomial",
    "subfactorial",
    "rising_factorial",
    "falling_factorial",
    "multi_factorial",
    "primorial",
    "is_prime",
]
