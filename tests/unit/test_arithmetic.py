"""
Тесты для Arithmetic Kernel и Overflow Guard

Проверяет:
1. Точность на числах произвольной длины
2. Округление частного по режиму конфигурации
3. Математический модуль и усечённый остаток
4. Pre-check и post-check переполнения
5. overflow_checking=False → точный результат любой длины
6. Деление на ноль → DivisionByZeroError
"""

import random

import pytest

from hypernum.core.domain.config import HypernumConfig
from hypernum.core.errors import (
    DivisionByZeroError,
    NumericOverflowError,
    ValidationError,
)
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
from hypernum.core.math.overflow_guard import OverflowGuard, bit_size

# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def config_64() -> HypernumConfig:
    """Лимит 64 бита, проверки включены."""
    return HypernumConfig(max_bits=64)


@pytest.fixture
def config_unchecked() -> HypernumConfig:
    return HypernumConfig(max_bits=64, overflow_checking=False)


# =============================================================================
# ТЕСТЫ OVERFLOW GUARD
# =============================================================================


class TestOverflowGuard:
    def test_bit_size(self) -> None:
        assert bit_size(0) == 0
        assert bit_size(255) == 8
        assert bit_size(-256) == 9

    def test_check_result_passthrough(self, config_64) -> None:
        guard = OverflowGuard(config_64)
        assert guard.check_result(2**63, "op") == 2**63

    def test_check_result_overflow_context(self, config_64) -> None:
        guard = OverflowGuard(config_64)
        with pytest.raises(NumericOverflowError) as exc_info:
            guard.check_result(2**64, "op")
        err = exc_info.value
        assert err.operation == "op"
        assert err.limit_bits == 64
        assert err.observed_bits == 65
        assert "op exceeds bit limit: 65 > 64" in str(err)

    def test_multiply_precheck_lower_bound(self, config_64) -> None:
        guard = OverflowGuard(config_64)
        guard.check_multiply(2**31, 2**32)  # нижняя оценка 64 бита
        with pytest.raises(NumericOverflowError):
            guard.check_multiply(2**40, 2**40)

    def test_power_precheck(self, config_64) -> None:
        guard = OverflowGuard(config_64)
        guard.check_power(2, 63)
        guard.check_power(1, 10**9)
        guard.check_power(-1, 10**9)
        with pytest.raises(NumericOverflowError):
            guard.check_power(2, 64)

    def test_disabled_guard_is_noop(self, config_unchecked) -> None:
        guard = OverflowGuard(config_unchecked)
        assert not guard.enabled
        guard.check_multiply(2**1000, 2**1000)
        guard.check_power(2, 10**6)
        assert guard.check_result(2**5000, "op") == 2**5000

    def test_overflow_error_is_builtin_overflow(self, config_64) -> None:
        with pytest.raises(OverflowError):
            OverflowGuard(config_64).check_bits(65, "op")


# =============================================================================
# ТЕСТЫ БАЗОВЫХ ОПЕРАЦИЙ
# =============================================================================


class TestBasicOperations:
    def test_add_big_example(self) -> None:
        assert add("12345678901234567890", "98765432109876543210") == 111111111011111111100

    def test_subtract_multiply(self) -> None:
        assert subtract("100000000000000000000", 1) == 99999999999999999999
        assert multiply("-123456789012345678901234567890", 10) == -1234567890123456789012345678900

    def test_add_commutative_and_associative(self) -> None:
        rng = random.Random(42)
        for _ in range(50):
            a, b, c = (rng.randint(-(10**40), 10**40) for _ in range(3))
            assert add(a, b) == add(b, a)
            assert add(add(a, b), c) == add(a, add(b, c))
            assert multiply(a, b) == a * b

    def test_negate_abs_sign(self) -> None:
        assert negate("5") == -5
        assert absolute(-(10**30)) == 10**30
        assert sign(-3) == -1
        assert sign(0) == 0
        assert sign("7") == 1


class TestDivision:
    def test_divide_half_even_default(self) -> None:
        assert divide(7, 2) == 4
        assert divide(5, 2) == 2
        assert divide(-7, 2) == -4

    def test_divide_mode_from_config(self) -> None:
        assert divide(7, 2, HypernumConfig(rounding_mode="DOWN")) == 3
        assert divide(-7, 2, HypernumConfig(rounding_mode="FLOOR")) == -4
        assert divide(7, 3, HypernumConfig(rounding_mode="CEIL")) == 3

    def test_divide_big(self) -> None:
        assert divide(10**50, 10**25) == 10**25

    def test_divide_decimal(self) -> None:
        assert str(divide_decimal(1, 3, HypernumConfig(decimal_precision=4))) == "0.3333"
        assert str(divide_decimal(-1, 4, HypernumConfig(decimal_precision=2))) == "-0.25"

    def test_mod_has_sign_of_divisor(self) -> None:
        assert mod(-7, 3) == 2
        assert mod(7, -3) == -2
        assert mod(10**30 + 5, 10) == 5

    def test_remainder_has_sign_of_dividend(self) -> None:
        assert remainder(-7, 3) == -1
        assert remainder(7, -3) == 1

    @pytest.mark.parametrize("op", [divide, divide_decimal, mod, remainder])
    def test_division_by_zero(self, op) -> None:
        with pytest.raises(DivisionByZeroError):
            op(1, "0")

    def test_division_by_zero_is_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            divide(1, 0)
        with pytest.raises(ZeroDivisionError):
            divide(1, 0)


class TestGcdLcm:
    def test_gcd(self) -> None:
        assert gcd(12, 18) == 6
        assert gcd(-12, 18) == 6
        assert gcd(0, 0) == 0

    def test_lcm(self) -> None:
        assert lcm(4, 6) == 12
        assert lcm(-4, 6) == 12
        assert lcm(0, 5) == 0

    def test_lcm_overflow(self, config_64) -> None:
        with pytest.raises(NumericOverflowError):
            lcm(2**40 + 1, 2**40 - 1, config_64)


# =============================================================================
# ТЕСТЫ СРАВНЕНИЙ
# =============================================================================


class TestComparisons:
    def test_compare(self) -> None:
        assert compare("10000000000000000000000", 1) == 1
        assert compare(-5, -5) == 0
        assert compare(-6, -5) == -1

    def test_predicates(self) -> None:
        assert equals("42", 42.0)
        assert less_than(1, 2)
        assert less_equal(2, 2)
        assert greater_than(3, 2)
        assert greater_equal(3, 3)

    def test_min_max(self) -> None:
        assert minimum(3, "-1", 2) == -1
        assert maximum(3, "10000000000000000000000", 2) == 10**22

    def test_min_max_require_values(self) -> None:
        with pytest.raises(ValidationError):
            minimum()
        with pytest.raises(ValidationError):
            maximum()

    def test_clamp(self) -> None:
        assert clamp(15, 0, 10) == 10
        assert clamp(-5, 0, 10) == 0
        assert clamp(5, 0, 10) == 5
        with pytest.raises(ValidationError):
            clamp(5, 10, 0)


# =============================================================================
# ТЕСТЫ ПЕРЕПОЛНЕНИЯ
# =============================================================================


class TestOverflow:
    def test_add_post_check(self, config_64) -> None:
        assert add(2**62, 2**62, config_64) == 2**63
        with pytest.raises(NumericOverflowError):
            add(2**63, 2**63, config_64)

    def test_operand_over_limit_rejected(self, config_64) -> None:
        with pytest.raises(NumericOverflowError):
            subtract(2**70, 1, config_64)

    def test_mixed_signs_cancel_below_limit(self, config_64) -> None:
        # операнд длиннее лимита, но результат укладывается в 64 бита
        assert add(2**64, -1, config_64) == 2**64 - 1
        assert add(-1, 2**64, config_64) == 2**64 - 1
        assert subtract(2**64, 1, config_64) == 2**64 - 1
        assert subtract(-(2**64), -1, config_64) == -(2**64) + 1

    def test_same_sign_add_pre_check(self, config_64) -> None:
        guard = OverflowGuard(config_64)
        guard.check_add(2**64, -1)
        guard.check_subtract(2**64, 1)
        with pytest.raises(NumericOverflowError):
            guard.check_add(2**64, 1)
        with pytest.raises(NumericOverflowError):
            guard.check_subtract(2**64, -1)

    def test_multiply_pre_check(self, config_64) -> None:
        with pytest.raises(NumericOverflowError):
            multiply(2**40, 2**40, config_64)

    def test_unchecked_is_exact(self, config_unchecked) -> None:
        assert multiply(2**40, 2**40, config_unchecked) == 2**80
        assert add(2**63, 2**63, config_unchecked) == 2**64
