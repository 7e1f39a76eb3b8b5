"""
Тесты для Combinatorics Module

Проверяет:
1. factorial: значения, лимит max_value, кэш вызывающего кода
2. binomial: значения, симметрия, k > n
3. subfactorial, rising/falling/multi factorial
4. is_prime / primorial
5. Переполнение на шаге произведения
"""

import math

import pytest

from hypernum.core.domain.config import HypernumConfig
from hypernum.core.errors import (
    NumericOverflowError,
    ValidationError,
)
from hypernum.core.math.combinatorics import (
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

# =============================================================================
# ТЕСТЫ FACTORIAL
# =============================================================================


class TestFactorial:
    def test_small_values(self) -> None:
        assert factorial(0) == 1
        assert factorial(1) == 1
        assert factorial(5) == 120
        assert factorial(20) == 2432902008176640000

    def test_matches_math_factorial(self) -> None:
        for n in (50, 100, 500):
            assert factorial(n) == math.factorial(n)

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValidationError):
            factorial(-1)

    def test_max_value_enforced_with_checking(self) -> None:
        with pytest.raises(NumericOverflowError) as exc_info:
            factorial(1001)
        assert exc_info.value.context["max_value"] == 1000

    def test_custom_max_value(self) -> None:
        with pytest.raises(NumericOverflowError):
            factorial(11, max_value=10)
        assert factorial(10, max_value=10) == 3628800

    def test_max_value_ignored_without_checking(self) -> None:
        config = HypernumConfig(overflow_checking=False)
        assert factorial(1200, config) == math.factorial(1200)

    def test_bit_limit_during_product(self) -> None:
        # 20! < 2^62, 21! > 2^65
        config = HypernumConfig(max_bits=64)
        assert factorial(20, config) == math.factorial(20)
        with pytest.raises(NumericOverflowError):
            factorial(21, config)


class TestFactorialCache:
    def test_cache_populated_after_success(self) -> None:
        cache = FactorialCache()
        assert factorial(10, cache=cache) == 3628800
        assert 10 in cache
        assert cache.get(10) == 3628800

    def test_resume_from_nearest(self) -> None:
        cache = FactorialCache()
        factorial(10, cache=cache)
        assert cache.nearest(15) == (10, 3628800)
        assert cache.nearest(5) == (0, 1)
        assert factorial(15, cache=cache) == math.factorial(15)
        assert cache.nearest(16) == (15, math.factorial(15))

    def test_cache_not_updated_on_failure(self) -> None:
        cache = FactorialCache()
        with pytest.raises(NumericOverflowError):
            factorial(30, HypernumConfig(max_bits=64), cache=cache)
        assert 30 not in cache
        assert len(cache) == 1

    def test_caches_are_independent(self) -> None:
        first, second = FactorialCache(), FactorialCache()
        factorial(12, cache=first)
        assert 12 in first
        assert 12 not in second

    def test_clear(self) -> None:
        cache = FactorialCache()
        factorial(8, cache=cache)
        cache.clear()
        assert len(cache) == 1
        assert cache.get(0) == 1


# =============================================================================
# ТЕСТЫ BINOMIAL
# =============================================================================


class TestBinomial:
    def test_known_values(self) -> None:
        assert binomial(10, 3) == 120
        assert binomial(5, 0) == 1
        assert binomial(5, 5) == 1
        assert binomial(0, 0) == 1

    def test_k_greater_than_n(self) -> None:
        assert binomial(3, 5) == 0

    def test_symmetry(self) -> None:
        for k in range(0, 31):
            assert binomial(30, k) == binomial(30, 30 - k)

    def test_large(self) -> None:
        assert binomial(1000, 500) == math.comb(1000, 500)

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValidationError):
            binomial(-1, 2)
        with pytest.raises(ValidationError):
            binomial(5, -2)

    def test_overflow(self) -> None:
        with pytest.raises(NumericOverflowError):
            binomial(200, 100, HypernumConfig(max_bits=64))


# =============================================================================
# ТЕСТЫ РОДСТВЕННЫХ ФУНКЦИЙ
# =============================================================================


class TestRelatedFactorials:
    @pytest.mark.parametrize("n,expected", [(0, 1), (1, 0), (2, 1), (3, 2), (4, 9), (5, 44), (10, 1334961)])
    def test_subfactorial(self, n, expected) -> None:
        assert subfactorial(n) == expected

    def test_rising_factorial(self) -> None:
        assert rising_factorial(3, 3) == 3 * 4 * 5
        assert rising_factorial(7, 0) == 1
        assert rising_factorial(1, 10) == math.factorial(10)

    def test_falling_factorial(self) -> None:
        assert falling_factorial(5, 2) == 20
        assert falling_factorial(10, 10) == math.factorial(10)
        assert falling_factorial(3, 5) == 0

    def test_multi_factorial(self) -> None:
        assert multi_factorial(9, 2) == 945
        assert multi_factorial(10, 3) == 10 * 7 * 4 * 1
        assert multi_factorial(6, 1) == 720
        assert multi_factorial(0, 2) == 1

    def test_multi_factorial_invalid_step(self) -> None:
        with pytest.raises(ValidationError):
            multi_factorial(9, 0)


# =============================================================================
# ТЕСТЫ ПРОСТЫХ ЧИСЕЛ
# =============================================================================


class TestPrimes:
    def test_small_primes(self) -> None:
        primes = [n for n in range(50) if is_prime(n)]
        assert primes == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47]

    def test_large_prime_and_composite(self) -> None:
        assert is_prime(2**61 - 1)
        assert not is_prime(2**61 + 1)
        assert not is_prime(561)  # число Кармайкла

    def test_primorial(self) -> None:
        assert primorial(0) == 1
        assert primorial(10) == 210
        assert primorial(13) == 30030

    def test_primorial_matches_sieve(self) -> None:
        limit = 20_000
        sieve = bytearray([1]) * (limit + 1)
        sieve[0] = sieve[1] = 0
        for i in range(2, math.isqrt(limit) + 1):
            if sieve[i]:
                sieve[i * i :: i] = bytearray(len(sieve[i * i :: i]))
        expected = math.prod(i for i in range(limit + 1) if sieve[i])
        assert primorial(limit) == expected

    def test_primorial_ignores_step_budget(self) -> None:
        # число кандидатов больше max_computation_steps
        assert primorial(100, HypernumConfig(max_computation_steps=10)) == math.prod(
            p for p in range(2, 101) if is_prime(p)
        )

    def test_primorial_overflow(self) -> None:
        with pytest.raises(NumericOverflowError):
            primorial(100, HypernumConfig(max_bits=64))
        assert primorial(2, HypernumConfig(max_bits=2)) == 2
