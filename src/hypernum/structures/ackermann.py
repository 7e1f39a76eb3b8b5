"""
AckermannStructure — мемоизированный вычислитель функции Аккермана

    A(0, n) = n + 1
    A(m, 0) = A(m - 1, 1)
    A(m, n) = A(m - 1, A(m, n - 1))

Таблица (m, n) → AckermannNode владеет всеми узлами. Связи с соседями
A(m-1,n), A(m,n-1), A(m+1,n), A(m,n+1) — это поиск по ключу в таблице,
узлы друг на друга не ссылаются.

Вычисление идёт по явному стеку кадров. Каждый помещённый кадр
расходует один шаг бюджета max_computation_steps; при исчерпании
бюджета → ComputationLimitError, таблица не меняется.
"""

import threading
from dataclasses import dataclass
from fractions import Fraction
from typing import Iterator, Optional

from hypernum.core.domain.config import HypernumConfig, resolve_config
from hypernum.core.errors import ComputationLimitError, HypernumError
from hypernum.core.math.normalizer import NumericInput, normalize_non_negative
from hypernum.core.math.overflow_guard import OverflowGuard
from hypernum.logging_config import get_logger

logger = get_logger(__name__)

Key = tuple[int, int]

# Стадии кадра
_START = 0
_AWAIT_BASE = 1  # ждём A(m-1, 1)
_AWAIT_INNER = 2  # ждём A(m, n-1)
_AWAIT_OUTER = 3  # ждём A(m-1, inner)


@dataclass(frozen=True)
class AckermannNode:
    """Вычисленное значение A(m, n). Неизменяемо после создания."""

    m: int
    n: int
    value: int

    @property
    def key(self) -> Key:
        return (self.m, self.n)

    def neighbor_keys(self) -> dict[str, Optional[Key]]:
        """Ключи соседей по сетке (None за пределами m, n >= 0)."""
        return {
            "prev_m": (self.m - 1, self.n) if self.m > 0 else None,
            "prev_n": (self.m, self.n - 1) if self.n > 0 else None,
            "next_m": (self.m + 1, self.n),
            "next_n": (self.m, self.n + 1),
        }


@dataclass(frozen=True)
class GrowthRate:
    """Рост A(m, n) относительно A(m, n-1)."""

    n: int
    value: int
    previous: int
    increase: int
    ratio: Fraction


def _evaluate(
    m: int,
    n: int,
    known: dict[Key, AckermannNode],
    guard: OverflowGuard,
    max_steps: int,
) -> tuple[dict[Key, AckermannNode], list[Key]]:
    """
    Вычисление A(m, n) по явному стеку.

    Args:
        known: Уже мемоизированные узлы (только чтение)

    Returns:
        (новые узлы, ключи в порядке завершения вычисления)

    Raises:
        ComputationLimitError: Помещено больше max_steps кадров
        NumericOverflowError: Значение длиннее max_bits
    """
    computed: dict[Key, AckermannNode] = {}
    order: list[Key] = []

    def lookup(key: Key) -> Optional[int]:
        node = computed.get(key) or known.get(key)
        return None if node is None else node.value

    def record(key: Key, value: int) -> int:
        guard.check_result(value, "ackermann")
        computed[key] = AckermannNode(key[0], key[1], value)
        order.append(key)
        return value

    stack: list[list[int]] = [[m, n, _START]]
    pushed = 1
    result = 0

    def push(fm: int, fn: int) -> None:
        nonlocal pushed
        pushed += 1
        if pushed > max_steps:
            logger.debug("ackermann(%d, %d): budget of %d frames exhausted", m, n, max_steps)
            raise ComputationLimitError("ackermann", max_steps)
        stack.append([fm, fn, _START])

    while stack:
        frame = stack[-1]
        fm, fn, stage = frame
        key = (fm, fn)

        if stage == _START:
            cached = lookup(key)
            if cached is not None:
                result = cached
                stack.pop()
            elif fm == 0:
                result = record(key, fn + 1)
                stack.pop()
            elif fn == 0:
                frame[2] = _AWAIT_BASE
                push(fm - 1, 1)
            else:
                frame[2] = _AWAIT_INNER
                push(fm, fn - 1)
        elif stage == _AWAIT_INNER:
            frame[2] = _AWAIT_OUTER
            push(fm - 1, result)
        else:
            # _AWAIT_BASE и _AWAIT_OUTER: результат дочернего кадра и есть A(m, n)
            result = record(key, result)
            stack.pop()

    return computed, order


class AckermannStructure:
    """
    Мемоизированная сетка значений функции Аккермана.

    Examples:
        >>> ack = AckermannStructure()
        >>> ack.add_node(2, 2).value
        7
        >>> _ = ack.build_range(2, 3)
        >>> ack.get_largest_value()
        9
    """

    def __init__(self, config: HypernumConfig | None = None):
        self.config = resolve_config(config)
        self._guard = OverflowGuard(self.config)
        self._nodes: dict[Key, AckermannNode] = {}
        self._largest: Optional[AckermannNode] = None
        self._lock = threading.RLock()

    def _commit(self, computed: dict[Key, AckermannNode], order: list[Key]) -> None:
        for key in order:
            node = computed[key]
            self._nodes[key] = node
            if self._largest is None or node.value > self._largest.value:
                self._largest = node

    def add_node(self, m: NumericInput, n: NumericInput) -> AckermannNode:
        """
        Узел A(m, n): из таблицы или вычисленный и мемоизированный
        вместе со всеми промежуточными значениями.

        Raises:
            ValidationError: m < 0 или n < 0
            ComputationLimitError: Бюджет кадров исчерпан (таблица не меняется)
        """
        key = (normalize_non_negative(m, "m"), normalize_non_negative(n, "n"))
        with self._lock:
            node = self._nodes.get(key)
            if node is not None:
                return node
            computed, order = _evaluate(
                key[0], key[1], self._nodes, self._guard, self.config.max_computation_steps
            )
            self._commit(computed, order)
            return self._nodes[key]

    def build_range(self, m_max: NumericInput, n_max: NumericInput) -> list[AckermannNode]:
        """
        Заполнение таблицы для всех m <= m_max, n <= n_max
        (m по возрастанию, затем n по возрастанию).

        При ошибке таблица откатывается к состоянию до вызова.

        Returns:
            Узлы диапазона в порядке заполнения
        """
        top_m = normalize_non_negative(m_max, "m_max")
        top_n = normalize_non_negative(n_max, "n_max")
        with self._lock:
            snapshot = dict(self._nodes)
            largest = self._largest
            built: list[AckermannNode] = []
            try:
                for m in range(top_m + 1):
                    for n in range(top_n + 1):
                        built.append(self.add_node(m, n))
            except HypernumError:
                self._nodes = snapshot
                self._largest = largest
                raise
            return built

    def get_computation_path(self, m: NumericInput, n: NumericInput) -> list[Key]:
        """
        Ключи (m', n'), вычисляемые при расчёте A(m, n) с нуля, в порядке
        завершения; последний элемент — (m, n). Таблица не меняется.

        Examples:
            >>> AckermannStructure().get_computation_path(1, 1)
            [(0, 1), (1, 0), (0, 2), (1, 1)]
        """
        key = (normalize_non_negative(m, "m"), normalize_non_negative(n, "n"))
        _, order = _evaluate(
            key[0], key[1], {}, self._guard, self.config.max_computation_steps
        )
        return order

    def analyze_growth_rate(self, m: NumericInput) -> list[GrowthRate]:
        """Рост по строке m для каждой мемоизированной пары (n-1, n)."""
        row = normalize_non_negative(m, "m")
        with self._lock:
            columns = sorted(n for (km, n) in self._nodes if km == row)
            rates = []
            for n in columns:
                previous = self._nodes.get((row, n - 1))
                if previous is None:
                    continue
                value = self._nodes[(row, n)].value
                rates.append(
                    GrowthRate(
                        n=n,
                        value=value,
                        previous=previous.value,
                        increase=value - previous.value,
                        ratio=Fraction(value, previous.value),
                    )
                )
            return rates

    def get_largest_value(self) -> Optional[int]:
        """Наибольшее мемоизированное значение (None для пустой таблицы), O(1)."""
        return None if self._largest is None else self._largest.value

    def get_node(self, m: int, n: int) -> Optional[AckermannNode]:
        return self._nodes.get((m, n))

    def neighbors(self, m: int, n: int) -> dict[str, Optional[AckermannNode]]:
        """Соседи узла (m, n), найденные в таблице; отсутствующие → None."""
        keys = AckermannNode(m, n, 0).neighbor_keys()
        return {
            name: (self._nodes.get(key) if key is not None else None)
            for name, key in keys.items()
        }

    def clear(self) -> None:
        with self._lock:
            self._nodes = {}
            self._largest = None

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, key: object) -> bool:
        return key in self._nodes

    def __iter__(self) -> Iterator[AckermannNode]:
        return iter(list(self._nodes.values()))
