"""
BigArray — растущий массив больших чисел с деревом отрезков

Дерево отрезков хранится плоским списком длины 2·capacity (итеративный
вариант, лист i лежит в позиции capacity + i). Агрегат: MAX, MIN или SUM.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. После успешной мутации каждый узел дерева равен агрегату своего отрезка
2. Точечное изменение обновляет ровно один путь лист → корень, O(log n)
3. Рост ёмкости пересобирает дерево за O(n) только при переполнении
4. Неудачный вызов не меняет наблюдаемое состояние
5. Мутации сериализуются блокировкой экземпляра
"""

import threading
from enum import Enum
from functools import cmp_to_key
from typing import Callable, Iterator, Optional

from hypernum.core.domain.config import HypernumConfig, resolve_config
from hypernum.core.errors import ValidationError
from hypernum.core.math.arithmetic import compare
from hypernum.core.math.normalizer import NumericInput, normalize
from hypernum.core.math.overflow_guard import OverflowGuard
from hypernum.logging_config import get_logger

logger = get_logger(__name__)

Comparator = Callable[[int, int], int]


class AggregateKind(str, Enum):
    """Агрегат дерева отрезков."""

    MAX = "MAX"
    MIN = "MIN"
    SUM = "SUM"


class BigArray:
    """
    Массив больших целых с запросами агрегата по диапазону за O(log n).

    Examples:
        >>> arr = BigArray()
        >>> for v in (5, 1, 9, 3):
        ...     arr.push(v)
        >>> arr.query_range(0, 2)
        9
        >>> arr.set(2, 0)
        >>> arr.query_range(0, 3)
        5
    """

    def __init__(
        self,
        config: HypernumConfig | None = None,
        *,
        initial_capacity: int = 16,
        growth_factor: float = 2.0,
        aggregate: AggregateKind = AggregateKind.MAX,
        comparator: Comparator = compare,
    ):
        if initial_capacity < 1:
            raise ValidationError(f"initial_capacity must be >= 1, got {initial_capacity}")
        if growth_factor <= 1.0:
            raise ValidationError(f"growth_factor must be > 1, got {growth_factor}")

        self.config = resolve_config(config)
        self.aggregate = AggregateKind(aggregate)
        self.comparator = comparator
        self._guard = OverflowGuard(self.config)
        self._initial_capacity = initial_capacity
        self._growth_factor = growth_factor
        self._lock = threading.RLock()

        self._data: list[int] = []
        self._capacity = initial_capacity
        self._tree: list[Optional[int]] = []
        self._rebuild()

    # -------------------------------------------------------------------------
    # Segment tree
    # -------------------------------------------------------------------------

    def _identity(self) -> Optional[int]:
        return 0 if self.aggregate is AggregateKind.SUM else None

    def _combine(self, a: Optional[int], b: Optional[int]) -> Optional[int]:
        if self.aggregate is AggregateKind.SUM:
            return a + b
        if a is None:
            return b
        if b is None:
            return a
        if self.aggregate is AggregateKind.MAX:
            return a if self.comparator(a, b) >= 0 else b
        return a if self.comparator(a, b) <= 0 else b

    def _rebuild(self) -> None:
        """Полная пересборка дерева, O(capacity)."""
        cap = self._capacity
        tree: list[Optional[int]] = [self._identity()] * (2 * cap)
        tree[cap : cap + len(self._data)] = self._data
        for i in range(cap - 1, 0, -1):
            tree[i] = self._combine(tree[2 * i], tree[2 * i + 1])
        self._tree = tree

    def _update_leaf(self, index: int, value: Optional[int]) -> None:
        i = index + self._capacity
        self._tree[i] = value
        i >>= 1
        while i >= 1:
            self._tree[i] = self._combine(self._tree[2 * i], self._tree[2 * i + 1])
            i >>= 1

    def _grow(self) -> None:
        new_capacity = max(self._capacity + 1, int(self._capacity * self._growth_factor))
        logger.debug("BigArray grow: capacity %d -> %d", self._capacity, new_capacity)
        self._capacity = new_capacity
        self._rebuild()

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _check_index(self, index: int) -> int:
        if not isinstance(index, int) or isinstance(index, bool):
            raise ValidationError(f"Index must be int, got {type(index).__name__}")
        if index < 0 or index >= len(self._data):
            raise ValidationError(
                f"Index {index} out of range", context={"size": len(self._data)}
            )
        return index

    def _value(self, value: NumericInput) -> int:
        return self._guard.check_result(normalize(value), "big_array")

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def push(self, value: NumericInput) -> None:
        """Добавление в конец (амортизированно O(log n))."""
        v = self._value(value)
        with self._lock:
            if len(self._data) == self._capacity:
                self._grow()
            self._data.append(v)
            self._update_leaf(len(self._data) - 1, v)

    def pop(self) -> int:
        """
        Удаление и возврат последнего элемента.

        Raises:
            ValidationError: Массив пуст
        """
        with self._lock:
            if not self._data:
                raise ValidationError("pop from empty BigArray")
            v = self._data.pop()
            self._update_leaf(len(self._data), self._identity())
            return v

    def set(self, index: int, value: NumericInput) -> None:
        """
        Замена элемента по индексу.

        Raises:
            ValidationError: Индекс вне [0, size)
        """
        v = self._value(value)
        with self._lock:
            self._check_index(index)
            self._data[index] = v
            self._update_leaf(index, v)

    def clear(self) -> None:
        """Очистка с возвратом к начальной ёмкости."""
        with self._lock:
            self._data = []
            self._capacity = self._initial_capacity
            self._rebuild()

    def reverse(self) -> None:
        with self._lock:
            self._data.reverse()
            self._rebuild()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, index: int) -> int:
        with self._lock:
            return self._data[self._check_index(index)]

    def query_range(self, lo: int, hi: int) -> int:
        """
        Агрегат по отрезку [lo, hi] включительно.

        Raises:
            ValidationError: lo > hi или граница вне [0, size)
            NumericOverflowError: Сумма (SUM) длиннее max_bits

        Examples:
            >>> arr = BigArray(aggregate=AggregateKind.SUM)
            >>> for v in (1, 2, 3):
            ...     arr.push(v)
            >>> arr.query_range(1, 2)
            5
        """
        with self._lock:
            if lo > hi:
                raise ValidationError(f"Invalid range: lo={lo} > hi={hi}")
            self._check_index(lo)
            self._check_index(hi)

            left_acc = right_acc = self._identity()
            left = lo + self._capacity
            right = hi + 1 + self._capacity
            while left < right:
                if left & 1:
                    left_acc = self._combine(left_acc, self._tree[left])
                    left += 1
                if right & 1:
                    right -= 1
                    right_acc = self._combine(self._tree[right], right_acc)
                left >>= 1
                right >>= 1
            result = self._combine(left_acc, right_acc)
            if self.aggregate is AggregateKind.SUM:
                return self._guard.check_result(result, "sum")
            return result

    def to_heap(self, is_min: bool = True) -> list[int]:
        """
        Копия элементов в порядке двоичной кучи (по comparator).

        Для min-кучи heap[i] <= heap[2i+1], heap[2i+2]; для max-кучи наоборот.
        """
        with self._lock:
            heap = list(self._data)

        sign = 1 if is_min else -1

        def before(a: int, b: int) -> bool:
            return sign * self.comparator(a, b) < 0

        n = len(heap)
        for start in range(n // 2 - 1, -1, -1):
            i = start
            while True:
                child = 2 * i + 1
                if child >= n:
                    break
                if child + 1 < n and before(heap[child + 1], heap[child]):
                    child += 1
                if not before(heap[child], heap[i]):
                    break
                heap[i], heap[child] = heap[child], heap[i]
                i = child
        return heap

    def to_sorted_sequence(self, ascending: bool = True) -> list[int]:
        with self._lock:
            snapshot = list(self._data)
        return sorted(snapshot, key=cmp_to_key(self.comparator), reverse=not ascending)

    # -------------------------------------------------------------------------
    # Size
    # -------------------------------------------------------------------------

    @property
    def size(self) -> int:
        return len(self._data)

    @property
    def capacity(self) -> int:
        return self._capacity

    def size_of(self) -> int:
        return self.size

    def capacity_of(self) -> int:
        return self.capacity

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[int]:
        with self._lock:
            snapshot = list(self._data)
        return iter(snapshot)

    def __repr__(self) -> str:
        return (
            f"BigArray(size={self.size}, capacity={self.capacity}, "
            f"aggregate={self.aggregate.value})"
        )
