"""
NumberTree — упорядоченное двоичное дерево больших чисел

Дерево НЕ балансируется: на упорядоченном входе высота растёт линейно и
операции деградируют до O(n). Вариант с балансировкой подключается через
BaseNumberTree.

Все обходы итеративные (явный стек), рекурсии нет.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. In-order обход даёт неубывающую последовательность
2. Дубликаты всегда уходят в правое поддерево
3. Неудачная операция не меняет дерево
"""

import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Iterator, Optional

from hypernum.core.errors import ValidationError
from hypernum.core.math.arithmetic import compare
from hypernum.core.math.normalizer import NumericInput, normalize

Comparator = Callable[[int, int], int]


class TraversalOrder(str, Enum):
    IN_ORDER = "IN_ORDER"
    PRE_ORDER = "PRE_ORDER"
    POST_ORDER = "POST_ORDER"


class TreeNode:
    """Узел дерева; принадлежит ровно одному родителю."""

    __slots__ = ("value", "left", "right")

    def __init__(self, value: int):
        self.value = value
        self.left: Optional["TreeNode"] = None
        self.right: Optional["TreeNode"] = None


# =============================================================================
# TRAVERSALS
# =============================================================================


def _in_order(root: Optional[TreeNode]) -> Iterator[int]:
    stack: list[TreeNode] = []
    node = root
    while stack or node is not None:
        while node is not None:
            stack.append(node)
            node = node.left
        node = stack.pop()
        yield node.value
        node = node.right


def _pre_order(root: Optional[TreeNode]) -> Iterator[int]:
    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        yield node.value
        if node.right is not None:
            stack.append(node.right)
        if node.left is not None:
            stack.append(node.left)


def _post_order(root: Optional[TreeNode]) -> Iterator[int]:
    # Обратный порядок (узел, правое, левое), развёрнутый в конце
    if root is None:
        return
    stack = [root]
    output: list[int] = []
    while stack:
        node = stack.pop()
        output.append(node.value)
        if node.left is not None:
            stack.append(node.left)
        if node.right is not None:
            stack.append(node.right)
    yield from reversed(output)


_WALKERS = {
    TraversalOrder.IN_ORDER: _in_order,
    TraversalOrder.PRE_ORDER: _pre_order,
    TraversalOrder.POST_ORDER: _post_order,
}


class TreeTraversal:
    """
    Ленивый перезапускаемый обход: каждый iter() начинает заново
    с текущего корня дерева.
    """

    def __init__(self, tree: "NumberTree", order: TraversalOrder):
        self._tree = tree
        self.order = order

    def __iter__(self) -> Iterator[int]:
        return _WALKERS[self.order](self._tree._root)

    def to_list(self) -> list[int]:
        return list(self)


# =============================================================================
# TREE
# =============================================================================


class BaseNumberTree(ABC):
    """Контракт упорядоченного дерева чисел."""

    @abstractmethod
    def insert(self, value: NumericInput) -> None: ...

    @abstractmethod
    def remove(self, value: NumericInput) -> bool: ...

    @abstractmethod
    def contains(self, value: NumericInput) -> bool: ...

    @abstractmethod
    def in_order(self) -> TreeTraversal: ...

    @abstractmethod
    def pre_order(self) -> TreeTraversal: ...

    @abstractmethod
    def post_order(self) -> TreeTraversal: ...

    @property
    @abstractmethod
    def size(self) -> int: ...

    def __len__(self) -> int:
        return self.size

    def __contains__(self, value: object) -> bool:
        return self.contains(value)  # type: ignore[arg-type]


class NumberTree(BaseNumberTree):
    """
    Несбалансированное BST.

    Examples:
        >>> tree = NumberTree()
        >>> for v in (5, 3, 8, 3):
        ...     tree.insert(v)
        >>> list(tree.in_order())
        [3, 3, 5, 8]
        >>> tree.remove(3)
        True
        >>> 3 in tree
        True
    """

    def __init__(self, comparator: Comparator = compare):
        self.comparator = comparator
        self._root: Optional[TreeNode] = None
        self._size = 0
        self._lock = threading.RLock()

    def insert(self, value: NumericInput) -> None:
        v = normalize(value)
        with self._lock:
            node = TreeNode(v)
            if self._root is None:
                self._root = node
            else:
                current = self._root
                while True:
                    if self.comparator(v, current.value) < 0:
                        if current.left is None:
                            current.left = node
                            break
                        current = current.left
                    else:
                        if current.right is None:
                            current.right = node
                            break
                        current = current.right
            self._size += 1

    def _find(self, v: int) -> tuple[Optional[TreeNode], Optional[TreeNode]]:
        """(узел, родитель) первого совпадения по пути от корня."""
        parent = None
        current = self._root
        while current is not None:
            cmp = self.comparator(v, current.value)
            if cmp == 0:
                return current, parent
            parent = current
            current = current.left if cmp < 0 else current.right
        return None, parent

    def contains(self, value: NumericInput) -> bool:
        v = normalize(value)
        with self._lock:
            return self._find(v)[0] is not None

    def remove(self, value: NumericInput) -> bool:
        """
        Удаление одного вхождения.

        Returns:
            True если значение найдено и удалено
        """
        v = normalize(value)
        with self._lock:
            node, parent = self._find(v)
            if node is None:
                return False

            if node.left is not None and node.right is not None:
                # Два потомка: значение преемника переносится в узел,
                # удаляется сам преемник (у него нет левого потомка)
                successor_parent = node
                successor = node.right
                while successor.left is not None:
                    successor_parent = successor
                    successor = successor.left
                node.value = successor.value
                node, parent = successor, successor_parent

            child = node.left if node.left is not None else node.right
            if parent is None:
                self._root = child
            elif parent.left is node:
                parent.left = child
            else:
                parent.right = child
            self._size -= 1
            return True

    def in_order(self) -> TreeTraversal:
        return TreeTraversal(self, TraversalOrder.IN_ORDER)

    def pre_order(self) -> TreeTraversal:
        return TreeTraversal(self, TraversalOrder.PRE_ORDER)

    def post_order(self) -> TreeTraversal:
        return TreeTraversal(self, TraversalOrder.POST_ORDER)

    @property
    def size(self) -> int:
        return self._size

    def minimum(self) -> int:
        """
        Raises:
            ValidationError: Дерево пустое
        """
        with self._lock:
            if self._root is None:
                raise ValidationError("minimum() of empty NumberTree")
            node = self._root
            while node.left is not None:
                node = node.left
            return node.value

    def maximum(self) -> int:
        """
        Raises:
            ValidationError: Дерево пустое
        """
        with self._lock:
            if self._root is None:
                raise ValidationError("maximum() of empty NumberTree")
            node = self._root
            while node.right is not None:
                node = node.right
            return node.value

    def height(self) -> int:
        """Высота по уровням (0 для пустого дерева)."""
        with self._lock:
            if self._root is None:
                return 0
            best = 0
            stack = [(self._root, 1)]
            while stack:
                node, depth = stack.pop()
                best = max(best, depth)
                if node.left is not None:
                    stack.append((node.left, depth + 1))
                if node.right is not None:
                    stack.append((node.right, depth + 1))
            return best

    def clear(self) -> None:
        with self._lock:
            self._root = None
            self._size = 0

    def __iter__(self) -> Iterator[int]:
        return iter(self.in_order())

    def __repr__(self) -> str:
        return f"NumberTree(size={self._size})"
