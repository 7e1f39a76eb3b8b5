"""
Structures Module

Структуры данных поверх численного ядра:
- BigArray: массив с деревом отрезков (агрегаты по диапазону)
- NumberTree: упорядоченное двоичное дерево
- AckermannStructure: мемоизированная сетка функции Аккермана
"""

from .ackermann import AckermannNode, AckermannStructure, GrowthRate
from .big_array import AggregateKind, BigArray
from .number_tree import (
    BaseNumberTree,
    NumberTree,
    TraversalOrder,
    TreeNode,
    TreeTraversal,
)

__all__ = [
    # BigArray
    "BigArray",
    "AggregateKind",
    # NumberTree
    "BaseNumberTree",
    "NumberTree",
    "TreeNode",
    "TreeTraversal",
    "TraversalOrder",
    # Ackermann
    "AckermannStructure",
    "AckermannNode",
    "GrowthRate",
]
