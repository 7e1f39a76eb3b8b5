"""
Errors — иерархия исключений hypernum

Все ошибки ядра поднимаются синхронно в точке обнаружения и никогда не
оставляют изменяемую структуру (BigArray, NumberTree, AckermannStructure)
в частично обновлённом состоянии.

Иерархия:
    HypernumError (база)
    ├── ValidationError            (+ ValueError)
    │   ├── DivisionByZeroError    (+ ZeroDivisionError)
    │   └── ConfigurationError
    ├── NumericOverflowError       (+ OverflowError)
    └── ComputationLimitError      (+ RuntimeError)

Вызывающий код обычно трактует NumericOverflowError и ComputationLimitError
как восстановимые (повтор с ослабленными лимитами), а ValidationError —
как ошибку входных данных.
"""

from typing import Any, Dict, Optional


class HypernumError(Exception):
    """
    Базовое исключение hypernum.

    Поддерживает:
    - сообщение об ошибке
    - контекст (dict) для диагностики
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} | Context: {context_str}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


class ValidationError(HypernumError, ValueError):
    """
    Некорректный вход: формат числа, диапазон/индекс, отрицательный
    показатель или аргумент факториала, неверный режим округления.
    """


class DivisionByZeroError(ValidationError, ZeroDivisionError):
    """Делитель нормализуется в ноль."""


class ConfigurationError(ValidationError):
    """Источник конфигурации не прошёл валидацию."""


class NumericOverflowError(HypernumError, OverflowError):
    """
    Результат или промежуточное значение превышает настроенный лимит бит.

    Context:
        operation: имя операции
        limit_bits: лимит (max_bits)
        observed_bits: фактическая (или гарантированная нижняя) оценка бит
    """

    def __init__(
        self,
        operation: str,
        limit_bits: int,
        observed_bits: int,
        context: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
    ):
        super().__init__(
            message or f"{operation} exceeds bit limit: {observed_bits} > {limit_bits}",
            context={
                "operation": operation,
                "limit_bits": limit_bits,
                "observed_bits": observed_bits,
                **(context or {}),
            },
        )
        self.operation = operation
        self.limit_bits = limit_bits
        self.observed_bits = observed_bits


class ComputationLimitError(HypernumError, RuntimeError):
    """
    Исчерпан бюджет шагов (max_computation_steps) до сходимости или
    завершения вычисления.
    """

    def __init__(self, operation: str, max_steps: int):
        super().__init__(
            f"{operation} did not complete within {max_steps} steps",
            context={"operation": operation, "max_steps": max_steps},
        )
        self.operation = operation
        self.max_steps = max_steps
